"""
Record Sorting

Every ordering is stable: records with equal keys keep their input
order, in both directions. Sorting never changes which records are in
the result, and the input sequence is never mutated.
"""

import unicodedata
from collections.abc import Callable, Iterable
from typing import Any, Union

from ledger.models.query import SortKey
from ledger.models.record import Record


def collation_key(text: str) -> str:
    """
    Case- and diacritic-insensitive comparison key.

    'Éclair', 'eclair' and 'ECLAIR' all compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


SORT_FIELDS: dict[str, Callable[[Record], Any]] = {
    "date": lambda record: record.date,
    "description": lambda record: collation_key(record.description),
    "amount": lambda record: record.amount,
}


def sort_records(
    records: Iterable[Record],
    sort_by: Union[SortKey, str],
) -> list[Record]:
    """
    Return records ordered by a SortKey.

    Dates compare as YYYY-MM-DD strings, which sorts chronologically.
    Unknown keys return the records in input order.
    """
    ordered = list(records)
    try:
        key = SortKey(sort_by)
    except ValueError:
        return ordered

    field, _, direction = key.value.rpartition("_")
    return sorted(ordered, key=SORT_FIELDS[field], reverse=direction == "desc")
