"""
Import / Export Gate

Imports replace the whole store, so they are validated as a whole:
a single bad element rejects the batch and the store is left exactly
as it was. Exports are the full store in store order, independent of
whatever search or sort is active.
"""

import json
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from ledger.exceptions import ImportShapeError
from ledger.models.record import Record
from ledger.store.record_store import RecordStore
from ledger.validation import validate_record_shape


def parse_import_payload(text: str) -> Any:
    """
    Decode import text.

    Raises:
        ImportShapeError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportShapeError(f"Import is not valid JSON: {e.msg}")


def prepare_import(raw: Any) -> list[Record]:
    """
    Validate an import batch, all or nothing.

    Raises:
        ImportShapeError: If raw is not a list, any element fails the
                          shape gate, or two elements share an id
    """
    if not isinstance(raw, list):
        raise ImportShapeError("JSON must be an array.")

    invalid = [index for index, item in enumerate(raw) if not validate_record_shape(item)]
    if invalid:
        raise ImportShapeError(
            f"One or more records are invalid (positions: {', '.join(map(str, invalid[:10]))})."
        )

    records = []
    for index, item in enumerate(raw):
        try:
            records.append(Record.model_validate(item))
        except ValidationError as e:
            raise ImportShapeError(f"Record at position {index} is invalid: {e.error_count()} errors.")

    ids = [record.id for record in records]
    if len(set(ids)) != len(ids):
        raise ImportShapeError("Record ids must be unique.")

    return records


def import_records(store: RecordStore, raw: Any) -> int:
    """
    Validate a batch and replace the store with it.

    Returns:
        The number of imported records

    Raises:
        ImportShapeError: If the batch is rejected (store untouched)
        PersistenceWriteError: If the new collection cannot be saved
    """
    records = prepare_import(raw)
    store.replace_all(records)
    return len(records)


def prepare_export(records: Sequence[Record]) -> str:
    """The full collection as pretty-printed JSON, in store order."""
    return json.dumps(
        [record.to_payload() for record in records],
        indent=2,
        ensure_ascii=False,
    )
