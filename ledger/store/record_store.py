"""
Record Store

The authoritative in-memory collection of ledger records.

GUARANTEES:
- Ids are unique at all times; gaps after deletes are fine
- createdAt never changes; updatedAt is refreshed on every update
- Records handed out are frozen, so nobody mutates the collection behind
  the store's back

WRITE-THROUGH: every mutation changes memory first and then saves the
whole collection before returning. A failed save raises
PersistenceWriteError and the in-memory change stays in place.
"""

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from ledger.config import get_settings
from ledger.models.record import Record, RecordDraft, RecordUpdate, utc_timestamp
from ledger.services.storage.persistence import LedgerPersistence
from ledger.validation import validate_record_shape


logger = structlog.get_logger(__name__)

NON_DIGITS_RE = re.compile(r"\D+")


def identifier_for(
    records: Iterable[Any],
    prefix: str = "txn_",
    width: int = 4,
) -> str:
    """
    Next free id: one past the largest numeric id suffix in use.

    Accepts Records, raw record mappings or bare ids. Non-digit characters
    are stripped from every id before parsing. Ids with no digits are
    ignored; with no parsable ids the sequence starts at 1.
    """
    highest = 0
    for record in records:
        if isinstance(record, Record):
            record_id = record.id
        elif isinstance(record, Mapping):
            record_id = record.get("id", "")
        else:
            record_id = record
        digits = NON_DIGITS_RE.sub("", str(record_id))
        if digits:
            highest = max(highest, int(digits))
    return f"{prefix}{str(highest + 1).zfill(width)}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore:
    """
    CRUD over the record collection with write-through persistence.

    Single-writer: there is no lock, so only one caller may use a store
    at a time.
    """

    def __init__(
        self,
        persistence: LedgerPersistence,
        id_prefix: Optional[str] = None,
        id_width: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        app_settings = get_settings().app
        self._persistence = persistence
        self._id_prefix = app_settings.id_prefix if id_prefix is None else id_prefix
        self._id_width = id_width or app_settings.id_min_digits
        self._clock = clock or _now
        self._records: list[Record] = []

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def records(self) -> tuple[Record, ...]:
        """Snapshot of the collection in store order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> Optional[Record]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def next_id(self) -> str:
        return identifier_for(self._records, self._id_prefix, self._id_width)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self) -> int:
        """
        Load stored records, keep the valid ones and save the cleaned array.

        Elements that fail the shape gate, fail model validation or repeat
        an id already seen are dropped. Returns the number kept.

        Raises:
            PersistenceWriteError: If the cleaned collection cannot be saved
                                   (the loaded records are kept in memory)
        """
        loaded = self._persistence.load_records()
        kept: list[Record] = []
        seen: set[str] = set()

        for raw in loaded:
            if not validate_record_shape(raw):
                continue
            try:
                record = Record.model_validate(raw)
            except ValidationError:
                continue
            if record.id in seen:
                continue
            seen.add(record.id)
            kept.append(record)

        dropped = len(loaded) - len(kept)
        if dropped:
            logger.warning("stored_records_dropped", dropped=dropped, kept=len(kept))

        self._records = kept
        self._persist()
        return len(kept)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, draft: RecordDraft) -> Record:
        """
        Append a new record built from validated fields.

        The store assigns the id and both timestamps.
        """
        stamp = utc_timestamp(self._clock())
        record = Record(
            id=self.next_id(),
            description=draft.description,
            amount=draft.amount,
            category=draft.category,
            date=draft.date,
            created_at=stamp,
            updated_at=stamp,
        )
        self._records.append(record)
        self._persist()
        return record

    def update(self, record_id: str, changes: RecordUpdate) -> Optional[Record]:
        """
        Merge changes into an existing record and refresh updatedAt.

        Returns:
            The updated record, or None if no record has this id
            (nothing is saved in that case)
        """
        for index, current in enumerate(self._records):
            if current.id == record_id:
                break
        else:
            return None

        fields = changes.changes()
        fields["updated_at"] = utc_timestamp(self._clock())
        updated = current.model_copy(update=fields)
        self._records[index] = updated
        self._persist()
        return updated

    def delete(self, record_id: str) -> bool:
        """
        Remove a record.

        Returns:
            True if a record was removed; storage is only written then
        """
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        if len(self._records) == before:
            return False
        self._persist()
        return True

    def replace_all(self, records: Sequence[Record]) -> None:
        """
        Replace the whole collection and save it.

        No validation happens here; callers pass data that went through
        the import gate.
        """
        self._records = list(records)
        self._persist()

    def _persist(self) -> None:
        self._persistence.save_records(self._records)
