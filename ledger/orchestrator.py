"""
Main Orchestrator for the Ledger

This module ties together all the components and defines the
end-to-end flows a front end drives:
1. Record form (raw text -> validate -> create or update -> save)
2. Settings form (raw text -> validate -> merge -> save)
3. Import / export (JSON text <-> whole store)
4. View (search + sort -> rows, summary, trend)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches a store without passing field validation or the import gate
- Every mutation is logged as an event
- Persistence failures are logged and re-raised, never swallowed

This is the "glue" a UI calls; rendering stays outside.
"""

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, Field

from ledger.audit import EventLogger, configure_logging
from ledger.config import get_settings
from ledger.exceptions import ImportShapeError, PersistenceWriteError
from ledger.models.preferences import LedgerSettings, SettingsForm, SettingsUpdate
from ledger.models.query import QueryResult, RecordQuery, SummaryStats, TrendPoint
from ledger.models.record import (
    Record,
    RecordForm,
    RecordInputValidation,
    RecordUpdate,
)
from ledger.queries import QueryExecutor
from ledger.services.storage import (
    JsonFileStore,
    KeyValueStore,
    LedgerPersistence,
)
from ledger.store import RecordStore, SettingsStore
from ledger.transfer import import_records, parse_import_payload, prepare_export
from ledger.validation import (
    validate_amount,
    validate_category,
    validate_currency_code,
    validate_record_input,
)


logger = structlog.get_logger(__name__)


class SubmissionResult(BaseModel):
    """Outcome of submitting the record form."""

    success: bool
    message: str
    record: Optional[Record] = None
    errors: dict[str, str] = Field(
        default_factory=dict,
        description="Field name -> reason, for fields to re-prompt"
    )


class SettingsSaveResult(BaseModel):
    """Outcome of submitting the settings form."""

    success: bool
    message: str
    settings: Optional[LedgerSettings] = None
    errors: dict[str, str] = Field(default_factory=dict)


@dataclass(frozen=True)
class LedgerView:
    """Everything a screen shows at once."""

    result: QueryResult
    summary: SummaryStats
    trend: list[TrendPoint]


class LedgerSession:
    """
    One user's ledger for the lifetime of the application.

    Holds the stores and the current search/sort preferences. Single
    threaded: callers must not use one session concurrently.
    """

    def __init__(
        self,
        record_store: RecordStore,
        settings_store: SettingsStore,
        executor: Optional[QueryExecutor] = None,
        event_logger: Optional[EventLogger] = None,
        query: Optional[RecordQuery] = None,
    ):
        self._records = record_store
        self._settings = settings_store
        self._executor = executor or QueryExecutor(record_store, settings_store)
        self._events = event_logger or EventLogger()
        self._query = query or RecordQuery(sort_by=get_settings().app.default_sort)

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def records(self) -> tuple[Record, ...]:
        return self._records.records

    @property
    def settings(self) -> LedgerSettings:
        return self._settings.current

    @property
    def query(self) -> RecordQuery:
        return self._query

    def set_search_pattern(self, pattern: str) -> None:
        self._query = self._query.model_copy(update={"pattern": pattern})

    def set_case_insensitive(self, value: bool) -> None:
        self._query = self._query.model_copy(update={"case_insensitive": value})

    def set_sort_by(self, sort_by: str) -> None:
        self._query = self._query.model_copy(update={"sort_by": sort_by})

    # -------------------------------------------------------------------------
    # Record flows
    # -------------------------------------------------------------------------

    def validate_form(self, form: RecordForm) -> RecordInputValidation:
        return validate_record_input(form.model_dump())

    def submit_record(self, form: RecordForm) -> SubmissionResult:
        """
        Validate the record form and create or update a record.

        Raises:
            PersistenceWriteError: If the change could not be saved
                                   (it is still applied in memory)
        """
        validation = self.validate_form(form)
        if not validation.is_valid:
            self._events.log_record_rejected(validation.errors)
            return SubmissionResult(
                success=False,
                message="Fix validation errors before saving.",
                errors=validation.errors,
            )

        if form.id:
            changes = RecordUpdate(**validation.cleaned)
            record = self._guarded(lambda: self._records.update(form.id, changes))
            if record is None:
                self._events.log_record_not_found(form.id, "update")
                return SubmissionResult(success=False, message="Transaction not found.")
            self._events.log_record_updated(record.id, sorted(changes.changes()))
            return SubmissionResult(success=True, message="Transaction updated.", record=record)

        draft = validation.to_draft()
        record = self._guarded(lambda: self._records.create(draft))
        self._events.log_record_created(record.id, record.category, record.amount)
        return SubmissionResult(success=True, message="Transaction added.", record=record)

    def delete_record(self, record_id: str) -> bool:
        """
        Delete a record by id.

        Returns:
            False if no record had this id
        """
        deleted = self._guarded(lambda: self._records.delete(record_id))
        if deleted:
            self._events.log_record_deleted(record_id)
        else:
            self._events.log_record_not_found(record_id, "delete")
        return deleted

    # -------------------------------------------------------------------------
    # Settings flow
    # -------------------------------------------------------------------------

    def save_settings_form(self, form: SettingsForm) -> SettingsSaveResult:
        """
        Validate the settings form and merge it into the current settings.

        Cap and rates use the amount grammar; an empty cap means 0 and an
        empty rate means 1. Rate codes must be 3-letter currency codes and
        rates must be greater than zero. Category entries that are not
        valid categories are dropped; if none remain the current list is
        kept.
        """
        errors: dict[str, str] = {}

        cap = validate_amount(form.cap or "0")
        if not cap.valid:
            errors["cap"] = "Cap must be a valid number."

        rates: dict[str, float] = {}
        for code_text, rate_text in form.rates.items():
            code = validate_currency_code(code_text)
            if not code.valid:
                errors[f"rates.{code_text}"] = code.message
                continue
            rate = validate_amount(rate_text or "1")
            if not rate.valid or rate.value <= 0:
                errors[f"rates.{code.value}"] = "Currency rates must be valid numbers greater than zero."
                continue
            rates[code.value] = rate.value

        if errors:
            self._events.log_settings_rejected(errors)
            return SettingsSaveResult(
                success=False,
                message="Fix settings errors before saving.",
                errors=errors,
            )

        categories = []
        for entry in form.categories.split(","):
            checked = validate_category(entry)
            if checked.valid:
                categories.append(checked.value)

        update = SettingsUpdate(
            base_currency=form.base_currency.strip() or None,
            display_currency=form.display_currency.strip() or None,
            rates=rates or None,
            cap=cap.value,
            categories=categories or None,
        )
        settings = self._guarded(lambda: self._settings.update(update))
        self._events.log_settings_updated(sorted(update.model_dump(exclude_none=True)))
        return SettingsSaveResult(success=True, message="Settings saved.", settings=settings)

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def import_json(self, text: str) -> int:
        """
        Replace every record with the records in an import payload.

        Returns:
            The number of imported records

        Raises:
            ImportShapeError: If the payload is rejected (nothing changes)
            PersistenceWriteError: If the new collection could not be saved
        """
        replaced = len(self._records)
        try:
            raw = parse_import_payload(text)
            count = self._guarded(lambda: import_records(self._records, raw))
        except ImportShapeError as e:
            self._events.log_import_rejected(str(e))
            raise
        self._events.log_records_imported(count, replaced)
        return count

    def export_json(self) -> str:
        """The full, unfiltered store as pretty-printed JSON."""
        records = self._records.records
        self._events.log_records_exported(len(records))
        return prepare_export(records)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def search(self) -> QueryResult:
        """Run the current search and sort preferences."""
        result = self._executor.execute(self._query)
        if result.pattern_error:
            self._events.log_pattern_rejected(self._query.pattern, result.pattern_error)
        return result

    def view(self, today: Optional[date] = None) -> LedgerView:
        return LedgerView(
            result=self.search(),
            summary=self._executor.summarize(),
            trend=self._executor.trend(today=today),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _guarded(self, action: Callable):
        """Run a mutation; log and re-raise a failed write-through save."""
        try:
            return action()
        except PersistenceWriteError as e:
            self._events.log_persistence_failed(e.key, e.reason)
            raise


def create_app_components(
    storage: Optional[KeyValueStore] = None,
    data_dir: Optional[Path] = None,
    clock: Optional[Callable[[], datetime]] = None,
    configure_logs: bool = True,
) -> LedgerSession:
    """
    Factory function to create a ready-to-use session.

    Args:
        storage: Key-value backend. Defaults to JSON files in data_dir.
        data_dir: Directory for JSON files (defaults to LEDGER_DATA_DIR).
        clock: Source of "now" for record timestamps (tests pin this).
        configure_logs: Whether to configure structlog.

    Returns:
        An initialized LedgerSession. If the initial save fails the
        session still starts, with the loaded data in memory.
    """
    if configure_logs:
        configure_logging()

    storage = storage or JsonFileStore(data_dir=data_dir)
    persistence = LedgerPersistence(storage)

    record_store = RecordStore(persistence, clock=clock)
    settings_store = SettingsStore(persistence)

    for name, initialize in (
        ("settings", settings_store.initialize),
        ("records", record_store.initialize),
    ):
        try:
            initialize()
        except PersistenceWriteError as e:
            # Storage not writable - continue with what was loaded
            logger.warning("initial_save_failed", slot=name, error=str(e))

    return LedgerSession(
        record_store=record_store,
        settings_store=settings_store,
        event_logger=EventLogger(),
    )
