"""
Query Execution Engine

DESIGN DECISION: Query execution is a pure read.
It takes the record collection and settings as they are right now,
applies the user's search and sort preferences, and returns a derived
snapshot. It never mutates the stores.

Pipeline: filter -> sort, always in that order. Then every monetary
value is converted to the display currency and formatted, so the
presentation layer never does money arithmetic.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import structlog

from ledger.config import get_settings
from ledger.models.preferences import LedgerSettings
from ledger.models.query import (
    CapStatus,
    QueryResult,
    RecordQuery,
    RecordRow,
    SummaryStats,
    TrendPoint,
)
from ledger.models.record import Record
from ledger.queries.search import compile_pattern, highlight_spans, matches
from ledger.queries.sorting import sort_records
from ledger.store.record_store import RecordStore
from ledger.store.settings_store import SettingsStore, convert_amount, format_currency


logger = structlog.get_logger(__name__)


def cap_status(
    cap: float,
    total: float,
    settings: LedgerSettings,
    locale: Optional[str] = None,
) -> CapStatus:
    """
    Compare a base-currency total against the cap.

    Spending exactly at the cap counts as "0 remaining", not over.
    """
    if cap <= 0:
        return CapStatus(
            configured=False,
            status_text="No cap set",
            announcement="No cap configured.",
        )

    remaining = cap - total
    if remaining >= 0:
        shown = format_currency(remaining, settings, locale)
        return CapStatus(
            configured=True,
            remaining=remaining,
            status_text=f"{shown} remaining",
            announcement=f"You are under cap by {shown}.",
        )

    over = abs(remaining)
    shown = format_currency(over, settings, locale)
    return CapStatus(
        configured=True,
        exceeded_by=over,
        alerting=True,
        status_text=f"{shown} over cap",
        announcement=f"Warning. Cap exceeded by {shown}.",
    )


def top_category(records: list[Record]) -> Optional[str]:
    """Category with the largest summed amount; the first one reached wins ties."""
    totals: dict[str, float] = {}
    for record in records:
        totals[record.category] = totals.get(record.category, 0.0) + record.amount
    if not totals:
        return None
    return max(totals, key=totals.get)


class QueryExecutor:
    """
    Runs searches, summaries and trends over the stores.

    GUARANTEES:
    - Only returns records that exist in the store
    - An invalid pattern yields every record plus an error, never nothing
    - Summaries ignore the active search and cover the whole store
    """

    def __init__(
        self,
        record_store: RecordStore,
        settings_store: SettingsStore,
        locale: Optional[str] = None,
    ):
        self._records = record_store
        self._settings = settings_store
        self._locale = locale or get_settings().app.locale

    def execute(self, query: RecordQuery) -> QueryResult:
        """Filter, sort and format the records for a query."""
        pattern = compile_pattern(query.pattern, query.case_insensitive)
        if pattern.has_error:
            logger.info("pattern_ignored", pattern=query.pattern, error=pattern.error)

        filtered = [r for r in self._records.records if matches(r, pattern)]
        ordered = sort_records(filtered, query.sort_by)

        settings = self._settings.current
        rows = [
            RecordRow(
                record=record,
                display_amount=format_currency(record.amount, settings, self._locale),
                description_spans=list(highlight_spans(record.description, pattern)),
                category_spans=list(highlight_spans(record.category, pattern)),
            )
            for record in ordered
        ]
        return QueryResult(rows=rows, pattern=pattern)

    def summarize(self) -> SummaryStats:
        """Count, total, top category and cap status over every record."""
        records = list(self._records.records)
        settings = self._settings.current
        total = sum(record.amount for record in records)

        return SummaryStats(
            record_count=len(records),
            total_amount=convert_amount(total, settings),
            total_display=format_currency(total, settings, self._locale),
            top_category=top_category(records),
            cap=cap_status(settings.cap, total, settings, self._locale),
        )

    def trend(
        self,
        today: Optional[date] = None,
        days: Optional[int] = None,
    ) -> list[TrendPoint]:
        """
        Converted totals for each of the last `days` calendar days.

        The window ends on `today` (UTC by default) and is returned oldest
        first. Days without records have a total of 0.
        """
        today = today or datetime.now(timezone.utc).date()
        days = days or get_settings().app.trend_days
        settings = self._settings.current

        window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
        totals = {day.isoformat(): 0.0 for day in window}
        for record in self._records.records:
            if record.date in totals:
                totals[record.date] += convert_amount(record.amount, settings)

        return [
            TrendPoint(day=day.isoformat(), label=day.strftime("%a"), total=totals[day.isoformat()])
            for day in window
        ]
