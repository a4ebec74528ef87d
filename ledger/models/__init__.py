"""
Data Models Package

This package contains all Pydantic models used by the ledger.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.record import (
    FORM_FIELDS,
    RECORD_FIELDS,
    FieldResult,
    Record,
    RecordDraft,
    RecordForm,
    RecordInputValidation,
    RecordUpdate,
    utc_timestamp,
)
from ledger.models.preferences import (
    DEFAULT_CATEGORIES,
    DEFAULT_RATES,
    LedgerSettings,
    SettingsForm,
    SettingsUpdate,
    merge_rates,
)
from ledger.models.query import (
    CapStatus,
    CompiledPattern,
    PatternKind,
    QueryResult,
    RecordQuery,
    RecordRow,
    SortKey,
    SummaryStats,
    TrendPoint,
)
from ledger.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Record models
    "FORM_FIELDS",
    "RECORD_FIELDS",
    "FieldResult",
    "Record",
    "RecordDraft",
    "RecordForm",
    "RecordInputValidation",
    "RecordUpdate",
    "utc_timestamp",
    # Settings models
    "DEFAULT_CATEGORIES",
    "DEFAULT_RATES",
    "LedgerSettings",
    "SettingsForm",
    "SettingsUpdate",
    "merge_rates",
    # Query models
    "CapStatus",
    "CompiledPattern",
    "PatternKind",
    "QueryResult",
    "RecordQuery",
    "RecordRow",
    "SortKey",
    "SummaryStats",
    "TrendPoint",
    # Event models
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
