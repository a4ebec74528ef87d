"""
Event Models for the Ledger

Every mutation and every recovered failure is described by a LedgerEvent
and written to the structured log. This provides:
1. Debugging information when things go wrong
2. A visible trace of write-through failures (memory may be ahead of disk)

DESIGN DECISION: Events are logged, never stored. There is no history
to browse and nothing to undo.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events we log."""
    # Records
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    RECORD_NOT_FOUND = "record_not_found"
    RECORD_REJECTED = "record_rejected"

    # Import / export
    RECORDS_IMPORTED = "records_imported"
    IMPORT_REJECTED = "import_rejected"
    RECORDS_EXPORTED = "records_exported"

    # Settings
    SETTINGS_UPDATED = "settings_updated"
    SETTINGS_REJECTED = "settings_rejected"

    # Query
    PATTERN_REJECTED = "pattern_rejected"

    # Persistence
    PERSISTENCE_FAILED = "persistence_failed"


class EventSeverity(str, Enum):
    """Severity level for events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single loggable event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType
    severity: EventSeverity = EventSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'record', 'settings', 'query')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = LedgerEventBuilder.record_created(record_id, amount)
        event = LedgerEventBuilder.persistence_failed(key, reason)
    """

    @staticmethod
    def record_created(record_id: str, category: str, amount: float) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORD_CREATED,
            entity_type="record",
            entity_id=record_id,
            description=f"Record created: {record_id}",
            details={"category": category, "amount": amount},
        )

    @staticmethod
    def record_updated(record_id: str, fields: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORD_UPDATED,
            entity_type="record",
            entity_id=record_id,
            description=f"Record updated: {record_id}",
            details={"fields": fields},
        )

    @staticmethod
    def record_deleted(record_id: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORD_DELETED,
            entity_type="record",
            entity_id=record_id,
            description=f"Record deleted: {record_id}",
        )

    @staticmethod
    def record_not_found(record_id: str, action: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORD_NOT_FOUND,
            severity=EventSeverity.WARNING,
            entity_type="record",
            entity_id=record_id,
            description=f"Cannot {action} missing record: {record_id}",
            details={"action": action},
        )

    @staticmethod
    def record_rejected(errors: dict[str, str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORD_REJECTED,
            severity=EventSeverity.INFO,
            entity_type="record",
            description=f"Record form rejected with {len(errors)} field errors",
            details={"errors": errors},
        )

    @staticmethod
    def records_imported(count: int, replaced: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORDS_IMPORTED,
            entity_type="record",
            description=f"Imported {count} records",
            details={"imported": count, "replaced": replaced},
        )

    @staticmethod
    def import_rejected(reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.IMPORT_REJECTED,
            severity=EventSeverity.WARNING,
            entity_type="record",
            description="Import rejected",
            error_message=reason,
        )

    @staticmethod
    def records_exported(count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECORDS_EXPORTED,
            entity_type="record",
            description=f"Exported {count} records",
            details={"exported": count},
        )

    @staticmethod
    def settings_updated(fields: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SETTINGS_UPDATED,
            entity_type="settings",
            description="Settings updated",
            details={"fields": fields},
        )

    @staticmethod
    def settings_rejected(errors: dict[str, str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SETTINGS_REJECTED,
            entity_type="settings",
            description=f"Settings form rejected with {len(errors)} errors",
            details={"errors": errors},
        )

    @staticmethod
    def pattern_rejected(pattern: str, reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PATTERN_REJECTED,
            severity=EventSeverity.WARNING,
            entity_type="query",
            description="Search pattern is not a valid regular expression",
            details={"pattern": pattern},
            error_message=reason,
        )

    @staticmethod
    def persistence_failed(key: str, reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PERSISTENCE_FAILED,
            severity=EventSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Write-through save failed for {key}; memory is ahead of storage",
            error_message=reason,
        )
