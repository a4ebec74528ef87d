"""
Event Logger

DESIGN DECISION: Every mutation and every recovered failure is logged as
a structured event. This provides:
1. Traceability of what changed and when
2. Debugging capability for rejected forms and imports
3. A loud record of write-through failures, where memory is ahead of disk

The event logger:
- Never raises (a broken log handler must not break a save)
- Only logs; nothing is persisted, nothing can be replayed
"""

import logging
import sys
from typing import Optional

import structlog

from ledger.config import get_settings
from ledger.models.events import EventSeverity, LedgerEvent, LedgerEventBuilder


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog on top of stdlib logging.

    Defaults come from AppSettings (LEDGER_LOG_LEVEL, LEDGER_LOG_JSON).
    """
    app_settings = get_settings().app
    level = (level or app_settings.log_level).upper()
    json_logs = app_settings.log_json if json_logs is None else json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class EventLogger:
    """
    Central event logging service.

    Logs events to the structured local log at a level derived from the
    event severity.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("ledger.events")

    def log(self, event: LedgerEvent) -> bool:
        """
        Log an event.

        Returns True if the event was handed to the logger.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == EventSeverity.ERROR:
                self._logger.error("ledger_event", **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning("ledger_event", **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug("ledger_event", **log_dict)
            else:
                self._logger.info("ledger_event", **log_dict)
        except Exception:
            # A failing handler must not turn a successful save into an error
            return False
        return True

    def log_record_created(self, record_id: str, category: str, amount: float) -> None:
        self.log(LedgerEventBuilder.record_created(record_id, category, amount))

    def log_record_updated(self, record_id: str, fields: list[str]) -> None:
        self.log(LedgerEventBuilder.record_updated(record_id, fields))

    def log_record_deleted(self, record_id: str) -> None:
        self.log(LedgerEventBuilder.record_deleted(record_id))

    def log_record_not_found(self, record_id: str, action: str) -> None:
        self.log(LedgerEventBuilder.record_not_found(record_id, action))

    def log_record_rejected(self, errors: dict[str, str]) -> None:
        self.log(LedgerEventBuilder.record_rejected(errors))

    def log_records_imported(self, count: int, replaced: int) -> None:
        self.log(LedgerEventBuilder.records_imported(count, replaced))

    def log_import_rejected(self, reason: str) -> None:
        self.log(LedgerEventBuilder.import_rejected(reason))

    def log_records_exported(self, count: int) -> None:
        self.log(LedgerEventBuilder.records_exported(count))

    def log_settings_updated(self, fields: list[str]) -> None:
        self.log(LedgerEventBuilder.settings_updated(fields))

    def log_settings_rejected(self, errors: dict[str, str]) -> None:
        self.log(LedgerEventBuilder.settings_rejected(errors))

    def log_pattern_rejected(self, pattern: str, reason: str) -> None:
        self.log(LedgerEventBuilder.pattern_rejected(pattern, reason))

    def log_persistence_failed(self, key: str, reason: str) -> None:
        self.log(LedgerEventBuilder.persistence_failed(key, reason))
