"""Event logging package."""

from ledger.audit.logger import EventLogger, configure_logging

__all__ = ["EventLogger", "configure_logging"]
