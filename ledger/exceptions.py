"""
Ledger Exceptions

Every error the core can produce is one of these.

DESIGN DECISION: No error kind is fatal. Each one is either recovered
automatically with a safe default (malformed stored data, bad search
pattern) or reported to the immediate caller for a retry or a user
correction (field errors, rejected imports, failed writes).
"""


class LedgerError(Exception):
    """Base exception for the ledger core."""
    pass


class FieldValidationError(LedgerError):
    """A single field failed its grammar. The caller re-prompts."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PatternSyntaxError(LedgerError):
    """
    A search pattern could not be compiled.

    The query path never raises this: it degrades to unfiltered results
    and carries the exception on the INVALID compiled pattern instead.
    """

    def __init__(self, pattern: str, reason: str):
        super().__init__(reason)
        self.pattern = pattern
        self.reason = reason


class ImportShapeError(LedgerError):
    """An import payload was rejected as a whole. The store is untouched."""
    pass


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class PersistenceWriteError(StorageError):
    """
    A write-through save failed.

    The in-memory change that preceded the save is NOT rolled back,
    so memory and durable state have diverged until the next good save.
    """

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to persist '{key}': {reason}")
        self.key = key
        self.reason = reason


class MalformedStoredDataError(LedgerError):
    """Stored content could not be decoded. Always replaced by defaults at load time."""
    pass
