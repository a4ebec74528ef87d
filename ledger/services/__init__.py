"""Services package."""

from ledger.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    LedgerPersistence,
    MalformedStoredDataError,
    PersistenceWriteError,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "LedgerPersistence",
    "MalformedStoredDataError",
    "PersistenceWriteError",
    "StorageError",
]
