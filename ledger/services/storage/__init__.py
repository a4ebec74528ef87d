"""
Storage Services Package

Provides the abstract key-value interface, concrete backends and the
gateway that encodes ledger data into storage slots.
Currently implements JSON files as the backend, but designed to be swappable.
"""

from ledger.services.storage.interface import (
    KeyValueStore,
    MalformedStoredDataError,
    PersistenceWriteError,
    StorageError,
)
from ledger.services.storage.json_file import JsonFileStore
from ledger.services.storage.memory import InMemoryStore
from ledger.services.storage.persistence import LedgerPersistence

__all__ = [
    # Interfaces
    "KeyValueStore",
    # Exceptions
    "MalformedStoredDataError",
    "PersistenceWriteError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    # Gateway
    "LedgerPersistence",
]
