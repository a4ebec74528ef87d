"""
Abstract Storage Interface

DESIGN DECISION: The core only needs two keyed slots (records and
settings), so the storage interface is a key-value byte store.
This allows us to:
1. Keep records in JSON files today and swap the backend later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally tiny - encoding, decoding and the
"malformed data degrades to defaults" policy live in the persistence
gateway, not in the backends.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ledger.exceptions import (
    MalformedStoredDataError,
    PersistenceWriteError,
    StorageError,
)


class KeyValueStore(ABC):
    """
    Abstract interface for keyed byte storage.

    Any storage implementation (files, memory, a database table, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[bytes]:
        """
        Read the bytes stored under a key.

        Args:
            key: Slot name, e.g. 'finance:records'

        Returns:
            The stored bytes, or None if nothing is stored

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save(self, key: str, data: bytes) -> bool:
        """
        Replace the bytes stored under a key.

        Args:
            key: Slot name
            data: Full new content of the slot

        Returns:
            True if saved successfully, False otherwise

        Raises:
            StorageError: If the backend failed in a way worth reporting
        """
        pass


__all__ = [
    "KeyValueStore",
    "MalformedStoredDataError",
    "PersistenceWriteError",
    "StorageError",
]
