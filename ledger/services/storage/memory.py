"""In-memory key-value store, used by tests and throwaway sessions."""

from typing import Optional

from ledger.services.storage.interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """
    Dict-backed storage.

    Set fail_writes to make every save report failure, which is how the
    write-through error path is exercised.
    """

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._slots: dict[str, bytes] = dict(initial or {})
        self.fail_writes = False
        self.save_count = 0

    def load(self, key: str) -> Optional[bytes]:
        return self._slots.get(key)

    def save(self, key: str, data: bytes) -> bool:
        if self.fail_writes:
            return False
        self._slots[key] = bytes(data)
        self.save_count += 1
        return True

    def keys(self) -> list[str]:
        return list(self._slots)
