"""
JSON File Storage Implementation

DESIGN DECISION: Each storage key maps to one file in a data directory.
- Users can open and back up their ledger with any text editor
- No database setup required
- Every save replaces the whole file, matching the write-through model

TRADEOFFS:
- Whole-file rewrites on every mutation (fine for a personal ledger)
- No locking: one writer per data directory

Writes go to a temporary file in the same directory and are moved into
place with os.replace, so a crash mid-write never leaves a half-written
slot behind.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.config import get_settings
from ledger.services.storage.interface import KeyValueStore, StorageError


logger = structlog.get_logger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class JsonFileStore(KeyValueStore):
    """
    File-per-key implementation of the key-value store.

    'finance:records' is stored as '<data_dir>/finance_records.json'.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        retry_attempts: Optional[int] = None,
    ):
        app_settings = get_settings().app
        self._data_dir = Path(data_dir or app_settings.data_dir)
        self._retry_attempts = retry_attempts or app_settings.storage_retry_attempts

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Map a storage key to its file path."""
        safe = UNSAFE_FILENAME_CHARS.sub("_", key).strip("._") or "slot"
        return self._data_dir / f"{safe}.json"

    def load(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def save(self, key: str, data: bytes) -> bool:
        path = self.path_for(key)
        retrying = Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            retrying(self._atomic_write, path, data)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")
        logger.debug("slot_saved", key=key, path=str(path), size=len(data))
        return True

    def _atomic_write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f"{path.name}-",
            suffix=".tmp",
            dir=path.parent,
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, path)
        except OSError:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise
