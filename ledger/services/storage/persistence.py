"""
Persistence Gateway

Encodes and decodes the two keyed slots the core uses:
- the record array (compact JSON array of record objects)
- the settings object (compact JSON object)

FAILURE POLICY:
- Loads never raise. Missing, unreadable or malformed content comes back
  as an empty array / None and is logged as a warning.
- Saves always report failure, as PersistenceWriteError. The caller has
  already changed its in-memory state; nothing is rolled back.
"""

import json
from typing import Any, Optional

import structlog

from ledger.config import get_settings
from ledger.exceptions import (
    MalformedStoredDataError,
    PersistenceWriteError,
    StorageError,
)
from ledger.models.preferences import LedgerSettings
from ledger.models.record import Record
from ledger.services.storage.interface import KeyValueStore


logger = structlog.get_logger(__name__)


def _decode(raw: bytes) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedStoredDataError(str(e))


def _encode(payload: Any) -> bytes:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


class LedgerPersistence:
    """Reads and writes the record and settings slots of a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        records_key: Optional[str] = None,
        settings_key: Optional[str] = None,
    ):
        app_settings = get_settings().app
        self._store = store
        self.records_key = records_key or app_settings.records_key
        self.settings_key = settings_key or app_settings.settings_key

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def _load(self, key: str) -> Optional[bytes]:
        try:
            return self._store.load(key)
        except StorageError as e:
            logger.warning("slot_unreadable", key=key, error=str(e))
            return None

    def _save(self, key: str, payload: Any) -> None:
        try:
            saved = self._store.save(key, _encode(payload))
        except StorageError as e:
            raise PersistenceWriteError(key, str(e))
        if not saved:
            raise PersistenceWriteError(key, "storage backend reported failure")

    def load_records(self) -> list[Any]:
        """
        Raw stored record elements, unvalidated.

        Returns an empty list when the slot is missing or malformed.
        """
        raw = self._load(self.records_key)
        if raw is None:
            return []
        try:
            data = _decode(raw)
            if not isinstance(data, list):
                raise MalformedStoredDataError("records slot is not a JSON array")
        except MalformedStoredDataError as e:
            logger.warning("stored_records_malformed", key=self.records_key, error=str(e))
            return []
        return data

    def save_records(self, records: list[Record]) -> None:
        self._save(self.records_key, [record.to_payload() for record in records])

    def load_settings(self) -> Optional[dict[str, Any]]:
        """
        Raw stored settings object, or None when missing or malformed.
        """
        raw = self._load(self.settings_key)
        if raw is None:
            return None
        try:
            data = _decode(raw)
            if not isinstance(data, dict):
                raise MalformedStoredDataError("settings slot is not a JSON object")
        except MalformedStoredDataError as e:
            logger.warning("stored_settings_malformed", key=self.settings_key, error=str(e))
            return None
        return data

    def save_settings(self, settings: LedgerSettings) -> None:
        self._save(self.settings_key, settings.to_payload())
