"""Stateful stores: the record collection and the session settings."""

from ledger.store.record_store import RecordStore, identifier_for
from ledger.store.settings_store import (
    SettingsStore,
    convert_amount,
    format_currency,
    merge_rates,
    salvage_stored,
    settings_from_stored,
)

__all__ = [
    "RecordStore",
    "SettingsStore",
    "convert_amount",
    "format_currency",
    "identifier_for",
    "merge_rates",
    "salvage_stored",
    "settings_from_stored",
]
