"""
Shared fixtures for the ledger tests.

Everything runs against InMemoryStore with a pinned clock, so no test
touches the filesystem unless it asks for tmp_path.
"""

import os
from datetime import datetime, timezone

import pytest

from ledger.config import get_settings
from ledger.models.record import Record, RecordDraft
from ledger.orchestrator import create_app_components
from ledger.services.storage import InMemoryStore, LedgerPersistence
from ledger.store import RecordStore, SettingsStore


FIXED_NOW = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
FIXED_STAMP = "2024-01-01T10:00:00.000Z"


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from LEDGER_* variables in the environment."""
    for name in list(os.environ):
        if name.startswith("LEDGER_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def persistence(memory_store):
    return LedgerPersistence(memory_store)


@pytest.fixture
def record_store(persistence, clock):
    store = RecordStore(persistence, clock=clock)
    store.initialize()
    return store


@pytest.fixture
def settings_store(persistence):
    store = SettingsStore(persistence)
    store.initialize()
    return store


@pytest.fixture
def session(memory_store, clock):
    return create_app_components(
        storage=memory_store,
        clock=clock,
        configure_logs=False,
    )


@pytest.fixture
def make_record():
    """Factory for stored-shape records."""

    def _make(
        record_id: str = "txn_0001",
        description: str = "Lunch",
        amount: float = 12.5,
        category: str = "Food",
        date: str = "2024-01-01",
        **extra,
    ) -> Record:
        return Record.model_validate({
            "id": record_id,
            "description": description,
            "amount": amount,
            "category": category,
            "date": date,
            "createdAt": FIXED_STAMP,
            "updatedAt": FIXED_STAMP,
            **extra,
        })

    return _make


@pytest.fixture
def make_draft():
    def _make(
        description: str = "Lunch",
        amount: float = 12.5,
        category: str = "Food",
        date: str = "2024-01-01",
    ) -> RecordDraft:
        return RecordDraft(
            description=description,
            amount=amount,
            category=category,
            date=date,
        )

    return _make
