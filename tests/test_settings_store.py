"""
Tests for the settings store, currency conversion and formatting.
"""

import json

import pytest

from ledger.exceptions import PersistenceWriteError
from ledger.models.preferences import LedgerSettings, SettingsUpdate
from ledger.services.storage import InMemoryStore, LedgerPersistence
from ledger.store import (
    SettingsStore,
    convert_amount,
    format_currency,
    salvage_stored,
    settings_from_stored,
)


def _store_with(settings_payload) -> InMemoryStore:
    raw = settings_payload if isinstance(settings_payload, bytes) else json.dumps(settings_payload).encode("utf-8")
    return InMemoryStore({"finance:settings": raw})


class TestSettingsFromStored:
    """Tests for merging stored configuration over defaults."""

    def test_nothing_stored_gives_defaults(self):
        assert settings_from_stored(None) == LedgerSettings()

    def test_partial_config_filled_with_defaults(self):
        """Test absent keys fall back to defaults."""
        settings = settings_from_stored({"displayCurrency": "EUR", "cap": 300})
        assert settings.display_currency == "EUR"
        assert settings.cap == 300
        assert settings.base_currency == "USD"
        assert settings.categories == LedgerSettings().categories

    def test_stored_rates_merged_one_level(self):
        """Test stored rates add to the default map instead of replacing it."""
        settings = settings_from_stored({"rates": {"JPY": 150}})
        assert settings.rates == {"USD": 1.0, "EUR": 0.92, "GBP": 0.79, "JPY": 150.0}

    def test_invalid_value_falls_back_alone(self):
        """Test a wrongly typed value degrades to its default and nothing else does."""
        settings = settings_from_stored({"cap": "lots", "displayCurrency": "EUR"})
        assert settings.cap == 0
        assert settings.display_currency == "EUR"

    def test_bad_rate_dropped_others_kept(self):
        """Test one non-positive rate costs only that rate."""
        settings = settings_from_stored({
            "cap": 250,
            "categories": ["Rent"],
            "displayCurrency": "EUR",
            "rates": {"EUR": 0.9, "JPY": 0},
        })
        assert settings.cap == 250
        assert settings.categories == ["Rent"]
        assert settings.display_currency == "EUR"
        assert settings.rates == {"USD": 1.0, "EUR": 0.9, "GBP": 0.79}

    def test_salvage_reports_dropped_keys(self):
        kept, dropped = salvage_stored({
            "cap": -5,
            "categories": "Food",
            "baseCurrency": "USD",
            "rates": {"EUR": "cheap", "GBP": 0.8},
        })
        assert kept == {"baseCurrency": "USD", "rates": {"GBP": 0.8}}
        assert dropped == ["cap", "categories", "rates.EUR"]

    def test_rates_of_wrong_shape_dropped(self):
        kept, dropped = salvage_stored({"rates": [1, 2], "cap": 10})
        assert kept == {"cap": 10}
        assert dropped == ["rates"]


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_initialize_saves_effective_settings(self):
        """Test a partial stored configuration is upgraded on start."""
        storage = _store_with({"cap": 50})
        store = SettingsStore(LedgerPersistence(storage))
        store.initialize()

        saved = json.loads(storage.load("finance:settings"))
        assert saved["cap"] == 50
        assert saved["rates"] == {"USD": 1.0, "EUR": 0.92, "GBP": 0.79}
        assert saved["displayCurrency"] == "USD"

    def test_initialize_keeps_valid_part_of_corrupt_config(self):
        """Test the rewritten configuration keeps every value that was valid."""
        storage = _store_with({
            "cap": 250,
            "categories": ["Rent"],
            "displayCurrency": "EUR",
            "rates": {"EUR": 0.9, "JPY": 0},
        })
        store = SettingsStore(LedgerPersistence(storage))
        store.initialize()

        saved = json.loads(storage.load("finance:settings"))
        assert saved["cap"] == 250
        assert saved["categories"] == ["Rent"]
        assert saved["displayCurrency"] == "EUR"
        assert saved["rates"] == {"USD": 1.0, "EUR": 0.9, "GBP": 0.79}

    def test_initialize_with_malformed_json(self):
        storage = _store_with(b"not json at all")
        store = SettingsStore(LedgerPersistence(storage))
        assert store.initialize() == LedgerSettings()

    def test_initialize_with_non_object(self):
        storage = _store_with([1, 2, 3])
        store = SettingsStore(LedgerPersistence(storage))
        assert store.initialize() == LedgerSettings()

    def test_update_merges_and_persists(self, settings_store, memory_store):
        """Test update changes only the given fields and writes through."""
        settings_store.update(SettingsUpdate(rates={"EUR": 0.95}))
        settings = settings_store.update(SettingsUpdate(cap=120))

        assert settings.cap == 120
        assert settings.rates["EUR"] == 0.95
        assert settings.rates["GBP"] == 0.79
        saved = json.loads(memory_store.load("finance:settings"))
        assert saved["cap"] == 120
        assert saved["rates"]["EUR"] == 0.95

    def test_update_failure_keeps_memory_change(self, settings_store, memory_store):
        memory_store.fail_writes = True
        with pytest.raises(PersistenceWriteError) as exc_info:
            settings_store.update(SettingsUpdate(cap=10))
        assert exc_info.value.key == "finance:settings"
        assert settings_store.current.cap == 10


class TestConversion:
    """Tests for conversion and formatting."""

    def test_convert_uses_display_rate(self):
        settings = LedgerSettings(display_currency="EUR")
        assert convert_amount(100, settings) == pytest.approx(92.0)

    def test_unknown_display_currency_rate_is_one(self):
        settings = LedgerSettings(display_currency="CHF")
        assert convert_amount(40, settings) == 40

    def test_base_currency_is_not_used(self):
        """Test conversion ignores the base currency's own rate."""
        settings = LedgerSettings(base_currency="EUR", display_currency="USD")
        assert convert_amount(10, settings) == 10

    def test_format_usd(self):
        assert format_currency(20, LedgerSettings()) == "$20.00"
        assert format_currency(1234.5, LedgerSettings()) == "$1,234.50"

    def test_format_converts_first(self):
        settings = LedgerSettings(display_currency="EUR")
        assert format_currency(20, settings) == "€18.40"

    def test_format_with_locale(self):
        """Test an explicit locale overrides the configured one."""
        settings = LedgerSettings(display_currency="EUR", rates={"EUR": 1.0})
        assert format_currency(1234.5, settings, locale="de_DE") == "1.234,50\xa0€"

    def test_store_helpers(self, settings_store):
        assert settings_store.convert(5) == 5
        assert settings_store.format(5) == "$5.00"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
