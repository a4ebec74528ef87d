"""
Tests for configuration and logging setup.
"""

import pytest
import structlog
from pydantic import ValidationError

from ledger.audit import EventLogger, configure_logging
from ledger.config import AppSettings, get_settings, validate_all_settings
from ledger.models.events import LedgerEventBuilder
from ledger.services.storage import InMemoryStore, LedgerPersistence
from ledger.store import RecordStore


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.records_key == "finance:records"
        assert settings.settings_key == "finance:settings"
        assert settings.id_prefix == "txn_"
        assert settings.id_min_digits == 4
        assert settings.locale == "en_US"
        assert settings.trend_days == 7
        assert settings.default_sort == "date_desc"

    def test_environment_override(self, monkeypatch):
        """Test LEDGER_* variables are picked up."""
        monkeypatch.setenv("LEDGER_TREND_DAYS", "14")
        monkeypatch.setenv("LEDGER_LOG_LEVEL", " debug ")
        settings = get_settings().app
        assert settings.trend_days == 14
        assert settings.log_level == "DEBUG"

    def test_id_prefix_with_digits_rejected(self):
        with pytest.raises(ValidationError, match="must not contain digits"):
            AppSettings(id_prefix="t1_")

    def test_validate_all_settings(self):
        assert validate_all_settings() == {"app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("LEDGER_TREND_DAYS", "0")
        results = validate_all_settings()
        assert results["app"] is False
        assert "trend_days" in results["app_error"]

    def test_configured_prefix_used_for_ids(self, monkeypatch, make_draft):
        monkeypatch.setenv("LEDGER_ID_PREFIX", "exp-")
        monkeypatch.setenv("LEDGER_ID_MIN_DIGITS", "6")
        store = RecordStore(LedgerPersistence(InMemoryStore()))
        store.initialize()
        assert store.create(make_draft()).id == "exp-000001"


class TestLogging:
    """Tests for structlog configuration and the event logger."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_configure_logging_json(self):
        configure_logging(level="INFO", json_logs=True)
        assert structlog.is_configured()

    def test_event_logger_survives_broken_handler(self):
        """Test a failing logger never breaks the caller."""

        class Exploding:
            def info(self, *args, **kwargs):
                raise RuntimeError("handler down")

        assert EventLogger(Exploding()).log(LedgerEventBuilder.records_exported(1)) is False

    def test_event_logger_levels(self):
        calls = []

        class Recorder:
            def warning(self, event, **kw):
                calls.append(("warning", kw["event_type"]))

            def error(self, event, **kw):
                calls.append(("error", kw["event_type"]))

        events = EventLogger(Recorder())
        assert events.log(LedgerEventBuilder.import_rejected("bad")) is True
        events.log_persistence_failed("finance:records", "disk full")
        assert calls == [("warning", "import_rejected"), ("error", "persistence_failed")]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
