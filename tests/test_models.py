"""
Tests for the Ledger models

Test strategy:
1. Unit tests for individual components (models, validators, stores)
2. Flow tests through the session with an in-memory store
3. No filesystem access outside tmp_path
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ledger.exceptions import PatternSyntaxError
from ledger.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)
from ledger.models.preferences import (
    DEFAULT_CATEGORIES,
    DEFAULT_RATES,
    LedgerSettings,
    SettingsUpdate,
    merge_rates,
)
from ledger.models.query import CompiledPattern, PatternKind, RecordQuery
from ledger.models.record import Record, RecordUpdate, utc_timestamp


class TestRecordModels:
    """Tests for record-related Pydantic models."""

    def test_record_accepts_camel_case(self, make_record):
        """Test Record reads createdAt/updatedAt aliases."""
        record = make_record()
        assert record.created_at == "2024-01-01T10:00:00.000Z"
        assert record.updated_at == "2024-01-01T10:00:00.000Z"

    def test_payload_uses_camel_case(self, make_record):
        """Test to_payload writes the stored key names."""
        payload = make_record().to_payload()
        assert list(payload) == [
            "id", "description", "amount", "category", "date", "createdAt", "updatedAt",
        ]

    def test_integral_amount_serialized_as_int(self, make_record):
        """Test 12.0 is written as 12."""
        payload = make_record(amount=12).to_payload()
        assert payload["amount"] == 12
        assert isinstance(payload["amount"], int)
        assert make_record(amount=12.5).to_payload()["amount"] == 12.5

    def test_extra_keys_preserved(self, make_record):
        """Test unknown keys survive into the payload."""
        record = make_record(note="from bank", tags=["a"])
        payload = record.to_payload()
        assert payload["note"] == "from bank"
        assert payload["tags"] == ["a"]

    def test_record_is_frozen(self, make_record):
        """Test records cannot be mutated in place."""
        record = make_record()
        with pytest.raises(ValidationError):
            record.amount = 99

    def test_record_rejects_negative_amount(self, make_record):
        with pytest.raises(ValidationError):
            make_record(amount=-1)

    def test_update_cannot_change_id(self):
        """Test id and createdAt are not part of an update."""
        with pytest.raises(ValidationError):
            RecordUpdate(id="txn_9999")
        with pytest.raises(ValidationError):
            RecordUpdate(created_at="2020-01-01T00:00:00.000Z")

    def test_update_changes_only_set_fields(self):
        update = RecordUpdate(amount=5.0, category=None)
        assert update.changes() == {"amount": 5.0}


class TestTimestamps:
    """Tests for utc_timestamp."""

    def test_millisecond_z_format(self):
        moment = datetime(2024, 1, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
        assert utc_timestamp(moment) == "2024-01-01T10:00:00.123Z"

    def test_naive_datetime_treated_as_utc(self):
        assert utc_timestamp(datetime(2024, 1, 1, 10, 0)) == "2024-01-01T10:00:00.000Z"

    def test_default_is_now(self):
        assert utc_timestamp().endswith("Z")


class TestSettingsModels:
    """Tests for settings models."""

    def test_defaults(self):
        """Test the default configuration."""
        settings = LedgerSettings()
        assert settings.base_currency == "USD"
        assert settings.display_currency == "USD"
        assert settings.rates == DEFAULT_RATES
        assert settings.cap == 0
        assert settings.has_cap is False
        assert settings.categories == DEFAULT_CATEGORIES

    def test_merge_rates_keeps_other_codes(self):
        """Test one-level merge never drops existing codes."""
        merged = merge_rates({"USD": 1.0, "EUR": 0.92}, {"EUR": 0.95, "JPY": 150.0})
        assert merged == {"USD": 1.0, "EUR": 0.95, "JPY": 150.0}

    def test_merged_applies_scalar_fields(self):
        """Test fields not in the update are kept."""
        settings = LedgerSettings().merged(SettingsUpdate(cap=250, display_currency="EUR"))
        assert settings.cap == 250
        assert settings.display_currency == "EUR"
        assert settings.base_currency == "USD"
        assert settings.rates == DEFAULT_RATES

    def test_merged_rates_one_level(self):
        settings = LedgerSettings().merged(SettingsUpdate(rates={"GBP": 0.8}))
        assert settings.rates == {"USD": 1.0, "EUR": 0.92, "GBP": 0.8}

    def test_update_reads_stored_aliases(self):
        """Test SettingsUpdate accepts camelCase and ignores unknown keys."""
        update = SettingsUpdate.model_validate({"displayCurrency": "GBP", "theme": "dark"})
        assert update.display_currency == "GBP"

    @pytest.mark.parametrize("data", [
        {"cap": -1},
        {"rates": {"EUR": 0}},
        {"rates": {"EUR": "cheap"}},
        {"categories": "Food"},
    ])
    def test_update_rejects_bad_values(self, data):
        with pytest.raises(ValidationError):
            SettingsUpdate.model_validate(data)

    def test_payload_uses_camel_case(self):
        payload = LedgerSettings().to_payload()
        assert payload["baseCurrency"] == "USD"
        assert payload["displayCurrency"] == "USD"
        assert "base_currency" not in payload


class TestQueryModels:
    """Tests for query-related models."""

    def test_compiled_pattern_kinds(self):
        """Test only COMPILED is active and only INVALID has an error."""
        no_filter = CompiledPattern.no_filter()
        invalid = CompiledPattern.invalid(PatternSyntaxError("[", "bad"))
        assert no_filter.kind == PatternKind.NO_FILTER
        assert not no_filter.is_active and not no_filter.has_error
        assert not invalid.is_active and invalid.has_error
        assert invalid.error == "bad"
        assert invalid.exception.pattern == "["

    def test_query_defaults(self):
        query = RecordQuery()
        assert query.pattern == ""
        assert query.case_insensitive is True
        assert query.sort_by == "date_desc"


class TestEventModels:
    """Tests for event models."""

    def test_event_creation(self):
        """Test LedgerEvent model creation."""
        event = LedgerEvent(
            event_type=LedgerEventType.RECORD_DELETED,
            description="Record deleted",
        )
        assert event.severity == EventSeverity.INFO

    def test_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = LedgerEventBuilder.record_created("txn_0001", "Food", 12.5)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "record_created"
        assert log_dict["entity_id"] == "txn_0001"
        assert log_dict["details"] == {"category": "Food", "amount": 12.5}

    def test_builder_persistence_failed_is_error(self):
        """Test write failures are logged at error severity."""
        event = LedgerEventBuilder.persistence_failed("finance:records", "disk full")
        assert event.severity == EventSeverity.ERROR
        assert event.entity_id == "finance:records"
        assert event.error_message == "disk full"

    def test_builder_pattern_rejected(self):
        event = LedgerEventBuilder.pattern_rejected("[", "unterminated character set")
        assert event.event_type == LedgerEventType.PATTERN_REJECTED
        assert event.details["pattern"] == "["


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
