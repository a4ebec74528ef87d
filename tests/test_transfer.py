"""
Tests for the import/export gate.
"""

import json

import pytest

from ledger.exceptions import ImportShapeError
from ledger.transfer import (
    import_records,
    parse_import_payload,
    prepare_export,
    prepare_import,
)


@pytest.fixture
def batch(make_record):
    return [
        make_record("txn_0005", description="Rent", amount=900, category="Fees"),
        make_record("txn_0002", description="Lunch", amount=12.5, category="Food", note="kept"),
    ]


class TestPrepareImport:
    """Tests for all-or-nothing import validation."""

    def test_valid_batch(self, batch):
        payload = [record.to_payload() for record in batch]
        assert prepare_import(payload) == batch

    def test_not_an_array(self):
        with pytest.raises(ImportShapeError, match="JSON must be an array."):
            prepare_import({"id": "txn_0001"})

    def test_one_invalid_element_rejects_all(self, batch):
        """Test a single bad category rejects the batch and names its position."""
        payload = [record.to_payload() for record in batch]
        payload[1]["category"] = "Food & Drink"
        with pytest.raises(ImportShapeError, match=r"positions: 1\)"):
            prepare_import(payload)

    def test_duplicate_ids_rejected(self, batch):
        payload = [batch[0].to_payload(), batch[0].to_payload()]
        with pytest.raises(ImportShapeError, match="Record ids must be unique."):
            prepare_import(payload)

    def test_empty_array_is_valid(self):
        assert prepare_import([]) == []


class TestImportRecords:
    """Tests for replacing the store with an import."""

    def test_replaces_store(self, record_store, make_draft, batch):
        record_store.create(make_draft())
        count = import_records(record_store, [record.to_payload() for record in batch])
        assert count == 2
        assert record_store.records == tuple(batch)

    def test_rejected_import_leaves_store_untouched(self, record_store, memory_store, make_draft, batch):
        """Test the store and its stored copy are unchanged after a rejection."""
        record_store.create(make_draft())
        before = record_store.records
        stored_before = memory_store.load("finance:records")

        payload = [record.to_payload() for record in batch]
        payload[0]["category"] = "Fees 2024"
        with pytest.raises(ImportShapeError):
            import_records(record_store, payload)

        assert record_store.records == before
        assert memory_store.load("finance:records") == stored_before


class TestParsePayload:
    """Tests for decoding import text."""

    def test_invalid_json(self):
        with pytest.raises(ImportShapeError, match="not valid JSON"):
            parse_import_payload("[{")

    def test_valid_json(self):
        assert parse_import_payload("[]") == []


class TestExport:
    """Tests for prepare_export."""

    def test_pretty_printed_in_store_order(self, batch):
        text = prepare_export(batch)
        assert text.startswith('[\n  {\n    "id": "txn_0005"')
        data = json.loads(text)
        assert [item["id"] for item in data] == ["txn_0005", "txn_0002"]
        assert data[0]["amount"] == 900
        assert data[1]["note"] == "kept"

    def test_export_then_import_round_trip(self, batch):
        assert prepare_import(parse_import_payload(prepare_export(batch))) == batch

    def test_non_ascii_kept(self, make_record):
        text = prepare_export([make_record(description="Café crème")])
        assert "Café crème" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
