"""Unit tests for deleting scans."""
import pytest
from unittest.mock import patch

from scanbridge.core.errors import NotFoundError, StoreError, ValidationError
from scanbridge.services.recorder import ScanRecorder
from scanbridge.services.removal import ScanRemover


@pytest.fixture
def recorded(seeded_store):
    recorder = ScanRecorder(seeded_store)
    for record_id in ("S1", "S2", "S3"):
        recorder.record({"id": record_id, "eventId": "42", "code": "12345", "timestamp": 1000})
    return seeded_store


@pytest.mark.unit
class TestDeleteScan:
    """Test single-record deletion."""

    def test_deletes_both_copies(self, recorded):
        result = ScanRemover(recorded).delete_scan("S1", "42")
        assert not result.partial
        assert result.event_id == "E1"
        assert recorded.get("scans", "S1") is None
        assert recorded.get("lists/E1/scans", "S1") is None

    def test_event_taken_from_flat_copy(self, recorded):
        """Without an event reference the nested copy is found via listId."""
        ScanRemover(recorded).delete_scan("S1")
        assert recorded.get("lists/E1/scans", "S1") is None

    def test_second_delete_is_not_found(self, recorded):
        remover = ScanRemover(recorded)
        remover.delete_scan("S1", "42")
        with pytest.raises(NotFoundError, match="Scan record not found"):
            remover.delete_scan("S1", "42")

    def test_missing_scan_id(self, recorded):
        with pytest.raises(ValidationError, match="scanId is required"):
            ScanRemover(recorded).delete_scan("")

    def test_nested_only_copy(self, seeded_store):
        seeded_store.seed("lists/E1/scans", "N1", {"eventId": "E1"})
        result = ScanRemover(seeded_store).delete_scan("N1", "E1")
        assert not result.partial
        assert seeded_store.get("lists/E1/scans", "N1") is None

    def test_nested_failure_is_partial(self, recorded):
        real_delete = recorded.delete

        def delete(path, doc_id):
            if path.startswith("lists/"):
                raise StoreError("permission denied")
            return real_delete(path, doc_id)

        with patch.object(recorded, "delete", side_effect=delete):
            result = ScanRemover(recorded).delete_scan("S1", "E1")

        assert result.partial
        assert "lists/E1/scans" in result.errors[0]
        assert recorded.get("scans", "S1") is None
        assert recorded.get("lists/E1/scans", "S1") is not None

    def test_flat_failure_raises(self, recorded):
        with patch.object(recorded, "delete", side_effect=StoreError("down")):
            with pytest.raises(StoreError):
                ScanRemover(recorded).delete_scan("S1", "E1")


@pytest.mark.unit
class TestBulkDelete:
    """Test deleting several records at once."""

    def test_deletes_all(self, recorded):
        result = ScanRemover(recorded).bulk_delete(["S1", "S2"], "42")
        assert result.deleted_count == 2
        assert result.total_requested == 2
        assert result.errors == []
        assert [doc.id for doc in recorded.list("lists/E1/scans")] == ["S3"]

    def test_missing_records_reported(self, recorded):
        result = ScanRemover(recorded).bulk_delete(["S1", "GONE"], "E1")
        assert result.deleted_count == 1
        assert result.errors == [{"recordId": "GONE", "error": "Scan record not found"}]

    def test_unknown_event_reference_still_deletes_by_flat_copy(self, recorded):
        result = ScanRemover(recorded).bulk_delete(["S1"], "99")
        assert result.deleted_count == 1
        assert recorded.get("lists/E1/scans", "S1") is None

    @pytest.mark.parametrize("record_ids, event_id, message", [
        ([], "E1", "recordIds array is required"),
        (None, "E1", "recordIds array is required"),
        (["S1"], None, "eventId is required"),
        (["S1"], "", "eventId is required"),
    ])
    def test_validation(self, recorded, record_ids, event_id, message):
        with pytest.raises(ValidationError, match=message):
            ScanRemover(recorded).bulk_delete(record_ids, event_id)
