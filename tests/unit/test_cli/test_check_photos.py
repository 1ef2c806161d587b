"""Unit tests for the photo-check CLI."""
import pytest
import requests
from unittest.mock import Mock, patch

from scanbridge.cli import check_photos

REPORT = {
    "success": True,
    "summary": {
        "totalStudents": 3,
        "photosFound": 2,
        "photosNotFound": 1,
        "recordsUpdated": 2,
        "timestamp": "2025-10-01T12:00:00Z",
    },
    "results": [
        {"studentId": "12345", "name": "Ada Lovelace", "hasPhoto": True},
        {"studentId": "67890", "name": "Alan Turing", "hasPhoto": True},
        {"studentId": "55555", "name": "Grace Hopper", "hasPhoto": False,
         "expectedFileName": "55555-photo.jpg"},
    ],
}


def json_response(body):
    response = Mock()
    response.json.return_value = body
    return response


@pytest.mark.unit
class TestCheckPhotos:
    """Test the photo-check command."""

    def test_summary(self, capsys):
        with patch("scanbridge.cli.check_photos.requests.get", return_value=json_response(REPORT)) as get:
            exit_code = check_photos.main(["--url", "https://photos.example/check"])

        assert exit_code == 0
        get.assert_called_once_with("https://photos.example/check", params=None, timeout=30)
        out = capsys.readouterr().out
        assert "Total students: 3" in out
        assert "Photos not found: 1" in out
        assert "Students WITH photos" not in out

    def test_details(self, capsys):
        with patch("scanbridge.cli.check_photos.requests.get", return_value=json_response(REPORT)) as get:
            exit_code = check_photos.main(["--details", "--url", "https://photos.example/check"])

        assert exit_code == 0
        assert get.call_args.kwargs["params"] == {"includeDetails": "true"}
        out = capsys.readouterr().out
        assert "Students WITH photos (2):" in out
        assert "Students WITHOUT photos (1):" in out
        assert "55555 - Grace Hopper (expected: 55555-photo.jpg)" in out

    def test_reported_failure_exits_1(self, capsys):
        body = {"success": False, "error": "Storage bucket not found"}
        with patch("scanbridge.cli.check_photos.requests.get", return_value=json_response(body)):
            assert check_photos.main([]) == 1
        assert "Storage bucket not found" in capsys.readouterr().err

    def test_network_error_exits_1(self, capsys):
        with patch("scanbridge.cli.check_photos.requests.get",
                   side_effect=requests.ConnectionError("connection refused")):
            assert check_photos.main([]) == 1
        assert "connection refused" in capsys.readouterr().err

    def test_timeout_exits_1(self, capsys):
        with patch("scanbridge.cli.check_photos.requests.get", side_effect=requests.Timeout()):
            assert check_photos.main(["--timeout", "1"]) == 1
        assert "Request timeout" in capsys.readouterr().err

    def test_unparseable_body_exits_1(self, capsys):
        response = Mock()
        response.json.side_effect = ValueError("Expecting value")
        with patch("scanbridge.cli.check_photos.requests.get", return_value=response):
            assert check_photos.main([]) == 1
        assert "Failed to parse response" in capsys.readouterr().err
