"""Integration tests for event and student endpoints."""
import pytest
from unittest.mock import patch

from scanbridge.core.errors import StoreError


@pytest.mark.integration
class TestEventEndpoints:
    """Test the event catalogue endpoints."""

    def test_get_events(self, client):
        response = client.get("/getEvents")
        assert response.status_code == 200
        events = response.json()
        assert [e["id"] for e in events] == ["E1"]
        assert events[0]["name"] == "Fall Gala"

    def test_get_events_store_failure(self, client, seeded_store):
        with patch.object(seeded_store, "list", side_effect=StoreError("down")):
            response = client.get("/getEvents")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get events"}

    def test_create_event(self, client):
        response = client.post(
            "/createEvent",
            json={"name": "Winter Formal", "eventNumber": 43, "location": "Gym"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Event created successfully"
        assert body["event"]["eventNumber"] == 43
        assert body["event"]["location"] == "Gym"
        assert body["event"]["isActive"] is True

        listed = client.get("/getEvents").json()
        assert {e["eventNumber"] for e in listed} == {42, 43}

    def test_create_duplicate_number(self, client):
        response = client.post("/createEvent", json={"name": "Copy", "eventNumber": 42})
        assert response.status_code == 409
        assert response.json() == {
            "error": "Event number 42 already exists",
            "conflictField": "eventNumber",
        }

    def test_create_missing_fields(self, client):
        response = client.post("/createEvent", json={"name": "No number"})
        assert response.status_code == 400
        assert response.json() == {"error": "Event name and eventNumber are required"}

    def test_update_event(self, client):
        response = client.put("/updateEvent", json={"id": "E1", "isCompleted": True, "isActive": False})
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "E1"
        assert body["isCompleted"] is True
        assert body["isActive"] is False
        assert body["name"] == "Fall Gala"

    def test_update_event_not_found(self, client):
        response = client.put("/updateEvent", json={"id": "missing", "name": "x"})
        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    def test_update_event_requires_id(self, client):
        response = client.put("/updateEvent", json={"name": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "Event ID is required"}

    def test_update_event_number_conflict(self, client, seeded_store):
        seeded_store.seed("events", "E2", {"eventNumber": 43, "name": "Other"})
        response = client.put("/updateEvent", json={"id": "E2", "eventNumber": 42})
        assert response.status_code == 409


@pytest.mark.integration
class TestStudentEndpoints:
    """Test the student roster endpoints."""

    def test_get_students(self, client):
        response = client.get("/getStudents")
        assert response.status_code == 200
        assert {s["id"] for s in response.json()} == {"stu-1", "stu-2"}

    def test_get_student_by_id(self, client):
        response = client.get("/getStudentById", params={"studentId": "12345"})
        assert response.status_code == 200
        assert response.json()["firstName"] == "Ada"

    def test_get_student_numeric_roster_id(self, client):
        response = client.get("/getStudentById", params={"studentId": "67890"})
        assert response.status_code == 200
        assert response.json()["lastName"] == "Turing"

    def test_get_student_missing_param(self, client):
        response = client.get("/getStudentById")
        assert response.status_code == 400
        assert response.json() == {"error": "studentId is required"}

    def test_get_student_not_found(self, client):
        response = client.get("/getStudentById", params={"studentId": "nobody"})
        assert response.status_code == 404
        assert response.json() == {"error": "Student not found"}
