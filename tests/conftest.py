"""Shared test fixtures and configuration."""
import pytest
from fastapi.testclient import TestClient

from scanbridge.api.deps import get_store
from scanbridge.core.constants import EVENTS_COLLECTION, STUDENTS_COLLECTION
from scanbridge.core.rate_limit import limiter
from scanbridge.main import app
from scanbridge.store.memory import InMemoryStore


@pytest.fixture(autouse=True)
def reset_rate_limiting(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    limiter.reset()
    if "rate_limit" in request.keywords:
        limiter.enabled = True
        yield
        limiter.reset()
    else:
        enabled = limiter.enabled
        limiter.enabled = False
        yield
        limiter.enabled = enabled


@pytest.fixture(scope="function")
def store():
    """A fresh in-memory document store for each test."""
    return InMemoryStore()


@pytest.fixture
def seeded_store(store):
    """Store holding one event (number 42) and two students."""
    store.seed(EVENTS_COLLECTION, "E1", {
        "eventNumber": 42,
        "name": "Fall Gala",
        "isActive": True,
        "isCompleted": False,
    })
    store.seed(STUDENTS_COLLECTION, "stu-1", {
        "studentId": "12345",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.edu",
    })
    store.seed(STUDENTS_COLLECTION, "stu-2", {
        "studentId": 67890,
        "firstName": "Alan",
        "lastName": "Turing",
        "email": "alan@example.edu",
    })
    return store


@pytest.fixture(scope="function")
def client(seeded_store):
    """Create a test client backed by the seeded in-memory store."""
    app.dependency_overrides[get_store] = lambda: seeded_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
