"""Shared fixtures: a fresh store and app per test."""

import pytest
from fastapi.testclient import TestClient

from student_portal.main import create_app
from student_portal.services.student_store import StudentStore


@pytest.fixture
def store():
    """An empty in-memory store."""
    store = StudentStore()
    yield store
    store.close()


@pytest.fixture
def client(store):
    """Test client for an app serving the `store` fixture."""
    app = create_app(store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def ada():
    """A valid registration payload with only the required fields."""
    return {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@x.com", "course": "CS"}


@pytest.fixture
def make_student():
    """Build a valid payload; keyword overrides replace defaults."""
    def _make(n, **overrides):
        payload = {
            "firstName": f"First{n}",
            "lastName": f"Last{n}",
            "email": f"student{n}@example.com",
            "course": "CS",
        }
        payload.update(overrides)
        return payload
    return _make
