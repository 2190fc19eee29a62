"""
Test configuration and fixtures for Fupisha.
This centralizes all test setup, making individual tests clean.
"""

import os

# Settings are read at import time; never reach for PostgreSQL from tests
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from main import app
from fupisha.config import settings
from fupisha.dependencies import get_store
from fupisha.services.auth import AuthResource
from fupisha.store import InMemoryStore
from fupisha.store.sql import open_store


class AuthHeaders(dict):
    """Dict subclass that also stores the user it authenticates."""

    def __init__(self, *args, user_id=None, email=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """
    Every store contract test runs against both implementations:
    the in-memory store and the SQL store on a throwaway SQLite file.
    """
    if request.param == "memory":
        store = InMemoryStore()
    else:
        store = open_store(f"sqlite:///{tmp_path / 'fupisha.db'}")

    yield store
    store.close()


@pytest.fixture
def sqlite_store(tmp_path):
    store = open_store(f"sqlite:///{tmp_path / 'fupisha.db'}")
    yield store
    store.close()


@pytest.fixture
def owner(store):
    return store.users().create("owner@example.com", "not-a-real-hash", name="Owner")


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def auth_resource(memory_store):
    return AuthResource(memory_store, settings)


@pytest.fixture(scope="function")
def client(memory_store):
    """
    Create a test client with the store dependency overridden.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_store] = lambda: memory_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Register a user through the API and return its auth headers."""

    def _register(email, password="testpass123"):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, "name": "Test User"},
        )
        assert response.status_code == 201
        data = response.json()
        return AuthHeaders(
            {"Authorization": f"Bearer {data['access_token']}"},
            user_id=data["user"]["id"],
            email=email,
        )

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Create a user and return auth headers with user info."""
    return register_user("test@example.com")


@pytest.fixture
def other_auth_headers(register_user):
    return register_user("other@example.com")
