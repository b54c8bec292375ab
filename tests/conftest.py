"""Pytest configuration and shared fixtures."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from config import settings
from database import create_sql_engine
from deps import get_store
from main import app
from Request_module.Request_store import DocumentCollection, DocumentStore, SqlDocumentStore


class UnreachableStore(DocumentStore):
    """Store whose every insert fails as if the server were down."""

    backend = "unreachable"

    def __init__(self):
        self.insert_attempts = 0

    def collection(self, database_name, collection_name):
        store = self

        class _Collection(DocumentCollection):
            def insert_one(self, document):
                store.insert_attempts += 1
                raise ConnectionError("store unreachable")

        return _Collection()


@pytest.fixture
def sqlite_store():
    """In-memory SQLite document store shared across threads."""
    engine = create_sql_engine("sqlite://", poolclass=StaticPool)
    store = SqlDocumentStore(engine=engine)
    yield store
    store.close()


@pytest.fixture
def requests_collection(sqlite_store):
    return sqlite_store.collection(settings.REQUEST_DATABASE_NAME, settings.REQUEST_COLLECTION_NAME)


@pytest.fixture
def client(sqlite_store):
    app.dependency_overrides[get_store] = lambda: sqlite_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unreachable_store():
    return UnreachableStore()


@pytest.fixture
def failing_client(unreachable_store):
    app.dependency_overrides[get_store] = lambda: unreachable_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def passthrough(monkeypatch):
    """Store raw bodies without schema validation."""
    monkeypatch.setattr(settings, "STRICT_REQUEST_VALIDATION", False)


@pytest.fixture
def valid_payload():
    return {
        "requestorName": "Jane Doe",
        "department": "Facilities",
        "companyName": "Rithm",
        "email": "jane.doe@example.com",
        "contactPhone": "555-0100",
        "description": "Quarterly HVAC maintenance contract",
        "vendorSelection": "needsSelection",
        "completionDate": (date.today() + timedelta(days=30)).isoformat(),
    }
