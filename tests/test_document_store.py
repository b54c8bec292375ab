"""Tests for the document store backends and the shared store lifecycle."""

import threading
from types import SimpleNamespace

import pytest
from bson import ObjectId

import Request_module.Request_store as request_store
from config import settings
from database import resolve_database_url
from Request_module.Request_crud import insert_request_document
from Request_module.Request_store import (
    MongoDocumentCollection,
    MongoDocumentStore,
    SqlDocumentStore,
    build_document_store,
    get_document_store,
)


class FakeMongoCollection:
    def __init__(self):
        self.inserted = []

    def insert_one(self, document):
        document["_id"] = ObjectId()
        self.inserted.append(document)
        return SimpleNamespace(inserted_id=document["_id"])

    def find_one(self, query):
        for document in self.inserted:
            if document["_id"] == query["_id"]:
                return dict(document)
        return None

    def count_documents(self, query):
        return len(self.inserted)


@pytest.fixture
def fresh_store(monkeypatch, tmp_path):
    """Point the process-wide store at a temp SQLite file."""
    monkeypatch.setattr(request_store, "_store", None)
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite:///{tmp_path / 'requests.db'}")
    yield
    request_store.close_document_store()


class TestSqlDocumentStore:
    def test_insert_returns_generated_id(self, requests_collection) -> None:
        inserted_id = requests_collection.insert_one({"requestorName": "A"})

        assert isinstance(inserted_id, str)
        assert len(inserted_id) == 32
        assert requests_collection.find_one(inserted_id) == {"requestorName": "A"}

    def test_ids_are_unique(self, requests_collection) -> None:
        first = requests_collection.insert_one({"n": 1})
        second = requests_collection.insert_one({"n": 1})

        assert first != second
        assert requests_collection.count() == 2

    def test_collections_are_isolated(self, sqlite_store) -> None:
        requests = sqlite_store.collection("vendor_management", "requests")
        archive = sqlite_store.collection("vendor_management", "archive")

        inserted_id = archive.insert_one({"requestorName": "A"})

        assert requests.count() == 0
        assert requests.find_one(inserted_id) is None
        assert archive.count() == 1

    @pytest.mark.parametrize("document", [["a"], "text", 42, None])
    def test_non_object_documents_rejected(self, requests_collection, document) -> None:
        with pytest.raises(TypeError):
            requests_collection.insert_one(document)

        assert requests_collection.count() == 0

    def test_crud_uses_configured_collection(self, sqlite_store, requests_collection) -> None:
        inserted_id = insert_request_document(sqlite_store, {"department": "B"})

        assert requests_collection.find_one(inserted_id) == {"department": "B"}


class TestMongoDocumentStore:
    def test_insert_does_not_mutate_caller_document(self) -> None:
        fake = FakeMongoCollection()
        document = {"requestorName": "A"}

        inserted_id = MongoDocumentCollection(fake).insert_one(document)

        assert inserted_id == str(fake.inserted[0]["_id"])
        assert document == {"requestorName": "A"}
        assert fake.inserted[0]["requestorName"] == "A"

    def test_selects_database_and_collection(self) -> None:
        fake = FakeMongoCollection()
        client = {"vendor_management": {"requests": fake}}
        store = MongoDocumentStore(client=client)

        insert_request_document(store, {"requestorName": "A"})

        assert len(fake.inserted) == 1

    def test_find_one_and_count(self) -> None:
        collection = MongoDocumentCollection(FakeMongoCollection())

        inserted_id = collection.insert_one({"requestorName": "A"})

        assert collection.find_one(inserted_id) == {"requestorName": "A"}
        assert collection.find_one(str(ObjectId())) is None
        assert collection.find_one("not-an-object-id") is None
        assert collection.count() == 1


class TestStoreSelection:
    @pytest.mark.parametrize("url", ["mongodb://localhost:27017", "mongodb+srv://cluster.example.net"])
    def test_mongo_urls_pick_mongo_backend(self, url) -> None:
        store = build_document_store(url)

        assert isinstance(store, MongoDocumentStore)
        # the client is only created on first use
        assert store._client is None

    def test_other_urls_pick_sql_backend(self) -> None:
        assert isinstance(build_document_store("sqlite://"), SqlDocumentStore)

    def test_resolve_database_url_strips_prefix(self) -> None:
        assert resolve_database_url("DATABASE_URL=postgresql://u@h/db") == "postgresql://u@h/db"

    def test_resolve_database_url_falls_back_to_sqlite(self) -> None:
        assert resolve_database_url("   ").startswith("sqlite:///")


class TestSharedStore:
    def test_store_is_created_once(self, fresh_store) -> None:
        assert get_document_store() is get_document_store()

    def test_concurrent_first_use_yields_one_store(self, fresh_store) -> None:
        seen = []
        barrier = threading.Barrier(8)

        def grab():
            barrier.wait()
            seen.append(get_document_store())

        threads = [threading.Thread(target=grab) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(seen) == 8
        assert all(store is seen[0] for store in seen)

    def test_connection_reused_across_inserts(self, fresh_store) -> None:
        store = get_document_store()
        collection = store.collection("vendor_management", "requests")

        collection.insert_one({"n": 1})
        engine = store._engine
        collection.insert_one({"n": 2})

        assert store._engine is engine
        assert collection.count() == 2
