"""
Document store used by the submission endpoint.

Exposes the small surface the endpoint needs: connect once, select a
database, select a collection, insert one document and get its generated id.
Two backends are available, picked from DATABASE_URL:

- mongodb:// or mongodb+srv:// -> MongoDB through pymongo
- anything else -> a SQLAlchemy table holding JSON documents

The process keeps one store. The store itself opens its connection lazily on
first insert and reuses it afterwards; both steps happen once under a lock.
"""
import copy
import logging
import threading
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import MongoClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from config import settings
from database import Base, create_sql_engine, is_mongo_url, resolve_database_url
from .Request_model import RequestDocument

logger = logging.getLogger(__name__)


def _ensure_document(document: Any) -> Dict[str, Any]:
    if not isinstance(document, dict):
        raise TypeError(f"document must be a JSON object, got {type(document).__name__}")
    return document


class DocumentStore:
    """Base class for document store backends."""

    backend = "base"

    def collection(self, database_name: str, collection_name: str) -> "DocumentCollection":
        raise NotImplementedError

    def close(self) -> None:
        pass


class DocumentCollection:
    def insert_one(self, document: Dict[str, Any]) -> str:
        raise NotImplementedError

    def find_one(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a stored document by id (None if absent)."""
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class SqlDocumentStore(DocumentStore):
    backend = "sql"

    def __init__(self, url: Optional[str] = None, engine: Optional[Engine] = None):
        self.url = url
        self._engine = engine
        self._session_factory = None
        self._lock = threading.Lock()

    def _get_session_factory(self):
        if self._session_factory is not None:
            return self._session_factory
        with self._lock:
            if self._session_factory is None:
                if self._engine is None:
                    self._engine = create_sql_engine(self.url)
                Base.metadata.create_all(self._engine, tables=[RequestDocument.__table__])
                self._session_factory = sessionmaker(
                    bind=self._engine, autocommit=False, autoflush=False, future=True
                )
                logger.info("Request document table ready")
        return self._session_factory

    def collection(self, database_name: str, collection_name: str) -> "SqlDocumentCollection":
        return SqlDocumentCollection(self, database_name, collection_name)

    def close(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._session_factory = None


class SqlDocumentCollection(DocumentCollection):
    def __init__(self, store: SqlDocumentStore, database_name: str, collection_name: str):
        self.store = store
        self.database_name = database_name
        self.collection_name = collection_name

    def insert_one(self, document: Dict[str, Any]) -> str:
        document = _ensure_document(document)
        session_factory = self.store._get_session_factory()
        with session_factory() as session:
            row = RequestDocument(
                database_name=self.database_name,
                collection_name=self.collection_name,
                document=document,
            )
            session.add(row)
            session.commit()
            return row.id

    def find_one(self, document_id: str) -> Optional[Dict[str, Any]]:
        session_factory = self.store._get_session_factory()
        with session_factory() as session:
            row = session.get(RequestDocument, document_id)
            if row is None or row.database_name != self.database_name or row.collection_name != self.collection_name:
                return None
            return dict(row.document)

    def count(self) -> int:
        session_factory = self.store._get_session_factory()
        with session_factory() as session:
            return session.query(RequestDocument).filter(
                RequestDocument.database_name == self.database_name,
                RequestDocument.collection_name == self.collection_name,
            ).count()


class MongoDocumentStore(DocumentStore):
    backend = "mongodb"

    def __init__(self, url: Optional[str] = None, client=None):
        self.url = url
        self._client = client
        self._lock = threading.Lock()

    def _get_client(self):
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is None:
                self._client = MongoClient(self.url)
                logger.info("MongoDB client created")
        return self._client

    def collection(self, database_name: str, collection_name: str) -> "MongoDocumentCollection":
        return MongoDocumentCollection(self._get_client()[database_name][collection_name])

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None


class MongoDocumentCollection(DocumentCollection):
    def __init__(self, collection):
        self._collection = collection

    def insert_one(self, document: Dict[str, Any]) -> str:
        # insert_one adds _id to the dict it is given
        document = copy.deepcopy(_ensure_document(document))
        result = self._collection.insert_one(document)
        return str(result.inserted_id)

    def find_one(self, document_id: str) -> Optional[Dict[str, Any]]:
        if not ObjectId.is_valid(document_id):
            return None
        document = self._collection.find_one({"_id": ObjectId(document_id)})
        if document is None:
            return None
        document.pop("_id", None)
        return document

    def count(self) -> int:
        return self._collection.count_documents({})


def build_document_store(url: str) -> DocumentStore:
    if is_mongo_url(url):
        return MongoDocumentStore(url)
    return SqlDocumentStore(url)


_store: Optional[DocumentStore] = None
_store_lock = threading.Lock()


def get_document_store() -> DocumentStore:
    """Process-wide store, created on first call."""
    global _store
    if _store is not None:
        return _store
    with _store_lock:
        if _store is None:
            url = resolve_database_url(settings.DATABASE_URL)
            _store = build_document_store(url)
            logger.info(f"Document store initialized: backend={_store.backend}")
    return _store


def close_document_store() -> None:
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None
