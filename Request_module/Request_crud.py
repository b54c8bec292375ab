import logging
from typing import Any, Dict

from config import settings
from .Request_store import DocumentStore

logger = logging.getLogger(__name__)


def insert_request_document(store: DocumentStore, document: Dict[str, Any]) -> str:
    """Insert one request document into the configured collection and return its id."""
    collection = store.collection(settings.REQUEST_DATABASE_NAME, settings.REQUEST_COLLECTION_NAME)
    inserted_id = collection.insert_one(document)
    logger.info(
        f"Request stored: id={inserted_id}, "
        f"collection={settings.REQUEST_DATABASE_NAME}.{settings.REQUEST_COLLECTION_NAME}"
    )
    return inserted_id
