"""
Dependencies for FastAPI routes.
"""
from Request_module.Request_store import DocumentStore, get_document_store


def get_store() -> DocumentStore:
    """
    Document store dependency.
    Returns the process-wide store; its connection is opened lazily and reused.
    """
    return get_document_store()
