"""
Request document model - stores submitted vendor / purchase requests as JSON documents.
"""
import uuid

from sqlalchemy import Column, String, DateTime, JSON, Index, func

from database import Base


def _generate_id() -> str:
    return uuid.uuid4().hex


class RequestDocument(Base):
    """
    One stored document. database_name / collection_name keep the
    document-store addressing (e.g. vendor_management.requests) on a
    relational backend.
    """

    __tablename__ = "request_documents"

    id = Column(String(32), primary_key=True, default=_generate_id)
    database_name = Column(String(128), nullable=False)
    collection_name = Column(String(128), nullable=False)
    document = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        Index("idx_request_documents_namespace", "database_name", "collection_name"),
    )
