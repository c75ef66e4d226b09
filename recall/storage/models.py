"""
SQLAlchemy ORM Models for the Document Store

The whole recall document is kept as one JSON text row, so reads and
writes are always whole-document.
"""

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class StoredDocument(Base):
    """
    One persisted recall document (settings, decks, schemaVersion).
    """
    __tablename__ = 'recall_document'

    key = Column(String(255), primary_key=True, nullable=False)
    payload = Column(Text, nullable=False)  # JSON-encoded document
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<StoredDocument({self.key})>"
