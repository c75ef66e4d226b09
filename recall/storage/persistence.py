"""
Persistence - Document Read/Write Backends

Both backends store the whole document and hand it back as decoded JSON
(plain dicts). Keys inside `settings` and card `metadata` are never
interpreted here.

Errors (OSError, json.JSONDecodeError, SQLAlchemy errors) propagate to the
caller unchanged.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from recall.logging_utils import get_logger
from recall.storage.models import Base, StoredDocument
from recall.time_utils import utc_now


LOG = get_logger()


class DocumentPersistence(Protocol):
    """Read whole document / write whole document."""

    def read(self) -> Optional[dict[str, Any]]:
        """The stored document, or None if nothing has been written yet."""

    def write(self, document: dict[str, Any]) -> None:
        """Replace the stored document."""


# ---- JSON file ----

class JsonFilePersistence:
    """Document stored as a JSON file, replaced atomically on write."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        LOG.debug("document_read", extra={"path": str(self.path)})
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def write(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write next to the target, then rename over it
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        LOG.debug("document_written", extra={"path": str(self.path)})


# ---- SQL ----

def create_document_engine(db_url: str) -> Engine:
    """
    SQLAlchemy engine for the document store.

    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)
    return create_engine(
        db_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


class SqlDocumentPersistence:
    """Document stored as a single row of the `recall_document` table."""

    def __init__(self, db_url: str, key: str = "default"):
        self.key = key
        self.engine = create_document_engine(db_url)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

        # Safe to call repeatedly - only creates missing tables
        Base.metadata.create_all(self.engine)

    def _session(self) -> Session:
        return self._sessions()

    def read(self) -> Optional[dict[str, Any]]:
        session = self._session()
        try:
            row = session.get(StoredDocument, self.key)
            if row is None:
                return None
            LOG.debug("document_read", extra={"key": self.key})
            return json.loads(row.payload)
        finally:
            session.close()

    def write(self, document: dict[str, Any]) -> None:
        payload = json.dumps(document, ensure_ascii=False)

        session = self._session()
        try:
            row = session.get(StoredDocument, self.key)
            if row is None:
                session.add(StoredDocument(key=self.key, payload=payload, updated_at=utc_now()))
            else:
                row.payload = payload
                row.updated_at = utc_now()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        LOG.debug("document_written", extra={"key": self.key})


# ---- In memory ----

class MemoryPersistence:
    """Document held in memory, for throwaway stores and tests."""

    def __init__(self, document: Optional[dict[str, Any]] = None):
        self.document = document
        self.writes = 0

    def read(self) -> Optional[dict[str, Any]]:
        return json.loads(json.dumps(self.document)) if self.document is not None else None

    def write(self, document: dict[str, Any]) -> None:
        # Round-trip through JSON so stored data never aliases live objects
        self.document = json.loads(json.dumps(document))
        self.writes += 1
