"""
Configuration

Environment (loaded from .env with python-dotenv):
- RECALL_DATA_FILE: JSON document path (default data/recall.json)
- DATABASE_URL: when set, the document is stored in this SQL database
- TEST_MODE: "true" switches to the test database / test data file
- RECALL_DOCUMENT_KEY: row key of the SQL document (default "default")
- LOG_LEVEL, LOG_FORMAT: see recall.logging_utils

Persisted settings live in the document's `settings` section;
RecallSettings is the typed view of it used to build an engine.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from recall.scheduling.constants import SchedulingAlgorithm
from recall.scheduling.engine import Clock, SchedulingEngine
from recall.scheduling.registry import build_engine
from recall.storage.persistence import (
    DocumentPersistence,
    JsonFilePersistence,
    SqlDocumentPersistence
)

load_dotenv()


DEFAULT_DATA_FILE = "data/recall.json"
DEFAULT_DOCUMENT_KEY = "default"


# ---- Environment ----

def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_data_file() -> Path:
    """
    Path of the JSON document.

    In test mode the file name gets a "test_" prefix so real data is never
    touched.
    """
    path = Path(os.getenv("RECALL_DATA_FILE", DEFAULT_DATA_FILE))
    if is_test_mode():
        return path.with_name(f"test_{path.name}")
    return path


def get_database_url() -> Optional[str]:
    """
    Get the database URL from environment variables.

    For test mode, replaces 'recall_db' with 'test_recall_db' in the
    connection string.

    Returns:
        Database URL, or None when the JSON file backend should be used
    """
    base_url = os.getenv("DATABASE_URL")
    if not base_url:
        return None

    if is_test_mode():
        return base_url.replace("recall_db", "test_recall_db")
    return base_url


def get_document_key() -> str:
    return os.getenv("RECALL_DOCUMENT_KEY", DEFAULT_DOCUMENT_KEY)


def build_persistence() -> DocumentPersistence:
    """Pick the document backend from the environment."""
    db_url = get_database_url()
    if db_url:
        return SqlDocumentPersistence(db_url, key=get_document_key())
    return JsonFilePersistence(get_data_file())


# ---- Persisted settings ----

class RecallSettings(BaseModel):
    """
    Typed view of the persisted `settings` section.

    Parameter dicts hold partial overrides keyed by the parameter dataclass
    field names (e.g. {"easy_bonus": 1.5}). Keys this model does not know
    about are kept.
    """
    scheduling_algorithm: SchedulingAlgorithm = Field(
        default=SchedulingAlgorithm.ANKI,
        alias="schedulingAlgorithm",
        description="Active scheduling algorithm"
    )
    step_parameters: dict[str, Any] = Field(
        default_factory=dict,
        alias="stepParameters",
        description="StepScheduler parameter overrides"
    )
    memory_model_parameters: dict[str, Any] = Field(
        default_factory=dict,
        alias="memoryModelParameters",
        description="MemoryModelScheduler parameter overrides"
    )

    class Config:
        populate_by_name = True
        extra = "allow"

    @classmethod
    def from_section(cls, section: Optional[dict[str, Any]]) -> "RecallSettings":
        return cls.model_validate(section or {})

    def to_section(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def build_engine(self, clock: Optional[Clock] = None) -> SchedulingEngine:
        return build_engine(self, clock=clock)
