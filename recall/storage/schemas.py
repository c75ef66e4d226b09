"""
Pydantic models for the persisted recall document.

Shape of the document (JSON):
    {
      "settings": {...},          opaque, see recall.config.RecallSettings
      "decks": [DeckJson, ...],
      "schemaVersion": 2
    }

Field names are camelCase on disk and snake_case in Python.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from recall.migrations import LEGACY_SCHEMA_VERSION
from recall.scheduling.constants import CardState, CardType
from recall.time_utils import ensure_utc, utc_now


DATE_STRING_FORMAT = "%a %b %d %Y"


# ---- Cards ----

class CardJson(BaseModel):
    """A card as stored inside a deck. The id is the key in `DeckJson.cards`."""
    type: CardType = Field(default=CardType.BASIC, description="Kind of card content")
    content: dict[str, Any] = Field(default_factory=dict, description="Type-specific payload")
    state: CardState = Field(default=CardState.NEW, description="Lifecycle state")
    iteration: int = Field(default=0, ge=0, description="Number of reviews")
    last_review_date: Optional[datetime] = Field(default=None, alias="lastReviewDate")
    next_review_date: Optional[datetime] = Field(default=None, alias="nextReviewDate")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Algorithm-owned state")

    class Config:
        populate_by_name = True
        # Fields written by other versions are kept and written back
        extra = "allow"

    @field_validator("last_review_date", "next_review_date")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        # Unscheduled dates are left out rather than written as null
        for key in ("lastReviewDate", "nextReviewDate"):
            if data[key] is None:
                del data[key]
        return data


# ---- Decks ----

class DeckJson(BaseModel):
    """A deck and its cards."""
    id: str
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")
    cards: dict[str, CardJson] = Field(default_factory=dict)

    class Config:
        populate_by_name = True
        extra = "allow"

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_date_string(cls, value: Any) -> Any:
        # Older documents stored dates like "Fri Mar 01 2024"
        if isinstance(value, str):
            try:
                return datetime.strptime(value, DATE_STRING_FORMAT).replace(tzinfo=timezone.utc)
            except ValueError:
                return value
        return value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def to_json(self) -> dict[str, Any]:
        return {
            **(self.model_extra or {}),
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "cards": {card_id: card.to_json() for card_id, card in self.cards.items()},
        }


# ---- Document ----

class PersistedSchema(BaseModel):
    """The whole persisted document."""
    settings: dict[str, Any] = Field(default_factory=dict)
    decks: list[DeckJson] = Field(default_factory=list)
    schema_version: int = Field(default=LEGACY_SCHEMA_VERSION, alias="schemaVersion")

    class Config:
        populate_by_name = True
        extra = "allow"

    def to_json(self) -> dict[str, Any]:
        return {
            **(self.model_extra or {}),
            "settings": self.settings,
            "decks": [deck.to_json() for deck in self.decks],
            "schemaVersion": self.schema_version,
        }
