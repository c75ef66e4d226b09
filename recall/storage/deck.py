"""
Deck - a named collection of cards.

Cards are keyed by id for direct lookup, update and delete. A deck owns its
cards; a card belongs to exactly one deck.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from recall.scheduling.card import CardRecord
from recall.scheduling.constants import CardState
from recall.scheduling.engine import SchedulingEngine
from recall.storage.schemas import CardJson, DeckJson
from recall.time_utils import utc_now


DEFAULT_DECK_NAME = "Default Deck"
DEFAULT_DECK_DESCRIPTION = "The default deck"


def new_deck_id() -> str:
    return str(uuid.uuid4())


def default_deck_json() -> dict[str, Any]:
    """Document for the deck created on first run."""
    now = utc_now().isoformat()
    return {
        "id": new_deck_id(),
        "name": DEFAULT_DECK_NAME,
        "description": DEFAULT_DECK_DESCRIPTION,
        "createdAt": now,
        "updatedAt": now,
        "cards": {},
    }


# ---- JSON conversion ----

def card_to_json(card: CardRecord) -> CardJson:
    return CardJson(
        type=card.type,
        content=card.content,
        state=card.state,
        iteration=card.iteration,
        last_review_date=card.last_review_date,
        next_review_date=card.next_review_date,
        metadata=card.metadata,
        **card.extra,
    )


def card_from_json(card_id: str, data: CardJson) -> CardRecord:
    return CardRecord(
        id=card_id,
        type=data.type,
        content=dict(data.content),
        state=data.state,
        iteration=data.iteration,
        last_review_date=data.last_review_date,
        next_review_date=data.next_review_date,
        metadata=dict(data.metadata),
        extra=dict(data.model_extra or {}),
    )


class Deck:
    """
    A deck and its cards.

    The engine is only consulted by `due_cards`, to decide which REVIEW
    cards are due in the engine's current session.
    """

    def __init__(
        self,
        engine: SchedulingEngine,
        name: str,
        description: str = "",
        id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        cards: Optional[dict[str, CardRecord]] = None,
        extra: Optional[dict[str, Any]] = None
    ):
        self.engine = engine
        self.id = id or new_deck_id()
        self._name = name
        self._description = description
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self.cards: dict[str, CardRecord] = cards if cards is not None else {}
        self.extra: dict[str, Any] = extra or {}

    def __repr__(self):
        return f"<Deck({self.id}, {self._name!r}, {len(self.cards)} cards)>"

    # ---- Information ----

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value
        self.updated_at = utc_now()

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, value: str) -> None:
        self._description = value
        self.updated_at = utc_now()

    # ---- Derived views ----

    @property
    def cards_array(self) -> list[CardRecord]:
        return list(self.cards.values())

    @property
    def new_cards(self) -> list[CardRecord]:
        return [card for card in self.cards.values() if card.state == CardState.NEW]

    @property
    def learn_cards(self) -> list[CardRecord]:
        return [
            card for card in self.cards.values()
            if card.state in (CardState.LEARNING, CardState.RELEARNING)
        ]

    @property
    def due_cards(self) -> list[CardRecord]:
        return [
            card for card in self.cards.values()
            if card.state == CardState.REVIEW and self.engine.is_due_today(card)
        ]

    # ---- Serialization ----

    def to_json_object(self) -> DeckJson:
        return DeckJson(
            id=self.id,
            name=self._name,
            description=self._description,
            created_at=self.created_at,
            updated_at=self.updated_at,
            cards={card_id: card_to_json(card) for card_id, card in self.cards.items()},
            **self.extra,
        )

    @classmethod
    def from_json(cls, engine: SchedulingEngine, data: DeckJson) -> "Deck":
        return cls(
            engine,
            data.name,
            data.description,
            id=data.id,
            created_at=data.created_at,
            updated_at=data.updated_at,
            cards={card_id: card_from_json(card_id, card) for card_id, card in data.cards.items()},
            extra=dict(data.model_extra or {}),
        )
