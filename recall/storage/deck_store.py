"""
Deck Store - Deck and Card Management

Holds every deck in memory, persists them as one document through a
DocumentPersistence backend, and keeps them in step with the injected
SchedulingEngine.

Deck-level operations (create, update_information, delete, reset) save
immediately. Card operations (add_card, update_card_content, remove_card)
only mutate memory; call save() when a batch of edits is done.

Callers must not run two save() calls on the same store concurrently: each
writes the whole document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from recall.errors import (
    CardNotFoundError,
    DeckNotFoundError,
    DuplicateDeckNameError,
    InvalidDeckNameError
)
from recall.logging_utils import get_logger
from recall.migrations import CURRENT_SCHEMA_VERSION, run_migrations
from recall.scheduling.card import CardRecord
from recall.scheduling.constants import CardState
from recall.scheduling.engine import SchedulingEngine
from recall.storage.deck import Deck, default_deck_json
from recall.storage.persistence import DocumentPersistence
from recall.storage.schemas import PersistedSchema


LOG = get_logger()


# ---- Deck name validation ----

MAX_DECK_NAME_LENGTH = 255
INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1F]')


def is_valid_deck_name(name: str) -> bool:
    """Deck names must be usable as file names."""
    if not name:
        return False
    if len(name) > MAX_DECK_NAME_LENGTH:
        return False
    if INVALID_NAME_CHARS.search(name):
        return False
    if name.endswith("."):
        return False
    return True


def empty_document(with_default_deck: bool = False) -> dict[str, Any]:
    return {
        "settings": {},
        "decks": [default_deck_json()] if with_default_deck else [],
        "schemaVersion": CURRENT_SCHEMA_VERSION,
    }


@dataclass(frozen=True)
class DeckCounts:
    """Card counts shown next to a deck."""
    new: int
    learn: int
    due: int


class DeckStore:
    """
    All decks, their persistence and the engine they are scheduled with.
    """

    def __init__(self, persistence: DocumentPersistence, engine: SchedulingEngine):
        """
        Args:
            persistence: Whole-document read/write backend
            engine: Active scheduling engine; swap it with set_engine()
        """
        self.persistence = persistence
        self.engine = engine
        self.decks: dict[str, Deck] = {}
        self.settings: dict[str, Any] = {}
        self.extra: dict[str, Any] = {}

    # ---- Load / save ----

    def load(self, create_default_deck: bool = False) -> None:
        """
        Read the document, migrating it first if it is out of date.

        A missing document is created (optionally with a default deck).
        Created or migrated documents are saved straight away.

        Args:
            create_default_deck: Seed a new document with "Default Deck"
        """
        raw = self.persistence.read()
        created = raw is None
        if created:
            raw = empty_document(with_default_deck=create_default_deck)

        migrated = run_migrations(raw)
        document = PersistedSchema.model_validate(raw)

        self.settings = dict(document.settings)
        self.extra = dict(document.model_extra or {})
        self.decks = {deck.id: Deck.from_json(self.engine, deck) for deck in document.decks}

        if created or migrated:
            self.save()

    def save(self) -> None:
        document = PersistedSchema(
            **self.extra,
            settings=self.settings,
            decks=[deck.to_json_object() for deck in self.decks.values()],
            schema_version=CURRENT_SCHEMA_VERSION,
        )
        self.persistence.write(document.to_json())

    # ---- Decks ----

    def create(self, name: str, description: str) -> Deck:
        """
        Create and persist a new deck.

        Raises:
            InvalidDeckNameError: Empty, too long, reserved characters, or trailing "."
            DuplicateDeckNameError: Another deck already has this name
        """
        name = name.strip()
        if not is_valid_deck_name(name):
            raise InvalidDeckNameError(name)

        if any(deck.name == name for deck in self.decks.values()):
            raise DuplicateDeckNameError(name)

        deck = Deck(self.engine, name, description)
        self.decks[deck.id] = deck
        LOG.info("deck_created", extra={"deck_id": deck.id, "deck_name": name})

        self.save()
        return deck

    def update_information(self, deck_id: str, name: str, description: str) -> Deck:
        """
        Rename a deck and replace its description.

        Raises:
            InvalidDeckNameError: The new name is not valid
            DeckNotFoundError: No deck has this id
            DuplicateDeckNameError: Another deck already has this name
        """
        name = name.strip()
        if not is_valid_deck_name(name):
            raise InvalidDeckNameError(name)

        if deck_id not in self.decks:
            raise DeckNotFoundError(f"Deck does not exist: {deck_id}", deck_id)

        if any(other.name == name for other_id, other in self.decks.items() if other_id != deck_id):
            raise DuplicateDeckNameError(name)

        deck = self.decks[deck_id]
        deck.name = name
        deck.description = description
        LOG.info("deck_updated", extra={"deck_id": deck_id, "deck_name": name})

        self.save()
        return deck

    def delete(self, deck_id: str) -> None:
        if deck_id not in self.decks:
            raise DeckNotFoundError(f"Deck does not exist: {deck_id}", deck_id)

        del self.decks[deck_id]
        LOG.info("deck_deleted", extra={"deck_id": deck_id})
        self.save()

    def get_deck(self, deck_id: str) -> Deck:
        if deck_id not in self.decks:
            raise DeckNotFoundError(f"No deck with id found: {deck_id}", deck_id)
        return self.decks[deck_id]

    def get_decks(self) -> dict[str, Deck]:
        return self.decks

    @property
    def decks_array(self) -> list[Deck]:
        return list(self.decks.values())

    def get_counts(self, deck_id: str) -> DeckCounts:
        deck = self.get_deck(deck_id)
        return DeckCounts(
            new=len(deck.new_cards),
            learn=len(deck.learn_cards),
            due=len(deck.due_cards),
        )

    # ---- Cards ----

    def add_card(self, deck_id: str, card: CardRecord) -> None:
        self.get_deck(deck_id).cards[card.id] = card

    def update_card_content(self, deck_id: str, card: CardRecord) -> None:
        deck = self.get_deck(deck_id)
        if card.id not in deck.cards:
            raise CardNotFoundError(deck_id, card.id)
        deck.cards[card.id] = card

    def remove_card(self, deck_id: str, card_id: str) -> None:
        deck = self.get_deck(deck_id)
        if card_id not in deck.cards:
            raise CardNotFoundError(deck_id, card_id)
        del deck.cards[card_id]

    # ---- Algorithm switch ----

    def reset_cards_for_algorithm_switch(self) -> None:
        """
        Re-create every card through the active engine.

        Only id and content survive; scheduling state starts over as NEW.
        """
        count = 0
        for deck in self.decks.values():
            for card in list(deck.cards.values()):
                card.state = CardState.NEW
                card.iteration = 0
                card.last_review_date = None
                card.next_review_date = None
                card.metadata = {}

                deck.cards[card.id] = self.engine.create_new_card(card.id, card.content)
                count += 1

        LOG.info("cards_reset", extra={"engine": type(self.engine).__name__, "card_count": count})
        self.save()

    def set_engine(self, engine: SchedulingEngine) -> None:
        """Swap the active engine and reset every card for it."""
        self.engine = engine
        for deck in self.decks.values():
            deck.engine = engine
        self.reset_cards_for_algorithm_switch()

    # ---- Review ----

    def prepare_review_session(self, deck_id: str) -> int:
        """
        Load a deck's cards into the engine and start a new session.

        Returns:
            Number of cards queued for the session
        """
        deck = self.get_deck(deck_id)

        self.engine.reset_items()
        for card in deck.cards_array:
            self.engine.add_item(card)
        self.engine.start_new_session()

        return self.engine.queued_count
