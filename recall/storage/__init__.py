"""
Storage - Decks and the Persisted Document

Quick start:
    from recall.storage import DeckStore, JsonFilePersistence
    from recall.scheduling import StepScheduler

    store = DeckStore(JsonFilePersistence("data/recall.json"), StepScheduler())
    store.load()
    deck = store.create("Dutch", "Everyday vocabulary")
"""

from recall.storage.deck import Deck, default_deck_json
from recall.storage.deck_store import DeckCounts, DeckStore, is_valid_deck_name
from recall.storage.persistence import (
    DocumentPersistence,
    JsonFilePersistence,
    MemoryPersistence,
    SqlDocumentPersistence
)
from recall.storage.schemas import CardJson, DeckJson, PersistedSchema


__all__ = [
    "Deck",
    "DeckCounts",
    "DeckStore",
    "default_deck_json",
    "is_valid_deck_name",

    # Persistence
    "DocumentPersistence",
    "JsonFilePersistence",
    "MemoryPersistence",
    "SqlDocumentPersistence",

    # Document schema
    "CardJson",
    "DeckJson",
    "PersistedSchema",
]
