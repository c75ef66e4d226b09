"""
Recall - spaced-repetition scheduling for flashcard decks.

Subpackages:
- recall.scheduling: the scheduling engine and its two algorithms
- recall.storage: decks, the deck store and the persisted document
- recall.migrations: upgrades for older persisted documents
"""

__version__ = "0.3.0"
