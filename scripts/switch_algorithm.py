"""
Switch the scheduling algorithm.

DANGEROUS: every card's scheduling state (intervals, ease, stability,
review counts) is reset. Card content is kept.

Usage:
    python -m scripts.switch_algorithm fsrs
    python -m scripts.switch_algorithm anki --yes

Uses DATABASE_URL / RECALL_DATA_FILE (and TEST_MODE) from the environment.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from recall.config import RecallSettings, build_persistence
from recall.scheduling.constants import SchedulingAlgorithm
from recall.storage.deck_store import DeckStore
from recall.storage.persistence import DocumentPersistence


def switch_algorithm(persistence: DocumentPersistence, algorithm: SchedulingAlgorithm) -> DeckStore:
    """
    Record `algorithm` in the settings and reset every card for it.

    Returns:
        The store, loaded with the new engine
    """
    store = DeckStore(persistence, RecallSettings().build_engine())
    store.load()

    settings = RecallSettings.from_section(store.settings)
    settings.scheduling_algorithm = algorithm
    store.settings = settings.to_section()

    store.set_engine(settings.build_engine())
    return store


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Switch scheduling algorithm and reset all cards")
    parser.add_argument("algorithm", choices=[a.value for a in SchedulingAlgorithm])
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args(argv)

    print("=" * 60)
    print(f"WARNING: Switch scheduling algorithm to '{args.algorithm}'")
    print("=" * 60)
    print()
    print("This will RESET every card's review progress:")
    print("  - State, review count and review dates")
    print("  - Algorithm metadata (ease, intervals, stability, ...)")
    print()

    if not args.yes:
        response = input("Are you sure you want to switch? (type 'yes' to confirm): ")
        if response.lower() != "yes":
            print("\nCancelled. No changes made.")
            return 1

    store = switch_algorithm(build_persistence(), SchedulingAlgorithm(args.algorithm))
    card_count = sum(len(deck.cards) for deck in store.decks_array)
    print(f"\n✓ Switched to {args.algorithm}; {card_count} cards reset across {len(store.decks)} decks")
    return 0


if __name__ == "__main__":
    sys.exit(main())
