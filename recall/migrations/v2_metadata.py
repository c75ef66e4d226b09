"""
v1 -> v2: move step-scheduler fields into the metadata bag.

Version 1 cards carried the step scheduler's easeFactor, interval and
stepIndex at the top level. Version 2 keeps algorithm state in `metadata`
so that more than one algorithm can own a card.

Records that do not look like v1 cards are left exactly as they are.
"""

from __future__ import annotations

from typing import Any

LEGACY_FIELDS = ("easeFactor", "interval", "stepIndex")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_legacy_card(record: Any) -> bool:
    """True for a card record with numeric top-level scheduling fields."""
    if not isinstance(record, dict):
        return False
    if not _is_number(record.get("type")):
        return False
    return all(_is_number(record.get(key)) for key in LEGACY_FIELDS)


def migrate_card(record: dict[str, Any]) -> dict[str, Any]:
    migrated = {key: value for key, value in record.items() if key not in LEGACY_FIELDS}
    migrated["iteration"] = record.get("iteration") or 0
    migrated["metadata"] = {key: record[key] for key in LEGACY_FIELDS}
    return migrated


def migrate_to_v2(data: dict[str, Any]) -> None:
    for deck in data.get("decks") or []:
        if not isinstance(deck, dict):
            continue
        cards = deck.get("cards")
        if not isinstance(cards, dict):
            continue

        deck["cards"] = {
            card_id: migrate_card(record) if is_legacy_card(record) else record
            for card_id, record in cards.items()
        }
