"""
Card Record

The reviewable unit and its lifecycle state.

`metadata` belongs to whichever algorithm created the record through its
create_new_card factory. The engine base class and the deck store never
read or write its contents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from recall.scheduling.constants import CardState, CardType


@dataclass
class CardRecord:
    """
    A single flashcard and its scheduling state.

    `next_review_date` is None only for a NEW card that has not been
    scheduled yet.
    """
    id: str
    content: dict[str, Any]  # {"front": ..., "back": ...} for BASIC cards
    type: CardType = CardType.BASIC
    state: CardState = CardState.NEW

    # Review tracking
    iteration: int = 0  # number of reviews, only ever increases
    last_review_date: Optional[datetime] = None
    next_review_date: Optional[datetime] = None

    # Algorithm-private scheduling state
    metadata: dict[str, Any] = field(default_factory=dict)

    # Stored fields this version does not read, written back unchanged
    extra: dict[str, Any] = field(default_factory=dict)


def basic_content(front: str, back: str) -> dict[str, str]:
    """Content payload for a BASIC card."""
    return {"front": front, "back": back}
