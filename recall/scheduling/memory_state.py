"""
Memory State - FSRS Card State for the Memory-Model Scheduler

Key concepts:
- Stability (S): How slowly memory decays (in days)
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Repetitions / lapses: counters the fsrs library card does not carry,
  tracked here so they survive in the card's metadata

The fsrs library has no NEW state: a fresh library card starts in Learning.
A memory state with zero repetitions is what this package calls NEW.
"""

from __future__ import annotations

import copy
import zlib
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from fsrs import Card, Rating, Scheduler, State

from recall.scheduling.card import CardRecord
from recall.scheduling.constants import CardState


# Index -> CardState for the 4-way state mapping (0 is NEW)
STATE_BY_INDEX = (
    CardState.NEW,
    CardState.LEARNING,
    CardState.REVIEW,
    CardState.RELEARNING,
)


def state_from_index(index: int) -> CardState:
    """Map a 0-3 state index onto CardState; unknown indices map to NEW."""
    if 0 <= index < len(STATE_BY_INDEX):
        return STATE_BY_INDEX[index]
    return CardState.NEW


def library_card_id(card_id: str) -> int:
    """fsrs expects an integer card id; derive a stable one from ours."""
    return zlib.crc32(card_id.encode("utf-8"))


def _library_state(value: Any) -> State:
    try:
        return State(int(value))
    except (TypeError, ValueError):
        return State.Learning


@dataclass
class MemoryState:
    """
    Memory state for a single card.

    Wraps the fsrs library card together with the counters we persist.
    """
    card: Card
    reps: int = 0  # reviews applied
    lapses: int = 0  # REVIEW -> RELEARNING transitions
    elapsed_days: int = 0  # days between the previous two reviews
    scheduled_days: int = 0  # days from the last review to the due date

    @classmethod
    def empty(cls, card_id: str, due: datetime) -> "MemoryState":
        """A never-reviewed card, due at `due`."""
        return cls(card=Card(card_id=library_card_id(card_id), state=State.Learning, step=0, due=due))

    @classmethod
    def from_record(cls, item: CardRecord, now: datetime) -> "MemoryState":
        """
        Rebuild a memory state from a record's metadata and dates.

        Used for cards loaded from storage. Records without a usable memory
        state in their metadata start over as empty cards.
        """
        meta = item.metadata
        reps = int(meta.get("reps", 0) or 0)
        if reps == 0 or meta.get("stability") is None or meta.get("difficulty") is None:
            return cls.empty(item.id, item.next_review_date or now)

        state = _library_state(meta.get("state"))
        step: Optional[int] = None
        if state in (State.Learning, State.Relearning):
            step = int(meta.get("step") or 0)

        card = Card(
            card_id=library_card_id(item.id),
            state=state,
            step=step,
            stability=float(meta["stability"]),
            difficulty=float(meta["difficulty"]),
            due=item.next_review_date or now,
            last_review=item.last_review_date,
        )
        return cls(
            card=card,
            reps=reps,
            lapses=int(meta.get("lapses", 0) or 0),
            elapsed_days=int(meta.get("elapsed_days", 0) or 0),
            scheduled_days=int(meta.get("scheduled_days", 0) or 0),
        )

    @property
    def state_index(self) -> int:
        if self.reps == 0:
            return 0
        return int(self.card.state)

    @property
    def card_state(self) -> CardState:
        return state_from_index(self.state_index)

    def reviewed(self, scheduler: Scheduler, rating: Rating, now: datetime) -> "MemoryState":
        """
        The memory state after reviewing with `rating` at `now`.

        Pure: this state and its library card are left untouched.
        """
        updated, _ = scheduler.review_card(copy.deepcopy(self.card), rating, review_datetime=now)

        lapsed = rating == Rating.Again and self.card.state == State.Review and self.reps > 0
        elapsed = (now - self.card.last_review).days if self.card.last_review else 0

        return MemoryState(
            card=updated,
            reps=self.reps + 1,
            lapses=self.lapses + (1 if lapsed else 0),
            elapsed_days=max(0, elapsed),
            scheduled_days=max(0, (updated.due - now).days),
        )

    def to_metadata(self) -> dict[str, Any]:
        """Fields copied onto the card record's metadata bag."""
        return {
            "stability": self.card.stability,
            "difficulty": self.card.difficulty,
            "state": int(self.card.state),
            "step": self.card.step,
            "elapsed_days": self.elapsed_days,
            "scheduled_days": self.scheduled_days,
            "reps": self.reps,
            "lapses": self.lapses,
        }
