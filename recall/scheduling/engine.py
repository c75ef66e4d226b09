"""
Scheduling Engine - Algorithm Contract

Owns the item collection, the due queue and the review-session boundary.
Concrete algorithms implement the abstract methods; everything about which
cards are due and in what order they are served lives here.

Session flow:
1. start_new_session() captures the end of the current local day and rebuilds
   the queue from every known item
2. get_next_review_item() serves the queue in FIFO order
3. update_item_after_review() mutates the card and re-queues it if it is
   due again before the session ends
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, replace
from datetime import datetime, tzinfo
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from recall.scheduling.card import CardRecord
from recall.scheduling.constants import CardState, PerformanceResponse
from recall.time_utils import end_of_day, utc_now


P = TypeVar("P")

Clock = Callable[[], datetime]


class SchedulingEngine(ABC, Generic[P]):
    """
    Base class for every scheduling algorithm.

    The queue is appended to, never re-sorted: order is insertion order, so
    short-interval learning cards come back in the order their reschedule
    completed rather than by absolute due time.
    """

    def __init__(
        self,
        parameters: Optional[Mapping[str, Any]] = None,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None
    ):
        """
        Args:
            parameters: Partial overrides of get_default_values()
            clock: Callable returning the current UTC time (defaults to utc_now)
            tz: Zone whose calendar day bounds a session (defaults to local time)
        """
        self.clock: Clock = clock or utc_now
        self.tz = tz
        self.items: list[CardRecord] = []
        self.queued_items: list[CardRecord] = []
        self.session_end_time: datetime = end_of_day(self.clock(), self.tz)
        self.parameters: P = self.get_default_values()
        if parameters:
            self.parameters = replace(self.parameters, **dict(parameters))

    # ---- Algorithm contract ----

    @abstractmethod
    def get_default_values(self) -> P:
        """Algorithm-supplied default parameters."""

    @abstractmethod
    def create_new_card(self, card_id: str, content: dict[str, Any]) -> CardRecord:
        """
        Build a NEW card with algorithm-appropriate metadata and its initial
        schedule. The card is not added to the engine.
        """

    @abstractmethod
    def schedule_review(self, item: CardRecord) -> None:
        """
        Recompute next_review_date (and state where the algorithm requires)
        from the item's current data, then queue it if due this session.
        """

    @abstractmethod
    def map_performance_response(self, response: PerformanceResponse) -> Any:
        """Translate a universal rating into the algorithm's native rating."""

    @abstractmethod
    def calculate_potential_next_review_date(
        self,
        item: CardRecord,
        response: PerformanceResponse
    ) -> datetime:
        """
        Preview the next_review_date a rating would produce.

        Must not mutate `item` or any engine state.
        """

    @abstractmethod
    def update_item_after_review(
        self,
        item: CardRecord,
        response: PerformanceResponse
    ) -> None:
        """Apply a review to `item` and reschedule it."""

    # ---- Item collection ----

    def add_item(self, item: CardRecord) -> None:
        self.items.append(item)
        self.schedule_review(item)

    def remove_item(self, item: CardRecord) -> None:
        """Remove by id. Unknown items are ignored."""
        for index, existing in enumerate(self.items):
            if existing.id == item.id:
                del self.items[index]
                return

    def reset_items(self) -> None:
        """Forget every item (used when switching algorithms or decks)."""
        self.items = []

    def get_item_count(self) -> int:
        return len(self.items)

    # ---- Session and queue ----

    def start_new_session(self) -> None:
        self.session_end_time = end_of_day(self.clock(), self.tz)
        self.queued_items = []
        self.refresh_queue()

    def get_next_review_item(self) -> Optional[CardRecord]:
        """
        Pop the head of the queue.

        Returns:
            The next card, or None once the queue is exhausted
        """
        if not self.queued_items:
            return None
        return self.queued_items.pop(0)

    @property
    def queued_count(self) -> int:
        return len(self.queued_items)

    def is_due_today(self, item: CardRecord) -> bool:
        """
        A card is due when it is NEW, or its next review falls at or before
        the end of the session day (overdue cards included).
        """
        if item.state == CardState.NEW:
            return True
        return item.next_review_date is not None and item.next_review_date <= self.session_end_time

    def refresh_queue(self) -> None:
        for item in self.items:
            self.add_to_queue_if_due_today(item)

    def add_to_queue_if_due_today(self, item: CardRecord) -> None:
        if not self.is_due_today(item):
            return
        if any(queued.id == item.id for queued in self.queued_items):
            return
        self.queued_items.append(item)

    # ---- Parameters ----

    def get_parameters(self) -> P:
        return self.parameters

    def get_parameters_dict(self) -> dict[str, Any]:
        """Parameters as a plain dict (for persisting into settings)."""
        return asdict(self.parameters)

    def set_parameters(self, parameters: Mapping[str, Any]) -> None:
        """
        Merge partial overrides into the current parameters.

        Already-scheduled next_review_date values are left as they are.

        Raises:
            TypeError: If a key is not a parameter of this algorithm
        """
        self.parameters = replace(self.parameters, **dict(parameters))
