"""
Memory-Model Scheduler - FSRS

Continuous memory-state scheduling on top of the fsrs library.

Each card's memory state lives in an internal map keyed by card id, separate
from the CardRecord. After every change the state's fields are copied onto
the record (metadata, state, dates) so the record can be persisted.

Review workflow:
1. Look up the card's memory state (missing -> warn and do nothing)
2. Compute the four candidate next states, one per native rating, at "now"
3. Keep the candidate for the mapped rating and sync it onto the record
4. Re-evaluate queue membership

Previews run step 2 only, so they never mutate anything.
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Any, Mapping, Optional

from fsrs import Rating, Scheduler

from recall.errors import InvalidParametersError, UnsupportedRatingError
from recall.logging_utils import get_logger
from recall.scheduling.card import CardRecord
from recall.scheduling.constants import MANUAL_RATING, CardType, PerformanceResponse
from recall.scheduling.engine import Clock, SchedulingEngine
from recall.scheduling.memory_state import MemoryState
from recall.scheduling.parameters import MemoryModelParameters


LOG = get_logger()


NATIVE_RATINGS: dict[PerformanceResponse, Rating] = {
    PerformanceResponse.AGAIN: Rating.Again,
    PerformanceResponse.HARD: Rating.Hard,
    PerformanceResponse.GOOD: Rating.Good,
    PerformanceResponse.EASY: Rating.Easy,
}


def native_rating(value: Any) -> Rating:
    """
    Validate a native rating value.

    Raises:
        UnsupportedRatingError: For the manual rating or anything outside
            Again..Easy
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise UnsupportedRatingError(f"Unsupported native rating: {value!r}") from None
    if number == MANUAL_RATING:
        raise UnsupportedRatingError("The manual rating cannot be applied as a review")
    try:
        return Rating(number)
    except ValueError:
        raise UnsupportedRatingError(f"Unsupported native rating: {value!r}") from None


def build_library_scheduler(parameters: MemoryModelParameters) -> Scheduler:
    """
    Create the fsrs scheduler for a parameter set.

    Raises:
        InvalidParametersError: The library rejected the parameters
    """
    if parameters.enable_short_term:
        learning_steps = tuple(timedelta(minutes=m) for m in parameters.learning_steps)
        relearning_steps = tuple(timedelta(minutes=m) for m in parameters.relearning_steps)
    else:
        learning_steps = ()
        relearning_steps = ()

    kwargs: dict[str, Any] = {
        "desired_retention": parameters.request_retention,
        "learning_steps": learning_steps,
        "relearning_steps": relearning_steps,
        "maximum_interval": parameters.maximum_interval,
        "enable_fuzzing": parameters.enable_fuzz,
    }
    if parameters.w is not None:
        kwargs["parameters"] = parameters.w
    try:
        return Scheduler(**kwargs)
    except ValueError as exc:
        raise InvalidParametersError(str(exc)) from exc


class MemoryModelScheduler(SchedulingEngine[MemoryModelParameters]):
    """Scheduler driven by the FSRS stability/difficulty model."""

    def __init__(
        self,
        parameters: Optional[Mapping[str, Any]] = None,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None
    ):
        super().__init__(parameters, clock, tz)
        self.memory_states: dict[str, MemoryState] = {}
        self._scheduler = build_library_scheduler(self.parameters)

    def get_default_values(self) -> MemoryModelParameters:
        return MemoryModelParameters(w=tuple(Scheduler().parameters))

    def set_parameters(self, parameters: Mapping[str, Any]) -> None:
        previous = self.parameters
        super().set_parameters(parameters)
        try:
            self._scheduler = build_library_scheduler(self.parameters)
        except InvalidParametersError:
            self.parameters = previous
            raise

    def remove_item(self, item: CardRecord) -> None:
        super().remove_item(item)
        self.memory_states.pop(item.id, None)

    def reset_items(self) -> None:
        """Forget every item and every memory state, added or not."""
        super().reset_items()
        self.memory_states = {}

    def get_memory_state(self, card_id: str) -> Optional[MemoryState]:
        return self.memory_states.get(card_id)

    def create_new_card(self, card_id: str, content: dict[str, Any]) -> CardRecord:
        memory = MemoryState.empty(card_id, self.clock())
        item = CardRecord(id=card_id, type=CardType.BASIC, content=content)

        self.memory_states[card_id] = memory
        self._sync_from_memory(item, memory)
        return item

    def schedule_review(self, item: CardRecord) -> None:
        memory = self.memory_states.get(item.id)
        if memory is None:
            memory = MemoryState.from_record(item, self.clock())
            self.memory_states[item.id] = memory
            self._sync_from_memory(item, memory)

        item.next_review_date = memory.card.due
        self.add_to_queue_if_due_today(item)

    def map_performance_response(self, response: PerformanceResponse) -> Rating:
        try:
            universal = PerformanceResponse(response)
        except ValueError:
            raise UnsupportedRatingError(f"Unsupported rating: {response!r}") from None
        return native_rating(NATIVE_RATINGS[universal])

    def update_item_after_review(
        self,
        item: CardRecord,
        response: PerformanceResponse
    ) -> None:
        memory = self.memory_states.get(item.id)
        if memory is None:
            LOG.warning(
                "memory_state_missing",
                extra={"card_id": item.id, "detail": "card reviewed before it was created or added"},
            )
            return

        rating = self.map_performance_response(response)
        now = self.clock()
        updated = self._candidates(memory, now)[rating]

        self.memory_states[item.id] = updated
        item.last_review_date = now
        self._sync_from_memory(item, updated)
        item.iteration += 1

        self.schedule_review(item)

    def calculate_potential_next_review_date(
        self,
        item: CardRecord,
        response: PerformanceResponse
    ) -> datetime:
        rating = self.map_performance_response(response)

        memory = self.memory_states.get(item.id)
        if memory is None:
            return item.next_review_date or self.clock()

        return self._candidates(memory, self.clock())[rating].card.due

    # ---- Helpers ----

    def _candidates(self, memory: MemoryState, now: datetime) -> dict[Rating, MemoryState]:
        """Next memory state for each of the four native ratings."""
        return {rating: memory.reviewed(self._scheduler, rating, now) for rating in NATIVE_RATINGS.values()}

    @staticmethod
    def _sync_from_memory(item: CardRecord, memory: MemoryState) -> None:
        item.next_review_date = memory.card.due
        if memory.card.last_review is not None:
            item.last_review_date = memory.card.last_review
        item.state = memory.card_state
        item.metadata = memory.to_metadata()
