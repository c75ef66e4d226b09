"""
Step Scheduler - SM-2 Style Algorithm

Ease factor, day intervals and minute-scale learning/relearning ladders,
in the manner of Anki's scheduler.

Rating effects (native rating == universal rating):
- AGAIN: ease drops by ease_factor_decrement; a REVIEW card lapses into
  RELEARNING; the ladder restarts; interval *= lapse_interval
- HARD:  ease drops by ease_factor_increment; inside a ladder the step
  advances; interval = max(interval * hard_multiplier, interval + 1)
- GOOD:  inside a ladder the step advances and the card graduates to REVIEW
  with graduating_interval once the ladder is exhausted; a REVIEW card gets
  interval = max(interval * ease, interval + 1)
- EASY:  ease grows by ease_factor_increment; a card in a ladder jumps to
  REVIEW with easy_interval; a REVIEW card gets interval * ease * easy_bonus
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from recall.errors import UnsupportedRatingError
from recall.scheduling import constants
from recall.scheduling.card import CardRecord
from recall.scheduling.constants import CardState, CardType, PerformanceResponse
from recall.scheduling.engine import SchedulingEngine
from recall.scheduling.parameters import StepParameters


LADDER_STATES = (CardState.LEARNING, CardState.RELEARNING)


@dataclass
class StepMetadata:
    """
    Typed view of the metadata bag owned by this scheduler.

    Keys match the ones the v2 migration moves out of legacy card records.
    """
    ease_factor: float = constants.DEFAULT_EASE_FACTOR
    interval: float = 0.0  # days
    step_index: int = 0

    @classmethod
    def from_metadata(cls, metadata: dict[str, Any]) -> "StepMetadata":
        return cls(
            ease_factor=metadata.get("easeFactor", constants.DEFAULT_EASE_FACTOR),
            interval=metadata.get("interval", 0.0),
            step_index=metadata.get("stepIndex", 0),
        )

    def to_metadata(self) -> dict[str, Any]:
        return {
            "easeFactor": self.ease_factor,
            "interval": self.interval,
            "stepIndex": self.step_index,
        }


class StepScheduler(SchedulingEngine[StepParameters]):
    """SM-2 style scheduler with learning and relearning ladders."""

    def get_default_values(self) -> StepParameters:
        return StepParameters()

    def create_new_card(self, card_id: str, content: dict[str, Any]) -> CardRecord:
        # NEW cards are due immediately
        return CardRecord(
            id=card_id,
            type=CardType.BASIC,
            content=content,
            state=CardState.NEW,
            iteration=0,
            next_review_date=self.clock(),
            metadata=StepMetadata().to_metadata(),
        )

    def map_performance_response(self, response: PerformanceResponse) -> PerformanceResponse:
        if not isinstance(response, PerformanceResponse):
            try:
                response = PerformanceResponse(response)
            except ValueError:
                raise UnsupportedRatingError(f"Unsupported rating: {response!r}") from None
        return response

    # ---- Review ----

    def update_item_after_review(
        self,
        item: CardRecord,
        response: PerformanceResponse
    ) -> None:
        rating = self.map_performance_response(response)
        meta = StepMetadata.from_metadata(item.metadata)

        if item.state == CardState.NEW:
            item.state = CardState.LEARNING
            meta.step_index = 0

        meta.interval = self._strategies[rating](item, meta)
        item.metadata = {**item.metadata, **meta.to_metadata()}
        item.iteration += 1
        item.last_review_date = self.clock()

        self.schedule_review(item)

    def schedule_review(self, item: CardRecord) -> None:
        """
        Set next_review_date from the card's state, ladder position and interval.

        Day intervals count from the last review when there is one, so
        re-adding a persisted card does not move its due date.
        """
        meta = StepMetadata.from_metadata(item.metadata)
        now = self.clock()

        if item.state in LADDER_STATES:
            steps = self._ladder(item.state)
            if meta.step_index < len(steps):
                item.next_review_date = now + timedelta(minutes=steps[meta.step_index])
            else:
                item.state = CardState.REVIEW
                item.next_review_date = self._days_after(item.last_review_date or now, meta.interval)
        elif item.state == CardState.NEW:
            item.next_review_date = now
        else:
            item.next_review_date = self._days_after(item.last_review_date or now, meta.interval)

        self.add_to_queue_if_due_today(item)

    def calculate_potential_next_review_date(
        self,
        item: CardRecord,
        response: PerformanceResponse
    ) -> datetime:
        # The rating strategies mutate what they are given, so work on a copy
        preview = copy.deepcopy(item)
        rating = self.map_performance_response(response)
        meta = StepMetadata.from_metadata(preview.metadata)

        if preview.state == CardState.NEW:
            preview.state = CardState.LEARNING
            meta.step_index = 0

        interval = self._strategies[rating](preview, meta)
        now = self.clock()

        if preview.state in LADDER_STATES:
            steps = self._ladder(preview.state)
            if meta.step_index < len(steps):
                return now + timedelta(minutes=steps[meta.step_index])
        return self._days_after(now, interval)

    # ---- Rating strategies ----

    @property
    def _strategies(self) -> dict[PerformanceResponse, Callable[[CardRecord, StepMetadata], float]]:
        return {
            PerformanceResponse.AGAIN: self._again,
            PerformanceResponse.HARD: self._hard,
            PerformanceResponse.GOOD: self._good,
            PerformanceResponse.EASY: self._easy,
        }

    def _again(self, item: CardRecord, meta: StepMetadata) -> float:
        p = self.parameters
        meta.ease_factor = max(p.min_ease_factor, meta.ease_factor - p.ease_factor_decrement)
        if item.state == CardState.REVIEW:
            item.state = CardState.RELEARNING
        meta.step_index = 0
        return meta.interval * p.lapse_interval

    def _hard(self, item: CardRecord, meta: StepMetadata) -> float:
        p = self.parameters
        meta.ease_factor = max(p.min_ease_factor, meta.ease_factor - p.ease_factor_increment)
        if item.state in LADDER_STATES:
            meta.step_index += 1
        return max(meta.interval * p.hard_interval_multiplier, meta.interval + 1)

    def _good(self, item: CardRecord, meta: StepMetadata) -> float:
        p = self.parameters
        if item.state in LADDER_STATES:
            meta.step_index += 1
            if meta.step_index >= len(self._ladder(item.state)):
                item.state = CardState.REVIEW
                return p.graduating_interval
            return 0
        return max(meta.interval * meta.ease_factor, meta.interval + 1)

    def _easy(self, item: CardRecord, meta: StepMetadata) -> float:
        p = self.parameters
        meta.ease_factor += p.ease_factor_increment
        if item.state in LADDER_STATES:
            item.state = CardState.REVIEW
            return p.easy_interval
        return meta.interval * meta.ease_factor * p.easy_bonus

    # ---- Helpers ----

    def _ladder(self, state: CardState) -> tuple[float, ...]:
        if state == CardState.LEARNING:
            return self.parameters.learning_steps
        return self.parameters.relearning_steps

    @staticmethod
    def _days_after(anchor: datetime, days: float) -> datetime:
        return anchor + timedelta(days=days)
