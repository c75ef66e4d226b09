"""
Review session driver.

Serves the engine's queue to a caller-supplied answer function and applies
each rating. Rendering and input are the caller's job: `get_response`
receives the card and returns a PerformanceResponse.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from recall.scheduling.card import CardRecord
from recall.scheduling.constants import CardState, PerformanceResponse
from recall.scheduling.engine import SchedulingEngine
from recall.time_utils import format_time_difference


@dataclass
class ReviewOutcome:
    """Result of one review in a session."""
    card_id: str
    response: PerformanceResponse
    previous_state: CardState
    state: CardState
    next_review_date: Optional[datetime]


def preview_next_review_dates(
    engine: SchedulingEngine,
    card: CardRecord
) -> dict[PerformanceResponse, datetime]:
    """Next review date for each possible rating. Nothing is mutated."""
    return {
        response: engine.calculate_potential_next_review_date(card, response)
        for response in PerformanceResponse
    }


def preview_labels(
    engine: SchedulingEngine,
    card: CardRecord
) -> dict[PerformanceResponse, str]:
    """Button labels such as "10 mins" / "4 days", one per rating."""
    now = engine.clock()
    return {
        response: format_time_difference(date, now)
        for response, date in preview_next_review_dates(engine, card).items()
    }


def run_review_session(
    engine: SchedulingEngine,
    max_items: int,
    get_response: Callable[[CardRecord], PerformanceResponse]
) -> list[ReviewOutcome]:
    """
    Review up to `max_items` cards from the engine's queue.

    Cards that come due again within the session (learning steps) go back on
    the queue and may be served again.

    Args:
        engine: Engine with a started session
        max_items: Upper bound on reviews in this run
        get_response: Called with each card; returns the reviewer's rating

    Returns:
        One ReviewOutcome per review, in order
    """
    outcomes: list[ReviewOutcome] = []

    while len(outcomes) < max_items:
        item = engine.get_next_review_item()
        if item is None:
            break

        previous_state = item.state
        response = get_response(item)
        engine.update_item_after_review(item, response)

        outcomes.append(
            ReviewOutcome(
                card_id=item.id,
                response=PerformanceResponse(response),
                previous_state=previous_state,
                state=item.state,
                next_review_date=item.next_review_date,
            )
        )

    return outcomes
