import copy
from datetime import timedelta

import pytest

from recall.errors import UnsupportedRatingError
from recall.scheduling import (
    CardRecord,
    CardState,
    PerformanceResponse,
    StepMetadata,
    basic_content
)


@pytest.fixture
def review_card(now):
    return CardRecord(
        id="review",
        content=basic_content("kat", "cat"),
        state=CardState.REVIEW,
        iteration=4,
        last_review_date=now - timedelta(days=10),
        next_review_date=now,
        metadata={"easeFactor": 2.5, "interval": 10, "stepIndex": 0},
    )


def _meta(card):
    return StepMetadata.from_metadata(card.metadata)


def test_new_card_defaults(step_engine, now):
    card = step_engine.create_new_card("c1", basic_content("hond", "dog"))

    assert card.state == CardState.NEW
    assert card.iteration == 0
    assert card.next_review_date == now
    assert card.metadata == {"easeFactor": 2.5, "interval": 0.0, "stepIndex": 0}


def test_fresh_card_again(step_engine, now):
    card = step_engine.create_new_card("c1", basic_content("hond", "dog"))
    step_engine.add_item(card)

    step_engine.update_item_after_review(card, PerformanceResponse.AGAIN)

    assert card.state == CardState.LEARNING
    assert _meta(card).step_index == 0
    assert _meta(card).interval == 0
    assert card.iteration == 1
    assert card.last_review_date == now
    assert card.next_review_date == now + timedelta(minutes=1)


def test_fresh_card_good_walks_the_ladder(step_engine, now):
    card = step_engine.create_new_card("c1", basic_content("hond", "dog"))
    step_engine.add_item(card)

    step_engine.update_item_after_review(card, PerformanceResponse.GOOD)
    assert card.state == CardState.LEARNING
    assert _meta(card).step_index == 1
    assert card.next_review_date == now + timedelta(minutes=10)

    step_engine.update_item_after_review(card, PerformanceResponse.GOOD)
    assert card.state == CardState.REVIEW
    assert _meta(card).interval == 1
    assert card.next_review_date == now + timedelta(days=1)
    assert card.iteration == 2


def test_fresh_card_easy(step_engine, now):
    card = step_engine.create_new_card("c1", basic_content("hond", "dog"))
    step_engine.add_item(card)

    step_engine.update_item_after_review(card, PerformanceResponse.EASY)

    assert card.state == CardState.REVIEW
    assert _meta(card).interval == 4
    assert _meta(card).ease_factor == pytest.approx(2.65)
    assert card.next_review_date == now + timedelta(days=4)


def test_review_card_hard(step_engine, review_card):
    step_engine.update_item_after_review(review_card, PerformanceResponse.HARD)

    assert review_card.state == CardState.REVIEW
    assert _meta(review_card).ease_factor == pytest.approx(2.35)
    assert _meta(review_card).interval == pytest.approx(12)


def test_review_card_good(step_engine, review_card, now):
    step_engine.update_item_after_review(review_card, PerformanceResponse.GOOD)

    assert _meta(review_card).ease_factor == pytest.approx(2.5)
    assert _meta(review_card).interval == pytest.approx(25)
    assert review_card.next_review_date == now + timedelta(days=25)


def test_review_card_easy(step_engine, review_card):
    step_engine.update_item_after_review(review_card, PerformanceResponse.EASY)

    assert _meta(review_card).ease_factor == pytest.approx(2.65)
    assert _meta(review_card).interval == pytest.approx(34.45)


def test_review_card_again_lapses(step_engine, review_card, now):
    step_engine.update_item_after_review(review_card, PerformanceResponse.AGAIN)

    assert review_card.state == CardState.RELEARNING
    assert _meta(review_card).ease_factor == pytest.approx(2.3)
    assert _meta(review_card).interval == pytest.approx(5)
    assert _meta(review_card).step_index == 0
    assert review_card.next_review_date == now + timedelta(minutes=10)


def test_relearning_good_graduates(step_engine, review_card):
    step_engine.update_item_after_review(review_card, PerformanceResponse.AGAIN)
    step_engine.update_item_after_review(review_card, PerformanceResponse.GOOD)

    assert review_card.state == CardState.REVIEW
    assert _meta(review_card).interval == 1


def test_ease_factor_floor(step_engine, review_card):
    review_card.metadata["easeFactor"] = 1.35

    step_engine.update_item_after_review(review_card, PerformanceResponse.AGAIN)

    assert _meta(review_card).ease_factor == pytest.approx(1.3)


def test_iteration_only_increases(step_engine, review_card):
    for response in (PerformanceResponse.AGAIN, PerformanceResponse.HARD, PerformanceResponse.GOOD):
        before = review_card.iteration
        step_engine.update_item_after_review(review_card, response)
        assert review_card.iteration == before + 1


def test_learning_card_is_requeued_within_session(step_engine):
    card = step_engine.create_new_card("c1", basic_content("hond", "dog"))
    step_engine.add_item(card)
    step_engine.get_next_review_item()

    step_engine.update_item_after_review(card, PerformanceResponse.AGAIN)

    assert step_engine.queued_items == [card]


def test_graduated_card_leaves_the_session(step_engine):
    card = step_engine.create_new_card("c1", basic_content("hond", "dog"))
    step_engine.add_item(card)
    step_engine.get_next_review_item()

    step_engine.update_item_after_review(card, PerformanceResponse.EASY)

    assert step_engine.queued_count == 0


def test_persisted_card_keeps_its_due_date(step_engine, review_card, now):
    review_card.last_review_date = now - timedelta(days=3)

    step_engine.add_item(review_card)

    assert review_card.next_review_date == now + timedelta(days=7)
    assert step_engine.queued_count == 0


def test_preview_does_not_mutate(step_engine, review_card):
    step_engine.add_item(review_card)
    before = copy.deepcopy(review_card)
    queued = list(step_engine.queued_items)

    for response in PerformanceResponse:
        step_engine.calculate_potential_next_review_date(review_card, response)

    assert review_card == before
    assert step_engine.queued_items == queued


def test_preview_matches_review(step_engine, review_card):
    for response in PerformanceResponse:
        card = copy.deepcopy(review_card)
        preview = step_engine.calculate_potential_next_review_date(card, response)
        step_engine.update_item_after_review(card, response)
        assert card.next_review_date == preview


@pytest.mark.parametrize("card_fixture", ["new_card", "review_card"])
def test_previews_are_ordered(step_engine, card_fixture, request):
    if card_fixture == "new_card":
        card = step_engine.create_new_card("c1", basic_content("hond", "dog"))
    else:
        card = request.getfixturevalue("review_card")

    previews = [step_engine.calculate_potential_next_review_date(card, r) for r in PerformanceResponse]

    assert previews == sorted(previews)


def test_map_performance_response(step_engine):
    assert step_engine.map_performance_response(2) is PerformanceResponse.GOOD

    with pytest.raises(UnsupportedRatingError):
        step_engine.map_performance_response(7)
