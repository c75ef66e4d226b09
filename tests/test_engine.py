from datetime import datetime, timedelta, timezone

import pytest

from recall.scheduling import CardRecord, CardState, StepScheduler, basic_content


def _review_card(card_id, due):
    return CardRecord(
        id=card_id,
        content=basic_content("vraag", "question"),
        state=CardState.REVIEW,
        iteration=3,
        last_review_date=due - timedelta(days=10),
        next_review_date=due,
        metadata={"easeFactor": 2.5, "interval": 10, "stepIndex": 0},
    )


def test_new_card_is_queued_on_add(step_engine):
    card = step_engine.create_new_card("c1", basic_content("hond", "dog"))
    assert step_engine.queued_count == 0

    step_engine.add_item(card)

    assert step_engine.get_item_count() == 1
    assert step_engine.get_next_review_item() is card
    assert step_engine.get_next_review_item() is None
    assert step_engine.get_next_review_item() is None


def test_queue_is_served_in_insertion_order(step_engine):
    cards = [step_engine.create_new_card(f"c{i}", basic_content(str(i), str(i))) for i in range(3)]
    for card in cards:
        step_engine.add_item(card)

    served = [step_engine.get_next_review_item().id for _ in range(3)]
    assert served == ["c0", "c1", "c2"]


def test_is_due_today(step_engine, now):
    assert step_engine.is_due_today(CardRecord(id="new", content={}))
    assert step_engine.is_due_today(_review_card("overdue", now - timedelta(days=3)))
    assert step_engine.is_due_today(_review_card("later_today", now + timedelta(hours=6)))
    assert not step_engine.is_due_today(_review_card("tomorrow", now + timedelta(days=1)))


def test_future_cards_are_not_queued(step_engine, now):
    step_engine.add_item(_review_card("tomorrow", now + timedelta(days=1)))

    assert step_engine.get_item_count() == 1
    assert step_engine.queued_count == 0


def test_queue_ignores_duplicates(step_engine):
    card = step_engine.create_new_card("c1", basic_content("a", "b"))
    step_engine.add_item(card)
    step_engine.add_to_queue_if_due_today(card)
    step_engine.refresh_queue()

    assert step_engine.queued_count == 1


def test_start_new_session_rebuilds_queue(step_engine, clock, now):
    due = _review_card("due", now)
    future = _review_card("future", now + timedelta(days=2))
    step_engine.add_item(due)
    step_engine.add_item(future)
    assert step_engine.get_next_review_item() is due
    assert step_engine.queued_count == 0

    clock.advance(days=2)
    step_engine.start_new_session()

    assert [item.id for item in step_engine.queued_items] == ["due", "future"]
    assert step_engine.session_end_time.date() == clock().date()


def test_remove_item_by_id(step_engine):
    card = step_engine.create_new_card("c1", basic_content("a", "b"))
    step_engine.add_item(card)

    step_engine.remove_item(CardRecord(id="c1", content={}))
    step_engine.remove_item(CardRecord(id="unknown", content={}))

    assert step_engine.get_item_count() == 0


def test_reset_items(step_engine):
    step_engine.add_item(step_engine.create_new_card("c1", basic_content("a", "b")))
    step_engine.reset_items()
    assert step_engine.get_item_count() == 0


def test_parameter_overrides(clock):
    engine = StepScheduler({"easy_bonus": 1.5, "learning_steps": [2, 20]}, clock=clock)

    assert engine.get_parameters().easy_bonus == 1.5
    assert engine.get_parameters().learning_steps == (2, 20)
    assert engine.get_parameters().lapse_interval == 0.5


def test_set_parameters_merges(step_engine):
    step_engine.set_parameters({"graduating_interval": 3})

    params = step_engine.get_parameters_dict()
    assert params["graduating_interval"] == 3
    assert params["easy_interval"] == 4


def test_set_parameters_rejects_unknown_keys(step_engine):
    with pytest.raises(TypeError):
        step_engine.set_parameters({"not_a_parameter": 1})


def test_set_parameters_keeps_existing_schedule(step_engine, now):
    card = _review_card("c1", now + timedelta(days=5))
    step_engine.add_item(card)
    scheduled = card.next_review_date

    step_engine.set_parameters({"easy_bonus": 2.0})

    assert card.next_review_date == scheduled


def test_session_ends_at_local_midnight(clock, now):
    # 12:00 UTC is 07:00 in New York, whose day ends at 04:59 UTC next day
    engine = StepScheduler(clock=clock, tz=timezone(timedelta(hours=-5)))
    late_evening = _review_card("late", now + timedelta(hours=16))

    assert engine.session_end_time == datetime(2024, 3, 2, 4, 59, 59, 999999, tzinfo=timezone.utc)
    assert engine.is_due_today(late_evening)
    assert not StepScheduler(clock=clock, tz=timezone.utc).is_due_today(late_evening)
