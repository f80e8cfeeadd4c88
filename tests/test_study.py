from datetime import date, datetime, timezone

import pytest

from review_core import sm2, study
from review_core.errors import InvalidQualityError, ReviewEventConflictError, ScheduleNotFoundError


ENROLLED = date(2024, 1, 1)


def at(day, hour=9):
    return datetime(2024, 1, day, hour, 0, tzinfo=timezone.utc)


@pytest.fixture
def enrolled(db):
    db.enroll_items("u1", ["goedemorgen", "dank je wel", "fiets"], ENROLLED, document_id="doc-1")
    return db


def test_nothing_due_on_enrollment_day(enrolled):
    assert study.get_due_items("u1", ENROLLED) == []


def test_due_items_are_joined_to_content(enrolled):
    items = study.get_due_items("u1", date(2024, 1, 2))

    assert sorted(i.content for i in items) == ["dank je wel", "fiets", "goedemorgen"]
    assert [i.state.item_id for i in items] == sorted(i.state.item_id for i in items)


def test_due_items_limit(enrolled):
    assert len(study.get_due_items("u1", date(2024, 1, 2), limit=2)) == 2


def test_review_flow_moves_item_out_of_due_set(enrolled):
    [first, *_] = study.get_due_items("u1", date(2024, 1, 2))

    saved = study.submit_review(first.state.schedule_id, 4, at(2))
    due_after = study.get_due_items("u1", date(2024, 1, 2))

    assert saved.repetition_number == 1
    assert saved.next_review_date == date(2024, 1, 3)
    assert saved.version == 1
    assert first.state.schedule_id not in [i.state.schedule_id for i in due_after]
    assert len(due_after) == 2


def test_ladder_through_the_service(enrolled):
    [item, *_] = study.get_due_items("u1", date(2024, 1, 2))
    schedule_id = item.state.schedule_id

    s1 = study.submit_review(schedule_id, 4, at(2))
    s2 = study.submit_review(schedule_id, 4, at(3))
    s3 = study.submit_review(schedule_id, 4, at(9))

    assert [s.interval_days for s in (s1, s2, s3)] == [1, 6, 15]
    assert s3.next_review_date == date(2024, 1, 24)


def test_replayed_event_is_applied_once(enrolled):
    [item, *_] = study.get_due_items("u1", date(2024, 1, 2))
    schedule_id = item.state.schedule_id

    first = study.submit_review(schedule_id, 5, at(2), review_event_id="evt-1")
    replay = study.submit_review(schedule_id, 5, at(2), review_event_id="evt-1")

    assert replay == first
    assert len(enrolled.get_review_events("u1")) == 1


def test_invalid_quality_leaves_state_untouched(enrolled):
    [item, *_] = study.get_due_items("u1", date(2024, 1, 2))
    schedule_id = item.state.schedule_id

    with pytest.raises(InvalidQualityError):
        study.submit_review(schedule_id, 7, at(2))

    assert enrolled.load_review_state(schedule_id) == item.state
    assert enrolled.get_review_events("u1") == []


def test_unknown_schedule(enrolled):
    with pytest.raises(ScheduleNotFoundError):
        study.submit_review(4242, 4, at(2))


def test_submit_by_label(enrolled):
    [item, *_] = study.get_due_items("u1", date(2024, 1, 2))

    saved = study.submit_review_label(item.state.schedule_id, "again", at(2))

    assert saved.quality_score == 0
    assert saved.repetition_number == 0
    assert saved.ease_factor == pytest.approx(1.7)


def test_suspended_items_are_not_due(enrolled):
    items = study.get_due_items("u1", date(2024, 1, 2))
    target = items[0].state.schedule_id

    study.suspend_item(target)
    assert target not in [i.state.schedule_id for i in study.get_due_items("u1", date(2024, 1, 2))]

    study.resume_item(target)
    assert target in [i.state.schedule_id for i in study.get_due_items("u1", date(2024, 1, 2))]


def test_session_items_ignore_due_date(enrolled):
    items = study.get_session_items("u1", ["fiets"])

    assert [i.content for i in items] == ["fiets"]
    assert items[0].state.next_review_date == date(2024, 1, 2)


def test_event_id_reused_for_another_item_is_rejected(enrolled):
    first, second, _ = study.get_due_items("u1", date(2024, 1, 2))
    study.submit_review(first.state.schedule_id, 4, at(2), review_event_id="evt-1")

    with pytest.raises(ReviewEventConflictError):
        study.submit_review(second.state.schedule_id, 4, at(2), review_event_id="evt-1")

    assert enrolled.load_review_state(second.state.schedule_id) == second.state
    assert len(enrolled.get_review_events("u1")) == 1


def test_event_recorded_between_check_and_write_is_a_replay(enrolled, monkeypatch):
    [item, *_] = study.get_due_items("u1", date(2024, 1, 2))
    schedule_id = item.state.schedule_id
    first = study.submit_review(schedule_id, 5, at(2), review_event_id="evt-1")

    lookups = []

    def stale_then_real(review_event_id):
        lookups.append(review_event_id)
        if len(lookups) == 1:
            return None
        return enrolled.find_review_event(review_event_id)

    monkeypatch.setattr(sm2, "find_review_event", stale_then_real)

    replay = study.submit_review(schedule_id, 5, at(2), review_event_id="evt-1")

    assert replay == first
    assert len(lookups) == 2
    assert len(enrolled.get_review_events("u1")) == 1
