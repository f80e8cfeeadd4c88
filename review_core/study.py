"""
Study service - glue between the scheduler and the study database.

The study screen asks for today's due items, shows them one at a time and
submits a quality rating per item. Each submission reads the stored state,
runs the pure scheduler, and writes back with a version check.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from review_core import sm2
from review_core.errors import (
    ConcurrentUpdateError,
    DuplicateReviewEventError,
    ReviewEventConflictError,
    ScheduleNotFoundError,
)
from review_core.logging import logger


@dataclass(frozen=True)
class StudyItem:
    """A review state joined back to its phrase for display."""
    state: sm2.ReviewState
    content: str


def _join_contents(states: list[sm2.ReviewState]) -> list[StudyItem]:
    contents = sm2.get_item_contents(s.item_id for s in states)
    return [StudyItem(state=s, content=contents.get(s.item_id, "")) for s in states]


def get_due_items(
    user_id: str,
    as_of: date | datetime,
    limit: Optional[int] = None
) -> list[StudyItem]:
    """
    Items due for review, most overdue first.

    Args:
        user_id: Learner
        as_of: Date (or datetime) the study session runs on
        limit: Optional cap on the number of items
    """
    states = sm2.load_user_states(user_id)
    due = sm2.select_due(states, as_of, limit=limit)
    return _join_contents(due)


def get_session_items(user_id: str, contents: Iterable[str]) -> list[StudyItem]:
    """
    Items for a hand-picked session, regardless of due date.

    Suspended items are included; the caller picked them explicitly.
    """
    states = sm2.load_states_by_content(user_id, contents)
    return _join_contents(states)


def _replay(schedule_id: int, review_event_id: str, event: dict) -> sm2.ReviewState:
    """Stored state for a review that was already recorded under review_event_id."""
    if event["schedule_id"] != schedule_id:
        raise ReviewEventConflictError(review_event_id, schedule_id, event["schedule_id"])

    logger.info("review_replayed", schedule_id=schedule_id, review_event_id=review_event_id)
    state = sm2.load_review_state(schedule_id)
    if state is None:
        raise ScheduleNotFoundError(schedule_id)
    return state


def submit_review(
    schedule_id: int,
    quality: int,
    now: datetime,
    review_event_id: Optional[str] = None
) -> sm2.ReviewState:
    """
    Apply one review and persist it.

    Args:
        schedule_id: Schedule being reviewed
        quality: Recall rating, integer in [0, 5]
        now: Review timestamp
        review_event_id: Optional idempotency key; a key that was already
            recorded is not applied again and the stored state is returned

    Returns:
        The persisted state

    Raises:
        InvalidQualityError: quality is not an integer in [0, 5]
        ScheduleNotFoundError: unknown schedule_id
        ReviewEventConflictError: review_event_id was already used for
            another schedule
        ConcurrentUpdateError: the schedule changed after it was read
    """
    quality = sm2.validate_quality(quality)

    if review_event_id is not None:
        event = sm2.find_review_event(review_event_id)
        if event is not None:
            return _replay(schedule_id, review_event_id, event)

    state = sm2.load_review_state(schedule_id)
    if state is None:
        raise ScheduleNotFoundError(schedule_id)

    new_state = sm2.advance(state, quality, now)
    try:
        saved = sm2.record_review(state, new_state, now, review_event_id=review_event_id)
    except (DuplicateReviewEventError, ConcurrentUpdateError):
        # Lost a race; if it was against the same event, treat it as a replay
        event = sm2.find_review_event(review_event_id) if review_event_id is not None else None
        if event is None:
            raise
        return _replay(schedule_id, review_event_id, event)

    logger.info(
        "review_submitted",
        schedule_id=schedule_id,
        user_id=saved.user_id,
        quality=quality,
        repetition_number=saved.repetition_number,
        interval_days=saved.interval_days,
        ease_factor=round(saved.ease_factor, 4),
        next_review_date=saved.next_review_date.isoformat(),
    )
    return saved


def submit_review_label(
    schedule_id: int,
    label: str,
    now: datetime,
    review_event_id: Optional[str] = None
) -> sm2.ReviewState:
    """submit_review for a study-screen button ("again", "hard", "good", "easy")."""
    return submit_review(schedule_id, sm2.quality_from_label(label), now, review_event_id)


def suspend_item(schedule_id: int) -> sm2.ReviewState:
    """Exclude an item from due sets until resumed."""
    return sm2.set_active(schedule_id, False)


def resume_item(schedule_id: int) -> sm2.ReviewState:
    return sm2.set_active(schedule_id, True)
