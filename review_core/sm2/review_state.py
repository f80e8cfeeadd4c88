"""
Review State - SM-2 scheduling state for one learner x item

Defines the value the scheduler consumes and produces, plus the initial
state given to items when they enter the study plan.

Key fields:
- Repetition number: consecutive successful reviews since the last lapse
- Ease factor: multiplier governing interval growth (>= 1.3)
- Interval: days until the item is next due
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from review_core import config
from review_core.sm2 import constants


@dataclass(frozen=True)
class ReviewState:
    """
    Scheduling state for a single (user, item) pair.

    Instances are immutable; the scheduler returns a new state per review.
    """
    repetition_number: int
    ease_factor: float
    interval_days: int
    next_review_date: date

    last_reviewed_at: Optional[datetime] = None  # Audit only, never read by the scheduler
    quality_score: Optional[int] = None          # Last submitted rating
    is_active: bool = True

    # Storage identity (None for states that were never persisted)
    schedule_id: Optional[int] = None
    item_id: Optional[int] = None
    user_id: Optional[str] = None
    version: int = 0


def get_default_ease_factor() -> float:
    """Ease factor given to newly enrolled items (DEFAULT_EASE_FACTOR)."""
    ease = config.env_float("DEFAULT_EASE_FACTOR", constants.DEFAULT_EASE_FACTOR)
    if ease < constants.MIN_EASE_FACTOR:
        raise ValueError(
            f"DEFAULT_EASE_FACTOR must be >= {constants.MIN_EASE_FACTOR}, got {ease}"
        )
    return ease


def initialize_new_state(
    today: date,
    user_id: Optional[str] = None,
    item_id: Optional[int] = None,
    ease_factor: Optional[float] = None
) -> ReviewState:
    """
    Initialize state for an item entering the study plan.

    New items start at the bottom of the interval ladder and are first due
    the day after enrollment.

    Args:
        today: Enrollment date
        user_id: Owning learner
        item_id: Text item being studied
        ease_factor: Starting ease (default: DEFAULT_EASE_FACTOR)

    Returns:
        Fresh ReviewState
    """
    if ease_factor is None:
        ease_factor = get_default_ease_factor()

    return ReviewState(
        repetition_number=0,
        ease_factor=ease_factor,
        interval_days=constants.ENROLLMENT_INTERVAL_DAYS,
        next_review_date=today + timedelta(days=constants.ENROLLMENT_INTERVAL_DAYS),
        user_id=user_id,
        item_id=item_id,
    )


def as_date(value: date | datetime) -> date:
    """Calendar date of a date or datetime (datetimes are truncated)."""
    if isinstance(value, datetime):
        return value.date()
    return value
