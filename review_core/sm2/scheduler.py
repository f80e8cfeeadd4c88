"""
Scheduler - SM-2 Transition Function

Pure scheduling logic (no database calls, no wall-clock reads).

Main workflow:
1. Validate the quality rating
2. Apply the lapse or success branch to repetition/interval
3. Adjust the ease factor from the original quality
4. Derive the next review date from the supplied "now"

Database I/O is handled by the database module.
"""

from __future__ import annotations
import math
from dataclasses import replace
from datetime import datetime, timedelta

from review_core.errors import InvalidQualityError, StatePreconditionError
from review_core.sm2 import constants
from review_core.sm2.review_state import ReviewState


def validate_quality(quality: object) -> int:
    """
    Check that quality is an integer rating in [0, 5].

    Booleans and floats are rejected even when numerically in range.

    Returns:
        The quality as a plain int

    Raises:
        InvalidQualityError: quality is not an integer in range
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(quality)
    if not constants.QUALITY_MIN <= quality <= constants.QUALITY_MAX:
        raise InvalidQualityError(quality)
    return int(quality)


def quality_from_label(label: str) -> int:
    """Map a study-screen button label ("again", "hard", "good", "easy") to a quality."""
    try:
        return int(constants.QUALITY_LABELS[label.strip().lower()])
    except (KeyError, AttributeError):
        raise InvalidQualityError(label) from None


def check_preconditions(state: ReviewState) -> None:
    """
    Reject states that could not have been produced by earlier updates.

    interval_days may be 0 for items that were never reviewed.

    Raises:
        StatePreconditionError: ease below floor, or negative interval/repetitions
    """
    if state.ease_factor < constants.MIN_EASE_FACTOR:
        raise StatePreconditionError(
            f"ease_factor {state.ease_factor} is below the floor {constants.MIN_EASE_FACTOR}"
        )
    if state.interval_days < 0:
        raise StatePreconditionError(f"interval_days {state.interval_days} is negative")
    if state.repetition_number < 0:
        raise StatePreconditionError(f"repetition_number {state.repetition_number} is negative")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def next_ease_factor(ease_factor: float, quality: int) -> float:
    """
    SM-2 ease adjustment, floored at MIN_EASE_FACTOR.

    Formula: EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))

    q=5 adds 0.1, q=4 leaves EF unchanged, q=3 subtracts 0.14, and lower
    ratings subtract increasingly more.
    Every step is a multiple of 0.01, so the result is kept at two decimals.
    """
    miss = constants.QUALITY_MAX - quality
    new_ease = round(ease_factor + (0.1 - miss * (0.08 + miss * 0.02)), constants.EASE_PRECISION)
    if new_ease < constants.MIN_EASE_FACTOR:
        new_ease = constants.MIN_EASE_FACTOR
    return new_ease


def next_interval(state: ReviewState, quality: int) -> tuple[int, int]:
    """
    Interval ladder step.

    Returns:
        Tuple of (interval_days, repetition_number) after the review
    """
    if quality < constants.PASSING_QUALITY:
        # Lapse: start the ladder over
        return constants.LAPSE_INTERVAL_DAYS, 0

    if state.repetition_number == 0:
        interval = constants.FIRST_INTERVAL_DAYS
    elif state.repetition_number == 1:
        interval = constants.SECOND_INTERVAL_DAYS
    else:
        # Grows with the ease factor held *before* this review
        product = round(state.interval_days * state.ease_factor, constants.EASE_PRECISION)
        interval = max(1, round_half_up(product))

    return interval, state.repetition_number + 1


def advance(state: ReviewState, quality: int, now: datetime) -> ReviewState:
    """
    Apply one review to a state and return the successor state.

    Deterministic in (state, quality, now); the input is never mutated.

    Args:
        state: Current scheduling state
        quality: Recall rating, integer in [0, 5]
        now: Review timestamp; its calendar date anchors next_review_date

    Returns:
        New ReviewState

    Raises:
        InvalidQualityError: quality is not an integer in [0, 5]
        StatePreconditionError: state violates a scheduler invariant
    """
    quality = validate_quality(quality)
    check_preconditions(state)

    interval, repetition = next_interval(state, quality)
    ease = next_ease_factor(state.ease_factor, quality)

    return replace(
        state,
        repetition_number=repetition,
        ease_factor=ease,
        interval_days=interval,
        next_review_date=now.date() + timedelta(days=interval),
        last_reviewed_at=now,
        quality_score=quality,
    )
