"""
Due-set selection over a snapshot of review states (no DB calls).
"""

from __future__ import annotations
from datetime import date, datetime
from typing import Iterable, Optional

from review_core.sm2.review_state import ReviewState, as_date


def is_due(state: ReviewState, as_of: date | datetime) -> bool:
    """Active and scheduled on or before as_of (compared by calendar date)."""
    return state.is_active and state.next_review_date <= as_date(as_of)


def _due_sort_key(state: ReviewState) -> tuple:
    # Most overdue first, then item id, then schedule id; unknown ids sort last
    return (
        state.next_review_date,
        state.item_id is None,
        state.item_id or 0,
        state.schedule_id is None,
        state.schedule_id or 0,
    )


def select_due(
    states: Iterable[ReviewState],
    as_of: date | datetime,
    limit: Optional[int] = None
) -> list[ReviewState]:
    """
    Filter and order the states eligible for review.

    Ordering is ascending by next_review_date with item_id then schedule_id
    as tie-breakers. The sort is stable, so states that still compare equal
    keep their input order.

    Args:
        states: All of a learner's review states
        as_of: Date (or datetime) to evaluate due-ness against
        limit: Optional cap on the number of states returned

    Returns:
        New list of due states; the input is left untouched
    """
    cutoff = as_date(as_of)
    due = [s for s in states if is_due(s, cutoff)]
    due.sort(key=_due_sort_key)
    if limit is not None:
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        return due[:limit]
    return due


def count_due(states: Iterable[ReviewState], as_of: date | datetime) -> int:
    """Number of due states, for dashboard stats."""
    cutoff = as_date(as_of)
    return sum(1 for s in states if is_due(s, cutoff))
