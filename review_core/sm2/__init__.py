"""
SM-2 - Spaced repetition scheduling for curated phrases

Main API for the study system.

This package implements the classic SM-2 update with:
- Interval ladder 1 -> 6 -> interval x ease
- Ease factor adjustment from a 0-5 recall quality, floored at 1.3
- Lapses (quality < 3) restarting the ladder
- Due-set selection and a mastery heuristic for progress stats

Quick start:
    from review_core import sm2

    # Initialize database
    sm2.init_db()

    # Process a review (algorithm only, no DB calls)
    new_state = sm2.advance(state, sm2.Quality.GOOD, now)

    # Pick what to study today
    due = sm2.select_due(sm2.load_user_states(user_id), today)
"""

# Core scheduler API (algorithm logic)
from review_core.sm2.scheduler import (
    advance,
    next_ease_factor,
    quality_from_label,
    round_half_up,
    validate_quality,
)
from review_core.sm2.selection import count_due, is_due, select_due
from review_core.sm2.mastery import (
    MasteryThreshold,
    count_mastered,
    is_mastered,
    load_mastery_threshold,
)

# Review state
from review_core.sm2.review_state import ReviewState, initialize_new_state

# Database API
from review_core.sm2.database import (
    init_db,
    reset_db,
    enroll_items,
    load_review_state,
    load_user_states,
    load_states_by_content,
    get_item_contents,
    save_review_state,
    set_active,
    record_review,
    find_review_event,
    get_review_events,
    get_recent_events,
)

# Constants and parameters
from review_core.sm2.constants import (
    Quality,
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    FIRST_INTERVAL_DAYS,
    SECOND_INTERVAL_DAYS,
    PASSING_QUALITY,
)


__all__ = [
    # Core algorithm
    "advance",
    "next_ease_factor",
    "quality_from_label",
    "round_half_up",
    "validate_quality",
    "select_due",
    "count_due",
    "is_due",
    "is_mastered",
    "count_mastered",
    "MasteryThreshold",
    "load_mastery_threshold",

    # Review state
    "ReviewState",
    "initialize_new_state",

    # Database operations
    "init_db",
    "reset_db",
    "enroll_items",
    "load_review_state",
    "load_user_states",
    "load_states_by_content",
    "get_item_contents",
    "save_review_state",
    "set_active",
    "record_review",
    "find_review_event",
    "get_review_events",
    "get_recent_events",

    # Enums
    "Quality",

    # Parameters
    "DEFAULT_EASE_FACTOR",
    "MIN_EASE_FACTOR",
    "FIRST_INTERVAL_DAYS",
    "SECOND_INTERVAL_DAYS",
    "PASSING_QUALITY",
]
