"""
SM-2 Constants and Parameters

All tunable numbers for the review scheduler in one place.
"""

from enum import IntEnum


# ---- Quality Ratings ----

class Quality(IntEnum):
    """Learner's self-reported recall quality (0-5)."""
    AGAIN = 0        # Total blackout
    WRONG = 1        # Wrong, but recognised the answer
    WRONG_EASY = 2   # Wrong, answer felt familiar
    HARD = 3         # Recalled with serious difficulty
    GOOD = 4         # Recalled after some hesitation
    EASY = 5         # Perfect recall


QUALITY_MIN = 0
QUALITY_MAX = 5

# Qualities below this are lapses
PASSING_QUALITY = 3

# Buttons shown by the study screen
QUALITY_LABELS = {
    "again": Quality.AGAIN,
    "hard": Quality.HARD,
    "good": Quality.GOOD,
    "easy": Quality.EASY,
}


# ---- Ease Factor ----

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3    # Hard floor, no upper clamp
EASE_PRECISION = 2       # Decimal places kept on ease and interval products


# ---- Interval Ladder ----

FIRST_INTERVAL_DAYS = 1   # After the first success (and after a lapse)
SECOND_INTERVAL_DAYS = 6  # After the second consecutive success
LAPSE_INTERVAL_DAYS = 1

# New items are due the day after enrollment
ENROLLMENT_INTERVAL_DAYS = 1


# ---- Mastery ----
# Product heuristic, overridable through configuration

MASTERY_MIN_EASE = 2.5
MASTERY_MIN_REPETITIONS = 3
