"""
Mastery classification used for progress statistics.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional

from review_core import config
from review_core.sm2 import constants
from review_core.sm2.review_state import ReviewState


@dataclass(frozen=True)
class MasteryThreshold:
    """Cut-off for classifying an item as mastered."""
    min_ease: float = constants.MASTERY_MIN_EASE
    min_repetitions: int = constants.MASTERY_MIN_REPETITIONS


def load_mastery_threshold() -> MasteryThreshold:
    """Threshold from MASTERY_MIN_EASE / MASTERY_MIN_REPETITIONS, defaulting to 2.5 / 3."""
    return MasteryThreshold(
        min_ease=config.env_float("MASTERY_MIN_EASE", constants.MASTERY_MIN_EASE),
        min_repetitions=config.env_int("MASTERY_MIN_REPETITIONS", constants.MASTERY_MIN_REPETITIONS),
    )


def is_mastered(state: ReviewState, threshold: Optional[MasteryThreshold] = None) -> bool:
    """True when both ease and repetition count reach the threshold."""
    if threshold is None:
        threshold = load_mastery_threshold()
    return (
        state.ease_factor >= threshold.min_ease
        and state.repetition_number >= threshold.min_repetitions
    )


def count_mastered(
    states: Iterable[ReviewState],
    threshold: Optional[MasteryThreshold] = None
) -> int:
    if threshold is None:
        threshold = load_mastery_threshold()
    return sum(1 for s in states if is_mastered(s, threshold))
