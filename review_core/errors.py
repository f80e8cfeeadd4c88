"""
Exceptions raised by the review core and its persistence layer.
"""

from __future__ import annotations


class ReviewCoreError(Exception):
    """Base class for all review-core errors."""


class InvalidInputError(ReviewCoreError):
    """Caller supplied a value outside the accepted contract."""


class InvalidQualityError(InvalidInputError, ValueError):
    """Quality rating is not an integer in [0, 5]."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"quality must be an integer between 0 and 5, got {quality!r}")


class StatePreconditionError(ReviewCoreError):
    """Review state handed to the scheduler already violates an invariant."""


class ScheduleNotFoundError(ReviewCoreError, LookupError):
    """No schedule row exists for the requested id."""

    def __init__(self, schedule_id: int):
        self.schedule_id = schedule_id
        super().__init__(f"schedule {schedule_id} not found")


class ConcurrentUpdateError(ReviewCoreError):
    """Schedule row changed between read and write (stale version)."""

    def __init__(self, schedule_id: int, expected_version: int):
        self.schedule_id = schedule_id
        self.expected_version = expected_version
        super().__init__(
            f"schedule {schedule_id} was modified concurrently "
            f"(expected version {expected_version})"
        )


class ReviewEventConflictError(InvalidInputError):
    """Idempotency key was already used for a different schedule."""

    def __init__(self, review_event_id: str, schedule_id: int, recorded_schedule_id: int):
        self.review_event_id = review_event_id
        self.schedule_id = schedule_id
        self.recorded_schedule_id = recorded_schedule_id
        super().__init__(
            f"review event {review_event_id!r} was recorded for schedule "
            f"{recorded_schedule_id}, not {schedule_id}"
        )


class DuplicateReviewEventError(ReviewCoreError):
    """Another writer recorded the same idempotency key first."""

    def __init__(self, review_event_id: str):
        self.review_event_id = review_event_id
        super().__init__(f"review event {review_event_id!r} already recorded")
