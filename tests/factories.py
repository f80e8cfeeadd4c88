from datetime import date

from review_core.sm2.review_state import ReviewState


def make_state(**overrides) -> ReviewState:
    values = dict(
        repetition_number=0,
        ease_factor=2.5,
        interval_days=0,
        next_review_date=date(2024, 1, 1),
    )
    values.update(overrides)
    return ReviewState(**values)
