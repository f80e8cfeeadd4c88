"""
Service layer to assemble the progress dashboard.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from review_core import sm2
from review_core.analytics.metrics import (
    build_day_index,
    compute_current_streak,
    compute_daily_review_counts,
    compute_reviews_on,
)
from review_core.analytics.queries import load_review_events_df
from review_core.analytics.types import DashboardStats


def build_dashboard(
    user_id: str,
    today: date,
    threshold: Optional[sm2.MasteryThreshold] = None
) -> DashboardStats:
    """
    Build all KPI values and series needed by the dashboard.
    """
    if threshold is None:
        threshold = sm2.load_mastery_threshold()

    states = sm2.load_user_states(user_id)
    events_df = load_review_events_df(user_id)
    day_index = build_day_index(events_df, end=today)

    return DashboardStats(
        total_items=len(states),
        active_items=sum(1 for s in states if s.is_active),
        items_due=sm2.count_due(states, today),
        mastered_items=sm2.count_mastered(states, threshold),
        current_streak=compute_current_streak(events_df, today),
        reviews_today=compute_reviews_on(events_df, today),
        daily_review_counts=compute_daily_review_counts(events_df, day_index),
    )
