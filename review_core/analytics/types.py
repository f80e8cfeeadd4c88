"""
Types for the progress dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class DashboardStats:
    """
    Precomputed progress numbers for one learner.
    """
    total_items: int
    active_items: int
    items_due: int
    mastered_items: int
    current_streak: int
    reviews_today: int
    daily_review_counts: pd.Series
