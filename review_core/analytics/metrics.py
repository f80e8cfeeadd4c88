"""
Metric computations for the progress dashboard.
"""

from __future__ import annotations

from datetime import date, timedelta

import pandas as pd


def build_day_index(events_df: pd.DataFrame, end: date | None = None) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index from the first event through end
    (or the last event when end is not given).
    """
    if events_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    start = events_df["day_utc"].min()
    stop = events_df["day_utc"].max()
    if end is not None:
        stop = max(stop, pd.Timestamp(end).tz_localize("UTC"))
    return pd.date_range(start=start, end=stop, freq="D", tz="UTC")


def compute_daily_review_counts(
    events_df: pd.DataFrame,
    day_index: pd.DatetimeIndex
) -> pd.Series:
    """
    Number of reviews per UTC day, zero-filled over day_index.
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")
    counts = events_df.groupby("day_utc").size()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_reviews_on(events_df: pd.DataFrame, day: date) -> int:
    if events_df.empty:
        return 0
    return int((events_df["day_utc"].dt.date == day).sum())


def compute_current_streak(events_df: pd.DataFrame, today: date) -> int:
    """
    Consecutive days with at least one review.

    The streak ends today, or yesterday if nothing was reviewed yet today.
    """
    if events_df.empty:
        return 0

    review_days = set(events_df["day_utc"].dt.date)
    if today in review_days:
        day = today
    elif today - timedelta(days=1) in review_days:
        day = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while day in review_days:
        streak += 1
        day -= timedelta(days=1)
    return streak
