"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

import pandas as pd

from review_core import sm2

EVENT_COLUMNS = ["schedule_id", "timestamp", "quality", "day_utc"]


def load_review_events_df(user_id: str) -> pd.DataFrame:
    """
    Load a learner's review events into a dataframe, oldest first.
    """
    rows = sm2.get_review_events(user_id=user_id)
    if not rows:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(rows)
    df = df[["schedule_id", "timestamp", "quality"]].copy()
    # Stored timestamps without tzinfo are UTC
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df = df.dropna(subset=["timestamp"])
    df["day_utc"] = df["timestamp"].dt.floor("D")
    df = df.sort_values("timestamp").reset_index(drop=True)
    return df
