"""
Metric computations over the review-event log.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from vocab_srs.fsrs.constants import Rating


def build_day_index(events_df: pd.DataFrame) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index spanning the event range.
    """
    if events_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    start = events_df["day_utc"].min()
    end = events_df["day_utc"].max()
    return pd.date_range(start=start, end=end, freq="D", tz="UTC")


def compute_reviews_daily(
    events_df: pd.DataFrame,
    day_index: pd.DatetimeIndex
) -> pd.Series:
    """
    Number of reviews per day, zero-filled.
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")
    counts = events_df.groupby("day_utc").size()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_studied_cumulative(
    events_df: pd.DataFrame,
    day_index: pd.DatetimeIndex
) -> pd.Series:
    """
    Cumulative distinct words reviewed, by first-review day.
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")

    first_seen = events_df.groupby("card_id")["timestamp"].min().dt.floor("D")
    counts = first_seen.value_counts().sort_index()
    return counts.reindex(day_index, fill_value=0).cumsum().astype("int64")


def compute_recall_rate(events_df: pd.DataFrame) -> Optional[float]:
    """
    Share of reviews not rated AGAIN; None without reviews.
    """
    if events_df.empty:
        return None
    return float((events_df["rating"] != int(Rating.AGAIN)).mean())
