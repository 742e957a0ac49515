"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from vocab_srs.analytics.constants import EVENT_COLUMNS
from vocab_srs.fsrs.repository import CardRepository


def load_review_events_df(
    repository: CardRepository,
    card_ids: Optional[Iterable[str]] = None
) -> pd.DataFrame:
    """
    Load review events into a dataframe sorted by timestamp.
    """
    rows = repository.get_review_events(card_ids)
    if not rows:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(rows)
    df = df[["card_id", "timestamp", "rating"]].copy()
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df = df.dropna(subset=["card_id", "timestamp"])
    df["rating"] = df["rating"].astype("int64")
    df["day_utc"] = df["timestamp"].dt.floor("D")
    df = df.sort_values("timestamp").reset_index(drop=True)
    return df
