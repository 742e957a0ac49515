"""
Types for the statistics dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd

from vocab_srs.fsrs.memory_state import Card


@dataclass(frozen=True)
class StatsDashboard:
    """
    Precomputed counters, word lists and series for the statistics screen.
    """
    total_words: int
    seen_words: int
    learned_words: int
    studying_words: int
    weak_words: list[Card]
    stale_words: list[Card]
    due_tomorrow: int
    strongest_words: list[Card]
    reviews_daily: pd.Series
    studied_cumulative_daily: pd.Series
    recall_rate: Optional[float]
    quizzes_completed: int
    average_quiz_score: float

    @property
    def weak_count(self) -> int:
        return len(self.weak_words)

    @property
    def stale_count(self) -> int:
        return len(self.stale_words)
