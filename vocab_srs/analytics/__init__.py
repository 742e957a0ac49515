"""
Analytics package exports.
"""

from vocab_srs.analytics.constants import (
    WEAK_LAPSE_THRESHOLD,
    WEAK_STABILITY_THRESHOLD,
    STALE_DAYS,
    STRONGEST_LIMIT,
)
from vocab_srs.analytics.word_lists import (
    weak_words,
    stale_words,
    words_due_tomorrow,
    strongest_words,
    seen_words_count,
    learned_words_count,
    studying_words_count,
)
from vocab_srs.analytics.service import build_stats_dashboard
from vocab_srs.analytics.types import StatsDashboard

__all__ = [
    "WEAK_LAPSE_THRESHOLD",
    "WEAK_STABILITY_THRESHOLD",
    "STALE_DAYS",
    "STRONGEST_LIMIT",
    "weak_words",
    "stale_words",
    "words_due_tomorrow",
    "strongest_words",
    "seen_words_count",
    "learned_words_count",
    "studying_words_count",
    "build_stats_dashboard",
    "StatsDashboard",
]
