"""
Service layer to assemble the statistics dashboard.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from vocab_srs import settings as config
from vocab_srs.analytics.metrics import (
    build_day_index,
    compute_recall_rate,
    compute_reviews_daily,
    compute_studied_cumulative,
)
from vocab_srs.analytics.queries import load_review_events_df
from vocab_srs.analytics.types import StatsDashboard
from vocab_srs.analytics.word_lists import (
    learned_words_count,
    seen_words_count,
    stale_words,
    strongest_words,
    studying_words_count,
    weak_words,
    words_due_tomorrow,
)
from vocab_srs.fsrs.repository import CardRepository


def build_stats_dashboard(
    repository: CardRepository,
    now: Optional[datetime] = None,
    card_ids: Optional[Iterable[str]] = None,
    settings: Optional[config.SchedulerSettings] = None,
    opened_group_ids: Optional[Iterable[int]] = None
) -> StatsDashboard:
    """
    Build all counters, word lists and series needed by the statistics screen.

    Args:
        repository: Card store to read from (never written)
        now: Reference timestamp (defaults to now)
        card_ids: Restrict to these cards (None = all stored cards)
        settings: Thresholds (defaults to load_settings())
        opened_group_ids: Groups the learner has opened; words in them
            count as studying (None = every loaded card)
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if settings is None:
        settings = config.load_settings()
    if card_ids is not None:
        card_ids = list(card_ids)

    cards = repository.fetch_cards(card_ids)
    weak = weak_words(
        cards,
        lapse_threshold=settings.weak_lapse_threshold,
        stability_threshold=settings.weak_stability_threshold,
    )
    if opened_group_ids is None:
        studying = len(cards)
    else:
        studying = studying_words_count((c.card_id for c in cards), opened_group_ids)

    events_df = load_review_events_df(repository, card_ids)
    day_index = build_day_index(events_df)
    quiz_stats = repository.fetch_quiz_stats()

    return StatsDashboard(
        total_words=len(cards),
        seen_words=seen_words_count(cards),
        learned_words=learned_words_count(cards),
        studying_words=studying,
        weak_words=weak,
        stale_words=stale_words(cards, weak, days=settings.stale_days, now=now),
        due_tomorrow=words_due_tomorrow(cards, now=now),
        strongest_words=strongest_words(cards),
        reviews_daily=compute_reviews_daily(events_df, day_index),
        studied_cumulative_daily=compute_studied_cumulative(events_df, day_index),
        recall_rate=compute_recall_rate(events_df),
        quizzes_completed=quiz_stats.completed_count,
        average_quiz_score=quiz_stats.average_score,
    )
