"""
Read-only word lists and counters over the card collection.

Nothing here modifies a card.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from vocab_srs.analytics.constants import (
    STALE_DAYS,
    STRONGEST_LIMIT,
    WEAK_LAPSE_THRESHOLD,
    WEAK_STABILITY_THRESHOLD,
)
from vocab_srs.fsrs.constants import State
from vocab_srs.fsrs.memory_state import Card, as_aware, is_same_day, split_card_id


def weak_words(
    cards: Iterable[Card],
    lapse_threshold: int = WEAK_LAPSE_THRESHOLD,
    stability_threshold: float = WEAK_STABILITY_THRESHOLD
) -> list[Card]:
    """
    Words that keep getting forgotten.

    A word is weak when lapses >= lapse_threshold and stability is below
    stability_threshold. Worst first: lower stability, then more lapses,
    then higher difficulty.
    """
    weak = [
        c for c in cards
        if c.lapses >= lapse_threshold and c.stability < stability_threshold
    ]
    return sorted(weak, key=lambda c: (c.stability, -c.lapses, -c.difficulty))


def stale_words(
    cards: Iterable[Card],
    weak: Iterable[Card] = (),
    days: int = STALE_DAYS,
    now: Optional[datetime] = None
) -> list[Card]:
    """
    Reviewed words not repeated for more than `days` days, oldest first.

    Cards never reviewed are excluded, as are cards already listed as weak.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    threshold = as_aware(now) - timedelta(days=days)
    weak_ids = {c.card_id for c in weak}

    stale = [
        c for c in cards
        if c.last_review is not None
        and as_aware(c.last_review) < threshold
        and c.card_id not in weak_ids
    ]
    return sorted(stale, key=lambda c: as_aware(c.last_review))


def words_due_tomorrow(cards: Iterable[Card], now: Optional[datetime] = None) -> int:
    """Count of non-New cards whose due date falls on the day after `now`."""
    if now is None:
        now = datetime.now(timezone.utc)
    tomorrow = now + timedelta(days=1)
    return sum(
        1 for c in cards
        if c.state != State.NEW and is_same_day(c.due, tomorrow)
    )


def strongest_words(cards: Iterable[Card], limit: int = STRONGEST_LIMIT) -> list[Card]:
    """Top `limit` reviewed cards by stability, highest first."""
    reviewed = [c for c in cards if c.last_review is not None]
    return sorted(reviewed, key=lambda c: c.stability, reverse=True)[:max(0, limit)]


def seen_words_count(cards: Iterable[Card]) -> int:
    return sum(1 for c in cards if c.seen)


def learned_words_count(cards: Iterable[Card]) -> int:
    return sum(1 for c in cards if c.learned)


def studying_words_count(card_ids: Iterable[str], opened_group_ids: Iterable[int]) -> int:
    """Words that belong to an opened vocabulary group."""
    opened = set(opened_group_ids)
    return sum(1 for card_id in card_ids if split_card_id(card_id)[0] in opened)
