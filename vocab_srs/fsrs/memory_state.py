"""
Memory State - Card value type, day arithmetic and retrievability

Defines the persisted learning state of one vocabulary word and the
derived quantities the scheduler reads from it.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the word is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional
import math

from vocab_srs.fsrs.constants import DECAY, FACTOR, State


SECONDS_PER_DAY = 86400.0


@dataclass
class Card:
    """
    Memory state for a single vocabulary word.

    The id is the composite "{group_id}_{local_id}" of the word.
    `due` is not meaningful while the card is New.
    `assigned_date` marks the day a New card was admitted to a daily
    queue and is not read once the card leaves New.
    """
    card_id: str
    due: datetime
    state: State = State.NEW

    # Long-term memory parameters
    stability: float = 0.0
    difficulty: float = 0.0

    # Interval bookkeeping
    elapsed_days: int = 0
    scheduled_days: int = 0

    # Counters (never decremented)
    lapses: int = 0
    reps: int = 0

    last_review: Optional[datetime] = None
    assigned_date: Optional[datetime] = None

    # Coarse flags for statistics and UI
    learned: bool = False
    seen: bool = False

    @property
    def is_new(self) -> bool:
        return self.state == State.NEW


def make_card_id(group_id: int, local_id: int) -> str:
    """Build the composite card id of a word."""
    return f"{group_id}_{local_id}"


def split_card_id(card_id: str) -> tuple[int, int]:
    """Inverse of make_card_id: (group_id, local_id)."""
    group_id, _, local_id = card_id.partition("_")
    return int(group_id), int(local_id)


def new_card(card_id: str, now: Optional[datetime] = None) -> Card:
    """
    Initialize state for a word that just entered an opened group.

    Args:
        card_id: Composite word id
        now: Creation timestamp (defaults to now)

    Returns:
        New Card with no review history
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return Card(card_id=card_id, due=now)


def mark_seen(card: Card) -> Card:
    """Return a copy of the card flagged as shown to the learner."""
    return replace(card, seen=True)


# ---- Day arithmetic ----

def as_aware(moment: datetime) -> datetime:
    """Attach UTC to a naive timestamp; aware timestamps pass through."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def start_of_day(moment: datetime) -> datetime:
    """Midnight of the calendar day containing `moment`, same timezone."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def is_same_day(moment: datetime, reference: datetime) -> bool:
    """
    True if `moment` falls on the calendar day of `reference`.

    The calendar of `reference` decides: `moment` is converted to the
    reference timezone before comparing dates. Naive values count as UTC.
    """
    reference = as_aware(reference)
    moment = as_aware(moment).astimezone(reference.tzinfo)
    return moment.date() == reference.date()


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """
    Whole days elapsed from `earlier` to `later`.

    Negative spans (clock moved backwards) count as 0.
    """
    seconds = (as_aware(later) - as_aware(earlier)).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // SECONDS_PER_DAY)


def review_anchor(card: Card) -> Optional[datetime]:
    """
    Prior-review anchor used to compute elapsed days.

    Legacy cards that left New without a recorded `last_review` fall
    back to their current `due`. The fallback understates elapsed time
    for cards rescheduled without a review; it is kept for stored data
    written that way.
    """
    if card.state == State.NEW:
        return None
    if card.last_review is not None:
        return card.last_review
    return legacy_anchor(card)


def legacy_anchor(card: Card) -> datetime:
    """Fallback anchor for non-New cards without `last_review`."""
    return card.due


# ---- Retrievability ----

def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Probability of recall after `elapsed_days` at the given stability.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    R(0) = 1.0 and R(S) = 0.9, the requested retention.

    Args:
        stability: Current stability in days (must be > 0)
        elapsed_days: Days since the last review

    Returns:
        Retrievability between 0 and 1
    """
    if elapsed_days <= 0:
        return 1.0
    return math.pow(1.0 + FACTOR * elapsed_days / stability, DECAY)


def current_retrievability(card: Card, now: Optional[datetime] = None) -> Optional[float]:
    """Retrievability of a reviewed card at `now`; None for New cards."""
    anchor = review_anchor(card)
    if anchor is None or card.stability <= 0:
        return None
    if now is None:
        now = datetime.now(timezone.utc)
    days = max(0.0, (as_aware(now) - as_aware(anchor)).total_seconds() / SECONDS_PER_DAY)
    return calculate_retrievability(card.stability, days)
