"""
Daily queue: which cards to present today.

Builds "today's" queue from the in-scope card collection under a daily
cap on new cards. A New card admitted to today's queue is stamped with
`assigned_date`; the stamps are what make the cap hold across repeated
session loads on the same calendar day.

Both operations here are pure with respect to their input: cards that
need a new `assigned_date` are returned as updated copies for the
caller to persist.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Optional
import logging

from vocab_srs.fsrs.constants import State
from vocab_srs.fsrs.memory_state import Card, as_aware, is_same_day, start_of_day


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodaySelection:
    """
    Result of selecting today's queue.

    `cards` is the queue (new cards first, then due cards, input order
    within each group). `newly_assigned` holds the New cards stamped by
    this call; the caller must persist them.
    """
    cards: list[Card]
    newly_assigned: list[Card] = field(default_factory=list)

    @property
    def new_count(self) -> int:
        return sum(1 for c in self.cards if c.state == State.NEW)

    @property
    def learning_count(self) -> int:
        return sum(1 for c in self.cards if c.state == State.LEARNING)

    @property
    def review_count(self) -> int:
        """Review and Relearning cards, shown together as reviews."""
        return sum(1 for c in self.cards if c.state in (State.REVIEW, State.RELEARNING))

    def __len__(self) -> int:
        return len(self.cards)


@dataclass(frozen=True)
class AssignmentTrim:
    """
    Result of trimming over-assigned new cards.

    `cards` is the input collection with the cleared copies substituted;
    `cleared` holds only the cards whose mark was removed.
    """
    cards: list[Card]
    cleared: list[Card] = field(default_factory=list)


def assigned_on(card: Card, now: datetime) -> bool:
    """True if the card carries an assignment mark for the day of `now`."""
    return card.assigned_date is not None and is_same_day(card.assigned_date, now)


def apply_updates(cards: Iterable[Card], updates: Iterable[Card]) -> list[Card]:
    """Substitute updated copies into a collection, matched by card_id."""
    by_id = {c.card_id: c for c in updates}
    return [by_id.get(c.card_id, c) for c in cards]


def select_today(
    cards: Iterable[Card],
    new_card_limit: int,
    now: Optional[datetime] = None
) -> TodaySelection:
    """
    Select the cards to present today.

    Algorithm:
    1. Cards assigned today that are still New are always included
       (a session resumed later the same day sees the same new words).
    2. Every card assigned today counts against the cap, whatever its
       state now; a word that graduated this morning keeps its slot.
    3. Free slots are filled with unassigned (or previously deferred)
       New cards in input order, which get stamped with today.
    4. Non-New cards with due <= now are appended.

    Args:
        cards: In-scope cards (already filtered to opened groups)
        new_card_limit: Daily cap on new cards
        now: Current timestamp (defaults to now)

    Returns:
        TodaySelection with the queue and the newly stamped cards
    """
    if now is None:
        now = datetime.now(timezone.utc)
    cards = list(cards)
    today = start_of_day(now)

    assigned_today = [c for c in cards if assigned_on(c, now)]
    todays_new_words = [c for c in assigned_today if c.state == State.NEW]

    remaining_slots = max(0, new_card_limit - len(assigned_today))
    newly_assigned: list[Card] = []

    if remaining_slots > 0:
        candidates = [
            c for c in cards
            if c.state == State.NEW and not assigned_on(c, now)
        ]
        newly_assigned = [
            replace(c, assigned_date=today) for c in candidates[:remaining_slots]
        ]

    due_words = [
        c for c in cards
        if c.state != State.NEW and as_aware(c.due) <= as_aware(now)
    ]

    logger.debug(
        "Daily queue: %d resumed new, %d newly assigned, %d due (limit %d, %d slot(s) used)",
        len(todays_new_words), len(newly_assigned), len(due_words),
        new_card_limit, len(assigned_today),
    )

    return TodaySelection(
        cards=todays_new_words + newly_assigned + due_words,
        newly_assigned=newly_assigned,
    )


def trim_assigned_new_words_if_needed(
    cards: Iterable[Card],
    new_card_limit: int,
    now: Optional[datetime] = None
) -> AssignmentTrim:
    """
    Drop assignment marks that exceed a lowered daily cap.

    New cards assigned today beyond the first `new_card_limit` (in the
    existing order) lose their mark and become eligible again.
    Learning, Review and Relearning cards are never touched.

    Run this before select_today at every session start.

    Args:
        cards: In-scope cards
        new_card_limit: Current daily cap on new cards
        now: Current timestamp (defaults to now)

    Returns:
        AssignmentTrim with the adjusted collection and the cleared cards
    """
    if now is None:
        now = datetime.now(timezone.utc)
    cards = list(cards)

    assigned_new = [c for c in cards if c.state == State.NEW and assigned_on(c, now)]
    excess = assigned_new[max(0, new_card_limit):]
    if not excess:
        return AssignmentTrim(cards=cards)

    cleared = [replace(c, assigned_date=None) for c in excess]
    logger.warning(
        "Daily new-card limit lowered to %d; unassigning %d of %d new card(s)",
        new_card_limit, len(cleared), len(assigned_new),
    )
    return AssignmentTrim(cards=apply_updates(cards, cleared), cleared=cleared)
