"""
Review Service - host-facing API for review sessions

Ties the memory model, the daily queue and a card repository together.

Main workflow:
1. open_group() / provision_cards() when vocabulary groups are opened
2. load_today() at session start (trim, select, persist assignment marks)
3. submit_review() for each answered card (transition, persist card + event)
4. record_quiz_completion() when a quiz over an opened group ends

Every step either completes and is persisted, or raises and leaves the
stored cards as they were.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Iterable, Optional
import logging

from vocab_srs.daily_queue import (
    TodaySelection,
    select_today,
    trim_assigned_new_words_if_needed,
)
from vocab_srs.errors import CardNotFound, SchedulerError
from vocab_srs.fsrs.constants import Rating
from vocab_srs.fsrs.memory_state import Card, make_card_id, mark_seen as flag_seen, new_card
from vocab_srs.fsrs.repository import CardRepository
from vocab_srs.fsrs.scheduler import compute_next_state
from vocab_srs.quiz_stats import QuizStats


logger = logging.getLogger(__name__)


def provision_cards(
    repository: CardRepository,
    card_ids: Iterable[str],
    now: Optional[datetime] = None
) -> list[Card]:
    """
    Create New cards for in-scope words that have none yet.

    Existing cards are left untouched.

    Args:
        repository: Card store
        card_ids: Ids of all words in opened groups
        now: Creation timestamp (defaults to now)

    Returns:
        The cards that were created
    """
    if now is None:
        now = datetime.now(timezone.utc)
    card_ids = list(dict.fromkeys(card_ids))

    existing = {c.card_id for c in repository.fetch_cards(card_ids)}
    created = [new_card(card_id, now) for card_id in card_ids if card_id not in existing]
    if created:
        repository.save_cards(created)
        logger.info("Provisioned %d new card(s)", len(created))
    return created


def load_today(
    repository: CardRepository,
    new_card_limit: int,
    card_ids: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None
) -> TodaySelection:
    """
    Build today's queue and persist the assignment bookkeeping.

    Runs the trimmer before the selector so a lowered limit takes
    effect immediately.

    Args:
        repository: Card store
        new_card_limit: Daily cap on new cards
        card_ids: In-scope card ids (None = every stored card)
        now: Current timestamp (defaults to now)

    Returns:
        TodaySelection for the session

    Raises:
        PersistenceFailure: fetching or saving failed; no queue is guessed
    """
    if now is None:
        now = datetime.now(timezone.utc)

    cards = repository.fetch_cards(card_ids)

    trim = trim_assigned_new_words_if_needed(cards, new_card_limit, now)
    if trim.cleared:
        repository.save_cards(trim.cleared)

    selection = select_today(trim.cards, new_card_limit, now)
    if selection.newly_assigned:
        repository.save_cards(selection.newly_assigned)

    logger.info(
        "Today's queue: %d new, %d learning, %d review",
        selection.new_count, selection.learning_count, selection.review_count,
    )
    return selection


def submit_review(
    repository: CardRepository,
    card_id: str,
    rating: Rating,
    now: Optional[datetime] = None
) -> Card:
    """
    Apply a learner rating to a stored card and persist the result.

    Loads a fresh copy of the card, computes the transition and saves the
    card together with its review event in one transaction.

    Args:
        repository: Card store
        card_id: Card being answered
        rating: Learner feedback (AGAIN, HARD, GOOD, EASY)
        now: Review timestamp (defaults to now)

    Returns:
        The updated card, as persisted

    Raises:
        CardNotFound: no card stored under card_id
        InvalidRating: rating not allowed in the review flow
        SchedulingError: memory-model computation failed
        PersistenceFailure: loading or saving failed
    """
    card = repository.fetch_card(card_id)
    if card is None:
        raise CardNotFound(card_id)

    try:
        updated, event = compute_next_state(card, rating, now)
    except SchedulerError:
        logger.error("Review of %s aborted; card left unchanged", card_id)
        raise

    repository.save_review(updated, event)
    return updated


def mark_seen(repository: CardRepository, card_ids: Iterable[str]) -> list[Card]:
    """
    Flag cards as shown to the learner (quiz exposure).

    Only cards that were not already seen are written.

    Returns:
        The cards that changed
    """
    changed = [flag_seen(c) for c in repository.fetch_cards(card_ids) if not c.seen]
    if changed:
        repository.save_cards(changed)
    return changed


def open_group(
    repository: CardRepository,
    group_id: int,
    local_ids: Iterable[int],
    now: Optional[datetime] = None
) -> list[Card]:
    """
    Provision cards for every word of a vocabulary group.

    Returns:
        The cards that were created
    """
    return provision_cards(
        repository,
        (make_card_id(group_id, local_id) for local_id in local_ids),
        now=now,
    )


def record_quiz_completion(repository: CardRepository, score: float) -> QuizStats:
    """
    Add a finished quiz to the stored quiz statistics.

    Args:
        repository: Store holding the quiz statistics
        score: Percentage of correct answers (0-100)

    Returns:
        The updated statistics, as persisted

    Raises:
        ValueError: score outside 0-100
        PersistenceFailure: loading or saving failed
    """
    stats = repository.fetch_quiz_stats().record(score)
    repository.save_quiz_stats(stats)
    logger.info("Quiz completed with %.0f%% (%d total)", score, stats.completed_count)
    return stats
