"""
Scheduler - FSRS Review-Outcome Transition

Pure FSRS scheduling and state updates (no database calls).

Main workflow:
1. Load card (caller's responsibility)
2. Validate the rating
3. Determine elapsed days and retrievability
4. Apply the transition for the card's state (New, Learning/Relearning, Review)
5. Return updated card + event data dict

The input card is never modified; the caller persists the returned copy.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import logging
import math

from vocab_srs.errors import InvalidRating, SchedulingError
from vocab_srs.fsrs import ltm_updates, stm_updates
from vocab_srs.fsrs.constants import (
    Rating,
    State,
    LEARNER_RATINGS,
    NEW_CARD_STEPS,
    LEARNING_STEPS,
    RELEARNING_STEP,
)
from vocab_srs.fsrs.memory_state import (
    Card,
    calculate_retrievability,
    review_anchor,
    whole_days_between,
)


logger = logging.getLogger(__name__)

# (state, stability, difficulty, scheduled_days, due)
Transition = Tuple[State, float, float, int, datetime]


def compute_next_state(
    card: Card,
    rating: Rating,
    now: Optional[datetime] = None
) -> Tuple[Card, dict]:
    """
    Process a review and return the updated card + event data.

    This is the core FSRS algorithm. No database calls.
    Caller is responsible for:
    1. Loading the card
    2. Saving the returned card after review
    3. Persisting the event

    Args:
        card: Card snapshot (left untouched)
        rating: Learner feedback (AGAIN, HARD, GOOD, EASY)
        now: Review timestamp (defaults to now)

    Returns:
        Tuple of (updated_card, event_data_dict)

    Raises:
        InvalidRating: rating is MANUAL or not a rating at all
        SchedulingError: the prior state is malformed or the model
            produced a non-finite value
    """
    rating = validate_rating(rating)
    if now is None:
        now = datetime.now(timezone.utc)

    try:
        if card.state == State.NEW:
            elapsed_days = 0
            retrievability_before = None
            transition = _new_card_transition(rating, now)
        else:
            _check_prior_state(card)
            elapsed_days = whole_days_between(review_anchor(card), now)
            retrievability_before = calculate_retrievability(card.stability, elapsed_days)
            if card.state == State.REVIEW:
                transition = _review_transition(card, rating, retrievability_before, now)
            else:
                transition = _learning_transition(card, rating, now)
    except (ArithmeticError, TypeError, ValueError) as exc:
        logger.error("FSRS update failed for %s (%s): %s", card.card_id, rating.name, exc)
        raise SchedulingError(card.card_id, str(exc)) from exc

    state, stability, difficulty, scheduled_days, due = transition
    if not (math.isfinite(stability) and math.isfinite(difficulty)):
        logger.error("FSRS produced non-finite state for %s", card.card_id)
        raise SchedulingError(card.card_id, "model produced a non-finite stability or difficulty")

    updated = replace(
        card,
        state=state,
        stability=stability,
        difficulty=difficulty,
        elapsed_days=elapsed_days,
        scheduled_days=scheduled_days,
        due=due,
        reps=card.reps + 1,
        lapses=card.lapses + (1 if rating == Rating.AGAIN else 0),
        last_review=now,
        learned=state == State.REVIEW,
        seen=True,
    )

    event_data = {
        'card_id': card.card_id,
        'timestamp': now,
        'rating': rating,
        'state_before': card.state,
        'state_after': updated.state,
        'stability_before': card.stability if not card.is_new else None,
        'difficulty_before': card.difficulty if not card.is_new else None,
        'retrievability_before': retrievability_before,
        'stability_after': updated.stability,
        'difficulty_after': updated.difficulty,
        'elapsed_days': elapsed_days,
        'scheduled_days': scheduled_days,
    }

    return updated, event_data


def validate_rating(rating) -> Rating:
    """Coerce to Rating, rejecting MANUAL and unknown values."""
    try:
        rating = Rating(rating)
    except ValueError as exc:
        raise InvalidRating(rating) from exc
    if rating not in LEARNER_RATINGS:
        raise InvalidRating(rating)
    return rating


def _check_prior_state(card: Card):
    """Reject reviewed cards whose memory state cannot feed the formulas."""
    if not math.isfinite(card.stability) or card.stability <= 0:
        raise SchedulingError(card.card_id, f"stability must be positive, got {card.stability!r}")
    if not math.isfinite(card.difficulty) or card.difficulty <= 0:
        raise SchedulingError(card.card_id, f"difficulty must be positive, got {card.difficulty!r}")


def _new_card_transition(rating: Rating, now: datetime) -> Transition:
    """
    First review: initial S and D from the rating.

    EASY graduates straight to Review; other ratings enter the
    learning steps.
    """
    stability = ltm_updates.init_stability(rating)
    difficulty = ltm_updates.init_difficulty(rating)

    if rating == Rating.EASY:
        interval = ltm_updates.next_interval(stability)
        return State.REVIEW, stability, difficulty, interval, now + timedelta(days=interval)

    return State.LEARNING, stability, difficulty, 0, now + NEW_CARD_STEPS[rating]


def _learning_transition(card: Card, rating: Rating, now: datetime) -> Transition:
    """
    Learning/Relearning review: short-term stability update.

    AGAIN/HARD stay in the current learning state; GOOD/EASY graduate
    to Review, with EASY at least one day beyond GOOD.
    """
    difficulty = ltm_updates.next_difficulty(card.difficulty, rating)
    stability = stm_updates.next_short_term_stability(card.stability, rating)

    if stm_updates.stays_in_learning(rating):
        return card.state, stability, difficulty, 0, now + LEARNING_STEPS[rating]

    interval = ltm_updates.next_interval(stability)
    if rating == Rating.EASY:
        good_stability = stm_updates.next_short_term_stability(card.stability, Rating.GOOD)
        good_interval = ltm_updates.next_interval(good_stability)
        interval = max(interval, good_interval + 1)

    return State.REVIEW, stability, difficulty, interval, now + timedelta(days=interval)


def _review_transition(
    card: Card,
    rating: Rating,
    retrievability: float,
    now: datetime
) -> Transition:
    """
    Review-state review: long-term stability update.

    AGAIN demotes to Relearning. Intervals for the success ratings are
    kept strictly ordered: hard <= good < easy.
    """
    difficulty = ltm_updates.next_difficulty(card.difficulty, rating)

    if rating == Rating.AGAIN:
        stability = ltm_updates.next_forget_stability(
            card.difficulty, card.stability, retrievability
        )
        return State.RELEARNING, stability, difficulty, 0, now + RELEARNING_STEP

    stabilities = {
        grade: ltm_updates.next_recall_stability(
            card.difficulty, card.stability, retrievability, grade
        )
        for grade in (Rating.HARD, Rating.GOOD, Rating.EASY)
    }

    hard_interval = ltm_updates.next_interval(stabilities[Rating.HARD])
    good_interval = ltm_updates.next_interval(stabilities[Rating.GOOD])
    hard_interval = min(hard_interval, good_interval)
    good_interval = max(good_interval, hard_interval + 1)
    easy_interval = max(ltm_updates.next_interval(stabilities[Rating.EASY]), good_interval + 1)

    interval = {
        Rating.HARD: hard_interval,
        Rating.GOOD: good_interval,
        Rating.EASY: easy_interval,
    }[rating]

    return State.REVIEW, stabilities[rating], difficulty, interval, now + timedelta(days=interval)
