"""
FSRS - Free Spaced Repetition Scheduler

Card memory model for the vocabulary scheduler.

This package implements FSRS-5 with:
- Learning steps (minutes) for New, Learning and Relearning cards
- Power forgetting curve: R = (1 + FACTOR * t / S) ^ DECAY
- Interpretable memory state (Stability, Difficulty, Retrievability)
- Deterministic intervals (no fuzz)

Quick start:
    from vocab_srs import fsrs

    # Process a review (algorithm only, no DB calls)
    card, event_data = fsrs.compute_next_state(card, fsrs.Rating.GOOD)

    # Persist it
    repo = fsrs.SqlCardRepository()
    repo.save_review(card, event_data)
"""

# Constants and parameters
from vocab_srs.fsrs.constants import (
    Rating,
    State,
    LEARNER_RATINGS,
    REQUEST_RETENTION,
    MAXIMUM_INTERVAL,
    DECAY,
    FACTOR,
    S_MIN,
    D_MIN,
    D_MAX,
    DEFAULT_WEIGHTS,
)

# Memory state
from vocab_srs.fsrs.memory_state import (
    Card,
    make_card_id,
    split_card_id,
    new_card,
    mark_seen,
    as_aware,
    start_of_day,
    is_same_day,
    whole_days_between,
    review_anchor,
    calculate_retrievability,
    current_retrievability,
)

# Core scheduler API (algorithm logic)
from vocab_srs.fsrs.scheduler import compute_next_state, validate_rating

# Storage
from vocab_srs.fsrs.repository import CardRepository, InMemoryCardRepository
from vocab_srs.fsrs.database import (
    SqlCardRepository,
    get_database_url,
    get_engine,
    init_db,
    reset_db,
)


__all__ = [
    # Core algorithm
    "compute_next_state",
    "validate_rating",

    # Enums
    "Rating",
    "State",
    "LEARNER_RATINGS",

    # Memory state
    "Card",
    "make_card_id",
    "split_card_id",
    "new_card",
    "mark_seen",
    "as_aware",
    "start_of_day",
    "is_same_day",
    "whole_days_between",
    "review_anchor",
    "calculate_retrievability",
    "current_retrievability",

    # Storage
    "CardRepository",
    "InMemoryCardRepository",
    "SqlCardRepository",
    "get_database_url",
    "get_engine",
    "init_db",
    "reset_db",

    # Parameters
    "REQUEST_RETENTION",
    "MAXIMUM_INTERVAL",
    "DECAY",
    "FACTOR",
    "S_MIN",
    "D_MIN",
    "D_MAX",
    "DEFAULT_WEIGHTS",
]
