"""
Shared fixtures for the scheduler tests.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from vocab_srs.fsrs.constants import State
from vocab_srs.fsrs.database import SqlCardRepository
from vocab_srs.fsrs.memory_state import Card
from vocab_srs.fsrs.repository import InMemoryCardRepository


# Midday, so +/- a few hours never crosses a calendar day
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_card():
    """
    Factory for cards in any state.

    Reviewed states default to a plausible memory state (S=5, D=5,
    reviewed 5 days ago, due now).
    """
    counter = itertools.count(1)

    def _make(card_id=None, state=State.NEW, **fields):
        if card_id is None:
            card_id = f"1_{next(counter)}"
        if state != State.NEW:
            fields.setdefault("stability", 5.0)
            fields.setdefault("difficulty", 5.0)
            fields.setdefault("last_review", NOW - timedelta(days=5))
            fields.setdefault("reps", 3)
            fields.setdefault("seen", True)
            fields.setdefault("learned", state == State.REVIEW)
        fields.setdefault("due", NOW)
        return Card(card_id=card_id, state=state, **fields)

    return _make


@pytest.fixture
def memory_repo():
    return InMemoryCardRepository()


@pytest.fixture
def sql_repo(tmp_path):
    """SQLite-file repository, fresh per test."""
    repo = SqlCardRepository(f"sqlite:///{tmp_path / 'learning.db'}")
    yield repo
    repo.engine.dispose()
