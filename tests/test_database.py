"""
Tests for the SQLAlchemy card repository.
"""

from datetime import datetime, timedelta, timezone

import pytest

from vocab_srs.errors import PersistenceFailure
from vocab_srs.fsrs.constants import Rating, State
from vocab_srs.fsrs.database import SqlCardRepository, get_engine, reset_db
from vocab_srs.fsrs.memory_state import new_card
from vocab_srs.fsrs.models import Base
from vocab_srs.fsrs.scheduler import compute_next_state
from vocab_srs.quiz_stats import QuizStats
from vocab_srs.review_service import load_today, provision_cards


class TestCardStorage:

    def test_round_trip_keeps_all_fields(self, sql_repo, now, make_card):
        athens = timezone(timedelta(hours=2))
        card = make_card(
            "4_2",
            state=State.RELEARNING,
            stability=1.25,
            difficulty=7.5,
            lapses=3,
            reps=11,
            elapsed_days=4,
            scheduled_days=0,
            last_review=datetime(2026, 3, 9, 23, 15, tzinfo=athens),
            assigned_date=datetime(2026, 3, 1, tzinfo=timezone.utc),
        )

        sql_repo.save_cards([card])
        stored = sql_repo.fetch_card("4_2")

        assert stored == card
        assert stored.state is State.RELEARNING
        assert stored.last_review.utcoffset() == timedelta(hours=2)

    def test_missing_card(self, sql_repo):
        assert sql_repo.fetch_card("nope") is None

    def test_insertion_order_is_preserved(self, sql_repo, now):
        card_ids = ["9_1", "1_5", "3_3", "1_1"]
        sql_repo.save_cards(new_card(card_id, now) for card_id in card_ids)

        assert [c.card_id for c in sql_repo.fetch_cards()] == card_ids
        assert [c.card_id for c in sql_repo.fetch_cards(["1_1", "9_1"])] == ["9_1", "1_1"]

    def test_update_does_not_move_card(self, sql_repo, now):
        sql_repo.save_cards([new_card("a", now), new_card("b", now)])
        a = sql_repo.fetch_card("a")

        updated, _ = compute_next_state(a, Rating.GOOD, now)
        sql_repo.save_cards([updated])

        assert [c.card_id for c in sql_repo.fetch_cards()] == ["a", "b"]
        assert sql_repo.fetch_card("a").state == State.LEARNING


class TestReviewEvents:

    def test_review_saved_with_card(self, sql_repo, now):
        sql_repo.save_cards([new_card("a", now)])
        updated, event = compute_next_state(sql_repo.fetch_card("a"), Rating.EASY, now)

        sql_repo.save_review(updated, event)

        assert sql_repo.fetch_card("a") == updated
        (stored,) = sql_repo.get_review_events()
        assert stored["card_id"] == "a"
        assert stored["rating"] is Rating.EASY
        assert stored["timestamp"] == now
        assert stored["state_before"] == State.NEW
        assert stored["stability_before"] is None
        assert stored["scheduled_days"] == updated.scheduled_days

    def test_events_filtered_by_card(self, sql_repo, now):
        sql_repo.save_cards([new_card("a", now), new_card("b", now)])
        for card_id in ("a", "b"):
            updated, event = compute_next_state(sql_repo.fetch_card(card_id), Rating.GOOD, now)
            sql_repo.save_review(updated, event)

        assert [e["card_id"] for e in sql_repo.get_review_events(["b"])] == ["b"]


class TestSessionOnDatabase:

    def test_assignment_survives_reconnect(self, tmp_path, now):
        url = f"sqlite:///{tmp_path / 'session.db'}"
        repo = SqlCardRepository(url)
        provision_cards(repo, ["a", "b", "c"], now=now)
        first = load_today(repo, 2, now=now)
        repo.engine.dispose()

        reopened = SqlCardRepository(url)
        second = load_today(reopened, 2, now=now + timedelta(hours=1))
        reopened.engine.dispose()

        assert [c.card_id for c in second.cards] == [c.card_id for c in first.cards]
        assert second.newly_assigned == []


class TestFailures:

    def test_backend_error_becomes_persistence_failure(self, sql_repo, now):
        sql_repo.save_cards([new_card("a", now)])
        Base.metadata.drop_all(sql_repo.engine)

        with pytest.raises(PersistenceFailure):
            sql_repo.fetch_cards()
        with pytest.raises(PersistenceFailure):
            sql_repo.save_cards([new_card("b", now)])

    def test_failed_review_save_writes_nothing(self, sql_repo, now):
        sql_repo.save_cards([new_card("a", now)])
        original = sql_repo.fetch_card("a")
        updated, event = compute_next_state(original, Rating.GOOD, now)
        event["stability_after"] = None  # NOT NULL column

        with pytest.raises(PersistenceFailure):
            sql_repo.save_review(updated, event)

        assert sql_repo.fetch_card("a") == original
        assert sql_repo.get_review_events() == []

    def test_reset_db(self, tmp_path, now):
        engine = get_engine(f"sqlite:///{tmp_path / 'reset.db'}")
        repo = SqlCardRepository(engine=engine)
        repo.save_cards([new_card("a", now)])

        reset_db(engine)

        assert repo.fetch_cards() == []
        engine.dispose()


class TestQuizStatsStorage:

    def test_zeroed_before_first_quiz(self, sql_repo):
        assert sql_repo.fetch_quiz_stats() == QuizStats()

    def test_round_trip_and_reset(self, sql_repo):
        sql_repo.save_quiz_stats(QuizStats(completed_count=1, total_score=80.0))
        sql_repo.save_quiz_stats(QuizStats(completed_count=2, total_score=150.0))

        assert sql_repo.fetch_quiz_stats() == QuizStats(completed_count=2, total_score=150.0)

        reset_db(sql_repo.engine)

        assert sql_repo.fetch_quiz_stats() == QuizStats()
