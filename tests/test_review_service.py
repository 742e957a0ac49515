"""
Tests for the session workflow: provisioning, loading today's queue and
submitting reviews against a repository.
"""

from datetime import timedelta

import pytest

from vocab_srs.errors import CardNotFound, InvalidRating, PersistenceFailure, SchedulingError
from vocab_srs.fsrs.constants import Rating, State
from vocab_srs.fsrs.memory_state import start_of_day
from vocab_srs.fsrs.repository import InMemoryCardRepository
from vocab_srs.review_service import (
    load_today,
    mark_seen,
    open_group,
    provision_cards,
    record_quiz_completion,
    submit_review,
)


class BrokenSaveRepository(InMemoryCardRepository):
    """Reads work, every write fails. Seed it through the base class."""

    def save_cards(self, cards):
        cards = list(cards)
        if cards:
            raise PersistenceFailure("disk full")

    def save_review(self, card, event):
        raise PersistenceFailure("disk full")


def ids(cards):
    return [c.card_id for c in cards]


class TestProvisionCards:

    def test_creates_missing_cards_only(self, memory_repo, now, make_card):
        memory_repo.save_cards([make_card("1_1", state=State.REVIEW)])

        created = provision_cards(memory_repo, ["1_1", "1_2", "1_3", "1_2"], now=now)

        assert ids(created) == ["1_2", "1_3"]
        assert memory_repo.fetch_card("1_1").state == State.REVIEW
        assert all(c.state == State.NEW for c in created)

    def test_second_call_creates_nothing(self, memory_repo, now):
        provision_cards(memory_repo, ["1_1"], now=now)

        assert provision_cards(memory_repo, ["1_1"], now=now) == []


class TestLoadToday:

    def test_persists_assignment_marks(self, memory_repo, now):
        provision_cards(memory_repo, ["a", "b", "c"], now=now)

        selection = load_today(memory_repo, 2, now=now)

        assert ids(selection.cards) == ["a", "b"]
        stored = {c.card_id: c for c in memory_repo.fetch_cards()}
        assert stored["a"].assigned_date == start_of_day(now)
        assert stored["b"].assigned_date == start_of_day(now)
        assert stored["c"].assigned_date is None

    def test_reload_later_same_day_gives_same_queue(self, memory_repo, now):
        provision_cards(memory_repo, ["a", "b", "c"], now=now)

        first = load_today(memory_repo, 2, now=now)
        second = load_today(memory_repo, 2, now=now + timedelta(hours=3))

        assert ids(second.cards) == ids(first.cards)
        assert second.newly_assigned == []

    def test_lowered_limit_trims_before_selecting(self, memory_repo, now):
        provision_cards(memory_repo, ["a", "b", "c"], now=now)
        load_today(memory_repo, 3, now=now)

        selection = load_today(memory_repo, 1, now=now)

        assert ids(selection.cards) == ["a"]
        stored = {c.card_id: c for c in memory_repo.fetch_cards()}
        assert stored["b"].assigned_date is None
        assert stored["c"].assigned_date is None

    def test_new_day_assigns_fresh_words(self, memory_repo, now):
        provision_cards(memory_repo, ["a", "b", "c"], now=now)
        load_today(memory_repo, 1, now=now)
        submit_review(memory_repo, "a", Rating.EASY, now=now)

        tomorrow = load_today(memory_repo, 1, now=now + timedelta(days=1))

        assert ids(tomorrow.cards) == ["b"]

    def test_restricted_to_card_ids(self, memory_repo, now):
        provision_cards(memory_repo, ["1_1", "2_1"], now=now)

        selection = load_today(memory_repo, 5, card_ids=["2_1"], now=now)

        assert ids(selection.cards) == ["2_1"]

    def test_save_failure_propagates(self, now, make_card):
        repo = BrokenSaveRepository()
        InMemoryCardRepository.save_cards(repo, [make_card("a"), make_card("b")])

        with pytest.raises(PersistenceFailure):
            load_today(repo, 2, now=now)

        assert all(c.assigned_date is None for c in repo.fetch_cards())


class TestSubmitReview:

    def test_persists_card_and_event(self, memory_repo, now):
        provision_cards(memory_repo, ["a"], now=now)

        updated = submit_review(memory_repo, "a", Rating.GOOD, now=now)

        assert memory_repo.fetch_card("a") == updated
        events = memory_repo.get_review_events()
        assert len(events) == 1
        assert events[0]["card_id"] == "a"
        assert events[0]["rating"] == Rating.GOOD

    def test_unknown_card(self, memory_repo, now):
        with pytest.raises(CardNotFound):
            submit_review(memory_repo, "missing", Rating.GOOD, now=now)

    def test_invalid_rating_leaves_card_unchanged(self, memory_repo, now):
        provision_cards(memory_repo, ["a"], now=now)
        before = memory_repo.fetch_card("a")

        with pytest.raises(InvalidRating):
            submit_review(memory_repo, "a", Rating.MANUAL, now=now)

        assert memory_repo.fetch_card("a") == before
        assert memory_repo.get_review_events() == []

    def test_scheduling_error_leaves_card_unchanged(self, memory_repo, now, make_card):
        broken = make_card("a", state=State.REVIEW, stability=float("nan"))
        memory_repo.save_cards([broken])

        with pytest.raises(SchedulingError):
            submit_review(memory_repo, "a", Rating.GOOD, now=now)

        assert memory_repo.get_review_events() == []

    def test_save_failure_propagates(self, now, make_card):
        card = make_card("a", state=State.REVIEW)
        repo = BrokenSaveRepository()
        InMemoryCardRepository.save_cards(repo, [card])

        with pytest.raises(PersistenceFailure):
            submit_review(repo, "a", Rating.GOOD, now=now)

        assert repo.fetch_card("a") == card

    def test_repeated_submission_advances_twice(self, memory_repo, now, make_card):
        memory_repo.save_cards([make_card("a", state=State.REVIEW, reps=3)])

        submit_review(memory_repo, "a", Rating.GOOD, now=now)
        submit_review(memory_repo, "a", Rating.GOOD, now=now)

        assert memory_repo.fetch_card("a").reps == 5


class TestMarkSeen:

    def test_only_unseen_cards_change(self, memory_repo, now, make_card):
        memory_repo.save_cards([make_card("a"), make_card("b", state=State.REVIEW)])

        changed = mark_seen(memory_repo, ["a", "b"])

        assert ids(changed) == ["a"]
        assert memory_repo.fetch_card("a").seen is True
        assert memory_repo.fetch_card("a").state == State.NEW


class TestOpenGroup:

    def test_provisions_composite_ids(self, memory_repo, now):
        created = open_group(memory_repo, 4, [1, 2, 3], now=now)

        assert ids(created) == ["4_1", "4_2", "4_3"]
        assert open_group(memory_repo, 4, [1, 2, 3, 4], now=now)[0].card_id == "4_4"


class TestRecordQuizCompletion:

    def test_accumulates_scores(self, memory_repo):
        record_quiz_completion(memory_repo, 50)
        stats = record_quiz_completion(memory_repo, 100)

        assert stats.completed_count == 2
        assert stats.average_score == 75
        assert memory_repo.fetch_quiz_stats() == stats

    def test_invalid_score_is_not_stored(self, memory_repo):
        with pytest.raises(ValueError):
            record_quiz_completion(memory_repo, 120)

        assert memory_repo.fetch_quiz_stats().completed_count == 0
