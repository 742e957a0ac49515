"""
Database - FSRS Database I/O Operations

Handles all database operations for card state and review events.
Uses SQLAlchemy ORM; any backend with a SQLAlchemy dialect works
(SQLite by default, Postgres in deployment).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Optional
import logging

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from vocab_srs.errors import PersistenceFailure
from vocab_srs.fsrs.constants import Rating, State
from vocab_srs.fsrs.memory_state import Card
from vocab_srs.fsrs.models import Base, CardStateRecord, QuizStatsRecord, ReviewEventRecord
from vocab_srs.fsrs.repository import CardRepository
from vocab_srs.quiz_stats import QuizStats
from vocab_srs import settings as config


logger = logging.getLogger(__name__)

QUIZ_STATS_ROW_ID = 1


def get_database_url() -> str:
    """Database URL from settings (DATABASE_URL or the default SQLite file)."""
    return config.load_settings().database_url


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get SQLAlchemy engine for database connection.

    Creates the parent directory of a SQLite file if needed.

    Args:
        database_url: Connection string (defaults to get_database_url())

    Returns:
        SQLAlchemy Engine instance
    """
    database_url = database_url or get_database_url()
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        database_url,
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


def init_db(engine: Engine):
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates tables if they don't exist.
    """
    try:
        existing_tables = inspect(engine).get_table_names()
        if not {'card_state', 'review_events', 'quiz_stats'} <= set(existing_tables):
            Base.metadata.create_all(engine)
            logger.info("Created FSRS tables at %s", engine.url)
    except SQLAlchemyError as exc:
        logger.exception("Schema initialization failed")
        raise PersistenceFailure(f"Cannot initialize schema: {exc}") from exc


def reset_db(engine: Engine):
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All review history will be lost!
    """
    try:
        Base.metadata.drop_all(engine)
    except SQLAlchemyError as exc:
        logger.exception("Dropping tables failed")
        raise PersistenceFailure(f"Cannot reset database: {exc}") from exc
    logger.warning("All FSRS tables dropped at %s", engine.url)

    init_db(engine)


# ---- Row <-> value conversion ----

def _to_text(moment: Optional[datetime]) -> Optional[str]:
    return moment.isoformat() if moment is not None else None


def _from_text(text: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(text) if text else None


def _card_from_record(record: CardStateRecord) -> Card:
    return Card(
        card_id=record.card_id,
        state=State(record.state),
        due=_from_text(record.due),
        stability=record.stability,
        difficulty=record.difficulty,
        elapsed_days=record.elapsed_days,
        scheduled_days=record.scheduled_days,
        lapses=record.lapses,
        reps=record.reps,
        last_review=_from_text(record.last_review),
        assigned_date=_from_text(record.assigned_date),
        learned=record.learned,
        seen=record.seen,
    )


def _copy_card_to_record(card: Card, record: CardStateRecord):
    record.state = int(card.state)
    record.due = _to_text(card.due)
    record.stability = card.stability
    record.difficulty = card.difficulty
    record.elapsed_days = card.elapsed_days
    record.scheduled_days = card.scheduled_days
    record.lapses = card.lapses
    record.reps = card.reps
    record.last_review = _to_text(card.last_review)
    record.assigned_date = _to_text(card.assigned_date)
    record.learned = card.learned
    record.seen = card.seen


def _event_to_record(event: dict) -> ReviewEventRecord:
    timestamp = event['timestamp']
    return ReviewEventRecord(
        card_id=event['card_id'],
        timestamp=timestamp.isoformat() if isinstance(timestamp, datetime) else timestamp,
        rating=int(event['rating']),
        state_before=int(event['state_before']),
        stability_before=event.get('stability_before'),
        difficulty_before=event.get('difficulty_before'),
        retrievability_before=event.get('retrievability_before'),
        state_after=int(event['state_after']),
        stability_after=event['stability_after'],
        difficulty_after=event['difficulty_after'],
        elapsed_days=event['elapsed_days'],
        scheduled_days=event['scheduled_days'],
    )


def _event_from_record(record: ReviewEventRecord) -> dict:
    return {
        "id": record.id,
        "card_id": record.card_id,
        "timestamp": _from_text(record.timestamp),
        "rating": Rating(record.rating),
        "state_before": State(record.state_before),
        "stability_before": record.stability_before,
        "difficulty_before": record.difficulty_before,
        "retrievability_before": record.retrievability_before,
        "state_after": State(record.state_after),
        "stability_after": record.stability_after,
        "difficulty_after": record.difficulty_after,
        "elapsed_days": record.elapsed_days,
        "scheduled_days": record.scheduled_days,
    }


# ---- Repository ----

class SqlCardRepository(CardRepository):
    """
    CardRepository backed by SQLAlchemy.

    Each operation runs in its own session and either commits fully or
    rolls back; backend errors surface as PersistenceFailure.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        self.engine = engine if engine is not None else get_engine(database_url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        init_db(self.engine)

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database %s failed", action)
            raise PersistenceFailure(f"Database {action} failed: {exc}") from exc
        finally:
            session.close()

    def fetch_cards(self, card_ids: Optional[Iterable[str]] = None) -> list[Card]:
        with self._session("fetch") as session:
            query = session.query(CardStateRecord)
            if card_ids is not None:
                query = query.filter(CardStateRecord.card_id.in_(list(card_ids)))
            return [_card_from_record(r) for r in query.order_by(CardStateRecord.id).all()]

    def fetch_card(self, card_id: str) -> Optional[Card]:
        with self._session("fetch") as session:
            record = session.query(CardStateRecord).filter(
                CardStateRecord.card_id == card_id
            ).first()
            return _card_from_record(record) if record is not None else None

    def save_cards(self, cards: Iterable[Card]) -> None:
        cards = list(cards)
        if not cards:
            return
        with self._session("save") as session:
            for card in cards:
                self._upsert(session, card)
        logger.info("Saved %d card(s)", len(cards))

    def save_review(self, card: Card, event: dict) -> None:
        with self._session("review save") as session:
            self._upsert(session, card)
            session.add(_event_to_record(event))
        logger.info("Saved review of %s (%s)", card.card_id, Rating(event['rating']).name)

    def get_review_events(self, card_ids: Optional[Iterable[str]] = None) -> list[dict]:
        with self._session("event fetch") as session:
            query = session.query(ReviewEventRecord)
            if card_ids is not None:
                query = query.filter(ReviewEventRecord.card_id.in_(list(card_ids)))
            return [_event_from_record(r) for r in query.order_by(ReviewEventRecord.id).all()]

    def fetch_quiz_stats(self) -> QuizStats:
        with self._session("quiz stats fetch") as session:
            record = session.get(QuizStatsRecord, QUIZ_STATS_ROW_ID)
            if record is None:
                return QuizStats()
            return QuizStats(
                completed_count=record.completed_count,
                total_score=record.total_score,
            )

    def save_quiz_stats(self, stats: QuizStats) -> None:
        with self._session("quiz stats save") as session:
            record = session.get(QuizStatsRecord, QUIZ_STATS_ROW_ID)
            if record is None:
                record = QuizStatsRecord(id=QUIZ_STATS_ROW_ID)
                session.add(record)
            record.completed_count = stats.completed_count
            record.total_score = stats.total_score

    @staticmethod
    def _upsert(session: Session, card: Card):
        record = session.query(CardStateRecord).filter(
            CardStateRecord.card_id == card.card_id
        ).first()
        if record is None:
            record = CardStateRecord(card_id=card.card_id)
            session.add(record)
        _copy_card_to_record(card, record)

