"""
SQLAlchemy ORM Models for FSRS Database

Defines CardStateRecord, ReviewEventRecord and QuizStatsRecord models.
Timestamps are stored as ISO-8601 text so timezone offsets survive
every backend, SQLite included.
"""

from sqlalchemy import Boolean, Column, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CardStateRecord(Base):
    """
    Persistent memory state for a single vocabulary word.

    `id` is a surrogate key that fixes insertion order, which the daily
    queue relies on when admitting new cards.
    """
    __tablename__ = 'card_state'

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(String(64), unique=True, nullable=False)  # "{group_id}_{local_id}"

    state = Column(Integer, nullable=False, default=0)  # 0=NEW, 1=LEARNING, 2=REVIEW, 3=RELEARNING
    due = Column(String(40), nullable=False)

    # Long-term memory parameters
    stability = Column(Float, nullable=False, default=0.0)
    difficulty = Column(Float, nullable=False, default=0.0)

    # Interval bookkeeping
    elapsed_days = Column(Integer, nullable=False, default=0)
    scheduled_days = Column(Integer, nullable=False, default=0)

    # Counters
    lapses = Column(Integer, nullable=False, default=0)
    reps = Column(Integer, nullable=False, default=0)

    last_review = Column(String(40), nullable=True)
    assigned_date = Column(String(40), nullable=True)  # Day a New card joined a daily queue

    learned = Column(Boolean, nullable=False, default=False)
    seen = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<CardStateRecord({self.card_id}, state={self.state})>"


class ReviewEventRecord(Base):
    """
    Log entry for a single review of a card.

    Captures the memory state before and after the transition.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(String(64), nullable=False, index=True)

    # Timing and feedback
    timestamp = Column(String(40), nullable=False)
    rating = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY

    # State before review
    state_before = Column(Integer, nullable=False)
    stability_before = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)
    retrievability_before = Column(Float, nullable=True)

    # State after review
    state_after = Column(Integer, nullable=False)
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)

    elapsed_days = Column(Integer, nullable=False)
    scheduled_days = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<ReviewEventRecord(id={self.id}, {self.card_id}, rating={self.rating})>"


class QuizStatsRecord(Base):
    """
    Running totals of finished quizzes.

    A single row (id=1) per database.
    """
    __tablename__ = 'quiz_stats'

    id = Column(Integer, primary_key=True)
    completed_count = Column(Integer, nullable=False, default=0)
    total_score = Column(Float, nullable=False, default=0.0)  # Sum of quiz percentages

    def __repr__(self):
        return f"<QuizStatsRecord(completed={self.completed_count}, total={self.total_score})>"
