"""
SQLAlchemy ORM Models for the study database

Defines TextItem, ReviewSchedule and ReviewEvent for Postgres persistence
(any SQLAlchemy backend works; tests use SQLite).
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TextItem(Base):
    """
    A phrase the learner curated from a recognised document.
    """
    __tablename__ = 'text_items'
    __table_args__ = (
        UniqueConstraint('user_id', 'document_id', 'content', name='uq_text_item_content'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    document_id = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<TextItem(id={self.id}, {self.user_id}, {self.content!r})>"


class ReviewSchedule(Base):
    """
    Persistent SM-2 state for one (user, text item) pair.

    version is bumped on every write and checked on update so concurrent
    submissions against the same stale read cannot overwrite each other.
    """
    __tablename__ = 'spaced_repetition_schedule'
    __table_args__ = (
        UniqueConstraint('user_id', 'text_item_id', name='uq_schedule_user_item'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    text_item_id = Column(Integer, ForeignKey('text_items.id'), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)

    next_review_date = Column(Date, nullable=False, index=True)
    interval_days = Column(Integer, nullable=False)
    ease_factor = Column(Float, nullable=False)
    repetition_number = Column(Integer, nullable=False, default=0)

    last_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    quality_score = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    version = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<ReviewSchedule(id={self.id}, item={self.text_item_id}, due={self.next_review_date})>"


class ReviewEvent(Base):
    """
    Append-only log entry for a single review submission.

    Captures state before/after so schedules can be audited or replayed.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Caller-supplied idempotency key
    review_event_id = Column(String(255), nullable=True, unique=True)

    schedule_id = Column(Integer, ForeignKey('spaced_repetition_schedule.id'), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    quality = Column(Integer, nullable=False)  # 0-5

    # State before review
    ease_before = Column(Float, nullable=False)
    interval_before = Column(Integer, nullable=False)
    repetition_before = Column(Integer, nullable=False)

    # State after review
    ease_after = Column(Float, nullable=False)
    interval_after = Column(Integer, nullable=False)
    repetition_after = Column(Integer, nullable=False)
    next_review_date = Column(Date, nullable=False)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, schedule={self.schedule_id}, quality={self.quality})>"
