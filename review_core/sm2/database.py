"""
Database - Study schedule I/O Operations

Handles all database operations for text items, review schedules and
review events. Uses SQLAlchemy ORM (Postgres in production).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import create_engine, inspect, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from review_core import config
from review_core.errors import (
    ConcurrentUpdateError,
    DuplicateReviewEventError,
    ScheduleNotFoundError,
)
from review_core.logging import logger
from review_core.sm2.models import Base, ReviewEvent, ReviewSchedule, TextItem
from review_core.sm2.review_state import ReviewState, initialize_new_state

REQUIRED_TABLES = ('text_items', 'spaced_repetition_schedule', 'review_events')

# Engine is cached per URL (reused across requests)
_engine: Optional[Engine] = None
_engine_url: Optional[str] = None
_session_factory: Optional[sessionmaker] = None


# ---- Connection Management ----

def get_engine() -> Engine:
    """
    Get SQLAlchemy engine for database connection.

    Uses connection pooling for server databases. The engine is rebuilt
    if DATABASE_URL changes.

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine, _engine_url, _session_factory

    db_url = config.get_database_url()
    if _engine is not None and _engine_url == db_url:
        return _engine

    dispose_engine()
    if db_url.startswith("sqlite"):
        _engine = create_engine(db_url, echo=False)
    else:
        _engine = create_engine(
            db_url,
            pool_size=5,           # Keep 5 connections open
            max_overflow=10,       # Allow up to 10 extra connections
            pool_pre_ping=True,    # Verify connections before use
            echo=False
        )
    _engine_url = db_url
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    return _engine


def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine."""
    global _engine, _engine_url, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _engine_url = None
    _session_factory = None


def get_session() -> Session:
    """
    Get a SQLAlchemy session for database operations.

    Returns:
        SQLAlchemy Session instance
    """
    get_engine()
    return _session_factory()


def init_db():
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates missing tables.
    """
    engine = get_engine()
    existing_tables = set(inspect(engine).get_table_names())
    if not set(REQUIRED_TABLES) <= existing_tables:
        Base.metadata.create_all(engine)
        logger.info("study_db_initialized", tables=list(REQUIRED_TABLES))


def reset_db():
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All schedules and review history will be lost!
    """
    engine = get_engine()
    Base.metadata.drop_all(engine)
    logger.warning("study_db_dropped")
    init_db()


# ---- Row Mapping ----

def _as_utc(ts: Optional[datetime]) -> Optional[datetime]:
    """Normalize to aware UTC; naive values (SQLite) are taken to be UTC."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _to_state(row: ReviewSchedule) -> ReviewState:
    return ReviewState(
        repetition_number=row.repetition_number,
        ease_factor=row.ease_factor,
        interval_days=row.interval_days,
        next_review_date=row.next_review_date,
        last_reviewed_at=_as_utc(row.last_reviewed_at),
        quality_score=row.quality_score,
        is_active=row.is_active,
        schedule_id=row.id,
        item_id=row.text_item_id,
        user_id=row.user_id,
        version=row.version,
    )


def _event_to_dict(event: ReviewEvent) -> dict:
    return {
        "id": event.id,
        "review_event_id": event.review_event_id,
        "schedule_id": event.schedule_id,
        "user_id": event.user_id,
        "timestamp": _as_utc(event.timestamp),
        "quality": event.quality,
        "ease_before": event.ease_before,
        "interval_before": event.interval_before,
        "repetition_before": event.repetition_before,
        "ease_after": event.ease_after,
        "interval_after": event.interval_after,
        "repetition_after": event.repetition_after,
        "next_review_date": event.next_review_date,
    }


# ---- Enrollment ----

def enroll_items(
    user_id: str,
    contents: Iterable[str],
    today: date,
    document_id: Optional[str] = None,
    ease_factor: Optional[float] = None
) -> int:
    """
    Add phrases to a learner's study plan.

    Creates missing text items and gives each a fresh schedule. Phrases that
    already have a schedule are left untouched.

    Args:
        user_id: Owning learner
        contents: Phrase texts (blank and duplicate entries are ignored)
        today: Enrollment date; new schedules are due the next day
        document_id: Source document the phrases were curated from
        ease_factor: Starting ease (default: DEFAULT_EASE_FACTOR)

    Returns:
        Number of schedules created
    """
    phrases: list[str] = []
    for content in contents:
        text = content.strip()
        if text and text not in phrases:
            phrases.append(text)
    if not phrases:
        return 0

    created_at = datetime.combine(today, datetime.min.time(), tzinfo=timezone.utc)
    inserted = 0
    session = get_session()
    try:
        for text in phrases:
            item = session.execute(
                select(TextItem).where(
                    TextItem.user_id == user_id,
                    TextItem.document_id == document_id,
                    TextItem.content == text,
                )
            ).scalars().first()
            if item is None:
                item = TextItem(
                    user_id=user_id,
                    document_id=document_id,
                    content=text,
                    created_at=created_at,
                )
                session.add(item)
                session.flush()

            existing = session.execute(
                select(ReviewSchedule.id).where(
                    ReviewSchedule.user_id == user_id,
                    ReviewSchedule.text_item_id == item.id,
                )
            ).first()
            if existing is not None:
                continue

            state = initialize_new_state(today, user_id=user_id, item_id=item.id, ease_factor=ease_factor)
            session.add(ReviewSchedule(
                text_item_id=item.id,
                user_id=user_id,
                next_review_date=state.next_review_date,
                interval_days=state.interval_days,
                ease_factor=state.ease_factor,
                repetition_number=state.repetition_number,
                is_active=True,
                version=0,
            ))
            inserted += 1

        session.commit()
    finally:
        session.close()

    logger.info("items_enrolled", user_id=user_id, document_id=document_id,
                requested=len(phrases), inserted=inserted)
    return inserted


# ---- Schedule Reads ----

def load_review_state(schedule_id: int) -> Optional[ReviewState]:
    """
    Load one schedule.

    Returns:
        ReviewState if found, None otherwise
    """
    session = get_session()
    try:
        row = session.get(ReviewSchedule, schedule_id)
        return _to_state(row) if row is not None else None
    finally:
        session.close()


def load_user_states(user_id: str, active_only: bool = False) -> list[ReviewState]:
    """
    Bulk read of a learner's schedules, ordered by id.

    Args:
        user_id: Learner to scope the read to
        active_only: Skip suspended/retired schedules
    """
    session = get_session()
    try:
        stmt = select(ReviewSchedule).where(ReviewSchedule.user_id == user_id)
        if active_only:
            stmt = stmt.where(ReviewSchedule.is_active.is_(True))
        rows = session.execute(stmt.order_by(ReviewSchedule.id)).scalars().all()
        return [_to_state(row) for row in rows]
    finally:
        session.close()


def load_states_by_content(user_id: str, contents: Iterable[str]) -> list[ReviewState]:
    """Schedules whose text item content is one of contents (any due date)."""
    wanted = [c.strip() for c in contents if c and c.strip()]
    if not wanted:
        return []

    session = get_session()
    try:
        rows = session.execute(
            select(ReviewSchedule)
            .join(TextItem, TextItem.id == ReviewSchedule.text_item_id)
            .where(ReviewSchedule.user_id == user_id, TextItem.content.in_(wanted))
            .order_by(ReviewSchedule.id)
        ).scalars().all()
        return [_to_state(row) for row in rows]
    finally:
        session.close()


def get_item_contents(item_ids: Iterable[int]) -> dict[int, str]:
    """Map text item id -> phrase content."""
    ids = sorted(set(item_ids))
    if not ids:
        return {}

    session = get_session()
    try:
        rows = session.execute(
            select(TextItem.id, TextItem.content).where(TextItem.id.in_(ids))
        ).all()
        return {row.id: row.content for row in rows}
    finally:
        session.close()


# ---- Schedule Writes ----

def _update_schedule(session: Session, state: ReviewState) -> None:
    """
    Conditional UPDATE keyed on (id, version).

    Raises:
        ScheduleNotFoundError: no row with state.schedule_id
        ConcurrentUpdateError: row exists but its version moved on
    """
    values = dict(
        repetition_number=state.repetition_number,
        ease_factor=state.ease_factor,
        interval_days=state.interval_days,
        next_review_date=state.next_review_date,
        last_reviewed_at=_as_utc(state.last_reviewed_at),
        quality_score=state.quality_score,
        is_active=state.is_active,
        version=ReviewSchedule.version + 1,
    )
    result = session.execute(
        update(ReviewSchedule)
        .where(ReviewSchedule.id == state.schedule_id, ReviewSchedule.version == state.version)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 1:
        return

    found = session.execute(
        select(ReviewSchedule.id).where(ReviewSchedule.id == state.schedule_id)
    ).first()
    session.rollback()
    if found is None:
        raise ScheduleNotFoundError(state.schedule_id)
    logger.warning("stale_write_rejected", schedule_id=state.schedule_id,
                   expected_version=state.version)
    raise ConcurrentUpdateError(state.schedule_id, state.version)


def save_review_state(state: ReviewState) -> ReviewState:
    """
    Persist a state read earlier from this database.

    The write only succeeds if nobody else saved the schedule since it was
    read (optimistic concurrency on version).

    Returns:
        The saved state with its new version
    """
    if state.schedule_id is None:
        raise ValueError("cannot save a ReviewState without schedule_id")

    session = get_session()
    try:
        _update_schedule(session, state)
        session.commit()
    finally:
        session.close()
    return replace(state, version=state.version + 1)


def set_active(schedule_id: int, is_active: bool) -> ReviewState:
    """
    Suspend (False) or resume (True) a schedule.

    Raises:
        ScheduleNotFoundError: unknown schedule_id
    """
    session = get_session()
    try:
        row = session.get(ReviewSchedule, schedule_id)
        if row is None:
            raise ScheduleNotFoundError(schedule_id)
        row.is_active = is_active
        row.version = row.version + 1
        session.commit()
        state = _to_state(row)
    finally:
        session.close()

    logger.info("schedule_activity_changed", schedule_id=schedule_id, is_active=is_active)
    return state


def record_review(
    before: ReviewState,
    after: ReviewState,
    timestamp: datetime,
    review_event_id: Optional[str] = None
) -> ReviewState:
    """
    Save the scheduler's output and log the review event in one transaction.

    Args:
        before: State the scheduler was given (as read from storage)
        after: State the scheduler returned
        timestamp: Review timestamp
        review_event_id: Optional idempotency key, unique across events

    Raises:
        ConcurrentUpdateError: the schedule changed after it was read
        DuplicateReviewEventError: review_event_id was recorded concurrently

    Returns:
        The saved state with its new version
    """
    session = get_session()
    try:
        _update_schedule(session, after)
        session.add(ReviewEvent(
            review_event_id=review_event_id,
            schedule_id=after.schedule_id,
            user_id=after.user_id,
            timestamp=_as_utc(timestamp),
            quality=after.quality_score,
            ease_before=before.ease_factor,
            interval_before=before.interval_days,
            repetition_before=before.repetition_number,
            ease_after=after.ease_factor,
            interval_after=after.interval_days,
            repetition_after=after.repetition_number,
            next_review_date=after.next_review_date,
        ))
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            if review_event_id is not None and _event_exists(session, review_event_id):
                logger.info("duplicate_review_event", schedule_id=after.schedule_id,
                            review_event_id=review_event_id)
                raise DuplicateReviewEventError(review_event_id) from None
            raise
    finally:
        session.close()
    return replace(after, version=after.version + 1)


# ---- Review Events ----

def _event_exists(session: Session, review_event_id: str) -> bool:
    return session.execute(
        select(ReviewEvent.id).where(ReviewEvent.review_event_id == review_event_id)
    ).first() is not None


def find_review_event(review_event_id: str) -> Optional[dict]:
    """Event previously recorded under an idempotency key, or None."""
    session = get_session()
    try:
        event = session.execute(
            select(ReviewEvent).where(ReviewEvent.review_event_id == review_event_id)
        ).scalars().first()
        return _event_to_dict(event) if event is not None else None
    finally:
        session.close()


def get_review_events(user_id: str, since: Optional[datetime] = None) -> list[dict]:
    """
    All review events for a learner, oldest first.

    Args:
        user_id: Learner to scope the read to
        since: Only include events at or after this timestamp
    """
    session = get_session()
    try:
        stmt = select(ReviewEvent).where(ReviewEvent.user_id == user_id)
        if since is not None:
            stmt = stmt.where(ReviewEvent.timestamp >= _as_utc(since))
        events = session.execute(
            stmt.order_by(ReviewEvent.timestamp, ReviewEvent.id)
        ).scalars().all()
        return [_event_to_dict(e) for e in events]
    finally:
        session.close()


def get_recent_events(user_id: str, limit: int = 10) -> list[dict]:
    """
    Get recent review events.

    Returns:
        List of recent events (newest first)
    """
    session = get_session()
    try:
        events = session.execute(
            select(ReviewEvent)
            .where(ReviewEvent.user_id == user_id)
            .order_by(ReviewEvent.timestamp.desc(), ReviewEvent.id.desc())
            .limit(limit)
        ).scalars().all()
        return [_event_to_dict(e) for e in events]
    finally:
        session.close()
