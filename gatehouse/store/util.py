"""Helpers and Flask application integration."""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generator, Optional

from pytz import UTC
from flask import Flask
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.session import Session

from ..exceptions import StorageFailure
from .models import db

logger = logging.getLogger(__name__)


def now() -> int:
    """Get the current epoch/unix time."""
    return epoch(datetime.now(tz=UTC))


def epoch(t: datetime) -> int:
    """
    Convert a :class:`.datetime` to UNIX time, rounded to the nearest second.

    Issue and expiry times are both whole seconds, so an expiry check can be
    off by up to half a second of wall-clock time.
    """
    delta = t - datetime.fromtimestamp(0, tz=UTC)
    return int(round(delta.total_seconds()))


def from_epoch(t: Optional[int]) -> Optional[datetime]:
    """Get a :class:`datetime` from an UNIX timestamp."""
    if t is None:
        return None
    return datetime.fromtimestamp(t, tz=UTC)


def new_id() -> str:
    """Generate a new primary key."""
    return str(uuid.uuid4())


@contextmanager
def transaction() -> Generator[Session, None, None]:
    """
    Context manager for database transaction.

    Everything done through the stores inside the block is committed together
    when the block exits, or rolled back together if anything in it raises.
    Stores themselves only flush, never commit.
    """
    try:
        yield db.session
        # Stores flush as they go, so pending work is not visible in
        # session.new/dirty/deleted; always commit.
        db.session.commit()
    except SQLAlchemyError as e:
        logger.error('Commit failed, rolling back: %s', str(e))
        db.session.rollback()
        raise StorageFailure('Storage unavailable') from e
    except Exception as e:
        logger.debug('Rolling back after error: %s', type(e).__name__)
        db.session.rollback()
        raise


@contextmanager
def storage_errors(operation: str) -> Generator[None, None, None]:
    """
    Convert database errors raised inside the block to storage failures.

    The detail is logged here; the exception raised to the caller carries
    none. :class:`IntegrityError` is re-raised untouched so that the calling
    store can translate it to a domain error.
    """
    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        logger.error('%s failed: %s', operation, e)
        raise StorageFailure('Storage unavailable') from e


def violates(error: IntegrityError, column: str) -> bool:
    """Determine whether ``error`` was raised by a constraint on ``column``."""
    return column in str(error.orig)


def init_app(app: Optional[Flask]) -> None:
    """Set configuration defaults and attach session to the application."""
    if app is None:
        return
    app.config.setdefault('SQLALCHEMY_DATABASE_URI', 'sqlite:///:memory:')
    app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
    db.init_app(app)


def current_session() -> Session:
    """Get/create database session for this context."""
    return db.session


def create_all() -> None:
    """Create all tables in the database."""
    db.create_all()


def drop_all() -> None:
    """Drop all tables in the database."""
    db.drop_all()


def is_available(**kwargs: Any) -> bool:
    """Check our connection to the database."""
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        logger.error('Encountered an error talking to database: %s', e)
        return False
    return True
