"""
Database session management for ideabracket.

Provides the SQLAlchemy engine and session factory. Nothing connects at
import time; the engine is created on first use from config.py settings.

Usage:
    # As a context manager (recommended for scripts)
    from ideabracket.db import get_session

    with get_session() as session:
        store = SQLBracketStore(session)
        matches = store.load_matches("t-1")
        # Commits automatically on exit, rolls back on exception
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ideabracket.config import settings


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    The engine is configured with:
    - Connection pool sizing from settings (not for SQLite)
    - Echo mode only when LOG_LEVEL=DEBUG
    - Pre-ping to verify connections before use (handles stale connections)
    """
    url = database_url or settings.database_url
    pool_options = {}
    if not url.startswith("sqlite"):
        pool_options = {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
        }

    return create_engine(
        url,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
        **pool_options,
    )


_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _get_engine() -> Engine:
    """Get or create the shared engine instance."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    """Session factory bound to the shared engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=_get_engine(),
        )
    return _session_factory


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically commits on successful exit, rolls back on exception.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
