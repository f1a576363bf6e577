"""
Database module for ideabracket.

Provides SQLAlchemy ORM models and session management for the durable
bracket store.

Usage:
    from ideabracket.db import get_session, MatchRecord

    with get_session() as session:
        rows = session.query(MatchRecord).filter_by(tournament_id="t-1").all()
"""

from ideabracket.db.models import (
    Base,
    MatchRecord,
    ParticipantRecord,
    TournamentBracket,
)
from ideabracket.db.session import get_engine, get_session, get_session_factory

__all__ = [
    # Base
    "Base",
    # Models
    "TournamentBracket",
    "ParticipantRecord",
    "MatchRecord",
    # Session
    "get_session",
    "get_engine",
    "get_session_factory",
]
