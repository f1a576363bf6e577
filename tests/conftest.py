"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ideabracket.bracket.models import Participant
from ideabracket.config import Settings
from ideabracket.db.models import Base


@pytest.fixture(scope="session")
def test_engine():
    """
    Create a test database engine.

    Uses SQLite in-memory for fast tests that don't need
    PostgreSQL-specific features.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
    )
    return engine


@pytest.fixture(scope="session")
def tables(test_engine):
    """
    Create all tables for testing.

    This fixture runs once per test session.
    """
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Create a database session for a test.

    Each test gets its own session with automatic rollback,
    ensuring tests don't affect each other.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def make_participants():
    """
    Factory for participant lists.

    ``make_participants(4)`` returns p-1..p-4 with seeds 1..4 in
    tournament t-1.
    """
    def _make(count: int, tournament_id: str = "t-1") -> list[Participant]:
        return [
            Participant(
                id=f"p-{index}",
                tournament_id=tournament_id,
                idea_id=f"idea-{index}",
                idea_title=f"Idea {index}",
                seed=index,
            )
            for index in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def test_settings():
    """Deterministic settings: seed-order brackets, no .env lookup."""
    return Settings(
        _env_file=None,
        min_participants=4,
        shuffle_on_create=False,
        strict_transitions=False,
        auto_advance_rounds=True,
        lock_timeout_seconds=0,
    )
