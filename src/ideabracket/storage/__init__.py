"""
Bracket storage.

The service talks to storage only through the protocols in ports.py:
- InMemoryBracketStore: dict-backed, for tests and simulations
- SQLBracketStore: SQLAlchemy-backed, for the durable database
"""

from ideabracket.storage.memory import InMemoryBracketStore
from ideabracket.storage.ports import MatchStore, ParticipantSource
from ideabracket.storage.sql import SQLBracketStore

__all__ = [
    "InMemoryBracketStore",
    "MatchStore",
    "ParticipantSource",
    "SQLBracketStore",
]
