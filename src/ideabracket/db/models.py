"""
SQLAlchemy ORM models for ideabracket.

This module defines the tables behind the durable bracket store. The
engine itself never sees these rows; storage/sql.py converts them to and
from the immutable records in bracket/models.py.

Key design decisions:
- A bracket is always saved as a whole (replace-all), so match rows carry
  no history and are deleted and re-inserted on every save
- Participant and match ids are only unique within a tournament, so both
  tables are keyed by (tournament_id, id)
- tournament_brackets.version is bumped on every save and lets writers
  detect that someone else saved in between (optimistic concurrency)

Tables:
- tournament_brackets: One row per tournament with a bracket
- participants: Ideas entered into a tournament, with seeds
- bracket_matches: Matches with both sides flattened into columns
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    All models inherit from this class, which provides
    the metadata registry for table definitions.
    """
    pass


class TournamentBracket(Base):
    """
    Bracket header for a tournament.

    Tournament metadata (name, visibility, room code) belongs to the
    surrounding application; only what the bracket store needs lives here.
    """

    __tablename__ = "tournament_brackets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Incremented on every save of the match list
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<TournamentBracket(id={self.id!r}, version={self.version})>"


class ParticipantRecord(Base):
    """An idea entered into a tournament."""

    __tablename__ = "participants"

    tournament_id: Mapped[str] = mapped_column(
        ForeignKey("tournament_brackets.id", ondelete="CASCADE"), primary_key=True
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    idea_id: Mapped[str] = mapped_column(String(64), nullable=False)
    idea_title: Mapped[str] = mapped_column(String(255), nullable=False)
    seed: Mapped[int] = mapped_column(Integer, nullable=False)

    tournament: Mapped["TournamentBracket"] = relationship()

    __table_args__ = (
        UniqueConstraint("tournament_id", "seed", name="uq_participants_tournament_seed"),
        CheckConstraint("seed >= 1", name="ck_participants_seed_positive"),
    )

    def __repr__(self) -> str:
        return f"<ParticipantRecord(id={self.id!r}, seed={self.seed}, idea={self.idea_title!r})>"


class MatchRecord(Base):
    """
    A bracket match.

    Each side is stored as two columns: the participant currently in the
    slot and the match whose winner feeds it.
    """

    __tablename__ = "bracket_matches"

    tournament_id: Mapped[str] = mapped_column(
        ForeignKey("tournament_brackets.id", ondelete="CASCADE"), primary_key=True
    )
    match_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    round: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="pending")

    side_a_participant_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    side_a_source_match_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    side_b_participant_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    side_b_source_match_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # 'a', 'b' or NULL while undecided
    winner_side: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)

    tournament: Mapped["TournamentBracket"] = relationship()

    __table_args__ = (
        UniqueConstraint(
            "tournament_id", "round", "position", name="uq_bracket_matches_slot"
        ),
        CheckConstraint(
            "status IN ('pending', 'open', 'closed')",
            name="ck_bracket_matches_status",
        ),
        CheckConstraint(
            "winner_side IS NULL OR winner_side IN ('a', 'b')",
            name="ck_bracket_matches_winner_side",
        ),
        Index("idx_bracket_matches_tournament_round", "tournament_id", "round"),
    )

    def __repr__(self) -> str:
        return (
            f"<MatchRecord(tournament={self.tournament_id!r}, id={self.match_id!r}, "
            f"status={self.status!r})>"
        )
