"""
In-memory bracket records.

These are the values the engine functions consume and return. They are
frozen dataclasses: every engine operation builds new records with
``dataclasses.replace`` instead of editing the ones it was given, so a match
list handed to one caller can never be changed underneath another.

Records:
- Participant: an idea entered into a tournament, with its seed
- MatchSide: one slot of a match (a participant, a feeder match, or both)
- Match: one node of the single-elimination tree
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, Optional

from ideabracket.bracket.errors import InvalidTransitionError
from ideabracket.match_statuses import CLOSED, PENDING, MatchStatus, can_transition

WinnerSide = Literal["a", "b"]

SIDES: tuple[WinnerSide, WinnerSide] = ("a", "b")


def other_side(side: WinnerSide) -> WinnerSide:
    """Return the opposing side letter."""
    return "b" if side == "a" else "a"


@dataclass(frozen=True)
class Participant:
    """An idea entered into a tournament."""

    id: str
    tournament_id: str
    idea_id: str
    idea_title: str
    seed: int

    def with_seed(self, seed: int) -> "Participant":
        return replace(self, seed=seed)


@dataclass(frozen=True)
class MatchSide:
    """
    One side of a match.

    A side is filled either directly (round 1, from a seeded slot) or by
    reference to the match whose winner feeds it. ``participant_id`` is set
    once that feeder resolves.
    """

    participant_id: Optional[str] = None
    source_match_id: Optional[str] = None

    @property
    def is_populated(self) -> bool:
        return self.participant_id is not None

    @property
    def is_vacant(self) -> bool:
        """True for a deliberate empty slot that nothing will ever fill."""
        return self.participant_id is None and self.source_match_id is None


@dataclass(frozen=True)
class Match:
    """A single match in the bracket."""

    id: str
    tournament_id: str
    round: int
    position: int
    status: MatchStatus = PENDING
    a: MatchSide = field(default_factory=MatchSide)
    b: MatchSide = field(default_factory=MatchSide)
    winner_side: Optional[WinnerSide] = None

    def side(self, side: WinnerSide) -> MatchSide:
        if side == "a":
            return self.a
        if side == "b":
            return self.b
        raise ValueError(f"Unknown match side: {side!r}")

    def with_side(self, side: WinnerSide, value: MatchSide) -> "Match":
        if side == "a":
            return replace(self, a=value)
        if side == "b":
            return replace(self, b=value)
        raise ValueError(f"Unknown match side: {side!r}")

    def with_status(self, status: MatchStatus, **changes) -> "Match":
        """
        Move the match to ``status``, applying any other field ``changes``.

        Raises:
            InvalidTransitionError: the lifecycle does not allow the move
        """
        if not can_transition(self.status, status):
            raise InvalidTransitionError(
                f"Match {self.id} cannot move from {self.status} to {status}"
            )
        return replace(self, status=status, **changes)

    @property
    def is_closed(self) -> bool:
        return self.status == CLOSED

    @property
    def winner_id(self) -> Optional[str]:
        if self.winner_side is None:
            return None
        return self.side(self.winner_side).participant_id

    @property
    def loser_id(self) -> Optional[str]:
        if self.winner_side is None:
            return None
        return self.side(other_side(self.winner_side)).participant_id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tournament_id": self.tournament_id,
            "round": self.round,
            "position": self.position,
            "status": self.status,
            "sides": {
                "a": {
                    "participant_id": self.a.participant_id,
                    "source_match_id": self.a.source_match_id,
                },
                "b": {
                    "participant_id": self.b.participant_id,
                    "source_match_id": self.b.source_match_id,
                },
            },
            "winner_side": self.winner_side,
        }
