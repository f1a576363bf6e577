"""Collaborator contracts the bracket service persists through."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ideabracket.bracket.models import Match, Participant


class ParticipantSource(Protocol):
    """Where a tournament's participants come from."""

    def load_participants(self, tournament_id: str) -> list[Participant]:
        """Participants of ``tournament_id`` ordered by seed."""
        ...

    def save_participants(
        self, tournament_id: str, participants: Sequence[Participant]
    ) -> list[Participant]:
        """Replace the tournament's participants; returns the stored list."""
        ...


class MatchStore(Protocol):
    """Where a tournament's match list is kept."""

    def load_matches(self, tournament_id: str) -> list[Match]:
        ...

    def save_matches(
        self,
        tournament_id: str,
        matches: Sequence[Match],
        *,
        expected_version: Optional[int] = None,
    ) -> list[Match]:
        """
        Replace the whole match list; returns the stored, authoritative list.

        When ``expected_version`` is given and the stored bracket has moved
        past it, raises ConcurrentUpdateError and stores nothing.
        """
        ...

    def bracket_version(self, tournament_id: str) -> int:
        """Number of saves so far; 0 for a tournament never saved."""
        ...
