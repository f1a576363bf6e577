"""In-memory bracket store, used by tests and the simulation script."""

from __future__ import annotations

from typing import Optional, Sequence

from ideabracket.bracket.errors import ConcurrentUpdateError
from ideabracket.bracket.models import Match, Participant


class InMemoryBracketStore:
    """
    Participant source and match store backed by plain dicts.

    All state belongs to the instance; two stores never share data.
    Records are immutable, so copying the lists is enough to isolate
    callers from the stored state.
    """

    def __init__(
        self,
        participants: Optional[dict[str, list[Participant]]] = None,
        matches: Optional[dict[str, list[Match]]] = None,
    ) -> None:
        self._participants: dict[str, list[Participant]] = dict(participants or {})
        self._matches: dict[str, list[Match]] = dict(matches or {})
        self._versions: dict[str, int] = {tid: 1 for tid in self._matches}

    def load_participants(self, tournament_id: str) -> list[Participant]:
        return sorted(self._participants.get(tournament_id, []), key=lambda p: p.seed)

    def save_participants(
        self, tournament_id: str, participants: Sequence[Participant]
    ) -> list[Participant]:
        self._participants[tournament_id] = list(participants)
        return self.load_participants(tournament_id)

    def load_matches(self, tournament_id: str) -> list[Match]:
        return list(self._matches.get(tournament_id, []))

    def save_matches(
        self,
        tournament_id: str,
        matches: Sequence[Match],
        *,
        expected_version: Optional[int] = None,
    ) -> list[Match]:
        current = self.bracket_version(tournament_id)
        if expected_version is not None and expected_version != current:
            raise ConcurrentUpdateError(
                f"Bracket {tournament_id} is at version {current}, expected {expected_version}"
            )
        self._matches[tournament_id] = list(matches)
        self._versions[tournament_id] = current + 1
        return self.load_matches(tournament_id)

    def bracket_version(self, tournament_id: str) -> int:
        return self._versions.get(tournament_id, 0)
