"""
Bracket service: locked load, change, save operations for applications.

The bracket engine is a set of pure functions over match lists. This
service wires it to storage:

1. **Creation** (create_bracket): validates the entrants against the
   minimum, orders them (shuffled or by seed), numbers the seeds 1..N in
   bracket order and stores participants plus the generated bracket.

2. **Progression** (start, apply_match_result, open_next_round,
   close_open_round): each call loads the match list, applies one engine
   function and saves the result. After a result is recorded, newly
   created byes are resolved and, when no match is left open, the next
   round is opened.

3. **Reseeding** (reseed, reset): rebuilds the bracket from a new order
   (or the current one), discarding every recorded winner.

Every mutating call holds the tournament's lock for the whole
load/change/save sequence, and saves with the version it loaded so a
writer that bypasses the lock still cannot overwrite a newer bracket.

Usage:
    from ideabracket.services import BracketService
    from ideabracket.storage import InMemoryBracketStore

    store = InMemoryBracketStore()
    service = BracketService(store, store)
    service.create_bracket("t-1", participants)
    service.start("t-1")
    service.apply_match_result("t-1", "match-r1-p1", "a")
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ideabracket.bracket.builder import generate_bracket
from ideabracket.bracket.byes import resolve_byes
from ideabracket.bracket.errors import BracketError, BracketNotFoundError, SeedingError
from ideabracket.bracket.models import Match, Participant, WinnerSide
from ideabracket.bracket.progression import record_winner
from ideabracket.bracket.reseed import ReseedResult, reseed
from ideabracket.bracket.rounds import (
    TournamentStatus,
    advance_if_round_complete,
    champion_id,
    close_decided_matches,
    compute_open_matches,
    next_round,
    tournament_status,
)
from ideabracket.bracket.seeding import (
    assign_seeds,
    order_by_ids,
    order_participants,
    require_minimum,
)
from ideabracket.config import Settings, get_settings
from ideabracket.locks import LockRegistry, TournamentLockRegistry
from ideabracket.match_statuses import CLOSED, OPEN
from ideabracket.storage.ports import MatchStore, ParticipantSource

logger = logging.getLogger(__name__)


@dataclass
class BracketChangeSummary:
    """What one service call changed in a tournament's bracket."""

    tournament_id: str
    operation: str
    total_matches: int = 0
    matches_opened: int = 0
    matches_closed: int = 0
    sides_filled: int = 0
    version: int = 0

    @classmethod
    def compare(
        cls,
        tournament_id: str,
        operation: str,
        before: Sequence[Match],
        after: Sequence[Match],
        version: int = 0,
    ) -> "BracketChangeSummary":
        """Diff two match lists of the same bracket by match id."""
        summary = cls(
            tournament_id=tournament_id,
            operation=operation,
            total_matches=len(after),
            version=version,
        )
        previous = {m.id: m for m in before}
        for match in after:
            old = previous.get(match.id)
            if match.status == OPEN and (old is None or old.status != OPEN):
                summary.matches_opened += 1
            if match.status == CLOSED and (old is None or old.status != CLOSED):
                summary.matches_closed += 1
            for side in ("a", "b"):
                filled = match.side(side).participant_id is not None
                was_filled = old is not None and old.side(side).participant_id is not None
                if filled and not was_filled:
                    summary.sides_filled += 1
        return summary

    def summary(self) -> str:
        """Return a one-line human-readable summary."""
        return (
            f"{self.operation} {self.tournament_id}: "
            f"{self.total_matches} matches, "
            f"opened={self.matches_opened}, "
            f"closed={self.matches_closed}, "
            f"sides_filled={self.sides_filled}, "
            f"version={self.version}"
        )


class BracketService:
    """Application-facing bracket operations over a participant source and match store."""

    def __init__(
        self,
        participants: ParticipantSource,
        matches: MatchStore,
        *,
        locks: Optional[LockRegistry] = None,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.participants = participants
        self.matches = matches
        self.locks = locks or TournamentLockRegistry()
        self.settings = settings or get_settings()
        self.rng = rng
        self.last_summary: Optional[BracketChangeSummary] = None

    # -------------------------------------------------------------------------
    # Reads (no lock)
    # -------------------------------------------------------------------------

    def get_bracket(self, tournament_id: str) -> list[Match]:
        return self.matches.load_matches(tournament_id)

    def get_participants(self, tournament_id: str) -> list[Participant]:
        return self.participants.load_participants(tournament_id)

    def open_matches(self, tournament_id: str) -> list[Match]:
        return compute_open_matches(self.matches.load_matches(tournament_id))

    def status(self, tournament_id: str) -> TournamentStatus:
        return tournament_status(self.matches.load_matches(tournament_id))

    def champion(self, tournament_id: str) -> Optional[Participant]:
        winner = champion_id(self.matches.load_matches(tournament_id))
        if winner is None:
            return None
        for participant in self.participants.load_participants(tournament_id):
            if participant.id == winner:
                return participant
        return None

    # -------------------------------------------------------------------------
    # Creation and reseeding
    # -------------------------------------------------------------------------

    def create_bracket(
        self,
        tournament_id: str,
        participants: Sequence[Participant],
        *,
        shuffle: Optional[bool] = None,
    ) -> list[Match]:
        """
        Seed ``participants`` and store a freshly generated bracket.

        Args:
            tournament_id: Tournament the bracket belongs to
            participants: Entrants; their current seeds give the initial order
            shuffle: Randomize placement. Defaults to settings.shuffle_on_create.

        Returns:
            The stored match list
        """
        require_minimum(participants, self.settings.min_participants)
        foreign = [p.id for p in participants if p.tournament_id != tournament_id]
        if foreign:
            raise SeedingError(f"Participants belong to another tournament: {foreign}")
        if shuffle is None:
            shuffle = self.settings.shuffle_on_create

        with self.locks.hold(tournament_id, self.settings.lock_timeout_seconds):
            ordered = order_participants(participants, shuffle=shuffle, rng=self.rng)
            seeded = assign_seeds(ordered)
            generated = generate_bracket(seeded, shuffle=False, tournament_id=tournament_id)
            return self._replace(tournament_id, "create", seeded, generated)

    def reseed(self, tournament_id: str, participant_ids: Sequence[str]) -> ReseedResult:
        """
        Rebuild the bracket with participants in the order of ``participant_ids``.

        Every recorded winner is discarded.
        """
        with self.locks.hold(tournament_id, self.settings.lock_timeout_seconds):
            return self._reseed(tournament_id, participant_ids, "reseed")

    def reset(self, tournament_id: str) -> ReseedResult:
        """Rebuild the bracket in the current seed order, clearing all results."""
        with self.locks.hold(tournament_id, self.settings.lock_timeout_seconds):
            current = self.participants.load_participants(tournament_id)
            return self._reseed(tournament_id, [p.id for p in current], "reset")

    # -------------------------------------------------------------------------
    # Progression
    # -------------------------------------------------------------------------

    def start(self, tournament_id: str) -> list[Match]:
        """Open the first round that still has pending matches."""
        return self._mutate(tournament_id, "start", next_round)

    def open_next_round(self, tournament_id: str) -> list[Match]:
        return self._mutate(tournament_id, "open_next_round", next_round)

    def close_open_round(self, tournament_id: str) -> list[Match]:
        """Close open matches that already have a recorded winner."""
        return self._mutate(tournament_id, "close_open_round", close_decided_matches)

    def apply_match_result(
        self, tournament_id: str, match_id: str, side: WinnerSide
    ) -> list[Match]:
        """
        Record the winner of ``match_id`` and move the bracket forward.

        Byes created by the new winner are resolved. With
        settings.auto_advance_rounds, the next round opens once no match
        is left open.
        """
        def apply(matches: list[Match]) -> list[Match]:
            updated = record_winner(
                matches, match_id, side, strict=self.settings.strict_transitions
            )
            updated = resolve_byes(updated)
            if self.settings.auto_advance_rounds:
                updated = advance_if_round_complete(updated)
            return updated

        return self._mutate(tournament_id, "apply_match_result", apply)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _mutate(
        self,
        tournament_id: str,
        operation: str,
        change: Callable[[list[Match]], list[Match]],
    ) -> list[Match]:
        with self.locks.hold(tournament_id, self.settings.lock_timeout_seconds):
            version = self.matches.bracket_version(tournament_id)
            current = self.matches.load_matches(tournament_id)
            if not current:
                raise BracketNotFoundError(tournament_id)

            try:
                updated = change(current)
            except BracketError as exc:
                logger.warning("%s rejected for %s: %s", operation, tournament_id, exc)
                raise

            saved = self.matches.save_matches(
                tournament_id, updated, expected_version=version
            )
            self._record_summary(tournament_id, operation, current, saved)
            return saved

    def _reseed(
        self,
        tournament_id: str,
        participant_ids: Sequence[str],
        operation: str,
    ) -> ReseedResult:
        """Reseed body; the caller holds the tournament lock."""
        current = self.participants.load_participants(tournament_id)
        try:
            ordered = order_by_ids(current, participant_ids)
        except BracketError as exc:
            logger.warning("%s rejected for %s: %s", operation, tournament_id, exc)
            raise
        result = reseed(ordered, tournament_id=tournament_id)
        saved = self._replace(tournament_id, operation, result.participants, result.matches)
        return ReseedResult(participants=result.participants, matches=saved)

    def _replace(
        self,
        tournament_id: str,
        operation: str,
        participants: Sequence[Participant],
        generated: Sequence[Match],
    ) -> list[Match]:
        previous = self.matches.load_matches(tournament_id)
        self.participants.save_participants(tournament_id, participants)
        saved = self.matches.save_matches(tournament_id, generated)
        self._record_summary(tournament_id, operation, previous, saved)
        return saved

    def _record_summary(
        self,
        tournament_id: str,
        operation: str,
        before: Sequence[Match],
        after: Sequence[Match],
    ) -> None:
        self.last_summary = BracketChangeSummary.compare(
            tournament_id,
            operation,
            before,
            after,
            version=self.matches.bracket_version(tournament_id),
        )
        logger.info(self.last_summary.summary())
