"""
SQL-backed bracket store.

Implements both collaborator contracts on top of the ORM models in
db/models.py. The store works inside a session owned by the caller: it
flushes but never commits, so a service call and its save share one
transaction (see db/session.py get_session).

Saving is replace-all. The tournament_brackets row is locked for update
and its version compared before the old rows are deleted, so two writers
that loaded the same version cannot both save.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ideabracket.bracket.errors import ConcurrentUpdateError
from ideabracket.bracket.models import Match, MatchSide, Participant
from ideabracket.db.models import MatchRecord, ParticipantRecord, TournamentBracket

logger = logging.getLogger(__name__)


def participant_from_record(row: ParticipantRecord) -> Participant:
    return Participant(
        id=row.id,
        tournament_id=row.tournament_id,
        idea_id=row.idea_id,
        idea_title=row.idea_title,
        seed=row.seed,
    )


def match_from_record(row: MatchRecord) -> Match:
    return Match(
        id=row.match_id,
        tournament_id=row.tournament_id,
        round=row.round,
        position=row.position,
        status=row.status,
        a=MatchSide(
            participant_id=row.side_a_participant_id,
            source_match_id=row.side_a_source_match_id,
        ),
        b=MatchSide(
            participant_id=row.side_b_participant_id,
            source_match_id=row.side_b_source_match_id,
        ),
        winner_side=row.winner_side,
    )


def match_to_record(tournament_id: str, match: Match) -> MatchRecord:
    return MatchRecord(
        tournament_id=tournament_id,
        match_id=match.id,
        round=match.round,
        position=match.position,
        status=match.status,
        side_a_participant_id=match.a.participant_id,
        side_a_source_match_id=match.a.source_match_id,
        side_b_participant_id=match.b.participant_id,
        side_b_source_match_id=match.b.source_match_id,
        winner_side=match.winner_side,
    )


class SQLBracketStore:
    """Participant source and match store backed by the database."""

    def __init__(self, session: Session):
        self.session = session

    def _get_or_create_bracket(self, tournament_id: str, lock: bool = False) -> TournamentBracket:
        row = self.session.get(TournamentBracket, tournament_id, with_for_update=lock)
        if row is None:
            row = TournamentBracket(id=tournament_id, version=0)
            self.session.add(row)
            self.session.flush()
        return row

    # -------------------------------------------------------------------------
    # Participants
    # -------------------------------------------------------------------------

    def load_participants(self, tournament_id: str) -> list[Participant]:
        rows = self.session.scalars(
            select(ParticipantRecord)
            .where(ParticipantRecord.tournament_id == tournament_id)
            .order_by(ParticipantRecord.seed)
        ).all()
        return [participant_from_record(row) for row in rows]

    def save_participants(
        self, tournament_id: str, participants: Sequence[Participant]
    ) -> list[Participant]:
        self._get_or_create_bracket(tournament_id)
        self.session.execute(
            delete(ParticipantRecord)
            .where(ParticipantRecord.tournament_id == tournament_id)
            .execution_options(synchronize_session="fetch")
        )
        self.session.add_all(
            ParticipantRecord(
                id=p.id,
                tournament_id=tournament_id,
                idea_id=p.idea_id,
                idea_title=p.idea_title,
                seed=p.seed,
            )
            for p in participants
        )
        self.session.flush()
        return self.load_participants(tournament_id)

    # -------------------------------------------------------------------------
    # Matches
    # -------------------------------------------------------------------------

    def load_matches(self, tournament_id: str) -> list[Match]:
        rows = self.session.scalars(
            select(MatchRecord)
            .where(MatchRecord.tournament_id == tournament_id)
            .order_by(MatchRecord.round, MatchRecord.position)
        ).all()
        return [match_from_record(row) for row in rows]

    def save_matches(
        self,
        tournament_id: str,
        matches: Sequence[Match],
        *,
        expected_version: Optional[int] = None,
    ) -> list[Match]:
        bracket = self._get_or_create_bracket(tournament_id, lock=True)
        if expected_version is not None and bracket.version != expected_version:
            raise ConcurrentUpdateError(
                f"Bracket {tournament_id} is at version {bracket.version}, "
                f"expected {expected_version}"
            )

        self.session.execute(
            delete(MatchRecord)
            .where(MatchRecord.tournament_id == tournament_id)
            .execution_options(synchronize_session="fetch")
        )
        self.session.add_all(match_to_record(tournament_id, m) for m in matches)
        bracket.version += 1
        self.session.flush()

        logger.debug(
            "Saved %d matches for %s (version %d)",
            len(matches), tournament_id, bracket.version,
        )
        return self.load_matches(tournament_id)

    def bracket_version(self, tournament_id: str) -> int:
        row = self.session.get(TournamentBracket, tournament_id)
        return row.version if row is not None else 0
