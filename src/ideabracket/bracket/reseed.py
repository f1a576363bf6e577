"""Rebuilding a bracket from a manually chosen participant order."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ideabracket.bracket.builder import generate_bracket
from ideabracket.bracket.models import Match, Participant
from ideabracket.bracket.seeding import assign_seeds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReseedResult:
    """Participants with their new seeds and the freshly built bracket."""

    participants: list[Participant]
    matches: list[Match]


def reseed(
    participants_in_order: Sequence[Participant],
    *,
    tournament_id: Optional[str] = None,
) -> ReseedResult:
    """
    Rebuild the bracket from a new participant order.

    Seeds are reassigned as ``index + 1`` and the bracket is generated in
    that order with byes resolved. The returned matches fully replace the
    previous set, so any recorded winners are gone.
    """
    reseeded = assign_seeds(participants_in_order)
    matches = generate_bracket(reseeded, shuffle=False, tournament_id=tournament_id)
    logger.info(
        "Reseeded %d participants into %d matches",
        len(reseeded), len(matches),
    )
    return ReseedResult(participants=reseeded, matches=matches)
