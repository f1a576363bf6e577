"""
Automatic resolution of bye matches.

Only a truly vacant side (no participant and no feeder match) gives a bye.
A side still waiting on its feeder is never treated as empty, otherwise an
entrant could skip a round whose other half has not been played yet.
"""

import logging
from typing import Optional, Sequence

from ideabracket.bracket.models import Match, WinnerSide
from ideabracket.bracket.progression import propagate_winner
from ideabracket.match_statuses import CLOSED, PENDING

logger = logging.getLogger(__name__)


def find_bye_side(match: Match) -> Optional[WinnerSide]:
    """
    Return the side that wins ``match`` by bye, or None.

    A bye is a pending match with one populated side facing a vacant slot.
    A side still waiting on its feeder match is not vacant.
    """
    if match.status != PENDING:
        return None
    if match.a.is_populated and match.b.is_vacant:
        return "a"
    if match.b.is_populated and match.a.is_vacant:
        return "b"
    return None


def resolve_byes(matches: Sequence[Match]) -> list[Match]:
    """
    Close every bye and propagate its winner, repeated to a fixed point.

    Resolving one bye can populate a downstream match that is itself now a
    bye, so the scan repeats until a full pass changes nothing.
    """
    result = list(matches)
    changed = True
    while changed:
        changed = False
        for index in range(len(result)):
            match = result[index]
            side = find_bye_side(match)
            if side is None:
                continue
            decided = match.with_status(CLOSED, winner_side=side)
            result[index] = decided
            result = propagate_winner(result, decided)
            changed = True
            logger.debug("Bye: %s advances side %s (%s)", match.id, side, decided.winner_id)
    return result
