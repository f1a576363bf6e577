"""
Round progression.

Matches start pending. The round controller opens them one round at a
time: ``next_round`` flips every pending match in the earliest round that
still has pending matches to open, and leaves later rounds alone even when
bye resolution has already filled both of their sides.

Closing is caller-driven. ``record_winner`` closes a match as soon as a
winner is chosen, but matches stored with a winner and still open (for
example by an older client) are closed by ``close_decided_matches``.

Tournament status is derived from the matches rather than stored:
- draft: nothing opened and nothing decided by hand
- active: a match is open, or a real contest has been decided
- complete: the final match is closed
"""

from __future__ import annotations

import logging
from typing import Literal, Optional, Sequence

from ideabracket.bracket.models import Match
from ideabracket.match_statuses import CLOSED, OPEN, PENDING

logger = logging.getLogger(__name__)

TournamentStatus = Literal["draft", "active", "complete"]


def next_round(matches: Sequence[Match]) -> list[Match]:
    """Open every pending match in the earliest round that has any."""
    pending_rounds = sorted({m.round for m in matches if m.status == PENDING})
    if not pending_rounds:
        return list(matches)

    round_to_open = pending_rounds[0]
    logger.info("Opening round %d", round_to_open)
    return [
        m.with_status(OPEN) if m.round == round_to_open and m.status == PENDING else m
        for m in matches
    ]


def compute_open_matches(matches: Sequence[Match]) -> list[Match]:
    """Return the matches currently open."""
    return [m for m in matches if m.status == OPEN]


def close_decided_matches(matches: Sequence[Match]) -> list[Match]:
    """Close open matches that already carry a winner."""
    return [
        m.with_status(CLOSED) if m.status == OPEN and m.winner_side is not None else m
        for m in matches
    ]


def advance_if_round_complete(matches: Sequence[Match]) -> list[Match]:
    """Open the next round once no match is left open."""
    if compute_open_matches(matches):
        return list(matches)
    return next_round(matches)


def total_rounds(matches: Sequence[Match]) -> int:
    return max((m.round for m in matches), default=0)


def matches_in_round(matches: Sequence[Match], round_number: int) -> list[Match]:
    return sorted(
        (m for m in matches if m.round == round_number),
        key=lambda m: m.position,
    )


def group_by_round(matches: Sequence[Match]) -> dict[int, list[Match]]:
    """Matches keyed by round number, each round sorted by position."""
    return {r: matches_in_round(matches, r) for r in range(1, total_rounds(matches) + 1)}


def get_final_match(matches: Sequence[Match]) -> Optional[Match]:
    final_round = matches_in_round(matches, total_rounds(matches))
    return final_round[0] if final_round else None


def champion_id(matches: Sequence[Match]) -> Optional[str]:
    """Participant id of the tournament winner, once the final is closed."""
    final = get_final_match(matches)
    if final is None or not final.is_closed:
        return None
    return final.winner_id


def is_contested(match: Match) -> bool:
    """True when both sides hold a participant, i.e. not a bye."""
    return match.a.is_populated and match.b.is_populated


def tournament_status(matches: Sequence[Match]) -> TournamentStatus:
    if champion_id(matches) is not None:
        return "complete"
    for m in matches:
        if m.status == OPEN:
            return "active"
        if m.status == CLOSED and is_contested(m):
            return "active"
    return "draft"
