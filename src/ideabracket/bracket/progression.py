"""
Winner recording and propagation.

When a match is decided its winner moves into the next round:

    Round r, position p  →  Round r+1, position ceil(p/2), side a if p is odd
                                                          side b if p is even

The final match has no next round, so propagating its winner is a no-op.

Changing a winner is allowed until the dependent match has itself been
closed. After that the old winner may already have advanced further, and
rewriting one link of the chain would leave the rest stale, so the change
is rejected with WinnerLockedError.
"""

import logging
from typing import Optional, Sequence

from ideabracket.bracket.errors import (
    InvalidTransitionError,
    MatchNotFoundError,
    WinnerLockedError,
)
from ideabracket.bracket.models import SIDES, Match, MatchSide, WinnerSide
from ideabracket.bracket.positions import get_next_position, get_target_side
from ideabracket.match_statuses import CLOSED, PENDING

logger = logging.getLogger(__name__)


def find_match_index(matches: Sequence[Match], match_id: str) -> int:
    """Return the list index of ``match_id``, raising MatchNotFoundError."""
    for index, match in enumerate(matches):
        if match.id == match_id:
            return index
    raise MatchNotFoundError(match_id)


def find_dependent_index(matches: Sequence[Match], match: Match) -> Optional[int]:
    """Index of the next-round match fed by ``match``, or None for the final."""
    next_round = match.round + 1
    next_position = get_next_position(match.position)
    for index, candidate in enumerate(matches):
        if candidate.round == next_round and candidate.position == next_position:
            return index
    return None


def propagate_winner(matches: Sequence[Match], match: Match) -> list[Match]:
    """
    Copy the winner of ``match`` into the side of the match it feeds.

    Args:
        matches: Current match list (not modified)
        match: A match with ``winner_side`` set

    Returns:
        New match list with the dependent side filled in. Unchanged when the
        match has no winner or no next-round match exists.
    """
    result = list(matches)
    winner_id = match.winner_id
    if winner_id is None:
        return result

    dependent_index = find_dependent_index(result, match)
    if dependent_index is None:
        return result

    target_side = get_target_side(match.position)
    dependent = result[dependent_index]
    result[dependent_index] = dependent.with_side(
        target_side,
        MatchSide(participant_id=winner_id, source_match_id=match.id),
    )
    return result


def record_winner(
    matches: Sequence[Match],
    match_id: str,
    side: WinnerSide,
    *,
    strict: bool = False,
) -> list[Match]:
    """
    Record ``side`` as the winner of ``match_id`` and propagate it forward.

    The match is closed immediately. Recording the same side twice yields
    the same state; recording the other side overwrites the winner and
    re-propagates, unless the dependent match is already closed.

    Args:
        matches: Current match list (not modified)
        match_id: Id of the match being decided
        side: "a" or "b"
        strict: If True, reject matches that are still pending (not yet
            opened by the round controller)

    Returns:
        New match list

    Raises:
        MatchNotFoundError: ``match_id`` is not in ``matches``
        InvalidTransitionError: bad side, empty winning side, or a pending
            match in strict mode
        WinnerLockedError: changing a winner whose dependent match is closed
    """
    if side not in SIDES:
        raise InvalidTransitionError(f"Unknown match side: {side!r}")

    index = find_match_index(matches, match_id)
    match = matches[index]

    if match.side(side).participant_id is None:
        raise InvalidTransitionError(
            f"Side {side} of {match_id} has no participant and cannot win"
        )
    if strict and match.status == PENDING:
        raise InvalidTransitionError(f"Match {match_id} is not open yet")

    if match.winner_side is not None and match.winner_side != side:
        dependent_index = find_dependent_index(matches, match)
        if dependent_index is not None and matches[dependent_index].is_closed:
            raise WinnerLockedError(
                f"Cannot change winner of {match_id}: "
                f"{matches[dependent_index].id} is already closed"
            )
        logger.info(
            "Changing winner of %s from side %s to side %s",
            match_id, match.winner_side, side,
        )

    decided = match.with_status(CLOSED, winner_side=side)
    result = list(matches)
    result[index] = decided
    return propagate_winner(result, decided)
