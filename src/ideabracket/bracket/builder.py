"""
Bracket construction.

Builds the full single-elimination match tree from an ordered participant
list by repeated halving:

1. Round 1 pairs adjacent entries: (1, 1, a), (1, 1, b), (1, 2, a), ...
2. Each later round pairs the matches of the round before it, so match
   (r, p) is fed by (r-1, 2p-1) into side a and (r-1, 2p) into side b.
3. When a round has an odd number of entries, its last match gets a single
   entry and a vacant side b. That match resolves as a bye.

Halving stops when one entry remains, so N participants produce
ceil(log2 N) rounds. Fewer than two participants produce no matches.

Usage:
    from ideabracket.bracket.builder import generate_bracket

    matches = generate_bracket(participants, shuffle=False)
"""

import logging
import random
from typing import Optional, Sequence

from ideabracket.bracket.byes import resolve_byes
from ideabracket.bracket.models import Match, MatchSide, Participant
from ideabracket.bracket.positions import (
    get_feeder_positions,
    get_round_sizes,
    get_total_rounds,
    make_match_id,
)
from ideabracket.bracket.seeding import order_participants

logger = logging.getLogger(__name__)


def build_match_tree(
    ordered: Sequence[Participant],
    tournament_id: str,
) -> list[Match]:
    """
    Lay ordered participants into a raw match tree (byes not yet resolved).

    Returns:
        Matches round by round, position ascending
    """
    matches: list[Match] = []
    previous_count = len(ordered)

    for round_number, match_count in enumerate(get_round_sizes(len(ordered)), start=1):
        for position in range(1, match_count + 1):
            top, bottom = get_feeder_positions(position)
            if round_number == 1:
                side_a = MatchSide(participant_id=ordered[top - 1].id)
                side_b = (
                    MatchSide(participant_id=ordered[bottom - 1].id)
                    if bottom <= previous_count
                    else MatchSide()
                )
            else:
                side_a = MatchSide(source_match_id=make_match_id(round_number - 1, top))
                side_b = (
                    MatchSide(source_match_id=make_match_id(round_number - 1, bottom))
                    if bottom <= previous_count
                    else MatchSide()
                )

            matches.append(
                Match(
                    id=make_match_id(round_number, position),
                    tournament_id=tournament_id,
                    round=round_number,
                    position=position,
                    a=side_a,
                    b=side_b,
                )
            )
        previous_count = match_count

    return matches


def generate_bracket(
    participants: Sequence[Participant],
    *,
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
    tournament_id: Optional[str] = None,
) -> list[Match]:
    """
    Build a bracket and resolve its byes.

    Args:
        participants: Participant records with seeds
        shuffle: Randomize placement instead of using seed order
        rng: Random source for shuffling
        tournament_id: Tournament the matches belong to. Defaults to the
            first participant's tournament.

    Returns:
        Match list ready to persist. Empty for fewer than two participants.
    """
    ordered = order_participants(participants, shuffle=shuffle, rng=rng)
    if len(ordered) < 2:
        return []

    if tournament_id is None:
        tournament_id = ordered[0].tournament_id

    raw = build_match_tree(ordered, tournament_id)
    matches = resolve_byes(raw)
    logger.info(
        "Generated bracket for %s: %d participants, %d matches, %d rounds",
        tournament_id, len(ordered), len(matches), get_total_rounds(len(ordered)),
    )
    return matches
