"""
Bracket position utility functions.

Provides positional math for single-elimination brackets. Positions are
1-indexed within each round and rounds are numbered from 1:

    Round r, position p  →  Round r+1, position ceil(p/2)

So positions 1 and 2 in round 1 feed into position 1 in round 2,
positions 3 and 4 feed into position 2, etc. An odd position always feeds
side "a" of its next match, an even position side "b".

Match ids are deterministic (``match-r{round}-p{position}``), so round and
position can always be recovered from an id.
"""

import math
import re
from typing import Optional

MATCH_ID_PATTERN = re.compile(r"^match-r(\d+)-p(\d+)$")


def make_match_id(round_number: int, position: int) -> str:
    """
    Build the deterministic id for a bracket slot.

    Examples:
        >>> make_match_id(1, 3)
        'match-r1-p3'
    """
    return f"match-r{round_number}-p{position}"


def parse_match_id(match_id: str) -> Optional[tuple[int, int]]:
    """
    Recover (round, position) from a deterministic match id.

    Returns:
        Tuple of (round, position), or None if the id is not in
        ``match-r{round}-p{position}`` form.

    Examples:
        >>> parse_match_id("match-r2-p1")
        (2, 1)
        >>> parse_match_id("something-else") is None
        True
    """
    found = MATCH_ID_PATTERN.match(match_id)
    if not found:
        return None
    return int(found.group(1)), int(found.group(2))


def get_next_position(position: int) -> int:
    """
    Compute the position in the next round.

    Winner of position p feeds into position ceil(p/2) in the next round.

    Examples:
        >>> get_next_position(1)
        1
        >>> get_next_position(2)
        1
        >>> get_next_position(3)
        2
    """
    return math.ceil(position / 2)


def get_target_side(position: int) -> str:
    """
    Side of the next-round match that the winner of ``position`` fills.

    Examples:
        >>> get_target_side(1)
        'a'
        >>> get_target_side(4)
        'b'
    """
    return "a" if position % 2 == 1 else "b"


def get_feeder_positions(position: int) -> tuple[int, int]:
    """
    Get the two feeder positions from the previous round that feed
    into this position.

    Position p in round r+1 is fed by positions 2p-1 and 2p in round r.

    Examples:
        >>> get_feeder_positions(1)
        (1, 2)
        >>> get_feeder_positions(3)
        (5, 6)
    """
    return (2 * position - 1, 2 * position)


def get_round_sizes(entry_count: int) -> list[int]:
    """
    Number of matches in each round when halving ``entry_count`` entries.

    Each round pairs adjacent entries; an odd entry count leaves the last
    match of that round with a single entry. Halving stops when one entry
    remains, so fewer than two entries produce no rounds.

    Examples:
        >>> get_round_sizes(4)
        [2, 1]
        >>> get_round_sizes(5)
        [3, 2, 1]
        >>> get_round_sizes(1)
        []
    """
    sizes: list[int] = []
    entries = entry_count
    while entries > 1:
        matches = math.ceil(entries / 2)
        sizes.append(matches)
        entries = matches
    return sizes


def get_total_rounds(entry_count: int) -> int:
    """
    Depth of the bracket for ``entry_count`` entries.

    Examples:
        >>> get_total_rounds(3)
        2
        >>> get_total_rounds(8)
        3
        >>> get_total_rounds(9)
        4
    """
