"""
Single-elimination bracket engine.

Pure functions over immutable match lists:
- seeding: participant ordering (seed order or Fisher-Yates shuffle)
- builder: match tree construction by repeated halving
- byes: fixed-point resolution of single-entry matches
- progression: winner recording and propagation
- rounds: opening and closing rounds, derived tournament status
- reseed: rebuilding the bracket from a new seed order
"""

from ideabracket.bracket.builder import build_match_tree, generate_bracket
from ideabracket.bracket.byes import resolve_byes
from ideabracket.bracket.errors import (
    BracketError,
    BracketNotFoundError,
    ConcurrentUpdateError,
    InvalidTransitionError,
    MatchNotFoundError,
    NotEnoughParticipantsError,
    SeedingError,
    WinnerLockedError,
)
from ideabracket.bracket.models import Match, MatchSide, Participant, WinnerSide
from ideabracket.bracket.progression import propagate_winner, record_winner
from ideabracket.bracket.reseed import ReseedResult, reseed
from ideabracket.bracket.rounds import (
    advance_if_round_complete,
    champion_id,
    close_decided_matches,
    compute_open_matches,
    next_round,
    tournament_status,
)
from ideabracket.bracket.seeding import order_by_ids, order_participants

__all__ = [
    # Records
    "Match",
    "MatchSide",
    "Participant",
    "WinnerSide",
    # Engine
    "build_match_tree",
    "generate_bracket",
    "resolve_byes",
    "propagate_winner",
    "record_winner",
    "next_round",
    "compute_open_matches",
    "close_decided_matches",
    "advance_if_round_complete",
    "champion_id",
    "tournament_status",
    "order_participants",
    "order_by_ids",
    "reseed",
    "ReseedResult",
    # Errors
    "BracketError",
    "BracketNotFoundError",
    "ConcurrentUpdateError",
    "InvalidTransitionError",
    "MatchNotFoundError",
    "NotEnoughParticipantsError",
    "SeedingError",
    "WinnerLockedError",
]
