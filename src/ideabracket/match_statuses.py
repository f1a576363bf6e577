"""Match lifecycle: pending -> open -> closed.

Every status change the bracket engine makes goes through
``can_transition`` (see ``Match.with_status``).
"""

from __future__ import annotations

from typing import Literal

MatchStatus = Literal["pending", "open", "closed"]

PENDING: MatchStatus = "pending"
OPEN: MatchStatus = "open"
CLOSED: MatchStatus = "closed"

# Allowed forward moves. Byes go straight from pending to closed.
ALLOWED_TRANSITIONS: dict[str, tuple[str, ...]] = {
    PENDING: (OPEN, CLOSED),
    OPEN: (CLOSED,),
    CLOSED: (),
}


def can_transition(current: str, target: str) -> bool:
    """Return True if a match may move from ``current`` to ``target``."""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, ())
