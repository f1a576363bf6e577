"""Unit tests for the match lifecycle."""

import pytest

from ideabracket.bracket.errors import InvalidTransitionError
from ideabracket.bracket.models import Match, MatchSide
from ideabracket.bracket.rounds import close_decided_matches, next_round
from ideabracket.match_statuses import CLOSED, OPEN, PENDING, can_transition


def _match(status, winner_side=None):
    return Match(
        id="match-r1-p1", tournament_id="t-1", round=1, position=1, status=status,
        a=MatchSide(participant_id="p-1"), b=MatchSide(participant_id="p-2"),
        winner_side=winner_side,
    )


def test_transitions():
    assert can_transition("pending", "open")
    assert can_transition("pending", "closed")
    assert can_transition("open", "closed")
    assert can_transition("closed", "closed")
    assert not can_transition("closed", "open")
    assert not can_transition("open", "pending")
    assert not can_transition("closed", "pending")


def test_with_status_follows_lifecycle():
    opened = _match(PENDING).with_status(OPEN)
    assert opened.status == OPEN

    closed = opened.with_status(CLOSED, winner_side="a")
    assert closed.status == CLOSED
    assert closed.winner_id == "p-1"


@pytest.mark.parametrize(
    "current,target",
    [(CLOSED, OPEN), (CLOSED, PENDING), (OPEN, PENDING)],
)
def test_with_status_rejects_backward_moves(current, target):
    with pytest.raises(InvalidTransitionError):
        _match(current).with_status(target)


def test_round_helpers_leave_other_statuses_alone():
    closed = _match(CLOSED, winner_side="b")
    assert next_round([closed]) == [closed]
    assert close_decided_matches([closed]) == [closed]
