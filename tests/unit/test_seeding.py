"""Unit tests for participant ordering, seeding and reseeding."""

import random
from collections import Counter

import pytest

from ideabracket.bracket.errors import NotEnoughParticipantsError, SeedingError
from ideabracket.bracket.models import Participant
from ideabracket.bracket.reseed import reseed
from ideabracket.bracket.seeding import (
    assign_seeds,
    order_by_ids,
    order_participants,
    require_minimum,
    validate_participants,
)
from ideabracket.match_statuses import PENDING


def test_order_by_seed(make_participants):
    participants = make_participants(5)
    scrambled = [participants[3], participants[0], participants[4], participants[2], participants[1]]

    ordered = order_participants(scrambled, shuffle=False)
    assert [p.seed for p in ordered] == [1, 2, 3, 4, 5]
    assert scrambled[0].id == "p-4"


def test_shuffle_uses_injected_rng(make_participants):
    participants = make_participants(6)
    expected = list(participants)
    random.Random(3).shuffle(expected)

    assert order_participants(participants, shuffle=True, rng=random.Random(3)) == expected


def test_shuffle_is_roughly_uniform(make_participants):
    participants = make_participants(3)
    rng = random.Random(0)
    counts = Counter(
        tuple(p.id for p in order_participants(participants, shuffle=True, rng=rng))
        for _ in range(6000)
    )
    assert len(counts) == 6
    assert all(800 < count < 1200 for count in counts.values())


def test_duplicate_seed_rejected():
    participants = [
        Participant(id="p-1", tournament_id="t-1", idea_id="i-1", idea_title="A", seed=1),
        Participant(id="p-2", tournament_id="t-1", idea_id="i-2", idea_title="B", seed=1),
    ]
    with pytest.raises(SeedingError):
        validate_participants(participants)
    with pytest.raises(ValueError):
        order_participants(participants, shuffle=False)


def test_require_minimum(make_participants):
    require_minimum(make_participants(4), 4)
    with pytest.raises(NotEnoughParticipantsError) as excinfo:
        require_minimum(make_participants(3), 4)
    assert excinfo.value.count == 3
    assert excinfo.value.minimum == 4


def test_assign_seeds_follows_sequence(make_participants):
    reordered = list(reversed(make_participants(3)))
    seeded = assign_seeds(reordered)
    assert [(p.id, p.seed) for p in seeded] == [("p-3", 1), ("p-2", 2), ("p-1", 3)]
    assert reordered[0].seed == 3


def test_order_by_ids(make_participants):
    participants = make_participants(4)
    ordered = order_by_ids(participants, ["p-3", "p-1", "p-4", "p-2"])
    assert [p.id for p in ordered] == ["p-3", "p-1", "p-4", "p-2"]


@pytest.mark.parametrize(
    "ids",
    [
        ["p-1", "p-2", "p-3"],
        ["p-1", "p-2", "p-3", "p-4", "p-5"],
        ["p-1", "p-1", "p-2", "p-3"],
        ["p-1", "p-2", "p-3", "p-9"],
    ],
)
def test_order_by_ids_rejects_bad_lists(make_participants, ids):
    with pytest.raises(SeedingError):
        order_by_ids(make_participants(4), ids)


def test_reseed_rebuilds_in_new_order(make_participants):
    participants = make_participants(4)
    ordered = order_by_ids(participants, ["p-3", "p-1", "p-4", "p-2"])

    result = reseed(ordered)
    assert [(p.id, p.seed) for p in result.participants] == [
        ("p-3", 1), ("p-1", 2), ("p-4", 3), ("p-2", 4),
    ]

    by_id = {m.id: m for m in result.matches}
    assert (by_id["match-r1-p1"].a.participant_id, by_id["match-r1-p1"].b.participant_id) == ("p-3", "p-1")
    assert (by_id["match-r1-p2"].a.participant_id, by_id["match-r1-p2"].b.participant_id) == ("p-4", "p-2")
    assert all(m.status == PENDING and m.winner_side is None for m in result.matches)


def test_reseed_keeps_tournament_id(make_participants):
    result = reseed(make_participants(5, tournament_id="t-2"))
    assert {m.tournament_id for m in result.matches} == {"t-2"}
    assert len(result.matches) == 6
