"""
Seed ordering.

Turns a participant set into the sequence the builder lays into round 1,
either ascending by seed or as a uniform random permutation. Ids and seeds
must both be unique within the set.

Usage:
    from ideabracket.bracket.seeding import order_participants, order_by_ids

    ordered = order_participants(participants, shuffle=False)
    manual = order_by_ids(participants, ["p-3", "p-1", "p-2", "p-4"])
"""

import random
from typing import Iterable, Optional, Sequence

from ideabracket.bracket.errors import NotEnoughParticipantsError, SeedingError
from ideabracket.bracket.models import Participant


def validate_participants(participants: Sequence[Participant]) -> None:
    """Reject participant sets with duplicate ids or duplicate seeds."""
    seen_ids: set[str] = set()
    seen_seeds: set[int] = set()
    for participant in participants:
        if participant.id in seen_ids:
            raise SeedingError(f"Duplicate participant id: {participant.id}")
        if participant.seed in seen_seeds:
            raise SeedingError(
                f"Duplicate seed {participant.seed} (participant {participant.id})"
            )
        seen_ids.add(participant.id)
        seen_seeds.add(participant.seed)


def require_minimum(participants: Sequence[Participant], minimum: int) -> None:
    """Enforce the caller's minimum participant policy."""
    if len(participants) < minimum:
        raise NotEnoughParticipantsError(len(participants), minimum)


def order_participants(
    participants: Iterable[Participant],
    *,
    shuffle: bool,
    rng: Optional[random.Random] = None,
) -> list[Participant]:
    """
    Order participants for bracket construction.

    Args:
        participants: Participant records with assigned seeds
        shuffle: If True, return a uniformly random permutation
            (Fisher-Yates via ``random.Random.shuffle``); otherwise sort
            strictly ascending by seed
        rng: Random source, injectable for reproducible draws

    Returns:
        A new list; the input is never reordered in place
    """
    ordered = sorted(participants, key=lambda p: p.seed)
    validate_participants(ordered)
    if shuffle:
        (rng or random.Random()).shuffle(ordered)
    return ordered


def assign_seeds(participants: Iterable[Participant]) -> list[Participant]:
    """Renumber seeds 1..N following the sequence order."""
    return [p.with_seed(index + 1) for index, p in enumerate(participants)]


def order_by_ids(
    participants: Sequence[Participant],
    participant_ids: Sequence[str],
) -> list[Participant]:
    """
    Arrange ``participants`` in the order given by ``participant_ids``.

    The id list must name every participant exactly once.
    """
    by_id = {p.id: p for p in participants}
    wanted = set(participant_ids)
    if len(participant_ids) != len(wanted):
        raise SeedingError("Seed order lists a participant more than once")

    unknown = [pid for pid in participant_ids if pid not in by_id]
    if unknown:
        raise SeedingError(f"Unknown participant ids in seed order: {unknown}")

    missing = [p.id for p in participants if p.id not in wanted]
    if missing:
        raise SeedingError(f"Seed order is missing participants: {missing}")

    return [by_id[pid] for pid in participant_ids]

