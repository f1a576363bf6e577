"""Unit tests for the bracket service over the in-memory store."""

import random
import threading

import pytest

from ideabracket.bracket.builder import generate_bracket
from ideabracket.bracket.errors import (
    BracketNotFoundError,
    ConcurrentUpdateError,
    InvalidTransitionError,
    NotEnoughParticipantsError,
    SeedingError,
)
from ideabracket.bracket.models import Match, MatchSide
from ideabracket.locks import TournamentLockRegistry
from ideabracket.match_statuses import CLOSED, OPEN, PENDING
from ideabracket.services import BracketChangeSummary, BracketService
from ideabracket.storage import InMemoryBracketStore


@pytest.fixture
def store():
    return InMemoryBracketStore()


@pytest.fixture
def service(store, test_settings):
    return BracketService(store, store, settings=test_settings)


def _statuses(matches):
    return {m.id: m.status for m in matches}


def test_create_requires_minimum(service, make_participants):
    with pytest.raises(NotEnoughParticipantsError):
        service.create_bracket("t-1", make_participants(3))
    assert service.get_bracket("t-1") == []


def test_create_rejects_foreign_participants(service, make_participants):
    with pytest.raises(SeedingError):
        service.create_bracket("t-1", make_participants(4, tournament_id="t-2"))


def test_create_in_seed_order(service, make_participants):
    matches = service.create_bracket("t-1", make_participants(4))

    assert len(matches) == 3
    assert service.get_bracket("t-1") == matches
    assert [(p.id, p.seed) for p in service.get_participants("t-1")] == [
        ("p-1", 1), ("p-2", 2), ("p-3", 3), ("p-4", 4),
    ]
    assert service.status("t-1") == "draft"
    assert service.last_summary.operation == "create"
    assert service.last_summary.total_matches == 3


def test_create_shuffled_renumbers_seeds(store, test_settings, make_participants):
    service = BracketService(store, store, settings=test_settings, rng=random.Random(5))
    matches = service.create_bracket("t-1", make_participants(8), shuffle=True)

    seeded = service.get_participants("t-1")
    assert [p.seed for p in seeded] == list(range(1, 9))
    round_one = [m for m in matches if m.round == 1]
    placed = [pid for m in round_one for pid in (m.a.participant_id, m.b.participant_id)]
    assert placed == [p.id for p in seeded]


def test_mutations_need_a_bracket(service):
    with pytest.raises(BracketNotFoundError):
        service.start("t-1")
    with pytest.raises(BracketNotFoundError):
        service.apply_match_result("t-1", "match-r1-p1", "a")


def test_full_tournament(service, make_participants):
    service.create_bracket("t-1", make_participants(4))

    matches = service.start("t-1")
    assert _statuses(matches) == {
        "match-r1-p1": OPEN, "match-r1-p2": OPEN, "match-r2-p1": PENDING,
    }
    assert service.last_summary.matches_opened == 2
    assert service.status("t-1") == "active"

    service.apply_match_result("t-1", "match-r1-p1", "a")
    assert [m.id for m in service.open_matches("t-1")] == ["match-r1-p2"]

    matches = service.apply_match_result("t-1", "match-r1-p2", "b")
    final = [m for m in matches if m.id == "match-r2-p1"][0]
    assert final.status == OPEN
    assert (final.a.participant_id, final.b.participant_id) == ("p-1", "p-4")

    service.apply_match_result("t-1", "match-r2-p1", "b")
    assert service.status("t-1") == "complete"
    assert service.champion("t-1").id == "p-4"
    assert service.open_matches("t-1") == []


def test_manual_round_opening(store, test_settings, make_participants):
    settings = test_settings.model_copy(update={"auto_advance_rounds": False})
    service = BracketService(store, store, settings=settings)
    service.create_bracket("t-1", make_participants(4))
    service.start("t-1")
    service.apply_match_result("t-1", "match-r1-p1", "a")
    matches = service.apply_match_result("t-1", "match-r1-p2", "a")
    assert _statuses(matches)["match-r2-p1"] == PENDING

    matches = service.open_next_round("t-1")
    assert _statuses(matches)["match-r2-p1"] == OPEN


def test_strict_transitions(store, test_settings, make_participants):
    settings = test_settings.model_copy(update={"strict_transitions": True})
    service = BracketService(store, store, settings=settings)
    service.create_bracket("t-1", make_participants(4))
    version = store.bracket_version("t-1")

    with pytest.raises(InvalidTransitionError):
        service.apply_match_result("t-1", "match-r1-p1", "a")
    assert store.bracket_version("t-1") == version

    service.start("t-1")
    matches = service.apply_match_result("t-1", "match-r1-p1", "a")
    assert _statuses(matches)["match-r1-p1"] == CLOSED


def test_result_resolves_new_bye(service, make_participants):
    service.create_bracket("t-1", make_participants(6))
    service.start("t-1")

    matches = service.apply_match_result("t-1", "match-r1-p3", "a")
    by_id = {m.id: m for m in matches}
    assert by_id["match-r2-p2"].status == CLOSED
    assert by_id["match-r3-p1"].b.participant_id == "p-5"
    assert by_id["match-r2-p1"].status == PENDING


def test_reseed_discards_results(service, make_participants):
    service.create_bracket("t-1", make_participants(4))
    service.start("t-1")
    service.apply_match_result("t-1", "match-r1-p1", "a")

    result = service.reseed("t-1", ["p-4", "p-3", "p-2", "p-1"])
    assert [(p.id, p.seed) for p in result.participants] == [
        ("p-4", 1), ("p-3", 2), ("p-2", 3), ("p-1", 4),
    ]
    assert all(m.status == PENDING and m.winner_side is None for m in result.matches)
    assert result.matches == service.get_bracket("t-1")
    first = result.matches[0]
    assert (first.a.participant_id, first.b.participant_id) == ("p-4", "p-3")
    assert [p.id for p in service.get_participants("t-1")] == ["p-4", "p-3", "p-2", "p-1"]


def test_reseed_rejects_unknown_ids(service, make_participants):
    service.create_bracket("t-1", make_participants(4))
    before = service.get_bracket("t-1")
    with pytest.raises(SeedingError):
        service.reseed("t-1", ["p-1", "p-2", "p-3", "p-9"])
    assert service.get_bracket("t-1") == before


def test_reset_keeps_seed_order(service, make_participants):
    service.create_bracket("t-1", make_participants(4))
    service.start("t-1")
    service.apply_match_result("t-1", "match-r1-p2", "b")

    result = service.reset("t-1")
    assert result.matches == generate_bracket(make_participants(4))
    assert service.status("t-1") == "draft"


def test_close_open_round(test_settings):
    decided = Match(
        id="match-r1-p1", tournament_id="t-1", round=1, position=1, status=OPEN,
        a=MatchSide(participant_id="p-1"), b=MatchSide(participant_id="p-2"),
        winner_side="a",
    )
    store = InMemoryBracketStore(matches={"t-1": [decided]})
    service = BracketService(store, store, settings=test_settings)

    matches = service.close_open_round("t-1")
    assert matches[0].status == CLOSED
    assert service.last_summary.matches_closed == 1


def test_held_lock_times_out(store, test_settings, make_participants):
    locks = TournamentLockRegistry()
    service = BracketService(store, store, locks=locks, settings=test_settings)
    service.create_bracket("t-1", make_participants(4))

    with locks.hold("t-1"):
        with pytest.raises(TimeoutError):
            service.start("t-1")


def test_stale_version_is_rejected(test_settings, make_participants):
    class RacingStore(InMemoryBracketStore):
        """Another writer saves every time the bracket is loaded."""

        def load_matches(self, tournament_id):
            self._versions[tournament_id] = self._versions.get(tournament_id, 0) + 1
            return super().load_matches(tournament_id)

    store = RacingStore()
    store.save_participants("t-1", make_participants(4))
    store.save_matches("t-1", generate_bracket(make_participants(4)))
    service = BracketService(store, store, settings=test_settings)

    with pytest.raises(ConcurrentUpdateError):
        service.start("t-1")


def test_change_summary_compare(make_participants):
    before = generate_bracket(make_participants(4))
    after = [
        Match(
            id=m.id, tournament_id=m.tournament_id, round=m.round,
            position=m.position, status=OPEN, a=m.a, b=m.b,
        )
        if m.round == 1 else m
        for m in before
    ]
    summary = BracketChangeSummary.compare("t-1", "start", before, after, version=2)
    assert summary.matches_opened == 2
    assert summary.matches_closed == 0
    assert summary.sides_filled == 0
    assert "opened=2" in summary.summary()


def test_reset_is_serialized_with_reseed(test_settings, make_participants):
    settings = test_settings.model_copy(update={"lock_timeout_seconds": 5})

    class InterleavingStore(InMemoryBracketStore):
        """Starts a competing reseed the first time reset reads participants."""

        armed = False
        competitor = None

        def load_participants(self, tournament_id):
            if self.armed:
                self.armed = False
                self.competitor = threading.Thread(
                    target=service.reseed,
                    args=(tournament_id, ["p-4", "p-3", "p-2", "p-1"]),
                )
                self.competitor.start()
                self.competitor.join(timeout=0.3)
            return super().load_participants(tournament_id)

    store = InterleavingStore()
    service = BracketService(store, store, settings=settings)
    service.create_bracket("t-1", make_participants(4))

    store.armed = True
    service.reset("t-1")
    store.competitor.join(timeout=5)

    assert not store.competitor.is_alive()
    assert [p.id for p in service.get_participants("t-1")] == ["p-4", "p-3", "p-2", "p-1"]
    first = service.get_bracket("t-1")[0]
    assert (first.a.participant_id, first.b.participant_id) == ("p-4", "p-3")
