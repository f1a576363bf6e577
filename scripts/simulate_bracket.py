#!/usr/bin/env python3
"""
Play a single-elimination idea tournament from start to finish.

Builds a bracket from N synthetic ideas, opens rounds one at a time and
picks a winner for every open match until a champion is left.

In-memory run with 6 ideas, seed order, better seed always wins:
    python scripts/simulate_bracket.py --ideas 6 --no-shuffle --winner top-seed

Random winners with a fixed random seed (reproducible):
    python scripts/simulate_bracket.py --ideas 11 --random-seed 42

Store the bracket in the configured database instead of memory:
    python scripts/simulate_bracket.py --ideas 8 --database --tournament-id demo-1
"""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from time import perf_counter

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ideabracket.bracket import Match, Participant
from ideabracket.bracket.rounds import group_by_round
from ideabracket.config import settings
from ideabracket.services import BracketService
from ideabracket.storage import InMemoryBracketStore, SQLBracketStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate a single-elimination idea tournament.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--ideas",
        type=int,
        default=8,
        help="Number of synthetic ideas to enter (default: 8).",
    )
    parser.add_argument(
        "--tournament-id",
        default="simulation",
        help="Tournament id to store the bracket under.",
    )
    parser.add_argument(
        "--no-shuffle",
        action="store_true",
        help="Place ideas in seed order instead of shuffling them.",
    )
    parser.add_argument(
        "--winner",
        choices=["random", "top-seed"],
        default="random",
        help="How match winners are chosen.",
    )
    parser.add_argument(
        "--random-seed",
        type=int,
        default=None,
        help="Seed for the random generator (shuffle and random winners).",
    )
    parser.add_argument(
        "--database",
        action="store_true",
        help="Use the configured database instead of an in-memory store.",
    )
    parser.add_argument(
        "--metrics-json",
        default=None,
        help="Write a JSON summary to this path on completion.",
    )
    return parser


def _make_participants(tournament_id: str, count: int) -> list[Participant]:
    return [
        Participant(
            id=f"p-{index}",
            tournament_id=tournament_id,
            idea_id=f"idea-{index}",
            idea_title=f"Idea {index}",
            seed=index,
        )
        for index in range(1, count + 1)
    ]


def _pick_side(match: Match, seeds: dict[str, int], mode: str, rng: random.Random) -> str:
    if mode == "top-seed":
        return "a" if seeds[match.a.participant_id] < seeds[match.b.participant_id] else "b"
    return rng.choice(["a", "b"])


def _print_bracket(matches: list[Match], titles: dict[str, str]) -> None:
    def name(participant_id: str | None) -> str:
        return titles.get(participant_id, "bye") if participant_id else "-"

    for round_number, round_matches in group_by_round(matches).items():
        print(f"Round {round_number}")
        for match in round_matches:
            winner = f"  -> {name(match.winner_id)}" if match.winner_side else ""
            print(
                f"  #{match.position:<3} {name(match.a.participant_id):<12} vs "
                f"{name(match.b.participant_id):<12} [{match.status}]{winner}"
            )


def _play(service: BracketService, args: argparse.Namespace, rng: random.Random) -> dict:
    tournament_id = args.tournament_id
    participants = _make_participants(tournament_id, args.ideas)

    service.create_bracket(tournament_id, participants, shuffle=not args.no_shuffle)
    seeded = service.get_participants(tournament_id)
    seeds = {p.id: p.seed for p in seeded}
    titles = {p.id: p.idea_title for p in seeded}

    matches = service.start(tournament_id)
    decided = 0
    while service.status(tournament_id) != "complete":
        open_matches = service.open_matches(tournament_id)
        if not open_matches:
            matches = service.open_next_round(tournament_id)
            continue
        for match in open_matches:
            side = _pick_side(match, seeds, args.winner, rng)
            matches = service.apply_match_result(tournament_id, match.id, side)
            decided += 1

    _print_bracket(matches, titles)
    champion = service.champion(tournament_id)
    return {
        "tournament_id": tournament_id,
        "ideas": args.ideas,
        "matches": len(matches),
        "matches_decided": decided,
        "champion": champion.idea_title if champion else None,
        "bracket": [m.to_dict() for m in matches],
    }


def main() -> int:
    args = _build_parser().parse_args()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.ideas < 2:
        print("ERROR: --ideas must be at least 2")
        return 1

    rng = random.Random(args.random_seed)
    run_settings = settings.model_copy(update={"min_participants": 2})

    print(f"BRACKET SIMULATION  ideas={args.ideas}  winner={args.winner}  database={args.database}")
    print("-" * 60)
    t_start = perf_counter()

    if args.database:
        from ideabracket.db import get_session

        with get_session() as session:
            store = SQLBracketStore(session)
            result = _play(BracketService(store, store, settings=run_settings, rng=rng), args, rng)
    else:
        store = InMemoryBracketStore()
        result = _play(BracketService(store, store, settings=run_settings, rng=rng), args, rng)

    elapsed = perf_counter() - t_start

    print("-" * 60)
    print(f"Champion:         {result['champion']}")
    print(f"Matches:          {result['matches']}")
    print(f"Matches decided:  {result['matches_decided']}")
    print(f"Elapsed:          {elapsed:.2f}s")

    if args.metrics_json:
        payload = {"status": "success", "elapsed_s": round(elapsed, 3), **result}
        metrics_path = Path(args.metrics_json)
        metrics_path.parent.mkdir(parents=True, exist_ok=True)
        metrics_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
