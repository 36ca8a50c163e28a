#!/usr/bin/env python3
"""
Run an autopilot-vs-autopilot Cosmic Balance battle and print the event log.

Usage:
    python scripts/run_battle.py
    python scripts/run_battle.py --player default-enterprise --ai default-reliant default-reliant --seed 7
"""

import argparse
import logging
import random
import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gamecore.battle_setup import end_combat, start_combat
from gamecore.config import Settings
from gamecore.simulation import TurnExecutor, run_battle


def main():
    parser = argparse.ArgumentParser(
        description="Run an automated space battle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_battle.py --difficulty hard
    python scripts/run_battle.py --max-turns 50 --quiet
        """,
    )
    parser.add_argument(
        "--player", nargs="+", default=["default-enterprise"],
        help="Design ids for the player fleet",
    )
    parser.add_argument(
        "--ai", nargs="+", default=["default-reliant"],
        help="Design ids for the AI fleet",
    )
    parser.add_argument(
        "--difficulty", choices=["easy", "medium", "hard"], default=None,
        help="AI difficulty (default: from GAMECORE_DIFFICULTY or easy)",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed (default: from GAMECORE_SEED)",
    )
    parser.add_argument(
        "--max-turns", type=int, default=None,
        help="Turn limit (default: from GAMECORE_MAX_TURNS or 200)",
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Only print the result",
    )
    args = parser.parse_args()

    settings = Settings.from_env()
    if args.seed is not None:
        settings = replace(settings, seed=args.seed)
    if args.max_turns is not None:
        settings = replace(settings, max_turns=args.max_turns)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rng = random.Random(settings.seed)
    state = start_combat(
        args.player,
        args.ai,
        difficulty=args.difficulty or settings.difficulty,
        rng=rng,
        settings=settings,
    )
    if not state.ships:
        print("No ships could be created from the given designs.")
        return 1

    executor = TurnExecutor(rng=rng)
    if not args.quiet:
        executor.add_event_callback(lambda event: print(event, event.data or ""))

    outcome = run_battle(state, executor, settings.max_turns)

    print()
    print("=" * 60)
    print(f"Result after {state.turn - 1} turns: {outcome.value}")
    for ship in state.ships:
        status = "DESTROYED" if ship.destroyed else f"hull {ship.hull_integrity:.0f}/{ship.max_hull_integrity:.0f}"
        print(f"  {ship.id:<10} {ship.name:<12} {status}")
    for owner, designs in end_combat(state).items():
        print(f"  {owner} keeps: {', '.join(designs) or 'nothing'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
