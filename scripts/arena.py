"""
Arena script for running matches between Deadblock skill tiers.

Example:
    python scripts/arena.py --tier-one professional --tier-two average --games 10 --seed 7
"""

import argparse
import logging
import os
import sys
import time
from typing import Optional

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agents.registry import SkillTier, build_agent
from engine.board import Player
from engine.game import play_game
from schemas.engine_config import SelectorConfig
from schemas.move import MatchSummary
from utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def run_match(tier_one: str, tier_two: str, games: int, seed: Optional[int] = None,
              config: Optional[SelectorConfig] = None) -> MatchSummary:
    """
    Play ``games`` games, swapping sides every game.

    Args:
        tier_one: Skill tier of the first contestant
        tier_two: Skill tier of the second contestant
        games: Number of games to play
        seed: Seed for both contestants' random sources
        config: Selector settings shared by both contestants

    Returns:
        MatchSummary with win counts per contestant
    """
    config = config or SelectorConfig.from_env()
    rng = np.random.RandomState(seed)
    contestant_one = build_agent(tier_one, rng=rng, config=config)
    contestant_two = build_agent(tier_two, rng=rng, config=config)

    summary = MatchSummary(tier_one=tier_one, tier_two=tier_two, games=games, seed=seed)
    total_moves = 0
    for game_index in range(games):
        swapped = game_index % 2 == 1
        first, second = (contestant_two, contestant_one) if swapped else (contestant_one, contestant_two)

        start = time.perf_counter()
        result = play_game(first, second)
        total_moves += result.moves_played

        one_won = (result.winner is Player.ONE) != swapped
        if one_won:
            summary.wins_one += 1
        else:
            summary.wins_two += 1
        logger.info(f"Game {game_index + 1}/{games}: winner={tier_one if one_won else tier_two}, "
                    f"moves={result.moves_played}, elapsed_s={time.perf_counter() - start:.2f}")

    if games:
        summary.average_moves = total_moves / games
    return summary


def main(argv=None) -> int:
    tiers = [tier.value for tier in SkillTier]
    parser = argparse.ArgumentParser(description="Play Deadblock games between two skill tiers")
    parser.add_argument("--tier-one", choices=tiers, default=SkillTier.PROFESSIONAL.value)
    parser.add_argument("--tier-two", choices=tiers, default=SkillTier.AVERAGE.value)
    parser.add_argument("--games", type=int, default=4, help="Number of games to play")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--time-budget-ms", type=int, default=None,
                        help="Search budget for the professional tier")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    config = SelectorConfig.from_env()
    if args.time_budget_ms is not None:
        search = config.search.model_copy(update={"time_budget_ms": args.time_budget_ms})
        config = config.model_copy(update={"search": search})

    summary = run_match(args.tier_one, args.tier_two, args.games, seed=args.seed, config=config)

    if args.json:
        print(summary.model_dump_json(indent=2))
    else:
        print(f"{summary.tier_one}: {summary.wins_one} wins")
        print(f"{summary.tier_two}: {summary.wins_two} wins")
        print(f"Average game length: {summary.average_moves:.1f} moves")
    return 0


if __name__ == "__main__":
    sys.exit(main())
