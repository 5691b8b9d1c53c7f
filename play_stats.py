#!/usr/bin/env python3
"""
Play multiple automated 2048 games with the alpha-beta advisor and report
statistics about max tiles achieved, win rates, average scores and turns.

Example usage:
    python play_stats.py --games 20 --time 50 --seed 7
"""

import argparse
import logging
import random
import sys

import numpy as np
from tabulate import tabulate
from tqdm import tqdm

from ai2048.config import setup_logging
from ai2048.controller import GameController
from ai2048.search import DEFAULT_DEADLINE_MS

logger = logging.getLogger(__name__)


def play_game(seed, deadline_ms=DEFAULT_DEADLINE_MS, expectimax=False, max_depth=None):
    """Play a single headless game and return its summary as a dict"""
    controller = GameController(
        seed=seed,
        deadline_ms=deadline_ms,
        auto=True,
        expectimax=expectimax,
        max_depth=max_depth,
    )
    summary = controller.run()
    return {
        'seed': seed,
        'max_tile': summary.max_tile,
        'score': summary.score,
        'turns': summary.turns,
    }


def play_games(num_games=10, seed=None, deadline_ms=DEFAULT_DEADLINE_MS, expectimax=False, max_depth=None):
    """Play several games, each seeded from one master generator"""
    master = random.Random(seed)
    results = []

    print(f"Playing {num_games} games at {deadline_ms}ms per move...")
    for _ in tqdm(range(num_games)):
        game_seed = master.randrange(2**32)
        results.append(play_game(game_seed, deadline_ms, expectimax, max_depth))

    return results


def analyze_results(results, win_threshold=2048):
    """Aggregate game results into tile achievement rates and averages"""
    max_tiles = [result['max_tile'] for result in results]

    # Start from 2^2 (4) up to 2^11 (2048) or higher if needed
    tile_stats = {}
    max_power = max(11, int(np.ceil(np.log2(max(max_tiles + [2048])))))
    for power in range(2, max_power + 1):
        tile_value = 2 ** power
        count = sum(1 for tile in max_tiles if tile >= tile_value)
        tile_stats[tile_value] = (count, count / len(results) * 100)

    wins = sum(1 for tile in max_tiles if tile >= win_threshold)
    best = max(results, key=lambda result: result['score'])

    return {
        'tile_stats': tile_stats,
        'avg_score': sum(result['score'] for result in results) / len(results),
        'avg_turns': sum(result['turns'] for result in results) / len(results),
        'num_games': len(results),
        'win_rate': wins / len(results) * 100,
        'win_threshold': win_threshold,
        'best_score': best['score'],
        'best_seed': best['seed'],
    }


def print_statistics(stats):
    print(f"\nStatistics for {stats['num_games']} games:")
    print(f"Average score: {stats['avg_score']:.1f}")
    print(f"Average turns: {stats['avg_turns']:.1f}")
    print(f"Best score: {stats['best_score']} (seed {stats['best_seed']})")

    table_data = []
    for tile_value, (count, percentage) in sorted(stats['tile_stats'].items()):
        table_data.append([
            f"{tile_value}",
            f"{count}/{stats['num_games']}",
            f"{percentage:.1f}%"
        ])

    print("\nMax Tile Achievement Rates:")
    print(tabulate(table_data, headers=["Tile", "Count", "Percentage"], tablefmt="grid"))
    print(f"\nWin Rate (>={stats['win_threshold']} tile): {stats['win_rate']:.1f}%")


def main(argv=None):
    parser = argparse.ArgumentParser(description='Play automated 2048 games and analyze max tile statistics')
    parser.add_argument('--games', type=int, default=10, help='Number of games to play')
    parser.add_argument('--time', type=int, default=DEFAULT_DEADLINE_MS, help='AI deadline per move in milliseconds')
    parser.add_argument('--seed', type=int, default=None, help='Master seed for the game seeds')
    parser.add_argument('--expectimax', action='store_true', help='Use the expectimax minimizer')
    parser.add_argument('--max-depth', type=int, default=None, help='Cap for iterative deepening')
    parser.add_argument('--win-threshold', type=int, default=2048, help='Tile value considered a win')
    parser.add_argument('--log-level', type=str, default='WARNING', help='Logging level')
    args = parser.parse_args(argv)

    if args.games < 1:
        parser.error("--games must be at least 1")

    setup_logging(args.log_level)

    results = play_games(args.games, args.seed, args.time, args.expectimax, args.max_depth)
    stats = analyze_results(results, win_threshold=args.win_threshold)
    print_statistics(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
