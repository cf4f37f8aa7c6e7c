import argparse
import concurrent.futures
import logging
import os
import json
import random
from typing import Dict, List, Any

from config import load_config
from main import run_simulation
from players import get_player_class, AVAILABLE_PLAYERS


def summarize_results(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate per-game results into a batch summary."""
    if not results:
        return {"games": 0}

    scores = [r["score"] for r in results]
    death_reasons: Dict[str, int] = {}
    for r in results:
        reason = r.get("death_reason") or "survived"
        death_reasons[reason] = death_reasons.get(reason, 0) + 1

    return {
        "games": len(results),
        "best_score": max(scores),
        "worst_score": min(scores),
        "mean_score": sum(scores) / len(scores),
        "mean_ticks": sum(r["ticks"] for r in results) / len(results),
        "death_reasons": death_reasons,
    }


def run_batch_simulations(argv=None) -> Dict[str, Any]:
    parser = argparse.ArgumentParser(
        description="Run batch headless snake games with a scripted player."
    )
    # Batch configuration arguments
    parser.add_argument("--player", type=str, default="greedy", choices=AVAILABLE_PLAYERS,
                        help="Which scripted player drives every game.")
    parser.add_argument("--num-games", type=int, required=True,
                        help="Number of games to run.")
    parser.add_argument("--max-workers", type=int, default=os.cpu_count(),
                        help="Maximum number of parallel simulation workers (threads).")
    parser.add_argument("--seed", type=int, default=None,
                        help="Base seed; game i uses seed + i.")

    # Game configuration arguments (mirroring main.py)
    parser.add_argument("--grid-size", type=int, default=None,
                        help="Board side length (overrides SNAKE_GRID_SIZE).")
    parser.add_argument("--obstacles", type=int, default=None,
                        help="Number of obstacles (overrides SNAKE_OBSTACLE_COUNT).")
    parser.add_argument("--max-ticks", type=int, default=1000,
                        help="Maximum number of ticks per game (default: 1000).")

    args = parser.parse_args(argv)
    logger = logging.getLogger(__name__)

    player_class = get_player_class(args.player)
    results: List[Dict[str, Any]] = []

    print(f"Starting {args.num_games} games with up to {args.max_workers} workers...")
    futures = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=args.max_workers) as executor:
        for i in range(args.num_games):
            seed = None if args.seed is None else args.seed + i
            config = load_config(grid_size=args.grid_size, obstacle_count=args.obstacles, seed=seed)
            player = player_class(rng=random.Random(seed))
            futures.append(executor.submit(run_simulation, player, config, args.max_ticks))

        for future in concurrent.futures.as_completed(futures):
            try:
                result = future.result()
                results.append(result)
                print(f"Completed game {result.get('game_id', 'UNKNOWN')}. "
                      f"Score: {result['score']} ({result['death_reason'] or 'survived'})")
            except Exception as exc:
                logger.error(f"A simulation generated an exception: {exc}")

    summary = summarize_results(results)
    print("\nAll batch simulations completed.")
    print(json.dumps(summary, indent=2))
    return summary


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    run_batch_simulations()
