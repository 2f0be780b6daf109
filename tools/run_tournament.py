#!/usr/bin/env python3
"""
Tier Tournament

Round-robin AI-vs-AI games between difficulty tiers on seeded deals.
Stronger tiers should win more often; games that hit the ply cap count as
unfinished.

Usage:
    python tools/run_tournament.py [--tiers beginner,intermediate] [--games 2]
                                   [--max-plies 50] [--seed 0] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from banqi_engine.difficulty.tiers import TIERS
from banqi_engine.utils.matches import run_tournament

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main():
    parser = argparse.ArgumentParser(
        description="Play AI tiers against each other",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--tiers",
        type=str,
        default="beginner,intermediate",
        help=f"Comma-separated tier names (known: {', '.join(TIERS)})",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=2,
        help="Games per ordered pair of tiers",
    )
    parser.add_argument(
        "--max-plies",
        type=int,
        default=50,
        help="Stop a game after this many actions",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Base seed for deals and heuristics",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    tiers = [name.strip() for name in args.tiers.split(",") if name.strip()]
    if len(tiers) < 2:
        logger.error("Need at least two tiers, got %s", tiers)
        sys.exit(1)

    try:
        summary = run_tournament(
            tiers,
            games_per_pairing=args.games,
            max_plies=args.max_plies,
            seed=args.seed,
            show_progress=True,
        )
    except KeyError as e:
        logger.error("%s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Tournament interrupted by user")
        sys.exit(1)

    results = summary['results']
    logger.info("=" * 60)
    logger.info("Tournament complete: %d games", len(results))
    for name, wins in sorted(summary['wins'].items(), key=lambda item: -item[1]):
        logger.info("  %-14s %d wins", name, wins)
    logger.info("  %-14s %d", "unfinished", summary['unfinished'])
    logger.info("=" * 60)


if __name__ == "__main__":
    main()
