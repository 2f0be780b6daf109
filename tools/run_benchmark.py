#!/usr/bin/env python3
"""
AI Response-Time Benchmark

Times one move choice per tier on a handful of seeded opening deals and
compares the average against each tier's time limit.

Usage:
    python tools/run_benchmark.py [--tiers beginner,expert] [--positions 5] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from banqi_engine.difficulty.tiers import TIERS
from banqi_engine.utils.matches import measure_response_times


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_time(seconds: float) -> str:
    """Format time"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"


def run_benchmark(tiers: list[str], positions: int):
    """
    Benchmark each tier and print a summary table.

    Args:
        tiers: Tier names to benchmark
        positions: Seeded deals per tier
    """
    print("=" * 60)
    print("RESPONSE-TIME BENCHMARK - Banqi Engine")
    print("=" * 60)
    print(f"Tiers: {', '.join(tiers)}")
    print(f"Positions per tier: {positions}")
    print("=" * 60)

    all_results = []
    for name in tiers:
        result = measure_response_times(name, positions=positions)
        all_results.append(result)
        for index, seconds in enumerate(result['times'], start=1):
            print(f"  {result['tier']} position {index}: {format_time(seconds)}")

    print("\n" + "=" * 60)
    print("SUMMARY TABLE")
    print("=" * 60)
    print(f"{'Tier':<14} {'Average':<10} {'Target':<10} {'Status':<10}")
    print("-" * 60)
    for result in all_results:
        status = "ok" if result['within_target'] else "over"
        print(
            f"{result['tier']:<14} {format_time(result['average']):<10} "
            f"{format_time(result['target']):<10} {status:<10}"
        )
    print("=" * 60)
    return all_results


def main():
    parser = argparse.ArgumentParser(
        description="Measure per-tier AI response times",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--tiers",
        type=str,
        default=",".join(TIERS),
        help="Comma-separated tier names",
    )
    parser.add_argument(
        "--positions",
        type=int,
        default=5,
        help="Seeded deals timed per tier",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every search depth",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    tiers = [name.strip() for name in args.tiers.split(",") if name.strip()]
    unknown = [name for name in tiers if name.lower() not in TIERS]
    if unknown:
        print(f"Error: unknown tiers: {', '.join(unknown)} (known: {', '.join(TIERS)})")
        sys.exit(1)

    try:
        run_benchmark(tiers, args.positions)
    except KeyboardInterrupt:
        print("\n\nBenchmark interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
