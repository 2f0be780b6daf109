"""
Utilities Module

Harnesses for comparing AI tiers: AI-vs-AI matches and response-time
benchmarks.
"""

from banqi_engine.utils.matches import (
    MatchConfig,
    MatchResult,
    measure_response_times,
    play_match,
    run_tournament,
)

__all__ = [
    'MatchConfig',
    'MatchResult',
    'measure_response_times',
    'play_match',
    'run_tournament',
]
