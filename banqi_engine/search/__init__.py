"""
Search Module

Move search for the AI players: minimax with alpha-beta pruning under
iterative deepening, plus one-ply heuristic selectors used by the beginner
tier and as fallbacks.

Key Components:
    - minimax: Core search with alpha-beta pruning
    - find_best_action / iterative_deepening: depth-by-depth root search
    - SELECTORS: random, opportunistic and strategic one-ply pickers
"""

from banqi_engine.search.minimax import (
    EngineInvariantError,
    SearchResult,
    find_best_action,
    iterative_deepening,
    minimax,
)
from banqi_engine.search.selectors import SELECTORS, get_selector

__all__ = [
    'EngineInvariantError',
    'SELECTORS',
    'SearchResult',
    'find_best_action',
    'get_selector',
    'iterative_deepening',
    'minimax',
]
