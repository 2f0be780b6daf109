"""
Banqi Engine

Rules engine and tiered AI for Banqi (Dark Chess), the 4x8 variant of
Xiangqi played with all 32 pieces dealt face-down.

Key Components:
    - board: pieces, board state, legal move generation, action applier
    - evaluation: weighted-term position evaluation
    - search: minimax with alpha-beta pruning and iterative deepening
    - difficulty: data-only tiers and select_move()
    - game: session layer with move log and status for front ends
    - utils: AI-vs-AI matches and response-time benchmarks

Data Flow:
    BoardState.new_game(seed) → legal_actions() → perform(action)
                              → select_move(state, tier) → perform(action)
"""

__version__ = "0.1.0"

from banqi_engine.board import (
    Action,
    BoardState,
    Capture,
    Color,
    Flip,
    Move,
    Piece,
    PieceType,
    Position,
    legal_actions,
    legal_targets,
    perform,
)
from banqi_engine.difficulty import TIERS, NoLegalActionsError, TierConfig, get_tier, select_move
from banqi_engine.evaluation import Evaluator, WeightedEvaluator
from banqi_engine.search import EngineInvariantError

__all__ = [
    'Action',
    'BoardState',
    'Capture',
    'Color',
    'EngineInvariantError',
    'Evaluator',
    'Flip',
    'Move',
    'NoLegalActionsError',
    'Piece',
    'PieceType',
    'Position',
    'TIERS',
    'TierConfig',
    'WeightedEvaluator',
    'get_tier',
    'legal_actions',
    'legal_targets',
    'perform',
    'select_move',
]
