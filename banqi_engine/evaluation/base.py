"""
Abstract Evaluator Interface

Every evaluator scores a board for a requested colour, so the search can
use any of them without knowing how the score is built.

Key Principles:
    1. Evaluators are stateless and never mutate the board
    2. evaluate(state, color) is from `color`'s point of view
    3. Positive = `color` is better off, Negative = the opponent is
    4. evaluate(state, RED) == -evaluate(state, BLACK)

Convention:
    - Material values in soldier units (soldier = 1, general = 9)
    - Only face-up pieces count: nobody knows what a hidden piece is
"""

from abc import ABC, abstractmethod

import numpy as np

from banqi_engine.board.pieces import Color, PieceType
from banqi_engine.board.state import BoardState

# Evaluation constants
INFINITY = float("inf")

PIECE_VALUES = {
    PieceType.GENERAL: 9.0,
    PieceType.ADVISOR: 2.0,
    PieceType.ELEPHANT: 2.0,
    PieceType.CHARIOT: 9.0,
    PieceType.HORSE: 4.0,
    PieceType.CANNON: 4.5,
    PieceType.SOLDIER: 1.0,
}

# PIECE_VALUES indexed by rank, for dot products against board planes
VALUE_VECTOR = np.array(
    [PIECE_VALUES[PieceType(rank)] for rank in range(len(PieceType))],
    dtype=np.float32,
)


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    Methods:
        evaluate(state, for_color): Returns the score from `for_color`'s side
    """

    @abstractmethod
    def evaluate(self, state: BoardState, for_color: Color) -> float:
        """
        Evaluate a position for one side.

        Args:
            state: Board to evaluate (not modified)
            for_color: Side whose advantage is measured

        Returns:
            float: Score, positive when `for_color` is ahead
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
