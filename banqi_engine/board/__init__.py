"""
Board Module

Rules of Banqi (Dark Chess) on a 4x8 board: pieces, board state, legal move
generation and the action applier.

Key Components:
    - Piece / Position / Flip / Move / Capture: the game vocabulary
    - BoardState: grid, turn and result; new_game(seed) shuffles and deals
    - legal_actions: every legal action for the side to move
    - perform: validates and applies one action, never partially
    - board_to_planes: (15, 8, 4) numpy planes for evaluation

Data Flow:
    BoardState → legal_actions() → chosen Action → perform() → BoardState
"""

from banqi_engine.board.movegen import (
    attacked_positions,
    can_capture,
    legal_actions,
    legal_targets,
    piece_actions,
)
from banqi_engine.board.pieces import (
    Action,
    Capture,
    Color,
    Flip,
    Move,
    Piece,
    PieceType,
    Position,
)
from banqi_engine.board.representation import board_to_planes
from banqi_engine.board.state import BoardState, check_game_end, perform

__all__ = [
    'Action',
    'BoardState',
    'Capture',
    'Color',
    'Flip',
    'Move',
    'Piece',
    'PieceType',
    'Position',
    'attacked_positions',
    'board_to_planes',
    'can_capture',
    'check_game_end',
    'legal_actions',
    'legal_targets',
    'perform',
    'piece_actions',
]
