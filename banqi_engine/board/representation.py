"""
Board Planes

Converts a BoardState into a stack of binary planes so evaluation terms can
count pieces by region with numpy instead of looping over squares.

15-Channel Representation:
    0: Red Soldiers       7: Black Soldiers
    1: Red Cannons        8: Black Cannons
    2: Red Horses         9: Black Horses
    3: Red Chariots      10: Black Chariots
    4: Red Elephants     11: Black Elephants
    5: Red Advisors      12: Black Advisors
    6: Red Generals      13: Black Generals
    14: Face-down pieces (either colour)

Channels 0-13 only mark face-up pieces: a hidden piece's identity is not
part of what the players can see. Each channel is an 8x4 mask indexed
[row, column].
"""

from typing import TYPE_CHECKING

import numpy as np

from banqi_engine.board.pieces import ALL_POSITIONS, NUM_COLUMNS, NUM_ROWS, Color, PieceType

if TYPE_CHECKING:
    from banqi_engine.board.state import BoardState

NUM_TYPES = len(PieceType)
FACE_DOWN_CHANNEL = 2 * NUM_TYPES
NUM_CHANNELS = FACE_DOWN_CHANNEL + 1


def piece_channel(color: Color, piece_type: PieceType) -> int:
    """Channel index of a face-up piece: its rank, offset by 7 for black."""
    return int(piece_type) + (NUM_TYPES if color is Color.BLACK else 0)


def board_to_planes(state: "BoardState") -> np.ndarray:
    """
    Convert a board to its 15-channel plane stack.

    Args:
        state: Board to convert

    Returns:
        numpy array of shape (15, 8, 4) with dtype float32
    """
    planes = np.zeros((NUM_CHANNELS, NUM_ROWS, NUM_COLUMNS), dtype=np.float32)
    grid = state.grid
    for position in ALL_POSITIONS:
        piece = grid[position.row][position.column]
        if piece is None:
            continue
        if piece.face_up:
            planes[piece_channel(piece.color, piece.type), position.row, position.column] = 1.0
        else:
            planes[FACE_DOWN_CHANNEL, position.row, position.column] = 1.0
    return planes


def color_planes(planes: np.ndarray, color: Color) -> np.ndarray:
    """The seven per-type planes of one colour, shape (7, 8, 4)."""
    start = NUM_TYPES if color is Color.BLACK else 0
    return planes[start:start + NUM_TYPES]


def occupancy(planes: np.ndarray, color: Color) -> np.ndarray:
    """8x4 mask of `color`'s face-up pieces."""
    return color_planes(planes, color).sum(axis=0)
