"""
Piece, Position and Action Types

The vocabulary shared by every other module: the two colours, the seven
ranked piece types, board coordinates and the three kinds of action.

Board Orientation:
    - Column 0..3 = files a..d
    - Row 0..7 = ranks 1..8
    - Red's back rank is row 0, Black's back rank is row 7

Piece Ranks (higher captures lower, with two overrides):
    6: General      3: Chariot      0: Soldier
    5: Advisor      2: Horse
    4: Elephant     1: Cannon
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import NamedTuple, Union

NUM_COLUMNS = 4
NUM_ROWS = 8


class Color(Enum):
    """Side colour. Neither side is assigned to a player until the first flip."""

    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.RED else Color.RED

    def __str__(self) -> str:
        return self.value.capitalize()


class PieceType(IntEnum):
    """Piece types; the integer value is the capture rank."""

    GENERAL = 6
    ADVISOR = 5
    ELEPHANT = 4
    CHARIOT = 3
    HORSE = 2
    CANNON = 1
    SOLDIER = 0

    @property
    def rank(self) -> int:
        return int(self)

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[self]

    @property
    def letter(self) -> str:
        return PIECE_LETTERS[self]


# Red characters; Black uses its own set below
PIECE_SYMBOLS = {
    PieceType.GENERAL: "帥",
    PieceType.ADVISOR: "仕",
    PieceType.ELEPHANT: "相",
    PieceType.CHARIOT: "俥",
    PieceType.HORSE: "傌",
    PieceType.CANNON: "炮",
    PieceType.SOLDIER: "兵",
}

BLACK_PIECE_SYMBOLS = {
    PieceType.GENERAL: "將",
    PieceType.ADVISOR: "士",
    PieceType.ELEPHANT: "象",
    PieceType.CHARIOT: "車",
    PieceType.HORSE: "馬",
    PieceType.CANNON: "砲",
    PieceType.SOLDIER: "卒",
}

PIECE_LETTERS = {
    PieceType.GENERAL: "G",
    PieceType.ADVISOR: "A",
    PieceType.ELEPHANT: "E",
    PieceType.CHARIOT: "R",
    PieceType.HORSE: "H",
    PieceType.CANNON: "C",
    PieceType.SOLDIER: "S",
}

# Pieces dealt to each colour at the start of a game (16 per side)
PIECE_COUNTS = {
    PieceType.GENERAL: 1,
    PieceType.ADVISOR: 2,
    PieceType.ELEPHANT: 2,
    PieceType.CHARIOT: 2,
    PieceType.HORSE: 2,
    PieceType.CANNON: 2,
    PieceType.SOLDIER: 5,
}


@dataclass(frozen=True)
class Piece:
    """
    A single piece.

    Colour and type never change. Flipping replaces the cell's piece with
    its face-up twin (see revealed()), so a Piece can be shared between
    board copies.
    """

    color: Color
    type: PieceType
    face_up: bool = False

    def revealed(self) -> "Piece":
        return Piece(self.color, self.type, True)

    @property
    def symbol(self) -> str:
        """Traditional character, which differs between the colours."""
        if self.color is Color.RED:
            return PIECE_SYMBOLS[self.type]
        return BLACK_PIECE_SYMBOLS[self.type]

    @property
    def letter(self) -> str:
        """Upper case for red, lower case for black."""
        letter = self.type.letter
        return letter if self.color is Color.RED else letter.lower()


class Position(NamedTuple):
    """Board coordinate as (column, row)."""

    column: int
    row: int

    def is_inside(self) -> bool:
        return 0 <= self.column < NUM_COLUMNS and 0 <= self.row < NUM_ROWS

    def offset(self, dcolumn: int, drow: int) -> "Position":
        return Position(self.column + dcolumn, self.row + drow)

    def distance(self, other: "Position") -> int:
        """Manhattan distance."""
        return abs(self.column - other.column) + abs(self.row - other.row)

    @property
    def name(self) -> str:
        """Algebraic name, e.g. Position(0, 0) -> 'a1'."""
        return f"{'abcd'[self.column]}{self.row + 1}"

    @classmethod
    def from_name(cls, name: str) -> "Position":
        """
        Parse an algebraic name.

        Raises:
            ValueError: If the name is not a square of the 4x8 board
        """
        name = name.strip().lower()
        if len(name) != 2 or name[0] not in "abcd" or not name[1].isdigit():
            raise ValueError(f"Invalid square name: {name!r}")
        position = cls("abcd".index(name[0]), int(name[1]) - 1)
        if not position.is_inside():
            raise ValueError(f"Square off the board: {name!r}")
        return position


ALL_POSITIONS = tuple(
    Position(column, row) for row in range(NUM_ROWS) for column in range(NUM_COLUMNS)
)

# (dcolumn, drow) step order used by the move generator
ORTHOGONAL_DIRECTIONS = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_DIRECTIONS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
NEIGHBOUR_DIRECTIONS = ORTHOGONAL_DIRECTIONS + DIAGONAL_DIRECTIONS


@dataclass(frozen=True)
class Flip:
    """Turn the face-down piece at `at` face-up."""

    at: Position

    def __str__(self) -> str:
        return f"flip {self.at.name}"


@dataclass(frozen=True)
class Move:
    """Step a face-up piece one cell into an empty square."""

    src: Position
    dst: Position

    def __str__(self) -> str:
        return f"{self.src.name}-{self.dst.name}"


@dataclass(frozen=True)
class Capture:
    """Take the opposing piece on `dst` with the piece on `src`."""

    src: Position
    dst: Position

    def __str__(self) -> str:
        return f"{self.src.name}x{self.dst.name}"


Action = Union[Flip, Move, Capture]
