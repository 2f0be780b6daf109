"""
Board State and Action Applier

BoardState holds the 4x8 grid, whose turn it is and whether the game is
over. It is only ever mutated through perform(), which validates an action
against the move generator before touching anything: a rejected action
leaves the state exactly as it was.

Lifecycle:
    BoardState.new_game(seed) → perform(action)* → discarded on a new game

Turn Order:
    - side_to_move is None until the first successful flip
    - the first flip hands the turn to the opponent of the revealed colour
    - afterwards the turn alternates on every successful action
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from banqi_engine.board.movegen import move_and_capture_actions, piece_actions
from banqi_engine.board.pieces import (
    ALL_POSITIONS,
    NUM_COLUMNS,
    NUM_ROWS,
    PIECE_COUNTS,
    Action,
    Capture,
    Color,
    Flip,
    Move,
    Piece,
    PieceType,
    Position,
)

logger = logging.getLogger(__name__)

Grid = List[List[Optional[Piece]]]


def _empty_grid() -> Grid:
    return [[None] * NUM_COLUMNS for _ in range(NUM_ROWS)]


def full_piece_set(color: Color) -> List[Piece]:
    """The 16 face-down pieces one colour starts with, highest rank first."""
    pieces = []
    for piece_type, count in PIECE_COUNTS.items():
        pieces.extend(Piece(color, piece_type) for _ in range(count))
    return pieces


@dataclass
class BoardState:
    """
    Complete game state.

    Attributes:
        grid: grid[row][column] holds a Piece or None
        side_to_move: Colour to act, None until the first flip
        game_over: True once the side to move is stuck with nothing to flip
        winner: Opponent of the stuck side when game_over is set
        last_action: Most recent successful action
    """

    grid: Grid = field(default_factory=_empty_grid)
    side_to_move: Optional[Color] = None
    game_over: bool = False
    winner: Optional[Color] = None
    last_action: Optional[Action] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new_game(cls, seed: Optional[int] = None) -> "BoardState":
        """
        Shuffle both piece sets and deal them face-down, row-major.

        Args:
            seed: Seed for numpy's Generator; the same seed always deals the
                same layout. None draws fresh OS entropy.

        Returns:
            A full board with no side to move yet
        """
        rng = np.random.default_rng(seed)
        deck = full_piece_set(Color.RED) + full_piece_set(Color.BLACK)
        order = rng.permutation(len(deck))

        state = cls()
        for index, position in zip(order, ALL_POSITIONS):
            state.grid[position.row][position.column] = deck[index]
        return state

    @classmethod
    def empty(cls) -> "BoardState":
        return cls()

    @classmethod
    def from_pieces(
        cls,
        pieces: Mapping[Position, Piece],
        side_to_move: Optional[Color] = None,
    ) -> "BoardState":
        """
        Build an arranged position.

        Game end is evaluated immediately, so a stuck side to move comes
        back with game_over already set.

        Raises:
            ValueError: If a position lies outside the board
        """
        state = cls(side_to_move=side_to_move)
        for position, piece in pieces.items():
            position = Position(*position)
            if not position.is_inside():
                raise ValueError(f"Position outside the board: {position}")
            state.grid[position.row][position.column] = piece
        check_game_end(state)
        return state

    def copy(self) -> "BoardState":
        """Independent copy. Pieces are frozen, so copying the rows is enough."""
        return BoardState(
            grid=[row[:] for row in self.grid],
            side_to_move=self.side_to_move,
            game_over=self.game_over,
            winner=self.winner,
            last_action=self.last_action,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def is_inside(position: Position) -> bool:
        return 0 <= position[0] < NUM_COLUMNS and 0 <= position[1] < NUM_ROWS

    def piece_at(self, position: Position) -> Optional[Piece]:
        """Piece on a square, or None when empty or off the board."""
        if not self.is_inside(position):
            return None
        return self.grid[position[1]][position[0]]

    def set_piece(self, position: Position, piece: Optional[Piece]) -> None:
        self.grid[position[1]][position[0]] = piece

    def pieces(self) -> Iterator[Tuple[Position, Piece]]:
        """Occupied squares in row-major order."""
        for position in ALL_POSITIONS:
            piece = self.grid[position.row][position.column]
            if piece is not None:
                yield position, piece

    def positions_of(self, color: Color, face_up_only: bool = True) -> List[Position]:
        return [
            position
            for position, piece in self.pieces()
            if piece.color is color and (piece.face_up or not face_up_only)
        ]

    def face_down_positions(self) -> List[Position]:
        return [position for position, piece in self.pieces() if not piece.face_up]

    def has_face_down(self) -> bool:
        return any(not piece.face_up for _, piece in self.pieces())

    def face_up_count(self) -> int:
        return sum(1 for _, piece in self.pieces() if piece.face_up)

    def captured_pieces(self, color: Color) -> List[PieceType]:
        """
        Piece types of `color` no longer on the board.

        Returns:
            List ordered from general down to soldier, one entry per missing piece
        """
        remaining: Dict[PieceType, int] = {piece_type: 0 for piece_type in PIECE_COUNTS}
        for _, piece in self.pieces():
            if piece.color is color:
                remaining[piece.type] += 1

        captured = []
        for piece_type, expected in PIECE_COUNTS.items():
            captured.extend([piece_type] * max(0, expected - remaining[piece_type]))
        return captured

    def perform(self, action: Action) -> bool:
        return perform(self, action)

    def __str__(self) -> str:
        """
        Text diagram, rank 8 at the top. Red pieces are upper case, black
        lower case, face-down pieces '?' and empty squares '.'.
        """
        lines = []
        for row in reversed(range(NUM_ROWS)):
            cells = []
            for column in range(NUM_COLUMNS):
                piece = self.grid[row][column]
                if piece is None:
                    cells.append(".")
                elif not piece.face_up:
                    cells.append("?")
                else:
                    cells.append(piece.letter)
            lines.append(f"{row + 1} {' '.join(cells)}")
        lines.append("  a b c d")
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Action Applier
# ----------------------------------------------------------------------


def perform(state: BoardState, action: Action) -> bool:
    """
    Validate and apply one action.

    Validation Order:
        1. Game not over
        2. Every position inside the board
        3. Flip: the square holds a face-down piece
           Move/Capture: a side to move exists, the source holds one of its
           face-up pieces, and the exact action is generated for that piece

    Args:
        state: Board to mutate
        action: Flip, Move or Capture

    Returns:
        bool: True if applied, False if rejected (state untouched)
    """
    if state.game_over:
        logger.debug("Rejected %s: game is over", action)
        return False

    if isinstance(action, Flip):
        piece = state.piece_at(action.at)
        if piece is None or piece.face_up:
            logger.debug("Rejected %s: no face-down piece there", action)
            return False
        state.set_piece(action.at, piece.revealed())
        mover = state.side_to_move if state.side_to_move is not None else piece.color
        state.side_to_move = mover.opponent
        state.last_action = action
        check_game_end(state)
        return True

    if not isinstance(action, (Move, Capture)):
        raise TypeError(f"Unknown action type: {type(action).__name__}")

    if state.side_to_move is None:
        logger.debug("Rejected %s: no side to move before the first flip", action)
        return False
    if not (state.is_inside(action.src) and state.is_inside(action.dst)):
        logger.debug("Rejected %s: off the board", action)
        return False

    moving = state.piece_at(action.src)
    if moving is None or not moving.face_up or moving.color is not state.side_to_move:
        logger.debug("Rejected %s: no face-up %s piece on the source", action, state.side_to_move)
        return False
    if action not in piece_actions(state, action.src):
        logger.debug("Rejected %s: not a legal %s", action, type(action).__name__.lower())
        return False

    state.set_piece(action.src, None)
    state.set_piece(action.dst, moving)
    state.side_to_move = state.side_to_move.opponent
    state.last_action = action
    check_game_end(state)
    return True


def check_game_end(state: BoardState) -> bool:
    """
    Detect a finished game.

    The game continues while any face-down piece remains. Otherwise a side
    to move without a single Move or Capture loses.

    Returns:
        bool: The (possibly updated) game_over flag
    """
    side = state.side_to_move
    if side is None or state.game_over:
        return state.game_over
    if state.has_face_down():
        return False
    if not move_and_capture_actions(state, side):
        state.game_over = True
        state.winner = side.opponent
    return state.game_over
