"""
Legal Move Generation

Pure functions enumerating what the side to move may do. The order of the
returned lists is part of the contract: search breaks ties in favour of the
first action generated, so enumeration must be deterministic.

Enumeration Order:
    1. Flips of every face-down square, row-major
    2. For each face-up piece of the side to move (row-major), its steps and
       captures in direction order (+column, -column, +row, -row)
       - cannons list all steps first, then their screened captures

Capture Rules:
    - Soldier takes General, always
    - General never takes Soldier
    - Otherwise attacker rank >= target rank
    - Cannon: jumps exactly one screen (any piece, either face) along a line
      and takes the next piece if it is a face-up opponent, whatever its rank
"""

from typing import TYPE_CHECKING, List, Set

from banqi_engine.board.pieces import (
    ALL_POSITIONS,
    NUM_COLUMNS,
    NUM_ROWS,
    ORTHOGONAL_DIRECTIONS,
    Action,
    Capture,
    Color,
    Flip,
    Move,
    Piece,
    PieceType,
    Position,
)

if TYPE_CHECKING:
    from banqi_engine.board.state import BoardState


def can_capture(attacker: Piece, target: Piece) -> bool:
    """
    Rank rule for single-step captures (not used for cannon jumps).

    The two overrides take precedence over the rank comparison.
    """
    if attacker.type == PieceType.SOLDIER and target.type == PieceType.GENERAL:
        return True
    if attacker.type == PieceType.GENERAL and target.type == PieceType.SOLDIER:
        return False
    return attacker.type >= target.type


def piece_actions(state: "BoardState", position: Position) -> List[Action]:
    """
    Moves and captures available to the face-up piece on `position`.

    Ownership and turn are not checked here; the caller decides whose
    pieces to ask about.

    Returns:
        List of Move/Capture actions (empty for empty or face-down squares)
    """
    grid = state.grid
    column, row = position
    if not (0 <= column < NUM_COLUMNS and 0 <= row < NUM_ROWS):
        return []
    piece = grid[row][column]
    if piece is None or not piece.face_up:
        return []

    src = Position(column, row)
    actions: List[Action] = []

    if piece.type == PieceType.CANNON:
        for dcolumn, drow in ORTHOGONAL_DIRECTIONS:
            c, r = column + dcolumn, row + drow
            if 0 <= c < NUM_COLUMNS and 0 <= r < NUM_ROWS and grid[r][c] is None:
                actions.append(Move(src, Position(c, r)))

        for dcolumn, drow in ORTHOGONAL_DIRECTIONS:
            screened = False
            c, r = column + dcolumn, row + drow
            while 0 <= c < NUM_COLUMNS and 0 <= r < NUM_ROWS:
                target = grid[r][c]
                if target is not None:
                    if not screened:
                        screened = True
                    else:
                        # Only the first piece beyond the screen can be hit
                        if target.face_up and target.color is not piece.color:
                            actions.append(Capture(src, Position(c, r)))
                        break
                c += dcolumn
                r += drow
        return actions

    for dcolumn, drow in ORTHOGONAL_DIRECTIONS:
        c, r = column + dcolumn, row + drow
        if not (0 <= c < NUM_COLUMNS and 0 <= r < NUM_ROWS):
            continue
        target = grid[r][c]
        if target is None:
            actions.append(Move(src, Position(c, r)))
        elif target.face_up and target.color is not piece.color and can_capture(piece, target):
            actions.append(Capture(src, Position(c, r)))
    return actions


def flip_actions(state: "BoardState") -> List[Action]:
    grid = state.grid
    return [
        Flip(position)
        for position in ALL_POSITIONS
        if grid[position.row][position.column] is not None
        and not grid[position.row][position.column].face_up
    ]


def move_and_capture_actions(state: "BoardState", color: Color) -> List[Action]:
    """All moves and captures of `color`'s face-up pieces, row-major."""
    grid = state.grid
    actions: List[Action] = []
    for position in ALL_POSITIONS:
        piece = grid[position.row][position.column]
        if piece is not None and piece.face_up and piece.color is color:
            actions.extend(piece_actions(state, position))
    return actions


def legal_actions(state: "BoardState") -> List[Action]:
    """
    Every legal action for the side to move.

    Before the first flip only flips are possible; once the game is over
    nothing is.
    """
    if state.game_over:
        return []
    actions = flip_actions(state)
    if state.side_to_move is not None:
        actions.extend(move_and_capture_actions(state, state.side_to_move))
    return actions


def legal_targets(state: "BoardState", position: Position) -> List[Position]:
    """Destination squares of the piece on `position`, for highlighting a selection."""
    return [action.dst for action in piece_actions(state, position)]


def attacked_positions(state: "BoardState", color: Color) -> Set[Position]:
    """Squares `color` could capture on right now, regardless of whose turn it is."""
    return {
        action.dst
        for action in move_and_capture_actions(state, color)
        if isinstance(action, Capture)
    }
