"""
Evaluation Terms

Each term maps a PositionFeatures snapshot and a colour to a number. Terms
are registered by name in TERMS; a WeightedEvaluator combines any subset of
them with weights, so a difficulty tier is just a list of (name, weight).

Every term is antisymmetric: term(f, c) == -term(f, c.opponent). Most are
written as a one-sided count wrapped by @side_term, which subtracts the
opponent's count; the majority terms compare the two sides directly.

Term Groups:
    - Material and activity: material, center, mobility, capture_threats
    - General safety: general_threats, general_escape, general_edge,
      general_corner, general_attacked, general_guarded, general_guards
    - Development: development, development_ratio
    - Space: key_squares, file_majority, rank_majority
    - Soldiers: soldier_advance, soldier_connected, soldier_isolated
    - Cooperation: coordination, fork_proxy, pin_proxy
    - Placement: piece_placement, endgame_general
"""

from itertools import combinations
from typing import Callable, Dict, Optional

import numpy as np

from banqi_engine.board.pieces import (
    NEIGHBOUR_DIRECTIONS,
    NUM_COLUMNS,
    NUM_ROWS,
    ORTHOGONAL_DIRECTIONS,
    Color,
    PieceType,
    Position,
)
from banqi_engine.board.representation import color_planes, occupancy
from banqi_engine.evaluation.base import PIECE_VALUES, VALUE_VECTOR
from banqi_engine.evaluation.features import PositionFeatures

TermFunction = Callable[[PositionFeatures, Color], float]

TERMS: Dict[str, TermFunction] = {}

# Face-up piece count at or below which the game counts as an endgame
ENDGAME_PIECE_THRESHOLD = 8

# Back rank per colour: the row a side's pieces count as undeveloped on
BACK_RANK = {Color.RED: 0, Color.BLACK: NUM_ROWS - 1}

# Pairwise distance limits for the cooperation terms
COORDINATION_DISTANCE = 2
FORK_DISTANCE = 3
PIN_DISTANCE = 2

#fmt: off
# ============================================================================
# Region Masks (8 rows x 4 columns, indexed [row, column])
# ============================================================================

# Four centre cells: columns b-c, ranks 4-5
CENTER_MASK = np.zeros((NUM_ROWS, NUM_COLUMNS), dtype=np.float32)
CENTER_MASK[3:5, 1:3] = 1.0

# Key squares: the full middle band, ranks 4-5
KEY_SQUARES_MASK = np.zeros((NUM_ROWS, NUM_COLUMNS), dtype=np.float32)
KEY_SQUARES_MASK[3:5, :] = 1.0

# Inner files b and c
INNER_FILES_MASK = np.zeros((NUM_ROWS, NUM_COLUMNS), dtype=np.float32)
INNER_FILES_MASK[:, 1:3] = 1.0

# Middle ranks 4 and 5
MIDDLE_RANKS_MASK = np.zeros((NUM_ROWS, NUM_COLUMNS), dtype=np.float32)
MIDDLE_RANKS_MASK[3:5, :] = 1.0


# ============================================================================
# Piece Placement Tables
# ============================================================================
# Bonus for a face-up piece standing on a square, from Red's side
# (row 0 = Red's back rank). Black reads the tables flipped vertically.
# The general has no table: its placement is scored by the general terms.

GENERAL_TABLE = np.zeros((NUM_ROWS, NUM_COLUMNS), dtype=np.float32)

ADVISOR_TABLE = np.full((NUM_ROWS, NUM_COLUMNS), 0.1, dtype=np.float32)

ELEPHANT_TABLE = np.array([
    [0.0, 0.0, 0.0, 0.0],  # Rank 1
    [0.0, 0.0, 0.0, 0.0],  # Rank 2
    [0.0, 0.0, 0.0, 0.0],  # Rank 3
    [0.0, 0.2, 0.2, 0.0],  # Rank 4
    [0.0, 0.2, 0.2, 0.0],  # Rank 5
    [0.0, 0.0, 0.0, 0.0],  # Rank 6
    [0.0, 0.0, 0.0, 0.0],  # Rank 7
    [0.0, 0.0, 0.0, 0.0],  # Rank 8
], dtype=np.float32)

# Chariot: inner files and middle ranks both help, the centre doubly so
CHARIOT_TABLE = np.array([
    [0.0, 0.2, 0.2, 0.0],
    [0.0, 0.2, 0.2, 0.0],
    [0.0, 0.2, 0.2, 0.0],
    [0.2, 0.4, 0.4, 0.2],
    [0.2, 0.4, 0.4, 0.2],
    [0.0, 0.2, 0.2, 0.0],
    [0.0, 0.2, 0.2, 0.0],
    [0.0, 0.2, 0.2, 0.0],
], dtype=np.float32)

HORSE_TABLE = ELEPHANT_TABLE.copy()

# Cannon: central cannons see screens in every direction
CANNON_TABLE = np.array([
    [0.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0],
    [0.0, 0.3, 0.3, 0.0],
    [0.0, 0.3, 0.3, 0.0],
    [0.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0],
], dtype=np.float32)

# Soldier: reward crossing into the opponent's half
SOLDIER_TABLE = np.array([
    [0.0, 0.0, 0.0, 0.0],  # Rank 1
    [0.0, 0.0, 0.0, 0.0],  # Rank 2
    [0.0, 0.0, 0.0, 0.0],  # Rank 3
    [0.0, 0.0, 0.0, 0.0],  # Rank 4
    [0.2, 0.2, 0.2, 0.2],  # Rank 5
    [0.2, 0.2, 0.2, 0.2],  # Rank 6
    [0.2, 0.2, 0.2, 0.2],  # Rank 7
    [0.2, 0.2, 0.2, 0.2],  # Rank 8
], dtype=np.float32)
#fmt: on

# Stacked by rank so they line up with board_to_planes channels
RED_PLACEMENT = np.stack([
    SOLDIER_TABLE,
    CANNON_TABLE,
    HORSE_TABLE,
    CHARIOT_TABLE,
    ELEPHANT_TABLE,
    ADVISOR_TABLE,
    GENERAL_TABLE,
])
BLACK_PLACEMENT = RED_PLACEMENT[:, ::-1, :].copy()

PLACEMENT_TABLES = {Color.RED: RED_PLACEMENT, Color.BLACK: BLACK_PLACEMENT}


# ============================================================================
# Registration helpers
# ============================================================================


def term(name: str) -> Callable[[TermFunction], TermFunction]:
    """Register an antisymmetric term function under `name`."""

    def register(function: TermFunction) -> TermFunction:
        if name in TERMS:
            raise ValueError(f"Duplicate evaluation term: {name}")
        TERMS[name] = function
        return function

    return register


def side_term(name: str) -> Callable[[TermFunction], TermFunction]:
    """
    Register a one-sided score as the term `own - opponent`.

    The decorated function returns how well `color` alone is doing; the
    registered term subtracts the opponent's value from it.
    """

    def register(function: TermFunction) -> TermFunction:
        def antisymmetric(features: PositionFeatures, color: Color) -> float:
            return function(features, color) - function(features, color.opponent)

        antisymmetric.__name__ = function.__name__
        antisymmetric.__doc__ = function.__doc__
        term(name)(antisymmetric)
        return function

    return register


def _is_edge(position: Position) -> bool:
    return (
        position.column in (0, NUM_COLUMNS - 1)
        or position.row in (0, NUM_ROWS - 1)
    )


def _is_corner(position: Position) -> bool:
    return position.column in (0, NUM_COLUMNS - 1) and position.row in (0, NUM_ROWS - 1)


def _is_center(position: Position) -> bool:
    return bool(CENTER_MASK[position.row, position.column])


def _neighbours(position: Position, directions=NEIGHBOUR_DIRECTIONS):
    for dcolumn, drow in directions:
        neighbour = position.offset(dcolumn, drow)
        if neighbour.is_inside():
            yield neighbour


def _general(features: PositionFeatures, color: Color) -> Optional[Position]:
    return features.generals[color]


def _masked_count(features: PositionFeatures, color: Color, mask: np.ndarray) -> float:
    return float((occupancy(features.planes, color) * mask).sum())


# ============================================================================
# Material and activity
# ============================================================================


@side_term("material")
def material(features: PositionFeatures, color: Color) -> float:
    """Value of the face-up pieces."""
    counts = color_planes(features.planes, color).sum(axis=(1, 2))
    return float(counts @ VALUE_VECTOR)


@side_term("center")
def center(features: PositionFeatures, color: Color) -> float:
    """Pieces on the four centre cells."""
    return _masked_count(features, color, CENTER_MASK)


@side_term("mobility")
def mobility(features: PositionFeatures, color: Color) -> float:
    """Number of moves and captures available."""
    return float(sum(len(features.actions[position]) for position, _ in features.pieces[color]))


@side_term("capture_threats")
def capture_threats(features: PositionFeatures, color: Color) -> float:
    """Total value of what can be captured this ply, per capturing action."""
    state = features.state
    return sum(PIECE_VALUES[state.piece_at(capture.dst).type] for capture in features.captures[color])


# ============================================================================
# General safety
# ============================================================================


@side_term("general_threats")
def general_threats(features: PositionFeatures, color: Color) -> float:
    """Minus one for every enemy capture aimed at the general."""
    general = _general(features, color)
    if general is None:
        return 0.0
    return -float(sum(1 for capture in features.captures[color.opponent] if capture.dst == general))


@side_term("general_escape")
def general_escape(features: PositionFeatures, color: Color) -> float:
    """Empty cells around the general that no enemy piece can reach."""
    general = _general(features, color)
    if general is None:
        return 0.0
    state = features.state
    enemy_reach = features.reach[color.opponent]
    return float(sum(
        1
        for neighbour in _neighbours(general)
        if state.piece_at(neighbour) is None and neighbour not in enemy_reach
    ))


@side_term("general_edge")
def general_edge(features: PositionFeatures, color: Color) -> float:
    general = _general(features, color)
    return -1.0 if general is not None and _is_edge(general) else 0.0


@side_term("general_corner")
def general_corner(features: PositionFeatures, color: Color) -> float:
    general = _general(features, color)
    return 1.0 if general is not None and _is_corner(general) else 0.0


@side_term("general_attacked")
def general_attacked(features: PositionFeatures, color: Color) -> float:
    general = _general(features, color)
    if general is None:
        return 0.0
    return -1.0 if general in features.attacked(color.opponent) else 0.0


def _guards(features: PositionFeatures, color: Color):
    general = _general(features, color)
    if general is None:
        return []
    state = features.state
    guards = []
    for neighbour in _neighbours(general):
        piece = state.piece_at(neighbour)
        if piece is not None and piece.face_up and piece.color is color:
            guards.append(piece)
    return guards


@side_term("general_guarded")
def general_guarded(features: PositionFeatures, color: Color) -> float:
    """One if any own face-up piece stands next to the general."""
    return 1.0 if _guards(features, color) else 0.0


@side_term("general_guards")
def general_guards(features: PositionFeatures, color: Color) -> float:
    """One per adjacent own piece, half more for advisors and elephants."""
    score = 0.0
    for piece in _guards(features, color):
        score += 1.0
        if piece.type in (PieceType.ADVISOR, PieceType.ELEPHANT):
            score += 0.5
    return score


# ============================================================================
# Development
# ============================================================================


def _developed(features: PositionFeatures, color: Color) -> int:
    back_rank = BACK_RANK[color]
    return sum(1 for position, _ in features.pieces[color] if position.row != back_rank)


@side_term("development")
def development(features: PositionFeatures, color: Color) -> float:
    """Face-up pieces off their own back rank."""
    return float(_developed(features, color))


@side_term("development_ratio")
def development_ratio(features: PositionFeatures, color: Color) -> float:
    total = len(features.pieces[color])
    if total == 0:
        return 0.0
    return _developed(features, color) / total


# ============================================================================
# Space
# ============================================================================


@side_term("key_squares")
def key_squares(features: PositionFeatures, color: Color) -> float:
    """Pieces on the eight cells of ranks 4 and 5."""
    return _masked_count(features, color, KEY_SQUARES_MASK)


def _majority(features: PositionFeatures, color: Color, mask: np.ndarray) -> float:
    own = _masked_count(features, color, mask)
    theirs = _masked_count(features, color.opponent, mask)
    return float(np.sign(own - theirs))


@term("file_majority")
def file_majority(features: PositionFeatures, color: Color) -> float:
    """+1 with more pieces than the opponent on files b-c, -1 with fewer."""
    return _majority(features, color, INNER_FILES_MASK)


@term("rank_majority")
def rank_majority(features: PositionFeatures, color: Color) -> float:
    """+1 with more pieces than the opponent on ranks 4-5, -1 with fewer."""
    return _majority(features, color, MIDDLE_RANKS_MASK)


# ============================================================================
# Soldiers
# ============================================================================


def _soldiers(features: PositionFeatures, color: Color):
    return [position for position, piece in features.pieces[color] if piece.type == PieceType.SOLDIER]


def _has_soldier_neighbour(position: Position, soldiers) -> bool:
    return any(neighbour in soldiers for neighbour in _neighbours(position, ORTHOGONAL_DIRECTIONS))


@side_term("soldier_advance")
def soldier_advance(features: PositionFeatures, color: Color) -> float:
    """Soldiers standing in the opponent's half of the board."""
    half = NUM_ROWS // 2
    if color is Color.RED:
        return float(sum(1 for position in _soldiers(features, color) if position.row >= half))
    return float(sum(1 for position in _soldiers(features, color) if position.row < half))


@side_term("soldier_connected")
def soldier_connected(features: PositionFeatures, color: Color) -> float:
    soldiers = set(_soldiers(features, color))
    return float(sum(1 for position in soldiers if _has_soldier_neighbour(position, soldiers)))


@side_term("soldier_isolated")
def soldier_isolated(features: PositionFeatures, color: Color) -> float:
    """Soldiers with no friendly soldier beside them, free to roam."""
    soldiers = set(_soldiers(features, color))
    return float(sum(1 for position in soldiers if not _has_soldier_neighbour(position, soldiers)))


# ============================================================================
# Cooperation
# ============================================================================


def _close_pairs(features: PositionFeatures, color: Color, limit: int):
    positions = [position for position, _ in features.pieces[color]]
    return [(a, b) for a, b in combinations(positions, 2) if a.distance(b) <= limit]


@side_term("coordination")
def coordination(features: PositionFeatures, color: Color) -> float:
    """Nearby pairs of pieces that can capture on the same square."""
    return float(sum(
        1
        for a, b in _close_pairs(features, color, COORDINATION_DISTANCE)
        if features.capture_targets(a) & features.capture_targets(b)
    ))


@side_term("fork_proxy")
def fork_proxy(features: PositionFeatures, color: Color) -> float:
    return float(len(_close_pairs(features, color, FORK_DISTANCE)))


@side_term("pin_proxy")
def pin_proxy(features: PositionFeatures, color: Color) -> float:
    return float(len(_close_pairs(features, color, PIN_DISTANCE)))


# ============================================================================
# Placement
# ============================================================================


@side_term("piece_placement")
def piece_placement(features: PositionFeatures, color: Color) -> float:
    """Sum of placement-table bonuses over the face-up pieces."""
    return float((color_planes(features.planes, color) * PLACEMENT_TABLES[color]).sum())


@side_term("endgame_general")
def endgame_general(features: PositionFeatures, color: Color) -> float:
    """
    A central general is exposed while the board is crowded and strong once
    it has thinned out.
    """
    general = _general(features, color)
    if general is None or not _is_center(general):
        return 0.0
    return 1.0 if features.face_up_count <= ENDGAME_PIECE_THRESHOLD else -1.0
