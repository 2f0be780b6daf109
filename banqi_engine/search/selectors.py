"""
Heuristic Move Selectors

Cheap one-ply action pickers that need no search. The beginner tier plays
with them directly and the search tiers fall back on them when search
produces nothing.

Selectors:
    - random: uniform choice among all legal actions
    - opportunistic: captures first (usually the most valuable one), then
      a random flip, then a random move
    - strategic: the best capture by value, position and safety, else the
      best-placed flip, else the best-placed move

Every selector returns None when the position has no legal action.
"""

from typing import Callable, Dict, Optional, Sequence

import numpy as np

from banqi_engine.board.movegen import attacked_positions, legal_actions
from banqi_engine.board.pieces import (
    NUM_COLUMNS,
    NUM_ROWS,
    ORTHOGONAL_DIRECTIONS,
    Action,
    Capture,
    Flip,
    Move,
    Position,
)
from banqi_engine.board.state import BoardState
from banqi_engine.evaluation.base import PIECE_VALUES
from banqi_engine.search.minimax import EngineInvariantError

Selector = Callable[[BoardState, np.random.Generator], Optional[Action]]

# Chance that the opportunistic selector takes the most valuable capture
BEST_CAPTURE_PROBABILITY = 0.7

# Strategic scoring weights
CAPTURE_CENTER_BONUS = 0.5
CAPTURE_SAFETY_BONUS = 0.3
FLIP_CENTER_BONUS = 1.0
FLIP_EDGE_PENALTY = 0.5
FLIP_OWN_NEIGHBOUR_BONUS = 0.2
FLIP_ENEMY_NEIGHBOUR_PENALTY = 0.1
MOVE_CENTER_BONUS = 0.8
MOVE_EDGE_PENALTY = 0.3
MOVE_FREEDOM_BONUS = 0.1


def _is_center(position: Position) -> bool:
    return position.column in (1, 2) and position.row in (3, 4)


def _is_edge(position: Position) -> bool:
    return position.column in (0, NUM_COLUMNS - 1) or position.row in (0, NUM_ROWS - 1)


def _orthogonal_neighbours(position: Position):
    for dcolumn, drow in ORTHOGONAL_DIRECTIONS:
        neighbour = position.offset(dcolumn, drow)
        if neighbour.is_inside():
            yield neighbour


def _split(actions: Sequence[Action]):
    captures = [action for action in actions if isinstance(action, Capture)]
    flips = [action for action in actions if isinstance(action, Flip)]
    moves = [action for action in actions if isinstance(action, Move)]
    return captures, flips, moves


def _choice(actions: Sequence[Action], rng: np.random.Generator) -> Action:
    return actions[int(rng.integers(len(actions)))]


def _first_best(actions: Sequence[Action], score: Callable[[Action], float]) -> Action:
    """Highest-scoring action; the earliest one wins a tie."""
    best_action = actions[0]
    best_score = score(best_action)
    for action in actions[1:]:
        value = score(action)
        if value > best_score:
            best_score = value
            best_action = action
    return best_action


def capture_value(state: BoardState, capture: Capture) -> float:
    """Value of the piece a capture takes."""
    return PIECE_VALUES[state.piece_at(capture.dst).type]


def random_action(state: BoardState, rng: np.random.Generator) -> Optional[Action]:
    actions = legal_actions(state)
    if not actions:
        return None
    return _choice(actions, rng)


def opportunistic_action(state: BoardState, rng: np.random.Generator) -> Optional[Action]:
    """
    Captures first, then flips, then moves.

    With probability BEST_CAPTURE_PROBABILITY the most valuable capture is
    taken, otherwise a uniformly random one.
    """
    actions = legal_actions(state)
    if not actions:
        return None
    captures, flips, moves = _split(actions)

    if captures:
        if rng.random() < BEST_CAPTURE_PROBABILITY:
            return _first_best(captures, lambda capture: capture_value(state, capture))
        return _choice(captures, rng)
    if flips:
        return _choice(flips, rng)
    if moves:
        return _choice(moves, rng)
    return _choice(actions, rng)


def score_capture(state: BoardState, capture: Capture) -> float:
    """Target value, plus bonuses for a central landing square nobody can hit back on."""
    score = capture_value(state, capture)
    if _is_center(capture.dst):
        score += CAPTURE_CENTER_BONUS

    after = state.copy()
    mover = state.side_to_move
    if not after.perform(capture):
        raise EngineInvariantError(f"Generated capture {capture} was rejected by the applier")
    if capture.dst not in attacked_positions(after, mover.opponent):
        score += CAPTURE_SAFETY_BONUS
    return score


def score_flip(state: BoardState, flip: Flip) -> float:
    """Central squares are good, edges poor; face-up neighbours of the mover help."""
    score = 0.0
    if _is_center(flip.at):
        score += FLIP_CENTER_BONUS
    if _is_edge(flip.at):
        score -= FLIP_EDGE_PENALTY
    for neighbour in _orthogonal_neighbours(flip.at):
        piece = state.piece_at(neighbour)
        if piece is None or not piece.face_up:
            continue
        if piece.color is state.side_to_move:
            score += FLIP_OWN_NEIGHBOUR_BONUS
        else:
            score -= FLIP_ENEMY_NEIGHBOUR_PENALTY
    return score


def score_move(state: BoardState, move: Move) -> float:
    """Central destinations are good, edges poor; open neighbours add freedom."""
    score = 0.0
    if _is_center(move.dst):
        score += MOVE_CENTER_BONUS
    if _is_edge(move.dst):
        score -= MOVE_EDGE_PENALTY
    free = sum(1 for neighbour in _orthogonal_neighbours(move.dst) if state.piece_at(neighbour) is None)
    return score + free * MOVE_FREEDOM_BONUS


def strategic_action(state: BoardState, rng: np.random.Generator) -> Optional[Action]:
    """
    Best capture, else best flip, else best move. Deterministic; `rng` is
    only used if none of the three kinds exists.
    """
    actions = legal_actions(state)
    if not actions:
        return None
    captures, flips, moves = _split(actions)

    if captures:
        return _first_best(captures, lambda capture: score_capture(state, capture))
    if flips:
        return _first_best(flips, lambda flip: score_flip(state, flip))
    if moves:
        return _first_best(moves, lambda move: score_move(state, move))
    return _choice(actions, rng)


SELECTORS: Dict[str, Selector] = {
    "random": random_action,
    "opportunistic": opportunistic_action,
    "strategic": strategic_action,
}


def get_selector(name: str) -> Selector:
    """
    Look up a selector by name.

    Raises:
        KeyError: If the name is unknown
    """
    try:
        return SELECTORS[name]
    except KeyError:
        raise KeyError(f"Unknown selector {name!r}; known: {', '.join(sorted(SELECTORS))}") from None
