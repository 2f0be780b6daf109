"""
Minimax Search with Alpha-Beta Pruning

Explores the game tree from the side to move and picks the action with the
best guaranteed evaluation. Alpha-beta pruning skips branches that cannot
change the result; iterative deepening repeats the search one ply deeper
at a time until a depth or time limit is reached.

Key Concepts:
    - Reference colour: fixed once at the root and used for every leaf, so
      scores from different branches are comparable
    - Tie-break: the first action in generator order that reaches the best
      score wins; actions are never reordered
    - Each branch plays on its own board copy

Timeout Behaviour:
    The clock is only checked after a depth completes. A search can
    therefore overrun its time limit by up to one full ply; the result of a
    depth that finished late is still used.

Algorithm Complexity:
    - Minimax: O(b^d), b = branching factor (up to 32 flips at the start)
    - Alpha-Beta: O(b^(d/2)) in the best case
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from banqi_engine.board.movegen import legal_actions
from banqi_engine.board.pieces import Action, Color
from banqi_engine.board.state import BoardState, perform
from banqi_engine.evaluation.base import INFINITY, Evaluator

logger = logging.getLogger(__name__)


class EngineInvariantError(RuntimeError):
    """The applier rejected an action the move generator produced."""


@dataclass
class SearchResult:
    """
    Outcome of an iterative-deepening search.

    Attributes:
        action: Best action of the deepest completed depth (None if there
            was nothing to play)
        score: Its score from the root side's point of view
        depth: Deepest completed depth
        nodes: Positions visited over all depths
        elapsed: Wall-clock seconds spent
    """

    action: Optional[Action]
    score: float
    depth: int
    nodes: int
    elapsed: float


def reference_color_for(state: BoardState) -> Color:
    """Side the search scores for: the side to move, Red before the first flip."""
    return state.side_to_move if state.side_to_move is not None else Color.RED


def minimax(
    state: BoardState,
    depth: int,
    alpha: float,
    beta: float,
    maximizing_player: bool,
    evaluator: Evaluator,
    reference_color: Optional[Color] = None,
    nodes_searched: Optional[List[int]] = None,
) -> Tuple[Optional[Action], float]:
    """
    Minimax search with alpha-beta pruning.

    Args:
        state: Position to search (not modified)
        depth: Remaining plies
        alpha: Best score the maximizer is already assured of
        beta: Best score the minimizer is already assured of
        maximizing_player: True if this node picks the highest score
        evaluator: Leaf evaluation
        reference_color: Colour every leaf is scored for; derived from
            `state` when omitted, then passed unchanged down the tree
        nodes_searched: Optional mutable list [count] of visited positions

    Returns:
        Tuple of (best_action, score). best_action is None at leaves and
        for positions without legal actions.

    Raises:
        EngineInvariantError: If a generated action is rejected by the applier
    """
    if reference_color is None:
        reference_color = reference_color_for(state)
    if nodes_searched is not None:
        nodes_searched[0] += 1

    if depth == 0 or state.game_over:
        return None, evaluator.evaluate(state, reference_color)

    actions = legal_actions(state)
    if not actions:
        return None, evaluator.evaluate(state, reference_color)

    best_action = None

    if maximizing_player:
        best_score = -INFINITY
        for action in actions:
            child = _apply(state, action)
            _, score = minimax(
                child,
                depth - 1,
                alpha,
                beta,
                False,
                evaluator,
                reference_color,
                nodes_searched,
            )
            if score > best_score:
                best_score = score
                best_action = action
            alpha = max(alpha, score)
            if alpha >= beta:
                break
    else:
        best_score = INFINITY
        for action in actions:
            child = _apply(state, action)
            _, score = minimax(
                child,
                depth - 1,
                alpha,
                beta,
                True,
                evaluator,
                reference_color,
                nodes_searched,
            )
            if score < best_score:
                best_score = score
                best_action = action
            beta = min(beta, score)
            if alpha >= beta:
                break

    return best_action, best_score


def _apply(state: BoardState, action: Action) -> BoardState:
    child = state.copy()
    if not perform(child, action):
        raise EngineInvariantError(f"Generated action {action} was rejected by the applier")
    return child


def find_best_action(
    state: BoardState,
    max_depth: int,
    time_limit: float,
    evaluator: Evaluator,
    clock: Callable[[], float] = time.perf_counter,
) -> SearchResult:
    """
    Iterative deepening from depth 1 to `max_depth`.

    Args:
        state: Root position (not modified)
        max_depth: Deepest depth to try
        time_limit: Seconds after which no further depth is started
        evaluator: Leaf evaluation
        clock: Seconds source, injectable for tests

    Returns:
        SearchResult of the deepest completed depth

    Raises:
        ValueError: If max_depth < 1
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")

    reference_color = reference_color_for(state)
    start = clock()
    nodes = [0]
    result = SearchResult(action=None, score=0.0, depth=0, nodes=0, elapsed=0.0)

    for depth in range(1, max_depth + 1):
        action, score = minimax(
            state,
            depth,
            -INFINITY,
            INFINITY,
            True,
            evaluator,
            reference_color,
            nodes,
        )
        elapsed = clock() - start
        if action is not None:
            result = SearchResult(action, score, depth, nodes[0], elapsed)
        else:
            result = SearchResult(result.action, result.score, result.depth, nodes[0], elapsed)

        logger.debug(
            "depth %d: best=%s score=%.3f nodes=%d elapsed=%.3fs",
            depth, action, score, nodes[0], elapsed,
        )

        if elapsed > time_limit:
            if depth < max_depth:
                logger.debug("Time limit %.2fs reached after depth %d", time_limit, depth)
            break

    return result


def iterative_deepening(
    state: BoardState,
    max_depth: int,
    time_limit: float,
    evaluator: Evaluator,
    clock: Callable[[], float] = time.perf_counter,
) -> Optional[Action]:
    """Best action of the deepest depth completed within the time limit, or None."""
    return find_best_action(state, max_depth, time_limit, evaluator, clock).action
