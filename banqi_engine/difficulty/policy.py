"""
Move Selection Policy

select_move() is the single entry point automated players call. Search
tiers run iterative deepening with their own depth, time and evaluator;
the beginner tier plays its heuristic directly. If search produces no
action, the fallback chain tries the tier's heuristic, then those of the
tiers below it, and finally a uniformly random legal action.
"""

import logging
from typing import List, Optional

import numpy as np

from banqi_engine.board.movegen import legal_actions
from banqi_engine.board.pieces import Action
from banqi_engine.board.state import BoardState
from banqi_engine.difficulty.tiers import TierConfig, get_tier, tier_below
from banqi_engine.search.minimax import iterative_deepening
from banqi_engine.search.selectors import get_selector, random_action

logger = logging.getLogger(__name__)


class NoLegalActionsError(ValueError):
    """Move selection was asked for on a position with nothing to play."""


def _resolve(tier) -> TierConfig:
    return get_tier(tier) if isinstance(tier, str) else tier


def fallback_chain(tier: TierConfig) -> List[str]:
    """Heuristic names tried in order when search yields nothing."""
    chain = []
    current: Optional[TierConfig] = tier
    while current is not None:
        if current.heuristic not in chain:
            chain.append(current.heuristic)
        current = tier_below(current)
    return chain


def fallback_move(
    state: BoardState,
    tier: TierConfig,
    rng: np.random.Generator,
) -> Optional[Action]:
    """
    Walk the fallback chain, ending with a uniform random choice.

    Returns:
        An action, or None if the position has no legal action at all
    """
    for name in fallback_chain(tier):
        action = get_selector(name)(state, rng)
        if action is not None:
            logger.debug("Fallback heuristic %s chose %s", name, action)
            return action
    return random_action(state, rng)


def select_move(
    state: BoardState,
    tier,
    rng: Optional[np.random.Generator] = None,
) -> Action:
    """
    Pick an action for the side to move.

    Args:
        state: Position to play from (not modified)
        tier: TierConfig or registered tier name
        rng: Randomness for the heuristics; a fresh Generator if None

    Returns:
        A legal action for `state`

    Raises:
        NoLegalActionsError: If the game is over or nothing is legal
        KeyError: If `tier` names no registered tier
    """
    tier = _resolve(tier)
    if not legal_actions(state):
        raise NoLegalActionsError("No legal actions available")
    if rng is None:
        rng = np.random.default_rng()

    if not tier.use_search:
        action = get_selector(tier.heuristic)(state, rng)
        if action is not None:
            return action
        return fallback_move(state, tier, rng)

    action = iterative_deepening(state, tier.max_depth, tier.time_limit, tier.evaluator())
    if action is None:
        logger.warning("%s search returned no action, falling back", tier.name)
        action = fallback_move(state, tier, rng)
    return action
