"""
Difficulty Module

Data-only difficulty tiers and the move-selection policy that drives them.

Key Components:
    - TierConfig / TIERS / get_tier: the four registered tiers
    - select_move: pick an action for the side to move at a given tier
    - NoLegalActionsError: raised when asked to move with nothing to play
"""

from banqi_engine.difficulty.policy import NoLegalActionsError, fallback_move, select_move
from banqi_engine.difficulty.tiers import TIERS, TierConfig, get_tier

__all__ = [
    'NoLegalActionsError',
    'TIERS',
    'TierConfig',
    'fallback_move',
    'get_tier',
    'select_move',
]
