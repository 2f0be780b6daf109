"""
Difficulty Tiers

A tier is plain data: how deep and how long to search, which weighted
evaluation terms to score leaves with, and which one-ply heuristic to use
when not searching. One generic search path serves every tier.

Each tier's term list is the previous tier's list plus its own extras; a
name repeated in the extras strengthens the inherited term rather than
replacing it.

Tiers:
    beginner      depth 1, 0.5s, heuristic only (opportunistic)
    intermediate  depth 2, 1.0s, search, strategic fallback
    advanced      depth 4, 1.5s, search, strategic fallback
    expert        depth 6, 2.0s, search, strategic fallback
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from banqi_engine.evaluation.terms import TERMS
from banqi_engine.evaluation.weighted import WeightedEvaluator
from banqi_engine.search.selectors import SELECTORS

Terms = Tuple[Tuple[str, float], ...]


BASE_TERMS: Terms = (
    ("material", 1.0),
    ("center", 0.1),
    ("mobility", 0.05),
    ("capture_threats", 0.1),
    ("general_threats", 1.0),
    ("general_escape", 0.3),
)

INTERMEDIATE_TERMS: Terms = BASE_TERMS + (
    ("general_edge", 0.5),
    ("general_guarded", 0.3),
    ("center", 0.2),
    ("development", 0.1),
)

ADVANCED_TERMS: Terms = INTERMEDIATE_TERMS + (
    ("general_edge", 0.5),
    ("general_guarded", 0.2),
    ("general_attacked", 2.0),
    ("soldier_advance", 0.1),
    ("soldier_connected", 0.05),
    ("coordination", 0.1),
)

EXPERT_TERMS: Terms = ADVANCED_TERMS + (
    ("general_edge", 0.5),
    ("general_corner", 0.5),
    ("general_guards", 0.4),
    ("general_escape", 0.1),
    ("development_ratio", 0.5),
    ("key_squares", 0.3),
    ("file_majority", 0.3),
    ("rank_majority", 0.3),
    ("soldier_advance", 0.1),
    ("soldier_connected", 0.05),
    ("soldier_isolated", 0.05),
    ("coordination", 0.05),
    ("fork_proxy", 0.2),
    ("pin_proxy", 0.15),
    ("piece_placement", 1.0),
    ("endgame_general", 0.5),
)


@dataclass(frozen=True)
class TierConfig:
    """Configuration of one AI difficulty tier."""

    name: str
    """Tier name used for lookup"""

    level: int
    """Position in the tier ladder, 1 = weakest"""

    max_depth: int
    """Deepest iterative-deepening depth"""

    time_limit: float
    """Seconds after which no further depth is started"""

    terms: Terms = BASE_TERMS
    """(term name, weight) pairs for the evaluator"""

    heuristic: str = "strategic"
    """One-ply selector used without search and as the first fallback"""

    use_search: bool = True
    """False: play the heuristic directly instead of searching"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.name:
            raise ValueError("Tier name must not be empty")

        if self.level < 1:
            raise ValueError(f"level must be at least 1, got {self.level}")

        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")

        if not self.time_limit > 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit}")

        if self.heuristic not in SELECTORS:
            raise ValueError(
                f"heuristic should be one of {', '.join(SELECTORS)}, got {self.heuristic!r}"
            )

        if not self.terms:
            raise ValueError("A tier needs at least one evaluation term")

        for name, weight in self.terms:
            if name not in TERMS:
                raise ValueError(f"Unknown evaluation term {name!r} in tier {self.name!r}")
            if not math.isfinite(weight):
                raise ValueError(f"Weight of {name!r} must be finite, got {weight}")

    def evaluator(self) -> WeightedEvaluator:
        return WeightedEvaluator(self.terms)


TIERS: Dict[str, TierConfig] = {
    tier.name: tier
    for tier in (
        TierConfig("beginner", 1, 1, 0.5, BASE_TERMS, "opportunistic", use_search=False),
        TierConfig("intermediate", 2, 2, 1.0, INTERMEDIATE_TERMS),
        TierConfig("advanced", 3, 4, 1.5, ADVANCED_TERMS),
        TierConfig("expert", 4, 6, 2.0, EXPERT_TERMS),
    )
}


def get_tier(name: str) -> TierConfig:
    """
    Look up a registered tier.

    Raises:
        KeyError: If no tier has that name (the message lists the known ones)
    """
    try:
        return TIERS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown tier {name!r}; known tiers: {', '.join(TIERS)}") from None


def tier_below(tier: TierConfig) -> Optional[TierConfig]:
    """The registered tier one level down, or None at the bottom."""
    for candidate in TIERS.values():
        if candidate.level == tier.level - 1:
            return candidate
    return None
