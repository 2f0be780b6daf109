"""
AI Matches and Response-Time Benchmarks

Harnesses for comparing difficulty tiers: AI-vs-AI games on seeded deals
and per-tier timing of a single move choice.

Who Plays Which Colour:
    Colours are not known until the first flip. The first player makes the
    opening flip and takes the colour of the revealed piece; the second
    player gets the other colour.

Evaluation Metrics:
    - Result: winning tier, or unfinished when the ply cap is reached
    - Plies played and wall-clock time per game
    - Response time: seconds for one select_move() on a fresh deal
"""

import logging
import time
from dataclasses import dataclass, field
from itertools import permutations
from typing import Dict, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from banqi_engine.board.pieces import Color
from banqi_engine.board.state import BoardState
from banqi_engine.difficulty.policy import select_move
from banqi_engine.difficulty.tiers import TIERS, get_tier
from banqi_engine.search.minimax import EngineInvariantError

logger = logging.getLogger(__name__)


@dataclass
class MatchConfig:
    """Settings for one AI-vs-AI game."""

    first_tier: str = "beginner"
    """Tier making the opening flip"""

    second_tier: str = "intermediate"
    """Tier replying"""

    max_plies: int = 50
    """Stop an unfinished game after this many actions"""

    seed: Optional[int] = None
    """Deal seed (None for a random deal)"""

    rng_seed: Optional[int] = None
    """Seed for the heuristics' randomness"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        get_tier(self.first_tier)
        get_tier(self.second_tier)

        if self.max_plies <= 0:
            raise ValueError(f"max_plies must be positive, got {self.max_plies}")


@dataclass
class MatchResult:
    """
    Outcome of one AI-vs-AI game.

    Attributes:
        config: Settings the game was played with
        colors: Tier name per colour, filled in after the opening flip
        winner: Winning colour, None if the game did not finish
        plies: Actions played
        elapsed: Wall-clock seconds
    """

    config: MatchConfig
    colors: Dict[Color, str] = field(default_factory=dict)
    winner: Optional[Color] = None
    plies: int = 0
    elapsed: float = 0.0

    @property
    def completed(self) -> bool:
        return self.winner is not None

    @property
    def winner_tier(self) -> Optional[str]:
        if self.winner is None:
            return None
        return self.colors.get(self.winner)


def play_match(config: MatchConfig) -> MatchResult:
    """
    Play one game between two tiers.

    Returns:
        MatchResult for the game

    Raises:
        EngineInvariantError: If the board rejects an AI-chosen action
    """
    first = get_tier(config.first_tier)
    second = get_tier(config.second_tier)
    rng = np.random.default_rng(config.rng_seed)
    state = BoardState.new_game(config.seed)
    result = MatchResult(config=config)

    start = time.perf_counter()
    while not state.game_over and result.plies < config.max_plies:
        if state.side_to_move is None:
            tier = first
        else:
            tier = get_tier(result.colors[state.side_to_move])

        action = select_move(state, tier, rng)
        if not state.perform(action):
            raise EngineInvariantError(f"{tier.name} chose an illegal action: {action}")
        result.plies += 1

        if not result.colors:
            opener = state.side_to_move.opponent
            result.colors = {opener: first.name, opener.opponent: second.name}
            logger.debug("%s plays %s, %s plays %s", first.name, opener, second.name, opener.opponent)

    result.elapsed = time.perf_counter() - start
    result.winner = state.winner
    logger.info(
        "%s vs %s: %s after %d plies (%.2fs)",
        first.name,
        second.name,
        f"{result.winner_tier} wins" if result.completed else "unfinished",
        result.plies,
        result.elapsed,
    )
    return result


def run_tournament(
    tier_names: Sequence[str] = tuple(TIERS),
    games_per_pairing: int = 2,
    max_plies: int = 50,
    seed: Optional[int] = None,
    show_progress: bool = False,
) -> Dict[str, object]:
    """
    Round robin: every ordered pair of distinct tiers plays
    `games_per_pairing` games, so each tier opens as often as it replies.

    Args:
        tier_names: Tiers taking part
        games_per_pairing: Games per ordered pair
        max_plies: Ply cap per game
        seed: Base seed; game i of the tournament is dealt with seed + i
        show_progress: Display a tqdm progress bar

    Returns:
        Dictionary with keys:
            - 'results': list of MatchResult
            - 'wins': tier name -> games won
            - 'unfinished': games stopped at the ply cap
    """
    if games_per_pairing <= 0:
        raise ValueError(f"games_per_pairing must be positive, got {games_per_pairing}")
    tier_names = [get_tier(name).name for name in tier_names]

    configs = []
    for first, second in permutations(tier_names, 2):
        for _ in range(games_per_pairing):
            index = len(configs)
            configs.append(MatchConfig(
                first_tier=first,
                second_tier=second,
                max_plies=max_plies,
                seed=None if seed is None else seed + index,
                rng_seed=None if seed is None else seed + index,
            ))

    results: List[MatchResult] = []
    wins = {name: 0 for name in tier_names}
    for config in tqdm(configs, desc="Playing matches", disable=not show_progress):
        result = play_match(config)
        results.append(result)
        if result.winner_tier is not None:
            wins[result.winner_tier] += 1

    return {
        'results': results,
        'wins': wins,
        'unfinished': sum(1 for result in results if not result.completed),
    }


def measure_response_times(
    tier_name: str,
    positions: int = 5,
    rng_seed: Optional[int] = 0,
) -> Dict[str, object]:
    """
    Time select_move() on fresh deals (seeds 0, 1000, 2000, ...).

    Returns:
        Dictionary with keys:
            - 'tier': tier name
            - 'times': seconds per position
            - 'average': mean seconds
            - 'target': the tier's time limit
            - 'within_target': average <= target
    """
    tier = get_tier(tier_name)
    rng = np.random.default_rng(rng_seed)
    times = []
    for index in range(positions):
        state = BoardState.new_game(index * 1000)
        start = time.perf_counter()
        select_move(state, tier, rng)
        times.append(time.perf_counter() - start)
        logger.debug("%s position %d: %.3fs", tier.name, index + 1, times[-1])

    average = float(np.mean(times)) if times else 0.0
    return {
        'tier': tier.name,
        'times': times,
        'average': average,
        'target': tier.time_limit,
        'within_target': average <= tier.time_limit,
    }
