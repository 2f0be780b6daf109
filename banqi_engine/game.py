"""
Game Session

The layer a front end talks to: it owns the current board, the player
setup and a short human-readable move log, and turns square selections
into actions. Nothing here is global; every session carries its own
GameContext.

Typical Flow:
    game = Game(GameContext(mode=GameMode.SINGLE_PLAYER, tier="advanced"))
    game.tap(Position(1, 3))      # flip, select or move
    if game.is_ai_turn:
        game.play_ai_turn()
    print(game.status)
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from banqi_engine.board.movegen import legal_actions, legal_targets, piece_actions
from banqi_engine.board.pieces import Action, Color, Flip, Move, Piece, PieceType, Position
from banqi_engine.board.state import BoardState
from banqi_engine.difficulty.policy import select_move
from banqi_engine.difficulty.tiers import get_tier
from banqi_engine.search.minimax import EngineInvariantError

logger = logging.getLogger(__name__)

# Entries kept in the move log
MOVE_LOG_LIMIT = 20


class GameMode(Enum):
    TWO_PLAYER = "two_player"
    SINGLE_PLAYER = "single_player"


@dataclass
class GameContext:
    """Player setup for one session."""

    mode: GameMode = GameMode.TWO_PLAYER
    """Two humans, or one human against the AI"""

    human_color: Color = Color.RED
    """Colour the human plays in single-player mode"""

    tier: str = "intermediate"
    """Difficulty tier name of the AI opponent"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.mode = GameMode(self.mode)
        self.human_color = Color(self.human_color)
        get_tier(self.tier)


def describe_action(action: Action, piece: Optional[Piece]) -> str:
    """
    Move-log entry for an action that has just been applied.

    Args:
        action: The applied action
        piece: The piece that acted, as it stands after the action

    Returns:
        e.g. "flip 帥@a1", "俥 a1→a2", "炮 a1×a3"
    """
    if isinstance(action, Flip):
        if piece is None:
            return f"flip@{action.at.name}"
        return f"flip {piece.symbol}@{action.at.name}"
    if isinstance(action, Move):
        prefix = piece.symbol if piece is not None else "move"
        return f"{prefix} {action.src.name}→{action.dst.name}"
    prefix = piece.symbol if piece is not None else "cap"
    return f"{prefix} {action.src.name}×{action.dst.name}"


class Game:
    """
    One game session.

    Attributes:
        context: Player setup
        state: Current board; replaced wholesale by new_game()
        selected: Square of the currently selected piece, if any
        targets: Legal destinations of the selected piece
    """

    def __init__(
        self,
        context: Optional[GameContext] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.context = context if context is not None else GameContext()
        self.rng = rng if rng is not None else np.random.default_rng()
        self._log = deque(maxlen=MOVE_LOG_LIMIT)
        self.selected: Optional[Position] = None
        self.targets: List[Position] = []
        self.new_game(seed)

    def new_game(self, seed: Optional[int] = None) -> BoardState:
        """Deal a fresh board and forget the old one."""
        self.state = BoardState.new_game(seed)
        self._log.clear()
        self.clear_selection()
        logger.info("New game (seed=%s, mode=%s)", seed, self.context.mode.value)
        return self.state

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, position: Position) -> List[Position]:
        """
        Select a face-up piece of the side to move.

        Returns:
            The piece's legal target squares; empty (and no selection) if
            the square does not hold a selectable piece or the game is over
        """
        position = Position(*position)
        piece = self.state.piece_at(position)
        side = self.state.side_to_move
        if (
            self.state.game_over
            or piece is None
            or not piece.face_up
            or side is None
            or piece.color is not side
        ):
            self.clear_selection()
            return []
        self.selected = position
        self.targets = legal_targets(self.state, position)
        return list(self.targets)

    def clear_selection(self) -> None:
        self.selected = None
        self.targets = []

    def tap(self, position: Position) -> bool:
        """
        Resolve a tap on a square the way a board UI does.

        A tap on a target of the selected piece plays it, a tap on a
        face-down piece flips it, a tap on an own piece selects it and
        anything else clears the selection.

        Returns:
            bool: True if an action was performed
        """
        position = Position(*position)
        if self.selected is not None and position in self.targets:
            for action in piece_actions(self.state, self.selected):
                if action.dst == position:
                    return self.perform(action)

        piece = self.state.piece_at(position)
        if piece is not None and not piece.face_up:
            if Flip(position) in legal_actions(self.state):
                return self.perform(Flip(position))
        elif piece is not None and self.select(position):
            return False

        self.clear_selection()
        return False

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def perform(self, action: Action) -> bool:
        """
        Apply an action and log it.

        Returns:
            bool: False if the action was illegal (nothing changes)
        """
        if not self.state.perform(action):
            return False
        self.clear_selection()
        square = action.at if isinstance(action, Flip) else action.dst
        self._log.append(describe_action(action, self.state.piece_at(square)))
        return True

    @property
    def is_ai_turn(self) -> bool:
        """
        True when the AI should act. In single-player mode the human always
        makes the opening flip.
        """
        if self.context.mode is not GameMode.SINGLE_PLAYER or self.state.game_over:
            return False
        side = self.state.side_to_move
        return side is not None and side is not self.context.human_color

    def play_ai_turn(self) -> Optional[Action]:
        """
        Let the AI choose and play an action.

        Returns:
            The action played, or None when it is not the AI's turn

        Raises:
            EngineInvariantError: If the board rejects the AI's choice
        """
        if not self.is_ai_turn:
            return None
        action = select_move(self.state, self.context.tier, self.rng)
        if not self.perform(action):
            raise EngineInvariantError(f"AI chose an illegal action: {action}")
        return action

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @property
    def move_log(self) -> List[str]:
        """The most recent entries, oldest first."""
        return list(self._log)

    def captured_pieces(self, color: Color) -> List[PieceType]:
        return self.state.captured_pieces(color)

    @property
    def status(self) -> str:
        if self.state.game_over:
            if self.state.winner is None:
                return "Game over"
            return f"{self.state.winner} wins"
        if self.state.side_to_move is None:
            return "Tap a tile to flip a piece"
        return f"{self.state.side_to_move} to move"
