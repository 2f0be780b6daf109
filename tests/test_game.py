"""
Unit Tests for the Game Session

Tests tap handling, the move log, status text and AI turns.
"""

import numpy as np
import pytest

from banqi_engine.board import BoardState, Capture, Color, Flip, Move, Piece, PieceType, Position
from banqi_engine.board.pieces import ALL_POSITIONS
from banqi_engine.game import MOVE_LOG_LIMIT, Game, GameContext, GameMode, describe_action
from banqi_engine.search import EngineInvariantError

RED, BLACK = Color.RED, Color.BLACK


def up(color, piece_type):
    return Piece(color, piece_type, True)


@pytest.fixture
def game():
    return Game(seed=12345)


@pytest.fixture
def chariot_game():
    """Two-player game with a red chariot on b2 next to a black soldier."""
    game = Game()
    game.state = BoardState.from_pieces(
        {
            (1, 1): up(RED, PieceType.CHARIOT),
            (2, 1): up(BLACK, PieceType.SOLDIER),
            (3, 7): Piece(BLACK, PieceType.HORSE),
        },
        side_to_move=RED,
    )
    return game


@pytest.fixture
def ai_game():
    """Single-player game against the beginner, black (the AI) to move."""
    context = GameContext(mode=GameMode.SINGLE_PLAYER, human_color=RED, tier="beginner")
    game = Game(context, rng=np.random.default_rng(0))
    game.state = BoardState.from_pieces(
        {
            (1, 1): up(RED, PieceType.CHARIOT),
            (1, 2): up(BLACK, PieceType.CHARIOT),
            (3, 7): Piece(RED, PieceType.SOLDIER),
        },
        side_to_move=BLACK,
    )
    return game


class TestDescribeAction:
    def test_flip(self):
        assert describe_action(Flip(Position(0, 0)), up(RED, PieceType.GENERAL)) == "flip 帥@a1"
        assert describe_action(Flip(Position(0, 0)), None) == "flip@a1"

    def test_move_and_capture(self):
        move = Move(Position(0, 0), Position(0, 1))
        capture = Capture(Position(0, 0), Position(0, 2))

        assert describe_action(move, up(RED, PieceType.CHARIOT)) == "俥 a1→a2"
        assert describe_action(capture, up(RED, PieceType.CANNON)) == "炮 a1×a3"
        assert describe_action(capture, up(BLACK, PieceType.CANNON)) == "砲 a1×a3"

    def test_without_piece(self):
        assert describe_action(Move(Position(0, 0), Position(0, 1)), None) == "move a1→a2"
        assert describe_action(Capture(Position(0, 0), Position(0, 2)), None) == "cap a1×a3"


class TestTap:
    """Tests for tap-driven play."""

    def test_tap_flips_face_down_piece(self, game):
        hidden = game.state.piece_at(Position(0, 0))

        assert game.tap(Position(0, 0))
        assert game.state.piece_at(Position(0, 0)).face_up
        assert game.move_log == [f"flip {hidden.symbol}@a1"]
        assert game.state.side_to_move is hidden.color.opponent

    def test_log_keeps_most_recent_entries(self, game):
        for position in ALL_POSITIONS[:25]:
            assert game.tap(position)

        log = game.move_log
        assert len(log) == MOVE_LOG_LIMIT
        assert log[0].endswith(f"@{ALL_POSITIONS[5].name}")
        assert log[-1].endswith(f"@{ALL_POSITIONS[24].name}")

    def test_select_then_move(self, chariot_game):
        targets = chariot_game.select(Position(1, 1))

        assert targets == [Position(2, 1), Position(0, 1), Position(1, 2), Position(1, 0)]
        assert chariot_game.tap(Position(0, 1))
        assert chariot_game.state.piece_at(Position(0, 1)) == up(RED, PieceType.CHARIOT)
        assert chariot_game.selected is None
        assert chariot_game.move_log == ["俥 b2→a2"]

    def test_select_then_capture(self, chariot_game):
        assert not chariot_game.tap(Position(1, 1)), "Selecting is not an action"
        assert chariot_game.selected == Position(1, 1)

        assert chariot_game.tap(Position(2, 1))
        assert chariot_game.move_log == ["俥 b2×c2"]

    def test_cannot_select_opponent_piece(self, chariot_game):
        assert chariot_game.select(Position(2, 1)) == []
        assert chariot_game.selected is None

    def test_no_selection_after_game_over(self, game):
        game.state = BoardState.from_pieces(
            {
                (0, 0): up(RED, PieceType.SOLDIER),
                (1, 0): up(BLACK, PieceType.CHARIOT),
                (0, 1): up(BLACK, PieceType.CHARIOT),
            },
            side_to_move=RED,
        )

        assert game.state.game_over
        assert game.select(Position(0, 0)) == []
        assert game.selected is None
        assert not game.tap(Position(0, 0))

    def test_tap_elsewhere_clears_selection(self, chariot_game):
        chariot_game.select(Position(1, 1))

        assert not chariot_game.tap(Position(3, 3))
        assert chariot_game.selected is None
        assert chariot_game.targets == []

    def test_illegal_perform_changes_nothing(self, chariot_game):
        before = chariot_game.state.copy()

        assert not chariot_game.perform(Move(Position(1, 1), Position(1, 3)))
        assert chariot_game.state == before
        assert chariot_game.move_log == []

    def test_new_game_resets(self, game):
        game.tap(Position(0, 0))
        game.new_game(99)

        assert game.move_log == []
        assert game.state == BoardState.new_game(99)


class TestStatus:
    def test_before_first_flip(self, game):
        assert game.status == "Tap a tile to flip a piece"

    def test_side_to_move(self, chariot_game):
        assert chariot_game.status == "Red to move"

    def test_winner(self, game):
        game.state = BoardState.from_pieces(
            {
                (0, 0): up(RED, PieceType.SOLDIER),
                (1, 0): up(BLACK, PieceType.CHARIOT),
                (0, 1): up(BLACK, PieceType.CHARIOT),
            },
            side_to_move=RED,
        )

        assert game.status == "Black wins"

    def test_captured_pieces(self, chariot_game):
        assert len(chariot_game.captured_pieces(BLACK)) == 14
        assert len(chariot_game.captured_pieces(RED)) == 15


class TestAiTurn:
    """Tests for single-player AI turns."""

    def test_invalid_tier(self):
        with pytest.raises(KeyError):
            GameContext(tier="grandmaster")

    def test_two_player_never_ai(self, chariot_game):
        assert not chariot_game.is_ai_turn
        assert chariot_game.play_ai_turn() is None

    def test_human_opens(self):
        context = GameContext(mode=GameMode.SINGLE_PLAYER, tier="beginner")
        game = Game(context, seed=4)

        assert not game.is_ai_turn, "Nobody has a colour before the first flip"

    def test_ai_plays_its_turn(self, ai_game):
        assert ai_game.is_ai_turn

        action = ai_game.play_ai_turn()

        assert action is not None
        assert ai_game.state.side_to_move is RED
        assert len(ai_game.move_log) == 1
        assert not ai_game.is_ai_turn

    def test_ai_takes_capture(self, ai_game):
        """Beginner always captures when it can."""
        assert ai_game.play_ai_turn() == Capture(Position(1, 2), Position(1, 1))

    def test_not_ai_turn_returns_none(self, ai_game):
        ai_game.state.side_to_move = RED

        assert ai_game.play_ai_turn() is None

    def test_rejected_ai_action_raises(self, monkeypatch, ai_game):
        monkeypatch.setattr(
            "banqi_engine.game.select_move",
            lambda state, tier, rng: Move(Position(0, 0), Position(3, 3)),
        )

        with pytest.raises(EngineInvariantError):
            ai_game.play_ai_turn()
