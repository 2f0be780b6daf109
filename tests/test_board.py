"""
Unit Tests for Board State and Action Applier

Tests dealing, turn order, action validation and game-end detection.
"""

import pytest

from banqi_engine.board import (
    BoardState,
    Capture,
    Color,
    Flip,
    Move,
    Piece,
    PieceType,
    Position,
    legal_actions,
    perform,
)
from banqi_engine.board.pieces import (
    ALL_POSITIONS,
    NEIGHBOUR_DIRECTIONS,
    ORTHOGONAL_DIRECTIONS,
    PIECE_COUNTS,
)


def up(color, piece_type):
    """Face-up piece."""
    return Piece(color, piece_type, True)


def down(color, piece_type):
    """Face-down piece."""
    return Piece(color, piece_type)


class TestPieces:
    """Tests for the basic value types."""

    def test_opponent(self):
        assert Color.RED.opponent is Color.BLACK
        assert Color.BLACK.opponent is Color.RED

    def test_revealed_keeps_identity(self):
        piece = down(Color.BLACK, PieceType.CANNON)
        revealed = piece.revealed()

        assert revealed.face_up
        assert revealed.color is Color.BLACK
        assert revealed.type == PieceType.CANNON
        assert not piece.face_up, "Pieces are immutable; the original stays face-down"

    def test_position_names(self):
        assert Position(0, 0).name == "a1"
        assert Position(3, 7).name == "d8"
        assert Position.from_name("b4") == Position(1, 3)

    @pytest.mark.parametrize("name", ["e1", "a0", "a9", "", "a10", "zz"])
    def test_invalid_position_name(self, name):
        with pytest.raises(ValueError):
            Position.from_name(name)

    def test_action_strings(self):
        assert str(Flip(Position(0, 0))) == "flip a1"
        assert str(Move(Position(0, 0), Position(0, 1))) == "a1-a2"
        assert str(Capture(Position(0, 0), Position(0, 2))) == "a1xa3"

    def test_symbols_differ_by_color(self):
        assert up(Color.RED, PieceType.GENERAL).symbol == "帥"
        assert up(Color.BLACK, PieceType.GENERAL).symbol == "將"

    def test_neighbour_directions(self):
        assert len(set(NEIGHBOUR_DIRECTIONS)) == 8
        assert NEIGHBOUR_DIRECTIONS[:4] == ORTHOGONAL_DIRECTIONS


class TestNewGame:
    """Tests for shuffle-and-deal."""

    def test_same_seed_same_layout(self):
        """Two boards dealt with seed 12345 match at all 32 cells."""
        board1 = BoardState.new_game(12345)
        board2 = BoardState.new_game(12345)

        for position in ALL_POSITIONS:
            assert board1.piece_at(position) == board2.piece_at(position), (
                f"Cell {position.name} differs between identically seeded deals"
            )
        assert board1 == board2

    def test_different_seeds_differ(self):
        assert BoardState.new_game(1).grid != BoardState.new_game(2).grid

    def test_full_piece_sets(self):
        state = BoardState.new_game(7)

        for color in Color:
            counts = {piece_type: 0 for piece_type in PieceType}
            for _, piece in state.pieces():
                if piece.color is color:
                    counts[piece.type] += 1
            assert counts == PIECE_COUNTS, f"{color} should have a full piece set"

    def test_initial_state(self):
        state = BoardState.new_game(7)

        assert all(state.piece_at(position) is not None for position in ALL_POSITIONS)
        assert all(not piece.face_up for _, piece in state.pieces())
        assert state.side_to_move is None
        assert not state.game_over
        assert state.winner is None
        assert state.captured_pieces(Color.RED) == []

    def test_copy_is_independent(self):
        state = BoardState.new_game(3)
        clone = state.copy()

        assert clone == state
        clone.perform(Flip(Position(0, 0)))
        assert clone != state
        assert not state.piece_at(Position(0, 0)).face_up


class TestPerform:
    """Tests for action validation and application."""

    @pytest.fixture
    def state(self):
        return BoardState.new_game(12345)

    def test_first_flip_sets_opponent_to_move(self, state):
        flipped = state.piece_at(Position(0, 0))

        assert perform(state, Flip(Position(0, 0)))
        assert state.piece_at(Position(0, 0)).face_up
        assert state.side_to_move is flipped.color.opponent
        assert state.last_action == Flip(Position(0, 0))

    def test_turn_alternates_after_flips(self, state):
        state.perform(Flip(Position(0, 0)))
        first = state.side_to_move
        state.perform(Flip(Position(1, 0)))

        assert state.side_to_move is first.opponent

    def test_flip_face_up_piece_rejected(self, state):
        state.perform(Flip(Position(0, 0)))
        before = state.copy()

        assert not state.perform(Flip(Position(0, 0)))
        assert state == before

    def test_flip_empty_or_off_board_rejected(self):
        state = BoardState.from_pieces({(0, 0): down(Color.RED, PieceType.SOLDIER)})

        assert not state.perform(Flip(Position(1, 1)))
        assert not state.perform(Flip(Position(9, 9)))

    def test_move_before_first_flip_rejected(self):
        state = BoardState.from_pieces({
            (0, 0): up(Color.RED, PieceType.CHARIOT),
            (3, 7): down(Color.BLACK, PieceType.SOLDIER),
        })
        before = state.copy()

        assert not state.perform(Move(Position(0, 0), Position(0, 1)))
        assert state == before

    def test_illegal_actions_leave_state_unchanged(self):
        state = BoardState.from_pieces(
            {
                (1, 1): up(Color.RED, PieceType.CHARIOT),
                (1, 2): up(Color.BLACK, PieceType.GENERAL),
                (2, 1): up(Color.BLACK, PieceType.SOLDIER),
                (3, 7): down(Color.RED, PieceType.CANNON),
            },
            side_to_move=Color.RED,
        )
        illegal = [
            Move(Position(1, 1), Position(1, 3)),      # two squares
            Capture(Position(1, 1), Position(1, 2)),   # chariot cannot take general
            Move(Position(2, 1), Position(3, 1)),      # not red's piece
            Move(Position(1, 1), Position(1, 2)),      # occupied target
            Capture(Position(1, 1), Position(-1, 1)),  # off the board
            Move(Position(3, 7), Position(3, 6)),      # face-down piece
            Move(Position(0, 0), Position(0, 1)),      # empty source
        ]

        for action in illegal:
            before = state.copy()
            assert not state.perform(action), f"{action} should be rejected"
            assert state == before, f"Rejected {action} must not change the board"

    def test_capture_relocates_attacker(self):
        state = BoardState.from_pieces(
            {
                (1, 1): up(Color.RED, PieceType.CHARIOT),
                (2, 1): up(Color.BLACK, PieceType.SOLDIER),
                (3, 7): down(Color.RED, PieceType.CANNON),
            },
            side_to_move=Color.RED,
        )

        assert state.perform(Capture(Position(1, 1), Position(2, 1)))
        assert state.piece_at(Position(1, 1)) is None
        assert state.piece_at(Position(2, 1)) == up(Color.RED, PieceType.CHARIOT)
        assert state.side_to_move is Color.BLACK
        assert state.captured_pieces(Color.BLACK).count(PieceType.SOLDIER) == 5

    def test_unknown_action_type_raises(self, state):
        with pytest.raises(TypeError):
            state.perform("a1-a2")


class TestGameEnd:
    """Tests for terminal-state detection."""

    def test_stuck_side_loses(self):
        """A soldier boxed in by chariots has no move and nothing is hidden."""
        state = BoardState.from_pieces(
            {
                (0, 0): up(Color.RED, PieceType.SOLDIER),
                (1, 0): up(Color.BLACK, PieceType.CHARIOT),
                (0, 1): up(Color.BLACK, PieceType.CHARIOT),
            },
            side_to_move=Color.RED,
        )

        assert state.game_over
        assert state.winner is Color.BLACK
        assert legal_actions(state) == []

    def test_face_down_piece_keeps_game_going(self):
        state = BoardState.from_pieces(
            {
                (0, 0): up(Color.RED, PieceType.SOLDIER),
                (1, 0): up(Color.BLACK, PieceType.CHARIOT),
                (0, 1): up(Color.BLACK, PieceType.CHARIOT),
                (3, 7): down(Color.BLACK, PieceType.HORSE),
            },
            side_to_move=Color.RED,
        )

        assert not state.game_over
        assert legal_actions(state) == [Flip(Position(3, 7))]

    def test_capturing_last_piece_wins(self):
        state = BoardState.from_pieces(
            {
                (0, 0): up(Color.RED, PieceType.CHARIOT),
                (0, 1): up(Color.BLACK, PieceType.SOLDIER),
            },
            side_to_move=Color.RED,
        )
        assert not state.game_over

        assert state.perform(Capture(Position(0, 0), Position(0, 1)))
        assert state.game_over
        assert state.winner is Color.RED
        assert legal_actions(state) == []
        assert not state.perform(Move(Position(0, 1), Position(0, 2))), "No action after the end"

    def test_captured_pieces_order(self):
        state = BoardState.from_pieces({(0, 0): up(Color.RED, PieceType.GENERAL)})

        captured_red = state.captured_pieces(Color.RED)
        captured_black = state.captured_pieces(Color.BLACK)

        assert len(captured_red) == 15
        assert captured_red[0] == PieceType.ADVISOR
        assert captured_red[-1] == PieceType.SOLDIER
        assert len(captured_black) == 16
        assert captured_black[0] == PieceType.GENERAL


class TestRendering:
    def test_text_diagram(self):
        state = BoardState.from_pieces({
            (0, 0): up(Color.RED, PieceType.CHARIOT),
            (3, 7): up(Color.BLACK, PieceType.GENERAL),
            (1, 0): down(Color.RED, PieceType.SOLDIER),
        })
        lines = str(state).splitlines()

        assert lines[0] == "8 . . . g"
        assert lines[7] == "1 R ? . ."
        assert lines[-1] == "  a b c d"

    def test_from_pieces_rejects_off_board(self):
        with pytest.raises(ValueError):
            BoardState.from_pieces({(4, 0): up(Color.RED, PieceType.SOLDIER)})
