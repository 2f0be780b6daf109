"""
Position Features

A one-pass snapshot of everything the evaluation terms look at. Building it
runs the move generator once per face-up piece; every term then reads from
the snapshot instead of regenerating moves.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from banqi_engine.board.movegen import piece_actions
from banqi_engine.board.pieces import Action, Capture, Color, Piece, PieceType, Position
from banqi_engine.board.representation import board_to_planes
from banqi_engine.board.state import BoardState


@dataclass
class PositionFeatures:
    """
    Attributes:
        state: The analysed board
        planes: (15, 8, 4) board planes
        pieces: Face-up pieces per colour, row-major
        actions: Moves and captures of every face-up piece, keyed by square
        captures: Capture actions per colour
        reach: Squares each colour could step or capture onto
        generals: Square of each colour's face-up general, if any
        face_up_count: Face-up pieces of both colours
    """

    state: BoardState
    planes: np.ndarray
    pieces: Dict[Color, List[Tuple[Position, Piece]]]
    actions: Dict[Position, List[Action]]
    captures: Dict[Color, List[Capture]]
    reach: Dict[Color, Set[Position]]
    generals: Dict[Color, Optional[Position]]
    face_up_count: int

    def attacked(self, color: Color) -> Set[Position]:
        """Squares holding a piece that `color` can capture right now."""
        return {capture.dst for capture in self.captures[color]}

    def capture_targets(self, position: Position) -> Set[Position]:
        return {action.dst for action in self.actions.get(position, ()) if isinstance(action, Capture)}


def analyze(state: BoardState) -> PositionFeatures:
    """Build the feature snapshot for `state`."""
    pieces: Dict[Color, List[Tuple[Position, Piece]]] = {Color.RED: [], Color.BLACK: []}
    actions: Dict[Position, List[Action]] = {}
    captures: Dict[Color, List[Capture]] = {Color.RED: [], Color.BLACK: []}
    reach: Dict[Color, Set[Position]] = {Color.RED: set(), Color.BLACK: set()}
    generals: Dict[Color, Optional[Position]] = {Color.RED: None, Color.BLACK: None}

    for position, piece in state.pieces():
        if not piece.face_up:
            continue
        pieces[piece.color].append((position, piece))
        if piece.type == PieceType.GENERAL:
            generals[piece.color] = position

        generated = piece_actions(state, position)
        actions[position] = generated
        for action in generated:
            reach[piece.color].add(action.dst)
            if isinstance(action, Capture):
                captures[piece.color].append(action)

    return PositionFeatures(
        state=state,
        planes=board_to_planes(state),
        pieces=pieces,
        actions=actions,
        captures=captures,
        reach=reach,
        generals=generals,
        face_up_count=len(pieces[Color.RED]) + len(pieces[Color.BLACK]),
    )
