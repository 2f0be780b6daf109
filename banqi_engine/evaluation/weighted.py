"""
Weighted Term Evaluation

Scores a position as a weighted sum of named terms from
banqi_engine.evaluation.terms. The term list is plain data, so a richer
evaluator is a longer list rather than a new class.

Example:
    >>> evaluator = WeightedEvaluator([("material", 1.0), ("center", 0.1)])
    >>> evaluator.evaluate(state, Color.RED)
"""

from typing import Dict, Iterable, Tuple

from banqi_engine.board.pieces import Color
from banqi_engine.board.state import BoardState
from banqi_engine.evaluation.base import Evaluator
from banqi_engine.evaluation.features import analyze
from banqi_engine.evaluation.terms import TERMS


class WeightedEvaluator(Evaluator):
    """
    Evaluator built from (term name, weight) pairs.

    A name listed more than once has its weights added together, which is
    how a tier strengthens a term it inherits from the tier below.

    Attributes:
        weights: Term name -> total weight, in first-listed order
    """

    def __init__(self, terms: Iterable[Tuple[str, float]]):
        """
        Args:
            terms: (name, weight) pairs; names must be registered in TERMS

        Raises:
            ValueError: If a name is not a known term
        """
        self.weights: Dict[str, float] = {}
        for name, weight in terms:
            if name not in TERMS:
                raise ValueError(f"Unknown evaluation term: {name!r}")
            self.weights[name] = self.weights.get(name, 0.0) + float(weight)

    def evaluate(self, state: BoardState, for_color: Color) -> float:
        features = analyze(state)
        return sum(
            weight * TERMS[name](features, for_color)
            for name, weight in self.weights.items()
        )

    def breakdown(self, state: BoardState, for_color: Color) -> Dict[str, float]:
        """Weighted contribution of each term, for inspecting a score."""
        features = analyze(state)
        return {
            name: weight * TERMS[name](features, for_color)
            for name, weight in self.weights.items()
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self.weights)} terms)"
