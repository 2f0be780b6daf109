"""
Evaluation Module

Position evaluation for the search. Evaluators are swappable: the search
works with anything implementing the Evaluator interface.

Key Components:
    - Evaluator (ABC): the evaluation interface
    - WeightedEvaluator: weighted sum of named terms
    - TERMS: registry of antisymmetric evaluation terms
    - analyze(): one-pass feature snapshot the terms read from

Data Flow:
    BoardState → analyze() → PositionFeatures → terms → weighted sum
                                                 Positive = for_color ahead
"""

from banqi_engine.evaluation.base import PIECE_VALUES, Evaluator
from banqi_engine.evaluation.features import PositionFeatures, analyze
from banqi_engine.evaluation.terms import TERMS
from banqi_engine.evaluation.weighted import WeightedEvaluator

__all__ = [
    'Evaluator',
    'PIECE_VALUES',
    'PositionFeatures',
    'TERMS',
    'WeightedEvaluator',
    'analyze',
]
