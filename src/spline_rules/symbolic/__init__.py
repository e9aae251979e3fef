"""Symbolic module: compile piecewise polynomials into expression trees."""

from .builder import TIME, ExpressionBuilder, SympyBuilder
from .compiler import PiecewiseBundle, PiecewiseExpressionCompiler
from .evaluation import (
    to_piecewise,
    evaluate_expression,
    evaluate_condition,
    evaluate_bundle,
    select_piece,
)

__all__ = [
    # Node construction
    "TIME",
    "ExpressionBuilder",
    "SympyBuilder",
    # Compilation
    "PiecewiseBundle",
    "PiecewiseExpressionCompiler",
    # Evaluation
    "to_piecewise",
    "evaluate_expression",
    "evaluate_condition",
    "evaluate_bundle",
    "select_piece",
]
