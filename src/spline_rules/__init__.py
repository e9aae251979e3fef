"""Fit time course data and express the fit as piecewise symbolic rules."""

from .errors import (
    SplineRuleError,
    DataShapeError,
    InsufficientDataError,
    NonMonotonicError,
    NonFiniteError,
    MalformedSegmentError,
    NotReadyError,
    TimeCourseFormatError,
)
from .data import validate
from .splines import PiecewisePolynomial, SplineFitter
from .symbolic import (
    TIME,
    PiecewiseBundle,
    PiecewiseExpressionCompiler,
    evaluate_bundle,
    to_piecewise,
)
from .interpolation import Interpolator, PolynomialInterpolator, sample

__all__ = [
    # Errors
    "SplineRuleError",
    "DataShapeError",
    "InsufficientDataError",
    "NonMonotonicError",
    "NonFiniteError",
    "MalformedSegmentError",
    "NotReadyError",
    "TimeCourseFormatError",
    # Pipeline
    "validate",
    "PiecewisePolynomial",
    "SplineFitter",
    "TIME",
    "PiecewiseBundle",
    "PiecewiseExpressionCompiler",
    "evaluate_bundle",
    "to_piecewise",
    "Interpolator",
    "PolynomialInterpolator",
    "sample",
]
