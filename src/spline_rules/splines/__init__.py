"""Splines module: piecewise polynomial fitting."""

from .fitting import PiecewisePolynomial, SplineFitter, KINDS

__all__ = [
    "PiecewisePolynomial",
    "SplineFitter",
    "KINDS",
]
