"""Interpolation module: the Interpolator protocol and its implementations."""

from .base import Interpolator
from .polynomial import PolynomialInterpolator, FittedState
from .sampler import sample, fitted_times, DEFAULT_INTERVALS

__all__ = [
    "Interpolator",
    "PolynomialInterpolator",
    "FittedState",
    "sample",
    "fitted_times",
    "DEFAULT_INTERVALS",
]
