"""Piecewise polynomial interpolator: numeric fit plus symbolic form."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import sympy

from ..data.validation import validate
from ..errors import NotReadyError
from ..splines.fitting import PiecewisePolynomial, SplineFitter
from ..symbolic.compiler import PiecewiseBundle, PiecewiseExpressionCompiler
from ..symbolic.evaluation import to_piecewise

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FittedState:
    """Everything derived from one ``set_data`` call."""
    polynomial: PiecewisePolynomial
    bundle: PiecewiseBundle


@dataclass
class PolynomialInterpolator:
    """Interpolates data with piecewise polynomials.

    Works with any ``SplineFitter`` kind, so it covers linear interpolation
    as well as the cubic splines. Each ``set_data`` call validates, fits and
    compiles from scratch and only then swaps the new state in, so a failed
    call leaves the previous fit untouched.

    Attributes:
        fitter: Produces the piecewise polynomial from samples.
        compiler: Turns the piecewise polynomial into expression trees.

    Example:
        >>> interp = PolynomialInterpolator().set_data(times, values)
        >>> interp.value(0.5)
        >>> rule = interp.to_piecewise()
    """
    fitter: SplineFitter = field(default_factory=SplineFitter)
    compiler: PiecewiseExpressionCompiler = field(default_factory=PiecewiseExpressionCompiler)
    _state: FittedState | None = field(default=None, repr=False)

    @classmethod
    def of_kind(cls, kind: str) -> PolynomialInterpolator:
        """Interpolator using the given ``SplineFitter`` kind."""
        return cls(fitter=SplineFitter(kind=kind))

    @property
    def is_fitted(self) -> bool:
        return self._state is not None

    def set_data(self, times, values) -> PolynomialInterpolator:
        """Fit the samples, replacing any previous fit.

        Args:
            times: Strictly ascending sample times, at least 3 of them.
            values: Sample values, same length as ``times``.

        Returns:
            self for method chaining.
        """
        times, values = validate(times, values)
        polynomial = self.fitter.fit(times, values)
        bundle = self.compiler.compile_polynomial(polynomial)

        self._state = FittedState(polynomial=polynomial, bundle=bundle)
        logger.debug("Fitted %r to %d samples", polynomial, len(times))
        return self

    def value(self, time: float) -> float:
        """Interpolated value at ``time``.

        Only defined on the fitted domain; outside it the result is nan.
        """
        return float(self._fitted().polynomial(float(time)))

    def values(self, times: np.ndarray) -> np.ndarray:
        """Vectorised ``value``."""
        return np.asarray(self._fitted().polynomial(np.asarray(times, dtype=float)))

    def get_functions(self) -> list[Any]:
        return list(self._fitted().bundle.functions)

    def get_function_conditions(self) -> list[Any]:
        return list(self._fitted().bundle.conditions)

    @property
    def bundle(self) -> PiecewiseBundle:
        return self._fitted().bundle

    @property
    def polynomial(self) -> PiecewisePolynomial:
        return self._fitted().polynomial

    @property
    def knots(self) -> np.ndarray:
        return self._fitted().polynomial.knots

    @property
    def domain(self) -> tuple[float, float]:
        return self._fitted().polynomial.domain

    def to_piecewise(self) -> sympy.Piecewise:
        """The fit as a single sympy ``Piecewise``, first match wins."""
        return to_piecewise(self._fitted().bundle)

    def _fitted(self) -> FittedState:
        if self._state is None:
            raise NotReadyError("Interpolator has no data. Call set_data() first.")
        return self._state

    def __repr__(self) -> str:
        if self.is_fitted:
            return (
                f"PolynomialInterpolator(kind={self.fitter.kind!r}, "
                f"n_pieces={len(self._state.bundle)})"
            )
        return f"PolynomialInterpolator(kind={self.fitter.kind!r}, not fitted)"
