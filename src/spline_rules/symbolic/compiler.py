"""Compile piecewise polynomials into symbolic expression/condition pairs.

For interval ``i`` with left knot ``k_i`` and coefficients ``c_0..c_d``
(local to ``k_i``) the compiler emits

    expression_i = c_0 + c_1*(t - k_i)**1 + ... + c_d*(t - k_i)**d
    condition_i  = (t >= k_i) and (t <= k_{i+1})

Both bounds are inclusive, so at an interior knot two conditions hold.
Consumers must test conditions in index order and use the first match,
which makes the left segment authoritative at interior knots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

import numpy as np

from ..errors import MalformedSegmentError
from ..splines.fitting import PiecewisePolynomial
from .builder import ExpressionBuilder, SympyBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PiecewiseBundle:
    """Index-aligned expression and condition trees, in knot order.

    Attributes:
        functions: One expression tree per interval.
        conditions: One range condition per interval; ``conditions[i]``
            guards ``functions[i]``.
        knots: Breakpoints the bundle was compiled from.
    """
    functions: tuple[Any, ...]
    conditions: tuple[Any, ...]
    knots: np.ndarray

    def __post_init__(self) -> None:
        if len(self.functions) != len(self.conditions):
            raise MalformedSegmentError(
                f"Bundle has {len(self.functions)} functions but "
                f"{len(self.conditions)} conditions"
            )

    @property
    def domain(self) -> tuple[float, float]:
        return (float(self.knots[0]), float(self.knots[-1]))

    def __len__(self) -> int:
        return len(self.functions)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return iter(zip(self.functions, self.conditions))

    def __repr__(self) -> str:
        return f"PiecewiseBundle(n_pieces={len(self)}, domain={self.domain})"


@dataclass
class PiecewiseExpressionCompiler:
    """Turns knots and local-coordinate segments into a ``PiecewiseBundle``.

    Attributes:
        builder: Node factory; sympy by default.
    """
    builder: ExpressionBuilder = field(default_factory=SympyBuilder)

    def compile(
        self,
        knots: Sequence[float] | np.ndarray,
        segments: Sequence[Sequence[float]],
    ) -> PiecewiseBundle:
        """Compile every interval, in knot order.

        Args:
            knots: Strictly ascending breakpoints, length n_segments + 1.
            segments: Coefficients per interval, constant term first.

        Returns:
            The compiled bundle.

        Raises:
            MalformedSegmentError: If the knot and segment counts disagree
                or a segment has no coefficients.
        """
        knots = np.asarray(knots, dtype=float)
        if len(segments) == 0:
            raise MalformedSegmentError("Cannot compile a piecewise polynomial with no segments")
        if len(knots) != len(segments) + 1:
            raise MalformedSegmentError(
                f"Expected {len(segments) + 1} knots for {len(segments)} segments, "
                f"got {len(knots)}"
            )

        functions = []
        conditions = []
        for i, coefficients in enumerate(segments):
            if len(coefficients) == 0:
                raise MalformedSegmentError(
                    f"Segment {i} has no coefficients; every segment needs "
                    f"at least a constant term",
                    segment_index=i,
                )
            functions.append(self.polynomial_expression(coefficients, knots[i]))
            conditions.append(self.knot_condition(knots[i], knots[i + 1]))

        logger.debug("Compiled %d piecewise segments over [%g, %g]",
                     len(functions), knots[0], knots[-1])

        return PiecewiseBundle(
            functions=tuple(functions),
            conditions=tuple(conditions),
            knots=knots.copy(),
        )

    def compile_polynomial(self, polynomial: PiecewisePolynomial) -> PiecewiseBundle:
        """Compile a fitted ``PiecewisePolynomial``."""
        return self.compile(polynomial.knots, polynomial.segments)

    def knot_condition(self, left: float, right: float) -> Any:
        """Condition that holds when ``left <= t <= right``."""
        b = self.builder
        lower = b.greater_equal(b.time(), b.constant(float(left)))
        upper = b.less_equal(b.time(), b.constant(float(right)))
        return b.logical_and(lower, upper)

    def polynomial_expression(self, coefficients: Sequence[float], knot: float) -> Any:
        """Sum of ``c_k * (t - knot)**k`` with the constant term first.

        The ``t - knot`` node is built once and shared by every power term.
        """
        b = self.builder
        terms = [b.constant(float(coefficients[0]))]
        if len(coefficients) > 1:
            local = b.subtract(b.time(), b.constant(float(knot)))
            for k in range(1, len(coefficients)):
                terms.append(
                    b.multiply(b.constant(float(coefficients[k])), b.power(local, k))
                )
        return b.add(terms)
