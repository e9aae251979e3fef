"""Piecewise polynomial fitting of 1D time course samples.

The fitters here wrap scipy's interpolators and hand back a
``PiecewisePolynomial``: breakpoints plus one coefficient vector per
interval, lowest power first, in coordinates local to the interval's left
knot. That is the only representation the symbolic compiler consumes, so a
new interpolation kind only has to produce one.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.polynomial import polynomial as P
from scipy.interpolate import (
    Akima1DInterpolator,
    CubicSpline,
    PchipInterpolator,
    PPoly,
)

from ..data.validation import validate
from ..errors import MalformedSegmentError


@dataclass(frozen=True, eq=False)
class PiecewisePolynomial:
    """Breakpoints and per-interval polynomial coefficients.

    Segment ``i`` is ``sum(c[k] * (t - knots[i])**k)`` and is valid on
    ``[knots[i], knots[i+1]]``. At an interior knot both neighbours apply;
    evaluation uses the left one.

    Attributes:
        knots: Strictly ascending breakpoints, shape (n_segments + 1,).
        segments: One coefficient array per interval, increasing power order.
    """
    knots: np.ndarray
    segments: tuple[np.ndarray, ...]
    _table: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        knots = np.asarray(self.knots, dtype=float)
        segments = tuple(np.asarray(c, dtype=float).ravel() for c in self.segments)

        if knots.ndim != 1 or len(knots) < 2:
            raise MalformedSegmentError(f"Need at least 2 knots, got shape {knots.shape}")
        if len(segments) != len(knots) - 1:
            raise MalformedSegmentError(
                f"Expected {len(knots) - 1} segments for {len(knots)} knots, "
                f"got {len(segments)}"
            )
        if np.any(np.diff(knots) <= 0):
            raise MalformedSegmentError("Knots must be strictly ascending")

        # Zero-padded (n_segments, degree + 1) table used for evaluation
        width = max(1, max(len(c) for c in segments))
        table = np.zeros((len(segments), width))
        for i, c in enumerate(segments):
            table[i, :len(c)] = c

        object.__setattr__(self, 'knots', knots)
        object.__setattr__(self, 'segments', segments)
        object.__setattr__(self, '_table', table)

    @classmethod
    def from_ppoly(cls, ppoly: PPoly) -> PiecewisePolynomial:
        """Convert a scipy ``PPoly`` (or subclass) with scalar output.

        scipy stores coefficients highest power first as ``c[k, i]``; they
        are reversed here.
        """
        c = np.asarray(ppoly.c)
        if c.ndim != 2:
            raise ValueError(
                f"Only scalar-valued piecewise polynomials are supported, "
                f"got coefficient array of shape {c.shape}"
            )
        segments = tuple(c[::-1, i].copy() for i in range(c.shape[1]))
        return cls(knots=np.asarray(ppoly.x, dtype=float).copy(), segments=segments)

    @property
    def n_segments(self) -> int:
        return len(self.segments)

    @property
    def degree(self) -> int:
        """Highest polynomial degree over all segments."""
        return self._table.shape[1] - 1

    @property
    def domain(self) -> tuple[float, float]:
        return (float(self.knots[0]), float(self.knots[-1]))

    def segment_index(self, t: np.ndarray | float) -> np.ndarray:
        """Index of the segment used at ``t``; -1 outside the domain."""
        t = np.asarray(t, dtype=float)
        # side='left' puts an interior knot in the segment to its left
        idx = np.searchsorted(self.knots, t, side='left') - 1
        idx = np.where(t == self.knots[0], 0, idx)
        inside = (t >= self.knots[0]) & (t <= self.knots[-1])
        return np.where(inside, idx, -1)

    def evaluate(self, t: np.ndarray | float) -> np.ndarray | float:
        """Evaluate at ``t``; points outside the domain give nan."""
        t = np.asarray(t, dtype=float)
        scalar_input = t.ndim == 0
        t = np.atleast_1d(t)

        idx = self.segment_index(t)
        inside = idx >= 0
        safe = np.where(inside, idx, 0)
        x = t - self.knots[safe]

        result = np.zeros_like(t)
        for k in range(self.degree, -1, -1):
            result = result * x + self._table[safe, k]
        result = np.where(inside, result, np.nan)

        if scalar_input:
            return float(result[0])
        return result

    def __call__(self, t: np.ndarray | float) -> np.ndarray | float:
        return self.evaluate(t)

    def __repr__(self) -> str:
        return (
            f"PiecewisePolynomial(n_segments={self.n_segments}, degree={self.degree}, "
            f"domain=[{self.knots[0]:.4g}, {self.knots[-1]:.4g}])"
        )


KINDS = ('natural', 'not-a-knot', 'linear', 'akima', 'pchip', 'polynomial')


@dataclass
class SplineFitter:
    """Fit a piecewise polynomial to validated samples.

    Attributes:
        kind: Interpolation kind. 'natural' (default) is a natural cubic
            spline; 'not-a-knot', 'akima' and 'pchip' are the corresponding
            scipy cubics; 'linear' joins samples with straight lines;
            'polynomial' is a single interpolating polynomial over the whole
            range (one segment, degree n - 1).
    """
    kind: str = 'natural'

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(
                f"Unknown interpolation kind: {self.kind!r}. "
                f"Expected one of {', '.join(KINDS)}"
            )

    def fit(self, times, values) -> PiecewisePolynomial:
        """Fit the samples.

        Args:
            times: Strictly ascending sample times, shape (n,).
            values: Sample values, shape (n,).

        Returns:
            The fitted piecewise polynomial; its knots start at ``times[0]``
            and end at ``times[-1]``.
        """
        times, values = validate(times, values)

        if self.kind == 'natural':
            ppoly = CubicSpline(times, values, bc_type='natural')
        elif self.kind == 'not-a-knot':
            ppoly = CubicSpline(times, values, bc_type='not-a-knot')
        elif self.kind == 'akima':
            ppoly = Akima1DInterpolator(times, values)
        elif self.kind == 'pchip':
            ppoly = PchipInterpolator(times, values)
        elif self.kind == 'linear':
            return _fit_linear(times, values)
        else:
            return _fit_polynomial(times, values)

        return PiecewisePolynomial.from_ppoly(ppoly)

    def __repr__(self) -> str:
        return f"SplineFitter(kind={self.kind!r})"


def _fit_linear(times: np.ndarray, values: np.ndarray) -> PiecewisePolynomial:
    slopes = np.diff(values) / np.diff(times)
    segments = tuple(np.array([v, s]) for v, s in zip(values[:-1], slopes))
    return PiecewisePolynomial(knots=times.copy(), segments=segments)


def _fit_polynomial(times: np.ndarray, values: np.ndarray) -> PiecewisePolynomial:
    # Solved in coordinates local to the first sample, like every other segment
    coefficients = P.polyfit(times - times[0], values, deg=len(times) - 1)
    knots = np.array([times[0], times[-1]])
    return PiecewisePolynomial(knots=knots, segments=(coefficients,))
