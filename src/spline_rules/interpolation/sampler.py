"""Sampling fitted interpolants for reporting and comparison."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .base import Interpolator

DEFAULT_INTERVALS = 10


def sample(times: Sequence[float] | np.ndarray, interpolator: Interpolator) -> np.ndarray:
    """Evaluate ``interpolator.value`` at each time, in order.

    All times must lie inside the fitted domain.

    Args:
        times: Query times, shape (m,).
        interpolator: A fitted interpolator.

    Returns:
        Values, shape (m,).
    """
    times = np.asarray(times, dtype=float)
    return np.array([interpolator.value(float(t)) for t in times], dtype=float)


def fitted_times(times: Sequence[float] | np.ndarray, n_intervals: int = DEFAULT_INTERVALS) -> np.ndarray:
    """Evenly subdivide every sample gap.

    Each gap ``[times[i], times[i+1])`` contributes ``n_intervals`` points
    starting at ``times[i]``; the final sample time closes the grid.

    Args:
        times: Ascending sample times, shape (n,), n >= 2.
        n_intervals: Points per gap.

    Returns:
        Grid of ``(n - 1) * n_intervals + 1`` times.
    """
    if n_intervals < 1:
        raise ValueError(f"n_intervals must be at least 1, got {n_intervals}")

    times = np.asarray(times, dtype=float)
    if times.ndim != 1 or len(times) < 2:
        raise ValueError("Need at least two sample times to build a grid")

    steps = np.arange(n_intervals) / n_intervals
    grid = times[:-1, None] + np.diff(times)[:, None] * steps[None, :]
    return np.append(grid.ravel(), times[-1])
