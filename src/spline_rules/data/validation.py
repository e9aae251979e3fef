"""Structural checks for raw time course samples."""

from __future__ import annotations

import numpy as np

from ..errors import (
    DataShapeError,
    InsufficientDataError,
    NonFiniteError,
    NonMonotonicError,
)

MIN_POINTS = 3


def validate(times, values, min_points: int = MIN_POINTS) -> tuple[np.ndarray, np.ndarray]:
    """Check that samples are suitable for spline fitting.

    The checks run in a fixed order: shape, count, finiteness, ordering.
    Nothing is modified; the returned arrays are float copies of the input.

    Args:
        times: Sample times, shape (n,).
        values: Sample values, shape (n,).
        min_points: Minimum number of samples required.

    Returns:
        Tuple of (times, values) as float64 arrays.

    Raises:
        DataShapeError: If the inputs are not 1D or differ in length.
        InsufficientDataError: If there are fewer than ``min_points`` samples.
        NonFiniteError: If any time or value is nan or infinite.
        NonMonotonicError: If times are not strictly ascending.
    """
    times = np.array(times, dtype=float)
    values = np.array(values, dtype=float)

    if times.ndim != 1 or values.ndim != 1:
        raise DataShapeError(
            f"times and values must be one-dimensional, got shapes "
            f"{times.shape} and {values.shape}"
        )

    if len(times) != len(values):
        raise DataShapeError(
            f"Number of data points in values ({len(values)}) differs from "
            f"times ({len(times)})",
            n_times=len(times),
            n_values=len(values),
        )

    if len(times) < min_points:
        raise InsufficientDataError(
            f"Data in times and values must contain at least {min_points} "
            f"data points, got {len(times)}",
            n_points=len(times),
            min_points=min_points,
        )

    for column, data in (('times', times), ('values', values)):
        bad = np.flatnonzero(~np.isfinite(data))
        if bad.size:
            i = int(bad[0])
            raise NonFiniteError(
                f"{column}[{i}] is not finite ({data[i]})",
                index=i,
                column=column,
                value=float(data[i]),
            )

    steps = np.diff(times)
    bad = np.flatnonzero(steps <= 0)
    if bad.size:
        i = int(bad[0]) + 1
        raise NonMonotonicError(
            f"Data in times must be in strictly ascending order: times[{i}] = "
            f"{times[i]} is not greater than times[{i - 1}] = {times[i - 1]}",
            index=i,
            value=float(times[i]),
            previous=float(times[i - 1]),
        )

    return times, values
