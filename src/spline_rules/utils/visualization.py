"""Plotting helpers for fitted time courses."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt

from ..symbolic.evaluation import evaluate_bundle

if TYPE_CHECKING:
    from ..interpolation.polynomial import PolynomialInterpolator


def plot_fit(
    times: np.ndarray,
    values: np.ndarray,
    interpolator: PolynomialInterpolator,
    ax: plt.Axes | None = None,
    n_points: int = 500,
    show_knots: bool = True,
    **kwargs
) -> plt.Axes:
    """Plot samples against the fitted curve.

    The curve is drawn from the compiled piecewise expressions, so the plot
    shows exactly what a consumer of the rule will compute.

    Args:
        times: Sample times.
        values: Sample values.
        interpolator: Fitted interpolator.
        ax: Matplotlib axes (creates new if None).
        n_points: Number of points on the curve.
        show_knots: Mark interior knots with dotted vertical lines.
        **kwargs: Additional arguments to ax.plot for the curve.

    Returns:
        The matplotlib axes.
    """
    if ax is None:
        fig, ax = plt.subplots()

    t_min, t_max = interpolator.domain
    grid = np.linspace(t_min, t_max, n_points)
    curve = evaluate_bundle(interpolator.bundle, grid)

    kwargs.setdefault('label', f'{interpolator.fitter.kind} fit')
    ax.plot(grid, curve, **kwargs)
    ax.plot(times, values, 'ko', markersize=5, label='Samples')

    if show_knots:
        for knot in interpolator.knots[1:-1]:
            ax.axvline(knot, color='gray', linestyle=':', linewidth=0.8)

    ax.set_xlabel('Time')
    ax.set_ylabel('Value')
    ax.legend()

    return ax


def plot_residuals(
    interpolator: PolynomialInterpolator,
    reference,
    ax: plt.Axes | None = None,
    n_points: int = 500,
) -> plt.Axes:
    """Plot the fit minus a reference function over the fitted domain.

    Args:
        interpolator: Fitted interpolator.
        reference: Vectorised callable giving the true values.
        ax: Matplotlib axes (creates new if None).
        n_points: Number of evaluation points.

    Returns:
        The matplotlib axes.
    """
    if ax is None:
        fig, ax = plt.subplots()

    t_min, t_max = interpolator.domain
    grid = np.linspace(t_min, t_max, n_points)
    residual = evaluate_bundle(interpolator.bundle, grid) - reference(grid)

    ax.plot(grid, residual, 'b-')
    ax.axhline(0.0, color='k', linewidth=0.5)
    ax.set_xlabel('Time')
    ax.set_ylabel('Fit - reference')

    return ax
