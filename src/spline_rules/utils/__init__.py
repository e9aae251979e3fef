"""Utility functions for visualization."""

from .visualization import plot_fit, plot_residuals

__all__ = [
    "plot_fit",
    "plot_residuals",
]
