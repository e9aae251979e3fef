"""Tests for plotting helpers."""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from spline_rules.interpolation import PolynomialInterpolator
from spline_rules.utils.visualization import plot_fit, plot_residuals


class TestPlotting:
    """Smoke tests for plot_fit and plot_residuals."""

    def setup_method(self):
        self.times = np.array([0.0, 1.0, 2.0, 3.0])
        self.values = np.array([0.0, 1.0, 0.0, 1.0])
        self.interp = PolynomialInterpolator().set_data(self.times, self.values)

    def teardown_method(self):
        plt.close('all')

    def test_plot_fit(self):
        ax = plot_fit(self.times, self.values, self.interp, n_points=50)

        curve = ax.lines[0]
        assert len(curve.get_xdata()) == 50
        np.testing.assert_allclose(curve.get_ydata()[[0, -1]], [0.0, 1.0], atol=1e-12)
        # curve, samples, two interior knot markers
        assert len(ax.lines) == 4

    def test_plot_fit_without_knots(self):
        ax = plot_fit(self.times, self.values, self.interp, show_knots=False)
        assert len(ax.lines) == 2

    def test_plot_residuals(self):
        ax = plot_residuals(self.interp, lambda t: np.zeros_like(t), n_points=20)
        assert len(ax.lines[0].get_xdata()) == 20
