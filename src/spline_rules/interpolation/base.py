"""Protocol shared by all interpolation strategies."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Interpolator(Protocol):
    """An object that fits samples and exposes the fit symbolically.

    ``get_functions`` and ``get_function_conditions`` return index-aligned
    lists: condition ``i`` guards function ``i``, and a consumer evaluating
    them as one piecewise construct must take the first condition that
    holds, in list order.
    """

    def set_data(self, times: np.ndarray, values: np.ndarray) -> Any:
        """Fit the samples, replacing any previous fit."""
        ...

    def value(self, time: float) -> float:
        """Interpolated value at ``time`` (inside the fitted domain)."""
        ...

    def get_functions(self) -> list[Any]:
        """Expression tree for each interval, in knot order."""
        ...

    def get_function_conditions(self) -> list[Any]:
        """Range condition for each interval, aligned with ``get_functions``."""
        ...
