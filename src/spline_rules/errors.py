"""Exception types raised while fitting and compiling time course data.

Validation errors derive from ``ValueError`` and state errors from
``RuntimeError`` so that callers used to the numpy/scipy conventions can
catch them without importing this module. Every error keeps the values
that triggered it as attributes, so a caller can build its own diagnostic
without parsing the message.
"""

from __future__ import annotations


class SplineRuleError(Exception):
    """Base class for all errors raised by spline_rules."""


class DataShapeError(SplineRuleError, ValueError):
    """Times and values do not have matching one-dimensional shapes."""

    def __init__(self, message: str, n_times: int | None = None, n_values: int | None = None):
        super().__init__(message)
        self.n_times = n_times
        self.n_values = n_values


class InsufficientDataError(SplineRuleError, ValueError):
    """Fewer samples than a fit needs."""

    def __init__(self, message: str, n_points: int, min_points: int):
        super().__init__(message)
        self.n_points = n_points
        self.min_points = min_points


class NonMonotonicError(SplineRuleError, ValueError):
    """Times are not strictly ascending.

    Attributes:
        index: Index of the first time that is not greater than its predecessor.
        value: The offending time.
        previous: The time at ``index - 1``.
    """

    def __init__(self, message: str, index: int, value: float, previous: float):
        super().__init__(message)
        self.index = index
        self.value = value
        self.previous = previous


class NonFiniteError(SplineRuleError, ValueError):
    """A time or value is nan or infinite."""

    def __init__(self, message: str, index: int, column: str, value: float):
        super().__init__(message)
        self.index = index
        self.column = column
        self.value = value


class MalformedSegmentError(SplineRuleError, RuntimeError):
    """A fitted piecewise polynomial breaks the knot/segment invariants."""

    def __init__(self, message: str, segment_index: int | None = None):
        super().__init__(message)
        self.segment_index = segment_index


class NotReadyError(SplineRuleError, RuntimeError):
    """An interpolator was queried before ``set_data`` was called."""


class TimeCourseFormatError(SplineRuleError, ValueError):
    """Tabular time course input is malformed.

    Attributes:
        row: 1-based row number (header row is row 1), if known.
        column: 1-based column number, if known.
    """

    def __init__(self, message: str, row: int | None = None, column: int | None = None):
        super().__init__(message)
        self.row = row
        self.column = column
