"""Data module: sample validation and time course tables."""

from .validation import validate, MIN_POINTS
from .timecourse import TimeCourse, read_time_course, write_fitted, parse_separator

__all__ = [
    "validate",
    "MIN_POINTS",
    "TimeCourse",
    "read_time_course",
    "write_fitted",
    "parse_separator",
]
