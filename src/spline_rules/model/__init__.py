"""Model module: documents holding parameters and assignment rules."""

from .document import ModelDocument, Parameter, add_time_course_parameter

__all__ = [
    "ModelDocument",
    "Parameter",
    "add_time_course_parameter",
]
