"""
Core utilities: exceptions and cross-cutting concerns.

Shared by the analytics engine, configuration layer, and tools.
"""

from gpa_insight.core.exceptions import (
    ConfigurationError,
    CourseFormatError,
    DimensionMismatch,
    EmptyInput,
    GpaInsightError,
    InvalidClusterCount,
    InvalidGradeScale,
    UnknownGrade,
)

__all__ = [
    "ConfigurationError",
    "CourseFormatError",
    "DimensionMismatch",
    "EmptyInput",
    "GpaInsightError",
    "InvalidClusterCount",
    "InvalidGradeScale",
    "UnknownGrade",
]
