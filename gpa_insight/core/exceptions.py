"""
Application-level exceptions.

Every error raised by GPA Insight derives from GpaInsightError and also from
the closest builtin (ValueError / KeyError) so callers can catch either.
Degenerate numeric inputs (zero credits, zero variance, fewer points than
clusters) are not errors; they produce policy-defined results.
"""

from __future__ import annotations


class GpaInsightError(Exception):
    """Base class for all GPA Insight errors."""


class DimensionMismatch(GpaInsightError, ValueError):
    """Two sequences passed to an elementwise operation differ in length."""

    def __init__(self, left: int, right: int, operation: str = "") -> None:
        self.left = left
        self.right = right
        self.operation = operation
        where = f" in {operation}" if operation else ""
        super().__init__(f"length mismatch{where}: {left} != {right}")


class EmptyInput(GpaInsightError, ValueError):
    """A fit was requested with zero samples."""


class UnknownGrade(GpaInsightError, KeyError):
    """A course references a letter grade that the grade scale does not define."""

    def __init__(self, grade: str, course_id: object = None) -> None:
        self.grade = grade
        self.course_id = course_id
        msg = f"unknown grade {grade!r}"
        if course_id is not None:
            msg += f" (course {course_id})"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError repr-quotes its argument; keep the plain message.
        return str(self.args[0])


class InvalidClusterCount(GpaInsightError, ValueError):
    """Cluster count k must be a positive integer."""


class InvalidGradeScale(GpaInsightError, ValueError):
    """Grade scale is empty or maps a grade outside [0.0, 4.0]."""


class CourseFormatError(GpaInsightError, ValueError):
    """A course file row or object could not be parsed into a Course."""


class ConfigurationError(GpaInsightError, ValueError):
    """An environment setting has a malformed value."""
