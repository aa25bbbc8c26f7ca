"""
Grade scale: letter grade -> grade point, and marks -> letter grade.

GradeScale is an immutable lookup passed into the pipeline as configuration,
so alternate grading systems need no code change. Lookups of a letter the
scale does not define raise UnknownGrade; there is no default grade point.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from gpa_insight.core.exceptions import InvalidGradeScale, UnknownGrade

MIN_GRADE_POINT = 0.0
MAX_GRADE_POINT = 4.0

DEFAULT_GRADE_POINTS: dict[str, float] = {
    "A+": 4.0, "A": 4.0, "A-": 3.7,
    "B+": 3.3, "B": 3.0, "B-": 2.7,
    "C+": 2.3, "C": 2.0, "C-": 1.7,
    "D+": 1.3, "D": 1.0, "F": 0.0,
}

# (minimum marks, letter), checked top-down
DEFAULT_MARK_BANDS: tuple[tuple[float, str], ...] = (
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (60, "D"),
)
FAILING_GRADE = "F"


@dataclass(frozen=True)
class GradeScale:
    """
    Read-only mapping from letter grade to grade point in [0.0, 4.0].

    Build with GradeScale.from_mapping(); grades keep insertion order.
    """

    points: Mapping[str, float]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> GradeScale:
        if not mapping:
            raise InvalidGradeScale("grade scale must define at least one grade")
        table: dict[str, float] = {}
        for raw_grade, raw_point in mapping.items():
            grade = str(raw_grade).strip()
            if not grade:
                raise InvalidGradeScale("grade scale contains a blank grade")
            try:
                point = float(raw_point)
            except (TypeError, ValueError):
                raise InvalidGradeScale(
                    f"grade point for {grade!r} is not a number: {raw_point!r}"
                ) from None
            if not (MIN_GRADE_POINT <= point <= MAX_GRADE_POINT):
                raise InvalidGradeScale(
                    f"grade point for {grade!r} must be within "
                    f"[{MIN_GRADE_POINT}, {MAX_GRADE_POINT}], got {point}"
                )
            table[grade] = point
        return cls(points=MappingProxyType(table))

    def point_for(self, grade: str, course_id: object = None) -> float:
        """Grade point for a letter; UnknownGrade when the scale does not define it."""
        try:
            return self.points[grade]
        except KeyError:
            raise UnknownGrade(grade, course_id) from None

    def __contains__(self, grade: object) -> bool:
        return grade in self.points

    def __iter__(self) -> Iterator[str]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __hash__(self) -> int:
        return hash(tuple(self.points.items()))

    @property
    def grades(self) -> tuple[str, ...]:
        return tuple(self.points)

    def to_dict(self) -> dict[str, float]:
        return dict(self.points)


DEFAULT_GRADE_SCALE = GradeScale.from_mapping(DEFAULT_GRADE_POINTS)


def grade_from_marks(
    marks: float | None,
    bands: tuple[tuple[float, str], ...] = DEFAULT_MARK_BANDS,
) -> str:
    """
    Map numeric marks (0-100) to a letter grade. Absent marks map to F.

    >>> grade_from_marks(91)
    'A-'
    """
    if marks is None:
        return FAILING_GRADE
    for minimum, letter in bands:
        if marks >= minimum:
            return letter
    return FAILING_GRADE
