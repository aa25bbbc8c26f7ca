"""
Load course records from CSV or JSON files.

CSV header: id,name,credits,grade,term,marks ("semester" is accepted for
"term"; id and marks are optional). JSON: a list of objects with the same
keys. A blank grade with marks present is derived from the marks; a missing
id gets the next free id (max existing id + 1).
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from gpa_insight.analytics.grade_scale import grade_from_marks
from gpa_insight.analytics.models import Course
from gpa_insight.core.exceptions import CourseFormatError
from gpa_insight.insight_logging import get_logger

logger = get_logger(__name__)

TERM_KEYS = ("term", "semester")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _parse_int(value: Any, field: str, row_no: int) -> int:
    try:
        if isinstance(value, str):
            value = value.strip()
        as_float = float(value)
    except (TypeError, ValueError):
        raise CourseFormatError(f"row {row_no}: {field} must be an integer, got {value!r}") from None
    if not as_float.is_integer():
        raise CourseFormatError(f"row {row_no}: {field} must be an integer, got {value!r}")
    return int(as_float)


def _parse_marks(value: Any, row_no: int) -> float | None:
    if _blank(value):
        return None
    s = str(value).strip()
    if s.lower() in ("nan", "na"):
        return None
    try:
        return float(s)
    except ValueError:
        raise CourseFormatError(f"row {row_no}: marks must be a number, got {value!r}") from None


def course_from_mapping(row: Mapping[str, Any], row_no: int, course_id: int | None = None) -> Course:
    """Build a Course from a loosely typed row. course_id overrides a missing id."""
    name = str(row.get("name") or "").strip()
    if not name:
        raise CourseFormatError(f"row {row_no}: name is required")

    term_raw = next((row.get(k) for k in TERM_KEYS if not _blank(row.get(k))), None)
    if term_raw is None:
        raise CourseFormatError(f"row {row_no}: term is required")

    if _blank(row.get("credits")):
        raise CourseFormatError(f"row {row_no}: credits is required")

    marks = _parse_marks(row.get("marks"), row_no)
    grade = str(row.get("grade") or "").strip()
    if not grade:
        if marks is None:
            raise CourseFormatError(f"row {row_no}: grade or marks is required")
        grade = grade_from_marks(marks)

    if _blank(row.get("id")):
        if course_id is None:
            raise CourseFormatError(f"row {row_no}: id is required")
        cid = course_id
    else:
        cid = _parse_int(row.get("id"), "id", row_no)

    return Course(
        id=cid,
        name=name,
        credits=_parse_int(row.get("credits"), "credits", row_no),
        grade=grade,
        term=_parse_int(term_raw, "term", row_no),
        marks=marks,
    )


def courses_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[Course]:
    """Convert rows to Courses, assigning ids to rows without one."""
    rows = list(rows)
    used_ids = [
        _parse_int(r.get("id"), "id", i)
        for i, r in enumerate(rows, start=1)
        if not _blank(r.get("id"))
    ]
    next_id = max(used_ids) + 1 if used_ids else 1
    courses: list[Course] = []
    for row_no, row in enumerate(rows, start=1):
        if _blank(row.get("id")):
            courses.append(course_from_mapping(row, row_no, course_id=next_id))
            next_id += 1
        else:
            courses.append(course_from_mapping(row, row_no))
    return courses


def _normalize_keys(row: Mapping[str, Any]) -> dict[str, Any]:
    """Header names are matched case-insensitively, ignoring surrounding blanks."""
    return {str(k or "").strip().lower(): v for k, v in row.items()}


def load_courses_csv(path: Path) -> list[Course]:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise CourseFormatError(f"CSV has no header: {path}")
        rows = [_normalize_keys(row) for row in reader]
    return courses_from_rows(rows)


def load_courses_json(path: Path) -> list[Course]:
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CourseFormatError(f"invalid JSON in {path}: {e}") from e
    if isinstance(data, dict) and "courses" in data:
        data = data["courses"]
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise CourseFormatError(f"{path}: expected a list of course objects")
    return courses_from_rows([_normalize_keys(row) for row in data])


def load_courses(path: Path) -> list[Course]:
    """Load courses from a .csv or .json file."""
    path = Path(path)
    if not path.is_file():
        raise CourseFormatError(f"file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".csv":
        courses = load_courses_csv(path)
    elif suffix == ".json":
        courses = load_courses_json(path)
    else:
        raise CourseFormatError(f"unsupported course file type {suffix!r}; use .csv or .json")
    logger.info("courses_loaded", path=str(path), count=len(courses))
    return courses
