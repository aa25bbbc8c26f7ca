"""Sample course history used by the CLI --sample flag and tests."""

from __future__ import annotations

from gpa_insight.analytics.models import Course

SAMPLE_COURSES: tuple[Course, ...] = (
    Course(id=1, name="Intro to CS", credits=4, grade="A", term=1, marks=95),
    Course(id=2, name="Calculus I", credits=4, grade="B+", term=1, marks=88),
    Course(id=3, name="Physics I", credits=3, grade="B-", term=1, marks=81),
    Course(id=4, name="Data Structures", credits=4, grade="A-", term=2, marks=91),
    Course(id=5, name="Linear Algebra", credits=3, grade="B", term=2, marks=85),
    Course(id=6, name="Algorithms", credits=4, grade="A", term=3, marks=94),
    Course(id=7, name="Web Dev", credits=3, grade="A+", term=3, marks=98),
    Course(id=8, name="Database Systems", credits=3, grade="B+", term=3, marks=89),
)
