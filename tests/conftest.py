"""
Pytest fixtures for GPA Insight tests. Settings are read from a clean environment.
"""

from __future__ import annotations

import pytest

from gpa_insight.analytics.models import Course
from gpa_insight.analytics.sample_data import SAMPLE_COURSES
from gpa_insight.config.settings import AnalyticsSettings, get_settings

GPA_ENV_VARS = (
    "GPA_CLUSTER_COUNT",
    "GPA_KMEANS_MAX_ITER",
    "GPA_KMEANS_TOL",
    "GPA_KMEANS_SEEDING",
    "GPA_TREND_THRESHOLD",
    "GPA_GRADE_SCALE_PATH",
    "GPA_REPORT_PRECISION",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Unset GPA_* env vars and reset the settings cache around every test."""
    for name in GPA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> AnalyticsSettings:
    return AnalyticsSettings()


@pytest.fixture
def sample_courses() -> list[Course]:
    return list(SAMPLE_COURSES)


@pytest.fixture
def make_course():
    """Factory: make_course(grade, term, credits=3) with auto-incrementing id."""
    counter = {"id": 0}

    def _make(grade: str, term: int, credits: int = 3, name: str | None = None) -> Course:
        counter["id"] += 1
        cid = counter["id"]
        return Course(id=cid, name=name or f"Course {cid}", credits=credits, grade=grade, term=term)

    return _make
