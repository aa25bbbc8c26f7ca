"""
Application settings.

Responsibilities:
- Read analytics configuration from the environment (see config.env).
- Validate values and provide defaults.
- Expose a frozen AnalyticsSettings for the pipeline and tools.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from gpa_insight.config.env import (
    get_env_float,
    get_env_int,
    get_env_path,
    get_env_str,
    load_gpa_env,
)
from gpa_insight.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from gpa_insight.analytics.grade_scale import GradeScale

DEFAULT_CLUSTER_COUNT = 3
DEFAULT_KMEANS_MAX_ITER = 100
DEFAULT_KMEANS_TOL = 1e-9
DEFAULT_KMEANS_SEEDING = "first"
DEFAULT_TREND_THRESHOLD = 0.05
DEFAULT_REPORT_PRECISION = 2

SEEDING_CHOICES = ("first", "quantile")


@dataclass(frozen=True)
class AnalyticsSettings:
    """Analytics configuration. All fields have defaults matching the reference grading setup."""

    cluster_count: int = DEFAULT_CLUSTER_COUNT
    kmeans_max_iter: int = DEFAULT_KMEANS_MAX_ITER
    kmeans_tol: float = DEFAULT_KMEANS_TOL
    kmeans_seeding: str = DEFAULT_KMEANS_SEEDING
    trend_threshold: float = DEFAULT_TREND_THRESHOLD
    report_precision: int = DEFAULT_REPORT_PRECISION
    grade_scale_path: Path | None = None
    grade_scale: GradeScale | None = None

    def __post_init__(self) -> None:
        if self.cluster_count <= 0:
            raise ConfigurationError(f"cluster_count must be positive, got {self.cluster_count}")
        if self.kmeans_max_iter <= 0:
            raise ConfigurationError(f"kmeans_max_iter must be positive, got {self.kmeans_max_iter}")
        if self.kmeans_tol < 0:
            raise ConfigurationError(f"kmeans_tol must be >= 0, got {self.kmeans_tol}")
        if self.kmeans_seeding not in SEEDING_CHOICES:
            raise ConfigurationError(
                f"kmeans_seeding must be one of {SEEDING_CHOICES}, got {self.kmeans_seeding!r}"
            )
        if self.trend_threshold < 0:
            raise ConfigurationError(f"trend_threshold must be >= 0, got {self.trend_threshold}")
        if self.report_precision < 0:
            raise ConfigurationError(f"report_precision must be >= 0, got {self.report_precision}")
        if self.grade_scale is None:
            # frozen dataclass: bypass __setattr__ for the derived default
            object.__setattr__(self, "grade_scale", load_grade_scale(self.grade_scale_path))


def load_grade_scale(path: Path | None) -> GradeScale:
    """
    Return the grade scale stored at path (JSON object: letter -> points),
    or the default scale when path is None.
    """
    from gpa_insight.analytics.grade_scale import DEFAULT_GRADE_SCALE, GradeScale

    if path is None:
        return DEFAULT_GRADE_SCALE
    if not path.is_file():
        raise ConfigurationError(f"grade scale file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"grade scale file is not valid JSON: {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"grade scale file must contain a JSON object: {path}")
    return GradeScale.from_mapping(data)


def settings_from_env(grade_scale_path: Path | None = None) -> AnalyticsSettings:
    """
    Build settings from the current environment (after loading .env).

    grade_scale_path, when given, replaces GPA_GRADE_SCALE_PATH, which is then not read.
    """
    load_gpa_env()
    if grade_scale_path is None:
        grade_scale_path = get_env_path("GPA_GRADE_SCALE_PATH")
    return AnalyticsSettings(
        cluster_count=get_env_int("GPA_CLUSTER_COUNT", DEFAULT_CLUSTER_COUNT),
        kmeans_max_iter=get_env_int("GPA_KMEANS_MAX_ITER", DEFAULT_KMEANS_MAX_ITER),
        kmeans_tol=get_env_float("GPA_KMEANS_TOL", DEFAULT_KMEANS_TOL),
        kmeans_seeding=get_env_str("GPA_KMEANS_SEEDING", DEFAULT_KMEANS_SEEDING).lower(),
        trend_threshold=get_env_float("GPA_TREND_THRESHOLD", DEFAULT_TREND_THRESHOLD),
        report_precision=get_env_int("GPA_REPORT_PRECISION", DEFAULT_REPORT_PRECISION),
        grade_scale_path=grade_scale_path,
    )


@lru_cache(maxsize=1)
def get_settings() -> AnalyticsSettings:
    """
    Return the process-wide settings, read from the environment on first call.

    Call get_settings.cache_clear() after changing the environment.
    """
    return settings_from_env()
