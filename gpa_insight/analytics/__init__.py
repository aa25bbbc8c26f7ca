"""
GPA Insight analytics engine.

Computes the AnalyticsReport from a course list: weighted GPA, per-term
aggregates, OLS trend and forecast, k-means strength buckets.
Modules: descriptive, regression, kmeans, grade_scale, models, analytics_pipeline.
"""

from gpa_insight.analytics.grade_scale import (
    DEFAULT_GRADE_SCALE,
    GradeScale,
    grade_from_marks,
)
from gpa_insight.analytics.kmeans import KMeansResult, fit_kmeans
from gpa_insight.analytics.models import (
    AnalyticsReport,
    Course,
    StrengthBuckets,
    TermAggregate,
)
from gpa_insight.analytics.regression import RegressionResult, fit_linear_regression
from gpa_insight.analytics.analytics_pipeline import run_course_analysis

__all__ = [
    "DEFAULT_GRADE_SCALE",
    "GradeScale",
    "grade_from_marks",
    "KMeansResult",
    "fit_kmeans",
    "AnalyticsReport",
    "Course",
    "StrengthBuckets",
    "TermAggregate",
    "RegressionResult",
    "fit_linear_regression",
    "run_course_analysis",
]
