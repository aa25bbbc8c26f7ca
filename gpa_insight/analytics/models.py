"""
Data models for analytics input and output.

Course is the only input record. TermAggregate, StrengthBuckets and
AnalyticsReport are derived values rebuilt on every pipeline run; none of
them are cached or mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gpa_insight.analytics.kmeans import KMeansResult
from gpa_insight.analytics.regression import RegressionResult

TREND_RISING = "rising"
TREND_FALLING = "falling"
TREND_STABLE = "stable"
TREND_INSUFFICIENT_DATA = "insufficient_data"

BUCKET_WEAK = "weak"
BUCKET_AVERAGE = "average"
BUCKET_STRONG = "strong"
BUCKET_NAMES = (BUCKET_WEAK, BUCKET_AVERAGE, BUCKET_STRONG)


@dataclass(frozen=True)
class Course:
    """
    One course record as supplied by the course store.

    Field checks (non-empty name, credit range, marks range) belong to the
    caller's input forms; the pipeline only checks the grade against the scale.
    """

    id: int
    name: str
    credits: int
    grade: str
    term: int
    """Term (semester) number, starting at 1."""
    marks: float | None = None
    """Optional numeric marks 0-100."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "credits": self.credits,
            "grade": self.grade,
            "term": self.term,
            "marks": self.marks,
        }


@dataclass(frozen=True)
class TermAggregate:
    term: int
    gpa: float
    credits: int
    course_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "term": self.term,
            "gpa": self.gpa,
            "credits": self.credits,
            "course_count": self.course_count,
        }


@dataclass(frozen=True)
class StrengthBuckets:
    """Courses split by cluster rank: lowest-centroid cluster is weak, highest is strong."""

    weak: tuple[Course, ...] = ()
    average: tuple[Course, ...] = ()
    strong: tuple[Course, ...] = ()

    def get(self, name: str) -> tuple[Course, ...]:
        if name not in BUCKET_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def counts(self) -> dict[str, int]:
        return {name: len(self.get(name)) for name in BUCKET_NAMES}

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {name: [c.to_dict() for c in self.get(name)] for name in BUCKET_NAMES}


@dataclass(frozen=True)
class AnalyticsReport:
    """
    Pipeline output consumed by the presentation layer.

    When fewer than two terms exist, regression, forecast_term and
    forecast_gpa are None and trend is "insufficient_data".
    """

    overall_gpa: float
    total_credits: int
    course_count: int
    term_gpa_std: float
    terms: tuple[TermAggregate, ...]
    regression: RegressionResult | None
    forecast_term: int | None
    forecast_gpa: float | None
    """Next-term GPA prediction clamped to the grade-point range."""
    trend: str
    strengths: StrengthBuckets
    clustering: KMeansResult | None = field(repr=False, default=None)

    @property
    def insufficient_data(self) -> bool:
        """True when regression was skipped for lack of terms."""
        return self.regression is None

    def to_dict(self, precision: int | None = None) -> dict[str, Any]:
        """JSON-serializable report. precision rounds the float fields when given."""

        def r(value: float | None) -> float | None:
            if value is None or precision is None:
                return value
            return round(value, precision)

        regression = None
        if self.regression is not None:
            regression = self.regression.to_dict()
            for key in ("slope", "intercept", "r_squared"):
                regression[key] = r(regression[key])
        clustering = None
        if self.clustering is not None:
            clustering = self.clustering.to_dict()
            clustering["centroids"] = [r(c) for c in clustering["centroids"]]
            clustering["inertia"] = r(clustering["inertia"])
        return {
            "overall_gpa": r(self.overall_gpa),
            "total_credits": self.total_credits,
            "course_count": self.course_count,
            "term_gpa_std": r(self.term_gpa_std),
            "terms": [
                {**t.to_dict(), "gpa": r(t.gpa)} for t in self.terms
            ],
            "regression": regression,
            "insufficient_data": self.insufficient_data,
            "forecast_term": self.forecast_term,
            "forecast_gpa": r(self.forecast_gpa),
            "trend": self.trend,
            "strengths": self.strengths.to_dict(),
            "strength_counts": self.strengths.counts(),
            "clustering": clustering,
        }
