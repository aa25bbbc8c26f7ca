"""
Analytics pipeline: course list -> AnalyticsReport.

Single entrypoint for tools and callers: validate grades, aggregate GPA per
term, fit the term trend, forecast the next term, cluster per-course grade
points into weak/average/strong. Pure function; recomputed in full on every
call and never caches a report.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from gpa_insight.analytics import descriptive as ds
from gpa_insight.analytics.grade_scale import GradeScale, MAX_GRADE_POINT, MIN_GRADE_POINT
from gpa_insight.analytics.kmeans import fit_kmeans
from gpa_insight.analytics.models import (
    BUCKET_AVERAGE,
    BUCKET_STRONG,
    BUCKET_WEAK,
    TREND_FALLING,
    TREND_INSUFFICIENT_DATA,
    TREND_RISING,
    TREND_STABLE,
    AnalyticsReport,
    Course,
    StrengthBuckets,
    TermAggregate,
)
from gpa_insight.analytics.regression import RegressionResult, fit_linear_regression
from gpa_insight.config.settings import AnalyticsSettings, get_settings
from gpa_insight.insight_logging import get_logger

logger = get_logger(__name__)

MIN_TERMS_FOR_REGRESSION = 2


def weighted_gpa(courses: Iterable[Course], grade_scale: GradeScale) -> tuple[float, int]:
    """
    Credit-weighted GPA and total credits.

    Returns (0.0, 0) when total credits is 0.
    """
    total_points = 0.0
    total_credits = 0
    for c in courses:
        total_points += grade_scale.point_for(c.grade, c.id) * c.credits
        total_credits += c.credits
    if total_credits == 0:
        return 0.0, 0
    return total_points / total_credits, total_credits


def aggregate_terms(courses: Sequence[Course], grade_scale: GradeScale) -> list[TermAggregate]:
    """One TermAggregate per distinct term, ascending by term number."""
    by_term: dict[int, list[Course]] = defaultdict(list)
    for c in courses:
        by_term[c.term].append(c)
    out: list[TermAggregate] = []
    for term in sorted(by_term):
        term_courses = by_term[term]
        gpa, credits = weighted_gpa(term_courses, grade_scale)
        out.append(
            TermAggregate(term=term, gpa=gpa, credits=credits, course_count=len(term_courses))
        )
    return out


def classify_trend(slope: float, threshold: float) -> str:
    """slope > threshold -> rising; slope < -threshold -> falling; otherwise stable."""
    if slope > threshold:
        return TREND_RISING
    if slope < -threshold:
        return TREND_FALLING
    return TREND_STABLE


def clamp_gpa(value: float) -> float:
    return max(MIN_GRADE_POINT, min(MAX_GRADE_POINT, value))


def bucket_for_rank(rank: int, k: int) -> str:
    """
    Bucket name for a cluster rank: 0 -> weak, k-1 -> strong, ranks between -> average.

    With k=1 there is nothing to compare against and every course is average.
    """
    if k == 1:
        return BUCKET_AVERAGE
    if rank == 0:
        return BUCKET_WEAK
    if rank == k - 1:
        return BUCKET_STRONG
    return BUCKET_AVERAGE


def _validate_grades(courses: Sequence[Course], grade_scale: GradeScale) -> None:
    for c in courses:
        grade_scale.point_for(c.grade, c.id)


def _forecast(
    terms: Sequence[TermAggregate],
    trend_threshold: float,
) -> tuple[RegressionResult | None, int | None, float | None, str]:
    if len(terms) < MIN_TERMS_FOR_REGRESSION:
        logger.info("regression_skipped_insufficient_terms", term_count=len(terms))
        return None, None, None, TREND_INSUFFICIENT_DATA
    x = [t.term for t in terms]
    y = [t.gpa for t in terms]
    regression = fit_linear_regression(x, y)
    next_term = max(x) + 1
    forecast_gpa = clamp_gpa(regression.predict_one(next_term))
    return regression, next_term, forecast_gpa, classify_trend(regression.slope, trend_threshold)


def run_course_analysis(
    courses: Sequence[Course],
    grade_scale: GradeScale | None = None,
    cluster_count: int | None = None,
    *,
    settings: AnalyticsSettings | None = None,
) -> AnalyticsReport:
    """
    Run full analytics over the current course list.

    grade_scale and cluster_count default to the configured settings.
    The input sequence is only read.

    Raises:
        UnknownGrade: a course grade is missing from the scale (checked before
            any computation).
        InvalidClusterCount: cluster_count <= 0.
    """
    settings = settings or get_settings()
    scale = grade_scale if grade_scale is not None else settings.grade_scale
    k = cluster_count if cluster_count is not None else settings.cluster_count
    courses = tuple(courses)

    logger.info("analytics_pipeline_start", course_count=len(courses), k=k)
    _validate_grades(courses, scale)

    overall_gpa, total_credits = weighted_gpa(courses, scale)
    terms = aggregate_terms(courses, scale)
    term_gpa_std = ds.population_std([t.gpa for t in terms])

    regression, forecast_term, forecast_gpa, trend = _forecast(terms, settings.trend_threshold)

    grade_points = [scale.point_for(c.grade, c.id) for c in courses]
    clustering = fit_kmeans(
        grade_points,
        k,
        max_iter=settings.kmeans_max_iter,
        tol=settings.kmeans_tol,
        seeding=settings.kmeans_seeding,
    )
    buckets: dict[str, list[Course]] = {BUCKET_WEAK: [], BUCKET_AVERAGE: [], BUCKET_STRONG: []}
    for course, rank in zip(courses, clustering.labels):
        buckets[bucket_for_rank(rank, k)].append(course)
    strengths = StrengthBuckets(
        weak=tuple(buckets[BUCKET_WEAK]),
        average=tuple(buckets[BUCKET_AVERAGE]),
        strong=tuple(buckets[BUCKET_STRONG]),
    )

    report = AnalyticsReport(
        overall_gpa=overall_gpa,
        total_credits=total_credits,
        course_count=len(courses),
        term_gpa_std=term_gpa_std,
        terms=tuple(terms),
        regression=regression,
        forecast_term=forecast_term,
        forecast_gpa=forecast_gpa,
        trend=trend,
        strengths=strengths,
        clustering=clustering,
    )
    logger.info(
        "analytics_pipeline_done",
        course_count=len(courses),
        term_count=len(terms),
        overall_gpa=round(overall_gpa, 3),
        trend=trend,
        forecast_gpa=forecast_gpa,
        cluster_status=clustering.status,
        strength_counts=strengths.counts(),
    )
    return report
