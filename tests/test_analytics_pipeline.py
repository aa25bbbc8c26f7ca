"""
Pytest tests for the analytics pipeline (GPA, term trend, forecast, strength buckets).
"""

from __future__ import annotations

import json

import pytest

from gpa_insight.analytics.analytics_pipeline import (
    bucket_for_rank,
    classify_trend,
    run_course_analysis,
)
from gpa_insight.analytics.grade_scale import DEFAULT_GRADE_SCALE, GradeScale
from gpa_insight.analytics.kmeans import STATUS_MAX_ITER_REACHED, STATUS_SINGLETON_FALLBACK
from gpa_insight.analytics.models import (
    TREND_FALLING,
    TREND_INSUFFICIENT_DATA,
    TREND_RISING,
    TREND_STABLE,
    Course,
)
from gpa_insight.config.settings import AnalyticsSettings
from gpa_insight.core.exceptions import InvalidClusterCount, UnknownGrade

# --- GPA aggregation ---


def test_overall_gpa_two_courses(settings):
    """4 credits of A (4.0) and 3 credits of B+ (3.3)."""
    courses = [
        Course(id=1, name="Algorithms", credits=4, grade="A", term=1),
        Course(id=2, name="Calculus", credits=3, grade="B+", term=1),
    ]
    report = run_course_analysis(courses, DEFAULT_GRADE_SCALE, 3, settings=settings)
    assert report.overall_gpa == pytest.approx((4 * 4.0 + 3 * 3.3) / 7)
    assert report.total_credits == 7
    assert report.course_count == 2


def test_single_term_is_insufficient_data(settings, make_course):
    report = run_course_analysis([make_course("A", 1), make_course("B", 1)], settings=settings)
    assert report.insufficient_data
    assert report.regression is None
    assert report.forecast_term is None
    assert report.forecast_gpa is None
    assert report.trend == TREND_INSUFFICIENT_DATA
    assert len(report.terms) == 1
    assert report.term_gpa_std == 0


def test_sample_courses_report(settings, sample_courses):
    report = run_course_analysis(sample_courses, settings=settings)

    assert report.total_credits == 28
    assert report.overall_gpa == pytest.approx(99.0 / 28)

    term_gpas = [37.3 / 11, 23.8 / 7, 37.9 / 10]
    assert [t.term for t in report.terms] == [1, 2, 3]
    assert [t.gpa for t in report.terms] == pytest.approx(term_gpas)
    assert [t.credits for t in report.terms] == [11, 7, 10]
    assert [t.course_count for t in report.terms] == [3, 2, 3]

    mean_gpa = sum(term_gpas) / 3
    std = (sum((g - mean_gpa) ** 2 for g in term_gpas) / 3) ** 0.5
    assert report.term_gpa_std == pytest.approx(std)

    slope = (term_gpas[2] - term_gpas[0]) / 2
    assert report.regression is not None
    assert report.regression.slope == pytest.approx(slope)
    assert report.trend == TREND_RISING
    assert report.forecast_term == 4
    assert report.forecast_gpa == pytest.approx(mean_gpa + 2 * slope)


def test_sample_strength_buckets(settings, sample_courses):
    report = run_course_analysis(sample_courses, settings=settings)
    assert [c.name for c in report.strengths.weak] == ["Physics I"]
    assert [c.name for c in report.strengths.average] == [
        "Calculus I",
        "Linear Algebra",
        "Database Systems",
    ]
    assert [c.name for c in report.strengths.strong] == [
        "Intro to CS",
        "Data Structures",
        "Algorithms",
        "Web Dev",
    ]
    assert report.strengths.counts() == {"weak": 1, "average": 3, "strong": 4}


def test_quantile_seeding_changes_sample_buckets(sample_courses):
    """Seeds 3.0, 3.7, 4.0 settle on centroids 3.075, 3.7, 4.0."""
    report = run_course_analysis(
        sample_courses, settings=AnalyticsSettings(kmeans_seeding="quantile")
    )
    assert report.clustering.centroids == pytest.approx((3.075, 3.7, 4.0))
    assert [c.name for c in report.strengths.weak] == [
        "Calculus I",
        "Physics I",
        "Linear Algebra",
        "Database Systems",
    ]
    assert [c.name for c in report.strengths.average] == ["Data Structures"]
    assert [c.name for c in report.strengths.strong] == [
        "Intro to CS",
        "Algorithms",
        "Web Dev",
    ]


def test_kmeans_iteration_cap_from_settings(sample_courses):
    report = run_course_analysis(
        sample_courses, settings=AnalyticsSettings(kmeans_max_iter=1)
    )
    assert report.clustering.status == STATUS_MAX_ITER_REACHED
    assert report.clustering.n_iter == 1


def test_kmeans_exact_convergence_from_settings(settings, sample_courses):
    exact = run_course_analysis(sample_courses, settings=AnalyticsSettings(kmeans_tol=0.0))
    default = run_course_analysis(sample_courses, settings=settings)
    assert exact.clustering.converged
    assert exact.clustering.centroids == pytest.approx(default.clustering.centroids)
    assert exact.clustering.n_iter >= default.clustering.n_iter


def test_zero_credit_courses(settings, make_course):
    report = run_course_analysis(
        [make_course("A", 1, credits=0), make_course("B", 2, credits=0)],
        settings=settings,
    )
    assert report.overall_gpa == 0
    assert report.total_credits == 0
    assert [t.gpa for t in report.terms] == [0, 0]
    assert report.trend == TREND_STABLE


def test_empty_course_list(settings):
    report = run_course_analysis([], settings=settings)
    assert report.overall_gpa == 0
    assert report.course_count == 0
    assert report.terms == ()
    assert report.term_gpa_std == 0
    assert report.insufficient_data
    assert report.strengths.counts() == {"weak": 0, "average": 0, "strong": 0}
    assert report.clustering.status == STATUS_SINGLETON_FALLBACK


# --- Forecast and trend ---


def test_forecast_clamped_high(settings, make_course):
    """F then A: slope 4, raw forecast 8.0 -> clamped to 4.0."""
    report = run_course_analysis([make_course("F", 1), make_course("A", 2)], settings=settings)
    assert report.regression.slope == pytest.approx(4.0)
    assert report.forecast_term == 3
    assert report.forecast_gpa == 4.0
    assert report.trend == TREND_RISING


def test_forecast_clamped_low(settings, make_course):
    report = run_course_analysis([make_course("A", 1), make_course("F", 2)], settings=settings)
    assert report.forecast_gpa == 0.0
    assert report.trend == TREND_FALLING


def test_flat_terms_are_stable(settings, make_course):
    report = run_course_analysis(
        [make_course("B", 1), make_course("B", 2), make_course("B", 4)],
        settings=settings,
    )
    assert report.regression.slope == 0
    assert report.regression.r_squared == 1
    assert report.trend == TREND_STABLE
    assert report.forecast_term == 5
    assert report.forecast_gpa == pytest.approx(3.0)


def test_trend_threshold_from_settings(sample_courses):
    report = run_course_analysis(sample_courses, settings=AnalyticsSettings(trend_threshold=0.5))
    assert report.trend == TREND_STABLE


@pytest.mark.parametrize(
    "slope,expected",
    [(0.06, TREND_RISING), (0.05, TREND_STABLE), (0.0, TREND_STABLE), (-0.05, TREND_STABLE), (-0.06, TREND_FALLING)],
)
def test_classify_trend(slope, expected):
    assert classify_trend(slope, 0.05) == expected


def test_terms_sorted_regardless_of_course_order(settings, make_course):
    courses = [make_course("A", 3), make_course("C", 1), make_course("B", 2)]
    report = run_course_analysis(courses, settings=settings)
    assert [t.term for t in report.terms] == [1, 2, 3]
    assert report.trend == TREND_RISING


# --- Grade validation and configuration ---


def test_unknown_grade_raises(settings, make_course):
    courses = [make_course("A", 1), make_course("E", 2)]
    with pytest.raises(UnknownGrade) as exc:
        run_course_analysis(courses, settings=settings)
    assert exc.value.grade == "E"
    assert exc.value.course_id == courses[1].id


def test_custom_grade_scale(settings):
    scale = GradeScale.from_mapping({"P": 4.0, "N": 0.0})
    courses = [
        Course(id=1, name="Studio", credits=2, grade="P", term=1),
        Course(id=2, name="Seminar", credits=2, grade="N", term=1),
    ]
    report = run_course_analysis(courses, scale, settings=settings)
    assert report.overall_gpa == pytest.approx(2.0)
    with pytest.raises(UnknownGrade):
        run_course_analysis(courses, DEFAULT_GRADE_SCALE, settings=settings)


def test_grade_scale_from_settings(sample_courses):
    scale = GradeScale.from_mapping({**DEFAULT_GRADE_SCALE.to_dict(), "A": 3.9})
    report = run_course_analysis(sample_courses, settings=AnalyticsSettings(grade_scale=scale))
    assert report.overall_gpa == pytest.approx((99.0 - 0.1 * 8) / 28)


def test_cluster_count_two(settings, sample_courses):
    report = run_course_analysis(sample_courses, cluster_count=2, settings=settings)
    counts = report.strengths.counts()
    assert counts["average"] == 0
    assert counts["weak"] + counts["strong"] == len(sample_courses)


def test_invalid_cluster_count(settings, sample_courses):
    with pytest.raises(InvalidClusterCount):
        run_course_analysis(sample_courses, cluster_count=0, settings=settings)


def test_fewer_courses_than_clusters(settings, make_course):
    """Two courses, k=3: lower grade weak, higher grade average, no strong bucket."""
    low, high = make_course("C", 1), make_course("A", 1)
    report = run_course_analysis([high, low], settings=settings)
    assert report.strengths.weak == (low,)
    assert report.strengths.average == (high,)
    assert report.strengths.strong == ()


@pytest.mark.parametrize(
    "rank,k,expected",
    [(0, 3, "weak"), (1, 3, "average"), (2, 3, "strong"), (0, 2, "weak"), (1, 2, "strong"), (0, 1, "average"), (2, 5, "average")],
)
def test_bucket_for_rank(rank, k, expected):
    assert bucket_for_rank(rank, k) == expected


# --- Invariants ---


def test_bucket_points_ordered(settings, make_course):
    grades = ["A", "F", "B", "C+", "A-", "D", "B+", "C", "A+", "B-"]
    courses = [make_course(g, 1 + i % 4) for i, g in enumerate(grades)]
    report = run_course_analysis(courses, settings=settings)
    points = {
        name: [DEFAULT_GRADE_SCALE.point_for(c.grade) for c in report.strengths.get(name)]
        for name in ("weak", "average", "strong")
    }
    assert max(points["weak"]) <= min(points["average"])
    assert max(points["average"]) <= min(points["strong"])
    assert list(report.clustering.centroids) == sorted(report.clustering.centroids)


def test_forecast_within_grade_range(settings, make_course):
    for grades in (["F", "A", "A+"], ["A", "D", "F"], ["C", "C+", "B"]):
        courses = [make_course(g, term) for term, g in enumerate(grades, start=1)]
        report = run_course_analysis(courses, settings=settings)
        assert 0.0 <= report.forecast_gpa <= 4.0


def test_input_not_mutated(settings, sample_courses):
    before = list(sample_courses)
    run_course_analysis(sample_courses, settings=settings)
    assert sample_courses == before


def test_recomputed_each_call(settings, sample_courses):
    first = run_course_analysis(sample_courses, settings=settings)
    second = run_course_analysis(sample_courses, settings=settings)
    assert first == second
    assert first is not second


# --- Serialization ---


def test_report_to_dict(settings, sample_courses):
    report = run_course_analysis(sample_courses, settings=settings)
    data = report.to_dict(precision=2)
    json.dumps(data)
    assert data["overall_gpa"] == 3.54
    assert data["forecast_term"] == 4
    assert data["trend"] == "rising"
    assert data["insufficient_data"] is False
    assert data["strength_counts"] == {"weak": 1, "average": 3, "strong": 4}
    assert data["strengths"]["weak"][0]["name"] == "Physics I"
    assert data["clustering"]["k"] == 3
    assert data["clustering"]["labels"] == list(report.clustering.labels)
    assert data["clustering"]["centroids"] == [round(c, 2) for c in report.clustering.centroids]
    assert data["regression"]["n_samples"] == 3
    assert data["regression"]["slope"] == round(report.regression.slope, 2)
    assert [t["term"] for t in data["terms"]] == [1, 2, 3]


def test_report_to_dict_insufficient_data(settings, make_course):
    data = run_course_analysis([make_course("A", 1)], settings=settings).to_dict()
    assert data["regression"] is None
    assert data["forecast_gpa"] is None
    assert data["insufficient_data"] is True
