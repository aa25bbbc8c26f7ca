#!/usr/bin/env python3
"""
GPA Insight report: run the analytics pipeline over a course file.

Reads courses from CSV or JSON (see course_loader) or the built-in sample,
then prints the AnalyticsReport as JSON or a console table.

Usage:
  gpa-insight courses.csv
  gpa-insight --sample --format table
  python -m gpa_insight.tools.run_analysis courses.json --k 3 --grade-scale scale.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from gpa_insight.analytics.analytics_pipeline import run_course_analysis
from gpa_insight.analytics.models import BUCKET_NAMES, AnalyticsReport
from gpa_insight.analytics.sample_data import SAMPLE_COURSES
from gpa_insight.config.settings import get_settings, settings_from_env
from gpa_insight.core.exceptions import GpaInsightError
from gpa_insight.insight_logging import configure_logging
from gpa_insight.tools.course_loader import load_courses

SEP = "=" * 52
SEP_THIN = "-" * 52


def _fmt(value: float | None, precision: int) -> str:
    return "n/a" if value is None else f"{value:.{precision}f}"


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def render_table(report: AnalyticsReport, precision: int) -> str:
    """Human-readable report for the console."""
    lines = [
        SEP,
        "  GPA INSIGHT REPORT",
        SEP,
        f"  Cumulative GPA:     {_fmt(report.overall_gpa, precision)} / 4.00",
        f"  Credits:            {report.total_credits}",
        f"  Courses:            {report.course_count}",
        f"  Term GPA std dev:   {_fmt(report.term_gpa_std, precision + 1)}",
        SEP_THIN,
    ]
    for t in report.terms:
        lines.append(f"  Term {t.term:<3} GPA {_fmt(t.gpa, precision)}  ({t.credits} credits)")
    lines.append(SEP_THIN)
    if report.regression is None:
        lines.append("  Forecast:           insufficient data (need 2+ terms)")
    else:
        lines.append(
            f"  Forecast term {report.forecast_term}:   {_fmt(report.forecast_gpa, precision)}"
            f"  trend={report.trend}"
        )
        lines.append(
            f"  Slope: {report.regression.slope:.3f}  Intercept: {report.regression.intercept:.3f}"
            f"  R²: {_fmt(report.regression.r_squared, precision)}"
        )
    lines.append(SEP_THIN)
    for name in reversed(BUCKET_NAMES):
        courses = report.strengths.get(name)
        names = ", ".join(c.name for c in courses) or "-"
        lines.append(f"  {name:<8} ({len(courses)}): {names}")
    lines.append(SEP)
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute GPA, term trend forecast and course strength clusters.",
    )
    parser.add_argument(
        "courses_file",
        type=Path,
        nargs="?",
        help="Course file (.csv or .json): id,name,credits,grade,term,marks",
    )
    parser.add_argument("--sample", action="store_true", help="Use the built-in sample courses")
    parser.add_argument("--k", type=int, default=None, help="Cluster count (default from settings, 3)")
    parser.add_argument(
        "--grade-scale",
        type=Path,
        default=None,
        help="JSON file mapping letter grade to points (default: standard 4.0 scale)",
    )
    parser.add_argument("--format", choices=("json", "table"), default="json")
    parser.add_argument(
        "--precision",
        type=_non_negative_int,
        default=None,
        help="Decimals in output (default GPA_REPORT_PRECISION, 2)",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        default=None,
        help="Log level for stderr logs (default LOG_LEVEL, INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.sample and args.courses_file is None:
        parser.error("a courses file is required unless --sample is given")
    if args.log_level:
        configure_logging(level=args.log_level)

    try:
        if args.grade_scale is not None:
            settings = settings_from_env(grade_scale_path=args.grade_scale)
        else:
            settings = get_settings()
        courses = list(SAMPLE_COURSES) if args.sample else load_courses(args.courses_file)
        report = run_course_analysis(courses, cluster_count=args.k, settings=settings)
    except GpaInsightError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    precision = args.precision if args.precision is not None else settings.report_precision
    if args.format == "table":
        print(render_table(report, precision))
    else:
        print(json.dumps(report.to_dict(precision=precision), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
