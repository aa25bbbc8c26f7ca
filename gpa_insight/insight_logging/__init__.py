"""
Structured logging for GPA Insight.

JSON logs with timestamp, event_type, and analytics context (course_count,
term_count, cluster status). Use get_logger() in all modules.
"""

from gpa_insight.insight_logging.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
