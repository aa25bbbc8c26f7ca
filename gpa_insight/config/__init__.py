"""
Configuration management for GPA Insight.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for analytics configuration.
"""

from gpa_insight.config.settings import AnalyticsSettings, get_settings  # noqa: F401

__all__ = ["AnalyticsSettings", "get_settings"]
