"""
Environment variable loading and validation for GPA Insight.

- GPA_CLUSTER_COUNT: number of strength clusters (default: 3)
- GPA_KMEANS_MAX_ITER: k-means iteration cap (default: 100)
- GPA_KMEANS_TOL: centroid movement tolerance for convergence (default: 1e-9)
- GPA_KMEANS_SEEDING: first | quantile (default: first)
- GPA_TREND_THRESHOLD: slope magnitude separating rising/falling from stable (default: 0.05)
- GPA_GRADE_SCALE_PATH: optional JSON file mapping letter grade -> points
- GPA_REPORT_PRECISION: decimals used when printing reports (default: 2)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from gpa_insight.core.exceptions import ConfigurationError

# Project root: config is gpa_insight/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"


def load_gpa_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def _raw(name: str) -> str:
    return (os.getenv(name) or "").strip()


def get_env_str(name: str, default: str) -> str:
    """Return stripped env value, or default when unset or blank."""
    return _raw(name) or default


def get_env_int(name: str, default: int) -> int:
    raw = _raw(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def get_env_float(name: str, default: float) -> float:
    raw = _raw(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def get_env_path(name: str) -> Path | None:
    """Return env value as a Path, or None when unset. Relative paths resolve against project root."""
    raw = _raw(name)
    if not raw:
        return None
    path = Path(raw).expanduser()
    return path if path.is_absolute() else _ROOT / path
