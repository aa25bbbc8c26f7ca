"""
Closed-form single-feature ordinary least squares.

fit_linear_regression(x, y) is a pure function returning an immutable
RegressionResult; there is no stateful model handle, so prediction is only
possible from a fitted result.

Degenerate cases are policy results, not errors:
- all x identical (zero denominator): slope = 0, intercept = mean(y)
- all y identical (SStot = 0): r_squared = 1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from gpa_insight.analytics import descriptive as ds
from gpa_insight.analytics.descriptive import ArrayLike
from gpa_insight.core.exceptions import DimensionMismatch, EmptyInput
from gpa_insight.insight_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RegressionResult:
    """Fitted line y = slope * x + intercept with its coefficient of determination."""

    slope: float
    intercept: float
    r_squared: float
    n_samples: int

    def predict(self, x_new: ArrayLike) -> np.ndarray:
        """Apply slope * x + intercept elementwise."""
        return self.slope * ds.as_vector(x_new) + self.intercept

    def predict_one(self, x: float) -> float:
        return float(self.slope * x + self.intercept)

    def to_dict(self) -> dict[str, Any]:
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "r_squared": self.r_squared,
            "n_samples": self.n_samples,
        }


def fit_linear_regression(x: ArrayLike, y: ArrayLike) -> RegressionResult:
    """
    Fit y on x by ordinary least squares.

    Raises:
        EmptyInput: x or y has no samples.
        DimensionMismatch: x and y differ in length.
    """
    xv = ds.as_vector(x)
    yv = ds.as_vector(y)
    if xv.size == 0 or yv.size == 0:
        raise EmptyInput("linear regression needs at least one (x, y) sample")
    if xv.size != yv.size:
        raise DimensionMismatch(xv.size, yv.size, "fit_linear_regression")

    x_mean = ds.mean(xv)
    y_mean = ds.mean(yv)
    x_dev = xv - x_mean
    y_dev = yv - y_mean

    # Checked on raw values; the float mean of repeated values may not be exact.
    x_constant = bool(np.ptp(xv) == 0)
    y_constant = bool(np.ptp(yv) == 0)

    numerator = ds.total(ds.multiply(x_dev, y_dev))
    denominator = ds.total(ds.power(x_dev, 2))
    if x_constant or y_constant or denominator == 0:
        slope = 0.0
    else:
        slope = numerator / denominator
    intercept = y_mean - slope * x_mean

    y_pred = slope * xv + intercept
    ss_res = ds.total(ds.power(ds.subtract(yv, y_pred), 2))
    ss_tot = ds.total(ds.power(y_dev, 2))
    r_squared = 1.0 if (y_constant or ss_tot == 0) else 1.0 - ss_res / ss_tot

    result = RegressionResult(
        slope=float(slope),
        intercept=float(intercept),
        r_squared=float(r_squared),
        n_samples=int(xv.size),
    )
    logger.debug(
        "regression_fit_done",
        n_samples=result.n_samples,
        slope=result.slope,
        intercept=result.intercept,
        r_squared=result.r_squared,
    )
    return result
