"""
Descriptive statistics and elementwise vector helpers.

Thin numpy layer used by the regression and clustering modules. Empty input
is a policy case, not an error: mean and population_std return 0.0.
Elementwise operations require equal-length inputs and raise
DimensionMismatch otherwise.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from gpa_insight.core.exceptions import DimensionMismatch

ArrayLike = Union[Sequence[float], np.ndarray]


def as_vector(values: ArrayLike) -> np.ndarray:
    """Return values as a 1-D float64 array."""
    return np.asarray(values, dtype=np.float64).reshape(-1)


def _pair(a: ArrayLike, b: ArrayLike, operation: str) -> tuple[np.ndarray, np.ndarray]:
    va, vb = as_vector(a), as_vector(b)
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatch(va.shape[0], vb.shape[0], operation)
    return va, vb


def mean(values: ArrayLike) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    v = as_vector(values)
    if v.size == 0:
        return 0.0
    return float(np.mean(v))


def population_std(values: ArrayLike) -> float:
    """Population standard deviation (ddof=0); 0.0 for an empty sequence."""
    v = as_vector(values)
    if v.size == 0:
        return 0.0
    return float(np.std(v, ddof=0))


def total(values: ArrayLike) -> float:
    return float(np.sum(as_vector(values)))


def subtract(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    va, vb = _pair(a, b, "subtract")
    return va - vb


def multiply(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    va, vb = _pair(a, b, "multiply")
    return va * vb


def power(values: ArrayLike, exponent: float) -> np.ndarray:
    return np.power(as_vector(values), exponent)


def dot(a: ArrayLike, b: ArrayLike) -> float:
    """Sum of elementwise products; 0.0 for two empty sequences."""
    va, vb = _pair(a, b, "dot")
    return float(np.dot(va, vb))
