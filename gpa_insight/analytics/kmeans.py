"""
One-dimensional k-means with deterministic seeding and rank relabeling.

fit_kmeans(data, k) returns an immutable KMeansResult. Labels are always
cluster ranks: after fitting, centroids are sorted ascending and every label
is remapped to its centroid's position, so rank 0 is the lowest-valued
cluster regardless of seed order.

Exits:
- converged: every centroid moved by at most tol in the last round
- max_iter_reached: iteration cap hit; still a usable result
- singleton_fallback: fewer points than clusters; each point is its own
  cluster and centroids are the raw values
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from gpa_insight.analytics import descriptive as ds
from gpa_insight.analytics.descriptive import ArrayLike
from gpa_insight.core.exceptions import InvalidClusterCount
from gpa_insight.insight_logging import get_logger

logger = get_logger(__name__)

STATUS_CONVERGED = "converged"
STATUS_MAX_ITER_REACHED = "max_iter_reached"
STATUS_SINGLETON_FALLBACK = "singleton_fallback"

SEEDING_FIRST = "first"
SEEDING_QUANTILE = "quantile"

DEFAULT_MAX_ITER = 100
DEFAULT_TOL = 1e-9


@dataclass(frozen=True)
class KMeansResult:
    """
    Cluster assignment for a 1-D sample.

    centroids: ascending; len(centroids) == k except in singleton fallback,
    where it equals the number of points.
    labels: rank of each input point's cluster, aligned with input order.
    """

    k: int
    centroids: tuple[float, ...]
    labels: tuple[int, ...]
    status: str
    n_iter: int
    inertia: float

    @property
    def converged(self) -> bool:
        return self.status == STATUS_CONVERGED

    def members(self, rank: int) -> list[int]:
        """Input indices assigned to the cluster with the given rank."""
        return [i for i, label in enumerate(self.labels) if label == rank]

    def to_dict(self) -> dict[str, Any]:
        return {
            "k": self.k,
            "centroids": list(self.centroids),
            "labels": list(self.labels),
            "status": self.status,
            "n_iter": self.n_iter,
            "inertia": self.inertia,
        }


def _rank_of(values: np.ndarray) -> np.ndarray:
    """rank[i] = position of values[i] in a stable ascending sort."""
    order = np.argsort(values, kind="stable")
    rank = np.empty(values.size, dtype=np.int64)
    rank[order] = np.arange(values.size)
    return rank


def _initial_centroids(points: np.ndarray, k: int, seeding: str) -> np.ndarray:
    if seeding == SEEDING_FIRST:
        return points[:k].copy()
    if seeding == SEEDING_QUANTILE:
        ordered = np.sort(points)
        n = ordered.size
        idx = [min(n - 1, int((i + 0.5) * n / k)) for i in range(k)]
        return ordered[idx].astype(np.float64)
    raise ValueError(f"unknown seeding {seeding!r}; expected 'first' or 'quantile'")


def _assign(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of nearest centroid by absolute distance; argmin breaks ties to the lowest index."""
    distances = np.abs(points[:, None] - centroids[None, :])
    return np.argmin(distances, axis=1)


def _update(points: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """New centroid per cluster = mean of its points; empty clusters keep their centroid."""
    updated = centroids.copy()
    for i in range(centroids.size):
        cluster_points = points[labels == i]
        if cluster_points.size > 0:
            updated[i] = ds.mean(cluster_points)
    return updated


def fit_kmeans(
    data: ArrayLike,
    k: int = 3,
    *,
    max_iter: int = DEFAULT_MAX_ITER,
    tol: float = DEFAULT_TOL,
    seeding: str = SEEDING_FIRST,
) -> KMeansResult:
    """
    Cluster 1-D data into k groups.

    Seeding "first" takes the first k values in input order, so identical
    input order gives identical output. Seeding "quantile" takes evenly
    spaced order statistics instead. tol=0.0 requires centroids to repeat
    exactly before stopping.

    Raises:
        InvalidClusterCount: k <= 0.
    """
    if k <= 0:
        raise InvalidClusterCount(f"cluster count must be positive, got {k}")
    if max_iter <= 0:
        raise ValueError(f"max_iter must be positive, got {max_iter}")
    if tol < 0:
        raise ValueError(f"tol must be >= 0, got {tol}")

    points = ds.as_vector(data)

    if points.size < k:
        rank = _rank_of(points)
        logger.warning(
            "kmeans_singleton_fallback",
            k=k,
            n_points=int(points.size),
        )
        return KMeansResult(
            k=k,
            centroids=tuple(float(v) for v in np.sort(points, kind="stable")),
            labels=tuple(int(r) for r in rank),
            status=STATUS_SINGLETON_FALLBACK,
            n_iter=0,
            inertia=0.0,
        )

    centroids = _initial_centroids(points, k, seeding)
    status = STATUS_MAX_ITER_REACHED
    n_iter = 0
    while n_iter < max_iter:
        labels = _assign(points, centroids)
        updated = _update(points, labels, centroids)
        n_iter += 1
        shift = float(np.max(np.abs(updated - centroids)))
        centroids = updated
        if shift <= tol:
            status = STATUS_CONVERGED
            break

    # labels must refer to the final centroids for ranks to follow value
    labels = _assign(points, centroids)
    rank = _rank_of(centroids)
    ranked_labels = rank[labels]
    sorted_centroids = np.sort(centroids, kind="stable")
    inertia = ds.total(ds.power(points - sorted_centroids[ranked_labels], 2))

    result = KMeansResult(
        k=k,
        centroids=tuple(float(c) for c in sorted_centroids),
        labels=tuple(int(label) for label in ranked_labels),
        status=status,
        n_iter=n_iter,
        inertia=inertia,
    )
    logger.debug(
        "kmeans_fit_done",
        k=k,
        n_points=int(points.size),
        seeding=seeding,
        status=status,
        n_iter=n_iter,
        centroids=list(result.centroids),
    )
    return result
