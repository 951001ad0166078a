"""combinatorial_ph.utils

Small utilities used throughout the codebase.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

from .errors import DimensionMismatchError, SizeMismatchError


def as_point_cloud(points: Any) -> NDArray[np.float64]:
    """Validate and convert a point cloud into a float64 (n, m) array."""
    X = np.asarray(points, dtype=np.float64)
    if X.ndim != 2:
        raise DimensionMismatchError(
            f"point cloud must be a 2D array (n points x m coordinates), got ndim={X.ndim}"
        )
    if X.shape[0] < 1:
        raise SizeMismatchError("point cloud must contain at least one point")
    if not np.all(np.isfinite(X)):
        raise ValueError("point cloud contains non-finite coordinates")
    return X


def pairwise_l1_distances(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Full (n, n) matrix of L1 (city-block) distances, 0 diagonal."""
    return cdist(points, points, metric="cityblock")


def to_jsonable(obj: Any) -> Any:
    """Recursively convert numpy types into JSON-friendly python types."""
    if isinstance(obj, (str, int, float, bool)) or obj is None:
        return obj
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, np.ndarray):
        return to_jsonable(obj.tolist())
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, (np.integer,)):
        return int(obj)
    # fall back to string
    return str(obj)
