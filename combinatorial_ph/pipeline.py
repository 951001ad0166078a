"""
Main Pipeline: Point Cloud -> Filtration-Sorted Boundary Table
==============================================================

    points --(L1, radius)--> edges --> triangles --> ... --> D-simplices
                                                               |
                                     global sort + re-index <--+

Each level is a function of the arrays returned for the level below, so
the phase order is carried by the data, not by call order alone.
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, Dict, List, Optional

from numpy.typing import ArrayLike

from .assembly import assemble_complex
from .boundary import build_edge_level, build_higher_level
from .config import merge_config, resolve_workers
from .errors import OrderingViolationError
from .schema import ComplexResult, DimensionLevel
from .utils import as_point_cloud

logger = logging.getLogger(__name__)


def build_levels(
    points: ArrayLike,
    max_dimension: int,
    max_ball_radius: float,
    *,
    n_workers: Any = "auto",
) -> List[DimensionLevel]:
    """Build levels 1..max_dimension bottom-up, without global sorting."""
    level = build_edge_level(points, max_ball_radius, n_workers=n_workers)
    levels = [level]
    for dim in range(2, max_dimension + 1):
        level = build_higher_level(level, dim, n_workers=n_workers)
        levels.append(level)
    return levels


def build_filtration_complex(
    points: ArrayLike,
    max_dimension: Optional[int] = None,
    max_ball_radius: Optional[float] = None,
    *,
    config: Optional[Dict[str, Any]] = None,
) -> ComplexResult:
    """
    Build the filtration-sorted complex of a point cloud.

    This is the main entry point.

    Parameters
    ----------
    points : array-like
        Finite (n, m) array of reals, n >= 1.
    max_dimension : int, optional
        Highest simplex dimension D >= 1 (overrides config["max_dimension"]).
    max_ball_radius : float, optional
        Edge truncation radius >= 0 (overrides config["max_ball_radius"]).
    config : dict, optional
        Overrides for `default_config()`.

    Returns
    -------
    ComplexResult containing:
        - boundary: (S, 2*(D+1)) facet ids in global filtration order
        - filtration / dimensions: (n+S,) with the n vertices first
        - simplices, top_boundary, counts, tie_break_epsilon, config
    """
    cfg = merge_config(config)
    if max_dimension is not None:
        cfg["max_dimension"] = max_dimension
    if max_ball_radius is not None:
        cfg["max_ball_radius"] = max_ball_radius

    D = cfg["max_dimension"]
    radius = float(cfg["max_ball_radius"])
    if isinstance(D, bool) or not isinstance(D, numbers.Integral):
        raise TypeError(f"max_dimension must be an int, got {D!r}")
    D = int(D)
    cfg["max_dimension"] = D
    if D < 1:
        raise OrderingViolationError(f"max_dimension must be >= 1, got {D}")
    if not radius >= 0:
        raise ValueError(f"max_ball_radius must be >= 0, got {radius}")

    X = as_point_cloud(points)
    n_workers = resolve_workers(cfg["n_workers"])

    levels = build_levels(X, D, radius, n_workers=n_workers)
    result = assemble_complex(X.shape[0], levels, tie_break_epsilon=cfg["tie_break_epsilon"])
    result["config"] = cfg

    logger.info(
        "built complex: n=%d, D=%d, radius=%g, simplices per dimension=%s",
        X.shape[0], D, radius, result["counts"],
    )
    return result
