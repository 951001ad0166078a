"""
Boundary Construction, One Dimension at a Time
==============================================

This module handles:
1. Dimension 1: every vertex pair, its L1 length, truncation at the ball radius
2. Dimension d >= 2: every (d+1)-selection of dimension d-1 simplices, kept
   when the selection is the full facet set of one d-simplex

Each level stores its facets as *local* indices into the level below (vertex
ids for dimension 1). Turning those into global ids is the assembler's job.

Filtration values:
    dimension 1:  f(i, j) = ||x_i - x_j||_1
    dimension d:  f(s)    = max over facets f(facet)

Radius truncation only happens at dimension 1. A higher simplex is built from
surviving facets only and can never be cheaper than its most expensive facet,
so nothing above dimension 1 needs re-checking.
"""

from __future__ import annotations

import logging
from typing import Union

import numpy as np
from numpy.typing import NDArray

from .combinations import combination_table
from .errors import OrderingViolationError, SizeMismatchError
from .schema import DimensionLevel
from .utils import as_point_cloud, pairwise_l1_distances

logger = logging.getLogger(__name__)


def empty_level(dim: int) -> DimensionLevel:
    """A level with no simplices (valid; propagates as zero-length arrays)."""
    return {
        "dim": dim,
        "boundary": np.empty((0, dim + 1), dtype=np.int64),
        "filtration": np.empty(0, dtype=np.float64),
        "vertices": np.empty((0, dim + 1), dtype=np.int64),
    }


# =============================================================================
# Dimension 1
# =============================================================================

def build_edge_level(
    points: NDArray[np.float64],
    max_radius: float,
    *,
    n_workers: Union[str, int] = "auto",
) -> DimensionLevel:
    """
    Build all edges of length <= `max_radius`.

    Parameters
    ----------
    points : NDArray
        Point cloud of shape (n, m).
    max_radius : float
        Largest filtration value kept (inclusive).
    n_workers : "auto" | int
        Passed to the combination writer.

    Returns
    -------
    DimensionLevel with dim=1. Boundary rows are (j, i) vertex pairs with
    j > i, in rank order restricted to the surviving edges.
    """
    X = as_point_cloud(points)
    if not max_radius >= 0:
        raise ValueError(f"max_radius must be >= 0, got {max_radius}")

    n = X.shape[0]
    if n < 2:
        return empty_level(1)

    pairs = combination_table(n, 2, n_workers=n_workers)
    distances = pairwise_l1_distances(X)
    lengths = distances[pairs[:, 0], pairs[:, 1]]

    keep = np.nonzero(lengths <= max_radius)[0]
    edges = pairs[keep]
    logger.debug("dimension 1: %d of %d edges within radius %g", keep.size, pairs.shape[0], max_radius)

    return {
        "dim": 1,
        "boundary": edges,
        "filtration": lengths[keep],
        "vertices": edges.copy(),
    }


# =============================================================================
# Dimension >= 2
# =============================================================================

def _facet_vertex_union(
    facet_vertices: NDArray[np.int64],
    dim: int,
) -> tuple[NDArray[np.bool_], NDArray[np.int64]]:
    """For each candidate, whether its facets span exactly dim+1 vertices, and those vertices.

    `facet_vertices` has shape (c, dim+1, dim): the vertex sets of the chosen
    facets. Distinct dim-vertex facets cover exactly dim+1 vertices only
    when they are all the facets of one simplex.
    """
    c = facet_vertices.shape[0]
    flat = np.sort(facet_vertices.reshape(c, -1), axis=1)[:, ::-1]
    is_new = np.ones(flat.shape, dtype=bool)
    is_new[:, 1:] = flat[:, 1:] != flat[:, :-1]

    valid = is_new.sum(axis=1) == dim + 1
    vertices = flat[valid][is_new[valid]].reshape(-1, dim + 1)
    return valid, vertices


def build_higher_level(
    previous: DimensionLevel,
    dim: int,
    *,
    n_workers: Union[str, int] = "auto",
) -> DimensionLevel:
    """
    Build the dimension-`dim` level from the dimension-(dim-1) level.

    Parameters
    ----------
    previous : DimensionLevel
        Level dim-1, as returned by `build_edge_level` or this function.
    dim : int
        Target dimension, >= 2.

    Returns
    -------
    DimensionLevel with dim=`dim`. Boundary rows hold local indices into
    `previous` in decreasing order; filtration is the max over those facets.

    Notes
    -----
    All C(m, dim+1) selections of the m previous simplices are enumerated as
    candidates. A selection is a simplex only if its facets share dim+1
    vertices in total; every simplex is hit by exactly one selection (its own
    facet set in rank order), so the result has no duplicates.
    """
    if dim < 2:
        raise OrderingViolationError(f"higher levels start at dimension 2, got {dim}")
    if previous["dim"] != dim - 1:
        raise OrderingViolationError(
            f"level {dim} must be built from level {dim - 1}, got level {previous['dim']}"
        )

    prev_filtration = previous["filtration"]
    prev_vertices = previous["vertices"]
    m = prev_filtration.shape[0]
    if prev_vertices.shape != (m, dim):
        raise SizeMismatchError(
            f"level {dim - 1} vertices have shape {prev_vertices.shape}, expected {(m, dim)}"
        )
    if m < dim + 1:
        logger.debug("dimension %d: only %d facets available, level is empty", dim, m)
        return empty_level(dim)

    candidates = combination_table(m, dim + 1, n_workers=n_workers)
    valid, vertices = _facet_vertex_union(prev_vertices[candidates], dim)
    facets = candidates[valid]
    filtration = prev_filtration[facets].max(axis=1)
    logger.debug("dimension %d: %d simplices from %d candidates", dim, facets.shape[0], candidates.shape[0])

    return {
        "dim": dim,
        "boundary": facets,
        "filtration": filtration,
        "vertices": vertices,
    }
