"""
Complex Assembly: One Global Order for All Dimensions
=====================================================

Input: the per-dimension levels 1..D from `boundary.py`.
Output: the `ComplexResult` consumed by a boundary-matrix reduction.

Steps:
1. Give every non-vertex simplex a provisional global id (dimension by
   dimension, after the n vertices) and shift each level's local facet ids
   to the provisional ids of the level below.
2. Concatenate the filtration values of dimensions 1..D.
3. Add a tie-break offset that grows with dimension (0 for edges,
   epsilon * 2**(d-2) for d >= 2), so a simplex sorts after a facet with
   the same filtration value.
4. Stable argsort of the augmented values. The true values in final order
   are gathered through the permutation.
5-6. Prepend the vertices (filtration 0, dimension 0, ids unchanged).
7. Map every facet id through the permutation, left-justify it into a row of
   width 2*(D+1) padded with -1, and reorder the rows.

Global ordering guarantee: for boundary row i (global id n + i) every facet
id is < n + i.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .errors import DimensionMismatchError, OrderingViolationError, SizeMismatchError
from .schema import SENTINEL, ComplexResult, DimensionLevel

logger = logging.getLogger(__name__)


# =============================================================================
# Tie-break augmentation
# =============================================================================

def tie_break_offsets(dimensions: ArrayLike, epsilon: float) -> NDArray[np.float64]:
    """Per-simplex offset: 0 for d <= 1, epsilon * 2**(d-2) for d >= 2."""
    dims = np.asarray(dimensions, dtype=np.int64)
    offsets = np.zeros(dims.shape, dtype=np.float64)
    higher = dims >= 2
    offsets[higher] = epsilon * np.exp2(dims[higher] - 2)
    return offsets


def resolve_tie_break_epsilon(
    filtration: NDArray[np.float64],
    max_dimension: int,
    epsilon: Optional[float] = None,
) -> float:
    """Pick or validate the tie-break epsilon for a set of filtration values.

    The largest offset, epsilon * 2**(D-2), must stay strictly below half of
    the smallest positive gap between distinct values; then adding offsets
    (with rounding) cannot move a value past the next distinct one.
    With `epsilon=None`, a quarter of the gap is used for the largest offset.
    """
    if max_dimension < 2:
        return 0.0

    top = 2.0 ** (max_dimension - 2)
    distinct = np.unique(filtration)
    gaps = np.diff(distinct)
    min_gap = float(gaps.min()) if gaps.size else None

    if epsilon is None:
        if min_gap is None:
            return 1.0
        return min_gap / (4.0 * top)

    epsilon = float(epsilon)
    if not np.isfinite(epsilon) or epsilon <= 0:
        raise ValueError(f"tie_break_epsilon must be finite and > 0, got {epsilon}")
    if min_gap is not None and epsilon * top >= min_gap / 2:
        raise OrderingViolationError(
            f"tie_break_epsilon={epsilon:g} gives a dimension-{max_dimension} offset of "
            f"{epsilon * top:g}, which is not below half the smallest filtration gap ({min_gap:g})"
        )
    return epsilon


# =============================================================================
# Assembly
# =============================================================================

def _check_levels(levels: Sequence[DimensionLevel]) -> None:
    for expected, level in enumerate(levels, start=1):
        if level["dim"] != expected:
            raise OrderingViolationError(
                f"levels must be ordered by dimension 1..D; position {expected} holds dimension {level['dim']}"
            )
        boundary = level["boundary"]
        count = level["filtration"].shape[0]
        if boundary.ndim != 2:
            raise DimensionMismatchError(f"dimension {expected} boundary must be 2D, got ndim={boundary.ndim}")
        if boundary.shape != (count, expected + 1):
            raise SizeMismatchError(
                f"dimension {expected} boundary has shape {boundary.shape}, expected {(count, expected + 1)}"
            )


def assemble_complex(
    num_vertices: int,
    levels: Sequence[DimensionLevel],
    tie_break_epsilon: Optional[float] = None,
) -> ComplexResult:
    """
    Merge per-dimension levels into one filtration-sorted complex.

    Parameters
    ----------
    num_vertices : int
        Number of points n; vertex ids are 0..n-1.
    levels : sequence of DimensionLevel
        Levels for dimensions 1..D, in order (empty levels allowed).
    tie_break_epsilon : float, optional
        See `resolve_tie_break_epsilon`.

    Returns
    -------
    ComplexResult (without "config"; the pipeline adds it).
    """
    if not levels:
        raise SizeMismatchError("at least the dimension-1 level is required")
    _check_levels(levels)

    n = int(num_vertices)
    D = len(levels)
    counts = [int(level["filtration"].shape[0]) for level in levels]

    # Step 1: provisional ids. Level d occupies [starts[d-1], starts[d]).
    starts = [n]
    for c in counts:
        starts.append(starts[-1] + c)
    total = starts[-1] - n

    # Step 2
    filtration = np.concatenate([np.asarray(level["filtration"], dtype=np.float64) for level in levels])
    dims = np.repeat(np.arange(1, D + 1, dtype=np.int64), counts)

    # Steps 3-4
    epsilon = resolve_tie_break_epsilon(filtration, D, tie_break_epsilon)
    if D >= 2:
        augmented = filtration + tie_break_offsets(dims, epsilon)
    else:
        augmented = filtration
    perm = np.argsort(augmented, kind="stable")
    sorted_filtration = filtration[perm]

    # provisional id -> final id, vertices fixed
    position = np.empty(total, dtype=np.int64)
    position[perm] = np.arange(total, dtype=np.int64)
    final_id = np.concatenate([np.arange(n, dtype=np.int64), n + position])

    # Step 7
    width = 2 * (D + 1)
    boundary = np.full((total, width), SENTINEL, dtype=np.int64)
    simplices = np.full((total, D + 1), SENTINEL, dtype=np.int64)
    for d, level in enumerate(levels, start=1):
        lo, hi = starts[d - 1] - n, starts[d] - n
        facets = np.asarray(level["boundary"], dtype=np.int64)
        if d >= 2:
            facets = facets + starts[d - 2]
        boundary[lo:hi, : d + 1] = final_id[facets]
        simplices[lo:hi, : d + 1] = level["vertices"]
    boundary = boundary[perm]
    simplices = simplices[perm]

    # Steps 5-6
    out_filtration = np.concatenate([np.zeros(n, dtype=np.float64), sorted_filtration])
    out_dimensions = np.concatenate([np.zeros(n, dtype=np.int64), dims[perm]])

    logger.debug("assembled %d simplices above %d vertices (epsilon=%g)", total, n, epsilon)

    result: ComplexResult = {
        "num_vertices": n,
        "max_dimension": D,
        "boundary": boundary,
        "filtration": out_filtration,
        "dimensions": out_dimensions,
        "simplices": simplices,
        "top_boundary": np.asarray(levels[-1]["boundary"], dtype=np.int64),
        "counts": [n] + counts,
        "tie_break_epsilon": epsilon,
    }
    return result


def level_counts(result: ComplexResult) -> List[int]:
    """Simplices per dimension 0..D, recomputed from the dimension vector."""
    return np.bincount(result["dimensions"], minlength=result["max_dimension"] + 1).tolist()
