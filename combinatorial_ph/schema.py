"""combinatorial_ph.schema

Lightweight data-model definitions used across the package.

We keep these as plain TypedDicts / dicts so that:
- results are JSON-serialisable with minimal fuss (see `io.py`)
- the library stays friendly to notebooks/scripts

Conventions:
- vertices are the point indices 0..n-1 and are never stored as rows
- combinations are stored with strictly decreasing digits
- in assembled output, boundary row i is the simplex with global id n + i
"""

from __future__ import annotations

from typing import Any, Dict, List, TypedDict

import numpy as np
from numpy.typing import NDArray


# Fill value for unused facet / vertex slots.
SENTINEL = -1


class DimensionLevel(TypedDict):
    """All simplices of one dimension, before global reordering."""
    dim: int
    boundary: NDArray[np.int64]        # (count, dim+1) facet ids, local to level dim-1 (vertex ids for dim 1)
    filtration: NDArray[np.float64]    # (count,)
    vertices: NDArray[np.int64]        # (count, dim+1) vertex ids, decreasing


class ComplexResult(TypedDict, total=False):
    """Filtration-sorted complex ready for a boundary-matrix reduction."""
    num_vertices: int
    max_dimension: int
    boundary: NDArray[np.int64]        # (S, 2*(D+1)) global facet ids, SENTINEL padded
    filtration: NDArray[np.float64]    # (n+S,) vertices first (all 0)
    dimensions: NDArray[np.int64]      # (n+S,)
    simplices: NDArray[np.int64]       # (S, D+1) vertex sets in boundary row order
    top_boundary: NDArray[np.int64]    # dimension-D facet table, local ids, unsorted
    counts: List[int]                  # simplices per dimension 0..D
    tie_break_epsilon: float
    config: Dict[str, Any]


Config = Dict[str, Any]
