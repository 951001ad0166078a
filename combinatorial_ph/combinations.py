"""combinatorial_ph.combinations

Parallel combination table writer.

`write_combinations` fills rows ``row_offset .. row_offset + C(max_n, r) - 1``
of a row-major int table with every r-combination of {0..max_n-1}, in rank
order. The rank range is cut into contiguous, disjoint blocks, one per worker.
A worker unranks the first rank of its block once and then walks forward with
`codec.advance`, so no worker reads what another one wrote.

Each worker's in-progress combination lives in its own row of a scratch arena
allocated once per call, indexed by worker id.
"""

from __future__ import annotations

import logging
from typing import Union

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray

from .binomial import INT64_MAX, binomial, build_binomial_table
from .codec import advance, unrank_into
from .config import resolve_workers
from .errors import DimensionMismatchError, OrderingViolationError, SizeMismatchError

logger = logging.getLogger(__name__)


@njit(parallel=True, cache=True)
def _write_partitioned(out, row_offset, additive, max_n, r, total, table, arena):
    n_workers = arena.shape[0]
    chunk = (total + n_workers - 1) // n_workers
    for worker in prange(n_workers):
        w = np.int64(worker)
        start = w * chunk
        stop = min(start + chunk, total)
        if start < stop:
            comb = arena[w]
            unrank_into(start, max_n, r, table, comb)
            for rank in range(start, stop):
                row = row_offset + rank
                for j in range(r):
                    out[row, j] = comb[j] + additive
                if rank + 1 < stop:
                    advance(comb, max_n)


def write_combinations(
    out: NDArray[np.integer],
    row_offset: int,
    additive: int,
    max_n: int,
    r: int,
    n_workers: Union[str, int] = "auto",
) -> int:
    """Write all r-combinations of {0..max_n-1} into `out`.

    Row ``row_offset + rank`` column j receives ``combination[j] + additive``.
    Columns beyond r are left untouched.

    Parameters
    ----------
    out : NDArray
        Writable 2D integer array with at least C(max_n, r) rows from
        `row_offset` on and at least r columns.
    row_offset : int
        First row to write.
    additive : int
        Constant added to every digit.
    max_n, r : int
        Enumerate r-subsets of max_n elements; requires 1 <= r <= max_n.
    n_workers : "auto" | int
        Number of partitions. Does not affect the result.

    Returns
    -------
    Number of rows written, C(max_n, r).

    Notes
    -----
    All workers have finished when this returns; the returned count is the
    signal that the region may be read.
    """
    if not isinstance(out, np.ndarray) or out.ndim != 2:
        raise DimensionMismatchError(
            f"output region must be a 2D array, got ndim={getattr(out, 'ndim', None)}"
        )
    if not np.issubdtype(out.dtype, np.integer):
        raise TypeError(f"output region must have an integer dtype, got {out.dtype}")
    if r < 1 or r > max_n:
        raise OrderingViolationError(f"need 1 <= r <= max_n, got r={r}, max_n={max_n}")
    if out.shape[1] < r:
        raise SizeMismatchError(f"output region has {out.shape[1]} columns, need at least {r}")
    if row_offset < 0:
        raise OrderingViolationError(f"row_offset must be >= 0, got {row_offset}")

    total = binomial(max_n, r)
    if row_offset + total > out.shape[0]:
        raise OrderingViolationError(
            f"row_offset + C({max_n}, {r}) = {row_offset + total} exceeds "
            f"destination capacity of {out.shape[0]} rows"
        )
    if (max_n - 1) + abs(additive) > np.iinfo(out.dtype).max or total > INT64_MAX:
        raise SizeMismatchError(f"values for max_n={max_n}, additive={additive} do not fit {out.dtype}")

    workers = min(resolve_workers(n_workers), total)
    table = build_binomial_table(max_n, r)
    arena = np.empty((workers, r), dtype=np.int64)

    logger.debug(
        "writing C(%d, %d) = %d combinations with %d workers at row %d",
        max_n, r, total, workers, row_offset,
    )
    _write_partitioned(
        out,
        np.int64(row_offset),
        np.int64(additive),
        np.int64(max_n),
        np.int64(r),
        np.int64(total),
        table,
        arena,
    )
    return total


def combination_table(
    max_n: int,
    r: int,
    n_workers: Union[str, int] = "auto",
) -> NDArray[np.int64]:
    """Allocate and fill a (C(max_n, r), r) table of all r-combinations.

    Returns an empty (0, r) table when r > max_n.
    """
    if r < 1:
        raise OrderingViolationError(f"need r >= 1, got r={r}")
    if r > max_n:
        return np.empty((0, r), dtype=np.int64)
    table = np.empty((binomial(max_n, r), r), dtype=np.int64)
    write_combinations(table, 0, 0, max_n, r, n_workers=n_workers)
    return table
