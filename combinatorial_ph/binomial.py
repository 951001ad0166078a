"""combinatorial_ph.binomial

Exact binomial coefficients on an (n, k) grid.

The table is the lookup used by `codec.unrank`: ``table[k, n] == C(n, k + 1)``
for ``0 <= k < max_k`` and ``0 <= n < max_n``. Cells are independent, so the
grid is filled by one flat `prange` loop.

Coefficients are int64. Callers must bound n and k so that the running
product of the multiplicative formula fits; `build_binomial_table` refuses
grids where it would not rather than returning wrapped values.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray

from .errors import BinomialOverflowError, OrderingViolationError

logger = logging.getLogger(__name__)

INT64_MAX = int(np.iinfo(np.int64).max)


@njit(cache=True)
def binomial_kernel(n, k):
    """C(n, k) by multiply-then-divide in increasing i.

    After step i the running value is C(n - k + i, i), so every division is exact.
    """
    if k > n or k < 0:
        return 0
    result = 1
    for i in range(1, k + 1):
        result = result * (n - k + i) // i
    return result


@njit(parallel=True, cache=True)
def _fill_binomial_table(table):
    max_k, max_n = table.shape
    for cell in prange(max_k * max_n):
        c = np.int64(cell)
        k = c // max_n
        n = c - k * max_n
        table[k, n] = binomial_kernel(n, k + 1)


def check_binomial_range(max_n: int, max_k: int) -> None:
    """Raise if some C(n, k) on the grid would overflow int64 mid-computation.

    For fixed k the largest intermediate, C(n, k) * k, grows with n, so only
    n = max_n - 1 needs checking.
    """
    n = max_n - 1
    for k in range(1, max_k + 1):
        if math.comb(n, k) * k > INT64_MAX:
            raise BinomialOverflowError(
                f"C({n}, {k}) cannot be computed exactly in int64; "
                f"reduce the number of points or the maximum dimension"
            )


def binomial(n: int, k: int) -> int:
    """Exact C(n, k) with the same formula the table uses (0 when k > n)."""
    if n < 0 or k < 0:
        raise ValueError(f"binomial arguments must be non-negative, got n={n}, k={k}")
    check_binomial_range(n + 1, k)
    return int(binomial_kernel(n, k))


def build_binomial_table(max_n: int, max_k: int) -> NDArray[np.int64]:
    """Build the (max_k, max_n) table with ``table[k, n] = C(n, k + 1)``.

    Parameters
    ----------
    max_n : int
        Number of columns; n ranges over 0..max_n-1.
    max_k : int
        Number of rows; the row k holds C(., k + 1).

    Returns
    -------
    int64 array, read-only afterwards by convention.
    """
    if max_n < 1 or max_k < 1:
        raise OrderingViolationError(
            f"binomial table needs max_n >= 1 and max_k >= 1, got max_n={max_n}, max_k={max_k}"
        )
    check_binomial_range(max_n, max_k)

    table = np.empty((max_k, max_n), dtype=np.int64)
    _fill_binomial_table(table)
    logger.debug("binomial table built: shape=%s", table.shape)
    return table
