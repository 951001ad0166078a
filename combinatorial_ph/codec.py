"""combinatorial_ph.codec

Ranking scheme for r-combinations of {0, ..., max_n-1}.

A combination is stored with strictly decreasing digits c[0] > ... > c[r-1]
and its rank is the combinatorial-number-system value

    rank = C(c[0], r) + C(c[1], r-1) + ... + C(c[r-1], 1)

Ranks 0, 1, 2, ... then visit the combinations in lexicographic order of the
decreasing tuples: (1, 0), (2, 0), (2, 1), (3, 0), ... for r = 2.

Two views of that one enumeration live here:

- `unrank` jumps straight to the combination of a given rank
- `successor` steps from one combination to the next

The combination writer unranks once per worker and then only steps, so the
two must agree for every pair of adjacent ranks.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from numba import njit
from numpy.typing import ArrayLike, NDArray

from .binomial import binomial, build_binomial_table
from .errors import DimensionMismatchError, OrderingViolationError, SizeMismatchError


# =============================================================================
# Kernels (in place, shared with the combination writer)
# =============================================================================

@njit(cache=True)
def unrank_into(rank, max_n, r, table, out):
    """Write the combination of `rank` into out[:r].

    Slot by slot, take the largest digit v with C(v, k) <= remaining rank,
    where k is the number of digits still to place. C(v, k) is 0 for v < k,
    so the scan always stops at or above k - 1.
    """
    remaining = rank
    upper = max_n - 1
    for slot in range(r):
        k = r - slot
        v = upper
        while table[k - 1, v] > remaining:
            v -= 1
        out[slot] = v
        remaining -= table[k - 1, v]
        upper = v - 1


@njit(cache=True)
def advance(comb, max_n):
    """Step `comb` to its successor in place; False if it was the last one."""
    r = comb.shape[0]
    for pos in range(r - 1, -1, -1):
        if pos == 0:
            limit = max_n
        else:
            limit = comb[pos - 1]
        if comb[pos] + 1 < limit:
            comb[pos] += 1
            for low in range(pos + 1, r):
                comb[low] = r - 1 - low
            return True
    return False


# =============================================================================
# Public wrappers
# =============================================================================

def unrank(
    rank: int,
    max_n: int,
    r: int,
    table: Optional[NDArray[np.int64]] = None,
) -> NDArray[np.int64]:
    """Return the combination with the given rank.

    Parameters
    ----------
    rank : int
        0 <= rank < C(max_n, r).
    max_n : int
        Digits are drawn from 0..max_n-1.
    r : int
        Number of digits.
    table : NDArray, optional
        Binomial table from `build_binomial_table(max_n, r)` (or larger).
        Built on demand if omitted.

    Returns
    -------
    int64 array of shape (r,), strictly decreasing.
    """
    if r < 1 or r > max_n:
        raise OrderingViolationError(f"need 1 <= r <= max_n, got r={r}, max_n={max_n}")
    total = binomial(max_n, r)
    if not 0 <= rank < total:
        raise OrderingViolationError(f"rank {rank} outside [0, C({max_n}, {r}) = {total})")

    if table is None:
        table = build_binomial_table(max_n, r)
    elif table.ndim != 2:
        raise DimensionMismatchError(f"binomial table must be 2D, got ndim={table.ndim}")
    elif table.shape[0] < r or table.shape[1] < max_n:
        raise SizeMismatchError(
            f"binomial table of shape {table.shape} too small for max_n={max_n}, r={r}"
        )

    out = np.empty(r, dtype=np.int64)
    unrank_into(np.int64(rank), np.int64(max_n), np.int64(r), table, out)
    return out


def successor(combination: ArrayLike, max_n: Optional[int] = None) -> NDArray[np.int64]:
    """Return the combination following `combination` (input is not modified).

    With `max_n` given, the last combination of {0..max_n-1} has no
    successor and `OrderingViolationError` is raised. Without it the leading
    digit is unbounded.
    """
    comb = np.array(combination, dtype=np.int64)
    if comb.ndim != 1:
        raise DimensionMismatchError(f"combination must be 1D, got ndim={comb.ndim}")
    if comb.size == 0:
        raise SizeMismatchError("combination must have at least one digit")
    if np.any(comb[:-1] <= comb[1:]) or comb[-1] < 0:
        raise OrderingViolationError(
            f"combination digits must be strictly decreasing and non-negative, got {comb.tolist()}"
        )

    bound = int(comb[0]) + 2 if max_n is None else int(max_n)
    if comb[0] >= bound:
        raise OrderingViolationError(f"digit {int(comb[0])} not below max_n={bound}")
    if not advance(comb, np.int64(bound)):
        raise OrderingViolationError(
            f"{comb.tolist()} is the last {comb.size}-combination of {bound} elements"
        )
    return comb
