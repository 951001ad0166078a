"""combinatorial_ph.diagnostics

Consistency checks for an assembled complex.

These are the properties a boundary-matrix reduction relies on:

- monotone: every simplex enters no earlier than each of its facets
- ordered: every facet id refers to a vertex or an earlier row
- sorted: the filtration vector is non-decreasing
- shapes: all arrays agree on the number of simplices
- dimensions: a d-simplex has exactly d+1 facets, each of dimension d-1

Intended for tests and for sanity checks on user-supplied levels; the
pipeline itself never needs them.
"""

from __future__ import annotations

from typing import Dict

import numpy as np

from .assembly import level_counts
from .errors import OrderingViolationError
from .schema import SENTINEL, ComplexResult


def verify_complex(result: ComplexResult, *, strict: bool = False) -> Dict[str, bool]:
    """Run all checks; with `strict=True` raise on the first failing one."""
    n = int(result["num_vertices"])
    boundary = result["boundary"]
    filtration = result["filtration"]
    dimensions = result["dimensions"]
    total = boundary.shape[0]

    checks: Dict[str, bool] = {}
    checks["shapes"] = (
        filtration.shape == (n + total,)
        and dimensions.shape == (n + total,)
        and result["simplices"].shape[0] == total
        and boundary.shape[1] == 2 * (int(result["max_dimension"]) + 1)
        and level_counts(result) == list(result["counts"])
    )

    present = boundary != SENTINEL
    row_ids = n + np.arange(total)[:, None]
    safe = np.where(present, boundary, 0)

    checks["ordered"] = bool(np.all(~present | ((boundary >= 0) & (boundary < row_ids))))
    checks["sorted"] = bool(np.all(np.diff(filtration[n:]) >= 0))

    if checks["ordered"] and checks["shapes"]:
        facet_filtration = np.where(present, filtration[safe], -np.inf)
        checks["monotone"] = bool(np.all(facet_filtration.max(axis=1, initial=-np.inf) <= filtration[n:]))

        own_dim = dimensions[n:]
        facet_dim = np.where(present, dimensions[safe], own_dim[:, None] - 1)
        checks["dimensions"] = bool(
            np.all(present.sum(axis=1) == own_dim + 1) and np.all(facet_dim == own_dim[:, None] - 1)
        )
    else:
        checks["monotone"] = False
        checks["dimensions"] = False

    if strict:
        for name, ok in checks.items():
            if not ok:
                raise OrderingViolationError(f"complex check failed: {name}")
    return checks
