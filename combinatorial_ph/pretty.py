"""Pretty-print helpers for assembled complexes.

Printing stays out of the core algorithms; everything here only reads a
`ComplexResult`.
"""

from __future__ import annotations

from typing import Any, List, Mapping

import numpy as np

from .schema import SENTINEL


_DIM_NAME = {0: "vertices", 1: "edges", 2: "triangles", 3: "tetrahedra"}


def _dim_label(d: int) -> str:
    return _DIM_NAME.get(d, f"{d}-simplices")


def format_rows(result: Mapping[str, Any], top_n: int = 10) -> List[str]:
    """One line per boundary row: global id, dimension, filtration, facets."""
    n = int(result["num_vertices"])
    boundary = result["boundary"]
    filtration = result["filtration"]
    dimensions = result["dimensions"]

    lines: List[str] = []
    for i in range(min(top_n, boundary.shape[0])):
        facets = [int(f) for f in boundary[i] if f != SENTINEL]
        lines.append(
            f"{n + i:>6}  dim={int(dimensions[n + i])}  f={float(filtration[n + i]):.4f}  facets={facets}"
        )
    return lines


def print_complex_summary(result: Mapping[str, Any], top_n: int = 10) -> None:
    """Pretty-print a lightweight summary."""
    counts = list(result.get("counts", []))
    filtration = np.asarray(result["filtration"])
    n = int(result["num_vertices"])

    print(f"Complex up to dimension {result.get('max_dimension')}")
    for d, c in enumerate(counts):
        print(f"  {_dim_label(d):<12} {c}")
    if filtration.size > n:
        print(f"  filtration:  [{filtration[n]:.4f}, {filtration[-1]:.4f}]")
    else:
        print("  filtration:  (no simplices above the vertices)")
    print(f"  tie-break ε: {result.get('tie_break_epsilon', 0.0):.3g}")

    rows = format_rows(result, top_n=top_n)
    if rows:
        print("\nFIRST ROWS")
        print("-" * 72)
        for line in rows:
            print(line)
