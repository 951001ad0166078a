"""combinatorial_ph.config

Centralised configuration + provenance helpers.
"""

from __future__ import annotations

from typing import Any, Dict, Union

import math
import numbers

import numba


def default_config() -> Dict[str, Any]:
    """Return a *copy* of the default configuration.

    - simplices up to dimension 2 (edges and triangles)
    - no radius truncation
    - one combination worker per numba thread
    - tie-break epsilon derived from the data

    You can override any key in the returned dict.
    """
    return {
        # --- complex ---
        "max_dimension": 2,              # highest simplex dimension D
        "max_ball_radius": math.inf,     # edges with L1 length above this are dropped

        # --- parallelism ---
        "n_workers": "auto",             # "auto" | int >= 1

        # --- global ordering ---
        # None derives epsilon from the smallest gap between distinct
        # filtration values; a float is validated against that gap.
        "tie_break_epsilon": None,
    }


def merge_config(config: Dict[str, Any] | None) -> Dict[str, Any]:
    """Overlay a user config on top of the defaults."""
    cfg = default_config()
    if config:
        unknown = set(config) - set(cfg)
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        cfg.update(config)
    return cfg


def resolve_workers(n_workers: Union[str, int]) -> int:
    """Resolve "auto" into numba's current thread count."""
    if n_workers == "auto":
        return int(numba.get_num_threads())
    if isinstance(n_workers, bool) or not isinstance(n_workers, numbers.Integral):
        raise TypeError(f"n_workers must be 'auto' or an int, got {n_workers!r}")
    n_workers = int(n_workers)
    if n_workers < 1:
        raise ValueError(f"n_workers must be >= 1, got {n_workers}")
    return n_workers


def get_library_versions() -> Dict[str, str]:
    """Collect versions of key libraries for provenance."""
    import importlib.metadata as md

    versions: Dict[str, str] = {}
    for pkg in ["numpy", "scipy", "numba"]:
        try:
            versions[pkg] = md.version(pkg)
        except md.PackageNotFoundError:
            continue
    return versions
