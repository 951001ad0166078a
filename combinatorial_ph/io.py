"""combinatorial_ph.io

JSON (de)serialisation helpers for assembled complexes.

The outputs of this library are plain dicts of numpy arrays. We still provide helpers to:
- convert numpy arrays to JSONable lists
- save complexes to disk with provenance metadata attached
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import json

import numpy as np

from .config import get_library_versions
from .utils import to_jsonable


def complex_to_json(result: Dict[str, Any], indent: int = 2) -> str:
    """Convert a complex dict to a JSON string (adds library versions)."""
    payload = dict(result)
    payload.setdefault("library_versions", get_library_versions())
    return json.dumps(to_jsonable(payload), indent=indent, ensure_ascii=False)


def save_complex(result: Dict[str, Any], path: str | Path, indent: int = 2) -> Path:
    """Save a complex to JSON on disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(complex_to_json(result, indent=indent), encoding="utf-8")
    return path


def load_complex(path: str | Path) -> Dict[str, Any]:
    """Read a complex written by `save_complex`, restoring the numpy arrays."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    D = int(data.get("max_dimension", 0))
    widths = {"boundary": 2 * (D + 1), "simplices": D + 1, "top_boundary": D + 1}
    for key, width in widths.items():
        if key in data:
            data[key] = np.asarray(data[key], dtype=np.int64).reshape(-1, width)
    if "dimensions" in data:
        data["dimensions"] = np.asarray(data["dimensions"], dtype=np.int64)
    if "filtration" in data:
        data["filtration"] = np.asarray(data["filtration"], dtype=np.float64)
    return data
