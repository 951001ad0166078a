"""combinatorial_ph

Filtration-sorted boundary tables for persistent homology, built from a point
cloud with exact combinatorics and parallel combination enumeration.

The public API is intentionally small:

- default_config
- build_filtration_complex
- build_binomial_table, unrank, successor
- write_combinations, combination_table
- build_edge_level, build_higher_level, assemble_complex, tie_break_offsets
- verify_complex
- complex_to_json, save_complex, load_complex, print_complex_summary
"""

import logging

from .config import default_config
from .binomial import binomial, build_binomial_table
from .codec import unrank, successor
from .combinations import write_combinations, combination_table
from .boundary import build_edge_level, build_higher_level
from .assembly import assemble_complex, tie_break_offsets
from .pipeline import build_filtration_complex
from .diagnostics import verify_complex
from .io import complex_to_json, save_complex, load_complex
from .pretty import print_complex_summary
from .errors import (
    ComplexConstructionError,
    SizeMismatchError,
    DimensionMismatchError,
    OrderingViolationError,
    BinomialOverflowError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "default_config",
    "binomial",
    "build_binomial_table",
    "unrank",
    "successor",
    "write_combinations",
    "combination_table",
    "build_edge_level",
    "build_higher_level",
    "assemble_complex",
    "tie_break_offsets",
    "build_filtration_complex",
    "verify_complex",
    "complex_to_json",
    "save_complex",
    "load_complex",
    "print_complex_summary",
    "ComplexConstructionError",
    "SizeMismatchError",
    "DimensionMismatchError",
    "OrderingViolationError",
    "BinomialOverflowError",
]
