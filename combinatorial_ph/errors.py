"""combinatorial_ph.errors

Exception types for precondition failures.

Every check runs in Python before a numba kernel is dispatched, so a failure
never leaves a half-written output region behind. The three precondition
families are kept apart so callers can tell a wrong-sized buffer from a
wrong-rank array from a violated ``a <= b`` relation.
"""

from __future__ import annotations


class ComplexConstructionError(ValueError):
    """Base class for all precondition failures in this package."""


class SizeMismatchError(ComplexConstructionError):
    """An array has the right rank but too few rows/columns (or a bad length)."""


class DimensionMismatchError(ComplexConstructionError):
    """An array has the wrong number of axes."""


class OrderingViolationError(ComplexConstructionError):
    """A required ordering between two quantities does not hold.

    Examples: ``r > max_n``, ``row_offset + count`` past the end of the
    destination, a facet placed after its coface.
    """


class BinomialOverflowError(ComplexConstructionError, OverflowError):
    """Exact binomial arithmetic would not fit in int64."""
