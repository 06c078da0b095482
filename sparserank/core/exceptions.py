"""Custom exceptions for sparserank.

This module defines all custom exceptions used throughout the package.
Structural errors (dimensions, labels, sparse layout) are fatal and abort the
whole computation. Degenerate statistics are reported per cell with a warning.
"""


class SparseRankError(Exception):
    """Base exception class for all sparserank errors."""

    pass


class DimensionMismatchError(SparseRankError, ValueError):
    """Raised when matrix and label dimensions disagree.

    This exception is raised before any computation starts, e.g. when the
    label vector length differs from the observation count on the chosen
    axis, or when a matrix has no rows or no columns.

    Examples
    --------
    >>> from sparserank.core.exceptions import DimensionMismatchError
    >>> raise DimensionMismatchError("len(labels)=5 but the matrix has 6 observations")
    """

    pass


class InvalidGroupLabelingError(SparseRankError, ValueError):
    """Raised when group ids do not form a dense ``[0, G)`` range.

    Also raised for groups with zero observations and for labels that are
    not one-dimensional.
    """

    pass


class SparsityInvariantError(SparseRankError, ValueError):
    """Raised when a sparse matrix breaks the CSC storage invariants.

    A stored entry equal to the background value, row indices that are not
    strictly increasing within a column, or a stored value below the
    background value all corrupt the implicit background rank.
    """

    pass


class BackendError(SparseRankError):
    """Raised when an unknown computational backend is requested."""

    pass


class DegenerateStatisticWarning(UserWarning):
    """Issued when some (group, feature) cells have zero variance.

    The affected p-values are NaN; all other cells are computed normally.
    """

    pass
