"""Per-group sums and stored-entry counts with automatic backend selection.

Both operations visit stored entries only for sparse input, so the cost is
proportional to nnz. Background entries contribute nothing to either result,
which relies on the background value being 0.
"""

from __future__ import annotations

import numpy as np

from sparserank.types import GroupLabels, SparseMatrix, as_matrix_view
from sparserank.utils import get_logger

from ._backend import get_backend, thread_limit

logger = get_logger(__name__)

__all__ = ["sum_groups", "nnz_groups"]


def _prepare(X, labels, axis: int):
    if axis not in (0, 1):
        raise ValueError(f"axis must be 0 (observations are rows) or 1 (columns), got {axis!r}")
    X = as_matrix_view(X)
    labels = GroupLabels.from_labels(labels)
    labels.check_length(X.shape[axis])
    return X, labels


def sum_groups(
    X,
    labels,
    axis: int = 0,
    *,
    backend: str = "auto",
    n_threads: int = -1,
) -> np.ndarray:
    """Sum values per group for every feature.

    Parameters
    ----------
    X : np.ndarray, scipy sparse matrix, DenseMatrix or SparseMatrix
        Input matrix.
    labels : array-like or GroupLabels
        Group of each observation. Integer ids must form a dense range
        ``[0, G)``; other labels are encoded in category order.
    axis : {0, 1}, default=0
        Axis holding observations. 0: rows are observations and the result
        has one column per matrix column. 1: columns are observations and the
        result has one column per matrix row.
    backend : str, default="auto"
        ``"auto"``/``"numba"`` or ``"python"``.
    n_threads : int, default=-1
        Numba worker threads.

    Returns
    -------
    np.ndarray
        float64 array of shape (n_groups, n_features).

    Raises
    ------
    DimensionMismatchError
        If ``len(labels)`` differs from ``X.shape[axis]``.
    InvalidGroupLabelingError
        If the group ids are not a dense range.

    Examples
    --------
    >>> import numpy as np
    >>> from sparserank.kernels.statistics import sum_groups
    >>> X = np.array([[1.0, 0.0], [2.0, 5.0], [4.0, 1.0]])
    >>> sum_groups(X, np.array([0, 1, 0]))
    array([[5., 1.],
           [2., 5.]])
    """
    X, labels = _prepare(X, labels, axis)
    kernels = get_backend(backend)

    with thread_limit(n_threads):
        if isinstance(X, SparseMatrix):
            return kernels.sum_groups_csc(
                X.data, X.indices, X.indptr, X.n_rows, labels.codes, labels.n_groups, axis
            )
        return kernels.sum_groups_dense(X.values, labels.codes, labels.n_groups, axis)


def nnz_groups(
    X,
    labels,
    axis: int = 0,
    *,
    backend: str = "auto",
    n_threads: int = -1,
) -> np.ndarray:
    """Count non-background entries per group for every feature.

    Sparse input counts stored entries regardless of their value; dense input
    counts entries different from 0. Arguments are as for :func:`sum_groups`.

    Returns
    -------
    np.ndarray
        int64 array of shape (n_groups, n_features).
    """
    X, labels = _prepare(X, labels, axis)
    kernels = get_backend(backend)

    with thread_limit(n_threads):
        if isinstance(X, SparseMatrix):
            return kernels.nnz_groups_csc(
                X.indices, X.indptr, X.n_rows, labels.codes, labels.n_groups, axis
            )
        return kernels.nnz_groups_dense(X.values, labels.codes, labels.n_groups, axis)
