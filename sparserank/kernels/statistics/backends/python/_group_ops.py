"""NumPy/SciPy reference implementation of per-group sums and counts.

Aggregation is a sparse indicator-matrix product: ``(G x n_obs) @ X``.
"""

from __future__ import annotations

import numpy as np
import scipy.sparse as sparse

__all__ = [
    "sum_groups_dense_py",
    "nnz_groups_dense_py",
    "sum_groups_csc_py",
    "nnz_groups_csc_py",
]


def _indicator(codes: np.ndarray, n_groups: int) -> sparse.csr_matrix:
    """Group membership matrix, shape (n_groups, n_obs)."""
    n_obs = len(codes)
    return sparse.csr_matrix(
        (np.ones(n_obs, dtype=np.float64), (codes, np.arange(n_obs))),
        shape=(n_groups, n_obs),
    )


def _aggregate(X, codes: np.ndarray, n_groups: int, axis: int) -> np.ndarray:
    membership = _indicator(codes, n_groups)
    if axis == 0:
        out = membership @ X
    else:
        out = (X @ membership.T).T
    if sparse.issparse(out):
        out = out.toarray()
    return np.asarray(out, dtype=np.float64)


def sum_groups_dense_py(values, codes, n_groups, axis=0) -> np.ndarray:
    """Per-group sums of a dense matrix (NumPy backend)."""
    return _aggregate(np.asarray(values, dtype=np.float64), codes, n_groups, axis)


def nnz_groups_dense_py(values, codes, n_groups, axis=0) -> np.ndarray:
    """Per-group counts of non-zero entries of a dense matrix (NumPy backend)."""
    nonzero = (np.asarray(values) != 0).astype(np.float64)
    return np.rint(_aggregate(nonzero, codes, n_groups, axis)).astype(np.int64)


def sum_groups_csc_py(data, indices, indptr, n_rows, codes, n_groups, axis=0) -> np.ndarray:
    """Per-group sums of stored CSC entries (NumPy backend)."""
    X = sparse.csc_matrix((data, indices, indptr), shape=(n_rows, len(indptr) - 1))
    return _aggregate(X, codes, n_groups, axis)


def nnz_groups_csc_py(indices, indptr, n_rows, codes, n_groups, axis=0) -> np.ndarray:
    """Per-group counts of stored CSC entries (NumPy backend)."""
    ones = np.ones(len(indices), dtype=np.float64)
    X = sparse.csc_matrix((ones, indices, indptr), shape=(n_rows, len(indptr) - 1))
    return np.rint(_aggregate(X, codes, n_groups, axis)).astype(np.int64)
