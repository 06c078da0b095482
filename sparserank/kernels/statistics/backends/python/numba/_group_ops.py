"""
Numba backend for per-group sums and stored-entry counts.

``axis=0`` kernels treat rows as observations (output columns = matrix
columns). ``axis=1`` kernels treat columns as observations (output columns =
matrix rows).
"""

import numba
import numpy as np


@numba.njit(parallel=True, cache=True)
def _sum_groups_dense_rows(values, codes, n_groups):
    n_rows, n_cols = values.shape
    out = np.zeros((n_groups, n_cols), dtype=np.float64)
    for j in numba.prange(n_cols):
        for i in range(n_rows):
            out[codes[i], j] += values[i, j]
    return out


@numba.njit(parallel=True, cache=True)
def _sum_groups_dense_cols(values, codes, n_groups):
    n_rows, n_cols = values.shape
    out = np.zeros((n_groups, n_rows), dtype=np.float64)
    for i in numba.prange(n_rows):
        for j in range(n_cols):
            out[codes[j], i] += values[i, j]
    return out


@numba.njit(parallel=True, cache=True)
def _nnz_groups_dense_rows(values, codes, n_groups):
    n_rows, n_cols = values.shape
    out = np.zeros((n_groups, n_cols), dtype=np.int64)
    for j in numba.prange(n_cols):
        for i in range(n_rows):
            if values[i, j] != 0.0:
                out[codes[i], j] += 1
    return out


@numba.njit(parallel=True, cache=True)
def _nnz_groups_dense_cols(values, codes, n_groups):
    n_rows, n_cols = values.shape
    out = np.zeros((n_groups, n_rows), dtype=np.int64)
    for i in numba.prange(n_rows):
        for j in range(n_cols):
            if values[i, j] != 0.0:
                out[codes[j], i] += 1
    return out


@numba.njit(parallel=True, cache=True)
def _sum_groups_csc_rows(data, indices, indptr, codes, n_groups):
    n_cols = len(indptr) - 1
    out = np.zeros((n_groups, n_cols), dtype=np.float64)
    for j in numba.prange(n_cols):
        for k in range(indptr[j], indptr[j + 1]):
            out[codes[indices[k]], j] += data[k]
    return out


@numba.njit(parallel=True, cache=True)
def _nnz_groups_csc_rows(indices, indptr, codes, n_groups):
    n_cols = len(indptr) - 1
    out = np.zeros((n_groups, n_cols), dtype=np.int64)
    for j in numba.prange(n_cols):
        for k in range(indptr[j], indptr[j + 1]):
            out[codes[indices[k]], j] += 1
    return out


# Columns are observations here, so different columns write the same output
# cells; these two stay sequential.
@numba.njit(cache=True)
def _sum_groups_csc_cols(data, indices, indptr, n_rows, codes, n_groups):
    n_cols = len(indptr) - 1
    out = np.zeros((n_groups, n_rows), dtype=np.float64)
    for j in range(n_cols):
        g = codes[j]
        for k in range(indptr[j], indptr[j + 1]):
            out[g, indices[k]] += data[k]
    return out


@numba.njit(cache=True)
def _nnz_groups_csc_cols(indices, indptr, n_rows, codes, n_groups):
    n_cols = len(indptr) - 1
    out = np.zeros((n_groups, n_rows), dtype=np.int64)
    for j in range(n_cols):
        g = codes[j]
        for k in range(indptr[j], indptr[j + 1]):
            out[g, indices[k]] += 1
    return out


def sum_groups_dense_numba(values, codes, n_groups, axis=0):
    """Per-group sums of a dense matrix (Numba backend), shape (n_groups, F)."""
    values = np.ascontiguousarray(values, dtype=np.float64)
    codes = np.ascontiguousarray(codes, dtype=np.int64)
    if axis == 0:
        return _sum_groups_dense_rows(values, codes, n_groups)
    return _sum_groups_dense_cols(values, codes, n_groups)


def nnz_groups_dense_numba(values, codes, n_groups, axis=0):
    """Per-group counts of non-zero entries of a dense matrix (Numba backend)."""
    values = np.ascontiguousarray(values, dtype=np.float64)
    codes = np.ascontiguousarray(codes, dtype=np.int64)
    if axis == 0:
        return _nnz_groups_dense_rows(values, codes, n_groups)
    return _nnz_groups_dense_cols(values, codes, n_groups)


def sum_groups_csc_numba(data, indices, indptr, n_rows, codes, n_groups, axis=0):
    """Per-group sums of stored CSC entries (Numba backend)."""
    data = np.ascontiguousarray(data, dtype=np.float64)
    indices = np.ascontiguousarray(indices, dtype=np.int64)
    indptr = np.ascontiguousarray(indptr, dtype=np.int64)
    codes = np.ascontiguousarray(codes, dtype=np.int64)
    if axis == 0:
        return _sum_groups_csc_rows(data, indices, indptr, codes, n_groups)
    return _sum_groups_csc_cols(data, indices, indptr, n_rows, codes, n_groups)


def nnz_groups_csc_numba(indices, indptr, n_rows, codes, n_groups, axis=0):
    """Per-group counts of stored CSC entries (Numba backend)."""
    indices = np.ascontiguousarray(indices, dtype=np.int64)
    indptr = np.ascontiguousarray(indptr, dtype=np.int64)
    codes = np.ascontiguousarray(codes, dtype=np.int64)
    if axis == 0:
        return _nnz_groups_csc_rows(indices, indptr, codes, n_groups)
    return _nnz_groups_csc_cols(indices, indptr, n_rows, codes, n_groups)
