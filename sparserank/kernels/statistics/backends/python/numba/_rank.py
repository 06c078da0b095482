"""
Numba backend for column-wise mid-ranking with tie bookkeeping.

Tie run lengths are written into a flat buffer: column ``j`` owns the slot
range starting at ``tie_offsets[j]`` and fills ``tie_counts[j]`` of it.
"""

import numba
import numpy as np
from typing import Tuple


@numba.njit(parallel=True, cache=True)
def rank_dense_numba_kernel(
    values: np.ndarray,
    ranks: np.ndarray,
    tie_lengths: np.ndarray,
    tie_counts: np.ndarray,
    tie_offsets: np.ndarray,
) -> None:
    """Mid-rank every column of a dense matrix (Numba backend, fills outputs).

    Args:
        values: Input matrix, shape (n_rows, n_cols)
        ranks: Output ranks, same shape as values
        tie_lengths: Flat output buffer for tie run lengths
        tie_counts: Output number of tie runs per column
        tie_offsets: Start of each column's slots in tie_lengths
    """
    n_rows, n_cols = values.shape

    for j in numba.prange(n_cols):
        column = values[:, j].copy()
        order = np.argsort(column, kind="mergesort")
        base = tie_offsets[j]
        n_ties = 0

        i = 0
        while i < n_rows:
            v = column[order[i]]
            k = i + 1
            while k < n_rows and column[order[k]] == v:
                k += 1

            # Ranks i+1..k share their mean
            avg = 0.5 * (i + 1 + k)
            for m in range(i, k):
                ranks[order[m], j] = avg

            if k - i > 1:
                tie_lengths[base + n_ties] = k - i
                n_ties += 1
            i = k

        tie_counts[j] = n_ties


@numba.njit(parallel=True, cache=True)
def rank_csc_numba_kernel(
    data: np.ndarray,
    indptr: np.ndarray,
    n_rows: int,
    ranks: np.ndarray,
    tie_lengths: np.ndarray,
    tie_counts: np.ndarray,
    tie_offsets: np.ndarray,
    background_ranks: np.ndarray,
) -> None:
    """Mid-rank the stored entries of every CSC column (Numba backend).

    The background block occupies ranks 1..n_zero, so stored ranks are
    shifted by ``n_zero`` and background entries share ``(n_zero + 1) / 2``.

    Args:
        data: CSC stored values (all above the background value)
        indptr: CSC column pointers
        n_rows: Number of rows
        ranks: Output ranks aligned with data
        tie_lengths: Flat output buffer for tie run lengths
        tie_counts: Output number of tie runs per column
        tie_offsets: Start of each column's slots in tie_lengths
        background_ranks: Output implicit background rank per column
    """
    n_cols = len(indptr) - 1

    for j in numba.prange(n_cols):
        start = indptr[j]
        end = indptr[j + 1]
        nnz = end - start
        n_zero = n_rows - nnz
        base = tie_offsets[j]
        n_ties = 0

        background_ranks[j] = 0.5 * (n_zero + 1)
        if n_zero > 1:
            tie_lengths[base] = n_zero
            n_ties = 1

        if nnz > 0:
            column = data[start:end]
            order = np.argsort(column, kind="mergesort")

            i = 0
            while i < nnz:
                v = column[order[i]]
                k = i + 1
                while k < nnz and column[order[k]] == v:
                    k += 1

                avg = n_zero + 0.5 * (i + 1 + k)
                for m in range(i, k):
                    ranks[start + order[m]] = avg

                if k - i > 1:
                    tie_lengths[base + n_ties] = k - i
                    n_ties += 1
                i = k

        tie_counts[j] = n_ties


def rank_dense_numba(
    values: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Rank columns of a dense matrix (Numba backend).

    Returns:
        (ranks, tie_lengths, tie_counts, tie_offsets)
    """
    values = np.ascontiguousarray(values, dtype=np.float64)
    n_rows, n_cols = values.shape

    # At most n_rows // 2 runs of length >= 2 per column
    slots = n_rows // 2 + 1
    tie_offsets = np.arange(n_cols, dtype=np.int64) * slots
    tie_lengths = np.zeros(n_cols * slots, dtype=np.int64)
    tie_counts = np.zeros(n_cols, dtype=np.int64)
    ranks = np.empty((n_rows, n_cols), dtype=np.float64)

    rank_dense_numba_kernel(values, ranks, tie_lengths, tie_counts, tie_offsets)
    return ranks, tie_lengths, tie_counts, tie_offsets


def rank_csc_numba(
    data: np.ndarray,
    indptr: np.ndarray,
    n_rows: int,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Rank stored entries of a CSC matrix (Numba backend).

    Returns:
        (ranks, tie_lengths, tie_counts, tie_offsets, background_ranks)
    """
    data = np.ascontiguousarray(data, dtype=np.float64)
    indptr = np.ascontiguousarray(indptr, dtype=np.int64)
    n_cols = len(indptr) - 1

    # Column j has at most nnz_j // 2 stored runs plus the background run
    tie_offsets = indptr[:-1] + np.arange(n_cols, dtype=np.int64)
    tie_lengths = np.zeros(len(data) + n_cols, dtype=np.int64)
    tie_counts = np.zeros(n_cols, dtype=np.int64)
    background_ranks = np.empty(n_cols, dtype=np.float64)
    ranks = np.empty(len(data), dtype=np.float64)

    rank_csc_numba_kernel(
        data, indptr, n_rows, ranks, tie_lengths, tie_counts, tie_offsets, background_ranks
    )
    return ranks, tie_lengths, tie_counts, tie_offsets, background_ranks
