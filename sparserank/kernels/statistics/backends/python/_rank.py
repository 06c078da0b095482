"""NumPy/SciPy reference implementation of column-wise mid-ranking.

Produces the same flat tie layout as the Numba backend so the two can be
swapped freely and cross-checked in tests.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import rankdata

__all__ = ["rank_dense_py", "rank_csc_py"]


def _tie_runs(values: np.ndarray) -> np.ndarray:
    """Lengths of runs of equal values with two or more members."""
    _, counts = np.unique(values, return_counts=True)
    return counts[counts > 1]


def _flatten(runs: list[np.ndarray]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    tie_counts = np.array([len(r) for r in runs], dtype=np.int64)
    tie_offsets = np.zeros(len(runs), dtype=np.int64)
    np.cumsum(tie_counts[:-1], out=tie_offsets[1:])
    tie_lengths = (
        np.concatenate(runs).astype(np.int64) if runs else np.zeros(0, dtype=np.int64)
    )
    return tie_lengths, tie_counts, tie_offsets


def rank_dense_py(
    values: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Rank columns of a dense matrix (NumPy backend).

    Returns
    -------
    ranks : np.ndarray
        Mid-ranks, same shape as ``values``.
    tie_lengths, tie_counts, tie_offsets : np.ndarray
        Flat tie layout, see :meth:`RankResult.from_flat_ties`.
    """
    values = np.asarray(values, dtype=np.float64)
    ranks = rankdata(values, method="average", axis=0).astype(np.float64)
    runs = [_tie_runs(values[:, j]) for j in range(values.shape[1])]
    return (ranks, *_flatten(runs))


def rank_csc_py(
    data: np.ndarray,
    indptr: np.ndarray,
    n_rows: int,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Rank stored entries of a CSC matrix (NumPy backend).

    Stored ranks are offset by the size of the background block, which takes
    ranks ``1..n_zero`` and is summarised by ``background_ranks``.

    Returns
    -------
    ranks : np.ndarray
        Mid-ranks aligned with ``data``.
    tie_lengths, tie_counts, tie_offsets : np.ndarray
        Flat tie layout, background run first where present.
    background_ranks : np.ndarray
        ``(n_zero + 1) / 2`` per column.
    """
    data = np.asarray(data, dtype=np.float64)
    n_cols = len(indptr) - 1

    ranks = np.empty(len(data), dtype=np.float64)
    background_ranks = np.empty(n_cols, dtype=np.float64)
    runs = []

    for j in range(n_cols):
        start, end = indptr[j], indptr[j + 1]
        column = data[start:end]
        n_zero = n_rows - len(column)

        background_ranks[j] = (n_zero + 1) / 2
        column_runs = [np.array([n_zero])] if n_zero > 1 else []

        if len(column) > 0:
            ranks[start:end] = rankdata(column, method="average") + n_zero
            column_runs.append(_tie_runs(column))

        runs.append(
            np.concatenate(column_runs) if column_runs else np.zeros(0, dtype=np.int64)
        )

    return (ranks, *_flatten(runs), background_ranks)
