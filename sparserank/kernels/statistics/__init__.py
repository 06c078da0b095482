"""Statistical computing kernels for rank-sum testing.

This package provides the sparse-aware building blocks of the one-vs-rest
Wilcoxon rank-sum test, with Numba and NumPy/SciPy backends.

Available Functions:
    - rank_matrix: column-wise mid-ranks with tie runs
    - sum_groups / nnz_groups: per-group sums and non-background counts
    - compute_ustat: U statistics from ranks (implicit background included)
    - compute_zscore / compute_pval: tie-corrected normal approximation

All functions support:
    - Dense arrays and sparse matrices (converted to CSC)
    - Multi-threading with Numba (``n_threads``)
    - Backend selection (``backend="auto" | "numba" | "python"``)

Examples:
    >>> import numpy as np
    >>> import scipy.sparse as sp
    >>> from sparserank.kernels.statistics import (
    ...     rank_matrix, compute_ustat, compute_pval,
    ... )
    >>> from sparserank.types import GroupLabels
    >>>
    >>> X = sp.random(100, 50, density=0.1, format='csc')
    >>> labels = GroupLabels(np.array([0]*40 + [1]*30 + [2]*30))
    >>>
    >>> ranks = rank_matrix(X)
    >>> U = compute_ustat(ranks, labels)
    >>> P = compute_pval(U, ranks, labels.sizes)
"""

from .ops._backend import BACKEND_NAMES, get_backend
from .ops._group_ops import nnz_groups, sum_groups
from .ops._mannwhitneyu import compute_pval, compute_ustat, compute_zscore
from .ops._rank import rank_matrix

__all__ = [
    "rank_matrix",
    "sum_groups",
    "nnz_groups",
    "compute_ustat",
    "compute_zscore",
    "compute_pval",
    "get_backend",
    "BACKEND_NAMES",
]
