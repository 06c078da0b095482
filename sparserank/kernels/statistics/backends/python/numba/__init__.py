"""Numba JIT implementation of the ranking and group-aggregation kernels.

Column loops run under ``numba.prange``; every iteration writes a disjoint
slice of the output.
"""

from ._group_ops import (
    nnz_groups_csc_numba,
    nnz_groups_dense_numba,
    sum_groups_csc_numba,
    sum_groups_dense_numba,
)
from ._rank import rank_csc_numba, rank_dense_numba

__all__ = [
    "rank_dense_numba",
    "rank_csc_numba",
    "sum_groups_dense_numba",
    "sum_groups_csc_numba",
    "nnz_groups_dense_numba",
    "nnz_groups_csc_numba",
]
