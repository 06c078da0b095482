"""NumPy/SciPy backend for statistics kernels (reference implementation)."""

from ._group_ops import (
    nnz_groups_csc_py,
    nnz_groups_dense_py,
    sum_groups_csc_py,
    sum_groups_dense_py,
)
from ._rank import rank_csc_py, rank_dense_py

__all__ = [
    "rank_dense_py",
    "rank_csc_py",
    "sum_groups_dense_py",
    "sum_groups_csc_py",
    "nnz_groups_dense_py",
    "nnz_groups_csc_py",
]
