"""sparserank: sparse-aware Wilcoxon rank-sum testing.

sparserank provides:
- Column-wise mid-ranking of dense and CSC sparse matrices with tie runs
- Per-group sums and non-background counts in O(nnz)
- One-vs-rest U statistics and tie-corrected normal-approximation p-values
- Numba-parallel kernels with a NumPy/SciPy reference backend
"""

__version__ = "0.1.0"

from . import analysis, core, kernels, types, utils
from .analysis import WilcoxonResult, wilcoxon_test
from .core import (
    DegenerateStatisticWarning,
    DimensionMismatchError,
    InvalidGroupLabelingError,
    SparseRankError,
    SparsityInvariantError,
    WilcoxonConfig,
)
from .kernels.statistics import (
    compute_pval,
    compute_ustat,
    compute_zscore,
    nnz_groups,
    rank_matrix,
    sum_groups,
)
from .types import DenseMatrix, GroupLabels, RankResult, SparseMatrix, TieRunList

__all__ = [
    "__version__",
    # Entry point
    "wilcoxon_test",
    "WilcoxonResult",
    "WilcoxonConfig",
    # Kernels
    "rank_matrix",
    "sum_groups",
    "nnz_groups",
    "compute_ustat",
    "compute_zscore",
    "compute_pval",
    # Types
    "DenseMatrix",
    "SparseMatrix",
    "GroupLabels",
    "TieRunList",
    "RankResult",
    # Errors
    "SparseRankError",
    "DimensionMismatchError",
    "InvalidGroupLabelingError",
    "SparsityInvariantError",
    "DegenerateStatisticWarning",
    # Modules
    "analysis",
    "core",
    "kernels",
    "types",
    "utils",
]
