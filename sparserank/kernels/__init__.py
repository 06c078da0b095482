from .statistics import compute_pval, compute_ustat, nnz_groups, rank_matrix, sum_groups

__all__ = [
    "rank_matrix",
    "sum_groups",
    "nnz_groups",
    "compute_ustat",
    "compute_pval",
]
