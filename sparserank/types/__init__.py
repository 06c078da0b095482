"""Type classes for sparserank."""

from ._labels import GroupLabels
from ._matrix import BACKGROUND, DenseMatrix, MatrixView, SparseMatrix, as_matrix_view
from ._ranking import RankResult, TieRunList

__all__ = [
    "BACKGROUND",
    "DenseMatrix",
    "SparseMatrix",
    "MatrixView",
    "as_matrix_view",
    "GroupLabels",
    "TieRunList",
    "RankResult",
]
