"""Uniform matrix views over dense and CSC sparse layouts.

Every kernel in sparserank branches exactly once on the view type:
``DenseMatrix`` wraps a full 2-D grid, ``SparseMatrix`` wraps CSC arrays whose
unlisted entries are an implicit background value of 0.
"""

from __future__ import annotations

from typing import Iterator, Tuple, Union

import numpy as np
import scipy.sparse as sparse

from sparserank.core.exceptions import DimensionMismatchError, SparsityInvariantError
from sparserank.utils import get_logger

logger = get_logger(__name__)

__all__ = ["DenseMatrix", "SparseMatrix", "MatrixView", "as_matrix_view", "BACKGROUND"]

BACKGROUND = 0.0


def _check_shape(n_rows: int, n_cols: int) -> None:
    if n_rows < 1 or n_cols < 1:
        raise DimensionMismatchError(
            f"Matrix must have at least 1 row and 1 column, got shape ({n_rows}, {n_cols})"
        )


class DenseMatrix:
    """Dense feature/observation matrix.

    Attributes:
        values (np.ndarray): float64 array of shape (n_rows, n_cols).
    """

    is_sparse = False

    def __init__(self, values: np.ndarray, copy: bool = False):
        if copy:
            values = np.array(values, dtype=np.float64)
        else:
            values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise DimensionMismatchError(f"Matrix must be 2-dimensional, got {values.ndim}D")
        _check_shape(*values.shape)
        if np.isnan(values).any():
            raise ValueError("Matrix contains NaN values, which cannot be ranked")
        self.values = values

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    @property
    def n_rows(self) -> int:
        return self.values.shape[0]

    @property
    def n_cols(self) -> int:
        return self.values.shape[1]

    def _check_col(self, col: int) -> None:
        if not 0 <= col < self.n_cols:
            raise IndexError(f"Column {col} out of range for matrix with {self.n_cols} columns")

    def column_entries(self, col: int) -> Iterator[Tuple[int, float]]:
        """Yield every (row, value) pair of a column, ordered by row."""
        self._check_col(col)
        column = self.values[:, col]
        return ((row, float(column[row])) for row in range(self.n_rows))

    def stored_count(self, col: int) -> int:
        """Number of stored entries in ``col``; every entry is stored in a dense matrix."""
        self._check_col(col)
        return self.n_rows

    def stored_counts(self) -> np.ndarray:
        return np.full(self.n_cols, self.n_rows, dtype=np.int64)

    def transpose(self) -> DenseMatrix:
        return DenseMatrix(self.values.T)

    def to_dense(self) -> np.ndarray:
        return self.values

    def __repr__(self) -> str:
        return f"DenseMatrix(shape={self.shape})"


class SparseMatrix:
    """Compressed sparse column matrix with an implicit background of 0.

    Invariants (checked on construction unless ``validate=False``):
        - ``indptr`` has length ``n_cols + 1``, starts at 0, is non-decreasing
          and ends at ``len(data)``;
        - row indices are in range and strictly increasing within a column;
        - no stored value equals the background value.

    Attributes:
        data (np.ndarray): Stored values, float64.
        indices (np.ndarray): Row index of each stored value.
        indptr (np.ndarray): Column pointers into ``data``/``indices``.
    """

    is_sparse = True
    background = BACKGROUND

    def __init__(
        self,
        data: np.ndarray,
        indices: np.ndarray,
        indptr: np.ndarray,
        shape: Tuple[int, int],
        copy: bool = False,
        validate: bool = True,
    ):
        n_rows, n_cols = (int(s) for s in shape)
        _check_shape(n_rows, n_cols)

        if copy:
            self.data = np.array(data, dtype=np.float64)
        else:
            self.data = np.asarray(data, dtype=np.float64)
        self.indices = np.asarray(indices, dtype=np.int64)
        self.indptr = np.asarray(indptr, dtype=np.int64)
        self._shape = (n_rows, n_cols)

        if validate:
            self._validate()

    @classmethod
    def from_scipy(cls, X: sparse.spmatrix, copy: bool = False) -> SparseMatrix:
        """Wrap a scipy sparse matrix, converting to CSC if needed.

        Explicit zeros and unsorted indices are not repaired; call
        ``X.eliminate_zeros()`` / ``X.sort_indices()`` first if needed.
        """
        if X.format != "csc":
            logger.info(f"Converting {X.format.upper()} matrix to CSC format...")
            X = X.tocsc()
            # tocsc allocates fresh arrays
            copy = False
        return cls(X.data, X.indices, X.indptr, X.shape, copy=copy)

    def _validate(self) -> None:
        n_rows, n_cols = self._shape
        data, indices, indptr = self.data, self.indices, self.indptr

        if data.ndim != 1 or indices.ndim != 1 or indptr.ndim != 1:
            raise SparsityInvariantError("CSC arrays must be 1-dimensional")
        if len(indptr) != n_cols + 1:
            raise SparsityInvariantError(
                f"indptr must have length n_cols + 1 = {n_cols + 1}, got {len(indptr)}"
            )
        if len(data) != len(indices):
            raise SparsityInvariantError(
                f"data and indices must have the same length, got {len(data)} and {len(indices)}"
            )
        if indptr[0] != 0 or indptr[-1] != len(data) or np.any(np.diff(indptr) < 0):
            raise SparsityInvariantError("indptr must start at 0, be non-decreasing and end at nnz")

        if len(data) == 0:
            return

        if indices.min() < 0 or indices.max() >= n_rows:
            raise SparsityInvariantError(f"Row indices must be in range [0, {n_rows})")

        # Strictly increasing rows, except across column boundaries
        increasing = np.diff(indices) > 0
        starts = indptr[1:-1]
        starts = starts[(starts > 0) & (starts < len(data))]
        increasing[starts - 1] = True
        if not increasing.all():
            col = int(np.searchsorted(indptr, np.flatnonzero(~increasing)[0] + 1, side="right") - 1)
            raise SparsityInvariantError(
                f"Row indices in column {col} are not strictly increasing"
            )

        if np.isnan(data).any():
            raise ValueError("Matrix contains NaN values, which cannot be ranked")

        explicit = np.flatnonzero(data == self.background)
        if len(explicit) > 0:
            raise SparsityInvariantError(
                f"Found {len(explicit)} stored entries equal to the background value "
                f"{self.background}; call eliminate_zeros() before testing"
            )

    @property
    def shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def n_rows(self) -> int:
        return self._shape[0]

    @property
    def n_cols(self) -> int:
        return self._shape[1]

    @property
    def nnz(self) -> int:
        return len(self.data)

    def _check_col(self, col: int) -> None:
        if not 0 <= col < self.n_cols:
            raise IndexError(f"Column {col} out of range for matrix with {self.n_cols} columns")

    def column_entries(self, col: int) -> Iterator[Tuple[int, float]]:
        """Yield stored (row, value) pairs of a column, ordered by row."""
        self._check_col(col)
        start, end = self.indptr[col], self.indptr[col + 1]
        return (
            (int(self.indices[k]), float(self.data[k])) for k in range(start, end)
        )

    def stored_count(self, col: int) -> int:
        self._check_col(col)
        return int(self.indptr[col + 1] - self.indptr[col])

    def stored_counts(self) -> np.ndarray:
        return np.diff(self.indptr)

    def with_data(self, data: np.ndarray) -> SparseMatrix:
        """Return a matrix sharing this layout with new stored values."""
        return SparseMatrix(data, self.indices, self.indptr, self._shape, validate=False)

    def transpose(self) -> SparseMatrix:
        transposed = self.to_scipy().T.tocsc()
        return SparseMatrix(
            transposed.data, transposed.indices, transposed.indptr, transposed.shape, validate=False
        )

    def to_scipy(self) -> sparse.csc_matrix:
        return sparse.csc_matrix((self.data, self.indices, self.indptr), shape=self._shape)

    def to_dense(self) -> np.ndarray:
        return self.to_scipy().toarray()

    def __repr__(self) -> str:
        return f"SparseMatrix(shape={self.shape}, nnz={self.nnz})"


MatrixView = Union[DenseMatrix, SparseMatrix]


def as_matrix_view(X, copy: bool = False) -> MatrixView:
    """Wrap an array-like or scipy sparse matrix in a matrix view.

    Args:
        X: ``DenseMatrix``/``SparseMatrix`` (returned unchanged),
            scipy sparse matrix or array (wrapped as CSC), or anything
            ``np.asarray`` accepts (wrapped as dense).
        copy: Copy the values instead of sharing the caller's buffer.

    Returns:
        MatrixView: The wrapped matrix.
    """
    if isinstance(X, (DenseMatrix, SparseMatrix)):
        return X
    if sparse.issparse(X):
        return SparseMatrix.from_scipy(X, copy=copy)
    return DenseMatrix(X, copy=copy)
