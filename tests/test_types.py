"""Tests for sparserank.types module.

This module tests the data containers:
- DenseMatrix / SparseMatrix views and CSC invariant checks
- GroupLabels encoding and validation
- TieRunList / RankResult
"""

import numpy as np
import pandas as pd
import pytest
from scipy import sparse

from sparserank.core.exceptions import (
    DimensionMismatchError,
    InvalidGroupLabelingError,
    SparsityInvariantError,
)
from sparserank.types import (
    DenseMatrix,
    GroupLabels,
    RankResult,
    SparseMatrix,
    TieRunList,
    as_matrix_view,
)


# =============================================================================
# Test Matrix Views
# =============================================================================


class TestDenseMatrix:
    """Tests for the dense matrix view."""

    def test_column_entries_cover_every_row(self):
        """Dense columns yield every (row, value) pair in row order."""
        X = DenseMatrix(np.array([[1.0, 0.0], [0.0, 2.0], [3.0, 0.0]]))
        assert list(X.column_entries(0)) == [(0, 1.0), (1, 0.0), (2, 3.0)]
        assert X.stored_count(1) == 3

    def test_out_of_range_column(self):
        """Column access outside the matrix fails fast."""
        X = DenseMatrix(np.ones((2, 2)))
        with pytest.raises(IndexError):
            X.column_entries(2)
        with pytest.raises(IndexError):
            X.stored_count(-1)

    def test_empty_matrix_rejected(self):
        """Matrices need at least one row and one column."""
        with pytest.raises(DimensionMismatchError):
            DenseMatrix(np.zeros((0, 3)))
        with pytest.raises(DimensionMismatchError):
            DenseMatrix(np.zeros((3, 0)))

    def test_one_dimensional_rejected(self):
        with pytest.raises(DimensionMismatchError):
            DenseMatrix(np.arange(4.0))

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            DenseMatrix(np.array([[1.0], [np.nan]]))

    def test_copy_detaches_from_caller(self):
        values = np.ones((2, 2))
        X = DenseMatrix(values, copy=True)
        values[0, 0] = 5.0
        assert X.values[0, 0] == 1.0


class TestSparseMatrix:
    """Tests for the CSC sparse view and its invariants."""

    @pytest.fixture
    def csc(self):
        dense = np.array(
            [
                [0.0, 1.0, 0.0],
                [2.0, 0.0, 0.0],
                [0.0, 3.0, 4.0],
            ]
        )
        return sparse.csc_matrix(dense)

    def test_from_scipy_csc(self, csc):
        """CSC input keeps its layout."""
        X = as_matrix_view(csc)
        assert isinstance(X, SparseMatrix)
        assert X.shape == (3, 3)
        assert X.nnz == 4
        np.testing.assert_array_equal(X.stored_counts(), [1, 2, 1])

    def test_from_scipy_csr_is_converted(self, csc):
        """CSR input is converted to CSC."""
        X = as_matrix_view(csc.tocsr())
        assert isinstance(X, SparseMatrix)
        np.testing.assert_array_equal(X.to_dense(), csc.toarray())

    def test_column_entries_are_stored_only(self, csc):
        X = as_matrix_view(csc)
        assert list(X.column_entries(1)) == [(0, 1.0), (2, 3.0)]
        assert X.stored_count(1) == 2

    def test_out_of_range_column(self, csc):
        X = as_matrix_view(csc)
        with pytest.raises(IndexError):
            list(X.column_entries(3))

    def test_explicit_zero_rejected(self):
        """A stored background value breaks the sparsity invariant."""
        X = sparse.csc_matrix(
            (np.array([0.0, 1.0]), np.array([0, 1]), np.array([0, 2])), shape=(3, 1)
        )
        with pytest.raises(SparsityInvariantError):
            as_matrix_view(X)

    def test_unsorted_indices_rejected(self):
        """Row indices must strictly increase within a column."""
        with pytest.raises(SparsityInvariantError):
            SparseMatrix(
                np.array([1.0, 2.0]), np.array([2, 0]), np.array([0, 2]), shape=(3, 1)
            )

    def test_duplicate_indices_rejected(self):
        with pytest.raises(SparsityInvariantError):
            SparseMatrix(
                np.array([1.0, 2.0]), np.array([1, 1]), np.array([0, 2]), shape=(3, 1)
            )

    def test_indices_may_restart_between_columns(self):
        """Row order is checked per column, not across columns."""
        X = SparseMatrix(
            np.array([1.0, 2.0, 3.0]),
            np.array([1, 2, 0]),
            np.array([0, 2, 3]),
            shape=(3, 2),
        )
        assert X.stored_count(0) == 2

    def test_bad_indptr_rejected(self):
        with pytest.raises(SparsityInvariantError):
            SparseMatrix(np.array([1.0]), np.array([0]), np.array([0, 1]), shape=(3, 2))

    def test_row_index_out_of_range(self):
        with pytest.raises(SparsityInvariantError):
            SparseMatrix(np.array([1.0]), np.array([3]), np.array([0, 1]), shape=(3, 1))

    def test_transpose(self, csc):
        X = as_matrix_view(csc)
        np.testing.assert_array_equal(X.transpose().to_dense(), csc.toarray().T)

    def test_all_background_matrix(self):
        """A matrix with no stored entries is valid."""
        X = as_matrix_view(sparse.csc_matrix((4, 2)))
        assert X.nnz == 0
        np.testing.assert_array_equal(X.stored_counts(), [0, 0])


# =============================================================================
# Test Group Labels
# =============================================================================


class TestGroupLabels:
    """Tests for group label encoding and validation."""

    def test_integer_codes(self):
        labels = GroupLabels(np.array([0, 0, 1, 2, 1]))
        assert labels.n_groups == 3
        np.testing.assert_array_equal(labels.sizes, [2, 2, 1])
        np.testing.assert_array_equal(labels.categories, [0, 1, 2])

    def test_missing_group_rejected(self):
        """Group ids must form a dense range."""
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels(np.array([0, 2, 2]))

    def test_declared_group_without_observations(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels(np.array([0, 1, 1]), n_groups=3)

    def test_negative_id_rejected(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels(np.array([-1, 0, 1]))

    def test_id_beyond_declared_range(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels(np.array([0, 1, 2]), n_groups=2)

    def test_string_labels_encoded(self):
        """Non-integer labels are encoded in sorted category order."""
        labels = GroupLabels.from_labels(["b", "a", "b", "c"])
        np.testing.assert_array_equal(labels.codes, [1, 0, 1, 2])
        np.testing.assert_array_equal(labels.categories, ["a", "b", "c"])

    def test_categorical_keeps_level_order(self):
        values = pd.Categorical(["x", "y", "x"], categories=["y", "x"])
        labels = GroupLabels.from_labels(values)
        np.testing.assert_array_equal(labels.codes, [1, 0, 1])
        np.testing.assert_array_equal(labels.categories, ["y", "x"])

    def test_unused_category_rejected(self):
        """A declared level without observations is an empty group."""
        values = pd.Categorical(["x", "x", "z"], categories=["x", "y", "z"])
        with pytest.raises(InvalidGroupLabelingError, match="'y'"):
            GroupLabels.from_labels(values)
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels.from_labels(pd.Series(values))

    def test_integer_series_gap_rejected(self):
        """Integer ids in a Series are validated, not re-numbered."""
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels.from_labels(pd.Series([0, 2, 2, 0]))

    def test_float_ids_gap_rejected(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels.from_labels(np.array([0.0, 2.0, 2.0, 0.0]))

    def test_integral_float_ids(self):
        labels = GroupLabels.from_labels(np.array([1.0, 0.0, 1.0]))
        np.testing.assert_array_equal(labels.codes, [1, 0, 1])
        assert labels.codes.dtype == np.int64

    def test_fractional_float_ids_rejected(self):
        with pytest.raises(InvalidGroupLabelingError, match="integral"):
            GroupLabels.from_labels([0.0, 0.5, 1.0])

    def test_nan_id_rejected(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels.from_labels(pd.Series([0.0, np.nan, 1.0]))

    def test_integer_series(self):
        labels = GroupLabels.from_labels(pd.Series([1, 0, 1, 2]))
        np.testing.assert_array_equal(labels.codes, [1, 0, 1, 2])
        np.testing.assert_array_equal(labels.sizes, [1, 2, 1])

    def test_numeric_categorical_is_validated_as_ids(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels.from_labels(pd.Categorical([0, 2, 2, 0]))
        labels = GroupLabels.from_labels(pd.Categorical([1, 0, 1]))
        np.testing.assert_array_equal(labels.codes, [1, 0, 1])

    def test_boolean_labels_encoded(self):
        labels = GroupLabels.from_labels(np.array([True, False, True]))
        np.testing.assert_array_equal(labels.codes, [1, 0, 1])
        np.testing.assert_array_equal(labels.categories, [False, True])

    def test_missing_label_rejected(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels.from_labels(pd.Series(["a", None, "b"]))

    def test_check_length(self):
        labels = GroupLabels(np.array([0, 1, 1]))
        labels.check_length(3)
        with pytest.raises(DimensionMismatchError):
            labels.check_length(4)

    def test_two_dimensional_rejected(self):
        with pytest.raises(InvalidGroupLabelingError):
            GroupLabels(np.zeros((2, 2), dtype=int))


# =============================================================================
# Test Ranking Containers
# =============================================================================


class TestTieRunList:
    """Tests for tie run bookkeeping."""

    def test_correction(self):
        """sum(t^3 - t) over runs of length 2 and 3."""
        ties = TieRunList(np.array([2, 3]))
        assert ties.correction() == 6 + 24
        assert len(ties) == 2
        assert list(ties) == [2, 3]

    def test_no_ties(self):
        ties = TieRunList()
        assert ties.correction() == 0.0
        assert len(ties) == 0

    def test_equality_ignores_order(self):
        assert TieRunList(np.array([3, 2])) == TieRunList(np.array([2, 3]))
        assert TieRunList(np.array([2])) != TieRunList(np.array([3]))

    def test_from_flat_ties(self):
        ranked = DenseMatrix(np.ones((4, 2)))
        result = RankResult.from_flat_ties(
            ranked,
            tie_lengths=np.array([4, 0, 2, 2, 0]),
            tie_counts=np.array([1, 2]),
            tie_offsets=np.array([0, 2]),
        )
        assert list(result.ties[0]) == [4]
        assert list(result.ties[1]) == [2, 2]
        np.testing.assert_array_equal(result.tie_corrections, [60.0, 12.0])
