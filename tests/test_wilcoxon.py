"""Tests for the one-vs-rest Wilcoxon rank-sum driver."""

import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp

from sparserank import WilcoxonConfig, wilcoxon_test
from sparserank.core.exceptions import (
    DimensionMismatchError,
    InvalidGroupLabelingError,
    SparsityInvariantError,
)


@pytest.fixture
def dataset():
    rng = np.random.default_rng(2024)
    X = rng.negative_binomial(2, 0.6, size=(80, 20)).astype(np.float64)
    X[0, :] = 9.0
    groups = np.array(["ctrl", "kd_a", "kd_b", "kd_c"] * 20)
    rng.shuffle(groups)
    return X, groups


class TestWilcoxonTest:
    """Tests for wilcoxon_test."""

    def test_worked_example(self):
        X = np.array([[1.0], [1.0], [2.0], [3.0], [3.0], [3.0]])
        res = wilcoxon_test(X, np.array([0, 0, 0, 1, 1, 1]))

        np.testing.assert_allclose(res.ustat, [[0.0], [9.0]])
        np.testing.assert_allclose(res.pvals, [[0.0593], [0.0593]], atol=1e-4)
        np.testing.assert_allclose(res.auc, [[0.0], [1.0]])
        np.testing.assert_allclose(res.sums, [[4.0], [9.0]])
        np.testing.assert_array_equal(res.nnz, [[3], [3]])
        np.testing.assert_array_equal(res.group_sizes, [3, 3])
        assert res.alternative == "two_sided"
        assert (res.n_groups, res.n_features) == (2, 1)

    def test_sparse_worked_example(self):
        X = sp.csc_matrix(
            (np.array([3.0, 2.0]), np.array([2, 4]), np.array([0, 2])), shape=(5, 1)
        )
        res = wilcoxon_test(X, np.array([0, 0, 1, 0, 1]))

        np.testing.assert_allclose(res.sums, [[0.0], [5.0]])
        np.testing.assert_array_equal(res.nnz, [[0], [2]])
        np.testing.assert_allclose(res.ustat, [[0.0], [6.0]])
        np.testing.assert_allclose(res.auc, [[0.0], [1.0]])

    @pytest.mark.parametrize("backend", ["numba", "python"])
    def test_dense_and_sparse_agree(self, dataset, backend):
        X, groups = dataset
        dense = wilcoxon_test(X, groups, backend=backend)
        sparse = wilcoxon_test(sp.csr_matrix(X), groups, backend=backend)

        for field in ("sums", "ustat", "pvals", "auc"):
            np.testing.assert_allclose(getattr(sparse, field), getattr(dense, field))
        np.testing.assert_array_equal(sparse.nnz, dense.nnz)

    def test_backends_agree(self, dataset):
        X, groups = dataset
        X = sp.csc_matrix(X)
        numba_res = wilcoxon_test(X, groups, backend="numba")
        python_res = wilcoxon_test(X, groups, backend="python")

        np.testing.assert_allclose(numba_res.ustat, python_res.ustat)
        np.testing.assert_allclose(numba_res.pvals, python_res.pvals)

    def test_string_groups(self, dataset):
        X, groups = dataset
        res = wilcoxon_test(X, groups)

        np.testing.assert_array_equal(res.groups, ["ctrl", "kd_a", "kd_b", "kd_c"])
        np.testing.assert_array_equal(res.group_sizes, [20, 20, 20, 20])
        assert res.ustat.shape == (4, 20)

    def test_categorical_groups(self, dataset):
        X, groups = dataset
        categorical = pd.Categorical(groups, categories=["kd_c", "kd_b", "kd_a", "ctrl"])
        by_category = wilcoxon_test(X, categorical)
        by_string = wilcoxon_test(X, groups)

        np.testing.assert_array_equal(by_category.groups, ["kd_c", "kd_b", "kd_a", "ctrl"])
        np.testing.assert_allclose(by_category.ustat, by_string.ustat[::-1])

    @pytest.mark.parametrize("sparse_input", [False, True])
    def test_axis_1(self, dataset, sparse_input):
        X, groups = dataset
        expected = wilcoxon_test(X, groups)

        transposed = sp.csc_matrix(X.T) if sparse_input else X.T.copy()
        res = wilcoxon_test(transposed, groups, axis=1)

        np.testing.assert_allclose(res.ustat, expected.ustat)
        np.testing.assert_allclose(res.pvals, expected.pvals)
        np.testing.assert_allclose(res.sums, expected.sums)

    def test_auc_is_normalized_ustat(self, dataset):
        X, groups = dataset
        res = wilcoxon_test(X, groups)
        n1n2 = (res.group_sizes * (res.group_sizes.sum() - res.group_sizes))[:, np.newaxis]

        np.testing.assert_allclose(res.auc, res.ustat / n1n2)
        assert np.all((res.auc >= 0) & (res.auc <= 1))

    def test_shifted_group_is_detected(self):
        rng = np.random.default_rng(5)
        X = rng.poisson(1.0, size=(200, 3)).astype(np.float64)
        groups = np.repeat([0, 1], 100)
        X[groups == 1, 0] += 3.0

        res = wilcoxon_test(X, groups, alternative="greater")
        assert res.pvals[1, 0] < 1e-10
        assert res.auc[1, 0] > 0.9

    def test_config_and_overrides(self, dataset):
        X, groups = dataset
        config = WilcoxonConfig(alternative="greater", backend="python")

        from_config = wilcoxon_test(X, groups, config=config)
        overridden = wilcoxon_test(X, groups, config=config, alternative="less")

        assert from_config.alternative == "greater"
        assert overridden.alternative == "less"
        assert config.alternative == "greater"

    def test_input_not_modified(self, dataset):
        X, groups = dataset
        sparse = sp.csc_matrix(X)
        data = sparse.data.copy()
        dense = X.copy()

        wilcoxon_test(sparse, groups)
        wilcoxon_test(X, groups)

        np.testing.assert_array_equal(sparse.data, data)
        np.testing.assert_array_equal(X, dense)

    def test_copy_input_gives_same_result(self, dataset):
        X, groups = dataset
        shared = wilcoxon_test(sp.csc_matrix(X), groups)
        copied = wilcoxon_test(sp.csc_matrix(X), groups, config=WilcoxonConfig(copy_input=True))

        np.testing.assert_allclose(copied.ustat, shared.ustat)
        np.testing.assert_allclose(copied.pvals, shared.pvals)

    def test_label_length_mismatch(self, dataset):
        X, groups = dataset
        with pytest.raises(DimensionMismatchError):
            wilcoxon_test(X, groups[:-1])

    def test_label_length_checked_on_axis(self, dataset):
        X, groups = dataset
        with pytest.raises(DimensionMismatchError):
            wilcoxon_test(X, groups, axis=1)

    def test_gap_in_group_ids(self, dataset):
        X, _ = dataset
        with pytest.raises(InvalidGroupLabelingError):
            wilcoxon_test(X, np.repeat([0, 2], 40))

    @pytest.mark.parametrize(
        "groups",
        [
            pd.Series(np.repeat([0, 2], 40)),
            np.repeat([0.0, 2.0], 40),
            pd.Categorical(np.repeat(["a", "b"], 40), categories=["a", "b", "c"]),
        ],
        ids=["series", "float", "unused_level"],
    )
    def test_invalid_group_containers(self, dataset, groups):
        X, _ = dataset
        with pytest.raises(InvalidGroupLabelingError):
            wilcoxon_test(X, groups)

    def test_negative_sparse_values(self):
        X = sp.csc_matrix(np.array([[0.0], [-1.0], [2.0], [3.0]]))
        with pytest.raises(SparsityInvariantError):
            wilcoxon_test(X, np.array([0, 0, 1, 1]))

    def test_invalid_alternative(self, dataset):
        X, groups = dataset
        with pytest.raises(ValueError):
            wilcoxon_test(X, groups, alternative="sideways")
