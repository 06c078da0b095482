"""Mann-Whitney U statistics and normal-approximation p-values.

Each group is compared against all remaining observations. With rank sums
``R[g, f]`` and group sizes ``n_g``::

    U[g, f] = R[g, f] - n_g (n_g + 1) / 2

For sparse input ``R`` only covers stored entries; background entries of
group ``g`` all carry the column's implicit background rank, so
``(n_g - nnz[g, f]) * background_rank[f]`` is added back first.

P-values use the tie-corrected normal approximation with continuity
correction, ``n1n2 = n_g (N - n_g)`` and::

    sigma^2 = n1n2 * ((N^3 - N) - sum(t^3 - t)) / (12 (N^2 - N))
"""

from __future__ import annotations

import warnings
from typing import Sequence, Union

import numpy as np
from scipy.special import ndtr

from sparserank.core.config import normalize_alternative
from sparserank.core.exceptions import DegenerateStatisticWarning, DimensionMismatchError
from sparserank.types import GroupLabels, RankResult, SparseMatrix, TieRunList
from sparserank.utils import get_logger

from ._group_ops import nnz_groups, sum_groups

logger = get_logger(__name__)

__all__ = ["compute_ustat", "compute_zscore", "compute_pval"]

TieInput = Union[RankResult, Sequence[TieRunList], np.ndarray]


def compute_ustat(
    rank_result: RankResult,
    labels,
    *,
    nnz: np.ndarray | None = None,
    backend: str = "auto",
    n_threads: int = -1,
) -> np.ndarray:
    """Compute one-vs-rest U statistics for every group and feature.

    Parameters
    ----------
    rank_result : RankResult
        Output of :func:`rank_matrix` (observations are rows).
    labels : array-like or GroupLabels
        Group of each observation (row).
    nnz : np.ndarray, optional
        Precomputed ``nnz_groups`` of the matrix, shape (n_groups, n_features).
        Ranking keeps the sparsity pattern, so counts from the unranked matrix
        can be reused. Computed from the ranked matrix when omitted.
    backend : str, default="auto"
        Backend for the group aggregations.
    n_threads : int, default=-1
        Numba worker threads.

    Returns
    -------
    np.ndarray
        U statistics, shape (n_groups, n_features). ``U[g, f]`` counts the
        (group, rest) pairs where the group value is larger, ties counting 1/2.
    """
    labels = GroupLabels.from_labels(labels)
    ranked = rank_result.ranked
    rank_sums = sum_groups(ranked, labels, backend=backend, n_threads=n_threads)

    sizes = labels.sizes[:, np.newaxis].astype(np.float64)
    ustat = rank_sums - sizes * (sizes + 1) / 2

    if isinstance(ranked, SparseMatrix):
        if nnz is None:
            nnz = nnz_groups(ranked, labels, backend=backend, n_threads=n_threads)
        elif nnz.shape != ustat.shape:
            raise DimensionMismatchError(
                f"nnz has shape {nnz.shape}, expected {ustat.shape}"
            )
        n_background = sizes - nnz
        ustat += n_background * rank_result.background_ranks[np.newaxis, :]

    return ustat


def _tie_sums(ties: TieInput) -> np.ndarray:
    if isinstance(ties, RankResult):
        return ties.tie_corrections
    if isinstance(ties, np.ndarray) and ties.dtype != object:
        return ties.astype(np.float64)
    return np.array([t.correction() for t in ties], dtype=np.float64)


def compute_zscore(
    ustat: np.ndarray,
    ties: TieInput,
    group_sizes: np.ndarray,
    alternative: str = "two_sided",
) -> np.ndarray:
    """Standardize U statistics with continuity and tie correction.

    Parameters
    ----------
    ustat : np.ndarray
        U statistics, shape (n_groups, n_features).
    ties : RankResult, sequence of TieRunList, or np.ndarray
        Per-feature tie runs, or precomputed ``sum(t^3 - t)`` per feature.
    group_sizes : np.ndarray
        Observations per group, length n_groups. ``N`` is their sum.
    alternative : str, default="two_sided"
        ``"two_sided"``, ``"greater"`` or ``"less"``; selects the continuity
        correction ``sign(z) * 0.5``, ``0.5`` or ``-0.5``.

    Returns
    -------
    np.ndarray
        z-scores, shape (n_groups, n_features). Zero-variance cells are NaN.
    """
    alternative = normalize_alternative(alternative)
    ustat = np.asarray(ustat, dtype=np.float64)
    sizes = np.asarray(group_sizes, dtype=np.float64)
    tie_sums = _tie_sums(ties)

    if ustat.ndim != 2 or ustat.shape != (len(sizes), len(tie_sums)):
        raise DimensionMismatchError(
            f"ustat has shape {ustat.shape}, expected ({len(sizes)}, {len(tie_sums)}) "
            f"from group sizes and ties"
        )

    N = sizes.sum()
    n1n2 = (sizes * (N - sizes))[:, np.newaxis]

    z = ustat - 0.5 * n1n2
    if alternative == "two_sided":
        correction = np.sign(z) * 0.5
    elif alternative == "greater":
        correction = 0.5
    else:
        correction = -0.5

    with np.errstate(divide="ignore", invalid="ignore"):
        tie_term = ((N ** 3 - N) - tie_sums) / (12 * (N ** 2 - N))
        sigma = np.sqrt(n1n2 * tie_term[np.newaxis, :])
        z = (z - correction) / sigma

    z[~(sigma > 0)] = np.nan
    return z


def compute_pval(
    ustat: np.ndarray,
    ties: TieInput,
    group_sizes: np.ndarray,
    alternative: str = "two_sided",
) -> np.ndarray:
    """Convert U statistics into normal-approximation p-values.

    Arguments are as for :func:`compute_zscore`. ``"greater"`` gives
    ``1 - Phi(z)``, ``"less"`` gives ``Phi(z)`` and ``"two_sided"`` gives
    ``2 (1 - Phi(|z|))``.

    Returns
    -------
    np.ndarray
        p-values, shape (n_groups, n_features). Cells with zero variance
        (all values tied, or a group covering every observation) are NaN and
        a :class:`DegenerateStatisticWarning` is issued.

    Examples
    --------
    >>> import numpy as np
    >>> from sparserank.kernels.statistics import compute_pval
    >>> from sparserank.types import TieRunList
    >>> ustat = np.array([[0.0], [9.0]])
    >>> ties = [TieRunList(np.array([2, 3]))]
    >>> compute_pval(ustat, ties, np.array([3, 3])).round(4)
    array([[0.0593],
           [0.0593]])
    """
    alternative = normalize_alternative(alternative)
    z = compute_zscore(ustat, ties, group_sizes, alternative)

    if alternative == "greater":
        pvals = ndtr(-z)
    elif alternative == "less":
        pvals = ndtr(z)
    else:
        pvals = 2 * ndtr(-np.abs(z))

    n_degenerate = int(np.isnan(pvals).sum())
    if n_degenerate > 0:
        logger.debug(f"compute_pval: {n_degenerate} zero-variance cells")
        warnings.warn(
            f"{n_degenerate} of {pvals.size} (group, feature) cells have zero variance; "
            f"their p-values are NaN",
            DegenerateStatisticWarning,
            stacklevel=2,
        )

    return pvals
