"""Group label vectors encoded as dense integer codes."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from sparserank.core.exceptions import DimensionMismatchError, InvalidGroupLabelingError

__all__ = ["GroupLabels"]


def _as_group_ids(values: np.ndarray) -> np.ndarray:
    """Numeric labels as int64 group ids; floats must be integral."""
    if np.issubdtype(values.dtype, np.integer):
        return values.astype(np.int64, copy=False)
    if not np.isfinite(values).all():
        raise InvalidGroupLabelingError("Group labels must not contain missing values")
    ids = values.astype(np.int64)
    if not np.array_equal(ids, values):
        raise InvalidGroupLabelingError(
            "Numeric group ids must be integral; encode fractional labels as strings"
        )
    return ids


class GroupLabels:
    """Per-observation group assignment with ids in ``[0, n_groups)``.

    Group sizes are computed once here and shared by every downstream stage.

    Attributes:
        codes (np.ndarray): int64 group id of each observation.
        n_groups (int): Number of groups G.
        sizes (np.ndarray): int64 observation count per group, length G.
        categories (np.ndarray): Original label of each group id.
    """

    def __init__(
        self,
        codes: Sequence[int] | np.ndarray,
        n_groups: Optional[int] = None,
        categories: Optional[Sequence] = None,
    ):
        codes = np.asarray(codes)
        if codes.ndim != 1:
            raise InvalidGroupLabelingError(
                f"Group labels must be 1-dimensional, got {codes.ndim}D"
            )
        if len(codes) == 0:
            raise InvalidGroupLabelingError("Group labels must not be empty")
        if not np.issubdtype(codes.dtype, np.integer):
            raise InvalidGroupLabelingError(
                f"Group codes must have integer dtype, got {codes.dtype}; "
                f"use GroupLabels.from_labels() for arbitrary labels"
            )

        codes = codes.astype(np.int64, copy=False)
        if codes.min() < 0:
            raise InvalidGroupLabelingError(
                f"Group ids must be non-negative, found {codes.min()}"
            )

        observed = int(codes.max()) + 1
        if n_groups is None:
            n_groups = observed
        elif observed > n_groups:
            raise InvalidGroupLabelingError(
                f"Group ids must be in range [0, {n_groups}), found {observed - 1}"
            )

        sizes = np.bincount(codes, minlength=n_groups).astype(np.int64)
        empty = np.flatnonzero(sizes == 0)
        if len(empty) > 0:
            raise InvalidGroupLabelingError(
                f"Group ids must form a dense range [0, {n_groups}); "
                f"groups {empty.tolist()} have no observations"
            )

        if categories is None:
            categories = np.arange(n_groups)
        categories = np.asarray(categories)
        if len(categories) != n_groups:
            raise InvalidGroupLabelingError(
                f"Expected {n_groups} categories, got {len(categories)}"
            )

        self.codes = codes
        self.n_groups = int(n_groups)
        self.sizes = sizes
        self.categories = categories

    @classmethod
    def from_labels(cls, labels) -> GroupLabels:
        """Encode arbitrary labels into dense group ids.

        Numeric labels (arrays, lists, Series or numeric categoricals) are
        group ids and must already form a dense range ``[0, G)``; floats are
        accepted only when integral. Anything else (strings, booleans,
        non-numeric categoricals) is encoded with pandas, and categorical
        levels keep their declared order.

        Args:
            labels: One label per observation, or an existing ``GroupLabels``.

        Returns:
            GroupLabels: The encoded labels.

        Raises:
            InvalidGroupLabelingError: If ids have gaps, are not integral,
                are missing, or a declared categorical level is never used.
        """
        if isinstance(labels, GroupLabels):
            return labels

        if isinstance(labels, pd.Series) and isinstance(labels.dtype, pd.CategoricalDtype):
            labels = labels.array
        if isinstance(labels, pd.Categorical):
            return cls._from_categorical(labels)

        values = labels.to_numpy() if isinstance(labels, pd.Series) else np.asarray(labels)
        if np.issubdtype(values.dtype, np.number):
            return cls(_as_group_ids(values))
        return cls._from_categorical(pd.Categorical(values))

    @classmethod
    def _from_categorical(cls, categorical: pd.Categorical) -> GroupLabels:
        if (categorical.codes < 0).any():
            raise InvalidGroupLabelingError("Group labels must not contain missing values")

        categories = categorical.categories
        used = np.bincount(categorical.codes, minlength=len(categories))
        unused = categories[used == 0]
        if len(unused) > 0:
            raise InvalidGroupLabelingError(
                f"Label categories {list(unused)} have no observations"
            )

        if categories.dtype.kind in "iuf":
            return cls(_as_group_ids(np.asarray(categorical)))

        return cls(
            categorical.codes.astype(np.int64),
            n_groups=len(categories),
            categories=np.asarray(categories),
        )

    @property
    def n_obs(self) -> int:
        return len(self.codes)

    def check_length(self, n_obs: int) -> None:
        """Raise if the label count differs from the observation count."""
        if self.n_obs != n_obs:
            raise DimensionMismatchError(
                f"len(labels) = {self.n_obs} but the matrix has {n_obs} observations "
                f"on the chosen axis"
            )

    def __len__(self) -> int:
        return self.n_obs

    def __repr__(self) -> str:
        return f"GroupLabels(n_obs={self.n_obs}, n_groups={self.n_groups})"
