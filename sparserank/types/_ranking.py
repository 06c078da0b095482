"""Ranking results: ranked matrix plus per-column tie metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ._matrix import MatrixView

__all__ = ["TieRunList", "RankResult"]


@dataclass(frozen=True, eq=False)
class TieRunList:
    """Lengths of every run of equal values (length >= 2) in one column.

    For sparse columns the implicit background run is included when it has
    two or more members.
    """

    lengths: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))

    def correction(self) -> float:
        """Tie correction term ``sum(t^3 - t)`` over all runs."""
        t = self.lengths.astype(np.float64)
        return float(np.sum(t * t * t - t))

    def __len__(self) -> int:
        return len(self.lengths)

    def __iter__(self):
        return iter(self.lengths.tolist())

    def __eq__(self, other) -> bool:
        if not isinstance(other, TieRunList):
            return NotImplemented
        return np.array_equal(np.sort(self.lengths), np.sort(other.lengths))


@dataclass
class RankResult:
    """Output of :func:`sparserank.kernels.statistics.rank_matrix`.

    Attributes:
        ranked: Matrix of the same layout as the input holding mid-ranks.
            Sparse results hold ranks for stored entries only.
        ties: One ``TieRunList`` per column.
        background_ranks: Shared rank of the implicit background entries in each
            column, ``(n_rows - nnz + 1) / 2``. ``None`` for dense input.
    """

    ranked: MatrixView
    ties: List[TieRunList]
    background_ranks: Optional[np.ndarray] = None

    @property
    def tie_corrections(self) -> np.ndarray:
        """Per-column ``sum(t^3 - t)``."""
        return np.array([ties.correction() for ties in self.ties], dtype=np.float64)

    @classmethod
    def from_flat_ties(
        cls,
        ranked: MatrixView,
        tie_lengths: np.ndarray,
        tie_counts: np.ndarray,
        tie_offsets: np.ndarray,
        background_ranks: Optional[np.ndarray] = None,
    ) -> RankResult:
        """Build a result from kernel output.

        Column ``j`` owns ``tie_counts[j]`` lengths starting at
        ``tie_offsets[j]`` in ``tie_lengths``.
        """
        ties = [
            TieRunList(tie_lengths[start:start + count].astype(np.int64))
            for start, count in zip(tie_offsets.tolist(), tie_counts.tolist())
        ]
        return cls(ranked=ranked, ties=ties, background_ranks=background_ranks)
