"""Core components for sparserank.

Provides the error taxonomy and configuration classes:
- SparseRankError and its structural subclasses
- DegenerateStatisticWarning for zero-variance cells
- Config / WilcoxonConfig for serializable run settings
"""

from .config import Config, WilcoxonConfig, normalize_alternative
from .exceptions import (
    BackendError,
    DegenerateStatisticWarning,
    DimensionMismatchError,
    InvalidGroupLabelingError,
    SparseRankError,
    SparsityInvariantError,
)

__all__ = [
    "Config",
    "WilcoxonConfig",
    "normalize_alternative",
    "SparseRankError",
    "DimensionMismatchError",
    "InvalidGroupLabelingError",
    "SparsityInvariantError",
    "BackendError",
    "DegenerateStatisticWarning",
]
