"""Backend selection shared by the statistics ops.

Backend priority for ``"auto"``: Numba > Python (NumPy/SciPy).
Both backends are always importable; ``"python"`` is the reference
implementation used for cross-checks.
"""

from __future__ import annotations

from contextlib import contextmanager
from types import SimpleNamespace

import numba

from sparserank.core.exceptions import BackendError
from sparserank.utils import get_logger

from ..backends import python as _py
from ..backends.python import numba as _nb

logger = get_logger(__name__)

__all__ = ["get_backend", "thread_limit", "BACKEND_NAMES"]


_BACKENDS = {
    "numba": SimpleNamespace(
        name="Numba",
        rank_dense=_nb.rank_dense_numba,
        rank_csc=_nb.rank_csc_numba,
        sum_groups_dense=_nb.sum_groups_dense_numba,
        sum_groups_csc=_nb.sum_groups_csc_numba,
        nnz_groups_dense=_nb.nnz_groups_dense_numba,
        nnz_groups_csc=_nb.nnz_groups_csc_numba,
    ),
    "python": SimpleNamespace(
        name="Python",
        rank_dense=_py.rank_dense_py,
        rank_csc=_py.rank_csc_py,
        sum_groups_dense=_py.sum_groups_dense_py,
        sum_groups_csc=_py.sum_groups_csc_py,
        nnz_groups_dense=_py.nnz_groups_dense_py,
        nnz_groups_csc=_py.nnz_groups_csc_py,
    ),
}

BACKEND_NAMES = ("auto", *_BACKENDS)


def get_backend(name: str = "auto") -> SimpleNamespace:
    """Return the kernel table for a backend name.

    Raises
    ------
    BackendError
        If ``name`` is not one of ``"auto"``, ``"numba"``, ``"python"``.
    """
    if name == "auto":
        name = "numba"
    try:
        backend = _BACKENDS[name]
    except KeyError:
        raise BackendError(
            f"Unknown backend {name!r}. Available backends: {BACKEND_NAMES}"
        ) from None
    logger.debug(f"Statistics backend: {backend.name}")
    return backend


@contextmanager
def thread_limit(n_threads: int = -1):
    """Cap Numba's worker threads for the duration of a call.

    ``-1`` leaves the current setting untouched.
    """
    if n_threads is None or n_threads == -1:
        yield
        return
    if n_threads < 1:
        raise ValueError(f"n_threads must be -1 or positive, got {n_threads}")

    previous = numba.get_num_threads()
    numba.set_num_threads(min(n_threads, numba.config.NUMBA_NUM_THREADS))
    try:
        yield
    finally:
        numba.set_num_threads(previous)
