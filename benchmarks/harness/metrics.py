"""Timing, memory and sparsity measurements for the operator benchmarks."""

import os
import time
from contextlib import contextmanager

import psutil

_PROC = psutil.Process(os.getpid())
MIB = 1024**2


def rss_mb() -> float:
    return _PROC.memory_info().rss / MIB


def cpu_s() -> float:
    t = _PROC.cpu_times()
    return t.user + t.system


def dense_mb(n_rows: int, n_cols: int | None = None) -> float:
    """Size a dense float64 matrix would take, in MiB."""
    n_cols = n_rows if n_cols is None else n_cols
    return n_rows * n_cols * 8 / MIB


def stored_mb(A) -> float:
    """Bytes held by a compressed sparse matrix (data, indices, indptr), in MiB."""
    return (A.data.nbytes + A.indices.nbytes + A.indptr.nbytes) / MIB


def footprint(A) -> dict:
    """Stored size of a square supra matrix next to its dense equivalent."""
    size = A.shape[0]
    stored = stored_mb(A)
    dense = dense_mb(size)
    return {
        "nnz": int(A.nnz),
        "density": A.nnz / float(size * size) if size else 0.0,
        "stored_mb": stored,
        "dense_mb": dense,
        "dense_ratio": stored / dense if dense else 0.0,
    }


@contextmanager
def measure(matrix=None):
    """Time a benchmark stage.

    Yields a dict that is filled on exit with ``wall_time_s``, ``cpu_time_s``
    and ``rss_delta_mb``. ``matrix`` may be a zero-argument callable returning
    the sparse matrix the stage produced; its :func:`footprint` is then added
    under ``footprint``.
    """
    rss0 = rss_mb()
    cpu0 = cpu_s()
    t0 = time.perf_counter()
    result = {}
    try:
        yield result
    finally:
        result.update(
            wall_time_s=time.perf_counter() - t0,
            cpu_time_s=cpu_s() - cpu0,
            rss_delta_mb=rss_mb() - rss0,
        )
    if matrix is not None:
        result["footprint"] = footprint(matrix())
