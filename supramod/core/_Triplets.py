"""Single-pass collection of intralayer and null-model triplets."""

from __future__ import annotations

import numpy as np
import scipy.sparse as sp


def _as_coo(layer):
    return sp.coo_matrix(layer)


def count_nonzeros(coo_layers) -> np.ndarray:
    """Stored entries per layer; sizes the triplet buffers in one pass."""
    return np.fromiter((A.nnz for A in coo_layers), dtype=np.int64, count=len(coo_layers))


def collect_intralayer(layers, n_nodes: int):
    """Gather the intralayer triplets and the per-layer null-model weights.

    Each layer ``s`` contributes its stored entries, shifted by ``s * n_nodes``
    into the flattened node-layer space, and one null-model entry per node:
    ``k_i / (2 m_s)`` in column ``s``, where ``k`` are the layer's column sums
    and ``2 m_s = sum(k)``.

    Parameters
    --
    layers : sequence of array-like or scipy.sparse, each (N, N)
    n_nodes : int

    Returns
    ---
    (dict, float)
        Triplet dict with keys ``rows``, ``cols``, ``vals`` (supra-adjacency)
        and ``null_rows``, ``null_cols``, ``null_vals`` (null model), and the
        total intralayer weight ``sum_s 2 m_s``.

    Notes
    --
    A layer with zero total weight yields ``0/0 = NaN`` null-model values.
    That is left as is and surfaces in the operator's columns for the layer.

    """
    coo_layers = [_as_coo(A) for A in layers]
    n_layers = len(coo_layers)
    nnz = count_nonzeros(coo_layers)
    total = int(nnz.sum())

    rows = np.empty(total, dtype=np.int64)
    cols = np.empty(total, dtype=np.int64)
    vals = np.empty(total, dtype=float)

    null_rows = np.arange(n_nodes * n_layers, dtype=np.int64)
    null_cols = np.repeat(np.arange(n_layers, dtype=np.int64), n_nodes)
    null_vals = np.empty(n_nodes * n_layers, dtype=float)

    twom = 0.0
    pos = 0
    for s, A in enumerate(coo_layers):
        offset = s * n_nodes
        end = pos + int(nnz[s])
        rows[pos:end] = A.row + offset
        cols[pos:end] = A.col + offset
        vals[pos:end] = A.data
        pos = end

        k = np.asarray(A.sum(axis=0), dtype=float).ravel()
        mm = k.sum()
        with np.errstate(divide="ignore", invalid="ignore"):
            null_vals[offset : offset + n_nodes] = k / mm
        twom += mm

    triplets = {
        "rows": rows,
        "cols": cols,
        "vals": vals,
        "null_rows": null_rows,
        "null_cols": null_cols,
        "null_vals": null_vals,
    }
    return triplets, float(twom)
