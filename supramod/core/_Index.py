"""Flattened node-layer indexing: (node i, layer s) <-> i + s * N, node-major within a layer block."""

from __future__ import annotations

import numpy as np


def flat_index(node: int, layer: int, n_nodes: int) -> int:
    """Map a (node, layer) pair to its row in the supra matrix."""
    return int(node) + int(layer) * int(n_nodes)


def layer_of(index: int, n_nodes: int) -> int:
    """Layer owning a flattened row/column index."""
    return int(index) // int(n_nodes)


def node_of(index: int, n_nodes: int) -> int:
    """Node identity (within its layer) of a flattened index."""
    return int(index) % int(n_nodes)


def layer_rows(layer: int, n_nodes: int) -> range:
    """Contiguous block of flattened rows that belong to `layer`."""
    start = int(layer) * int(n_nodes)
    return range(start, start + int(n_nodes))


def flatten_partition(partition_matrix):
    """Flatten an N x T node-by-layer partition to the supra index order.

    Parameters
    --
    partition_matrix : array-like, shape (N, T)
        Column ``s`` holds the community labels of the nodes in layer ``s``.

    Returns
    ---
    numpy.ndarray
        Length ``N*T`` vector; entry ``i + s*N`` is the label of (i, s).

    """
    S_m = np.asarray(partition_matrix)
    if S_m.ndim != 2:
        raise ValueError(f"partition matrix must be 2-D, got shape {S_m.shape}")
    return S_m.reshape(-1, order="F")


def unflatten_partition(partition, n_nodes: int, n_layers: int):
    """Inverse of :func:`flatten_partition`: length N*T vector -> (N, T) matrix."""
    S = np.asarray(partition).ravel()
    if S.shape[0] != n_nodes * n_layers:
        raise ValueError(
            f"partition length {S.shape[0]} != n_nodes*n_layers {n_nodes * n_layers}"
        )
    return S.reshape((n_nodes, n_layers), order="F")
