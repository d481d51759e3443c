"""Sparse supra-adjacency, null-model matrix and categorical coupling builders."""

from __future__ import annotations

import numpy as np
import scipy.sparse as sp

## Supra-adjacency & null model


def build_supra_adjacency(triplets: dict, size: int):
    """(size x size) CSC supra-adjacency from intralayer triplets.
    Duplicate coordinates are summed.
    """
    A = sp.coo_matrix(
        (triplets["vals"], (triplets["rows"], triplets["cols"])), shape=(size, size)
    )
    return A.tocsc()


def build_null_model(triplets: dict, size: int, n_layers: int):
    """(size x T) CSC matrix K; column s holds k_i / 2m_s on the rows of layer s."""
    K = sp.coo_matrix(
        (triplets["null_vals"], (triplets["null_rows"], triplets["null_cols"])),
        shape=(size, n_layers),
    )
    return K.tocsc()


## Categorical coupling


def coupling_offsets(n_nodes: int, n_layers: int) -> list[int]:
    """Diagonal offsets ±N, ±2N, …, ±(T-1)N linking each node to its copies."""
    steps = list(range(-n_layers + 1, 0)) + list(range(1, n_layers))
    return [n_nodes * k for k in steps]


def categorical_coupling(n_nodes: int, n_layers: int, omega: float):
    """All-to-all interlayer coupling block.

    Every (i, s) is joined to (i, r) for each r != s with weight ``omega``.
    The diagonals are banded, not cyclic: the one at offset ``k*N`` has
    ``N*T - |k|*N`` entries. With a single layer the result is empty.
    """
    size = n_nodes * n_layers
    offsets = coupling_offsets(n_nodes, n_layers)
    if not offsets:
        return sp.csc_matrix((size, size), dtype=float)
    diagonals = [np.full(size - abs(o), float(omega)) for o in offsets]
    return sp.diags(diagonals, offsets, shape=(size, size), format="csc", dtype=float)


def coupling_weight(n_nodes: int, n_layers: int, omega: float) -> float:
    """Normalisation share of the coupling edges: 2 N (T-1) T omega."""
    return 2.0 * n_nodes * (n_layers - 1) * n_layers * float(omega)


def supra_degrees(A):
    """Column sums of a supra matrix as a flat float vector."""
    return np.asarray(A.sum(axis=0), dtype=float).ravel()
