"""Layer-list dimensions, resolution/coupling defaults and opt-in layer checks."""

from __future__ import annotations

import warnings

import numpy as np
import scipy.sparse as sp

SYMMETRY_ATOL = 1e-12


def resolve_dimensions(layers) -> tuple[int, int]:
    """Return (N, T): node count taken from the first layer, and the layer count.

    Only the first layer is inspected; equal sizes across layers are assumed.
    """
    layers = list(layers)
    if not layers:
        raise ValueError("at least one layer is required")
    return int(layers[0].shape[0]), len(layers)


def resolve_gamma(gamma, n_layers: int):
    """Per-layer resolution vector.

    A scalar (or a length-1 sequence) is broadcast to ``n_layers``; any other
    sequence is used as given. ``None`` means the default resolution 1.
    """
    if gamma is None:
        gamma = 1.0
    g = np.asarray(gamma, dtype=float).ravel()
    if g.shape[0] == 1:
        g = np.full(n_layers, g[0], dtype=float)
    else:
        g = g.copy()
    g.flags.writeable = False
    return g


def resolve_omega(omega) -> float:
    return 1.0 if omega is None else float(omega)


def check_layers(layers, gamma=None, *, atol: float = SYMMETRY_ATOL) -> None:
    """Opt-in structural checks on the layer list.

    Verifies that every layer is square, that all layers share the size of the
    first one, that each is symmetric within ``atol`` and has no negative
    weights, and that ``gamma`` is a scalar or has one entry per layer.

    Raises
    --
    ValueError
        On the first violated assumption, naming the layer.

    Warns
    --
    RuntimeWarning
        For layers with zero total weight; their null-model column is NaN.

    """
    layers = list(layers)
    n, t = resolve_dimensions(layers)
    for s, layer in enumerate(layers):
        A = sp.csr_matrix(layer)
        if A.shape[0] != A.shape[1]:
            raise ValueError(f"layer {s} is not square: shape {A.shape}")
        if A.shape[0] != n:
            raise ValueError(f"layer {s} has {A.shape[0]} nodes, expected {n} (layer 0)")
        if A.nnz:
            asym = abs(A - A.T).max()
            if asym > atol:
                raise ValueError(f"layer {s} is not symmetric (max |A - A.T| = {asym:g})")
            if A.min() < 0:
                raise ValueError(f"layer {s} has negative edge weights")
        if A.sum() == 0:
            warnings.warn(
                f"layer {s} has zero total weight; its null-model term is undefined (NaN)",
                RuntimeWarning,
                stacklevel=3,
            )
    if gamma is not None:
        g = np.asarray(gamma, dtype=float).ravel()
        if g.shape[0] not in (1, t):
            raise ValueError(f"gamma has {g.shape[0]} entries; expected 1 or {t}")
