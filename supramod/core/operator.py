"""Multilayer modularity operator for categorically coupled layers.

The modularity matrix of a multilayer network with T layers of N nodes is
(N*T) x (N*T) and dense in every diagonal block, so it is never stored.
Instead it is split as

    B = (A_intra + omega * C) - diag-block(gamma_s * k_s k_s^T / 2m_s)

where ``A_intra + omega * C`` is sparse and the null-model blocks are rank one
per layer. :class:`ModularityOperator` keeps the sparse part, the normalised
degree columns K and the degree vector, and rebuilds any column of B on
request.

Node ``i`` of layer ``s`` sits at flattened index ``i + s * N`` (0-based);
see :mod:`supramod.core._Index`.
"""

from __future__ import annotations

import operator as _op

import numpy as np

from ._Index import layer_of
from ._Params import SYMMETRY_ATOL, check_layers, resolve_dimensions, resolve_gamma, resolve_omega
from ._Supra import (
    build_null_model,
    build_supra_adjacency,
    categorical_coupling,
    coupling_weight,
    supra_degrees,
)
from ._Triplets import collect_intralayer

# Largest supra size `to_dense` will materialise (4096^2 floats ~ 128 MiB)
MAX_DENSE_SIZE = 4096


def _frozen_csc(A):
    # private CSC copy whose buffers reject in-place writes
    A = A.tocsc(copy=True)
    A.sum_duplicates()
    for buf in (A.data, A.indices, A.indptr):
        buf.flags.writeable = False
    return A


class ModularityOperator:
    """Column-query view of a multilayer modularity matrix.

    Holds the supra-adjacency (CSC), the null-model matrix K (CSC, one column
    per layer), the degree vector and the per-layer resolution. All array
    buffers are made read-only on construction, so queries may be repeated,
    reordered or issued from several threads.

    Build with :meth:`from_layers` or :func:`multicat`.
    """

    def __init__(self, supra_adjacency, null_model, degrees, gamma, n_nodes, n_layers, omega, twom):
        self._AA = _frozen_csc(supra_adjacency)
        self._K = _frozen_csc(null_model)
        kvec = np.array(degrees, dtype=float).ravel()
        kvec.flags.writeable = False
        self._kvec = kvec
        self._gamma = resolve_gamma(gamma, n_layers)
        self._n_nodes = int(n_nodes)
        self._n_layers = int(n_layers)
        self._omega = float(omega)
        self._twom = float(twom)

    @classmethod
    def from_layers(
        cls,
        layers,
        gamma=1.0,
        omega=1.0,
        *,
        check: bool = False,
        coupled_degrees: bool = False,
        atol: float = SYMMETRY_ATOL,
    ) -> ModularityOperator:
        """Assemble the operator from T symmetric N x N layer adjacencies.

        Parameters
        --
        layers : sequence of array-like or scipy.sparse
            Layer adjacency matrices, all N x N, symmetric, non-negative.
            These assumptions are not checked unless ``check=True``.
        gamma : float or sequence of float
            Intralayer resolution; a scalar applies to every layer.
        omega : float
            Interlayer coupling between each node and its copies in every
            other layer.
        check : bool
            Validate the layer assumptions first and raise ``ValueError`` on
            violation (see :func:`supramod.core._Params.check_layers`).
        coupled_degrees : bool
            If True, the degree vector multiplying the null model includes the
            coupling edges. The default uses intralayer degrees, which keeps
            the operator symmetric.
        atol : float
            Symmetry tolerance used when ``check=True``.

        """
        layers = list(layers)
        if check:
            check_layers(layers, gamma, atol=atol)
        n, t = resolve_dimensions(layers)
        g = resolve_gamma(gamma, t)
        w = resolve_omega(omega)
        size = n * t

        triplets, twom = collect_intralayer(layers, n)
        AA = build_supra_adjacency(triplets, size)
        K = build_null_model(triplets, size, t)
        del triplets

        kvec = supra_degrees(AA)
        AA = (AA + categorical_coupling(n, t, w)).tocsc()
        if coupled_degrees:
            kvec = supra_degrees(AA)

        twom += coupling_weight(n, t, w)
        return cls(AA, K, kvec, g, n, t, w, twom)

    # ==================== Queries ====================

    def column(self, index):
        """Column ``index`` of the modularity matrix as a dense vector.

        ``B[:, c] = AA[:, c] - gamma[s] * K[:, s] * kvec[c]`` with ``s`` the
        layer owning ``c``.

        Raises
        --
        IndexError
            If ``index`` is outside ``[0, N*T)``.

        """
        c = self._check_index(index)
        s = layer_of(c, self._n_nodes)
        a = self._AA[:, [c]].toarray().ravel()
        null = self._K[:, [s]].toarray().ravel()
        return a - (null * self._gamma[s]) * self._kvec[c]

    def columns(self, indices):
        """Several columns at once, stacked as an (N*T, m) array.

        Column ``j`` of the result equals ``column(indices[j])``.
        """
        idx = self._check_indices(indices)
        if idx.size == 0:
            return np.zeros((self.shape[0], 0), dtype=float)
        s = idx // self._n_nodes
        a = self._AA[:, idx].toarray()
        null = self._K[:, s].toarray()
        return a - (null * self._gamma[s]) * self._kvec[idx]

    def __call__(self, index):
        if np.ndim(index) == 0:
            return self.column(index)
        return self.columns(index)

    def to_dense(self):
        """Materialise the full modularity matrix (small systems only)."""
        size = self.shape[0]
        if size > MAX_DENSE_SIZE:
            raise ValueError(
                f"refusing to materialise a {size}x{size} modularity matrix "
                f"(limit {MAX_DENSE_SIZE}); query columns instead"
            )
        return self.columns(np.arange(size))

    def _check_index(self, index) -> int:
        c = _op.index(index)
        size = self._n_nodes * self._n_layers
        if not 0 <= c < size:
            raise IndexError(f"column {c} out of range for supra size {size}")
        return c

    def _check_indices(self, indices):
        idx = np.asarray(indices)
        if idx.size == 0:
            return np.zeros(0, dtype=np.intp)
        if not np.issubdtype(idx.dtype, np.integer):
            raise TypeError(f"column indices must be integers, got dtype {idx.dtype}")
        idx = idx.astype(np.intp, copy=False).ravel()
        size = self._n_nodes * self._n_layers
        bad = (idx < 0) | (idx >= size)
        if bad.any():
            raise IndexError(f"column {int(idx[bad][0])} out of range for supra size {size}")
        return idx

    # ==================== Read-only state ====================

    @property
    def shape(self) -> tuple[int, int]:
        size = self._n_nodes * self._n_layers
        return size, size

    @property
    def n_nodes(self) -> int:
        return self._n_nodes

    @property
    def n_layers(self) -> int:
        return self._n_layers

    @property
    def omega(self) -> float:
        return self._omega

    @property
    def twom(self) -> float:
        """Total supra-network weight used to normalise modularity."""
        return self._twom

    @property
    def gamma(self):
        return self._gamma

    @property
    def degrees(self):
        return self._kvec

    @property
    def supra_adjacency(self):
        """Intralayer adjacency plus coupling (CSC, buffers not writeable)."""
        return self._AA

    @property
    def null_model(self):
        """(N*T) x T matrix of normalised layer degrees (CSC, buffers not writeable)."""
        return self._K

    def __repr__(self) -> str:
        return (
            f"ModularityOperator(n_nodes={self._n_nodes}, n_layers={self._n_layers}, "
            f"omega={self._omega:g}, twom={self._twom:g})"
        )


def multicat(layers, gamma=1.0, omega=1.0, *, check=False, coupled_degrees=False):
    """Multilayer modularity for unordered (categorical) undirected layers.

    Returns ``(B, twom)``: ``B`` is a :class:`ModularityOperator`, callable as
    ``B(i)`` for column ``i`` of the flattened modularity matrix, and ``twom``
    the normalisation constant, so that a raw quality ``Q`` from an optimiser
    normalises as ``Q / twom``.

    Examples
    --
    >>> B, twom = multicat([A1, A2, A3], gamma=1.0, omega=0.5)   # doctest: +SKIP
    >>> col = B(0)                                              # doctest: +SKIP

    """
    B = ModularityOperator.from_layers(
        layers, gamma, omega, check=check, coupled_degrees=coupled_degrees
    )
    return B, B.twom
