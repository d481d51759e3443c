"""Partition quality under a multilayer modularity operator."""

from __future__ import annotations

import numpy as np

from ..core._Index import flatten_partition

# Member columns sliced from the supra-adjacency at a time while scoring
DEFAULT_CHUNK = 256


def _flat_partition(partition, size: int):
    part = np.asarray(partition)
    if part.ndim == 2:
        part = flatten_partition(part)
    part = part.ravel()
    if part.shape[0] != size:
        raise ValueError(f"partition length {part.shape[0]} != supra size {size}")
    return part


def _community_sum(operator, members, chunk_size: int) -> float:
    # sum of B[i, j] over i, j in members, from the sparse and rank-one parts
    AA = operator.supra_adjacency
    total = 0.0
    for start in range(0, members.shape[0], chunk_size):
        block = AA[:, members[start : start + chunk_size]]
        total += float(block[members, :].sum())

    # null model: sum_s gamma_s * (sum_{i in M} K[i, s]) * (sum_{j in M, layer s} k_j)
    layers = members // operator.n_nodes
    k_in = np.bincount(layers, weights=operator.degrees[members], minlength=operator.n_layers)
    K_in = np.asarray(operator.null_model[members, :].sum(axis=0), dtype=float).ravel()
    return total - float(np.dot(operator.gamma * K_in, k_in))


def multislice_modularity(operator, partition, *, normalize: bool = True, chunk_size: int = DEFAULT_CHUNK):
    """Multislice modularity (Mucha et al.) of a node-layer partition.

    Scorer only: sums ``B_ij`` over all pairs in the same community. The
    adjacency part is summed from sparse column slices of at most
    ``chunk_size`` members, and the null-model part from the per-layer rank-one
    factors, so neither a dense supra block nor a dense column is formed.

    Args:
      operator: a :class:`~supramod.core.operator.ModularityOperator`.
      partition: community labels, either flat (length N*T, supra order) or an
        N x T node-by-layer matrix.
      normalize: divide by ``operator.twom``.
      chunk_size: number of member columns sliced from the supra-adjacency at
        a time.
    Returns:
      Q (float)
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    part = _flat_partition(partition, operator.shape[0])
    _, inverse = np.unique(part, return_inverse=True)
    inverse = inverse.ravel()

    Q = 0.0
    for g in range(int(inverse.max()) + 1):
        members = np.flatnonzero(inverse == g)
        Q += _community_sum(operator, members, chunk_size)
    if normalize:
        if operator.twom <= 0:
            return 0.0
        return Q / operator.twom
    return Q


def community_sizes(partition) -> dict:
    """Number of node-layer pairs carrying each community label."""
    part = np.asarray(partition).ravel()
    labels, counts = np.unique(part, return_counts=True)
    return {lab.item(): int(c) for lab, c in zip(labels, counts)}
