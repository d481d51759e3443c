"""
Multilayer modularity operator benchmark.

Covers:
- random symmetric layer generation (Erdos-Renyi style, weighted)
- operator assembly (triplets, supra-adjacency, null model, coupling)
- single-column queries at random indices
- batched column queries
- multislice modularity of a random partition
- correctness checks (twom, sparsity, symmetry on sampled pairs), reported
  per stage under "checks" and enforced by the runner
- wall and CPU time, RSS (Resident Set Size) delta, supra footprint
"""

import numpy as np
import scipy.sparse as sp

from benchmarks.harness.metrics import measure
from supramod.algorithms.quality import multislice_modularity
from supramod.core.operator import multicat

SEED = 7
N_COMMUNITIES = 8


def random_layers(n, t, mean_degree, rng):
    m = int(n * mean_degree / 2)
    layers = []
    for _ in range(t):
        rows = rng.integers(0, n, size=m)
        cols = rng.integers(0, n, size=m)
        U = sp.coo_matrix((rng.random(m), (rows, cols)), shape=(n, n))
        U = sp.triu(U + U.T, k=1)
        layers.append((U + U.T).tocsr())
    return layers


def run(scale):
    results = {}
    rng = np.random.default_rng(SEED)
    n, t = scale.nodes, scale.layers

    with measure() as m_gen:
        layers = random_layers(n, t, scale.mean_degree, rng)
    results["generate"] = {
        "metrics": m_gen,
        "nnz": int(sum(A.nnz for A in layers)),
    }

    with measure(lambda: B.supra_adjacency) as m_build:
        B, twom = multicat(layers, gamma=1.0, omega=1.0)
    expected = sum(float(A.sum()) for A in layers) + 2.0 * n * (t - 1) * t
    results["assemble"] = {
        "metrics": m_build,
        "checks": {
            "twom": bool(np.isclose(twom, expected)),
            "sparse": m_build["footprint"]["dense_ratio"] < 1.0,
        },
    }

    idx = rng.integers(0, n * t, size=scale.queries)
    with measure() as m_cols:
        for c in idx:
            B(int(c))
    results["column_queries"] = {"metrics": m_cols, "queries": int(idx.size)}

    with measure() as m_batch:
        block = B.columns(idx)
    pairs = min(50, idx.size)
    sym_ok = all(
        np.isclose(block[int(idx[j]), i], B(int(idx[j]))[int(idx[i])])
        for i in range(pairs)
        for j in range(i, min(i + 2, pairs))
    )
    results["batched_queries"] = {
        "metrics": m_batch,
        "checks": {"symmetric_sample": bool(sym_ok)},
    }

    partition = rng.integers(0, N_COMMUNITIES, size=n * t)
    with measure() as m_q:
        Q = multislice_modularity(B, partition)
    results["score_partition"] = {
        "metrics": m_q,
        "Q": float(Q),
        "checks": {"bounded": bool(-1.0 <= Q <= 1.0)},
    }

    return results
