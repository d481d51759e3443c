"""Shared fixtures and helpers for operator tests."""

import pathlib
import sys

import numpy as np
import pytest
import scipy.sparse as sp

ROOT = pathlib.Path(__file__).resolve().parents[1]  # project root
sys.path.insert(0, str(ROOT))

# ======================================================================
# FIXTURES
# ======================================================================

TRIANGLE = np.array([[0.0, 1.0, 1.0], [1.0, 0.0, 1.0], [1.0, 1.0, 0.0]])


def random_symmetric(n, density, rng, *, sparse=False):
    """Weighted symmetric non-negative matrix with an empty diagonal."""
    W = rng.random((n, n)) * (rng.random((n, n)) < density)
    W = np.triu(W, k=1)
    W = W + W.T
    return sp.csr_matrix(W) if sparse else W


@pytest.fixture
def triangle():
    """3-node triangle, unit weights."""
    return TRIANGLE.copy()


@pytest.fixture
def two_triangles():
    """Two identical triangle layers (N=3, T=2)."""
    return [TRIANGLE.copy(), TRIANGLE.copy()]


@pytest.fixture
def random_layers():
    """Five weighted random layers of 8 nodes, mixing dense and sparse inputs."""
    rng = np.random.default_rng(1234)
    return [random_symmetric(8, 0.5, rng, sparse=(s % 2 == 1)) for s in range(5)]


# ======================================================================
# HELPERS
# ======================================================================


def dense_multicat(layers, gamma, omega):
    """Reference modularity matrix built densely, block by block."""
    layers = [np.asarray(sp.csr_matrix(A).toarray(), dtype=float) for A in layers]
    n, t = layers[0].shape[0], len(layers)
    g = np.broadcast_to(np.asarray(gamma, dtype=float), (t,))
    B = np.kron(np.ones((t, t)) - np.eye(t), np.eye(n)) * omega
    for s, A in enumerate(layers):
        k = A.sum(axis=0)
        B[s * n : (s + 1) * n, s * n : (s + 1) * n] += A - g[s] * np.outer(k, k) / k.sum()
    return B


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
