import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]  # project root
sys.path.insert(0, str(ROOT))

import time
import types

import numpy as np
import pytest
import scipy.sparse as sp

from supramod.algorithms.quality import multislice_modularity
from supramod.core.operator import multicat

psutil = pytest.importorskip("psutil")


def _fake_benchmark(monkeypatch, stages):
    from benchmarks.harness import runner

    mod = types.ModuleType("fake_operator_bench")
    mod.run = lambda scale: stages
    monkeypatch.setitem(sys.modules, "fake_operator_bench", mod)
    monkeypatch.setattr(runner, "discover_benchmarks", lambda suites=runner.SUITES: ["fake_operator_bench"])
    return runner


class TestBenchmarkHarness:
    """Smoke run of the benchmark harness and enforcement of its checks."""

    def test_benchmark_harness_tiny(self):
        from benchmarks.harness.runner import run

        res = run("tiny")
        bench = res["benchmarks"]["benchmarks.core.operator"]
        assert bench["assemble"]["checks"] == {"twom": True, "sparse": True}
        assert bench["batched_queries"]["checks"]["symmetric_sample"]
        assert bench["column_queries"]["queries"] == 20
        assert res["checks"]["benchmarks.core.operator:assemble.twom"]
        assert all(res["checks"].values())

    def test_assembly_footprint_recorded(self):
        from benchmarks.harness.runner import run

        m = run("tiny")["benchmarks"]["benchmarks.core.operator"]["assemble"]["metrics"]
        fp = m["footprint"]
        assert m["wall_time_s"] >= 0.0
        assert fp["nnz"] > 0
        # 50 nodes x 3 layers
        assert fp["dense_mb"] == pytest.approx(150 * 150 * 8 / 1024**2)
        assert 0.0 < fp["dense_ratio"] < 1.0

    def test_failed_check_raises(self, monkeypatch):
        runner = _fake_benchmark(
            monkeypatch,
            {"assemble": {"metrics": {}, "checks": {"twom": False, "sparse": True}}},
        )
        with pytest.raises(runner.BenchmarkCheckError) as exc:
            runner.run("tiny")
        assert exc.value.failed == ["fake_operator_bench:assemble.twom"]

    def test_failed_check_kept_when_not_strict(self, monkeypatch):
        runner = _fake_benchmark(
            monkeypatch, {"batched_queries": {"checks": {"symmetric_sample": False}}}
        )
        res = runner.run("tiny", strict=False)
        assert res["checks"] == {"fake_operator_bench:batched_queries.symmetric_sample": False}

    def test_benchmark_errors_propagate(self, monkeypatch):
        from benchmarks.harness import runner

        def broken(scale):
            raise RuntimeError("assembly failed")

        mod = types.ModuleType("broken_operator_bench")
        mod.run = broken
        monkeypatch.setitem(sys.modules, "broken_operator_bench", mod)
        monkeypatch.setattr(runner, "discover_benchmarks", lambda suites=runner.SUITES: ["broken_operator_bench"])
        with pytest.raises(RuntimeError, match="assembly failed"):
            runner.run("tiny")

    def test_measure_footprint(self):
        from benchmarks.harness.metrics import measure

        A = sp.identity(100, format="csc")
        with measure(lambda: A) as m:
            pass
        assert m["footprint"]["nnz"] == 100
        assert m["footprint"]["density"] == pytest.approx(0.01)
        assert m["cpu_time_s"] >= 0.0


class TestPerformance:
    """Optional performance checks."""

    @pytest.mark.slow
    def test_operator_stays_sparse(self):
        from benchmarks.core.operator import random_layers
        from benchmarks.harness.metrics import dense_mb, stored_mb

        rng = np.random.default_rng(0)
        n, t = 5_000, 4
        layers = random_layers(n, t, 6.0, rng)

        start = time.time()
        B, twom = multicat(layers, omega=0.5)
        build_s = time.time() - start

        assert stored_mb(B.supra_adjacency) < dense_mb(n * t) / 100

        start = time.time()
        for c in rng.integers(0, n * t, size=200):
            B(int(c))
        query_s = time.time() - start

        q = multislice_modularity(B, rng.integers(0, 10, size=n * t), chunk_size=256)
        assert -1.0 <= q <= 1.0

        print(f"\nassemble: {build_s:.3f}s, 200 columns: {query_s:.3f}s, Q={q:.4f}")
