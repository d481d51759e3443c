"""Run the operator benchmarks at a named scale and enforce their checks.

Each benchmark module under ``benchmarks/core`` exposes ``run(scale)``
returning ``{stage: {...}}``; a stage may carry a ``checks`` dict of named
booleans. Every failed check is collected and reported together in a
:class:`BenchmarkCheckError`, so a wrong operator never yields timings that
look fine. Exceptions raised by a benchmark propagate unchanged.
"""

import importlib
import json
from pathlib import Path

from .scales import SCALES

BENCH_ROOT = Path(__file__).resolve().parents[1]
SUITES = ("core",)


class BenchmarkCheckError(AssertionError):
    """One or more benchmark correctness checks came out False."""

    def __init__(self, failed, results):
        self.failed = failed
        self.results = results
        super().__init__("benchmark checks failed: " + ", ".join(failed))


def discover_benchmarks(suites=SUITES):
    benches = []
    for suite in suites:
        for py in sorted((BENCH_ROOT / suite).glob("*.py")):
            if not py.name.startswith("_"):
                benches.append(f"benchmarks.{suite}.{py.stem}")
    return benches


def collect_checks(results) -> dict:
    """Flatten stage checks to ``{"module:stage.check": bool}``."""
    flat = {}
    for modname, stages in results["benchmarks"].items():
        for stage, payload in stages.items():
            if not isinstance(payload, dict):
                continue
            for name, ok in payload.get("checks", {}).items():
                flat[f"{modname}:{stage}.{name}"] = bool(ok)
    return flat


def run(scale_name="small", *, strict=True):
    """Run every discovered benchmark at ``scale_name``.

    The result holds the per-module stage dicts under ``benchmarks`` and the
    flattened outcome of their checks under ``checks``. With ``strict`` (the
    default) any failed check raises :class:`BenchmarkCheckError`.
    """
    scale = SCALES[scale_name]
    results = {"scale": scale_name, "benchmarks": {}}

    for modname in discover_benchmarks():
        mod = importlib.import_module(modname)
        if hasattr(mod, "run"):
            results["benchmarks"][modname] = mod.run(scale)

    results["checks"] = collect_checks(results)
    failed = [name for name, ok in results["checks"].items() if not ok]
    if strict and failed:
        raise BenchmarkCheckError(failed, results)
    return results


if __name__ == "__main__":
    import argparse

    p = argparse.ArgumentParser(description="supramod operator benchmarks")
    p.add_argument("--scale", default="small", choices=SCALES.keys())
    p.add_argument("--out", default="benchmark_results.json")
    p.add_argument(
        "--keep-going",
        action="store_true",
        help="write results even when a correctness check fails",
    )
    args = p.parse_args()

    res = run(args.scale, strict=not args.keep_going)
    Path(args.out).write_text(json.dumps(res, indent=2))
    print(f"Wrote {args.out}")
    failed = [k for k, ok in res["checks"].items() if not ok]
    if failed:
        raise SystemExit(f"failed checks: {', '.join(failed)}")
