import json
from pathlib import Path


def _stage_line(stage, v):
    m = v["metrics"]
    line = f"- {stage}: {m['wall_time_s']:.4f}s wall, {m['cpu_time_s']:.4f}s cpu, rss +{m['rss_delta_mb']:.1f} MiB"
    fp = m.get("footprint")
    if fp:
        line += (
            f", nnz {fp['nnz']} ({fp['stored_mb']:.2f} MiB stored"
            f" vs {fp['dense_mb']:.1f} MiB dense)"
        )
    extra = {k: x for k, x in v.items() if k not in ("metrics", "checks")}
    if extra:
        line += f" {extra}"
    return line


def render(json_path: str):
    data = json.loads(Path(json_path).read_text())
    print(f"# supramod benchmark ({data['scale']})\n")

    for name, res in data["benchmarks"].items():
        print(f"## {name}")
        for stage, v in res.items():
            print(_stage_line(stage, v))
        print()

    checks = data.get("checks", {})
    if checks:
        print("## checks")
        for name, ok in checks.items():
            print(f"- {'ok  ' if ok else 'FAIL'} {name}")


if __name__ == "__main__":
    import sys

    render(sys.argv[1] if len(sys.argv) > 1 else "benchmark_results.json")
