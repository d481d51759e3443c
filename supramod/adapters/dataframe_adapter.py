from __future__ import annotations

from typing import Any

import narwhals as nw
import numpy as np
import scipy.sparse as sp

try:
    import polars as pl  # optional
except Exception:  # ModuleNotFoundError, etc.
    pl = None
from narwhals.typing import IntoDataFrame

from ..core._Index import flatten_partition


def _first_seen(values) -> list:
    seen = {}
    for v in values:
        seen.setdefault(v, None)
    return list(seen)


def _codes(values, labels, what: str) -> np.ndarray:
    index = {lab: i for i, lab in enumerate(labels)}
    try:
        return np.fromiter((index[v] for v in values), dtype=np.int64, count=len(values))
    except KeyError as e:
        raise KeyError(f"{what} {e.args[0]!r} not in the given {what} list") from None


def layers_from_dataframe(
    edges: IntoDataFrame,
    *,
    source: str = "source",
    target: str = "target",
    layer: str = "layer",
    weight: str | None = None,
    nodes: list | None = None,
    layer_order: list | None = None,
) -> tuple[list[Any], list, list]:
    """Build symmetric layer adjacencies from an undirected edge table.

    Any eager dataframe narwhals understands (Polars, pandas, PyArrow) is
    accepted. Each row ``(u, v, layer, w)`` adds ``w`` to ``A[u, v]`` and
    ``A[v, u]`` of that layer (once for self-loops); repeated rows accumulate.

    Args:
        edges: edge table
        source, target, layer: column names of the endpoints and layer label
        weight: weight column; None means unit weights
        nodes: node order; default is first-seen order over source then target
        layer_order: layer order; default is first-seen order of the layer column

    Returns:
        (layers, nodes, layer_labels) with one CSR matrix per layer label

    """
    df = nw.from_native(edges, eager_only=True)
    required = [source, target, layer] + ([weight] if weight is not None else [])
    for c in required:
        if c not in df.columns:
            raise KeyError(f"column '{c}' not found; columns: {df.columns}")

    src = df[source].to_list()
    dst = df[target].to_list()
    lay = df[layer].to_list()
    if weight is not None:
        w = np.asarray(df[weight].to_numpy(), dtype=float)
    else:
        w = np.ones(len(src), dtype=float)

    nodes = list(nodes) if nodes is not None else _first_seen(src + dst)
    layer_labels = list(layer_order) if layer_order is not None else _first_seen(lay)
    n = len(nodes)

    ui = _codes(src, nodes, "node")
    vi = _codes(dst, nodes, "node")
    li = _codes(lay, layer_labels, "layer")

    layers = []
    for s in range(len(layer_labels)):
        mask = li == s
        u, v, ws = ui[mask], vi[mask], w[mask]
        off = u != v
        rows = np.concatenate([u, v[off]])
        cols = np.concatenate([v, u[off]])
        vals = np.concatenate([ws, ws[off]])
        layers.append(sp.coo_matrix((vals, (rows, cols)), shape=(n, n)).tocsr())
    return layers, nodes, layer_labels


def partition_to_dataframe(partition, nodes: list, layer_labels: list) -> pl.DataFrame:
    """Tabulate a node-layer partition as a Polars DataFrame.

    ``partition`` may be flat (supra order) or an N x T matrix. Rows come out
    in supra order with columns ``node``, ``layer`` and ``community``.
    """
    if pl is None:
        raise ModuleNotFoundError(
            "Optional dependency 'polars' is not installed. Install with: pip install supramod[polars]"
        )
    part = np.asarray(partition)
    if part.ndim == 2:
        part = flatten_partition(part)
    part = part.ravel()
    n, t = len(nodes), len(layer_labels)
    if part.shape[0] != n * t:
        raise ValueError(f"partition length {part.shape[0]} != len(nodes)*len(layers) {n * t}")
    return pl.DataFrame(
        {
            "node": list(nodes) * t,
            "layer": [lab for lab in layer_labels for _ in range(n)],
            "community": part.tolist(),
        }
    )
