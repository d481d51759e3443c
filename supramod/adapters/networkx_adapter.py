from __future__ import annotations

try:
    import networkx as nx
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "Optional dependency 'networkx' is not installed. "
        "Install with: pip install supramod[networkx]"
    ) from e

import warnings

from ..core.operator import multicat


def _shared_nodelist(graphs) -> list:
    # union of nodes in first-seen order
    seen = {}
    for G in graphs:
        for u in G.nodes():
            seen.setdefault(u, None)
    return list(seen)


def layers_from_nx(graphs, *, nodelist=None, weight: str | None = "weight"):
    """Convert NetworkX graphs to layer adjacencies over one node order.

    Parameters
    ----------
    graphs : sequence of networkx.Graph
        One graph per layer. Directed graphs are symmetrised (A + A.T) with a
        warning, since the layers must be undirected.
    nodelist : list, optional
        Node order shared by every layer. Defaults to the union of all nodes
        in first-seen order; nodes missing from a layer become isolated there.
    weight : str or None
        Edge attribute holding the weight; None means unit weights.

    Returns
    -------
    (list[scipy.sparse.csr_array], list)
        Layer adjacencies and the node order used for rows/columns.

    """
    graphs = list(graphs)
    if not graphs:
        raise ValueError("at least one graph is required")
    nodes = list(nodelist) if nodelist is not None else _shared_nodelist(graphs)

    layers = []
    for s, G in enumerate(graphs):
        H = G
        if G.number_of_nodes() != len(nodes) or any(u not in G for u in nodes):
            H = G.copy()
            H.add_nodes_from(nodes)
        A = nx.to_scipy_sparse_array(H, nodelist=nodes, weight=weight, format="csr", dtype=float)
        if G.is_directed():
            warnings.warn(
                f"layer {s} is directed; symmetrising as A + A.T",
                UserWarning,
                stacklevel=2,
            )
            A = (A + A.T).tocsr()
        layers.append(A)
    return layers, nodes


def multicat_from_nx(graphs, gamma=1.0, omega=1.0, *, nodelist=None, weight="weight", **kwargs):
    """Build the multilayer modularity operator straight from NetworkX layers.

    Returns ``(B, twom, nodes)``; flattened index ``i + s*N`` refers to
    ``nodes[i]`` in layer ``s``.
    """
    layers, nodes = layers_from_nx(graphs, nodelist=nodelist, weight=weight)
    B, twom = multicat(layers, gamma, omega, **kwargs)
    return B, twom, nodes
