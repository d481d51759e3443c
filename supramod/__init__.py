# supramod/__init__.py
"""supramod: lazy multilayer modularity operators, single import."""

from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    # namespaces
    "core": "supramod.core",
    "algorithms": "supramod.algorithms",
    "adapters": "supramod.adapters",
    # adapter modules (direct convenience)
    "networkx": "supramod.adapters.networkx_adapter",
    "dataframe": "supramod.adapters.dataframe_adapter",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    # Core
    "multicat": ("supramod.core.operator", "multicat"),
    "ModularityOperator": ("supramod.core.operator", "ModularityOperator"),
    # Index helpers
    "flat_index": ("supramod.core._Index", "flat_index"),
    "layer_of": ("supramod.core._Index", "layer_of"),
    "node_of": ("supramod.core._Index", "node_of"),
    "flatten_partition": ("supramod.core._Index", "flatten_partition"),
    "unflatten_partition": ("supramod.core._Index", "unflatten_partition"),
    # Scoring
    "multislice_modularity": ("supramod.algorithms.quality", "multislice_modularity"),
    # NetworkX adapter (optional dependency)
    "layers_from_nx": ("supramod.adapters.networkx_adapter", "layers_from_nx"),
    "multicat_from_nx": ("supramod.adapters.networkx_adapter", "multicat_from_nx"),
    # Dataframes
    "layers_from_dataframe": ("supramod.adapters.dataframe_adapter", "layers_from_dataframe"),
    "partition_to_dataframe": ("supramod.adapters.dataframe_adapter", "partition_to_dataframe"),
}

__all__ = sorted(set(list(_lazy_submodules) + list(_lazy_symbols)))


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


# Version: prefer internal, then fall back to distribution metadata
try:
    from ._version import __version__  # type: ignore
except Exception:
    try:
        __version__ = _pkg_version("supramod")
    except PackageNotFoundError:
        __version__ = "0.0.0"
