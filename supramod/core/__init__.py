"""Assembly of the multilayer modularity operator."""

from ._Index import flat_index, flatten_partition, layer_of, layer_rows, node_of, unflatten_partition
from .operator import ModularityOperator, multicat

__all__ = [
    "ModularityOperator",
    "flat_index",
    "flatten_partition",
    "layer_of",
    "layer_rows",
    "multicat",
    "node_of",
    "unflatten_partition",
]
