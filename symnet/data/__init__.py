"""Symbol table loading and partitioning."""

from .table import TableInfo, inspect_table, read_table
from .utils import Partition, interpolate_layer_sizes, partition

__all__ = [
    "TableInfo",
    "Partition",
    "inspect_table",
    "interpolate_layer_sizes",
    "partition",
    "read_table",
]
