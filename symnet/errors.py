"""Exception taxonomy for SymNet.

Every failure aborts the run at the point of detection; nothing in the
package retries or recovers locally.
"""

from __future__ import annotations


class SymNetError(Exception):
    """Base class for all SymNet failures."""


class AllocationFailure(SymNetError, MemoryError):
    """Storage for weights, activations or deltas could not be allocated."""


class FileAccessFailure(SymNetError, OSError):
    """A table, dump file or artifact could not be opened."""


class InvalidParameter(SymNetError, ValueError):
    """A configuration value or data shape is out of range."""


class UnknownSymbol(SymNetError, KeyError):
    """A desired output symbol was never observed for its output position."""

    def __init__(self, symbol: str, dimension: int | None = None) -> None:
        self.symbol = symbol
        self.dimension = dimension
        where = "" if dimension is None else f" at output position {dimension}"
        super().__init__(f"symbol {symbol!r} not found in translation entries{where}")

    def __str__(self) -> str:
        return str(self.args[0])


__all__ = [
    "SymNetError",
    "AllocationFailure",
    "FileAccessFailure",
    "InvalidParameter",
    "UnknownSymbol",
]
