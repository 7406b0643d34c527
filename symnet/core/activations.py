"""Activation utilities for SymNet."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..errors import InvalidParameter
from .types import Array, Symbol


def sigmoid(x: Array | float) -> Array | float:
    """Return the logistic activation ``1 / (1 + e^-x)``."""

    return 1.0 / (1.0 + np.exp(-x))


def encode_input(symbol: Symbol) -> float:
    """Map an input symbol onto ``[0, 1)`` by its byte value."""

    value = ord(symbol)
    if value > 255:
        raise InvalidParameter(f"input symbol {symbol!r} is not byte-valued")
    return value / 256.0


def encode_inputs(symbols: Sequence[Symbol]) -> Array:
    return np.fromiter((encode_input(s) for s in symbols), dtype=np.float64, count=len(symbols))


__all__ = ["sigmoid", "encode_input", "encode_inputs"]
