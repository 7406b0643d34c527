"""Core numerical primitives for SymNet."""

from . import activations, backprop, network, translation, types

__all__ = ["activations", "backprop", "network", "translation", "types"]
