"""Two-phase backpropagation for :class:`~symnet.core.network.Network`.

Phase 1 computes every node's delta from the output layer down, reading the
current weights only. Phase 2 applies all weight updates. Hidden deltas read
the weights of the layer above, so no weight may change until every delta
has been computed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

from ..errors import AllocationFailure, InvalidParameter
from .network import Network
from .types import Array, Example, Symbol


def compute_deltas(network: Network, desired: Sequence[Symbol]) -> List[Array]:
    """Return per-layer deltas for ``desired`` against the last forward pass.

    Raises :class:`~symnet.errors.UnknownSymbol` when a desired symbol was
    never observed by its translator. Nothing is committed to the network.
    """

    if len(desired) != network.output_length:
        raise InvalidParameter(
            f"desired output has {len(desired)} symbols, network produces "
            f"{network.output_length}"
        )
    last = network.layer_count - 1
    try:
        deltas: List[Array] = [np.empty(0)] * network.layer_count
        targets = np.array(
            [t.encode(symbol) for t, symbol in zip(network.translators, desired)],
            dtype=np.float64,
        )
        a = network.activations[last]
        deltas[last] = a * (1.0 - a) * (targets - a)
        for layer in range(last - 1, -1, -1):
            a = network.activations[layer]
            # column 0 of the next layer holds its bias weights
            downstream = network.weights[layer + 1][:, 1:].T @ deltas[layer + 1]
            deltas[layer] = a * (1.0 - a) * downstream
    except MemoryError as exc:
        raise AllocationFailure("failed to allocate memory to delta") from exc
    return deltas


def apply_deltas(
    network: Network,
    inputs: Sequence[Symbol],
    deltas: Sequence[Array],
    learning_rate: float,
    order: Iterable[int] | None = None,
) -> None:
    """Add ``learning_rate * source * delta`` to every weight in place."""

    layers = range(network.layer_count - 1, -1, -1) if order is None else order
    for layer in layers:
        source = network.layer_source(layer, inputs)
        network.weights[layer] += learning_rate * np.outer(deltas[layer], source)


@dataclass
class Backprop:
    """Online gradient correction with a fixed learning rate."""

    learning_rate: float

    def __post_init__(self) -> None:
        if not self.learning_rate > 0:
            raise InvalidParameter("learningRate must be greater than 0")

    def correct(self, network: Network, example: Example) -> List[Array]:
        """Correct ``network`` towards ``example`` after a forward pass on it."""

        deltas = compute_deltas(network, example.outputs)
        apply_deltas(network, example.inputs, deltas, self.learning_rate)
        return deltas


__all__ = ["Backprop", "apply_deltas", "compute_deltas"]
