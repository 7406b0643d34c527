"""Feed-forward network over symbol vectors.

The weight store is a list with one ``float64`` matrix per layer. Row ``n``
of layer ``l`` is node ``n``'s weight vector: column 0 holds the bias and
column ``i > 0`` weights the ``i``-th incoming activation. Shapes are fixed
at construction and every later update happens in place.
"""

from __future__ import annotations

from typing import List, Mapping, Sequence, Tuple

import numpy as np

from ..errors import AllocationFailure, InvalidParameter
from .activations import encode_inputs, sigmoid
from .translation import SymbolTranslator
from .types import Array, Symbol, Topology

DEFAULT_SEED = 0


class Network:
    """Weights, activation scratch space and output translators of one run."""

    def __init__(
        self,
        topology: Topology,
        translators: Sequence[SymbolTranslator],
        seed: int = DEFAULT_SEED,
    ) -> None:
        if len(translators) != topology.output_length:
            raise InvalidParameter(
                f"expected {topology.output_length} output translators, got {len(translators)}"
            )
        self.topology = topology
        self.translators = list(translators)
        self.seed = seed
        rng = np.random.default_rng(seed)
        try:
            self.weights: List[Array] = [
                rng.uniform(-1.0, 1.0, size=shape) for shape in topology.weight_shapes()
            ]
            self.activations: List[Array] = [
                np.zeros(n, dtype=np.float64) for n in topology.layer_sizes
            ]
        except MemoryError as exc:
            raise AllocationFailure(f"failed to allocate network for {topology}") from exc

    @property
    def layer_count(self) -> int:
        return self.topology.layer_count

    @property
    def output_length(self) -> int:
        return self.topology.output_length

    def forward(self, inputs: Sequence[Symbol]) -> Tuple[Symbol, ...]:
        """Propagate ``inputs`` and return the decoded output symbols.

        Overwrites :attr:`activations`; only one pass may be in flight per
        instance.
        """

        if len(inputs) != self.topology.input_length:
            raise InvalidParameter(
                f"input vector has {len(inputs)} symbols, network expects "
                f"{self.topology.input_length}"
            )
        source = encode_inputs(inputs)
        for W, out in zip(self.weights, self.activations):
            out[:] = sigmoid(W[:, 0] + W[:, 1:] @ source)
            source = out
        return tuple(
            translator.decode(float(a))
            for translator, a in zip(self.translators, self.activations[-1])
        )

    def layer_source(self, layer: int, inputs: Sequence[Symbol]) -> Array:
        """Activations feeding ``layer``, with the constant bias input prepended."""

        previous = encode_inputs(inputs) if layer == 0 else self.activations[layer - 1]
        return np.concatenate(([1.0], previous))

    def state_dict(self) -> Mapping[str, Array]:
        return {f"W{idx}": W.copy() for idx, W in enumerate(self.weights)}

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        shapes = self.topology.weight_shapes()
        for idx, shape in enumerate(shapes):
            key = f"W{idx}"
            if key not in state:
                raise InvalidParameter(f"state holds no weight matrix {key}")
            value = np.asarray(state[key], dtype=np.float64)
            if value.shape != shape:
                raise InvalidParameter(
                    f"weight {key} has shape {value.shape}, topology requires {shape}"
                )
            self.weights[idx][...] = value

    def parameter_count(self) -> int:
        return int(sum(int(w.size) for w in self.weights))


__all__ = ["DEFAULT_SEED", "Network"]
