"""Core typing contracts for SymNet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from ..errors import InvalidParameter

Array = np.ndarray
Symbol = str


@dataclass(frozen=True)
class Example:
    """A labelled pair of symbol vectors."""

    inputs: Tuple[Symbol, ...]
    outputs: Tuple[Symbol, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))


@dataclass(frozen=True)
class Topology:
    """Structural description of the feed-forward network.

    Attributes
    ----------
    input_length:
        Width of the input symbol vector.
    layer_sizes:
        Node count of every layer, excluding the input and including the
        output layer. The last entry is the output width.
    """

    input_length: int
    layer_sizes: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "layer_sizes", tuple(int(n) for n in self.layer_sizes))
        if self.input_length < 1:
            raise InvalidParameter("input length must be greater than 0")
        if not self.layer_sizes:
            raise InvalidParameter("number of layers must be greater than 0")
        if any(n < 1 for n in self.layer_sizes):
            raise InvalidParameter("no layer may contain less than 1 node")

    @property
    def layer_count(self) -> int:
        return len(self.layer_sizes)

    @property
    def output_length(self) -> int:
        return self.layer_sizes[-1]

    def fan_in(self, layer: int) -> int:
        return self.input_length if layer == 0 else self.layer_sizes[layer - 1]

    def weight_shapes(self) -> List[Tuple[int, int]]:
        """Shape of each layer's weight matrix, bias column included."""

        return [(n, self.fan_in(l) + 1) for l, n in enumerate(self.layer_sizes)]


@dataclass(frozen=True)
class TrialResult:
    """Outcome of a forward-only accuracy measurement."""

    correct: int
    total: int

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`symnet.training.trainer.Trainer.run`."""

    state: str
    epochs: int
    training_count: int
    history: List[int] = field(default_factory=list)
    elapsed: float = 0.0


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`symnet.training.pipelines.run_pipeline`."""

    state: str
    epochs: int
    trial_accuracy: float
    elapsed: float
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
