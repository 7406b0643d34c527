"""Utility helpers for symbol tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from ..core.types import Example
from ..errors import InvalidParameter


@dataclass(frozen=True)
class Partition:
    """Training and trial examples, in table order."""

    train: Tuple[Example, ...]
    trial: Tuple[Example, ...]

    @property
    def sizes(self) -> dict:
        return {"train": len(self.train), "trial": len(self.trial)}


def partition(examples: Sequence[Example], ratio: float) -> Partition:
    """Split ``examples`` so the first ``int(len * ratio)`` are used for training."""

    if not 0 < ratio < 1:
        raise InvalidParameter("trainingPartionRatio must be between 0 and 1 (exclusive)")
    cut = int(len(examples) * ratio)
    if cut < 1:
        raise InvalidParameter(
            f"training partition of {ratio} leaves no training examples out of {len(examples)}"
        )
    return Partition(train=tuple(examples[:cut]), trial=tuple(examples[cut:]))


def interpolate_layer_sizes(input_length: int, output_length: int, layer_count: int) -> list[int]:
    """Default node counts easing from ``input_length`` down to ``output_length``.

    The first layer takes the input width, the last the output width, and
    interior layers are filled by recursive midpoint averaging.
    """

    if layer_count < 1:
        raise InvalidParameter("number of layers must be greater than 0")
    sizes = [0] * layer_count
    sizes[0] = input_length
    sizes[-1] = output_length

    def fill(start: int, end: int) -> None:
        if start + 1 >= end:
            return
        mid = (start + end) // 2
        sizes[mid] = (sizes[start] + sizes[end]) // 2
        fill(start, mid)
        fill(mid, end)

    fill(0, layer_count - 1)
    return sizes


__all__ = ["Partition", "partition", "interpolate_layer_sizes"]
