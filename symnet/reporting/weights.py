"""Plain-text weight dumps."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, TextIO

from ..core.network import Network
from ..errors import FileAccessFailure


def format_weights(network: Network) -> str:
    """Render every weight, bias first, with two decimals per value."""

    lines: List[str] = []
    for layer, W in enumerate(network.weights):
        lines.append(f"LAYER {layer}")
        for node, row in enumerate(W):
            # positive values get an extra space so columns line up with minus signs
            values = "".join(f" {' ' if w > 0 else ''}{w:.2f}" for w in row)
            lines.append(f"NODE {node:2d}:{values}")
    return "\n".join(lines) + "\n"


class WeightDumpSink:
    """Write a weight snapshot after every correction."""

    def __init__(self, target: str | Path | TextIO) -> None:
        self._owned = isinstance(target, (str, Path))
        if self._owned:
            try:
                self.stream: TextIO = open(target, "w", encoding="utf-8")
            except OSError as exc:
                raise FileAccessFailure(f'could not open file "{target}"') from exc
        else:
            self.stream = target  # type: ignore[assignment]

    def write(self, network: Network) -> None:
        self.stream.write(format_weights(network))

    def on_correction(self, network: Network, epoch: int, index: int) -> None:
        self.write(network)

    def close(self) -> None:
        if self._owned and not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> "WeightDumpSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def print_weights(network: Network, title: str, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    print(f"\n{title}", file=out)
    out.write(format_weights(network))


__all__ = ["WeightDumpSink", "format_weights", "print_weights"]
