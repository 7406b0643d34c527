"""Resolved run configuration.

Configurations are nested mappings with ``data``, ``model`` and ``train``
sections, the shape shared by presets, override files and the command line.
:class:`RunConfig` flattens them, applies defaults and validates ranges.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Mapping, Optional

from ..core.network import DEFAULT_SEED
from ..core.types import Topology
from ..data.utils import interpolate_layer_sizes
from ..errors import InvalidParameter


@dataclass(frozen=True)
class RunConfig:
    path: str
    output_length: int = 1
    delimiter: str = ","
    train_ratio: float = 0.80
    layer_count: Optional[int] = None
    layer_sizes: Optional[List[int]] = None
    seed: int = DEFAULT_SEED
    lr: float = 0.1
    max_epoch: int = 1000
    precision: int = 2
    convergence_range: int = 32
    dump_weights: Optional[str] = None
    print_weights: bool = False
    run_dir: Optional[str] = None
    enable_plots: bool = False
    summary_tail: int = 32

    @classmethod
    def from_mapping(cls, config: Mapping[str, object]) -> "RunConfig":
        data_cfg = dict(config.get("data", {}))  # type: ignore[arg-type]
        model_cfg = dict(config.get("model", {}))  # type: ignore[arg-type]
        train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]
        if not data_cfg.get("path"):
            raise InvalidParameter("usage: symnet TABLE; no symbol table configured")

        layer_count = model_cfg.get("layer_count")
        layer_sizes = model_cfg.get("layer_sizes")
        dump = train_cfg.get("dump_weights")
        run_dir = train_cfg.get("run_dir")
        resolved = cls(
            path=str(data_cfg["path"]),
            output_length=int(data_cfg.get("output_length", 1)),
            delimiter=str(data_cfg.get("delimiter", ",")),
            train_ratio=float(data_cfg.get("train_ratio", 0.80)),
            layer_count=int(layer_count) if layer_count is not None else None,
            layer_sizes=[int(n) for n in layer_sizes] if layer_sizes is not None else None,
            seed=int(model_cfg.get("seed", DEFAULT_SEED)),
            lr=float(train_cfg.get("lr", 0.1)),
            max_epoch=int(train_cfg.get("max_epoch", 1000)),
            precision=int(train_cfg.get("precision", 2)),
            convergence_range=int(train_cfg.get("convergence_range", 32)),
            dump_weights=str(dump) if dump else None,
            print_weights=bool(train_cfg.get("print_weights", False)),
            run_dir=str(run_dir) if run_dir else None,
            enable_plots=bool(train_cfg.get("enable_plots", False)),
            summary_tail=int(train_cfg.get("summary_tail", 32)),
        )
        resolved.validate()
        return resolved

    def validate(self) -> None:
        if self.output_length < 1:
            raise InvalidParameter("length of final output vector must be greater than 0")
        if len(self.delimiter) != 1:
            raise InvalidParameter("delimiter must be a single byte")
        if not 0 < self.train_ratio < 1:
            raise InvalidParameter("trainingPartionRatio must be between 0 and 1 (exclusive)")
        if self.layer_count is not None and self.layer_count < 1:
            raise InvalidParameter("number of layers must be greater than 0")
        if self.layer_sizes is not None:
            if self.layer_count is not None and len(self.layer_sizes) != self.layer_count:
                raise InvalidParameter("number of nodeCounts must match number of layers")
            if not self.layer_sizes or any(n < 1 for n in self.layer_sizes):
                raise InvalidParameter("no layer may contain less than 1 node")
            if self.layer_sizes[-1] != self.output_length:
                raise InvalidParameter(
                    "number of nodes in output layer (final layer) must match outputLen"
                )
        if not self.lr > 0:
            raise InvalidParameter("learningRate must be greater than 0")
        if self.max_epoch < 1:
            raise InvalidParameter("maxEpoch must be greater than 0")
        if self.precision < 0:
            raise InvalidParameter("convergance precision must be at least 0")
        if self.convergence_range <= 1:
            raise InvalidParameter("convergance range must be greater than 1")

    def topology(self, input_length: int) -> Topology:
        """Build the topology for a table with ``input_length`` input symbols."""

        if self.layer_sizes is not None:
            sizes = list(self.layer_sizes)
        else:
            count = self.layer_count or max(1, input_length // 7)
            sizes = interpolate_layer_sizes(input_length, self.output_length, count)
        return Topology(input_length=input_length, layer_sizes=tuple(sizes))

    def to_dict(self) -> Mapping[str, object]:
        return asdict(self)


__all__ = ["RunConfig"]
