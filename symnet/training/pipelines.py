"""Pipeline assembly: table to trained, evaluated network."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping

from ..core.backprop import Backprop
from ..core.network import Network
from ..core.translation import build_translators
from ..core.types import RunResult, Topology
from ..data.table import inspect_table, read_table
from ..data.utils import partition
from ..errors import InvalidParameter
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import ConsoleSink, CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from ..reporting.weights import WeightDumpSink, print_weights
from .config import RunConfig
from .trainer import Trainer, evaluate

FIXTURE_DIR = Path(__file__).resolve().parents[1] / "data" / "_fixtures"

_PRESETS: Dict[str, Mapping[str, object]] = {
    "and-gate": {
        "data": {"fixture": "and_gate.csv", "output_length": 1, "train_ratio": 0.5},
        "model": {"layer_count": 1, "layer_sizes": [1], "seed": 0},
        "train": {
            "lr": 0.5,
            "max_epoch": 5000,
            "precision": 2,
            "convergence_range": 32,
            "run_dir": "runs/and-gate",
            "enable_plots": False,
        },
    },
    "default": {
        "data": {"output_length": 1, "train_ratio": 0.80},
        "model": {"seed": 0},
        "train": {
            "lr": 0.1,
            "max_epoch": 1000,
            "precision": 2,
            "convergence_range": 32,
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[1] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def _read_preset_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load preset files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported preset file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Preset {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = _read_preset_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def resolve_fixture(config: Mapping[str, object]) -> Mapping[str, object]:
    """Replace a ``data.fixture`` name with the path of the bundled table."""

    resolved = deepcopy(dict(config))
    data_cfg = dict(resolved.get("data", {}))
    fixture = data_cfg.pop("fixture", None)
    if fixture and not data_cfg.get("path"):
        data_cfg["path"] = str(FIXTURE_DIR / str(fixture))
    resolved["data"] = data_cfg
    return resolved


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Read the table, train a network on it and evaluate the trial split."""

    cfg = RunConfig.from_mapping(resolve_fixture(config))
    info = inspect_table(cfg.path, cfg.output_length, cfg.delimiter)
    topology = cfg.topology(info.input_length)
    examples = read_table(cfg.path, info.input_length, info.output_length)
    if not examples:
        raise InvalidParameter(f"table {cfg.path} holds no records")
    split = partition(examples, cfg.train_ratio)

    # translators see the whole table so trial symbols are decodable as well
    translators = build_translators(examples, info.output_length)
    network = Network(topology, translators, seed=cfg.seed)

    run_dir = _resolve_run_dir(cfg)
    run_dir.mkdir(parents=True, exist_ok=True)
    _print_startup_summary(cfg, topology, split.sizes)

    train_jsonl = JsonlSink(run_dir / "metrics_train.jsonl", split="train", seed=cfg.seed)
    train_csv = CsvSink(run_dir / "metrics_train.csv", split="train")
    plots = PlotAdapter(run_dir, enable_plots=cfg.enable_plots)
    callbacks: List[object] = [ConsoleSink(), train_jsonl, train_csv, plots]

    if cfg.print_weights:
        print_weights(network, "Pre training weights:")

    print("\nTraining ANN...")
    dump = WeightDumpSink(cfg.dump_weights) if cfg.dump_weights else None
    if dump is not None:
        callbacks.append(dump)
    trainer = Trainer(network, Backprop(learning_rate=cfg.lr), callbacks=callbacks)
    try:
        train_result = trainer.run(
            split.train,
            cfg.max_epoch,
            precision=cfg.precision,
            convergence_range=cfg.convergence_range,
        )
    finally:
        if dump is not None:
            dump.close()
        plots.close()

    if cfg.print_weights:
        print_weights(network, "Post training weights:")

    print("\nTesting ANN...")
    trial = evaluate(network, split.trial)
    print(
        f"Trial accuracy: {trial.correct} / {trial.total} = {100 * trial.accuracy:.2f}%"
    )
    print(f"CPU time spent training: {train_result.elapsed:.2f}s")

    trial_metrics = {
        "correct": trial.correct,
        "total": trial.total,
        "accuracy": trial.accuracy,
    }
    (run_dir / "metrics_trial.json").write_text(json.dumps(trial_metrics, indent=2))

    summary_path = write_summary(
        train_jsonl.path,
        run_dir / "summary.json",
        tail=cfg.summary_tail,
        extra={
            "state": train_result.state,
            "epochs": train_result.epochs,
            "trial": trial_metrics,
        },
    )
    safe_config = dict(cfg.to_dict())
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance={
            "path": info.path,
            "records": info.record_count,
            "train": len(split.train),
            "trial": len(split.trial),
            "translators": {str(t.dimension): "".join(t.symbols) for t in translators},
        },
        topology={
            "input_length": topology.input_length,
            "layer_sizes": list(topology.layer_sizes),
            "parameters": network.parameter_count(),
        },
    )
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        state=train_result.state,
        epochs=train_result.epochs,
        trial_accuracy=trial.accuracy,
        elapsed=train_result.elapsed,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
    )


def _resolve_run_dir(cfg: RunConfig) -> Path:
    if cfg.run_dir:
        return Path(cfg.run_dir)
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / Path(cfg.path).stem


def _print_startup_summary(cfg: RunConfig, topology: Topology, sizes: Mapping[str, int]) -> None:
    print("=== SymNet run ===")
    print(f"Table          : {cfg.path}")
    print(f"Records        : {sizes['train']} train / {sizes['trial']} trial")
    print(f"Network        : {topology.layer_count} layers")
    print(f"Input length   : {topology.input_length}")
    print(f"Node counts    : {', '.join(str(n) for n in topology.layer_sizes)}")
    print(f"Output length  : {topology.output_length}")
    print(f"Learning rate  : {cfg.lr}")
    print(f"Max epoch      : {cfg.max_epoch}")
    print(f"Convergence    : precision {cfg.precision}, range {cfg.convergence_range}")
    if cfg.dump_weights:
        print(f"Weight dump    : {cfg.dump_weights}")
    print("==================")


__all__ = ["FIXTURE_DIR", "load_preset", "presets", "resolve_fixture", "run_pipeline"]
