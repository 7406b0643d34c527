"""Train and trial a symbol network on a delimited character table."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from symnet.errors import FileAccessFailure, InvalidParameter, SymNetError
from symnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "state": result.state,
        "epochs": result.epochs,
        "trial_accuracy": result.trial_accuracy,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if getattr(result, "summary_path", ""):
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("table", nargs="?", help="Symbol table; the first line is a header")
    parser.add_argument(
        "--preset",
        choices=sorted(pipelines.presets().keys()),
        help="Preset configuration to start from",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("-o", "--output-length", type=int, help="Length of the output vector")
    parser.add_argument("-l", "--layer-count", type=int, help="Number of layers, output included")
    parser.add_argument(
        "-n",
        "--nodes",
        nargs="+",
        help="Node count of every layer, in order; exactly --layer-count values are read",
    )
    parser.add_argument("-r", "--learning-rate", type=float, help="Learning rate (> 0)")
    parser.add_argument("-e", "--max-epoch", type=int, help="Maximum number of epochs")
    parser.add_argument(
        "-t", "--train-ratio", type=float, help="Share of records used for training"
    )
    parser.add_argument("-d", "--dump-weights", help="Write weights after every correction")
    parser.add_argument(
        "-b", "--print-weights", action="store_true", help="Print weights before and after training"
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Decimal digits of accuracy that must hold steady"
    )
    parser.add_argument(
        "-c", "--convergence-range", type=int, help="Epochs compared to detect convergence"
    )
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument("--run-dir", help="Directory receiving metrics and artifacts")
    parser.add_argument("--enable-plots", action="store_true", help="Write accuracy.png")
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    args = parser.parse_args(argv)
    if args.nodes is not None:
        if args.layer_count is None:
            parser.error("flag -n should not be used without specifying layerCount via flag -l")
        counts, extra = args.nodes[: args.layer_count], args.nodes[args.layer_count :]
        # a table written after -n is picked up by the node list
        if extra:
            if args.table is not None or len(extra) > 1:
                parser.error(f"unrecognized arguments: {' '.join(extra)}")
            args.table = extra[0]
        try:
            args.nodes = [int(n) for n in counts]
        except ValueError:
            parser.error(f"argument -n/--nodes: invalid int value in {counts}")
    return args


def _load_override(path: Path) -> dict:
    try:
        text = path.read_text()
    except OSError as exc:
        raise FileAccessFailure(f'could not open config file "{path}"') from exc
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, dict):
        raise InvalidParameter(f"config file {path} must hold a mapping")
    return data


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset(args.preset or "default")))
    if args.config:
        config = _merge(config, _load_override(args.config))

    data_cfg = config.setdefault("data", {})
    model_cfg = config.setdefault("model", {})
    train_cfg = config.setdefault("train", {})
    if args.table:
        data_cfg["path"] = args.table
        data_cfg.pop("fixture", None)
    if args.output_length is not None:
        data_cfg["output_length"] = args.output_length
    if args.train_ratio is not None:
        data_cfg["train_ratio"] = args.train_ratio
    if args.layer_count is not None:
        model_cfg["layer_count"] = args.layer_count
        model_cfg["layer_sizes"] = args.nodes
    if args.seed is not None:
        model_cfg["seed"] = args.seed
    flags = {
        "lr": args.learning_rate,
        "max_epoch": args.max_epoch,
        "precision": args.precision,
        "convergence_range": args.convergence_range,
        "dump_weights": args.dump_weights,
        "run_dir": args.run_dir,
    }
    train_cfg.update({k: v for k, v in flags.items() if v is not None})
    if args.print_weights:
        train_cfg["print_weights"] = True
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    try:
        config = build_config(args)
        if args.dump_config:
            args.dump_config.parent.mkdir(parents=True, exist_ok=True)
            args.dump_config.write_text(json.dumps(config, indent=2))
        result = pipelines.run_pipeline(config)
    except SymNetError as exc:
        raise SystemExit(f"error: {exc}") from exc
    print(_format_result(result))


if __name__ == "__main__":
    main()
