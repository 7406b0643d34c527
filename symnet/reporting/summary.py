"""Deterministic run summarisation helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping

import numpy as np

_SKIP_KEYS = {"epoch", "seed", "total"}


def _read_records(path: Path) -> list[Mapping[str, object]]:
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def _series(records: Iterable[Mapping[str, object]]) -> Mapping[str, list[float]]:
    series: dict[str, list[float]] = {}
    for record in records:
        for key, value in record.items():
            if key in _SKIP_KEYS or isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                series.setdefault(key, []).append(float(value))
    return series


def summarise(
    records: list[Mapping[str, object]],
    *,
    tail: int = 32,
    extra: Mapping[str, object] | None = None,
) -> Mapping[str, object]:
    tail_window = min(tail, len(records))
    metrics: dict[str, Mapping[str, float]] = {}
    for name, values in _series(records).items():
        arr = np.asarray(values, dtype=np.float64)
        tail_arr = arr[-tail_window:] if tail_window else arr
        metrics[name] = {
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "mean": float(np.mean(arr)),
            "last": float(arr[-1]),
            "tail_mean": float(np.mean(tail_arr)),
        }
    summary: dict[str, object] = {
        "version": 1,
        "records": len(records),
        "tail_window": tail_window,
        "metrics": metrics,
    }
    if extra:
        summary.update(extra)
    return summary


def write_summary(
    metrics_jsonl: str | Path,
    out_summary_json: str | Path,
    *,
    tail: int = 32,
    extra: Mapping[str, object] | None = None,
) -> str:
    """Write a deterministic summary for ``metrics_jsonl``."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = summarise(_read_records(Path(metrics_jsonl)), tail=tail, extra=extra)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["summarise", "write_summary"]
