import json
from pathlib import Path

import pytest

from symnet.errors import InvalidParameter
from symnet.training import pipelines


def _config(run_dir, **train):
    config = pipelines.load_preset("and-gate")
    config["train"].update({"max_epoch": 40, "run_dir": str(run_dir)})
    config["train"].update(train)
    return config


def test_pipeline_produces_artifacts(tmp_path, capsys):
    dump_path = tmp_path / "dump.txt"
    result = pipelines.run_pipeline(_config(tmp_path / "run", dump_weights=str(dump_path)))

    assert result.state in {"converged", "epoch_limit"}
    assert 1 <= result.epochs <= 40
    assert 0.0 <= result.trial_accuracy <= 1.0

    metrics = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    assert len(metrics) == result.epochs
    assert all(m["total"] == 4 and m["split"] == "train" for m in metrics)

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["topology"] == {"input_length": 2, "layer_sizes": [1], "parameters": 3}
    assert manifest["dataset"]["train"] == 4 and manifest["dataset"]["trial"] == 4
    assert manifest["dataset"]["translators"] == {"0": "01"}

    summary = json.loads(Path(result.summary_path).read_text())
    assert summary["state"] == result.state
    assert summary["trial"]["total"] == 4

    corrections = sum(4 - m["correct"] for m in metrics)
    assert dump_path.read_text().count("LAYER 0") == corrections

    out = capsys.readouterr().out
    assert "Epoch   0 accuracy:" in out
    assert "Trial accuracy:" in out
    assert "CPU time spent training:" in out


def test_pipeline_is_deterministic(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "run_a"))
    second = pipelines.run_pipeline(_config(tmp_path / "run_b"))

    assert Path(first.metrics_path).read_bytes() == Path(second.metrics_path).read_bytes()
    assert Path(first.summary_path).read_bytes() == Path(second.summary_path).read_bytes()


def test_pipeline_prints_weights_before_and_after(tmp_path, capsys):
    pipelines.run_pipeline(_config(tmp_path / "run", print_weights=True, max_epoch=2))
    out = capsys.readouterr().out
    assert "Pre training weights:" in out
    assert "Post training weights:" in out
    assert out.count("NODE  0:") == 2


def test_pipeline_rejects_mismatched_output_layer(tmp_path):
    config = _config(tmp_path / "run")
    config["model"]["layer_sizes"] = [2]
    with pytest.raises(InvalidParameter):
        pipelines.run_pipeline(config)


def test_presets_include_file_presets():
    names = set(pipelines.presets())
    assert {"and-gate", "default", "and-gate-hidden"} <= names
    hidden = pipelines.load_preset("and-gate-hidden")
    assert hidden["model"]["layer_sizes"] == [2, 1]
    with pytest.raises(KeyError):
        pipelines.load_preset("nope")


def test_file_presets_ship_inside_the_package():
    import symnet

    package_dir = Path(symnet.__file__).resolve().parent
    assert pipelines._PRESET_DIR.resolve().is_relative_to(package_dir)
    assert (pipelines._PRESET_DIR / "and-gate-hidden.json").is_file()


def test_yaml_preset_files_are_loaded(tmp_path, monkeypatch):
    pytest.importorskip("yaml")
    (tmp_path / "and-gate-yaml.yaml").write_text(
        "data:\n  fixture: and_gate.csv\n  train_ratio: 0.5\n"
        "model:\n  layer_sizes: [1]\n"
        "train:\n  max_epoch: 3\n"
    )
    monkeypatch.setattr(pipelines, "_PRESET_DIR", tmp_path)
    monkeypatch.setattr(pipelines, "_FILE_PRESETS_CACHE", None)

    preset = pipelines.load_preset("and-gate-yaml")
    assert preset["model"]["layer_sizes"] == [1]
    assert "and-gate-yaml" in pipelines.presets()

    preset["train"]["run_dir"] = str(tmp_path / "run")
    result = pipelines.run_pipeline(preset)
    assert result.epochs <= 3
