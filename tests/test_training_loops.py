from __future__ import annotations

from typing import List, Mapping

import numpy as np
import pytest

from symnet.core.backprop import Backprop
from symnet.core.network import Network
from symnet.core.translation import build_translators
from symnet.core.types import Example, Topology
from symnet.errors import InvalidParameter, UnknownSymbol
from symnet.training.trainer import ConvergenceMonitor, Trainer, TrainingState, evaluate

AND_EXAMPLES = [
    Example(inputs=("0", "0"), outputs=("0",)),
    Example(inputs=("0", "1"), outputs=("0",)),
    Example(inputs=("1", "0"), outputs=("0",)),
    Example(inputs=("1", "1"), outputs=("1",)),
]


class _Capture:
    def __init__(self) -> None:
        self.epochs: List[tuple[int, Mapping[str, float]]] = []
        self.corrections: List[tuple[int, int]] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.epochs.append((epoch, dict(metrics)))

    def on_correction(self, network, epoch: int, index: int) -> None:
        self.corrections.append((epoch, index))


def _single_layer(examples, seed=0):
    translators = build_translators(examples, output_length=1)
    return Network(Topology(input_length=2, layer_sizes=(1,)), translators, seed=seed)


def test_convergence_monitor_truncates_toward_zero():
    monitor = ConvergenceMonitor(convergence_range=3, precision=0, training_count=4)
    for epoch, correct in enumerate([1, 2, 3]):
        monitor.record(epoch, correct)
    assert not monitor.converged(2)
    assert monitor.difference(3) == 1 - 3
    assert not monitor.converged(3)

    loose = ConvergenceMonitor(convergence_range=2, precision=0, training_count=1000)
    loose.record(0, 5)
    loose.record(1, 4)
    assert loose.difference(2) == 1
    assert loose.converged(2)
    loose.record(2, 6)
    assert loose.difference(3) == -2
    assert loose.converged(3)

    strict = ConvergenceMonitor(convergence_range=2, precision=1, training_count=1000)
    strict.record(0, 5)
    strict.record(1, 4)
    assert not strict.converged(2)


def test_convergence_is_not_tested_before_window_fills():
    monitor = ConvergenceMonitor(convergence_range=4, precision=2, training_count=4)
    monitor.record(0, 0)
    # the unfilled slot reads 0, which would otherwise equal a zero-accuracy epoch
    assert monitor.difference(1) == 0
    assert not monitor.converged(1)


@pytest.mark.parametrize(
    "kwargs", [dict(convergence_range=1), dict(precision=-1)]
)
def test_convergence_monitor_validates(kwargs):
    params = dict(convergence_range=3, precision=2, training_count=4)
    params.update(kwargs)
    with pytest.raises(InvalidParameter):
        ConvergenceMonitor(**params)


def test_and_gate_with_separating_weights_converges_after_one_window():
    network = _single_layer(AND_EXAMPLES)
    # z = -97.5 + byte(a) + byte(b): -1.5, -0.5, -0.5, 0.5
    network.load_state_dict({"W0": np.array([[-97.5, 256.0, 256.0]])})
    capture = _Capture()
    trainer = Trainer(network, Backprop(learning_rate=0.5), callbacks=[capture])

    result = trainer.run(AND_EXAMPLES, max_epoch=5000, precision=2, convergence_range=32)

    assert result.state == TrainingState.CONVERGED.value
    assert result.epochs == 32
    assert result.history == [4] * 32
    assert capture.corrections == []
    assert evaluate(network, AND_EXAMPLES).accuracy == 1.0


def test_digit_and_gate_plateaus_before_epoch_limit():
    # '0' and '1' encode to 48/256 and 49/256, too close for one sigmoid node
    # to separate, so accuracy stalls and the plateau test ends the run
    network = _single_layer(AND_EXAMPLES, seed=0)
    trainer = Trainer(network, Backprop(learning_rate=0.5))

    result = trainer.run(AND_EXAMPLES, max_epoch=5000, precision=2, convergence_range=32)

    assert result.state == TrainingState.CONVERGED.value
    assert 32 <= result.epochs < 100
    assert 4 not in result.history
    assert evaluate(network, AND_EXAMPLES).accuracy < 1.0


def test_and_gate_is_learned_from_random_weights():
    low, high = "\x00", "\xff"
    examples = [
        Example(inputs=(low, low), outputs=("0",)),
        Example(inputs=(low, high), outputs=("0",)),
        Example(inputs=(high, low), outputs=("0",)),
        Example(inputs=(high, high), outputs=("1",)),
    ]
    network = _single_layer(examples)
    trainer = Trainer(network, Backprop(learning_rate=0.5))

    result = trainer.run(examples, max_epoch=10000, precision=2, convergence_range=3000)

    assert result.state == TrainingState.CONVERGED.value
    assert result.epochs < 10000
    assert result.history[-1] == 4
    assert evaluate(network, examples).accuracy == 1.0


def test_epoch_limit_and_per_epoch_callbacks():
    network = _single_layer(AND_EXAMPLES, seed=4)
    capture = _Capture()
    trainer = Trainer(network, Backprop(learning_rate=0.5), callbacks=[capture])

    result = trainer.run(AND_EXAMPLES, max_epoch=5, precision=2, convergence_range=32)

    assert result.state == TrainingState.EPOCH_LIMIT.value
    assert result.epochs == 5
    assert [epoch for epoch, _ in capture.epochs] == [0, 1, 2, 3, 4]
    for (_, metrics), correct in zip(capture.epochs, result.history):
        assert metrics["correct"] == correct
        assert metrics["total"] == 4
        assert metrics["accuracy"] == correct / 4
    mistakes = sum(4 - c for c in result.history)
    assert len(capture.corrections) == mistakes


def test_unknown_desired_symbol_fails_the_run():
    translators = build_translators(AND_EXAMPLES, output_length=1)
    network = Network(Topology(input_length=2, layer_sizes=(1,)), translators, seed=1)
    snapshot = network.state_dict()
    malformed = [Example(inputs=("1", "1"), outputs=("7",))]
    trainer = Trainer(network, Backprop(learning_rate=0.5))

    with pytest.raises(UnknownSymbol):
        trainer.run(malformed, max_epoch=10)

    assert trainer.state is TrainingState.FAILED
    state = network.state_dict()
    assert np.array_equal(state["W0"], snapshot["W0"])


def test_evaluate_does_not_touch_weights():
    network = _single_layer(AND_EXAMPLES, seed=2)
    snapshot = network.state_dict()
    trial = evaluate(network, AND_EXAMPLES)
    assert trial.total == 4
    assert 0 <= trial.correct <= 4
    assert np.array_equal(network.state_dict()["W0"], snapshot["W0"])
    assert evaluate(network, []).accuracy == 0.0


def test_trainer_rejects_non_positive_max_epoch():
    trainer = Trainer(_single_layer(AND_EXAMPLES), Backprop(learning_rate=0.5))
    with pytest.raises(InvalidParameter):
        trainer.run(AND_EXAMPLES, max_epoch=0)
