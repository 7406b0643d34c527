"""Epoch-wise online training loop and trial evaluation."""

from __future__ import annotations

import time
from enum import Enum
from typing import List, Mapping, Sequence

from ..core.backprop import Backprop
from ..core.network import Network
from ..core.types import Example, TrainResult, TrialResult
from ..errors import InvalidParameter, SymNetError


class TrainingState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    EPOCH_LIMIT = "epoch_limit"
    FAILED = "failed"


class ConvergenceMonitor:
    """Detect a training plateau from a circular buffer of epoch accuracies.

    After ``n`` completed epochs the slot ``n % R`` still holds the correct
    count from ``R`` epochs earlier; training has converged when that count
    and the latest one differ by less than ``10 ** -precision`` percent of the
    training set. Slots start at zero and the test only runs once ``R``
    epochs have been recorded.
    """

    def __init__(self, convergence_range: int, precision: int, training_count: int) -> None:
        if convergence_range <= 1:
            raise InvalidParameter("convergance range must be greater than 1")
        if precision < 0:
            raise InvalidParameter("convergance precision must be at least 0")
        if training_count < 1:
            raise InvalidParameter("training set must contain at least one example")
        self.convergence_range = convergence_range
        self.scale = 100 * 10**precision
        self.training_count = training_count
        self.window: List[int] = [0] * convergence_range

    def record(self, epoch: int, correct: int) -> None:
        self.window[epoch % self.convergence_range] = correct

    def difference(self, completed: int) -> int:
        R = self.convergence_range
        return self.window[completed % R] - self.window[(completed - 1) % R]

    def converged(self, completed: int) -> bool:
        if completed < self.convergence_range:
            return False
        # integer quotient truncated toward zero is 0 iff |numerator| < denominator
        return abs(self.scale * self.difference(completed)) < self.training_count


def _matches(outputs: Sequence[str], desired: Sequence[str]) -> bool:
    return tuple(outputs) == tuple(desired)


def evaluate(network: Network, examples: Sequence[Example]) -> TrialResult:
    """Forward-only accuracy of ``network`` on ``examples``."""

    correct = sum(1 for ex in examples if _matches(network.forward(ex.inputs), ex.outputs))
    return TrialResult(correct=correct, total=len(examples))


class Trainer:
    """Run online backpropagation epochs until convergence or the epoch limit."""

    def __init__(
        self,
        network: Network,
        engine: Backprop,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.engine = engine
        self.callbacks = list(callbacks or [])
        self.state = TrainingState.RUNNING
        self.history: List[int] = []

    def run(
        self,
        examples: Sequence[Example],
        max_epoch: int,
        *,
        precision: int = 2,
        convergence_range: int = 32,
    ) -> TrainResult:
        if max_epoch <= 0:
            raise InvalidParameter("maxEpoch must be greater than 0")
        monitor = ConvergenceMonitor(convergence_range, precision, len(examples))
        self.state = TrainingState.RUNNING
        self.history = []
        start = time.process_time()

        epoch = 0
        while self.state is TrainingState.RUNNING:
            try:
                correct = self._run_epoch(examples, epoch)
            except SymNetError:
                self.state = TrainingState.FAILED
                raise
            monitor.record(epoch, correct)
            self.history.append(correct)
            self._emit_epoch(
                epoch,
                {
                    "correct": correct,
                    "total": len(examples),
                    "accuracy": correct / len(examples),
                },
            )
            epoch += 1
            if epoch >= max_epoch:
                self.state = TrainingState.EPOCH_LIMIT
            elif monitor.converged(epoch):
                self.state = TrainingState.CONVERGED

        return TrainResult(
            state=self.state.value,
            epochs=epoch,
            training_count=len(examples),
            history=list(self.history),
            elapsed=time.process_time() - start,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _run_epoch(self, examples: Sequence[Example], epoch: int) -> int:
        correct = 0
        for index, example in enumerate(examples):
            outputs = self.network.forward(example.inputs)
            if _matches(outputs, example.outputs):
                correct += 1
                continue
            self.engine.correct(self.network, example)
            for callback in self.callbacks:
                if hasattr(callback, "on_correction"):
                    callback.on_correction(self.network, epoch, index)  # type: ignore[attr-defined]
        return correct

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["ConvergenceMonitor", "Trainer", "TrainingState", "evaluate"]
