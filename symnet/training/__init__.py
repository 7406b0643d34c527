"""Training loop, configuration and pipeline assembly."""

from .config import RunConfig
from .trainer import ConvergenceMonitor, Trainer, TrainingState, evaluate

__all__ = ["ConvergenceMonitor", "RunConfig", "Trainer", "TrainingState", "evaluate"]
