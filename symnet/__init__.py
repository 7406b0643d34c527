"""SymNet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.backprop import Backprop
from .core.network import DEFAULT_SEED, Network
from .core.translation import SymbolTranslator, build_translators
from .core.types import Example, Topology
from .errors import (
    AllocationFailure,
    FileAccessFailure,
    InvalidParameter,
    SymNetError,
    UnknownSymbol,
)
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer, TrainingState, evaluate

__all__ = [
    "AllocationFailure",
    "Backprop",
    "DEFAULT_SEED",
    "Example",
    "FileAccessFailure",
    "InvalidParameter",
    "Network",
    "SymNetError",
    "SymbolTranslator",
    "Topology",
    "Trainer",
    "TrainingState",
    "UnknownSymbol",
    "activations",
    "build_translators",
    "evaluate",
    "load_preset",
    "presets",
    "run_pipeline",
    "types",
]
