"""Reporting utilities for SymNet."""

from .artifacts import write_manifest
from .metrics import ConsoleSink, CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import write_summary
from .weights import WeightDumpSink, format_weights

__all__ = [
    "ConsoleSink",
    "CsvSink",
    "JsonlSink",
    "PlotAdapter",
    "WeightDumpSink",
    "format_weights",
    "write_manifest",
    "write_summary",
]
