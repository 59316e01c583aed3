"""Reporting utilities for neuralnet."""

from .metrics import JsonlSink
from .plots import PlotAdapter

__all__ = ["JsonlSink", "PlotAdapter"]
