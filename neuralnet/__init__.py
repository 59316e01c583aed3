"""neuralnet public API."""

from .core import activations, types  # noqa: F401
from .core.backprop import compute_gradients
from .core.errors import (
    DimensionMismatchError,
    EmptyBatchError,
    InvalidTopologyError,
    NetworkFormatError,
    NeuralNetError,
    ParseError,
)
from .core.forward import feed_forward, forward_trace
from .core.params import ParameterStore
from .core.types import Instance
from .io.serialization import deserialize, load, save, serialize
from .training.trainer import BatchPolicy, Trainer, mean_squared_error, run_batch, train

__all__ = [
    "BatchPolicy",
    "DimensionMismatchError",
    "EmptyBatchError",
    "Instance",
    "InvalidTopologyError",
    "NetworkFormatError",
    "NeuralNetError",
    "ParameterStore",
    "ParseError",
    "Trainer",
    "activations",
    "compute_gradients",
    "deserialize",
    "feed_forward",
    "forward_trace",
    "load",
    "mean_squared_error",
    "run_batch",
    "save",
    "serialize",
    "train",
    "types",
]
