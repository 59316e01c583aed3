"""Error taxonomy shared by the core, the readers and the CLI."""

from __future__ import annotations


class NeuralNetError(Exception):
    """Base class for every error raised by :mod:`neuralnet`."""


class InvalidTopologyError(NeuralNetError, ValueError):
    """The network shape is malformed."""


class DimensionMismatchError(NeuralNetError, ValueError):
    """A vector length disagrees with the network topology."""


class EmptyBatchError(NeuralNetError, ValueError):
    """A batch clipped down to zero instances."""


class ParseError(NeuralNetError, ValueError):
    """A dataset line or CLI vector could not be parsed."""


class NetworkFormatError(NeuralNetError, ValueError):
    """A persisted network file is corrupt or inconsistent."""


__all__ = [
    "NeuralNetError",
    "InvalidTopologyError",
    "DimensionMismatchError",
    "EmptyBatchError",
    "ParseError",
    "NetworkFormatError",
]
