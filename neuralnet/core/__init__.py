"""Core numerical primitives for neuralnet."""

from . import activations, backprop, errors, forward, params, types

__all__ = ["activations", "backprop", "errors", "forward", "params", "types"]
