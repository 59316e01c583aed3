"""Forward propagation through a :class:`ParameterStore`."""

from __future__ import annotations

import numpy as np

from .activations import sigmoid
from .errors import DimensionMismatchError
from .params import ParameterStore
from .types import ActivationTrace, Array


def as_vector(values, expected: int, what: str) -> Array:
    """Return ``values`` as a float64 vector of length ``expected``."""

    vec = np.asarray(values, dtype=np.float64).reshape(-1)
    if vec.shape[0] != expected:
        raise DimensionMismatchError(
            f"{what} vector has length {vec.shape[0]} but the network expects {expected}"
        )
    return vec


def forward_trace(store: ParameterStore, inputs) -> ActivationTrace:
    """Run a forward pass keeping every ``z[l]`` and ``a[l]``."""

    x = as_vector(inputs, store.topology[0], "input")
    pre_activations: list[Array] = []
    activations: list[Array] = [x]
    for W, b in zip(store.weights, store.biases):
        z = W @ activations[-1] + b
        pre_activations.append(z)
        activations.append(sigmoid(z))
    return ActivationTrace(pre_activations=pre_activations, activations=activations)


def feed_forward(store: ParameterStore, inputs) -> Array:
    """Return the output-layer activation for ``inputs``."""

    x = as_vector(inputs, store.topology[0], "input")
    for W, b in zip(store.weights, store.biases):
        x = sigmoid(W @ x + b)
    return x


__all__ = ["as_vector", "feed_forward", "forward_trace"]
