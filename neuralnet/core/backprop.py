"""Backpropagation of the squared error through sigmoid layers."""

from __future__ import annotations

from typing import List

import numpy as np

from .activations import sigmoid_deriv
from .forward import as_vector, forward_trace
from .params import ParameterStore
from .types import Array, LayerGradient


def backprop_deltas(
    store: ParameterStore, pre_activations: List[Array], output_error: Array
) -> List[Array]:
    """Return ``delta[l]`` for every parameterised layer, first to last."""

    last_layer = store.num_layers - 1
    deltas: List[Array] = [None] * (last_layer + 1)  # type: ignore[list-item]
    deltas[last_layer] = output_error * sigmoid_deriv(pre_activations[last_layer])
    for layer_idx in reversed(range(last_layer)):
        deltas[layer_idx] = (
            store.weights[layer_idx + 1].T @ deltas[layer_idx + 1]
        ) * sigmoid_deriv(pre_activations[layer_idx])
    return deltas


def compute_gradients(
    store: ParameterStore,
    inputs,
    desired_outputs,
    learning_rate: float,
) -> List[LayerGradient]:
    """Return ``(lr * dW, lr * db)`` per layer for a single instance.

    The loss is ``0.5 * ||a[L] - y||^2``; the store is not modified.
    """

    target = as_vector(desired_outputs, store.topology[-1], "output")
    trace = forward_trace(store, inputs)
    deltas = backprop_deltas(store, trace.pre_activations, trace.output - target)
    grads: List[LayerGradient] = []
    for delta, a_prev in zip(deltas, trace.activations[:-1]):
        grad_w = np.outer(delta, a_prev)
        grads.append((learning_rate * grad_w, learning_rate * delta))
    return grads


__all__ = ["backprop_deltas", "compute_gradients"]
