"""Activation utilities."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(x: Array) -> Array:
    """Return ``sigmoid(x) * (1 - sigmoid(x))``."""

    s = sigmoid(x)
    return s * (1.0 - s)
