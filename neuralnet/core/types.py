"""Core typing contracts for the network."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

Array = np.ndarray

Topology = Tuple[int, ...]


@dataclass(frozen=True)
class Instance:
    """A single input vector paired with its desired output."""

    inputs: Array
    outputs: Array


Dataset = Sequence[Instance]


@dataclass
class ActivationTrace:
    """Intermediate values captured during the forward pass.

    ``activations[0]`` is the input; ``activations[l]`` and
    ``pre_activations[l - 1]`` belong to layer ``l``.
    """

    pre_activations: List[Array]
    activations: List[Array]

    @property
    def output(self) -> Array:
        return self.activations[-1]


LayerGradient = Tuple[Array, Array]
