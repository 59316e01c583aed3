"""Weight and bias storage for layered dense networks."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

import numpy as np

from .errors import InvalidTopologyError
from .types import Array, Topology


def validate_topology(topology: Iterable[int]) -> Topology:
    """Return ``topology`` as a tuple of ints or raise :class:`InvalidTopologyError`."""

    dims = tuple(topology)
    if len(dims) < 2:
        raise InvalidTopologyError(
            f"topology needs at least an input and an output layer, got {list(dims)}"
        )
    for dim in dims:
        if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
            raise InvalidTopologyError(f"layer sizes must be integers, got {dim!r}")
        if dim <= 0:
            raise InvalidTopologyError(f"layer sizes must be positive, got {list(dims)}")
    return tuple(int(dim) for dim in dims)


class ParameterStore:
    """Per-layer weight matrices and bias vectors of a dense network.

    Layer ``l`` (``1 <= l < len(topology)``) is stored at index ``l - 1``:
    ``weights[l - 1]`` has shape ``(topology[l], topology[l - 1])`` and
    ``biases[l - 1]`` has length ``topology[l]``. The input layer owns no
    parameters.

    Build instances through :meth:`initialize` (random parameters) or
    :meth:`from_arrays` (existing parameters, e.g. after loading from disk).
    """

    def __init__(
        self, topology: Iterable[int], weights: List[Array], biases: List[Array]
    ) -> None:
        dims = validate_topology(topology)
        expected = len(dims) - 1
        if len(weights) != expected or len(biases) != expected:
            raise InvalidTopologyError(
                f"topology {list(dims)} needs {expected} weight matrices and bias "
                f"vectors, got {len(weights)} and {len(biases)}"
            )
        self._topology = dims
        # updates subtract in place, so integer arrays must not slip through
        self.weights = [np.asarray(W, dtype=np.float64) for W in weights]
        self.biases = [np.asarray(b, dtype=np.float64) for b in biases]
        self.check_shapes()

    @classmethod
    def initialize(
        cls,
        topology: Iterable[int],
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> "ParameterStore":
        """Allocate parameters drawn uniformly from ``[-1, 1]``."""

        dims = validate_topology(topology)
        rng = rng if rng is not None else np.random.default_rng(seed)
        weights: list[Array] = []
        biases: list[Array] = []
        for in_dim, out_dim in zip(dims[:-1], dims[1:]):
            biases.append(rng.uniform(-1.0, 1.0, size=out_dim))
            weights.append(rng.uniform(-1.0, 1.0, size=(out_dim, in_dim)))
        return cls(dims, weights, biases)

    @classmethod
    def from_arrays(
        cls,
        topology: Iterable[int],
        weights: Sequence[Array],
        biases: Sequence[Array],
    ) -> "ParameterStore":
        """Build a store from existing parameters, checking every shape."""

        return cls(
            topology,
            [np.array(W, dtype=np.float64) for W in weights],
            [np.array(b, dtype=np.float64).reshape(-1) for b in biases],
        )

    @property
    def topology(self) -> Topology:
        return self._topology

    def get_topology(self) -> Topology:
        return self._topology

    @property
    def num_layers(self) -> int:
        """Number of parameterised layers (``len(topology) - 1``)."""

        return len(self._topology) - 1

    def check_shapes(self) -> None:
        dims = self._topology
        for idx, (W, b) in enumerate(zip(self.weights, self.biases)):
            want_w = (dims[idx + 1], dims[idx])
            if W.shape != want_w:
                raise InvalidTopologyError(
                    f"weight matrix {idx} has shape {W.shape}, expected {want_w}"
                )
            if b.shape != (dims[idx + 1],):
                raise InvalidTopologyError(
                    f"bias vector {idx} has shape {b.shape}, expected ({dims[idx + 1]},)"
                )

    def state_dict(self) -> Mapping[str, Array]:
        state: dict[str, Array] = {}
        for idx, b in enumerate(self.biases):
            state[f"b{idx}"] = b.copy()
        for idx, W in enumerate(self.weights):
            state[f"W{idx}"] = W.copy()
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for idx in range(self.num_layers):
            for key in (f"W{idx}", f"b{idx}"):
                if key not in state:
                    raise KeyError(f"Missing parameter {key} in state dict")
        checked = ParameterStore.from_arrays(
            self._topology,
            [state[f"W{idx}"] for idx in range(self.num_layers)],
            [state[f"b{idx}"] for idx in range(self.num_layers)],
        )
        self.weights = checked.weights
        self.biases = checked.biases

    def copy(self) -> "ParameterStore":
        return ParameterStore(
            self._topology,
            [W.copy() for W in self.weights],
            [b.copy() for b in self.biases],
        )

    def parameter_count(self) -> int:
        return int(sum(W.size + b.size for W, b in zip(self.weights, self.biases)))

    def __repr__(self) -> str:
        return f"<ParameterStore topology={list(self._topology)}>"


__all__ = ["ParameterStore", "validate_topology"]
