"""Deterministic mini-batch SGD for sigmoid networks."""

from __future__ import annotations

import warnings
from enum import Enum
from typing import Mapping, Sequence

import numpy as np

from ..core.backprop import compute_gradients
from ..core.errors import EmptyBatchError
from ..core.forward import as_vector, feed_forward
from ..core.params import ParameterStore
from ..core.types import Array, Dataset


class BatchPolicy(str, Enum):
    """How a batch window running past the end of the dataset is clipped."""

    INCLUDE_LAST = "include_last"
    DROP_LAST = "drop_last"


def clip_batch(
    size: int,
    start_index: int,
    batch_size: int,
    policy: BatchPolicy | str = BatchPolicy.INCLUDE_LAST,
) -> int:
    """Return how many instances the window ``[start, start + batch)`` holds.

    ``include_last`` keeps every remaining instance. ``drop_last`` mirrors the
    legacy ``size - start - 1`` reduction and loses the final instance of an
    undersized window.
    """

    policy = BatchPolicy(policy)
    if start_index < 0:
        raise ValueError(f"start_index must be non-negative, got {start_index}")
    if batch_size < 0:
        raise ValueError(f"batch_size must be non-negative, got {batch_size}")
    if start_index + batch_size <= size:
        return batch_size
    if policy is BatchPolicy.DROP_LAST:
        return max(0, size - start_index - 1)
    return max(0, size - start_index)


def run_batch(
    store: ParameterStore,
    dataset: Dataset,
    start_index: int,
    batch_size: int,
    learning_rate: float,
    policy: BatchPolicy | str = BatchPolicy.INCLUDE_LAST,
) -> int:
    """Apply one averaged SGD update and return the batch size actually used."""

    used = clip_batch(len(dataset), start_index, batch_size, policy)
    if used == 0:
        raise EmptyBatchError(
            f"batch starting at {start_index} with size {batch_size} is empty "
            f"for a dataset of {len(dataset)} instances"
        )

    summed_w = [np.zeros_like(W) for W in store.weights]
    summed_b = [np.zeros_like(b) for b in store.biases]
    for instance in dataset[start_index : start_index + used]:
        grads = compute_gradients(
            store, instance.inputs, instance.outputs, learning_rate
        )
        for idx, (grad_w, grad_b) in enumerate(grads):
            summed_w[idx] += grad_w
            summed_b[idx] += grad_b

    for idx in range(store.num_layers):
        store.weights[idx] -= summed_w[idx] / used
        store.biases[idx] -= summed_b[idx] / used
    return used


def mean_squared_error(store: ParameterStore, dataset: Dataset) -> float:
    """Return ``sum ||y - f(x)||^2 / (2 * n)`` over ``dataset``."""

    if len(dataset) == 0:
        raise EmptyBatchError("cannot compute the error of an empty dataset")
    error_sum = 0.0
    for instance in dataset:
        target = as_vector(instance.outputs, store.topology[-1], "output")
        error: Array = target - feed_forward(store, instance.inputs)
        error_sum += float(error @ error)
    return error_sum / (2.0 * len(dataset))


def train(
    store: ParameterStore,
    dataset: Dataset,
    epochs: int,
    batch_size: int,
    learning_rate: float,
    policy: BatchPolicy | str = BatchPolicy.INCLUDE_LAST,
    callbacks: Sequence[object] = (),
) -> int:
    """Run ``epochs`` passes of contiguous mini-batches over ``dataset``.

    Batches are never shuffled, so membership is identical every epoch.
    Returns the number of parameter updates performed.
    """

    policy = BatchPolicy(policy)
    if epochs < 0:
        raise ValueError(f"epochs must be non-negative, got {epochs}")
    if batch_size <= 0:
        raise EmptyBatchError(f"batch_size must be positive, got {batch_size}")
    if len(dataset) == 0:
        raise EmptyBatchError("cannot train on an empty dataset")

    if policy is BatchPolicy.DROP_LAST and epochs > 0:
        seen = sum(
            clip_batch(len(dataset), start, batch_size, policy)
            for start in range(0, len(dataset), batch_size)
        )
        if seen < len(dataset):
            warnings.warn(
                f"drop_last skips {len(dataset) - seen} of {len(dataset)} instances "
                "every epoch",
                RuntimeWarning,
                stacklevel=2,
            )

    steps = 0
    for epoch in range(epochs):
        batches = 0
        for start in range(0, len(dataset), batch_size):
            if clip_batch(len(dataset), start, batch_size, policy) == 0:
                # drop_last leaves a single trailing instance with nothing to average
                continue
            run_batch(store, dataset, start, batch_size, learning_rate, policy)
            batches += 1
        steps += batches
        if callbacks:
            metrics = {"mse": mean_squared_error(store, dataset), "batches": batches}
            _emit_epoch(callbacks, epoch + 1, metrics)
    return steps


def _emit_epoch(
    callbacks: Sequence[object], epoch: int, metrics: Mapping[str, float]
) -> None:
    for callback in callbacks:
        if hasattr(callback, "on_epoch"):
            callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
        elif callable(callback):
            callback(epoch, metrics)


class Trainer:
    """Drive :func:`train` for one store with a fixed policy and callbacks."""

    def __init__(
        self,
        store: ParameterStore,
        policy: BatchPolicy | str = BatchPolicy.INCLUDE_LAST,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.store = store
        self.policy = BatchPolicy(policy)
        self.callbacks = list(callbacks or [])

    def run_batch(
        self, dataset: Dataset, start_index: int, batch_size: int, learning_rate: float
    ) -> int:
        return run_batch(
            self.store, dataset, start_index, batch_size, learning_rate, self.policy
        )

    def train(
        self, dataset: Dataset, epochs: int, batch_size: int, learning_rate: float
    ) -> int:
        return train(
            self.store,
            dataset,
            epochs,
            batch_size,
            learning_rate,
            policy=self.policy,
            callbacks=self.callbacks,
        )

    def mean_squared_error(self, dataset: Dataset) -> float:
        return mean_squared_error(self.store, dataset)


__all__ = [
    "BatchPolicy",
    "Trainer",
    "clip_batch",
    "mean_squared_error",
    "run_batch",
    "train",
]
