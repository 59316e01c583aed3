from __future__ import annotations

import numpy as np

from neuralnet.core.forward import feed_forward
from neuralnet.core.params import ParameterStore
from neuralnet.core.types import Instance
from neuralnet.training.trainer import Trainer


def _and_dataset() -> list[Instance]:
    pairs = [((0, 0), 0), ((0, 1), 0), ((1, 0), 0), ((1, 1), 1)]
    return [
        Instance(inputs=np.array(x, dtype=np.float64), outputs=np.array([y], dtype=np.float64))
        for x, y in pairs
    ]


def test_logic_gate_training_reduces_error() -> None:
    dataset = _and_dataset()
    trainer = Trainer(ParameterStore.initialize([2, 3, 1], seed=0))
    start = trainer.mean_squared_error(dataset)
    trainer.train(dataset, epochs=3000, batch_size=4, learning_rate=3.0)
    end = trainer.mean_squared_error(dataset)

    assert end < start
    assert end < 0.01
    for instance in dataset:
        prediction = feed_forward(trainer.store, instance.inputs)[0]
        assert abs(prediction - instance.outputs[0]) < 0.3


def test_regression_on_smooth_target_improves() -> None:
    x = np.linspace(-1.0, 1.0, 40)
    y = 0.5 + 0.4 * np.sin(np.pi * x)
    dataset = [Instance(inputs=np.array([xi]), outputs=np.array([yi])) for xi, yi in zip(x, y)]
    trainer = Trainer(ParameterStore.initialize([1, 8, 1], seed=1))
    history: list[float] = []
    trainer.callbacks.append(lambda epoch, metrics: history.append(metrics["mse"]))
    start = trainer.mean_squared_error(dataset)

    trainer.train(dataset, epochs=300, batch_size=5, learning_rate=2.0)

    assert len(history) == 300
    assert history[-1] < start
    assert history[-1] < 0.03
