import numpy as np
import pytest

from neuralnet.core.activations import sigmoid, sigmoid_deriv
from neuralnet.core.backprop import compute_gradients
from neuralnet.core.errors import DimensionMismatchError
from neuralnet.core.forward import feed_forward, forward_trace
from neuralnet.core.params import ParameterStore


def _loss(store, x, y):
    diff = feed_forward(store, x) - y
    return 0.5 * float(diff @ diff)


def test_sigmoid_and_derivative():
    x = np.array([-2.0, 0.0, 3.0])
    assert np.allclose(sigmoid(x), 1.0 / (1.0 + np.exp(-x)))
    assert sigmoid(np.array([0.0]))[0] == 0.5
    assert np.allclose(sigmoid_deriv(x), sigmoid(x) * (1.0 - sigmoid(x)))
    assert sigmoid_deriv(np.array([0.0]))[0] == 0.25


def test_feed_forward_matches_manual_computation():
    store = ParameterStore.from_arrays(
        [2, 2, 1],
        weights=[np.array([[0.5, -1.0], [0.25, 0.75]]), np.array([[1.5, -0.5]])],
        biases=[np.array([0.1, -0.2]), np.array([0.3])],
    )
    x = np.array([1.0, 2.0])
    hidden = sigmoid(store.weights[0] @ x + store.biases[0])
    expected = sigmoid(store.weights[1] @ hidden + store.biases[1])
    assert np.allclose(feed_forward(store, x), expected)


def test_forward_trace_keeps_every_layer():
    store = ParameterStore.initialize([3, 4, 2], seed=0)
    trace = forward_trace(store, [0.1, 0.2, 0.3])
    assert [z.shape for z in trace.pre_activations] == [(4,), (2,)]
    assert [a.shape for a in trace.activations] == [(3,), (4,), (2,)]
    assert np.array_equal(trace.output, feed_forward(store, [0.1, 0.2, 0.3]))


def test_feed_forward_does_not_mutate_parameters():
    store = ParameterStore.initialize([2, 3, 1], seed=1)
    before = store.state_dict()
    feed_forward(store, [0.4, 0.6])
    compute_gradients(store, [0.4, 0.6], [1.0], learning_rate=0.5)
    for key, value in store.state_dict().items():
        assert np.array_equal(value, before[key])


@pytest.mark.parametrize("inputs", [[], [1.0], [1.0, 2.0, 3.0]])
def test_feed_forward_rejects_wrong_input_length(inputs):
    store = ParameterStore.initialize([2, 3, 1], seed=0)
    with pytest.raises(DimensionMismatchError):
        feed_forward(store, inputs)


def test_compute_gradients_rejects_wrong_lengths():
    store = ParameterStore.initialize([2, 3, 1], seed=0)
    with pytest.raises(DimensionMismatchError):
        compute_gradients(store, [1.0], [0.0], learning_rate=1.0)
    with pytest.raises(DimensionMismatchError):
        compute_gradients(store, [1.0, 0.0], [0.0, 1.0], learning_rate=1.0)


def test_single_neuron_gradient_matches_closed_form_and_numeric():
    rng = np.random.default_rng(42)
    eps = 1e-6
    for _ in range(10):
        w, x, y = rng.uniform(-2.0, 2.0), rng.uniform(-2.0, 2.0), rng.uniform(0.0, 1.0)
        store = ParameterStore.from_arrays([1, 1], [np.array([[w]])], [np.array([0.0])])
        (grad_w, grad_b), = compute_gradients(store, [x], [y], learning_rate=1.0)

        s = 1.0 / (1.0 + np.exp(-w * x))
        closed_b = (s - y) * s * (1.0 - s)
        closed = closed_b * x
        assert grad_w.shape == (1, 1)
        assert grad_w[0, 0] == pytest.approx(closed, abs=1e-12)

        plus = ParameterStore.from_arrays([1, 1], [np.array([[w + eps]])], [np.array([0.0])])
        minus = ParameterStore.from_arrays([1, 1], [np.array([[w - eps]])], [np.array([0.0])])
        numeric = (_loss(plus, [x], [y]) - _loss(minus, [x], [y])) / (2 * eps)
        assert grad_w[0, 0] == pytest.approx(numeric, abs=1e-4)
        assert grad_b[0] == pytest.approx(closed_b, abs=1e-12)


def test_multilayer_gradients_match_numeric_differentiation():
    store = ParameterStore.initialize([3, 4, 3, 2], seed=7)
    x = np.array([0.3, -0.8, 0.5])
    y = np.array([0.9, 0.1])
    grads = compute_gradients(store, x, y, learning_rate=1.0)
    assert len(grads) == store.num_layers
    eps = 1e-6
    for layer, (grad_w, grad_b) in enumerate(grads):
        assert grad_w.shape == store.weights[layer].shape
        assert grad_b.shape == store.biases[layer].shape
        for params, analytic in ((store.weights[layer], grad_w), (store.biases[layer], grad_b)):
            for index in np.ndindex(params.shape):
                original = params[index]
                params[index] = original + eps
                up = _loss(store, x, y)
                params[index] = original - eps
                down = _loss(store, x, y)
                params[index] = original
                assert analytic[index] == pytest.approx((up - down) / (2 * eps), abs=1e-4)


def test_gradients_are_scaled_by_learning_rate():
    store = ParameterStore.initialize([2, 3, 1], seed=2)
    base = compute_gradients(store, [0.5, 0.1], [1.0], learning_rate=1.0)
    scaled = compute_gradients(store, [0.5, 0.1], [1.0], learning_rate=0.25)
    for (bw, bb), (sw, sb) in zip(base, scaled):
        assert np.allclose(sw, 0.25 * bw)
        assert np.allclose(sb, 0.25 * bb)
