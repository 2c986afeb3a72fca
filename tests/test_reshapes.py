import numpy as np
import pytest

from synapsegrad.graph import constant, neuron
from synapsegrad.reshapes import (
    broadcast_to,
    onehot,
    reshape,
    slice_grad,
    slice_row,
    sum_in_axis,
    sum_to,
    transpose,
)

M = np.arange(6, dtype=float).reshape(2, 3)
ROW_ONE = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])


@pytest.mark.parametrize(
    "build, expected",
    [
        (lambda x: reshape(x, (3, 2)), M.reshape(3, 2)),
        (transpose, M.T),
        (lambda x: sum_to(x, (1, 3)), M.sum(axis=0, keepdims=True)),
        (lambda x: sum_in_axis(x, 1), M.sum(axis=1, keepdims=True)),
        (lambda x: slice_row(x, 1), M[1]),
    ],
)
def test_forward(build, expected):
    _, y = build(neuron("x", M))
    assert y.shape == expected.shape
    np.testing.assert_allclose(y.signal, expected)


@pytest.mark.parametrize(
    "build, expected",
    [
        (lambda x: reshape(x, (3, 2)), np.ones((2, 3))),
        (transpose, np.ones((2, 3))),
        (lambda x: sum_to(x, (1, 3)), np.ones((2, 3))),
        (lambda x: slice_row(x, 1), ROW_ONE),
    ],
)
def test_gradient_has_input_shape(build, expected):
    x = neuron("x", M)
    node, _ = build(x)
    node.make_diff_node()
    np.testing.assert_array_equal(x.grad.signal, expected)


def test_transpose_of_constant_has_no_gradient():
    x = constant("c", M)
    node, _ = transpose(x)
    assert node.make_diff_node() == ([], [])
    assert x.grad is None


def test_broadcast_to_and_gradient_sums_back():
    x = neuron("x", [[1.0, 2.0, 3.0]])
    node, y = broadcast_to(x, (2, 3))
    np.testing.assert_array_equal(y.signal, [[1.0, 2.0, 3.0], [1.0, 2.0, 3.0]])
    node.make_diff_node()
    np.testing.assert_array_equal(x.grad.signal, [[2.0, 2.0, 2.0]])


@pytest.mark.parametrize(
    "build, error",
    [
        (lambda x: reshape(x, (4, 2)), ValueError),
        (lambda x: broadcast_to(x, (4, 5)), ValueError),
        (lambda x: slice_row(x, 5), IndexError),
    ],
)
def test_invalid_requests_raise(build, error):
    with pytest.raises(error):
        build(neuron("x", M))


def test_slice_grad_places_values_at_index():
    gx = neuron("gx", np.array([7.0, 8.0, 9.0]))
    node, out = slice_grad(constant("x", M), gx, 0)
    np.testing.assert_array_equal(out.signal, [[7.0, 8.0, 9.0], [0.0, 0.0, 0.0]])
    node.make_diff_node()
    np.testing.assert_array_equal(gx.grad.signal, np.ones(3))


@pytest.mark.parametrize(
    "labels, size, expected",
    [
        ([[0.0], [2.0], [1.0]], 3, np.eye(3)[[0, 2, 1]]),
        ([[1.0, 0.0]], 4, np.eye(4)[[1, 0]]),
    ],
)
def test_onehot_rows_come_from_identity(labels, size, expected):
    _, y = onehot(constant("t", labels), size)
    np.testing.assert_array_equal(y.signal, expected)


@pytest.mark.parametrize("labels", [np.array([0.0, 1.0]), np.zeros((2, 2))])
def test_onehot_invalid_shape(labels):
    with pytest.raises(ValueError):
        onehot(constant("t", labels), 3)