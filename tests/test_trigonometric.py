import heapq
import itertools
import math

import numpy as np

from synapsegrad.arithmetic import add
from synapsegrad.graph import constant, neuron
from synapsegrad.trigonometric import cos, sin


def _graph_neurons(root):
    seen = {}
    stack = [root]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen[id(current)] = current
        if current.generator is not None:
            stack.extend(current.generator.inputs)
    return list(seen.values())


def _backprop(root):
    for n in _graph_neurons(root):
        n.grad = None
    counter = itertools.count()
    heap = [(-root.generator.generation, next(counter), root.generator)]
    queued = {id(root.generator)}
    while heap:
        _, _, node = heapq.heappop(heap)
        node.make_diff_node()
        for inp in node.inputs:
            gen = inp.generator
            if gen is not None and id(gen) not in queued:
                queued.add(id(gen))
                heapq.heappush(heap, (-gen.generation, next(counter), gen))


def _xs():
    return np.array([[i * (7.0 / 400.0) for i in range(-400, 401)]])


def test_sin_value_at_half_pi():
    x = neuron("x", [[math.pi / 2.0]])
    _, y = sin(x)
    assert abs(y.signal[0, 0] - math.sin(math.pi / 2.0)) < 1.0e-5


def test_sin_high_order_derivatives():
    raw = _xs()
    xs = neuron("xs", raw)
    _, sin_xs = sin(xs)
    np.testing.assert_allclose(sin_xs.signal, np.sin(raw))

    _backprop(sin_xs)
    first = xs.grad
    assert first.shape == (1, 801)
    np.testing.assert_allclose(first.signal, np.cos(raw), atol=1e-9)

    _backprop(first)
    second = xs.grad
    np.testing.assert_allclose(second.signal, -np.sin(raw), atol=1e-9)

    _backprop(second)
    third = xs.grad
    np.testing.assert_allclose(third.signal, -np.cos(raw), atol=1e-9)


def test_cos_forward_and_derivative():
    raw = _xs()
    xs = neuron("xs", raw)
    _, y = cos(xs)
    np.testing.assert_allclose(y.signal, np.cos(raw))
    _backprop(y)
    np.testing.assert_allclose(xs.grad.signal, -np.sin(raw), atol=1e-9)


def test_cos_derivative_matches_central_difference():
    x0 = 1.0
    delta = 1.0e-6
    x = neuron("x", [[x0]])
    _, y = cos(x)
    _backprop(y)
    diff = (math.cos(x0 + delta) - math.cos(x0 - delta)) / (2.0 * delta)
    assert abs(x.grad.signal[0, 0] - diff) < 1.0e-6


def test_gradients_accumulate_over_two_uses():
    raw = np.array([[0.3, 1.2]])
    x = neuron("x", raw)
    _, a = sin(x)
    _, b = sin(x)
    _, total = add(a, b)
    _backprop(total)
    np.testing.assert_allclose(x.grad.signal, 2.0 * np.cos(raw), atol=1e-12)


def test_constant_input_gets_no_gradient():
    c = constant("c", [[0.5]])
    node, _ = sin(c)
    nodes, made = node.make_diff_node()
    assert nodes == [] and made == []
    assert c.grad is None

    node, _ = cos(c)
    nodes, _ = node.make_diff_node()
    assert nodes == []
    assert c.grad is None