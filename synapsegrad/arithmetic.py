"""Elementwise negation, addition, subtraction, exponent and tanh synapses.

Also holds the helpers that every synapse uses to build its gradient graph.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from synapsegrad.graph import Neuron, Synapse, SynapseNode, connect, constant

Step = tuple[SynapseNode, Neuron]
_Result = tuple[list[SynapseNode], list[Neuron]]


def _align(a: np.ndarray, b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Broadcast the operand with fewer elements to the shape of the other."""
    if a.size < b.size:
        a = np.broadcast_to(a, b.shape)
    elif a.size > b.size:
        b = np.broadcast_to(b, a.shape)
    return a, b


def _unary(fn: Callable[[np.ndarray], np.ndarray]):
    """Forward function applying ``fn`` to the single input."""

    def forward(inputs, option):
        return [fn(inputs[0])]

    return forward


def _binary(fn: Callable[[np.ndarray, np.ndarray], np.ndarray]):
    """Forward function applying ``fn`` to two aligned inputs."""

    def forward(inputs, option):
        return [fn(*_align(inputs[0], inputs[1]))]

    return forward


def _apply(name: str, inputs: Sequence[Neuron], forward, backward, option=None) -> Step:
    """Connect ``inputs`` through a new synapse and run it."""
    return connect(name, list(inputs), Synapse(forward, backward, option))


class _Tape:
    """Collects the synapse nodes and neurons made during one backward step."""

    def __init__(self) -> None:
        self.nodes: list[SynapseNode] = []
        self.made: list[Neuron] = []

    @property
    def result(self) -> _Result:
        return self.nodes, self.made

    def record(self, *neurons: Neuron) -> None:
        self.made.extend(neurons)

    def run(self, step: Step) -> Neuron:
        node, out = step
        self.nodes.append(node)
        self.made.append(out)
        return out

    def product(self, a: Neuron, b: Neuron) -> Neuron:
        from synapsegrad.hadamard import hadamard_product

        return self.run(hadamard_product(a, b))

    def accumulate(self, target: Neuron, grad: Neuron) -> None:
        """Set or add to the gradient of ``target``."""
        if target.grad is None:
            target.grad = grad
            return
        self.made.append(target.grad)
        target.grad = self.run(add(target.grad, grad))

    def reduce_to(self, grad: Neuron, shape: tuple) -> Neuron:
        """Sum a gradient down to ``shape`` when it was broadcast in the forward pass."""
        if grad.shape == shape:
            return grad
        from synapsegrad.reshapes import sum_to

        return self.run(sum_to(grad, shape))


def _chain(target: Neuron, step: Callable[[], Step]) -> _Result:
    """Give ``target`` the gradient made by ``step`` unless it is constant."""
    tape = _Tape()
    if not target.constant:
        tape.accumulate(target, tape.run(step()))
    return tape.result


def _scaled_by(x: Neuron, g: Neuron, slope: Callable[[_Tape], Neuron]) -> _Result:
    """Give ``x`` the gradient ``g * slope`` unless it is constant."""
    tape = _Tape()
    if not x.constant:
        tape.accumulate(x, tape.product(g, slope(tape)))
    return tape.result


def _neg_backward(inputs, grads, option) -> _Result:
    g = grads[0]
    tape = _Tape()
    targets = [x for x in inputs if not x.constant]
    for x in targets:
        out = constant(f"-({g.name})", -g.signal) if g.constant else tape.run(neg(g))
        tape.accumulate(x, out)
    if targets:
        tape.record(g)
    return tape.result


def neg(x: Neuron) -> Step:
    """-x."""
    return _apply("neg", [x], _unary(np.negative), _neg_backward)


def _spread(inputs, g: Neuron, negate_right: bool) -> _Result:
    """Gradient of a sum or difference of two operands."""
    left, right = inputs
    tape = _Tape()
    if left.constant and right.constant:
        return tape.result
    tape.record(g)
    for side, negate in ((left, False), (right, negate_right)):
        if side.constant:
            continue
        grad = tape.run(neg(g)) if negate else g
        tape.accumulate(side, tape.reduce_to(grad, side.shape))
    return tape.result


def _add_backward(inputs, grads, option) -> _Result:
    return _spread(inputs, grads[0], negate_right=False)


def add(x: Neuron, y: Neuron) -> Step:
    """x + y, broadcasting the smaller operand."""
    return _apply("add", [x, y], _binary(np.add), _add_backward)


def _sub_backward(inputs, grads, option) -> _Result:
    return _spread(inputs, grads[0], negate_right=True)


def sub(x: Neuron, y: Neuron) -> Step:
    """x - y, broadcasting the smaller operand."""
    return _apply("sub", [x, y], _binary(np.subtract), _sub_backward)


def _exp_backward(inputs, grads, option) -> _Result:
    x = inputs[0]
    tape = _Tape()
    tape.accumulate(x, tape.product(tape.run(exp(x)), grads[0]))
    return tape.result


def exp(x: Neuron) -> Step:
    """Elementwise e**x."""
    return _apply("exp", [x], _unary(np.exp), _exp_backward)


def _tanh_slope(tape: _Tape, x: Neuron, shape: tuple) -> Neuron:
    """1 - tanh(x)**2 as part of the graph."""
    t = tape.run(tanh(x))
    one = constant("1.0", np.ones(shape))
    tape.record(one)
    return tape.run(sub(one, tape.product(t, t)))


def _tanh_backward(inputs, grads, option) -> _Result:
    x, g = inputs[0], grads[0]
    return _scaled_by(x, g, lambda tape: _tanh_slope(tape, x, g.shape))


def tanh(x: Neuron) -> Step:
    """Elementwise hyperbolic tangent."""
    return _apply("tanh", [x], _unary(np.tanh), _tanh_backward)