"""Elementwise (Hadamard) product and division synapses."""

from __future__ import annotations

from typing import Callable

import numpy as np

from synapsegrad.arithmetic import Step, _align, _apply, _binary, _Tape, neg
from synapsegrad.graph import Neuron, constant
from synapsegrad.reshapes import _sum_to_shape


def _partial(
    tape: _Tape,
    target: Neuron,
    g: Neuron,
    other: Neuron,
    symbol: str,
    fn: Callable[[np.ndarray, np.ndarray], np.ndarray],
    op: Callable[[Neuron, Neuron], Step],
) -> Neuron:
    """Gradient ``op(g, other)`` summed to the shape of ``target``, folded when constant."""
    if g.constant and other.constant:
        value = _sum_to_shape(fn(*_align(g.signal, other.signal)), target.shape)
        return constant(f"({g.name}) {symbol} ({other.name})", value)
    out = tape.run(op(g, other))
    tape.record(other)
    return tape.reduce_to(out, target.shape)


def _hadamard_product_backward(inputs, grads, option):
    x, y = inputs
    g = grads[0]
    tape = _Tape()
    if x.constant and y.constant:
        return tape.result
    tape.record(g)
    for target, other in ((x, y), (y, x)):
        if not target.constant:
            grad = _partial(tape, target, g, other, "*", np.multiply, hadamard_product)
            tape.accumulate(target, grad)
    return tape.result


def hadamard_product(x: Neuron, y: Neuron) -> Step:
    """Elementwise x * y, broadcasting the operand with fewer elements."""
    return _apply(
        "hadamard_product", [x, y], _binary(np.multiply), _hadamard_product_backward
    )


def _hadamard_division_backward(inputs, grads, option):
    x, y = inputs
    g = grads[0]
    tape = _Tape()
    if x.constant and y.constant:
        return tape.result
    tape.record(g)
    if not x.constant:
        grad = _partial(tape, x, g, y, "/", np.divide, hadamard_division)
        tape.accumulate(x, grad)
    if not y.constant:
        # d(x/y)/dy = -x / y**2
        neg_x = tape.run(neg(x))
        tape.record(x)
        ratio = tape.run(hadamard_division(neg_x, tape.product(y, y)))
        tape.accumulate(y, tape.reduce_to(tape.product(g, ratio), y.shape))
    return tape.result


def hadamard_division(x: Neuron, y: Neuron) -> Step:
    """Elementwise x / y, broadcasting the operand with fewer elements."""
    return _apply(
        "hadamard_division", [x, y], _binary(np.divide), _hadamard_division_backward
    )