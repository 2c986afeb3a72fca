"""Sine and cosine synapses."""

from __future__ import annotations

import numpy as np

from synapsegrad.arithmetic import Step, _apply, _scaled_by, _unary, neg
from synapsegrad.graph import Neuron


def _sin_backward(inputs, grads, option):
    x = inputs[0]
    return _scaled_by(x, grads[0], lambda tape: tape.run(cos(x)))


def sin(x: Neuron) -> Step:
    """Elementwise sine."""
    return _apply("sin", [x], _unary(np.sin), _sin_backward)


def _cos_backward(inputs, grads, option):
    x = inputs[0]
    return _scaled_by(x, grads[0], lambda tape: tape.run(neg(tape.run(sin(x)))))


def cos(x: Neuron) -> Step:
    """Elementwise cosine."""
    return _apply("cos", [x], _unary(np.cos), _cos_backward)