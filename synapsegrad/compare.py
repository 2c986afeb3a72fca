"""Elementwise maximum synapse."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from synapsegrad.arithmetic import Step, _apply, _Tape
from synapsegrad.graph import Neuron


def _max_forward(inputs, option):
    return [np.maximum.reduce(np.broadcast_arrays(*inputs))]


def _max_backward(inputs, grads, option):
    tape = _Tape()
    if all(n.constant for n in inputs):
        return tape.result
    tape.record(*inputs)
    tmax = tape.run(maximum(inputs))
    tape.record(grads[0])
    gx = tape.product(tmax, grads[0])
    for x in inputs:
        if not x.constant:
            tape.accumulate(x, gx)
    return tape.result


def maximum(inputs: Sequence[Neuron]) -> Step:
    """Elementwise maximum over the given neurons."""
    inputs = list(inputs)
    if not inputs:
        raise ValueError("maximum needs at least one input")
    return _apply("max", inputs, _max_forward, _max_backward)