"""Softmax synapse."""

from __future__ import annotations

import numpy as np

from synapsegrad.activations import _set_grad
from synapsegrad.arithmetic import sub
from synapsegrad.graph import (
    Neuron,
    OptionKind,
    Synapse,
    SynapseNode,
    SynapseOption,
    connect,
)
from synapsegrad.hadamard import hadamard_product
from synapsegrad.reshapes import broadcast_to, sum_in_axis

_Result = tuple[list[SynapseNode], list[Neuron]]


def _axis(option: SynapseOption | None) -> int:
    if option is None or option.kind is not OptionKind.SOFTMAX:
        raise ValueError("softmax needs a SOFTMAX option")
    return option.value


def _softmax_forward(inputs, option):
    axis = _axis(option)
    x = inputs[0]
    y = np.exp(x - x.max(axis=axis, keepdims=True))
    return [y / y.sum(axis=axis, keepdims=True)]


def _softmax_backward(inputs, grads, option) -> _Result:
    axis = _axis(option)
    x = inputs[0]
    if x.constant:
        return [], []
    nodes: list = []
    made: list = []
    node, y = softmax(x, axis)
    nodes.append(node)
    made.append(y)
    node, gx = hadamard_product(y, grads[0])
    nodes.append(node)
    made.append(gx)
    node, summed = sum_in_axis(gx, axis)
    nodes.append(node)
    made.append(summed)
    node, spread = broadcast_to(summed, x.shape)
    nodes.append(node)
    made.append(spread)
    node, gz = hadamard_product(y, spread)
    nodes.append(node)
    made.append(gz)
    node, gx = sub(gx, gz)
    nodes.append(node)
    made.append(gx)
    _set_grad(x, gx, nodes, made)
    return nodes, made


def softmax(x: Neuron, axis: int) -> tuple[SynapseNode, Neuron]:
    """Softmax of ``x`` along ``axis``."""
    option = SynapseOption(OptionKind.SOFTMAX, axis)
    return connect("softmax", [x], Synapse(_softmax_forward, _softmax_backward, option))