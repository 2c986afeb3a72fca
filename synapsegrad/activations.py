"""Sigmoid and ReLU activation synapses."""

from __future__ import annotations

import numpy as np

from synapsegrad.arithmetic import add, sub
from synapsegrad.compare import maximum
from synapsegrad.graph import Neuron, Synapse, SynapseNode, connect, constant
from synapsegrad.hadamard import hadamard_product

_Result = tuple[list[SynapseNode], list[Neuron]]


def _set_grad(x: Neuron, gy: Neuron, nodes: list, made: list) -> None:
    """Set or add to the gradient of ``x``, naming the result."""
    if x.grad is not None:
        previous = x.grad
        node, total = add(previous, gy)
        nodes.append(node)
        total.rename(f"{previous.name}+")
        made.append(total)
        x.grad = total
    else:
        gy.rename(f"({x.name})'")
        x.grad = gy


def _sigmoid_forward(inputs, option):
    return [1.0 / (1.0 + np.exp(-inputs[0]))]


def _sigmoid_backward(inputs, grads, option) -> _Result:
    x = inputs[0]
    if x.constant:
        return [], []
    nodes: list = []
    made: list = [grads[0]]
    one = constant("1.0", np.ones(x.shape))
    made.extend([one, x])
    node, y = sigmoid(x)
    nodes.append(node)
    made.append(y)
    node, complement = sub(one, y)
    nodes.append(node)
    made.append(complement)
    node, slope = hadamard_product(y, complement)
    nodes.append(node)
    made.append(slope)
    node, gy = hadamard_product(grads[0], slope)
    nodes.append(node)
    made.append(gy)
    _set_grad(x, gy, nodes, made)
    return nodes, made


def sigmoid(x: Neuron) -> tuple[SynapseNode, Neuron]:
    """Elementwise logistic function 1 / (1 + e**-x)."""
    return connect("sigmoid", [x], Synapse(_sigmoid_forward, _sigmoid_backward))


def _relu_forward(inputs, option):
    return [np.maximum(inputs[0], 0.0)]


def _relu_backward(inputs, grads, option) -> _Result:
    x = inputs[0]
    if x.constant:
        return [], []
    zero = constant("0.0", np.zeros(x.shape))
    nodes: list = []
    made: list = [zero, x]
    node, mask = maximum([x, zero])
    nodes.append(node)
    made.extend([mask, grads[0]])
    node, gx = hadamard_product(grads[0], mask)
    nodes.append(node)
    made.append(gx)
    if x.grad is not None:
        _set_grad(x, gx, nodes, made)
    else:
        x.grad = gx
    return nodes, made


def relu(x: Neuron) -> tuple[SynapseNode, Neuron]:
    """Elementwise max(x, 0)."""
    return connect("relu", [x], Synapse(_relu_forward, _relu_backward))