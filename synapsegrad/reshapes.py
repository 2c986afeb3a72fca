"""Synapses that change the shape of a signal: reshape, transpose, sums, broadcasts, slices, one-hot."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from synapsegrad.arithmetic import Step, _apply, _chain, _unary
from synapsegrad.graph import Neuron, OptionKind, SynapseOption


def _option_value(option: SynapseOption | None, kind: OptionKind) -> Any:
    """Return the value of an option of the expected kind."""
    if option is None:
        raise ValueError(f"synapse needs a {kind.name} option")
    if option.kind is not kind:
        raise ValueError(f"invalid option {option.kind.name}, expected {kind.name}")
    return option.value


def _sum_to_shape(array: np.ndarray, shape: Sequence[int]) -> np.ndarray:
    """Sum ``array`` over the axes that ``shape`` collapses to one."""
    shape = tuple(shape)
    lead = array.ndim - len(shape)
    if lead > 0:
        array = array.sum(axis=tuple(range(lead)))
    elif lead < 0:
        array = array.reshape((1,) * -lead + array.shape)
    axes = tuple(
        axis
        for axis, (size, target) in enumerate(zip(array.shape, shape))
        if target == 1 and size != 1
    )
    if axes:
        array = array.sum(axis=axes, keepdims=True)
    if array.shape != shape:
        raise ValueError(f"cannot sum shape {array.shape} to {shape}")
    return array


def _shape_change(x: Neuron, shape: Sequence[int], kind: OptionKind) -> SynapseOption:
    return SynapseOption(kind, (tuple(x.shape), tuple(shape)))


def _reshape_forward(inputs, option):
    return [inputs[0].reshape(_option_value(option, OptionKind.RESHAPE)[1])]


def _reshape_backward(inputs, grads, option):
    src = _option_value(option, OptionKind.RESHAPE)[0]
    return _chain(inputs[0], lambda: reshape(grads[0], src))


def reshape(x: Neuron, shape: Sequence[int]) -> Step:
    """Give the signal of ``x`` a new shape holding the same number of elements."""
    if x.signal.size != int(np.prod(tuple(shape), dtype=int)):
        raise ValueError(f"cannot reshape {x.shape} into {tuple(shape)}")
    option = _shape_change(x, shape, OptionKind.RESHAPE)
    return _apply("reshape", [x], _reshape_forward, _reshape_backward, option)


def _transpose_backward(inputs, grads, option):
    return _chain(inputs[0], lambda: transpose(grads[0]))


def transpose(x: Neuron) -> Step:
    """Transpose of ``x``."""
    return _apply("transpose", [x], _unary(np.transpose), _transpose_backward)


def _sum_forward(inputs, option):
    return [_sum_to_shape(inputs[0], _option_value(option, OptionKind.SUM)[1])]


def _sum_backward(inputs, grads, option):
    src = _option_value(option, OptionKind.SUM)[0]
    return _chain(inputs[0], lambda: broadcast_to(grads[0], src))


def sum_to(x: Neuron, shape: Sequence[int]) -> Step:
    """Sum ``x`` down to ``shape``."""
    option = _shape_change(x, shape, OptionKind.SUM)
    return _apply("sum_to", [x], _sum_forward, _sum_backward, option)


def sum_in_axis(x: Neuron, axis: int) -> Step:
    """Sum ``x`` along ``axis``, keeping that axis with length one."""
    dst = list(x.shape)
    dst[axis] = 1
    option = _shape_change(x, dst, OptionKind.SUM)
    return _apply("sum_axis", [x], _sum_forward, _sum_backward, option)


def _broadcast_forward(inputs, option):
    return [np.broadcast_to(inputs[0], _option_value(option, OptionKind.BROADCAST_TO)[1])]


def _broadcast_backward(inputs, grads, option):
    src = _option_value(option, OptionKind.BROADCAST_TO)[0]
    return _chain(inputs[0], lambda: sum_to(grads[0], src))


def broadcast_to(x: Neuron, shape: Sequence[int]) -> Step:
    """Broadcast ``x`` to ``shape``."""
    option = _shape_change(x, shape, OptionKind.BROADCAST_TO)
    return _apply("broadcast_to", [x], _broadcast_forward, _broadcast_backward, option)


def _slice_forward(inputs, option):
    return [inputs[0][_option_value(option, OptionKind.SLICE)[0]]]


def _slice_backward(inputs, grads, option):
    index = _option_value(option, OptionKind.SLICE)[0]
    return _chain(inputs[0], lambda: slice_grad(inputs[0], grads[0], index))


def slice_row(x: Neuron, index: int) -> Step:
    """The sub-tensor of ``x`` at ``index`` along its first axis."""
    if not 0 <= index < x.shape[0]:
        raise IndexError(f"index {index} out of range for shape {x.shape}")
    option = SynapseOption(OptionKind.SLICE, (index, tuple(x.shape)))
    return _apply("slice", [x], _slice_forward, _slice_backward, option)


def _slice_grad_forward(inputs, option):
    result = np.zeros_like(inputs[0])
    result[_option_value(option, OptionKind.SLICE_GRAD)] += inputs[1]
    return [result]


def _slice_grad_backward(inputs, grads, option):
    index = _option_value(option, OptionKind.SLICE_GRAD)
    return _chain(inputs[1], lambda: slice_row(grads[0], index))


def slice_grad(x: Neuron, gx: Neuron, index: int) -> Step:
    """A zero tensor shaped like ``x`` with ``gx`` added at ``index``."""
    option = SynapseOption(OptionKind.SLICE_GRAD, index)
    return _apply("slice_grad", [x, gx], _slice_grad_forward, _slice_grad_backward, option)


def _onehot_forward(inputs, option):
    size = _option_value(option, OptionKind.ONEHOT)[0]
    labels = inputs[0]
    if labels.ndim != 2 or (labels.shape[0] != 1 and labels.shape[1] != 1):
        raise ValueError(f"invalid label shape {labels.shape}")
    indices = [int(label) for label in labels.ravel()]
    return [np.eye(size)[indices].reshape(len(indices), size)]


def _onehot_backward(inputs, grads, option):
    shape = _option_value(option, OptionKind.ONEHOT)[1]
    return _chain(inputs[0], lambda: sum_to(grads[0], shape))


def onehot(x: Neuron, size: int) -> Step:
    """One-hot rows of width ``size`` for a row or column of integer labels."""
    option = SynapseOption(OptionKind.ONEHOT, (size, tuple(x.shape)))
    return _apply("onehot", [x], _onehot_forward, _onehot_backward, option)