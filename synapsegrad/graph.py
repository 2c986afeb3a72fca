"""Neurons, synapses and the nodes that wire them into a computation graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional, Sequence

import numpy as np


def _as_signal(value: Any) -> np.ndarray:
    """Convert a value to a float array; scalars become 1x1 matrices."""
    array = np.array(value, dtype=float)
    if array.ndim == 0:
        array = array.reshape(1, 1)
    return array


class OptionKind(Enum):
    """The kinds of extra parameters a synapse can carry."""

    BROADCAST_TO = auto()
    RESHAPE = auto()
    SUM = auto()
    SLICE = auto()
    SLICE_GRAD = auto()
    SOFTMAX = auto()
    SCALE = auto()
    ONEHOT = auto()


@dataclass(frozen=True)
class SynapseOption:
    """A tagged parameter passed to a synapse's forward and backward functions."""

    kind: OptionKind
    value: Any


@dataclass(eq=False)
class Neuron:
    """A value in the graph, with its gradient and the node that produced it."""

    name: str
    signal: np.ndarray
    constant: bool = False
    grad: Optional["Neuron"] = field(default=None, repr=False)
    generator: Optional["SynapseNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.signal = _as_signal(self.signal)

    @property
    def shape(self) -> tuple[int, ...]:
        return self.signal.shape

    def rename(self, name: str) -> None:
        self.name = name

    def assign(self, signal: Any) -> None:
        self.signal = _as_signal(signal)

    def __str__(self) -> str:
        kind = "constant" if self.constant else "neuron"
        return f"{kind} {self.name}\n{self.signal}"


def neuron(name: str, signal: Any) -> Neuron:
    """Create a variable neuron whose gradient will be tracked."""
    return Neuron(name, signal)


def constant(name: str, signal: Any) -> Neuron:
    """Create a constant neuron; no gradient flows into it."""
    return Neuron(name, signal, constant=True)


ForwardProp = Callable[[list, Optional[SynapseOption]], list]
BackwardProp = Callable[[list, list, Optional[SynapseOption]], tuple]


@dataclass
class Synapse:
    """The forward function of an operation and the builder of its gradient graph.

    ``forward(signals, option)`` returns the output arrays.
    ``backward(inputs, grads, option)`` builds the gradient nodes and returns
    ``(nodes, neurons)`` holding everything it created or touched.
    """

    forward: ForwardProp
    backward: BackwardProp
    option: Optional[SynapseOption] = None


class SynapseNode:
    """An operation applied to input neurons, producing output neurons."""

    def __init__(
        self,
        name: str,
        inputs: Sequence[Neuron],
        outputs: Sequence[Neuron],
        synapse: Synapse,
    ) -> None:
        self.name = name
        self.inputs = list(inputs)
        self.outputs = list(outputs)
        self.synapse = synapse
        self.generation = max(
            (n.generator.generation + 1 for n in self.inputs if n.generator is not None),
            default=0,
        )

    def __str__(self) -> str:
        return f"SynapseNode. name:{self.name}\ngeneration:{self.generation}"

    def forward(self) -> list[Neuron]:
        """Recompute the outputs from the current input signals."""
        signals = [n.signal for n in self.inputs]
        results = self.synapse.forward(signals, self.synapse.option)
        for output, result in zip(self.outputs, results):
            output.assign(result)
        return list(self.outputs)

    def make_diff_node(self) -> tuple[list[SynapseNode], list[Neuron]]:
        """Build the gradient graph of this node, seeding missing output grads with ones."""
        grads = []
        for output in self.outputs:
            if output.grad is None:
                output.grad = constant(f"({output.name})'", np.ones_like(output.signal))
            grads.append(output.grad)
        return self.synapse.backward(self.inputs, grads, self.synapse.option)

    def is_linked(self, neuron: Neuron) -> bool:
        return any(n is neuron for n in self.inputs) or any(n is neuron for n in self.outputs)

    def input_neurons(self) -> list[Neuron]:
        return list(self.inputs)

    def output_neurons(self) -> list[Neuron]:
        return list(self.outputs)


def connect(name: str, inputs: Sequence[Neuron], synapse: Synapse) -> tuple[SynapseNode, Neuron]:
    """Attach a synapse to the inputs, run it forward and return the node and its output."""
    output = Neuron(name, np.zeros((1, 1)))
    node = SynapseNode(name, inputs, [output], synapse)
    output.generator = node
    node.forward()
    return node, output