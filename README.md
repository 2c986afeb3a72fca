# synapsegrad

A small define-by-run automatic differentiation library built on numpy.
You wire neurons (values) together through synapse nodes (operations). Each
operation computes its result as soon as it is connected. When you ask a node
for its gradient graph, you get back more synapse nodes. Because the gradient
graph is built from ordinary nodes, you can differentiate it again to get
higher-order derivatives.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Concepts

- `Neuron` (in `synapsegrad.graph`): a value in the graph. It has:
  - `name`
  - `signal`, a numpy float array. Scalars are stored as 1×1 matrices.
  - `constant`, a flag
  - `grad`, an optional gradient neuron
  - `generator`, the `SynapseNode` that produced it
  - `shape`
  - `rename()` and `assign()`
- `neuron(name, signal)` creates a variable.
- `constant(name, signal)` creates a constant. Constants never receive a
  gradient.
- `Synapse` pairs a forward function with a backward function that builds the
  gradient graph. It can also carry an optional `SynapseOption`, which is tagged
  by an `OptionKind`.
- `SynapseNode` is one operation in the graph. It records its inputs, its
  outputs and its `generation`. The generation is one more than the highest
  generation among the nodes that produced its inputs. A node has these
  methods:
  - `forward()` recomputes the outputs from the current input signals.
  - `make_diff_node()` builds the backward graph for this step. It first gives
    ones as the gradient to any output that has none. It returns
    `(nodes, neurons)` and adds to the `grad` of each non-constant input.
  - `is_linked()`, `input_neurons()` and `output_neurons()` inspect the node's
    connections.
- `connect(name, inputs, synapse)` attaches a synapse to its inputs, runs it
  forward, and returns the new node together with its output neuron.

Every operation below returns a pair `(synapse_node, output_neuron)`.

## Operations

| Module | Functions |
| --- | --- |
| `synapsegrad.arithmetic` | `neg`, `add`, `sub`, `exp`, `tanh` |
| `synapsegrad.reshapes` | `reshape`, `transpose`, `sum_to`, `sum_in_axis`, `broadcast_to`, `slice_row`, `slice_grad`, `onehot` |
| `synapsegrad.trigonometric` | `sin`, `cos` |
| `synapsegrad.hadamard` | `hadamard_product`, `hadamard_division` |
| `synapsegrad.compare` | `maximum` |
| `synapsegrad.activations` | `sigmoid`, `relu` |
| `synapsegrad.softmax` | `softmax` |
| `synapsegrad.utils` | `accuracy` |

Broadcasting: when two operands of `add`, `sub`, `hadamard_product` or
`hadamard_division` have different element counts, the one with fewer elements
is broadcast to the shape of the other. In the backward graph, `sum_to` sums
the gradient back down to each input's shape.

Errors:

- `reshape` raises `ValueError` if the element count would change.
- `slice_row` raises `IndexError` if the index is out of range.
- `onehot` raises `ValueError` if its labels are not a single row or a single
  column.
- `maximum` raises `ValueError` if it is given no inputs.

## Example

```python
import numpy as np
from synapsegrad.graph import neuron
from synapsegrad.hadamard import hadamard_product

x = neuron("x", np.array([[3.0]]))
node, y = hadamard_product(x, x)     # y = x * x
print(y.signal)                      # [[9.]]

# The output gradient is seeded with ones, then the backward step is built.
node.make_diff_node()
print(x.grad.signal)                 # [[6.]]
```

`x.grad` is itself the output of synapse nodes (`x.grad.generator`), so you can
call `make_diff_node()` on the gradient graph to go one order higher.

## Accuracy

`accuracy(predicts, answers)` returns the fraction of positions where the two
arrays are equal. It raises `ValueError` if the shapes differ or the arrays are
empty.

```python
import numpy as np
from synapsegrad.utils import accuracy

accuracy(np.array([[1, 2, 3]]), np.array([[1, 0, 3]]))  # 0.666...
```

## What it does not do

- There is no network object that visits the nodes in generation order and
  runs backpropagation over a whole graph. You call `make_diff_node()` on each
  node yourself, starting from the output.
- The package has no matrix product or affine layer, no logarithm, no power
  operation, and no loss functions.
- It has no optimiser and no training loop.

## Running the tests

```
pytest
```