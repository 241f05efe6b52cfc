"""
Neural Network Architectures

This module contains the fully-connected feed-forward network: its
topology description, forward inference, error back-propagation,
gradients, weight updates and drop-out.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .activations import Activation, ActivationType, get_activation
from .errors import ConfigurationError, ShapeMismatchError
from .linalg import ArrayLike, Matrix, Vector
from .utils import RandomLike, get_initializer, make_rng

logger = logging.getLogger(__name__)

VectorLike = Union[Vector, ArrayLike]


def as_vector(values: VectorLike) -> Vector:
    """Return ``values`` as a Vector, copying only when it is not one already."""
    if isinstance(values, Vector):
        return values
    return Vector.from_array(values)


@dataclass(frozen=True)
class NeuroStructure:
    """Topology of a network: layer sizes and activations."""
    inputs: int
    hiddens: Tuple[int, ...]
    outputs: int
    hidden_activation: ActivationType = ActivationType.SIGMOID
    output_activation: ActivationType = ActivationType.SIGMOID
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if self.hiddens is None:
            raise ConfigurationError("NeuroStructure: hiddens is None")

        hiddens = tuple(self.hiddens)
        if not hiddens:
            raise ConfigurationError("NeuroStructure: at least one hidden layer is required")

        if not _is_positive_int(self.inputs):
            raise ConfigurationError(f"NeuroStructure: inputs must be greater than zero, got {self.inputs!r}")

        for i, size in enumerate(hiddens):
            if not _is_positive_int(size):
                raise ConfigurationError(
                    f"NeuroStructure: hiddens at layer {i} must be greater than zero, got {size!r}"
                )

        if not _is_positive_int(self.outputs):
            raise ConfigurationError(f"NeuroStructure: outputs must be greater than zero, got {self.outputs!r}")

        # frozen dataclass, normalise through object.__setattr__
        object.__setattr__(self, 'inputs', int(self.inputs))
        object.__setattr__(self, 'hiddens', tuple(int(h) for h in hiddens))
        object.__setattr__(self, 'outputs', int(self.outputs))
        object.__setattr__(self, 'hidden_activation', get_activation(self.hidden_activation).kind)
        object.__setattr__(self, 'output_activation', get_activation(self.output_activation).kind)

    @property
    def layer_count(self) -> int:
        return 1 + len(self.hiddens)

    @property
    def checkpoint_name(self) -> str:
        return self.name or 'network'

    def layer_shapes(self) -> List[Tuple[int, int]]:
        """(rows, columns) of every weight matrix, input side first."""
        sizes = [self.inputs, *self.hiddens, self.outputs]
        return [(sizes[i + 1], sizes[i]) for i in range(len(sizes) - 1)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'inputs': self.inputs,
            'hiddens': list(self.hiddens),
            'outputs': self.outputs,
            'hidden_activation': self.hidden_activation.name.lower(),
            'output_activation': self.output_activation.name.lower(),
            'name': self.name,
        }


def _is_positive_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool) and value >= 1


class Network:
    """Fully-connected feed-forward network without biases.

    The network owns one weight matrix per layer boundary and two buffers
    per layer: ``inputs[i]`` is the signal fed into layer ``i`` and
    ``outputs[i]`` is its pre-activation product. Both are overwritten by
    every forward pass and read back by the training step, so an instance
    must only ever run one forward/training step at a time. Use separate
    instances for concurrent work.
    """

    def __init__(self, structure: NeuroStructure, rng: RandomLike = None,
                 initializer: str = 'uniform', **init_kwargs):
        """Initialize the network.

        Args:
            structure: Layer sizes and activations.
            rng: Generator or seed used for weight initialization and drop-out.
            initializer: Weight initializer name ('uniform', 'he' or 'zeros').
            **init_kwargs: Extra arguments for the initializer.
        """
        if not isinstance(structure, NeuroStructure):
            raise ConfigurationError(f"Network: expected a NeuroStructure, got {type(structure).__name__}")

        self.structure = structure
        self.rng = make_rng(rng)

        # resolved once, reused on every step
        self.hidden_activation: Activation = get_activation(structure.hidden_activation)
        self.output_activation: Activation = get_activation(structure.output_activation)

        self.layers: List[Matrix] = [Matrix(rows, columns) for rows, columns in structure.layer_shapes()]
        self.inputs: List[Optional[Vector]] = [None] * len(self.layers)
        self.outputs: List[Optional[Vector]] = [None] * len(self.layers)
        # rows disabled by drop_out, never updated again
        self.dropped: List[np.ndarray] = [np.zeros(layer.rows, dtype=bool) for layer in self.layers]

        init = get_initializer(initializer, **init_kwargs)
        for layer in self.layers:
            init(layer, self.rng)

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    def __repr__(self) -> str:
        sizes = [self.structure.inputs, *self.structure.hiddens, self.structure.outputs]
        return (f"Network(sizes={sizes}, "
                f"hidden_activation={self.structure.hidden_activation.name.lower()}, "
                f"output_activation={self.structure.output_activation.name.lower()})")

    def __str__(self) -> str:
        return "\n\n".join(str(layer) for layer in self.layers)

    def forward(self, x: VectorLike) -> Vector:
        """Forward pass through the network.

        Args:
            x: Input signal of length ``structure.inputs``.

        Returns:
            The activated output vector.
        """
        x = as_vector(x)
        if len(x) != self.structure.inputs:
            raise ShapeMismatchError(
                f"Network: expected {self.structure.inputs} inputs, got {len(x)}"
            )

        last = len(self.layers) - 1
        self.inputs[0] = x

        for i in range(last):
            self.outputs[i] = self.layers[i] @ self.inputs[i]
            self.inputs[i + 1] = self.outputs[i].activate(self.hidden_activation)

        self.outputs[last] = self.layers[last] @ self.inputs[last]
        return self.outputs[last].activate(self.output_activation)

    def predict(self, x: VectorLike) -> List[float]:
        """Forward pass returning a plain list."""
        return self.forward(x).to_list()

    def propagate_errors(self, predicted: VectorLike, target: VectorLike) -> Tuple[List[Vector], float]:
        """Back-propagate the output error from the last layer to the first.

        Args:
            predicted: Network output for the current example.
            target: Expected output.

        Returns:
            Tuple of (per-layer errors, squared output error). The squared
            error is meant to be summed by the caller over a whole epoch.
        """
        predicted = as_vector(predicted)
        target = as_vector(target)
        if len(target) != self.structure.outputs or len(predicted) != self.structure.outputs:
            raise ShapeMismatchError(
                f"Network: expected {self.structure.outputs} outputs, "
                f"got predicted={len(predicted)}, target={len(target)}"
            )

        errors: List[Optional[Vector]] = [None] * len(self.layers)
        last = len(self.layers) - 1
        errors[last] = Vector.from_array(target.values - predicted.values)

        for i in range(last - 1, -1, -1):
            errors[i] = errors[i + 1] @ self.layers[i + 1]

        return errors, errors[last].norm()

    def gradients(self) -> List[Vector]:
        """Activation derivatives at the cached pre-activation outputs.

        Only meaningful right after ``forward`` for the same example.
        """
        last = len(self.layers) - 1
        grads = [self.outputs[i].derivative(self.hidden_activation) for i in range(last)]
        grads.append(self.outputs[last].derivative(self.output_activation))
        return grads

    def update_weights(self, errors: Sequence[Vector], gradients: Sequence[Vector],
                       learning_rate: float, deltas: Optional[List[np.ndarray]] = None,
                       momentum: float = 0.0):
        """Apply the delta rule to every layer, input side first.

        ``w[i, j] += learning_rate * error[i] * gradient[i] * input[j]``

        When ``deltas`` is given the momentum rule is used instead and the
        list is updated in place:

        ``w[i, j] += delta_new[i, j] + momentum * delta_prev[i, j]``

        Args:
            errors: Per-layer errors from ``propagate_errors``.
            gradients: Per-layer gradients from ``gradients``.
            learning_rate: Step size.
            deltas: Previous weight changes, one array per layer.
            momentum: Momentum coefficient, used only with ``deltas``.
        """
        for layer, matrix in enumerate(self.layers):
            scaled = learning_rate * errors[layer].values * gradients[layer].values
            # each row only depends on its own output neuron
            delta = np.outer(scaled, self.inputs[layer].values)
            delta[self.dropped[layer], :] = 0.0

            if deltas is None:
                matrix.values += delta
            else:
                matrix.values += delta + momentum * deltas[layer]
                deltas[layer] = delta

    def zero_deltas(self) -> List[np.ndarray]:
        """Zero-filled weight change buffers, one per layer, for momentum training."""
        return [np.zeros_like(layer.values) for layer in self.layers]

    def drop_out(self, p: float, rng: RandomLike = None) -> int:
        """Zero the incoming weights of hidden neurons with probability ``p``.

        The dropped rows stay disabled: later weight updates skip them. The
        output layer is never touched.

        Args:
            p: Probability of dropping each hidden neuron, in [0, 1].
            rng: Generator to draw from, defaults to the network's own.

        Returns:
            Number of rows that were zeroed.
        """
        if not 0.0 <= p <= 1.0:
            raise ConfigurationError(f"Drop-out probability must be in [0, 1], got {p}")

        rng = self.rng if rng is None else make_rng(rng)
        dropped = 0

        for i, layer in enumerate(self.layers[:-1]):
            mask = rng.random(layer.rows) < p
            layer.values[mask, :] = 0.0
            self.dropped[i] |= mask
            count = int(np.count_nonzero(mask))
            dropped += count
            logger.debug(f"Drop-out zeroed {count}/{layer.rows} rows in layer {i}")

        return dropped

    def train(self, inputs: Sequence[VectorLike], targets: Sequence[VectorLike],
              params=None, log: Optional[Callable[[float, int], None]] = None):
        """Train with plain gradient descent. See ``Trainer.fit``."""
        from .trainer import Trainer
        return Trainer(self, params).fit(inputs, targets, log=log)

    def train_moment(self, inputs: Sequence[VectorLike], targets: Sequence[VectorLike],
                     params=None, log: Optional[Callable[[float, int], None]] = None):
        """Train with momentum gradient descent. See ``Trainer.fit``."""
        from .trainer import Trainer
        return Trainer(self, params).fit(inputs, targets, log=log, use_momentum=True)

    def save(self, filepath: str):
        """Save the network in the text format."""
        from .persistence import save_network
        save_network(self, filepath)

    @classmethod
    def load(cls, filepath: str, name: Optional[str] = None, rng: RandomLike = None) -> 'Network':
        """Load a network saved with ``save``."""
        from .persistence import load_network
        return load_network(filepath, name=name, rng=rng)
