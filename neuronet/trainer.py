"""
Neural Network Trainer

This module contains the training parameters, the training history and the
epoch loop that fits a Network to a dataset.
"""

import json
import logging
import math
import time
from dataclasses import asdict, dataclass, field, fields
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Sequence

from .errors import ConfigurationError, ShapeMismatchError
from .networks import Network, VectorLike, as_vector
from .persistence import save_checkpoint

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, int], None]


@dataclass
class TrainParameters:
    """Configuration for network training."""
    learning_rate: float = 0.5
    accuracy: float = 0.01  # stop once the epoch error is at or below this
    dropout: float = 0.0  # applied once, before the first epoch
    max_epochs: int = 10000
    report_time: bool = False
    autosave_period: int = 0  # epochs between checkpoints, 0 disables
    checkpoint_dir: str = '.'
    momentum: float = 0.9  # only used by momentum training

    def __post_init__(self):
        if not self.learning_rate > 0:
            raise ConfigurationError(f"learning_rate must be positive, got {self.learning_rate}")
        if not self.accuracy >= 0:
            raise ConfigurationError(f"accuracy must be non-negative, got {self.accuracy}")
        if not 0.0 <= self.dropout <= 1.0:
            raise ConfigurationError(f"dropout must be in [0, 1], got {self.dropout}")
        if int(self.max_epochs) != self.max_epochs or self.max_epochs < 1:
            raise ConfigurationError(f"max_epochs must be a positive integer, got {self.max_epochs}")
        if int(self.autosave_period) != self.autosave_period or self.autosave_period < 0:
            raise ConfigurationError(f"autosave_period must be a non-negative integer, got {self.autosave_period}")
        if not 0.0 <= self.momentum < 1.0:
            raise ConfigurationError(f"momentum must be in [0, 1), got {self.momentum}")

        self.max_epochs = int(self.max_epochs)
        self.autosave_period = int(self.autosave_period)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrainParameters':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown training parameters: {sorted(unknown)}")
        return cls(**data)

    def save(self, filepath: str):
        """Save the parameters to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'TrainParameters':
        """Load parameters from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a JSON object in {filepath}")
        return cls.from_dict(data)


class TrainingStatus(Enum):
    """How a training run ended."""
    CONVERGED = auto()
    MAX_EPOCHS_REACHED = auto()


@dataclass
class TrainingHistory:
    """Tracks the training error over epochs."""
    errors: List[float] = field(default_factory=list)
    epoch_times: List[float] = field(default_factory=list)
    checkpoints: List[str] = field(default_factory=list)
    dropped_rows: int = 0

    def update(self, error: float, epoch_time: float):
        self.errors.append(error)
        self.epoch_times.append(epoch_time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert history to dictionary for serialization."""
        return {
            'errors': self.errors,
            'epoch_times': self.epoch_times,
            'checkpoints': self.checkpoints,
            'dropped_rows': self.dropped_rows,
        }

    def save(self, filepath: str):
        """Save training history to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'TrainingHistory':
        """Load training history from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        history = cls()
        history.errors = data['errors']
        history.epoch_times = data['epoch_times']
        history.checkpoints = data.get('checkpoints', [])
        history.dropped_rows = data.get('dropped_rows', 0)

        return history


@dataclass
class TrainingResult:
    """Outcome of a training run."""
    status: TrainingStatus
    epochs: int
    error: float
    history: TrainingHistory

    @property
    def converged(self) -> bool:
        return self.status is TrainingStatus.CONVERGED


class Trainer:
    """Runs the epoch loop for a Network."""

    def __init__(self, network: Network, params: Optional[TrainParameters] = None):
        """Initialize the trainer.

        Args:
            network: The network to train, updated in place.
            params: Training configuration. If None, default parameters are used.
        """
        self.network = network
        self.params = params or TrainParameters()

    def fit(self, inputs: Sequence[VectorLike], targets: Sequence[VectorLike],
            log: Optional[ProgressCallback] = None, use_momentum: bool = False) -> TrainingResult:
        """Train the network until it converges or runs out of epochs.

        Every epoch runs forward pass, error propagation, gradients and weight
        update for each example in order. The epoch error is the square root
        of the squared output errors summed over the whole dataset; it is not
        divided by the number of examples or outputs.

        Drop-out, when configured, is applied once before the first epoch and
        never re-sampled.

        Args:
            inputs: Training input vectors.
            targets: Expected output vectors, one per input.
            log: Called with (error, epoch) after every epoch.
            use_momentum: Use the momentum update rule with ``params.momentum``.

        Returns:
            The training result. Hitting ``max_epochs`` is reported through
            the status, not raised.
        """
        xs, ys = self._prepare_data(inputs, targets)
        params = self.params
        network = self.network
        history = TrainingHistory()

        if params.dropout > 0:
            history.dropped_rows = network.drop_out(params.dropout)
            logger.debug(f"Drop-out disabled {history.dropped_rows} hidden neurons")

        deltas = network.zero_deltas() if use_momentum else None
        momentum = params.momentum if use_momentum else 0.0

        epoch = 0
        while True:
            epoch_start_time = time.time()
            error = 0.0

            for x, y in zip(xs, ys):
                predicted = network.forward(x)
                errors, squared_error = network.propagate_errors(predicted, y)
                error += squared_error
                gradients = network.gradients()
                network.update_weights(errors, gradients, params.learning_rate,
                                       deltas=deltas, momentum=momentum)

            error = math.sqrt(error)
            epoch += 1
            epoch_time = time.time() - epoch_start_time
            history.update(error, epoch_time)

            if log is not None:
                log(error, epoch)

            if params.report_time:
                logger.info(f"Epoch {epoch} - {epoch_time:.3f}s - error: {error:.6f}")
            else:
                logger.debug(f"Epoch {epoch} - error: {error:.6f}")

            if params.autosave_period > 0 and epoch % params.autosave_period == 0:
                history.checkpoints.append(self.save_checkpoint(epoch, error))

            if error <= params.accuracy:
                status = TrainingStatus.CONVERGED
                logger.info(f"Converged after {epoch} epochs, error: {error:.6f}")
                break

            if epoch >= params.max_epochs:
                status = TrainingStatus.MAX_EPOCHS_REACHED
                logger.warning(f"Max epoch reached ({epoch}), error: {error:.6f}")
                break

        return TrainingResult(status=status, epochs=epoch, error=error, history=history)

    def save_checkpoint(self, epoch: int, error: float) -> str:
        """Write the current network as ``<name>_<epoch>_<error>.txt``.

        Returns:
            Path of the written file.
        """
        return save_checkpoint(self.network, self.params.checkpoint_dir, epoch, error)

    def _prepare_data(self, inputs: Sequence[VectorLike], targets: Sequence[VectorLike]):
        if inputs is None or targets is None or len(inputs) == 0:
            raise ConfigurationError("Training data is empty")
        if len(inputs) != len(targets):
            raise ConfigurationError(
                f"Got {len(inputs)} inputs but {len(targets)} targets"
            )

        structure = self.network.structure
        xs = [as_vector(x) for x in inputs]
        ys = [as_vector(y) for y in targets]

        for index, (x, y) in enumerate(zip(xs, ys)):
            if len(x) != structure.inputs:
                raise ShapeMismatchError(
                    f"Example {index}: expected {structure.inputs} inputs, got {len(x)}"
                )
            if len(y) != structure.outputs:
                raise ShapeMismatchError(
                    f"Example {index}: expected {structure.outputs} outputs, got {len(y)}"
                )

        return xs, ys
