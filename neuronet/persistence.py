"""
persistence.py
~~~~~~~~~~~~~~

Line-oriented text persistence for trained networks.

Layout, one value per line:

    <inputs>
    <hidden layer count>
    <hidden_0>
    ...
    <hidden_k-1>
    <outputs>
    <hidden activation ordinal>
    <output activation ordinal>
    <layer 0 row 0, space separated>
    ...
    <last layer last row>

Activation ordinals follow ``ActivationType``: sigmoid=0, tanh=1,
rectifier=2, identity=3.
"""

import logging
import os
from typing import Iterator, List, Optional

from .activations import ActivationType
from .errors import ConfigurationError, FormatError
from .networks import Network, NeuroStructure
from .utils import RandomLike, ensure_dir

# Configure module logger
logger = logging.getLogger(__name__)


def dumps(network: Network) -> str:
    """
    Serialize a network to the text format.

    Args:
        network: Network to serialize

    Returns:
        str: The serialized network, newline terminated
    """
    structure = network.structure
    lines = [str(structure.inputs), str(len(structure.hiddens))]
    lines.extend(str(h) for h in structure.hiddens)
    lines.append(str(structure.outputs))
    lines.append(str(structure.hidden_activation.value))
    lines.append(str(structure.output_activation.value))

    for layer in network.layers:
        for row in layer.values:
            # repr keeps every bit of the float
            lines.append(" ".join(repr(float(v)) for v in row))

    return "\n".join(lines) + "\n"


class _LineReader:
    """Hands out the lines of a text one at a time, tracking the line number."""

    def __init__(self, text: str):
        self._lines: Iterator[str] = iter(text.splitlines())
        self.number = 0

    def next_line(self, what: str) -> str:
        for line in self._lines:
            self.number += 1
            return line
        raise FormatError(f"Unexpected end of data: missing {what} (after line {self.number})")

    def next_int(self, what: str) -> int:
        line = self.next_line(what).strip()
        try:
            return int(line)
        except ValueError:
            raise FormatError(f"Line {self.number}: {what} is not an integer: {line!r}") from None

    def next_positive(self, what: str) -> int:
        value = self.next_int(what)
        if value < 1:
            raise FormatError(f"Line {self.number}: {what} must be greater than zero, got {value}")
        return value

    def next_row(self, what: str, width: int) -> List[float]:
        tokens = self.next_line(what).split()
        if len(tokens) != width:
            raise FormatError(
                f"Line {self.number}: {what} has {len(tokens)} values, expected {width}"
            )
        try:
            return [float(token) for token in tokens]
        except ValueError as e:
            raise FormatError(f"Line {self.number}: {what} is not numeric: {e}") from None


def loads(text: str, name: Optional[str] = None, rng: RandomLike = None) -> Network:
    """
    Rebuild a network from the text format.

    Args:
        text: Serialized network
        name: Network name used for checkpoint file names
        rng: Generator or seed for the loaded network's later drop-out

    Returns:
        Network: The restored network

    Raises:
        FormatError: If the text is truncated or corrupt
    """
    reader = _LineReader(text)

    inputs = reader.next_positive("input count")
    hidden_count = reader.next_positive("hidden layer count")
    hiddens = tuple(reader.next_positive(f"hidden layer {i} size") for i in range(hidden_count))
    outputs = reader.next_positive("output count")

    try:
        hidden_activation = ActivationType(reader.next_int("hidden activation"))
        output_activation = ActivationType(reader.next_int("output activation"))
    except ValueError as e:
        raise FormatError(f"Line {reader.number}: {e}") from None

    try:
        structure = NeuroStructure(
            inputs=inputs,
            hiddens=hiddens,
            outputs=outputs,
            hidden_activation=hidden_activation,
            output_activation=output_activation,
            name=name,
        )
    except ConfigurationError as e:
        raise FormatError(f"Invalid topology: {e}") from e

    network = Network(structure, rng=rng, initializer='zeros')

    for index, layer in enumerate(network.layers):
        for i in range(layer.rows):
            layer.values[i, :] = reader.next_row(f"layer {index} row {i}", layer.columns)

    return network


def save_network(network: Network, filepath: str) -> str:
    """
    Save a network to a text file.

    Args:
        network: The network to save
        filepath: Destination path; missing directories are created

    Returns:
        str: The path written

    Example:
        >>> net = Network(NeuroStructure(2, (2,), 1))
        >>> save_network(net, "models/and_gate.txt")
        'models/and_gate.txt'
    """
    ensure_dir(os.path.dirname(filepath))

    with open(filepath, 'w') as f:
        f.write(dumps(network))

    logger.info(f"Saved network {network!r} to '{filepath}'")
    return filepath


def load_network(filepath: str, name: Optional[str] = None, rng: RandomLike = None) -> Network:
    """
    Load a network from a text file.

    Args:
        filepath: Path of a file written by ``save_network``
        name: Network name used for checkpoint file names
        rng: Generator or seed for the loaded network

    Returns:
        Network: The loaded network

    Raises:
        FormatError: If the file is truncated or corrupt
        OSError: If the file cannot be read
    """
    with open(filepath, 'r') as f:
        text = f.read()

    try:
        network = loads(text, name=name, rng=rng)
    except FormatError as e:
        logger.error(f"Could not load network from '{filepath}': {e}")
        raise

    logger.info(f"Loaded network {network!r} from '{filepath}'")
    return network


def checkpoint_filename(name: str, epoch: int, error: float) -> str:
    """File name of an auto-saved checkpoint: ``<name>_<epoch>_<error>.txt``."""
    return f"{name}_{epoch}_{error:.6g}.txt"


def save_checkpoint(network: Network, directory: str, epoch: int, error: float) -> str:
    """
    Save a training checkpoint.

    Args:
        network: The network being trained
        directory: Checkpoint directory
        epoch: Number of completed epochs
        error: Error of the last epoch

    Returns:
        str: Path of the written checkpoint
    """
    filename = checkpoint_filename(network.structure.checkpoint_name, epoch, error)
    filepath = os.path.join(directory or '.', filename)
    save_network(network, filepath)
    logger.info(f"Checkpoint written at epoch {epoch}: '{filepath}'")
    return filepath
