"""
Neural Network Utilities

This module contains utility functions for neural networks: random
generators, weight initializers and training plots.
"""

import os
from typing import Any, Callable, Optional, Union

import numpy as np

from .errors import ConfigurationError

# Type aliases
RandomLike = Optional[Union[int, np.random.Generator]]
WeightInitializer = Callable[[Any, np.random.Generator], None]


def make_rng(seed: RandomLike = None) -> np.random.Generator:
    """Return a numpy random generator.

    Args:
        seed: An existing generator (returned as is), an integer seed, or
            None for a fresh, unseeded generator.
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def get_initializer(name: str = 'uniform', **kwargs) -> WeightInitializer:
    """Get a weight initializer function.

    Args:
        name: Name of the initializer. One of:
            - 'uniform': Uniform values from [low, high).
            - 'he': Zero-mean normal values scaled by sqrt(2 / fan_in).
            - 'zeros': Leave every weight at zero.
        **kwargs: Additional arguments for the initializer.
            - For 'uniform': 'low' (default: -0.5), 'high' (default: 0.5)

    Returns:
        A function taking a Matrix and a generator that fills the matrix in place.
    """
    if name == 'uniform':
        low = kwargs.get('low', -0.5)
        high = kwargs.get('high', 0.5)
        if not low < high:
            raise ConfigurationError(f"Uniform initializer needs low < high, got [{low}, {high})")
        return lambda matrix, rng: matrix.set_random(rng, low, high)

    elif name == 'he':
        return lambda matrix, rng: matrix.set_he(rng)

    elif name == 'zeros':
        def zeros(matrix, rng):
            matrix.values[:, :] = 0.0
        return zeros

    else:
        raise ConfigurationError(f"Unknown initializer: {name}")


def ensure_dir(dirpath: Union[str, os.PathLike]):
    """Ensure that a directory exists, creating it if necessary."""
    if dirpath:
        os.makedirs(dirpath, exist_ok=True)


def plot_history(history, filepath: str, title: str = 'Training error'):
    """Plot the per-epoch training error and write it to an image file.

    Args:
        history: A TrainingHistory.
        filepath: Output image path; the format follows the extension.
        title: Figure title.
    """
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    epochs = np.arange(1, len(history.errors) + 1)

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(epochs, history.errors, label='Error')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Error')
    ax.set_title(title)
    ax.legend()
    ax.grid(True)

    fig.tight_layout()
    ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath)
    plt.close(fig)
