"""
Activation Functions

This module contains the closed catalog of activation functions and their
derivatives used by the network layers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Union

import numpy as np

from .errors import ConfigurationError

ArrayFunction = Callable[[np.ndarray], np.ndarray]


class ActivationType(Enum):
    """Activation tags. The values are written to saved networks, keep them fixed."""
    SIGMOID = 0
    TANH = 1
    RECTIFIER = 2
    IDENTITY = 3


@dataclass(frozen=True)
class Activation:
    """An activation function paired with its derivative."""
    kind: ActivationType
    function: ArrayFunction
    derivative: ArrayFunction

    def __call__(self, x: np.ndarray) -> np.ndarray:
        return self.function(x)


def sigmoid(x: np.ndarray) -> np.ndarray:
    """Sigmoid activation. Range: (0, 1)"""
    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_derivative(x: np.ndarray) -> np.ndarray:
    s = sigmoid(x)
    return s * (1.0 - s)


def tanh(x: np.ndarray) -> np.ndarray:
    """Hyperbolic tangent. Range: (-1, 1)"""
    return np.tanh(x)


def tanh_derivative(x: np.ndarray) -> np.ndarray:
    # 1 / cosh^2(x)
    t = np.tanh(x)
    return 1.0 - t * t


def rectifier(x: np.ndarray) -> np.ndarray:
    """Rectified linear unit. Range: [0, +inf)"""
    return np.where(x < 0, 0.0, x)


def rectifier_derivative(x: np.ndarray) -> np.ndarray:
    # Only strictly negative inputs are cut off, so the slope at 0 is 1.
    return np.where(x < 0, 0.0, 1.0)


def identity(x: np.ndarray) -> np.ndarray:
    """Identity. Range: (-inf, +inf)"""
    return np.array(x, dtype=float, copy=True)


def identity_derivative(x: np.ndarray) -> np.ndarray:
    return np.ones_like(x, dtype=float)


_CATALOG: Dict[ActivationType, Activation] = {
    ActivationType.SIGMOID: Activation(ActivationType.SIGMOID, sigmoid, sigmoid_derivative),
    ActivationType.TANH: Activation(ActivationType.TANH, tanh, tanh_derivative),
    ActivationType.RECTIFIER: Activation(ActivationType.RECTIFIER, rectifier, rectifier_derivative),
    ActivationType.IDENTITY: Activation(ActivationType.IDENTITY, identity, identity_derivative),
}

_ALIASES = {
    'relu': ActivationType.RECTIFIER,
    'linear': ActivationType.IDENTITY,
    'nochange': ActivationType.IDENTITY,
}

ActivationLike = Union[Activation, ActivationType, int, str]


def get_activation(kind: ActivationLike) -> Activation:
    """Get an activation function and its derivative.

    Args:
        kind: One of:
            - an ``ActivationType`` member;
            - its ordinal (0 sigmoid, 1 tanh, 2 rectifier, 3 identity);
            - its name, case-insensitive ('sigmoid', 'tanh', 'rectifier',
              'identity', or the aliases 'relu', 'linear', 'nochange');
            - an already resolved ``Activation``, returned unchanged.

    Returns:
        The catalog ``Activation`` entry.

    Raises:
        ConfigurationError: If the tag is not part of the catalog.
    """
    if isinstance(kind, Activation):
        return kind

    if isinstance(kind, ActivationType):
        return _CATALOG[kind]

    # bool is an int subclass but never a valid tag
    if isinstance(kind, (int, np.integer)) and not isinstance(kind, bool):
        try:
            return _CATALOG[ActivationType(int(kind))]
        except ValueError:
            raise ConfigurationError(f"Unknown activation ordinal: {kind}") from None

    if isinstance(kind, str):
        name = kind.strip().lower()
        if name in _ALIASES:
            return _CATALOG[_ALIASES[name]]
        try:
            return _CATALOG[ActivationType[name.upper()]]
        except KeyError:
            raise ConfigurationError(f"Unknown activation function: {kind}") from None

    raise ConfigurationError(f"Unknown activation function: {kind!r}")
