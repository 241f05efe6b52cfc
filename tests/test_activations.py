"""
test_activations.py
~~~~~~~~~~~~~~~~~~~

Unit tests for the activation catalog.
"""

import numpy as np
import pytest

from neuronet.activations import Activation, ActivationType, get_activation
from neuronet.errors import ConfigurationError


@pytest.mark.unit
class TestCatalog:
    """Test selecting activations by tag."""

    def test_ordinals_are_fixed(self):
        """Test the ordinals written to saved networks."""
        assert ActivationType.SIGMOID.value == 0
        assert ActivationType.TANH.value == 1
        assert ActivationType.RECTIFIER.value == 2
        assert ActivationType.IDENTITY.value == 3

    @pytest.mark.parametrize("tag,expected", [
        (ActivationType.TANH, ActivationType.TANH),
        (2, ActivationType.RECTIFIER),
        (np.int64(3), ActivationType.IDENTITY),
        ('sigmoid', ActivationType.SIGMOID),
        ('Tanh', ActivationType.TANH),
        ('relu', ActivationType.RECTIFIER),
        ('linear', ActivationType.IDENTITY),
        ('nochange', ActivationType.IDENTITY),
    ])
    def test_lookup(self, tag, expected):
        """Test that enum members, ordinals and names resolve."""
        assert get_activation(tag).kind is expected

    def test_resolved_activation_passes_through(self):
        """Test that an Activation is returned unchanged."""
        activation = get_activation('tanh')
        assert get_activation(activation) is activation

    @pytest.mark.parametrize("tag", [4, -1, 'softmax', '', None, 1.5, True])
    def test_unknown_tag(self, tag):
        """Test that unknown tags fail with ConfigurationError."""
        with pytest.raises(ConfigurationError):
            get_activation(tag)

    def test_activation_is_callable(self):
        """Test that an Activation evaluates its function when called."""
        activation = get_activation('identity')
        assert isinstance(activation, Activation)
        assert np.array_equal(activation(np.array([1.0, -2.0])), np.array([1.0, -2.0]))


@pytest.mark.unit
class TestFunctions:
    """Test function values and derivatives."""

    x = np.array([-3.0, -0.5, 0.0, 0.5, 3.0])

    def test_sigmoid(self):
        activation = get_activation(ActivationType.SIGMOID)
        f = 1.0 / (1.0 + np.exp(-self.x))
        assert np.allclose(activation.function(self.x), f)
        assert np.allclose(activation.derivative(self.x), f * (1.0 - f))

    def test_tanh(self):
        activation = get_activation(ActivationType.TANH)
        assert np.allclose(activation.function(self.x), np.tanh(self.x))
        assert np.allclose(activation.derivative(self.x), 1.0 / np.cosh(self.x) ** 2)

    def test_rectifier(self):
        activation = get_activation(ActivationType.RECTIFIER)
        assert np.array_equal(activation.function(self.x), [0.0, 0.0, 0.0, 0.5, 3.0])
        assert np.array_equal(activation.derivative(self.x), [0.0, 0.0, 1.0, 1.0, 1.0])

    def test_rectifier_derivative_at_zero(self):
        """Test that only strictly negative inputs have slope 0."""
        activation = get_activation(ActivationType.RECTIFIER)
        assert activation.derivative(np.array([0.0]))[0] == 1.0
        assert activation.derivative(np.array([-1e-12]))[0] == 0.0

    def test_identity(self):
        activation = get_activation(ActivationType.IDENTITY)
        assert np.array_equal(activation.function(self.x), self.x)
        assert np.array_equal(activation.derivative(self.x), np.ones_like(self.x))

    def test_identity_returns_copy(self):
        """Test that the identity does not hand back its input array."""
        activation = get_activation(ActivationType.IDENTITY)
        assert activation.function(self.x) is not self.x

    @pytest.mark.parametrize("kind", list(ActivationType))
    def test_ranges(self, kind):
        """Test every activation stays within its documented range."""
        activation = get_activation(kind)
        y = activation.function(np.linspace(-10.0, 10.0, 41))
        if kind is ActivationType.SIGMOID:
            assert np.all((y > 0.0) & (y < 1.0))
        elif kind is ActivationType.TANH:
            assert np.all((y > -1.0) & (y < 1.0))
        elif kind is ActivationType.RECTIFIER:
            assert np.all(y >= 0.0)
