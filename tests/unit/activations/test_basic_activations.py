"""
Unit tests for basic activation functions.

Tests the activation functions in src/neater/activations/basic_activations.py
"""

import math

import pytest

from neater.activations.basic_activations import (
    identity_activation,
    clamped_activation,
    relu_activation,
    sigmoid_activation,
    tanh_activation,
    activations,
    activation_codes,
)


class TestActivationsDictionary:
    """Test that all activations are accessible via the activations dictionary."""

    def test_all_functions_in_dictionary(self):
        """Test that all activation functions are in the dictionary."""
        for name in ['identity', 'clamped', 'relu', 'sigmoid', 'tanh']:
            assert name in activations, f"{name} not found in activations dictionary"

    def test_dictionary_functions_callable(self):
        """Test that all functions in dictionary are callable."""
        for name, func in activations.items():
            assert callable(func), f"{name} is not callable"

    def test_every_activation_has_a_code(self):
        """Test that every activation has a 3-letter code for printing."""
        assert set(activation_codes) == set(activations)
        assert all(len(code) == 3 for code in activation_codes.values())


class TestIdentityActivation:

    @pytest.mark.parametrize("z", [-2.0, 0.0, 0.5, 3.0])
    def test_returns_input(self, z):
        assert identity_activation(z) == z


class TestClampedActivation:

    @pytest.mark.parametrize("z, expected", [(-5.0, -1.0), (-0.3, -0.3), (0.7, 0.7), (2.0, 1.0)])
    def test_clamps_to_plus_minus_one(self, z, expected):
        assert clamped_activation(z) == expected


class TestReluActivation:

    @pytest.mark.parametrize("z, expected", [(-1.0, 0.0), (0.0, 0.0), (2.5, 2.5)])
    def test_relu_values(self, z, expected):
        assert relu_activation(z) == expected


class TestSigmoidActivation:

    def test_sigmoid_at_zero(self):
        assert sigmoid_activation(0.0) == 0.5

    def test_sigmoid_at_one(self):
        assert sigmoid_activation(1.0) == pytest.approx(1.0 / (1.0 + math.exp(-1.0)))

    def test_sigmoid_large_arguments_do_not_overflow(self):
        """Test that extreme arguments saturate instead of raising OverflowError."""
        assert sigmoid_activation(1e6) == pytest.approx(1.0)
        assert sigmoid_activation(-1e6) == pytest.approx(0.0)

    def test_sigmoid_is_monotonic(self):
        values = [sigmoid_activation(z) for z in [-3.0, -1.0, 0.0, 1.0, 3.0]]
        assert values == sorted(values)


class TestTanhActivation:

    def test_tanh_values(self):
        assert tanh_activation(0.0) == 0.0
        assert tanh_activation(1.0) == pytest.approx(math.tanh(1.0))
