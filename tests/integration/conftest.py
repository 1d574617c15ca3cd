"""
Shared fixtures for integration tests.
"""

import pytest

from neater.run.config import Config


@pytest.fixture
def xor_config():
    """Configuration tuned for evolving XOR in a few hundred generations."""
    config = Config()
    config.num_inputs                = 2
    config.num_outputs               = 1
    config.initial_population_size   = 32
    config.population_threshold      = 32
    config.max_species               = 16
    config.add_node_prob             = 0.03
    config.add_connection_prob       = 0.05
    config.max_number_generations    = 300
    config.fitness_termination_check = True
    config.fitness_threshold         = 1.0
    config.seed                      = 42
    return config
