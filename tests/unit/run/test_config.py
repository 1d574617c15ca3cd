"""
Unit tests for Config class.
"""

import textwrap
from pathlib import Path

import pytest

from neater.errors     import ConfigurationError
from neater.run.config import Config


# ============================================================================
# Fixtures
# ============================================================================

FULL_CONFIG = textwrap.dedent("""
    [POPULATION_INIT]
    num_inputs              = 3
    num_outputs             = 2
    initial_population_size = 20
    connect_strategy        = flow
    connect_bias            = False

    [MUTATION]
    recurrent                 = True
    recurrent_connection_prob = 0.2
    weight_mutation_prob      = 0.9
    weight_mutation_stdev     = 0.3
    weight_mutation_power     = 1.5
    add_node_prob             = 0.1
    add_connection_prob       = 0.2

    [SPECIATION]
    excess_coeff            = 1.0
    disjoint_coeff          = 1.5
    weight_coeff            = 0.4
    compatibility_threshold = 3.0

    [REPRODUCTION]
    population_threshold            = 50
    max_species                     = 8
    survival_threshold              = 0.3
    drop_off_age                    = 10
    fitness_normalization_threshold = 5

    [NODE]
    activation = tanh

    [TERMINATION]
    max_number_generations    = 200
    fitness_termination_check = True
    fitness_threshold         = 0.95
    seed                      = 7
    """)


@pytest.fixture
def config_file(tmp_path):
    """Write an INI file and return its path."""
    def write(content=FULL_CONFIG):
        path = tmp_path / "config.ini"
        path.write_text(content)
        return str(path)
    return write


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:
    """Test Config initialization."""

    def test_defaults_are_valid(self):
        config = Config()
        config.validate()

        assert config.num_inputs == 2
        assert config.num_outputs == 1
        assert config.connect_strategy == "full"
        assert config.activation == "sigmoid"
        assert config.fitness_normalization_threshold is None
        assert config.seed is None

    def test_init_with_nonexistent_file_raises_error(self):
        with pytest.raises(FileNotFoundError, match="Configuration file .* not found"):
            Config('nonexistent_file.ini')

    def test_init_with_file(self, config_file):
        config = Config(config_file())

        assert config.num_inputs == 3
        assert config.num_outputs == 2
        assert config.initial_population_size == 20
        assert config.connect_strategy == "flow"
        assert config.connect_bias is False
        assert config.recurrent is True
        assert config.recurrent_connection_prob == 0.2
        assert config.weight_mutation_power == 1.5
        assert config.disjoint_coeff == 1.5
        assert config.population_threshold == 50
        assert config.fitness_normalization_threshold == 5.0
        assert config.activation == "tanh"
        assert config.fitness_termination_check is True
        assert config.fitness_threshold == 0.95
        assert config.seed == 7

    def test_optional_values_take_defaults(self, config_file):
        config = Config(config_file())

        assert config.weight_init_mean == 0.0
        assert config.weight_init_stdev == 1.0
        assert config.compatibility_modifier == 0.0
        assert config.genome_size_threshold == 20

    def test_none_values(self, config_file):
        config = Config(config_file(FULL_CONFIG.replace("seed                      = 7",
                                                        "seed                      = None")))
        assert config.seed is None

    def test_malformed_value_raises_configuration_error(self, config_file):
        config_path = config_file(FULL_CONFIG.replace("num_inputs              = 3",
                                                      "num_inputs              = three"))

        with pytest.raises(ConfigurationError, match="num_inputs"):
            Config(config_path)

    def test_example_configuration_is_valid(self):
        example = Path(__file__).parents[3] / "examples" / "config_xor.ini"

        config = Config(str(example))
        config.validate()
        assert config.num_inputs == 2


# ============================================================================
# Test Validation
# ============================================================================

class TestConfigValidate:
    """Test Config.validate()."""

    @pytest.mark.parametrize("name, value", [
        ("num_inputs",                0),
        ("num_outputs",              -1),
        ("initial_population_size",   0),
        ("population_threshold",      0),
        ("max_species",               0),
        ("activation",        "unknown"),
        ("connect_strategy",  "partial"),
        ("survival_threshold",      0.0),
        ("survival_threshold",      1.5),
        ("weight_mutation_prob",    1.2),
        ("add_node_prob",          -0.1),
        ("weight_mutation_power",  -1.0),
    ])
    def test_invalid_values(self, name, value):
        config = Config()
        setattr(config, name, value)

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_termination_check_requires_threshold(self):
        config = Config()
        config.fitness_termination_check = True
        config.fitness_threshold         = None

        with pytest.raises(ConfigurationError, match="fitness_threshold"):
            config.validate()

    def test_configuration_error_is_value_error(self):
        config = Config()
        config.max_species = 0

        with pytest.raises(ValueError):
            config.validate()


# ============================================================================
# Test Freezing
# ============================================================================

class TestConfigFreeze:
    """Test Config.freeze()."""

    def test_frozen_config_rejects_changes(self):
        config = Config()
        config.freeze()

        with pytest.raises(ConfigurationError, match="frozen"):
            config.max_species = 3
        assert config.max_species == 64

    def test_unfrozen_config_accepts_changes(self):
        config = Config()
        config.max_species = 3

        assert config.max_species == 3
