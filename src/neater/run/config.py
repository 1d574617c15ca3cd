import configparser
import os
from neater.activations import activations
from neater.errors      import ConfigurationError

class Config:
    """
    Configuration parameters of a NEAT run.

    A Config is either parsed from an INI file or, when no file is given,
    populated with defaults suitable for tests and programmatic setup.
    Once handed to a Population the config is validated and frozen:
    any later attempt to modify it raises a ConfigurationError.

    Public Methods:
        validate(): Check all parameters, raising ConfigurationError on the first bad one
        freeze():   Make the configuration immutable
    """

    CONNECT_STRATEGIES = ("none", "flow", "full")

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a default Config for manual attribute setting.
        """
        object.__setattr__(self, "_frozen", False)

        # Default config for testing/manual setup
        if config_file is None:
            self.num_inputs                = 2
            self.num_outputs               = 1
            self.initial_population_size   = 10
            self.connect_strategy          = "full"
            self.connect_bias              = True

            self.recurrent                 = False
            self.recurrent_connection_prob = 0.0

            self.weight_init_mean          = 0.0
            self.weight_init_stdev         = 1.0
            self.weight_mutation_prob      = 0.8
            self.weight_mutation_power     = 2.5
            self.weight_mutation_stdev     = 0.5
            self.add_node_prob             = 0.03
            self.add_connection_prob       = 0.05

            self.excess_coeff              = 2.0
            self.disjoint_coeff            = 2.0
            self.weight_coeff              = 1.0
            self.compatibility_threshold   = 6.0
            self.compatibility_modifier    = 0.1
            self.genome_size_threshold     = 20

            self.population_threshold            = 32
            self.max_species                     = 64
            self.survival_threshold              = 0.25
            self.drop_off_age                    = 15
            self.fitness_normalization_threshold = None

            self.activation = "sigmoid"

            self.max_number_generations    = 100
            self.fitness_termination_check = False
            self.fitness_threshold         = 1.0
            self.seed                      = None
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise
            except ValueError as e:
                raise ConfigurationError(f"[{section}] {key}: {e}") from e

        # [POPULATION_INIT]

        # The number of input nodes, through which the network receives inputs.
        self.num_inputs = get_value('POPULATION_INIT', 'num_inputs', int)

        # The number of output nodes, to which the network delivers outputs.
        self.num_outputs = get_value('POPULATION_INIT', 'num_outputs', int)

        # The number of organisms seeded into the first species.
        self.initial_population_size = get_value('POPULATION_INIT', 'initial_population_size', int)

        # Specifies the initial connectivity of newly-created networks.
        # Allowed values:
        #   "none" - no connections are initially present
        #   "flow" - inputs and outputs are paired round-robin, max(inputs, outputs) connections
        #   "full" - connect all input nodes to all output nodes
        self.connect_strategy = get_value('POPULATION_INIT', 'connect_strategy', str)

        # Whether the bias node is initially connected to every output node.
        self.connect_bias = get_value('POPULATION_INIT', 'connect_bias', bool, default=True)

        # [MUTATION]

        # Whether recurrent connections are allowed, and the probability
        # that a candidate recurrent connection is accepted when they are.
        self.recurrent                 = get_value('MUTATION', 'recurrent', bool, default=False)
        self.recurrent_connection_prob = get_value('MUTATION', 'recurrent_connection_prob', float, default=0.0)

        # The mean and standard deviation of the normal distribution
        # used to initialize the 'weight' of new connections.
        self.weight_init_mean  = get_value('MUTATION', 'weight_init_mean' , float, default=0.0)
        self.weight_init_stdev = get_value('MUTATION', 'weight_init_stdev', float, default=1.0)

        # The probability that the weight of an enabled gene is perturbed.
        self.weight_mutation_prob = get_value('MUTATION', 'weight_mutation_prob', float)

        # The standard deviation of the zero-centered normal distribution from which
        # a weight perturbation is drawn, and the bound the perturbation is clamped to.
        self.weight_mutation_stdev = get_value('MUTATION', 'weight_mutation_stdev', float)
        self.weight_mutation_power = get_value('MUTATION', 'weight_mutation_power', float)

        # The probability that mutation splits a connection with a new
        # node, or adds a connection between two existing nodes.
        self.add_node_prob       = get_value('MUTATION', 'add_node_prob', float)
        self.add_connection_prob = get_value('MUTATION', 'add_connection_prob', float)

        # [SPECIATION]

        # The coefficients of the excess genes, disjoint genes
        # and average weight difference in the genomic distance.
        self.excess_coeff   = get_value('SPECIATION', 'excess_coeff'  , float)
        self.disjoint_coeff = get_value('SPECIATION', 'disjoint_coeff', float)
        self.weight_coeff   = get_value('SPECIATION', 'weight_coeff'  , float)

        # Organisms whose distance to the species representative is less
        # than this threshold belong to the species. The threshold widens by
        # 'compatibility_modifier' with every generation the species lives.
        self.compatibility_threshold = get_value('SPECIATION', 'compatibility_threshold', float)
        self.compatibility_modifier  = get_value('SPECIATION', 'compatibility_modifier' , float, default=0.0)

        # Genomes with more genes than this have the excess/disjoint
        # terms of the distance normalized by their gene count.
        self.genome_size_threshold = get_value('SPECIATION', 'genome_size_threshold', int, default=20)

        # [REPRODUCTION]

        # The maximum size of a species population.
        self.population_threshold = get_value('REPRODUCTION', 'population_threshold', int)

        # The maximum number of species.
        self.max_species = get_value('REPRODUCTION', 'max_species', int)

        # The fraction of the top performers of a species allowed to reproduce, range (0, 1].
        self.survival_threshold = get_value('REPRODUCTION', 'survival_threshold', float)

        # Species whose best fitness has not improved in more than this
        # number of generations are considered stagnant and removed.
        self.drop_off_age = get_value('REPRODUCTION', 'drop_off_age', int)

        # Fitness is shared (divided by the species population size) only for
        # species at least this large. "None" shares fitness in every species.
        self.fitness_normalization_threshold = get_value('REPRODUCTION', 'fitness_normalization_threshold',
                                                         float, default=None)

        # [NODE]

        # The activation function applied to node values (see 'basic_activations.py').
        self.activation = get_value('NODE', 'activation', str)

        # [TERMINATION]

        # The number of generations after which to stop the run.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int)

        # Whether to stop as soon as the best fitness reaches 'fitness_threshold'.
        self.fitness_termination_check = get_value('TERMINATION', 'fitness_termination_check', bool, default=False)
        self.fitness_threshold         = get_value('TERMINATION', 'fitness_threshold', float, default=None)

        # Seed for the random number generators ("None" for a non-reproducible run).
        self.seed = get_value('TERMINATION', 'seed', int, default=None)

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            ConfigurationError: on the first invalid parameter
        """
        if self.num_inputs is None or self.num_inputs <= 0:
            raise ConfigurationError(f"num_inputs must be positive, got {self.num_inputs}")
        if self.num_outputs is None or self.num_outputs <= 0:
            raise ConfigurationError(f"num_outputs must be positive, got {self.num_outputs}")
        if self.initial_population_size <= 0:
            raise ConfigurationError("initial_population_size must be positive")
        if self.population_threshold <= 0:
            raise ConfigurationError("population_threshold must be positive")
        if self.max_species <= 0:
            raise ConfigurationError("max_species must be positive")
        if self.activation not in activations:
            raise ConfigurationError(f"unknown activation function '{self.activation}'")
        if self.connect_strategy not in Config.CONNECT_STRATEGIES:
            raise ConfigurationError(f"unknown connect strategy '{self.connect_strategy}'")
        if not 0.0 < self.survival_threshold <= 1.0:
            raise ConfigurationError("survival_threshold must be in (0, 1]")

        for name in ('weight_mutation_prob',
                     'add_node_prob',
                     'add_connection_prob',
                     'recurrent_connection_prob'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be a probability, got {value}")

        if self.weight_mutation_power < 0 or self.weight_mutation_stdev < 0:
            raise ConfigurationError("weight mutation power and standard deviation must be non-negative")
        if self.fitness_termination_check and self.fitness_threshold is None:
            raise ConfigurationError("fitness_threshold is required when fitness_termination_check is set")

    def freeze(self) -> None:
        """
        Make the configuration immutable.
        """
        object.__setattr__(self, "_frozen", True)

    def __setattr__(self, name, value):
        if self._frozen:
            raise ConfigurationError(f"configuration is frozen, cannot set '{name}'")
        super().__setattr__(name, value)
