"""
neater - NEAT (NeuroEvolution of Augmenting Topologies) in Python.

This package evolves neural networks by growing their topology one
connection or node at a time, grouping organisms into species so that
new structures get a chance to mature before competing.

Main components:
- genotype:    Genetic encoding (genes, organisms, innovation tracking)
- pool:        Species, crossover and population management
- phenotype:   Rendering of networks with graphviz
- run:         Configuration, evaluation collaborators and trials
- activations: Activation functions applied by genes

Example:
    >>> from neater import Config, Trial, evaluate_organism
    >>> from neater.run import XORTrainer, XORFitnessCalculator
    >>> class XORTrial(Trial):
    ...     def _evaluate_fitness(self, organism):
    ...         return evaluate_organism(organism, XORTrainer(), XORFitnessCalculator())
    >>> XORTrial(Config("config_xor.ini")).run()
"""

__version__ = "0.1.0"

from neater.errors       import (ConfigurationError, DuplicateInnovation, InvalidInputArity,
                                 NeatError, NodeNotFound, RecurrenceViolation)
from neater.genotype     import Gene, InnovationTracker, Organism
from neater.pool         import Population, Species
from neater.run.config   import Config
from neater.run.training import FitnessCalculator, Trainer, evaluate_organism
from neater.run.trial    import Trial

__all__ = [
    "ConfigurationError",
    "DuplicateInnovation",
    "InvalidInputArity",
    "NeatError",
    "NodeNotFound",
    "RecurrenceViolation",
    "Gene",
    "InnovationTracker",
    "Organism",
    "Population",
    "Species",
    "Config",
    "FitnessCalculator",
    "Trainer",
    "evaluate_organism",
    "Trial",
]
