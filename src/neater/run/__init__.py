"""
NEAT Run Package

This package contains the configuration of a NEAT run, the collaborators
used to evaluate organisms, and the trial driving the evolution loop.

Modules:
    config:   Config class, parsed from an INI file
    training: Trainer and FitnessCalculator interfaces, evaluate_organism()
    xor:      Trainer and fitness calculator for the XOR task
    trial:    Trial abstract base class

Exported Classes:
    Config, Trainer, FitnessCalculator, XORTrainer, XORFitnessCalculator, Trial
"""

from neater.run.config   import Config
from neater.run.training import FitnessCalculator, Trainer, evaluate_organism
from neater.run.xor      import XORFitnessCalculator, XORTrainer
from neater.run.trial    import Trial

__all__ = ['Config',
           'FitnessCalculator',
           'Trainer',
           'evaluate_organism',
           'XORFitnessCalculator',
           'XORTrainer',
           'Trial']
