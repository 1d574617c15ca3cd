"""
NEAT Pool Package

This package contains classes for managing populations and species in the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

The pool package coordinates the evolutionary process at the population level,
organizing organisms into species based on genetic similarity and managing
reproduction across generations.

Modules:
    species:    Species representation and reproduction, gene alignment and crossover
    population: Top-level population management and evolution

Exported Classes:
    GeneAlignment:   Result of aligning the genes of two organisms
    Species:         A cluster of genetically similar organisms
    GenerationStats: Summary of one generation
    Population:      Top-level evolutionary coordinator

Exported Functions:
    align, distance, recombinate, evaluate_all
"""

from neater.pool.species    import GeneAlignment, Species, align, distance, evaluate_all, recombinate
from neater.pool.population import GenerationStats, Population

__all__ = [
    'GeneAlignment',
    'Species',
    'GenerationStats',
    'Population',
    'align',
    'distance',
    'evaluate_all',
    'recombinate',
]
