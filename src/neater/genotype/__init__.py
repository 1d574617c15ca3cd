"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm. An organism's genome is a list of connection genes,
kept both in innovation order and in evaluation order.

Modules:
    gene:               Gene class
    innovation_tracker: InnovationTracker class
    organism:           Organism class

Exported Classes:
    Gene:              Immutable gene encoding a weighted connection between two nodes
    InnovationTracker: Allocator of innovation numbers and node IDs for one run
    Organism:          Genome of a network together with its evaluation order and fitness

Exported Constants:
    BIAS_NODE: ID of the bias node, present in every organism
"""

from neater.genotype.gene               import Gene
from neater.genotype.innovation_tracker import BIAS_NODE, InnovationTracker
from neater.genotype.organism           import Organism

__all__ = ['BIAS_NODE',
           'Gene',
           'InnovationTracker',
           'Organism']
