"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar organisms
that compete primarily within their own niche.

It also provides the genome comparison and crossover operations
used by species: gene alignment, compatibility distance and recombination.

Classes:
    GeneAlignment: Result of aligning the genes of two organisms
    Species:       Represents a single species with its population and fitness tracking

Functions:
    align(a, b):            Align the genes of two organisms by innovation number
    distance(a, b, config): Compatibility distance between two organisms
    recombinate(a, b):      Create a child organism by crossover of two parents
    evaluate_all(organisms, evaluate_fn, num_jobs): Evaluate the fitness of organisms
"""

import math
import numpy as np
import random
from joblib      import Parallel, delayed
from loguru      import logger
from typing      import TYPE_CHECKING, Callable, NamedTuple

from neater.errors            import RecurrenceViolation
from neater.genotype.organism import Organism
if TYPE_CHECKING:
    from neater.genotype.innovation_tracker import InnovationTracker
    from neater.run.config                  import Config

# Maximum number of parent pairs tried to produce one child
MAX_MATE_ATTEMPTS = 10

class GeneAlignment(NamedTuple):
    """
    Outcome of aligning the innovation-ordered genes of two organisms.

    Public Attributes:
        common:            Number of innovations present in both organisms
        disjoint:          Number of unmatched innovations found before either gene list ends
        excess:            Number of unmatched innovations past the end of the shorter gene list
        weight_difference: Sum of the absolute weight differences of the common genes
    """
    common           : int
    disjoint         : int
    excess           : int
    weight_difference: float

def align(a: Organism, b: Organism) -> GeneAlignment:
    """
    Align the genes of two organisms by walking their innovation-ordered gene lists in parallel.
    """
    genes_a, genes_b = a.genes_by_innovation, b.genes_by_innovation
    common, disjoint, weight_difference = 0, 0, 0.0

    i, j = 0, 0
    while i < len(genes_a) and j < len(genes_b):
        innov_a, innov_b = genes_a[i].innovation, genes_b[j].innovation
        if innov_a == innov_b:
            weight_difference += abs(genes_a[i].weight - genes_b[j].weight)
            common += 1
            i += 1
            j += 1
        elif innov_a < innov_b:
            disjoint += 1
            i += 1
        else:
            disjoint += 1
            j += 1

    excess = (len(genes_a) - i) + (len(genes_b) - j)
    return GeneAlignment(common, disjoint, excess, weight_difference)

def distance(a: Organism, b: Organism, config: 'Config') -> float:
    """
    Calculate the compatibility distance between two organisms.

    The distance is computed according to the formula:
        d = (c1*E + c2*D)/N + c3*W
    where:
        E  = number of excess genes
        D  = number of disjoint genes
        W  = average weight difference of matching genes (0 if there are none)
        N  = number of genes in the larger genome, or 1 if that genome has no more
             than 'genome_size_threshold' genes
        c1 = excess_coeff
        c2 = disjoint_coeff
        c3 = weight_coeff

    Parameters:
        a:      first organism
        b:      second organism
        config: stores configuration parameters

    Returns:
        the distance between the two organisms
    """
    alignment = align(a, b)

    largest = max(len(a.genes_by_innovation), len(b.genes_by_innovation))
    n       = largest if largest > config.genome_size_threshold else 1

    avg_weight_diff = alignment.weight_difference / alignment.common if alignment.common else 0.0

    return ((config.excess_coeff   * alignment.excess +
             config.disjoint_coeff * alignment.disjoint) / n +
            config.weight_coeff * avg_weight_diff)

def recombinate(a: Organism, b: Organism) -> Organism:
    """
    Create a child organism by crossover of two parents.

    The fitter parent ('a' in case of a tie) is the primary donor: for matching
    genes the child receives the gene of the primary donor. Genes present in only
    one parent (disjoint or excess) are inherited from that parent.

    Genes are inserted through 'Organism.add_gene()' in innovation order, after the
    nodes they connect have been registered, so the child gets a valid evaluation
    order of its own. The child starts with zero fitness.

    Parameters:
        a: first parent
        b: second parent

    Returns:
        the child organism

    Raises:
        RecurrenceViolation: if the genes of the parents cannot be ordered together
    """
    primary, secondary = (b, a) if b.fitness > a.fitness else (a, b)

    child = Organism(primary.inputs, primary.outputs, primary.recurrent)

    def inherit(gene):
        child.add_node(gene.input)
        child.add_node(gene.output)
        child.add_gene(gene)

    genes_p, genes_s = primary.genes_by_innovation, secondary.genes_by_innovation

    i, j = 0, 0
    while i < len(genes_p) and j < len(genes_s):
        if genes_p[i].innovation == genes_s[j].innovation:
            inherit(genes_p[i])
            i += 1
            j += 1
        elif genes_p[i].innovation < genes_s[j].innovation:
            inherit(genes_p[i])
            i += 1
        else:
            inherit(genes_s[j])
            j += 1

    # Trailing (excess) genes
    for gene in genes_p[i:]:
        inherit(gene)
    for gene in genes_s[j:]:
        inherit(gene)

    return child

def evaluate_all(organisms  : list[Organism],
                 evaluate_fn: Callable[[Organism], float],
                 num_jobs   : int = 1) -> None:
    """
    Evaluate and set the fitness of each organism.

    Workers only compute fitness values; the fitness is assigned to the
    organisms in the calling process. A NaN fitness is recorded as 0.0.

    Parameters:
        organisms:   the organisms to evaluate
        evaluate_fn: computes the fitness of one organism
        num_jobs:    number of parallel processes for fitness evaluation
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
    """
    if num_jobs == 1:
        fitness_all = [evaluate_fn(organism) for organism in organisms]
    else:
        fitness_all = Parallel(num_jobs)(delayed(evaluate_fn)(o) for o in organisms)

    # Treat NaN as 0 (invalid networks get worst fitness)
    for organism, fitness in zip(organisms, fitness_all):
        organism.fitness = 0.0 if math.isnan(fitness) else fitness

class Species:
    """
    A species representing a cluster of genetically similar organisms in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as organisms only compete within their own species.

    Each species keeps a representative organism used for distance calculations.
    An organism belongs to the species if its distance to the representative is
    below the compatibility threshold. The threshold widens as the species ages.

    Every generation, once its organisms have been evaluated, a species goes
    through the following steps (driven by 'Population.spawn_next_generation()'):
    1. rank:                  sort organisms by fitness, cap the population, pick the champion,
                              share fitness among the members
    2. select_representative: draw a new representative among the survivors
    3. mutate:                mutate every organism except the champion, and
                              reject those which no longer belong to the species
    4. mate:                  refill the population with children of the best organisms,
                              rejecting children which do not belong to the species

    Public Attributes:
        id:               Unique species identifier
        representative:   Organism used for distance calculations during speciation
        population:       The organisms that are part of this species
        generation:       Number of generations this species has been ranked
        champion:         Best organism of the last ranking (None before the first one)
        champion_fitness: Raw fitness of the champion at the last ranking
        best_fitness:     Best raw fitness ever achieved by this species
        last_improved:    Generation when the best fitness last improved

    Public Methods:
        seed(size):              Fill the population with mutated copies of the first organism
        belongs(organism):       Check if an organism belongs to this species
        add(organism):           Add an organism to the species
        distance(a, b):          Compatibility distance between two organisms
        rank():                  Sort organisms by fitness and pick the champion
        select_representative(): Draw a new representative
        mutate():                Mutate the organisms, return those rejected
        mate():                  Refill the population through crossover, return the rejected children
        is_stagnant():           Check if species has stopped improving
    """

    def __init__(self,
                 species_id: int,
                 organism  : Organism,
                 config    : 'Config',
                 tracker   : 'InnovationTracker'):
        """
        Initialize a new species.

        Parameters:
            species_id: unique species identifier
            organism:   the founding organism, a copy of it becomes the representative
            config:     stores configuration parameters
            tracker:    allocates innovation numbers and node IDs for mutations
        """
        self._config : 'Config'            = config
        self._tracker: 'InnovationTracker' = tracker

        self.id            : int            = species_id
        self.representative: Organism       = organism.copy()
        self.population    : list[Organism] = [organism]

        self.generation      : int             = 0
        self.champion        : Organism | None = None
        self.champion_fitness: float           = -np.inf
        self.best_fitness    : float           = -np.inf
        self.last_improved   : int             = 0

    def seed(self, size: int) -> None:
        """
        Fill the population with mutated copies of the first organism, up to 'size' organisms.
        """
        founder = self.population[0]
        while len(self.population) < size:
            self.population.append(self._mutated(founder.copy()))

    def belongs(self, organism: Organism) -> bool:
        """
        Check whether an organism is compatible with the species representative.
        """
        threshold = (self._config.compatibility_threshold +
                     self._config.compatibility_modifier * max(self.generation - 1, 0))
        return self.distance(self.representative, organism) < threshold

    def add(self, organism: Organism) -> None:
        self.population.append(organism)

    def distance(self, a: Organism, b: Organism) -> float:
        return distance(a, b, self._config)

    def rank(self) -> None:
        """
        Rank the organisms of the species.

        Organisms are sorted by decreasing fitness (organisms with equal fitness keep
        their relative order) and the population is truncated to 'population_threshold'.
        The top organism becomes the champion and its raw fitness is recorded for
        stagnation tracking. Then fitness is shared: each organism's fitness is divided
        by the population size, unless the population is smaller than
        'fitness_normalization_threshold'.
        """
        if not self.population:
            return

        self.population.sort(key=lambda o: o.fitness, reverse=True)
        del self.population[self._config.population_threshold:]

        self.champion         = self.population[0]
        self.champion_fitness = self.champion.fitness
        if self.champion_fitness > self.best_fitness:
            self.best_fitness  = self.champion_fitness
            self.last_improved = self.generation

        size      = len(self.population)
        threshold = self._config.fitness_normalization_threshold
        if threshold is None or size >= threshold:
            for organism in self.population:
                organism.fitness /= size

        self.generation += 1

    def select_representative(self) -> None:
        if self.population:
            self.representative = random.choice(self.population).copy()

    def mutate(self) -> list[Organism]:
        """
        Mutate every organism of the species except the champion.

        A mutation that cannot be applied leaves the organism unchanged.
        Organisms that no longer belong to the species after mutation are
        removed from it. The champion is not mutated, but is checked against
        the representative like the others.

        Returns:
            the organisms rejected by the species
        """
        kept, rejected = [], []
        for organism in self.population:
            if organism is not self.champion:
                organism = self._mutated(organism)

            if self.belongs(organism):
                kept.append(organism)
            else:
                rejected.append(organism)

        self.population = kept
        if rejected:
            logger.debug("[Species][{}] {} organisms rejected after mutation", self.id, len(rejected))
        return rejected

    def mate(self) -> list[Organism]:
        """
        Refill the population up to 'population_threshold' with children.

        Parents are drawn at random among the top 'survival_threshold' fraction of
        the population. A pair of parents whose genes cannot be combined is replaced
        by another pair, at most MAX_MATE_ATTEMPTS times per child. Each missing
        organism gets one child; a child which does not belong to the species is
        not added to it.

        Returns:
            the children rejected by the species
        """
        if not self.population:
            return []

        num_parents = max(1, int(len(self.population) * self._config.survival_threshold))
        parent_pool = self.population[:num_parents]

        rejected = []
        for _ in range(self._config.population_threshold - len(self.population)):
            child = None
            for _ in range(MAX_MATE_ATTEMPTS):
                parent1 = random.choice(parent_pool)
                parent2 = random.choice(parent_pool)
                try:
                    child = recombinate(parent1, parent2)
                    break
                except RecurrenceViolation as e:
                    logger.debug("[Species][{}] crossover skipped: {}", self.id, e)

            if child is None:
                logger.debug("[Species][{}] no viable parents, population left at {}",
                             self.id, len(self.population))
                break

            if self.belongs(child):
                self.population.append(child)
            else:
                rejected.append(child)

        if rejected:
            logger.debug("[Species][{}] {} children rejected after crossover", self.id, len(rejected))
        return rejected

    def is_stagnant(self) -> bool:
        """
        Check whether the species is stagnant.
        A species is stagnant if its fitness has not improved in a given number of generations.
        """
        return self.generation - self.last_improved > self._config.drop_off_age

    def _mutated(self, organism: Organism) -> Organism:
        """
        Return a mutated copy of an organism, or the organism itself if the mutation is invalid.
        """
        clone = organism.copy()
        try:
            clone.mutate(self._tracker, self._config)
        except RecurrenceViolation as e:
            logger.debug("[Species][{}] mutation skipped: {}", self.id, e)
            return organism
        return clone

    def __repr__(self):
        return (f"Species(id={self.id}, size={len(self.population)}, "
                f"generation={self.generation}, best_fitness={self.best_fitness})")
