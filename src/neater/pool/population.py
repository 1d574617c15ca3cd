"""
NEAT Population Module

This module implements the Population class, the top-level orchestrator for the NEAT
evolutionary algorithm. The population manages the complete lifecycle of evolution,
from initialization through convergence.

Classes:
    GenerationStats: Summary of one generation
    Population:      Top-level evolutionary coordinator managing species and generations
"""

from loguru    import logger
from typing    import TYPE_CHECKING, Callable, NamedTuple

from neater.genotype.innovation_tracker import InnovationTracker
from neater.genotype.organism           import Organism
from neater.pool.species                import Species, evaluate_all
if TYPE_CHECKING:
    from neater.run.config import Config

class GenerationStats(NamedTuple):
    """
    Summary of a generation, recorded after ranking.

    Public Attributes:
        generation:          Generation number (1 for the first evaluated generation)
        num_species:         Number of species after pruning
        num_organisms:       Number of organisms evaluated
        best_fitness:        Raw fitness of the population champion
        champion_species_id: ID of the species holding the champion
    """
    generation         : int
    num_species        : int
    num_organisms      : int
    best_fitness       : float
    champion_species_id: int

class Population:
    """
    A population of evolving organisms in the NEAT algorithm, split into species.

    All organisms share the same input and output node IDs, allocated once when
    the population is created. The initial population is a single species, seeded
    with mutated copies of one founding organism. New species appear when mutation
    drives organisms away from their species representative.

    Public Attributes:
        species:          Species of the current generation, best first after ranking
        generation:       Number of generations evaluated so far
        champion:         Best organism of the last generation (None before the first one)
        champion_species: Species holding the champion (None before the first generation)
        history:          GenerationStats of every generation

    Public Properties:
        organisms: All organisms of the current generation
        stats:     GenerationStats of the last generation (None before the first one)

    Public Methods:
        spawn_next_generation(evaluate_fn, num_jobs): Evaluate the current generation and breed the next one
    """

    def __init__(self, config: 'Config', tracker: InnovationTracker | None = None):
        """
        Initialize the population: a single species seeded with 'initial_population_size' organisms.

        The configuration is validated and frozen.

        Parameters:
            config:  stores configuration parameters
            tracker: allocates innovation numbers and node IDs (a new one is created if None)

        Raises:
            ConfigurationError: if the configuration is invalid
        """
        config.validate()
        config.freeze()

        self._config         : 'Config'          = config
        self._tracker        : InnovationTracker = tracker if tracker is not None else InnovationTracker()
        self._last_species_id: int               = 0

        self.inputs : list[int] = [self._tracker.next_node_id() for _ in range(config.num_inputs)]
        self.outputs: list[int] = [self._tracker.next_node_id() for _ in range(config.num_outputs)]

        founder = Organism.create(self.inputs, self.outputs, self._tracker, config)
        species = Species(self._new_species_id(), founder, config, self._tracker)
        species.seed(config.initial_population_size)

        self.species         : list[Species]         = [species]
        self.generation      : int                   = 0
        self.champion        : Organism | None       = None
        self.champion_species: Species | None        = None
        self.history         : list[GenerationStats] = []

    def _new_species_id(self) -> int:
        self._last_species_id += 1
        return self._last_species_id

    @property
    def organisms(self) -> list[Organism]:
        return [organism for species in self.species for organism in species.population]

    @property
    def stats(self) -> GenerationStats | None:
        return self.history[-1] if self.history else None

    def spawn_next_generation(self, evaluate_fn: Callable[[Organism], float], num_jobs: int = 1) -> None:
        """
        Evaluate the current generation, then create the next one.

        The generation process follows these steps:

        Step 1: Evaluation and ranking
        - Compute the fitness of every organism
        - Rank each species, then sort species by the raw fitness of their champion
        - Record the population champion and the generation statistics

        Step 2: Pruning
        - Remove the species ranked beyond 'max_species'
        - Remove stagnant species, except the species holding the champion

        Step 3: Reproduction
        - Start a new generation of structural innovations
        - Each species picks a new representative, mutates and mates its organisms
        - Organisms and children which no longer belong to their species are rejected,
          including a champion that does not fit the new representative

        Step 4: Speciation
        - Organisms rejected by their species join the first species they belong to,
          or found a new species, so that every organism belongs to its species
        - Remove extinct species (those with no members)

        Parameters:
            evaluate_fn: computes the fitness of one organism
            num_jobs:    number of parallel processes for fitness evaluation
        """
        organisms = self.organisms
        evaluate_all(organisms, evaluate_fn, num_jobs)

        for species in self.species:
            species.rank()
        self.species.sort(key=lambda s: s.champion_fitness, reverse=True)

        self.generation       += 1
        self.champion_species  = self.species[0]
        self.champion          = self.champion_species.champion

        # Remove species beyond the maximum number allowed
        for species in self.species[self._config.max_species:]:
            logger.debug("[Population] species {} dropped, too many species", species.id)
        del self.species[self._config.max_species:]

        # Remove stagnating species; the champion's species is protected
        survivors = []
        for species in self.species:
            if species.is_stagnant() and species is not self.champion_species:
                logger.debug("[Population] species {} went extinct, no improvement since generation {}",
                             species.id, species.last_improved)
                continue
            survivors.append(species)
        self.species = survivors

        self.history.append(GenerationStats(generation          = self.generation,
                                            num_species         = len(self.species),
                                            num_organisms       = len(organisms),
                                            best_fitness        = self.champion_species.champion_fitness,
                                            champion_species_id = self.champion_species.id))

        # Structural innovations of the next generation are tracked afresh
        self._tracker.new_generation()

        rejects = []
        for species in self.species:
            species.select_representative()
            rejects.extend(species.mutate())
            rejects.extend(species.mate())

        self._speciate(rejects)
        self.species = [species for species in self.species if species.population]

    def _speciate(self, organisms: list[Organism]) -> None:
        """
        Place each organism in the first species it belongs to, or in a new species.
        """
        for organism in organisms:
            for species in self.species:
                if species.belongs(organism):
                    species.add(organism)
                    break
            else:
                species = Species(self._new_species_id(), organism, self._config, self._tracker)
                self.species.append(species)
                logger.debug("[Population] species {} created", species.id)

    def __str__(self):
        return '\n'.join(repr(species) for species in self.species)
