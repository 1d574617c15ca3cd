"""
NEAT Trial Module

This module defines the abstract base class for NEAT trials with built-in
support for CPU-based parallelization using joblib.

A trial represents one independent run of the NEAT algorithm, evolving a
population through generations until a solution is found or the maximum
number of generations is reached.
"""

import numpy as np
import random
from abc    import ABC, abstractmethod
from loguru import logger

from neater.genotype    import InnovationTracker, Organism
from neater.pool        import Population
from neater.run.config  import Config

class Trial(ABC):
    """
    Abstract base class for implementing a NEAT trial.

    A trial represents one independent run of the NEAT algorithm, evolving a
    population through generations until a solution is found or the maximum
    number of generations is reached.

    Subclasses must implement:
    - _evaluate_fitness(organism): Evaluate fitness for a single organism

    Subclasses can override:
    - _reset():           Reset trial-specific state (must call super()._reset())
    - _report_progress(): Display progress after each generation (default: log a summary line)
    - _final_report():    Display final results (default: log the champion)
    - _terminate():       Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        failed: Whether the trial ended without reaching the fitness threshold

    Public Properties:
        population: The population of the current run (None before the first run)
        champion:   Best organism of the last generation (None before the first generation)

    Public Methods:
        run(num_jobs): Execute a complete NEAT trial

    Parallelization of fitness evaluation for organisms:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
        """
        self._config            : Config                   = config
        self._generation_counter: int                      = 0
        self._population        : Population | None        = None
        self._tracker           : InnovationTracker | None = None
        self._suppress_output   : bool                     = suppress_output
        self.failed             : bool                     = True

    @property
    def population(self) -> Population | None:
        return self._population

    @property
    def champion(self) -> Organism | None:
        return self._population.champion if self._population is not None else None

    def run(self, num_jobs: int = 1):
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel processes for fitness evaluation of organisms
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of processes
        """
        # Reset the trial state before starting a new run
        self._reset()

        # Create the initial population
        self._population = Population(self._config, self._tracker)

        # Evolution loop
        while not self._terminate():
            self._generation_counter += 1

            # Evaluate the current generation, then breed the next one
            self._population.spawn_next_generation(self._evaluate_fitness, num_jobs)

            # Display progress after each generation
            if not self._suppress_output:
                self._report_progress()

        # Produce final report
        if not self._suppress_output:
            self._final_report()

    def _reset(self):
        """
        Reset the trial state before starting a new run.

        Seeds the random number generators when the configuration
        provides a seed, and starts a fresh innovation tracker.
        """
        if self._config.seed is not None:
            random.seed(self._config.seed)
            np.random.seed(self._config.seed)

        self._tracker            = InnovationTracker()
        self._generation_counter = 0
        self.failed              = True

    @abstractmethod
    def _evaluate_fitness(self, organism: Organism) -> float:
        """
        Evaluate and return the fitness of an organism.

        This method should test the organism's network on the problem
        domain and compute a fitness score. Higher fitness values indicate
        better performance and higher probability of procreating.

        Parameters:
            organism: The organism to evaluate

        Returns:
            float: Fitness score for the organism
        """
        pass

    def _report_progress(self):
        """
        Report trial progress after each generation.

        This method is suppressed by setting 'self._suppress_output' to 'True',
        which we might do when running many trials.
        """
        stats = self._population.stats
        logger.info("generation {:04d}: species={} organisms={} best fitness={:.4f} (species {})",
                    stats.generation, stats.num_species, stats.num_organisms,
                    stats.best_fitness, stats.champion_species_id)

    def _final_report(self):
        """
        Produce final report at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True',
        which we might do when running many trials.
        """
        outcome = "failed" if self.failed else "succeeded"
        logger.info("trial {} after {} generations", outcome, self._generation_counter)
        champion = self.champion
        if champion is not None:
            logger.info("champion: {} hidden nodes, {} genes\n{}",
                        len(champion.hidden_nodes), len(champion.genes_by_innovation), champion)

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it if the best fitness
        of the last generation has reached a given threshold.

        Subclasses can override this method for custom termination logic.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        # Has this trial run for too long?
        terminate = self._generation_counter >= self._config.max_number_generations

        # Check whether the fitness has reached a target threshold
        stats = self._population.stats
        if self._config.fitness_termination_check and stats is not None:
            success   = stats.best_fitness >= self._config.fitness_threshold
            terminate = terminate or success

            if terminate:
                self.failed = not success

        return terminate
