"""
NEAT Training Module

This module defines the collaborators through which organisms are evaluated:
a Trainer produces the input vectors of an evaluation episode, and a
FitnessCalculator turns the outputs of the organism into a fitness score.

Classes:
    Trainer:           Abstract source of input vectors for one evaluation episode
    FitnessCalculator: Abstract accumulator of (input, output) results producing a fitness

Functions:
    evaluate_organism(organism, trainer, calculator): Run one evaluation episode
"""

from abc    import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neater.genotype import Organism

class Trainer(ABC):
    """
    Abstract base class for a finite, restartable sequence of input vectors.

    Subclasses must implement:
    - next():  Return the next input vector
    - reset(): Restart the sequence from the beginning
    """

    @abstractmethod
    def next(self) -> tuple[list[float] | None, bool]:
        """
        Return the next input vector.

        Returns:
            2-tuple: (vector, has_more)
            when the sequence is exhausted, 'vector' is None and 'has_more' is False
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        pass

class FitnessCalculator(ABC):
    """
    Abstract base class for fitness calculation.

    The calculator is fed the input and output vectors of every step of an
    evaluation episode, and then asked for the resulting fitness. It is reset
    before each organism is evaluated.

    Higher fitness is better.

    Subclasses must implement:
    - add_result(input, output): Record the output produced for an input
    - calculate_fitness():       Return the fitness of the recorded results
    - reset():                   Forget all recorded results
    """

    @abstractmethod
    def add_result(self, input: list[float], output: list[float]) -> None:
        pass

    @abstractmethod
    def calculate_fitness(self) -> float:
        pass

    @abstractmethod
    def reset(self) -> None:
        pass

def evaluate_organism(organism  : 'Organism',
                      trainer   : Trainer,
                      calculator: FitnessCalculator) -> float:
    """
    Evaluate an organism over one pass of the trainer's input vectors.

    Both collaborators are reset first, then every input vector is fed through
    the organism's network and the result is handed to the calculator.

    Parameters:
        organism:   the organism to evaluate
        trainer:    produces the input vectors
        calculator: turns the results into a fitness score

    Returns:
        the fitness of the organism
    """
    trainer.reset()
    calculator.reset()

    while True:
        vector, has_more = trainer.next()
        if not has_more:
            break
        calculator.add_result(vector, organism.eval(vector))

    return calculator.calculate_fitness()
