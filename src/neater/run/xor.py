"""
NEAT XOR Task Module

Trainer and fitness calculator for evolving a network computing the
exclusive OR of two binary inputs.

Classes:
    XORTrainer:           Produces the four XOR input vectors
    XORFitnessCalculator: Scores the thresholded outputs against the XOR truth table
"""

from neater.run.training import FitnessCalculator, Trainer

XOR_INPUTS  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
XOR_OUTPUTS = [0.0, 1.0, 1.0, 0.0]

class XORTrainer(Trainer):
    """
    Produces the four input vectors of the XOR truth table, in a fixed order.
    """

    def __init__(self):
        self._position = 0

    def next(self) -> tuple[list[float] | None, bool]:
        if self._position == len(XOR_INPUTS):
            return None, False

        vector = list(XOR_INPUTS[self._position])
        self._position += 1
        return vector, True

    def reset(self) -> None:
        self._position = 0

class XORFitnessCalculator(FitnessCalculator):
    """
    Fitness of a network on the XOR truth table.

    The network output is thresholded at 0.5 (below: 0, otherwise: 1) and
    compared with the expected XOR value. The fitness is one minus the sum
    of the squared errors, so an exact network scores 1.0.
    """

    def __init__(self):
        self._error = 0.0

    def add_result(self, input: list[float], output: list[float]) -> None:
        """
        Record the output of the network for one input vector.

        Raises:
            ValueError: if the vectors have the wrong size, or 'input' is not an XOR input
        """
        if len(input) != 2:
            raise ValueError(f"invalid XOR input {input}")
        if len(output) != 1:
            raise ValueError(f"invalid XOR output {output}")

        expected = self._expected(input)
        actual   = 0.0 if output[0] < 0.5 else 1.0
        self._error += (expected - actual) ** 2

    @staticmethod
    def _expected(input: list[float]) -> float:
        for vector, target in zip(XOR_INPUTS, XOR_OUTPUTS):
            if input[0] == vector[0] and input[1] == vector[1]:
                return target
        raise ValueError(f"invalid XOR input {input}")

    def calculate_fitness(self) -> float:
        return 1.0 - self._error

    def reset(self) -> None:
        self._error = 0.0
