"""
XOR Problem Implementation for NEAT

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the NEAT algorithm. The XOR problem is a fundamental test case in neural
network research, demonstrating the necessity of hidden nodes for solving
non-linearly separable problems.

The XOR Problem:
    XOR is a two-input, one-output boolean function where the output is True
    only when the inputs differ:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

Fitness Function:
    Fitness = 1.0 - Σ(thresholded output - target)²

    The network output is thresholded at 0.5, so each wrong answer costs 1.0.
    Maximum fitness of 1.0 is achieved when all four XOR cases are answered correctly.

Classes:
    Trial_XOR: NEAT trial for solving XOR

Usage:
    python examples/trial_XOR.py [config_file] [--num-jobs N]
"""

import argparse
import json
from pathlib import Path

from neater              import Config, Organism, Trial, evaluate_organism
from neater.phenotype    import to_digraph
from neater.run.xor      import XOR_INPUTS, XOR_OUTPUTS, XORFitnessCalculator, XORTrainer

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR (exclusive OR) problem.

    Problem Definition:
        Inputs: 2 binary values (0 or 1)
        Output: 1 binary value (XOR of inputs)
        Training cases: All 4 possible input combinations

    Success Criteria:
        Trial succeeds when fitness reaches the threshold or after
        maximum generations (both specified in the configuration file)

    Implemented Methods:
        _evaluate_fitness(organism): Test network on all 4 XOR cases
        _report_progress():          Display generation statistics and XOR truth table
        _final_report():             Save and visualize the evolved network
    """

    def __init__(self, config: Config, output_dir: Path = Path("."), suppress_output: bool = False):
        super().__init__(config, suppress_output)
        self._output_dir = output_dir

    def _evaluate_fitness(self, organism: Organism) -> float:
        return evaluate_organism(organism, XORTrainer(), XORFitnessCalculator())

    def _report_progress(self):
        """
        Print a report describing the current generation.
        """
        stats    = self._population.stats
        champion = self.champion

        s  = f"===============\n"
        s += f"GENERATION {stats.generation:04d}\n"
        s += f"population size = {stats.num_organisms}\n"
        s += f"number species  = {stats.num_species}\n"
        s += f"maximum fitness = {stats.best_fitness:.4f}\n"
        s += '\n'
        s += str(champion)
        s += '\n\n'

        s += "input         output   target\n"
        s += "-----------------------------\n"
        for input_vals, target in zip(XOR_INPUTS, XOR_OUTPUTS):
            output = champion.eval(input_vals)[0]
            s += f"{input_vals} -> {output:.4f}   {target}\n"

        print(s)

    def _final_report(self):
        """
        Save the champion as JSON and render its network.
        """
        champion = self.champion
        print(f"Trial {'FAILED' if self.failed else 'SUCCEEDED'} after {self._generation_counter} generations")

        organism_file = self._output_dir / "xor_champion.json"
        with open(organism_file, 'w') as f:
            json.dump(champion.to_dict(), f, indent=2)
        print(f"Champion saved as '{organism_file}'")

        try:
            to_digraph(champion).render(str(self._output_dir / "xor_champion"), format='pdf', cleanup=True)
            print("Network visualization saved as 'xor_champion.pdf'")
        except Exception as e:
            print(f"Could not visualize network: {e}")

def main():
    parser = argparse.ArgumentParser(description='Evolve a network solving XOR')
    parser.add_argument('config', nargs='?', default=str(Path(__file__).parent / 'config_xor.ini'),
                        help='Path to the configuration file')
    parser.add_argument('--num-jobs', type=int, default=1,
                        help='Number of parallel jobs for fitness evaluation')
    args = parser.parse_args()

    trial = Trial_XOR(Config(args.config))
    trial.run(num_jobs=args.num_jobs)

if __name__ == '__main__':
    main()
