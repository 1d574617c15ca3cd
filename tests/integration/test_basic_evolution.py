"""
Integration tests for basic NEAT evolution.

These tests run complete XOR trials end-to-end. They use a fixed random
seed (42) and check properties of the evolutionary process rather than
whether XOR is solved within the allotted generations.
"""

import pytest

from neater.genotype     import Organism
from neater.run.training import evaluate_organism
from neater.run.trial    import Trial
from neater.run.xor      import XORFitnessCalculator, XORTrainer


# ============================================================================
# Helper Trial Class for XOR
# ============================================================================

class TrialXORTest(Trial):
    """XOR trial which keeps every generation's statistics."""

    def _evaluate_fitness(self, organism):
        return evaluate_organism(organism, XORTrainer(), XORFitnessCalculator())


@pytest.fixture
def short_xor_config(xor_config):
    xor_config.max_number_generations = 40
    return xor_config


# ============================================================================
# Tests
# ============================================================================

class TestXOREvolution:

    def test_trial_completes(self, short_xor_config):
        trial = TrialXORTest(short_xor_config, suppress_output=True)
        trial.run()

        generations = trial.population.generation
        assert 1 <= generations <= short_xor_config.max_number_generations
        assert trial.failed == (trial.population.stats.best_fitness < 1.0)

    def test_best_fitness_never_decreases(self, short_xor_config):
        trial = TrialXORTest(short_xor_config, suppress_output=True)
        trial.run()

        best = [stats.best_fitness for stats in trial.population.history]
        assert all(later >= earlier for earlier, later in zip(best, best[1:]))

    def test_fitness_within_bounds(self, short_xor_config):
        trial = TrialXORTest(short_xor_config, suppress_output=True)
        trial.run()

        # Four rows, each contributing an error of 0 or 1
        for stats in trial.population.history:
            assert -3.0 <= stats.best_fitness <= 1.0

    def test_networks_stay_feed_forward(self, short_xor_config):
        short_xor_config.add_node_prob       = 0.2
        short_xor_config.add_connection_prob = 0.3

        trial = TrialXORTest(short_xor_config, suppress_output=True)
        trial.run()

        for organism in trial.population.organisms:
            assert organism.has_valid_evaluation_order()
            assert len(organism.eval([1.0, 0.0])) == 1

    def test_population_stays_bounded(self, short_xor_config):
        trial = TrialXORTest(short_xor_config, suppress_output=True)
        trial.run()

        for stats in trial.population.history:
            assert stats.num_species <= short_xor_config.max_species

    def test_champion_round_trips(self, short_xor_config):
        trial = TrialXORTest(short_xor_config, suppress_output=True)
        trial.run()

        champion = trial.champion
        restored = Organism.from_dict(champion.to_dict())
        for vector in ([0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]):
            assert restored.eval(vector) == champion.eval(vector)
