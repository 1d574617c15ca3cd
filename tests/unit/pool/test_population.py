"""
Unit tests for neater.pool.population module.

This module contains tests for the Population class, which coordinates
species through evaluation, pruning, reproduction and speciation.
"""

from unittest.mock import patch

import pytest

from neater.errors   import ConfigurationError
from neater.genotype import Organism
from neater.pool     import GenerationStats, Population, Species


def count_genes(organism):
    return float(len(organism.genes_by_innovation))


@pytest.fixture
def quiet_config(config):
    """Weight mutations only, every organism fits into a single species."""
    config.add_node_prob           = 0.0
    config.add_connection_prob     = 0.0
    config.compatibility_threshold = 1e9
    return config


def add_empty_species(population, config, tracker, species_id=99):
    """Append a species whose only organism has no connections (fitness 0 under count_genes)."""
    species = Species(species_id, Organism(population.inputs, population.outputs), config, tracker)
    population.species.append(species)
    return species


# ============================================================================
# Test Initialization
# ============================================================================

class TestPopulationInit:

    def test_single_initial_species(self, config):
        population = Population(config)

        assert len(population.species) == 1
        assert len(population.organisms) == config.initial_population_size
        assert population.generation == 0
        assert population.champion is None
        assert population.stats is None

    def test_io_nodes_are_shared(self, config, tracker):
        population = Population(config, tracker)

        assert population.inputs == [1, 2]
        assert population.outputs == [3]
        for organism in population.organisms:
            assert organism.inputs == [1, 2]
            assert organism.outputs == [3]

    def test_founder_is_fully_connected(self, config):
        population = Population(config)
        founder    = population.species[0].population[0]

        # 2 inputs and the bias, all connected to the output
        assert len(founder.genes_by_innovation) == 3

    def test_config_is_validated(self, config):
        config.max_species = 0

        with pytest.raises(ConfigurationError):
            Population(config)

    def test_config_is_frozen(self, config):
        Population(config)

        with pytest.raises(ConfigurationError):
            config.seed = 7


# ============================================================================
# Test Generations
# ============================================================================

class TestSpawnNextGeneration:

    def test_records_statistics(self, config):
        population = Population(config)
        population.spawn_next_generation(count_genes)

        stats = population.stats
        assert isinstance(stats, GenerationStats)
        assert stats.generation == 1
        assert stats.num_organisms == config.initial_population_size
        assert stats.best_fitness >= 3.0
        assert stats.best_fitness == population.champion_species.champion_fitness
        assert stats.champion_species_id == population.champion_species.id

    def test_champion_is_kept(self, quiet_config):
        population = Population(quiet_config)
        population.spawn_next_generation(count_genes)

        assert population.champion is not None
        assert population.champion in population.champion_species.population

    def test_species_are_refilled(self, quiet_config):
        population = Population(quiet_config)
        population.spawn_next_generation(count_genes)

        assert len(population.species) == 1
        assert len(population.organisms) == quiet_config.population_threshold

    def test_several_generations(self, config):
        population = Population(config)
        for _ in range(5):
            population.spawn_next_generation(count_genes)

        assert population.generation == 5
        assert [stats.generation for stats in population.history] == [1, 2, 3, 4, 5]
        assert all(organism.has_valid_evaluation_order() for organism in population.organisms)

        species_ids = [species.id for species in population.species]
        assert len(species_ids) == len(set(species_ids))

    def test_innovations_tracked_per_generation(self, config, tracker):
        population = Population(config, tracker)

        with patch.object(tracker, 'new_generation', wraps=tracker.new_generation) as spy:
            population.spawn_next_generation(count_genes)

        assert spy.call_count == 1


# ============================================================================
# Test Pruning and Speciation
# ============================================================================

class TestPruning:

    def test_stagnant_species_go_extinct(self, quiet_config, tracker):
        quiet_config.drop_off_age = 0
        population = Population(quiet_config, tracker)
        first      = population.species[0]
        stagnant   = add_empty_species(population, quiet_config, tracker)

        population.spawn_next_generation(count_genes)

        assert stagnant not in population.species
        assert population.species == [first]

    def test_champion_species_is_protected(self, quiet_config, tracker):
        # Every species is stagnant right after its first ranking
        quiet_config.drop_off_age = 0
        population = Population(quiet_config, tracker)

        population.spawn_next_generation(count_genes)

        assert population.champion_species in population.species
        assert population.champion_species.is_stagnant()

    def test_species_beyond_limit_are_dropped(self, quiet_config, tracker):
        quiet_config.max_species = 1
        population = Population(quiet_config, tracker)
        first      = population.species[0]
        add_empty_species(population, quiet_config, tracker)

        population.spawn_next_generation(count_genes)

        assert population.species == [first]
        assert population.stats.num_species == 1

    def test_species_sorted_by_champion_fitness(self, quiet_config, tracker):
        population = Population(quiet_config, tracker)
        first      = population.species[0]
        weakest    = add_empty_species(population, quiet_config, tracker)

        # Weakest species goes first, it must still be ranked last
        population.species.reverse()
        population.spawn_next_generation(count_genes)

        assert population.champion_species is first
        assert population.species.index(first) < population.species.index(weakest)


class TestSpeciation:

    def test_rejected_organisms_found_new_species(self, config):
        # No organism is ever compatible with a representative
        config.compatibility_threshold = 0.0
        config.compatibility_modifier  = 0.0
        population = Population(config)

        population.spawn_next_generation(count_genes)

        # Every organism, the champion included, leaves the first species
        # and founds a species of its own
        assert len(population.species) == config.initial_population_size
        assert len(population.organisms) == config.initial_population_size
        assert all(len(species.population) == 1 for species in population.species)

    def test_new_species_get_fresh_ids(self, config):
        config.compatibility_threshold = 0.0
        config.compatibility_modifier  = 0.0
        population = Population(config)

        population.spawn_next_generation(count_genes)

        species_ids = sorted(species.id for species in population.species)
        assert species_ids == list(range(2, config.initial_population_size + 2))

    def test_str_lists_species(self, config):
        population = Population(config)

        assert "Species(id=1" in str(population)

    def test_every_organism_belongs_to_its_species(self, config):
        config.add_node_prob           = 0.3
        config.add_connection_prob     = 0.3
        config.compatibility_threshold = 1.5
        population = Population(config)

        for _ in range(10):
            population.spawn_next_generation(count_genes)

            outsiders = [organism for species in population.species
                                  for organism in species.population if not species.belongs(organism)]
            assert outsiders == []

    def test_champion_survives_leaving_its_species(self, config):
        config.add_node_prob           = 0.3
        config.add_connection_prob     = 0.3
        config.compatibility_threshold = 1.5
        population = Population(config)

        for _ in range(10):
            population.spawn_next_generation(count_genes)
            assert population.champion in population.organisms
