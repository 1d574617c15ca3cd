"""
NEAT Organism Module

This module implements the Organism class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Organism: Genome of a network together with its evaluation order and fitness
"""

import numpy as np
import random
from bisect import bisect_left
from typing import TYPE_CHECKING

from neater.errors                      import (ConfigurationError, DuplicateInnovation, InvalidInputArity,
                                                NodeNotFound, RecurrenceViolation)
from neater.genotype.gene               import Gene
from neater.genotype.innovation_tracker import BIAS_NODE
if TYPE_CHECKING:
    from neater.genotype.innovation_tracker import InnovationTracker
    from neater.run.config                  import Config

# Maximum number of random node pairs tried by the add-connection mutation
MAX_CONNECT_ATTEMPTS = 20

class Organism:
    """
    A NEAT organism: the genome describing a network, plus its fitness.

    The genome is a list of genes, each describing a weighted connection between
    two nodes. The genes are kept in two orders at the same time:
    - innovation order, strictly ascending by innovation number, used to align
      the genes of two organisms (crossover, compatibility distance)
    - evaluation order, in which no gene reads a node before all the genes writing
      to it have been evaluated, used to compute the network output in one pass

    The evaluation order is maintained incrementally: each time a gene is added it
    is inserted right after the last gene producing its input node, or right before
    the first gene consuming its output node. If both exist and the consumer comes
    first, the new gene would need its output before its input is ready; unless
    recurrence is allowed this is refused with a RecurrenceViolation.

    Node 0 is the bias node, its value is always 1.0. Every other node is either an
    input node (its value is set from the input vector), an output node (its value
    is read off after evaluation) or a hidden node (created by splitting a gene).

    Public Attributes:
        inputs:              Input node IDs, in input vector order
        outputs:             Output node IDs, in output vector order
        genes_by_innovation: Genes ordered by innovation number
        genes_by_evaluation: Genes in evaluation order
        node_values:         Value of each node during/after the last evaluation
        nodes:               All node IDs, in registration order
        recurrent:           Whether recurrent connections are allowed
        fitness:             Fitness score (0.0 until evaluated)

    Public Methods:
        create(inputs, outputs, tracker, config): Create an organism with initial connections
        add_node(node_id):                        Register a node
        add_gene(gene):                           Insert a gene in both orders
        can_connect(node_in, node_out):           Whether a gene between two nodes can be inserted
        eval(inputs):                             Evaluate the network
        mutate(tracker, config):                  Apply all mutation operators stochastically
        copy():                                   Create an independent copy
        to_dict():                                Convert organism to dictionary representation
        from_dict(organism_dict):                 Create an organism from a dictionary description
    """

    def __init__(self, inputs: list[int], outputs: list[int], recurrent: bool = False):
        """
        Initialize a clean organism: the bias, input and output nodes, and no genes.

        Parameters:
            inputs:    input node IDs
            outputs:   output node IDs
            recurrent: whether recurrent connections are allowed
        """
        if len(inputs) <= 0:
            raise ConfigurationError("Number of inputs must be greater than 0")
        if len(outputs) <= 0:
            raise ConfigurationError("Number of outputs must be greater than 0")

        self.inputs   : list[int] = list(inputs)
        self.outputs  : list[int] = list(outputs)
        self.recurrent: bool      = recurrent
        self.fitness  : float     = 0.0

        self.genes_by_innovation: list[Gene]       = []
        self.genes_by_evaluation: list[Gene]       = []
        self.node_values        : dict[int, float] = {}   # node ID => value
        self.nodes              : list[int]        = []   # node IDs, index-addressable

        self.add_node(BIAS_NODE)
        for node_id in self.inputs + self.outputs:
            self.add_node(node_id)

    @classmethod
    def create(cls,
               inputs : list[int],
               outputs: list[int],
               tracker: 'InnovationTracker',
               config : 'Config') -> 'Organism':
        """
        Create an organism and connect its input and output nodes.

        The initial connections depend on 'config.connect_strategy':
          "none" - no connections
          "flow" - inputs and outputs are paired round-robin, max(#inputs, #outputs) connections
          "full" - every input node is connected to every output node
        If 'config.connect_bias' is set, the bias node is also connected to every output node.

        Parameters:
            inputs:  input node IDs
            outputs: output node IDs
            tracker: allocates the innovation numbers of the connections
            config:  stores configuration parameters

        Returns:
            the new organism
        """
        organism = cls(inputs, outputs, config.recurrent)

        if config.connect_strategy == "none":
            pairs = []
        elif config.connect_strategy == "flow":
            m     = max(len(inputs), len(outputs))
            pairs = [(inputs[i % len(inputs)], outputs[i % len(outputs)]) for i in range(m)]
        elif config.connect_strategy == "full":
            pairs = [(node_in, node_out) for node_in in inputs for node_out in outputs]
        else:
            raise ConfigurationError(f"unknown connect strategy '{config.connect_strategy}'")

        if config.connect_bias:
            pairs += [(BIAS_NODE, node_out) for node_out in outputs]

        for node_in, node_out in pairs:
            weight = organism._random_weight(config)
            organism.add_gene(tracker.connection_gene(node_in, node_out, weight, config.activation))

        return organism

    @property
    def hidden_nodes(self) -> list[int]:
        io_nodes = set(self.inputs) | set(self.outputs) | {BIAS_NODE}
        return [node_id for node_id in self.nodes if node_id not in io_nodes]

    def add_node(self, node_id: int) -> None:
        """
        Register a node. Registering an existing node has no effect.
        """
        if node_id not in self.node_values:
            self.node_values[node_id] = 0.0
            self.nodes.append(node_id)

    def get_gene(self, innovation: int) -> Gene | None:
        """
        Find the gene with the given innovation number (None if absent).
        """
        idx = bisect_left(self.genes_by_innovation, innovation, key=lambda g: g.innovation)
        if idx < len(self.genes_by_innovation) and self.genes_by_innovation[idx].innovation == innovation:
            return self.genes_by_innovation[idx]
        return None

    def connected(self, node_in: int, node_out: int) -> bool:
        """
        Whether a gene connecting 'node_in' to 'node_out' exists (enabled or not).
        """
        return any(g.input == node_in and g.output == node_out for g in self.genes_by_innovation)

    def add_gene(self, gene: Gene) -> None:
        """
        Insert a gene in innovation order and in evaluation order.

        The position in evaluation order is found among the genes already present:
         + 'input_dep':  the last  gene whose output is the input  of 'gene'
         + 'output_dep': the first gene whose input  is the output of 'gene'
        'gene' goes right after 'input_dep' if there is one, otherwise right before
        'output_dep' if there is one, otherwise at the end.

        A non-recurrent organism also refuses a self-loop (a gene whose input is its
        own output), whatever the dependencies.

        Parameters:
            gene: the gene to insert

        Raises:
            NodeNotFound:        if an endpoint of 'gene' is not registered
            DuplicateInnovation: if a gene with the same innovation number is present
            RecurrenceViolation: if 'output_dep' precedes 'input_dep', or 'gene' is a self-loop
                                 (non-recurrent organisms only)
        """
        if gene.input not in self.node_values:
            raise NodeNotFound(gene.input)
        if gene.output not in self.node_values:
            raise NodeNotFound(gene.output)

        idx = bisect_left(self.genes_by_innovation, gene.innovation, key=lambda g: g.innovation)
        if idx < len(self.genes_by_innovation) and self.genes_by_innovation[idx].innovation == gene.innovation:
            raise DuplicateInnovation(f"innovation {gene.innovation} already present")

        # Check before modifying anything, a failed insertion leaves the organism untouched
        position = self._evaluation_position(gene.input, gene.output)

        self.genes_by_innovation.insert(idx, gene)
        self.genes_by_evaluation.insert(position, gene)

    def can_connect(self, node_in: int, node_out: int) -> bool:
        """
        Whether a gene from 'node_in' to 'node_out' would be accepted by 'add_gene()'
        as far as the evaluation order is concerned.
        """
        return self.recurrent or not self._is_recurrent(node_in, node_out)

    def _dependencies(self, node_in: int, node_out: int) -> tuple[int | None, int | None]:
        input_dep  = None
        output_dep = None
        for i, g in enumerate(self.genes_by_evaluation):
            if g.output == node_in:
                input_dep = i
            if output_dep is None and g.input == node_out:
                output_dep = i
        return input_dep, output_dep

    def _is_recurrent(self, node_in: int, node_out: int) -> bool:
        if node_in == node_out:
            return True
        input_dep, output_dep = self._dependencies(node_in, node_out)
        return input_dep is not None and output_dep is not None and output_dep <= input_dep

    def _evaluation_position(self, node_in: int, node_out: int) -> int:
        if not self.recurrent and self._is_recurrent(node_in, node_out):
            raise RecurrenceViolation(node_in, node_out)

        input_dep, output_dep = self._dependencies(node_in, node_out)
        if input_dep is not None:
            return input_dep + 1
        if output_dep is not None:
            return output_dep
        return len(self.genes_by_evaluation)

    def has_valid_evaluation_order(self) -> bool:
        """
        Check that no gene writes to a node already read by an earlier gene,
        and that no gene is a self-loop.
        """
        consumed = set()
        for gene in self.genes_by_evaluation:
            if gene.input == gene.output or gene.output in consumed:
                return False
            consumed.add(gene.input)
        return True

    def _replace_genes(self, replacements: dict[int, Gene]) -> None:
        """
        Replace genes, by innovation number, in both orders.
        """
        if replacements:
            self.genes_by_innovation = [replacements.get(g.innovation, g) for g in self.genes_by_innovation]
            self.genes_by_evaluation = [replacements.get(g.innovation, g) for g in self.genes_by_evaluation]

    def eval(self, inputs) -> list[float]:
        """
        Perform a forward pass through the network.

        Parameters:
            inputs: the network inputs (as many as input nodes)

        Returns:
            the values of the output nodes (as many as output nodes)

        Raises:
            InvalidInputArity: if the number of inputs differs from the number of input nodes
        """
        if len(inputs) != len(self.inputs):
            raise InvalidInputArity(f"Expected {len(self.inputs)} inputs, got {len(inputs)}")

        values = self.node_values
        for node_id in values:
            values[node_id] = 0.0

        values[BIAS_NODE] = 1.0
        for node_id, value in zip(self.inputs, inputs):
            values[node_id] = value

        for gene in self.genes_by_evaluation:
            if gene.disabled:
                continue
            values[gene.output] += gene.activate(values[gene.input]) * gene.weight

        return [values[node_id] for node_id in self.outputs]

    def mutate(self, tracker: 'InnovationTracker', config: 'Config') -> None:
        """
        Apply to the current organism all possible mutation operations.

        The list of possible mutations is:
          + perturb connection weights
          + add a connection
          + add a node (split a connection)
        Each mutation occurs randomly with a given probability.

        A structural mutation which cannot be inserted in the evaluation order raises
        RecurrenceViolation, possibly after the organism has been partially modified;
        callers mutate a copy and discard it in that case.

        Parameters:
            tracker: allocates innovation numbers and node IDs
            config:  stores configuration parameters
        """
        self._mutate_weights(config)

        if random.random() < config.add_connection_prob:
            self._mutate_add_connection(tracker, config)

        if random.random() < config.add_node_prob:
            self._mutate_add_node(tracker, config)

    def _mutate_weights(self, config: 'Config') -> None:
        """
        Perturb the weight of each enabled gene with probability 'weight_mutation_prob'.
        The perturbation is drawn from a zero-centered normal distribution and clamped
        to +/- 'weight_mutation_power'.
        """
        power        = config.weight_mutation_power
        replacements = {}
        for gene in self.genes_by_innovation:
            if gene.enabled and random.random() < config.weight_mutation_prob:
                delta = np.random.normal(0.0, config.weight_mutation_stdev)
                delta = float(np.clip(delta, -power, power))
                replacements[gene.innovation] = gene.with_weight(gene.weight + delta)

        self._replace_genes(replacements)

    def _mutate_add_connection(self, tracker: 'InnovationTracker', config: 'Config') -> None:
        """
        Add a new connection between two existing nodes.

        The two ends of the new connection are selected at random, however we cannot add a connection:
         + from a node to itself
         + ending at an INPUT or at the bias node
         + starting at an OUTPUT node (unless recurrence is allowed)
         + between two nodes already connected by a direct connection
         + which cannot be placed in the evaluation order (unless recurrence is allowed)
        When recurrence is allowed, a connection which is recurrent is only accepted
        with probability 'recurrent_connection_prob'.

        The method gives up after MAX_CONNECT_ATTEMPTS unsuccessful picks.
        """
        forbidden_out = set(self.inputs) | {BIAS_NODE}
        outputs       = set(self.outputs)

        for _ in range(MAX_CONNECT_ATTEMPTS):
            node_in  = random.choice(self.nodes)
            node_out = random.choice(self.nodes)

            # Carry out quick checks first
            if node_in == node_out or node_out in forbidden_out:
                continue
            if node_in in outputs and not self.recurrent:
                continue
            if self.connected(node_in, node_out):
                continue

            # Carry out expensive check last
            if self._is_recurrent(node_in, node_out):
                if not self.recurrent or random.random() >= config.recurrent_connection_prob:
                    continue

            weight = self._random_weight(config)
            self.add_gene(tracker.connection_gene(node_in, node_out, weight, config.activation))
            return

    def _mutate_add_node(self, tracker: 'InnovationTracker', config: 'Config') -> None:
        """
        Split a random enabled connection by adding a new node.

        The split gene is disabled and replaced by two genes: 'input' -> new node with
        weight 1.0 and new node -> 'output' with the weight of the split gene. If the
        same connection was split earlier in this generation by another organism, the
        same node and genes are reused.
        """
        enabled_genes = [gene for gene in self.genes_by_innovation if gene.enabled]
        if not enabled_genes:
            return
        split_gene = random.choice(enabled_genes)

        new_node_id, gene1, gene2 = tracker.split_genes(split_gene, config.activation)

        self._replace_genes({split_gene.innovation: split_gene.with_disabled(True)})
        self.add_node(new_node_id)

        # The genes resulting from the split may have been inherited already
        # (crossover with an organism which underwent the same split), in which
        # case they only need to be enabled again.
        for gene in (gene1, gene2):
            existing = self.get_gene(gene.innovation)
            if existing is None:
                self.add_gene(gene)
            elif existing.disabled:
                self._replace_genes({gene.innovation: existing.with_disabled(False)})

    @staticmethod
    def _random_weight(config: 'Config') -> float:
        return float(np.random.normal(config.weight_init_mean, config.weight_init_stdev))

    def copy(self) -> 'Organism':
        """
        Create an independent copy of this organism.
        Genes are immutable, so the copy shares them.
        """
        clone = Organism.__new__(Organism)
        clone.inputs              = list(self.inputs)
        clone.outputs             = list(self.outputs)
        clone.recurrent           = self.recurrent
        clone.fitness             = self.fitness
        clone.genes_by_innovation = list(self.genes_by_innovation)
        clone.genes_by_evaluation = list(self.genes_by_evaluation)
        clone.node_values         = dict(self.node_values)
        clone.nodes               = list(self.nodes)
        return clone

    def to_dict(self) -> dict:
        """
        Convert the organism to a dictionary representation.

        This is the inverse operation of from_dict(). The evaluation order is
        stored explicitly (as innovation numbers), so that a reconstructed organism
        accumulates node values in exactly the same order as the original one.

        Returns:
            Dictionary with the following structure:
            {
                "inputs":    [1, 2],
                "outputs":   [3],
                "recurrent": false,
                "fitness":   0.75,
                "nodes":     [0, 1, 2, 3, 4],
                "genes": [
                    {"innovation": 1, "from": 1, "to": 3, "weight": 0.5, "disabled": true,  "activation": "sigmoid"},
                    {"innovation": 4, "from": 1, "to": 4, "weight": 1.0, "disabled": false, "activation": "sigmoid"},
                    {"innovation": 5, "from": 4, "to": 3, "weight": 0.5, "disabled": false, "activation": "sigmoid"}
                ],
                "evaluation_order": [4, 5, 1]
            }
        """
        return {
            "inputs"          : list(self.inputs),
            "outputs"         : list(self.outputs),
            "recurrent"       : self.recurrent,
            "fitness"         : self.fitness,
            "nodes"           : list(self.nodes),
            "genes"           : [gene.to_dict() for gene in self.genes_by_innovation],
            "evaluation_order": [gene.innovation for gene in self.genes_by_evaluation]
        }

    @classmethod
    def from_dict(cls, organism_dict: dict) -> 'Organism':
        """
        Create an Organism from a dictionary description (see 'to_dict()').

        Nodes referenced by the genes are registered automatically. When the
        dictionary has no "evaluation_order", the genes are inserted one at a time
        in innovation order, and the evaluation order is derived by 'add_gene()'.

        Parameters:
            organism_dict: Dictionary describing the organism

        Returns:
            A new Organism

        Raises:
            ValueError:          if the description is inconsistent
            RecurrenceViolation: if the genes cannot be ordered (non-recurrent organisms only)
            KeyError:            if required fields are missing from the dictionary
        """
        organism = cls(organism_dict["inputs"],
                       organism_dict["outputs"],
                       organism_dict.get("recurrent", False))
        organism.fitness = organism_dict.get("fitness", 0.0)

        for node_id in organism_dict.get("nodes", []):
            organism.add_node(node_id)

        genes = [Gene.from_dict(gene_dict) for gene_dict in organism_dict.get("genes", [])]
        for gene in genes:
            organism.add_node(gene.input)
            organism.add_node(gene.output)

        if "evaluation_order" not in organism_dict:
            for gene in sorted(genes, key=lambda g: g.innovation):
                organism.add_gene(gene)
            return organism

        by_innovation = {gene.innovation: gene for gene in genes}
        order         = organism_dict["evaluation_order"]
        if len(by_innovation) != len(genes):
            raise ValueError("Duplicate innovation numbers found in gene list")
        if sorted(order) != sorted(by_innovation):
            raise ValueError("Evaluation order does not list exactly the genes of the organism")

        organism.genes_by_innovation = sorted(genes, key=lambda g: g.innovation)
        organism.genes_by_evaluation = [by_innovation[innovation] for innovation in order]

        if not organism.recurrent and not organism.has_valid_evaluation_order():
            raise ValueError("Evaluation order is not valid for a non-recurrent organism")

        return organism

    def __str__(self):
        nodes_str = ''.join(f"[{node_id}]" for node_id in self.nodes)
        genes_str = ''.join(str(gene) for gene in self.genes_by_innovation)
        return f"Nodes: {nodes_str}\nGenes: {genes_str}"

    def __repr__(self):
        return (f"Organism(inputs={self.inputs}, outputs={self.outputs}, "
                f"genes={len(self.genes_by_innovation)}, fitness={self.fitness})")
