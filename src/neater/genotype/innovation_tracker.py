"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationTracker: Allocator of innovation numbers and node IDs for one run
"""

import threading

from neater.genotype.gene import Gene

BIAS_NODE = 0

class InnovationTracker:
    """
    Allocates innovation numbers and node IDs for a NEAT run, and makes
    sure the same structural change made by different organisms within
    the same generation gets the same innovation numbers (and node ID).

    One tracker is created per run and handed down to everything that
    mutates organisms. Counters are monotonically increasing and never
    reused; node ID 0 is reserved for the bias node, so both counters
    start at 1. Allocation and the generation caches are guarded by a
    lock, so organisms can be mutated from several threads.

    Public Methods:
        next_innovation():                                 Allocate a new innovation number
        next_node_id():                                    Allocate a new node ID
        connection_gene(node_in, node_out, weight, act):   Gene for a new connection (cached per generation)
        split_genes(gene, activation):                     Node and genes for splitting a gene (cached per generation)
        new_generation():                                  Forget the innovations cached in the current generation
    """

    def __init__(self):
        self._last_innovation = 0
        self._last_node_id    = BIAS_NODE
        self._lock            = threading.Lock()

        # Connections created in the current generation
        self._connection_cache: dict[tuple[int, int], Gene] = {}              # (node_in, node_out) -> gene

        # Connections split in the current generation
        self._split_cache: dict[tuple[int, int], tuple[int, Gene, Gene]] = {}  # (node_in, node_out) -> (node ID, gene1, gene2)

    def next_innovation(self) -> int:
        with self._lock:
            return self._allocate_innovation()

    def next_node_id(self) -> int:
        with self._lock:
            return self._allocate_node_id()

    # Callers hold the lock
    def _allocate_innovation(self) -> int:
        self._last_innovation += 1
        return self._last_innovation

    def _allocate_node_id(self) -> int:
        self._last_node_id += 1
        return self._last_node_id

    def connection_gene(self, node_in: int, node_out: int, weight: float, activation: str) -> Gene:
        """
        Get the gene for a connection, identified by its endpoints.

        If the same connection was already created in this generation, the cached
        gene is returned: it carries the innovation number and the initial weight
        assigned the first time around. Otherwise a new innovation number is
        allocated and the gene (with the given weight) is cached.

        Parameters:
            node_in:    node ID for the 'from' end of the connection
            node_out:   node ID for the 'to'   end of the connection
            weight:     initial weight, used only if the connection is new
            activation: activation function name, used only if the connection is new

        Returns:
            the gene describing the connection
        """
        key = (node_in, node_out)
        with self._lock:
            gene = self._connection_cache.get(key)
            if gene is None:
                innovation = self._allocate_innovation()
                gene = Gene(innovation, node_in, node_out, weight, activation=activation)
                self._connection_cache[key] = gene
            return gene

    def split_genes(self, conn_to_split: Gene, activation: str) -> tuple[int, Gene, Gene]:
        """
        Get node ID and genes for splitting a connection.
        If this exact connection has been split before in this generation, returns
        the same values, otherwise creates new ones.

        Parameters:
            conn_to_split: the gene being split
            activation:    activation function name of the new genes

        Returns:
            3-tuple: (new_node_id, gene1, gene2)
            gene1 connects the 'from' node of 'conn_to_split' to the new node, with weight 1.0
            gene2 connects the new node to the 'to' node of 'conn_to_split', with its weight
        """
        key = (conn_to_split.input, conn_to_split.output)
        with self._lock:
            if key not in self._split_cache:
                new_node_id = self._allocate_node_id()
                innov1      = self._allocate_innovation()
                innov2      = self._allocate_innovation()

                gene1 = Gene(innov1, conn_to_split.input, new_node_id, 1.0, activation=activation)
                gene2 = Gene(innov2, new_node_id, conn_to_split.output, conn_to_split.weight, activation=activation)
                self._split_cache[key] = (new_node_id, gene1, gene2)

            return self._split_cache[key]

    def new_generation(self) -> None:
        """
        Clear the per-generation caches. Counters keep running.
        """
        with self._lock:
            self._connection_cache = {}
            self._split_cache      = {}

    def __getstate__(self):
        # Locks cannot be pickled
        state = self.__dict__.copy()
        del state['_lock']
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.Lock()
