"""
NEAT Errors Module

This module defines the exceptions raised by the neater package.

Configuration problems are detected before any generation runs. The remaining
errors signal a broken genome contract: some of them (RecurrenceViolation) are
reachable during normal genetic search and are handled by the caller by
discarding the candidate, the others indicate corrupted state and propagate.

Classes:
    NeatError:           Base class of all neater errors
    ConfigurationError:  Invalid configuration parameter
    RecurrenceViolation: Gene insertion would break the evaluation order
    NodeNotFound:        Gene references a node unknown to the organism
    DuplicateInnovation: Organism already holds a gene with this innovation number
    InvalidInputArity:   Wrong number of inputs passed to an organism
"""

class NeatError(Exception):
    """Base class of all errors raised by neater."""

class ConfigurationError(NeatError, ValueError):
    """A configuration parameter is missing or invalid."""

class RecurrenceViolation(NeatError):
    """
    Inserting a gene into a non-recurrent organism would require
    evaluating a node before all of its inputs have been computed.
    """

    def __init__(self, node_in: int, node_out: int):
        self.node_in  = node_in
        self.node_out = node_out
        super().__init__(f"connection {node_in} => {node_out} introduces recurrence")

class NodeNotFound(NeatError, KeyError):
    """A gene references a node which is not registered in the organism."""

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"node not found: {node_id}")

    def __str__(self):
        return self.args[0]

class DuplicateInnovation(NeatError, ValueError):
    """The organism already contains a gene with the same innovation number."""

class InvalidInputArity(NeatError, ValueError):
    """The length of an input vector differs from the number of input nodes."""
