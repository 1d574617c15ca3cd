"""
NEAT Gene Module

This module implements the Gene class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Gene: Immutable gene encoding a weighted connection between two nodes
"""

from dataclasses import dataclass, replace
from typing      import Callable

from neater.activations import activations, activation_codes
from neater.errors      import ConfigurationError

@dataclass(frozen=True)
class Gene:
    """
    A gene describing a weighted connection between two nodes in a Neural Network.

    Each gene represents a directed edge in the network graph. During evaluation
    the gene reads the value of its input node, applies its activation function,
    multiplies the result by its weight and accumulates it into its output node.

    Genes are uniquely identified by their innovation number, which serves as a
    historical marker enabling gene alignment during crossover and speciation.
    Two genes with the same innovation number in different organisms represent
    the same structural innovation.

    Genes are immutable values: organisms inheriting a gene share it, and an
    organism that changes the weight or the disabled flag of one of its genes
    replaces it with the modified copy returned by 'with_weight()' or
    'with_disabled()'.

    Public Attributes:
        innovation: Global innovation number uniquely identifying this connection
        input:      ID of the source node
        output:     ID of the destination node
        weight:     Weight of the connection
        disabled:   Whether this connection is skipped during evaluation
        activation: Name of the activation function applied to the input node value

    Public Properties:
        activate: The activation function (callable)
        enabled:  Negation of 'disabled'

    Public Methods:
        with_weight(weight):     Copy of this gene with a new weight
        with_disabled(disabled): Copy of this gene with a new disabled flag
        to_dict():               Convert gene to dictionary representation
        from_dict(gene_dict):    Create a gene from a dictionary description
    """

    innovation: int
    input     : int
    output    : int
    weight    : float = 0.5
    disabled  : bool  = False
    activation: str   = "sigmoid"

    def __post_init__(self):
        if self.activation not in activations:
            raise ConfigurationError(f"Unknown activation function '{self.activation}'")

    @property
    def activate(self) -> Callable[[float], float]:
        return activations[self.activation]

    @property
    def enabled(self) -> bool:
        return not self.disabled

    def with_weight(self, weight: float) -> 'Gene':
        return replace(self, weight=weight)

    def with_disabled(self, disabled: bool) -> 'Gene':
        return replace(self, disabled=disabled)

    def to_dict(self) -> dict:
        return {
            "innovation": self.innovation,
            "from"      : self.input,
            "to"        : self.output,
            "weight"    : self.weight,
            "disabled"  : self.disabled,
            "activation": self.activation
        }

    @classmethod
    def from_dict(cls, gene_dict: dict) -> 'Gene':
        return cls(innovation = gene_dict["innovation"],
                   input      = gene_dict["from"],
                   output     = gene_dict["to"],
                   weight     = float(gene_dict["weight"]),
                   disabled   = gene_dict.get("disabled", False),
                   activation = gene_dict.get("activation", "sigmoid"))

    def __str__(self):
        s  = f"[{self.innovation:03d},{'D' if self.disabled else 'E'},"
        s += f"{self.input:02d}=>{self.output:02d},{self.weight:+.02f},"
        s += f"{activation_codes.get(self.activation, '???')}]"
        return s
