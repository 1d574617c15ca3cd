"""
NEAT Network Graph Module

Graphviz rendering of an organism's network, for inspection and debugging.

Every node of the organism becomes a circle (inputs, outputs, bias and hidden
nodes are colored by role), and every gene becomes a record node labelled with
its weight and state, placed between the two nodes it connects.

Functions:
    to_digraph(organism): Build a graphviz.Digraph of an organism
    to_dot(organism):     DOT source of an organism's graph
"""

import graphviz  # type: ignore
from typing import TYPE_CHECKING

from neater.genotype.innovation_tracker import BIAS_NODE
if TYPE_CHECKING:
    from neater.genotype import Organism

NODE_ATTRS = {
    'INPUT':  {'fillcolor': 'lightgrey', 'style': 'filled', 'shape': 'circle'},
    'BIAS':   {'fillcolor': 'yellow'   , 'style': 'filled', 'shape': 'circle'},
    'HIDDEN': {'fillcolor': 'lightblue', 'style': 'filled', 'shape': 'circle'},
    'OUTPUT': {'fillcolor': 'white'    , 'style': 'filled', 'shape': 'circle'}
}

def _node_role(organism: 'Organism', node_id: int) -> str:
    if node_id == BIAS_NODE:
        return 'BIAS'
    if node_id in organism.inputs:
        return 'INPUT'
    if node_id in organism.outputs:
        return 'OUTPUT'
    return 'HIDDEN'

def to_digraph(organism: 'Organism') -> graphviz.Digraph:
    """
    Build a Graphviz graph of an organism's network.

    Parameters:
        organism: the organism to draw

    Returns:
        graphviz.Digraph object representing the network
    """
    dot = graphviz.Digraph()
    dot.attr(rankdir='LR')  # Left to right layout

    for node_id in organism.nodes:
        role = _node_role(organism, node_id)
        dot.node(f"node{node_id}", label=str(node_id), **NODE_ATTRS[role])

    for gene in organism.genes_by_innovation:
        state = "disabled" if gene.disabled else "enabled"
        style = 'dashed' if gene.disabled else 'solid'
        dot.node(f"gene{gene.innovation}", label=f"w: {gene.weight:.2f}|{state}", shape='record', style=style)

    for gene in organism.genes_by_innovation:
        dot.edge(f"node{gene.input}", f"gene{gene.innovation}")
        dot.edge(f"gene{gene.innovation}", f"node{gene.output}")

    return dot

def to_dot(organism: 'Organism') -> str:
    """
    Return the DOT source describing an organism's network.
    """
    return to_digraph(organism).source
