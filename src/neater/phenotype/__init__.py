"""
NEAT Phenotype Package

This package renders the networks encoded by organisms.

Modules:
    graph: Graphviz rendering of an organism's network

Exported Functions:
    to_digraph: Build a graphviz.Digraph of an organism
    to_dot:     DOT source of an organism's graph
"""

from neater.phenotype.graph import to_digraph, to_dot

__all__ = ['to_digraph', 'to_dot']
