#!/usr/bin/env python3
"""
Utility script to visualize NEAT neural networks.

Usage:
    python scripts/visualize_network.py --organism saved_organism.json
"""

import argparse
import json
import sys

from neater.errors    import RecurrenceViolation
from neater.genotype  import Organism
from neater.phenotype import to_digraph


def visualize_organism(organism, output_file='network', format='png', view=True):
    """
    Visualize an organism as a neural network graph.

    Args:
        organism: The organism to visualize
        output_file: Output filename (without extension)
        format: Output format (png, pdf, svg, etc.)
        view: Whether to automatically open the generated file
    """
    dot = to_digraph(organism)
    dot.render(output_file, format=format, view=view)
    print(f"Network visualization saved to {output_file}.{format}")


def main():
    parser = argparse.ArgumentParser(description='Visualize NEAT neural networks')
    parser.add_argument('--organism', type=str, required=True,
                        help='Path to JSON organism file (as written by Organism.to_dict())')
    parser.add_argument('--output', type=str, default='network',
                        help='Output filename (without extension)')
    parser.add_argument('--format', type=str, default='png',
                        choices=['png', 'pdf', 'svg'],
                        help='Output format')
    parser.add_argument('--dot', action='store_true',
                        help='Print the DOT source instead of rendering it')
    parser.add_argument('--no-view', action='store_true',
                        help='Do not automatically open the generated file')

    args = parser.parse_args()

    # Load organism
    with open(args.organism) as f:
        try:
            organism = Organism.from_dict(json.load(f))
        except (KeyError, ValueError, RecurrenceViolation) as e:
            print(f"Error: file does not describe an organism ({e})")
            sys.exit(1)

    if args.dot:
        print(to_digraph(organism).source)
        return

    # Visualize
    visualize_organism(organism, args.output, args.format, not args.no_view)


if __name__ == '__main__':
    main()
