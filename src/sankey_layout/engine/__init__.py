"""
Sankey layout engine.

Pipeline stages, in order:
- linker: Resolve link endpoints and build node adjacency
- values: Derive node values from link values
- breadth: Assign stages and x-coordinates
- depth: Assign y-coordinates and heights by damped relaxation
- ports: Assign link offsets at both endpoints
"""

from .breadth import compute_node_breadths
from .depth import ALPHA_DECAY, DepthSolver, LayoutWarning
from .linker import compute_node_links, link_graph
from .pipeline import DEFAULT_ITERATIONS, GraphStructureWarning, compute_layout
from .ports import compute_link_depths, refresh_ports
from .values import compute_node_values, value_sum

__all__ = [
    "compute_layout",
    "refresh_ports",
    "link_graph",
    "compute_node_links",
    "compute_node_values",
    "value_sum",
    "compute_node_breadths",
    "compute_link_depths",
    "DepthSolver",
    "GraphStructureWarning",
    "LayoutWarning",
    "ALPHA_DECAY",
    "DEFAULT_ITERATIONS",
]
