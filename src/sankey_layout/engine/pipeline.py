"""
Full Sankey layout pipeline.

Runs linking, value assignment, breadth assignment and depth solving in
order on a fresh arena. Input is validated up front, so a failing call
never returns a partial layout.
"""

from __future__ import annotations

import warnings
from typing import Optional, Sequence

from ..config import SankeyConfig
from ..preprocessing import detect_cycle
from ..types import LayoutResult, LinkLike, NodeLike, TickCallback
from ..validation import validate_iterations, validate_not_empty, validate_values
from .breadth import compute_node_breadths
from .depth import DepthSolver
from .linker import link_graph
from .values import compute_node_values

DEFAULT_ITERATIONS = 32


class GraphStructureWarning(UserWarning):
    """Warning issued when graph structure doesn't match algorithm assumptions."""

    pass


def compute_layout(
    nodes: Sequence[NodeLike],
    links: Sequence[LinkLike],
    config: Optional[SankeyConfig] = None,
    iterations: int = DEFAULT_ITERATIONS,
    *,
    on_tick: Optional[TickCallback] = None,
) -> LayoutResult:
    """
    Compute a Sankey layout.

    Args:
        nodes: Node collection (SankeyNode objects, dicts or any objects)
        links: Link collection; each link has ``source``, ``target`` (an
            index into ``nodes`` or the node object itself) and ``value``
        config: Layout configuration (defaults to SankeyConfig())
        iterations: Number of relaxation rounds
        on_tick: Called with the damping factor after each round

    Returns:
        LayoutResult with node and link geometry

    Raises:
        EmptyGraphError: If there are no nodes
        InvalidValueError: If a link value is missing, negative or not finite
        InvalidReferenceError: If a link endpoint does not resolve to a node
        ValidationError: If iterations is negative

    Example:
        result = compute_layout(
            nodes=[{"name": "a"}, {"name": "b"}],
            links=[{"source": 0, "target": 1, "value": 10}],
            config=SankeyConfig(size=(400, 300)),
        )
        for node in result.nodes:
            print(node.x, node.y, node.dy)
    """
    if config is None:
        config = SankeyConfig()
    iterations = validate_iterations(iterations)
    validate_not_empty(nodes)
    validate_values(links, nodes, strict=True)

    result = link_graph(nodes, links, config)

    cycle = detect_cycle(len(result.nodes), ((link.source, link.target) for link in result.links))
    if cycle is not None:
        warnings.warn(
            f"Graph contains a cycle through nodes {cycle}. "
            "Stages of nodes on or after the cycle depend on traversal order.",
            GraphStructureWarning,
            stacklevel=2,
        )

    compute_node_values(result)
    compute_node_breadths(result, config)
    DepthSolver(result, config).solve(iterations, on_tick=on_tick, stacklevel=3)
    return result


__all__ = ["compute_layout", "GraphStructureWarning", "DEFAULT_ITERATIONS"]
