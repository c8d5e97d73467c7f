"""
Graph linking: resolve link endpoints and build per-node adjacency.
"""

from __future__ import annotations

from typing import Sequence

from ..config import SankeyConfig
from ..types import LayoutResult, LinkLayout, LinkLike, NodeLayout, NodeLike
from ..validation import endpoint_index, get_field, validate_link_references


def link_graph(
    nodes: Sequence[NodeLike],
    links: Sequence[LinkLike],
    config: SankeyConfig,
) -> LayoutResult:
    """
    Build the layout arena for a graph.

    Each link endpoint, given either as an index into ``nodes`` or as the
    node object itself, is resolved once into a node handle. Node adjacency
    lists are then populated in link order.

    Args:
        nodes: Input node collection
        links: Input link collection
        config: Layout configuration recorded on the result

    Returns:
        A fresh LayoutResult with nodes, links and adjacency populated

    Raises:
        InvalidReferenceError: If any endpoint does not resolve to a node
    """
    validate_link_references(links, nodes, strict=True)

    node_ids = {id(node): i for i, node in enumerate(nodes)}
    n = len(nodes)

    link_layouts: list[LinkLayout] = []
    for i, link in enumerate(links):
        source = endpoint_index(get_field(link, "source"), node_ids, n)
        target = endpoint_index(get_field(link, "target"), node_ids, n)
        assert source is not None and target is not None
        link_layouts.append(
            LinkLayout(
                index=i,
                source=source,
                target=target,
                value=float(get_field(link, "value")),
            )
        )

    result = LayoutResult(
        nodes=[NodeLayout(index=i) for i in range(n)],
        links=link_layouts,
        config=config,
    )
    compute_node_links(result)
    return result


def compute_node_links(result: LayoutResult) -> None:
    """
    Rebuild every node's source_links and target_links.

    Lists are cleared first, so calling this again is safe. Each list keeps
    the links' original relative order.
    """
    for node in result.nodes:
        node.source_links = []
        node.target_links = []

    for link in result.links:
        result.nodes[link.source].source_links.append(link.index)
        result.nodes[link.target].target_links.append(link.index)


__all__ = ["link_graph", "compute_node_links"]
