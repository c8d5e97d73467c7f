"""
Breadth (horizontal stage) assignment.

Stages come from a frontier sweep: every node starts in the frontier, and
each round moves the targets of the current frontier one stage further
right. A node reached again through a longer path is overwritten, so its
final stage is the length of the longest path leading to it.
"""

from __future__ import annotations

from ..config import SankeyConfig
from ..types import LayoutResult


def compute_node_breadths(result: LayoutResult, config: SankeyConfig) -> int:
    """
    Assign stages and x-coordinates to every node.

    Args:
        result: Linked layout arena
        config: Layout configuration (node width, canvas size, alignment)

    Returns:
        Number of stages
    """
    nodes = result.nodes
    links = result.links
    n = len(nodes)

    for node in nodes:
        node.stage = 0
        node.dx = config.node_width

    remaining = list(range(n))
    level = 0

    # The level bound stops the sweep on cyclic graphs
    while remaining and level < n:
        next_nodes: list[int] = []
        seen: set[int] = set()
        for index in remaining:
            node = nodes[index]
            node.stage = level
            for link_index in node.source_links:
                target = links[link_index].target
                if target not in seen:
                    seen.add(target)
                    next_nodes.append(target)
        remaining = next_nodes
        level += 1

    stage_count = level

    if config.sources_right:
        _move_sources_right(result)

    if config.sinks_right:
        _move_sinks_right(result, stage_count)

    _scale_node_breadths(result, config, stage_count)
    result.stage_count = stage_count
    return stage_count


def _move_sources_right(result: LayoutResult) -> None:
    """Place each pure source one stage before its nearest target."""
    nodes = result.nodes
    links = result.links
    for node in nodes:
        if not node.target_links and node.source_links:
            node.stage = min(nodes[links[i].target].stage for i in node.source_links) - 1
            node.stage = max(node.stage, 0)


def _move_sinks_right(result: LayoutResult, stage_count: int) -> None:
    """Place every node without outgoing links in the last stage."""
    for node in result.nodes:
        if not node.source_links:
            node.stage = stage_count - 1


def _scale_node_breadths(result: LayoutResult, config: SankeyConfig, stage_count: int) -> None:
    """Map stages onto [0, width - node_width]."""
    if stage_count <= 1:
        for node in result.nodes:
            node.x = 0.0
        return

    span = config.width - config.node_width
    for node in result.nodes:
        node.x = node.stage * span / (stage_count - 1)


__all__ = ["compute_node_breadths"]
