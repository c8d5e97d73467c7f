"""
Link port assignment.

Every node's outgoing links are ordered by the depth of their targets and
its incoming links by the depth of their sources; the bands are then
stacked from the node's top edge so they tile its height without gaps.
"""

from __future__ import annotations

from ..types import LayoutResult


def compute_link_depths(result: LayoutResult) -> None:
    """
    Compute sy/ty for every link.

    Sorting is stable and done in place, so ties keep the order reached in
    the previous call.
    """
    nodes = result.nodes
    links = result.links

    for node in nodes:
        node.source_links.sort(key=lambda i: nodes[links[i].target].y)
        node.target_links.sort(key=lambda i: nodes[links[i].source].y)

    for node in nodes:
        sy = 0.0
        for i in node.source_links:
            link = links[i]
            link.sy = sy
            sy += link.dy

        ty = 0.0
        for i in node.target_links:
            link = links[i]
            link.ty = ty
            ty += link.dy


def refresh_ports(result: LayoutResult) -> LayoutResult:
    """
    Recompute port offsets only.

    Use after editing node ``y`` values by hand; stages, heights and the
    relaxation are left alone.

    Returns:
        The same result, for chaining
    """
    compute_link_depths(result)
    return result


__all__ = ["compute_link_depths", "refresh_ports"]
