"""
Layout quality metrics.

Provides quantitative checks on a finished Sankey layout:
- Column overlaps: Node pairs in a column closer than the node padding
- Port tiling error: How far link bands are from tiling their node
- Link crossings: Band pairs whose vertical order flips between columns
- Out of bounds: Nodes extending past the canvas

All metrics read a LayoutResult and never modify it.
"""

from __future__ import annotations

import math
from typing import Any

from .types import LayoutResult, LinkLayout


def column_overlaps(result: LayoutResult, epsilon: float = 1e-9) -> list[tuple[int, int, float]]:
    """
    Find vertically adjacent nodes closer than the configured padding.

    Args:
        result: Layout result
        epsilon: Tolerance for floating point error

    Returns:
        List of (upper node, lower node, shortfall) tuples, where shortfall
        is how much padding is missing
    """
    padding = result.config.node_padding
    overlaps: list[tuple[int, int, float]] = []

    for column in result.columns():
        ordered = sorted(column, key=lambda node: node.y)
        for upper, lower in zip(ordered, ordered[1:]):
            shortfall = upper.y + upper.dy + padding - lower.y
            if shortfall > epsilon:
                overlaps.append((upper.index, lower.index, shortfall))

    return overlaps


def port_tiling_error(result: LayoutResult) -> float:
    """
    Measure how well link bands tile their nodes.

    On each side of a node, bands must start at offset 0 and follow each
    other without gaps. The side carrying the node's full value must
    cover the node's height exactly; the other side must not exceed it.

    Returns:
        Largest deviation found, in pixels (0.0 for a perfect tiling)
    """
    links = result.links
    worst = 0.0

    for node in result.nodes:
        for handles, offset_attr in ((node.source_links, "sy"), (node.target_links, "ty")):
            if not handles:
                continue
            side = [links[i] for i in handles]
            expected = 0.0
            value = 0.0
            for link in side:
                worst = max(worst, abs(getattr(link, offset_attr) - expected))
                expected += link.dy
                value += link.value
            if math.isclose(value, node.value, rel_tol=1e-9, abs_tol=1e-12):
                worst = max(worst, abs(expected - node.dy))
            else:
                worst = max(worst, expected - node.dy)

    return worst


def link_crossings(result: LayoutResult) -> int:
    """
    Count crossing link bands.

    Two bands cross when they span the same pair of columns and their
    vertical order at the source side differs from the order at the target
    side. Bands sharing an endpoint node are compared as well, since their
    order at that node is fixed by port assignment.

    Time Complexity: O(m^2) where m = number of links
    """
    spans: dict[tuple[int, int], list[tuple[float, float]]] = {}
    for link in result.links:
        source = result.nodes[link.source]
        target = result.nodes[link.target]
        spans.setdefault((source.stage, target.stage), []).append(_band_ends(result, link))

    crossings = 0
    for bands in spans.values():
        for i in range(len(bands)):
            y0a, y1a = bands[i]
            for j in range(i + 1, len(bands)):
                y0b, y1b = bands[j]
                if (y0a - y0b) * (y1a - y1b) < 0:
                    crossings += 1
    return crossings


def out_of_bounds(result: LayoutResult, epsilon: float = 1e-9) -> list[int]:
    """Get handles of nodes extending outside the canvas."""
    width, height = result.config.size
    return [
        node.index
        for node in result.nodes
        if node.y < -epsilon
        or node.y + node.dy > height + epsilon
        or node.x < -epsilon
        or node.x + node.dx > width + epsilon
    ]


def layout_quality_summary(result: LayoutResult) -> dict[str, Any]:
    """
    Compute all quality metrics for a layout.

    Returns:
        Dictionary with node/link counts and each metric
    """
    return {
        "node_count": len(result.nodes),
        "link_count": len(result.links),
        "stage_count": result.stage_count,
        "column_overlaps": len(column_overlaps(result)),
        "port_tiling_error": port_tiling_error(result),
        "link_crossings": link_crossings(result),
        "out_of_bounds": len(out_of_bounds(result)),
    }


def _band_ends(result: LayoutResult, link: LinkLayout) -> tuple[float, float]:
    """Center of a band at its source and target ends."""
    source = result.nodes[link.source]
    target = result.nodes[link.target]
    return (source.y + link.sy + link.dy / 2, target.y + link.ty + link.dy / 2)


__all__ = [
    "column_overlaps",
    "port_tiling_error",
    "link_crossings",
    "out_of_bounds",
    "layout_quality_summary",
]
