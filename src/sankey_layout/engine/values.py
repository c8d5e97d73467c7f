"""
Node value assignment.
"""

from __future__ import annotations

from typing import Iterable

from ..types import LayoutResult, LinkLayout


def value_sum(links: Iterable[LinkLayout]) -> float:
    """Add up link values left to right."""
    total = 0.0
    for link in links:
        total += link.value
    return total


def compute_node_values(result: LayoutResult) -> None:
    """
    Set each node's value to the larger of its outgoing and incoming flow.

    Flow need not be conserved through a node; its height only has to host
    whichever side carries more.
    """
    links = result.links
    for node in result.nodes:
        node.value = max(
            value_sum(links[i] for i in node.source_links),
            value_sum(links[i] for i in node.target_links),
        )


__all__ = ["compute_node_values", "value_sum"]
