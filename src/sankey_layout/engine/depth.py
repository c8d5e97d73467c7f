"""
Depth (vertical position and height) assignment.

The solver runs in three phases:
1. Initialization: a global vertical scale is chosen so the fullest column
   fits the canvas, nodes are stacked in input order and de-overlapped.
2. Relaxation: alternating right-to-left and left-to-right sweeps pull
   each node toward the value-weighted center of its neighbours' ports,
   with a damping factor that decays every round.
3. Collision resolution: after every sweep, nodes in each column are
   pushed apart by at least the node padding and back inside the canvas.

Ports are reassigned after every collision pass so the next sweep sees the
current band order.
"""

from __future__ import annotations

import warnings
from typing import Optional

from ..config import SankeyConfig
from ..types import LayoutResult, LinkLayout, NodeLayout, TickCallback
from .ports import compute_link_depths
from .values import value_sum

ALPHA_DECAY = 0.99


class LayoutWarning(UserWarning):
    """Warning issued when the canvas cannot fit the requested layout."""

    pass


class DepthSolver:
    """
    Iterative vertical layout of a linked, breadth-assigned arena.

    Example:
        solver = DepthSolver(result, config)
        solver.solve(iterations=32)
    """

    def __init__(self, result: LayoutResult, config: SankeyConfig) -> None:
        self._result = result
        self._config = config
        self._columns: list[list[int]] = [
            [node.index for node in column] for column in result.columns()
        ]
        self._alpha: float = 1.0

    @property
    def columns(self) -> list[list[int]]:
        """Node handles per column, leftmost first, in current depth order."""
        return self._columns

    @property
    def alpha(self) -> float:
        """Damping applied in the most recent relaxation round."""
        return self._alpha

    # -------------------------------------------------------------------------
    # Driver
    # -------------------------------------------------------------------------

    def solve(
        self,
        iterations: int,
        on_tick: Optional[TickCallback] = None,
        *,
        stacklevel: int = 2,
    ) -> None:
        """
        Run initialization followed by ``iterations`` relaxation rounds.

        Args:
            iterations: Number of relaxation rounds (0 runs initialization only)
            on_tick: Called with the round's alpha after each round
            stacklevel: Frame that warnings are attributed to, counted from
                this method as in warnings.warn
        """
        self._alpha = 1.0
        self.initialize(stacklevel=stacklevel + 1)
        self.resolve_collisions()
        compute_link_depths(self._result)

        for _ in range(iterations):
            # Make each round of moves progressively weaker
            self._alpha *= ALPHA_DECAY

            self.relax_right_to_left(self._alpha)
            self.resolve_collisions()
            compute_link_depths(self._result)

            self.relax_left_to_right(self._alpha)
            self.resolve_collisions()
            compute_link_depths(self._result)

            if on_tick is not None:
                on_tick(self._alpha)

    # -------------------------------------------------------------------------
    # Phase 1: Initialization
    # -------------------------------------------------------------------------

    def initialize(self, *, stacklevel: int = 2) -> float:
        """
        Seed node depths and derive heights from the vertical scale.

        Returns:
            The vertical scale ky (pixels per unit of value)
        """
        nodes = self._result.nodes
        ky = self._vertical_scale(stacklevel + 1)

        for column in self._columns:
            for position, index in enumerate(column):
                node = nodes[index]
                node.y = float(position)
                node.dy = node.value * ky

        for link in self._result.links:
            link.dy = link.value * ky

        return ky

    def _vertical_scale(self, stacklevel: int) -> float:
        height = self._config.height
        padding = self._config.node_padding
        nodes = self._result.nodes

        ky: Optional[float] = None
        for column in self._columns:
            total = 0.0
            for index in column:
                total += nodes[index].value
            # Columns with no flow place no constraint on the scale
            if total <= 0:
                continue
            candidate = (height - (len(column) - 1) * padding) / total
            if ky is None or candidate < ky:
                ky = candidate

        if ky is None:
            return 0.0
        if ky < 0:
            warnings.warn(
                f"Node padding {padding} leaves no room for nodes within canvas height "
                f"{height}; all node heights are set to 0.",
                LayoutWarning,
                stacklevel=stacklevel,
            )
            return 0.0
        return ky

    # -------------------------------------------------------------------------
    # Phase 2: Relaxation
    # -------------------------------------------------------------------------

    def relax_left_to_right(self, alpha: float) -> None:
        """Move nodes toward the weighted center of their incoming bands."""
        nodes = self._result.nodes
        links = self._result.links
        for column in self._columns:
            for index in column:
                node = nodes[index]
                if node.target_links:
                    _relax_node(node, _weighted_source_center(node, nodes, links), alpha)

    def relax_right_to_left(self, alpha: float) -> None:
        """Move nodes toward the weighted center of their outgoing bands."""
        nodes = self._result.nodes
        links = self._result.links
        for column in reversed(self._columns):
            for index in column:
                node = nodes[index]
                if node.source_links:
                    _relax_node(node, _weighted_target_center(node, nodes, links), alpha)

    # -------------------------------------------------------------------------
    # Phase 3: Collision Resolution
    # -------------------------------------------------------------------------

    def resolve_collisions(self) -> None:
        """De-overlap every column and keep it inside the canvas height."""
        for column in self._columns:
            _resolve_column(
                column,
                self._result.nodes,
                self._config.node_padding,
                self._config.height,
            )


def _relax_node(node: NodeLayout, center: Optional[float], alpha: float) -> None:
    if center is not None:
        node.y += (center - node.center) * alpha


def _weighted_target_center(
    node: NodeLayout, nodes: list[NodeLayout], links: list[LinkLayout]
) -> Optional[float]:
    """Value-weighted mean of the band centers at this node's targets."""
    outgoing = [links[i] for i in node.source_links]
    weight = value_sum(outgoing)
    if weight <= 0:
        return None
    total = 0.0
    for link in outgoing:
        total += (nodes[link.target].y + link.ty + link.dy / 2) * link.value
    return total / weight


def _weighted_source_center(
    node: NodeLayout, nodes: list[NodeLayout], links: list[LinkLayout]
) -> Optional[float]:
    """Value-weighted mean of the band centers at this node's sources."""
    incoming = [links[i] for i in node.target_links]
    weight = value_sum(incoming)
    if weight <= 0:
        return None
    total = 0.0
    for link in incoming:
        total += (nodes[link.source].y + link.sy + link.dy / 2) * link.value
    return total / weight


def _resolve_column(
    column: list[int], nodes: list[NodeLayout], padding: float, height: float
) -> None:
    """
    Push overlapping nodes apart within one column.

    The column is stably sorted by depth in place. A top-down sweep pushes
    nodes down; if the last node then overflows the canvas, a bottom-up
    sweep pushes nodes back up.
    """
    if not column:
        return

    column.sort(key=lambda i: nodes[i].y)

    y0 = 0.0
    for index in column:
        node = nodes[index]
        dy = y0 - node.y
        if dy > 0:
            node.y += dy
        y0 = node.y + node.dy + padding

    dy = y0 - padding - height
    if dy > 0:
        node = nodes[column[-1]]
        node.y -= dy
        y0 = node.y

        for index in reversed(column[:-1]):
            node = nodes[index]
            dy = node.y + node.dy + padding - y0
            if dy > 0:
                node.y -= dy
            y0 = node.y


__all__ = ["DepthSolver", "LayoutWarning", "ALPHA_DECAY"]
