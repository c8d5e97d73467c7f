"""
Sankey diagram layout.

Object-oriented facade over the layout pipeline in ``sankey_layout.engine``.
Options are held in an immutable SankeyConfig; property setters validate the
new value and swap in a fresh config.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Union

from .base import BaseLayout
from .config import SankeyConfig
from .curves import LinkPath, curve_for
from .engine import DEFAULT_ITERATIONS, compute_layout, refresh_ports
from .types import (
    Event,
    EventType,
    LayoutResult,
    LinkLayout,
    LinkLike,
    NodeLike,
    SizeType,
)
from .validation import validate_curvature, validate_iterations


class SankeyLayout(BaseLayout):
    """
    Sankey flow-diagram layout.

    Nodes are placed in columns by longest incoming path, sized by the flow
    they carry, and relaxed vertically toward the nodes they exchange flow
    with. Links get a thickness and an offset at each end.

    Example:
        layout = SankeyLayout(
            nodes=[{"name": "coal"}, {"name": "power"}, {"name": "homes"}],
            links=[
                {"source": 0, "target": 1, "value": 40},
                {"source": 1, "target": 2, "value": 25},
            ],
            size=(800, 600),
        )
        layout.run()

        for node in layout.result.nodes:
            print(node.x, node.y, node.dy)
        for link in layout.result.links:
            print(layout.link_path(link).to_svg_path())
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        links: Optional[Sequence[LinkLike]] = None,
        size: SizeType = (960.0, 500.0),
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        # Sankey-specific parameters
        node_width: float = 24.0,
        node_padding: float = 8.0,
        sinks_right: bool = True,
        sources_right: bool = False,
        curvature: float = 0.5,
        iterations: int = DEFAULT_ITERATIONS,
    ) -> None:
        """
        Initialize Sankey layout.

        Args:
            nodes: List of nodes
            links: List of links with source, target and value
            size: Canvas size as (width, height)
            on_start: Callback for start event
            on_tick: Callback for tick event, fired once per relaxation round
            on_end: Callback for end event
            node_width: Width of every node column.
            node_padding: Minimum vertical gap between nodes in a column.
            sinks_right: Move nodes without outgoing links to the last column.
            sources_right: Move nodes without incoming links next to their
                nearest target.
            curvature: Default link curvature in [0, 1].
            iterations: Number of relaxation rounds.
        """
        super().__init__(
            nodes=nodes,
            links=links,
            size=size,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )

        self._config = SankeyConfig(
            node_width=node_width,
            node_padding=node_padding,
            size=self._canvas_size,
            sinks_right=sinks_right,
            sources_right=sources_right,
        )
        self._curvature: float = validate_curvature(curvature)
        self._iterations: int = validate_iterations(iterations)
        self._result: Optional[LayoutResult] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> SankeyConfig:
        """Get the current immutable configuration."""
        return self._config

    @property
    def size(self) -> tuple[float, float]:
        """Get canvas size as (width, height)."""
        return self._canvas_size

    @size.setter
    def size(self, value: SizeType) -> None:
        """Set canvas size; node_width must still fit."""
        self._config = self._config.replace(size=value)
        self._canvas_size = self._config.size

    @property
    def node_width(self) -> float:
        """Get node column width."""
        return self._config.node_width

    @node_width.setter
    def node_width(self, value: float) -> None:
        """Set node column width."""
        self._config = self._config.replace(node_width=value)

    @property
    def node_padding(self) -> float:
        """Get vertical padding between nodes."""
        return self._config.node_padding

    @node_padding.setter
    def node_padding(self, value: float) -> None:
        """Set vertical padding between nodes."""
        self._config = self._config.replace(node_padding=value)

    @property
    def sinks_right(self) -> bool:
        """Get whether sinks are moved to the last column."""
        return self._config.sinks_right

    @sinks_right.setter
    def sinks_right(self, value: bool) -> None:
        """Set whether sinks are moved to the last column."""
        self._config = self._config.replace(sinks_right=value)

    @property
    def sources_right(self) -> bool:
        """Get whether sources are moved next to their targets."""
        return self._config.sources_right

    @sources_right.setter
    def sources_right(self, value: bool) -> None:
        """Set whether sources are moved next to their targets."""
        self._config = self._config.replace(sources_right=value)

    @property
    def curvature(self) -> float:
        """Get default link curvature."""
        return self._curvature

    @curvature.setter
    def curvature(self, value: float) -> None:
        """Set default link curvature (0 to 1)."""
        self._curvature = validate_curvature(value)

    @property
    def iterations(self) -> int:
        """Get number of relaxation rounds."""
        return self._iterations

    @iterations.setter
    def iterations(self, value: int) -> None:
        """Set number of relaxation rounds (minimum 0)."""
        self._iterations = validate_iterations(value)

    @property
    def result(self) -> LayoutResult:
        """
        Get the result of the last run().

        Raises:
            RuntimeError: If run() has not been called
        """
        if self._result is None:
            raise RuntimeError("Layout has not been run yet; call run() first")
        return self._result

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def run(self, **kwargs: Any) -> SankeyLayout:
        """
        Run the full layout.

        Args:
            iterations: Override the configured number of relaxation rounds

        Returns:
            self (for chaining)
        """
        iterations = validate_iterations(kwargs.get("iterations", self._iterations))
        self.validate()

        self.trigger({"type": EventType.start, "alpha": 1.0})
        ticks = 0

        def tick(alpha: float) -> None:
            nonlocal ticks
            ticks += 1
            self.trigger({"type": EventType.tick, "alpha": alpha, "iteration": ticks})

        self._result = compute_layout(
            self._nodes, self._links, self._config, iterations, on_tick=tick
        )
        self.trigger({"type": EventType.end, "alpha": 0.0})
        return self

    def relayout(self) -> SankeyLayout:
        """
        Recompute link port offsets after node positions were edited by hand.

        Returns:
            self (for chaining)
        """
        refresh_ports(self.result)
        return self

    def link_path(
        self, link: Union[LinkLayout, int], curvature: Optional[float] = None
    ) -> LinkPath:
        """
        Get the Bezier path of a link.

        Args:
            link: LinkLayout or link handle from the result
            curvature: Override the default curvature

        Returns:
            LinkPath for drawing
        """
        if curvature is None:
            curvature = self._curvature
        return curve_for(self.result, link, curvature)


__all__ = ["SankeyLayout"]
