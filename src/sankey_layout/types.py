"""
Common types for the Sankey layout engine.

This module provides the fundamental types shared by every pipeline stage:
- SankeyNode / SankeyLink: Convenience input types (dicts and plain objects work too)
- NodeLayout / LinkLayout: Derived geometry, stored in an index-addressed arena
- LayoutResult: The arena returned by a layout run
- EventType / Event: Layout lifecycle events
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, TypedDict, Union

import numpy as np

if TYPE_CHECKING:
    from .config import SankeyConfig


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout has begun
    - tick: Fired once per relaxation round
    - end: Layout is complete
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    alpha: float
    iteration: int


class SankeyNode:
    """
    Input node.

    Layout fields are derived, so a node carries nothing required. Any
    keyword arguments (name, color, ...) are kept as attributes for the
    caller's drawing layer.
    """

    def __init__(self, **kwargs: Any) -> None:
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        return f"SankeyNode(name={name!r})" if name is not None else "SankeyNode()"


class SankeyLink:
    """
    Input link carrying a flow between two nodes.

    Attributes:
        source: Source node index, or the source node object itself
        target: Target node index, or the target node object itself
        value: Non-negative flow magnitude
    """

    def __init__(
        self,
        source: Any,
        target: Any,
        value: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize link between two nodes.

        Raises:
            ValueError: If source or target is None
        """
        if source is None:
            raise ValueError("Link source cannot be None")
        if target is None:
            raise ValueError("Link target cannot be None")

        self.source = source
        self.target = target
        self.value = value

        for key, val in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, val)

    def __repr__(self) -> str:
        return f"SankeyLink({self.source!r} -> {self.target!r}, value={self.value})"


@dataclass
class NodeLayout:
    """
    Derived geometry for one node.

    Attributes:
        index: Position of the node in the input collection (its handle)
        value: max(total outgoing value, total incoming value)
        stage: Discrete column index
        x: Left edge in pixels
        dx: Column width in pixels
        y: Top edge in pixels
        dy: Height in pixels, proportional to value
        source_links: Outgoing link handles, ordered top to bottom
        target_links: Incoming link handles, ordered top to bottom
    """

    index: int
    value: float = 0.0
    stage: int = 0
    x: float = 0.0
    dx: float = 0.0
    y: float = 0.0
    dy: float = 0.0
    source_links: list[int] = field(default_factory=list)
    target_links: list[int] = field(default_factory=list)

    @property
    def center(self) -> float:
        """Vertical center of the node."""
        return self.y + self.dy / 2


@dataclass
class LinkLayout:
    """
    Derived geometry for one link.

    Attributes:
        index: Position of the link in the input collection (its handle)
        source: Source node handle
        target: Target node handle
        value: Flow magnitude
        dy: Band thickness in pixels
        sy: Band offset below the source node's top edge
        ty: Band offset below the target node's top edge
    """

    index: int
    source: int
    target: int
    value: float
    dy: float = 0.0
    sy: float = 0.0
    ty: float = 0.0


@dataclass
class LayoutResult:
    """
    Arena holding the derived geometry of one layout run.

    Nodes and links refer to each other by index; the caller's input
    collections are never modified.
    """

    nodes: list[NodeLayout]
    links: list[LinkLayout]
    config: SankeyConfig
    stage_count: int = 0

    def source_of(self, link: Union[LinkLayout, int]) -> NodeLayout:
        """Get the source node of a link."""
        if isinstance(link, int):
            link = self.links[link]
        return self.nodes[link.source]

    def target_of(self, link: Union[LinkLayout, int]) -> NodeLayout:
        """Get the target node of a link."""
        if isinstance(link, int):
            link = self.links[link]
        return self.nodes[link.target]

    def columns(self) -> list[list[NodeLayout]]:
        """Group nodes by stage, leftmost column first, index order within."""
        by_stage: dict[int, list[NodeLayout]] = {}
        for node in self.nodes:
            by_stage.setdefault(node.stage, []).append(node)
        return [by_stage[stage] for stage in sorted(by_stage)]

    def node_rects(self) -> np.ndarray:
        """
        Get node rectangles as an array.

        Returns:
            Array of shape (n, 4) with columns x, y, dx, dy
        """
        return np.array(
            [[node.x, node.y, node.dx, node.dy] for node in self.nodes],
            dtype=np.float64,
        ).reshape(len(self.nodes), 4)


# Type aliases for callbacks
TickCallback = Callable[[float], None]


# Type aliases for Pythonic API
# These allow flexible input types while maintaining type safety
NodeLike = Union[SankeyNode, dict[str, Any], Any]
"""Input type for nodes: SankeyNode objects, dicts, or arbitrary objects."""

LinkLike = Union[SankeyLink, dict[str, Any], Any]
"""Input type for links: SankeyLink objects, dicts, or objects with source/target/value."""

SizeType = Union[tuple[float, float], list[float], Sequence[float]]
"""Canvas size: (width, height) tuple, list, or sequence."""


__all__ = [
    "EventType",
    "Event",
    "SankeyNode",
    "SankeyLink",
    "NodeLayout",
    "LinkLayout",
    "LayoutResult",
    "TickCallback",
    # Pythonic API type aliases
    "NodeLike",
    "LinkLike",
    "SizeType",
]
