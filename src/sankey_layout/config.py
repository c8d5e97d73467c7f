"""
Immutable layout configuration.

A SankeyConfig is passed explicitly into every pipeline stage; nothing about
a layout run lives in module or global state.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from .validation import validate_canvas_size, validate_node_padding, validate_node_width


@dataclass(frozen=True)
class SankeyConfig:
    """
    Layout configuration.

    Attributes:
        node_width: Fixed column width of every node, in pixels
        node_padding: Minimum vertical gap between nodes in a column
        size: Canvas size as (width, height)
        sinks_right: Move nodes without outgoing links to the last column
        sources_right: Move nodes without incoming links next to their
            nearest target
    """

    node_width: float = 24.0
    node_padding: float = 8.0
    size: tuple[float, float] = (960.0, 500.0)
    sinks_right: bool = True
    sources_right: bool = False

    def __post_init__(self) -> None:
        size = validate_canvas_size(self.size)
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "size", size)
        object.__setattr__(self, "node_width", validate_node_width(self.node_width, size[0]))
        object.__setattr__(self, "node_padding", validate_node_padding(self.node_padding))
        object.__setattr__(self, "sinks_right", bool(self.sinks_right))
        object.__setattr__(self, "sources_right", bool(self.sources_right))

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    def replace(self, **changes: Any) -> SankeyConfig:
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


__all__ = ["SankeyConfig"]
