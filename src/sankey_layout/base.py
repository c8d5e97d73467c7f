"""
Base class for object-oriented layout facades.

BaseLayout provides the shared infrastructure:
- Node/link management via properties, accepting objects or dicts
- Canvas size management
- Event system (start/tick/end events)
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

if TYPE_CHECKING:
    from typing_extensions import Self

from .types import (
    Event,
    EventType,
    LinkLike,
    NodeLike,
    SankeyLink,
    SankeyNode,
    SizeType,
)
from .validation import (
    get_field,
    is_index,
    validate_canvas_size,
    validate_link_references,
    validate_not_empty,
    validate_values,
)


class BaseLayout(ABC):
    """
    Abstract base class for layout facades.

    Nodes given as dicts are converted to SankeyNode objects, and links to
    SankeyLink objects. Link endpoints that name an input node object are
    rewritten to that node's index, so they keep resolving after conversion.
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        links: Optional[Sequence[LinkLike]] = None,
        size: SizeType = (1.0, 1.0),
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize layout with configuration.

        Args:
            nodes: List of nodes (SankeyNode objects, dicts, or objects)
            links: List of links (SankeyLink objects, dicts, or objects)
            size: Canvas size as (width, height)
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        self._nodes: list[Any] = []
        self._raw_nodes: list[Any] = []
        self._raw_node_ids: dict[int, int] = {}
        self._links: list[SankeyLink] = []
        self._canvas_size: tuple[float, float] = validate_canvas_size(size)
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}

        if nodes is not None:
            self.nodes = nodes
        if links is not None:
            self.links = links

        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> list[Any]:
        """Get the list of nodes."""
        return self._nodes

    @nodes.setter
    def nodes(self, value: Sequence[NodeLike]) -> None:
        """Set nodes from a sequence of SankeyNode objects, dicts, or objects."""
        self._nodes = []
        # raw inputs are kept alive so their ids stay unique
        self._raw_nodes = list(value)
        self._raw_node_ids = {}
        for i, node_data in enumerate(self._raw_nodes):
            self._raw_node_ids[id(node_data)] = i
            if isinstance(node_data, dict):
                self._nodes.append(SankeyNode(**node_data))
            else:
                self._nodes.append(node_data)

    @property
    def links(self) -> list[SankeyLink]:
        """Get the list of links."""
        return self._links

    @links.setter
    def links(self, value: Sequence[LinkLike]) -> None:
        """Set links from a sequence of SankeyLink objects, dicts, or objects."""
        self._links = []
        for link_data in value:
            if isinstance(link_data, SankeyLink):
                link = copy.copy(link_data)
            elif isinstance(link_data, dict):
                link = SankeyLink(**link_data)
            else:
                link = SankeyLink(
                    get_field(link_data, "source"),
                    get_field(link_data, "target"),
                    get_field(link_data, "value"),
                )
            link.source = self._node_ref(link.source)
            link.target = self._node_ref(link.target)
            self._links.append(link)

    @property
    def size(self) -> tuple[float, float]:
        """Get canvas size as (width, height)."""
        return self._canvas_size

    @size.setter
    def size(self, value: SizeType) -> None:
        """
        Set canvas size.

        Raises:
            InvalidCanvasSizeError: If width or height is not positive.
        """
        self._canvas_size = validate_canvas_size(value)

    def _node_ref(self, ref: Any) -> Any:
        if is_index(ref):
            return int(ref)
        return self._raw_node_ids.get(id(ref), ref)

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """Trigger an event, calling the registered callback."""
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> Self:
        """
        Validate the current graph.

        Called automatically by run() but can be called early for fail-fast
        behavior.

        Returns:
            self (for chaining)

        Raises:
            EmptyGraphError: If there are no nodes.
            InvalidValueError: If any link value is missing or negative.
            InvalidReferenceError: If any link endpoint does not resolve.
        """
        validate_not_empty(self._nodes)
        validate_values(self._links, self._nodes, strict=True)
        validate_link_references(self._links, self._nodes, strict=True)
        return self

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout algorithm.

        Returns:
            self (for chaining)
        """
        pass


__all__ = ["BaseLayout"]
