"""
sankey-layout: Sankey flow-diagram layout in Python.

Computes, for a directed graph of nodes and weighted links, a column and a
vertical band for every node and a thickness and endpoint offsets for every
link, plus Bezier curve geometry for drawing the links.

Entry points:
- compute_layout: Functional pipeline returning a LayoutResult
- refresh_ports: Recompute link offsets after manual node edits
- curve_for: Bezier path of one link
- SankeyLayout: Object-oriented facade with events and property accessors
"""

__version__ = "0.1.0"

# Shared types
# Base class for layout facades
from .base import BaseLayout
from .config import SankeyConfig

# Link curves
from .curves import LinkPath, curve_for

# Layout engine
from .engine import (
    DepthSolver,
    GraphStructureWarning,
    LayoutWarning,
    compute_layout,
    refresh_ports,
)
from .layout import SankeyLayout

# Metrics for layout quality evaluation
from .metrics import (
    column_overlaps,
    layout_quality_summary,
    link_crossings,
    out_of_bounds,
    port_tiling_error,
)

# Preprocessing utilities
from .preprocessing import detect_cycle, has_cycle
from .types import (
    Event,
    EventType,
    LayoutResult,
    LinkLayout,
    LinkLike,
    NodeLayout,
    NodeLike,
    SankeyLink,
    SankeyNode,
    SizeType,
)

# Validation utilities
from .validation import (
    EmptyGraphError,
    InvalidCanvasSizeError,
    InvalidConfigError,
    InvalidReferenceError,
    InvalidValueError,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "SankeyNode",
    "SankeyLink",
    "NodeLayout",
    "LinkLayout",
    "LayoutResult",
    "EventType",
    "Event",
    # Type aliases for API
    "NodeLike",
    "LinkLike",
    "SizeType",
    # Configuration
    "SankeyConfig",
    # Layout
    "compute_layout",
    "refresh_ports",
    "DepthSolver",
    "BaseLayout",
    "SankeyLayout",
    # Curves
    "LinkPath",
    "curve_for",
    # Metrics
    "column_overlaps",
    "port_tiling_error",
    "link_crossings",
    "out_of_bounds",
    "layout_quality_summary",
    # Preprocessing
    "detect_cycle",
    "has_cycle",
    # Warnings
    "GraphStructureWarning",
    "LayoutWarning",
    # Validation
    "ValidationError",
    "InvalidCanvasSizeError",
    "InvalidConfigError",
    "InvalidReferenceError",
    "InvalidValueError",
    "EmptyGraphError",
]
