"""
Input validation utilities for the Sankey layout engine.

Provides centralized validation functions for nodes, links, canvas size,
and other layout parameters. Raises descriptive exceptions on invalid input.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Optional, Sequence


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidCanvasSizeError(ValidationError):
    """Raised when canvas dimensions are invalid."""

    pass


class InvalidConfigError(ValidationError):
    """Raised when a layout option is out of range."""

    pass


class InvalidReferenceError(ValidationError):
    """Raised when a link endpoint does not resolve to a node."""

    pass


class InvalidValueError(ValidationError):
    """Raised when a link or node value is missing, negative or not finite."""

    pass


class EmptyGraphError(ValidationError):
    """Raised when a layout is requested for a graph without nodes."""

    pass


def validate_canvas_size(size: Sequence[float]) -> tuple[float, float]:
    """
    Validate canvas size dimensions.

    Args:
        size: [width, height] sequence

    Returns:
        Validated (width, height) tuple

    Raises:
        InvalidCanvasSizeError: If dimensions are invalid
    """
    if len(size) < 2:
        raise InvalidCanvasSizeError(
            f"Canvas size must have 2 elements [width, height], got {len(size)}"
        )

    width, height = float(size[0]), float(size[1])

    if not width > 0:
        raise InvalidCanvasSizeError(f"Canvas width must be positive, got {width}")
    if not height > 0:
        raise InvalidCanvasSizeError(f"Canvas height must be positive, got {height}")

    return width, height


def validate_node_width(node_width: float, canvas_width: float) -> float:
    """
    Validate the fixed column width against the canvas width.

    Raises:
        InvalidConfigError: If node_width is negative or wider than the canvas
    """
    node_width = float(node_width)
    if not 0 <= node_width <= canvas_width:
        raise InvalidConfigError(
            f"node_width must be in [0, {canvas_width}], got {node_width}"
        )
    return node_width


def validate_node_padding(node_padding: float) -> float:
    """Validate vertical padding between nodes is non-negative."""
    node_padding = float(node_padding)
    if not node_padding >= 0:
        raise InvalidConfigError(f"node_padding must be >= 0, got {node_padding}")
    return node_padding


def validate_iterations(iterations: int) -> int:
    """
    Validate relaxation iteration count.

    Zero is allowed: the layout is then initialized and de-overlapped
    without any relaxation rounds.

    Args:
        iterations: Number of iterations

    Returns:
        Validated iteration count

    Raises:
        ValidationError: If iterations < 0
    """
    if iterations < 0:
        raise ValidationError(f"iterations must be >= 0, got {iterations}")
    return int(iterations)


def validate_curvature(curvature: float) -> float:
    """
    Validate link curvature is in valid range.

    Args:
        curvature: Curvature value

    Returns:
        Validated curvature value

    Raises:
        ValidationError: If curvature not in [0, 1]
    """
    curvature = float(curvature)
    if not 0 <= curvature <= 1:
        raise ValidationError(f"curvature must be in [0, 1], got {curvature}")
    return curvature


def validate_not_empty(nodes: Sequence[Any]) -> None:
    """Raise EmptyGraphError if there are no nodes to lay out."""
    if len(nodes) == 0:
        raise EmptyGraphError("Cannot lay out a graph with no nodes")


def is_index(ref: Any) -> bool:
    """Whether an endpoint is an integer index (numpy integers included, bools not)."""
    return isinstance(ref, numbers.Integral) and not isinstance(ref, bool)


def endpoint_index(ref: Any, node_ids: dict[int, int], node_count: int) -> Optional[int]:
    """
    Resolve a link endpoint to a node index.

    Args:
        ref: Integer index into the node collection, or a node object
        node_ids: Map of ``id(node)`` to index for the input node collection
        node_count: Number of nodes

    Returns:
        Node index, or None if the endpoint does not resolve
    """
    if is_index(ref):
        index = int(ref)
        return index if 0 <= index < node_count else None
    return node_ids.get(id(ref))


def validate_link_references(
    links: Sequence[Any],
    nodes: Sequence[Any],
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that all link endpoints resolve to nodes.

    Args:
        links: Sequence of link objects or dicts with source/target
        nodes: The node collection the links refer to
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (link_index, issue_description) tuples

    Raises:
        InvalidReferenceError: If strict=True and invalid links found
    """
    issues: list[tuple[int, str]] = []
    node_ids = {id(node): i for i, node in enumerate(nodes)}
    node_count = len(nodes)

    for i, link in enumerate(links):
        for attr in ("source", "target"):
            ref = get_field(link, attr)
            if ref is None:
                issues.append((i, f"Link {i}: {attr} is None"))
            elif endpoint_index(ref, node_ids, node_count) is None:
                if is_index(ref):
                    issues.append(
                        (i, f"Link {i}: {attr} index {ref} out of bounds [0, {node_count})")
                    )
                else:
                    issues.append((i, f"Link {i}: {attr} {ref!r} is not a node of this graph"))

    if strict and issues:
        msg = "Invalid link references:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidReferenceError(msg)

    return issues


def validate_values(
    links: Sequence[Any],
    nodes: Sequence[Any] = (),
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate link values (required) and node values (optional).

    Node values are recomputed by the layout, but a supplied negative or
    non-finite one still marks the input as malformed.

    Raises:
        InvalidValueError: If strict=True and invalid values found
    """
    issues: list[tuple[int, str]] = []

    for i, link in enumerate(links):
        problem = _value_problem(get_field(link, "value"), required=True)
        if problem:
            issues.append((i, f"Link {i}: value {problem}"))

    for i, node in enumerate(nodes):
        problem = _value_problem(get_field(node, "value"), required=False)
        if problem:
            issues.append((i, f"Node {i}: value {problem}"))

    if strict and issues:
        msg = "Invalid values:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidValueError(msg)

    return issues


def get_field(obj: Any, attr: str) -> Any:
    """Read a field from a dict or an attribute from an object."""
    if isinstance(obj, dict):
        return obj.get(attr)
    return getattr(obj, attr, None)


def _value_problem(value: Any, required: bool) -> Optional[str]:
    if value is None:
        return "is missing" if required else None
    if isinstance(value, bool):
        return f"{value!r} is not a number"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return f"{value!r} is not a number"
    if not math.isfinite(number):
        return f"{number} is not finite"
    if number < 0:
        return f"{number} is negative"
    return None


__all__ = [
    "ValidationError",
    "InvalidCanvasSizeError",
    "InvalidConfigError",
    "InvalidReferenceError",
    "InvalidValueError",
    "EmptyGraphError",
    "validate_canvas_size",
    "validate_node_width",
    "validate_node_padding",
    "validate_iterations",
    "validate_curvature",
    "validate_not_empty",
    "validate_link_references",
    "validate_values",
    "endpoint_index",
    "get_field",
]
