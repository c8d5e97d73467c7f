"""
Link curve geometry.

Turns a laid-out link into a cubic Bezier running from the source node's
right edge to the target node's left edge. Both control points sit at the
height of their endpoint, so the band leaves and enters horizontally.
Nothing here touches solver state; call it as often as the drawing layer
needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from .types import LayoutResult, LinkLayout
from .validation import validate_curvature

Point = tuple[float, float]


@dataclass(frozen=True)
class LinkPath:
    """
    Cubic Bezier path of one link's center line.

    Attributes:
        start: Point on the source node's right edge
        control1: First control point, level with start
        control2: Second control point, level with end
        end: Point on the target node's left edge
        width: Band thickness (the link's dy)
    """

    start: Point
    control1: Point
    control2: Point
    end: Point
    width: float

    @property
    def points(self) -> tuple[Point, Point, Point, Point]:
        return (self.start, self.control1, self.control2, self.end)

    def to_svg_path(self) -> str:
        """Path data for an SVG ``path`` element's ``d`` attribute."""
        (x0, y0), (x2, _), (x3, _), (x1, y1) = self.points
        return f"M{x0},{y0}C{x2},{y0} {x3},{y1} {x1},{y1}"

    def sample(self, n: int = 32) -> np.ndarray:
        """
        Evaluate the curve at ``n`` evenly spaced parameters.

        Args:
            n: Number of points (at least 2)

        Returns:
            Array of shape (n, 2) from start to end
        """
        if n < 2:
            raise ValueError(f"n must be >= 2, got {n}")
        t = np.linspace(0.0, 1.0, n)[:, np.newaxis]
        p = np.asarray(self.points, dtype=np.float64)
        u = 1.0 - t
        return u**3 * p[0] + 3 * u**2 * t * p[1] + 3 * u * t**2 * p[2] + t**3 * p[3]


def curve_for(
    result: LayoutResult,
    link: Union[LinkLayout, int],
    curvature: float = 0.5,
) -> LinkPath:
    """
    Build the Bezier path for a link.

    Args:
        result: Layout result holding the link's endpoint nodes
        link: LinkLayout or link handle
        curvature: Position of the control points along the horizontal
            span, in [0, 1]; 0.5 gives a symmetric S-curve

    Returns:
        LinkPath for the link's center line

    Raises:
        ValidationError: If curvature is outside [0, 1]
    """
    curvature = validate_curvature(curvature)
    if isinstance(link, int):
        link = result.links[link]
    source = result.nodes[link.source]
    target = result.nodes[link.target]

    x0 = source.x + source.dx
    x1 = target.x
    x2 = _interpolate(x0, x1, curvature)
    x3 = _interpolate(x0, x1, 1 - curvature)
    y0 = source.y + link.sy + link.dy / 2
    y1 = target.y + link.ty + link.dy / 2

    return LinkPath(
        start=(x0, y0),
        control1=(x2, y0),
        control2=(x3, y1),
        end=(x1, y1),
        width=link.dy,
    )


def _interpolate(a: float, b: float, t: float) -> float:
    return a * (1 - t) + b * t


__all__ = ["LinkPath", "curve_for"]
