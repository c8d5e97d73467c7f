"""
Graph preprocessing utilities.

Cycle detection over (source, target) index pairs. The layout engine uses
it to warn when stage assignment is traversal-dependent.
"""

from __future__ import annotations

from typing import Iterable, Optional


def detect_cycle(n: int, edges: Iterable[tuple[int, int]]) -> Optional[list[int]]:
    """
    Detect if a directed graph contains a cycle.

    Uses iterative DFS-based cycle detection. Returns the first cycle found,
    or None if the graph is acyclic.

    Args:
        n: Number of nodes
        edges: Directed (source, target) index pairs

    Returns:
        List of node indices forming a cycle (first node repeated at the
        end), or None if acyclic.

    Example:
        >>> detect_cycle(3, [(0, 1), (1, 2), (2, 0)])
        [0, 1, 2, 0]
    """
    adj: list[list[int]] = [[] for _ in range(n)]
    for src, tgt in edges:
        if 0 <= src < n and 0 <= tgt < n:
            adj[src].append(tgt)

    # DFS states: 0=unvisited, 1=visiting, 2=visited
    state = [0] * n

    for start in range(n):
        if state[start] != 0:
            continue

        path: list[int] = [start]
        cursors: list[int] = [0]
        state[start] = 1

        while path:
            node = path[-1]
            if cursors[-1] < len(adj[node]):
                neighbor = adj[node][cursors[-1]]
                cursors[-1] += 1
                if state[neighbor] == 1:
                    # Found cycle - extract it
                    return path[path.index(neighbor) :] + [neighbor]
                if state[neighbor] == 0:
                    state[neighbor] = 1
                    path.append(neighbor)
                    cursors.append(0)
            else:
                state[node] = 2
                path.pop()
                cursors.pop()

    return None


def has_cycle(n: int, edges: Iterable[tuple[int, int]]) -> bool:
    """
    Check if a directed graph contains any cycle.

    Self-loops count as cycles.
    """
    return detect_cycle(n, edges) is not None


__all__ = ["detect_cycle", "has_cycle"]
