"""
All-pairs shortest path distances for the Kamada-Kawai energy model.

Unweighted graphs use a breadth-first search from every vertex, weighted
graphs use Dijkstra's algorithm with a binary heap. The graph is treated as
undirected: self-loops never shorten a path and parallel edges collapse to
their lightest weight.
"""

from __future__ import annotations

import heapq
from collections import deque
from typing import Optional, Sequence, cast

import numpy as np

from .types import EdgeList

DISCONNECTED_FACTOR = 1.5


def _adjacency(n: int, edges: EdgeList) -> list[list[int]]:
    adj: list[list[int]] = [[] for _ in range(n)]
    for u, v in edges:
        if u == v:
            continue
        adj[u].append(v)
        adj[v].append(u)
    return adj


def _weighted_adjacency(
    n: int, edges: EdgeList, weights: Sequence[float]
) -> list[dict[int, float]]:
    """Build adjacency maps keeping only the lightest of parallel edges."""
    adj: list[dict[int, float]] = [{} for _ in range(n)]
    for (u, v), w in zip(edges, weights):
        if u == v:
            continue
        w = float(w)
        if w < adj[u].get(v, float("inf")):
            adj[u][v] = w
            adj[v][u] = w
    return adj


def bfs_distances(n: int, edges: EdgeList) -> np.ndarray:
    """
    Compute hop-count distances from every vertex using BFS.

    Returns:
        (n, n) matrix with inf for unreachable pairs
    """
    dist = np.full((n, n), float("inf"))
    adj = _adjacency(n, edges)

    for start in range(n):
        row = dist[start]
        row[start] = 0
        queue = deque([start])
        while queue:
            curr = queue.popleft()
            for neighbor in adj[curr]:
                if row[neighbor] == float("inf"):
                    row[neighbor] = row[curr] + 1
                    queue.append(neighbor)

    return dist


def dijkstra_distances(n: int, edges: EdgeList, weights: Sequence[float]) -> np.ndarray:
    """
    Compute weighted shortest path distances from every vertex.

    Args:
        n: Number of vertices
        edges: (u, v) pairs
        weights: Positive weight per edge

    Returns:
        (n, n) matrix with inf for unreachable pairs
    """
    dist = np.full((n, n), float("inf"))
    adj = _weighted_adjacency(n, edges, weights)

    for start in range(n):
        row = dist[start]
        row[start] = 0.0
        heap: list[tuple[float, int]] = [(0.0, start)]
        while heap:
            d, u = heapq.heappop(heap)
            if d > row[u]:
                continue
            for v, w in adj[u].items():
                nd = d + w
                if nd < row[v]:
                    row[v] = nd
                    heapq.heappush(heap, (nd, v))

    # Paths are summed in different orders from each end; keep the matrix exactly symmetric.
    return cast(np.ndarray, np.minimum(dist, dist.T))


def shortest_paths(
    n: int, edges: EdgeList, weights: Optional[Sequence[float]] = None
) -> np.ndarray:
    """
    Compute all-pairs shortest path distances.

    Args:
        n: Number of vertices
        edges: (u, v) pairs
        weights: Optional positive weight per edge; None means every edge has length 1

    Returns:
        (n, n) symmetric matrix, zero diagonal, inf for unreachable pairs
    """
    if weights is None:
        return bfs_distances(n, edges)
    return dijkstra_distances(n, edges, weights)


def disconnected_sentinel(dist: np.ndarray, override: Optional[float] = None) -> float:
    """
    Choose the finite distance used between vertices in different components.

    Args:
        dist: Shortest path matrix that may contain inf
        override: Explicit distance to use instead of the default

    Returns:
        `override` if given, otherwise 1.5 times the largest finite distance,
        or 1.0 when no two distinct vertices are connected.
    """
    if override is not None:
        return float(override)
    finite = dist[np.isfinite(dist)]
    max_dist = float(finite.max()) if finite.size else 0.0
    if max_dist > 0:
        return max_dist * DISCONNECTED_FACTOR
    return 1.0


def distance_matrix(
    n: int,
    edges: EdgeList,
    weights: Optional[Sequence[float]] = None,
    disconnected_distance: Optional[float] = None,
) -> np.ndarray:
    """
    Compute the finite graph distance matrix used by the energy model.

    Unreachable pairs get the sentinel from :func:`disconnected_sentinel`.

    Example:
        >>> distance_matrix(3, [(0, 1)])[0].tolist()
        [0.0, 1.0, 1.5]
    """
    if n == 0:
        return np.zeros((0, 0))
    dist = shortest_paths(n, edges, weights)
    sentinel = disconnected_sentinel(dist, disconnected_distance)
    return cast(np.ndarray, np.where(np.isinf(dist), sentinel, dist))


__all__ = [
    "DISCONNECTED_FACTOR",
    "bfs_distances",
    "dijkstra_distances",
    "shortest_paths",
    "disconnected_sentinel",
    "distance_matrix",
]
