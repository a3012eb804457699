"""
Layout quality metrics.

Provides quantitative measures of how well a layout matches its graph:
- Stress: How well Euclidean distances match ideal (graph) distances

Metrics work with (n, 2) coordinate arrays from any layout.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .distances import shortest_paths
from .types import EdgeList, FloatSequence


def stress(
    coords: np.ndarray,
    ideal_distances: Optional[np.ndarray] = None,
    edges: Optional[EdgeList] = None,
    weights: Optional[FloatSequence] = None,
    edge_length: float = 1.0,
) -> float:
    """
    Compute the normalized stress of a layout.

    Stress measures how well actual pairwise distances match ideal distances:
    stress = sum_ij (w_ij * (d_ij - D_ij)^2) / sum_ij (w_ij * D_ij^2)

    where d_ij is actual distance, D_ij is ideal distance,
    w_ij = 1/D_ij^2 (weight). Pairs with zero or infinite ideal distance
    are skipped.

    Args:
        coords: (n, 2) array of positions
        ideal_distances: n x n matrix of ideal distances.
                        If None, computed from shortest paths over `edges`.
        edges: (u, v) pairs (required if ideal_distances not provided)
        weights: Optional edge weights for the shortest paths
        edge_length: Plane length of one unit of graph distance

    Returns:
        Normalized stress value (0 = perfect, higher = worse)
    """
    coords = np.asarray(coords, dtype=float)
    n = coords.shape[0]
    if n < 2:
        return 0.0

    if ideal_distances is None:
        if edges is None:
            raise ValueError("Must provide either ideal_distances or edges")
        ideal = shortest_paths(n, edges, weights) * edge_length
    else:
        ideal = np.asarray(ideal_distances, dtype=float)

    iu = np.triu_indices(n, k=1)
    target = ideal[iu]
    keep = np.isfinite(target) & (target > 0)
    if not np.any(keep):
        return 0.0

    delta = coords[:, None, :] - coords[None, :, :]
    actual = np.sqrt((delta**2).sum(axis=-1))[iu][keep]
    target = target[keep]

    w = 1.0 / (target * target)
    diff = actual - target
    numerator = float(np.sum(w * diff * diff))
    denominator = float(np.sum(w * target * target))

    if denominator == 0:
        return 0.0

    return numerator / denominator


__all__ = ["stress"]
