"""
Spring energy model of the Kamada-Kawai layout.

Every pair of vertices (i, j) is joined by a spring with ideal length
l_ij = L * d_ij and stiffness k_ij = K / d_ij^2, where d_ij is the graph
distance, K the global spring constant ("kkconst") and L the length of a
unit of graph distance in the plane. The energy of a layout is

    E = sum_{i<j} 1/2 * k_ij * (|p_i - p_j| - l_ij)^2

Pairs of coincident vertices contribute nothing to the gradient or the
Hessian, since the direction of their spring is undefined.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, cast

import numpy as np


@dataclass(frozen=True, eq=False)
class SpringModel:
    """
    Per-pair spring constants and ideal lengths.

    Attributes:
        k: (n, n) stiffness matrix with zero diagonal
        l: (n, n) ideal length matrix with zero diagonal
    """

    k: np.ndarray
    l: np.ndarray

    @property
    def n(self) -> int:
        """Number of vertices."""
        return int(self.k.shape[0])

    def _offsets(
        self, coords: np.ndarray, m: int, position: Optional[np.ndarray] = None
    ) -> tuple[np.ndarray, np.ndarray]:
        """Offsets p_m - p_i and their lengths, with vertex m itself at length 0."""
        p = coords[m] if position is None else position
        delta = p - coords
        r = np.hypot(delta[:, 0], delta[:, 1])
        r[m] = 0.0
        return delta, r

    def energy(self, coords: np.ndarray) -> float:
        """Total spring energy of a layout."""
        if self.n < 2:
            return 0.0
        delta = coords[:, None, :] - coords[None, :, :]
        r = np.sqrt((delta**2).sum(axis=-1))
        iu = np.triu_indices(self.n, k=1)
        stretch = r[iu] - self.l[iu]
        return float(0.5 * np.sum(self.k[iu] * stretch * stretch))

    def gradients(self, coords: np.ndarray) -> np.ndarray:
        """
        Partial derivatives of the energy for every vertex.

        Returns:
            (n, 2) array of (dE/dx_m, dE/dy_m)
        """
        delta = coords[:, None, :] - coords[None, :, :]
        r = np.sqrt((delta**2).sum(axis=-1))
        with np.errstate(divide="ignore", invalid="ignore"):
            factor = np.where(r > 0, self.k * (1.0 - self.l / r), 0.0)
        return cast(np.ndarray, np.einsum("mi,mic->mc", factor, delta))

    def gradient(self, coords: np.ndarray, m: int) -> np.ndarray:
        """Partial derivatives (dE/dx_m, dE/dy_m) for a single vertex."""
        delta, r = self._offsets(coords, m)
        mask = r > 0
        factor = np.zeros_like(r)
        factor[mask] = self.k[m, mask] * (1.0 - self.l[m, mask] / r[mask])
        return cast(np.ndarray, factor @ delta)

    def hessian(self, coords: np.ndarray, m: int) -> tuple[float, float, float]:
        """
        Second partial derivatives of the energy for vertex m.

        Returns:
            (A, B, C) = (d2E/dx_m^2, d2E/dx_m dy_m, d2E/dy_m^2)
        """
        delta, r = self._offsets(coords, m)
        mask = r > 0
        dx = delta[mask, 0]
        dy = delta[mask, 1]
        k = self.k[m, mask]
        kl = k * self.l[m, mask]
        r3 = r[mask] ** 3

        a = float(np.sum(k - kl * dy * dy / r3))
        b = float(np.sum(kl * dx * dy / r3))
        c = float(np.sum(k - kl * dx * dx / r3))
        return a, b, c

    def contribution(self, coords: np.ndarray, m: int, position: np.ndarray) -> np.ndarray:
        """
        Gradient terms that vertex m, placed at `position`, adds to every vertex.

        Row i holds the term of the spring (m, i) in dE/dp_i; row m is zero.
        Moving m from a to b changes the gradient of i by
        contribution(b) - contribution(a).
        """
        delta, r = self._offsets(coords, m, position)
        mask = r > 0
        factor = np.zeros_like(r)
        factor[mask] = self.k[m, mask] * (1.0 - self.l[m, mask] / r[mask])
        # delta holds position - p_i; the term for p_i uses p_i - position.
        return cast(np.ndarray, -factor[:, None] * delta)


def unit_length(dist: np.ndarray, edge_length: Optional[float] = None) -> float:
    """
    Length in the plane of one unit of graph distance.

    With no explicit edge length the unit is chosen so that the longest
    ideal length is sqrt(n).
    """
    if edge_length is not None:
        return float(edge_length)
    n = dist.shape[0]
    max_dist = float(dist.max()) if dist.size else 0.0
    if max_dist <= 0:
        return 1.0
    return math.sqrt(n) / max_dist


def build_spring_model(
    dist: np.ndarray, kkconst: float, edge_length: Optional[float] = None
) -> SpringModel:
    """
    Derive spring constants and ideal lengths from a finite distance matrix.

    Args:
        dist: (n, n) graph distance matrix, zero only on the diagonal
        kkconst: Global spring constant K
        edge_length: Plane length of one unit of graph distance, or None for automatic

    Returns:
        SpringModel with k_ij = K / d_ij^2 and l_ij = L * d_ij
    """
    scale = unit_length(dist, edge_length)
    ideal = dist * scale
    with np.errstate(divide="ignore", invalid="ignore"):
        stiffness = np.where(dist > 0, kkconst / (dist * dist), 0.0)
    np.fill_diagonal(stiffness, 0.0)
    np.fill_diagonal(ideal, 0.0)
    return SpringModel(k=stiffness, l=ideal)


__all__ = ["SpringModel", "unit_length", "build_spring_model"]
