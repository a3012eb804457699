"""
Per-vertex bounding boxes.

Each of the four sides is optional. An absent side leaves that direction
unconstrained for every vertex.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


class Bounds:
    """
    Per-vertex rectangular constraints.

    Attributes:
        min_x: Lower x limit per vertex, or None
        max_x: Upper x limit per vertex, or None
        min_y: Lower y limit per vertex, or None
        max_y: Upper y limit per vertex, or None

    Example:
        bounds = Bounds(min_x=np.full(3, -1.0), max_x=np.full(3, 1.0))
        x, y = bounds.clamp(0, 5.0, 5.0)  # (1.0, 5.0)
    """

    def __init__(
        self,
        min_x: Optional[np.ndarray] = None,
        max_x: Optional[np.ndarray] = None,
        min_y: Optional[np.ndarray] = None,
        max_y: Optional[np.ndarray] = None,
    ) -> None:
        self.min_x = min_x
        self.max_x = max_x
        self.min_y = min_y
        self.max_y = max_y

    @property
    def is_unbounded(self) -> bool:
        """True if no side is constrained."""
        return self.min_x is None and self.max_x is None and self.min_y is None and self.max_y is None

    def clamp(self, m: int, x: float, y: float) -> tuple[float, float]:
        """Clamp a single position of vertex m into its box."""
        if self.min_x is not None and x < self.min_x[m]:
            x = float(self.min_x[m])
        if self.max_x is not None and x > self.max_x[m]:
            x = float(self.max_x[m])
        if self.min_y is not None and y < self.min_y[m]:
            y = float(self.min_y[m])
        if self.max_y is not None and y > self.max_y[m]:
            y = float(self.max_y[m])
        return x, y

    def clamp_all(self, coords: np.ndarray) -> np.ndarray:
        """Clamp every row of an (n, 2) coordinate array in place."""
        if self.min_x is not None:
            np.maximum(coords[:, 0], self.min_x, out=coords[:, 0])
        if self.max_x is not None:
            np.minimum(coords[:, 0], self.max_x, out=coords[:, 0])
        if self.min_y is not None:
            np.maximum(coords[:, 1], self.min_y, out=coords[:, 1])
        if self.max_y is not None:
            np.minimum(coords[:, 1], self.max_y, out=coords[:, 1])
        return coords

    def contains(self, coords: np.ndarray) -> bool:
        """Check that every row of coords lies inside its box."""
        inside = np.ones(len(coords), dtype=bool)
        if self.min_x is not None:
            inside &= coords[:, 0] >= self.min_x
        if self.max_x is not None:
            inside &= coords[:, 0] <= self.max_x
        if self.min_y is not None:
            inside &= coords[:, 1] >= self.min_y
        if self.max_y is not None:
            inside &= coords[:, 1] <= self.max_y
        return bool(inside.all())

    def ranges(self, n: int, extent: float) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """
        Compute per-vertex sampling intervals.

        A present side is used as-is. When only one side of an axis is given,
        the other lies `extent` away from it; when both are absent the axis
        spans [-extent/2, extent/2].

        Args:
            n: Number of vertices
            extent: Width of the default interval

        Returns:
            (lo_x, hi_x, lo_y, hi_y) arrays of length n
        """
        lo_x, hi_x = _axis_range(self.min_x, self.max_x, n, extent)
        lo_y, hi_y = _axis_range(self.min_y, self.max_y, n, extent)
        return lo_x, hi_x, lo_y, hi_y

    def centers(self, n: int, extent: float) -> np.ndarray:
        """Midpoints of the per-vertex sampling intervals as an (n, 2) array."""
        lo_x, hi_x, lo_y, hi_y = self.ranges(n, extent)
        return np.column_stack(((lo_x + hi_x) / 2.0, (lo_y + hi_y) / 2.0))

    def __repr__(self) -> str:
        sides = [
            name
            for name in ("min_x", "max_x", "min_y", "max_y")
            if getattr(self, name) is not None
        ]
        return f"Bounds({', '.join(sides) or 'unbounded'})"


def _axis_range(
    lo: Optional[np.ndarray], hi: Optional[np.ndarray], n: int, extent: float
) -> tuple[np.ndarray, np.ndarray]:
    # Infinite limits are treated like absent ones, per vertex.
    half = extent / 2.0
    lo_arr = np.full(n, -np.inf) if lo is None else lo.astype(float)
    hi_arr = np.full(n, np.inf) if hi is None else hi.astype(float)
    lo_ok = np.isfinite(lo_arr)
    hi_ok = np.isfinite(hi_arr)
    new_lo = np.where(lo_ok, lo_arr, np.where(hi_ok, hi_arr - extent, -half))
    new_hi = np.where(hi_ok, hi_arr, np.where(lo_ok, lo_arr + extent, half))
    return new_lo, new_hi


__all__ = ["Bounds"]
