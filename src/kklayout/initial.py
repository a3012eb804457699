"""
Starting positions for the Kamada-Kawai optimizer.

Without a seed layout and without bounds the vertices start evenly spaced
on a circle of radius sqrt(n)/2 (or, on request, uniformly at random in a
square of side sqrt(n)). When any bound is given each vertex starts at a
uniformly random point of its own box.
"""

from __future__ import annotations

import math
from typing import Optional, Union

import numpy as np

from .bounds import Bounds

RandomSource = Union[None, int, np.random.Generator]


def make_rng(rng: RandomSource = None) -> np.random.Generator:
    """Return `rng` if it is a Generator, otherwise a new Generator seeded with it."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def default_extent(n: int) -> float:
    """Side length of the default placement area."""
    return math.sqrt(n) if n > 0 else 1.0


def circle_layout(n: int, radius: float) -> np.ndarray:
    """Place n vertices evenly on a circle centred on the origin."""
    angles = 2.0 * math.pi * np.arange(n) / max(n, 1)
    return np.column_stack((radius * np.cos(angles), radius * np.sin(angles)))


def random_layout(
    n: int, rng: np.random.Generator, bounds: Optional[Bounds] = None, extent: Optional[float] = None
) -> np.ndarray:
    """
    Place each vertex uniformly at random inside its sampling box.

    Args:
        n: Number of vertices
        rng: Random generator
        bounds: Per-vertex bounds; missing sides extend `extent` from the present one
        extent: Side of the default box, sqrt(n) if None

    Returns:
        (n, 2) coordinate array
    """
    if extent is None:
        extent = default_extent(n)
    lo_x, hi_x, lo_y, hi_y = (bounds or Bounds()).ranges(n, extent)
    xs = rng.uniform(lo_x, hi_x)
    ys = rng.uniform(lo_y, hi_y)
    return np.column_stack((xs, ys))


def initial_layout(
    n: int,
    rng: np.random.Generator,
    bounds: Optional[Bounds] = None,
    initial: str = "circle",
) -> np.ndarray:
    """
    Generate starting coordinates when no seed layout is used.

    A single vertex sits at the centre of its box, or at the origin.

    Args:
        n: Number of vertices
        rng: Random generator
        bounds: Optional per-vertex bounds
        initial: "circle" or "random", used only without bounds

    Returns:
        (n, 2) coordinate array
    """
    if n == 0:
        return np.zeros((0, 2))

    extent = default_extent(n)
    bounded = bounds is not None and not bounds.is_unbounded

    if n == 1:
        if bounded:
            assert bounds is not None
            return bounds.centers(1, extent)
        return np.zeros((1, 2))

    if bounded:
        return random_layout(n, rng, bounds, extent)
    if initial == "random":
        return random_layout(n, rng, None, extent)
    return circle_layout(n, extent / 2.0)


__all__ = [
    "RandomSource",
    "make_rng",
    "default_extent",
    "circle_layout",
    "random_layout",
    "initial_layout",
]
