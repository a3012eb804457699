"""
Local energy minimizer of the Kamada-Kawai layout.

Based on the paper:
"An Algorithm for Drawing General Undirected Graphs"
by Kamada and Kawai (1989)

The optimizer moves one vertex at a time: the one whose energy gradient is
largest. The move is a single Newton-Raphson step on that vertex's two
coordinates with every other vertex held fixed, followed by clamping into
the vertex's bounding box. After the move only the spring terms involving
the moved vertex change, so the gradient cache is updated incrementally in
O(n).
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Optional

import numpy as np

from .bounds import Bounds
from .energy import SpringModel

logger = logging.getLogger(__name__)

SINGULAR_TOLERANCE = 1e-12

# Offset, as a fraction of the longest spring, for vertices that start on top of another.
COINCIDENT_OFFSET = 1e-2
GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


class OptimizerState(Enum):
    """Optimizer lifecycle: INITIAL -> STEPPING* -> TERMINAL."""

    INITIAL = "initial"
    STEPPING = "stepping"
    TERMINAL = "terminal"


class KamadaKawaiOptimizer:
    """
    Greedy one-vertex-at-a-time energy minimizer.

    The coordinate array is modified in place.

    Example:
        springs = build_spring_model(distance_matrix(3, [(0, 1), (1, 2)]), kkconst=3)
        coords = circle_layout(3, 1.0)
        KamadaKawaiOptimizer(coords, springs, max_iterations=150).run()
    """

    def __init__(
        self,
        coords: np.ndarray,
        springs: SpringModel,
        bounds: Optional[Bounds] = None,
        epsilon: float = 0.0,
        max_iterations: int = 0,
        fixed: Optional[np.ndarray] = None,
    ) -> None:
        """
        Initialize the optimizer.

        Args:
            coords: (n, 2) float array of starting positions, updated in place
            springs: Spring constants and ideal lengths
            bounds: Optional per-vertex bounding boxes
            epsilon: Stop when the largest gradient magnitude is <= epsilon
            max_iterations: Maximum number of vertex moves
            fixed: Optional boolean mask of vertices that must not move
        """
        self._coords = coords
        self._springs = springs
        self._bounds = bounds if bounds is not None and not bounds.is_unbounded else None
        self._epsilon = float(epsilon)
        self._max_iterations = int(max_iterations)
        self._fixed = fixed

        self._state = OptimizerState.INITIAL
        self._iteration = 0
        self._gradients: Optional[np.ndarray] = None
        self._max_gradient = 0.0
        self._last_moved: Optional[int] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def coords(self) -> np.ndarray:
        """Current (n, 2) coordinates."""
        return self._coords

    @property
    def state(self) -> OptimizerState:
        """Current lifecycle state."""
        return self._state

    @property
    def iteration(self) -> int:
        """Number of vertex moves performed."""
        return self._iteration

    @property
    def max_gradient(self) -> float:
        """Largest gradient magnitude seen at the most recent selection."""
        return self._max_gradient

    @property
    def last_moved(self) -> Optional[int]:
        """Index of the vertex moved by the most recent step, if any."""
        return self._last_moved

    @property
    def gradients(self) -> np.ndarray:
        """Cached (n, 2) energy gradients."""
        if self._gradients is None:
            self._gradients = self._springs.gradients(self._coords)
        return self._gradients

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def _select(self) -> tuple[int, float]:
        """Pick the movable vertex with the largest gradient magnitude."""
        magnitudes = np.hypot(self.gradients[:, 0], self.gradients[:, 1])
        if self._fixed is not None:
            magnitudes = np.where(self._fixed, -1.0, magnitudes)
        m = int(np.argmax(magnitudes))
        return m, float(magnitudes[m])

    def _newton_step(self, m: int) -> tuple[float, float]:
        """Solve the 2x2 Newton system for vertex m with Cramer's rule."""
        assert self._gradients is not None
        gx, gy = self._gradients[m]
        a, b, c = self._springs.hessian(self._coords, m)
        det = a * c - b * b

        if math.isfinite(det) and abs(det) > SINGULAR_TOLERANCE:
            delta_x = (-gx * c + gy * b) / det
            delta_y = (gx * b - gy * a) / det
            if math.isfinite(delta_x) and math.isfinite(delta_y):
                return delta_x, delta_y

        # Singular system: scaled steepest descent.
        k_sum = float(self._springs.k[m].sum())
        if k_sum <= 0:
            return 0.0, 0.0
        return -gx / k_sum, -gy / k_sum

    def _move(self, m: int) -> None:
        """Move vertex m and update the gradient cache."""
        assert self._gradients is not None
        old = self._coords[m].copy()
        delta_x, delta_y = self._newton_step(m)

        # A single move never exceeds the longest spring attached to m.
        max_step = float(self._springs.l[m].max())
        length = math.hypot(delta_x, delta_y)
        if max_step > 0 and length > max_step:
            delta_x *= max_step / length
            delta_y *= max_step / length

        new_x = float(old[0]) + delta_x
        new_y = float(old[1]) + delta_y
        if self._bounds is not None:
            new_x, new_y = self._bounds.clamp(m, new_x, new_y)
        new = np.array([new_x, new_y])

        self._gradients -= self._springs.contribution(self._coords, m, old)
        self._gradients += self._springs.contribution(self._coords, m, new)
        self._coords[m] = new
        self._gradients[m] = self._springs.gradient(self._coords, m)

    def _separate_coincident(self) -> None:
        """
        Move each free vertex that shares its position with an earlier vertex.

        Coincident pairs exert no force on each other, so a layout whose
        vertices all sit on one point would otherwise count as converged.
        The offset direction follows the golden angle by vertex index; if the
        box clamps it back onto an occupied point, the opposite direction is used.
        """
        n = self._springs.n
        if n < 2:
            return
        radius = COINCIDENT_OFFSET * float(self._springs.l.max())
        occupied: set[tuple[float, float]] = set()
        for m in range(n):
            x, y = float(self._coords[m, 0]), float(self._coords[m, 1])
            if (x, y) in occupied and not (self._fixed is not None and self._fixed[m]):
                angle = GOLDEN_ANGLE * m
                for sign in (1.0, -1.0):
                    new_x = x + sign * radius * math.cos(angle)
                    new_y = y + sign * radius * math.sin(angle)
                    if self._bounds is not None:
                        new_x, new_y = self._bounds.clamp(m, new_x, new_y)
                    if (new_x, new_y) not in occupied:
                        break
                x, y = new_x, new_y
                self._coords[m] = (x, y)
            occupied.add((x, y))

    def _terminate(self, reason: str) -> bool:
        self._state = OptimizerState.TERMINAL
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Kamada-Kawai stopped (%s) after %d moves, max gradient %.6g, energy %.6g",
                reason,
                self._iteration,
                self._max_gradient,
                self._springs.energy(self._coords),
            )
        return True

    def step(self) -> bool:
        """
        Perform one vertex move.

        Returns:
            True if the optimizer has reached its terminal state.
        """
        if self._state is OptimizerState.TERMINAL:
            return True

        if self._state is OptimizerState.INITIAL:
            if self._max_iterations > 0:
                self._separate_coincident()
            self._gradients = self._springs.gradients(self._coords)
            self._state = OptimizerState.STEPPING

        if self._springs.n < 2:
            return self._terminate("trivial graph")

        m, magnitude = self._select()
        self._max_gradient = max(magnitude, 0.0)
        if magnitude < 0:
            return self._terminate("all vertices fixed")
        if magnitude <= self._epsilon:
            return self._terminate("converged")
        if self._iteration >= self._max_iterations:
            return self._terminate("iteration limit")

        self._move(m)
        self._last_moved = m
        self._iteration += 1
        return False

    def run(self) -> np.ndarray:
        """Step until the terminal state and return the coordinates."""
        while not self.step():
            pass
        return self._coords


__all__ = ["OptimizerState", "KamadaKawaiOptimizer", "SINGULAR_TOLERANCE", "COINCIDENT_OFFSET"]
