"""
Kamada-Kawai force-directed layout algorithm.

Based on the paper:
"An Algorithm for Drawing General Undirected Graphs"
by Kamada and Kawai (1989)

This algorithm minimizes stress (energy) where the ideal distances
between nodes are proportional to their graph-theoretic distances
(shortest path lengths), optionally keeping every vertex inside its own
bounding box.

Two entry points are provided:

- layout_kamada_kawai(): functional API over a numpy (n, 2) coordinate array
- KamadaKawaiLayout: object API over Node/Link lists with lifecycle events
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import numpy as np

from .base import IterativeLayout
from .bounds import Bounds
from .distances import distance_matrix
from .energy import SpringModel, build_spring_model
from .initial import RandomSource, initial_layout, make_rng
from .optimizer import KamadaKawaiOptimizer
from .types import EdgeList, Event, EventType, FloatSequence, LinkLike, NodeLike
from .validation import (
    InvalidValueError,
    normalize_edges,
    validate_bounds,
    validate_disconnected_distance,
    validate_edge_length,
    validate_epsilon,
    validate_fixed,
    validate_initial,
    validate_iterations,
    validate_kkconst,
    validate_seed_layout,
    validate_weights,
)

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS_PER_NODE = 50
DEFAULT_EPSILON = 0.0

BoundsArgs = tuple[
    Optional[FloatSequence],
    Optional[FloatSequence],
    Optional[FloatSequence],
    Optional[FloatSequence],
]


@dataclass(eq=False)
class _LayoutProblem:
    """Validated inputs and derived state for one layout run."""

    n: int
    coords: np.ndarray
    bounds: Bounds
    epsilon: float
    max_iterations: int
    fixed: Optional[np.ndarray]
    dist: Optional[np.ndarray] = None
    springs: Optional[SpringModel] = None

    def optimizer(self) -> Optional[KamadaKawaiOptimizer]:
        if self.springs is None:
            return None
        return KamadaKawaiOptimizer(
            self.coords,
            self.springs,
            bounds=self.bounds,
            epsilon=self.epsilon,
            max_iterations=self.max_iterations,
            fixed=self.fixed,
        )


def _prepare(
    n: int,
    edges: EdgeList,
    layout: Any,
    use_seed: bool,
    max_iterations: Optional[int],
    epsilon: float,
    kkconst: Optional[float],
    weights: Optional[FloatSequence],
    bounds_args: BoundsArgs,
    edge_length: Optional[float],
    disconnected_distance: Optional[float],
    initial: str,
    rng: RandomSource,
    fixed: Optional[Sequence[bool]],
) -> _LayoutProblem:
    """Validate every input, then build the starting layout and energy model."""
    n = int(n)
    if n < 0:
        raise InvalidValueError(f"Vertex count must be >= 0, got {n}")
    edges = normalize_edges(edges, n)
    weight_arr = validate_weights(weights, len(edges))
    bounds = validate_bounds(n, *bounds_args)
    if max_iterations is None:
        max_iterations = DEFAULT_ITERATIONS_PER_NODE * n
    max_iterations = validate_iterations(max_iterations)
    epsilon = validate_epsilon(epsilon)
    kkconst = validate_kkconst(kkconst if kkconst is not None else max(n, 1))
    edge_length = validate_edge_length(edge_length)
    disconnected_distance = validate_disconnected_distance(disconnected_distance)
    initial = validate_initial(initial)
    fixed_mask = validate_fixed(fixed, n)
    seed = validate_seed_layout(layout, n) if use_seed else None

    if seed is not None:
        coords = seed
    else:
        coords = initial_layout(n, make_rng(rng), bounds, initial)

    problem = _LayoutProblem(
        n=n,
        coords=coords,
        bounds=bounds,
        epsilon=epsilon,
        max_iterations=max_iterations,
        fixed=fixed_mask,
    )
    if n < 2:
        return problem

    problem.dist = distance_matrix(n, edges, weight_arr, disconnected_distance)
    problem.springs = build_spring_model(problem.dist, kkconst, edge_length)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Kamada-Kawai setup: %d vertices, %d edges, weighted=%s, %s, "
            "max_iterations=%d, epsilon=%g, kkconst=%g, seeded=%s",
            n,
            len(edges),
            weight_arr is not None,
            bounds,
            max_iterations,
            epsilon,
            kkconst,
            use_seed,
        )
    return problem


def _assemble(coords: np.ndarray, bounds: Bounds, out: Any) -> np.ndarray:
    """
    Clamp the final coordinates into their boxes and deliver them.

    They are written into `out` only when it is a floating (n, 2) array;
    otherwise the float result is returned and `out` is left untouched.
    """
    bounds.clamp_all(coords)
    n = coords.shape[0]
    if isinstance(out, np.ndarray) and out.shape == (n, 2) and np.issubdtype(out.dtype, np.floating):
        out[...] = coords
        return out
    return coords


def layout_kamada_kawai(
    n: int,
    edges: EdgeList,
    layout: Optional[np.ndarray] = None,
    *,
    use_seed: bool = False,
    max_iterations: Optional[int] = None,
    epsilon: float = DEFAULT_EPSILON,
    kkconst: Optional[float] = None,
    weights: Optional[FloatSequence] = None,
    min_x: Optional[FloatSequence] = None,
    max_x: Optional[FloatSequence] = None,
    min_y: Optional[FloatSequence] = None,
    max_y: Optional[FloatSequence] = None,
    edge_length: Optional[float] = None,
    disconnected_distance: Optional[float] = None,
    initial: str = "circle",
    rng: RandomSource = None,
    fixed: Optional[Sequence[bool]] = None,
) -> np.ndarray:
    """
    Compute a Kamada-Kawai layout of an undirected graph.

    Args:
        n: Number of vertices
        edges: (u, v) vertex index pairs; self-loops and multi-edges allowed
        layout: Seed coordinates when use_seed is True (refined in place if it
            is a floating numpy array); otherwise an optional (n, 2) float output buffer
        use_seed: Start from `layout` instead of generating positions
        max_iterations: Maximum number of vertex moves (default 50 * n)
        epsilon: Stop once every gradient magnitude is <= epsilon
        kkconst: Global spring constant (default n)
        weights: Optional positive length per edge
        min_x, max_x, min_y, max_y: Optional per-vertex bounding box sides
        edge_length: Plane length of one unit of graph distance; None scales the
            drawing to span about sqrt(n)
        disconnected_distance: Graph distance used between components
            (default 1.5 times the largest finite distance)
        initial: "circle" or "random" starting placement when unbounded and unseeded
        rng: Seed or numpy Generator for the random starting placement
        fixed: Optional mask of vertices that must not move

    Returns:
        (n, 2) coordinate array, one row per vertex in index order

    Raises:
        InvalidSizeError: Weights, bounds, fixed mask or seed layout have the wrong size
        InvalidValueError: Non-positive weight, min > max, or invalid parameter
        InvalidLinkError: An edge references a vertex outside 0..n-1

    Example:
        >>> coords = layout_kamada_kawai(3, [(0, 1), (1, 2)], rng=42)
        >>> coords.shape
        (3, 2)
    """
    problem = _prepare(
        n,
        edges,
        layout,
        use_seed,
        max_iterations,
        epsilon,
        kkconst,
        weights,
        (min_x, max_x, min_y, max_y),
        edge_length,
        disconnected_distance,
        initial,
        rng,
        fixed,
    )

    optimizer = problem.optimizer()
    if optimizer is not None:
        optimizer.run()

    return _assemble(problem.coords, problem.bounds, layout)


class KamadaKawaiLayout(IterativeLayout):
    """
    Kamada-Kawai stress-minimization layout.

    Positions nodes to minimize a stress function where the ideal
    distance between any two nodes is proportional to their
    graph-theoretic distance (shortest path length).

    The algorithm moves one node at a time (the one with maximum
    partial derivative of energy) until convergence. Each move fires a
    tick event.

    Example:
        layout = KamadaKawaiLayout(
            nodes=[{}, {}, {}],
            links=[{'source': 0, 'target': 1}, {'source': 1, 'target': 2, 'weight': 2.0}],
            min_x=[-1, -1, -1], max_x=[1, 1, 1],
            random_seed=42,
        )
        layout.run()
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        links: Optional[Sequence[LinkLike]] = None,
        random_seed: Optional[int] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        # IterativeLayout parameters
        iterations: Optional[int] = None,
        # KamadaKawai-specific parameters
        epsilon: float = DEFAULT_EPSILON,
        kkconst: Optional[float] = None,
        edge_length: Optional[float] = None,
        disconnected_distance: Optional[float] = None,
        use_seed: bool = False,
        initial: str = "circle",
        min_x: Optional[FloatSequence] = None,
        max_x: Optional[FloatSequence] = None,
        min_y: Optional[FloatSequence] = None,
        max_y: Optional[FloatSequence] = None,
    ) -> None:
        """
        Initialize Kamada-Kawai layout.

        Args:
            nodes: List of nodes
            links: List of links; a link's weight is its length in shortest paths
            random_seed: Random seed for reproducible layouts
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
            iterations: Maximum number of node moves. If None, uses 50 * n.
            epsilon: Convergence threshold for gradient magnitude.
            kkconst: Global spring constant. If None, uses the node count.
            edge_length: Plane length of one unit of graph distance. If None,
                the drawing spans about sqrt(n).
            disconnected_distance: Distance for disconnected pairs. If None, uses
                1.5 times the largest finite distance.
            use_seed: Refine the current node positions instead of generating new ones.
            initial: "circle" or "random" starting placement without bounds.
            min_x, max_x, min_y, max_y: Optional per-node bounding box sides.
        """
        super().__init__(
            nodes=nodes,
            links=links,
            random_seed=random_seed,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
            iterations=iterations,
        )

        # KamadaKawai-specific configuration
        self._epsilon: float = validate_epsilon(epsilon)
        self._kkconst: Optional[float] = None if kkconst is None else validate_kkconst(kkconst)
        self._edge_length: Optional[float] = validate_edge_length(edge_length)
        self._disconnected_distance: Optional[float] = validate_disconnected_distance(
            disconnected_distance
        )
        self._use_seed: bool = bool(use_seed)
        self._initial: str = validate_initial(initial)
        self._bounds_args: BoundsArgs = (min_x, max_x, min_y, max_y)

        # Internal state
        self._problem: Optional[_LayoutProblem] = None
        self._optimizer: Optional[KamadaKawaiOptimizer] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def epsilon(self) -> float:
        """Get convergence threshold."""
        return self._epsilon

    @epsilon.setter
    def epsilon(self, value: float) -> None:
        """Set convergence threshold."""
        self._epsilon = validate_epsilon(value)

    @property
    def kkconst(self) -> Optional[float]:
        """Get global spring constant (None means the node count)."""
        return self._kkconst

    @kkconst.setter
    def kkconst(self, value: Optional[float]) -> None:
        """Set global spring constant."""
        self._kkconst = None if value is None else validate_kkconst(value)

    @property
    def edge_length(self) -> Optional[float]:
        """Get plane length of one unit of graph distance."""
        return self._edge_length

    @edge_length.setter
    def edge_length(self, value: Optional[float]) -> None:
        """Set plane length of one unit of graph distance."""
        self._edge_length = validate_edge_length(value)

    @property
    def disconnected_distance(self) -> Optional[float]:
        """Get distance for disconnected node pairs."""
        return self._disconnected_distance

    @disconnected_distance.setter
    def disconnected_distance(self, value: Optional[float]) -> None:
        """Set distance for disconnected node pairs."""
        self._disconnected_distance = validate_disconnected_distance(value)

    @property
    def use_seed(self) -> bool:
        """Get whether current node positions seed the layout."""
        return self._use_seed

    @use_seed.setter
    def use_seed(self, value: bool) -> None:
        """Set whether current node positions seed the layout."""
        self._use_seed = bool(value)

    @property
    def initial(self) -> str:
        """Get starting placement strategy."""
        return self._initial

    @initial.setter
    def initial(self, value: str) -> None:
        """Set starting placement strategy."""
        self._initial = validate_initial(value)

    @property
    def bounds(self) -> BoundsArgs:
        """Get (min_x, max_x, min_y, max_y) bounding sides as supplied."""
        return self._bounds_args

    @bounds.setter
    def bounds(self, value: Optional[BoundsArgs]) -> None:
        """Set (min_x, max_x, min_y, max_y); None removes all bounds."""
        self._bounds_args = (None, None, None, None) if value is None else tuple(value)  # type: ignore[assignment]

    @property
    def distance_matrix(self) -> Optional[np.ndarray]:
        """Graph distance matrix of the last run (None before run or for n < 2)."""
        return self._problem.dist if self._problem is not None else None

    @property
    def energy(self) -> float:
        """Total spring energy of the current layout."""
        if self._problem is None or self._problem.springs is None:
            return 0.0
        return self._problem.springs.energy(self._problem.coords)

    @property
    def iteration(self) -> int:
        """Number of node moves performed by the last run."""
        return self._optimizer.iteration if self._optimizer is not None else 0

    # -------------------------------------------------------------------------
    # Layout Implementation
    # -------------------------------------------------------------------------

    def run(self, **kwargs: Any) -> "KamadaKawaiLayout":
        """
        Run the layout algorithm.

        Keyword Args:
            use_seed: Override the use_seed setting for this run

        Returns:
            self for chaining
        """
        use_seed = bool(kwargs.get("use_seed", self._use_seed))
        graph = self.graph_data()

        self._problem = _prepare(
            graph.n,
            graph.edges,
            graph.positions if use_seed else None,
            use_seed,
            self._iterations,
            self._epsilon,
            self._kkconst,
            graph.weights,
            self._bounds_args,
            self._edge_length,
            self._disconnected_distance,
            self._initial,
            self.random_seed,
            graph.fixed,
        )

        # Fixed nodes keep their own positions
        if not use_seed and graph.fixed is not None:
            self._problem.coords[graph.fixed] = graph.positions[graph.fixed]

        self._optimizer = self._problem.optimizer()
        self._alpha = 1.0

        # Fire start event
        self.trigger({"type": EventType.start, "alpha": self._alpha})

        # Run layout
        self.kick()

        self._problem.bounds.clamp_all(self._problem.coords)
        for node, (x, y) in zip(self._nodes, self._problem.coords):
            node.x = float(x)
            node.y = float(y)

        # Fire end event
        self._alpha = 0.0
        self.trigger({"type": EventType.end, "alpha": 0.0, "iteration": self.iteration})

        return self

    def tick(self) -> bool:
        """
        Perform one iteration of the layout.

        Each iteration finds the node with maximum gradient and moves it.

        Returns:
            True if converged, False otherwise.
        """
        if self._optimizer is None:
            return True

        if self._optimizer.step():
            return True

        self._alpha = self._optimizer.max_gradient
        self.trigger(
            {
                "type": EventType.tick,
                "alpha": self._alpha,
                "stress": self._optimizer.max_gradient,
                "iteration": self._optimizer.iteration,
            }
        )
        return False


__all__ = [
    "DEFAULT_ITERATIONS_PER_NODE",
    "DEFAULT_EPSILON",
    "layout_kamada_kawai",
    "KamadaKawaiLayout",
]
