"""
Object API scaffolding shared by layouts that work on Node/Link lists.

- GraphData: the index-based view of the nodes and links handed to the solver
- BaseLayout: node/link normalisation and lifecycle events
- IterativeLayout: a tick loop that can be stopped from a listener
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from typing_extensions import Self

from .types import Event, EventType, Link, LinkLike, Node, NodeLike
from .validation import normalize_edges, validate_iterations

Listener = Callable[[Optional[Event]], None]


@dataclass(frozen=True)
class GraphData:
    """Nodes and links reduced to vertex indices and arrays."""

    n: int
    edges: list[tuple[int, int]]
    weights: Optional[list[float]]
    positions: np.ndarray
    fixed: Optional[np.ndarray]


class BaseLayout(ABC):
    """
    Abstract base class for layouts over Node/Link lists.

    Nodes and links may be given as Node/Link objects, dicts, or any objects
    with the matching attributes; they are normalised on assignment.

    Example:
        layout = SomeLayout(nodes=[{}, {}], links=[{"source": 0, "target": 1}])
        layout.on("end", lambda event: print(event["iteration"]))
        layout.run()
        print([(node.x, node.y) for node in layout.nodes])
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        links: Optional[Sequence[LinkLike]] = None,
        random_seed: Optional[int] = None,
        on_start: Optional[Listener] = None,
        on_tick: Optional[Listener] = None,
        on_end: Optional[Listener] = None,
    ) -> None:
        self._nodes: list[Node] = [] if nodes is None else [Node.from_data(n) for n in nodes]
        self._links: list[Link] = [] if links is None else [Link.from_data(link) for link in links]
        self._listeners: dict[EventType, list[Listener]] = {event: [] for event in EventType}
        self.random_seed: Optional[int] = random_seed

        for event, callback in (
            (EventType.start, on_start),
            (EventType.tick, on_tick),
            (EventType.end, on_end),
        ):
            if callback is not None:
                self.on(event, callback)

    @property
    def nodes(self) -> list[Node]:
        return self._nodes

    @nodes.setter
    def nodes(self, value: Sequence[NodeLike]) -> None:
        self._nodes = [Node.from_data(n) for n in value]

    @property
    def links(self) -> list[Link]:
        return self._links

    @links.setter
    def links(self, value: Sequence[LinkLike]) -> None:
        self._links = [Link.from_data(link) for link in value]

    def on(self, event: EventType | str, callback: Listener) -> Self:
        """
        Add a listener for a lifecycle event.

        Args:
            event: EventType or its name ("start", "tick", "end")
            callback: Called with the event payload

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._listeners[event].append(callback)
        return self

    def trigger(self, event: Event) -> None:
        """Call every listener registered for the event's type."""
        for callback in self._listeners.get(event["type"], ()):
            callback(event)

    def graph_data(self) -> GraphData:
        """
        Assign missing node indices, validate the links, and reduce both to arrays.

        Link weights are None when no link carries one; otherwise a link
        without a weight counts as 1.

        Raises:
            InvalidLinkError: If a link endpoint is not a node of this layout.
        """
        for i, node in enumerate(self._nodes):
            if node.index is None:
                node.index = i

        n = len(self._nodes)
        edges = normalize_edges(self._links, n)
        weights = None
        if any(link.weight is not None for link in self._links):
            weights = [1.0 if link.weight is None else float(link.weight) for link in self._links]

        positions = np.array([[node.x, node.y] for node in self._nodes], dtype=float).reshape(n, 2)
        fixed = np.array([bool(node.fixed) for node in self._nodes], dtype=bool)
        return GraphData(n, edges, weights, positions, fixed if fixed.any() else None)

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """Compute the layout and write positions back into the nodes."""


class IterativeLayout(BaseLayout):
    """
    Layout advanced by repeated tick() calls.

    `iterations` caps the number of ticks; None lets the subclass derive a
    default from the graph size.
    """

    def __init__(self, *, iterations: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._alpha = 0.0
        self._running = False
        self._iterations: Optional[int] = (
            None if iterations is None else validate_iterations(iterations)
        )

    @property
    def alpha(self) -> float:
        """Energy measure reported by the latest tick (0 once finished)."""
        return self._alpha

    @property
    def iterations(self) -> Optional[int]:
        return self._iterations

    @iterations.setter
    def iterations(self, value: Optional[int]) -> None:
        self._iterations = None if value is None else validate_iterations(value)

    @property
    def running(self) -> bool:
        return self._running

    @abstractmethod
    def tick(self) -> bool:
        """Advance one step; return True when the layout is finished."""

    def kick(self) -> None:
        """Tick until the layout finishes or stop() is called."""
        self._running = True
        while self._running and not self.tick():
            pass
        self._running = False

    def stop(self) -> Self:
        self._running = False
        return self


__all__ = [
    "GraphData",
    "BaseLayout",
    "IterativeLayout",
]
