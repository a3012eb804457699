"""
Graph records and event payloads for the object API.

- Node: vertex position, optional index, and a fixed flag
- Link: undirected edge with an optional weight (its length in shortest paths)
- EventType / Event: layout lifecycle notifications
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Sequence, TypedDict, Union


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Optimization is about to begin
    - tick: One vertex has been moved
    - end: The optimizer reached its terminal state
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    alpha: float
    stress: Optional[float]
    iteration: int


@dataclass(eq=False)
class Node:
    """
    Vertex of the drawn graph.

    `x`/`y` seed the layout when it runs with use_seed, and receive the
    result afterwards. A truthy `fixed` keeps the node where it is.
    """

    index: Optional[int] = None
    x: float = 0.0
    y: float = 0.0
    fixed: bool = False

    @classmethod
    def from_data(cls, data: Any) -> Node:
        """Build a node from a Node, a dict, or any object with x/y attributes."""
        if isinstance(data, Node):
            return data
        if isinstance(data, dict):
            get = data.get
        else:
            def get(name: str, default: Any = None) -> Any:
                return getattr(data, name, default)
        return cls(
            index=get("index"),
            x=float(get("x", 0.0)),
            y=float(get("y", 0.0)),
            fixed=bool(get("fixed", False)),
        )


@dataclass(eq=False)
class Link:
    """
    Undirected edge between two nodes, given as Node objects or indices.

    Raises:
        ValueError: If source or target is None
    """

    source: Union[Node, int]
    target: Union[Node, int]
    weight: Optional[float] = None

    def __post_init__(self) -> None:
        if self.source is None:
            raise ValueError("Link source cannot be None")
        if self.target is None:
            raise ValueError("Link target cannot be None")

    @classmethod
    def from_data(cls, data: Any) -> Link:
        """Build a link from a Link, a dict, or any object with source/target."""
        if isinstance(data, Link):
            return data
        if isinstance(data, dict):
            return cls(data.get("source"), data.get("target"), data.get("weight"))
        return cls(
            getattr(data, "source", None),
            getattr(data, "target", None),
            getattr(data, "weight", None),
        )


NodeLike = Union[Node, dict[str, Any], Any]
"""Input type for nodes: Node objects, dicts, or objects with x/y/fixed."""

LinkLike = Union[Link, dict[str, Any], Any]
"""Input type for links: Link objects, dicts, or objects with source/target."""

EdgeList = Sequence[tuple[int, int]]
"""Edges as (u, v) vertex index pairs."""

FloatSequence = Sequence[float]
"""Per-edge or per-vertex real values (lists, tuples or numpy arrays)."""


__all__ = [
    "EventType",
    "Event",
    "Node",
    "Link",
    "NodeLike",
    "LinkLike",
    "EdgeList",
    "FloatSequence",
]
