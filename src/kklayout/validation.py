"""
Input validation utilities for the Kamada-Kawai layout.

Provides centralized validation functions for edges, weights, bounding
boxes, seed layouts and numeric parameters. Raises descriptive exceptions
on invalid input. Every check runs before the layout touches any caller
data, so a failed call leaves its inputs unchanged.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, cast

import numpy as np

from .bounds import Bounds


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidSizeError(ValidationError):
    """Raised when a weight, bound or layout array has the wrong length or shape."""

    pass


class InvalidValueError(ValidationError):
    """Raised when a weight, bound or parameter has an invalid value."""

    pass


class InvalidLinkError(ValidationError):
    """Raised when a link references invalid nodes."""

    pass


INITIAL_PLACEMENTS = ("circle", "random")


def validate_link_indices(
    links: Sequence[Any],
    node_count: int,
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that every link endpoint is an integer vertex index in range.

    Args:
        links: Sequence of Link objects, dicts with source/target, or (u, v) pairs
        node_count: Number of nodes in the graph
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (link_index, issue_description) tuples

    Raises:
        InvalidLinkError: If strict=True and invalid links found
    """
    issues: list[tuple[int, str]] = []

    for i, link in enumerate(links):
        for attr, position in (("source", 0), ("target", 1)):
            raw = _get_endpoint(link, attr, position)
            index = _as_index(raw)
            if raw is None:
                issues.append((i, f"Link {i}: {attr} is None"))
            elif index is None:
                issues.append((i, f"Link {i}: {attr} {raw!r} is not an integer vertex index"))
            elif index < 0 or index >= node_count:
                issues.append(
                    (i, f"Link {i}: {attr} index {index} out of bounds [0, {node_count})")
                )

    if strict and issues:
        msg = "Invalid link indices:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidLinkError(msg)

    return issues


def normalize_edges(links: Sequence[Any], node_count: int) -> list[tuple[int, int]]:
    """
    Validate links and convert them to (u, v) index pairs.

    Raises:
        InvalidLinkError: If any endpoint is missing, non-integral or out of range
    """
    validate_link_indices(links, node_count, strict=True)
    return [
        (
            cast(int, _as_index(_get_endpoint(link, "source", 0))),
            cast(int, _as_index(_get_endpoint(link, "target", 1))),
        )
        for link in links
    ]


def validate_weights(
    weights: Optional[Sequence[float]], edge_count: int
) -> Optional[np.ndarray]:
    """
    Validate per-edge weights.

    Args:
        weights: One positive weight per edge, or None for unit weights
        edge_count: Number of edges

    Returns:
        Weights as a float array, or None if absent

    Raises:
        InvalidSizeError: If the length differs from the edge count
        InvalidValueError: If any weight is not a finite positive number
    """
    if weights is None:
        return None

    arr = np.asarray(weights, dtype=float).reshape(-1)
    if arr.shape[0] != edge_count:
        raise InvalidSizeError(
            f"Weight vector length must match the number of edges ({edge_count}), "
            f"got {arr.shape[0]}"
        )
    if edge_count > 0:
        if not np.all(np.isfinite(arr)):
            raise InvalidValueError("Weights must be finite")
        if arr.min() <= 0:
            bad = int(np.argmin(arr))
            raise InvalidValueError(f"Weights must be positive, got {arr[bad]} for edge {bad}")
    return arr


def validate_bounds(
    node_count: int,
    min_x: Optional[Sequence[float]] = None,
    max_x: Optional[Sequence[float]] = None,
    min_y: Optional[Sequence[float]] = None,
    max_y: Optional[Sequence[float]] = None,
) -> Bounds:
    """
    Validate the four optional bounding vectors.

    Args:
        node_count: Number of vertices
        min_x, max_x, min_y, max_y: Per-vertex limits, each optional

    Returns:
        Bounds holding float arrays for the supplied sides

    Raises:
        InvalidSizeError: If a supplied vector has the wrong length
        InvalidValueError: If a value is NaN, a lower limit is +inf, an upper
            limit is -inf, or a lower limit exceeds its upper limit
    """
    sides: dict[str, Optional[np.ndarray]] = {}
    for name, values in (("min_x", min_x), ("max_x", max_x), ("min_y", min_y), ("max_y", max_y)):
        if values is None:
            sides[name] = None
            continue
        arr = np.asarray(values, dtype=float).reshape(-1)
        if arr.shape[0] != node_count:
            raise InvalidSizeError(
                f"Length of {name} ({arr.shape[0]}) must match the number of vertices ({node_count})"
            )
        if np.any(np.isnan(arr)):
            raise InvalidValueError(f"{name} must not contain NaN")
        # An open side is -inf below or +inf above; the other infinity admits no point.
        unreachable = np.inf if name.startswith("min") else -np.inf
        if np.any(arr == unreachable):
            bad = int(np.argmax(arr == unreachable))
            raise InvalidValueError(f"{name} must not be {unreachable}: vertex {bad}")
        sides[name] = arr

    for axis in ("x", "y"):
        lo = sides[f"min_{axis}"]
        hi = sides[f"max_{axis}"]
        if lo is not None and hi is not None and np.any(lo > hi):
            bad = int(np.argmax(lo > hi))
            raise InvalidValueError(
                f"min_{axis} must not exceed max_{axis}: vertex {bad} has "
                f"min_{axis}={lo[bad]} > max_{axis}={hi[bad]}"
            )

    return Bounds(**sides)


def validate_seed_layout(layout: Any, node_count: int) -> np.ndarray:
    """
    Validate a caller-supplied seed layout.

    Args:
        layout: (node_count, 2) array-like of coordinates
        node_count: Number of vertices

    Returns:
        The coordinates as a float array (a copy)

    Raises:
        InvalidSizeError: If the layout is missing or has the wrong shape
        InvalidValueError: If a coordinate is not finite
    """
    if layout is None:
        raise InvalidSizeError("A seed layout is required when use_seed is True")

    arr = np.array(layout, dtype=float)
    if node_count == 0 and arr.size == 0:
        return np.zeros((0, 2))
    if arr.ndim != 2 or arr.shape != (node_count, 2):
        raise InvalidSizeError(
            f"Seed layout must have shape ({node_count}, 2), got {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidValueError("Seed layout coordinates must be finite")
    return arr


def validate_iterations(iterations: int) -> int:
    """
    Validate iteration count is non-negative.

    Args:
        iterations: Maximum number of vertex moves

    Returns:
        Validated iteration count

    Raises:
        InvalidValueError: If iterations < 0
    """
    iterations = int(iterations)
    if iterations < 0:
        raise InvalidValueError(f"iterations must be >= 0, got {iterations}")
    return iterations


def validate_epsilon(epsilon: float) -> float:
    """
    Validate the convergence threshold.

    Raises:
        InvalidValueError: If epsilon is negative or not finite
    """
    epsilon = float(epsilon)
    if not math.isfinite(epsilon) or epsilon < 0:
        raise InvalidValueError(f"epsilon must be a finite number >= 0, got {epsilon}")
    return epsilon


def validate_kkconst(kkconst: float) -> float:
    """
    Validate the global spring constant.

    Raises:
        InvalidValueError: If kkconst is not a finite positive number
    """
    kkconst = float(kkconst)
    if not math.isfinite(kkconst) or kkconst <= 0:
        raise InvalidValueError(f"kkconst must be a finite number > 0, got {kkconst}")
    return kkconst


def validate_edge_length(edge_length: Optional[float]) -> Optional[float]:
    """Validate an explicit unit edge length (None selects automatic scaling)."""
    if edge_length is None:
        return None
    edge_length = float(edge_length)
    if not math.isfinite(edge_length) or edge_length <= 0:
        raise InvalidValueError(f"edge_length must be a finite number > 0, got {edge_length}")
    return edge_length


def validate_disconnected_distance(distance: Optional[float]) -> Optional[float]:
    """Validate an explicit distance for unreachable vertex pairs."""
    if distance is None:
        return None
    distance = float(distance)
    if not math.isfinite(distance) or distance <= 0:
        raise InvalidValueError(
            f"disconnected_distance must be a finite number > 0, got {distance}"
        )
    return distance


def validate_initial(initial: str) -> str:
    """Validate the name of the initial placement strategy."""
    if initial not in INITIAL_PLACEMENTS:
        raise InvalidValueError(
            f"initial must be one of {', '.join(INITIAL_PLACEMENTS)}, got {initial!r}"
        )
    return initial


def validate_fixed(fixed: Optional[Sequence[bool]], node_count: int) -> Optional[np.ndarray]:
    """Validate an optional per-vertex mask of vertices the layout must not move."""
    if fixed is None:
        return None
    arr = np.asarray(fixed, dtype=bool).reshape(-1)
    if arr.shape[0] != node_count:
        raise InvalidSizeError(
            f"Length of fixed ({arr.shape[0]}) must match the number of vertices ({node_count})"
        )
    return arr


def _get_endpoint(obj: Any, attr: str, position: int) -> Any:
    """Extract the raw endpoint from a (u, v) pair, a dict, or an object with source/target."""
    if isinstance(obj, (tuple, list, np.ndarray)):
        return obj[position] if len(obj) > position else None
    if isinstance(obj, dict):
        return obj.get(attr)
    return getattr(obj, attr, None)


def _as_index(val: Any) -> Optional[int]:
    """Integer vertex index of an endpoint, or None if it is not one."""
    if val is None or isinstance(val, (bool, np.bool_)):
        return None
    if isinstance(val, (int, np.integer)):
        return int(val)
    if isinstance(val, (float, np.floating)):
        return int(val) if math.isfinite(val) and float(val).is_integer() else None
    index = getattr(val, "index", None)
    if isinstance(index, (int, np.integer)) and not isinstance(index, bool):
        return int(index)
    return None


__all__ = [
    "ValidationError",
    "InvalidSizeError",
    "InvalidValueError",
    "InvalidLinkError",
    "INITIAL_PLACEMENTS",
    "validate_link_indices",
    "normalize_edges",
    "validate_weights",
    "validate_bounds",
    "validate_seed_layout",
    "validate_iterations",
    "validate_epsilon",
    "validate_kkconst",
    "validate_edge_length",
    "validate_disconnected_distance",
    "validate_initial",
    "validate_fixed",
]
