"""
kklayout: Kamada-Kawai graph layout in Python.

This package computes 2D vertex coordinates whose Euclidean distances
approximate graph-theoretic distances, using the stress-minimization
algorithm of Kamada and Kawai, with optional per-vertex bounding boxes
and seed layouts.

Entry points:
- layout_kamada_kawai: functional API over numpy coordinate arrays
- KamadaKawaiLayout: object API over nodes and links with lifecycle events
"""

__version__ = "0.1.0"

# Base classes for building layouts
from .base import (
    BaseLayout,
    GraphData,
    IterativeLayout,
)
from .bounds import Bounds

# Distance matrix and energy model
from .distances import (
    distance_matrix,
    shortest_paths,
)
from .energy import SpringModel, build_spring_model
from .initial import circle_layout, initial_layout, random_layout

# Kamada-Kawai layout
from .kamada_kawai import KamadaKawaiLayout, layout_kamada_kawai

# Metrics for layout quality evaluation
from .metrics import stress
from .optimizer import KamadaKawaiOptimizer, OptimizerState

# Shared types
from .types import (
    Event,
    EventType,
    Link,
    LinkLike,
    Node,
    NodeLike,
)

# Validation utilities
from .validation import (
    InvalidLinkError,
    InvalidSizeError,
    InvalidValueError,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Node",
    "Link",
    "EventType",
    "Event",
    "NodeLike",
    "LinkLike",
    "Bounds",
    # Base classes
    "BaseLayout",
    "GraphData",
    "IterativeLayout",
    # Kamada-Kawai
    "layout_kamada_kawai",
    "KamadaKawaiLayout",
    "KamadaKawaiOptimizer",
    "OptimizerState",
    # Building blocks
    "shortest_paths",
    "distance_matrix",
    "SpringModel",
    "build_spring_model",
    "initial_layout",
    "circle_layout",
    "random_layout",
    # Metrics
    "stress",
    # Validation
    "ValidationError",
    "InvalidSizeError",
    "InvalidValueError",
    "InvalidLinkError",
]
