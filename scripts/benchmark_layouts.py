#!/usr/bin/env python3
"""
Benchmark the Kamada-Kawai layout on generated test graphs.

Usage:
    python scripts/benchmark_layouts.py [--graphs PATTERN] [--sizes N,...]

Examples:
    python scripts/benchmark_layouts.py
    python scripts/benchmark_layouts.py --graphs "grid*" --sizes 25,100
    python scripts/benchmark_layouts.py --weighted --bounded --output results.json
"""

from __future__ import annotations

import argparse
import json
import math
import time
from fnmatch import fnmatch
from typing import Any, Callable

import numpy as np

from kklayout import layout_kamada_kawai, stress

Edges = list[tuple[int, int]]


def generate_path(n: int, rng: np.random.Generator) -> Edges:
    return [(i, i + 1) for i in range(n - 1)]


def generate_cycle(n: int, rng: np.random.Generator) -> Edges:
    return [(i, (i + 1) % n) for i in range(n)]


def generate_grid(n: int, rng: np.random.Generator) -> Edges:
    """Square-ish grid with about n vertices."""
    side = max(1, int(math.isqrt(n)))
    edges = []
    for r in range(side):
        for c in range(side):
            v = r * side + c
            if c + 1 < side:
                edges.append((v, v + 1))
            if r + 1 < side:
                edges.append((v, v + side))
    return edges


def generate_tree(n: int, rng: np.random.Generator) -> Edges:
    """Random recursive tree: vertex i attaches to a uniform earlier vertex."""
    return [(int(rng.integers(0, i)), i) for i in range(1, n)]


def generate_erdos_renyi(n: int, rng: np.random.Generator) -> Edges:
    """G(n, p) with expected degree 3; may be disconnected."""
    p = min(1.0, 3.0 / max(n - 1, 1))
    iu, ju = np.triu_indices(n, k=1)
    keep = rng.random(iu.shape[0]) < p
    return list(zip(iu[keep].tolist(), ju[keep].tolist()))


GENERATORS: dict[str, Callable[[int, np.random.Generator], Edges]] = {
    "path": generate_path,
    "cycle": generate_cycle,
    "grid": generate_grid,
    "tree": generate_tree,
    "erdos_renyi": generate_erdos_renyi,
}


def vertex_count(name: str, n: int) -> int:
    if name == "grid":
        side = max(1, int(math.isqrt(n)))
        return side * side
    return n


def benchmark_layout(
    n: int,
    edges: Edges,
    weighted: bool = False,
    bounded: bool = False,
    seed: int = 42,
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Benchmark a single Kamada-Kawai run.

    Returns:
        Dict with timing and result info
    """
    rng = np.random.default_rng(seed)
    weights = rng.uniform(0.5, 2.0, size=len(edges)).tolist() if weighted else None
    box: dict[str, Any] = {}
    if bounded:
        half = math.sqrt(n)
        box = {
            "min_x": [-half] * n,
            "max_x": [half] * n,
            "min_y": [-half] * n,
            "max_y": [half] * n,
        }

    start = time.perf_counter()
    coords = layout_kamada_kawai(n, edges, weights=weights, rng=rng, **box, **kwargs)
    elapsed = time.perf_counter() - start

    return {
        "time_seconds": elapsed,
        "num_nodes": n,
        "num_edges": len(edges),
        "stress": stress(coords, edges=edges, weights=weights),
    }


def run_benchmarks(
    graph_pattern: str = "*",
    sizes: tuple[int, ...] = (10, 50, 100),
    max_iterations: int | None = None,
    epsilon: float = 0.0,
    weighted: bool = False,
    bounded: bool = False,
) -> list[dict]:
    """Run benchmarks on every matching generator and size."""
    selected = {name: gen for name, gen in GENERATORS.items() if fnmatch(name, graph_pattern)}
    if not selected:
        print(f"No graphs matching pattern '{graph_pattern}'")
        return []

    print(f"\nBenchmarking Kamada-Kawai on {len(selected)} graph families, sizes {list(sizes)}")
    print(f"Iterations: {max_iterations or '50 * n'}, epsilon: {epsilon}")
    print("=" * 70)

    results = []
    for name, generator in selected.items():
        for size in sizes:
            n = vertex_count(name, size)
            edges = generator(n, np.random.default_rng(size))
            result = benchmark_layout(
                n,
                edges,
                weighted=weighted,
                bounded=bounded,
                max_iterations=max_iterations,
                epsilon=epsilon,
            )
            label = f"{name}_{n}"
            print(
                f"  {label:<20s}: {result['time_seconds']:.4f}s  "
                f"stress {result['stress']:.4f}  ({result['num_edges']} edges)"
            )
            results.append({"graph": label, **result})

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark the Kamada-Kawai layout")
    parser.add_argument("--graphs", default="*", help="Graph family pattern (e.g., 'grid*')")
    parser.add_argument("--sizes", default="10,50,100", help="Comma-separated vertex counts")
    parser.add_argument("--iterations", type=int, help="Maximum iterations (default 50 * n)")
    parser.add_argument("--epsilon", type=float, default=0.0, help="Gradient stopping threshold")
    parser.add_argument("--weighted", action="store_true", help="Use random edge weights")
    parser.add_argument("--bounded", action="store_true", help="Confine vertices to a box")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    sizes = tuple(int(s) for s in args.sizes.split(","))

    results = run_benchmarks(
        graph_pattern=args.graphs,
        sizes=sizes,
        max_iterations=args.iterations,
        epsilon=args.epsilon,
        weighted=args.weighted,
        bounded=args.bounded,
    )

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
