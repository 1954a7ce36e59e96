"""
Graph topologies used by the tests and the benchmark command.
"""

import math
import random
from typing import Callable, Optional

from .graphs import GraphView, make_graph


def complete_graph(
    n: int, weight_fn: Optional[Callable[[int, int], float]] = None, dense: bool = False
) -> GraphView:
    graph = make_graph(n, dense=dense)
    for x in range(n):
        for y in range(n):
            if x != y:
                graph.add_edge(x, y, 1.0 if weight_fn is None else weight_fn(x, y))
    return graph


def dense_graph(n: int, dense: bool = False) -> GraphView:
    graph = complete_graph(n, dense=dense)
    ensure_connected(graph)
    return graph


def ring_graph(n: int, weight_fn: Optional[Callable[[int, int], float]] = None, dense: bool = False) -> GraphView:
    """Directed cycle ``0 -> 1 -> ... -> n-1 -> 0``."""
    graph = make_graph(n, dense=dense)
    for x in range(n):
        y = (x + 1) % n
        graph.add_edge(x, y, 1.0 if weight_fn is None else weight_fn(x, y))
    return graph


def sparse_three_cycles(n: int, dense: bool = False) -> GraphView:
    # x -> x+1 plus x -> x-2 closes a run of 3-cycles.
    graph = make_graph(n, dense=dense)
    for x in range(n - 1):
        graph.add_edge(x, x + 1)
    for x in range(n - 1, 2, -1):
        graph.add_edge(x, x - 2)
    ensure_connected(graph)
    return graph


def random_complete(
    n: int,
    low: int = 1,
    high: int = 100,
    seed: Optional[int] = None,
    symmetric: bool = False,
    dense: bool = False,
) -> GraphView:
    rng = random.Random(seed)
    graph = make_graph(n, dense=dense)
    for x in range(n):
        for y in range(n):
            if x == y:
                continue
            if symmetric and y < x:
                graph.add_edge(x, y, graph.weight(y, x))
            else:
                graph.add_edge(x, y, float(rng.randint(low, high)))
    return graph


def circle_graph(n: int, radius: float = 100.0, dense: bool = False) -> GraphView:
    """Euclidean distances between ``n`` points spaced evenly on a circle."""
    points = [
        (radius * math.cos(2 * math.pi * k / n), radius * math.sin(2 * math.pi * k / n))
        for k in range(n)
    ]
    return complete_graph(n, lambda x, y: math.dist(points[x], points[y]), dense=dense)


def _reachable(graph: GraphView, start: int = 0) -> set:
    visited = set()
    stack = [start]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        stack.extend(graph.out(current) - visited)
    return visited


def is_connected(graph: GraphView) -> bool:
    return len(_reachable(graph)) == graph.vertex_count()


def ensure_connected(graph: GraphView) -> None:
    """Add an edge from vertex 0 to every vertex unreachable from it."""
    visited = _reachable(graph)
    for v in range(graph.vertex_count()):
        if v not in visited:
            graph.add_edge(0, v)
            visited.add(v)


def label_edges(graph: GraphView, start: float = 10.0, step: float = 5.0) -> None:
    """
    Give every ``x -> y`` edge with ``x < y`` an increasing weight and copy it
    to the reverse edge when that edge exists.
    """
    weight = start
    for x in range(graph.vertex_count()):
        for y in sorted(graph.out(x)):
            if x < y:
                graph.add_edge(x, y, weight)
                if graph.has_edge(y, x):
                    graph.add_edge(y, x, weight)
                weight += step
