import itertools
import math
from typing import Tuple

from ..graphs import GraphView
from .base import Tour


MAX_BRUTE_FORCE_VERTICES = 11


def brute_force_tour(graph: GraphView) -> Tuple[Tour, float]:
    """Exhaustive search with vertex 0 fixed first; cost is ``inf`` when no cycle exists."""
    n = graph.vertex_count()
    if n > MAX_BRUTE_FORCE_VERTICES:
        raise ValueError(f"brute force limited to {MAX_BRUTE_FORCE_VERTICES} vertices, graph has {n}")
    if n == 1:
        return [0], 0.0
    weights = graph.weight_matrix().tolist()
    best_tour: Tour = list(range(n))
    best_cost = math.inf
    for perm in itertools.permutations(range(1, n)):
        cost = weights[0][perm[0]] + weights[perm[-1]][0]
        for a, b in zip(perm, perm[1:]):
            cost += weights[a][b]
            if cost >= best_cost:
                break
        if cost < best_cost:
            best_cost = cost
            best_tour = [0, *perm]
    return best_tour, best_cost


def brute_force_cost(graph: GraphView) -> float:
    return brute_force_tour(graph)[1]
