import logging
import math
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..graphs import GraphView


logger = logging.getLogger(__name__)

Tour = List[int]

# Finite stand-in for the cost of a tour that uses a missing edge.
INVALID_COST = sys.float_info.max / 2


def tour_cost(weights, tour: Sequence[int]) -> float:
    """
    Cost of ``tour`` read as a closed cycle.

    ``weights`` is either a ``GraphView`` or anything indexable as
    ``weights[a][b]`` (a numpy matrix, nested lists). A NaN or infinite edge,
    or a running total that overflows, yields ``INVALID_COST``.
    """
    n = len(tour)
    if n <= 1:
        return 0.0
    lookup = weights.weight if isinstance(weights, GraphView) else (lambda a, b: weights[a][b])
    total = 0.0
    for i in range(n):
        a = tour[i]
        b = tour[(i + 1) % n]
        w = float(lookup(a, b))
        if math.isnan(w) or math.isinf(w):
            logger.warning("invalid edge weight between %s and %s: %s", a, b, w)
            return INVALID_COST
        if math.isinf(total + w):
            logger.warning("overflow while summing tour cost")
            return INVALID_COST
        total += w
    return total


def is_permutation(tour: Sequence[int], n: int) -> bool:
    return len(tour) == n and set(tour) == set(range(n))


class Solver(ABC):
    name: str = "base"

    def __init__(self, graph: GraphView):
        self.graph = graph
        self.tour: Tour = []

    @abstractmethod
    def run(self) -> Tour:
        raise NotImplementedError

    def get_tour(self) -> Tour:
        return list(self.tour)


@dataclass
class SolveResult:
    tour: Tour
    length: float
    solver_name: str
    optimum: Optional[float] = None
    runtime: float = 0.0

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0) or math.isinf(self.optimum):
            return float("inf")
        return (self.length - self.optimum) / self.optimum
