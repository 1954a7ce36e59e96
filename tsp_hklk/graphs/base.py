import math
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Set

import numpy as np


INF = float("inf")


class GraphError(Exception):
    pass


class InvalidSize(GraphError, ValueError):
    pass


class VertexOutOfRange(GraphError, IndexError):
    pass


class Edge(NamedTuple):
    source: int
    target: int
    weight: float


def usable_weight(weight: float) -> bool:
    # +inf marks a missing edge, so it can never be stored as a real weight.
    try:
        weight = float(weight)
    except (TypeError, ValueError):
        return False
    return math.isfinite(weight) and weight > 0


class GraphView(ABC):
    """
    Fixed-size weighted digraph over vertices ``0 .. vertex_count - 1``.

    Soft queries (``out``, ``in_``, ``adjacent``, ``has_edge``, ``weight``)
    answer invalid vertices with an empty set or ``+inf``. ``neighbors`` is
    strict and raises ``VertexOutOfRange``.
    """

    def __init__(self, vertex_count: int):
        if isinstance(vertex_count, bool) or not isinstance(vertex_count, (int, np.integer)):
            raise InvalidSize(f"vertex count must be an integer, got {vertex_count!r}")
        if vertex_count <= 0:
            raise InvalidSize(f"vertex count must be positive, got {vertex_count}")
        self._vertex_count = int(vertex_count)
        self._edge_count = 0

    @abstractmethod
    def add_edge(self, x: int, y: int, weight: float = 1.0) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_edge(self, x: int, y: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def out(self, x: int) -> Set[int]:
        raise NotImplementedError

    @abstractmethod
    def in_(self, x: int) -> Set[int]:
        raise NotImplementedError

    @abstractmethod
    def has_edge(self, x: int, y: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def weight(self, x: int, y: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def all_edges(self) -> List[Edge]:
        raise NotImplementedError

    def add_undirected_edge(self, x: int, y: int, weight: float = 1.0) -> None:
        self.add_edge(x, y, weight)
        self.add_edge(y, x, weight)

    def adjacent(self, x: int) -> Set[int]:
        return self.out(x) | self.in_(x)

    def neighbors(self, x: int) -> np.ndarray:
        if not self.has_vertex(x):
            raise VertexOutOfRange(f"vertex {x!r} outside [0, {self._vertex_count})")
        return np.array(sorted(self.adjacent(x)), dtype=np.int64)

    def has_vertex(self, x: int) -> bool:
        if isinstance(x, bool) or not isinstance(x, (int, np.integer)):
            return False
        return 0 <= x < self._vertex_count

    def vertex_count(self) -> int:
        return self._vertex_count

    def edge_count(self) -> int:
        return self._edge_count

    def weight_matrix(self) -> np.ndarray:
        """Dense ``V x V`` copy of the weights, ``+inf`` where no edge exists."""
        n = self._vertex_count
        mat = np.full((n, n), INF, dtype=np.float64)
        for source, target, w in self.all_edges():
            mat[source, target] = w
        return mat

    def is_complete(self) -> bool:
        n = self._vertex_count
        return self._edge_count == n * (n - 1) and not any(self.has_edge(x, x) for x in range(n))

    def __len__(self) -> int:
        return self._vertex_count

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(vertices={self._vertex_count}, edges={self._edge_count})"
