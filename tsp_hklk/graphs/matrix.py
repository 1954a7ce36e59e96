from typing import List, Set

import numpy as np

from .base import INF, Edge, GraphView, usable_weight


class MatrixGraph(GraphView):
    """
    Dense store: a flattened ``V*V`` float array initialised to ``+inf``.

    Row scans make ``out``/``in_`` O(V) regardless of degree.
    """

    def __init__(self, vertex_count: int):
        super().__init__(vertex_count)
        self._w = np.full(self._vertex_count * self._vertex_count, INF, dtype=np.float64)

    def _index(self, x: int, y: int) -> int:
        return x * self._vertex_count + y

    def add_edge(self, x: int, y: int, weight: float = 1.0) -> None:
        if not (self.has_vertex(x) and self.has_vertex(y)) or not usable_weight(weight):
            return
        idx = self._index(x, y)
        if self._w[idx] == INF:
            self._edge_count += 1
        self._w[idx] = float(weight)

    def remove_edge(self, x: int, y: int) -> None:
        if self.has_edge(x, y):
            self._w[self._index(x, y)] = INF
            self._edge_count -= 1

    def _row(self, x: int) -> np.ndarray:
        start = x * self._vertex_count
        return self._w[start : start + self._vertex_count]

    def _column(self, x: int) -> np.ndarray:
        return self._w[x :: self._vertex_count]

    def out(self, x: int) -> Set[int]:
        if not self.has_vertex(x):
            return set()
        return {int(y) for y in np.flatnonzero(self._row(x) != INF)}

    def in_(self, x: int) -> Set[int]:
        if not self.has_vertex(x):
            return set()
        return {int(y) for y in np.flatnonzero(self._column(x) != INF)}

    def has_edge(self, x: int, y: int) -> bool:
        return self.has_vertex(x) and self.has_vertex(y) and self._w[self._index(x, y)] != INF

    def weight(self, x: int, y: int) -> float:
        if not (self.has_vertex(x) and self.has_vertex(y)):
            return INF
        return float(self._w[self._index(x, y)])

    def all_edges(self) -> List[Edge]:
        n = self._vertex_count
        return [Edge(int(i // n), int(i % n), float(self._w[i])) for i in np.flatnonzero(self._w != INF)]

    def weight_matrix(self) -> np.ndarray:
        return self._w.reshape(self._vertex_count, self._vertex_count).copy()
