from typing import List, Set

import networkx as nx

from .base import INF, Edge, GraphView, usable_weight


class AdjacencyGraph(GraphView):
    """
    Sparse store on top of ``networkx.DiGraph``.

    The DiGraph keeps successor and predecessor maps in step on every
    insert/remove, so ``out`` and ``in_`` always mirror each other. Neighbour
    enumeration is O(degree).
    """

    def __init__(self, vertex_count: int):
        super().__init__(vertex_count)
        self._g = nx.DiGraph()
        self._g.add_nodes_from(range(self._vertex_count))

    def add_edge(self, x: int, y: int, weight: float = 1.0) -> None:
        if not (self.has_vertex(x) and self.has_vertex(y)) or not usable_weight(weight):
            return
        if not self._g.has_edge(x, y):
            self._edge_count += 1
        self._g.add_edge(x, y, weight=float(weight))

    def remove_edge(self, x: int, y: int) -> None:
        if self.has_edge(x, y):
            self._g.remove_edge(x, y)
            self._edge_count -= 1

    def out(self, x: int) -> Set[int]:
        if not self.has_vertex(x):
            return set()
        return set(self._g.successors(x))

    def in_(self, x: int) -> Set[int]:
        if not self.has_vertex(x):
            return set()
        return set(self._g.predecessors(x))

    def has_edge(self, x: int, y: int) -> bool:
        return self.has_vertex(x) and self.has_vertex(y) and self._g.has_edge(x, y)

    def weight(self, x: int, y: int) -> float:
        if not self.has_edge(x, y):
            return INF
        return self._g[x][y]["weight"]

    def all_edges(self) -> List[Edge]:
        return [Edge(u, v, w) for u, v, w in self._g.edges(data="weight")]
