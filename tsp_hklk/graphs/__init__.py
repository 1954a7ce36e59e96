from .adjacency import AdjacencyGraph
from .base import INF, Edge, GraphError, GraphView, InvalidSize, VertexOutOfRange
from .matrix import MatrixGraph


def make_graph(vertex_count: int, dense: bool = False) -> GraphView:
    if dense:
        return MatrixGraph(vertex_count)
    return AdjacencyGraph(vertex_count)


__all__ = [
    "INF",
    "Edge",
    "GraphError",
    "GraphView",
    "InvalidSize",
    "VertexOutOfRange",
    "AdjacencyGraph",
    "MatrixGraph",
    "make_graph",
]
