"""
Exact (Held-Karp) and heuristic (Lin-Kernighan) TSP solvers over a shared weighted digraph.
"""

from .graphs import AdjacencyGraph, GraphView, InvalidSize, MatrixGraph
from .solvers import HeldKarpSolver, LinKernighanConfig, LinKernighanSolver, tour_cost

__all__ = [
    "AdjacencyGraph",
    "GraphView",
    "InvalidSize",
    "MatrixGraph",
    "HeldKarpSolver",
    "LinKernighanConfig",
    "LinKernighanSolver",
    "tour_cost",
    "builders",
    "data",
    "evaluation",
    "plotting",
]
