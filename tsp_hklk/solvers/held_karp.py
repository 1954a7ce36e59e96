import logging
import math
from typing import Dict, NamedTuple

from ..graphs import GraphView
from .base import Solver, Tour


logger = logging.getLogger(__name__)

DEFAULT_MAX_VERTICES = 16


class State(NamedTuple):
    mask: int
    pos: int


class HeldKarpSolver(Solver):
    """
    Exact subset-DP over ``(visited mask, current vertex)`` states.

    ``cost(mask, pos)`` is the cheapest way to finish the cycle from ``pos``
    once ``mask`` has been visited, starting from vertex 0. Time is
    O(V^2 * 2^V) and the memo holds O(V * 2^V) entries, so only small graphs
    are accepted.
    """

    name = "held_karp"

    def __init__(self, graph: GraphView, max_vertices: int = DEFAULT_MAX_VERTICES):
        super().__init__(graph)
        n = graph.vertex_count()
        if n > max_vertices:
            raise ValueError(f"Held-Karp limited to {max_vertices} vertices, graph has {n}")
        self.n = n
        self.weights = graph.weight_matrix().tolist()
        for i in range(n):
            self.weights[i][i] = math.inf
        self.full_mask = (1 << n) - 1
        self.memo: Dict[State, float] = {}
        self.parent: Dict[State, int] = {}
        self.cost = math.inf

    def run(self) -> Tour:
        if self.n == 1:
            self.tour = [0]
            self.cost = 0.0
            return self.get_tour()
        try:
            self.cost = self._cost(State(1, 0))
            self.tour = self._reconstruct()
        finally:
            self.memo.clear()
            self.parent.clear()
        if math.isinf(self.cost):
            logger.warning("no Hamiltonian cycle over %d vertices; tour cost is infinite", self.n)
        return self.get_tour()

    def _cost(self, state: State) -> float:
        cached = self.memo.get(state)
        if cached is not None:
            return cached
        row = self.weights[state.pos]
        if state.mask == self.full_mask:
            return row[0]
        best = math.inf
        best_next = -1
        for nxt in range(self.n):
            bit = 1 << nxt
            if state.mask & bit:
                continue
            cand = row[nxt] + self._cost(State(state.mask | bit, nxt))
            # The first unvisited vertex stands in when every branch is infeasible.
            if best_next < 0 or cand < best:
                best = cand
                best_next = nxt
        self.memo[state] = best
        self.parent[state] = best_next
        return best

    def _reconstruct(self) -> Tour:
        state = State(1, 0)
        tour = [0]
        while state.mask != self.full_mask:
            nxt = self.parent[state]
            tour.append(nxt)
            state = State(state.mask | (1 << nxt), nxt)
        return tour

    def optimal_cost(self) -> float:
        if not self.tour:
            self.run()
        return self.cost


def held_karp(graph: GraphView) -> Tour:
    return HeldKarpSolver(graph).run()
