import dataclasses
import heapq
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

import numpy as np

from ..graphs import GraphView
from .base import Solver, Tour, is_permutation, tour_cost


logger = logging.getLogger(__name__)


@dataclass
class LinKernighanConfig:
    max_candidates: int = 10
    max_restarts: int = 5
    # double-bridge perturbations of the restart's best tour, each re-optimised
    max_kicks: int = 10
    max_depth: int = 5
    # candidates tried per vertex once the exchange chain is past its first step
    deep_breadth: int = 3
    max_break_depth: int = 50
    gain_threshold: float = 1e-6
    random_seed: Optional[int] = None


class LinKernighanSolver(Solver):
    """
    Lin-Kernighan style local search with random restarts.

    Each restart improves a random tour until a full scan of tour positions
    finds nothing. Two move families are tried per position:

    * a depth-bounded chain of 2-opt segment reversals, where each step
      re-breaks the edge closed by the previous one and must keep a positive
      partial gain;
    * an edge-breaking search that lifts a growing segment out of the tour
      and relinks it between another pair of tour neighbours.

    Gains are computed on a copy of the weights in which missing edges carry a
    large finite penalty, so disconnected graphs still give finite gains and
    the search pushes missing edges out of the tour where it can.

    After the first local optimum of a restart, double-bridge kicks perturb
    the restart's best tour and the search runs again from there.
    """

    name = "lin_kernighan"

    def __init__(self, graph: GraphView, config: Optional[LinKernighanConfig] = None, **overrides):
        super().__init__(graph)
        cfg = config or LinKernighanConfig()
        if overrides:
            cfg = dataclasses.replace(cfg, **overrides)
        self.cfg = cfg
        self.n = graph.vertex_count()
        self.rng = random.Random(cfg.random_seed)

        weights = graph.weight_matrix()
        np.fill_diagonal(weights, np.inf)
        self.weights = weights
        self.symmetric = bool(np.array_equal(weights, weights.T))
        self.search_weights = self._penalized(weights)
        self.candidates = [self._candidate_list(v, weights[v]) for v in range(self.n)]
        self.in_candidates = [self._candidate_list(v, weights[:, v]) for v in range(self.n)]

        self._log: List[Tuple[int, int]] = []
        self._set_tour(self._random_tour())

    def _penalized(self, weights: np.ndarray) -> List[List[float]]:
        finite = weights[np.isfinite(weights)]
        top = float(finite.max()) if finite.size else 1.0
        # One missing edge outweighs any tour built from real edges only.
        penalty = (top + 1.0) * (self.n + 1)
        return np.where(np.isfinite(weights), weights, penalty).tolist()

    def _candidate_list(self, v: int, row: np.ndarray) -> List[int]:
        """Up to ``max_candidates`` cheapest finite entries of ``row``, self excluded."""
        pool = ((row[u], u) for u in range(self.n) if u != v and np.isfinite(row[u]))
        return [u for _, u in heapq.nsmallest(self.cfg.max_candidates, pool)]

    def _random_tour(self) -> Tour:
        tour = list(range(self.n))
        self.rng.shuffle(tour)
        return tour

    def _set_tour(self, tour: Tour) -> None:
        self.tour = tour
        self.pos = [0] * self.n
        for idx, v in enumerate(tour):
            self.pos[v] = idx
        self._log.clear()
        self._current = self._search_cost(tour)

    def tour_cost(self, tour: Sequence[int]) -> float:
        return tour_cost(self.weights, tour)

    def _search_cost(self, tour: Sequence[int]) -> float:
        n = len(tour)
        if n <= 1:
            return 0.0
        w = self.search_weights
        return sum(w[tour[i]][tour[(i + 1) % n]] for i in range(n))

    def _double_bridge(self, tour: Tour) -> Tour:
        """Cut into ``A B C D`` and reconnect as ``A D C B``; no segment is reversed."""
        n = len(tour)
        if n < 4:
            return list(tour)
        a, b, c = sorted(self.rng.sample(range(1, n), 3))
        return tour[:a] + tour[c:] + tour[b:c] + tour[a:b]

    def _kicked_search(self) -> None:
        """Local search, then ``max_kicks`` double-bridge kicks from the best tour of this restart."""
        self._optimize()
        best_tour, best_cost = list(self.tour), self._current
        for _ in range(self.cfg.max_kicks):
            self._set_tour(self._double_bridge(best_tour))
            self._optimize()
            if self._current < best_cost:
                best_tour, best_cost = list(self.tour), self._current
        self._set_tour(best_tour)

    def run(self) -> Tour:
        # Restarts are ranked on the penalised cost: it equals the real cost on
        # feasible tours and puts every infeasible tour above every feasible one.
        best_tour = list(self.tour)
        best_search = self._current
        for restart in range(self.cfg.max_restarts):
            self._kicked_search()
            if self._current < best_search:
                best_tour = list(self.tour)
                best_search = self._current
            logger.debug("restart %d: search cost %.6g (best %.6g)", restart, self._current, best_search)
            if restart + 1 < self.cfg.max_restarts:
                self._set_tour(self._random_tour())
        self._set_tour(best_tour)
        best_cost = self.tour_cost(best_tour)
        logger.info("lin-kernighan finished %d restarts on %d vertices, cost %.6g", self.cfg.max_restarts, self.n, best_cost)
        return self.get_tour()

    def _optimize(self) -> None:
        if self.n < 3:
            return
        moves = 0
        improved = True
        while improved:
            improved = False
            for i in range(self.n):
                if self._improve_at(i):
                    improved = True
                    moves += 1
                    break
        logger.debug("local search converged after %d moves", moves)

    def _improve_at(self, i: int) -> bool:
        a = self.tour[i]
        for forward, candidates in ((True, self.candidates[a]), (False, self.in_candidates[a])):
            for c in candidates:
                mark = len(self._log)
                if self._kopt(i, c, 0.0, 0, forward):
                    cost = self._search_cost(self.tour)
                    if cost < self._current:
                        del self._log[mark:]
                        self._current = cost
                        return True
                    self._rollback(mark)
        relinked = self._break_edges(i)
        if relinked is not None and self._search_cost(relinked) < self._current:
            self._set_tour(relinked)
            return True
        return False

    # -- 2-opt chain ---------------------------------------------------------

    def _kopt(self, i: int, c: int, gain: float, depth: int, forward: bool = True) -> bool:
        """
        One step of the exchange chain from position ``i``.

        Forward: ``b = succ(a)``, ``d = succ(c)``; break ``(a, b)``, ``(c, d)``
        and add ``(a, c)``, ``(b, d)`` by reversing ``b .. c``. Backward is the
        mirror image with predecessors, adding ``(c, a)`` and ``(d, b)``.
        ``gain`` is what earlier steps of the chain have already realised.
        """
        n = self.n
        w = self.search_weights
        threshold = self.cfg.gain_threshold
        step = 1 if forward else -1
        a = self.tour[i]
        b = self.tour[(i + step) % n]
        if c == a or c == b:
            return False
        j = self.pos[c]
        d = self.tour[(j + step) % n]
        if d == a:
            return False

        if forward:
            partial = gain + w[a][b] - w[a][c]
            if partial <= threshold:
                return False
            start, end = (i + 1) % n, j
            closed = partial + w[c][d] - w[b][d] - self._reversal_delta(start, end)
        else:
            partial = gain + w[b][a] - w[c][a]
            if partial <= threshold:
                return False
            start, end = j, (i - 1) % n
            closed = partial + w[d][c] - w[d][b] - self._reversal_delta(start, end)

        mark = len(self._log)
        self._apply(start, end)
        if closed > threshold:
            return True

        if depth + 1 < self.cfg.max_depth:
            # the closing edge touching b is re-broken by the next step
            k = self.pos[b]
            pool = self.candidates[b] if forward else self.in_candidates[b]
            for nxt in pool[: self.cfg.deep_breadth]:
                if self._kopt(k, nxt, closed, depth + 1, forward):
                    return True
        self._rollback(mark)
        return False

    def _reversal_delta(self, start: int, end: int) -> float:
        """Extra cost of walking ``tour[start..end]`` backwards."""
        if self.symmetric:
            return 0.0
        n = self.n
        w = self.search_weights
        length = (end - start) % n + 1
        delta = 0.0
        for k in range(length - 1):
            x = self.tour[(start + k) % n]
            y = self.tour[(start + k + 1) % n]
            delta += w[y][x] - w[x][y]
        return delta

    def _reverse(self, start: int, end: int) -> None:
        n = self.n
        tour, pos = self.tour, self.pos
        length = (end - start) % n + 1
        for k in range(length // 2):
            x = (start + k) % n
            y = (end - k) % n
            tour[x], tour[y] = tour[y], tour[x]
            pos[tour[x]] = x
            pos[tour[y]] = y

    def _apply(self, start: int, end: int) -> None:
        self._reverse(start, end)
        self._log.append((start, end))

    def _rollback(self, mark: int) -> None:
        while len(self._log) > mark:
            start, end = self._log.pop()
            self._reverse(start, end)

    # -- edge breaking -------------------------------------------------------

    def _break_edges(self, i: int) -> Optional[Tour]:
        max_len = min(self.cfg.max_break_depth, self.n - 2)
        if max_len < 1:
            return None
        s0 = self.tour[i]
        return self._grow_segment(i, 1, max_len, self.cfg.gain_threshold, 0.0, 0.0, {s0})

    def _grow_segment(
        self,
        i: int,
        length: int,
        max_len: int,
        best_gain: float,
        forward: float,
        backward: float,
        inside: Set[int],
    ) -> Optional[Tour]:
        """
        Break ``(p, s0)``, ``(sl, q)`` around the segment ``tour[i:i+length]``
        and one edge ``(x, y)`` elsewhere, then relink as ``(p, q)`` plus the
        segment spliced between ``x`` and ``y``. The segment grows by one
        vertex per level until a relink beats ``best_gain``.
        """
        n = self.n
        tour, pos, w = self.tour, self.pos, self.search_weights
        s0 = tour[i]
        sl = tour[(i + length - 1) % n]
        p = tour[(i - 1) % n]
        q = tour[(i + length) % n]
        removed = w[p][s0] + w[sl][q] - w[p][q]

        for y in self.candidates[sl]:
            x = tour[(pos[y] - 1) % n]
            if y in inside or x in inside or x == p:
                continue
            gain = removed + w[x][y] - w[x][s0] - w[sl][y]
            if gain > best_gain:
                relinked = self._relink(i, length, x, reverse=False)
                if relinked is not None:
                    return relinked

        for y in self.candidates[s0]:
            x = tour[(pos[y] - 1) % n]
            if y in inside or x in inside or x == p:
                continue
            gain = removed + w[x][y] - w[x][sl] - w[s0][y] - (backward - forward)
            if gain > best_gain:
                relinked = self._relink(i, length, x, reverse=True)
                if relinked is not None:
                    return relinked

        if length >= max_len:
            return None
        inside.add(q)
        found = self._grow_segment(
            i, length + 1, max_len, best_gain, forward + w[sl][q], backward + w[q][sl], inside
        )
        inside.discard(q)
        return found

    def _relink(self, i: int, length: int, x: int, reverse: bool) -> Optional[Tour]:
        n = self.n
        segment = [self.tour[(i + k) % n] for k in range(length)]
        rest = [self.tour[(i + length + k) % n] for k in range(n - length)]
        if reverse:
            segment.reverse()
        at = rest.index(x) + 1
        relinked = rest[:at] + segment + rest[at:]
        if not is_permutation(relinked, n):
            logger.error("relink at position %d produced an invalid tour; discarded", i)
            return None
        return relinked
