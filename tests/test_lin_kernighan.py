import math
import unittest

from tsp_hklk.builders import circle_graph, complete_graph, random_complete, ring_graph
from tsp_hklk.graphs import AdjacencyGraph, MatrixGraph
from tsp_hklk.solvers import (
    INVALID_COST,
    HeldKarpSolver,
    LinKernighanConfig,
    LinKernighanSolver,
    brute_force_cost,
    is_permutation,
)


def run_lk(graph, seed=7, **overrides):
    solver = LinKernighanSolver(graph, LinKernighanConfig(random_seed=seed), **overrides)
    solver.run()
    return solver


class TestLinKernighanTours(unittest.TestCase):
    def assertFullTour(self, solver, n):
        tour = solver.get_tour()
        self.assertEqual(len(tour), n)
        self.assertTrue(is_permutation(tour, n))

    def test_single_vertex(self):
        g = AdjacencyGraph(1)
        solver = run_lk(g)
        self.assertEqual(solver.get_tour(), [0])
        self.assertEqual(solver.tour_cost(solver.get_tour()), 0.0)
        self.assertEqual(g.vertex_count(), 1)
        self.assertEqual(g.edge_count(), 0)

    def test_two_vertices(self):
        g = AdjacencyGraph(2)
        g.add_edge(0, 1)
        solver = run_lk(g)
        self.assertFullTour(solver, 2)
        self.assertEqual(g.edge_count(), 1)

    def test_four_vertex_digraph(self):
        g = AdjacencyGraph(4)
        for x, y, w in [(0, 1, 10), (1, 2, 15), (2, 3, 20), (3, 0, 25), (0, 2, 30), (1, 3, 35)]:
            g.add_edge(x, y, w)
        solver = run_lk(g)
        self.assertFullTour(solver, 4)
        self.assertEqual(g.vertex_count(), 4)
        self.assertEqual(g.edge_count(), 6)

    def test_disconnected_graph_terminates(self):
        for graph_cls in (AdjacencyGraph, MatrixGraph):
            g = graph_cls(5)
            g.add_edge(0, 1)
            g.add_edge(1, 2)
            solver = run_lk(g)
            self.assertFullTour(solver, 5)
            self.assertEqual(g.edge_count(), 2)
            self.assertEqual(g.out(3), set())
            self.assertEqual(g.out(4), set())
            self.assertEqual(solver.tour_cost(solver.get_tour()), INVALID_COST)

    def test_identical_weights(self):
        g = ring_graph(3, lambda x, y: 10)
        solver = run_lk(g)
        self.assertFullTour(solver, 3)
        self.assertEqual(solver.tour_cost(solver.get_tour()), 30.0)

    def test_rings_of_growing_size(self):
        for n in (20, 50, 100):
            g = ring_graph(n, lambda x, y: (x + 1) * 10)
            solver = run_lk(g, max_restarts=2)
            self.assertFullTour(solver, n)
            self.assertEqual(g.edge_count(), n)

    def test_partial_dense_graph(self):
        g = AdjacencyGraph(50)
        for i in range(49):
            for j in range(i + 1, 10):
                g.add_edge(i, j, (i * 7 + j * 3) % 100 + 1)
        solver = run_lk(g, max_restarts=2)
        self.assertFullTour(solver, 50)
        self.assertEqual(g.edge_count(), 45)

    def test_random_graphs_give_permutations(self):
        for seed in range(4):
            g = random_complete(9, seed=seed, dense=bool(seed % 2))
            self.assertFullTour(run_lk(g, seed=seed), 9)


class TestLinKernighanQuality(unittest.TestCase):
    def test_optimal_on_points_on_a_circle(self):
        # With no crossing edges left the tour must follow the circle.
        for n in (6, 8, 10):
            for graph_cls_dense in (False, True):
                g = circle_graph(n, dense=graph_cls_dense)
                solver = run_lk(g, seed=n)
                optimum = brute_force_cost(g)
                cost = solver.tour_cost(solver.get_tour())
                self.assertLessEqual(abs(cost - optimum), 0.02 * optimum)
                self.assertAlmostEqual(cost, optimum, places=6)

    def test_matches_held_karp_on_circle(self):
        g = circle_graph(12)
        exact = HeldKarpSolver(g)
        exact.run()
        solver = run_lk(g, seed=3)
        self.assertAlmostEqual(solver.tour_cost(solver.get_tour()), exact.cost, places=6)

    def test_best_restart_is_kept(self):
        g = random_complete(10, seed=11, symmetric=True)
        solver = LinKernighanSolver(g, random_seed=5)
        start_cost = solver.tour_cost(solver.get_tour())
        solver.run()
        self.assertLessEqual(solver.tour_cost(solver.get_tour()), start_cost)

    def test_restarts_never_worse(self):
        g = random_complete(10, seed=2, symmetric=True)
        one = run_lk(g, seed=1, max_restarts=1)
        many = run_lk(g, seed=1, max_restarts=6)
        self.assertLessEqual(many.tour_cost(many.get_tour()), one.tour_cost(one.get_tour()))

    def test_same_seed_same_tour(self):
        g = random_complete(9, seed=4)
        self.assertEqual(run_lk(g, seed=21).get_tour(), run_lk(g, seed=21).get_tour())

    def test_close_to_optimum_on_random_digraphs(self):
        # Asymmetric weights, so reversal-based moves alone are not enough.
        cases = [(n, seed) for n in (5, 7, 9, 10) for seed in range(5)] + [(7, 7), (10, 9), (10, 12)]
        misses = []
        for n, seed in cases:
            g = random_complete(n, seed=seed)
            optimum = brute_force_cost(g)
            solver = run_lk(g, seed=seed)
            cost = solver.tour_cost(solver.get_tour())
            self.assertGreaterEqual(cost, optimum)
            if cost > 1.02 * optimum:
                misses.append((n, seed, cost, optimum))
        self.assertLessEqual(len(misses), 1, misses)


class TestLinKernighanInternals(unittest.TestCase):
    def test_config_overrides(self):
        g = complete_graph(4)
        solver = LinKernighanSolver(g, max_candidates=2, max_restarts=1)
        self.assertEqual(solver.cfg.max_candidates, 2)
        self.assertEqual(solver.cfg.max_restarts, 1)
        self.assertEqual(solver.cfg.max_depth, LinKernighanConfig().max_depth)
        self.assertEqual(LinKernighanSolver(g, max_kicks=0).cfg.max_kicks, 0)

    def test_candidates_are_nearest_finite_neighbours(self):
        g = AdjacencyGraph(6)
        for y, w in [(1, 5), (2, 1), (3, 4), (4, 2)]:
            g.add_edge(0, y, w)
        g.add_edge(0, 0, 1)
        solver = LinKernighanSolver(g, max_candidates=3)
        self.assertEqual(solver.candidates[0], [2, 4, 3])
        self.assertEqual(solver.candidates[5], [])

    def test_tour_cost_is_pure(self):
        g = random_complete(6, seed=9)
        solver = LinKernighanSolver(g, random_seed=0)
        tour = [3, 1, 0, 5, 2, 4]
        first = solver.tour_cost(tour)
        self.assertEqual(first, solver.tour_cost(tour))
        self.assertEqual(tour, [3, 1, 0, 5, 2, 4])
        expected = sum(g.weight(tour[i], tour[(i + 1) % 6]) for i in range(6))
        self.assertEqual(first, expected)

    def test_tour_cost_sentinel_for_missing_edge(self):
        g = ring_graph(4)
        solver = LinKernighanSolver(g, random_seed=0)
        with self.assertLogs("tsp_hklk.solvers.base", level="WARNING"):
            self.assertEqual(solver.tour_cost([0, 2, 1, 3]), INVALID_COST)
        self.assertEqual(solver.tour_cost([0, 1, 2, 3]), 4.0)
        self.assertFalse(math.isinf(INVALID_COST))

    def test_infeasible_run_warns_once(self):
        g = AdjacencyGraph(6)
        g.add_edge(0, 1)
        g.add_edge(1, 2)
        solver = LinKernighanSolver(g, random_seed=1, max_restarts=3)
        with self.assertLogs("tsp_hklk.solvers.base", level="WARNING") as logs:
            solver.run()
        self.assertEqual(len(logs.records), 1)

    def test_double_bridge_keeps_segment_direction(self):
        solver = LinKernighanSolver(complete_graph(9), random_seed=4)
        tour = list(range(9))
        kicked = solver._double_bridge(tour)
        self.assertTrue(is_permutation(kicked, 9))
        self.assertEqual(kicked[0], 0)
        self.assertNotEqual(kicked, tour)
        # four edges are replaced, the other five keep their direction
        succ = {kicked[i]: kicked[(i + 1) % 9] for i in range(9)}
        kept = [v for v in range(9) if succ[v] == (v + 1) % 9]
        self.assertEqual(len(kept), 5)
        self.assertEqual(solver._double_bridge([2, 0, 1]), [2, 0, 1])

    def test_edge_breaking_relinks_a_valid_cycle(self):
        g = ring_graph(6)
        solver = LinKernighanSolver(g, random_seed=0)
        solver._set_tour([0, 2, 1, 3, 4, 5])
        relinked = solver._break_edges(1)
        self.assertTrue(is_permutation(relinked, 6))
        self.assertEqual(solver.tour_cost(relinked), 6.0)

    def test_reversal_undo_restores_tour(self):
        g = complete_graph(7)
        solver = LinKernighanSolver(g, random_seed=0)
        solver._set_tour([0, 1, 2, 3, 4, 5, 6])
        solver._apply(5, 1)
        self.assertEqual(solver.tour, [6, 5, 2, 3, 4, 1, 0])
        self.assertEqual([solver.pos[v] for v in range(7)], [6, 5, 2, 3, 4, 1, 0])
        solver._rollback(0)
        self.assertEqual(solver.tour, [0, 1, 2, 3, 4, 5, 6])
        self.assertEqual(solver.pos, [0, 1, 2, 3, 4, 5, 6])


if __name__ == "__main__":
    unittest.main()
