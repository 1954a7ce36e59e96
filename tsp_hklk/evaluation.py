import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Type

from .graphs import GraphView
from .solvers.base import SolveResult, Solver, tour_cost


logger = logging.getLogger(__name__)


def evaluate_solver(solver: Solver, optimum: Optional[float] = None) -> SolveResult:
    """Time ``solver.run()`` and score its tour against ``optimum`` when known."""
    start = time.perf_counter()
    solver.run()
    runtime = time.perf_counter() - start
    tour = solver.get_tour()
    length = tour_cost(solver.graph, tour)
    return SolveResult(
        tour=tour,
        length=length,
        solver_name=solver.name,
        optimum=optimum,
        runtime=runtime,
    )


@dataclass
class BenchmarkRow:
    vertices: int
    runtimes: Dict[str, float] = field(default_factory=dict)
    lengths: Dict[str, float] = field(default_factory=dict)


def benchmark(
    sizes: Iterable[int],
    builder: Callable[[int], GraphView],
    solvers: Dict[str, Type[Solver]],
    limits: Optional[Dict[str, int]] = None,
) -> List[BenchmarkRow]:
    """
    Run every solver on ``builder(n)`` for each size.

    ``limits`` caps the size a solver is run on (Held-Karp is exponential);
    larger sizes are skipped for that solver.
    """
    limits = limits or {}
    rows: List[BenchmarkRow] = []
    for n in sizes:
        graph = builder(n)
        row = BenchmarkRow(vertices=n)
        for name, solver_cls in solvers.items():
            if name in limits and n > limits[name]:
                continue
            result = evaluate_solver(solver_cls(graph))
            row.runtimes[name] = result.runtime
            row.lengths[name] = result.length
            logger.info("n=%d %s: %.4fs cost=%.6g", n, name, result.runtime, result.length)
        rows.append(row)
    return rows


def series(rows: List[BenchmarkRow], name: str) -> List[tuple]:
    return [(row.vertices, row.runtimes[name]) for row in rows if name in row.runtimes]
