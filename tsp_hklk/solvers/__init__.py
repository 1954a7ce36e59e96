from .base import INVALID_COST, Solver, SolveResult, Tour, is_permutation, tour_cost
from .brute_force import brute_force_cost, brute_force_tour
from .held_karp import HeldKarpSolver, State, held_karp
from .lin_kernighan import LinKernighanConfig, LinKernighanSolver

SOLVERS = {
    "held-karp": HeldKarpSolver,
    "lin-kernighan": LinKernighanSolver,
}

__all__ = [
    "INVALID_COST",
    "Solver",
    "SolveResult",
    "Tour",
    "is_permutation",
    "tour_cost",
    "brute_force_cost",
    "brute_force_tour",
    "HeldKarpSolver",
    "State",
    "held_karp",
    "LinKernighanConfig",
    "LinKernighanSolver",
    "SOLVERS",
]
