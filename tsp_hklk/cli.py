import argparse
import logging
import time
from typing import List, Optional

import matplotlib

from .builders import dense_graph, label_edges, random_complete
from .data import load_tsplib
from .evaluation import benchmark, evaluate_solver, series
from .graphs import GraphError
from .solvers import SOLVERS, HeldKarpSolver, LinKernighanConfig, LinKernighanSolver


LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _build_solver(args, graph):
    if args.solver == "held-karp":
        return HeldKarpSolver(graph)
    cfg = LinKernighanConfig(random_seed=args.seed)
    if args.restarts is not None:
        cfg.max_restarts = args.restarts
    if args.kicks is not None:
        cfg.max_kicks = args.kicks
    return LinKernighanSolver(graph, cfg)


def solve(args) -> None:
    optimum = None
    if args.tsplib:
        instance = load_tsplib(args.tsplib, dense=args.dense)
        graph = instance.graph
        optimum = instance.optimum
        log(f"loaded {instance.name} ({graph.vertex_count()} vertices)")
    else:
        graph = random_complete(args.random, seed=args.seed, symmetric=args.symmetric, dense=args.dense)
        log(f"generated random complete graph with {graph.vertex_count()} vertices")
    result = evaluate_solver(_build_solver(args, graph), optimum=optimum)
    print("tour:", " -> ".join(map(str, result.tour)))
    print(f"cost: {result.length:.6g}")
    print(f"runtime: {result.runtime:.4f}s")
    if optimum is not None:
        print(f"gap: {result.gap:.4%}")


def bench(args) -> None:
    sizes = range(args.start, args.stop + 1, args.step)
    log(f"benchmarking sizes {args.start}..{args.stop} step {args.step}")
    rows = benchmark(
        sizes,
        lambda n: _labelled_dense(n, args.dense),
        SOLVERS,
        limits={"held-karp": args.held_karp_limit},
    )
    for row in rows:
        timings = " | ".join(f"{name}: {secs * 1000:.1f}ms" for name, secs in row.runtimes.items())
        print(f"Vertices: {row.vertices} | {timings}")
    if args.chart:
        matplotlib.use("Agg")
        from .plotting import runtime_chart

        path = runtime_chart(
            {name: series(rows, name) for name in SOLVERS},
            "Lin-Kernighan vs Held-Karp performance",
            args.chart,
        )
        log(f"chart written to {path}")


def _labelled_dense(n: int, dense: bool):
    graph = dense_graph(n, dense=dense)
    label_edges(graph)
    return graph


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tsp-hklk", description="Held-Karp and Lin-Kernighan TSP solvers")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="Solve a single instance")
    source = solve_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--tsplib", help="Path to a TSPLIB .tsp file")
    source.add_argument("--random", type=int, help="Size of a random complete graph")
    solve_parser.add_argument("--solver", choices=sorted(SOLVERS), default="lin-kernighan")
    solve_parser.add_argument("--seed", type=int, default=None)
    solve_parser.add_argument("--symmetric", action="store_true", help="Symmetric weights for --random")
    solve_parser.add_argument("--dense", action="store_true", help="Use the matrix graph store")
    solve_parser.add_argument("--restarts", type=int, default=None, help="Lin-Kernighan restarts")
    solve_parser.add_argument("--kicks", type=int, default=None, help="Double-bridge kicks per restart")
    solve_parser.set_defaults(func=solve)

    bench_parser = subparsers.add_parser("benchmark", help="Time both solvers on growing dense graphs")
    bench_parser.add_argument("--start", type=int, default=1)
    bench_parser.add_argument("--stop", type=int, default=12)
    bench_parser.add_argument("--step", type=int, default=1)
    bench_parser.add_argument("--held-karp-limit", type=int, default=14)
    bench_parser.add_argument("--dense", action="store_true", help="Use the matrix graph store")
    bench_parser.add_argument("--chart", default=None, help="Write a PNG runtime chart here")
    bench_parser.set_defaults(func=bench)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)
    try:
        args.func(args)
    except (GraphError, ValueError, OSError) as exc:
        parser.error(str(exc))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
