import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Hashable, Iterable, List, Optional, Tuple

import networkx as nx
import tsplib95

from .graphs import GraphView, make_graph


logger = logging.getLogger(__name__)


@dataclass
class Instance:
    name: str
    path: Path
    graph: GraphView
    nodes: List[Hashable]
    optimum: Optional[float]


def _node_order(graph: nx.Graph) -> List[Hashable]:
    nodes = list(graph.nodes())
    try:
        return sorted(nodes)
    except TypeError:
        return nodes


def from_networkx(
    graph: nx.Graph, dense: bool = False, weight: str = "weight", default: float = 1.0
) -> Tuple[GraphView, List[Hashable]]:
    """
    Copy a networkx graph into a ``GraphView`` over ``0..n-1``.

    Returns the new graph and the original node labels in index order.
    Undirected edges are inserted in both directions; self-loops and
    non-positive weights are dropped.
    """
    nodes = _node_order(graph)
    idx_map = {node: i for i, node in enumerate(nodes)}
    out = make_graph(len(nodes), dense=dense)
    skipped = 0
    for u, v, w in graph.edges(data=weight, default=default):
        if u == v:
            continue
        if w is None or w <= 0:
            skipped += 1
            continue
        if graph.is_directed():
            out.add_edge(idx_map[u], idx_map[v], w)
        else:
            out.add_undirected_edge(idx_map[u], idx_map[v], w)
    if skipped:
        logger.warning("dropped %d edges with non-positive weight", skipped)
    return out, nodes


def to_networkx(graph: GraphView) -> nx.DiGraph:
    out = nx.DiGraph()
    out.add_nodes_from(range(graph.vertex_count()))
    out.add_weighted_edges_from(graph.all_edges())
    return out


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _read_dimension(path: Path) -> Optional[int]:
    try:
        with path.open("r") as f:
            for line in f:
                if "DIMENSION" in line.upper():
                    parts = line.replace(":", " ").split()
                    for token in parts:
                        if token.isdigit():
                            return int(token)
        return None
    except OSError:
        return None


def _load_optimum(problem, path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            nodes = list(tour_file.tours[0])
        except (IndexError, ValueError) as exc:
            logger.warning("could not read tour file %s: %s", candidate, exc)
            continue
        dist = 0.0
        for i in range(len(nodes)):
            a = nodes[i]
            b = nodes[(i + 1) % len(nodes)]
            dist += problem.get_weight(a, b)
        return float(dist)
    return None


def load_tsplib(path, dense: bool = True) -> Instance:
    path = Path(path)
    problem = tsplib95.load(path)
    graph, nodes = from_networkx(problem.get_graph(), dense=dense)
    optimum = _load_optimum(problem, path)
    logger.info("loaded %s: %d vertices, %d edges", problem.name, graph.vertex_count(), graph.edge_count())
    return Instance(name=problem.name or path.stem, path=path, graph=graph, nodes=nodes, optimum=optimum)


def load_tsplib_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None, dense: bool = True
) -> List[Instance]:
    instances: List[Instance] = []
    for p in sorted(Path(root).glob("*.tsp")):
        if max_nodes is not None:
            dim = _read_dimension(p)
            if dim is not None and dim > max_nodes:
                continue
        instances.append(load_tsplib(p, dense=dense))
        if max_instances is not None and len(instances) >= max_instances:
            break
    return instances
