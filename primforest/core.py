import functools
import logging
import multiprocessing
import typing as t

import numpy as np
import numpy.typing as npt
import scipy.sparse.csgraph

from .graph import Edge, Graph
from .index_min_pq import IndexMinPQ


LOGGER = logging.getLogger(__name__)

BestEdges = t.List[t.Optional[Edge]]


def grow_component(
    seed: int,
    adjacency: t.Sequence[t.Sequence[Edge]],
    pq: IndexMinPQ,
    dists: npt.NDArray[np.float64],
    visited: npt.NDArray[np.bool_],
    best_edge: BestEdges,
    check_heap_order: bool = False,
) -> int:
    """Grow the tree of ``seed``'s component, filling ``best_edge`` in place.

    Returns the number of vertices reached.
    """
    dists[seed] = 0.0
    pq.push(0.0, seed)
    n_reached = 0

    while pq:
        root = pq.pop()
        visited[root] = True
        n_reached += 1

        if check_heap_order:
            pq.check_invariants()

        for edge in adjacency[root]:
            adj = edge.other(root)

            if visited[adj]:
                continue

            if edge.weight < dists[adj]:
                dists[adj] = edge.weight
                best_edge[adj] = edge

                if pq.contains(adj):
                    pq.change_key(edge.weight, adj)
                else:
                    pq.push(edge.weight, adj)

                if check_heap_order:
                    pq.check_invariants()

    return n_reached


def _prim_mst_sequential(graph: Graph, check_heap_order: bool) -> BestEdges:
    n = graph.num_vertices
    pq = IndexMinPQ(n)
    dists = np.full(n, fill_value=np.inf)
    visited = np.full(n, fill_value=False)
    best_edge: BestEdges = [None] * n

    n_components = 0
    for v in range(n):
        if visited[v]:
            continue

        n_reached = grow_component(v, graph.adjacency, pq, dists, visited, best_edge, check_heap_order)
        n_components += 1
        LOGGER.debug("Component %d rooted at vertex %d spans %d vertices.", n_components, v, n_reached)

    LOGGER.info("Spanning forest of %d vertices has %d component(s).", n, n_components)
    return best_edge


def fn_component_best_edges(
    vertices: npt.NDArray[np.int_],
    incident: t.List[t.List[Edge]],
    check_heap_order: bool,
) -> t.List[t.Optional[int]]:
    """Run Prim on one component, relabelled to ``0..len(vertices)-1``.

    Returns, for every vertex of the component, the position of its best edge
    inside its own incidence list, or None for the component root.
    """
    local = {int(v): i for i, v in enumerate(vertices)}
    sub_graph = Graph(len(vertices))
    sub_graph.adjacency = [[Edge(local[e.src], local[e.dst], e.weight) for e in edges] for edges in incident]

    best_edge = _prim_mst_sequential(sub_graph, check_heap_order=check_heap_order)

    return [None if edge is None else sub_graph.adjacency[i].index(edge) for i, edge in enumerate(best_edge)]


def _prim_mst_parallel(graph: Graph, n_processes: int, check_heap_order: bool) -> BestEdges:
    n_components, labels = scipy.sparse.csgraph.connected_components(graph.to_csgraph(), directed=False)
    # NOTE: flatnonzero keeps vertex ids sorted, so each component is seeded at its smallest vertex.
    comp_vertices = [np.flatnonzero(labels == comp_id) for comp_id in range(n_components)]

    n_processes = min(n_processes, n_components)
    LOGGER.info("Growing %d component(s) with %d process(es).", n_components, n_processes)

    best_edge: BestEdges = [None] * graph.num_vertices

    with multiprocessing.Pool(processes=n_processes) as ppool:
        fn_component_best_edges_ = functools.partial(fn_component_best_edges, check_heap_order=check_heap_order)
        args = [(vertices, [graph.adjacency[v] for v in vertices]) for vertices in comp_vertices]

        for vertices, positions in zip(comp_vertices, ppool.starmap(fn_component_best_edges_, args)):
            for v, pos in zip(vertices, positions):
                if pos is not None:
                    best_edge[v] = graph.adjacency[v][pos]

    return best_edge


def prim_mst(
    graph: Graph,
    n_processes: t.Union[int, str] = 1,
    check_heap_order: bool = False,
) -> BestEdges:
    """Compute a minimum spanning forest with Prim's algorithm.

    Every connected component gets its own minimum spanning tree, grown from
    its smallest vertex id. Runs in O(E log V) using an indexed min-priority
    queue for decrease-key.

    Parameters
    ----------
    graph : Graph
        Undirected graph with non-negative edge weights.

    n_processes : int or "auto", default=1
        Maximum number of parallel processes. With 1, a single pass over all
        vertices shares one priority queue. With more, connected components
        are detected first and grown independently in a process pool, each
        with its own queue; the result is the same.
        If `n_processes="auto"`, 4 processes are used for graphs with more than
        10000 vertices, and 1 otherwise.

    check_heap_order : bool, default=False
        If set to True, validate the priority queue invariants after every
        queue update. Slow; meant for debugging only.

    Returns
    -------
    best_edge : list of Edge or None, of length graph.num_vertices
        ``best_edge[v]`` is the tree edge that attached vertex ``v`` to its
        tree, or None if ``v`` is the root of its component.
    """
    if n_processes == "auto":
        n_processes = 4 if graph.num_vertices > 10000 else 1

    if not isinstance(n_processes, (int, np.integer)) or n_processes < 1:
        raise ValueError(f"'n_processes' must be a positive integer or 'auto', got {n_processes=}.")

    if n_processes == 1 or graph.num_vertices == 0:
        return _prim_mst_sequential(graph, check_heap_order=check_heap_order)

    return _prim_mst_parallel(graph, n_processes=n_processes, check_heap_order=check_heap_order)


def forest_edges(best_edge: BestEdges) -> t.List[Edge]:
    return [edge for edge in best_edge if edge is not None]


def forest_roots(best_edge: BestEdges) -> t.List[int]:
    return [v for v, edge in enumerate(best_edge) if edge is None]


def total_weight(best_edge: BestEdges) -> float:
    return float(sum(edge.weight for edge in forest_edges(best_edge)))


def scipy_forest_weight(graph: Graph) -> float:
    """Weight of the minimum spanning forest according to scipy's implementation."""
    mst = scipy.sparse.csgraph.minimum_spanning_tree(graph.to_csgraph())
    return float(mst.sum())
