"""Dense O(V^2) variant of Prim's MST, kept as an independent cross-check.

No priority queue: every step scans all vertices for the closest one outside
the tree. Restarted from every unreached vertex so that disconnected graphs
yield a spanning forest.
"""

import typing as t

import numpy as np
import numpy.typing as npt

from .graph import Edge, Graph


def dense_weights(graph: Graph) -> t.Tuple[npt.NDArray[np.float64], t.List[t.List[t.Optional[Edge]]]]:
    """Lightest weight between every pair of vertices (+inf when not adjacent)."""
    n = graph.num_vertices
    weights = np.full((n, n), fill_value=np.inf)
    lightest: t.List[t.List[t.Optional[Edge]]] = [[None] * n for _ in range(n)]

    for edge in graph.edges():
        if edge.src == edge.dst:
            continue
        if edge.weight < weights[edge.src, edge.dst]:
            weights[edge.src, edge.dst] = weights[edge.dst, edge.src] = edge.weight
            lightest[edge.src][edge.dst] = lightest[edge.dst][edge.src] = edge

    return weights, lightest


def prim_mst(graph: Graph) -> t.List[t.Optional[Edge]]:
    n = graph.num_vertices
    weights, lightest = dense_weights(graph)

    intree = np.full(n, fill_value=False)
    d = np.full(n, fill_value=np.inf)
    parent = np.full(n, fill_value=-1, dtype=int)
    best_edge: t.List[t.Optional[Edge]] = [None] * n

    for ind_root in range(n):
        if intree[ind_root]:
            continue

        d[ind_root] = 0.0
        v = ind_root

        while v is not None:
            intree[v] = True
            dist = np.inf
            next_v = None

            for w in np.flatnonzero(~intree):
                if d[w] > weights[v, w]:
                    d[w] = weights[v, w]
                    parent[w] = v

                if dist > d[w]:
                    dist = d[w]
                    next_v = w

            if next_v is not None:
                best_edge[next_v] = lightest[parent[next_v]][next_v]

            v = next_v

    return best_edge
