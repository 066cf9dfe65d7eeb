import math
import operator
import os
import typing as t

import numpy as np
import scipy.sparse


class Edge(t.NamedTuple):
    src: int
    dst: int
    weight: float

    def other(self, vertex: int) -> int:
        """Return the endpoint opposite to ``vertex``."""
        if vertex == self.src:
            return self.dst
        if vertex == self.dst:
            return self.src
        raise ValueError(f"Vertex {vertex} is not an endpoint of {self}.")


class Graph:
    """Undirected weighted graph stored as per-vertex lists of incident edges.

    The same ``Edge`` value is stored in the lists of both endpoints.
    """

    def __init__(self, num_vertices: int):
        if num_vertices < 0:
            raise ValueError(f"Number of vertices must be non-negative, got {num_vertices=}.")

        self.num_vertices = int(num_vertices)
        self.adjacency: t.List[t.List[Edge]] = [[] for _ in range(self.num_vertices)]
        self.num_edges = 0

    @classmethod
    def from_edges(cls, num_vertices: int, edges: t.Iterable[t.Tuple[int, int, float]]) -> "Graph":
        graph = cls(num_vertices)
        for src, dst, weight in edges:
            graph.add_edge(src, dst, weight)
        return graph

    def add_edge(self, src: int, dst: int, weight: float) -> Edge:
        try:
            src, dst = operator.index(src), operator.index(dst)
        except TypeError:
            raise ValueError(f"Vertex ids must be integers, got {src=}, {dst=}.") from None

        for vertex in (src, dst):
            if not 0 <= vertex < self.num_vertices:
                raise ValueError(f"Vertex {vertex} out of range for a graph with {self.num_vertices} vertices.")

        weight = float(weight)
        if not math.isfinite(weight) or weight < 0.0:
            raise ValueError(f"Edge weights must be finite and non-negative, got {weight=}.")

        edge = Edge(src, dst, weight)
        self.adjacency[src].append(edge)
        if src != dst:
            self.adjacency[dst].append(edge)
        self.num_edges += 1
        return edge

    def edges(self) -> t.Iterator[Edge]:
        """Iterate over every edge once."""
        for vertex, incident in enumerate(self.adjacency):
            for edge in incident:
                if edge.src == vertex:
                    yield edge

    def to_csgraph(self) -> scipy.sparse.csr_matrix:
        """Sparse upper-triangular weight matrix for ``scipy.sparse.csgraph``.

        Keeps the lightest edge of each vertex pair and drops self-loops.
        csgraph reads zeros as missing edges, so zero weights are stored as the
        smallest positive float instead.
        """
        lightest: t.Dict[t.Tuple[int, int], float] = {}
        for edge in self.edges():
            if edge.src == edge.dst:
                continue
            pair = (min(edge.src, edge.dst), max(edge.src, edge.dst))
            lightest[pair] = min(edge.weight, lightest.get(pair, np.inf))

        n = self.num_vertices
        if not lightest:
            return scipy.sparse.csr_matrix((n, n), dtype=np.float64)

        rows, cols = (np.asarray(col, dtype=int) for col in zip(*lightest.keys()))
        weights = np.fromiter(lightest.values(), dtype=np.float64, count=len(lightest))
        np.maximum(weights, np.finfo(np.float64).tiny, out=weights)
        return scipy.sparse.csr_matrix((weights, (rows, cols)), shape=(n, n))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(num_vertices={self.num_vertices}, num_edges={self.num_edges})"


class GraphFormatError(ValueError):
    pass


class InvalidGraphSizeError(GraphFormatError):
    pass


class InvalidVertexError(GraphFormatError):
    pass


class InvalidWeightError(GraphFormatError):
    pass


class IncompleteEdgeError(GraphFormatError):
    pass


def _is_unsigned_int(token: str) -> bool:
    return token.isascii() and token.isdigit()


def _parse_vertex(token: str, num_vertices: int, edge_num: int, role: str) -> int:
    if not _is_unsigned_int(token) or int(token) >= num_vertices:
        raise InvalidVertexError(f"Invalid {role} vertex number {token!r} in edge {edge_num}.")
    return int(token)


def _parse_weight(token: str, edge_num: int) -> float:
    # NOTE: only plain non-negative decimals, no sign, exponent or inf/nan.
    if not token or token.strip(".0123456789") or token.count(".") > 1 or token == ".":
        raise InvalidWeightError(f"Invalid weight {token!r} in edge {edge_num}.")

    value = float(token)
    if not math.isfinite(value):
        raise InvalidWeightError(f"Invalid weight {token[:20]!r}... in edge {edge_num}: too large.")
    return value


def parse_graph(text: str) -> Graph:
    """Build a graph from the whitespace separated ``N (src dst weight)*`` format.

    The whole input is validated before the graph is constructed.
    """
    tokens = text.split()

    if not tokens or not _is_unsigned_int(tokens[0]):
        size = tokens[0] if tokens else ""
        raise InvalidGraphSizeError(f"Invalid graph size {size!r}.")

    num_vertices = int(tokens[0])
    edge_tokens = tokens[1:]

    if len(edge_tokens) % 3:
        raise IncompleteEdgeError(
            f"Edge {len(edge_tokens) // 3} is incomplete: {edge_tokens[-(len(edge_tokens) % 3):]!r}."
        )

    edges = []
    for edge_num, i in enumerate(range(0, len(edge_tokens), 3)):
        src, dst, weight = edge_tokens[i : i + 3]
        edges.append(
            (
                _parse_vertex(src, num_vertices, edge_num, "source"),
                _parse_vertex(dst, num_vertices, edge_num, "dest"),
                _parse_weight(weight, edge_num),
            )
        )

    return Graph.from_edges(num_vertices, edges)


def load_graph(path: t.Union[str, os.PathLike]) -> Graph:
    # NOTE: undecodable bytes become U+FFFD and fail token validation.
    with open(path, "r", encoding="utf-8", errors="replace") as f_in:
        return parse_graph(f_in.read())
