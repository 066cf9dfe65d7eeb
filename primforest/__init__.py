from .core import forest_edges, forest_roots, prim_mst, scipy_forest_weight, total_weight
from .graph import (
    Edge,
    Graph,
    GraphFormatError,
    IncompleteEdgeError,
    InvalidGraphSizeError,
    InvalidVertexError,
    InvalidWeightError,
    load_graph,
    parse_graph,
)
from .index_min_pq import (
    DuplicateIndexError,
    HeapInvariantError,
    IndexMinPQ,
    InvalidIndexError,
    MissingIndexError,
    PriorityQueueError,
    UnderflowError,
)
from .printer import format_mst, print_mst
