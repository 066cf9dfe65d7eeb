import sys
import typing as t

from .core import BestEdges, forest_edges, total_weight


def format_edge(src: int, dst: int, weight: float) -> str:
    return f"{src:04d}-{dst:04d} ({weight:.5f})"


def format_mst(best_edge: BestEdges) -> str:
    """Render the forest one edge per line, in vertex order, followed by its total weight."""
    lines = [format_edge(*edge) for edge in forest_edges(best_edge)]
    lines.append(f"{total_weight(best_edge):.5f}")
    return "\n".join(lines)


def print_mst(best_edge: BestEdges, file: t.Optional[t.TextIO] = None) -> None:
    print(format_mst(best_edge), file=file if file is not None else sys.stdout)
