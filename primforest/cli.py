import argparse
import logging
import sys
import typing as t

from .core import prim_mst
from .graph import GraphFormatError, load_graph
from .printer import print_mst


LOGGER = logging.getLogger(__name__)


def _n_processes(value: str) -> t.Union[int, str]:
    if value == "auto":
        return value
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer or 'auto', got {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer or 'auto', got {value!r}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="primforest", description="Minimum spanning forest with Prim's algorithm")
    parser.add_argument("graph", help="Graph file: vertex count followed by 'src dst weight' triples")
    parser.add_argument("--n-processes", type=_n_processes, default=1, help="Worker processes, or 'auto'")
    parser.add_argument("--check-heap-order", action="store_true", help="Validate the priority queue after every update")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def main(argv: t.Optional[t.Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s:%(levelname)s:%(name)s:%(message)s",
    )
    LOGGER.info("Arguments: %s", args)

    try:
        graph = load_graph(args.graph)
    except OSError as err:
        print(f"Error: cannot open file {args.graph}: {err.strerror or err}", file=sys.stderr)
        return 1
    except GraphFormatError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    LOGGER.info("Loaded %r from %s.", graph, args.graph)

    best_edge = prim_mst(graph, n_processes=args.n_processes, check_heap_order=args.check_heap_order)
    print_mst(best_edge)

    return 0


if __name__ == "__main__":
    sys.exit(main())
