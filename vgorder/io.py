import sys
from pathlib import Path
from typing import IO, Iterable, List, Union

from vgorder.exceptions import GFAParseError, OrderFileError
from vgorder.graph import Handle, VariationGraph, validate_ordering
from vgorder.parser.gfa_parser import parse_gfa, to_gfa

PathLike = Union[str, Path]

STDIO = "-"


def read_gfa(path: PathLike) -> VariationGraph:
    """Load a graph from a GFA file, or from standard input when path is '-'."""
    try:
        if str(path) == STDIO:
            return parse_gfa(sys.stdin)
        with open(path, encoding="utf-8") as f:
            return parse_gfa(f)
    except UnicodeDecodeError as exc:
        raise GFAParseError(f"{path} is not a text file: {exc.reason}") from exc


def write_gfa(graph: VariationGraph, path: PathLike) -> None:
    """Write a graph as GFA to a file, or to standard output when path is '-'."""
    text = to_gfa(graph)
    if str(path) == STDIO:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    with open(path, mode="w", encoding="utf-8") as f:
        f.write(text)


def parse_order(lines: Iterable[str], graph: VariationGraph) -> List[Handle]:
    """
    Parse newline separated node ids into a full ordering of `graph`.

    The first id becomes the first node of the new order. Blank lines are
    ignored. All ids are read as forward handles.

    Raises:
        OrderFileError: On a line that is not an integer.
        InvalidOrderingError: If the ids are not a permutation of the graph's nodes.
    """
    order: List[Handle] = []
    for line_number, line in enumerate(lines, start=1):
        token = line.strip()
        if not token:
            continue
        try:
            node_id = int(token)
        except ValueError:
            raise OrderFileError(
                f"line {line_number}: {token!r} is not an integer node id"
            )
        order.append(Handle(node_id, False))
    validate_ordering(graph, order)
    return order


def read_order(path: PathLike, graph: VariationGraph) -> List[Handle]:
    """Read an order file; see `parse_order`."""
    try:
        with open(path, encoding="utf-8") as f:
            return parse_order(f, graph)
    except OSError as exc:
        raise OrderFileError(f"cannot read order file {path}: {exc.strerror}") from exc
    except UnicodeDecodeError as exc:
        raise OrderFileError(f"order file {path} is not a text file: {exc.reason}") from exc


def write_order(node_ids: Iterable[int], stream: IO[str]) -> None:
    for node_id in node_ids:
        stream.write(f"{node_id}\n")
