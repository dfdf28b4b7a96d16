import logging
from collections import Counter
from typing import Iterable, List, Tuple, Union

from vgorder.exceptions import GFAParseError
from vgorder.graph import Handle, VariationGraph

logger = logging.getLogger(__name__)

ORIENTATIONS = {"+": False, "-": True}


# ===================================================================
# 1. FIELD PARSING FUNCTIONS
# ===================================================================


def parse_node_id(token: str, line_number: int) -> int:
    """
    Parse a segment name as an integer node id.

    Args:
        token: Segment name as found in the file
        line_number: 1-based line number for error reporting

    Returns:
        The node id

    Raises:
        GFAParseError: If the name is not a positive integer
    """
    try:
        node_id = int(token)
    except ValueError:
        raise GFAParseError(f"segment name {token!r} is not an integer id", line_number)
    if node_id < 1:
        raise GFAParseError(f"node id {node_id} must be positive", line_number)
    return node_id


def parse_orientation(token: str, line_number: int) -> bool:
    try:
        return ORIENTATIONS[token]
    except KeyError:
        raise GFAParseError(f"invalid orientation {token!r}", line_number)


def parse_step(token: str, line_number: int) -> Handle:
    """Parse a path step such as '12+' or '7-'."""
    if len(token) < 2:
        raise GFAParseError(f"invalid path step {token!r}", line_number)
    return Handle(
        parse_node_id(token[:-1], line_number),
        parse_orientation(token[-1], line_number),
    )


# ===================================================================
# 2. RECORD PARSING FUNCTIONS
# ===================================================================


def _expect_fields(fields: List[str], count: int, line_number: int) -> None:
    if len(fields) < count:
        raise GFAParseError(
            f"{fields[0]} record needs at least {count} fields, got {len(fields)}",
            line_number,
        )


def parse_segment(fields: List[str], line_number: int) -> Tuple[int, str]:
    _expect_fields(fields, 3, line_number)
    sequence = fields[2]
    return parse_node_id(fields[1], line_number), "" if sequence == "*" else sequence


def parse_link(fields: List[str], line_number: int) -> Tuple[Handle, Handle]:
    _expect_fields(fields, 5, line_number)
    left = Handle(
        parse_node_id(fields[1], line_number), parse_orientation(fields[2], line_number)
    )
    right = Handle(
        parse_node_id(fields[3], line_number), parse_orientation(fields[4], line_number)
    )
    return left, right


def parse_path(fields: List[str], line_number: int) -> Tuple[str, List[Handle]]:
    _expect_fields(fields, 3, line_number)
    steps = [parse_step(tok, line_number) for tok in fields[2].split(",") if tok]
    return fields[1], steps


# ===================================================================
# 3. PUBLIC API FUNCTIONS
# ===================================================================


def parse_gfa(source: Union[str, Iterable[str]]) -> VariationGraph:
    """
    Parse GFA 1 text into a VariationGraph.

    Segments (S), links (L) and paths (P) are read; header (H) and comment
    lines are skipped. Other record types, such as walks (W), are dropped with
    a warning. Optional tags are not kept and link overlaps are not stored;
    to_gfa writes every link with a 0M overlap. Segment names must be integer
    ids. Links and paths may precede the segments they reference.

    Args:
        source: GFA text, or an iterable of lines

    Returns:
        The parsed graph, nodes in file order

    Raises:
        GFAParseError: On malformed records, duplicate segments or references
            to undefined segments
    """
    lines = source.splitlines() if isinstance(source, str) else source

    graph = VariationGraph()
    links: List[Tuple[int, Tuple[Handle, Handle]]] = []
    paths: List[Tuple[int, Tuple[str, List[Handle]]]] = []
    ignored: Counter = Counter()

    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line or line.startswith("#"):
            continue
        fields = line.split("\t")
        record = fields[0]
        if record == "S":
            node_id, sequence = parse_segment(fields, line_number)
            if graph.has_node(node_id):
                raise GFAParseError(f"duplicate segment {node_id}", line_number)
            graph.create_node(node_id, sequence)
        elif record == "L":
            links.append((line_number, parse_link(fields, line_number)))
        elif record == "P":
            paths.append((line_number, parse_path(fields, line_number)))
        elif record != "H":
            ignored[record] += 1

    for line_number, (left, right) in links:
        try:
            graph.create_edge(left, right)
        except KeyError as exc:
            raise GFAParseError(str(exc.args[0]), line_number) from exc

    for line_number, (name, steps) in paths:
        try:
            graph.create_path(name, steps)
        except (KeyError, ValueError) as exc:
            raise GFAParseError(str(exc.args[0]), line_number) from exc

    for record, count in sorted(ignored.items()):
        logger.warning("Ignoring %d unsupported GFA %s record(s)", count, record)
    logger.info("Loaded %r", graph)
    return graph


def to_gfa(graph: VariationGraph) -> str:
    """Serialize a graph to GFA 1 text in native storage order."""
    lines = ["H\tVN:Z:1.0"]
    for node_id in graph.node_ids():
        lines.append(f"S\t{node_id}\t{graph.get_sequence(node_id) or '*'}")
    for left, right in graph.edges():
        lines.append(
            f"L\t{left.node_id}\t{'-' if left.is_reverse else '+'}\t"
            f"{right.node_id}\t{'-' if right.is_reverse else '+'}\t0M"
        )
    for path in graph.paths():
        steps = ",".join(str(step) for step in path.steps)
        lines.append(f"P\t{path.name}\t{steps}\t*")
    return "\n".join(lines) + "\n"
