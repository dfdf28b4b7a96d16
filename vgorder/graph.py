from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple

from Bio.Seq import reverse_complement

from vgorder.exceptions import InvalidOrderingError

logger = logging.getLogger(__name__)


class Handle(NamedTuple):
    """Reference to a node together with the strand it is read on."""

    node_id: int
    is_reverse: bool = False

    def flip(self) -> Handle:
        return Handle(self.node_id, not self.is_reverse)

    def __str__(self) -> str:
        return f"{self.node_id}{'-' if self.is_reverse else '+'}"


Edge = Tuple[Handle, Handle]


def canonical_edge(left: Handle, right: Handle) -> Edge:
    """
    Return the canonical form of the edge from the end of `left` to the start of `right`.

    The edge (a, b) and its reverse (b', a') describe the same bidirected
    edge; the smaller of the two tuples is used as the stored form.
    """
    return min((left, right), (right.flip(), left.flip()))


@dataclass
class Path:
    """A named walk through the graph."""

    name: str
    steps: List[Handle] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)

    def node_ids(self) -> Iterator[int]:
        return (step.node_id for step in self.steps)


class VariationGraph:
    """
    Bidirected sequence graph with embedded paths.

    Structure:
      - Nodes: insertion-ordered mapping node_id -> forward sequence. The
        mapping order is the native (storage) order of the graph.
      - Edges: canonical (Handle, Handle) pairs, plus an adjacency index
        mapping each oriented handle to the handles reachable from its end.
      - Paths: insertion-ordered mapping name -> Path.

    Only `apply_ordering`, `apply_path_ordering` and `optimize` rearrange
    storage; all three leave the graph untouched if their input is invalid.
    """

    __slots__ = ("_nodes", "_edges", "_adjacency", "_paths", "_rank_cache")

    def __init__(self) -> None:
        self._nodes: Dict[int, str] = {}
        self._edges: Dict[Edge, None] = {}
        self._adjacency: Dict[Handle, List[Handle]] = {}
        self._paths: Dict[str, Path] = {}
        self._rank_cache: Optional[Dict[int, int]] = None

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    def create_node(self, node_id: int, sequence: str = "") -> Handle:
        node_id = int(node_id)
        if node_id in self._nodes:
            raise ValueError(f"Node {node_id} already exists")
        self._nodes[node_id] = sequence
        self._rank_cache = None
        return Handle(node_id, False)

    def create_edge(self, left: Handle, right: Handle) -> Edge:
        """Connect the end of `left` to the start of `right`. Existing edges are kept once."""
        for handle in (left, right):
            if handle.node_id not in self._nodes:
                raise KeyError(f"Edge references unknown node {handle.node_id}")
        edge = canonical_edge(left, right)
        if edge not in self._edges:
            self._edges[edge] = None
            self._index_edge(edge)
        return edge

    def create_path(self, name: str, steps: Iterable[Handle]) -> Path:
        if name in self._paths:
            raise ValueError(f"Path {name!r} already exists")
        steps = [Handle(int(s.node_id), bool(s.is_reverse)) for s in steps]
        for step in steps:
            if step.node_id not in self._nodes:
                raise KeyError(f"Path {name!r} references unknown node {step.node_id}")
        path = Path(name, steps)
        self._paths[name] = path
        return path

    def _index_edge(self, edge: Edge) -> None:
        left, right = edge
        self._adjacency.setdefault(left, []).append(right)
        # A reversing self loop (h, h') is its own reverse.
        if (right.flip(), left.flip()) != edge:
            self._adjacency.setdefault(right.flip(), []).append(left.flip())

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #
    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def path_count(self) -> int:
        return len(self._paths)

    def has_node(self, node_id: int) -> bool:
        return node_id in self._nodes

    def get_sequence(self, handle: Handle | int) -> str:
        """Sequence of a node, reverse complemented when read through a reverse handle."""
        if isinstance(handle, Handle):
            sequence = self._nodes[handle.node_id]
            return reverse_complement(sequence) if handle.is_reverse else sequence
        return self._nodes[handle]

    def node_ids(self) -> List[int]:
        """Node ids in native order."""
        return list(self._nodes)

    def handles(self) -> Iterator[Handle]:
        """Forward handles of all nodes in native order."""
        return (Handle(node_id, False) for node_id in self._nodes)

    def rank(self, node_id: int) -> int:
        """0-based position of a node in native order."""
        if self._rank_cache is None:
            self._rank_cache = {node_id: i for i, node_id in enumerate(self._nodes)}
        return self._rank_cache[node_id]

    def follow_edges(self, handle: Handle, go_left: bool = False) -> List[Handle]:
        """
        Return the handles adjacent to one side of `handle`.

        go_left=False: handles that can follow `handle` (its right side).
        go_left=True : handles that can precede `handle` (its left side).
        """
        if go_left:
            return [h.flip() for h in self._adjacency.get(handle.flip(), ())]
        return list(self._adjacency.get(handle, ()))

    def edges(self) -> List[Edge]:
        return list(self._edges)

    def has_edge(self, left: Handle, right: Handle) -> bool:
        return canonical_edge(left, right) in self._edges

    def heads(self) -> List[Handle]:
        """Forward handles with nothing on their left side."""
        return [h for h in self.handles() if not self._adjacency.get(h.flip())]

    def tails(self) -> List[Handle]:
        """Forward handles with nothing on their right side."""
        return [h for h in self.handles() if not self._adjacency.get(h)]

    def directed_node_edges(self) -> List[Tuple[int, int]]:
        """
        Project every edge onto a directed (source, target) node pair.

        Each edge is read in the representation whose left handle is forward,
        so plain forward edges keep their direction and edges between two
        reverse handles point the other way.
        """
        pairs = []
        for left, right in self._edges:
            if left.is_reverse:
                left, right = right.flip(), left.flip()
            pairs.append((left.node_id, right.node_id))
        return pairs

    def paths(self) -> List[Path]:
        return list(self._paths.values())

    def path_names(self) -> List[str]:
        return list(self._paths)

    def get_path(self, name: str) -> Path:
        return self._paths[name]

    def get_path_sequence(self, name: str) -> str:
        return "".join(self.get_sequence(step) for step in self._paths[name].steps)

    # ------------------------------------------------------------------ #
    # Reordering
    # ------------------------------------------------------------------ #
    def apply_ordering(
        self, ordering: Iterable[Handle], canonicalize_orientation: bool = False
    ) -> None:
        """
        Rearrange node storage so that native iteration yields `ordering`.

        Node ids, sequences, edges and path traversals keep their meaning. If
        `canonicalize_orientation` is set, every node ordered through a
        reverse handle has its stored strand flipped: its sequence becomes the
        reverse complement and all edge endpoints and path steps on it are
        flipped, so the graph spells the same sequences as before.

        Raises:
            InvalidOrderingError: If `ordering` is not a permutation of the
                graph's nodes. The graph is left unchanged.
        """
        ordering = list(ordering)
        validate_ordering(self, ordering)

        flipped: Set[int] = (
            {h.node_id for h in ordering if h.is_reverse}
            if canonicalize_orientation
            else set()
        )

        def relabel(handle: Handle) -> Handle:
            return handle.flip() if handle.node_id in flipped else handle

        nodes = {}
        for handle in ordering:
            sequence = self._nodes[handle.node_id]
            nodes[handle.node_id] = (
                reverse_complement(sequence) if handle.node_id in flipped else sequence
            )
        rank = {node_id: i for i, node_id in enumerate(nodes)}

        edges = [canonical_edge(relabel(a), relabel(b)) for a, b in self._edges]
        paths = {
            name: Path(name, [relabel(step) for step in path.steps])
            for name, path in self._paths.items()
        }

        self._nodes = nodes
        self._rank_cache = rank
        self._paths = paths
        self._rebuild_edges(edges)
        if flipped:
            logger.debug("Flipped stored orientation of %d nodes", len(flipped))

    def apply_path_ordering(self, path_names: Iterable[str]) -> None:
        """Rearrange the path list to `path_names`. Path steps are untouched."""
        path_names = list(path_names)
        if len(path_names) != len(self._paths) or set(path_names) != set(self._paths):
            raise InvalidOrderingError(
                "Path ordering must name every path of the graph exactly once"
            )
        self._paths = {name: self._paths[name] for name in path_names}

    def optimize(self) -> None:
        """Compact node ids to 1..N in native order, rewriting edges and paths."""
        mapping = {old: new for new, old in enumerate(self._nodes, start=1)}

        def relabel(handle: Handle) -> Handle:
            return Handle(mapping[handle.node_id], handle.is_reverse)

        nodes = {mapping[node_id]: seq for node_id, seq in self._nodes.items()}
        edges = [canonical_edge(relabel(a), relabel(b)) for a, b in self._edges]
        paths = {
            name: Path(name, [relabel(step) for step in path.steps])
            for name, path in self._paths.items()
        }
        self._nodes = nodes
        self._rank_cache = None
        self._paths = paths
        self._rebuild_edges(edges)

    def _rebuild_edges(self, edges: Iterable[Edge]) -> None:
        self._edges = {}
        self._adjacency = {}
        for edge in edges:
            if edge not in self._edges:
                self._edges[edge] = None
                self._index_edge(edge)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #
    def __repr__(self) -> str:
        return (
            f"VariationGraph(nodes={self.node_count}, "
            f"edges={self.edge_count}, paths={self.path_count})"
        )


def validate_ordering(graph: VariationGraph, ordering: Iterable[Handle]) -> None:
    """
    Check that `ordering` names every node of `graph` exactly once.

    Orientation is ignored; only node membership is checked.

    Raises:
        InvalidOrderingError: With the unknown, duplicate and missing node ids.
    """
    seen: Set[int] = set()
    unknown: List[int] = []
    duplicates: List[int] = []
    for handle in ordering:
        node_id = handle.node_id
        if not graph.has_node(node_id):
            unknown.append(node_id)
        elif node_id in seen:
            duplicates.append(node_id)
        else:
            seen.add(node_id)
    if unknown or duplicates or len(seen) != graph.node_count:
        missing = [node_id for node_id in graph.node_ids() if node_id not in seen]
        InvalidOrderingError.raise_for(unknown, duplicates, missing)
