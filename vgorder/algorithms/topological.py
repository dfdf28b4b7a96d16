import heapq
import logging
from collections import deque
from typing import Dict, Iterable, List, Set, Tuple

from tqdm import tqdm

from vgorder.exceptions import OrderingStrategyError
from vgorder.graph import Edge, Handle, VariationGraph, canonical_edge

logger = logging.getLogger(__name__)


# --- Handle-level topological sort for bidirected graphs ---


def _handle_topological_sort(
    graph: VariationGraph,
    seeds: Iterable[Handle],
    restart_reverse: bool = False,
    breadth_first: bool = False,
    progress: bool = False,
    desc: str = "topological sort",
) -> List[Handle]:
    """
    Kahn's algorithm over oriented handles.

    A handle becomes ready once every edge on its left side has been consumed.
    Ready handles are drained lowest storage rank first, or in the order they
    became ready when `breadth_first` is set. When nothing is ready (a cycle,
    or a component without seeds), the lowest-ranked unvisited node is seeded
    and the edges on its left side are dropped.
    """
    node_ids = graph.node_ids()
    rank = {node_id: i for i, node_id in enumerate(node_ids)}

    left_degree: Dict[Handle, int] = {}
    for node_id in node_ids:
        for is_reverse in (False, True):
            handle = Handle(node_id, is_reverse)
            left_degree[handle] = len(graph.follow_edges(handle, go_left=True))

    consumed: Set[Edge] = set()

    def consume(left: Handle, right: Handle) -> None:
        edge = canonical_edge(left, right)
        if edge in consumed:
            return
        consumed.add(edge)
        left_degree[right] -= 1
        # The same edge sits on the left side of the flipped left handle.
        if left.flip() != right:
            left_degree[left.flip()] -= 1

    heap: List[Tuple[int, Handle]] = []
    queue: deque = deque()

    def push(handle: Handle) -> None:
        if breadth_first:
            queue.append(handle)
        else:
            heapq.heappush(heap, (rank[handle.node_id], handle))

    def pop() -> Handle:
        return queue.popleft() if breadth_first else heapq.heappop(heap)[1]

    for seed in seeds:
        push(seed)

    visited: Set[int] = set()
    order: List[Handle] = []
    cursor = 0

    with tqdm(total=len(node_ids), desc=desc, disable=not progress) as bar:
        while len(order) < len(node_ids):
            if not heap and not queue:
                while node_ids[cursor] in visited:
                    cursor += 1
                seed = Handle(node_ids[cursor], restart_reverse)
                for prev in graph.follow_edges(seed, go_left=True):
                    consume(prev, seed)
                push(seed)

            handle = pop()
            if handle.node_id in visited:
                continue
            visited.add(handle.node_id)
            order.append(handle)
            bar.update(1)

            successors = graph.follow_edges(handle)
            successors.sort(key=lambda h: rank[h.node_id])
            for nxt in successors:
                consume(handle, nxt)
                if nxt.node_id not in visited and left_degree[nxt] == 0:
                    push(nxt)

    return order


def topological_order(
    graph: VariationGraph, use_heads: bool = True, progress: bool = False
) -> List[Handle]:
    """
    Topological order of a bidirected graph, seeded from its heads.

    Cycles are broken by restarting at the lowest-ranked unvisited node, so
    the result is always a full ordering. With use_heads=False the sort is
    seeded from storage order only.

    Args:
        graph: Graph to order
        use_heads: Seed the sort with the graph's head handles
        progress: Show a progress bar

    Returns:
        Oriented handles covering every node once
    """
    seeds = graph.heads() if use_heads else []
    return _handle_topological_sort(graph, seeds, progress=progress)


def two_way_topological_order(
    graph: VariationGraph, progress: bool = False
) -> List[Handle]:
    """
    Place each node at the later of its head-first and tail-first positions.

    The tail-first order is a topological sort of the reverse strand seeded
    from the tails, read backwards. Ties keep head-first order; orientations
    come from the head-first order.
    """
    head_first = topological_order(graph, use_heads=True, progress=progress)
    tail_seeds = [tail.flip() for tail in graph.tails()]
    reverse_strand = _handle_topological_sort(
        graph, tail_seeds, restart_reverse=True, progress=progress,
        desc="tail-first topological sort",
    )
    tail_first = [handle.flip() for handle in reversed(reverse_strand)]

    head_pos = {h.node_id: i for i, h in enumerate(head_first)}
    tail_pos = {h.node_id: i for i, h in enumerate(tail_first)}
    return sorted(
        head_first,
        key=lambda h: (max(head_pos[h.node_id], tail_pos[h.node_id]), head_pos[h.node_id]),
    )


def lazy_topological_order(graph: VariationGraph) -> List[Handle]:
    """
    Kahn's algorithm on the node-level projection of a DAG.

    Raises:
        OrderingStrategyError: If the graph contains a cycle.
    """
    node_ids = graph.node_ids()
    in_degree = {node_id: 0 for node_id in node_ids}
    successors: Dict[int, List[int]] = {node_id: [] for node_id in node_ids}
    for source, target in graph.directed_node_edges():
        successors[source].append(target)
        in_degree[target] += 1

    queue = deque(node_id for node_id in node_ids if in_degree[node_id] == 0)
    order: List[Handle] = []
    while queue:
        node_id = queue.popleft()
        order.append(Handle(node_id, False))
        for target in successors[node_id]:
            in_degree[target] -= 1
            if in_degree[target] == 0:
                queue.append(target)

    if len(order) != len(node_ids):
        raise OrderingStrategyError(
            f"lazy topological order requires a DAG; "
            f"{len(node_ids) - len(order)} nodes lie on or behind a cycle"
        )
    return order


def breadth_first_topological_order(
    graph: VariationGraph, progress: bool = False
) -> List[Handle]:
    """
    Topological order that drains ready handles first-in first-out.

    Nodes are emitted level by level from the heads; cycles are broken the
    same way as in `topological_order`.
    """
    return _handle_topological_sort(
        graph,
        graph.heads(),
        breadth_first=True,
        progress=progress,
        desc="breadth-first sort",
    )
