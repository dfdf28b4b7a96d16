import heapq
from collections import deque
from typing import Dict, List, Set, Tuple

from vgorder.graph import Handle, VariationGraph


def eades_algorithm(graph: VariationGraph) -> List[Handle]:
    """
    Eades-Lin-Smyth greedy ordering for a small feedback arc set.

    Sinks are repeatedly moved to the back of the order and sources to the
    front. When neither exists, the node with the largest out-degree minus
    in-degree is moved to the front. Ties go to the lowest storage rank.
    Self loops and parallel edges are ignored.
    """
    node_ids = graph.node_ids()
    rank = {node_id: i for i, node_id in enumerate(node_ids)}
    successors: Dict[int, Set[int]] = {node_id: set() for node_id in node_ids}
    predecessors: Dict[int, Set[int]] = {node_id: set() for node_id in node_ids}
    for source, target in graph.directed_node_edges():
        if source != target:
            successors[source].add(target)
            predecessors[target].add(source)

    remaining: Set[int] = set(node_ids)
    front: List[int] = []
    back: deque = deque()

    sinks = [(rank[n], n) for n in node_ids if not successors[n]]
    sources = [(rank[n], n) for n in node_ids if not predecessors[n] and successors[n]]
    heapq.heapify(sinks)
    heapq.heapify(sources)
    deltas: List[Tuple[int, int, int]] = [
        (-(len(successors[n]) - len(predecessors[n])), rank[n], n) for n in node_ids
    ]
    heapq.heapify(deltas)

    def remove(node_id: int) -> None:
        remaining.discard(node_id)
        for target in successors.pop(node_id):
            predecessors[target].discard(node_id)
            if target in remaining:
                _requeue(target)
        for source in predecessors.pop(node_id):
            successors[source].discard(node_id)
            if source in remaining:
                _requeue(source)

    def _requeue(node_id: int) -> None:
        out_degree = len(successors[node_id])
        in_degree = len(predecessors[node_id])
        if out_degree == 0:
            heapq.heappush(sinks, (rank[node_id], node_id))
        elif in_degree == 0:
            heapq.heappush(sources, (rank[node_id], node_id))
        heapq.heappush(deltas, (-(out_degree - in_degree), rank[node_id], node_id))

    def _is_current(entry: Tuple[int, int, int]) -> bool:
        neg_delta, _, node_id = entry
        return node_id in remaining and -neg_delta == (
            len(successors[node_id]) - len(predecessors[node_id])
        )

    while remaining:
        while sinks:
            _, node_id = heapq.heappop(sinks)
            if node_id in remaining and not successors[node_id]:
                back.appendleft(node_id)
                remove(node_id)
        while sources:
            _, node_id = heapq.heappop(sources)
            if node_id in remaining and not predecessors[node_id] and successors[node_id]:
                front.append(node_id)
                remove(node_id)
        if sinks or not remaining:
            continue
        while deltas and not _is_current(deltas[0]):
            heapq.heappop(deltas)
        if deltas:
            _, _, node_id = heapq.heappop(deltas)
            front.append(node_id)
            remove(node_id)

    return [Handle(node_id, False) for node_id in front + list(back)]
