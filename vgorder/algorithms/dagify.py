import logging
from typing import Dict, List, Set, Tuple

from vgorder.algorithms.topological import topological_order
from vgorder.graph import Handle, VariationGraph

logger = logging.getLogger(__name__)


def split_strands(graph: VariationGraph) -> Tuple[VariationGraph, Dict[int, Handle]]:
    """
    Build a graph holding each strand of every node as its own forward node.

    Every bidirected edge becomes two directed forward edges, one per strand.

    Returns:
        (split graph, translation from split node id to the original handle)
    """
    split = VariationGraph()
    translation: Dict[int, Handle] = {}
    strand_ids: Dict[Handle, int] = {}
    for i, node_id in enumerate(graph.node_ids()):
        for offset, is_reverse in ((1, False), (2, True)):
            handle = Handle(node_id, is_reverse)
            split_id = 2 * i + offset
            split.create_node(split_id, graph.get_sequence(handle))
            translation[split_id] = handle
            strand_ids[handle] = split_id
    for left, right in graph.edges():
        split.create_edge(Handle(strand_ids[left]), Handle(strand_ids[right]))
        split.create_edge(Handle(strand_ids[right.flip()]), Handle(strand_ids[left.flip()]))
    return split, translation


def dagify(split: VariationGraph) -> VariationGraph:
    """
    Return an acyclic copy of a strand-split graph.

    Edges closing a cycle in a depth-first search (visiting nodes in storage
    order) are left out of the copy.
    """
    dag = VariationGraph()
    for node_id in split.node_ids():
        dag.create_node(node_id, split.get_sequence(node_id))

    state: Dict[int, int] = {}  # 1 = on stack, 2 = finished
    dropped = 0
    for start in split.node_ids():
        if start in state:
            continue
        state[start] = 1
        stack = [(start, iter(split.follow_edges(Handle(start))))]
        while stack:
            node_id, children = stack[-1]
            for child in children:
                # Split graphs only hold forward-to-forward edges.
                if state.get(child.node_id) == 1:
                    dropped += 1
                    continue
                dag.create_edge(Handle(node_id), child)
                if child.node_id not in state:
                    state[child.node_id] = 1
                    stack.append((child.node_id, iter(split.follow_edges(child))))
                    break
            else:
                state[node_id] = 2
                stack.pop()
    logger.debug("DAGify dropped %d back edges", dropped)
    return dag


def dagify_sort(graph: VariationGraph, progress: bool = False) -> List[Handle]:
    """
    Order a graph through a DAGified, strand-split working copy.

    The copy is topologically sorted and each original node takes the
    position and orientation of whichever of its strands comes first.
    """
    split, translation = split_strands(graph)
    dag = dagify(split)
    seen: Set[int] = set()
    order: List[Handle] = []
    for handle in topological_order(dag, use_heads=True, progress=progress):
        original = translation[handle.node_id]
        if original.node_id not in seen:
            seen.add(original.node_id)
            order.append(original)
    return order
