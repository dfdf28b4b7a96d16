import heapq
from typing import Dict, List, Set

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from vgorder.graph import Handle, VariationGraph


def _member_order(
    members: List[int], successors: Dict[int, List[int]], component: Dict[int, int]
) -> List[int]:
    """
    Order the nodes of one strongly connected component.

    A depth-first search from the lowest-ranked member classifies back edges;
    reverse postorder of the search forest is a topological order of the
    component with those edges dropped.
    """
    label = component[members[0]]
    visited: Set[int] = set()
    postorder: List[int] = []
    for start in members:
        if start in visited:
            continue
        visited.add(start)
        stack = [(start, iter(successors[start]))]
        while stack:
            node, children = stack[-1]
            for child in children:
                if child not in visited and component[child] == label:
                    visited.add(child)
                    stack.append((child, iter(successors[child])))
                    break
            else:
                stack.pop()
                postorder.append(node)
    return postorder[::-1]


def cycle_breaking_sort(graph: VariationGraph) -> List[Handle]:
    """
    Order a possibly cyclic graph by its strongly connected components.

    Components are found with scipy, ordered topologically on the condensed
    DAG (lowest-ranked component first among the ready ones), and each
    component's members are ordered with its back edges removed.
    """
    node_ids = graph.node_ids()
    if not node_ids:
        return []
    index = {node_id: i for i, node_id in enumerate(node_ids)}
    pairs = graph.directed_node_edges()

    rows = np.array([index[s] for s, _ in pairs], dtype=np.int64)
    cols = np.array([index[t] for _, t in pairs], dtype=np.int64)
    adjacency = csr_matrix(
        (np.ones(len(pairs), dtype=np.int8), (rows, cols)),
        shape=(len(node_ids), len(node_ids)),
    )
    n_components, labels = connected_components(
        adjacency, directed=True, connection="strong"
    )
    component = {node_id: int(labels[index[node_id]]) for node_id in node_ids}

    successors: Dict[int, List[int]] = {node_id: [] for node_id in node_ids}
    for source, target in pairs:
        successors[source].append(target)
    for targets in successors.values():
        targets.sort(key=index.__getitem__)

    members: Dict[int, List[int]] = {c: [] for c in range(n_components)}
    for node_id in node_ids:
        members[component[node_id]].append(node_id)

    condensed: Dict[int, Set[int]] = {c: set() for c in range(n_components)}
    in_degree = [0] * n_components
    for source, target in pairs:
        a, b = component[source], component[target]
        if a != b and b not in condensed[a]:
            condensed[a].add(b)
            in_degree[b] += 1

    first_rank = {c: index[members[c][0]] for c in range(n_components)}
    ready = [(first_rank[c], c) for c in range(n_components) if in_degree[c] == 0]
    heapq.heapify(ready)

    order: List[Handle] = []
    while ready:
        _, c = heapq.heappop(ready)
        order.extend(Handle(n, False) for n in _member_order(members[c], successors, component))
        for d in condensed[c]:
            in_degree[d] -= 1
            if in_degree[d] == 0:
                heapq.heappush(ready, (first_rank[d], d))
    return order
