import logging
from typing import List

import numpy as np
from scipy.linalg import eigh
from scipy.sparse import coo_matrix, csr_matrix
from scipy.sparse.csgraph import connected_components, laplacian
from tqdm import tqdm

from vgorder.graph import Handle, VariationGraph

logger = logging.getLogger(__name__)

# --- Spectral (Fiedler vector) partition ordering ---


def weighted_adjacency(graph: VariationGraph, path_weight: bool = False) -> csr_matrix:
    """
    Symmetric node adjacency matrix, rows and columns in storage order.

    Every edge weighs 1. With path_weight, each traversal of an edge by a
    path step pair adds 1 more.
    """
    node_ids = graph.node_ids()
    index = {node_id: i for i, node_id in enumerate(node_ids)}
    rows: List[int] = []
    cols: List[int] = []
    pairs = graph.directed_node_edges()
    if path_weight:
        for path in graph.paths():
            pairs.extend((a.node_id, b.node_id) for a, b in zip(path.steps, path.steps[1:]))
    for source, target in pairs:
        if source != target:
            rows.append(index[source])
            cols.append(index[target])
    n = len(node_ids)
    matrix = coo_matrix(
        (np.ones(len(rows), dtype=np.float64), (rows, cols)), shape=(n, n)
    ).tocsr()
    return (matrix + matrix.T).tocsr()


def fiedler_ordering(adjacency: csr_matrix) -> tuple:
    """
    Order the vertices of a connected graph by its Fiedler vector.

    The sign of the vector is fixed so that the first vertex does not score
    above the last one; equal scores keep index order.

    Returns:
        (ordering as local indices, fiedler scores)
    """
    n = adjacency.shape[0]
    if n <= 2:
        return np.arange(n), np.arange(n, dtype=np.float64)
    L, sqrt_degree = laplacian(adjacency.toarray(), normed=True, return_diag=True)
    eigvals, eigvecs = eigh(L)
    # Undo the degree scaling of the normalized Laplacian.
    fiedler_vec = eigvecs[:, 1] / sqrt_degree
    if fiedler_vec[0] > fiedler_vec[-1]:
        fiedler_vec = -fiedler_vec
    ordering = np.lexsort((np.arange(n), fiedler_vec))
    return ordering, fiedler_vec


def _split_point(scores: np.ndarray, target: int, epsilon: float) -> int:
    """
    Choose where to cut a block sorted by score.

    The cut may move up to epsilon * size away from `target` and lands on the
    widest gap between consecutive scores in that window.
    """
    size = len(scores)
    slack = int(np.floor(epsilon * size))
    lo = max(1, target - slack)
    hi = min(size - 1, target + slack)
    if hi <= lo:
        return min(max(target, 1), size - 1)
    gaps = np.diff(scores)[lo - 1 : hi]
    return lo + int(np.argmax(gaps))


def _bisect(
    adjacency: csr_matrix, members: np.ndarray, n_parts: int, epsilon: float
) -> List[np.ndarray]:
    """Recursively bisect a block of vertices; returns the ordered parts."""
    sub = adjacency[members][:, members]
    n_sub_components, labels = connected_components(sub, directed=False)
    if n_sub_components > 1:
        # Order disconnected pieces by their lowest member and share out the parts.
        pieces = [members[labels == c] for c in range(n_sub_components)]
        pieces.sort(key=lambda p: p.min())
        return [
            part
            for piece in pieces
            for part in _bisect(adjacency, piece, max(1, round(n_parts * len(piece) / len(members))), epsilon)
        ]

    local_order, scores = fiedler_ordering(sub)
    ordered = members[local_order]
    if n_parts <= 1 or len(members) < 2:
        return [ordered]

    left_parts = n_parts // 2
    target = int(round(len(members) * left_parts / n_parts))
    cut = _split_point(scores[local_order], target, epsilon)
    return _bisect(adjacency, ordered[:cut], left_parts, epsilon) + _bisect(
        adjacency, ordered[cut:], n_parts - left_parts, epsilon
    )


def partition_order(
    graph: VariationGraph,
    n_parts: int = 1,
    epsilon: float = 0.05,
    path_weight: bool = False,
    progress: bool = False,
) -> List[Handle]:
    """
    Order nodes by recursive spectral bisection of the node adjacency matrix.

    The graph is cut into `n_parts` partitions whose sizes may deviate from an
    even split by `epsilon`; partitions are laid out one after another and
    ordered internally by their Fiedler vectors, which places strongly
    connected nodes next to each other along the diagonal of the matrix.

    Args:
        graph: Graph to order
        n_parts: Number of partitions
        epsilon: Allowed relative imbalance of each cut
        path_weight: Weight edges by path coverage
        progress: Show a progress bar over connected components

    Returns:
        Forward handles covering every node once
    """
    node_ids = graph.node_ids()
    if not node_ids:
        return []
    adjacency = weighted_adjacency(graph, path_weight=path_weight)
    n_components, labels = connected_components(adjacency, directed=False)
    components = [np.flatnonzero(labels == c) for c in range(n_components)]
    components.sort(key=lambda members: members.min())

    order: List[Handle] = []
    for members in tqdm(components, desc="partition sort", disable=not progress):
        share = max(1, round(n_parts * len(members) / len(node_ids)))
        for part in _bisect(adjacency, members, share, epsilon):
            order.extend(Handle(node_ids[i], False) for i in part)
    logger.debug(
        "Partition sort over %d components into %d requested parts", n_components, n_parts
    )
    return order
