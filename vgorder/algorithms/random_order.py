from typing import List, Optional

import numpy as np

from vgorder.graph import Handle, VariationGraph


def random_order(graph: VariationGraph, seed: Optional[int] = None) -> List[Handle]:
    """Uniformly random permutation of the graph's nodes, all forward."""
    node_ids = graph.node_ids()
    rng = np.random.default_rng(seed)
    return [Handle(node_ids[i], False) for i in rng.permutation(len(node_ids))]
