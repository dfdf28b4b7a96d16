import logging
from enum import Enum
from statistics import mean
from typing import Iterable, List, Optional, Sequence, Tuple

from vgorder.graph import Path, VariationGraph

logger = logging.getLogger(__name__)

PathKey = Tuple[str, float]


class PathKeyStrategy(Enum):
    """Secondary key used to sort paths. Values are (use_average, reverse)."""

    MINIMUM = (False, False)
    MAXIMUM = (False, True)
    AVERAGE = (True, False)
    AVERAGE_REVERSED = (True, True)

    @property
    def use_average(self) -> bool:
        return self.value[0]

    @property
    def reverse(self) -> bool:
        return self.value[1]


# Passes run in this order when several are requested; the last one wins.
PASS_PRIORITY = (
    PathKeyStrategy.MINIMUM,
    PathKeyStrategy.MAXIMUM,
    PathKeyStrategy.AVERAGE,
    PathKeyStrategy.AVERAGE_REVERSED,
)


def path_prefix(name: str, delimiter: str) -> str:
    """Part of a path name before the first `delimiter`; '' without a delimiter."""
    if not delimiter:
        return ""
    return name.split(delimiter, 1)[0]


def compute_key(
    graph: VariationGraph,
    path: Path,
    delimiter: str = "",
    use_average: bool = False,
    reverse: bool = False,
) -> PathKey:
    """
    Compute the sort key of a path.

    The secondary value is taken over the 1-based ranks of the nodes the path
    visits in the graph's current order:
      - use_average=False, reverse=False: lowest rank
      - use_average=False, reverse=True : highest rank
      - use_average=True,  reverse=False: mean rank
      - use_average=True,  reverse=True : mean rank, negated so that an
        ascending sort puts high averages first

    Returns:
        (prefix group, secondary value); empty paths score 0.
    """
    ranks = [graph.rank(node_id) + 1 for node_id in path.node_ids()]
    if not ranks:
        value = 0.0
    elif use_average:
        value = mean(ranks)
        if reverse:
            value = -value
    elif reverse:
        value = float(max(ranks))
    else:
        value = float(min(ranks))
    return path_prefix(path.name, delimiter), value


def prefix_and_id_ordered_paths(
    graph: VariationGraph,
    delimiter: str = "",
    use_average: bool = False,
    reverse: bool = False,
    paths: Optional[Sequence[Path]] = None,
) -> List[str]:
    """
    Path names sorted by prefix group, then by their secondary key.

    The sort is stable: paths with equal keys keep their relative order in
    `paths`, which defaults to the graph's current path list.
    """
    if paths is None:
        paths = graph.paths()
    keyed = [
        (compute_key(graph, path, delimiter, use_average, reverse), path.name)
        for path in paths
    ]
    keyed.sort(key=lambda item: item[0])
    return [name for _, name in keyed]


def apply_path_passes(
    graph: VariationGraph,
    strategies: Iterable[PathKeyStrategy],
    delimiter: str = "",
) -> List[PathKeyStrategy]:
    """
    Reorder the graph's paths once per requested strategy.

    Passes run in PASS_PRIORITY order regardless of the order given. Every
    pass sorts the path list as it was before the first pass, so ties are
    broken the same way whichever passes ran earlier and the final path
    order is exactly that of the last pass alone.

    Returns:
        The strategies in the order they were applied
    """
    requested = set(strategies)
    applied = [s for s in PASS_PRIORITY if s in requested]
    if len(applied) > 1:
        logger.warning(
            "Several path sorts requested (%s); only the last, %s, determines the result",
            ", ".join(s.name for s in applied),
            applied[-1].name,
        )
    initial = graph.paths()
    for strategy in applied:
        graph.apply_path_ordering(
            prefix_and_id_ordered_paths(
                graph, delimiter, strategy.use_average, strategy.reverse, initial
            )
        )
    return applied
