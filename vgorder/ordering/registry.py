"""Registry of ordering strategies addressable by pipeline code or name."""

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from vgorder import algorithms
from vgorder.graph import Handle, VariationGraph
from vgorder.ordering.parameters import OrderingParameters

OrderingFunction = Callable[[VariationGraph, OrderingParameters], List[Handle]]


@dataclass(frozen=True)
class OrderingStrategy:
    """A named ordering capability with its single-character pipeline code."""

    code: str
    name: str
    compute: OrderingFunction
    description: str = ""

    def compute_ordering(
        self, graph: VariationGraph, params: Optional[OrderingParameters] = None
    ) -> List[Handle]:
        return list(self.compute(graph, params or OrderingParameters()))


class StrategyRegistry:
    """
    Maps pipeline codes and long names to ordering strategies.

    One registered code is the default strategy, used when a sort does not
    select any mode.
    """

    def __init__(self, default_code: str = "s"):
        self._by_code: Dict[str, OrderingStrategy] = {}
        self._by_name: Dict[str, OrderingStrategy] = {}
        self._default_code = default_code

    def register(self, strategy: OrderingStrategy) -> OrderingStrategy:
        if len(strategy.code) != 1:
            raise ValueError(f"Pipeline code must be one character, got {strategy.code!r}")
        if strategy.code in self._by_code:
            raise ValueError(f"Pipeline code {strategy.code!r} is already registered")
        if strategy.name in self._by_name:
            raise ValueError(f"Strategy name {strategy.name!r} is already registered")
        self._by_code[strategy.code] = strategy
        self._by_name[strategy.name] = strategy
        return strategy

    def resolve(self, code: str) -> Optional[OrderingStrategy]:
        """Strategy for a pipeline code, or None if the code is unknown."""
        return self._by_code.get(code)

    def get(self, key: str) -> OrderingStrategy:
        """Strategy by long name or pipeline code."""
        strategy = self._by_name.get(key) or self._by_code.get(key)
        if strategy is None:
            raise KeyError(f"Unknown ordering strategy {key!r}")
        return strategy

    @property
    def default(self) -> OrderingStrategy:
        return self._by_code[self._default_code]

    def names(self) -> List[str]:
        return list(self._by_name)

    def codes(self) -> List[str]:
        return list(self._by_code)

    def __contains__(self, key: object) -> bool:
        return key in self._by_name or key in self._by_code

    def __iter__(self) -> Iterator[OrderingStrategy]:
        return iter(self._by_code.values())

    def __len__(self) -> int:
        return len(self._by_code)


def reverse_current_order(graph: VariationGraph) -> List[Handle]:
    """The graph's native order, reversed."""
    return list(graph.handles())[::-1]


def build_default_registry() -> StrategyRegistry:
    registry = StrategyRegistry(default_code="s")
    for strategy in (
        OrderingStrategy(
            "s",
            "topological",
            lambda g, p: algorithms.topological_order(
                g, use_heads=not p.no_seeds, progress=p.progress
            ),
            "head-seeded topological order (default)",
        ),
        OrderingStrategy(
            "n",
            "topological-no-seeds",
            lambda g, p: algorithms.topological_order(
                g, use_heads=False, progress=p.progress
            ),
            "topological order without head seeding",
        ),
        OrderingStrategy(
            "l",
            "lazy",
            lambda g, p: algorithms.lazy_topological_order(g),
            "lazy topological order (DAG only)",
        ),
        OrderingStrategy(
            "w",
            "two-way",
            lambda g, p: algorithms.two_way_topological_order(g, progress=p.progress),
            "max of head-first and tail-first topological order",
        ),
        OrderingStrategy(
            "b",
            "breadth-first",
            lambda g, p: algorithms.breadth_first_topological_order(
                g, progress=p.progress
            ),
            "breadth-first topological order",
        ),
        OrderingStrategy(
            "e",
            "eades",
            lambda g, p: algorithms.eades_algorithm(g),
            "Eades-Lin-Smyth feedback arc set heuristic",
        ),
        OrderingStrategy(
            "c",
            "cycle-breaking",
            lambda g, p: algorithms.cycle_breaking_sort(g),
            "strongly connected component cycle-breaking sort",
        ),
        OrderingStrategy(
            "r",
            "random",
            lambda g, p: algorithms.random_order(g, seed=p.seed),
            "random order",
        ),
        OrderingStrategy(
            "d",
            "dagify",
            lambda g, p: algorithms.dagify_sort(g, progress=p.progress),
            "sort a DAGified strand-split copy and map back",
        ),
        OrderingStrategy(
            "m",
            "partition",
            lambda g, p: algorithms.partition_order(
                g,
                n_parts=p.n_parts,
                epsilon=p.epsilon,
                path_weight=p.path_weight,
                progress=p.progress,
            ),
            "spectral partition (sparse matrix diagonalization) order",
        ),
        OrderingStrategy(
            "f",
            "reverse",
            lambda g, p: reverse_current_order(g),
            "reverse the current order",
        ),
    ):
        registry.register(strategy)
    return registry


DEFAULT_REGISTRY = build_default_registry()
