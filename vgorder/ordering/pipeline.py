"""Run chains of ordering strategies, applying each result before the next."""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from tabulate import tabulate

from vgorder.graph import VariationGraph
from vgorder.ordering.parameters import OrderingParameters
from vgorder.ordering.registry import DEFAULT_REGISTRY, OrderingStrategy, StrategyRegistry

logger = logging.getLogger(__name__)


@dataclass
class PipelineStep:
    """Record of one applied ordering."""

    code: str
    strategy: str
    node_count: int
    seconds: float


def apply_strategy(
    graph: VariationGraph,
    strategy: OrderingStrategy,
    params: Optional[OrderingParameters] = None,
    canonicalize_orientation: bool = True,
) -> PipelineStep:
    """
    Compute an ordering with `strategy` and apply it to `graph`.

    The ordering is fully computed before the graph is touched, so a failing
    strategy leaves the graph as it was.
    """
    params = params or OrderingParameters()
    start = time.perf_counter()
    ordering = strategy.compute_ordering(graph, params)
    graph.apply_ordering(ordering, canonicalize_orientation)
    step = PipelineStep(
        code=strategy.code,
        strategy=strategy.name,
        node_count=len(ordering),
        seconds=time.perf_counter() - start,
    )
    logger.debug("Applied %s ordering to %d nodes", strategy.name, step.node_count)
    return step


def run_pipeline(
    graph: VariationGraph,
    codes: str,
    params: Optional[OrderingParameters] = None,
    canonicalize_orientation: bool = True,
    registry: Optional[StrategyRegistry] = None,
) -> List[PipelineStep]:
    """
    Apply the strategies named by `codes` left to right.

    Each step sees the graph as left by the previous one, so after the run
    the graph's order is exactly the last executed step's ordering. Unknown
    codes are skipped with a warning.

    Args:
        graph: Graph to reorder in place
        codes: Pipeline string such as "sf" or "mcs"
        params: Parameters shared by all steps
        canonicalize_orientation: Flip nodes to the orientation each ordering
            records for them
        registry: Strategy lookup, defaults to the built-in registry

    Returns:
        One PipelineStep per executed code
    """
    registry = registry or DEFAULT_REGISTRY
    params = params or OrderingParameters()
    steps: List[PipelineStep] = []
    for position, code in enumerate(codes):
        strategy = registry.resolve(code)
        if strategy is None:
            logger.warning(
                "Skipping unknown pipeline code %r at position %d of %r",
                code,
                position,
                codes,
            )
            continue
        steps.append(apply_strategy(graph, strategy, params, canonicalize_orientation))
    return steps


def format_steps(steps: List[PipelineStep], tablefmt: str = "simple") -> str:
    """Render applied steps as a table for progress output."""
    return tabulate(
        [[i, s.code, s.strategy, s.node_count, f"{s.seconds:.3f}"] for i, s in enumerate(steps, 1)],
        headers=["step", "code", "strategy", "nodes", "seconds"],
        tablefmt=tablefmt,
    )
