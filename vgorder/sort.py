"""Graph sorting driver: one ordering mode, then optional path sorts."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from vgorder.algorithms import lazy_topological_order, topological_order
from vgorder.exceptions import ConfigurationError
from vgorder.graph import VariationGraph
from vgorder.io import read_order
from vgorder.ordering import (
    DEFAULT_REGISTRY,
    OrderingParameters,
    PipelineStep,
    StrategyRegistry,
    apply_strategy,
    format_steps,
    run_pipeline,
)
from vgorder.paths import PathKeyStrategy, apply_path_passes


class SortMode(Enum):
    STRATEGY = "strategy"
    ORDER_FILE = "order_file"
    OPTIMIZE = "optimize"
    PIPELINE = "pipeline"
    DEFAULT = "default"


@dataclass
class SortConfig:
    """Configuration for a graph sort."""

    strategy: Optional[str] = None
    order_file: Optional[Path] = None
    optimize: bool = False
    pipeline: Optional[str] = None
    parameters: OrderingParameters = field(default_factory=OrderingParameters)
    path_strategies: List[PathKeyStrategy] = field(default_factory=list)
    path_delimiter: str = ""
    canonicalize_orientation: bool = True
    logger_name: str = __name__

    def mode(self) -> SortMode:
        """
        The single ordering mode this configuration selects.

        Raises:
            ConfigurationError: If more than one mode is selected.
        """
        selected = [
            mode
            for mode, chosen in (
                (SortMode.STRATEGY, self.strategy is not None),
                (SortMode.ORDER_FILE, self.order_file is not None),
                (SortMode.OPTIMIZE, self.optimize),
                (SortMode.PIPELINE, bool(self.pipeline)),
            )
            if chosen
        ]
        if len(selected) > 1:
            raise ConfigurationError(
                "Select at most one ordering mode, got: "
                + ", ".join(m.value for m in selected)
            )
        return selected[0] if selected else SortMode.DEFAULT


class GraphSorter:
    """
    Applies the ordering mode of a SortConfig to a graph, then its path sorts.

    The graph is mutated in place; callers serialize it afterwards only if
    `sort` returns normally.
    """

    def __init__(
        self,
        config: Optional[SortConfig] = None,
        logger: Optional[logging.Logger] = None,
        registry: Optional[StrategyRegistry] = None,
    ):
        self.config: SortConfig = config or SortConfig()
        self.logger = logger or logging.getLogger(self.config.logger_name)
        self.registry = registry or DEFAULT_REGISTRY

    def sort(self, graph: VariationGraph) -> List[PipelineStep]:
        """
        Sort the graph.

        Returns:
            The ordering steps applied (empty for order files and optimize).
        """
        config = self.config
        params = config.parameters
        mode = config.mode()
        self.logger.info("Sorting %r using %s mode", graph, mode.value)

        steps: List[PipelineStep] = []
        if mode is SortMode.STRATEGY:
            try:
                strategy = self.registry.get(config.strategy)
            except KeyError as exc:
                raise ConfigurationError(
                    f"{exc.args[0]}; choose from: {', '.join(self.registry.names())}"
                ) from exc
            steps.append(
                apply_strategy(graph, strategy, params, config.canonicalize_orientation)
            )
        elif mode is SortMode.ORDER_FILE:
            graph.apply_ordering(
                read_order(config.order_file, graph), config.canonicalize_orientation
            )
        elif mode is SortMode.OPTIMIZE:
            graph.optimize()
        elif mode is SortMode.PIPELINE:
            steps = run_pipeline(
                graph,
                config.pipeline,
                params,
                config.canonicalize_orientation,
                self.registry,
            )
        else:
            steps.append(
                apply_strategy(
                    graph, self.registry.default, params, config.canonicalize_orientation
                )
            )

        if steps and params.progress:
            self.logger.info("Applied orderings:\n%s", format_steps(steps))

        if config.path_strategies:
            applied = apply_path_passes(graph, config.path_strategies, config.path_delimiter)
            self.logger.info(
                "Sorted %d paths by %s", graph.path_count, ", ".join(s.name for s in applied)
            )
        return steps


def dump_order(graph: VariationGraph, lazy: bool = False) -> List[int]:
    """Node ids of the graph's topological traversal order (lazy variant if requested)."""
    order = lazy_topological_order(graph) if lazy else topological_order(graph)
    return [handle.node_id for handle in order]
