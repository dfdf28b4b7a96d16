"""
vgorder.ordering
================

Strategy registry and pipeline interpreter.

Public API:

- OrderingParameters : parameters shared by all strategies of a run.
- OrderingStrategy   : a code/name bound to an ordering function.
- StrategyRegistry   : lookup of strategies by pipeline code or name.
- DEFAULT_REGISTRY   : the built-in strategies; default entry is 's'.
- run_pipeline       : apply a pipeline code string to a graph.
- apply_strategy     : compute and apply a single strategy.
"""

from .parameters import OrderingParameters
from .registry import (
    OrderingStrategy,
    StrategyRegistry,
    DEFAULT_REGISTRY,
    build_default_registry,
    reverse_current_order,
)
from .pipeline import PipelineStep, apply_strategy, run_pipeline, format_steps

__all__ = [
    "OrderingParameters",
    "OrderingStrategy",
    "StrategyRegistry",
    "DEFAULT_REGISTRY",
    "build_default_registry",
    "reverse_current_order",
    "PipelineStep",
    "apply_strategy",
    "run_pipeline",
    "format_steps",
]
