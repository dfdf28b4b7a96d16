"""Ordering pipeline for variation graphs."""

__all__ = [
    "Handle",
    "Path",
    "VariationGraph",
    "OrderingParameters",
    "StrategyRegistry",
    "run_pipeline",
    "SortConfig",
    "GraphSorter",
    "read_gfa",
    "write_gfa",
]


def __getattr__(name):
    if name in {"Handle", "Path", "VariationGraph"}:
        from .graph import Handle, Path, VariationGraph

        return locals()[name]
    if name in {"OrderingParameters", "StrategyRegistry", "run_pipeline"}:
        from .ordering import OrderingParameters, StrategyRegistry, run_pipeline

        return locals()[name]
    if name in {"SortConfig", "GraphSorter"}:
        from .sort import SortConfig, GraphSorter

        return locals()[name]
    if name in {"read_gfa", "write_gfa"}:
        from .io import read_gfa, write_gfa

        return locals()[name]
    raise AttributeError(name)
