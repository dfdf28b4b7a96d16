"""
Node ordering algorithms.

Each function takes a graph and returns a list of oriented handles covering
every node exactly once. None of them mutates the graph or keeps a reference
to it after returning.
"""

from .topological import (
    topological_order,
    lazy_topological_order,
    two_way_topological_order,
    breadth_first_topological_order,
)
from .eades import eades_algorithm
from .cycle_breaking import cycle_breaking_sort
from .random_order import random_order
from .dagify import dagify, dagify_sort, split_strands
from .partition_order import partition_order

__all__ = [
    "topological_order",
    "lazy_topological_order",
    "two_way_topological_order",
    "breadth_first_topological_order",
    "eades_algorithm",
    "cycle_breaking_sort",
    "random_order",
    "dagify",
    "dagify_sort",
    "split_strands",
    "partition_order",
]
