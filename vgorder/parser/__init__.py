"""
GFA format parser module for variation graphs.

This module provides functionality to parse GFA 1 text into graph structures
and to serialize graphs back to GFA.
"""

from .gfa_parser import (
    parse_gfa,
    to_gfa,
    parse_node_id,
    parse_step,
)

__all__ = [
    "parse_gfa",
    "to_gfa",
    "parse_node_id",
    "parse_step",
]
