"""
Custom exceptions for graph loading, ordering and sorting.
"""

from __future__ import annotations
from typing import Iterable, NoReturn


class VGOrderError(Exception):
    """Base exception for all vgorder errors."""

    pass


class GFAParseError(VGOrderError):
    """Raised when a graph file cannot be parsed."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class OrderFileError(VGOrderError):
    """Raised when an externally supplied node order file is malformed."""

    pass


class InvalidOrderingError(VGOrderError):
    """Raised when an ordering is not a bijection onto the graph's node set."""

    @staticmethod
    def raise_for(
        unknown: Iterable[int],
        duplicates: Iterable[int],
        missing: Iterable[int],
    ) -> NoReturn:
        """
        Raises an InvalidOrderingError describing what is wrong with an ordering.

        Args:
            unknown: Node ids in the ordering that are not in the graph
            duplicates: Node ids that occur more than once in the ordering
            missing: Graph node ids absent from the ordering

        Raises:
            InvalidOrderingError: Always raised with the offending ids
        """
        problems = []
        for label, ids in (
            ("unknown node ids", unknown),
            ("duplicate node ids", duplicates),
            ("missing node ids", missing),
        ):
            ids = sorted(set(ids))
            if ids:
                shown = ", ".join(str(i) for i in ids[:10])
                if len(ids) > 10:
                    shown += f", ... ({len(ids)} total)"
                problems.append(f"{label}: {shown}")
        raise InvalidOrderingError(
            "Ordering is not a permutation of the graph's nodes ("
            + "; ".join(problems)
            + ")"
        )


class OrderingStrategyError(VGOrderError):
    """Raised when an ordering strategy cannot produce an ordering for a graph."""

    pass


class ConfigurationError(VGOrderError):
    """Raised for conflicting sort modes or invalid ordering parameters."""

    pass
