"""Path key functions and path list reordering."""

from .path_keys import (
    PathKeyStrategy,
    PASS_PRIORITY,
    path_prefix,
    compute_key,
    prefix_and_id_ordered_paths,
    apply_path_passes,
)

__all__ = [
    "PathKeyStrategy",
    "PASS_PRIORITY",
    "path_prefix",
    "compute_key",
    "prefix_and_id_ordered_paths",
    "apply_path_passes",
]
