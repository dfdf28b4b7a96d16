from dataclasses import dataclass
from typing import Optional

from vgorder.exceptions import ConfigurationError


@dataclass
class OrderingParameters:
    """Parameters shared by every ordering strategy of a run."""

    n_parts: int = 1
    epsilon: float = 0.05
    path_weight: bool = False
    no_seeds: bool = False
    progress: bool = False
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.n_parts < 1:
            raise ConfigurationError(f"n_parts must be at least 1, got {self.n_parts}")
        if self.epsilon < 0:
            raise ConfigurationError(f"epsilon must not be negative, got {self.epsilon}")
