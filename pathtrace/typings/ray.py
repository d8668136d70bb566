from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pathtrace.utils.vector_operations import normalize_vector


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with a unit-length direction and an optional color carried along it."""

    origin: np.ndarray
    direction: np.ndarray
    attenuation: np.ndarray | None = None

    def __post_init__(self) -> None:
        # frozen: bypass the generated __setattr__ to store the normalized values
        object.__setattr__(self, "origin", np.asarray(self.origin, dtype=float))
        object.__setattr__(self, "direction", normalize_vector(self.direction))
        if self.attenuation is not None:
            object.__setattr__(self, "attenuation", np.asarray(self.attenuation, dtype=float))

    def at(self, t: float) -> np.ndarray:
        return self.origin + t * self.direction
