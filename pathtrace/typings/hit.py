from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from pathtrace.typings.ray import Ray

if TYPE_CHECKING:
    from pathtrace.typings.material import MaterialType


@dataclass(frozen=True, slots=True)
class HitRecord:
    """Intersection of a ray with a surface, alive for a single shading call.

    ``outward_normal`` is the geometric normal as the surface defines it; use
    ``normal()`` for the side facing the incoming ray. ``material`` is the
    surface's (immutable) material value.
    """

    hit_point: np.ndarray
    ray: Ray
    distance: float
    outward_normal: np.ndarray
    material: MaterialType

    def is_front_face(self) -> bool:
        return float(np.dot(self.ray.direction, self.outward_normal)) < 0.0

    def normal(self) -> np.ndarray:
        if self.is_front_face():
            return self.outward_normal
        return -self.outward_normal
