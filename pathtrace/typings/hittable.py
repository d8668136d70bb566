from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from pathtrace.typings.hit import HitRecord
from pathtrace.typings.ray import Ray

if TYPE_CHECKING:
    from pathtrace.utils.aabb import AABB


class Hittable(Protocol):
    """Anything a ray can be intersected with."""

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Closest intersection with distance strictly inside (t_min, t_max)."""
        ...

    def bounding_box(self) -> AABB | None:
        """Box enclosing the object, or None when it is unbounded."""
        ...
