from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, Union

import numpy as np

from pathtrace.materials.diffuse_light import DiffuseLight
from pathtrace.materials.lambertian import Lambertian
from pathtrace.materials.metal import Metal
from pathtrace.materials.transparent import Transparent
from pathtrace.typings.hit import HitRecord
from pathtrace.typings.ray import Ray
from pathtrace.typings.sky import Sky

if TYPE_CHECKING:
    from pathtrace.typings.hittable import Hittable
    from pathtrace.typings.light import Light


class Material(Protocol):
    def shade(
        self,
        world: Hittable,
        lights: Sequence[Light],
        sky: Sky,
        incoming_ray: Ray,
        hit: HitRecord,
        depth: int,
        rng: np.random.Generator | None = None,
    ) -> np.ndarray:
        """Radiance leaving the hit point back along incoming_ray."""
        ...

    def color(self) -> np.ndarray:
        """Base color of the material."""
        ...


MaterialType = Union[Lambertian, Metal, Transparent, DiffuseLight]
