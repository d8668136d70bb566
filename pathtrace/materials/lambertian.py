from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

from pathtrace.renderer import trace_ray
from pathtrace.typings.hit import HitRecord
from pathtrace.typings.ray import Ray
from pathtrace.typings.sky import Sky
from pathtrace.utils.vector_operations import near_zero, random_unit_vector

if TYPE_CHECKING:
    from pathtrace.typings.hittable import Hittable
    from pathtrace.typings.light import Light


@dataclass(frozen=True, slots=True, eq=False)
class Lambertian:
    """Ideal diffuse surface.

    Scatters toward normal + (uniform unit vector), which distributes outgoing
    directions with a cosine falloff around the normal, so the returned radiance
    is just the albedo times whatever the scattered ray sees.
    """

    albedo: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", np.asarray(self.albedo, dtype=float))

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
        if rng is None:
            rng = np.random.default_rng()
        surface_normal = hit.normal()
        scatter_direction = surface_normal + random_unit_vector(rng)
        if near_zero(scatter_direction):
            scatter_direction = surface_normal

        scattered = Ray(origin=hit.hit_point, direction=scatter_direction, attenuation=self.albedo)
        return self.albedo * trace_ray(scattered, world, lights, sky, depth - 1, rng)

    def color(self) -> np.ndarray:
        return self.albedo
