from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

from pathtrace.renderer import trace_ray
from pathtrace.typings.hit import HitRecord
from pathtrace.typings.ray import Ray
from pathtrace.typings.sky import Sky
from pathtrace.utils.vector_operations import reflect_vector, vector_dot

if TYPE_CHECKING:
    from pathtrace.typings.hittable import Hittable
    from pathtrace.typings.light import Light


@dataclass(frozen=True, slots=True, eq=False)
class Metal:
    """Perfect mirror tinted by its albedo."""

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
        surface_normal = hit.normal()
        reflected_direction = reflect_vector(incoming_ray.direction, surface_normal)
        if vector_dot(reflected_direction, surface_normal) <= 0.0:
            return np.zeros(3, dtype=float) # absorbed

        reflected = Ray(origin=hit.hit_point, direction=reflected_direction, attenuation=self.albedo)
        return self.albedo * trace_ray(reflected, world, lights, sky, depth - 1, rng)

    def color(self) -> np.ndarray:
        return self.albedo
