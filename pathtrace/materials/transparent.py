from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence, Tuple

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
class Transparent:
    """Dielectric that splits light into a reflected and a refracted branch.

    The split uses the fixed ``reflectance`` and ``transmittance`` coefficients
    rather than a Fresnel term. Each branch weight is its coefficient divided by
    the cosine between the branch direction and the normal, and the blend
    multiplies by that same cosine, so the cosines cancel. The refracted branch
    is further scaled by 1 / eta^2 for the change in solid angle. Under total
    internal reflection the reflected radiance is returned as is.
    """

    albedo: np.ndarray
    reflectance: float
    transmittance: float
    refractive_index: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", np.asarray(self.albedo, dtype=float))
        object.__setattr__(self, "reflectance", float(self.reflectance))
        object.__setattr__(self, "transmittance", float(self.transmittance))
        object.__setattr__(self, "refractive_index", float(self.refractive_index))

    def _refraction(self, incoming_ray: Ray, hit: HitRecord) -> Tuple[np.ndarray, float] | None:
        normal = hit.outward_normal
        eta = self.refractive_index
        incoming_direction = -incoming_ray.direction
        cos_theta_i = vector_dot(normal, incoming_direction)

        if cos_theta_i < 0.0:
            # leaving the medium
            cos_theta_i = -cos_theta_i
            normal = -normal
            eta = 1.0 / eta

        # Snell's law: no real cos(theta_t) past the critical angle
        cos_theta_t_squared = 1.0 - (1.0 - cos_theta_i * cos_theta_i) / (eta * eta)
        if cos_theta_t_squared < 0.0:
            return None

        cos_theta_t = float(np.sqrt(cos_theta_t_squared))
        transmitted_direction = -incoming_direction / eta - (cos_theta_t - cos_theta_i / eta) * normal
        return transmitted_direction, eta

    def refracted_direction(self, incoming_ray: Ray, hit: HitRecord) -> np.ndarray | None:
        """Refracted direction at the hit, or None under total internal reflection."""
        refraction = self._refraction(incoming_ray, hit)
        if refraction is None:
            return None
        return refraction[0]

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
        reflected_direction = reflect_vector(incoming_ray.direction, hit.normal())
        reflected_ray = Ray(origin=hit.hit_point, direction=reflected_direction, attenuation=self.albedo)
        reflected_color = trace_ray(reflected_ray, world, lights, sky, depth - 1, rng)

        refraction = self._refraction(incoming_ray, hit)
        if refraction is None:
            return reflected_color

        transmitted_direction, eta = refraction
        transmitted_ray = Ray(origin=hit.hit_point, direction=transmitted_direction, attenuation=self.albedo)
        transmitted_color = trace_ray(transmitted_ray, world, lights, sky, depth - 1, rng)

        reflected_weight = self.reflectance * self.albedo
        transmitted_weight = self.transmittance / (eta * eta) * self.albedo
        return reflected_weight * reflected_color + transmitted_weight * transmitted_color

    def color(self) -> np.ndarray:
        return self.albedo
