from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pathtrace.typings.hit import HitRecord
from pathtrace.typings.ray import Ray
from pathtrace.utils.vector_operations import EPSILON, normalize_vector, vector_dot, vector_length

if TYPE_CHECKING:
    from pathtrace.typings.hittable import Hittable

DIFFUSE_WEIGHT: float = 0.8
SPECULAR_WEIGHT: float = 0.4
SPECULAR_COEFFICIENT: float = 120.0
SHADOW_BIAS: float = 1e-4


class Light:
    """Point light for the direct-lighting model.

    Only scenes that do not rely on material-driven recursive shading use these;
    path-traced scenes light themselves with DiffuseLight surfaces and the sky.
    """

    def __init__(self, position: np.ndarray, weight: float = 1.0) -> None:
        self.position: np.ndarray = np.asarray(position, dtype=float)
        self.weight: float = float(weight)

    def shade(self, hit: HitRecord, world: Hittable) -> np.ndarray:
        """Shadow-tested diffuse + Blinn-Phong specular contribution at a hit."""
        to_light = self.position - hit.hit_point
        distance_to_light = vector_length(to_light)
        if distance_to_light < EPSILON: # sitting on the light
            return np.zeros(3, dtype=float)

        shadow_ray = Ray(origin=hit.hit_point, direction=to_light)
        if world.hit(shadow_ray, SHADOW_BIAS, distance_to_light) is not None:
            return np.zeros(3, dtype=float)

        surface_normal = hit.normal()
        light_direction = shadow_ray.direction
        n_dot_l = vector_dot(surface_normal, light_direction)
        if n_dot_l <= 0.0:
            return np.zeros(3, dtype=float)
        diffuse = hit.material.color() * n_dot_l * DIFFUSE_WEIGHT

        half_vector = normalize_vector(light_direction - hit.ray.direction)
        n_dot_h = max(vector_dot(surface_normal, half_vector), 0.0)
        specular = np.full(3, SPECULAR_WEIGHT * n_dot_h ** SPECULAR_COEFFICIENT)
        return diffuse + specular
