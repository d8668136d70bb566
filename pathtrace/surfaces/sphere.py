from __future__ import annotations

import numpy as np

from pathtrace.typings.hit import HitRecord
from pathtrace.typings.material import MaterialType
from pathtrace.typings.ray import Ray
from pathtrace.utils.aabb import AABB
from pathtrace.utils.vector_operations import vector_dot


class Sphere:
    def __init__(self, center: np.ndarray, radius: float, material: MaterialType) -> None:
        self.center: np.ndarray = np.asarray(center, dtype=float)
        self.radius: float = float(radius)
        self.material: MaterialType = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        origin_to_center = ray.origin - self.center
        quadratic_a = vector_dot(ray.direction, ray.direction)
        half_b = vector_dot(origin_to_center, ray.direction)
        quadratic_c = vector_dot(origin_to_center, origin_to_center) - self.radius * self.radius

        discriminant = half_b * half_b - quadratic_a * quadratic_c
        if discriminant <= 0.0:
            return None

        sqrt_discriminant = float(np.sqrt(discriminant))
        # nearer root first, the far one only when the near one is out of range
        for hit_distance in (
            (-half_b - sqrt_discriminant) / quadratic_a,
            (-half_b + sqrt_discriminant) / quadratic_a,
        ):
            if t_min < hit_distance < t_max:
                hit_point = ray.at(hit_distance)
                return HitRecord(
                    hit_point=hit_point,
                    ray=ray,
                    distance=float(hit_distance),
                    outward_normal=(hit_point - self.center) / self.radius,
                    material=self.material,
                )
        return None

    def bounding_box(self) -> AABB:
        extent = np.full(3, abs(self.radius))
        return AABB(self.center - extent, self.center + extent)
