import numpy as np

from pathtrace.typings.hit import HitRecord
from pathtrace.typings.material import MaterialType
from pathtrace.typings.ray import Ray
from pathtrace.utils.vector_operations import EPSILON, normalize_vector, vector_dot


class InfinitePlane:
    """Unbounded plane through ``center``. Has no bounding box, so it never enters a BVH."""

    def __init__(self, center: np.ndarray, normal: np.ndarray, material: MaterialType) -> None:
        self.center: np.ndarray = np.asarray(center, dtype=float)
        self.normal: np.ndarray = normalize_vector(normal)
        self.material: MaterialType = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        direction_dot_normal = vector_dot(self.normal, ray.direction)
        if abs(direction_dot_normal) <= EPSILON:
            return None

        hit_distance = vector_dot(self.center - ray.origin, self.normal) / direction_dot_normal
        if not t_min < hit_distance < t_max:
            return None

        return HitRecord(
            hit_point=ray.at(hit_distance),
            ray=ray,
            distance=float(hit_distance),
            outward_normal=self.normal,
            material=self.material,
        )

    def bounding_box(self) -> None:
        return None
