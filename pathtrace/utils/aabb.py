from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from pathtrace.typings.ray import Ray
from pathtrace.utils.vector_operations import EPSILON


class AABB:
    """Axis-aligned bounding box."""

    __slots__ = ("min", "max")

    def __init__(self, min_point: np.ndarray, max_point: np.ndarray) -> None:
        self.min = np.asarray(min_point, dtype=float)
        self.max = np.asarray(max_point, dtype=float)

    def __repr__(self) -> str:
        return f"AABB(min={self.min.tolist()}, max={self.max.tolist()})"

    @staticmethod
    def surrounding_box(first: "AABB", second: "AABB") -> "AABB":
        return AABB(np.minimum(first.min, second.min), np.maximum(first.max, second.max))

    @staticmethod
    def from_boxes(boxes: Sequence["AABB"]) -> "AABB":
        if not boxes:
            raise ValueError("AABB.from_boxes requires at least one box")
        min_points = np.array([box.min for box in boxes])
        max_points = np.array([box.max for box in boxes])
        return AABB(np.min(min_points, axis=0), np.max(max_points, axis=0))

    @staticmethod
    def from_points(points: np.ndarray) -> "AABB":
        point_array = np.asarray(points, dtype=float)
        return AABB(point_array.min(axis=0), point_array.max(axis=0))

    @property
    def centroid(self) -> np.ndarray:
        return (self.min + self.max) * 0.5

    def contains(self, other: "AABB") -> bool:
        return bool(np.all(self.min <= other.min) and np.all(self.max >= other.max))

    def hit(self, ray: Ray, t_min: float = EPSILON, t_max: float = float("inf")) -> Tuple[float, float] | None:
        """Slab test. Returns the (entry, exit) interval clipped to [t_min, t_max], or None on a miss.

        Only a gate for hierarchy traversal; it carries no surface data.
        """
        ray_origin = ray.origin
        ray_direction = ray.direction
        for axis in range(3):
            direction_component = float(ray_direction[axis])
            origin_component = float(ray_origin[axis])
            if direction_component == 0.0:
                if origin_component < self.min[axis] or origin_component > self.max[axis]:
                    return None
                continue

            inv_d = 1.0 / direction_component # tiny components give huge but finite slab distances
            t0 = (self.min[axis] - origin_component) * inv_d
            t1 = (self.max[axis] - origin_component) * inv_d
            if t0 > t1:
                t0, t1 = t1, t0
            t_min = max(t_min, t0)
            t_max = min(t_max, t1)
            if t_max < t_min:
                return None
        return t_min, t_max
