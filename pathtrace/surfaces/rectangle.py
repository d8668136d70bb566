from __future__ import annotations

from typing import Sequence

import numpy as np

from pathtrace.surfaces.triangle import Triangle, TriangleList
from pathtrace.typings.hit import HitRecord
from pathtrace.typings.material import MaterialType
from pathtrace.typings.ray import Ray
from pathtrace.utils.aabb import AABB


class Rectangle:
    """Planar quad given by four counter-clockwise corners, stored as two triangles."""

    def __init__(self, points: Sequence[np.ndarray], material: MaterialType) -> None:
        corners = np.asarray(points, dtype=float).reshape(4, 3)
        self.material: MaterialType = material
        self.triangles = TriangleList(
            [
                Triangle([corners[0], corners[1], corners[2]], material),
                Triangle([corners[2], corners[3], corners[0]], material),
            ]
        )

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        return self.triangles.hit(ray, t_min, t_max)

    def bounding_box(self) -> AABB:
        return self.triangles.bounding_box()
