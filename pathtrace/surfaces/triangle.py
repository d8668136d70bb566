from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from pathtrace.typings.hit import HitRecord
from pathtrace.typings.material import MaterialType
from pathtrace.typings.ray import Ray
from pathtrace.utils.aabb import AABB
from pathtrace.utils.vector_operations import vector_cross, vector_dot, vector_length

DETERMINANT_EPSILON: float = 1e-10


def face_normal(vertices: np.ndarray) -> np.ndarray:
    """Unit normal of a counter-clockwise triangle; zero for a degenerate one."""
    normal = vector_cross(vertices[1] - vertices[0], vertices[2] - vertices[0])
    length = vector_length(normal)
    if length == 0.0:
        return normal
    return normal / length


class Triangle:
    """Triangle with per-vertex normals, intersected with Moller-Trumbore.

    Without explicit vertex normals every vertex uses the face normal, which
    makes the interpolated normal flat.
    """

    def __init__(
        self,
        vertices: Sequence[np.ndarray],
        material: MaterialType,
        vertex_normals: Sequence[np.ndarray] | None = None,
    ) -> None:
        self.vertices: np.ndarray = np.asarray(vertices, dtype=float).reshape(3, 3)
        self.edges: Tuple[np.ndarray, np.ndarray] = (
            self.vertices[1] - self.vertices[0],
            self.vertices[2] - self.vertices[0],
        )
        if vertex_normals is None:
            self.vertex_normals: np.ndarray = np.tile(face_normal(self.vertices), (3, 1))
        else:
            self.vertex_normals = np.asarray(vertex_normals, dtype=float).reshape(3, 3)
        self.material: MaterialType = material

    def barycentric(self, ray: Ray) -> Tuple[float, float, float] | None:
        """Ray parameter and barycentric (u, v) of the crossing, or None when the ray misses."""
        edge_one, edge_two = self.edges
        h = vector_cross(ray.direction, edge_two)
        determinant = vector_dot(edge_one, h)
        if abs(determinant) < DETERMINANT_EPSILON:
            return None # parallel to the triangle plane

        inverse_determinant = 1.0 / determinant
        s = ray.origin - self.vertices[0]
        u = inverse_determinant * vector_dot(s, h)
        if u < 0.0 or u > 1.0:
            return None

        q = vector_cross(s, edge_one)
        v = inverse_determinant * vector_dot(ray.direction, q)
        if v < 0.0 or u + v > 1.0:
            return None

        t = inverse_determinant * vector_dot(edge_two, q)
        return t, u, v

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        crossing = self.barycentric(ray)
        if crossing is None:
            return None
        t, u, v = crossing
        if not t_min < t < t_max:
            return None

        normal = (
            (1.0 - u - v) * self.vertex_normals[0]
            + u * self.vertex_normals[1]
            + v * self.vertex_normals[2]
        )
        length = vector_length(normal)
        if length > 0.0:
            normal = normal / length
        else:
            normal = face_normal(self.vertices)

        return HitRecord(
            hit_point=ray.at(t),
            ray=ray,
            distance=float(t),
            outward_normal=normal,
            material=self.material,
        )

    def bounding_box(self) -> AABB:
        return AABB.from_points(self.vertices)


class TriangleList:
    """Flat bag of triangles with one cached bounding box."""

    def __init__(self, triangles: Sequence[Triangle]) -> None:
        if not triangles:
            raise ValueError("TriangleList requires at least one triangle")
        self.triangles: list[Triangle] = list(triangles)
        self._bounds = AABB.from_boxes([triangle.bounding_box() for triangle in self.triangles])

    def __len__(self) -> int:
        return len(self.triangles)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        closest_hit: HitRecord | None = None
        for triangle in self.triangles:
            hit = triangle.hit(ray, t_min, t_max)
            if hit is not None:
                closest_hit = hit
                t_max = hit.distance
        return closest_hit

    def bounding_box(self) -> AABB:
        return self._bounds
