from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np

from pathtrace.surfaces.triangle import Triangle
from pathtrace.typings.hit import HitRecord
from pathtrace.typings.material import MaterialType
from pathtrace.typings.ray import Ray
from pathtrace.utils.aabb import AABB
from pathtrace.utils.bvh import BVHNode, build_bvh
from pathtrace.utils.vector_operations import normalize_vector


def compute_vertex_normals(positions: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Per-vertex normals: normalized sum of the unit normals of every adjacent face.

    Faces are not weighted by area or angle. Degenerate faces contribute
    nothing and vertices used by no valid face get a zero normal.
    """
    corners = positions[faces]
    face_normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
    lengths = np.linalg.norm(face_normals, axis=1, keepdims=True)
    face_normals = np.divide(face_normals, lengths, out=np.zeros_like(face_normals), where=lengths > 0.0)

    vertex_normals = np.zeros_like(positions)
    for corner in range(3):
        np.add.at(vertex_normals, faces[:, corner], face_normals)
    lengths = np.linalg.norm(vertex_normals, axis=1, keepdims=True)
    return np.divide(vertex_normals, lengths, out=np.zeros_like(vertex_normals), where=lengths > 0.0)


class Mesh:
    """Indexed triangle soup with smooth vertex normals, accelerated by its own BVH."""

    def __init__(
        self,
        positions: np.ndarray,
        faces: np.ndarray,
        material: MaterialType,
        max_leaf_size: int = 32,
    ) -> None:
        self.positions: np.ndarray = np.asarray(positions, dtype=float)
        self.faces: np.ndarray = np.asarray(faces, dtype=np.int64)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (V, 3), got {self.positions.shape}")
        if self.faces.ndim != 2 or self.faces.shape[1] != 3 or len(self.faces) == 0:
            raise ValueError(f"faces must have shape (F, 3) with F > 0, got {self.faces.shape}")
        if self.faces.min() < 0 or self.faces.max() >= len(self.positions):
            raise ValueError("face indices out of range for the vertex array")

        self.material: MaterialType = material
        self.vertex_normals: np.ndarray = compute_vertex_normals(self.positions, self.faces)
        triangles = [
            Triangle(self.positions[face], material, vertex_normals=self.vertex_normals[face])
            for face in self.faces
        ]
        self.bvh: BVHNode = build_bvh(triangles, max_leaf_size)

    def __len__(self) -> int:
        return len(self.faces)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        return self.bvh.hit(ray, t_min, t_max)

    def bounding_box(self) -> AABB:
        return self.bvh.bounding_box()


_GOLDEN_RATIO: float = (1.0 + 5.0 ** 0.5) / 2.0

_ICOSAHEDRON_VERTICES = np.array(
    [
        [-1.0, _GOLDEN_RATIO, 0.0], [1.0, _GOLDEN_RATIO, 0.0],
        [-1.0, -_GOLDEN_RATIO, 0.0], [1.0, -_GOLDEN_RATIO, 0.0],
        [0.0, -1.0, _GOLDEN_RATIO], [0.0, 1.0, _GOLDEN_RATIO],
        [0.0, -1.0, -_GOLDEN_RATIO], [0.0, 1.0, -_GOLDEN_RATIO],
        [_GOLDEN_RATIO, 0.0, -1.0], [_GOLDEN_RATIO, 0.0, 1.0],
        [-_GOLDEN_RATIO, 0.0, -1.0], [-_GOLDEN_RATIO, 0.0, 1.0],
    ],
    dtype=float,
)

# counter-clockwise seen from outside
_ICOSAHEDRON_FACES = np.array(
    [
        [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
        [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
        [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
        [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
    ],
    dtype=np.int64,
)


def icosphere(center: np.ndarray, radius: float, subdivisions: int = 2) -> Tuple[np.ndarray, np.ndarray]:
    """Vertex and face arrays of a subdivided icosahedron projected onto a sphere.

    Every subdivision splits each face into four, so there are 20 * 4^k faces
    and 10 * 4^k + 2 vertices.
    """
    if subdivisions < 0:
        raise ValueError(f"subdivisions must not be negative, got {subdivisions}")

    unit_vertices: List[np.ndarray] = [normalize_vector(v) for v in _ICOSAHEDRON_VERTICES]
    faces: List[Tuple[int, int, int]] = [tuple(face) for face in _ICOSAHEDRON_FACES.tolist()]

    for _ in range(subdivisions):
        midpoint_cache: Dict[Tuple[int, int], int] = {}

        def midpoint(a: int, b: int) -> int:
            key = (a, b) if a < b else (b, a)
            if key not in midpoint_cache:
                middle = unit_vertices[a] + unit_vertices[b]
                unit_vertices.append(normalize_vector(middle))
                midpoint_cache[key] = len(unit_vertices) - 1
            return midpoint_cache[key]

        refined: List[Tuple[int, int, int]] = []
        for a, b, c in faces:
            ab, bc, ca = midpoint(a, b), midpoint(b, c), midpoint(c, a)
            refined.extend([(a, ab, ca), (b, bc, ab), (c, ca, bc), (ab, bc, ca)])
        faces = refined

    positions = np.asarray(center, dtype=float) + float(radius) * np.array(unit_vertices)
    return positions, np.array(faces, dtype=np.int64)
