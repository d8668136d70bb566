"""Unit tests for triangle meshes.

Tests cover:
- Vertex normal computation
- Input validation
- Hits through the mesh BVH
- Icosphere generation
"""

import numpy as np
import pytest

from pathtrace.surfaces.mesh import Mesh, compute_vertex_normals, icosphere
from pathtrace.typings.ray import Ray
from pathtrace.utils.vector_operations import vector_length

# unit square in the z=0 plane split into two counter-clockwise triangles
SQUARE_POSITIONS = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
SQUARE_FACES = np.array([[0, 1, 2], [2, 3, 0]])


class TestVertexNormals:
    """Tests for smooth normal generation."""

    def test_flat_square(self):
        normals = compute_vertex_normals(SQUARE_POSITIONS, SQUARE_FACES)
        np.testing.assert_allclose(normals, np.tile([0.0, 0.0, 1.0], (4, 1)))

    def test_icosphere_normals_point_outward(self):
        """On a sphere the averaged normals are close to the radial direction."""
        positions, faces = icosphere(np.zeros(3), 1.0, 2)
        normals = compute_vertex_normals(positions, faces)
        radial_dots = np.sum(normals * positions, axis=1)
        assert np.all(radial_dots > 0.98)

    def test_unused_vertex_gets_zero_normal(self):
        positions = np.vstack([SQUARE_POSITIONS, [[5.0, 5.0, 5.0]]])
        normals = compute_vertex_normals(positions, SQUARE_FACES)
        np.testing.assert_allclose(normals[4], np.zeros(3))


class TestMesh:
    """Tests for mesh construction and intersection."""

    def test_hit_square(self, grey):
        mesh = Mesh(SQUARE_POSITIONS, SQUARE_FACES, grey, max_leaf_size=1)
        assert len(mesh) == 2
        hit = mesh.hit(Ray(np.array([0.25, 0.75, 2.0]), np.array([0.0, 0.0, -1.0])), 1e-4, np.inf)
        assert hit is not None
        assert hit.distance == pytest.approx(2.0)
        assert hit.material is grey

    def test_miss_square(self, grey):
        mesh = Mesh(SQUARE_POSITIONS, SQUARE_FACES, grey)
        assert mesh.hit(Ray(np.array([1.5, 0.5, 2.0]), np.array([0.0, 0.0, -1.0])), 1e-4, np.inf) is None

    def test_bounding_box(self, grey):
        box = Mesh(SQUARE_POSITIONS, SQUARE_FACES, grey).bounding_box()
        np.testing.assert_allclose(box.min, [0.0, 0.0, 0.0])
        np.testing.assert_allclose(box.max, [1.0, 1.0, 0.0])

    def test_sphere_mesh_hit_near_radius(self, grey, rng):
        """Rays toward the center of an icosphere hit just inside the circumscribed radius."""
        positions, faces = icosphere(np.zeros(3), 1.0, 2)
        mesh = Mesh(positions, faces, grey, max_leaf_size=4)
        for _ in range(50):
            origin = 5.0 * rng.normal(size=3)
            hit = mesh.hit(Ray(origin, -origin), 1e-4, np.inf)
            assert hit is not None
            assert 0.9 < vector_length(hit.hit_point) <= 1.0 + 1e-9

    @pytest.mark.parametrize(
        "positions, faces",
        [
            (np.zeros((4, 2)), SQUARE_FACES),
            (SQUARE_POSITIONS, np.array([0, 1, 2])),
            (SQUARE_POSITIONS, np.zeros((0, 3))),
            (SQUARE_POSITIONS, np.array([[0, 1, 4]])),
            (SQUARE_POSITIONS, np.array([[0, -1, 2]])),
        ],
    )
    def test_malformed_arrays_rejected(self, grey, positions, faces):
        with pytest.raises(ValueError):
            Mesh(positions, faces, grey)


class TestIcosphere:
    """Tests for the procedural icosphere."""

    @pytest.mark.parametrize("subdivisions", [0, 1, 2])
    def test_counts(self, subdivisions):
        positions, faces = icosphere(np.zeros(3), 1.0, subdivisions)
        assert len(faces) == 20 * 4 ** subdivisions
        assert len(positions) == 10 * 4 ** subdivisions + 2

    def test_vertices_on_sphere(self):
        center = np.array([1.0, 2.0, 3.0])
        positions, _ = icosphere(center, 2.5, 2)
        np.testing.assert_allclose(np.linalg.norm(positions - center, axis=1), 2.5)

    def test_faces_wind_outward(self):
        """Counter-clockwise faces seen from outside have normals pointing away from the center."""
        positions, faces = icosphere(np.zeros(3), 1.0, 1)
        corners = positions[faces]
        normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
        assert np.all(np.sum(normals * corners.mean(axis=1), axis=1) > 0.0)

    def test_negative_subdivisions_rejected(self):
        with pytest.raises(ValueError):
            icosphere(np.zeros(3), 1.0, -1)
