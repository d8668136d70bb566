"""Unit tests for triangles, triangle lists and rectangles.

Tests cover:
- Rays through random triangle centroids hit with valid barycentrics
- Misses outside the edges and for rays parallel to the plane
- Interpolated vertex normals
- Rectangles split into two triangles
"""

import numpy as np
import pytest

from pathtrace.surfaces.rectangle import Rectangle
from pathtrace.surfaces.triangle import Triangle, TriangleList, face_normal
from pathtrace.typings.ray import Ray
from pathtrace.utils.vector_operations import vector_length


def unit_triangle(material):
    return Triangle(
        [np.array([0.0, 0.0, 0.0]), np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0])],
        material,
    )


class TestTriangleIntersection:
    """Tests for Moller-Trumbore intersection."""

    def test_centroid_rays_hit(self, grey, rng):
        """A ray aimed at the centroid of a random triangle hits it with u, v >= 0 and u + v <= 1."""
        for _ in range(100):
            vertices = rng.uniform(-5.0, 5.0, (3, 3))
            if vector_length(np.cross(vertices[1] - vertices[0], vertices[2] - vertices[0])) < 1e-2:
                continue
            triangle = Triangle(vertices, grey)
            centroid = vertices.mean(axis=0)
            normal = face_normal(vertices)
            origin = centroid + 3.0 * normal + 0.3 * rng.uniform(-1.0, 1.0, 3)
            ray = Ray(origin, centroid - origin)

            crossing = triangle.barycentric(ray)
            assert crossing is not None
            t, u, v = crossing
            assert u >= 0.0 and v >= 0.0 and u + v <= 1.0
            np.testing.assert_allclose(ray.at(t), centroid, atol=1e-9)
            assert triangle.hit(ray, 1e-4, np.inf) is not None

    def test_miss_outside_edge(self, grey):
        triangle = unit_triangle(grey)
        ray = Ray(np.array([0.8, 0.8, 1.0]), np.array([0.0, 0.0, -1.0]))
        assert triangle.hit(ray, 1e-4, np.inf) is None

    def test_parallel_ray_misses(self, grey):
        """A ray in the triangle's plane has a vanishing determinant and misses."""
        triangle = unit_triangle(grey)
        ray = Ray(np.array([-1.0, 0.2, 0.0]), np.array([1.0, 0.0, 0.0]))
        assert triangle.hit(ray, 1e-4, np.inf) is None

    def test_behind_origin(self, grey):
        triangle = unit_triangle(grey)
        ray = Ray(np.array([0.2, 0.2, 1.0]), np.array([0.0, 0.0, 1.0]))
        assert triangle.hit(ray, 1e-4, np.inf) is None

    def test_flat_normal(self, grey):
        """Without vertex normals the hit carries the counter-clockwise face normal."""
        triangle = unit_triangle(grey)
        hit = triangle.hit(Ray(np.array([0.2, 0.2, 1.0]), np.array([0.0, 0.0, -1.0])), 1e-4, np.inf)
        assert hit is not None
        assert hit.distance == pytest.approx(1.0)
        np.testing.assert_allclose(hit.outward_normal, [0.0, 0.0, 1.0])

    def test_interpolated_normal(self, grey):
        """Vertex normals are blended with the barycentric weights and renormalized."""
        normals = [np.array([0.0, 0.0, 1.0]), np.array([1.0, 0.0, 0.0]), np.array([0.0, 0.0, 1.0])]
        triangle = Triangle(
            [np.array([0.0, 0.0, 0.0]), np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0])],
            grey,
            vertex_normals=normals,
        )
        hit = triangle.hit(Ray(np.array([0.5, 0.0, 1.0]), np.array([0.0, 0.0, -1.0])), 1e-4, np.inf)
        assert hit is not None
        expected = np.array([0.5, 0.0, 0.5]) / np.sqrt(0.5)
        np.testing.assert_allclose(hit.outward_normal, expected, atol=1e-9)

    def test_bounding_box(self, grey):
        box = unit_triangle(grey).bounding_box()
        np.testing.assert_allclose(box.min, [0.0, 0.0, 0.0])
        np.testing.assert_allclose(box.max, [1.0, 1.0, 0.0])


class TestTriangleList:
    """Tests for the flat triangle container."""

    def test_closest_of_stacked_triangles(self, grey):
        """With two parallel triangles the nearer one wins regardless of order."""
        far = Triangle([[0.0, 0.0, -2.0], [1.0, 0.0, -2.0], [0.0, 1.0, -2.0]], grey)
        near = Triangle([[0.0, 0.0, -1.0], [1.0, 0.0, -1.0], [0.0, 1.0, -1.0]], grey)
        ray = Ray(np.array([0.2, 0.2, 0.0]), np.array([0.0, 0.0, -1.0]))
        for ordering in ([far, near], [near, far]):
            hit = TriangleList(ordering).hit(ray, 1e-4, np.inf)
            assert hit is not None
            assert hit.distance == pytest.approx(1.0)

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            TriangleList([])


class TestRectangle:
    """Tests for quads built from two triangles."""

    def setup_method(self):
        self.points = [[-1.0, 2.0, -1.0], [1.0, 2.0, -1.0], [1.0, 2.0, 1.0], [-1.0, 2.0, 1.0]]

    def test_both_halves_hit(self, grey):
        """Points on either side of the splitting diagonal are hit."""
        rectangle = Rectangle(self.points, grey)
        for x, z in ((0.7, -0.5), (-0.7, 0.5)):
            hit = rectangle.hit(Ray(np.array([x, 0.0, z]), np.array([0.0, 1.0, 0.0])), 1e-4, np.inf)
            assert hit is not None
            assert hit.distance == pytest.approx(2.0)

    def test_miss_outside(self, grey):
        rectangle = Rectangle(self.points, grey)
        assert rectangle.hit(Ray(np.array([1.5, 0.0, 0.0]), np.array([0.0, 1.0, 0.0])), 1e-4, np.inf) is None

    def test_flat_bounding_box(self, grey):
        box = Rectangle(self.points, grey).bounding_box()
        np.testing.assert_allclose(box.min, [-1.0, 2.0, -1.0])
        np.testing.assert_allclose(box.max, [1.0, 2.0, 1.0])
