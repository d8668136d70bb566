"""Unit tests for the recursive materials.

Tests cover:
- Lambertian scattering never adds energy
- Metal mirror reflection and absorption of grazing reflections
- Transparent refraction (Snell's law, total internal reflection)
- Branch weighting of the transparent blend
- Diffuse light emission
"""

import numpy as np
import pytest

from pathtrace.materials.diffuse_light import DiffuseLight
from pathtrace.materials.lambertian import Lambertian
from pathtrace.materials.metal import Metal
from pathtrace.materials.transparent import Transparent
from pathtrace.renderer import trace_ray
from pathtrace.scenes import ConstantSky
from pathtrace.surfaces.hittable_list import HittableList
from pathtrace.surfaces.infinite_plane import InfinitePlane
from pathtrace.surfaces.sphere import Sphere
from pathtrace.typings.hit import HitRecord
from pathtrace.typings.ray import Ray

WHITE_SKY = ConstantSky(np.ones(3))


def make_hit(direction, outward_normal, material, point=(0.0, 0.0, 0.0)):
    point = np.asarray(point, dtype=float)
    ray = Ray(point - np.asarray(direction, dtype=float), direction)
    return HitRecord(
        hit_point=point,
        ray=ray,
        distance=1.0,
        outward_normal=np.asarray(outward_normal, dtype=float),
        material=material,
    )


class TestLambertian:
    """Tests for diffuse scattering."""

    def test_no_energy_gain(self, rng):
        """Under a unit sky the returned radiance never exceeds the albedo."""
        albedo = np.array([0.9, 0.5, 0.2])
        material = Lambertian(albedo)
        world = HittableList([Sphere(np.array([0.0, -1.0, 0.0]), 1.0, material),
                              Sphere(np.array([1.5, -0.5, 0.0]), 0.5, material)])
        ray = Ray(np.array([0.0, 3.0, 0.0]), np.array([0.0, -1.0, 0.0]))
        for _ in range(200):
            radiance = trace_ray(ray, world, [], WHITE_SKY, 6, rng)
            assert np.all(radiance >= 0.0)
            assert np.all(radiance <= albedo + 1e-12)

    def test_open_hemisphere_returns_albedo(self, rng):
        """A lone plane under a unit sky sees the sky with every scattered ray."""
        albedo = np.array([0.3, 0.6, 0.9])
        world = HittableList([InfinitePlane(np.zeros(3), np.array([0.0, 1.0, 0.0]), Lambertian(albedo))])
        ray = Ray(np.array([0.0, 1.0, 0.0]), np.array([0.0, -1.0, 0.0]))
        np.testing.assert_allclose(trace_ray(ray, world, [], WHITE_SKY, 3, rng), albedo)

    def test_color(self):
        np.testing.assert_allclose(Lambertian([0.1, 0.2, 0.3]).color(), [0.1, 0.2, 0.3])


class TestMetal:
    """Tests for mirror reflection."""

    def test_mirror_sees_sky(self):
        """One bounce off a tinted mirror returns the tint times the sky."""
        albedo = np.array([0.5, 0.4, 0.3])
        world = HittableList([InfinitePlane(np.zeros(3), np.array([0.0, 1.0, 0.0]), Metal(albedo))])
        ray = Ray(np.array([0.0, 1.0, 0.0]), np.array([1.0, -1.0, 0.0]))
        np.testing.assert_allclose(trace_ray(ray, world, [], WHITE_SKY, 2), albedo)

    def test_depth_exhausted_after_bounce(self):
        """With depth 1 the reflected ray gets no budget and returns black."""
        world = HittableList([InfinitePlane(np.zeros(3), np.array([0.0, 1.0, 0.0]), Metal(np.ones(3)))])
        ray = Ray(np.array([0.0, 1.0, 0.0]), np.array([1.0, -1.0, 0.0]))
        np.testing.assert_allclose(trace_ray(ray, world, [], WHITE_SKY, 1), np.zeros(3))

    def test_grazing_reflection_absorbed(self):
        """A reflection that does not leave the surface contributes nothing."""
        material = Metal(np.ones(3))
        hit = make_hit([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], material)
        result = material.shade(HittableList(), [], WHITE_SKY, hit.ray, hit, 4)
        np.testing.assert_allclose(result, np.zeros(3))


class TestTransparent:
    """Tests for the dielectric blend."""

    def test_normal_incidence_passes_straight(self):
        glass = Transparent(np.ones(3), 0.1, 0.9, 1.5)
        hit = make_hit([0.0, -1.0, 0.0], [0.0, 1.0, 0.0], glass)
        np.testing.assert_allclose(glass.refracted_direction(hit.ray, hit), [0.0, -1.0, 0.0], atol=1e-12)

    def test_snell_law_entering(self):
        """Entering glass, sin(theta_t) = sin(theta_i) / eta and the direction stays unit length."""
        glass = Transparent(np.ones(3), 0.1, 0.9, 1.5)
        sin_i, cos_i = 0.5, np.sqrt(0.75)
        hit = make_hit([sin_i, -cos_i, 0.0], [0.0, 1.0, 0.0], glass)
        refracted = glass.refracted_direction(hit.ray, hit)
        assert refracted is not None
        assert refracted[0] == pytest.approx(sin_i / 1.5)
        assert refracted[1] < 0.0
        assert np.linalg.norm(refracted) == pytest.approx(1.0)

    def test_total_internal_reflection(self):
        """Leaving the dense side beyond the critical angle there is no refracted ray."""
        glass = Transparent(np.ones(3), 0.1, 0.9, 1.5)
        direction = np.array([1.0, 0.1, 0.0]) / np.linalg.norm([1.0, 0.1, 0.0])
        hit = make_hit(direction, [0.0, 1.0, 0.0], glass)
        assert glass.refracted_direction(hit.ray, hit) is None

    def test_refraction_branch_ignored_past_critical_angle(self):
        """Past the critical angle only the reflected radiance comes back, unattenuated and independent of transmittance."""
        albedo = np.array([0.8, 0.9, 1.0])
        direction = np.array([1.0, 0.1, 0.0]) / np.linalg.norm([1.0, 0.1, 0.0])
        results = []
        for transmittance in (0.0, 0.5, 0.9):
            glass = Transparent(albedo, 0.1, transmittance, 1.5)
            hit = make_hit(direction, [0.0, 1.0, 0.0], glass)
            results.append(glass.shade(HittableList(), [], WHITE_SKY, hit.ray, hit, 3))
        for result in results:
            np.testing.assert_allclose(result, np.ones(3))

    def test_branch_weights(self):
        """Both branches escape to a unit sky: reflectance + transmittance / eta^2, tinted."""
        albedo = np.array([1.0, 0.5, 0.25])
        glass = Transparent(albedo, 0.1, 0.9, 1.5)
        hit = make_hit([0.0, -1.0, 0.0], [0.0, 1.0, 0.0], glass)
        result = glass.shade(HittableList(), [], WHITE_SKY, hit.ray, hit, 3)
        np.testing.assert_allclose(result, (0.1 + 0.9 / 2.25) * albedo)


class TestDiffuseLight:
    """Tests for emitters."""

    def test_emits_regardless_of_view(self):
        light = DiffuseLight(np.array([5.0, 4.0, 3.0]))
        for direction in ([0.0, -1.0, 0.0], [1.0, -0.2, 0.3]):
            hit = make_hit(direction, [0.0, 1.0, 0.0], light)
            np.testing.assert_allclose(light.shade(HittableList(), [], WHITE_SKY, hit.ray, hit, 1), [5.0, 4.0, 3.0])

    def test_result_is_a_copy(self):
        light = DiffuseLight(np.ones(3))
        hit = make_hit([0.0, -1.0, 0.0], [0.0, 1.0, 0.0], light)
        light.shade(HittableList(), [], WHITE_SKY, hit.ray, hit, 1)[0] = 7.0
        np.testing.assert_allclose(light.emission, np.ones(3))
