from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Union

import numpy as np

from pathtrace.camera import Camera, PerspectiveCamera
from pathtrace.materials.diffuse_light import DiffuseLight
from pathtrace.materials.lambertian import Lambertian
from pathtrace.materials.metal import Metal
from pathtrace.materials.transparent import Transparent
from pathtrace.surfaces.hittable_list import HittableList
from pathtrace.surfaces.infinite_plane import InfinitePlane
from pathtrace.surfaces.mesh import Mesh, icosphere
from pathtrace.surfaces.rectangle import Rectangle
from pathtrace.surfaces.sphere import Sphere
from pathtrace.surfaces.triangle import Triangle
from pathtrace.typings.hittable import Hittable
from pathtrace.typings.light import Light
from pathtrace.typings.ray import Ray
from pathtrace.typings.sky import Sky
from pathtrace.utils.bvh import BVHNode, build_bvh, build_scene_hierarchy

SceneObject = Union[Sphere, InfinitePlane, Triangle, Rectangle, Mesh, HittableList, BVHNode]


def color(r: int, g: int, b: int) -> np.ndarray:
    """8-bit channel values to a linear float color."""
    return np.array([r, g, b], dtype=float) / 255.0


@dataclass(frozen=True, eq=False)
class GradientSky:
    """Linear blend from bottom to top along one component of the ray direction.

    With remap the component is moved from [-1, 1] to [0, 1] first.
    """

    bottom: np.ndarray
    top: np.ndarray
    axis: int = 1
    scale: float = 1.0
    remap: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "bottom", np.asarray(self.bottom, dtype=float))
        object.__setattr__(self, "top", np.asarray(self.top, dtype=float))

    def __call__(self, ray: Ray) -> np.ndarray:
        t = float(ray.direction[self.axis])
        if self.remap:
            t = 0.5 * (t + 1.0)
        return self.scale * (self.bottom * (1.0 - t) + self.top * t)


@dataclass(frozen=True, eq=False)
class ConstantSky:
    radiance: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "radiance", np.asarray(self.radiance, dtype=float))

    def __call__(self, ray: Ray) -> np.ndarray:
        return self.radiance.copy()


def blue_sky() -> GradientSky:
    return GradientSky(bottom=np.ones(3), top=np.array([0.5, 0.7, 1.0]))


def sunset_sky(scale: float = 1.0) -> GradientSky:
    return GradientSky(
        bottom=0.5 * color(245, 64, 64),
        top=1.5 * color(255, 201, 34),
        axis=0,
        scale=scale,
        remap=False,
    )


@dataclass
class Scene:
    world: Hittable
    camera: Camera
    lights: List[Light] = field(default_factory=list)
    sky: Sky = field(default_factory=blue_sky)
    direct_lighting: bool = False # shade with point lights instead of recursive materials


SceneBuilder = Callable[..., Scene]


def _perspective(
    position: List[float],
    lookat: List[float],
    vertical_fov: float,
    image_width: int,
    image_height: int,
) -> PerspectiveCamera:
    return PerspectiveCamera(
        np.array(position, dtype=float),
        np.array(lookat, dtype=float),
        np.array([0.0, 1.0, 0.0]),
        vertical_fov,
        image_width / image_height,
    )


def single_sphere(image_width: int, image_height: int, max_leaf_size: int = 20) -> Scene:
    """One diffuse ball in front of the camera against a blue gradient."""
    world = HittableList([Sphere(np.array([0.0, 0.0, -1.0]), 0.5, Lambertian(color(128, 128, 128)))])
    camera = _perspective([0.0, 0.0, 1.0], [0.0, 0.0, -1.0], 45.0, image_width, image_height)
    return Scene(world=world, camera=camera, sky=blue_sky())


def simple_primitives(image_width: int, image_height: int, max_leaf_size: int = 20) -> Scene:
    """Ground plane, four spheres (one glass) and a metal triangle under a sunset sky."""
    ground_plane_color = color(58, 222, 99)
    little_ball_color = color(194, 90, 250)
    white = color(255, 255, 255)
    ground_ball_color = color(242, 78, 190)
    triangle_color = color(242, 181, 75)

    objects: List[SceneObject] = [
        Sphere(np.array([0.2, 0.4, -1.0]), 0.5, Transparent(white, 0.1, 0.9, 1.3)),
        Sphere(np.array([-0.5, 1.0, -2.0]), 0.6, Lambertian(triangle_color)),
        Sphere(np.array([0.0, -5.5, -3.0]), 5.0, Lambertian(ground_ball_color)),
        Sphere(np.array([3.0, -2.0, -7.0]), 2.0, Lambertian(little_ball_color)),
        Triangle(
            [np.array([0.5, -0.5, -1.0]), np.array([-0.5, 0.75, -2.5]), np.array([-1.5, -0.2, -1.0])],
            Metal(triangle_color),
        ),
        InfinitePlane(np.array([0.0, -1.0, 0.0]), np.array([0.0, 1.0, 0.0]), Lambertian(ground_plane_color)),
    ]
    camera = _perspective([-1.0, 0.2, 4.0], [0.0, 0.1, 0.0], 35.0, image_width, image_height)
    return Scene(world=build_scene_hierarchy(objects, max_leaf_size), camera=camera, sky=sunset_sky())


def infinite_mirror_hallway(image_width: int, image_height: int, max_leaf_size: int = 20) -> Scene:
    """Two facing mirrors reflecting a small ball back and forth."""
    mirror = Metal(color(255, 255, 255))
    objects: List[SceneObject] = [
        Rectangle(
            [[-2.0, 2.0, 0.0], [-2.0, 2.0, -100.0], [-2.0, 0.0, -100.0], [-2.0, 0.0, 0.0]],
            mirror,
        ),
        Rectangle(
            [[2.0, 2.0, 0.0], [2.0, 2.0, -100.0], [2.0, 0.0, -100.0], [2.0, 0.0, 0.0]],
            mirror,
        ),
        Sphere(np.array([0.0, 1.0, -20.0]), 0.5, Lambertian(color(0, 255, 0))),
        Sphere(np.array([0.0, 10.0, -15.0]), 5.0, mirror),
    ]
    camera = _perspective([0.0, 1.0, 1.0], [0.0, 1.1, 0.0], 35.0, image_width, image_height)
    return Scene(world=build_scene_hierarchy(objects, max_leaf_size), camera=camera, sky=sunset_sky())


def rectangle_light_example(image_width: int, image_height: int, max_leaf_size: int = 20) -> Scene:
    """Dim sky; most light comes from an emissive rectangle above two small spheres."""
    white = color(255, 255, 255)
    objects: List[SceneObject] = [
        Sphere(np.array([2.0, 0.5, -3.5]), 0.5, Lambertian(color(194, 90, 250))),
        Sphere(np.array([4.0, 0.0, -3.0]), 0.5, Transparent(white, 0.1, 0.9, 1.3)),
        InfinitePlane(np.array([0.0, -1.0, 0.0]), np.array([0.0, 1.0, 0.0]), Lambertian(color(58, 222, 99))),
        Rectangle(
            [[3.0, 2.0, -2.0], [5.0, 2.0, -2.0], [5.0, 2.0, -4.0], [3.0, 2.0, -4.0]],
            DiffuseLight(5.0 * white),
        ),
    ]
    camera = _perspective([-1.0, 0.2, 2.0], [0.1, 0.3, 0.0], 35.0, image_width, image_height)
    return Scene(world=build_scene_hierarchy(objects, max_leaf_size), camera=camera, sky=sunset_sky(0.1))


def random_spheres(
    image_width: int,
    image_height: int,
    max_leaf_size: int = 20,
    sphere_count: int = 1000,
    seed: int = 0,
) -> Scene:
    """A wall of randomly colored unit spheres lit by one point light (direct lighting)."""
    rng = np.random.default_rng(seed)
    x_extent = 90.0
    y_extent = 50.0
    z_close = -125.0
    z_far = z_close - 30.0

    spheres: List[Sphere] = []
    for _ in range(sphere_count):
        center = np.array(
            [
                2.0 * x_extent * rng.random() - x_extent,
                2.0 * y_extent * rng.random() - y_extent,
                (z_far - z_close) * rng.random() + z_close,
            ]
        )
        spheres.append(Sphere(center, 1.0, Lambertian(rng.random(3))))

    camera = _perspective([0.0, 0.0, 1.0], [0.0, 0.0, -1.0], 45.0, image_width, image_height)
    return Scene(
        world=build_bvh(spheres, max_leaf_size),
        camera=camera,
        lights=[Light(np.array([50.0, 50.0, -50.0]), 1.0)],
        sky=blue_sky(),
        direct_lighting=True,
    )


def glass_icosphere(
    image_width: int,
    image_height: int,
    max_leaf_size: int = 20,
    subdivisions: int = 2,
) -> Scene:
    """Smooth-shaded glass mesh on a grey floor under an area light."""
    positions, faces = icosphere(np.array([0.0, 1.0, 0.0]), 1.5, subdivisions)
    glass = Transparent(color(255, 255, 255), 0.1, 0.9, 1.3)
    objects: List[SceneObject] = [
        Mesh(positions, faces, glass, max_leaf_size),
        InfinitePlane(np.array([0.0, -1.0, 0.0]), np.array([0.0, 1.0, 0.0]), Lambertian(color(128, 128, 128))),
        Rectangle(
            [[-3.0, 5.0, -3.0], [3.0, 5.0, -3.0], [3.0, 5.0, 3.0], [-3.0, 5.0, 3.0]],
            DiffuseLight(5.0 * color(255, 255, 255)),
        ),
    ]
    camera = _perspective([5.0, 2.0, 20.0], [0.0, 1.0, 0.0], 15.0, image_width, image_height)
    return Scene(world=build_scene_hierarchy(objects, max_leaf_size), camera=camera, sky=sunset_sky(0.1))


SCENES: Dict[str, SceneBuilder] = {
    "single_sphere": single_sphere,
    "simple_primitives": simple_primitives,
    "infinite_mirror_hallway": infinite_mirror_hallway,
    "rectangle_light_example": rectangle_light_example,
    "random_spheres": random_spheres,
    "glass_icosphere": glass_icosphere,
}
