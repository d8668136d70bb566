from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import TYPE_CHECKING, Callable, List, Sequence, Tuple

import numpy as np
from PIL import Image

from pathtrace.scene_settings import RenderSettings
from pathtrace.typings.light import Light
from pathtrace.typings.ray import Ray
from pathtrace.typings.sky import Sky
from pathtrace.utils.sampling import canonical_multi_jitter, shuffle_multi_jitter
from pathtrace.utils.vector_operations import color_to_uint8

if TYPE_CHECKING:
    from pathtrace.scenes import Scene
    from pathtrace.typings.hittable import Hittable

MIN_HIT_DISTANCE: float = 1e-4 # keeps spawned rays off the surface they leave
MAX_HIT_DISTANCE: float = float("inf")
AMBIENT_WEIGHT: float = 0.05

ProgressCallback = Callable[[int, int], None]


def save_image(image_array: np.ndarray, output_path: str, gamma: float = 2.2) -> None:
    image = Image.fromarray(to_rgb8(image_array, gamma))
    image.save(output_path)


def to_rgb8(image_array: np.ndarray, gamma: float = 2.2) -> np.ndarray:
    """Gamma-encode linear radiance and quantize it to 8-bit RGB."""
    linear = np.maximum(np.asarray(image_array, dtype=float), 0.0)
    return color_to_uint8(np.power(linear, 1.0 / gamma))


def trace_ray(
    ray: Ray,
    world: Hittable,
    lights: Sequence[Light],
    sky: Sky,
    depth: int,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """
    Radiance arriving along ray (linear, unclamped).
    Materials call back into this with depth - 1 for every bounce, so the
    recursion ends after at most depth hits whatever the scene looks like.
    """
    if depth <= 0:
        return np.zeros(3, dtype=float)

    hit = world.hit(ray, MIN_HIT_DISTANCE, MAX_HIT_DISTANCE)
    if hit is None:
        return np.asarray(sky(ray), dtype=float)

    if rng is None:
        rng = np.random.default_rng()
    return hit.material.shade(world, lights, sky, ray, hit, depth, rng)


def shade_direct(
    ray: Ray,
    world: Hittable,
    lights: Sequence[Light],
    sky: Sky,
) -> np.ndarray:
    """Non-recursive shading with point lights: ambient + shadowed diffuse + specular."""
    hit = world.hit(ray, MIN_HIT_DISTANCE, MAX_HIT_DISTANCE)
    if hit is None:
        return np.asarray(sky(ray), dtype=float)

    total_color = hit.material.color() * AMBIENT_WEIGHT
    for light in lights:
        total_color = total_color + light.weight * light.shade(hit, world)
    return total_color


def _render_rows(
    scene: Scene,
    settings: RenderSettings,
    row_start: int,
    row_stop: int,
    seed: np.random.SeedSequence,
) -> np.ndarray:
    rng = np.random.default_rng(seed)
    canonical_samples = canonical_multi_jitter(settings.samples_level, rng)
    width = float(settings.width)
    height = float(settings.height)
    rows = np.zeros((row_stop - row_start, settings.width, 3), dtype=float)

    for i in range(row_start, row_stop):
        image_y = settings.height - 1 - i # row 0 is the top of the image
        for j in range(settings.width):
            samples = shuffle_multi_jitter(canonical_samples, rng).reshape(-1, 2)
            pixel_color = np.zeros(3, dtype=float)
            for sample_x, sample_y in samples:
                u = (j + sample_x) / width
                v = (image_y + sample_y) / height
                ray = scene.camera.get_ray(u, v)
                if scene.direct_lighting:
                    pixel_color += shade_direct(ray, scene.world, scene.lights, scene.sky)
                else:
                    pixel_color += trace_ray(ray, scene.world, scene.lights, scene.sky, settings.max_depth, rng)
            rows[i - row_start, j, :] = pixel_color / settings.samples_per_pixel

    return rows


# Set once per worker process by the pool initializer; read-only afterwards.
_WORKER_SCENE: Tuple[Scene, RenderSettings] | None = None


def _install_worker_scene(scene: Scene, settings: RenderSettings) -> None:
    global _WORKER_SCENE
    _WORKER_SCENE = (scene, settings)


def _render_rows_in_worker(row_start: int, row_stop: int, seed: np.random.SeedSequence) -> Tuple[int, np.ndarray]:
    if _WORKER_SCENE is None:
        raise RuntimeError("worker process has no scene installed")
    scene, settings = _WORKER_SCENE
    return row_start, _render_rows(scene, settings, row_start, row_stop, seed)


def render(
    scene: Scene,
    settings: RenderSettings,
    progress: ProgressCallback | None = None,
) -> np.ndarray:
    """
    Render the scene into a linear (height, width, 3) radiance image.

    Every pixel averages samples_level^2 multi-jittered samples. Rows are
    rendered in chunks, each with its own random stream spawned from
    settings.seed, so the result does not depend on the number of workers.
    With several workers the scene is shipped once to each worker process by
    the pool initializer and shared by every chunk that process renders.
    progress(done_rows, total_rows) is called once per finished chunk.
    """
    settings.validate()
    image = np.zeros((settings.height, settings.width, 3), dtype=float)
    chunks: List[Tuple[int, int]] = [
        (row_start, min(row_start + settings.chunk_rows, settings.height))
        for row_start in range(0, settings.height, settings.chunk_rows)
    ]
    seeds = np.random.SeedSequence(settings.seed).spawn(len(chunks))
    done_rows = 0

    if settings.workers <= 1:
        for (row_start, row_stop), seed in zip(chunks, seeds):
            image[row_start:row_stop] = _render_rows(scene, settings, row_start, row_stop, seed)
            done_rows += row_stop - row_start
            if progress is not None:
                progress(done_rows, settings.height)
        return image

    with ProcessPoolExecutor(
        max_workers=settings.workers,
        initializer=_install_worker_scene,
        initargs=(scene, settings),
    ) as executor:
        futures = [
            executor.submit(_render_rows_in_worker, row_start, row_stop, seed)
            for (row_start, row_stop), seed in zip(chunks, seeds)
        ]
        for future in as_completed(futures):
            row_start, rows = future.result()
            image[row_start:row_start + len(rows)] = rows
            done_rows += len(rows)
            if progress is not None:
                progress(done_rows, settings.height)

    return image
