from abc import ABC, abstractmethod

import numpy as np

from pathtrace.typings.ray import Ray
from pathtrace.utils.vector_operations import normalize_vector, vector_cross


class Camera(ABC):
    """Image plane spanned by ``horizontal`` and ``vertical`` from ``lower_left_corner``.

    Abstract: subclasses decide how a point on the plane turns into a ray.
    """

    def __init__(
        self,
        position: np.ndarray,
        lookat: np.ndarray,
        up_vector: np.ndarray,
        vertical_fov: float,
        aspect_ratio: float,
    ) -> None:
        self.move_camera(position, lookat, up_vector, vertical_fov, aspect_ratio)

    def move_camera(
        self,
        position: np.ndarray,
        lookat: np.ndarray,
        up_vector: np.ndarray,
        vertical_fov: float,
        aspect_ratio: float,
    ) -> None:
        """Re-aim the camera; vertical_fov is in degrees."""
        self.origin = np.asarray(position, dtype=float)
        self.lookat = np.asarray(lookat, dtype=float)
        self.up_vector = np.asarray(up_vector, dtype=float)
        self.vertical_fov = float(vertical_fov)
        self.aspect_ratio = float(aspect_ratio)
        self._recompute_basis()

    def _recompute_basis(self) -> None:
        """Camera axes must have unit length so the viewport sizes scale them correctly.
        into_camera points backwards (from lookat to the eye), right and true_up span the image plane."""
        viewport_height = 2.0 * float(np.tan(np.radians(self.vertical_fov) / 2.0))
        viewport_width = self.aspect_ratio * viewport_height

        into_camera = normalize_vector(self.origin - self.lookat)
        right = normalize_vector(vector_cross(self.up_vector, into_camera)) # horizontal axis
        true_up = vector_cross(into_camera, right) # vertical axis

        self.into_camera: np.ndarray = into_camera
        self.right: np.ndarray = right
        self.true_up: np.ndarray = true_up
        self.horizontal: np.ndarray = viewport_width * right
        self.vertical: np.ndarray = viewport_height * true_up
        self.lower_left_corner: np.ndarray = self._image_plane_corner()

    def _image_plane_corner(self) -> np.ndarray:
        return self.origin - self.horizontal / 2.0 - self.vertical / 2.0

    @abstractmethod
    def get_ray(self, u: float, v: float) -> Ray:
        """Ray through the image-plane point (u, v), both in [0, 1]."""


class PerspectiveCamera(Camera):
    """Pinhole camera; the image plane sits one unit in front of the eye."""

    def _image_plane_corner(self) -> np.ndarray:
        return super()._image_plane_corner() - self.into_camera

    def get_ray(self, u: float, v: float) -> Ray:
        # u is horizontal left to right, v vertical bottom to top, both in [0, 1]
        pixel_point = self.lower_left_corner + u * self.horizontal + v * self.vertical
        return Ray(origin=self.origin, direction=pixel_point - self.origin)


class OrthographicCamera(Camera):
    """Parallel projection: every ray runs along the view direction from its own point on the plane."""

    def _recompute_basis(self) -> None:
        super()._recompute_basis()
        self.orthogonal_direction: np.ndarray = self.lookat - self.origin

    def get_ray(self, u: float, v: float) -> Ray:
        plane_point = self.lower_left_corner + u * self.horizontal + v * self.vertical
        return Ray(origin=plane_point, direction=self.orthogonal_direction)
