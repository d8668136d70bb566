from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

from pathtrace.typings.hit import HitRecord
from pathtrace.typings.ray import Ray
from pathtrace.typings.sky import Sky

if TYPE_CHECKING:
    from pathtrace.typings.hittable import Hittable
    from pathtrace.typings.light import Light


@dataclass(frozen=True, slots=True, eq=False)
class DiffuseLight:
    """Emissive surface. Terminates the path: the emission is all it returns."""

    emission: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "emission", np.asarray(self.emission, dtype=float))

    def shade(
        self,
        world: Hittable,
        lights: Sequence[Light],
        sky: Sky,
        incoming_ray: Ray,
        hit: HitRecord,
        depth: int,
        rng: np.random.Generator | None = None,
    ) -> np.ndarray:
        return self.emission.copy()

    def color(self) -> np.ndarray:
        return self.emission
