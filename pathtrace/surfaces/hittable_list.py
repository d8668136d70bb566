from __future__ import annotations

from typing import Iterable, List

from pathtrace.typings.hit import HitRecord
from pathtrace.typings.hittable import Hittable
from pathtrace.typings.ray import Ray
from pathtrace.utils.aabb import AABB


class HittableList:
    """Unordered collection searched by brute force for the closest hit."""

    def __init__(self, objects: Iterable[Hittable] = ()) -> None:
        self.objects: List[Hittable] = list(objects)

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)

    def add(self, hittable: Hittable) -> None:
        self.objects.append(hittable)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        closest_hit: HitRecord | None = None
        for hittable in self.objects:
            hit = hittable.hit(ray, t_min, t_max)
            if hit is None:
                continue
            # every later candidate must beat this one
            closest_hit = hit
            t_max = hit.distance
        return closest_hit

    def bounding_box(self) -> AABB | None:
        if not self.objects:
            return None
        boxes = []
        for hittable in self.objects:
            box = hittable.bounding_box()
            if box is None:
                return None
            boxes.append(box)
        return AABB.from_boxes(boxes)
