from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from pathtrace.surfaces.hittable_list import HittableList
from pathtrace.typings.hit import HitRecord
from pathtrace.typings.hittable import Hittable
from pathtrace.typings.ray import Ray
from pathtrace.utils.aabb import AABB


@dataclass(slots=True)
class BVHPrimitive:
    surface: Hittable
    bounds: AABB

    @property
    def centroid(self) -> np.ndarray:
        return self.bounds.centroid


class BVHNode:
    """Binary bounding volume hierarchy node.

    Children are either nested nodes or HittableList leaves. ``right`` is None
    only for a tree built from a single object. Nodes are never modified after
    construction, so a tree can be shared freely between readers.
    """

    __slots__ = ("bounds", "left", "right")

    def __init__(
        self,
        left: Union["BVHNode", HittableList],
        right: Union["BVHNode", HittableList] | None,
        bounds: AABB,
    ) -> None:
        self.left = left
        self.right = right
        self.bounds = bounds

    @staticmethod
    def build(objects: Iterable[Hittable], max_leaf_size: int = 2) -> "BVHNode":
        return build_bvh(objects, max_leaf_size)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        if self.bounds.hit(ray, t_min, t_max) is None:
            return None

        left_hit = self.left.hit(ray, t_min, t_max)
        if self.right is None:
            return left_hit

        # anything the right side returns is strictly closer than the left hit
        right_max = left_hit.distance if left_hit is not None else t_max
        right_hit = self.right.hit(ray, t_min, right_max)
        if right_hit is not None:
            return right_hit
        return left_hit

    def bounding_box(self) -> AABB:
        return self.bounds

    def depth(self) -> int:
        child_depths = [
            child.depth() if isinstance(child, BVHNode) else 1
            for child in (self.left, self.right)
            if child is not None
        ]
        return 1 + max(child_depths)


def _split_primitives(primitives: Sequence[BVHPrimitive]) -> Tuple[List[BVHPrimitive], List[BVHPrimitive]]:
    centroids = np.array([primitive.centroid for primitive in primitives])
    spread = centroids.max(axis=0) - centroids.min(axis=0)
    split_axis = int(np.argmax(spread))
    projected = centroids[:, split_axis]
    midpoint = float(projected.mean())

    lefts = [primitive for primitive, value in zip(primitives, projected) if value < midpoint]
    rights = [primitive for primitive, value in zip(primitives, projected) if not value < midpoint]
    if lefts and rights:
        return lefts, rights

    # every centroid fell on one side of the mean (e.g. all coincide): halve by sorted centroid
    order = np.argsort(projected, kind="stable")
    mid = len(primitives) // 2
    return [primitives[i] for i in order[:mid]], [primitives[i] for i in order[mid:]]


def _build_child(primitives: Sequence[BVHPrimitive], max_leaf_size: int) -> Union[BVHNode, HittableList]:
    if len(primitives) > max_leaf_size:
        return _build_node(primitives, max_leaf_size)
    return HittableList(primitive.surface for primitive in primitives)


def _build_node(primitives: Sequence[BVHPrimitive], max_leaf_size: int) -> BVHNode:
    bounds = AABB.from_boxes([primitive.bounds for primitive in primitives])
    if len(primitives) == 1:
        return BVHNode(HittableList([primitives[0].surface]), None, bounds)
    lefts, rights = _split_primitives(primitives)
    return BVHNode(
        _build_child(lefts, max_leaf_size),
        _build_child(rights, max_leaf_size),
        bounds,
    )


def build_bvh(objects: Iterable[Hittable], max_leaf_size: int = 2) -> BVHNode:
    """Partition bounded objects into a BVH.

    Splits on the axis of greatest centroid spread at the mean centroid, and
    stops once a side holds at most ``max_leaf_size`` objects.
    """
    if max_leaf_size < 1:
        raise ValueError(f"max_leaf_size must be at least 1, got {max_leaf_size}")

    primitives: List[BVHPrimitive] = []
    for surface in objects:
        bounds = surface.bounding_box()
        if bounds is None:
            raise ValueError(f"{type(surface).__name__} is unbounded and cannot be placed in a BVH")
        primitives.append(BVHPrimitive(surface, bounds))

    if not primitives:
        raise ValueError("BVH requires at least one primitive")
    return _build_node(primitives, max_leaf_size)


def build_scene_hierarchy(objects: Iterable[Hittable], max_leaf_size: int = 2) -> HittableList:
    """Accelerate the bounded objects with a BVH; unbounded ones (planes) stay beside it."""
    bounded: List[Hittable] = []
    unbounded: List[Hittable] = []
    for surface in objects:
        if surface.bounding_box() is None:
            unbounded.append(surface)
        else:
            bounded.append(surface)

    world = HittableList(unbounded)
    if bounded:
        world.add(build_bvh(bounded, max_leaf_size))
    return world
