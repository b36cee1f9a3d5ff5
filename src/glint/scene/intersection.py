"""Scene-level ray intersection.

This module finds the nearest object a ray hits. Candidates come from the
scene's index; each is tested either directly (identity transform) or in its
own object space.

For a transformed object the world ray is carried into object space with the
inverse transform, where its direction may change length under scale. The
object-space hit distance is therefore not comparable between objects. It is
converted back by transforming the object-space offset ``t * d_obj`` to world
space and dividing its length by the length of the original world direction:

    t_world = |world_from_object . (t_obj * d_obj)| / |d_world|

This is exact for affine transforms (translate, scale, rotate and their
products), which map the ray to a ray; it would not hold for a projective
transform.

Example:
    >>> from glint.core.ray import make_ray
    >>> from glint.scene.intersection import trace_ray
    >>> rec = trace_ray(scene, make_ray((0, 0, 0), (0, 0, -1)))
    >>> if rec.hit:
    ...     print(rec.distance, rec.obj.material)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from glint.core.matrix import transform_ray
from glint.core.ray import Ray, Vec, magnitude

if TYPE_CHECKING:
    from glint.scene.scene import Scene, SceneObject


@dataclass(frozen=True, eq=False)
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        distance: World-space ray parameter of the hit, in multiples of the
            ray's own direction. math.inf when nothing was hit.
        normal: Unit world-space surface normal (zero vector on a miss).
        obj: The object that was hit, or None.
    """

    distance: float
    normal: Vec
    obj: SceneObject | None

    @property
    def hit(self) -> bool:
        """True if the ray hit an object."""
        return self.obj is not None


def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(distance=math.inf, normal=np.zeros(3), obj=None)


def intersect_object(obj: SceneObject, ray: Ray) -> SceneHitRecord:
    """Intersect one scene object with a world-space ray.

    Args:
        obj: The object to test.
        ray: World-space ray.

    Returns:
        The hit in world space (distance and normal), or a miss record.
    """
    transform = obj.world_from_object
    if transform.is_identity:
        rec = obj.primitive.ray_test(ray)
        if not rec.hit:
            return _make_miss_record()
        return SceneHitRecord(distance=rec.distance, normal=rec.normal, obj=obj)

    object_ray = transform_ray(transform.inverse, ray)
    rec = obj.primitive.ray_test(object_ray)
    if not rec.hit:
        return _make_miss_record()

    world_offset = transform.apply_direction(rec.distance * object_ray.direction)
    distance = magnitude(world_offset) / magnitude(ray.direction)
    return SceneHitRecord(distance=distance, normal=transform.apply_normal(rec.normal), obj=obj)


def trace_ray(scene: Scene, ray: Ray) -> SceneHitRecord:
    """Find the nearest object hit by a ray.

    Tests every candidate the scene's index offers and keeps the smallest
    finite world distance; on equal distances the earlier candidate wins.

    Args:
        scene: The scene to search.
        ray: World-space ray; its direction need not be normalized.

    Returns:
        The nearest hit, or a record with distance inf and obj None.
    """
    result = _make_miss_record()
    for obj in scene.index.candidates(ray):
        rec = intersect_object(obj, ray)
        if rec.distance < result.distance:
            result = rec
    return result
