"""Geometry module for shape primitives and bounding boxes.

This module provides the geometric primitives and their intersection tests:

Components:
    sphere: Sphere primitive and the shared HitRecord
    triangle: Triangle primitive with smooth per-vertex normals
    aabb: Axis-aligned bounding boxes used for candidate culling

The primitive set is closed: every primitive offers the same three
operations, and scene code dispatches on the ``Primitive`` union.

    hit = primitive.ray_test(ray)          # HitRecord (distance, normal)
    box = primitive.bounding_box()         # BoundingBox
    baked = primitive.bake(transform)      # new primitive, or None
"""

from typing import Union

from .aabb import BoundingBox
from .sphere import HitRecord, Sphere, miss
from .triangle import DEGENERATE_TOLERANCE, Triangle, face_normal

# Every shape the renderer knows how to intersect
Primitive = Union[Sphere, Triangle]

__all__ = [
    "BoundingBox",
    "HitRecord",
    "miss",
    "Sphere",
    "Triangle",
    "face_normal",
    "DEGENERATE_TOLERANCE",
    "Primitive",
]
