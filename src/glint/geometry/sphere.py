"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere primitive and the HitRecord returned by every
primitive's ray test.

The ray-sphere intersection is found by solving:
    |ray_origin + t * ray_direction - center|^2 = radius^2

Expanding and rearranging gives the quadratic equation:
    a*t^2 + b*t + c = 0

where:
    p = origin - center
    a = dot(direction, direction)
    b = 2 * dot(direction, p)
    c = dot(p, p) - radius^2

Roots behind the ray origin are discarded. Spheres cannot absorb an affine
transform (a non-uniform scale turns them into ellipsoids), so transformed
spheres keep their transform and are intersected in object space.

Example:
    >>> from glint.core.ray import make_ray, vec3
    >>> from glint.geometry.sphere import Sphere
    >>> sphere = Sphere(center=vec3(0, 0, -5), radius=1.0)
    >>> sphere.ray_test(make_ray((0, 0, 0), (0, 0, -1))).distance
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from glint.core.ray import Ray, Vec, dot, normalize, ray_at
from glint.core.transform import AffineTransform
from glint.geometry.aabb import BoundingBox


@dataclass(frozen=True, eq=False)
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        distance: Ray parameter of the hit, in multiples of the ray direction.
            math.inf means the ray missed.
        normal: Unit surface normal at the hit point (zero vector on a miss).
    """

    distance: float
    normal: Vec

    @property
    def hit(self) -> bool:
        """True if the ray hit the primitive."""
        return self.distance < math.inf


def miss() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(distance=math.inf, normal=np.zeros(3))


@dataclass(frozen=True, eq=False)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive float).
    """

    center: Vec
    radius: float

    def ray_test(self, ray: Ray) -> HitRecord:
        """Intersect a ray with the sphere.

        Args:
            ray: The ray to test; its direction need not be normalized.

        Returns:
            The nearest hit in front of the ray origin, or a miss.
        """
        p = ray.origin - self.center
        d = ray.direction

        a = dot(d, d)
        b = 2.0 * dot(d, p)
        c = dot(p, p) - self.radius * self.radius

        disc = b * b - 4.0 * a * c
        if disc < 0.0 or a == 0.0 or self.radius == 0.0:
            return miss()

        sqrt_d = math.sqrt(disc)
        t1 = (-b + sqrt_d) / (2.0 * a)
        t2 = (-b - sqrt_d) / (2.0 * a)

        # Roots behind the origin do not count
        if t1 < 0.0:
            t1 = math.inf
        if t2 < 0.0:
            t2 = math.inf

        distance = min(t1, t2)
        if distance == math.inf:
            return miss()

        point = ray_at(ray, distance)
        return HitRecord(distance=distance, normal=normalize(point - self.center))

    def bounding_box(self) -> BoundingBox:
        """Return center +- (radius, radius, radius)."""
        r = np.full(3, self.radius)
        return BoundingBox(low=self.center - r, high=self.center + r)

    def bake(self, transform: AffineTransform) -> Sphere | None:
        """Spheres cannot absorb a transform; always returns None."""
        return None
