"""Axis-aligned bounding boxes.

Boxes are used by the bounding-box candidate index to cull objects a ray
cannot reach. The slab test treats a zero direction component as a ray
parallel to that pair of planes.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass

import numpy as np

from glint.core.ray import Ray, Vec
from glint.core.transform import AffineTransform


@dataclass(frozen=True, eq=False)
class BoundingBox:
    """An axis-aligned box given by its low and high corners.

    Attributes:
        low: Component-wise minimum corner.
        high: Component-wise maximum corner.
    """

    low: Vec
    high: Vec

    @classmethod
    def from_points(cls, points: list[Vec]) -> BoundingBox:
        """Return the smallest box containing every point."""
        stacked = np.stack(points)
        return cls(low=stacked.min(axis=0), high=stacked.max(axis=0))

    def corners(self) -> list[Vec]:
        """Return the eight corner points."""
        return [
            np.array([xs[0], xs[1], xs[2]], dtype=np.float64)
            for xs in itertools.product(*zip(self.low, self.high))
        ]

    def transformed(self, transform: AffineTransform) -> BoundingBox:
        """Return a box enclosing this box after an affine transform."""
        if transform.is_identity:
            return self
        return BoundingBox.from_points([transform.apply_point(c) for c in self.corners()])

    def contains(self, point: Vec) -> bool:
        """Check whether a point lies inside or on the box."""
        return bool(np.all(point >= self.low) and np.all(point <= self.high))

    def hit_by(self, ray: Ray) -> bool:
        """Slab test: does the ray (t >= 0) pass through the box?"""
        t_near = 0.0
        t_far = math.inf
        for axis in range(3):
            origin = ray.origin[axis]
            direction = ray.direction[axis]
            low = self.low[axis]
            high = self.high[axis]
            if direction == 0.0:
                if origin < low or origin > high:
                    return False
                continue
            t0 = (low - origin) / direction
            t1 = (high - origin) / direction
            if t0 > t1:
                t0, t1 = t1, t0
            t_near = max(t_near, t0)
            t_far = min(t_far, t1)
            if t_near > t_far:
                return False
        return True
