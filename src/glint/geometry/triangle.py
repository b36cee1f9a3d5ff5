"""Triangle primitive with smooth per-vertex normals.

A triangle stores three vertices and three vertex normals. Normals default to
the face normal ``normalize(cross(v0 - v2, v1 - v2))``; meshes loaded from
files may supply their own so that shading interpolates across faces.

Ray-triangle intersection uses the parametric plane test:
1. Find where the ray meets the plane of the triangle.
2. Express the hit point as ``v2 + t1 * (v0 - v2) + t2 * (v1 - v2)`` by
   solving a 2x2 system in the coordinate plane (xy, xz or yz) where the
   projected triangle has the largest determinant.
3. Accept the hit when the barycentric weights ``(t1, t2, 1 - t1 - t2)`` all
   lie in [0, 1].

Unlike spheres, triangles absorb an affine transform: the vertices move by the
point rule and the normals by the inverse-transpose rule, after which the
object needs no per-ray transform.

Example:
    >>> from glint.core.ray import make_ray, vec3
    >>> from glint.geometry.triangle import Triangle
    >>> tri = Triangle.from_vertices(vec3(0, 0, 0), vec3(1, 0, 0), vec3(0, 1, 0))
    >>> tri.ray_test(make_ray((0.25, 0.25, -1), (0, 0, 1))).distance
    1.0
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from glint.core.ray import Ray, Vec, cross, dot, magnitude, normalize, ray_at
from glint.core.transform import AffineTransform
from glint.geometry.aabb import BoundingBox
from glint.geometry.sphere import HitRecord, miss

# Below this projected determinant magnitude the vertices count as colinear
DEGENERATE_TOLERANCE = 1e-3

# Coordinate pairs tried when solving for barycentric coordinates
_AXIS_PAIRS = ((0, 1), (0, 2), (1, 2))


def _unit_or_zero(v: Vec) -> Vec:
    """Normalize v, or return the zero vector if v has no length."""
    if magnitude(v) == 0.0:
        return np.zeros(3)
    return normalize(v)


def face_normal(v0: Vec, v1: Vec, v2: Vec) -> Vec:
    """Return the unit face normal, or zero for colinear vertices."""
    return _unit_or_zero(cross(v0 - v2, v1 - v2))


def _solve_plane_coordinates(w1: Vec, w2: Vec, rp: Vec) -> tuple[float, float] | None:
    """Solve rp = t1 * w1 + t2 * w2 for a point rp in the plane of w1, w2.

    Returns:
        (t1, t2), or None if the edges are colinear in every axis pair.
    """
    best_det = 0.0
    best_pair = None
    for i, j in _AXIS_PAIRS:
        det = w1[i] * w2[j] - w2[i] * w1[j]
        if abs(det) > abs(best_det):
            best_det = det
            best_pair = (i, j)

    if best_pair is None or abs(best_det) < DEGENERATE_TOLERANCE:
        return None

    i, j = best_pair
    t1 = (w2[j] * rp[i] - w2[i] * rp[j]) / best_det
    t2 = (w1[i] * rp[j] - w1[j] * rp[i]) / best_det
    return float(t1), float(t2)


@dataclass(frozen=True, eq=False)
class Triangle:
    """A triangle with per-vertex normals.

    Attributes:
        vertices: The three corner points (v0, v1, v2).
        normals: Unit normals at each corner, in the same order.
    """

    vertices: tuple[Vec, Vec, Vec]
    normals: tuple[Vec, Vec, Vec]

    @classmethod
    def from_vertices(
        cls,
        v0: Vec,
        v1: Vec,
        v2: Vec,
        normals: tuple[Vec, Vec, Vec] | None = None,
    ) -> Triangle:
        """Create a triangle, defaulting every vertex normal to the face normal.

        Args:
            v0, v1, v2: The corner points.
            normals: Optional per-vertex normals; normalized on the way in.

        Returns:
            A new Triangle.
        """
        vertices = tuple(np.asarray(v, dtype=np.float64) for v in (v0, v1, v2))
        if normals is None:
            n = face_normal(*vertices)
            return cls(vertices=vertices, normals=(n, n.copy(), n.copy()))
        return cls(
            vertices=vertices,
            normals=tuple(_unit_or_zero(np.asarray(n, dtype=np.float64)) for n in normals),
        )

    def barycentric(self, point: Vec) -> tuple[float, float, float] | None:
        """Barycentric weights of a point in the triangle's plane.

        Args:
            point: A point lying in the plane of the triangle.

        Returns:
            Weights for (v0, v1, v2), or None for a degenerate triangle.
        """
        v0, v1, v2 = self.vertices
        solved = _solve_plane_coordinates(v0 - v2, v1 - v2, point - v2)
        if solved is None:
            return None
        t1, t2 = solved
        return t1, t2, 1.0 - t1 - t2

    def ray_test(self, ray: Ray) -> HitRecord:
        """Intersect a ray with the triangle.

        Args:
            ray: The ray to test; its direction need not be normalized.

        Returns:
            The hit with an interpolated smooth normal, or a miss for parallel
            rays, hits behind the origin, points outside the triangle and
            degenerate (colinear) triangles.
        """
        v0, v1, v2 = self.vertices
        w1 = v0 - v2
        w2 = v1 - v2
        plane_normal = cross(w1, w2)
        if magnitude(plane_normal) == 0.0:
            return miss()
        n = normalize(plane_normal)

        denom = dot(n, ray.direction)
        if denom == 0.0:
            return miss()
        s = dot(n, v0 - ray.origin) / denom
        if not np.isfinite(s) or s < 0.0:
            return miss()

        solved = _solve_plane_coordinates(w1, w2, ray_at(ray, s) - v2)
        if solved is None:
            return miss()

        t1, t2 = solved
        t3 = 1.0 - t1 - t2
        if t1 < 0.0 or t1 > 1.0 or t2 < 0.0 or t2 > 1.0 or t3 < 0.0:
            return miss()

        n0, n1, n2 = self.normals
        blended = t1 * n0 + t2 * n1 + t3 * n2
        if magnitude(blended) == 0.0:
            # Opposing vertex normals cancel out; shade with the face normal
            blended = n
        return HitRecord(distance=float(s), normal=normalize(blended))

    def bounding_box(self) -> BoundingBox:
        """Return the component-wise min/max of the three vertices."""
        return BoundingBox.from_points(list(self.vertices))

    def bake(self, transform: AffineTransform) -> Triangle:
        """Return a copy with the transform applied to vertices and normals."""
        if transform.is_identity:
            return self
        vertices = tuple(transform.apply_point(v) for v in self.vertices)
        normals = tuple(
            transform.apply_normal(n) if magnitude(n) > 0.0 else n for n in self.normals
        )
        return Triangle(vertices=vertices, normals=normals)
