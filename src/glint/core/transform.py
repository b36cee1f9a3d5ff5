"""Affine transforms with cached inverse and identity fast path.

An AffineTransform pairs a 4x4 matrix with its inverse. The inverse serves
two purposes during rendering:

1. Moving a world-space ray into object space before intersection.
2. Moving an object-space normal back to world space. Normals use the
   inverse-transpose of the matrix, because under non-uniform scale a
   normal transformed like an ordinary direction is no longer perpendicular
   to the surface.

Transforms are only built from translations, axis scales and rotations, so
the inverse is assembled from the inverse of each factor rather than by
general matrix inversion. Scale factors at or near zero are rejected when
the transform is built.

Example:
    >>> from glint.core.transform import AffineTransform
    >>> from glint.core.ray import vec3
    >>> xf = AffineTransform.translation(vec3(0, 0, -5)).compose(
    ...     AffineTransform.scaling(2.0, 1.0, 1.0)
    ... )
    >>> xf.apply_point(vec3(1, 0, 0))  # scaled first, then moved: (2, 0, -5)
"""

from __future__ import annotations

import math

import numpy as np

from glint.core import matrix
from glint.core.matrix import Mat4
from glint.core.ray import Ray, Vec, magnitude, normalize

# Smallest accepted magnitude for an axis scale factor
SCALE_TOLERANCE = 1e-9


class TransformError(ValueError):
    """Raised when a transform would not be invertible."""


class AffineTransform:
    """A composable affine transform with its inverse.

    Attributes:
        matrix: The forward (object-to-world) matrix.
        inverse: The inverse (world-to-object) matrix.
        is_identity: Cached flag; when set every apply method returns its
            input unchanged without touching the matrices.
    """

    __slots__ = ("matrix", "inverse", "is_identity")

    def __init__(self, forward: Mat4, inverse: Mat4) -> None:
        self.matrix = forward
        self.inverse = inverse
        self.is_identity = bool(np.array_equal(forward, matrix.identity()))

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def identity(cls) -> AffineTransform:
        """Return the identity transform."""
        return cls(matrix.identity(), matrix.identity())

    @classmethod
    def translation(cls, offset: Vec) -> AffineTransform:
        """Return a translation by offset."""
        offset = np.asarray(offset, dtype=np.float64)
        return cls(matrix.translate(offset), matrix.translate(-offset))

    @classmethod
    def scaling(cls, x: float, y: float, z: float) -> AffineTransform:
        """Return an axis-aligned scale.

        Raises:
            TransformError: If any factor is zero or nearly zero.
        """
        for axis, factor in zip("xyz", (x, y, z)):
            if not math.isfinite(factor) or abs(factor) < SCALE_TOLERANCE:
                raise TransformError(
                    f"Scale factor along {axis} must be finite and non-zero, got {factor}"
                )
        return cls(matrix.hscale(x, y, z), matrix.hscale(1.0 / x, 1.0 / y, 1.0 / z))

    @classmethod
    def rotation(cls, axis: Vec, angle: float) -> AffineTransform:
        """Return a rotation by angle radians about axis.

        Raises:
            TransformError: If the axis has zero length.
        """
        axis = np.asarray(axis, dtype=np.float64)
        if magnitude(axis) == 0.0:
            raise TransformError("Rotation axis must be non-zero")
        forward = matrix.rotate(axis, angle)
        # Rotation matrices are orthogonal
        return cls(forward, forward.T.copy())

    @classmethod
    def rotation_degrees(cls, rotation: Vec) -> AffineTransform:
        """Return a rotation encoded as a single vector.

        The direction of the vector is the axis and its length is the angle
        in degrees. A zero vector is the identity.
        """
        rotation = np.asarray(rotation, dtype=np.float64)
        degrees = magnitude(rotation)
        if degrees == 0.0:
            return cls.identity()
        return cls.rotation(rotation, math.radians(degrees))

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def compose(self, other: AffineTransform) -> AffineTransform:
        """Return the transform that applies other first, then self."""
        if other.is_identity:
            return self
        if self.is_identity:
            return other
        return AffineTransform(self.matrix @ other.matrix, other.inverse @ self.inverse)

    def invert(self) -> AffineTransform:
        """Return the inverse transform."""
        return AffineTransform(self.inverse, self.matrix)

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------

    def apply_point(self, point: Vec) -> Vec:
        """Transform a point."""
        if self.is_identity:
            return point
        return matrix.transform_point(self.matrix, point)

    def apply_direction(self, direction: Vec) -> Vec:
        """Transform a direction (ignores translation)."""
        if self.is_identity:
            return direction
        return matrix.transform_direction(self.matrix, direction)

    def apply_ray(self, ray: Ray) -> Ray:
        """Transform a ray's origin and direction."""
        if self.is_identity:
            return ray
        return matrix.transform_ray(self.matrix, ray)

    def apply_normal(self, normal: Vec) -> Vec:
        """Transform a surface normal by the inverse-transpose rule.

        Args:
            normal: A non-zero surface normal in this transform's source space.

        Returns:
            The unit normal in the destination space.
        """
        if self.is_identity:
            return normal
        return normalize(matrix.transform_direction(self.inverse.T, normal))

    def __repr__(self) -> str:
        if self.is_identity:
            return "AffineTransform.identity()"
        return f"AffineTransform(matrix={self.matrix.tolist()})"
