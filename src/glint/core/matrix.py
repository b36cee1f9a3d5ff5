"""4x4 matrix construction and application helpers.

Matrices are float64 NumPy arrays of shape (4, 4) acting on homogeneous
column vectors, so ``m @ hpoint(p)`` transforms a point and transforms
compose right-to-left: ``b @ a`` applies ``a`` first.

All rotation angles are in radians. Rotation axes are normalized before the
matrix is built.

Example:
    >>> from glint.core.matrix import rotate_z, translate, transform_point
    >>> from glint.core.ray import vec3
    >>> m = translate(vec3(1.0, 0.0, 0.0)) @ rotate_z(3.14159265 / 2)
    >>> transform_point(m, vec3(1.0, 0.0, 0.0))  # ~(1, 1, 0)
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from glint.core.ray import Ray, Vec, hpoint, hvec, normalize, project

# Type alias for 4x4 matrices
Mat4 = npt.NDArray[np.float64]


# =============================================================================
# Constructors
# =============================================================================


def mat4(entries: list[float]) -> Mat4:
    """Build a matrix from 16 row-major entries.

    Raises:
        ValueError: If the entry count is not 16.
    """
    if len(entries) != 16:
        raise ValueError(f"mat4 expects 16 entries, got {len(entries)}")
    return np.array(entries, dtype=np.float64).reshape(4, 4)


def identity() -> Mat4:
    """Return the 4x4 identity matrix."""
    return np.eye(4, dtype=np.float64)


def zero() -> Mat4:
    """Return the 4x4 zero matrix."""
    return np.zeros((4, 4), dtype=np.float64)


def hzero() -> Mat4:
    """Return the homogeneous zero matrix (zero except for a 1 at (3, 3))."""
    m = zero()
    m[3, 3] = 1.0
    return m


def scale(x: float, y: float, z: float, w: float) -> Mat4:
    """Return a diagonal matrix scaling all four components."""
    return np.diag([x, y, z, w]).astype(np.float64)


def hscale(x: float, y: float, z: float) -> Mat4:
    """Return a homogeneous axis scale matrix (w is left untouched)."""
    return scale(x, y, z, 1.0)


def rotate_x(angle: float) -> Mat4:
    """Return a rotation about the x axis by angle radians."""
    c, s = math.cos(angle), math.sin(angle)
    return mat4([
        1.0, 0.0, 0.0, 0.0,
        0.0, c, -s, 0.0,
        0.0, s, c, 0.0,
        0.0, 0.0, 0.0, 1.0,
    ])  # fmt: skip


def rotate_y(angle: float) -> Mat4:
    """Return a rotation about the y axis by angle radians."""
    c, s = math.cos(angle), math.sin(angle)
    return mat4([
        c, 0.0, s, 0.0,
        0.0, 1.0, 0.0, 0.0,
        -s, 0.0, c, 0.0,
        0.0, 0.0, 0.0, 1.0,
    ])  # fmt: skip


def rotate_z(angle: float) -> Mat4:
    """Return a rotation about the z axis by angle radians."""
    c, s = math.cos(angle), math.sin(angle)
    return mat4([
        c, -s, 0.0, 0.0,
        s, c, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0,
        0.0, 0.0, 0.0, 1.0,
    ])  # fmt: skip


def rotate(axis: Vec, angle: float) -> Mat4:
    """Return a rotation about an arbitrary axis (Rodrigues' formula).

    The rotation is ``I + sin(a) K + (1 - cos(a)) K^2`` where K is the
    cross-product matrix of the normalized axis.

    Args:
        axis: Rotation axis. Normalized before use; must be non-zero.
        angle: Rotation angle in radians (right-hand rule).

    Returns:
        The homogeneous rotation matrix.
    """
    rx, ry, rz = normalize(axis)
    k = np.array(
        [
            [0.0, -rz, ry],
            [rz, 0.0, -rx],
            [-ry, rx, 0.0],
        ]
    )
    result = identity()
    result[:3, :3] += math.sin(angle) * k + (1.0 - math.cos(angle)) * (k @ k)
    return result


def translate(v: Vec) -> Mat4:
    """Return a homogeneous translation by v."""
    m = identity()
    m[:3, 3] = v
    return m


# =============================================================================
# Application
# =============================================================================


def transform_vector(m: Mat4, v: Vec) -> Vec:
    """Multiply a matrix by a homogeneous 4-vector."""
    return m @ v


def transform_point(m: Mat4, p: Vec) -> Vec:
    """Transform a 3D point (w=1) and project the result."""
    return project(m @ hpoint(p))


def transform_direction(m: Mat4, d: Vec) -> Vec:
    """Transform a 3D direction (w=0); translation has no effect."""
    return (m @ hvec(d))[:3]


def transform_ray(m: Mat4, ray: Ray) -> Ray:
    """Transform a ray: its origin as a point and its direction as a direction.

    The direction is not renormalized, so distances along the transformed ray
    are measured in the transformed direction's scale.
    """
    return Ray(origin=transform_point(m, ray.origin), direction=transform_direction(m, ray.direction))
