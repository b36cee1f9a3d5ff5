"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the small set of vector helpers
used throughout the renderer. Vectors are plain float64 NumPy arrays, so the
usual arithmetic operators give addition, subtraction, negation, scalar
scaling and the component-wise (Hadamard) product for colors.

Homogeneous coordinates follow the usual convention: a 4-vector with w=1 is
a point and one with w=0 is a direction.

Example:
    >>> from glint.core.ray import Ray, vec3, ray_at
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
import numpy.typing as npt

# Type alias for 3D and 4D vectors (float64 NumPy arrays)
Vec = npt.NDArray[np.float64]

# Anything that can be turned into a vector
VecLike = Union[Vec, Sequence[float]]


def vec3(x: float, y: float, z: float) -> Vec:
    """Create a 3D vector."""
    return np.array([x, y, z], dtype=np.float64)


def vec4(x: float, y: float, z: float, w: float) -> Vec:
    """Create a 4D vector."""
    return np.array([x, y, z, w], dtype=np.float64)


def as_vec(value: VecLike) -> Vec:
    """Convert a sequence or array to a float64 vector (copying it).

    Args:
        value: Any sequence of numbers.

    Returns:
        A new float64 array with the same components.
    """
    return np.array(value, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. It is not required to be
            unit length; distances are measured in multiples of it.
    """

    origin: Vec
    direction: Vec

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin.tolist()}, direction={self.direction.tolist()})"


def make_ray(origin: VecLike, direction: VecLike) -> Ray:
    """Create a ray from anything vector-like.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector.

    Returns:
        A new Ray instance holding float64 copies of both vectors.
    """
    return Ray(origin=as_vec(origin), direction=as_vec(direction))


def ray_at(ray: Ray, t: float) -> Vec:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec, b: Vec) -> float:
    """Compute the dot product of two vectors."""
    return float(np.dot(a, b))


def cross(a: Vec, b: Vec) -> Vec:
    """Compute the cross product of two 3D vectors."""
    return np.cross(a, b)


def magnitude(v: Vec) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(float(np.dot(v, v)))


def normalize(v: Vec) -> Vec:
    """Normalize a vector to unit length.

    Args:
        v: The input vector. Must not be zero-length.

    Returns:
        A unit vector in the same direction as v.

    Raises:
        ValueError: If v has zero length.
    """
    length = magnitude(v)
    if length == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return v / length


def reflect_about(v: Vec, normal: Vec) -> Vec:
    """Mirror a vector about a unit normal.

    Both the input and the result point away from the surface, which is the
    form the Phong model uses for light and eye directions:
    ``-v + 2 * dot(normal, v) * normal``.

    Args:
        v: The vector to mirror.
        normal: The unit surface normal.

    Returns:
        The mirrored vector.
    """
    return -v + 2.0 * dot(normal, v) * normal


def is_black(color: Vec) -> bool:
    """Check whether every channel of a color is exactly zero."""
    return not np.any(color)


# =============================================================================
# Homogeneous Coordinates
# =============================================================================


def hpoint(p: Vec) -> Vec:
    """Lift a 3D point to homogeneous coordinates (w=1)."""
    return np.append(p, 1.0)


def hvec(v: Vec) -> Vec:
    """Lift a 3D direction to homogeneous coordinates (w=0)."""
    return np.append(v, 0.0)


def project(h: Vec) -> Vec:
    """Project a homogeneous point back to 3D by dividing by w.

    Args:
        h: A homogeneous 4-vector with non-zero w.

    Returns:
        The 3D point (x/w, y/w, z/w).

    Raises:
        ValueError: If w is zero (directions have no projection).
    """
    w = h[3]
    if w == 0.0:
        raise ValueError("Cannot project a homogeneous direction (w == 0)")
    return h[:3] / w


def bilerp(ll: Vec, lr: Vec, ul: Vec, ur: Vec, u: float, v: float) -> Vec:
    """Bilinearly interpolate four corner values.

    Args:
        ll, lr, ul, ur: Values at the lower-left, lower-right, upper-left and
            upper-right corners.
        u: Horizontal weight, 0 at the left edge and 1 at the right.
        v: Vertical weight, 0 at the bottom edge and 1 at the top.

    Returns:
        The interpolated value.
    """
    bottom = (1.0 - u) * ll + u * lr
    top = (1.0 - u) * ul + u * ur
    return (1.0 - v) * bottom + v * top
