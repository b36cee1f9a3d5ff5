"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities
    matrix: 4x4 homogeneous matrix construction and application
    transform: Affine transforms with cached inverses
    integrator: Phong shading and recursive reflection (Whitted-style)
    sampler: Pixel footprints, supersampling and the render loop
    kernels: Taichi version of the whole render for large images

The reference renderer (integrator + sampler) runs in plain Python on NumPy
arrays. The kernels module renders the same images inside one Taichi kernel.
"""

from .matrix import Mat4, identity, rotate, scale, translate
from .ray import (
    Ray,
    Vec,
    as_vec,
    bilerp,
    cross,
    dot,
    magnitude,
    make_ray,
    normalize,
    ray_at,
    reflect_about,
    vec3,
    vec4,
)
from .transform import AffineTransform, TransformError

# Note: integrator, sampler and kernels are NOT imported here to avoid circular
# imports (the integrator depends on glint.scene). Import them directly:
#   from glint.core.sampler import render, render_image
#   from glint.core.kernels import upload_scene, render_kernel_image

__all__ = [
    "Ray",
    "Vec",
    "vec3",
    "vec4",
    "as_vec",
    "make_ray",
    "ray_at",
    "dot",
    "cross",
    "magnitude",
    "normalize",
    "reflect_about",
    "bilerp",
    "Mat4",
    "identity",
    "scale",
    "rotate",
    "translate",
    "AffineTransform",
    "TransformError",
]
