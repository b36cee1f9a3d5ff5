"""Whitted-style integrator: local Phong shading plus mirror reflection.

This module computes the color seen along a ray. At each hit point the
surface is lit by every light in the scene with the Phong model, and mirror
surfaces add the color seen along the reflected ray.

Shading at a hit point:
    - The normal is flipped toward the eye, so both faces shade alike.
    - Every light contributes an ambient term ``att * ka * color`` that no
      shadow can block.
    - Directional and point lights cast a shadow ray from the point toward
      the light; if anything is hit closer than the light the diffuse and
      specular terms of that light are skipped.
    - Diffuse: ``att * max(L.N, 0) * kd * color``.
    - Specular: ``att * max(R.E, 0) ** p * ks * color``, with R the light
      direction mirrored about the normal.
    - Reflection: if bounces remain and kr is non-zero, trace the mirrored
      eye direction with one bounce fewer and add ``kr * color``.

``att`` is 1 for ambient and directional lights and
``1 / distance ** falloff`` for point lights.

The recursion terminates because every reflection consumes one bounce; at
zero bounces the reflection term is simply omitted.

Example:
    >>> from glint.core.integrator import trace_color
    >>> from glint.core.ray import make_ray
    >>> color = trace_color(scene, make_ray((0, 0, 0), (0, 0, -1)), bounces=5)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from glint.core.ray import Ray, Vec, dot, magnitude, normalize, ray_at, reflect_about
from glint.scene.intersection import trace_ray
from glint.scene.lights import AmbientLight, DirectionalLight, LightSource, PointLight

if TYPE_CHECKING:
    from glint.scene.scene import Scene, SceneObject

# =============================================================================
# Rendering Constants
# =============================================================================

# Offset along shadow and reflection rays to avoid hitting the surface they
# start on
BOUNCE_EPSILON = 1e-3

# Reflection bounces allowed for each camera ray
DEFAULT_BOUNCES = 5

# Color of rays that escape the scene
BACKGROUND_COLOR = (0.0, 0.0, 0.0)


def _light_geometry(light: LightSource, point: Vec) -> tuple[Vec | None, float, float]:
    """Direction toward a light, its distance and its attenuation factor.

    Returns:
        (light_dir, distance, attenuation). light_dir is None for ambient
        lights, which have no direction.
    """
    if isinstance(light, DirectionalLight):
        return -light.direction, math.inf, 1.0
    if isinstance(light, PointLight):
        to_light = light.position - point
        distance = magnitude(to_light)
        if distance == 0.0:
            # Light sits on the surface; it cannot illuminate it directionally
            return None, 0.0, 1.0
        return to_light / distance, distance, 1.0 / distance**light.falloff
    return None, math.inf, 1.0


def _in_shadow(scene: Scene, point: Vec, light_dir: Vec, light_distance: float) -> bool:
    """Check whether anything blocks the path from point toward a light."""
    shadow_ray = Ray(origin=point + BOUNCE_EPSILON * light_dir, direction=light_dir)
    return trace_ray(scene, shadow_ray).distance < light_distance


def shade(
    scene: Scene,
    obj: SceneObject,
    point: Vec,
    normal: Vec,
    eye: Vec,
    bounces: int,
) -> Vec:
    """Compute the color of a surface point as seen from eye.

    Args:
        scene: The scene (lights and occluders).
        obj: The object that was hit; provides the material.
        point: World-space hit point.
        normal: Unit world-space surface normal at the point.
        eye: Position the point is viewed from (the ray origin).
        bounces: Remaining reflection bounces.

    Returns:
        The RGB color (unclamped).
    """
    material = obj.material
    result = np.zeros(3)

    to_eye = eye - point
    eye_dir = normalize(to_eye) if magnitude(to_eye) > 0.0 else normal
    if dot(normal, eye_dir) < 0.0:
        normal = -normal

    for light in scene.lights:
        light_dir, light_distance, attenuation = _light_geometry(light, point)

        # Ambient term, applied for every light and never shadowed
        result += attenuation * material.ambient * light.color

        if isinstance(light, AmbientLight) or light_dir is None:
            continue
        if _in_shadow(scene, point, light_dir, light_distance):
            continue

        diffuse = max(dot(light_dir, normal), 0.0)
        result += attenuation * diffuse * material.diffuse * light.color

        light_reflected = reflect_about(light_dir, normal)
        specular = max(dot(light_reflected, eye_dir), 0.0) ** material.specular_power
        result += attenuation * specular * material.specular * light.color

    if bounces > 0 and material.is_reflective:
        reflected_dir = reflect_about(eye_dir, normal)
        reflected_ray = Ray(origin=point + BOUNCE_EPSILON * reflected_dir, direction=reflected_dir)
        result += material.reflective * trace_color(scene, reflected_ray, bounces - 1)

    return result


def trace_color(scene: Scene, ray: Ray, bounces: int = DEFAULT_BOUNCES) -> Vec:
    """Trace a ray into the scene and return the color it sees.

    Args:
        scene: The scene to render.
        ray: The ray; its direction need not be normalized.
        bounces: Remaining reflection bounces.

    Returns:
        The shaded color of the nearest hit, or the background color.
    """
    rec = trace_ray(scene, ray)
    if not rec.hit:
        return np.array(BACKGROUND_COLOR, dtype=np.float64)

    point = ray_at(ray, rec.distance)
    return shade(scene, rec.obj, point, rec.normal, ray.origin, bounces)
