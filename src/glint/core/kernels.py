"""Compiled Taichi renderer for large images.

This module renders the same images as ``glint.core.sampler`` but inside a
single Taichi kernel. The scene is flattened into fixed-capacity Taichi fields
by ``upload_scene``, then ``render_kernel_image`` runs one kernel invocation
over all pixels.

Differences from the reference renderer:
    - Arithmetic is float32.
    - Every object is tested for every ray (the scene's candidate index is
      not consulted). Any index that never drops a real hit gives the same
      result.
    - Reflection recursion is unrolled into a loop carrying a color weight.
      This is equivalent because each shading step spawns at most one
      reflection ray: ``shade_0 + kr_0 * (shade_1 + kr_1 * (...))``.
    - Jitter draws from Taichi's generator, seeded through ``ti.init``.

The outer pixel loop is serialized, so pixels are processed one at a time
in row-major order.

Taichi must be initialized before this module is imported, because the
fields below are allocated at import time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=42)
    >>> from glint.core.kernels import render_kernel_image, upload_scene
    >>> upload_scene(scene)
    >>> image = render_kernel_image(640, 480, sample_grid_size=2)
"""

import logging
import time
from collections.abc import Iterator
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from glint.core.integrator import BOUNCE_EPSILON, DEFAULT_BOUNCES
from glint.geometry import DEGENERATE_TOLERANCE, Sphere, Triangle
from glint.scene.lights import AmbientLight, DirectionalLight, PointLight

if TYPE_CHECKING:
    from glint.materials import Material
    from glint.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# =============================================================================
# Capacities (preallocated to avoid kernel recompilation)
# =============================================================================

MAX_OBJECTS = 65536
MAX_SPHERES = 4096
MAX_TRIANGLES = 65536
MAX_MATERIALS = 4096
MAX_LIGHTS = 64
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Stand-in for an infinite distance in float32
INF = 1e30

# Object and light kinds as stored in the fields
OBJECT_SPHERE = 0
OBJECT_TRIANGLE = 1

LIGHT_AMBIENT = 0
LIGHT_DIRECTIONAL = 1
LIGHT_POINT = 2

# =============================================================================
# Scene Storage
# =============================================================================

# Object table: kind, slot in the per-kind arrays, material id
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_slots = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Spheres, with object-to-world and world-to-object matrices
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_transformed = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
sphere_world = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SPHERES)
sphere_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Triangles, always stored in world space
triangle_v0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_n0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_n1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_n2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
num_triangles = ti.field(dtype=ti.i32, shape=())

# Materials
material_ambient = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_power = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_reflective = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

# Lights: the vector is the travel direction (directional) or position (point)
light_types = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_vectors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_falloffs = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

# Camera
_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_lower_left = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_lower_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_upper_left = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_upper_right = ti.Vector.field(3, dtype=ti.f32, shape=())

# Output buffer, indexed [row, col] with row 0 at the top
_pixels = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

_scene_uploaded = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Forget the uploaded scene.

    Resets the counts to zero; field contents are overwritten by the next
    upload.
    """
    num_objects[None] = 0
    num_spheres[None] = 0
    num_triangles[None] = 0
    num_materials[None] = 0
    num_lights[None] = 0
    _scene_uploaded[None] = 0


def _check_capacity(kind: str, count: int, capacity: int) -> None:
    if count > capacity:
        raise RuntimeError(f"Maximum number of {kind} ({capacity}) exceeded: {count}")


def _padded(rows: list, capacity: int, shape: tuple[int, ...]) -> np.ndarray:
    """Stack rows into a float32 array padded with zeros to capacity."""
    out = np.zeros((capacity,) + shape, dtype=np.float32)
    if rows:
        out[: len(rows)] = np.asarray(rows, dtype=np.float32)
    return out


def _padded_int(values: list[int], capacity: int) -> np.ndarray:
    out = np.zeros(capacity, dtype=np.int32)
    if values:
        out[: len(values)] = values
    return out


def upload_scene(scene: "Scene") -> None:
    """Flatten a scene into the Taichi fields.

    Transformed triangles are baked on the way in; transformed spheres keep
    their matrices. Materials shared between objects are stored once.

    Args:
        scene: The scene to upload.

    Raises:
        RuntimeError: If the scene exceeds any of the field capacities.
    """
    materials: list["Material"] = []
    material_ids: dict[int, int] = {}

    kinds, slots, object_materials = [], [], []
    centers, radii, transformed, worlds, inverses = [], [], [], [], []
    v0s, v1s, v2s, n0s, n1s, n2s = [], [], [], [], [], []

    for obj in scene.objects:
        key = id(obj.material)
        if key not in material_ids:
            material_ids[key] = len(materials)
            materials.append(obj.material)
        object_materials.append(material_ids[key])

        primitive = obj.primitive
        transform = obj.world_from_object
        if isinstance(primitive, Sphere):
            kinds.append(OBJECT_SPHERE)
            slots.append(len(centers))
            centers.append(primitive.center)
            radii.append(primitive.radius)
            transformed.append(0 if transform.is_identity else 1)
            worlds.append(transform.matrix)
            inverses.append(transform.inverse)
        elif isinstance(primitive, Triangle):
            baked = primitive.bake(transform)
            kinds.append(OBJECT_TRIANGLE)
            slots.append(len(v0s))
            v0s.append(baked.vertices[0])
            v1s.append(baked.vertices[1])
            v2s.append(baked.vertices[2])
            n0s.append(baked.normals[0])
            n1s.append(baked.normals[1])
            n2s.append(baked.normals[2])
        else:
            raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")

    _check_capacity("objects", len(kinds), MAX_OBJECTS)
    _check_capacity("spheres", len(centers), MAX_SPHERES)
    _check_capacity("triangles", len(v0s), MAX_TRIANGLES)
    _check_capacity("materials", len(materials), MAX_MATERIALS)
    _check_capacity("lights", len(scene.lights), MAX_LIGHTS)

    clear_scene()

    object_kinds.from_numpy(_padded_int(kinds, MAX_OBJECTS))
    object_slots.from_numpy(_padded_int(slots, MAX_OBJECTS))
    object_material_ids.from_numpy(_padded_int(object_materials, MAX_OBJECTS))

    sphere_centers.from_numpy(_padded(centers, MAX_SPHERES, (3,)))
    sphere_radii.from_numpy(_padded(radii, MAX_SPHERES, ()))
    sphere_transformed.from_numpy(_padded_int(transformed, MAX_SPHERES))
    sphere_world.from_numpy(_padded(worlds, MAX_SPHERES, (4, 4)))
    sphere_inverse.from_numpy(_padded(inverses, MAX_SPHERES, (4, 4)))

    triangle_v0.from_numpy(_padded(v0s, MAX_TRIANGLES, (3,)))
    triangle_v1.from_numpy(_padded(v1s, MAX_TRIANGLES, (3,)))
    triangle_v2.from_numpy(_padded(v2s, MAX_TRIANGLES, (3,)))
    triangle_n0.from_numpy(_padded(n0s, MAX_TRIANGLES, (3,)))
    triangle_n1.from_numpy(_padded(n1s, MAX_TRIANGLES, (3,)))
    triangle_n2.from_numpy(_padded(n2s, MAX_TRIANGLES, (3,)))

    material_ambient.from_numpy(_padded([m.ambient for m in materials], MAX_MATERIALS, (3,)))
    material_diffuse.from_numpy(_padded([m.diffuse for m in materials], MAX_MATERIALS, (3,)))
    material_specular.from_numpy(_padded([m.specular for m in materials], MAX_MATERIALS, (3,)))
    material_power.from_numpy(_padded([m.specular_power for m in materials], MAX_MATERIALS, ()))
    material_reflective.from_numpy(
        _padded([m.reflective for m in materials], MAX_MATERIALS, (3,))
    )

    types, vectors, colors, falloffs = [], [], [], []
    for light in scene.lights:
        if isinstance(light, DirectionalLight):
            types.append(LIGHT_DIRECTIONAL)
            vectors.append(light.direction)
            falloffs.append(0)
        elif isinstance(light, PointLight):
            types.append(LIGHT_POINT)
            vectors.append(light.position)
            falloffs.append(light.falloff)
        elif isinstance(light, AmbientLight):
            types.append(LIGHT_AMBIENT)
            vectors.append(np.zeros(3))
            falloffs.append(0)
        else:
            raise TypeError(f"Unsupported light: {type(light).__name__}")
        colors.append(light.color)

    light_types.from_numpy(_padded_int(types, MAX_LIGHTS))
    light_vectors.from_numpy(_padded(vectors, MAX_LIGHTS, (3,)))
    light_colors.from_numpy(_padded(colors, MAX_LIGHTS, (3,)))
    light_falloffs.from_numpy(_padded_int(falloffs, MAX_LIGHTS))

    camera = scene.camera
    _camera_eye[None] = camera.eye.tolist()
    _camera_lower_left[None] = camera.lower_left.tolist()
    _camera_lower_right[None] = camera.lower_right.tolist()
    _camera_upper_left[None] = camera.upper_left.tolist()
    _camera_upper_right[None] = camera.upper_right.tolist()

    num_objects[None] = len(kinds)
    num_spheres[None] = len(centers)
    num_triangles[None] = len(v0s)
    num_materials[None] = len(materials)
    num_lights[None] = len(scene.lights)
    _scene_uploaded[None] = 1

    logger.debug(
        "Uploaded %d spheres, %d triangles, %d materials, %d lights",
        len(centers),
        len(v0s),
        len(materials),
        len(scene.lights),
    )


def get_object_counts() -> dict[str, int]:
    """Get the counts of the uploaded scene, for debugging."""
    return {
        "objects": int(num_objects[None]),
        "spheres": int(num_spheres[None]),
        "triangles": int(num_triangles[None]),
        "materials": int(num_materials[None]),
        "lights": int(num_lights[None]),
    }


# =============================================================================
# Intersection
# =============================================================================


@ti.func
def _hit_sphere(origin: vec3, direction: vec3, center: vec3, radius: ti.f32):
    """Ray-sphere test returning (t, normal); t is INF on a miss."""
    p = origin - center
    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(direction, p)
    c = tm.dot(p, p) - radius * radius
    disc = b * b - 4.0 * a * c

    t = INF
    normal = vec3(0.0, 0.0, 0.0)
    if disc >= 0.0 and a > 0.0 and radius != 0.0:
        sqrt_d = ti.sqrt(disc)
        t1 = (-b + sqrt_d) / (2.0 * a)
        t2 = (-b - sqrt_d) / (2.0 * a)
        if t1 < 0.0:
            t1 = INF
        if t2 < 0.0:
            t2 = INF
        t = ti.min(t1, t2)
        if t < INF:
            normal = tm.normalize(origin + t * direction - center)
    return t, normal


@ti.func
def _hit_triangle(origin: vec3, direction: vec3, k: ti.i32):
    """Ray-triangle test for triangle slot k returning (t, normal)."""
    v0 = triangle_v0[k]
    v1 = triangle_v1[k]
    v2 = triangle_v2[k]
    w1 = v0 - v2
    w2 = v1 - v2
    plane = tm.cross(w1, w2)
    plane_length = tm.length(plane)

    t = INF
    normal = vec3(0.0, 0.0, 0.0)
    if plane_length > 0.0:
        n = plane / plane_length
        denom = tm.dot(n, direction)
        if denom != 0.0:
            s = tm.dot(n, v0 - origin) / denom
            if s >= 0.0:
                rp = origin + s * direction - v2
                det_xy = w1.x * w2.y - w2.x * w1.y
                det_xz = w1.x * w2.z - w2.x * w1.z
                det_yz = w1.y * w2.z - w2.y * w1.z

                # Solve in the coordinate plane with the largest determinant
                t1 = 0.0
                t2 = 0.0
                solved = 0
                if ti.abs(det_xy) >= ti.abs(det_xz) and ti.abs(det_xy) >= ti.abs(det_yz):
                    if ti.abs(det_xy) >= DEGENERATE_TOLERANCE:
                        t1 = (w2.y * rp.x - w2.x * rp.y) / det_xy
                        t2 = (w1.x * rp.y - w1.y * rp.x) / det_xy
                        solved = 1
                elif ti.abs(det_xz) >= ti.abs(det_yz):
                    if ti.abs(det_xz) >= DEGENERATE_TOLERANCE:
                        t1 = (w2.z * rp.x - w2.x * rp.z) / det_xz
                        t2 = (w1.x * rp.z - w1.z * rp.x) / det_xz
                        solved = 1
                else:
                    if ti.abs(det_yz) >= DEGENERATE_TOLERANCE:
                        t1 = (w2.z * rp.y - w2.y * rp.z) / det_yz
                        t2 = (w1.y * rp.z - w1.z * rp.y) / det_yz
                        solved = 1

                if solved == 1:
                    t3 = 1.0 - t1 - t2
                    inside = t1 >= 0.0 and t1 <= 1.0 and t2 >= 0.0 and t2 <= 1.0 and t3 >= 0.0
                    if inside:
                        blended = t1 * triangle_n0[k] + t2 * triangle_n1[k] + t3 * triangle_n2[k]
                        blended_length = tm.length(blended)
                        normal = n
                        if blended_length > 0.0:
                            normal = blended / blended_length
                        t = s
    return t, normal


@ti.func
def _hit_transformed_sphere(origin: vec3, direction: vec3, k: ti.i32):
    """Test sphere slot k in object space and map the hit back to world space."""
    inverse = sphere_inverse[k]
    o4 = inverse @ vec4(origin.x, origin.y, origin.z, 1.0)
    d4 = inverse @ vec4(direction.x, direction.y, direction.z, 0.0)
    object_origin = vec3(o4.x, o4.y, o4.z) / o4.w
    object_direction = vec3(d4.x, d4.y, d4.z)

    ot, on = _hit_sphere(object_origin, object_direction, sphere_centers[k], sphere_radii[k])

    t = INF
    normal = vec3(0.0, 0.0, 0.0)
    if ot < INF:
        offset = ot * object_direction
        w4 = sphere_world[k] @ vec4(offset.x, offset.y, offset.z, 0.0)
        t = tm.length(vec3(w4.x, w4.y, w4.z)) / tm.length(direction)
        n4 = inverse.transpose() @ vec4(on.x, on.y, on.z, 0.0)
        normal = tm.normalize(vec3(n4.x, n4.y, n4.z))
    return t, normal


@ti.func
def _trace_ray(origin: vec3, direction: vec3):
    """Nearest hit over all objects: (t, normal, material_id).

    material_id is -1 when nothing is hit; ties keep the earlier object.
    """
    closest = INF
    closest_normal = vec3(0.0, 0.0, 0.0)
    material_id = -1

    for i in range(num_objects[None]):
        slot = object_slots[i]
        t = INF
        normal = vec3(0.0, 0.0, 0.0)
        if object_kinds[i] == OBJECT_SPHERE:
            if sphere_transformed[slot] == 0:
                st, sn = _hit_sphere(origin, direction, sphere_centers[slot], sphere_radii[slot])
                t = st
                normal = sn
            else:
                xt, xn = _hit_transformed_sphere(origin, direction, slot)
                t = xt
                normal = xn
        else:
            tt, tn = _hit_triangle(origin, direction, slot)
            t = tt
            normal = tn

        if t < closest:
            closest = t
            closest_normal = normal
            material_id = object_material_ids[i]

    return closest, closest_normal, material_id


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _shade_local(material_id: ti.i32, point: vec3, normal: vec3, eye_dir: vec3) -> vec3:
    """Ambient, diffuse and specular light at a point (normal faces the eye)."""
    ka = material_ambient[material_id]
    kd = material_diffuse[material_id]
    ks = material_specular[material_id]
    power = material_power[material_id]

    result = vec3(0.0, 0.0, 0.0)
    for light in range(num_lights[None]):
        kind = light_types[light]
        color = light_colors[light]

        light_dir = vec3(0.0, 0.0, 0.0)
        light_distance = INF
        attenuation = 1.0
        directed = 0
        if kind == LIGHT_DIRECTIONAL:
            light_dir = -light_vectors[light]
            directed = 1
        elif kind == LIGHT_POINT:
            to_light = light_vectors[light] - point
            light_distance = tm.length(to_light)
            if light_distance > 0.0:
                light_dir = to_light / light_distance
                attenuation = 1.0 / light_distance ** ti.cast(light_falloffs[light], ti.f32)
                directed = 1

        result += attenuation * ka * color

        if directed == 1:
            shadow_t, shadow_normal, shadow_material = _trace_ray(
                point + BOUNCE_EPSILON * light_dir, light_dir
            )
            if shadow_t >= light_distance:
                diffuse = ti.max(tm.dot(light_dir, normal), 0.0)
                result += attenuation * diffuse * kd * color

                reflected = -light_dir + 2.0 * tm.dot(normal, light_dir) * normal
                specular = ti.max(tm.dot(reflected, eye_dir), 0.0) ** power
                result += attenuation * specular * ks * color

    return result


@ti.func
def _trace_color(ray_origin: vec3, ray_direction: vec3, bounces: ti.i32) -> vec3:
    """Color seen along a ray, following mirror reflections up to bounces times."""
    origin = ray_origin
    direction = ray_direction
    color = vec3(0.0, 0.0, 0.0)
    weight = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for depth in range(bounces + 1):
        if active == 1:
            t, hit_normal, material_id = _trace_ray(origin, direction)
            if material_id < 0:
                active = 0
            else:
                point = origin + t * direction
                normal = hit_normal
                to_eye = origin - point
                eye_dir = normal
                if tm.length(to_eye) > 0.0:
                    eye_dir = tm.normalize(to_eye)
                if tm.dot(normal, eye_dir) < 0.0:
                    normal = -normal

                color += weight * _shade_local(material_id, point, normal, eye_dir)

                kr = material_reflective[material_id]
                reflective = kr.x != 0.0 or kr.y != 0.0 or kr.z != 0.0
                if depth < bounces and reflective:
                    reflected = -eye_dir + 2.0 * tm.dot(normal, eye_dir) * normal
                    origin = point + BOUNCE_EPSILON * reflected
                    direction = reflected
                    weight = weight * kr
                else:
                    active = 0

    return color


# =============================================================================
# Image Sampling
# =============================================================================


@ti.func
def _bilerp(ll: vec3, lr: vec3, ul: vec3, ur: vec3, u: ti.f32, v: ti.f32) -> vec3:
    bottom = (1.0 - u) * ll + u * lr
    top = (1.0 - u) * ul + u * ur
    return (1.0 - v) * bottom + v * top


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32, grid: ti.i32, jitter: ti.i32, bounces: ti.i32):
    """Render every pixel into _pixels, one pixel at a time."""
    ll = _camera_lower_left[None]
    lr = _camera_lower_right[None]
    ul = _camera_upper_left[None]
    ur = _camera_upper_right[None]
    eye = _camera_eye[None]

    ti.loop_config(serialize=True)
    for row, col in ti.ndrange(height, width):
        flipped = height - 1 - row
        u0 = ti.cast(col, ti.f32) / ti.cast(width, ti.f32)
        u1 = ti.cast(col + 1, ti.f32) / ti.cast(width, ti.f32)
        v0 = ti.cast(flipped, ti.f32) / ti.cast(height, ti.f32)
        v1 = ti.cast(flipped + 1, ti.f32) / ti.cast(height, ti.f32)

        pll = _bilerp(ll, lr, ul, ur, u0, v0)
        plr = _bilerp(ll, lr, ul, ur, u1, v0)
        pul = _bilerp(ll, lr, ul, ur, u0, v1)
        pur = _bilerp(ll, lr, ul, ur, u1, v1)

        color = vec3(0.0, 0.0, 0.0)
        for i in range(grid):
            for j in range(grid):
                du = 0.5
                dv = 0.5
                if jitter == 1:
                    du = ti.random(ti.f32)
                    dv = ti.random(ti.f32)
                u = (ti.cast(j, ti.f32) + du) / ti.cast(grid, ti.f32)
                v = (ti.cast(i, ti.f32) + dv) / ti.cast(grid, ti.f32)
                target = _bilerp(pll, plr, pul, pur, u, v)
                color += _trace_color(eye, target - eye, bounces)

        _pixels[row, col] = color / ti.cast(grid * grid, ti.f32)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_kernel_image(
    width: int,
    height: int,
    sample_grid_size: int | None = None,
    *,
    jitter: bool = False,
    bounces: int = DEFAULT_BOUNCES,
) -> npt.NDArray[np.float32]:
    """Render the uploaded scene.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).
        sample_grid_size: Samples per pixel side; None or below 1 means one
            centered sample.
        jitter: Randomize each sample within its grid cell. Ignored without
            a sample grid.
        bounces: Reflection bounces per camera ray.

    Returns:
        Array of shape (height, width, 3); row 0 is the top of the image.

    Raises:
        RuntimeError: If no scene has been uploaded.
        ValueError: If the dimensions exceed the supported maximum.
    """
    if _scene_uploaded[None] == 0:
        raise RuntimeError("No scene uploaded. Call upload_scene() first.")
    if not (0 <= width <= MAX_IMAGE_WIDTH and 0 <= height <= MAX_IMAGE_HEIGHT):
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    supersampled = sample_grid_size is not None and sample_grid_size >= 1
    grid = sample_grid_size if supersampled else 1
    jitter = jitter and supersampled

    start_time = time.perf_counter()
    _render_kernel(width, height, grid, 1 if jitter else 0, bounces)
    image = _pixels.to_numpy()[:height, :width, :]
    logger.info(
        "Kernel rendered %dx%d image (grid %d) in %.2fs",
        width,
        height,
        grid,
        time.perf_counter() - start_time,
    )
    return image


def render_kernel(
    scene: "Scene",
    width: int,
    height: int,
    sample_grid_size: int | None = None,
    *,
    jitter: bool = False,
    bounces: int = DEFAULT_BOUNCES,
) -> Iterator[npt.NDArray[np.float32]]:
    """Upload a scene, render it and stream the pixel colors row-major.

    Same contract as ``glint.core.sampler.render``.
    """
    upload_scene(scene)
    image = render_kernel_image(width, height, sample_grid_size, jitter=jitter, bounces=bounces)
    yield from image.reshape(-1, 3)
