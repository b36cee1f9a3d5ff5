"""Pytest configuration for glint tests.

This module provides shared fixtures for all test modules: Taichi
initialization (once per session), a seeded random generator and a few small
scenes reused across modules.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Modules that allocate Taichi fields must be imported after this runs,
    so tests import them inside the test functions.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def rng():
    """Seeded NumPy generator for jittered sampling."""
    return np.random.default_rng(1234)


@pytest.fixture
def sphere_scene():
    """Unit sphere at (0, 0, -5) with a single ambient light."""
    from glint.core.ray import vec3
    from glint.geometry import Sphere
    from glint.materials import Material
    from glint.scene.lights import AmbientLight
    from glint.scene.scene import Scene, SceneObject

    ball = SceneObject.create(Sphere(vec3(0.0, 0.0, -5.0), 1.0), Material(ambient=(1.0, 0.5, 0.25)))
    return Scene(objects=[ball], lights=[AmbientLight((0.2, 0.2, 0.2))])


@pytest.fixture
def lit_scene():
    """Two spheres on a floor lit by a point light and a directional light.

    Includes a reflective sphere, a transformed (ellipsoid) sphere and
    triangles, so it exercises every code path of both renderers.
    """
    from glint.core.ray import vec3
    from glint.core.transform import AffineTransform
    from glint.geometry import Sphere, Triangle
    from glint.materials import Material
    from glint.scene.lights import AmbientLight, DirectionalLight, PointLight
    from glint.scene.scene import Camera, Scene, SceneObject

    floor = Material(ambient=(0.1, 0.1, 0.1), diffuse=(0.5, 0.5, 0.5), reflective=(0.2, 0.2, 0.2))
    red = Material(
        ambient=(0.2, 0.0, 0.0),
        diffuse=(0.7, 0.1, 0.1),
        specular=(0.5, 0.5, 0.5),
        specular_power=16.0,
    )
    mirror = Material(diffuse=(0.1, 0.1, 0.1), reflective=(0.7, 0.7, 0.7))

    squash = AffineTransform.translation(vec3(1.2, -0.5, -4.0)).compose(
        AffineTransform.scaling(0.6, 0.3, 0.6)
    )
    objects = [
        SceneObject.create(
            Triangle.from_vertices(vec3(-5, -1, 0), vec3(-5, -1, -10), vec3(5, -1, -10)), floor
        ),
        SceneObject.create(
            Triangle.from_vertices(vec3(-5, -1, 0), vec3(5, -1, -10), vec3(5, -1, 0)), floor
        ),
        SceneObject.create(Sphere(vec3(-0.8, -0.2, -4.0), 0.8), red),
        SceneObject.create(Sphere(vec3(0.6, 0.2, -6.0), 1.0), mirror),
        SceneObject.create(Sphere(vec3(0.0, 0.0, 0.0), 1.0), red, squash),
    ]
    lights = [
        AmbientLight((0.1, 0.1, 0.1)),
        DirectionalLight((-1.0, -1.0, -0.5), (0.4, 0.4, 0.4)),
        PointLight((2.0, 3.0, -1.0), (0.8, 0.8, 0.8), falloff=0),
    ]
    return Scene(camera=Camera(), lights=lights, objects=objects)
