"""Scene module: scene container, lights, intersection and loaders.

This module handles scene representation and ray-scene queries:

Components:
    scene: Camera, SceneObject and the Scene container
    lights: Ambient, directional and point light sources
    index: Candidate indices that narrow the objects tested per ray
    intersection: Nearest-hit queries against a scene
    loader: Scene description file reader
    obj_mesh: Wavefront OBJ mesh reader

A scene is assembled once and is read-only while it is rendered.
"""

from .index import AllObjectsIndex, BoundingBoxIndex, CandidateIndex
from .intersection import SceneHitRecord, intersect_object, trace_ray
from .lights import AmbientLight, DirectionalLight, LightSource, PointLight
from .loader import SceneLoader, SceneParseError, load_scene, load_scene_text
from .obj_mesh import ObjFormatError, load_obj
from .scene import Camera, Scene, SceneObject

__all__ = [
    # Scene container
    "Camera",
    "Scene",
    "SceneObject",
    # Lights
    "AmbientLight",
    "DirectionalLight",
    "PointLight",
    "LightSource",
    # Candidate indices
    "CandidateIndex",
    "AllObjectsIndex",
    "BoundingBoxIndex",
    # Intersection
    "SceneHitRecord",
    "intersect_object",
    "trace_ray",
    # Loaders
    "SceneLoader",
    "SceneParseError",
    "load_scene",
    "load_scene_text",
    "ObjFormatError",
    "load_obj",
]
