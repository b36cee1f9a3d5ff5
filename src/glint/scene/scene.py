"""Scene container: camera, lights, objects and the candidate index.

A Scene is assembled once (by hand or by the scene loader) and is read-only
while it is rendered. It owns every SceneObject and the candidate index built
over them; primitives hold no reference back to the scene.

Example:
    >>> from glint.core.ray import vec3
    >>> from glint.geometry import Sphere
    >>> from glint.materials import Material
    >>> from glint.scene.lights import AmbientLight
    >>> from glint.scene.scene import Scene, SceneObject
    >>> ball = SceneObject.create(Sphere(vec3(0, 0, -5), 1.0), Material(ambient=(1, 0, 0)))
    >>> scene = Scene(objects=[ball], lights=[AmbientLight((0.2, 0.2, 0.2))])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from glint.core.ray import Vec, as_vec, bilerp, vec3
from glint.core.transform import AffineTransform
from glint.geometry import BoundingBox, Primitive
from glint.materials import DEFAULT_MATERIAL, Material
from glint.scene.index import AllObjectsIndex, CandidateIndex
from glint.scene.lights import LightSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Camera:
    """A pinhole camera defined by an eye point and an image-plane quad.

    Rays start at the eye and pass through the quadrilateral spanned by the
    four corners; the upper corners map to the top row of the image.

    Attributes:
        eye: Eye (ray origin) position.
        lower_left: Lower-left corner of the image plane.
        lower_right: Lower-right corner of the image plane.
        upper_left: Upper-left corner of the image plane.
        upper_right: Upper-right corner of the image plane.
    """

    eye: Vec = field(default_factory=lambda: vec3(0.0, 0.0, 0.0))
    lower_left: Vec = field(default_factory=lambda: vec3(-0.5, -0.5, -1.0))
    lower_right: Vec = field(default_factory=lambda: vec3(0.5, -0.5, -1.0))
    upper_left: Vec = field(default_factory=lambda: vec3(-0.5, 0.5, -1.0))
    upper_right: Vec = field(default_factory=lambda: vec3(0.5, 0.5, -1.0))

    def __post_init__(self) -> None:
        for name in ("eye", "lower_left", "lower_right", "upper_left", "upper_right"):
            object.__setattr__(self, name, as_vec(getattr(self, name)))

    def image_point(self, u: float, v: float) -> Vec:
        """Bilinearly interpolate the image plane.

        Args:
            u: Horizontal coordinate, 0 at the left edge and 1 at the right.
            v: Vertical coordinate, 0 at the bottom edge and 1 at the top.

        Returns:
            The world-space point on the image plane.
        """
        return bilerp(self.lower_left, self.lower_right, self.upper_left, self.upper_right, u, v)


@dataclass(frozen=True, eq=False)
class SceneObject:
    """A primitive placed in the world with a material.

    Attributes:
        primitive: The shape, in object space.
        material: Surface material.
        world_from_object: Object-to-world transform. Identity when the
            primitive already absorbed its instance transform.
    """

    primitive: Primitive
    material: Material = DEFAULT_MATERIAL
    world_from_object: AffineTransform = field(default_factory=AffineTransform.identity)

    @classmethod
    def create(
        cls,
        primitive: Primitive,
        material: Material = DEFAULT_MATERIAL,
        transform: AffineTransform | None = None,
    ) -> SceneObject:
        """Place a primitive, baking the transform into it when possible.

        Args:
            primitive: The shape in object space.
            material: Surface material.
            transform: Object-to-world transform (identity when omitted).

        Returns:
            A SceneObject whose transform is identity if the primitive could
            absorb the transform, or the given transform otherwise.
        """
        if transform is None or transform.is_identity:
            return cls(primitive=primitive, material=material)
        baked = primitive.bake(transform)
        if baked is not None:
            return cls(primitive=baked, material=material)
        return cls(primitive=primitive, material=material, world_from_object=transform)

    def bounding_box(self) -> BoundingBox:
        """World-space bounding box of the object."""
        return self.primitive.bounding_box().transformed(self.world_from_object)


# Builds a candidate index over a list of objects
IndexFactory = Callable[[list[SceneObject]], CandidateIndex]


@dataclass(eq=False)
class Scene:
    """Everything needed to render an image.

    Attributes:
        camera: The camera.
        lights: Ordered list of light sources.
        objects: All scene objects.
        index: Candidate index over objects. Built by index_factory when not
            given explicitly.
        index_factory: Callable used to build the index (all-objects by
            default).
    """

    camera: Camera = field(default_factory=Camera)
    lights: list[LightSource] = field(default_factory=list)
    objects: list[SceneObject] = field(default_factory=list)
    index: CandidateIndex | None = None
    index_factory: IndexFactory = AllObjectsIndex

    def __post_init__(self) -> None:
        if self.index is None:
            self.index = self.index_factory(self.objects)
        logger.debug(
            "Scene with %d objects, %d lights, index %s",
            len(self.objects),
            len(self.lights),
            type(self.index).__name__,
        )
