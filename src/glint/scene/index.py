"""Candidate indexes: which objects might a ray hit?

The intersector never walks the object list itself; it asks the scene's index
for candidates. Any object with ``candidates(ray)`` returning an iterable of
scene objects will do, as long as it never drops an object the ray actually
hits. Candidates are tested in the order they are returned, which decides ties.

Components:
    AllObjectsIndex: returns every object (the trivial index)
    BoundingBoxIndex: skips objects whose world bounding box the ray misses
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol

from glint.core.ray import Ray

if TYPE_CHECKING:
    from glint.scene.scene import SceneObject


class CandidateIndex(Protocol):
    """Source of intersection candidates for a ray."""

    def candidates(self, ray: Ray) -> Iterable[SceneObject]:
        """Return the objects the ray might intersect."""
        ...


class AllObjectsIndex:
    """Index that offers every object for every ray."""

    def __init__(self, objects: list[SceneObject]) -> None:
        self._objects = tuple(objects)

    def candidates(self, ray: Ray) -> Iterable[SceneObject]:
        return self._objects

    def __len__(self) -> int:
        return len(self._objects)


class BoundingBoxIndex:
    """Index that culls objects by a slab test against their world boxes.

    Boxes are computed once when the index is built. Transformed objects use
    the box of their transformed object-space box, which is conservative.
    """

    def __init__(self, objects: list[SceneObject]) -> None:
        self._entries = tuple((obj.bounding_box(), obj) for obj in objects)

    def candidates(self, ray: Ray) -> Iterable[SceneObject]:
        return [obj for box, obj in self._entries if box.hit_by(ray)]

    def __len__(self) -> int:
        return len(self._entries)
