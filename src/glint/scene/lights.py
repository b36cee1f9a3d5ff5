"""Light sources.

Three kinds of light are supported, forming a closed union:

- AmbientLight: uniform light that reaches every surface, never shadowed.
- DirectionalLight: parallel light travelling along a fixed direction
  (like the sun); it has no position and no distance falloff.
- PointLight: light radiating from a position, attenuated by
  ``1 / distance ** falloff`` with falloff 0 (none), 1 or 2.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from glint.core.ray import Vec, as_vec, magnitude, normalize

# Accepted point-light falloff exponents
VALID_FALLOFFS = (0, 1, 2)


@dataclass(frozen=True, eq=False)
class AmbientLight:
    """Ambient light with an RGB color."""

    color: Vec

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", as_vec(self.color))


@dataclass(frozen=True, eq=False)
class DirectionalLight:
    """Light travelling along a fixed direction.

    Attributes:
        direction: Unit direction the light travels in (from the light toward
            the scene). Normalized on construction.
        color: RGB color.
    """

    direction: Vec
    color: Vec

    def __post_init__(self) -> None:
        direction = as_vec(self.direction)
        if magnitude(direction) == 0.0:
            raise ValueError("Directional light needs a non-zero direction")
        object.__setattr__(self, "direction", normalize(direction))
        object.__setattr__(self, "color", as_vec(self.color))


@dataclass(frozen=True, eq=False)
class PointLight:
    """Light radiating from a point.

    Attributes:
        position: World-space position of the light.
        color: RGB color.
        falloff: Inverse-distance exponent: 0 (no falloff), 1 or 2.
    """

    position: Vec
    color: Vec
    falloff: int = 0

    def __post_init__(self) -> None:
        if self.falloff not in VALID_FALLOFFS:
            raise ValueError(f"Invalid falloff: {self.falloff} (expected 0, 1 or 2)")
        object.__setattr__(self, "position", as_vec(self.position))
        object.__setattr__(self, "color", as_vec(self.color))


LightSource = Union[AmbientLight, DirectionalLight, PointLight]
