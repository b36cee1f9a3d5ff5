"""Phong surface material.

A material holds the coefficients of the local Phong model plus a mirror
coefficient for recursive reflection. All coefficients are RGB triples that
multiply light colors channel by channel.

Example:
    >>> from glint.materials.phong import Material
    >>> red_plastic = Material(
    ...     ambient=(0.1, 0.0, 0.0),
    ...     diffuse=(0.7, 0.0, 0.0),
    ...     specular=(0.5, 0.5, 0.5),
    ...     specular_power=32.0,
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from glint.core.ray import Vec, as_vec, is_black


def _black() -> Vec:
    return np.zeros(3)


@dataclass(frozen=True, eq=False)
class Material:
    """Coefficients for ambient, diffuse, specular and mirror reflection.

    Attributes:
        ambient: Ambient coefficient (ka), applied to every light unshadowed.
        diffuse: Lambertian coefficient (kd).
        specular: Phong highlight coefficient (ks).
        specular_power: Phong exponent (non-negative); larger values give
            tighter highlights.
        reflective: Mirror coefficient (kr); all-zero disables reflection rays.
    """

    ambient: Vec = field(default_factory=_black)
    diffuse: Vec = field(default_factory=_black)
    specular: Vec = field(default_factory=_black)
    specular_power: float = 1.0
    reflective: Vec = field(default_factory=_black)

    def __post_init__(self) -> None:
        # Accept tuples and lists; store float64 arrays
        for name in ("ambient", "diffuse", "specular", "reflective"):
            object.__setattr__(self, name, as_vec(getattr(self, name)))
        power = float(self.specular_power)
        if not power >= 0.0:
            raise ValueError(f"Specular power must be non-negative, got {power}")
        object.__setattr__(self, "specular_power", power)

    @property
    def is_reflective(self) -> bool:
        """True if any channel of the mirror coefficient is non-zero."""
        return not is_black(self.reflective)


# Material assigned to objects declared before any material
DEFAULT_MATERIAL = Material()
