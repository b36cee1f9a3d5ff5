"""Materials module.

The renderer uses a single local shading model, so there is a single
material type:

Components:
    phong: Material with ambient, diffuse, specular and mirror coefficients
"""

from .phong import DEFAULT_MATERIAL, Material

__all__ = [
    "Material",
    "DEFAULT_MATERIAL",
]
