"""Materials module for surface reflectance.

Components:
    phong: Phong material (ambient, diffuse, specular, shininess, mirror
        reflection) and its per-surface storage

The diffuse and specular terms are Taichi functions evaluated per light by
the shading code in phongrt.core.shading.
"""

from .phong import (
    MAX_MATERIALS,
    Material,
    PhongMaterial,
    get_material,
    phong_diffuse,
    phong_specular,
    store_material,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "get_material",
    "store_material",
    "phong_diffuse",
    "phong_specular",
    "MAX_MATERIALS",
]
