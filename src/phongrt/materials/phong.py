"""Phong material model and per-surface material storage.

This module implements the reflectance side of the Phong illumination model.
A material carries three RGB coefficients (ambient, diffuse, specular), a
specular exponent (shininess) and a mirror reflection coefficient.

For a unit direction L towards the light, a unit normal N and the incoming
view direction V (pointing toward the surface):

    diffuse  = kd * max(0, L . N) * light_diffuse
    specular = ks * max(0, -R . V)^shininess * light_specular

where R = 2 * (L . N) * N - L is L reflected about N.

Every surface owns one material by value, so materials are stored at the
surface's index rather than in a separate registry.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.materials.phong import Material, store_material
    >>> red = Material(ambient=(0.01, 0.0, 0.0), diffuse=(1.0, 0.0, 0.0))
    >>> store_material(0, red)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from phongrt.core.ray import reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass
class Material:
    """Phong material parameters (Python side).

    Attributes:
        ambient: Ambient reflectance (R, G, B).
        diffuse: Diffuse reflectance (R, G, B).
        specular: Specular reflectance (R, G, B).
        shininess: Specular exponent. Must be non-negative.
        reflection: Fraction of outgoing radiance taken from the mirror
            bounce rather than local shading, in [0, 1].

    Raises:
        ValueError: If shininess is negative, reflection is outside [0, 1]
            or any coefficient is negative.
    """

    ambient: tuple[float, float, float] = (0.0, 0.0, 0.0)
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0)
    shininess: float = 1.0
    reflection: float = 0.0

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular"):
            coefficient = getattr(self, name)
            if len(coefficient) != 3:
                raise ValueError(f"Material {name} must have 3 components, got {len(coefficient)}")
            for i, component in enumerate(coefficient):
                if component < 0.0:
                    raise ValueError(f"Material {name} component {i} = {component} is negative")
        if self.shininess < 0.0:
            raise ValueError(f"Shininess must be non-negative, got {self.shininess}")
        if self.reflection < 0.0 or self.reflection > 1.0:
            raise ValueError(f"Reflection {self.reflection} is outside [0, 1]")

    def to_dict(self) -> dict:
        """Export the material as a JSON-compatible dictionary."""
        return {
            "ambient": list(self.ambient),
            "diffuse": list(self.diffuse),
            "specular": list(self.specular),
            "shininess": self.shininess,
            "reflection": self.reflection,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Material":
        """Create a material from a dictionary produced by to_dict()."""
        return cls(
            ambient=tuple(data.get("ambient", (0.0, 0.0, 0.0))),
            diffuse=tuple(data.get("diffuse", (0.0, 0.0, 0.0))),
            specular=tuple(data.get("specular", (0.0, 0.0, 0.0))),
            shininess=float(data.get("shininess", 1.0)),
            reflection=float(data.get("reflection", 0.0)),
        )


@ti.dataclass
class PhongMaterial:
    """Phong material parameters (kernel side).

    Attributes:
        ambient: Ambient reflectance (RGB).
        diffuse: Diffuse reflectance (RGB).
        specular: Specular reflectance (RGB).
        shininess: Specular exponent.
        reflection: Mirror blend factor in [0, 1].
    """

    ambient: vec3
    diffuse: vec3
    specular: vec3
    shininess: ti.f32
    reflection: ti.f32


@ti.func
def phong_diffuse(kd: vec3, light_diffuse: vec3, to_light_dir: vec3, normal: vec3) -> vec3:
    """Diffuse term: kd * max(0, L . N) * light_diffuse."""
    return kd * tm.max(tm.dot(to_light_dir, normal), 0.0) * light_diffuse


@ti.func
def phong_specular(
    ks: vec3,
    shininess: ti.f32,
    light_specular: vec3,
    to_light_dir: vec3,
    normal: vec3,
    view_dir: vec3,
) -> vec3:
    """Specular term: ks * max(0, -R . V)^shininess * light_specular.

    Args:
        ks: Specular reflectance.
        shininess: Specular exponent.
        light_specular: Specular intensity of the light.
        to_light_dir: Unit direction from the surface point to the light.
        normal: Unit surface normal.
        view_dir: Unit incoming view direction (pointing toward the surface).

    Returns:
        The specular contribution (RGB).
    """
    reflected = reflect(to_light_dir, normal)
    highlight = tm.max(-tm.dot(reflected, view_dir), 0.0)
    return ks * (highlight**shininess) * light_specular


# =============================================================================
# Material Field Storage (indexed by surface)
# =============================================================================

# Must match the surface capacity in phongrt.scene.intersection
MAX_MATERIALS = 1024

material_ambient = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_reflection = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)


def store_material(index: int, material: Material) -> None:
    """Write a material into the slot of the surface that owns it.

    Args:
        index: The surface index.
        material: The material parameters.

    Raises:
        RuntimeError: If the index is outside the material storage.
    """
    if index < 0 or index >= MAX_MATERIALS:
        raise RuntimeError(f"Material slot {index} is outside [0, {MAX_MATERIALS})")

    material_ambient[index] = list(material.ambient)
    material_diffuse[index] = list(material.diffuse)
    material_specular[index] = list(material.specular)
    material_shininess[index] = material.shininess
    material_reflection[index] = material.reflection


@ti.func
def get_material(index: ti.i32) -> PhongMaterial:
    """Get the material of the surface at the given index."""
    return PhongMaterial(
        ambient=material_ambient[index],
        diffuse=material_diffuse[index],
        specular=material_specular[index],
        shininess=material_shininess[index],
        reflection=material_reflection[index],
    )
