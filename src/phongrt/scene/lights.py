"""Point light storage.

Each light has a position, separate ambient, diffuse and specular intensities,
and a distance attenuation triple (constant, linear, quadratic) applied as

    1 / (constant + linear * d + quadratic * d^2)

Lights are stored in Taichi fields and read by the shading code.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of point lights in the scene
MAX_LIGHTS = 64


@ti.dataclass
class Light:
    """A point light (kernel side).

    Attributes:
        position: World-space position.
        ambient: Ambient intensity (RGB).
        diffuse: Diffuse intensity (RGB).
        specular: Specular intensity (RGB).
        attenuation: (constant, linear, quadratic) attenuation coefficients.
    """

    position: vec3
    ambient: vec3
    diffuse: vec3
    specular: vec3
    attenuation: vec3


light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_ambient = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_specular = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_attenuation = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_light(
    position: tuple[float, float, float],
    ambient: tuple[float, float, float],
    diffuse: tuple[float, float, float],
    specular: tuple[float, float, float],
    attenuation: tuple[float, float, float],
) -> int:
    """Add a point light.

    Args:
        position: World-space position of the light.
        ambient: Ambient intensity (R, G, B).
        diffuse: Diffuse intensity (R, G, B).
        specular: Specular intensity (R, G, B).
        attenuation: (constant, linear, quadratic) coefficients.

    Returns:
        The index of the added light.

    Raises:
        ValueError: If any attenuation coefficient is negative.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    for i, coefficient in enumerate(attenuation):
        if coefficient < 0.0:
            raise ValueError(f"Attenuation coefficient {i} = {coefficient} is negative")

    idx = int(num_lights[None])
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_positions[idx] = list(position)
    light_ambient[idx] = list(ambient)
    light_diffuse[idx] = list(diffuse)
    light_specular[idx] = list(specular)
    light_attenuation[idx] = list(attenuation)
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_light(index: ti.i32) -> Light:
    """Get the light stored at the given index."""
    return Light(
        position=light_positions[index],
        ambient=light_ambient[index],
        diffuse=light_diffuse[index],
        specular=light_specular[index],
        attenuation=light_attenuation[index],
    )
