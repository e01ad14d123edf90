"""Local Phong illumination with hard shadows.

Given a hit point, its normal, the incoming view direction and the hit
surface's material, this module sums the contribution of every point light:

    illum = sum over lights of
        light_ambient * ka
        + (diffuse + specular) * attenuation * shadow

The shadow term is binary: a shadow ray is cast from the hit point towards
the light, and any surface hit before the light blocks the light's diffuse
and specular contribution. The ambient term is never shadowed.

Mirror reflection is not handled here; the integrator blends the reflected
radiance on top of this local term.
"""

import taichi as ti
import taichi.math as tm

from phongrt.core.ray import offset_ray_origin
from phongrt.materials.phong import PhongMaterial, phong_diffuse, phong_specular
from phongrt.scene.intersection import intersect_scene_any
from phongrt.scene.lights import get_light, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# Lower bound on the attenuation denominator
ATTENUATION_EPSILON = 1e-6

# Lights closer than this to the shaded point contribute no direction
DISTANCE_EPSILON = 1e-8

# Shadow ray parameter at which the light itself is reached. Shadow ray
# directions span the full origin-to-light vector, so t = 1 is the light.
SHADOW_T_MAX = 1.0


@ti.func
def attenuation_factor(attenuation: vec3, distance: ti.f32) -> ti.f32:
    """Compute 1 / (constant + linear * d + quadratic * d^2).

    Args:
        attenuation: The (constant, linear, quadratic) coefficients.
        distance: Distance from the light to the shaded point.

    Returns:
        The attenuation factor. The denominator is clamped to
        ATTENUATION_EPSILON so the result is always finite.
    """
    denom = tm.dot(attenuation, vec3(1.0, distance, distance * distance))
    return 1.0 / tm.max(denom, ATTENUATION_EPSILON)


@ti.func
def shadow_term(point: vec3, normal: vec3, light_position: vec3) -> ti.f32:
    """Binary visibility of a light from a surface point.

    Args:
        point: The shaded surface point.
        normal: The surface normal at the point.
        light_position: World-space position of the light.

    Returns:
        0.0 if any surface lies between the point and the light, 1.0 otherwise.
    """
    origin = offset_ray_origin(point, normal, light_position - point)
    blocked = intersect_scene_any(origin, light_position - origin, SHADOW_T_MAX)
    visibility = 1.0
    if blocked == 1:
        visibility = 0.0
    return visibility


@ti.func
def evaluate_local_lighting(
    view_dir: vec3,
    point: vec3,
    normal: vec3,
    material: PhongMaterial,
) -> vec3:
    """Evaluate ambient, diffuse and specular lighting from all lights.

    Args:
        view_dir: Normalized incoming ray direction (pointing toward the
            surface).
        point: The hit point.
        normal: The unit surface normal at the hit point.
        material: The material of the hit surface.

    Returns:
        The locally reflected radiance (RGB).
    """
    illum = vec3(0.0, 0.0, 0.0)

    for i in range(num_lights[None]):
        light = get_light(i)

        to_light = light.position - point
        light_dist = tm.length(to_light)
        to_light_dir = vec3(0.0, 0.0, 0.0)
        if light_dist > DISTANCE_EPSILON:
            to_light_dir = to_light / light_dist

        light_att = attenuation_factor(light.attenuation, light_dist)

        diffuse = phong_diffuse(material.diffuse, light.diffuse, to_light_dir, normal)
        specular = phong_specular(
            material.specular,
            material.shininess,
            light.specular,
            to_light_dir,
            normal,
            view_dir,
        )

        gterm = shadow_term(point, normal, light.position)

        illum += light.ambient * material.ambient + (diffuse + specular) * (light_att * gterm)

    return illum
