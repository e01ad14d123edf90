"""Ray data structure and vector helpers for the Whitted-style ray tracer.

This module provides the Ray dataclass and the few vector operations the
tracer combines: evaluation along a ray, the Phong reflection formula, the
geometric mirror direction, and origin offsetting for secondary rays.
Everything here is a Taichi function usable from within kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Offset applied to secondary ray origins to avoid self-intersection
RAY_EPSILON = 1e-4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized; consumers that need a unit vector normalize it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def reflect(d: vec3, normal: vec3) -> vec3:
    """Reflect a vector about a normal: 2 * (d . n) * n - d.

    The result points to the same side of the surface as ``d``. This is the
    form used by the Phong specular term, where ``d`` is the direction
    towards the light.

    Args:
        d: The vector to reflect (pointing away from the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected vector.
    """
    return 2.0 * tm.dot(d, normal) * normal - d


@ti.func
def mirror_direction(incident: vec3, normal: vec3) -> vec3:
    """Bounce an incoming direction off a surface: d - 2 * (d . n) * n.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The outgoing mirror direction. Equal to -reflect(incident, normal).
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a secondary ray origin to avoid self-intersection.

    Pushes the point slightly along the normal, onto the side of the surface
    the new ray will travel into.

    Args:
        point: The intersection point.
        normal: The surface normal at the point.
        direction: The direction of the secondary ray.

    Returns:
        The offset origin point.
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + RAY_EPSILON * offset_dir
