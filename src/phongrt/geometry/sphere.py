"""Sphere primitive and the shared intersection record.

This module provides the Intersection dataclass returned by every surface
test, and the Sphere dataclass with its ray-sphere intersection.

The intersection solves the quadratic

    a*t^2 + b*t + c = 0

with a = dot(d, d), b = 2 * dot(o - center, d) and
c = dot(o - center, o - center) - radius^2. A discriminant just above zero
is treated as a single tangent root. Of the roots, the nearest one in front
of the ray origin is reported, so spheres behind the ray are never hit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Discriminants below this are treated as a tangent (single-root) hit
TANGENT_EPSILON = 1e-5

# Hits at or closer than this along the ray are rejected
SURFACE_EPSILON = 1e-5


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class Intersection:
    """Record of a ray-surface intersection.

    Attributes:
        success: 1 if the ray hit the surface, 0 otherwise.
        distance: The ray parameter t at the hit. Measured in units of the
            ray direction, which need not be normalized.
        position: The hit point.
        normal: The unit surface normal at the hit point.

    A failed intersection carries zero distance, position and normal. Check
    ``success`` before reading the other fields.
    """

    success: ti.i32
    distance: ti.f32
    position: vec3
    normal: vec3


@ti.func
def no_intersection() -> Intersection:
    """Create an Intersection indicating a miss."""
    return Intersection(
        success=0,
        distance=0.0,
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a point on its surface."""
    return tm.normalize(point - sphere.center)


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> Intersection:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.

    Returns:
        An Intersection for the nearest root in front of the ray origin, or a
        miss if the ray does not reach the sphere.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    result = no_intersection()

    if discriminant >= 0.0:
        t0 = 0.0
        t1 = 0.0
        if discriminant < TANGENT_EPSILON:
            t0 = -b / (2.0 * a)
            t1 = t0
        else:
            sqrt_d = ti.sqrt(discriminant)
            t0 = (-b - sqrt_d) / (2.0 * a)
            t1 = (-b + sqrt_d) / (2.0 * a)
            if t0 > t1:
                temp = t0
                t0 = t1
                t1 = temp

        # Nearest root in front of the origin
        t = t0
        valid = t > SURFACE_EPSILON
        if not valid:
            t = t1
            valid = t > SURFACE_EPSILON

        if valid:
            point = ray_origin + t * ray_direction
            result = Intersection(
                success=1,
                distance=t,
                position=point,
                normal=sphere_normal(sphere, point),
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
