"""Infinite plane primitive with ray-plane intersection.

A plane is defined by a point on it (origin) and a unit normal. The normal is
constant over the whole plane and is reported as-is for every hit, regardless
of which side the ray arrives from.

Ray-plane intersection uses the parametric plane test:

    t = (dot(n, origin_plane) - dot(n, ray_origin)) / dot(n, ray_direction)

Rays parallel to the plane, and hits at or behind the ray origin, are misses.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.geometry.plane import Plane, hit_plane
    >>> # Floor at y = -1 facing up
    >>> floor = Plane(origin=ti.math.vec3(0, -1, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import SURFACE_EPSILON, Intersection, no_intersection

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane through a point with a fixed normal.

    Attributes:
        origin: Any point on the plane (vec3).
        normal: The unit normal of the plane (vec3).
    """

    origin: vec3
    normal: vec3


@ti.func
def plane_normal(plane: Plane, point: vec3) -> vec3:
    """Normal of the plane; independent of the point."""
    return plane.normal


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, plane: Plane) -> Intersection:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        plane: The plane to test intersection against.

    Returns:
        An Intersection at the plane, or a miss if the ray is parallel to the
        plane or the plane lies behind the ray origin.
    """
    result = no_intersection()

    denom = tm.dot(plane.normal, ray_direction)

    if ti.abs(denom) >= SURFACE_EPSILON:
        t = (tm.dot(plane.normal, plane.origin) - tm.dot(plane.normal, ray_origin)) / denom
        if t > SURFACE_EPSILON:
            point = ray_origin + t * ray_direction
            result = Intersection(
                success=1,
                distance=t,
                position=point,
                normal=plane_normal(plane, point),
            )

    return result


@ti.func
def make_plane(origin: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and a unit normal."""
    return Plane(origin=origin, normal=normal)
