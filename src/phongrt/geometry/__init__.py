"""Geometry module for analytic surface primitives.

This module provides the surface primitives and their intersection tests:

Components:
    sphere: Sphere primitive and the shared Intersection record
    plane: Infinite plane primitive

All intersection routines are implemented as Taichi functions (@ti.func)
and follow the pattern:
    intersection = hit_shape(ray_origin, ray_direction, shape)

A miss is a normal outcome reported through ``intersection.success``.
"""

from .plane import Plane, hit_plane, make_plane, plane_normal
from .sphere import (
    SURFACE_EPSILON,
    TANGENT_EPSILON,
    Intersection,
    Sphere,
    hit_sphere,
    make_sphere,
    no_intersection,
    sphere_normal,
)

__all__ = [
    "Sphere",
    "Intersection",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "no_intersection",
    "Plane",
    "hit_plane",
    "make_plane",
    "plane_normal",
    "SURFACE_EPSILON",
    "TANGENT_EPSILON",
]
