"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector helpers
    shading: Phong illumination with hard shadows for a single hit point
    integrator: Closest-hit tracing, mirror bounces and the render kernel
    renderer: Object-oriented wrapper around the render target

The core renders one ray per pixel. Each hit is shaded with the Phong model
(ambient, diffuse, specular) against every point light, shadowed by a binary
occlusion test, and blended with a bounded number of mirror bounces.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    RAY_EPSILON,
    Ray,
    make_ray,
    mirror_direction,
    offset_ray_origin,
    ray_at,
    reflect,
    vec3,
)

# Note: shading, integrator and renderer are NOT imported here to avoid
# circular imports. Import them directly from phongrt.core.<module>.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "reflect",
    "mirror_direction",
    "offset_ray_origin",
    "RAY_EPSILON",
]
