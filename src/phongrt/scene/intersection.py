"""Scene-level surface storage and intersection testing.

Surfaces are a closed tagged variant {Sphere, Plane}. All surfaces live in one
ordered table of Taichi fields; a kind tag selects which geometry fields are
meaningful for each slot:

    SPHERE: surface_points = center, surface_radii = radius
    PLANE:  surface_points = origin, surface_normals = unit normal

Keeping a single table preserves insertion order across surface kinds, which
decides ties in closest-hit selection: the first surface in the table wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.materials.phong import Material
    >>> from phongrt.scene.intersection import add_sphere, add_plane, clear_scene
    >>> clear_scene()
    >>> add_sphere((0, 0, 5), 1.0, Material(diffuse=(1.0, 0.0, 0.0)))
    >>> add_plane((0, -1, 0), (0, 1, 0), Material(diffuse=(0.0, 1.0, 0.0)))
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import numpy as np
import taichi as ti
import taichi.math as tm

from phongrt.geometry.plane import Plane, hit_plane
from phongrt.geometry.sphere import Intersection, Sphere, hit_sphere, no_intersection
from phongrt.materials.phong import MAX_MATERIALS, Material, store_material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class SurfaceKind(IntEnum):
    """Tag of the surface variant stored in a slot."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class SceneIntersection:
    """Record of a ray-scene intersection.

    Attributes:
        success: 1 if any surface was hit, 0 otherwise.
        distance: The ray parameter t of the closest hit.
        position: The closest hit point.
        normal: The unit surface normal at the hit point.
        surface_id: Index of the hit surface, -1 on a miss.
    """

    success: ti.i32
    distance: ti.f32
    position: vec3
    normal: vec3
    surface_id: ti.i32


# Maximum number of surfaces supported in the scene
MAX_SURFACES = MAX_MATERIALS

# Surface storage: Structure of Arrays layout
surface_kinds = ti.field(dtype=ti.i32, shape=MAX_SURFACES)
surface_points = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_radii = ti.field(dtype=ti.f32, shape=MAX_SURFACES)
num_surfaces = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all surfaces from the scene.

    Resets the surface count to zero. Field data is overwritten when new
    surfaces are added.
    """
    num_surfaces[None] = 0


def _next_surface_index() -> int:
    idx = int(num_surfaces[None])
    if idx >= MAX_SURFACES:
        raise RuntimeError(f"Maximum number of surfaces ({MAX_SURFACES}) exceeded")
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material: Material,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material: The material owned by the sphere.

    Returns:
        The index of the added surface.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the maximum number of surfaces is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")

    idx = _next_surface_index()
    surface_kinds[idx] = int(SurfaceKind.SPHERE)
    surface_points[idx] = [center[0], center[1], center[2]]
    surface_normals[idx] = [0.0, 0.0, 0.0]
    surface_radii[idx] = radius
    store_material(idx, material)
    num_surfaces[None] = idx + 1
    return idx


def add_plane(
    origin: tuple[float, float, float],
    normal: tuple[float, float, float],
    material: Material,
) -> int:
    """Add an infinite plane to the scene.

    The normal is normalized before it is stored.

    Args:
        origin: Any point on the plane.
        normal: The plane normal (any non-zero length).
        material: The material owned by the plane.

    Returns:
        The index of the added surface.

    Raises:
        ValueError: If the normal has zero length.
        RuntimeError: If the maximum number of surfaces is exceeded.
    """
    n = np.asarray(normal, dtype=np.float64)
    length = float(np.linalg.norm(n))
    if length < 1e-12:
        raise ValueError(f"Plane normal must be non-zero, got {tuple(normal)}")
    n = n / length

    idx = _next_surface_index()
    surface_kinds[idx] = int(SurfaceKind.PLANE)
    surface_points[idx] = [origin[0], origin[1], origin[2]]
    surface_normals[idx] = n.tolist()
    surface_radii[idx] = 0.0
    store_material(idx, material)
    num_surfaces[None] = idx + 1
    return idx


def get_surface_count() -> int:
    """Get the number of surfaces in the scene."""
    return int(num_surfaces[None])


@ti.func
def intersect_surface(index: ti.i32, ray_origin: vec3, ray_direction: vec3) -> Intersection:
    """Intersect a ray with the surface stored at the given index.

    Dispatches on the surface kind tag.

    Args:
        index: The surface index.
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        The Intersection with that surface.
    """
    result = no_intersection()
    kind = surface_kinds[index]

    if kind == int(SurfaceKind.SPHERE):
        sphere = Sphere(center=surface_points[index], radius=surface_radii[index])
        result = hit_sphere(ray_origin, ray_direction, sphere)
    elif kind == int(SurfaceKind.PLANE):
        plane = Plane(origin=surface_points[index], normal=surface_normals[index])
        result = hit_plane(ray_origin, ray_direction, plane)

    return result


@ti.func
def _make_miss_record() -> SceneIntersection:
    """Create a SceneIntersection indicating no hit."""
    return SceneIntersection(
        success=0,
        distance=0.0,
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        surface_id=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneIntersection:
    """Find the closest surface hit along a ray.

    Tests every surface in insertion order. A later surface replaces the
    current best only if it is strictly closer, so equal distances resolve to
    the surface added first.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A SceneIntersection for the closest hit, or a miss record.
    """
    result = _make_miss_record()

    for i in range(num_surfaces[None]):
        rec = intersect_surface(i, ray_origin, ray_direction)
        if rec.success == 1:
            if result.success == 0 or rec.distance < result.distance:
                result = SceneIntersection(
                    success=1,
                    distance=rec.distance,
                    position=rec.position,
                    normal=rec.normal,
                    surface_id=i,
                )

    return result


@ti.func
def intersect_scene_any(ray_origin: vec3, ray_direction: vec3, t_max: ti.f32) -> ti.i32:
    """Test if a ray hits any surface before t_max (shadow ray query).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_max: Hits at or beyond this ray parameter are ignored.

    Returns:
        1 if any surface was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(num_surfaces[None]):
        if hit_any == 0:
            rec = intersect_surface(i, ray_origin, ray_direction)
            if rec.success == 1 and rec.distance < t_max:
                hit_any = 1

    return hit_any
