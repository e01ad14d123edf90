"""Tests for scene-level surface storage and closest-hit selection.

Tests cover:
- Adding spheres and planes, validation and capacity
- Closest hit across mixed surface kinds
- Tie-breaking in favour of the surface added first
- Shadow queries with a distance limit

Kernels that call the scene loops wrap them in a one-iteration outer loop so
the loops over surfaces run serially.
"""

import pytest
import taichi as ti


def _material(**kwargs):
    from phongrt.materials.phong import Material

    return Material(**kwargs)


class TestSurfaceStorage:
    """Tests for adding surfaces to the scene."""

    def test_add_sphere_and_plane(self):
        """Surfaces get consecutive indices across kinds."""
        from phongrt.scene.intersection import (
            SurfaceKind,
            add_plane,
            add_sphere,
            get_surface_count,
            surface_kinds,
        )

        assert add_sphere((0.0, 0.0, 5.0), 1.0, _material()) == 0
        assert add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0), _material()) == 1
        assert add_sphere((2.0, 0.0, 5.0), 0.5, _material()) == 2

        assert get_surface_count() == 3
        assert surface_kinds[0] == SurfaceKind.SPHERE
        assert surface_kinds[1] == SurfaceKind.PLANE
        assert surface_kinds[2] == SurfaceKind.SPHERE

    def test_clear_scene(self):
        """clear_scene resets the count."""
        from phongrt.scene.intersection import add_sphere, clear_scene, get_surface_count

        add_sphere((0.0, 0.0, 5.0), 1.0, _material())
        clear_scene()
        assert get_surface_count() == 0

    def test_plane_normal_is_normalized(self):
        """Plane normals are stored with unit length."""
        from phongrt.scene.intersection import add_plane, surface_normals

        idx = add_plane((0.0, 0.0, 0.0), (0.0, 3.0, 4.0), _material())
        n = surface_normals[idx]
        assert abs(n[1] - 0.6) < 1e-6
        assert abs(n[2] - 0.8) < 1e-6

    def test_zero_plane_normal_rejected(self):
        """A zero normal raises ValueError."""
        from phongrt.scene.intersection import add_plane

        with pytest.raises(ValueError):
            add_plane((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), _material())

    def test_nonpositive_radius_rejected(self):
        """A non-positive radius raises ValueError."""
        from phongrt.scene.intersection import add_sphere

        with pytest.raises(ValueError):
            add_sphere((0.0, 0.0, 0.0), 0.0, _material())
        with pytest.raises(ValueError):
            add_sphere((0.0, 0.0, 0.0), -1.0, _material())

    def test_material_stored_at_surface_index(self):
        """Each surface's material is written to its own slot."""
        from phongrt.materials.phong import material_diffuse, material_reflection
        from phongrt.scene.intersection import add_plane, add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0, _material(diffuse=(1.0, 0.0, 0.0)))
        idx = add_plane(
            (0.0, -1.0, 0.0), (0.0, 1.0, 0.0), _material(diffuse=(0.0, 1.0, 0.0), reflection=0.8)
        )

        assert abs(material_diffuse[idx][1] - 1.0) < 1e-6
        assert abs(material_reflection[idx] - 0.8) < 1e-6
        assert abs(material_diffuse[0][0] - 1.0) < 1e-6

    def test_capacity_exceeded(self):
        """Adding past MAX_SURFACES raises RuntimeError."""
        from phongrt.scene.intersection import MAX_SURFACES, add_sphere, num_surfaces

        num_surfaces[None] = MAX_SURFACES
        with pytest.raises(RuntimeError):
            add_sphere((0.0, 0.0, 0.0), 1.0, _material())


class TestClosestHit:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        """No surfaces means a miss record."""
        from phongrt.scene.intersection import intersect_scene, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        surface_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                rec = intersect_scene(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
                hit[None] = rec.success
                surface_id[None] = rec.surface_id

        test_kernel()
        assert hit[None] == 0
        assert surface_id[None] == -1

    def test_nearest_of_two_spheres(self):
        """The strictly nearer sphere wins regardless of insertion order."""
        from phongrt.scene.intersection import add_sphere, intersect_scene, vec3

        add_sphere((0.0, 0.0, 10.0), 1.0, _material())
        add_sphere((0.0, 0.0, 5.0), 1.0, _material())

        t_val = ti.field(dtype=ti.f32, shape=())
        surface_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                rec = intersect_scene(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
                t_val[None] = rec.distance
                surface_id[None] = rec.surface_id

        test_kernel()
        assert surface_id[None] == 1
        assert abs(t_val[None] - 4.0) < 1e-5

    def test_sphere_in_front_of_plane(self):
        """A sphere in front of a wall plane occludes it."""
        from phongrt.scene.intersection import add_plane, add_sphere, intersect_scene, vec3

        add_plane((0.0, 0.0, 20.0), (0.0, 0.0, -1.0), _material())
        add_sphere((0.0, 0.0, 5.0), 1.0, _material())

        surface_id = ti.field(dtype=ti.i32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                rec = intersect_scene(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
                surface_id[None] = rec.surface_id
                normal[None] = rec.normal

        test_kernel()
        assert surface_id[None] == 1
        assert abs(normal[None][2] + 1.0) < 1e-5

    def test_tie_goes_to_first_surface(self):
        """Equal distances resolve to the surface added first."""
        from phongrt.scene.intersection import add_plane, add_sphere, intersect_scene, vec3

        # Both touched at t = 4: sphere front at z = 4, plane at z = 4
        add_sphere((0.0, 0.0, 5.0), 1.0, _material())
        add_plane((0.0, 0.0, 4.0), (0.0, 0.0, -1.0), _material())

        surface_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                rec = intersect_scene(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
                surface_id[None] = rec.surface_id

        test_kernel()
        assert surface_id[None] == 0

    def test_tie_goes_to_first_surface_reversed(self):
        """Reversing insertion order reverses the winner."""
        from phongrt.scene.intersection import add_plane, add_sphere, intersect_scene, vec3

        add_plane((0.0, 0.0, 4.0), (0.0, 0.0, -1.0), _material())
        add_sphere((0.0, 0.0, 5.0), 1.0, _material())

        surface_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                rec = intersect_scene(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
                surface_id[None] = rec.surface_id

        test_kernel()
        assert surface_id[None] == 0


class TestShadowQuery:
    """Tests for intersect_scene_any."""

    def test_hit_before_limit(self):
        """A surface closer than t_max is reported."""
        from phongrt.scene.intersection import add_sphere, intersect_scene_any, vec3

        add_sphere((0.0, 2.0, 0.0), 0.5, _material())

        blocked = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                blocked[None] = intersect_scene_any(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 4.0, 0.0), 1.0
                )

        test_kernel()
        assert blocked[None] == 1

    def test_hit_beyond_limit_ignored(self):
        """A surface past t_max does not count."""
        from phongrt.scene.intersection import add_sphere, intersect_scene_any, vec3

        add_sphere((0.0, 6.0, 0.0), 0.5, _material())

        blocked = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                blocked[None] = intersect_scene_any(
                    vec3(0.0, 0.0, 0.0), vec3(0.0, 4.0, 0.0), 1.0
                )

        test_kernel()
        assert blocked[None] == 0
