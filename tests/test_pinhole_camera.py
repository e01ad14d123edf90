"""Unit tests for the pinhole camera module.

Tests cover:
- Camera setup and validation
- Screen sample point mapping
- Ray generation for center and corner pixels
- Eye position and focal distance
"""

import math

import pytest
import taichi as ti


class TestCameraSetup:
    """Tests for camera setup."""

    def test_default_camera(self):
        """The default camera sits at the origin with focal distance 1."""
        from phongrt.camera.pinhole import Camera, get_camera_info, setup_camera

        setup_camera(Camera())
        info = get_camera_info()

        assert info["eye"] == (0.0, 0.0, 0.0)
        assert info["focal_distance"] == pytest.approx(1.0)

    def test_custom_eye(self):
        """A custom eye and focal distance are uploaded."""
        from phongrt.camera.pinhole import Camera, get_camera_info, setup_camera

        setup_camera(Camera(focal_distance=2.0, eye=(1.0, 2.0, -3.0)))
        info = get_camera_info()

        assert info["eye"] == pytest.approx((1.0, 2.0, -3.0))
        assert info["focal_distance"] == pytest.approx(2.0)

    def test_nonpositive_focal_distance_rejected(self):
        """Focal distance must be positive."""
        from phongrt.camera.pinhole import Camera, setup_camera

        with pytest.raises(ValueError):
            setup_camera(Camera(focal_distance=0.0))
        with pytest.raises(ValueError):
            setup_camera(Camera(focal_distance=-1.0))


class TestRayGeneration:
    """Tests for generate_ray."""

    def _ray_for_pixel(self, px, py, width, height):
        from phongrt.camera.pinhole import generate_ray

        origin = ti.field(dtype=ti.math.vec3, shape=())
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = generate_ray(px, py, width, height)
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        return origin[None], direction[None]

    def test_center_ray_direction(self):
        """The center pixel of an even-resolution image looks straight down +z."""
        from phongrt.camera.pinhole import Camera, setup_camera

        setup_camera(Camera())
        origin, direction = self._ray_for_pixel(2, 2, 4, 4)

        assert abs(origin[0]) < 1e-6
        assert abs(origin[1]) < 1e-6
        assert abs(origin[2]) < 1e-6
        assert abs(direction[0]) < 1e-6
        assert abs(direction[1]) < 1e-6
        assert abs(direction[2] - 1.0) < 1e-6

    def test_ray_direction_normalized(self):
        """Generated directions have unit length."""
        from phongrt.camera.pinhole import Camera, setup_camera

        setup_camera(Camera())
        _, direction = self._ray_for_pixel(0, 0, 8, 8)
        length = math.sqrt(sum(float(c) ** 2 for c in direction))
        assert abs(length - 1.0) < 1e-5

    def test_bottom_left_pixel(self):
        """Pixel (0, 0) samples the plane at (-0.5, -0.5, f)."""
        from phongrt.camera.pinhole import Camera, setup_camera

        setup_camera(Camera())
        _, direction = self._ray_for_pixel(0, 0, 8, 8)

        expected = (-0.5, -0.5, 1.0)
        norm = math.sqrt(sum(c * c for c in expected))
        for i in range(3):
            assert abs(direction[i] - expected[i] / norm) < 1e-5

    def test_pixel_y_increases_upward(self):
        """Higher pixel rows point further up."""
        from phongrt.camera.pinhole import Camera, setup_camera

        setup_camera(Camera())
        _, low = self._ray_for_pixel(3, 0, 8, 8)
        _, high = self._ray_for_pixel(3, 7, 8, 8)
        assert high[1] > low[1]

    def test_focal_distance_narrows_view(self):
        """A longer focal distance gives a narrower field of view."""
        from phongrt.camera.pinhole import Camera, setup_camera

        setup_camera(Camera(focal_distance=1.0))
        _, wide = self._ray_for_pixel(0, 4, 8, 8)
        setup_camera(Camera(focal_distance=4.0))
        _, narrow = self._ray_for_pixel(0, 4, 8, 8)

        assert abs(narrow[0]) < abs(wide[0])

    def test_ray_starts_at_eye(self):
        """Rays start at the eye and pass through the sample point."""
        from phongrt.camera.pinhole import Camera, setup_camera

        setup_camera(Camera(eye=(0.0, 0.0, -1.0)))
        origin, direction = self._ray_for_pixel(2, 2, 4, 4)

        assert abs(origin[2] + 1.0) < 1e-6
        assert abs(direction[2] - 1.0) < 1e-6


class TestScreenSamplePoint:
    """Tests for screen_sample_point."""

    def test_sample_point_mapping(self):
        """((x - w/2)/w, (y - h/2)/h, focal_distance)."""
        from phongrt.camera.pinhole import Camera, screen_sample_point, setup_camera

        setup_camera(Camera(focal_distance=1.5))
        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = screen_sample_point(6, 1, 8, 4)

        test_kernel()
        p = result[None]
        assert abs(p[0] - 0.25) < 1e-6
        assert abs(p[1] + 0.25) < 1e-6
        assert abs(p[2] - 1.5) < 1e-6
