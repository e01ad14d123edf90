"""Pinhole camera model for primary ray generation.

The camera sits at a fixed eye point and looks down +z through an implicit
image plane at z = focal_distance. A pixel (x, y) of a width x height image
maps to the sample point

    ((x - width / 2) / width, (y - height / 2) / height, focal_distance)

so the image plane spans [-0.5, 0.5) in both x and y regardless of the
aspect ratio. Pixel y = 0 is the bottom row; image export flips rows to the
usual top-left origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.camera.pinhole import Camera, setup_camera, generate_ray
    >>>
    >>> setup_camera(Camera(focal_distance=1.0))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = generate_ray(256, 256, 512, 512)  # Ray through image center
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from phongrt.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for the pinhole camera.

    Attributes:
        focal_distance: Distance from the eye to the image plane along +z.
            Must be positive.
        eye: Camera position in world space (x, y, z).
    """

    focal_distance: float = 1.0
    eye: tuple[float, float, float] = (0.0, 0.0, 0.0)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())
_focal_distance = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload the camera configuration for use in kernels.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the focal distance is not positive.
    """
    if camera.focal_distance <= 0.0:
        raise ValueError(f"Focal distance must be positive, got {camera.focal_distance}")

    _camera_eye[None] = [camera.eye[0], camera.eye[1], camera.eye[2]]
    _focal_distance[None] = camera.focal_distance


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def screen_sample_point(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Map a pixel to its sample point on the image plane.

    Args:
        pixel_x: Pixel x-coordinate (0 = left).
        pixel_y: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The point on the plane z = focal_distance.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    centered_x = ti.cast(pixel_x, ti.f32) - 0.5 * w
    centered_y = ti.cast(pixel_y, ti.f32) - 0.5 * h
    return vec3(centered_x / w, centered_y / h, _focal_distance[None])


@ti.func
def generate_ray(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for a pixel.

    Args:
        pixel_x: Pixel x-coordinate (0 = left).
        pixel_y: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the eye through the pixel's sample point, with a
        normalized direction.
    """
    eye = _camera_eye[None]
    sample = screen_sample_point(pixel_x, pixel_y, width, height)
    return make_ray(eye, tm.normalize(sample - eye))


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with the eye position and focal distance.
    """
    eye = _camera_eye[None]
    return {
        "eye": (float(eye[0]), float(eye[1]), float(eye[2])),
        "focal_distance": float(_focal_distance[None]),
    }
