"""Whitted-style ray tracing integrator.

This module implements the tracing driver: one primary ray per pixel, closest
hit selection, local Phong shading and a bounded number of mirror bounces.

At every hit with remaining depth, the radiance is blended as

    illum = local * (1 - reflection) + traced(mirror ray, depth - 1) * reflection

and at depth 0 the local illumination is returned unblended. Taichi functions
cannot recurse, so the blend is unrolled into a loop that carries the product
of the reflection coefficients seen so far as a weight. A bounce that escapes
the scene contributes the background color.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.core.integrator import render
    >>> from phongrt.preview.image import Image
    >>> from phongrt.scene.demo import create_basic_scene
    >>>
    >>> scene, camera = create_basic_scene()
    >>> image = Image(512, 512)
    >>> render(camera, scene, 512, 512, image, max_depth=1)
"""

import logging
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from phongrt.camera.pinhole import Camera, generate_ray, setup_camera
from phongrt.core.ray import mirror_direction, offset_ray_origin
from phongrt.core.shading import evaluate_local_lighting
from phongrt.materials.phong import get_material
from phongrt.scene.intersection import intersect_scene

if TYPE_CHECKING:
    from phongrt.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default number of mirror bounces after the primary hit
DEFAULT_MAX_DEPTH = 1

# Radiance returned for rays that leave the scene
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)


class PixelSink(Protocol):
    """Anything that accepts one sample per pixel coordinate."""

    def set(self, x: int, y: int, value: Any) -> None: ...


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear radiance buffer, indexed [x, y] with y = 0 at the bottom
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Number of scene traces (primary rays plus mirror bounces) since the last reset
_trace_count = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_trace_count() -> int:
    """Get the number of scene traces performed since the last reset."""
    return int(_trace_count[None])


def reset_trace_count() -> None:
    """Reset the scene trace counter to zero."""
    _trace_count[None] = 0


# =============================================================================
# Tracing Core
# =============================================================================


@ti.func
def trace_scene(ray_origin: vec3, ray_direction: vec3, max_depth: ti.i32) -> vec3:
    """Trace a ray through the scene with up to max_depth mirror bounces.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (need not be normalized).
        max_depth: Number of mirror bounces allowed. Negative values are
            treated as 0.

    Returns:
        The radiance (RGB) arriving along the ray.
    """
    depth = ti.max(max_depth, 0)

    radiance = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    origin = ray_origin
    direction = ray_direction

    # Taichi functions cannot break out of loops; finished paths go inactive
    active = 1

    for bounce in range(depth + 1):
        if active == 1:
            ti.atomic_add(_trace_count[None], 1)
            rec = intersect_scene(origin, direction)

            if rec.success == 0:
                radiance += weight * BACKGROUND_COLOR
                active = 0
            else:
                view_dir = tm.normalize(direction)
                material = get_material(rec.surface_id)
                local = evaluate_local_lighting(view_dir, rec.position, rec.normal, material)

                if bounce < depth:
                    radiance += weight * (1.0 - material.reflection) * local
                    weight *= material.reflection

                    bounce_dir = mirror_direction(view_dir, rec.normal)
                    origin = offset_ray_origin(rec.position, rec.normal, bounce_dir)
                    direction = bounce_dir
                else:
                    radiance += weight * local
                    active = 0

    return radiance


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Render one ray per pixel into the color buffer."""
    for i, j in ti.ndrange(width, height):
        ray = generate_ray(i, j, width, height)
        _color_buffer[i, j] = trace_scene(ray.origin, ray.direction, max_depth)


# Radiance of the last single-pixel render
_pixel_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _render_single_pixel(
    pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
):
    """Render a single pixel into _pixel_result."""
    # One-iteration outer loop keeps the scene loops inside trace_scene serial
    for _ in range(1):
        ray = generate_ray(pixel_x, pixel_y, width, height)
        _pixel_result[None] = trace_scene(ray.origin, ray.direction, max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image(max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Render the whole render target with the current scene and camera.

    Args:
        max_depth: Number of mirror bounces after the primary hit.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_frame(width, height, max_depth)


def render_pixel(pixel_x: int, pixel_y: int, max_depth: int = DEFAULT_MAX_DEPTH) -> tuple[float, float, float]:
    """Render a single pixel of the render target.

    Uses the current scene and camera. Intended for testing and debugging;
    the color buffer is not modified.

    Args:
        pixel_x: Pixel x-coordinate (0 = left).
        pixel_y: Pixel y-coordinate (0 = bottom).
        max_depth: Number of mirror bounces after the primary hit.

    Returns:
        Tuple of (R, G, B) radiance values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_single_pixel(pixel_x, pixel_y, width, height, max_depth)
    color = _pixel_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def get_radiance_numpy() -> npt.NDArray[np.float32]:
    """Get the active region of the color buffer.

    Returns:
        Linear radiance array of shape (width, height, 3), indexed [x, y]
        with y = 0 at the bottom.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()
    return full_image[:width, :height, :].astype(np.float32)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image in standard image layout.

    Returns:
        Linear radiance array of shape (height, width, 3) with row 0 at the
        top of the picture. Values are not clamped.
    """
    radiance = get_radiance_numpy()

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(radiance, (1, 0, 2))

    # Flip vertically (pixel y = 0 is the bottom row)
    return np.ascontiguousarray(np.flipud(image))


def write_to_sink(sink: PixelSink) -> None:
    """Write every rendered pixel to a sink in row-major order.

    Args:
        sink: Receives sink.set(x, y, value) once per pixel, where value is a
            length-3 float32 array of linear radiance.
    """
    radiance = get_radiance_numpy()
    width, height = get_image_dimensions()

    for y in range(height):
        for x in range(width):
            sink.set(x, y, radiance[x, y])


def render(
    camera: Camera,
    scene: "SceneManager",
    width: int,
    height: int,
    sink: PixelSink,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Render a scene and write the result to a pixel sink.

    Args:
        camera: The camera configuration.
        scene: The scene to render. Its surfaces and lights are re-uploaded
            before rendering.
        width: Image width in pixels.
        height: Image height in pixels.
        sink: Receives one sink.set(x, y, value) call per pixel, rows from
            y = 0 (bottom) upwards.
        max_depth: Number of mirror bounces after the primary hit.

    Raises:
        ValueError: If the dimensions or camera are invalid.
    """
    setup_render_target(width, height)
    setup_camera(camera)
    scene.sync()

    logger.info("Rendering %dx%d, max depth %d", width, height, max_depth)
    reset_trace_count()
    render_image(max_depth)
    logger.debug("Rendered with %d scene traces", get_trace_count())

    write_to_sink(sink)
