"""Camera module for primary ray generation.

Components:
    pinhole: Fixed-eye pinhole camera looking down +z

Ray generation maps integer pixel coordinates and the image resolution to a
world-space ray, one ray per pixel.
"""

from .pinhole import (
    Camera,
    generate_ray,
    get_camera_info,
    screen_sample_point,
    setup_camera,
)

__all__ = [
    "Camera",
    "setup_camera",
    "generate_ray",
    "screen_sample_point",
    "get_camera_info",
]
