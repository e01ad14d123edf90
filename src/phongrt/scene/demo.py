"""Demo scene configuration.

This module provides factory functions for the basic demo scene: two
coloured spheres over a reflective green floor, lit by one dim point light.

The scene consists of:
- Magenta sphere at (-1, 0, 6), radius 1, slightly reflective
- Yellow sphere at (1, 0, 4), radius 0.8, half mirror
- Green floor plane at y = -1, strongly reflective
- One point light, by default at (0, 5, 4)

The camera sits at the origin looking down +z with focal distance 1. The
light intensities are the library defaults (0.01), so renders rely on the
"scale" tone mapping to become visible.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.scene.demo import create_basic_scene, orbit_light_position
    >>>
    >>> scene, camera = create_basic_scene()
    >>> # Frame 18 of the orbit animation
    >>> scene, camera = create_basic_scene(orbit_light_position(18))
"""

import math

from phongrt.camera.pinhole import Camera
from phongrt.materials.phong import Material
from phongrt.scene.manager import SceneManager

# =============================================================================
# Demo Scene Constants
# =============================================================================

# Default light position for the still image
DEFAULT_LIGHT_POSITION = (0.0, 5.0, 4.0)

# Output resolution used by the example scripts
DEFAULT_IMAGE_SIZE = 512

MAGENTA_SPHERE_MATERIAL = Material(
    ambient=(0.01, 0.0, 0.01),
    diffuse=(1.0, 0.0, 1.0),
    specular=(0.0, 0.0, 0.0),
    shininess=100.0,
    reflection=0.1,
)

YELLOW_SPHERE_MATERIAL = Material(
    ambient=(0.01, 0.01, 0.0),
    diffuse=(1.0, 1.0, 0.0),
    specular=(0.0, 0.0, 0.0),
    shininess=1.0,
    reflection=0.5,
)

FLOOR_MATERIAL = Material(
    ambient=(0.0, 0.0, 0.0),
    diffuse=(0.0, 1.0, 0.0),
    specular=(0.0, 0.0, 0.0),
    shininess=1.0,
    reflection=0.8,
)

# Light orbit: radius and height of the circle, degrees advanced per frame
ORBIT_RADIUS = 5.0
ORBIT_HEIGHT = 5.0
ORBIT_STEP_DEGREES = 5.0

# Two full turns at the default step
DEFAULT_ORBIT_FRAMES = 2 * 72


# =============================================================================
# Demo Scene Factory
# =============================================================================


def create_basic_scene(
    light_position: tuple[float, float, float] = DEFAULT_LIGHT_POSITION,
) -> tuple[SceneManager, Camera]:
    """Create the demo scene with the light at the given position.

    Args:
        light_position: World-space position of the single point light.

    Returns:
        A tuple of (SceneManager, Camera) where the camera is the default
        pinhole camera at the origin.

    Example:
        >>> scene, camera = create_basic_scene()
        >>> scene.get_sphere_count(), scene.get_plane_count()
        (2, 1)
    """
    scene = SceneManager()

    scene.add_sphere(center=(-1.0, 0.0, 6.0), radius=1.0, material=MAGENTA_SPHERE_MATERIAL)
    scene.add_sphere(center=(1.0, 0.0, 4.0), radius=0.8, material=YELLOW_SPHERE_MATERIAL)
    scene.add_plane(origin=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0), material=FLOOR_MATERIAL)

    scene.add_light(position=light_position)

    return scene, Camera()


def orbit_light_position(
    frame: int,
    radius: float = ORBIT_RADIUS,
    height: float = ORBIT_HEIGHT,
    step_degrees: float = ORBIT_STEP_DEGREES,
) -> tuple[float, float, float]:
    """Get the light position for one frame of the orbit animation.

    The light circles the y axis: at frame i the angle is i * step_degrees
    and the position is (radius * cos(a), height, radius * sin(a)).

    Args:
        frame: Frame number, starting at 0.
        radius: Orbit radius.
        height: Light height (y).
        step_degrees: Angle advanced per frame.

    Returns:
        The light position for that frame.
    """
    angle = math.radians(step_degrees * frame)
    return (radius * math.cos(angle), height, radius * math.sin(angle))
