"""Scene module for scene management and ray-scene queries.

Components:
    intersection: Ordered surface table (spheres and planes) and closest-hit
        selection
    lights: Point light storage
    manager: SceneManager coordinating surfaces, materials and lights
    demo: The two-spheres-over-a-plane demo scene and its light orbit

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for geometric data
    - Materials stored by value at their surface's index
"""

# Demo scene
from .demo import (
    DEFAULT_LIGHT_POSITION,
    DEFAULT_ORBIT_FRAMES,
    create_basic_scene,
    orbit_light_position,
)

# Surface storage and intersection
from .intersection import (
    MAX_SURFACES,
    SceneIntersection,
    SurfaceKind,
    add_plane,
    add_sphere,
    clear_scene,
    get_surface_count,
    intersect_scene,
    intersect_scene_any,
    intersect_surface,
)

# Point lights
from .lights import (
    MAX_LIGHTS,
    Light,
    add_light,
    clear_lights,
    get_light,
    get_light_count,
)

# Scene manager
from .manager import (
    LightInfo,
    PlaneInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)

__all__ = [
    # Intersection module
    "SceneIntersection",
    "SurfaceKind",
    "add_sphere",
    "add_plane",
    "clear_scene",
    "get_surface_count",
    "intersect_surface",
    "intersect_scene",
    "intersect_scene_any",
    "MAX_SURFACES",
    # Lights module
    "Light",
    "add_light",
    "clear_lights",
    "get_light",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    "SceneConfig",
    # Demo module
    "create_basic_scene",
    "orbit_light_position",
    "DEFAULT_LIGHT_POSITION",
    "DEFAULT_ORBIT_FRAMES",
]
