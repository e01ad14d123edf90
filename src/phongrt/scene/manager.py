"""Scene manager for building scenes of surfaces and lights.

This module provides a high-level scene management API on top of the
module-level surface and light storage. A SceneManager keeps its own ordered
Python-side description of the scene and mirrors it into the Taichi fields,
so several scenes can be built and each one re-uploaded before it is
rendered.

The SceneManager maintains:
- The ordered surface list (spheres and planes, each owning its material)
- The light list
- Scene serialization/configuration support

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.materials.phong import Material
    >>> from phongrt.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere((0, 0, 5), 1.0, Material(diffuse=(1.0, 0.0, 0.0)))
    >>> scene.add_plane((0, -1, 0), (0, 1, 0), Material(diffuse=(0.0, 1.0, 0.0)))
    >>> scene.add_light((0, 5, 4))
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Union

from phongrt.materials.phong import Material
from phongrt.scene import intersection, lights
from phongrt.scene.intersection import MAX_SURFACES
from phongrt.scene.lights import MAX_LIGHTS

logger = logging.getLogger(__name__)

# Light defaults: dim white intensities and unit attenuation coefficients
DEFAULT_LIGHT_INTENSITY = (0.01, 0.01, 0.01)
DEFAULT_LIGHT_ATTENUATION = (1.0, 1.0, 1.0)

_scene_ids = itertools.count()

# Id of the SceneManager whose surfaces and lights are in the shared fields
_uploaded_scene_id: int | None = None


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        surface_index: The index in the surface storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The material owned by the sphere.
    """

    surface_index: int
    center: tuple[float, float, float]
    radius: float
    material: Material


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        surface_index: The index in the surface storage arrays.
        origin: A point on the plane.
        normal: The plane normal as given (normalized on upload).
        material: The material owned by the plane.
    """

    surface_index: int
    origin: tuple[float, float, float]
    normal: tuple[float, float, float]
    material: Material


SurfaceInfo = Union[SphereInfo, PlaneInfo]


@dataclass
class LightInfo:
    """Information about a point light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        position: World-space position.
        ambient: Ambient intensity.
        diffuse: Diffuse intensity.
        specular: Specular intensity.
        attenuation: (constant, linear, quadratic) attenuation coefficients.
    """

    light_index: int
    position: tuple[float, float, float]
    ambient: tuple[float, float, float] = DEFAULT_LIGHT_INTENSITY
    diffuse: tuple[float, float, float] = DEFAULT_LIGHT_INTENSITY
    specular: tuple[float, float, float] = DEFAULT_LIGHT_INTENSITY
    attenuation: tuple[float, float, float] = DEFAULT_LIGHT_ATTENUATION


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        surfaces: List of surface configurations, in scene order.
        lights: List of light configurations.
    """

    surfaces: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


def _vec3(values: Any, default: tuple[float, float, float]) -> tuple[float, float, float]:
    if values is None:
        return default
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene of ordered surfaces and point lights.

    Surfaces are added in order; that order decides distance ties during
    closest-hit selection. Every add call writes through to the Taichi
    fields immediately, and sync() rewrites the fields from this manager's
    lists before a render.

    Attributes:
        surfaces: SphereInfo/PlaneInfo records in scene order.
        lights: LightInfo records.

    Example:
        >>> scene = SceneManager()
        >>> mirror = Material(diffuse=(0.2, 0.2, 0.2), reflection=0.8)
        >>> scene.add_sphere((0, 0, 5), 1.0, mirror)
        >>> scene.add_light((0, 5, 4), diffuse=(1.0, 1.0, 1.0))
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.surfaces: list[SurfaceInfo] = []
        self.lights: list[LightInfo] = []
        self._scene_id = next(_scene_ids)
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        intersection.clear_scene()
        lights.clear_lights()
        self.surfaces.clear()
        self.lights.clear()
        self._mark_uploaded()

    def clear(self) -> None:
        """Clear the entire scene (surfaces and lights)."""
        self._clear_all()

    # =========================================================================
    # Surface Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material: The sphere's material.

        Returns:
            The index of the added surface.

        Raises:
            RuntimeError: If the maximum number of surfaces is exceeded.
            ValueError: If the radius is not positive or center does not
                have 3 components.
        """
        center = _vec3(center, (0.0, 0.0, 0.0))
        self._ensure_synced()
        surface_index = intersection.add_sphere(center, radius, material)

        info = SphereInfo(
            surface_index=surface_index,
            center=center,
            radius=float(radius),
            material=material,
        )
        self.surfaces.append(info)

        return surface_index

    def add_plane(
        self,
        origin: tuple[float, float, float],
        normal: tuple[float, float, float],
        material: Material,
    ) -> int:
        """Add an infinite plane to the scene.

        Args:
            origin: Any point on the plane as (x, y, z).
            normal: The plane normal (normalized on upload).
            material: The plane's material.

        Returns:
            The index of the added surface.

        Raises:
            RuntimeError: If the maximum number of surfaces is exceeded.
            ValueError: If the normal has zero length or a vector does not
                have 3 components.
        """
        origin = _vec3(origin, (0.0, 0.0, 0.0))
        normal = _vec3(normal, (0.0, 1.0, 0.0))
        self._ensure_synced()
        surface_index = intersection.add_plane(origin, normal, material)

        info = PlaneInfo(
            surface_index=surface_index,
            origin=origin,
            normal=normal,
            material=material,
        )
        self.surfaces.append(info)

        return surface_index

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_light(
        self,
        position: tuple[float, float, float],
        ambient: tuple[float, float, float] = DEFAULT_LIGHT_INTENSITY,
        diffuse: tuple[float, float, float] = DEFAULT_LIGHT_INTENSITY,
        specular: tuple[float, float, float] = DEFAULT_LIGHT_INTENSITY,
        attenuation: tuple[float, float, float] = DEFAULT_LIGHT_ATTENUATION,
    ) -> int:
        """Add a point light to the scene.

        Args:
            position: World-space position of the light.
            ambient: Ambient intensity. Default (0.01, 0.01, 0.01).
            diffuse: Diffuse intensity. Default (0.01, 0.01, 0.01).
            specular: Specular intensity. Default (0.01, 0.01, 0.01).
            attenuation: (constant, linear, quadratic) coefficients.
                Default (1, 1, 1).

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If any attenuation coefficient is negative or a
                vector does not have 3 components.
        """
        info = LightInfo(
            light_index=-1,
            position=_vec3(position, (0.0, 0.0, 0.0)),
            ambient=_vec3(ambient, DEFAULT_LIGHT_INTENSITY),
            diffuse=_vec3(diffuse, DEFAULT_LIGHT_INTENSITY),
            specular=_vec3(specular, DEFAULT_LIGHT_INTENSITY),
            attenuation=_vec3(attenuation, DEFAULT_LIGHT_ATTENUATION),
        )

        self._ensure_synced()
        light_index = lights.add_light(
            info.position, info.ambient, info.diffuse, info.specular, info.attenuation
        )
        info.light_index = light_index
        self.lights.append(info)

        return light_index

    # =========================================================================
    # Device Upload
    # =========================================================================

    def _mark_uploaded(self) -> None:
        global _uploaded_scene_id
        _uploaded_scene_id = self._scene_id

    def _ensure_synced(self) -> None:
        # Another manager, or a direct clear, may have replaced the shared fields
        if (
            _uploaded_scene_id != self._scene_id
            or intersection.get_surface_count() != len(self.surfaces)
            or lights.get_light_count() != len(self.lights)
        ):
            self.sync()

    def sync(self) -> None:
        """Rewrite the surface and light fields from this scene.

        Called by the renderer before every render so that the fields hold
        this scene even if another SceneManager wrote to them in between.
        """
        intersection.clear_scene()
        for info in self.surfaces:
            if isinstance(info, SphereInfo):
                intersection.add_sphere(info.center, info.radius, info.material)
            else:
                intersection.add_plane(info.origin, info.normal, info.material)

        lights.clear_lights()
        for light in self.lights:
            lights.add_light(
                light.position, light.ambient, light.diffuse, light.specular, light.attenuation
            )
        self._mark_uploaded()

        logger.debug(
            "Synced scene: %d surfaces, %d lights", len(self.surfaces), len(self.lights)
        )

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_surface_count(self) -> int:
        """Get the number of surfaces in the scene."""
        return len(self.surfaces)

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return sum(1 for info in self.surfaces if isinstance(info, SphereInfo))

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return sum(1 for info in self.surfaces if isinstance(info, PlaneInfo))

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return len(self.lights)

    def get_surface_info(self, surface_index: int) -> SurfaceInfo | None:
        """Get information about a surface by index.

        Args:
            surface_index: The surface index returned by add_sphere/add_plane.

        Returns:
            SphereInfo or PlaneInfo, or None if not found.
        """
        if 0 <= surface_index < len(self.surfaces):
            return self.surfaces[surface_index]
        return None

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all surfaces and lights.
        """
        config = SceneConfig()

        for info in self.surfaces:
            if isinstance(info, SphereInfo):
                surface_config: dict[str, Any] = {
                    "type": "sphere",
                    "center": list(info.center),
                    "radius": info.radius,
                }
            else:
                surface_config = {
                    "type": "plane",
                    "origin": list(info.origin),
                    "normal": list(info.normal),
                }
            surface_config["material"] = info.material.to_dict()
            config.surfaces.append(surface_config)

        for light in self.lights:
            config.lights.append(
                {
                    "position": list(light.position),
                    "ambient": list(light.ambient),
                    "diffuse": list(light.diffuse),
                    "specular": list(light.specular),
                    "attenuation": list(light.attenuation),
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for surface_config in config.surfaces:
            surface_type = str(surface_config.get("type", "")).lower()
            material = Material.from_dict(surface_config.get("material", {}))

            if surface_type == "sphere":
                center = _vec3(surface_config.get("center"), (0.0, 0.0, 0.0))
                radius = float(surface_config.get("radius", 1.0))
                self.add_sphere(center, radius, material)
            elif surface_type == "plane":
                origin = _vec3(surface_config.get("origin"), (0.0, 0.0, 0.0))
                normal = _vec3(surface_config.get("normal"), (0.0, 1.0, 0.0))
                self.add_plane(origin, normal, material)
            else:
                raise ValueError(f"Unknown surface type: {surface_type}")

        for light_config in config.lights:
            self.add_light(
                _vec3(light_config.get("position"), (0.0, 0.0, 0.0)),
                ambient=_vec3(light_config.get("ambient"), DEFAULT_LIGHT_INTENSITY),
                diffuse=_vec3(light_config.get("diffuse"), DEFAULT_LIGHT_INTENSITY),
                specular=_vec3(light_config.get("specular"), DEFAULT_LIGHT_INTENSITY),
                attenuation=_vec3(light_config.get("attenuation"), DEFAULT_LIGHT_ATTENUATION),
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "surfaces": config.surfaces,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'surfaces' and 'lights' keys.
        """
        config = SceneConfig(
            surfaces=data.get("surfaces", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_surfaces() -> int:
        """Get the maximum number of surfaces supported."""
        return MAX_SURFACES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    def __repr__(self) -> str:
        return (
            f"SceneManager(spheres={self.get_sphere_count()}, "
            f"planes={self.get_plane_count()}, lights={self.get_light_count()})"
        )
