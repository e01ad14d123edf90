"""Renderer wrapper around the tracing integrator.

This module provides a convenient object interface over the integrator's
module-level render target:
- Rendering a scene/camera pair at a fixed resolution and bounce depth
- Rendering single pixels for inspection
- Retrieving the result as a NumPy array or an Image sink
- Saving the result with tone mapping

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongrt.core.renderer import Renderer
    >>> from phongrt.scene.demo import create_basic_scene
    >>>
    >>> scene, camera = create_basic_scene()
    >>> renderer = Renderer(512, 512, max_depth=1)
    >>> renderer.render(scene, camera)
    >>> renderer.save_image("img.ppm")
"""

import logging
import time
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from phongrt.camera.pinhole import Camera, setup_camera
from phongrt.core.integrator import (
    DEFAULT_MAX_DEPTH,
    PixelSink,
    get_image_dimensions,
    get_image_numpy,
    get_trace_count,
    render_image,
    render_pixel,
    reset_trace_count,
    setup_render_target,
    write_to_sink,
)
from phongrt.preview.display import ToneMapMethod
from phongrt.preview.export import save_image
from phongrt.preview.image import Image

if TYPE_CHECKING:
    from phongrt.scene.manager import SceneManager

logger = logging.getLogger(__name__)


class Renderer:
    """A renderer bound to one output resolution and bounce depth.

    The renderer owns the configuration and delegates to the global
    integrator buffers (which are Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Number of mirror bounces after the primary hit.
    """

    def __init__(self, width: int, height: int, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            max_depth: Number of mirror bounces after the primary hit.

        Raises:
            ValueError: If dimensions are invalid.
        """
        self._width = width
        self._height = height
        self._max_depth = max_depth
        self._render_time = 0.0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def max_depth(self) -> int:
        """Get the number of mirror bounces."""
        return self._max_depth

    @property
    def trace_count(self) -> int:
        """Number of scene traces performed by the last render or render_pixel call."""
        return get_trace_count()

    @property
    def render_time(self) -> float:
        """Wall-clock seconds spent in the last render."""
        return self._render_time

    def _prepare(self, scene: "SceneManager", camera: Camera) -> None:
        setup_camera(camera)
        scene.sync()
        reset_trace_count()

    def render(self, scene: "SceneManager", camera: Camera) -> None:
        """Render the scene through the camera into the render target.

        Args:
            scene: The scene to render.
            camera: The camera configuration.
        """
        setup_render_target(self._width, self._height)
        self._prepare(scene, camera)

        start = time.time()
        render_image(self._max_depth)
        self._render_time = time.time() - start

        logger.info(
            "Rendered %dx%d in %.2fs (%d scene traces)",
            self._width,
            self._height,
            self._render_time,
            self.trace_count,
        )

    def render_pixel(
        self, scene: "SceneManager", camera: Camera, x: int, y: int
    ) -> tuple[float, float, float]:
        """Render a single pixel without touching the render target.

        The last full render stays available through get_image_numpy(),
        to_image() and save_image(). The trace counter is reset and then
        counts this pixel only.

        Args:
            scene: The scene to render.
            camera: The camera configuration.
            x: Pixel x-coordinate (0 = left).
            y: Pixel y-coordinate (0 = bottom).

        Returns:
            Tuple of (R, G, B) radiance values.
        """
        # Another renderer may have resized the shared target since the last render
        if get_image_dimensions() != (self._width, self._height):
            setup_render_target(self._width, self._height)
        self._prepare(scene, camera)
        return render_pixel(x, y, self._max_depth)

    def write_to(self, sink: PixelSink) -> None:
        """Write the last render to a pixel sink, row by row from the bottom."""
        write_to_sink(sink)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the last render as a (height, width, 3) linear radiance array.

        Row 0 is the top of the picture.
        """
        return get_image_numpy()

    def to_image(self) -> Image:
        """Get the last render as an Image in pixel coordinates (y = 0 at the bottom)."""
        image = Image(self._width, self._height)
        self.write_to(image)
        return image

    def save_image(
        self,
        filepath: str,
        *,
        tone_map: ToneMapMethod = "scale",
        gamma: float = 1.0,
        exposure: float = 1.0,
    ) -> None:
        """Save the last render to a file.

        Args:
            filepath: Output path. The extension selects the format
                (.png, .ppm, .pgm or .pbm).
            tone_map: Tone mapping method. The default "scale" stretches the
                radiance range of the whole image to [0, 1].
            gamma: Gamma correction value. Default 1.0 (linear).
            exposure: Exposure value for exposure tone mapping.
        """
        save_image(
            self.get_image_numpy(),
            filepath,
            tone_map=tone_map,
            gamma=gamma,
            exposure=exposure,
        )

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"Renderer(width={self.width}, height={self.height}, max_depth={self.max_depth})"
