"""Preview module for image output.

This module turns the tracer's linear radiance into files:

Components:
    image: Raster Image used as the render's pixel sink, with the
        scale / flip / quantize / PNM pipeline
    display: Tone mapping, gamma correction and the Matplotlib preview
    export: PNG and plain-text PNM export

Example:
    >>> from phongrt.preview import save_image
    >>> from phongrt.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render(scene, camera)
    >>> save_image(renderer.get_image_numpy(), "output.png", tone_map="scale")
"""

from phongrt.preview.display import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    scale_to_range,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from phongrt.preview.export import (
    image_to_uint8,
    save_image,
    save_png_from_array,
    save_pnm_from_array,
    to_grayscale,
)
from phongrt.preview.image import Image

__all__ = [
    # Pixel sink
    "Image",
    # Tone mapping
    "scale_to_range",
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "show_preview",
    "ToneMapMethod",
    # Export functions
    "save_image",
    "save_png_from_array",
    "save_pnm_from_array",
    "image_to_uint8",
    "to_grayscale",
]
