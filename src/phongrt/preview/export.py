"""Image export utilities for rendered images.

This module provides functions for saving rendered images to files
with support for tone mapping and gamma correction.

Supported formats:
    - PNG (8-bit via Pillow)
    - PPM (plain-text P3, RGB)
    - PGM/PBM (plain-text P2, grayscale)

Example:
    >>> from phongrt.preview.export import save_image
    >>> from phongrt.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render(scene, camera)
    >>> save_image(renderer.get_image_numpy(), "output.ppm", tone_map="scale")
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from phongrt.preview.display import ToneMapMethod, process_image_for_display
from phongrt.preview.image import Image

# Rec. 709 luma weights for grayscale output
LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float32)

PNG_EXTENSIONS = (".png",)
RGB_PNM_EXTENSIONS = (".ppm",)
GRAY_PNM_EXTENSIONS = (".pgm", ".pbm")


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "scale",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to uint8 for display/export.

    Applies tone mapping and gamma correction, then truncates to 8 bits.

    Args:
        image: Linear radiance array of shape (H, W, 3) or (H, W).
        tone_map: Tone mapping method ("none", "scale", "reinhard" or "exposure").
        gamma: Gamma correction value (default 1.0, linear).
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        8-bit image array with the same shape as the input.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    return (processed * 255).astype(np.uint8)


def to_grayscale(image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Collapse an (H, W, 3) image to (H, W) luminance. (H, W) input passes through."""
    data = np.asarray(image, dtype=np.float32)
    if data.ndim == 2:
        return data
    return (data @ LUMINANCE_WEIGHTS).astype(np.float32)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "scale",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a NumPy array as a PNG file.

    Args:
        image: Linear radiance array of shape (H, W, 3) with row 0 at the top.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method.
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.
    """
    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)

    mode = "L" if image_uint8.ndim == 2 else "RGB"
    pil_image = PILImage.fromarray(image_uint8, mode=mode)
    pil_image.save(filepath)


def save_pnm_from_array(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    grayscale: bool = False,
    tone_map: ToneMapMethod = "scale",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a NumPy array as a plain-text PNM file.

    Args:
        image: Linear radiance array of shape (H, W, 3) with row 0 at the top.
        filepath: Output file path.
        grayscale: Write a P2 luminance image instead of a P3 color image.
        tone_map: Tone mapping method.
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.
    """
    if grayscale:
        image = to_grayscale(image)

    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    Image.from_array(image_uint8).write_pnm(filepath)


def save_image(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "scale",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a rendered image, choosing the format from the file extension.

    Args:
        image: Linear radiance array of shape (H, W, 3) with row 0 at the top.
        filepath: Output path ending in .png, .ppm, .pgm or .pbm.
        tone_map: Tone mapping method.
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.

    Raises:
        ValueError: If the extension is not supported.
    """
    suffix = Path(filepath).suffix.lower()

    if suffix in PNG_EXTENSIONS:
        save_png_from_array(image, filepath, tone_map=tone_map, gamma=gamma, exposure=exposure)
    elif suffix in RGB_PNM_EXTENSIONS:
        save_pnm_from_array(image, filepath, tone_map=tone_map, gamma=gamma, exposure=exposure)
    elif suffix in GRAY_PNM_EXTENSIONS:
        save_pnm_from_array(
            image, filepath, grayscale=True, tone_map=tone_map, gamma=gamma, exposure=exposure
        )
    else:
        raise ValueError(
            f"Unsupported image format '{suffix}'. Use .png, .ppm, .pgm or .pbm"
        )
