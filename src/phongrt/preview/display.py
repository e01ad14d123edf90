"""Tone mapping for rendered radiance images.

The tracer produces unbounded linear radiance. This module converts it into
the displayable [0, 1] range before quantization and export.

Methods:
    - scale: stretch the image's own value range onto [0, 1] (the default;
      the demo scenes use very dim lights and rely on it)
    - reinhard: L / (1 + L)
    - exposure: 1 - exp(-L * exposure)
    - none: clamp only

show_preview() opens the processed image in a Matplotlib window.

Example:
    >>> from phongrt.preview.display import process_image_for_display
    >>> display = process_image_for_display(radiance, tone_map="scale", gamma=1.0)
"""

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from phongrt.core.renderer import Renderer

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "scale", "reinhard", "exposure"]


def scale_to_range(
    image: npt.NDArray[np.floating],
    low: float = 0.0,
    high: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Linearly map an image's value range onto [low, high].

    For multi-channel images of shape (H, W, C), each channel's minimum is
    subtracted and all channels share one scale factor, taken from the
    widest channel range, so the color balance is preserved. Single-channel
    images of shape (H, W) are mapped min -> low and max -> high.

    Args:
        image: Input image.
        low: Target value for the minimum.
        high: Target value for the maximum of the widest channel.

    Returns:
        The rescaled image. A constant image maps to ``low`` everywhere.
    """
    data = np.asarray(image, dtype=np.float64)

    if data.ndim == 3:
        min_value = data.reshape(-1, data.shape[-1]).min(axis=0)
        max_value = data.reshape(-1, data.shape[-1]).max(axis=0)
        value_range = float(np.max(max_value - min_value))
    else:
        min_value = data.min()
        value_range = float(data.max() - min_value)

    if value_range <= 0.0:
        return np.full(data.shape, low, dtype=np.float32)

    result = low + (data - min_value) * ((high - low) / value_range)
    return result.astype(np.float32)


def tone_map_reinhard(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Args:
        image: Linear HDR image array.

    Returns:
        Tone mapped image in [0, 1) range.
    """
    image = np.maximum(image, 0.0)
    result = image / (1.0 + image)
    return result.astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.float32],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure-based tone mapping: 1 - exp(-c * exposure).

    Args:
        image: Linear HDR image array.
        exposure: Exposure value (default 1.0). Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1) range.
    """
    image = np.maximum(image, 0.0)
    result = 1.0 - np.exp(-image * exposure)
    return result.astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array in [0, 1] range.
        gamma: Gamma value (default 2.2 for sRGB).

    Returns:
        Gamma corrected image.
    """
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    result = np.power(image, 1.0 / gamma)
    return result.astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "scale",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Process an image for display with tone mapping and gamma correction.

    Applies the full display pipeline:
    1. Tone mapping
    2. Gamma correction
    3. Clamping to [0, 1]

    Args:
        image: Linear radiance image array.
        tone_map: Tone mapping method ("none", "scale", "reinhard" or "exposure").
        gamma: Gamma correction value (default 1.0, linear).
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        Processed image ready for display, in [0, 1] range.

    Raises:
        ValueError: If the tone mapping method is unknown.
    """
    result = np.array(image, dtype=np.float32)

    if tone_map == "scale":
        result = scale_to_range(result, 0.0, 1.0)
    elif tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = apply_gamma(result, gamma)

    result = np.clip(result, 0.0, 1.0)

    return result.astype(np.float32)


def show_preview(
    renderer: "Renderer",
    *,
    tone_map: ToneMapMethod = "scale",
    gamma: float = 1.0,
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the last render as a Matplotlib figure.

    Args:
        renderer: The Renderer holding the image to display.
        tone_map: Tone mapping method ("none", "scale", "reinhard" or "exposure").
        gamma: Gamma correction value (default 1.0, linear).
        exposure: Exposure value for exposure tone mapping (default 1.0).
        title: Custom title (default shows resolution and bounce depth).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.

    Example:
        >>> renderer = Renderer(512, 512)
        >>> renderer.render(scene, camera)
        >>> show_preview(renderer)
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        renderer.get_image_numpy(),
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title_text = (
            f"Render Preview - {renderer.width}x{renderer.height}, depth {renderer.max_depth}"
        )
        if tone_map != "none":
            title_text += f" ({tone_map})"
    else:
        title_text = title

    ax.set_title(title_text)

    plt.tight_layout()
    plt.show(block=block)
