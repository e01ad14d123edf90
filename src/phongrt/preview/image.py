"""Raster image buffer used as the render's pixel sink.

An Image stores one sample per pixel in a NumPy array and exposes
``set(x, y, value)``, which is all the renderer needs from its output. It
also carries the post-processing steps of the classic pipeline:

    scale to [0, 255] -> flip rows -> quantize to 8 bits -> write PNM

Pixels are addressed as (x, y). The renderer writes y = 0 for the bottom row
of the picture, while PNM files store the top row first; call flip_y()
before writing a rendered image.

Example:
    >>> from phongrt.preview.image import Image
    >>> image = Image(256, 256, channels=1)
    >>> image.checkerboard(32, 0.0, 255.0)
    >>> image.to_uint8().write_pnm("checker.pgm")
"""

from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from phongrt.preview.display import scale_to_range


class Image:
    """A width x height raster with 1 (gray) or 3 (RGB) channels.

    Attributes:
        pixels: The sample array, shape (height, width) for one channel or
            (height, width, 3) for three, indexed [y, x].
    """

    def __init__(self, width: int, height: int, channels: int = 3, dtype: Any = np.float32) -> None:
        """Allocate a zero-filled image.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            channels: 1 for grayscale, 3 for RGB.
            dtype: NumPy dtype of the samples.

        Raises:
            ValueError: If the dimensions are not positive or channels is
                not 1 or 3.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        if channels not in (1, 3):
            raise ValueError(f"Images have 1 or 3 channels, got {channels}")

        shape = (height, width) if channels == 1 else (height, width, channels)
        self.pixels = np.zeros(shape, dtype=dtype)

    @classmethod
    def from_array(cls, array: npt.NDArray[Any]) -> "Image":
        """Wrap a (height, width) or (height, width, 3) array (copied)."""
        data = np.asarray(array)
        if data.ndim == 2:
            channels = 1
        elif data.ndim == 3 and data.shape[2] == 3:
            channels = 3
        else:
            raise ValueError(f"Expected a (H, W) or (H, W, 3) array, got shape {data.shape}")

        image = cls(data.shape[1], data.shape[0], channels=channels, dtype=data.dtype)
        image.pixels[...] = data
        return image

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    def get(self, x: int, y: int) -> Any:
        """Get the sample at (x, y)."""
        value = self.pixels[y, x]
        return value.copy() if self.pixels.ndim == 3 else value

    def set(self, x: int, y: int, value: Any) -> None:
        """Set the sample at (x, y)."""
        self.pixels[y, x] = value

    def flip_y(self) -> "Image":
        """Reverse the row order in place."""
        self.pixels = np.ascontiguousarray(self.pixels[::-1])
        return self

    def checkerboard(self, size: int, low: Any, high: Any) -> "Image":
        """Fill with a checkerboard of size x size squares, ``low`` at (0, 0)."""
        ys, xs = np.indices((self.height, self.width))
        even = ((xs // size + ys // size) % 2) == 0
        self.pixels[even] = low
        self.pixels[~even] = high
        return self

    def scale(self, low: float, high: float) -> "Image":
        """Stretch the sample range onto [low, high] in place.

        See phongrt.preview.display.scale_to_range for the exact mapping.
        """
        self.pixels = scale_to_range(self.pixels, low, high)
        return self

    def to_uint8(self) -> "Image":
        """Quantize to 8 bits, truncating and saturating to [0, 255]."""
        data = np.nan_to_num(self.pixels.astype(np.float64), nan=0.0)
        quantized = np.clip(data, 0.0, 255.0).astype(np.uint8)
        return Image.from_array(quantized)

    def write_pnm(self, filepath: str | Path) -> None:
        """Write the image as plain-text PNM.

        Grayscale images are written as P2 with one text row per image row,
        RGB images as P3 with one pixel per line. Rows are written from
        y = 0 upward.

        Args:
            filepath: Output path.

        Raises:
            ValueError: If the image is not 8-bit.
        """
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"PNM export requires uint8 samples, got {self.pixels.dtype}")

        with open(filepath, "w") as f:
            if self.channels == 1:
                f.write("P2\n")
                f.write(f"{self.width} {self.height}\n")
                f.write("255\n")
                for row in self.pixels:
                    f.write("".join(f"{value} " for value in row))
                    f.write("\n")
            else:
                f.write("P3\n")
                f.write(f"{self.width} {self.height}\n")
                f.write("255\n")
                for row in self.pixels:
                    for r, g, b in row:
                        f.write(f"{r} {g} {b}\n")

    def save_png(self, filepath: str | Path) -> None:
        """Save an 8-bit image as PNG using Pillow.

        Raises:
            ValueError: If the image is not 8-bit.
        """
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"PNG export requires uint8 samples, got {self.pixels.dtype}")

        mode = "L" if self.channels == 1 else "RGB"
        PILImage.fromarray(self.pixels, mode=mode).save(filepath)

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height}, channels={self.channels})"
