"""
Image editing data models for ImageCraft.

This module defines the raster container passed between every stage of
the editing core.

Classes:
    PixelBuffer: RGBA8 pixel data plus dimensions, row-major

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from IC_Libs.pillow_compat import Image

RgbaColor = Tuple[int, int, int, int]

TRANSPARENT: RgbaColor = (0, 0, 0, 0)


@dataclass(eq=False)
class PixelBuffer:
    """Raw RGBA raster data.

    Attributes:
        width: Buffer width in pixels
        height: Buffer height in pixels
        pixels: uint8 array of shape (height, width, 4), row-major
    """
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        assert self.width >= 0 and self.height >= 0, "buffer dimensions must be non-negative"
        assert self.pixels.dtype == np.uint8, f"pixels must be uint8, got {self.pixels.dtype}"
        assert self.pixels.shape == (self.height, self.width, 4), (
            f"pixels shape {self.pixels.shape} does not match {self.width}x{self.height} RGBA"
        )

    @classmethod
    def blank(cls, width: int, height: int, color: RgbaColor = TRANSPARENT) -> "PixelBuffer":
        """Create a buffer filled with a single color."""
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = color
        return cls(width, height, pixels)

    @classmethod
    def from_pixels(cls, width: int, height: int, pixels: Iterable[RgbaColor]) -> "PixelBuffer":
        """Create a buffer from an ordered, row-major sequence of RGBA tuples."""
        data = np.array(list(pixels), dtype=np.uint8)
        assert data.size == width * height * 4, (
            f"expected {width * height} pixels, got {data.size // 4}"
        )
        return cls(width, height, data.reshape((height, width, 4)))

    @classmethod
    def from_image(cls, image: "Image.Image") -> "PixelBuffer":
        """Create a buffer from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(rgba.width, rgba.height, np.array(rgba, dtype=np.uint8))

    def to_image(self) -> "Image.Image":
        """Return an RGBA PIL Image holding a copy of the pixels."""
        return Image.fromarray(self.pixels.copy())

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def get_pixel(self, x: int, y: int) -> RgbaColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def pixel_list(self) -> List[RgbaColor]:
        """Return all pixels as a row-major list of RGBA tuples."""
        return [tuple(int(c) for c in px) for px in self.pixels.reshape(-1, 4)]

    def extract(self, left: int, top: int, right: int, bottom: int) -> "PixelBuffer":
        """
        Copy the rectangle [left, right) x [top, bottom) into a new buffer.

        Areas of the rectangle that fall outside this buffer are transparent.

        Raises:
            ValueError: If the rectangle is empty or inverted
        """
        width = right - left
        height = bottom - top
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid extraction rectangle: ({left}, {top}) to ({right}, {bottom})")

        result = PixelBuffer.blank(width, height)

        src_left = max(0, left)
        src_top = max(0, top)
        src_right = min(self.width, right)
        src_bottom = min(self.height, bottom)

        if src_right > src_left and src_bottom > src_top:
            dst_x = src_left - left
            dst_y = src_top - top
            result.pixels[
                dst_y:dst_y + (src_bottom - src_top),
                dst_x:dst_x + (src_right - src_left),
            ] = self.pixels[src_top:src_bottom, src_left:src_right]

        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"
