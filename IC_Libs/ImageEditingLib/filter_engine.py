"""
Color Filter Operations.

Filters come in two families that run at different pipeline stages:

- Pixel-level filters (grayscale, sepia, invert, brightness, contrast)
  rewrite the RGBA buffer after compositing. Their result is part of the
  rendered frame, so crops and exports include it.
- Display-level filters (blur, hue-rotate, saturate) are applied to a
  display copy of the frame only. The rendered buffer never carries them.

Alpha is never modified by either family.

Example:
    >>> buffer = PixelBuffer.from_image(Image.open("photo.png"))
    >>> sepia = apply_pixel_filter(buffer, FilterKind.SEPIA)
    >>> on_screen = apply_display_filter(sepia, FilterKind.BLUR)
"""

from enum import Enum
from typing import Callable, Dict
import math

import numpy as np

from IC_Libs.ImageEditingLib.image_models import PixelBuffer
from IC_Libs.constants import (
    BRIGHTNESS_FACTOR,
    CONTRAST_FACTOR,
    DISPLAY_BLUR_RADIUS,
    DISPLAY_HUE_ROTATION_DEGREES,
    DISPLAY_SATURATION,
)
from IC_Libs.pillow_compat import Image, ImageEnhance, ImageFilter


class FilterKind(Enum):
    NONE = "none"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    INVERT = "invert"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    BLUR = "blur"
    HUE_ROTATE = "hue-rotate"
    SATURATE = "saturate"

    @property
    def is_pixel_level(self) -> bool:
        return self in PIXEL_FILTERS

    @property
    def is_display_level(self) -> bool:
        return self in DISPLAY_FILTERS

    @classmethod
    def parse(cls, value: "str | FilterKind") -> "FilterKind":
        """Accept a FilterKind or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown filter: {value}. Valid filters: {valid}") from None


PIXEL_FILTERS = frozenset({
    FilterKind.GRAYSCALE,
    FilterKind.SEPIA,
    FilterKind.INVERT,
    FilterKind.BRIGHTNESS,
    FilterKind.CONTRAST,
})

DISPLAY_FILTERS = frozenset({
    FilterKind.BLUR,
    FilterKind.HUE_ROTATE,
    FilterKind.SATURATE,
})

SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])


# ============================================================================
# Pixel-level filters
# ============================================================================

def _store(rgb: np.ndarray) -> np.ndarray:
    # Clamp, then truncate toward zero when converting back to bytes
    return np.clip(rgb, 0, 255).astype(np.uint8)


def grayscale(rgb: np.ndarray) -> np.ndarray:
    avg = rgb.astype(np.float64).sum(axis=-1, keepdims=True) / 3
    return _store(np.repeat(avg, 3, axis=-1))


def sepia(rgb: np.ndarray) -> np.ndarray:
    return _store(rgb.astype(np.float64) @ SEPIA_MATRIX.T)


def invert(rgb: np.ndarray) -> np.ndarray:
    return 255 - rgb


def brightness(rgb: np.ndarray, factor: float = BRIGHTNESS_FACTOR) -> np.ndarray:
    return _store(rgb.astype(np.float64) * factor)


def contrast(rgb: np.ndarray, factor: float = CONTRAST_FACTOR) -> np.ndarray:
    factor1 = (259 * (factor + 255)) / (255 * (259 - factor))
    return _store(factor1 * (rgb.astype(np.float64) - 128) + 128)


PIXEL_FILTER_FUNCTIONS: Dict[FilterKind, Callable[[np.ndarray], np.ndarray]] = {
    FilterKind.GRAYSCALE: grayscale,
    FilterKind.SEPIA: sepia,
    FilterKind.INVERT: invert,
    FilterKind.BRIGHTNESS: brightness,
    FilterKind.CONTRAST: contrast,
}


def apply_pixel_filter(buffer: PixelBuffer, kind: FilterKind) -> PixelBuffer:
    """
    Apply a pixel-level filter to every pixel of a buffer.

    Args:
        buffer: Source PixelBuffer (left untouched)
        kind: Filter to apply. NONE and display-level kinds return a copy.

    Returns:
        New PixelBuffer with RGB rewritten and alpha preserved

    Raises:
        TypeError: If buffer is not a PixelBuffer
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    result = buffer.copy()
    function = PIXEL_FILTER_FUNCTIONS.get(kind)
    if function is None:
        return result

    result.pixels[..., :3] = function(buffer.pixels[..., :3])
    return result


# ============================================================================
# Display-level filters
# ============================================================================

def _with_alpha(image: "Image.Image", alpha: "Image.Image") -> "Image.Image":
    result = image.convert("RGBA")
    result.putalpha(alpha)
    return result


def display_blur(image: "Image.Image", radius: float = DISPLAY_BLUR_RADIUS) -> "Image.Image":
    return image.filter(ImageFilter.GaussianBlur(radius=radius))


def hue_rotate_matrix(degrees: float) -> np.ndarray:
    """3x3 RGB matrix of the CSS hue-rotate() filter function."""
    angle = math.radians(degrees)
    c, s = math.cos(angle), math.sin(angle)
    return np.array([
        [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
        [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
        [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
    ])


def display_hue_rotate(
    image: "Image.Image",
    degrees: float = DISPLAY_HUE_ROTATION_DEGREES,
) -> "Image.Image":
    alpha = image.getchannel("A")
    rgb = np.array(image.convert("RGB"), dtype=np.float64)
    rotated = np.clip(np.rint(rgb @ hue_rotate_matrix(degrees).T), 0, 255).astype(np.uint8)
    return _with_alpha(Image.fromarray(rotated), alpha)


def display_saturate(image: "Image.Image", amount: float = DISPLAY_SATURATION) -> "Image.Image":
    alpha = image.getchannel("A")
    saturated = ImageEnhance.Color(image.convert("RGB")).enhance(amount)
    return _with_alpha(saturated, alpha)


DISPLAY_FILTER_FUNCTIONS: Dict[FilterKind, Callable[["Image.Image"], "Image.Image"]] = {
    FilterKind.BLUR: display_blur,
    FilterKind.HUE_ROTATE: display_hue_rotate,
    FilterKind.SATURATE: display_saturate,
}


def apply_display_filter(buffer: PixelBuffer, kind: FilterKind) -> PixelBuffer:
    """
    Produce a display copy of a buffer with a display-level filter applied.

    Pixel-level kinds and NONE return an unmodified copy; they are handled
    by apply_pixel_filter at render time.
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

    function = DISPLAY_FILTER_FUNCTIONS.get(kind)
    if function is None:
        return buffer.copy()

    filtered = function(buffer.to_image())
    result = PixelBuffer.from_image(filtered)
    result.pixels[..., 3] = buffer.pixels[..., 3]
    return result
