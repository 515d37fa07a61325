"""
Exception types raised by the ImageCraft editing core.

All of them subclass ValueError so callers that already guard editing
calls with ``except ValueError`` keep working.
"""


class ImageLoadError(ValueError):
    """Raised when uploaded bytes or a file cannot be decoded as an image."""


class CropConstraintError(ValueError):
    """Raised when a crop request violates a geometric constraint."""


class CropTooSmallError(CropConstraintError):
    """Raised when a crop rectangle is below the minimum committable size."""

    def __init__(self, width: float, height: float, minimum: int):
        super().__init__(
            f"Crop area {width:.1f}x{height:.1f} is smaller than the "
            f"{minimum}x{minimum} minimum"
        )
        self.width = width
        self.height = height
        self.minimum = minimum


class GradientParseError(ValueError):
    """Raised when a gradient descriptor holds a color that cannot be resolved."""
