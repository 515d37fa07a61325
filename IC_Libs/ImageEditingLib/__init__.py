"""
ImageEditingLib - Core image editing functionality

This module provides the transform and crop engine for ImageCraft:
pixel buffers, color filters, border gradients, the crop state machine
and the render pipeline.
"""

from IC_Libs.ImageEditingLib.image_models import PixelBuffer, RgbaColor
from IC_Libs.ImageEditingLib.editing_errors import (
    CropConstraintError,
    CropTooSmallError,
    GradientParseError,
    ImageLoadError,
)
from IC_Libs.ImageEditingLib.filter_engine import (
    FilterKind,
    apply_display_filter,
    apply_pixel_filter,
)
from IC_Libs.ImageEditingLib.gradient_resolver import (
    GradientSpec,
    LinearGradientPaint,
    SolidPaint,
    parse_gradient,
    resolve_gradient,
)
from IC_Libs.ImageEditingLib.transform_state import BorderSpec, TransformState
from IC_Libs.ImageEditingLib.crop_engine import (
    Corner,
    CropRect,
    CropRegion,
    CropSession,
    Drawing,
    Idle,
    Moving,
    Resizing,
)
from IC_Libs.ImageEditingLib.render_pipeline import RenderRequest, display_frame, render
from IC_Libs.ImageEditingLib.image_editing_ops import (
    encode_png,
    load_image,
    load_image_file,
    save_export,
)

__all__ = [
    "PixelBuffer",
    "RgbaColor",
    "CropConstraintError",
    "CropTooSmallError",
    "GradientParseError",
    "ImageLoadError",
    "FilterKind",
    "apply_display_filter",
    "apply_pixel_filter",
    "GradientSpec",
    "LinearGradientPaint",
    "SolidPaint",
    "parse_gradient",
    "resolve_gradient",
    "BorderSpec",
    "TransformState",
    "Corner",
    "CropRect",
    "CropRegion",
    "CropSession",
    "Drawing",
    "Idle",
    "Moving",
    "Resizing",
    "RenderRequest",
    "display_frame",
    "render",
    "encode_png",
    "load_image",
    "load_image_file",
    "save_export",
]
