"""
Render Pipeline.

Composes a source PixelBuffer, a TransformState and an optional crop
region into one output PixelBuffer. Rendering is deterministic: the same
request always yields the same pixels, and the source buffer is never
modified.

Stages, in order:
    1. Canvas sized to the source buffer
    2. Affine transform about the canvas center (translate, rotate, scale/flip)
    3. Optional circular clip, applied in image space so it turns with the image
    4. Composite the transformed image onto the transparent canvas
    5. Optional border stroke (circle or rectangle), always upright
    6. Optional crop overlay (shade, outline, handles, dashed guides)
    7. Pixel-level filter over the full canvas

Display-level filters are not part of render(); see display_frame().

Example:
    >>> state = TransformState()
    >>> state.rotate(90)
    >>> state.set_border_width(4)
    >>> frame = render(buffer, state)
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import math

import numpy as np

from IC_Libs.ImageEditingLib.crop_engine import CropRegion
from IC_Libs.ImageEditingLib.editing_errors import GradientParseError
from IC_Libs.ImageEditingLib.filter_engine import apply_display_filter, apply_pixel_filter
from IC_Libs.ImageEditingLib.gradient_resolver import PaintRule, SolidPaint, parse_color, resolve_paint
from IC_Libs.ImageEditingLib.image_models import PixelBuffer
from IC_Libs.ImageEditingLib.transform_state import TransformState
from IC_Libs.constants import (
    DEFAULT_BORDER_COLOR,
    GUIDE_DASH_LENGTH,
    GUIDE_GAP_LENGTH,
    HANDLE_DRAW_SIZE,
    OVERLAY_COLOR,
    OVERLAY_SHADE_ALPHA,
    OVERLAY_STROKE_WIDTH,
)
from IC_Libs.pillow_compat import Image, ImageChops, ImageDraw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderRequest:
    """Everything one render needs; nothing else is consulted."""
    source: PixelBuffer
    state: TransformState
    crop: Optional[CropRegion] = None


# ============================================================================
# Geometry
# ============================================================================

def transform_matrix(state: TransformState, width: int, height: int) -> np.ndarray:
    """
    Forward 3x3 matrix mapping source coordinates to canvas coordinates.

    Equivalent to: translate to center + translation, rotate, scale (negated
    on flipped axes), translate back by the center.
    """
    cx, cy = width / 2, height / 2
    tx, ty = state.translation
    angle = math.radians(state.rotation_degrees)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    sx = -state.scale if state.flip_horizontal else state.scale
    sy = -state.scale if state.flip_vertical else state.scale

    to_center = np.array([[1, 0, cx + tx], [0, 1, cy + ty], [0, 0, 1]], dtype=np.float64)
    rotate = np.array([[cos_a, -sin_a, 0], [sin_a, cos_a, 0], [0, 0, 1]], dtype=np.float64)
    scale = np.array([[sx, 0, 0], [0, sy, 0], [0, 0, 1]], dtype=np.float64)
    from_center = np.array([[1, 0, -cx], [0, 1, -cy], [0, 0, 1]], dtype=np.float64)
    return to_center @ rotate @ scale @ from_center


def _affine_data(matrix: np.ndarray) -> Tuple[float, ...]:
    # PIL's AFFINE transform wants the output -> input mapping
    inverse = np.linalg.inv(matrix)
    return tuple(float(v) for v in inverse[:2].flatten())


def _circle_bbox(cx: float, cy: float, radius: float) -> Tuple[float, float, float, float]:
    return cx - radius, cy - radius, cx + radius, cy + radius


# ============================================================================
# Stages
# ============================================================================

def apply_circular_mask(image: "Image.Image", border_width: int) -> "Image.Image":
    """Clip an RGBA image to a centered circle of radius min(w, h)/2 - border_width."""
    width, height = image.size
    radius = min(width, height) / 2 - border_width
    mask = Image.new("L", image.size, 0)
    if radius > 0:
        ImageDraw.Draw(mask).ellipse(_circle_bbox(width / 2, height / 2, radius), fill=255)
    clipped = image.copy()
    clipped.putalpha(ImageChops.multiply(image.getchannel("A"), mask))
    return clipped


def transform_image(image: "Image.Image", state: TransformState) -> "Image.Image":
    """Apply rotation, scale, flips and translation about the image center."""
    if state.is_identity_transform:
        return image.copy()
    matrix = transform_matrix(state, image.width, image.height)
    return image.transform(
        image.size,
        Image.Transform.AFFINE,
        data=_affine_data(matrix),
        resample=Image.Resampling.BILINEAR,
        fillcolor=(0, 0, 0, 0),
    )


def border_paint(state: TransformState, width: int, height: int) -> PaintRule:
    """Resolve the border paint, degrading to the solid color, then the default color."""
    border = state.border
    try:
        return resolve_paint(border.color, border.gradient, width, height)
    except GradientParseError as exc:
        logger.debug(f"Border color unresolvable, using default: {exc}")
        return SolidPaint(parse_color(DEFAULT_BORDER_COLOR))


def stroke_border(canvas: "Image.Image", state: TransformState) -> "Image.Image":
    """
    Stroke the border in untransformed space so it always reads upright.

    The stroke covers the outer border.width_px pixels of a circle of radius
    min(w, h)/2 (circular mask) or of the canvas rectangle, both offset by
    the translation.
    """
    border_width = state.border.width_px
    if border_width <= 0:
        return canvas

    width, height = canvas.size
    tx, ty = state.translation

    mask = Image.new("L", canvas.size, 0)
    draw = ImageDraw.Draw(mask)
    if state.mask_circular:
        radius = min(width, height) / 2
        bbox = _circle_bbox(width / 2 + tx, height / 2 + ty, radius)
        draw.ellipse(bbox, outline=255, width=border_width)
    else:
        draw.rectangle((tx, ty, tx + width - 1, ty + height - 1), outline=255, width=border_width)

    paint = np.array(border_paint(state, width, height).render(width, height), dtype=np.uint16)
    coverage = np.array(mask, dtype=np.uint16)
    paint[..., 3] = paint[..., 3] * coverage // 255

    result = canvas.copy()
    result.alpha_composite(Image.fromarray(paint.astype(np.uint8)))
    return result


def _draw_dashed_line(
    draw: "ImageDraw.ImageDraw",
    start: Tuple[float, float],
    end: Tuple[float, float],
    dash: int = GUIDE_DASH_LENGTH,
    gap: int = GUIDE_GAP_LENGTH,
) -> None:
    length = math.hypot(end[0] - start[0], end[1] - start[1])
    if length == 0:
        return
    ux = (end[0] - start[0]) / length
    uy = (end[1] - start[1]) / length
    position = 0.0
    while position < length:
        stop = min(position + dash, length)
        draw.line(
            (start[0] + ux * position, start[1] + uy * position,
             start[0] + ux * stop, start[1] + uy * stop),
            fill=OVERLAY_COLOR,
            width=1,
        )
        position += dash + gap


def draw_crop_overlay(canvas: "Image.Image", crop: CropRegion) -> "Image.Image":
    """
    Draw the crop overlay on a copy of the canvas.

    The canvas is shaded at 50% outside the crop rectangle, the rectangle is
    outlined in white, square handles mark its corners and dashed lines
    bisect it.
    """
    left, top, right, bottom = crop.pixel_bounds()

    shade = Image.new("RGBA", canvas.size, (0, 0, 0, OVERLAY_SHADE_ALPHA))
    if right > left and bottom > top:
        ImageDraw.Draw(shade).rectangle((left, top, right - 1, bottom - 1), fill=(0, 0, 0, 0))

    result = canvas.copy()
    result.alpha_composite(shade)

    draw = ImageDraw.Draw(result)
    half = OVERLAY_STROKE_WIDTH // 2
    draw.rectangle(
        (left - half, top - half, right - 1 + half, bottom - 1 + half),
        outline=OVERLAY_COLOR,
        width=OVERLAY_STROKE_WIDTH,
    )

    handle_half = HANDLE_DRAW_SIZE / 2
    for point in crop.corner_points().values():
        draw.rectangle(
            (point.x - handle_half, point.y - handle_half,
             point.x + handle_half - 1, point.y + handle_half - 1),
            fill=OVERLAY_COLOR,
        )

    rect = crop.normalized()
    center_x = rect.x + rect.width / 2
    center_y = rect.y + rect.height / 2
    _draw_dashed_line(draw, (center_x, rect.y), (center_x, rect.bottom))
    _draw_dashed_line(draw, (rect.x, center_y), (rect.right, center_y))
    return result


# ============================================================================
# Pipeline
# ============================================================================

def render_request(request: RenderRequest) -> PixelBuffer:
    """Run every pipeline stage for one request and return the output buffer."""
    source = request.source
    state = request.state

    canvas = Image.new("RGBA", source.size, (0, 0, 0, 0))
    if source.width == 0 or source.height == 0:
        return PixelBuffer.from_image(canvas)

    image = source.to_image()
    if state.mask_circular:
        image = apply_circular_mask(image, state.border.width_px)

    canvas.alpha_composite(transform_image(image, state))
    canvas = stroke_border(canvas, state)

    if request.crop is not None:
        canvas = draw_crop_overlay(canvas, request.crop)

    output = PixelBuffer.from_image(canvas)
    if state.filter.is_pixel_level:
        output = apply_pixel_filter(output, state.filter)
    return output


def render(
    source: PixelBuffer,
    state: TransformState,
    crop: Optional[CropRegion] = None,
) -> PixelBuffer:
    """
    Render a source buffer under a transform state.

    Args:
        source: Working image (not modified)
        state: Edit parameters; a snapshot is taken for this render
        crop: Crop region to overlay, or None when no crop is being shown

    Returns:
        New PixelBuffer the size of source
    """
    if not isinstance(source, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(source)}")
    return render_request(RenderRequest(source=source, state=state.copy(), crop=crop))


def render_geometry(source: PixelBuffer, state: TransformState) -> PixelBuffer:
    """
    Apply only rotation, scale, flips and translation to a source buffer.

    Areas the transformed image does not cover are transparent. The mask,
    border, overlay and filters are left out, so the result is what a crop
    drawn over the rendered canvas should cut from.
    """
    if not isinstance(source, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(source)}")
    if source.width == 0 or source.height == 0:
        return source.copy()
    return PixelBuffer.from_image(transform_image(source.to_image(), state))


def display_frame(rendered: PixelBuffer, state: TransformState) -> PixelBuffer:
    """Apply the display-level filter stage to a rendered frame for on-screen use."""
    if state.filter.is_display_level:
        return apply_display_filter(rendered, state.filter)
    return rendered
