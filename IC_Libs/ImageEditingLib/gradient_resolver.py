"""
Gradient Resolution for Border Paint.

Border paint is either a solid color or a linear gradient. Gradient
descriptors arrive from the host as CSS-style strings and are parsed once,
at the boundary, into a GradientSpec. The renderer only ever works with
GradientSpec and the PaintRule objects resolved from it.

Recovery policy:
    - A descriptor that does not have the linear-gradient structure, or a
      spec with fewer than two stops, resolves to FALLBACK_GRADIENT (a fixed
      two-stop horizontal gradient), never to the caller's colors.
    - A color that cannot be resolved raises GradientParseError; the
      renderer catches it and strokes with the solid border color.

Example:
    >>> spec = parse_gradient("linear-gradient(to right, #000000, #ffffff)")
    >>> paint = resolve_gradient(spec, 100, 100)
    >>> paint.color_at(0, 0), paint.color_at(100, 0)
    ((0, 0, 0, 255), (255, 255, 255, 255))
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
import logging
import math
import re

import numpy as np

from IC_Libs.ImageEditingLib.editing_errors import GradientParseError
from IC_Libs.ImageEditingLib.image_models import RgbaColor
from IC_Libs.constants import FALLBACK_GRADIENT_COLORS, FALLBACK_GRADIENT_DIRECTION
from IC_Libs.pillow_compat import ImageColor

logger = logging.getLogger(__name__)

Direction = Union[float, str]

GRADIENT_PATTERN = re.compile(r"^\s*linear-gradient\s*\((.*)\)\s*$", re.IGNORECASE | re.DOTALL)
ANGLE_PATTERN = re.compile(r"^(-?\d+(?:\.\d+)?)deg$", re.IGNORECASE)
EDGE_PATTERN = re.compile(r"^to\s+(.+)$", re.IGNORECASE)
HSLA_PATTERN = re.compile(
    r"^hsla\(\s*([\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*,\s*([\d.]+)(%?)\s*\)$",
    re.IGNORECASE,
)
STOP_POSITION_PATTERN = re.compile(r"\s+-?\d+(?:\.\d+)?(?:%|px)?$")


@dataclass(frozen=True)
class GradientSpec:
    """Structured linear gradient description.

    Attributes:
        stops: Color strings in order; offsets are implied by position
        direction: Angle in degrees, or an edge keyword such as "right"
    """
    stops: Tuple[str, ...]
    direction: Direction = FALLBACK_GRADIENT_DIRECTION

    def __post_init__(self):
        object.__setattr__(self, "stops", tuple(self.stops))


FALLBACK_GRADIENT = GradientSpec(stops=FALLBACK_GRADIENT_COLORS, direction=FALLBACK_GRADIENT_DIRECTION)


# ============================================================================
# Paint rules
# ============================================================================

@dataclass(frozen=True)
class SolidPaint:
    color: RgbaColor

    def color_at(self, x: float, y: float) -> RgbaColor:
        return self.color

    def render(self, width: int, height: int) -> np.ndarray:
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = self.color
        return pixels


@dataclass(frozen=True)
class LinearGradientPaint:
    """Gradient along the line from start to end with offset-sorted stops."""
    start: Tuple[float, float]
    end: Tuple[float, float]
    stops: Tuple[Tuple[float, RgbaColor], ...]

    def _positions(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            return np.ones_like(xs, dtype=np.float64)
        t = ((xs - self.start[0]) * dx + (ys - self.start[1]) * dy) / length_sq
        return np.clip(t, 0.0, 1.0)

    def _colors(self, t: np.ndarray) -> np.ndarray:
        offsets = np.array([offset for offset, _ in self.stops], dtype=np.float64)
        colors = np.array([color for _, color in self.stops], dtype=np.float64)
        channels = [np.interp(t, offsets, colors[:, channel]) for channel in range(4)]
        return np.stack(channels, axis=-1)

    def color_at(self, x: float, y: float) -> RgbaColor:
        t = self._positions(np.array([x], dtype=np.float64), np.array([y], dtype=np.float64))
        r, g, b, a = np.rint(self._colors(t)[0]).astype(int)
        return int(r), int(g), int(b), int(a)

    def render(self, width: int, height: int) -> np.ndarray:
        """Sample the gradient at every pixel center of a width x height area."""
        ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
        t = self._positions(xs + 0.5, ys + 0.5)
        return np.rint(self._colors(t)).astype(np.uint8)


PaintRule = Union[SolidPaint, LinearGradientPaint]


# ============================================================================
# Color parsing
# ============================================================================

def parse_color(text: str) -> RgbaColor:
    """
    Resolve a CSS color string to RGBA.

    Supports everything PIL's ImageColor understands plus hsla().

    Raises:
        GradientParseError: If the color cannot be resolved
    """
    value = str(text).strip()
    match = HSLA_PATTERN.match(value)
    try:
        if match:
            hue, saturation, lightness, alpha, percent = match.groups()
            r, g, b = ImageColor.getrgb(f"hsl({hue}, {saturation}%, {lightness}%)")[:3]
            alpha_value = float(alpha) / 100 if percent else float(alpha)
            return r, g, b, int(round(max(0.0, min(1.0, alpha_value)) * 255))
        return ImageColor.getcolor(value, "RGBA")
    except ValueError as exc:
        raise GradientParseError(f"Unresolvable color: {text!r}") from exc


# ============================================================================
# Boundary parser
# ============================================================================

def _split_top_level(text: str) -> List[str]:
    parts = []
    depth = 0
    current = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return parts


def _parse_direction(token: str) -> Optional[Direction]:
    angle = ANGLE_PATTERN.match(token)
    if angle:
        return float(angle.group(1))
    edge = EDGE_PATTERN.match(token)
    if edge:
        return edge.group(1).strip().lower()
    return None


def _is_color_stop(part: str) -> bool:
    try:
        parse_color(STOP_POSITION_PATTERN.sub("", part).strip())
    except GradientParseError:
        return False
    return True


def parse_gradient(text: Optional[str]) -> Optional[GradientSpec]:
    """
    Parse a CSS linear-gradient descriptor into a GradientSpec.

    Args:
        text: e.g. "linear-gradient(to right, #9b87f5, #1EAEDB)" or
              "linear-gradient(90deg, hsla(139, 70%, 75%, 1) 0%, ...)"

    Returns:
        None for empty text (solid paint), the parsed spec, or
        FALLBACK_GRADIENT when the text is not a well-formed gradient
    """
    if text is None or not str(text).strip():
        return None

    text = str(text)
    match = GRADIENT_PATTERN.match(text)
    if not match:
        logger.debug(f"Gradient descriptor not recognized, using fallback: {text!r}")
        return FALLBACK_GRADIENT

    parts = _split_top_level(match.group(1))
    if any(not part for part in parts) or text.count("(") != text.count(")"):
        logger.debug(f"Malformed gradient descriptor, using fallback: {text!r}")
        return FALLBACK_GRADIENT

    direction = _parse_direction(parts[0])
    color_parts = parts[1:]
    if direction is None:
        # Unrecognized leading token is still a direction unless it reads as a color
        direction = FALLBACK_GRADIENT_DIRECTION
        if _is_color_stop(parts[0]):
            color_parts = parts
        else:
            logger.debug(f"Unknown gradient direction {parts[0]!r}, using {direction!r}")

    stops = tuple(STOP_POSITION_PATTERN.sub("", part).strip() for part in color_parts)
    return GradientSpec(stops=stops, direction=direction)


# ============================================================================
# Resolution
# ============================================================================

def gradient_endpoints(
    direction: Direction,
    width: float,
    height: float,
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """
    Compute the gradient line for a direction over a width x height area.

    "right" spans the full width, "bottom" the full height. Numeric angles
    run through the area center, reaching half-width/half-height along
    (cos, sin) of the angle. Anything else is horizontal.
    """
    if isinstance(direction, (int, float)) and not isinstance(direction, bool):
        angle = math.radians(direction)
        cx, cy = width / 2, height / 2
        dx = math.cos(angle) * width / 2
        dy = math.sin(angle) * height / 2
        return (cx - dx, cy - dy), (cx + dx, cy + dy)

    keyword = str(direction).lower()
    if "right" in keyword:
        return (0.0, 0.0), (float(width), 0.0)
    if "bottom" in keyword:
        return (0.0, 0.0), (0.0, float(height))
    return (0.0, 0.0), (float(width), 0.0)


def stop_offsets(count: int) -> List[float]:
    """Evenly spaced offsets: two stops map to {0, 1}, N stops to index/(N-1)."""
    if count == 2:
        return [0.0, 1.0]
    return [index / (count - 1) for index in range(count)]


def resolve_gradient(spec: Optional[GradientSpec], width: float, height: float) -> LinearGradientPaint:
    """
    Resolve a GradientSpec into a paint rule for a width x height area.

    Specs with fewer than two stops resolve to the fallback gradient.

    Raises:
        GradientParseError: If a stop color cannot be resolved
    """
    if spec is None or len(spec.stops) < 2:
        logger.debug(f"Gradient has fewer than two stops, using fallback: {spec}")
        spec = FALLBACK_GRADIENT

    start, end = gradient_endpoints(spec.direction, width, height)
    colors = [parse_color(stop) for stop in spec.stops]
    offsets = stop_offsets(len(colors))
    return LinearGradientPaint(start=start, end=end, stops=tuple(zip(offsets, colors)))


def resolve_paint(
    color: str,
    gradient: Optional[GradientSpec],
    width: float,
    height: float,
) -> PaintRule:
    """
    Resolve border paint: the gradient when one is set, else the solid color.

    A gradient whose colors cannot be resolved degrades to the solid color.

    Raises:
        GradientParseError: If the solid color itself cannot be resolved
    """
    if gradient is not None:
        try:
            return resolve_gradient(gradient, width, height)
        except GradientParseError as exc:
            logger.debug(f"Gradient colors unresolvable, using solid border color: {exc}")
    return SolidPaint(parse_color(color))
