"""
Declarative edit parameters applied on every render.

TransformState is mutated only through its command methods. Every setter
clamps or wraps its input, so the state is never partially invalid:

- rotation wraps into [0, 360)
- scale clamps into [MIN_SCALE, MAX_SCALE]
- border width clamps into [0, MAX_BORDER_WIDTH]

Classes:
    BorderSpec: Border width plus solid color or gradient paint
    TransformState: Rotation, scale, flips, translation, mask, border, filter
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from IC_Libs.ImageEditingLib.filter_engine import FilterKind
from IC_Libs.ImageEditingLib.gradient_resolver import GradientSpec, parse_gradient
from IC_Libs.constants import (
    DEFAULT_BORDER_COLOR,
    FULL_TURN_DEGREES,
    MAX_BORDER_WIDTH,
    MAX_SCALE,
    MIN_SCALE,
    ROTATION_STEP,
    ZOOM_STEP,
)


def wrap_rotation(degrees: float) -> float:
    """Normalize an angle into [0, 360)."""
    wrapped = float(degrees) % FULL_TURN_DEGREES
    # -1e-15 % 360 rounds up to 360.0
    return 0.0 if wrapped >= FULL_TURN_DEGREES else wrapped


def clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, float(scale)))


def clamp_border_width(width: int) -> int:
    return max(0, min(MAX_BORDER_WIDTH, int(width)))


@dataclass
class BorderSpec:
    """Border stroke configuration.

    Attributes:
        width_px: Stroke width (0-50). 0 disables the border.
        color: Solid color, also used when gradient colors cannot be resolved
        gradient: Optional gradient paint; None means solid
    """
    width_px: int = 0
    color: str = DEFAULT_BORDER_COLOR
    gradient: Optional[GradientSpec] = None

    def __post_init__(self):
        self.width_px = clamp_border_width(self.width_px)

    @property
    def is_gradient(self) -> bool:
        return self.gradient is not None

    def to_dict(self) -> Dict[str, Any]:
        gradient = None
        if self.gradient is not None:
            gradient = {"stops": list(self.gradient.stops), "direction": self.gradient.direction}
        return {"width_px": self.width_px, "color": self.color, "gradient": gradient}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BorderSpec":
        gradient_data = data.get("gradient")
        gradient = None
        if isinstance(gradient_data, dict):
            gradient = GradientSpec(
                stops=tuple(gradient_data.get("stops", ())),
                direction=gradient_data.get("direction", "right"),
            )
        return cls(
            width_px=data.get("width_px", 0),
            color=data.get("color", DEFAULT_BORDER_COLOR),
            gradient=gradient,
        )


@dataclass
class TransformState:
    """Edit parameters for one editor session.

    Attributes:
        rotation_degrees: Clockwise rotation in [0, 360)
        scale: Zoom factor in [0.1, 3.0]
        flip_horizontal: Mirror across the vertical axis
        flip_vertical: Mirror across the horizontal axis
        translation: Pan offset (x, y) in buffer pixels
        mask_circular: Clip the image to a centered circle
        border: Border stroke configuration
        filter: Active filter (pixel-level or display-level)
    """
    rotation_degrees: float = 0.0
    scale: float = 1.0
    flip_horizontal: bool = False
    flip_vertical: bool = False
    translation: Tuple[float, float] = (0.0, 0.0)
    mask_circular: bool = False
    border: BorderSpec = field(default_factory=BorderSpec)
    filter: FilterKind = FilterKind.NONE

    def __post_init__(self):
        self.rotation_degrees = wrap_rotation(self.rotation_degrees)
        self.scale = clamp_scale(self.scale)
        self.translation = (float(self.translation[0]), float(self.translation[1]))
        self.filter = FilterKind.parse(self.filter)

    # Rotation ------------------------------------------------------------

    def set_rotation(self, degrees: float) -> None:
        self.rotation_degrees = wrap_rotation(degrees)

    def rotate(self, degrees: float = ROTATION_STEP) -> None:
        self.rotation_degrees = wrap_rotation(self.rotation_degrees + degrees)

    # Scale ---------------------------------------------------------------

    def set_scale(self, scale: float) -> None:
        self.scale = clamp_scale(scale)

    def zoom_in(self, factor: float = ZOOM_STEP) -> None:
        self.scale = clamp_scale(self.scale * factor)

    def zoom_out(self, factor: float = ZOOM_STEP) -> None:
        self.scale = clamp_scale(self.scale / factor)

    # Flip / mask ---------------------------------------------------------

    def toggle_flip_horizontal(self) -> None:
        self.flip_horizontal = not self.flip_horizontal

    def toggle_flip_vertical(self) -> None:
        self.flip_vertical = not self.flip_vertical

    def toggle_circular_mask(self) -> None:
        self.mask_circular = not self.mask_circular

    # Position ------------------------------------------------------------

    def translate(self, dx: float, dy: float) -> None:
        self.translation = (self.translation[0] + float(dx), self.translation[1] + float(dy))

    def reset_position(self) -> None:
        self.translation = (0.0, 0.0)

    # Border --------------------------------------------------------------

    def set_border_width(self, width: int) -> None:
        self.border.width_px = clamp_border_width(width)

    def set_border_color(self, color: str) -> None:
        self.border.color = str(color)

    def set_border_gradient(self, gradient: "Optional[GradientSpec | str]") -> None:
        """Set the border gradient from a GradientSpec or a CSS descriptor ("" clears it)."""
        if gradient is None or isinstance(gradient, GradientSpec):
            self.border.gradient = gradient
        else:
            self.border.gradient = parse_gradient(gradient)

    # Filter --------------------------------------------------------------

    def set_filter(self, kind: "FilterKind | str") -> None:
        self.filter = FilterKind.parse(kind)

    # Whole state ---------------------------------------------------------

    @property
    def is_identity_transform(self) -> bool:
        """True when rotation, scale, flips and translation leave pixels in place."""
        return (
            self.rotation_degrees == 0.0
            and self.scale == 1.0
            and not self.flip_horizontal
            and not self.flip_vertical
            and self.translation == (0.0, 0.0)
        )

    def reset_geometry(self) -> None:
        """Clear rotation, scale, flips and translation; mask, border and filter stay."""
        self.rotation_degrees = 0.0
        self.scale = 1.0
        self.flip_horizontal = False
        self.flip_vertical = False
        self.translation = (0.0, 0.0)

    def reset(self) -> None:
        """Restore every field to its default."""
        defaults = TransformState()
        self.__dict__.update(defaults.__dict__)

    def copy(self) -> "TransformState":
        return TransformState.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rotation_degrees": self.rotation_degrees,
            "scale": self.scale,
            "flip_horizontal": self.flip_horizontal,
            "flip_vertical": self.flip_vertical,
            "translation": list(self.translation),
            "mask_circular": self.mask_circular,
            "border": self.border.to_dict(),
            "filter": self.filter.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransformState":
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__ and k != "border"}
        if "translation" in filtered:
            filtered["translation"] = tuple(filtered["translation"])
        border = BorderSpec.from_dict(data.get("border", {}))
        return cls(border=border, **filtered)
