"""
Platform presets for profile pictures.

Each preset is a plain TransformState mutation. Fields a preset does not
mention are left as they are; only "original" resets the geometric
transform as well.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from IC_Libs.ImageEditingLib.filter_engine import FilterKind
from IC_Libs.ImageEditingLib.transform_state import TransformState


@dataclass(frozen=True)
class PlatformPreset:
    """
    Attributes:
        mask_circular: Circular mask on/off
        border_width: Border width in pixels
        border_color: Solid border color, or None to keep the current one
        clear_gradient: Switch the border back to solid paint
        reset_transform: Also reset rotation, scale, flips and position
    """
    mask_circular: bool
    border_width: int = 0
    border_color: Optional[str] = None
    clear_gradient: bool = False
    reset_transform: bool = False


PLATFORM_PRESETS: Dict[str, PlatformPreset] = {
    "facebook": PlatformPreset(mask_circular=True),
    "instagram": PlatformPreset(mask_circular=False),
    "linkedin": PlatformPreset(mask_circular=True, border_width=4, border_color="#0077b5", clear_gradient=True),
    "twitter": PlatformPreset(mask_circular=True),
    "youtube": PlatformPreset(mask_circular=True, border_width=4, border_color="#ff0000", clear_gradient=True),
    "original": PlatformPreset(mask_circular=False, clear_gradient=True, reset_transform=True),
}


def list_presets() -> List[str]:
    return list(PLATFORM_PRESETS)


def apply_platform_preset(state: TransformState, name: str) -> None:
    """
    Apply a named preset to a TransformState in place.

    Every preset also clears the active filter.

    Raises:
        ValueError: If the preset name is unknown
    """
    key = str(name).strip().lower()
    preset = PLATFORM_PRESETS.get(key)
    if preset is None:
        raise ValueError(
            f"Unknown preset: {name}. "
            f"Valid presets: {', '.join(PLATFORM_PRESETS)}"
        )

    state.mask_circular = preset.mask_circular
    state.set_border_width(preset.border_width)
    if preset.border_color is not None:
        state.set_border_color(preset.border_color)
    if preset.clear_gradient:
        state.set_border_gradient(None)
    state.set_filter(FilterKind.NONE)

    if preset.reset_transform:
        state.set_rotation(0)
        state.set_scale(1.0)
        state.flip_horizontal = False
        state.flip_vertical = False
        state.reset_position()
