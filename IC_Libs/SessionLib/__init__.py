"""
SessionLib - Editor session management

This module ties the editing core together for a host: the session
that owns the working image, platform presets and the screen-to-image
coordinate adapter.
"""

from IC_Libs.SessionLib.editor_session import CropOutcome, EditorSession
from IC_Libs.SessionLib.platform_presets import (
    PLATFORM_PRESETS,
    PlatformPreset,
    apply_platform_preset,
    list_presets,
)
from IC_Libs.SessionLib.viewport import fit_display_size, screen_to_image

__all__ = [
    "CropOutcome",
    "EditorSession",
    "PLATFORM_PRESETS",
    "PlatformPreset",
    "apply_platform_preset",
    "list_presets",
    "fit_display_size",
    "screen_to_image",
]
