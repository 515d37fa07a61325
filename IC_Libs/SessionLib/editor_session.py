"""
Editor session: the single owner of the working image.

An EditorSession holds the working PixelBuffer, an immutable snapshot of
the originally loaded image (used only by reset), the TransformState and,
while crop mode is active, a CropSession. Hosts drive it with commands and
pointer events and re-render after every mutation; rendering has no
hidden state, so it is always safe to call.

Events that arrive before an image is loaded are dropped.

Example:
    >>> session = EditorSession(on_notice=lambda title, text: print(title))
    >>> session.load_image(Path("avatar.png").read_bytes())
    >>> session.state.rotate(90)
    >>> session.enter_crop_mode()
    >>> session.pointer_down(10, 10); session.pointer_move(110, 60); session.pointer_up()
    >>> session.commit_crop()
    <CropOutcome.APPLIED: 'applied'>
    >>> png_bytes = session.export_png()
"""

from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple, Union
import logging

from IC_Libs.ImageEditingLib.crop_engine import CropSession, validate_aspect_ratio
from IC_Libs.ImageEditingLib.editing_errors import CropTooSmallError
from IC_Libs.ImageEditingLib.image_editing_ops import (
    encode_png,
    load_image,
    load_image_file,
    save_export,
)
from IC_Libs.ImageEditingLib.image_models import PixelBuffer
from IC_Libs.ImageEditingLib.render_pipeline import display_frame, render, render_geometry
from IC_Libs.ImageEditingLib.transform_state import TransformState
from IC_Libs.SessionLib.platform_presets import apply_platform_preset

logger = logging.getLogger(__name__)

NoticeCallback = Callable[[str, str], None]


class CropOutcome(Enum):
    APPLIED = "applied"
    TOO_SMALL = "too_small"
    INACTIVE = "inactive"


class EditorSession:
    """
    Working image, edit state and crop interaction for one editor.

    Attributes:
        original: Snapshot of the loaded image, never modified
        working: Current image (replaced by crop commits and resets)
        state: Edit parameters applied on every render
        crop_session: Active crop interaction, or None outside crop mode
        cropped_preview: Rendered result of the last committed crop
    """

    def __init__(self, on_notice: Optional[NoticeCallback] = None):
        self.original: Optional[PixelBuffer] = None
        self.working: Optional[PixelBuffer] = None
        self.state = TransformState()
        self.crop_session: Optional[CropSession] = None
        self.cropped_preview: Optional[PixelBuffer] = None
        self._aspect_ratio: Optional[float] = None
        self._pan_last: Optional[Tuple[float, float]] = None
        self._on_notice = on_notice

    def _notify(self, title: str, description: str) -> None:
        logger.info(f"{title}: {description}")
        if self._on_notice is not None:
            self._on_notice(title, description)

    @property
    def has_image(self) -> bool:
        return self.working is not None

    # Loading -------------------------------------------------------------

    def load_buffer(self, buffer: PixelBuffer) -> None:
        """Start editing a decoded image with a fresh edit state."""
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")
        self.original = buffer.copy()
        self.working = buffer.copy()
        self.state.reset()
        self.crop_session = None
        self.cropped_preview = None
        self._pan_last = None

    def load_image(self, data: bytes) -> PixelBuffer:
        """
        Decode image bytes and start editing them.

        Raises:
            ImageLoadError: If decoding fails; the session is left unchanged
        """
        buffer = load_image(data)
        self.load_buffer(buffer)
        return buffer

    def load_file(self, path: Union[str, Path]) -> PixelBuffer:
        """
        Decode an image file and start editing it.

        Raises:
            ImageLoadError: If the file is unsupported or undecodable
        """
        buffer = load_image_file(path)
        self.load_buffer(buffer)
        return buffer

    # Crop mode -----------------------------------------------------------

    @property
    def is_cropping(self) -> bool:
        return self.crop_session is not None

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self._aspect_ratio

    def set_aspect_ratio(self, ratio: Optional[float]) -> None:
        """
        Lock crop drawing and resizing to width / height = ratio (None = free-form).

        Raises:
            CropConstraintError: If ratio is not a positive finite number
        """
        self._aspect_ratio = validate_aspect_ratio(ratio)
        if self.crop_session is not None:
            self.crop_session.aspect_ratio = self._aspect_ratio

    def enter_crop_mode(self) -> bool:
        """Begin a crop session covering the full working image."""
        if not self.has_image:
            return False
        self.crop_session = CropSession(self.working.width, self.working.height, self._aspect_ratio)
        self._pan_last = None
        self._notify("Crop mode activated", "Click and drag on the image to select an area to crop.")
        return True

    def exit_crop_mode(self) -> None:
        self.crop_session = None

    def toggle_crop_mode(self) -> Optional[CropOutcome]:
        """Enter crop mode, or commit the crop when already cropping."""
        if self.is_cropping:
            return self.commit_crop()
        self.enter_crop_mode()
        return None

    def commit_crop(self) -> CropOutcome:
        """
        Replace the working image with the selected crop rectangle.

        The rectangle is cut from the image as currently placed on the
        canvas (rotated, scaled, flipped and panned), and that geometry is
        then cleared from the state. Mask, border and filter stay.
        Rejected crops leave the working image untouched and end crop mode.
        """
        if not self.has_image or self.crop_session is None:
            return CropOutcome.INACTIVE

        try:
            cropped = self.crop_session.commit(render_geometry(self.working, self.state))
        except CropTooSmallError as exc:
            logger.warning(f"Crop rejected: {exc}")
            self.exit_crop_mode()
            self._notify("Crop canceled", "The selected area was too small to crop.")
            return CropOutcome.TOO_SMALL

        self.working = cropped
        self.exit_crop_mode()
        self.state.reset_geometry()
        self.cropped_preview = render(cropped, self.state)
        self._notify("Image cropped", "Your image has been cropped successfully.")
        return CropOutcome.APPLIED

    def reset_crop(self) -> bool:
        """Restore the originally loaded image and discard any crop."""
        if self.original is None:
            return False
        self.working = self.original.copy()
        self.exit_crop_mode()
        self.cropped_preview = None
        self.state.reset_position()
        self._notify("Crop reset", "Your image has been restored to its original dimensions.")
        return True

    # Edit commands -------------------------------------------------------

    def reset_position(self) -> None:
        self.state.reset_position()
        self._notify("Position reset", "Your image position has been reset.")

    def apply_preset(self, name: str) -> None:
        """
        Apply a platform preset to the edit state.

        Raises:
            ValueError: If the preset name is unknown
        """
        apply_platform_preset(self.state, name)

    # Pointer and touch events --------------------------------------------

    def pointer_down(self, x: float, y: float) -> None:
        """Press at image coordinates: crop interaction in crop mode, else start panning."""
        if not self.has_image:
            return
        if self.crop_session is not None:
            self.crop_session.pointer_down(x, y)
        else:
            self._pan_last = (float(x), float(y))

    def pointer_move(self, x: float, y: float) -> None:
        if not self.has_image:
            return
        if self.crop_session is not None:
            self.crop_session.pointer_move(x, y)
        elif self._pan_last is not None:
            last_x, last_y = self._pan_last
            self.state.translate(x - last_x, y - last_y)
            self._pan_last = (float(x), float(y))

    def pointer_up(self) -> None:
        if self.crop_session is not None:
            self.crop_session.pointer_up()
        self._pan_last = None

    def touch_start(self, touches: Sequence[Tuple[float, float]]) -> None:
        """Touch equivalent of pointer_down; only the first touch point is used."""
        if touches:
            self.pointer_down(*touches[0])

    def touch_move(self, touches: Sequence[Tuple[float, float]]) -> None:
        if touches:
            self.pointer_move(*touches[0])

    def touch_end(self) -> None:
        self.pointer_up()

    # Output --------------------------------------------------------------

    def render(self) -> Optional[PixelBuffer]:
        """Render the working image, with the crop overlay while a region is shown."""
        if not self.has_image:
            return None
        crop = None
        if self.crop_session is not None and self.crop_session.visible:
            crop = self.crop_session.region
        return render(self.working, self.state, crop)

    def get_current_frame(self) -> Optional[PixelBuffer]:
        """Frame for on-screen display, including the display-level filter."""
        frame = self.render()
        if frame is None:
            return None
        return display_frame(frame, self.state)

    def export_frame(self, include_display_filter: bool = False) -> PixelBuffer:
        """
        Full-resolution frame for export, without any crop overlay.

        Display-level filters (blur, hue-rotate, saturate) are left out
        unless include_display_filter is set.

        Raises:
            RuntimeError: If no image is loaded
        """
        if not self.has_image:
            raise RuntimeError("No image loaded")
        frame = render(self.working, self.state)
        if include_display_filter:
            frame = display_frame(frame, self.state)
        return frame

    def export_png(self, include_display_filter: bool = False) -> bytes:
        return encode_png(self.export_frame(include_display_filter))

    def save_export(self, output_dir: Path, include_display_filter: bool = False) -> Path:
        """
        Write the export frame as edited_image_<timestamp>.png.

        Raises:
            RuntimeError: If no image is loaded
            OSError: If output_dir is missing or not a directory
        """
        path = save_export(self.export_frame(include_display_filter), Path(output_dir))
        self._notify("Image downloaded", "Your edited image has been downloaded successfully.")
        return path
