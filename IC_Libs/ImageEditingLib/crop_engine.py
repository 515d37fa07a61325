"""
Interactive crop region and its pointer state machine.

A CropSession is created when crop mode is entered. Its region starts at
the full image bounds and is hidden until the first drag. Pointer events
drive a tagged-variant state:

    Idle --pointer_down--> Drawing | Moving | Resizing(corner)
    Drawing | Moving | Resizing --pointer_up--> Idle

Pointer-down hit-tests the four corner handles first, then the rectangle
interior, and otherwise starts drawing a new rectangle. Each non-idle
state has exactly one move handler.

All coordinates are image-pixel coordinates, not screen coordinates.

Example:
    >>> session = CropSession(200, 200, aspect_ratio=1.0)
    >>> session.pointer_down(10, 10)
    >>> session.pointer_move(110, 40)
    >>> session.pointer_up()
    >>> session.region.normalized()
    CropRect(x=10.0, y=10.0, width=100.0, height=100.0)
    >>> cropped = session.commit(buffer)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union
import logging
import math

from IC_Libs.ImageEditingLib.editing_errors import CropConstraintError, CropTooSmallError
from IC_Libs.ImageEditingLib.image_models import PixelBuffer
from IC_Libs.constants import HANDLE_HIT_TOLERANCE, MIN_CROP_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class CropRect:
    """Normalized rectangle: top-left corner plus non-negative size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom


class Corner(Enum):
    TOP_LEFT = "tl"
    TOP_RIGHT = "tr"
    BOTTOM_LEFT = "bl"
    BOTTOM_RIGHT = "br"


@dataclass(frozen=True)
class CropRegion:
    """Two opposite corners in image-pixel space, in any order."""
    corner1: Point
    corner2: Point

    @classmethod
    def full_image(cls, width: float, height: float) -> "CropRegion":
        return cls(Point(0.0, 0.0), Point(float(width), float(height)))

    def normalized(self) -> CropRect:
        return CropRect(
            x=min(self.corner1.x, self.corner2.x),
            y=min(self.corner1.y, self.corner2.y),
            width=abs(self.corner2.x - self.corner1.x),
            height=abs(self.corner2.y - self.corner1.y),
        )

    def translated(self, dx: float, dy: float) -> "CropRegion":
        return CropRegion(
            Point(self.corner1.x + dx, self.corner1.y + dy),
            Point(self.corner2.x + dx, self.corner2.y + dy),
        )

    def corner_points(self) -> Dict[Corner, Point]:
        rect = self.normalized()
        return {
            Corner.TOP_LEFT: Point(rect.x, rect.y),
            Corner.TOP_RIGHT: Point(rect.right, rect.y),
            Corner.BOTTOM_LEFT: Point(rect.x, rect.bottom),
            Corner.BOTTOM_RIGHT: Point(rect.right, rect.bottom),
        }

    def pixel_bounds(self) -> Tuple[int, int, int, int]:
        """Rounded (left, top, right, bottom) edges for extraction."""
        rect = self.normalized()
        return (
            int(round(rect.x)),
            int(round(rect.y)),
            int(round(rect.right)),
            int(round(rect.bottom)),
        )


OPPOSITE_CORNER = {
    Corner.TOP_LEFT: Corner.BOTTOM_RIGHT,
    Corner.TOP_RIGHT: Corner.BOTTOM_LEFT,
    Corner.BOTTOM_LEFT: Corner.TOP_RIGHT,
    Corner.BOTTOM_RIGHT: Corner.TOP_LEFT,
}


# ============================================================================
# Interaction states
# ============================================================================

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    pass


@dataclass(frozen=True)
class Moving:
    last: Point


@dataclass(frozen=True)
class Resizing:
    corner: Corner
    anchor: Point  # the fixed opposite corner


CropInteractionState = Union[Idle, Drawing, Moving, Resizing]


def validate_aspect_ratio(ratio: Optional[float]) -> Optional[float]:
    """
    Check an aspect-ratio constraint (width / height); None means free-form.

    Raises:
        CropConstraintError: If the ratio is not a positive finite number
    """
    if ratio is None:
        return None
    value = float(ratio)
    if not math.isfinite(value) or value <= 0:
        raise CropConstraintError(f"aspect ratio must be a positive number, got {ratio}")
    return value


def find_handle(region: CropRegion, point: Point, tolerance: float = HANDLE_HIT_TOLERANCE) -> Optional[Corner]:
    """Return the first corner handle within tolerance of point (TL, TR, BL, BR order)."""
    for corner, handle in region.corner_points().items():
        if abs(point.x - handle.x) < tolerance and abs(point.y - handle.y) < tolerance:
            return corner
    return None


class CropSession:
    """
    Crop rectangle plus pointer interaction state for one crop-mode session.

    Attributes:
        image_width, image_height: Bounds of the buffer being cropped
        region: Current crop region (full image bounds until the first drag)
        visible: Whether the region has been drawn and should be shown
        state: Current interaction state
    """

    def __init__(self, image_width: int, image_height: int, aspect_ratio: Optional[float] = None):
        self.image_width = image_width
        self.image_height = image_height
        self.region = CropRegion.full_image(image_width, image_height)
        self.visible = False
        self.state: CropInteractionState = Idle()
        self._aspect_ratio = validate_aspect_ratio(aspect_ratio)
        self._move_handlers: Dict[type, Callable[[Point], None]] = {
            Drawing: self._move_drawing,
            Moving: self._move_moving,
            Resizing: self._move_resizing,
        }

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self._aspect_ratio

    @aspect_ratio.setter
    def aspect_ratio(self, ratio: Optional[float]) -> None:
        self._aspect_ratio = validate_aspect_ratio(ratio)

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, Idle)

    # Pointer events ------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> CropInteractionState:
        """Start a drag. Ignored unless the session is idle."""
        if not self.is_idle:
            logger.debug(f"pointer_down ignored in state {self.state}")
            return self.state

        point = Point(float(x), float(y))

        if self.visible:
            corner = find_handle(self.region, point)
            if corner is not None:
                anchor = self.region.corner_points()[OPPOSITE_CORNER[corner]]
                handle = self.region.corner_points()[corner]
                self.region = CropRegion(anchor, handle)
                self.state = Resizing(corner=corner, anchor=anchor)
                logger.debug(f"Crop resize started from {corner.value}")
                return self.state

            if self.region.normalized().contains(point):
                self.state = Moving(last=point)
                logger.debug("Crop move started")
                return self.state

        self.region = CropRegion(point, point)
        self.visible = True
        self.state = Drawing()
        logger.debug(f"Crop draw started at ({point.x:.1f}, {point.y:.1f})")
        return self.state

    def pointer_move(self, x: float, y: float) -> None:
        handler = self._move_handlers.get(type(self.state))
        if handler is not None:
            handler(Point(float(x), float(y)))

    def pointer_up(self) -> None:
        if not self.is_idle:
            logger.debug(f"Crop drag finished: {self.region.normalized()}")
        self.state = Idle()

    # Per-state transitions -----------------------------------------------

    def _move_drawing(self, point: Point) -> None:
        anchor = self.region.corner1
        target_y = point.y
        if self._aspect_ratio:
            height = abs(point.x - anchor.x) / self._aspect_ratio
            # Grow away from the anchor in the direction of the drag
            target_y = anchor.y + height if point.y > anchor.y else anchor.y - height
        self.region = CropRegion(anchor, Point(point.x, target_y))

    def _move_moving(self, point: Point) -> None:
        last = self.state.last
        self.region = self.region.translated(point.x - last.x, point.y - last.y)
        self.state = Moving(last=point)

    def _move_resizing(self, point: Point) -> None:
        corner = self.state.corner
        anchor = self.state.anchor
        target_y = point.y

        if self._aspect_ratio:
            if corner is Corner.TOP_LEFT:
                target_y = anchor.y - (anchor.x - point.x) / self._aspect_ratio
            elif corner is Corner.TOP_RIGHT:
                target_y = anchor.y - (point.x - anchor.x) / self._aspect_ratio
            elif corner is Corner.BOTTOM_LEFT:
                target_y = anchor.y + (anchor.x - point.x) / self._aspect_ratio
            else:
                target_y = anchor.y + (point.x - anchor.x) / self._aspect_ratio

        self.region = CropRegion(anchor, Point(point.x, target_y))

    # Commit --------------------------------------------------------------

    def commit(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Extract the normalized crop rectangle from a buffer.

        Areas of the rectangle outside the buffer become transparent.

        Args:
            buffer: Buffer to crop (left untouched)

        Returns:
            New PixelBuffer holding the cropped pixels

        Raises:
            CropTooSmallError: If the rectangle is narrower or shorter than MIN_CROP_SIZE
        """
        rect = self.region.normalized()
        if rect.width < MIN_CROP_SIZE or rect.height < MIN_CROP_SIZE:
            raise CropTooSmallError(rect.width, rect.height, MIN_CROP_SIZE)

        left, top, right, bottom = self.region.pixel_bounds()
        cropped = buffer.extract(left, top, right, bottom)
        logger.debug(f"Extracted crop ({left}, {top}) to ({right}, {bottom})")
        return cropped
