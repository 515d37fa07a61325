"""
Screen-to-image coordinate mapping.

Hosts display the rendered frame scaled to fit their widget. Pointer
positions arrive in widget (screen) coordinates and are mapped back into
image-pixel coordinates before reaching the editor session:

    image = (screen - canvas_origin) / display_size * buffer_size
"""

from typing import Tuple


def screen_to_image(
    screen_x: float,
    screen_y: float,
    canvas_origin: Tuple[float, float],
    display_size: Tuple[float, float],
    buffer_size: Tuple[int, int],
) -> Tuple[float, float]:
    """
    Map a screen position onto buffer pixel coordinates.

    Args:
        screen_x, screen_y: Pointer position in screen/widget coordinates
        canvas_origin: Screen position of the displayed frame's top-left corner
        display_size: On-screen (width, height) of the displayed frame
        buffer_size: (width, height) of the buffer being displayed

    Raises:
        ValueError: If the display size is not positive
    """
    display_w, display_h = display_size
    if display_w <= 0 or display_h <= 0:
        raise ValueError(f"display_size must be positive, got {display_size}")

    x = (screen_x - canvas_origin[0]) / display_w * buffer_size[0]
    y = (screen_y - canvas_origin[1]) / display_h * buffer_size[1]
    return x, y


def fit_display_size(buffer_size: Tuple[int, int], available: Tuple[int, int]) -> Tuple[int, int]:
    """Largest size with the buffer's aspect ratio that fits in the available area."""
    width, height = buffer_size
    if width <= 0 or height <= 0:
        return 0, 0
    factor = min(available[0] / width, available[1] / height)
    return max(1, int(width * factor)), max(1, int(height * factor))
