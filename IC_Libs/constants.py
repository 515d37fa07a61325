"""
Constants and configuration values for ImageCraft.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Transform limits
MIN_SCALE = 0.1
MAX_SCALE = 3.0
ZOOM_STEP = 1.1
ROTATION_STEP = 90
FULL_TURN_DEGREES = 360

# Border
MAX_BORDER_WIDTH = 50
DEFAULT_BORDER_COLOR = "#8b5cf6"  # Purple

# Gradient used when a descriptor cannot be parsed
FALLBACK_GRADIENT_COLORS = ("#9b87f5", "#1EAEDB")
FALLBACK_GRADIENT_DIRECTION = "right"

GRADIENT_PRESETS = {
    "Purple to Blue": "linear-gradient(to right, #9b87f5, #1EAEDB)",
    "Sunset": "linear-gradient(to right, #ee9ca7, #ffdde1)",
    "Nature": "linear-gradient(90deg, hsla(139, 70%, 75%, 1) 0%, hsla(63, 90%, 76%, 1) 100%)",
    "Fire": "linear-gradient(90deg, hsla(29, 92%, 70%, 1) 0%, hsla(0, 87%, 73%, 1) 100%)",
    "Ocean": "linear-gradient(90deg, hsla(186, 33%, 94%, 1) 0%, hsla(216, 41%, 79%, 1) 100%)",
    "Rainbow": "linear-gradient(90deg, #ff2400, #e81d1d, #e8b71d, #e3e81d, #1de840, #1ddde8, #2b1de8)",
    "Midnight": "linear-gradient(90deg, hsla(221, 45%, 73%, 1) 0%, hsla(220, 78%, 29%, 1) 100%)",
    "Rose Gold": "linear-gradient(90deg, hsla(24, 100%, 83%, 1) 0%, hsla(341, 91%, 68%, 1) 100%)",
    "Solid": "",
}

# Crop interaction
MIN_CROP_SIZE = 10
HANDLE_HIT_TOLERANCE = 15
HANDLE_DRAW_SIZE = 10

ASPECT_RATIO_OPTIONS = {
    "Free": None,
    "1:1": 1.0,
    "4:3": 4 / 3,
    "16:9": 16 / 9,
    "3:4": 3 / 4,
    "9:16": 9 / 16,
}

# Crop overlay drawing
OVERLAY_SHADE_ALPHA = 128  # 50% black
OVERLAY_STROKE_WIDTH = 2
OVERLAY_COLOR = (255, 255, 255, 255)
GUIDE_DASH_LENGTH = 5
GUIDE_GAP_LENGTH = 5

# Pixel-level filter factors
BRIGHTNESS_FACTOR = 1.2
CONTRAST_FACTOR = 1.5

# Display-level filter amounts
DISPLAY_BLUR_RADIUS = 3.0
DISPLAY_HUE_ROTATION_DEGREES = 90.0
DISPLAY_SATURATION = 2.0

# File naming
EXPORT_FILE_PREFIX = "edited_image_"
DEFAULT_OUTPUT_FORMAT = "PNG"

# Supported upload formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
