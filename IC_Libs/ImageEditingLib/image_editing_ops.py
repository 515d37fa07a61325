"""
Image I/O at the host boundary for ImageCraft.

This module converts between encoded image files and PixelBuffers:
decoding uploads, encoding exports, and writing exports to disk.

Functions:
    is_supported_image: Check an upload path against supported extensions
    load_image: Decode image bytes into a PixelBuffer
    load_image_file: Decode an image file into a PixelBuffer
    encode_png: Encode a PixelBuffer as PNG bytes
    build_export_filename: Name for a downloaded export
    save_export: Write a PixelBuffer as PNG into a directory
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union
import logging
import time

from IC_Libs.ImageEditingLib.editing_errors import ImageLoadError
from IC_Libs.ImageEditingLib.image_models import PixelBuffer
from IC_Libs.constants import (
    DEFAULT_OUTPUT_FORMAT,
    EXPORT_FILE_PREFIX,
    SUPPORTED_STANDARD_IMAGES,
)
from IC_Libs.pillow_compat import Image

logger = logging.getLogger(__name__)


def is_supported_image(path: Union[str, Path]) -> bool:
    """Return True if the file extension is a supported image format."""
    return Path(path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def load_image(data: bytes) -> PixelBuffer:
    """
    Decode encoded image bytes into an RGBA PixelBuffer.

    Animated formats contribute their first frame.

    Args:
        data: Encoded image (PNG, JPEG, ...)

    Returns:
        Decoded PixelBuffer

    Raises:
        ImageLoadError: If the bytes are empty or not a decodable image
    """
    if not data:
        raise ImageLoadError("No image data provided")

    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            buffer = PixelBuffer.from_image(image)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageLoadError(f"Could not decode image: {exc}") from exc

    logger.info(f"Loaded {buffer.width}x{buffer.height} image")
    return buffer


def load_image_file(path: Union[str, Path]) -> PixelBuffer:
    """
    Decode an image file into a PixelBuffer.

    Raises:
        ImageLoadError: If the extension is unsupported or the file cannot be read
    """
    image_path = Path(path)
    if not is_supported_image(image_path):
        raise ImageLoadError(
            f"Unsupported file type: {image_path.suffix or image_path.name}. "
            f"Please upload an image file (JPEG, PNG, etc.)"
        )
    try:
        data = image_path.read_bytes()
    except OSError as exc:
        raise ImageLoadError(f"Could not read image file: {image_path}") from exc
    return load_image(data)


def encode_png(buffer: PixelBuffer) -> bytes:
    """Encode a PixelBuffer at full resolution as PNG bytes."""
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")
    output = BytesIO()
    buffer.to_image().save(output, format=DEFAULT_OUTPUT_FORMAT)
    return output.getvalue()


def build_export_filename(timestamp_ms: Optional[int] = None) -> str:
    """Return 'edited_image_<epoch milliseconds>.png'."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{EXPORT_FILE_PREFIX}{timestamp_ms}.png"


def save_export(
    buffer: PixelBuffer,
    output_dir: Path,
    filename: Optional[str] = None,
) -> Path:
    """
    Save a PixelBuffer to disk in PNG format.

    Args:
        buffer: Frame to save
        output_dir: Existing directory to write into
        filename: Target file name (default: build_export_filename())

    Returns:
        Path of the written file

    Raises:
        OSError: If the directory does not exist or cannot be written
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    save_path = output_dir / (filename or build_export_filename())
    save_path.write_bytes(encode_png(buffer))
    logger.info(f"Exported {buffer.width}x{buffer.height} image to {save_path}")
    return save_path
