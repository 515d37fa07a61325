"""
Pytest configuration and shared fixtures for ImageCraft tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest

from IC_Libs.ImageEditingLib.image_models import PixelBuffer


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for exported files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]


@pytest.fixture
def gradient_buffer():
    """
    Provide a 200x200 opaque buffer where every pixel encodes its position.

    Pixel (x, y) is (x, y, 100, 255), so crops can be checked against
    their source coordinates.
    """
    ys, xs = np.mgrid[0:200, 0:200]
    pixels = np.zeros((200, 200, 4), dtype=np.uint8)
    pixels[..., 0] = xs
    pixels[..., 1] = ys
    pixels[..., 2] = 100
    pixels[..., 3] = 255
    return PixelBuffer(200, 200, pixels)


@pytest.fixture
def split_buffer():
    """
    Provide a 100x100 opaque buffer: left half red, right half blue.
    """
    buffer = PixelBuffer.blank(100, 100, BLUE)
    buffer.pixels[:, :50] = RED
    return buffer
