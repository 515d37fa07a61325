"""
Compatibility wrapper that loads the Pillow submodules ImageCraft needs.

Pillow provides the `PIL` namespace. The modules are loaded once here via
importlib and re-exported, so the rest of the code base imports
`from IC_Libs.pillow_compat import Image, ImageDraw` and a missing Pillow
install fails in one place with an actionable message.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil_image = _import("PIL.Image")

if _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image
ImageChops = import_module("PIL.ImageChops")
ImageColor = import_module("PIL.ImageColor")
ImageDraw = import_module("PIL.ImageDraw")
ImageEnhance = import_module("PIL.ImageEnhance")
ImageFilter = import_module("PIL.ImageFilter")

