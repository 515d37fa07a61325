"""
IC_Libs - ImageCraft Library Modules

This package contains core functionality for the ImageCraft editor,
organized into specialized sub-packages:

- ImageEditingLib: Pixel buffers, filters, gradients, transforms, cropping and rendering
- SessionLib: Editor session, platform presets and viewport mapping
"""

__version__ = "0.1.0"
