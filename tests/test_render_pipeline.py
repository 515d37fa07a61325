"""
Unit tests for render_pipeline.

Tests cover:
- Identity rendering and determinism
- Rotation, flip, scale and translation
- Circular mask and border stroke (solid and gradient)
- Crop overlay drawing
- Pixel-level filter stage and display-level filter separation
"""

import numpy as np
import pytest

from IC_Libs.ImageEditingLib.crop_engine import CropRegion, Point
from IC_Libs.ImageEditingLib.image_models import PixelBuffer
from IC_Libs.ImageEditingLib.render_pipeline import (
    RenderRequest,
    display_frame,
    render,
    render_geometry,
    render_request,
    transform_matrix,
)
from IC_Libs.ImageEditingLib.transform_state import TransformState

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
BORDER_PURPLE = (139, 92, 246, 255)
WHITE = (255, 255, 255, 255)


class TestTransformMatrix:
    """Tests for the forward transform matrix."""

    def test_identity(self):
        """Should be the identity for the default state."""
        assert np.allclose(transform_matrix(TransformState(), 100, 80), np.eye(3))

    def test_rotation_about_center(self):
        """Should keep the center fixed under rotation."""
        state = TransformState(rotation_degrees=90)

        matrix = transform_matrix(state, 100, 80)
        center = matrix @ np.array([50, 40, 1])

        assert center[:2] == pytest.approx([50, 40])

    def test_translation_moves_center(self):
        """Should move the center by the translation."""
        state = TransformState(translation=(7, -3))

        center = transform_matrix(state, 100, 80) @ np.array([50, 40, 1])

        assert center[:2] == pytest.approx([57, 37])


class TestGeometry:
    """Tests for the geometric stage."""

    def test_identity_render_equals_source(self, split_buffer):
        """Should reproduce the source exactly for an identity state."""
        assert render(split_buffer, TransformState()) == split_buffer

    def test_render_is_deterministic(self, split_buffer):
        """Should produce identical output for identical input."""
        state = TransformState(rotation_degrees=30, scale=1.3, mask_circular=True)
        state.set_border_width(5)

        assert render(split_buffer, state) == render(split_buffer, state)

    def test_source_untouched(self, split_buffer):
        """Should never modify the source buffer."""
        before = split_buffer.copy()
        state = TransformState(rotation_degrees=45, mask_circular=True)
        state.set_border_width(8)

        render(split_buffer, state, CropRegion(Point(10, 10), Point(60, 60)))

        assert split_buffer == before

    def test_output_size_matches_source(self):
        """Should render onto a canvas the size of the source."""
        source = PixelBuffer.blank(120, 40, RED)

        result = render(source, TransformState(rotation_degrees=90))

        assert result.size == (120, 40)

    def test_rotate_clockwise(self, split_buffer):
        """Should move the left half to the top for +90 degrees."""
        result = render(split_buffer, TransformState(rotation_degrees=90))

        assert result.get_pixel(50, 10) == RED
        assert result.get_pixel(50, 90) == BLUE

    def test_four_rotations_restore_source(self, split_buffer):
        """Should render the source unchanged after four +90 rotations."""
        state = TransformState()
        for _ in range(4):
            state.rotate(90)

        assert render(split_buffer, state) == split_buffer

    def test_flip_horizontal(self, split_buffer):
        """Should mirror left and right."""
        state = TransformState(flip_horizontal=True)

        result = render(split_buffer, state)

        assert result.get_pixel(10, 50) == BLUE
        assert result.get_pixel(90, 50) == RED

    def test_flip_vertical_keeps_columns(self, split_buffer):
        """Should leave a left/right split unchanged when flipped vertically."""
        result = render(split_buffer, TransformState(flip_vertical=True))

        assert result.get_pixel(10, 10) == RED
        assert result.get_pixel(90, 90) == BLUE

    def test_zoom_out_leaves_transparent_margin(self, split_buffer):
        """Should leave uncovered canvas transparent when scaled down."""
        result = render(split_buffer, TransformState(scale=0.5))

        assert result.get_pixel(5, 5)[3] == 0
        assert result.get_pixel(40, 50) == RED
        assert result.get_pixel(60, 50) == BLUE

    def test_translation(self, split_buffer):
        """Should shift the image by the translation."""
        result = render(split_buffer, TransformState(translation=(20, 0)))

        assert result.get_pixel(5, 50)[3] == 0
        assert result.get_pixel(65, 50) == RED
        assert result.get_pixel(75, 50) == BLUE

    def test_render_geometry_skips_mask_border_and_filter(self, split_buffer):
        """Should place the image like render() without the later stages."""
        state = TransformState(translation=(20, 0), mask_circular=True, filter="invert")
        state.set_border_width(6)

        result = render_geometry(split_buffer, state)

        assert result.get_pixel(5, 50)[3] == 0
        assert result.get_pixel(22, 2) == RED
        assert result.get_pixel(75, 50) == BLUE

    def test_render_geometry_identity(self, split_buffer):
        """Should return the source pixels for an identity state."""
        assert render_geometry(split_buffer, TransformState(mask_circular=True)) == split_buffer


class TestMaskAndBorder:
    """Tests for the circular mask and border stages."""

    def test_circular_mask(self, split_buffer):
        """Should clear pixels outside the centered circle."""
        result = render(split_buffer, TransformState(mask_circular=True))

        assert result.get_pixel(0, 0)[3] == 0
        assert result.get_pixel(99, 99)[3] == 0
        assert result.get_pixel(30, 50) == RED
        assert result.get_pixel(70, 50) == BLUE

    def test_rectangle_border(self, split_buffer):
        """Should stroke the outer border width pixels with the border color."""
        state = TransformState()
        state.set_border_width(4)

        result = render(split_buffer, state)

        assert result.get_pixel(0, 0) == BORDER_PURPLE
        assert result.get_pixel(3, 50) == BORDER_PURPLE
        assert result.get_pixel(99, 50) == BORDER_PURPLE
        assert result.get_pixel(4, 50) == RED
        assert result.get_pixel(50, 50) == BLUE

    def test_border_custom_color(self, split_buffer):
        """Should use the configured solid color."""
        state = TransformState()
        state.set_border_width(2)
        state.set_border_color("#00ff00")

        result = render(split_buffer, state)

        assert result.get_pixel(50, 0) == (0, 255, 0, 255)

    def test_unresolvable_border_color_uses_default(self, split_buffer):
        """Should fall back to the default border color."""
        state = TransformState()
        state.set_border_width(2)
        state.set_border_color("no-such-color")

        result = render(split_buffer, state)

        assert result.get_pixel(50, 0) == BORDER_PURPLE

    def test_border_stays_upright_under_rotation(self, split_buffer):
        """Should stroke the border in untransformed space."""
        state = TransformState(rotation_degrees=90)
        state.set_border_width(4)

        result = render(split_buffer, state)

        assert result.get_pixel(0, 0) == BORDER_PURPLE
        assert result.get_pixel(99, 99) == BORDER_PURPLE

    def test_border_follows_translation(self, split_buffer):
        """Should offset the border with the translation."""
        state = TransformState(translation=(10, 0))
        state.set_border_width(3)

        result = render(split_buffer, state)

        assert result.get_pixel(10, 50) == BORDER_PURPLE
        assert result.get_pixel(2, 50)[3] == 0

    def test_circular_border(self, split_buffer):
        """Should stroke a ring and shrink the image inside it."""
        state = TransformState(mask_circular=True)
        state.set_border_width(4)

        result = render(split_buffer, state)

        assert result.get_pixel(50, 1) == BORDER_PURPLE
        assert result.get_pixel(0, 0)[3] == 0
        assert result.get_pixel(30, 50) == RED

    def test_gradient_border(self):
        """Should paint the border along the gradient line."""
        source = PixelBuffer.blank(100, 100, (0, 200, 0, 255))
        state = TransformState()
        state.set_border_width(4)
        state.set_border_gradient("linear-gradient(to right, #000000, #ffffff)")

        result = render(source, state)

        left = result.get_pixel(0, 50)
        right = result.get_pixel(99, 50)
        assert all(channel < 10 for channel in left[:3])
        assert all(channel > 245 for channel in right[:3])
        assert result.get_pixel(50, 50) == (0, 200, 0, 255)

    def test_gradient_with_bad_colors_uses_solid(self, split_buffer):
        """Should stroke with the solid color when gradient colors fail."""
        state = TransformState()
        state.set_border_width(2)
        state.set_border_color("#00ff00")
        state.set_border_gradient("linear-gradient(to right, bogus, #000000)")

        result = render(split_buffer, state)

        assert result.get_pixel(50, 0) == (0, 255, 0, 255)


class TestCropOverlay:
    """Tests for the crop overlay stage."""

    def setup_method(self):
        self.crop = CropRegion(Point(20, 20), Point(80, 80))

    def test_shades_outside(self, split_buffer):
        """Should darken pixels outside the crop rectangle."""
        result = render(split_buffer, TransformState(), self.crop)

        r, g, b, a = result.get_pixel(5, 50)
        assert 100 < r < 160
        assert a == 255

    def test_inside_untouched(self, split_buffer):
        """Should leave the interior away from guides unchanged."""
        result = render(split_buffer, TransformState(), self.crop)

        assert result.get_pixel(35, 35) == RED
        assert result.get_pixel(65, 65) == BLUE

    def test_outline_and_handles(self, split_buffer):
        """Should draw a white outline and corner handles."""
        result = render(split_buffer, TransformState(), self.crop)

        assert result.get_pixel(20, 40) == WHITE
        assert result.get_pixel(17, 17) == WHITE
        assert result.get_pixel(82, 82) == WHITE

    def test_no_overlay_without_crop(self, split_buffer):
        """Should not shade anything when no crop region is given."""
        assert render(split_buffer, TransformState(), None).get_pixel(5, 50) == RED


class TestFilterStage:
    """Tests for the pixel-level filter stage."""

    def test_pixel_filter_applied(self, split_buffer):
        """Should apply pixel-level filters to the rendered frame."""
        state = TransformState(filter="invert")

        result = render(split_buffer, state)

        assert result.get_pixel(10, 50) == (0, 255, 255, 255)
        assert result.get_pixel(90, 50) == (255, 255, 0, 255)

    def test_filter_applies_to_border(self, split_buffer):
        """Should filter the border along with the image."""
        state = TransformState(filter="grayscale")
        state.set_border_width(2)

        result = render(split_buffer, state)

        r, g, b, _ = result.get_pixel(50, 0)
        assert r == g == b

    def test_display_filter_not_rendered(self, split_buffer):
        """Should leave display-level filters out of render()."""
        state = TransformState(filter="hue-rotate")

        rendered = render(split_buffer, state)

        assert rendered == split_buffer
        assert display_frame(rendered, state) != rendered

    def test_display_frame_passthrough(self, split_buffer):
        """Should return the frame as-is without a display filter."""
        state = TransformState(filter="sepia")

        frame = render(split_buffer, state)

        assert display_frame(frame, state) is frame

    def test_render_request(self, split_buffer):
        """Should render an explicit request the same as render()."""
        state = TransformState(rotation_degrees=90)

        assert render_request(RenderRequest(split_buffer, state)) == render(split_buffer, state)

    def test_render_rejects_non_buffer(self):
        """Should raise TypeError for non-buffers."""
        with pytest.raises(TypeError):
            render("image.png", TransformState())
