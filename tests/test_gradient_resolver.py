"""
Unit tests for gradient_resolver.

Tests cover:
- Color parsing, including hsla()
- Gradient descriptor parsing and fallback
- Gradient line geometry
- Paint rule resolution and sampling
"""

import pytest

from IC_Libs.ImageEditingLib.editing_errors import GradientParseError
from IC_Libs.ImageEditingLib.gradient_resolver import (
    FALLBACK_GRADIENT,
    GradientSpec,
    LinearGradientPaint,
    SolidPaint,
    gradient_endpoints,
    parse_color,
    parse_gradient,
    resolve_gradient,
    resolve_paint,
    stop_offsets,
)
from IC_Libs.constants import GRADIENT_PRESETS


class TestParseColor:
    """Tests for parse_color."""

    def test_hex(self):
        """Should resolve hex colors as opaque RGBA."""
        assert parse_color("#8b5cf6") == (139, 92, 246, 255)

    def test_named(self):
        """Should resolve CSS color names."""
        assert parse_color("white") == (255, 255, 255, 255)

    def test_hsla(self):
        """Should resolve hsla() with fractional alpha."""
        assert parse_color("hsla(0, 100%, 50%, 0.5)") == (255, 0, 0, 128)

    def test_hsla_opaque(self):
        """Should resolve hsla() with alpha 1 as opaque."""
        assert parse_color("hsla(120, 100%, 50%, 1)")[3] == 255

    def test_unresolvable(self):
        """Should raise GradientParseError for unknown colors."""
        with pytest.raises(GradientParseError):
            parse_color("not-a-color")


class TestParseGradient:
    """Tests for the gradient descriptor parser."""

    def test_empty_means_solid(self):
        """Should return None for empty descriptors."""
        assert parse_gradient("") is None
        assert parse_gradient("   ") is None
        assert parse_gradient(None) is None

    def test_edge_direction(self):
        """Should parse 'to <edge>' directions and colors."""
        spec = parse_gradient("linear-gradient(to right, #9b87f5, #1EAEDB)")

        assert spec == GradientSpec(stops=("#9b87f5", "#1EAEDB"), direction="right")

    def test_angle_direction_with_stop_positions(self):
        """Should parse degree angles and drop stop positions."""
        spec = parse_gradient(GRADIENT_PRESETS["Nature"])

        assert spec.direction == 90.0
        assert spec.stops == ("hsla(139, 70%, 75%, 1)", "hsla(63, 90%, 76%, 1)")

    def test_many_stops(self):
        """Should keep every stop in order."""
        spec = parse_gradient(GRADIENT_PRESETS["Rainbow"])

        assert len(spec.stops) == 7
        assert spec.stops[0] == "#ff2400"
        assert spec.stops[-1] == "#2b1de8"

    def test_missing_direction_is_horizontal(self):
        """Should treat a leading color as a stop and default to horizontal."""
        spec = parse_gradient("linear-gradient(#ff0000, #0000ff)")

        assert spec.direction == "right"
        assert spec.stops == ("#ff0000", "#0000ff")

    def test_leading_stop_with_position(self):
        """Should keep a positioned leading color as a stop."""
        spec = parse_gradient("linear-gradient(#ff0000 0%, #0000ff 100%)")

        assert spec.stops == ("#ff0000", "#0000ff")

    @pytest.mark.parametrize("token", ["0.25turn", "1rad", "45grad"])
    def test_unknown_direction_is_dropped(self, token):
        """Should treat an unrecognized leading token as a horizontal direction."""
        spec = parse_gradient(f"linear-gradient({token}, #000000, #ffffff)")

        assert spec.direction == "right"
        assert spec.stops == ("#000000", "#ffffff")

    def test_unknown_direction_still_paints_gradient(self):
        """Should resolve to a black-to-white gradient, not the solid color."""
        spec = parse_gradient("linear-gradient(0.25turn, #000000, #ffffff)")

        paint = resolve_paint("#ff0000", spec, 100, 100)

        assert isinstance(paint, LinearGradientPaint)
        assert paint.color_at(0, 0) == (0, 0, 0, 255)
        assert paint.color_at(100, 0) == (255, 255, 255, 255)

    def test_not_a_gradient_uses_fallback(self):
        """Should return the fallback gradient for other syntax."""
        assert parse_gradient("radial-gradient(red, blue)") == FALLBACK_GRADIENT
        assert parse_gradient("red") == FALLBACK_GRADIENT

    def test_malformed_uses_fallback(self):
        """Should return the fallback gradient for empty parts."""
        assert parse_gradient("linear-gradient(to right, , #fff)") == FALLBACK_GRADIENT

    def test_presets_resolve(self):
        """Should parse and resolve every built-in preset."""
        for descriptor in GRADIENT_PRESETS.values():
            if not descriptor:
                continue
            spec = parse_gradient(descriptor)
            assert len(spec.stops) >= 2
            assert isinstance(resolve_gradient(spec, 100, 100), LinearGradientPaint)


class TestGradientGeometry:
    """Tests for gradient_endpoints and stop_offsets."""

    def test_right_is_horizontal(self):
        """Should span the full width."""
        assert gradient_endpoints("right", 100, 50) == ((0.0, 0.0), (100.0, 0.0))

    def test_bottom_is_vertical(self):
        """Should span the full height."""
        assert gradient_endpoints("bottom", 100, 50) == ((0.0, 0.0), (0.0, 50.0))

    def test_unknown_keyword_is_horizontal(self):
        """Should default to horizontal."""
        assert gradient_endpoints("top", 100, 50) == ((0.0, 0.0), (100.0, 0.0))

    def test_angle_through_center(self):
        """Should run through the center along (cos, sin) of the angle."""
        start, end = gradient_endpoints(0.0, 100, 50)

        assert start == pytest.approx((0.0, 25.0))
        assert end == pytest.approx((100.0, 25.0))

    def test_angle_ninety(self):
        """Should run vertically for 90 degrees."""
        start, end = gradient_endpoints(90.0, 100, 50)

        assert start == pytest.approx((50.0, 0.0), abs=1e-9)
        assert end == pytest.approx((50.0, 50.0), abs=1e-9)

    def test_stop_offsets(self):
        """Should space stops evenly from 0 to 1."""
        assert stop_offsets(2) == [0.0, 1.0]
        assert stop_offsets(3) == [0.0, 0.5, 1.0]
        assert stop_offsets(5) == [0.0, 0.25, 0.5, 0.75, 1.0]


class TestResolveGradient:
    """Tests for paint rule resolution."""

    def test_black_to_white(self):
        """Should interpolate from the first stop to the last."""
        paint = resolve_gradient(parse_gradient("linear-gradient(to right, #000000, #ffffff)"), 100, 100)

        assert paint.color_at(0, 0) == (0, 0, 0, 255)
        assert paint.color_at(100, 0) == (255, 255, 255, 255)
        assert paint.color_at(50, 0) == (128, 128, 128, 255)

    def test_clamps_outside_line(self):
        """Should clamp to the end colors beyond the gradient line."""
        paint = resolve_gradient(parse_gradient("linear-gradient(to right, #000000, #ffffff)"), 100, 100)

        assert paint.color_at(-20, 0) == (0, 0, 0, 255)
        assert paint.color_at(150, 0) == (255, 255, 255, 255)

    def test_single_stop_uses_fallback(self):
        """Should resolve specs with fewer than two stops to the fallback."""
        paint = resolve_gradient(GradientSpec(stops=("#ff0000",)), 100, 100)

        assert paint.color_at(0, 0) == parse_color("#9b87f5")
        assert paint.color_at(100, 0) == parse_color("#1EAEDB")

    def test_bad_color_raises(self):
        """Should raise GradientParseError for unresolvable stops."""
        with pytest.raises(GradientParseError):
            resolve_gradient(GradientSpec(stops=("#000000", "nope")), 100, 100)

    def test_render_shape(self):
        """Should render an RGBA array of the requested size."""
        paint = resolve_gradient(FALLBACK_GRADIENT, 40, 20)

        pixels = paint.render(40, 20)

        assert pixels.shape == (20, 40, 4)
        assert tuple(pixels[0, 0]) != tuple(pixels[0, 39])


class TestResolvePaint:
    """Tests for resolve_paint."""

    def test_solid_without_gradient(self):
        """Should return solid paint when no gradient is set."""
        paint = resolve_paint("#ff0000", None, 10, 10)

        assert paint == SolidPaint((255, 0, 0, 255))
        assert paint.color_at(3, 3) == (255, 0, 0, 255)

    def test_gradient(self):
        """Should return gradient paint when a gradient is set."""
        paint = resolve_paint("#ff0000", FALLBACK_GRADIENT, 10, 10)

        assert isinstance(paint, LinearGradientPaint)

    def test_unresolvable_gradient_falls_back_to_solid(self):
        """Should use the solid color when gradient colors cannot be resolved."""
        paint = resolve_paint("#00ff00", GradientSpec(stops=("bogus", "#000000")), 10, 10)

        assert paint == SolidPaint((0, 255, 0, 255))
