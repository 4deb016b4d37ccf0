"""Tests for linear RGB colors."""

import pytest


class TestColor:
    """Test color construction and arithmetic."""

    def test_components(self):
        """Test that colors expose red, green and blue."""
        from src.whitted.core.color import Color

        c = Color(-0.5, 0.4, 1.7)

        assert (c.red, c.green, c.blue) == (-0.5, 0.4, 1.7)

    def test_add(self):
        """Test adding two colors."""
        from src.whitted.core.color import Color

        assert Color(0.9, 0.6, 0.75) + Color(0.7, 0.1, 0.25) == Color(1.6, 0.7, 1.0)

    def test_subtract(self):
        """Test subtracting two colors."""
        from src.whitted.core.color import Color

        assert Color(0.9, 0.6, 0.75) - Color(0.7, 0.1, 0.25) == Color(0.2, 0.5, 0.5)

    def test_multiply_by_scalar(self):
        """Test scaling a color."""
        from src.whitted.core.color import Color

        assert Color(0.2, 0.3, 0.4) * 2 == Color(0.4, 0.6, 0.8)
        assert 2 * Color(0.2, 0.3, 0.4) == Color(0.4, 0.6, 0.8)

    def test_hadamard_product(self):
        """Test component-wise multiplication of two colors."""
        from src.whitted.core.color import Color

        assert Color(1, 0.2, 0.4) * Color(0.9, 1, 0.1) == Color(0.9, 0.2, 0.04)

    def test_values_are_not_clamped(self):
        """Test that colors can exceed 1.0."""
        from src.whitted.core.color import WHITE

        assert (WHITE * 3).red == 3.0

    def test_from_hex(self):
        """Test parsing a 24-bit hex color."""
        from src.whitted.core.color import Color

        c = Color.from_hex(0xFF8000)

        assert c == Color(1.0, 128 / 255, 0.0)

    def test_from_hex_out_of_range(self):
        """Test that values above 0xFFFFFF are rejected."""
        from src.whitted.core.color import Color

        with pytest.raises(ValueError):
            Color.from_hex(0x1000000)

    def test_named_constants(self):
        """Test the named color constants."""
        from src.whitted.core.color import BLACK, BLUE, GREEN, RED, WHITE, Color

        assert BLACK == Color(0, 0, 0)
        assert WHITE == Color(1, 1, 1)
        assert RED + GREEN + BLUE == WHITE
