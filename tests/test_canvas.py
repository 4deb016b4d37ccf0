"""Tests for the canvas pixel grid."""

import numpy as np
import pytest


class TestCanvas:
    """Test canvas creation and pixel access."""

    def test_initially_black(self):
        """Test that a new canvas is all black."""
        from src.whitted.core.canvas import Canvas

        c = Canvas(10, 20)

        assert c.width == 10
        assert c.height == 20
        assert c.to_numpy().shape == (20, 10, 3)
        assert np.all(c.to_numpy() == 0.0)

    def test_invalid_dimensions(self):
        """Test that non-positive dimensions raise ValueError."""
        from src.whitted.core.canvas import Canvas

        with pytest.raises(ValueError):
            Canvas(0, 10)
        with pytest.raises(ValueError):
            Canvas(10, -1)

    def test_write_and_read_pixel(self):
        """Test writing a pixel and reading it back."""
        from src.whitted.core.canvas import Canvas
        from src.whitted.core.color import RED

        c = Canvas(10, 20)
        c.write_pixel(2, 3, RED)

        assert c.pixel_at(2, 3) == RED
        assert c[3, 2] == RED

    def test_setitem_uses_row_column(self):
        """Test that canvas[row, col] addresses the same pixel as pixel_at(col, row)."""
        from src.whitted.core.canvas import Canvas
        from src.whitted.core.color import Color

        c = Canvas(4, 3)
        c[2, 1] = Color(0.1, 0.2, 0.3)

        assert c.pixel_at(1, 2) == Color(0.1, 0.2, 0.3)

    def test_out_of_bounds(self):
        """Test that out-of-range pixels raise IndexError."""
        from src.whitted.core.canvas import Canvas
        from src.whitted.core.color import RED

        c = Canvas(5, 5)

        with pytest.raises(IndexError):
            c.write_pixel(5, 0, RED)
        with pytest.raises(IndexError):
            c.pixel_at(0, -1)

    def test_colors_not_clamped(self):
        """Test that the canvas stores values outside [0, 1]."""
        from src.whitted.core.canvas import Canvas
        from src.whitted.core.color import Color

        c = Canvas(1, 1)
        c.write_pixel(0, 0, Color(1.5, -0.5, 0))

        assert c.pixel_at(0, 0) == Color(1.5, -0.5, 0)

    def test_write_row(self):
        """Test writing a full row of colors."""
        from src.whitted.core.canvas import Canvas
        from src.whitted.core.color import Color

        c = Canvas(3, 2)
        c.write_row(1, [[1, 0, 0], [0, 1, 0], [0, 0, 1]])

        assert c.pixel_at(1, 1) == Color(0, 1, 0)
        with pytest.raises(ValueError):
            c.write_row(0, [[1, 0, 0]])

    def test_fill(self):
        """Test filling every pixel."""
        from src.whitted.core.canvas import Canvas
        from src.whitted.core.color import Color

        c = Canvas(3, 2)
        c.fill(Color(1, 0.8, 0.6))

        assert c.pixel_at(2, 1) == Color(1, 0.8, 0.6)

    def test_to_numpy_is_read_only(self):
        """Test that the exported array cannot be written to."""
        from src.whitted.core.canvas import Canvas

        image = Canvas(2, 2).to_numpy()

        with pytest.raises(ValueError):
            image[0, 0, 0] = 1.0

    def test_from_array(self):
        """Test building a canvas from an (H, W, 3) array."""
        from src.whitted.core.canvas import Canvas
        from src.whitted.core.color import Color

        image = np.zeros((2, 3, 3))
        image[1, 2] = (0.25, 0.5, 0.75)
        c = Canvas.from_array(image)

        assert (c.width, c.height) == (3, 2)
        assert c.pixel_at(2, 1) == Color(0.25, 0.5, 0.75)

        with pytest.raises(ValueError):
            Canvas.from_array(np.zeros((2, 3)))
