"""Rectangular pixel grid that the renderer writes into.

The canvas stores linear, unclamped colors in a ``(height, width, 3)``
float64 array, row-major with row 0 at the top of the image. Pixels can be
addressed either as ``canvas[row, col]`` or as ``pixel_at(x, y)``, where
``x`` is the column and ``y`` the row.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.whitted.core.color import Color


class Canvas:
    """A width x height grid of colors, initially black."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self._pixels = np.zeros((self.height, self.width, 3), dtype=np.float64)

    @classmethod
    def from_array(cls, image: npt.ArrayLike) -> Canvas:
        """Create a canvas from an existing ``(height, width, 3)`` array."""
        array = np.asarray(image, dtype=np.float64)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (H, W, 3), got {array.shape}")
        canvas = cls(array.shape[1], array.shape[0])
        canvas._pixels[...] = array
        return canvas

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} canvas"
            )

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        """Write ``color`` at column ``x``, row ``y``."""
        self._check_bounds(x, y)
        self._pixels[y, x] = color.to_numpy()

    def pixel_at(self, x: int, y: int) -> Color:
        """Read the color at column ``x``, row ``y``."""
        self._check_bounds(x, y)
        return Color.from_array(self._pixels[y, x].copy())

    def __getitem__(self, index: tuple[int, int]) -> Color:
        row, col = index
        return self.pixel_at(col, row)

    def __setitem__(self, index: tuple[int, int], color: Color) -> None:
        row, col = index
        self.write_pixel(col, row, color)

    def write_row(self, y: int, colors: npt.ArrayLike) -> None:
        """Write a full row of ``(width, 3)`` color values."""
        row = np.asarray(colors, dtype=np.float64)
        if row.shape != (self.width, 3):
            raise ValueError(f"Row must have shape ({self.width}, 3), got {row.shape}")
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} is outside the canvas height {self.height}")
        self._pixels[y] = row

    def fill(self, color: Color) -> None:
        self._pixels[...] = color.to_numpy()

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a read-only view of the ``(height, width, 3)`` pixel array."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"
