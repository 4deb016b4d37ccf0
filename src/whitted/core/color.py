"""RGB colors in linear space.

Colors are unclamped: lighting freely produces components above 1.0, and
only the export step maps them into a displayable range.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.whitted.core.config import get_config


class Color:
    """A linear RGB color backed by a float64 NumPy array.

    Supports addition, subtraction, scaling by a number and the Hadamard
    (component-wise) product with another color.
    """

    __slots__ = ("_data",)

    def __init__(self, red: float, green: float, blue: float) -> None:
        self._data = np.array((red, green, blue), dtype=np.float64)

    @classmethod
    def from_array(cls, data: npt.ArrayLike) -> Color:
        array = np.asarray(data, dtype=np.float64)
        if array.shape != (3,):
            raise ValueError(f"Color requires 3 components, got shape {array.shape}")
        result = cls.__new__(cls)
        result._data = array
        return result

    @classmethod
    def from_hex(cls, value: int) -> Color:
        """Create a color from a 24-bit ``0xRRGGBB`` integer."""
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"Hex color out of range: {value:#x}")
        return cls(
            ((value >> 16) & 0xFF) / 255.0,
            ((value >> 8) & 0xFF) / 255.0,
            (value & 0xFF) / 255.0,
        )

    @property
    def red(self) -> float:
        return float(self._data[0])

    @property
    def green(self) -> float:
        return float(self._data[1])

    @property
    def blue(self) -> float:
        return float(self._data[2])

    def to_numpy(self) -> npt.NDArray[np.float64]:
        return self._data.copy()

    def __iter__(self):
        return iter(self._data.tolist())

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color.from_array(self._data + other._data)

    def __sub__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color.from_array(self._data - other._data)

    def __mul__(self, other: Color | float) -> Color:
        if isinstance(other, Color):
            return Color.from_array(self._data * other._data)
        return Color.from_array(self._data * float(other))

    def __rmul__(self, scalar: float) -> Color:
        return Color.from_array(self._data * float(scalar))

    def __truediv__(self, scalar: float) -> Color:
        return Color.from_array(self._data / float(scalar))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return bool(np.all(np.abs(self._data - other._data) < get_config().epsilon))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        r, g, b = self._data.tolist()
        return f"Color({r:.5g}, {g:.5g}, {b:.5g})"


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)
