"""Homogeneous 4-component tuples for points and vectors.

A tuple is a point when ``w == 1`` and a vector when ``w == 0``. Arithmetic
is defined for any pair of tuples; the ``w`` component tracks the meaning of
the result (point - point is a vector, point + vector is a point). Nothing
stops a caller from adding two points, which yields ``w == 2``.

Equality is approximate, using the configured epsilon, so tuples are not
hashable.

Example:
    >>> from src.whitted.core.tuples import point, vector
    >>> p = point(3, 2, 1)
    >>> v = vector(5, 6, 7)
    >>> (p - v).is_point()
    True
    >>> vector(1, 2, 3).magnitude()
    3.7416573867739413
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from src.whitted.core.config import get_config
from src.whitted.core.errors import DegenerateVectorError, InvalidOperandError


class Tuple:
    """A homogeneous (x, y, z, w) tuple backed by a float64 NumPy array."""

    __slots__ = ("_data",)

    def __init__(self, x: float, y: float, z: float, w: float) -> None:
        self._data = np.array((x, y, z, w), dtype=np.float64)

    @classmethod
    def from_array(cls, data: npt.ArrayLike) -> Tuple:
        """Wrap a length-4 array without going through the component constructor."""
        array = np.asarray(data, dtype=np.float64)
        if array.shape != (4,):
            raise ValueError(f"Tuple requires 4 components, got shape {array.shape}")
        result = cls.__new__(cls)
        result._data = array
        return result

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    @property
    def w(self) -> float:
        return float(self._data[3])

    def is_point(self) -> bool:
        return abs(self._data[3] - 1.0) < get_config().epsilon

    def is_vector(self) -> bool:
        return abs(self._data[3]) < get_config().epsilon

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a copy of the four components."""
        return self._data.copy()

    def __iter__(self):
        return iter(self._data.tolist())

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Tuple) -> Tuple:
        if not isinstance(other, Tuple):
            return NotImplemented
        return Tuple.from_array(self._data + other._data)

    def __sub__(self, other: Tuple) -> Tuple:
        if not isinstance(other, Tuple):
            return NotImplemented
        return Tuple.from_array(self._data - other._data)

    def __neg__(self) -> Tuple:
        return Tuple.from_array(-self._data)

    def __mul__(self, scalar: float) -> Tuple:
        if isinstance(scalar, Tuple):
            return NotImplemented
        return Tuple.from_array(self._data * float(scalar))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Tuple:
        return Tuple.from_array(self._data / float(scalar))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return bool(np.all(np.abs(self._data - other._data) < get_config().epsilon))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        x, y, z, w = self._data.tolist()
        if w == 1.0:
            return f"point({x:g}, {y:g}, {z:g})"
        if w == 0.0:
            return f"vector({x:g}, {y:g}, {z:g})"
        return f"Tuple({x:g}, {y:g}, {z:g}, {w:g})"

    # -------------------------------------------------------------------------
    # Vector operations
    # -------------------------------------------------------------------------

    def magnitude(self) -> float:
        return math.sqrt(float(np.dot(self._data, self._data)))

    def normalize(self) -> Tuple:
        """Scale the tuple to unit length.

        Raises:
            DegenerateVectorError: If the magnitude is below epsilon.
        """
        length = self.magnitude()
        if length < get_config().epsilon:
            raise DegenerateVectorError(f"Cannot normalize zero-length tuple {self!r}")
        return Tuple.from_array(self._data / length)

    def dot(self, other: Tuple) -> float:
        return float(np.dot(self._data, other._data))

    def cross(self, other: Tuple) -> Tuple:
        """Cross product of two vectors.

        Raises:
            InvalidOperandError: If either operand is not a vector.
        """
        if not (self.is_vector() and other.is_vector()):
            raise InvalidOperandError(
                f"Cross product is only defined for vectors, got {self!r} x {other!r}"
            )
        x, y, z = np.cross(self._data[:3], other._data[:3]).tolist()
        return vector(x, y, z)

    def reflect(self, normal: Tuple) -> Tuple:
        """Reflect this vector about ``normal``: in - normal * 2 * dot(in, normal)."""
        return self - normal * (2.0 * self.dot(normal))


# =============================================================================
# Constructors and functional forms
# =============================================================================


def point(x: float, y: float, z: float) -> Tuple:
    """Create a point (w = 1)."""
    return Tuple(x, y, z, 1.0)


def vector(x: float, y: float, z: float) -> Tuple:
    """Create a vector (w = 0)."""
    return Tuple(x, y, z, 0.0)


def magnitude(v: Tuple) -> float:
    return v.magnitude()


def normalize(v: Tuple) -> Tuple:
    return v.normalize()


def dot(a: Tuple, b: Tuple) -> float:
    return a.dot(b)


def cross(a: Tuple, b: Tuple) -> Tuple:
    return a.cross(b)


def reflect(incident: Tuple, normal: Tuple) -> Tuple:
    return incident.reflect(normal)


ORIGIN = point(0.0, 0.0, 0.0)
