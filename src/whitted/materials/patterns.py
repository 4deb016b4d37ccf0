"""Procedural color patterns.

A pattern maps a point in pattern space to a color. Pattern space is reached
from world space in two steps: world to object (through every enclosing
group) and then object to pattern, via the pattern's own transform.

Patterns:
    StripePattern: alternates two colors along x
    GradientPattern: blends linearly from one color to another along x
    RingPattern: concentric rings in the xz plane
    CheckersPattern: alternating 3D cubes
    PositionPattern: the pattern-space point itself as a color

Example:
    >>> from src.whitted.core.color import BLACK, WHITE
    >>> from src.whitted.core.tuples import point
    >>> from src.whitted.materials.patterns import StripePattern
    >>> StripePattern(WHITE, BLACK).pattern_at(point(1.5, 0, 0)) == BLACK
    True
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from src.whitted.core.color import Color
from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.tuples import Tuple

if TYPE_CHECKING:
    from src.whitted.geometry.shape import Shape


class Pattern(ABC):
    """Base class for patterns with their own transform.

    Raises:
        NonInvertibleMatrixError: If ``transform`` is singular.
    """

    def __init__(self, transform: Matrix = IDENTITY) -> None:
        self.transform = transform

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, matrix: Matrix) -> None:
        self._inverse = matrix.inverse()
        self._transform = matrix

    @property
    def inverse(self) -> Matrix:
        return self._inverse

    @abstractmethod
    def pattern_at(self, pattern_point: Tuple) -> Color:
        """Return the color at a pattern-space point."""

    def pattern_at_shape(self, shape: Shape, world_point: Tuple) -> Color:
        """Return the color at a world-space point on ``shape``."""
        object_point = shape.world_to_object(world_point)
        return self.pattern_at(self._inverse @ object_point)


class StripePattern(Pattern):
    """Stripes of ``a`` and ``b`` alternating every unit along x."""

    def __init__(self, a: Color, b: Color, transform: Matrix = IDENTITY) -> None:
        super().__init__(transform)
        self.a = a
        self.b = b

    def pattern_at(self, pattern_point: Tuple) -> Color:
        return self.a if math.floor(pattern_point.x) % 2 == 0 else self.b


class GradientPattern(Pattern):
    """Linear blend from ``a`` to ``b`` over each unit of x."""

    def __init__(self, a: Color, b: Color, transform: Matrix = IDENTITY) -> None:
        super().__init__(transform)
        self.a = a
        self.b = b

    def pattern_at(self, pattern_point: Tuple) -> Color:
        x = pattern_point.x
        fraction = x - math.floor(x)
        return self.a + (self.b - self.a) * fraction


class RingPattern(Pattern):
    """Concentric rings around the y axis alternating every unit of radius."""

    def __init__(self, a: Color, b: Color, transform: Matrix = IDENTITY) -> None:
        super().__init__(transform)
        self.a = a
        self.b = b

    def pattern_at(self, pattern_point: Tuple) -> Color:
        radius = math.hypot(pattern_point.x, pattern_point.z)
        return self.a if math.floor(radius) % 2 == 0 else self.b


class CheckersPattern(Pattern):
    """Unit cubes alternating between ``a`` and ``b`` in all three dimensions."""

    def __init__(self, a: Color, b: Color, transform: Matrix = IDENTITY) -> None:
        super().__init__(transform)
        self.a = a
        self.b = b

    def pattern_at(self, pattern_point: Tuple) -> Color:
        total = (
            math.floor(pattern_point.x)
            + math.floor(pattern_point.y)
            + math.floor(pattern_point.z)
        )
        return self.a if total % 2 == 0 else self.b


class PositionPattern(Pattern):
    """Debug pattern whose color is the pattern-space coordinate."""

    def pattern_at(self, pattern_point: Tuple) -> Color:
        return Color(pattern_point.x, pattern_point.y, pattern_point.z)
