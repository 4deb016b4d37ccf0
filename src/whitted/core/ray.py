"""Ray data structure.

A ray is a half-line ``origin + t * direction``. The direction is not
required to be unit length: transforming a ray into object space keeps the
scaled direction, so the ``t`` values found in object space are directly
usable in world space.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.errors import InvalidOperandError
from src.whitted.core.matrix import Matrix
from src.whitted.core.tuples import Tuple


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with a point origin and a vector direction.

    Attributes:
        origin: Start point (w = 1).
        direction: Travel direction (w = 0), not necessarily normalized.
    """

    origin: Tuple
    direction: Tuple

    def __post_init__(self) -> None:
        if not self.origin.is_point():
            raise InvalidOperandError(f"Ray origin must be a point, got {self.origin!r}")
        if not self.direction.is_vector():
            raise InvalidOperandError(
                f"Ray direction must be a vector, got {self.direction!r}"
            )

    def position(self, t: float) -> Tuple:
        """Return the point at distance ``t`` along the ray."""
        return self.origin + self.direction * t

    def transform(self, matrix: Matrix) -> Ray:
        """Return a new ray with origin and direction multiplied by ``matrix``."""
        return Ray(matrix @ self.origin, matrix @ self.direction)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ray):
            return NotImplemented
        return self.origin == other.origin and self.direction == other.direction

    __hash__ = None  # type: ignore[assignment]
