"""Light sources."""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.color import Color
from src.whitted.core.errors import InvalidOperandError
from src.whitted.core.tuples import Tuple


@dataclass(frozen=True, eq=False)
class PointLight:
    """An infinitely small light radiating equally in every direction.

    Attributes:
        position: World-space position (a point).
        intensity: Emitted color and brightness.
    """

    position: Tuple
    intensity: Color

    def __post_init__(self) -> None:
        if not self.position.is_point():
            raise InvalidOperandError(
                f"Light position must be a point, got {self.position!r}"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointLight):
            return NotImplemented
        return self.position == other.position and self.intensity == other.intensity

    __hash__ = None  # type: ignore[assignment]
