"""Phong surface material.

A material describes how a surface responds to light: its base color (or a
pattern that replaces it), the Phong ambient/diffuse/specular weights, and
the reflectivity, transparency and refractive index used for secondary rays.

Materials are frozen; derive variants with ``dataclasses.replace``:

    >>> from dataclasses import replace
    >>> from src.whitted.materials.material import Material, GLASS
    >>> glass = replace(Material(), transparency=1.0, refractive_index=GLASS)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from src.whitted.core.color import Color

if TYPE_CHECKING:
    from src.whitted.materials.patterns import Pattern

# =============================================================================
# Refractive indices of common media
# =============================================================================

VACUUM = 1.0
AIR = 1.00029
WATER = 1.333
GLASS = 1.52
DIAMOND = 2.417


@dataclass(frozen=True, eq=False)
class Material:
    """Phong material with reflection and refraction properties.

    Attributes:
        color: Base surface color, used when no pattern is set.
        ambient: Ambient weight, >= 0.
        diffuse: Diffuse weight, >= 0.
        specular: Specular weight, >= 0.
        shininess: Specular exponent, > 0.
        reflectivity: Mirror reflection weight in [0, 1].
        transparency: Refraction weight in [0, 1].
        refractive_index: Index of refraction, > 0.
        pattern: Optional pattern that overrides ``color``.
    """

    color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflectivity: float = 0.0
    transparency: float = 0.0
    refractive_index: float = VACUUM
    pattern: Pattern | None = None

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"Material {name} must be non-negative, got {value}")
        if self.shininess <= 0.0:
            raise ValueError(f"Material shininess must be positive, got {self.shininess}")
        for name in ("reflectivity", "transparency"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Material {name} must be in [0, 1], got {value}")
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Material refractive_index must be positive, got {self.refractive_index}"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Material):
            return NotImplemented
        return (
            self.color == other.color
            and self.ambient == other.ambient
            and self.diffuse == other.diffuse
            and self.specular == other.specular
            and self.shininess == other.shininess
            and self.reflectivity == other.reflectivity
            and self.transparency == other.transparency
            and self.refractive_index == other.refractive_index
            and self.pattern is other.pattern
        )

    __hash__ = None  # type: ignore[assignment]


def glass_material(refractive_index: float = GLASS, **overrides) -> Material:
    """Create a dark, highly transparent and reflective glass material."""
    params = dict(
        color=Color(0.0, 0.0, 0.0),
        diffuse=0.1,
        specular=1.0,
        shininess=300.0,
        reflectivity=0.9,
        transparency=0.9,
        refractive_index=refractive_index,
    )
    params.update(overrides)
    return Material(**params)
