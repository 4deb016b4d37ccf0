"""Materials module for surface appearance.

Components:
    material: Phong material with reflection and refraction parameters
    patterns: Procedural stripe, gradient, ring, checkers and position patterns
    lighting: Phong reflection model for a point light
"""

from .lighting import lighting, surface_color
from .material import AIR, DIAMOND, GLASS, VACUUM, WATER, Material, glass_material
from .patterns import (
    CheckersPattern,
    GradientPattern,
    Pattern,
    PositionPattern,
    RingPattern,
    StripePattern,
)

__all__ = [
    "Material",
    "glass_material",
    "VACUUM",
    "AIR",
    "WATER",
    "GLASS",
    "DIAMOND",
    "Pattern",
    "StripePattern",
    "GradientPattern",
    "RingPattern",
    "CheckersPattern",
    "PositionPattern",
    "lighting",
    "surface_color",
]
