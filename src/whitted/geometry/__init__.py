"""Geometry module for shape primitives and intersections.

Primitives are defined in object space and placed with a transform:

Components:
    shape: Abstract base handling transforms, parents and normals
    sphere: Unit sphere at the origin
    plane: Infinite xz plane
    cube: Axis-aligned cube from -1 to 1
    cylinder: Truncatable, cappable unit cylinder around y
    cone: Truncatable, cappable double cone around y
    group: Composite shape with a shared transform
    intersection: Intersection records, hit selection and shading precomputation
"""

from .cone import Cone
from .cube import Cube
from .cylinder import Cylinder
from .group import Group
from .intersection import (
    Computations,
    Intersection,
    Intersections,
    hit,
    intersect,
    prepare_computations,
)
from .plane import Plane
from .shape import Shape
from .sphere import Sphere

__all__ = [
    "Shape",
    "Sphere",
    "Plane",
    "Cube",
    "Cylinder",
    "Cone",
    "Group",
    "Intersection",
    "Intersections",
    "Computations",
    "hit",
    "intersect",
    "prepare_computations",
]
