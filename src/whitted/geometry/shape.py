"""Abstract base class for every renderable shape.

A shape lives in its own object space. Its ``transform`` maps object space
into the space of its parent (the world, or the enclosing ``Group``). The
inverse and the normal matrix (inverse-transpose) are computed as soon as a
transform is assigned, so a singular transform is rejected while the scene is
being built rather than in the middle of a render.

Subclasses implement only the object-space routines ``local_intersect`` and
``local_normal_at``; this class handles the space conversions.
"""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.tuples import Tuple, vector
from src.whitted.geometry.intersection import Intersection, Intersections
from src.whitted.materials.material import Material

if TYPE_CHECKING:
    from src.whitted.core.ray import Ray
    from src.whitted.geometry.group import Group


class Shape(ABC):
    """Base class for spheres, planes, cubes, cylinders, cones and groups.

    Args:
        transform: Object-to-parent transform. Must be invertible.
        material: Surface material; defaults to ``Material()``.

    Raises:
        NonInvertibleMatrixError: If ``transform`` is singular.
    """

    def __init__(self, transform: Matrix = IDENTITY, material: Material | None = None) -> None:
        self._parent: weakref.ReferenceType[Group] | None = None
        self.transform = transform
        self.material = material if material is not None else Material()

    # -------------------------------------------------------------------------
    # Transform
    # -------------------------------------------------------------------------

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, matrix: Matrix) -> None:
        inverse = matrix.inverse()
        self._transform = matrix
        self._inverse = inverse
        self._normal_matrix = inverse.transpose()

    @property
    def inverse(self) -> Matrix:
        return self._inverse

    @property
    def normal_matrix(self) -> Matrix:
        return self._normal_matrix

    # -------------------------------------------------------------------------
    # Scene graph
    # -------------------------------------------------------------------------

    @property
    def parent(self) -> Group | None:
        return self._parent() if self._parent is not None else None

    def _set_parent(self, group: Group | None) -> None:
        self._parent = weakref.ref(group) if group is not None else None

    def world_inverse(self) -> Matrix:
        """Return the composite world-to-object matrix through every parent."""
        parent = self.parent
        if parent is None:
            return self._inverse
        return self._inverse @ parent.world_inverse()

    def world_to_object(self, world_point: Tuple) -> Tuple:
        parent = self.parent
        if parent is not None:
            world_point = parent.world_to_object(world_point)
        return self._inverse @ world_point

    def normal_to_world(self, object_normal: Tuple) -> Tuple:
        normal = self._normal_matrix @ object_normal
        normal = vector(normal.x, normal.y, normal.z).normalize()
        parent = self.parent
        if parent is not None:
            normal = parent.normal_to_world(normal)
        return normal

    # -------------------------------------------------------------------------
    # Intersection and normals
    # -------------------------------------------------------------------------

    def intersect(self, ray: Ray) -> Intersections:
        """Intersect a ray given in the parent's space.

        The ray is moved into object space without renormalizing its
        direction, so the returned ``t`` values apply to the original ray.
        """
        return Intersections(self.local_intersect(ray.transform(self._inverse)))

    def normal_at(self, world_point: Tuple) -> Tuple:
        """Return the unit world-space normal at ``world_point``."""
        local_point = self.world_to_object(world_point)
        return self.normal_to_world(self.local_normal_at(local_point))

    @abstractmethod
    def local_intersect(self, local_ray: Ray) -> list[Intersection]:
        """Intersect an object-space ray; results need not be sorted."""

    @abstractmethod
    def local_normal_at(self, local_point: Tuple) -> Tuple:
        """Return the object-space normal at an object-space point."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(transform={self._transform!r})"
