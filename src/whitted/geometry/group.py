"""Composite shape that transforms a collection of children together.

A group owns its children. Each child keeps only a weak reference back to
its group, used to compose world-to-object transforms and normals. A shape
can belong to at most one group.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Tuple
from src.whitted.geometry.intersection import Intersection
from src.whitted.geometry.shape import Shape


class Group(Shape):
    """A transformable container of shapes.

    Args:
        children: Initial children, added in order.
        transform: Group-to-parent transform applied to every child.
    """

    def __init__(self, children: Iterable[Shape] = (), transform: Matrix = IDENTITY) -> None:
        super().__init__(transform)
        self._children: list[Shape] = []
        for child in children:
            self.add_child(child)

    @property
    def children(self) -> tuple[Shape, ...]:
        return tuple(self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self._children)

    def add_child(self, child: Shape) -> Shape:
        """Attach ``child`` to this group.

        Returns:
            The child, for chaining.

        Raises:
            ValueError: If the child already belongs to a group, or is this
                group or one of its ancestors.
        """
        if child.parent is not None:
            raise ValueError(f"{child!r} already belongs to a group")
        ancestor: Shape | None = self
        while ancestor is not None:
            if ancestor is child:
                raise ValueError("A group cannot contain itself")
            ancestor = ancestor.parent
        child._set_parent(self)
        self._children.append(child)
        return child

    def remove_child(self, child: Shape) -> None:
        """Detach ``child`` from this group.

        Raises:
            ValueError: If the child is not in this group.
        """
        for index, existing in enumerate(self._children):
            if existing is child:
                del self._children[index]
                child._set_parent(None)
                return
        raise ValueError(f"{child!r} is not a child of this group")

    def leaves(self) -> Iterator[Shape]:
        """Yield every non-group descendant, depth first."""
        for child in self._children:
            if isinstance(child, Group):
                yield from child.leaves()
            else:
                yield child

    def local_intersect(self, local_ray: Ray) -> list[Intersection]:
        xs: list[Intersection] = []
        for child in self._children:
            xs.extend(child.intersect(local_ray))
        return xs

    def local_normal_at(self, local_point: Tuple) -> Tuple:
        # Hits always report the leaf shape, never the group
        raise TypeError("Groups have no surface; ask the child shape for its normal")

    def __repr__(self) -> str:
        return f"Group({len(self._children)} children, transform={self.transform!r})"
