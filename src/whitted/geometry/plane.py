"""Infinite plane primitive, the object-space xz plane (y = 0)."""

from __future__ import annotations

from src.whitted.core.config import get_config
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Tuple, vector
from src.whitted.geometry.intersection import Intersection
from src.whitted.geometry.shape import Shape


class Plane(Shape):
    """Infinite xz plane with normal +y everywhere."""

    def local_intersect(self, local_ray: Ray) -> list[Intersection]:
        dy = local_ray.direction.y
        # Parallel or coplanar rays never hit
        if abs(dy) < get_config().epsilon:
            return []
        t = -local_ray.origin.y / dy
        return [Intersection(t, self)]

    def local_normal_at(self, local_point: Tuple) -> Tuple:
        return vector(0.0, 1.0, 0.0)
