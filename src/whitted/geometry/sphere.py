"""Unit sphere primitive.

The sphere is centered at the object-space origin with radius 1. Scale,
translate or shear it with the shape transform to get any ellipsoid.

Ray-sphere intersection solves ``|O + tD|^2 = 1``:

    a = D.D
    b = 2 (D.O)
    c = O.O - 1
    discriminant = b^2 - 4ac

A negative discriminant means a miss. Otherwise both roots are returned in
ascending order; a tangent ray yields the same root twice.
"""

from __future__ import annotations

import math

from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Tuple, vector
from src.whitted.geometry.intersection import Intersection
from src.whitted.geometry.shape import Shape


class Sphere(Shape):
    """Unit sphere at the object-space origin."""

    def local_intersect(self, local_ray: Ray) -> list[Intersection]:
        ox, oy, oz = local_ray.origin.x, local_ray.origin.y, local_ray.origin.z
        dx, dy, dz = local_ray.direction.x, local_ray.direction.y, local_ray.direction.z

        a = dx * dx + dy * dy + dz * dz
        b = 2.0 * (dx * ox + dy * oy + dz * oz)
        c = ox * ox + oy * oy + oz * oz - 1.0

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return []

        sqrt_d = math.sqrt(discriminant)
        t1 = (-b - sqrt_d) / (2.0 * a)
        t2 = (-b + sqrt_d) / (2.0 * a)
        return [Intersection(t1, self), Intersection(t2, self)]

    def local_normal_at(self, local_point: Tuple) -> Tuple:
        return vector(local_point.x, local_point.y, local_point.z)
