"""Cylinder primitive of radius 1 around the object-space y axis.

The cylinder may be truncated to ``minimum < y < maximum`` (both exclusive)
and, when ``closed``, capped with unit disks at both ends. Caps are only
meaningful for finite bounds.
"""

from __future__ import annotations

import math

from src.whitted.core.config import get_config
from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Tuple, vector
from src.whitted.geometry.intersection import Intersection
from src.whitted.geometry.shape import Shape
from src.whitted.materials.material import Material


def check_cap(ray: Ray, t: float, radius: float) -> bool:
    """Return True if the ray at ``t`` lies within ``radius`` of the y axis."""
    x = ray.origin.x + t * ray.direction.x
    z = ray.origin.z + t * ray.direction.z
    return x * x + z * z <= radius * radius


class Cylinder(Shape):
    """Unit-radius cylinder along the y axis.

    Args:
        minimum: Lower y bound (exclusive), default unbounded.
        maximum: Upper y bound (exclusive), default unbounded.
        closed: Whether the ends are capped.
        transform: Object-to-parent transform.
        material: Surface material.

    Raises:
        ValueError: If ``minimum > maximum``.
    """

    def __init__(
        self,
        minimum: float = -math.inf,
        maximum: float = math.inf,
        closed: bool = False,
        transform: Matrix = IDENTITY,
        material: Material | None = None,
    ) -> None:
        if minimum > maximum:
            raise ValueError(f"Cylinder minimum {minimum} exceeds maximum {maximum}")
        super().__init__(transform, material)
        self.minimum = minimum
        self.maximum = maximum
        self.closed = closed

    def local_intersect(self, local_ray: Ray) -> list[Intersection]:
        ox, oy, oz = local_ray.origin.x, local_ray.origin.y, local_ray.origin.z
        dx, dy, dz = local_ray.direction.x, local_ray.direction.y, local_ray.direction.z
        xs: list[Intersection] = []

        a = dx * dx + dz * dz
        # Rays parallel to the axis can only hit the caps
        if a >= get_config().epsilon:
            b = 2.0 * (ox * dx + oz * dz)
            c = ox * ox + oz * oz - 1.0
            discriminant = b * b - 4.0 * a * c
            if discriminant < 0.0:
                return []

            sqrt_d = math.sqrt(discriminant)
            t0 = (-b - sqrt_d) / (2.0 * a)
            t1 = (-b + sqrt_d) / (2.0 * a)
            if t0 > t1:
                t0, t1 = t1, t0

            for t in (t0, t1):
                y = oy + t * dy
                if self.minimum < y < self.maximum:
                    xs.append(Intersection(t, self))

        self._intersect_caps(local_ray, xs)
        return xs

    def _intersect_caps(self, local_ray: Ray, xs: list[Intersection]) -> None:
        dy = local_ray.direction.y
        if not self.closed or abs(dy) < get_config().epsilon:
            return
        for bound in (self.minimum, self.maximum):
            t = (bound - local_ray.origin.y) / dy
            if check_cap(local_ray, t, 1.0):
                xs.append(Intersection(t, self))

    def local_normal_at(self, local_point: Tuple) -> Tuple:
        x, y, z = local_point.x, local_point.y, local_point.z
        dist = x * x + z * z
        eps = get_config().epsilon
        if dist < 1.0 and y >= self.maximum - eps:
            return vector(0.0, 1.0, 0.0)
        if dist < 1.0 and y <= self.minimum + eps:
            return vector(0.0, -1.0, 0.0)
        return vector(x, 0.0, z)
