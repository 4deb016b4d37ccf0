"""Double-napped cone primitive, ``x^2 + z^2 = y^2``, around the y axis.

Like the cylinder, the cone can be truncated and capped. A cap at height
``y`` has radius ``|y|``.
"""

from __future__ import annotations

import math

from src.whitted.core.config import get_config
from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Tuple, vector
from src.whitted.geometry.cylinder import check_cap
from src.whitted.geometry.intersection import Intersection
from src.whitted.geometry.shape import Shape
from src.whitted.materials.material import Material


class Cone(Shape):
    """Double cone with its apex at the object-space origin.

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
            raise ValueError(f"Cone minimum {minimum} exceeds maximum {maximum}")
        super().__init__(transform, material)
        self.minimum = minimum
        self.maximum = maximum
        self.closed = closed

    def local_intersect(self, local_ray: Ray) -> list[Intersection]:
        ox, oy, oz = local_ray.origin.x, local_ray.origin.y, local_ray.origin.z
        dx, dy, dz = local_ray.direction.x, local_ray.direction.y, local_ray.direction.z
        eps = get_config().epsilon
        xs: list[Intersection] = []

        a = dx * dx - dy * dy + dz * dz
        b = 2.0 * (ox * dx - oy * dy + oz * dz)
        c = ox * ox - oy * oy + oz * oz

        if abs(a) < eps:
            # Ray parallel to one of the cone's halves: a single crossing
            if abs(b) >= eps:
                t = -c / (2.0 * b)
                y = oy + t * dy
                if self.minimum < y < self.maximum:
                    xs.append(Intersection(t, self))
        else:
            discriminant = b * b - 4.0 * a * c
            if discriminant >= 0.0:
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
            if check_cap(local_ray, t, abs(bound)):
                xs.append(Intersection(t, self))

    def local_normal_at(self, local_point: Tuple) -> Tuple:
        x, y, z = local_point.x, local_point.y, local_point.z
        dist = x * x + z * z
        eps = get_config().epsilon
        if dist < self.maximum * self.maximum and y >= self.maximum - eps:
            return vector(0.0, 1.0, 0.0)
        if dist < self.minimum * self.minimum and y <= self.minimum + eps:
            return vector(0.0, -1.0, 0.0)

        normal_y = math.sqrt(dist)
        if y > 0.0:
            normal_y = -normal_y
        return vector(x, normal_y, z)
