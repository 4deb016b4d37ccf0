"""Axis-aligned cube primitive spanning -1..1 on every object-space axis.

Intersection uses the slab method: each axis contributes an entry and exit
parameter, the ray is inside the cube between the largest entry and the
smallest exit, and it misses when those cross.
"""

from __future__ import annotations

import math

from src.whitted.core.config import get_config
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Tuple, vector
from src.whitted.geometry.intersection import Intersection
from src.whitted.geometry.shape import Shape


def check_axis(
    origin: float, direction: float, minimum: float = -1.0, maximum: float = 1.0
) -> tuple[float, float]:
    """Return the (entry, exit) parameters of a ray against one slab.

    Args:
        origin: Ray origin component on this axis.
        direction: Ray direction component on this axis.
        minimum: Lower slab bound.
        maximum: Upper slab bound.

    Returns:
        Tuple of (tmin, tmax) with tmin <= tmax. A ray parallel to the slab
        gets infinite parameters whose signs say whether it is inside.
    """
    tmin_numerator = minimum - origin
    tmax_numerator = maximum - origin

    if abs(direction) >= get_config().epsilon:
        tmin = tmin_numerator / direction
        tmax = tmax_numerator / direction
    else:
        tmin = math.copysign(math.inf, tmin_numerator)
        tmax = math.copysign(math.inf, tmax_numerator)

    if tmin > tmax:
        tmin, tmax = tmax, tmin
    return tmin, tmax


class Cube(Shape):
    """Axis-aligned cube centered at the origin with half-extent 1."""

    def local_intersect(self, local_ray: Ray) -> list[Intersection]:
        origin, direction = local_ray.origin, local_ray.direction
        xtmin, xtmax = check_axis(origin.x, direction.x)
        ytmin, ytmax = check_axis(origin.y, direction.y)
        ztmin, ztmax = check_axis(origin.z, direction.z)

        tmin = max(xtmin, ytmin, ztmin)
        tmax = min(xtmax, ytmax, ztmax)
        if tmin > tmax:
            return []
        return [Intersection(tmin, self), Intersection(tmax, self)]

    def local_normal_at(self, local_point: Tuple) -> Tuple:
        # The face is the axis with the largest absolute component
        x, y, z = local_point.x, local_point.y, local_point.z
        ax, ay, az = abs(x), abs(y), abs(z)
        maxc = max(ax, ay, az)
        if maxc == ax:
            return vector(x, 0.0, 0.0)
        if maxc == ay:
            return vector(0.0, y, 0.0)
        return vector(0.0, 0.0, z)
