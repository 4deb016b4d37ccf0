"""World container and the recursive Whitted tracing routine.

``World.color_at`` is the heart of the tracer:

1. Intersect the ray with every object and pick the visible hit.
2. Shade the hit with the Phong model for every light, each light with its
   own shadow test.
3. Add the color seen along the mirror direction, scaled by reflectivity.
4. Add the color seen through the surface (Snell's law), scaled by
   transparency. Total internal reflection contributes black.

Steps 3 and 4 recurse with a decremented depth budget and stop when it
reaches zero. Contributions are added, not energy-balanced.

Example:
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.tuples import point, vector
    >>> from src.whitted.scene.presets import default_world
    >>> world = default_world()
    >>> world.color_at(Ray(point(0, 0, -5), vector(0, 0, 1)))
    Color(0.38066, 0.47583, 0.2855)
"""

from __future__ import annotations

import math
from typing import Iterable

from src.whitted.core.color import BLACK, Color
from src.whitted.core.config import get_config
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import Tuple
from src.whitted.geometry.intersection import (
    Computations,
    Intersection,
    Intersections,
    prepare_computations,
)
from src.whitted.geometry.shape import Shape
from src.whitted.materials.lighting import lighting, surface_color
from src.whitted.scene.lights import PointLight


class World:
    """A collection of shapes and point lights.

    Args:
        objects: Top-level shapes (groups included).
        lights: Point lights. With none, surfaces show only their ambient term.
    """

    def __init__(
        self,
        objects: Iterable[Shape] = (),
        lights: Iterable[PointLight] = (),
    ) -> None:
        self.objects: list[Shape] = list(objects)
        self.lights: list[PointLight] = list(lights)

    def add_object(self, shape: Shape) -> Shape:
        self.objects.append(shape)
        return shape

    def add_light(self, light: PointLight) -> PointLight:
        self.lights.append(light)
        return light

    def __repr__(self) -> str:
        return f"World({len(self.objects)} objects, {len(self.lights)} lights)"

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def intersect(self, ray: Ray) -> Intersections:
        """Intersect a ray with every object, sorted by t (stable)."""
        xs: list[Intersection] = []
        for shape in self.objects:
            xs.extend(shape.intersect(ray))
        return Intersections(xs)

    def is_shadowed(self, point: Tuple, light: PointLight) -> bool:
        """Return True if an object blocks the path from ``point`` to ``light``.

        ``point`` should already be offset off the surface (an over-point).
        """
        to_light = light.position - point
        distance = to_light.magnitude()
        if distance < get_config().epsilon:
            return False
        hit = self.intersect(Ray(point, to_light / distance)).hit()
        return hit is not None and hit.t < distance

    # -------------------------------------------------------------------------
    # Shading
    # -------------------------------------------------------------------------

    def shade_hit(self, comps: Computations, remaining: int | None = None) -> Color:
        """Surface color plus reflected and refracted contributions."""
        if remaining is None:
            remaining = get_config().max_depth

        material = comps.shape.material
        if self.lights:
            surface = BLACK
            for light in self.lights:
                shadowed = self.is_shadowed(comps.over_point, light)
                surface = surface + lighting(
                    material,
                    light,
                    comps.over_point,
                    comps.eye_vector,
                    comps.normal_vector,
                    shadowed,
                    shape=comps.shape,
                )
        else:
            surface = surface_color(material, comps.over_point, comps.shape) * material.ambient

        reflected = self.reflected_color(comps, remaining)
        refracted = self.refracted_color(comps, remaining)
        return surface + reflected + refracted

    def reflected_color(self, comps: Computations, remaining: int | None = None) -> Color:
        """Color seen in the mirror direction, scaled by reflectivity."""
        if remaining is None:
            remaining = get_config().max_depth
        reflectivity = comps.shape.material.reflectivity
        if remaining <= 0 or reflectivity == 0.0:
            return BLACK
        reflect_ray = Ray(comps.over_point, comps.reflect_vector)
        return self.color_at(reflect_ray, remaining - 1) * reflectivity

    def refracted_color(self, comps: Computations, remaining: int | None = None) -> Color:
        """Color seen through the surface, scaled by transparency.

        Returns black for opaque surfaces, an exhausted depth budget, or total
        internal reflection.
        """
        if remaining is None:
            remaining = get_config().max_depth
        transparency = comps.shape.material.transparency
        if remaining <= 0 or transparency == 0.0:
            return BLACK

        n_ratio = comps.n1 / comps.n2
        cos_i = comps.eye_vector.dot(comps.normal_vector)
        sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            return BLACK

        cos_t = math.sqrt(1.0 - sin2_t)
        direction = comps.normal_vector * (n_ratio * cos_i - cos_t) - comps.eye_vector * n_ratio
        refract_ray = Ray(comps.under_point, direction)
        return self.color_at(refract_ray, remaining - 1) * transparency

    def color_at(self, ray: Ray, remaining: int | None = None) -> Color:
        """Trace ``ray`` into the world and return the color it sees.

        Args:
            ray: The ray to trace.
            remaining: Recursion budget for reflection/refraction. Defaults to
                the configured ``max_depth``.

        Returns:
            The traced color; black when nothing is hit.
        """
        if remaining is None:
            remaining = get_config().max_depth
        xs = self.intersect(ray)
        hit = xs.hit()
        if hit is None:
            return BLACK
        comps = prepare_computations(hit, ray, xs)
        return self.shade_hit(comps, remaining)
