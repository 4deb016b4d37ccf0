"""Phong reflection model for a single point light.

The color of a lit surface point is the sum of three terms:

    ambient  = surface * intensity * ambient
    diffuse  = surface * intensity * diffuse * (light . normal)
    specular = intensity * specular * (reflect . eye) ^ shininess

The diffuse and specular terms vanish when the light is behind the surface,
the specular term also vanishes when the reflection points away from the eye,
and a shadowed point receives the ambient term only, as does a point the
light sits on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.whitted.core.color import BLACK, Color
from src.whitted.core.config import get_config
from src.whitted.core.tuples import Tuple
from src.whitted.materials.material import Material

if TYPE_CHECKING:
    from src.whitted.geometry.shape import Shape
    from src.whitted.scene.lights import PointLight


def surface_color(material: Material, point: Tuple, shape: Shape | None = None) -> Color:
    """Return the unlit surface color at a world-space point.

    Args:
        material: The surface material.
        point: World-space point on the surface.
        shape: The shape owning the surface, needed to map the point into
            pattern space. Without it the point is used as the pattern-space
            point directly.
    """
    pattern = material.pattern
    if pattern is None:
        return material.color
    if shape is None:
        return pattern.pattern_at(pattern.inverse @ point)
    return pattern.pattern_at_shape(shape, point)


def lighting(
    material: Material,
    light: PointLight,
    point: Tuple,
    eye_vector: Tuple,
    normal_vector: Tuple,
    in_shadow: bool = False,
    *,
    shape: Shape | None = None,
) -> Color:
    """Shade a surface point lit by one point light.

    Args:
        material: Surface material.
        light: The light source.
        point: World-space point being shaded.
        eye_vector: Unit vector from the point toward the eye.
        normal_vector: Unit surface normal facing the eye.
        in_shadow: Whether the light is occluded from the point.
        shape: Shape being shaded, used to evaluate material patterns.

    Returns:
        The lit color, unclamped.
    """
    effective = surface_color(material, point, shape) * light.intensity
    ambient = effective * material.ambient
    if in_shadow:
        return ambient

    to_light = light.position - point
    distance = to_light.magnitude()
    # A light sitting on the surface has no direction
    if distance < get_config().epsilon:
        return ambient

    light_vector = to_light / distance
    light_dot_normal = light_vector.dot(normal_vector)
    if light_dot_normal < 0.0:
        return ambient

    diffuse = effective * (material.diffuse * light_dot_normal)

    reflect_vector = (-light_vector).reflect(normal_vector)
    reflect_dot_eye = reflect_vector.dot(eye_vector)
    if reflect_dot_eye <= 0.0:
        specular = BLACK
    else:
        factor = reflect_dot_eye**material.shininess
        specular = light.intensity * (material.specular * factor)

    return ambient + diffuse + specular
