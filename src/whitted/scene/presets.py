"""Ready-made scenes.

``default_world`` is the small two-sphere reference world that shading
results are checked against. ``create_showcase_scene`` builds a larger scene
that exercises every primitive, pattern and secondary ray type.

Example:
    >>> from src.whitted.scene.presets import ShowcaseParams, create_showcase_scene
    >>> from src.whitted.core.renderer import render
    >>>
    >>> world, camera = create_showcase_scene(ShowcaseParams(width=200, height=100))
    >>> canvas = render(camera, world)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from src.whitted.camera.pinhole import Camera
from src.whitted.core.color import Color
from src.whitted.core.transforms import (
    TransformChain,
    rotation_x,
    scaling,
    translation,
    view_transform,
)
from src.whitted.core.tuples import point, vector
from src.whitted.geometry.cone import Cone
from src.whitted.geometry.cube import Cube
from src.whitted.geometry.cylinder import Cylinder
from src.whitted.geometry.group import Group
from src.whitted.geometry.plane import Plane
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import GLASS, Material, glass_material
from src.whitted.materials.patterns import CheckersPattern, RingPattern, StripePattern
from src.whitted.scene.lights import PointLight
from src.whitted.scene.world import World


def default_world() -> World:
    """Create the two-sphere reference world.

    One white point light at (-10, 10, -10); a unit sphere with color
    (0.8, 1.0, 0.6), diffuse 0.7 and specular 0.2; and a concentric sphere
    scaled by 0.5 with the default material.
    """
    light = PointLight(point(-10, 10, -10), Color(1, 1, 1))
    outer = Sphere(
        material=Material(color=Color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2),
    )
    inner = Sphere(transform=scaling(0.5, 0.5, 0.5))
    return World([outer, inner], [light])


# =============================================================================
# Showcase scene
# =============================================================================


@dataclass
class ShowcaseParams:
    """Parameters for the showcase scene.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Camera field of view in radians.
        eye: Camera position.
        look_at: Point the camera looks at.
        light_position: Position of the key light.
        light_color: Intensity of the key light.
        fill_light: Whether to add a dim second light.
        floor_colors: The two checkers colors on the floor.
    """

    width: int = 400
    height: int = 200
    field_of_view: float = math.pi / 3
    eye: tuple[float, float, float] = (0.0, 1.5, -5.0)
    look_at: tuple[float, float, float] = (0.0, 1.0, 0.0)
    light_position: tuple[float, float, float] = (-10.0, 10.0, -10.0)
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    fill_light: bool = True
    floor_colors: tuple[tuple[float, float, float], tuple[float, float, float]] = field(
        default_factory=lambda: ((0.9, 0.9, 0.9), (0.15, 0.15, 0.2))
    )


def create_showcase_scene(params: ShowcaseParams | None = None) -> tuple[World, Camera]:
    """Build the showcase scene and a camera framing it.

    The scene contains a checkered reflective floor, a striped back wall, a
    mirror sphere, a glass sphere with an air bubble inside, a ringed cube
    and a group holding a capped cylinder with a cone on top.

    Args:
        params: Scene parameters; defaults to ``ShowcaseParams()``.

    Returns:
        Tuple of (world, camera).
    """
    if params is None:
        params = ShowcaseParams()

    world = World()

    floor_a, floor_b = params.floor_colors
    world.add_object(
        Plane(
            material=Material(
                pattern=CheckersPattern(Color(*floor_a), Color(*floor_b)),
                specular=0.0,
                reflectivity=0.15,
            )
        )
    )
    world.add_object(
        Plane(
            transform=translation(0, 0, 10) @ rotation_x(math.pi / 2),
            material=Material(
                pattern=StripePattern(
                    Color(0.55, 0.6, 0.75),
                    Color(0.45, 0.5, 0.65),
                    transform=scaling(0.5, 0.5, 0.5),
                ),
                specular=0.0,
            ),
        )
    )

    # Mirror sphere
    world.add_object(
        Sphere(
            transform=TransformChain().scale(0.8, 0.8, 0.8).translate(-1.6, 0.8, 1.0).matrix,
            material=Material(
                color=Color(0.1, 0.1, 0.12),
                diffuse=0.3,
                specular=1.0,
                shininess=300.0,
                reflectivity=0.8,
            ),
        )
    )

    # Glass sphere with an air bubble
    world.add_object(
        Sphere(
            transform=translation(0.3, 1.0, -0.4),
            material=glass_material(GLASS),
        )
    )
    world.add_object(
        Sphere(
            transform=TransformChain().scale(0.5, 0.5, 0.5).translate(0.3, 1.0, -0.4).matrix,
            material=glass_material(1.0, reflectivity=0.2, transparency=1.0),
        )
    )

    # Ringed cube
    world.add_object(
        Cube(
            transform=TransformChain()
            .scale(0.4, 0.4, 0.4)
            .rotate_y(math.pi / 5)
            .translate(2.2, 0.4, -0.2)
            .matrix,
            material=Material(
                pattern=RingPattern(
                    Color(0.9, 0.5, 0.2),
                    Color(0.6, 0.2, 0.1),
                    transform=scaling(0.2, 0.2, 0.2),
                ),
            ),
        )
    )

    # Grouped column: capped cylinder with a cone on top
    column = Group(transform=translation(1.6, 0.0, 2.0))
    column.add_child(
        Cylinder(
            minimum=0.0,
            maximum=1.0,
            closed=True,
            transform=scaling(0.35, 1.0, 0.35),
            material=Material(color=Color(0.2, 0.6, 0.3), specular=0.4),
        )
    )
    column.add_child(
        Cone(
            minimum=-1.0,
            maximum=0.0,
            closed=True,
            transform=translation(0.0, 1.8, 0.0) @ scaling(0.5, 0.8, 0.5),
            material=Material(color=Color(0.8, 0.7, 0.2), reflectivity=0.1),
        )
    )
    world.add_object(column)

    world.add_light(PointLight(point(*params.light_position), Color(*params.light_color)))
    if params.fill_light:
        world.add_light(PointLight(point(6.0, 4.0, -6.0), Color(0.25, 0.25, 0.3)))

    camera = Camera(
        params.width,
        params.height,
        params.field_of_view,
        view_transform(point(*params.eye), point(*params.look_at), vector(0, 1, 0)),
    )
    return world, camera
