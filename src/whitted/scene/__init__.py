"""Scene module for lights, the world and preset scenes.

Components:
    lights: Point light source
    world: Object/light container with the recursive tracing routine
    presets: Reference world and showcase scene factories
"""

from .lights import PointLight
from .presets import ShowcaseParams, create_showcase_scene, default_world
from .world import World

__all__ = [
    "PointLight",
    "World",
    "default_world",
    "create_showcase_scene",
    "ShowcaseParams",
]
