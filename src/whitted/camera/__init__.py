"""Camera module.

Components:
    pinhole: Perspective camera generating one ray per pixel center
"""

from .pinhole import Camera

__all__ = ["Camera"]
