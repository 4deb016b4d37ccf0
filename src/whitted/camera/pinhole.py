"""Pinhole camera model for perspective projection ray generation.

The camera sits at the origin of its own space looking down -z, with the
canvas one unit in front of it at ``z = -1``. Its ``transform`` is the
world-to-camera matrix (typically built with ``view_transform``); rays are
moved into world space with the inverse.

The canvas half-extents follow from the field of view and aspect ratio:

    half_view = tan(field_of_view / 2)
    aspect >= 1: half_width = half_view, half_height = half_view / aspect
    aspect <  1: half_width = half_view * aspect, half_height = half_view

and each pixel covers ``pixel_size = 2 * half_width / hsize`` world units.

Example:
    >>> import math
    >>> from src.whitted.camera.pinhole import Camera
    >>> from src.whitted.core.transforms import view_transform
    >>> from src.whitted.core.tuples import point, vector
    >>> camera = Camera(
    ...     hsize=320,
    ...     vsize=240,
    ...     field_of_view=math.pi / 3,
    ...     transform=view_transform(point(0, 1.5, -5), point(0, 1, 0), vector(0, 1, 0)),
    ... )
    >>> ray = camera.ray_for_pixel(160, 120)
"""

from __future__ import annotations

import math

from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.tuples import point


class Camera:
    """Perspective camera mapping pixels to world-space rays.

    Args:
        hsize: Horizontal size of the canvas in pixels, > 0.
        vsize: Vertical size of the canvas in pixels, > 0.
        field_of_view: Horizontal or vertical angle (whichever side is
            longer) in radians, strictly between 0 and pi.
        transform: World-to-camera transform. Must be invertible.

    Raises:
        ValueError: If a size or the field of view is out of range.
        NonInvertibleMatrixError: If ``transform`` is singular.
    """

    def __init__(
        self,
        hsize: int,
        vsize: int,
        field_of_view: float,
        transform: Matrix = IDENTITY,
    ) -> None:
        self.hsize = int(hsize)
        self.vsize = int(vsize)
        if self.hsize <= 0 or self.vsize <= 0:
            raise ValueError(f"Camera size must be positive, got {hsize}x{vsize}")
        if not 0.0 < field_of_view < math.pi:
            raise ValueError(
                f"Field of view must be in (0, pi) radians, got {field_of_view}"
            )
        self.field_of_view = float(field_of_view)
        self.transform = transform

        half_view = math.tan(self.field_of_view / 2.0)
        aspect = self.hsize / self.vsize
        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = (self.half_width * 2.0) / self.hsize

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, matrix: Matrix) -> None:
        self._inverse = matrix.inverse()
        self._transform = matrix

    @property
    def inverse(self) -> Matrix:
        return self._inverse

    def ray_for_pixel(self, px: float, py: float) -> Ray:
        """Return the world-space ray through the center of pixel (px, py).

        Args:
            px: Pixel column, 0 at the left edge.
            py: Pixel row, 0 at the top edge.

        Returns:
            A ray from the eye with a unit direction.
        """
        # Offsets from the canvas edge to the pixel center
        x_offset = (px + 0.5) * self.pixel_size
        y_offset = (py + 0.5) * self.pixel_size

        # The camera looks toward -z, so +x is to the left
        world_x = self.half_width - x_offset
        world_y = self.half_height - y_offset

        pixel = self._inverse @ point(world_x, world_y, -1.0)
        origin = self._inverse @ point(0.0, 0.0, 0.0)
        direction = (pixel - origin).normalize()
        return Ray(origin, direction)

    def __repr__(self) -> str:
        return (
            f"Camera({self.hsize}x{self.vsize}, "
            f"field_of_view={self.field_of_view:.4g})"
        )
