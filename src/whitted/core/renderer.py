"""Render loops that turn a camera and a world into a canvas.

``render`` is the reference implementation: it walks the canvas row by row
in the calling thread and asks the world for the color of every camera ray.
``render_parallel`` produces the same image with the Taichi kernel in
``src.whitted.core.integrator``, which runs one parallel loop over pixels.

Example:
    >>> from src.whitted.camera.pinhole import Camera
    >>> from src.whitted.core.renderer import render
    >>> from src.whitted.scene.presets import default_world
    >>> import math
    >>> canvas = render(Camera(11, 11, math.pi / 2), default_world())
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.whitted.core.canvas import Canvas
from src.whitted.core.config import get_config

if TYPE_CHECKING:
    from src.whitted.camera.pinhole import Camera
    from src.whitted.scene.world import World

logger = logging.getLogger(__name__)


def render_row(
    camera: Camera, world: World, y: int, remaining: int
) -> npt.NDArray[np.float64]:
    """Trace every pixel in row ``y``.

    Rows are independent of each other, so this is the unit of work a caller
    can distribute.

    Returns:
        Array of shape (camera.hsize, 3) with linear colors.
    """
    row = np.empty((camera.hsize, 3), dtype=np.float64)
    for x in range(camera.hsize):
        ray = camera.ray_for_pixel(x, y)
        row[x] = world.color_at(ray, remaining).to_numpy()
    return row


def render(camera: Camera, world: World, *, max_depth: int | None = None) -> Canvas:
    """Render ``world`` as seen by ``camera``.

    Args:
        camera: The camera; its ``hsize`` x ``vsize`` sets the canvas size.
        world: The scene.
        max_depth: Recursion budget for reflection/refraction. Defaults to
            the configured ``max_depth``.

    Returns:
        A canvas of linear, unclamped colors.

    Raises:
        ValueError: If ``max_depth`` is negative.
    """
    if max_depth is None:
        max_depth = get_config().max_depth
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    canvas = Canvas(camera.hsize, camera.vsize)
    logger.info(
        "Rendering %dx%d with %d objects and %d lights (max depth %d)",
        camera.hsize,
        camera.vsize,
        len(world.objects),
        len(world.lights),
        max_depth,
    )
    start = time.perf_counter()

    for y in range(camera.vsize):
        canvas.write_row(y, render_row(camera, world, y, max_depth))
        logger.debug("Rendered row %d/%d", y + 1, camera.vsize)

    elapsed = time.perf_counter() - start
    logger.info("Render finished in %.2fs", elapsed)
    return canvas


def render_parallel(
    camera: Camera, world: World, *, max_depth: int | None = None
) -> Canvas:
    """Render with the Taichi parallel kernel.

    Taichi must already be initialized (``ti.init``). The result matches
    ``render`` to within single precision tolerance.

    Args:
        camera: The camera.
        world: The scene.
        max_depth: Recursion budget for reflection/refraction.

    Returns:
        A canvas of linear, unclamped colors.

    Raises:
        ValueError: If the image, scene or depth exceeds the kernel limits.
    """
    # Imported lazily: loading the integrator allocates Taichi fields
    from src.whitted.core.integrator import render_image

    if max_depth is None:
        max_depth = get_config().max_depth

    logger.info(
        "Rendering %dx%d in parallel (max depth %d)", camera.hsize, camera.vsize, max_depth
    )
    start = time.perf_counter()
    image = render_image(camera, world, max_depth=max_depth)
    logger.info("Parallel render finished in %.2fs", time.perf_counter() - start)
    return Canvas.from_array(image)
