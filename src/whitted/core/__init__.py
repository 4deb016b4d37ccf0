"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    config: Process-wide tolerances and recursion depth
    errors: Exception hierarchy
    tuples: Points and vectors (homogeneous 4-tuples)
    color: Linear RGB colors
    matrix: Immutable 2x2 to 4x4 matrices with cached inverses
    transforms: Translation, scaling, rotation, shearing and view transforms
    ray: Ray data structure
    canvas: Pixel grid written by the renderers
    renderer: Sequential reference render loop
    integrator: Taichi parallel render kernel

All linear algebra is double precision NumPy; the Taichi kernel runs in
single precision.
"""

from .canvas import Canvas
from .color import BLACK, BLUE, GREEN, RED, WHITE, Color
from .config import RenderConfig, configure, get_config, set_config
from .errors import (
    DegenerateVectorError,
    InvalidOperandError,
    NonInvertibleMatrixError,
    RayTracerError,
)
from .matrix import IDENTITY, Matrix, identity
from .ray import Ray
from .renderer import render, render_parallel, render_row
from .transforms import (
    TransformChain,
    reflect_x,
    reflect_y,
    reflect_z,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from .tuples import ORIGIN, Tuple, cross, dot, magnitude, normalize, point, reflect, vector

# Note: integrator is NOT imported here; importing it allocates Taichi fields.
# Import directly from src.whitted.core.integrator after ti.init().

__all__ = [
    "Canvas",
    "Color",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "RenderConfig",
    "configure",
    "get_config",
    "set_config",
    "RayTracerError",
    "NonInvertibleMatrixError",
    "DegenerateVectorError",
    "InvalidOperandError",
    "Matrix",
    "IDENTITY",
    "identity",
    "Ray",
    "render",
    "render_parallel",
    "render_row",
    "TransformChain",
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "shearing",
    "reflect_x",
    "reflect_y",
    "reflect_z",
    "view_transform",
    "Tuple",
    "ORIGIN",
    "point",
    "vector",
    "magnitude",
    "normalize",
    "dot",
    "cross",
    "reflect",
]
