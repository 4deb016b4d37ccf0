"""Affine transform builders.

Every builder returns a new 4x4 ``Matrix``; nothing here mutates an existing
matrix. Compose transforms with ``@`` (right-most applies first) or with the
fluent ``TransformChain``, which applies operations in call order:

    >>> from src.whitted.core.transforms import TransformChain, translation, scaling
    >>> chain = TransformChain().scale(2, 2, 2).translate(0, 1, 0)
    >>> chain.matrix == translation(0, 1, 0) @ scaling(2, 2, 2)
    True
"""

from __future__ import annotations

import math

import numpy as np

from src.whitted.core.matrix import IDENTITY, Matrix
from src.whitted.core.tuples import Tuple

# =============================================================================
# Primitive transforms
# =============================================================================


def translation(x: float, y: float, z: float) -> Matrix:
    """Move points by (x, y, z). Vectors are unaffected."""
    m = np.eye(4)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return Matrix(m)


def scaling(x: float, y: float, z: float) -> Matrix:
    return Matrix(np.diag((x, y, z, 1.0)))


def rotation_x(radians: float) -> Matrix:
    """Rotate around the x axis (left-handed: y toward z)."""
    c, s = math.cos(radians), math.sin(radians)
    return Matrix([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0], [0, 0, 0, 1]])


def rotation_y(radians: float) -> Matrix:
    """Rotate around the y axis (left-handed: z toward x)."""
    c, s = math.cos(radians), math.sin(radians)
    return Matrix([[c, 0, s, 0], [0, 1, 0, 0], [-s, 0, c, 0], [0, 0, 0, 1]])


def rotation_z(radians: float) -> Matrix:
    """Rotate around the z axis (left-handed: x toward y)."""
    c, s = math.cos(radians), math.sin(radians)
    return Matrix([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix:
    """Shear each component in proportion to the other two.

    ``xy`` moves x in proportion to y, ``xz`` moves x in proportion to z,
    and so on.
    """
    return Matrix(
        [
            [1, xy, xz, 0],
            [yx, 1, yz, 0],
            [zx, zy, 1, 0],
            [0, 0, 0, 1],
        ]
    )


def reflect_x() -> Matrix:
    """Mirror across the yz plane."""
    return scaling(-1, 1, 1)


def reflect_y() -> Matrix:
    """Mirror across the xz plane."""
    return scaling(1, -1, 1)


def reflect_z() -> Matrix:
    """Mirror across the xy plane."""
    return scaling(1, 1, -1)


def view_transform(from_point: Tuple, to_point: Tuple, up: Tuple) -> Matrix:
    """Orient the world relative to an eye at ``from_point`` looking at ``to_point``.

    Args:
        from_point: Eye position.
        to_point: Point the eye looks at.
        up: Approximate up direction; need not be normalized or orthogonal.

    Returns:
        The world-to-camera matrix.
    """
    forward = (to_point - from_point).normalize()
    left = forward.cross(up.normalize())
    true_up = left.cross(forward)
    orientation = Matrix(
        [
            [left.x, left.y, left.z, 0],
            [true_up.x, true_up.y, true_up.z, 0],
            [-forward.x, -forward.y, -forward.z, 0],
            [0, 0, 0, 1],
        ]
    )
    return orientation @ translation(-from_point.x, -from_point.y, -from_point.z)


# =============================================================================
# Fluent builder
# =============================================================================


class TransformChain:
    """Immutable fluent builder; operations apply in the order they are called.

    Each call left-multiplies the new transform onto the accumulated matrix,
    so ``TransformChain().rotate_x(a).translate(1, 0, 0)`` produces
    ``translation(1, 0, 0) @ rotation_x(a)``.
    """

    __slots__ = ("_matrix",)

    def __init__(self, matrix: Matrix = IDENTITY) -> None:
        self._matrix = matrix

    @property
    def matrix(self) -> Matrix:
        return self._matrix

    def then(self, transform: Matrix) -> TransformChain:
        """Append an arbitrary transform."""
        return TransformChain(transform @ self._matrix)

    def translate(self, x: float, y: float, z: float) -> TransformChain:
        return self.then(translation(x, y, z))

    def scale(self, x: float, y: float, z: float) -> TransformChain:
        return self.then(scaling(x, y, z))

    def rotate_x(self, radians: float) -> TransformChain:
        return self.then(rotation_x(radians))

    def rotate_y(self, radians: float) -> TransformChain:
        return self.then(rotation_y(radians))

    def rotate_z(self, radians: float) -> TransformChain:
        return self.then(rotation_z(radians))

    def shear(
        self, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float
    ) -> TransformChain:
        return self.then(shearing(xy, xz, yx, yz, zx, zy))

    def __repr__(self) -> str:
        return f"TransformChain({self._matrix!r})"
