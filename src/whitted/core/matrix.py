"""Immutable square matrices for affine transforms.

Matrices of size 2, 3 and 4 are supported; the smaller sizes exist so that
determinants can be expanded by cofactors. Multiplication uses the ``@``
operator and composes right-to-left: ``A @ B`` applies ``B`` first.

The inverse is computed once and cached on the instance, since every shape
inverts its transform for every ray it intersects.

Example:
    >>> from src.whitted.core.matrix import Matrix, IDENTITY
    >>> m = Matrix([[2, 0, 0, 0], [0, 2, 0, 0], [0, 0, 2, 0], [0, 0, 0, 1]])
    >>> m @ m.inverse() == IDENTITY
    True
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt

from src.whitted.core.config import get_config
from src.whitted.core.errors import NonInvertibleMatrixError
from src.whitted.core.tuples import Tuple

SUPPORTED_SIZES = (2, 3, 4)


class Matrix:
    """A read-only n x n matrix (n in 2..4) backed by a float64 array."""

    __slots__ = ("_data", "_inverse")

    def __init__(self, rows: Sequence[Sequence[float]] | npt.ArrayLike) -> None:
        data = np.array(rows, dtype=np.float64)
        if data.ndim != 2 or data.shape[0] != data.shape[1]:
            raise ValueError(f"Matrix must be square, got shape {data.shape}")
        if data.shape[0] not in SUPPORTED_SIZES:
            raise ValueError(
                f"Matrix size must be one of {SUPPORTED_SIZES}, got {data.shape[0]}"
            )
        data.flags.writeable = False
        self._data = data
        self._inverse: Matrix | None = None

    @property
    def size(self) -> int:
        return self._data.shape[0]

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a writable copy of the matrix entries."""
        return self._data.copy()

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return float(self._data[row, col])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self._data.shape != other._data.shape:
            return False
        return bool(np.all(np.abs(self._data - other._data) < get_config().epsilon))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows = ", ".join(
            "[" + ", ".join(f"{v:g}" for v in row) + "]" for row in self._data.tolist()
        )
        return f"Matrix([{rows}])"

    def __matmul__(self, other: Matrix | Tuple) -> Matrix | Tuple:
        if isinstance(other, Matrix):
            if other.size != self.size:
                raise ValueError(
                    f"Cannot multiply {self.size}x{self.size} by {other.size}x{other.size}"
                )
            return Matrix(self._data @ other._data)
        if isinstance(other, Tuple):
            if self.size != 4:
                raise ValueError(f"Only 4x4 matrices can transform tuples, got {self.size}x{self.size}")
            return Tuple.from_array(self._data @ other.to_numpy())
        return NotImplemented

    # -------------------------------------------------------------------------
    # Linear algebra
    # -------------------------------------------------------------------------

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    def submatrix(self, row: int, col: int) -> Matrix:
        """Return a copy with the given row and column removed."""
        if self.size == 2:
            raise ValueError("Cannot take a submatrix of a 2x2 matrix")
        reduced = np.delete(np.delete(self._data, row, axis=0), col, axis=1)
        return Matrix(reduced)

    def minor(self, row: int, col: int) -> float:
        return self.submatrix(row, col).determinant()

    def cofactor(self, row: int, col: int) -> float:
        minor = self.minor(row, col)
        return -minor if (row + col) % 2 else minor

    def determinant(self) -> float:
        """Determinant by cofactor expansion along the first row."""
        if self.size == 2:
            a, b = self._data[0]
            c, d = self._data[1]
            return float(a * d - b * c)
        return float(
            sum(self._data[0, col] * self.cofactor(0, col) for col in range(self.size))
        )

    def is_invertible(self) -> bool:
        return abs(self.determinant()) >= get_config().invertibility_threshold

    def inverse(self) -> Matrix:
        """Return the inverse matrix, computing and caching it on first use.

        Raises:
            NonInvertibleMatrixError: If ``|det| < invertibility_threshold``.
        """
        if self._inverse is None:
            det = self.determinant()
            if abs(det) < get_config().invertibility_threshold:
                raise NonInvertibleMatrixError(
                    f"Matrix is not invertible (determinant {det:g}): {self!r}"
                )
            if self.size == 2:
                a, b = self._data[0]
                c, d = self._data[1]
                adjugate = np.array([[d, -b], [-c, a]], dtype=np.float64)
            else:
                # Transposed cofactor matrix
                n = self.size
                adjugate = np.array(
                    [[self.cofactor(col, row) for col in range(n)] for row in range(n)],
                    dtype=np.float64,
                )
            inverse = Matrix(adjugate / det)
            inverse._inverse = self
            self._inverse = inverse
        return self._inverse


def identity(size: int = 4) -> Matrix:
    """Create an identity matrix of the given size."""
    return Matrix(np.eye(size))


IDENTITY = identity(4)
