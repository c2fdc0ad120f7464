"""Immutable matrices for affine transforms.

Matrices are backed by read-only NumPy arrays. Inversion uses the classical
adjugate construction (cofactors over a Laplace-expanded determinant), which
is exact enough for the 4x4 transforms used by scene primitives and signals a
singular matrix by returning None instead of a meaningless result.

Applying a 4x4 matrix to a Pos3 uses homogeneous weight 1, so translation
moves the point; applying it to a Vec3 uses weight 0, so translation leaves
directions unchanged.

Example:
    >>> from src.whitted.core.matrix import Matrix
    >>> from src.whitted.core.vector import Pos3
    >>> transform = Matrix.translation(5.0, -3.0, 2.0)
    >>> transform * Pos3(-3.0, 4.0, 5.0)
    Pos3(x=2.0, y=1.0, z=7.0)
    >>> transform.invert() * Pos3(-3.0, 4.0, 5.0)
    Pos3(x=-8.0, y=7.0, z=3.0)
"""

from __future__ import annotations

import math
from typing import Sequence, overload

import numpy as np
import numpy.typing as npt

from src.whitted.core.vector import FLOAT_TOLERANCE, Pos3, Vec3


class Matrix:
    """A rectangular grid of floats, normally a square transform up to 4x4.

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: Sequence[Sequence[float]] | npt.ArrayLike) -> None:
        data = np.array(rows, dtype=np.float64)
        if data.ndim != 2 or data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"Matrix needs a non-empty 2D grid, got shape {data.shape}")
        data.setflags(write=False)
        self._data = data

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def identity(cls, size: int = 4) -> Matrix:
        return cls(np.identity(size))

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> Matrix:
        return cls(
            [
                [1.0, 0.0, 0.0, x],
                [0.0, 1.0, 0.0, y],
                [0.0, 0.0, 1.0, z],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def scaling(cls, x: float, y: float, z: float) -> Matrix:
        return cls(
            [
                [x, 0.0, 0.0, 0.0],
                [0.0, y, 0.0, 0.0],
                [0.0, 0.0, z, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def rotation_x(cls, radians: float) -> Matrix:
        s, c = math.sin(radians), math.cos(radians)
        return cls(
            [
                [1.0, 0.0, 0.0, 0.0],
                [0.0, c, -s, 0.0],
                [0.0, s, c, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def rotation_y(cls, radians: float) -> Matrix:
        s, c = math.sin(radians), math.cos(radians)
        return cls(
            [
                [c, 0.0, s, 0.0],
                [0.0, 1.0, 0.0, 0.0],
                [-s, 0.0, c, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def rotation_z(cls, radians: float) -> Matrix:
        s, c = math.sin(radians), math.cos(radians)
        return cls(
            [
                [c, -s, 0.0, 0.0],
                [s, c, 0.0, 0.0],
                [0.0, 0.0, 1.0, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    @classmethod
    def skew(
        cls,
        xy: float = 0.0,
        xz: float = 0.0,
        yx: float = 0.0,
        yz: float = 0.0,
        zx: float = 0.0,
        zy: float = 0.0,
    ) -> Matrix:
        """Build a shearing transform.

        The first letter of each argument names the axis that moves and the
        second the axis it moves in proportion to, e.g. ``xy`` shifts x by
        ``xy * y``.
        """
        return cls(
            [
                [1.0, xy, xz, 0.0],
                [yx, 1.0, yz, 0.0],
                [zx, zy, 1.0, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def rows(self) -> tuple[tuple[float, ...], ...]:
        return tuple(tuple(float(v) for v in row) for row in self._data)

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a writable copy of the underlying array."""
        return self._data.copy()

    @overload
    def __getitem__(self, index: int) -> tuple[float, ...]: ...

    @overload
    def __getitem__(self, index: tuple[int, int]) -> float: ...

    def __getitem__(self, index):
        if isinstance(index, tuple):
            row, col = index
            return float(self._data[row, col])
        return tuple(float(v) for v in self._data[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self._data.shape != other._data.shape:
            return False
        return bool(np.all(np.abs(self._data - other._data) <= FLOAT_TOLERANCE))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix({self.rows!r})"

    # =========================================================================
    # Products
    # =========================================================================

    @overload
    def __mul__(self, other: Matrix) -> Matrix: ...

    @overload
    def __mul__(self, other: Pos3) -> Pos3: ...

    @overload
    def __mul__(self, other: Vec3) -> Vec3: ...

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return self.multiply(other)
        if isinstance(other, Pos3):
            x, y, z = self._apply_homogeneous(other.x, other.y, other.z, 1.0)
            return Pos3(x, y, z)
        if isinstance(other, Vec3):
            x, y, z = self._apply_homogeneous(other.x, other.y, other.z, 0.0)
            return Vec3(x, y, z)
        return NotImplemented

    __matmul__ = __mul__

    def multiply(self, other: Matrix) -> Matrix:
        """Return ``self * other``.

        Raises:
            ValueError: If ``self.width != other.height``.
        """
        if self.width != other.height:
            raise ValueError(
                f"Cannot multiply {self.height}x{self.width} by "
                f"{other.height}x{other.width} matrix"
            )
        return Matrix(self._data @ other._data)

    def _apply_homogeneous(
        self, x: float, y: float, z: float, w: float
    ) -> tuple[float, float, float]:
        if self._data.shape != (4, 4):
            raise ValueError(
                f"Only 4x4 matrices transform points and vectors, got "
                f"{self.height}x{self.width}"
            )
        result = self._data @ np.array([x, y, z, w], dtype=np.float64)
        return float(result[0]), float(result[1]), float(result[2])

    # =========================================================================
    # Determinant and inversion
    # =========================================================================

    def transposed(self) -> Matrix:
        return Matrix(self._data.T)

    def submatrix(self, row: int, col: int) -> Matrix:
        """Return a copy with the given row and column removed."""
        reduced = np.delete(np.delete(self._data, row, axis=0), col, axis=1)
        return Matrix(reduced)

    def minor(self, row: int, col: int) -> float:
        return self.submatrix(row, col).determinant()

    def cofactor(self, row: int, col: int) -> float:
        result = self.minor(row, col)
        return result if (row + col) % 2 == 0 else -result

    def determinant(self) -> float:
        """Compute the determinant by cofactor expansion along row 0.

        Raises:
            ValueError: If the matrix is not square.
        """
        if self.width != self.height:
            raise ValueError(
                f"Determinant needs a square matrix, got {self.height}x{self.width}"
            )
        d = self._data
        if self.width == 1:
            return float(d[0, 0])
        if self.width == 2:
            return float(d[0, 0] * d[1, 1] - d[0, 1] * d[1, 0])
        return float(
            sum(d[0, col] * self.cofactor(0, col) for col in range(self.width))
        )

    def is_invertible(self) -> bool:
        return self.determinant() != 0.0

    def invert(self) -> Matrix | None:
        """Return the inverse, or None when the determinant is exactly zero.

        The result is the adjugate divided by the determinant; writing
        ``cofactor(row, col)`` into ``[col][row]`` performs the transpose.
        """
        det = self.determinant()
        if det == 0.0:
            return None

        size = self.width
        if size == 1:
            return Matrix([[1.0 / det]])
        result = np.empty((size, size), dtype=np.float64)
        for row in range(size):
            for col in range(size):
                result[col, row] = self.cofactor(row, col) / det
        return Matrix(result)
