"""Direction and position types for 3D ray tracing.

Vec3 is a free vector (a direction or a displacement) and Pos3 is a point in
space. The two are deliberately separate types: subtracting two positions
gives the displacement between them, a position moved by a vector is another
position, but positions cannot be added together or scaled. Matrices rely on
the distinction to decide whether translation applies.

Example:
    >>> from src.whitted.core.vector import Pos3, Vec3
    >>> eye = Pos3(0.0, 0.0, -5.0)
    >>> target = Pos3(0.0, 0.0, 0.0)
    >>> (target - eye).normalized()
    Vec3(x=0.0, y=0.0, z=1.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

# Tolerance used for approximate equality of vectors, positions and matrices
FLOAT_TOLERANCE = 1e-3


def float_eq(a: float, b: float, tolerance: float = FLOAT_TOLERANCE) -> bool:
    """Compare two floats with an absolute tolerance."""
    return abs(a - b) <= tolerance


@dataclass(frozen=True, slots=True, eq=False)
class Vec3:
    """Immutable 3D free vector.

    Attributes:
        x: X component.
        y: Y component.
        z: Z component.
    """

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vec3:
        return cls(0.0, 0.0, 0.0)

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vec3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return (
            float_eq(self.x, other.x)
            and float_eq(self.y, other.y)
            and float_eq(self.z, other.z)
        )

    __hash__ = None  # type: ignore[assignment]

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Return a vector perpendicular to both operands. Order matters."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude_squared(self) -> float:
        return self.dot(self)

    def magnitude(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vec3:
        """Return a unit vector with the same direction.

        A zero-length vector has no direction and normalizes to the zero
        vector instead of dividing by zero.
        """
        length = self.magnitude()
        if length == 0.0:
            return Vec3.zero()
        return self / length

    def reflect(self, normal: Vec3) -> Vec3:
        """Mirror this vector about a unit normal: v - 2 * n * (n . v)."""
        return self - normal * (2.0 * normal.dot(self))


@dataclass(frozen=True, slots=True, eq=False)
class Pos3:
    """Immutable point in 3D space.

    Attributes:
        x: X coordinate.
        y: Y coordinate.
        z: Z coordinate.
    """

    x: float
    y: float
    z: float

    @classmethod
    def origin(cls) -> Pos3:
        return cls(0.0, 0.0, 0.0)

    def __add__(self, other: Vec3) -> Pos3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Pos3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Pos3 | Vec3) -> Vec3 | Pos3:
        # position - position is a displacement, position - vector a position
        if isinstance(other, Pos3):
            return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vec3):
            return Pos3(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pos3):
            return NotImplemented
        return (
            float_eq(self.x, other.x)
            and float_eq(self.y, other.y)
            and float_eq(self.z, other.z)
        )

    __hash__ = None  # type: ignore[assignment]

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)
