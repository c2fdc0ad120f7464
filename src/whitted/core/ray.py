"""Ray type for the Python render path and ray helpers for Taichi kernels.

The Python-side Ray pairs a Pos3 origin with a Vec3 direction. Transforming a
ray by a matrix moves its origin as a point and its direction as a vector, so
pure translations leave the direction untouched.

The Taichi helpers below mirror the same operations on ``ti.math`` vectors
for use inside kernels.

Example:
    >>> from src.whitted.core.matrix import Matrix
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.vector import Pos3, Vec3
    >>> ray = Ray(Pos3(1.0, 2.0, 3.0), Vec3(0.0, 1.0, 0.0))
    >>> ray.transform(Matrix.translation(3.0, 4.0, 5.0)).origin
    Pos3(x=4.0, y=6.0, z=8.0)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.whitted.core.matrix import Matrix
from src.whitted.core.vector import Pos3, Vec3

# Type aliases for Taichi-side vectors and transforms
vec3 = tm.vec3
vec4 = tm.vec4
mat4 = tm.mat4


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin point and a direction vector.

    Attributes:
        origin: Starting point of the ray.
        direction: Direction of travel. Not required to be normalized; hit
            distances are measured in multiples of this vector.
    """

    origin: Pos3
    direction: Vec3

    def position(self, t: float) -> Pos3:
        """Return the point at parametric distance t along the ray."""
        return self.origin + self.direction * t

    def transform(self, matrix: Matrix) -> "Ray":
        """Return the ray expressed in the coordinate space of ``matrix``."""
        return Ray(matrix * self.origin, matrix * self.direction)


# =============================================================================
# Taichi helpers
# =============================================================================


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f32) -> vec3:
    """Point along a ray at parameter t."""
    return origin + t * direction


@ti.func
def transform_point(m: mat4, p: vec3) -> vec3:
    """Apply a 4x4 transform to a point (homogeneous weight 1)."""
    r = m @ vec4(p.x, p.y, p.z, 1.0)
    return vec3(r.x, r.y, r.z)


@ti.func
def transform_direction(m: mat4, d: vec3) -> vec3:
    """Apply a 4x4 transform to a direction (homogeneous weight 0)."""
    r = m @ vec4(d.x, d.y, d.z, 0.0)
    return vec3(r.x, r.y, r.z)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a unit normal."""
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def safe_normalize(v: vec3) -> vec3:
    """Normalize, mapping the zero vector to itself."""
    result = vec3(0.0, 0.0, 0.0)
    length = tm.length(v)
    if length > 0.0:
        result = v / length
    return result
