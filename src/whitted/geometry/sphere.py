"""Sphere primitive intersected in object space.

Every sphere is the unit sphere at the origin placed in the world by an
affine transform (object to world). Rays are moved into object space with
the precomputed inverse transform, intersected with the unit sphere there,
and the resulting parameters are valid along the original world-space ray
because affine maps preserve the ray parameter.

The module holds two renditions of the same test:
- Sphere.intersect for the pure-Python render path
- hit_unit_sphere, a Taichi function used by the render kernel

Example:
    >>> from src.whitted.core.matrix import Matrix
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.vector import Pos3, Vec3
    >>> from src.whitted.geometry.sphere import Sphere
    >>> sphere = Sphere(Matrix.scaling(2.0, 2.0, 2.0))
    >>> [i.t for i in sphere.intersect(Ray(Pos3(0, 0, -5), Vec3(0, 0, 1)))]
    [3.0, 7.0]
"""

import math
from dataclasses import dataclass, field

import taichi as ti
import taichi.math as tm

from src.whitted.core.matrix import Matrix
from src.whitted.core.ray import Ray, mat4, transform_direction, transform_point, vec3
from src.whitted.core.vector import Pos3, Vec3
from src.whitted.materials.material import Material
from src.whitted.scene.intersection import Intersection


@dataclass(frozen=True, eq=False)
class Sphere:
    """A transformed unit sphere.

    Spheres compare by identity: intersections refer back to the exact
    sphere instance that was hit.

    Attributes:
        transform: Object-to-world transform.
        material: Surface material.
        inverse: World-to-object transform, computed at construction.
        inverse_transpose: Transpose of ``inverse``, used to move normals
            back to world space.
    """

    transform: Matrix = field(default_factory=Matrix.identity)
    material: Material = field(default_factory=Material.default)
    inverse: Matrix = field(init=False, repr=False)
    inverse_transpose: Matrix = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.transform.width != 4 or self.transform.height != 4:
            raise ValueError(
                f"Sphere transform must be 4x4, got "
                f"{self.transform.height}x{self.transform.width}"
            )
        inverse = self.transform.invert()
        if inverse is None:
            raise ValueError("transform is not invertible")
        object.__setattr__(self, "inverse", inverse)
        object.__setattr__(self, "inverse_transpose", inverse.transposed())

    @classmethod
    def from_center(
        cls, center: Pos3, radius: float, material: "Material | None" = None
    ) -> "Sphere":
        """Build a sphere from a world-space center and radius.

        Raises:
            ValueError: If radius is not positive.
        """
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        transform = Matrix.translation(center.x, center.y, center.z) * Matrix.scaling(
            radius, radius, radius
        )
        return cls(transform, material if material is not None else Material.default())

    def with_transform(self, transform: Matrix) -> "Sphere":
        """Return a new sphere with the same material and another transform."""
        return Sphere(transform, self.material)

    def with_material(self, material: Material) -> "Sphere":
        return Sphere(self.transform, material)

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a world-space ray with this sphere.

        Returns:
            Both roots as Intersections in ascending order of t, or an empty
            list for a miss or a degenerate ray direction. Roots are returned
            regardless of sign; filtering happens at nearest-hit resolution.
        """
        local = ray.transform(self.inverse)
        sphere_to_ray = local.origin - Pos3.origin()
        direction = local.direction

        a = direction.dot(direction)
        if a == 0.0:
            return []
        b = 2.0 * sphere_to_ray.dot(direction)
        c = sphere_to_ray.dot(sphere_to_ray) - 1.0

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return []

        sqrt_d = math.sqrt(discriminant)
        t1 = (-b - sqrt_d) / (2.0 * a)
        t2 = (-b + sqrt_d) / (2.0 * a)
        if t1 > t2:
            t1, t2 = t2, t1
        return [Intersection(t1, self), Intersection(t2, self)]

    def normal_at(self, point: Pos3) -> Vec3:
        """Outward unit normal at a world-space point on the surface."""
        object_point = self.inverse * point
        object_normal = object_point - Pos3.origin()
        world_normal = self.inverse_transpose * object_normal
        return world_normal.normalized()


# =============================================================================
# Taichi intersection
# =============================================================================


@ti.dataclass
class HitRecord:
    """Result of a kernel-side ray/unit-sphere test.

    Attributes:
        hit: 1 if a root lies inside the accepted interval, 0 otherwise.
        t: Ray parameter of the nearest accepted root. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_unit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    inverse: mat4,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test a world-space ray against a transformed unit sphere.

    Accepts the nearer root when ``t_min < t < t_max`` and ``t > 0``,
    otherwise the farther root under the same conditions.

    Args:
        ray_origin: World-space ray origin.
        ray_direction: World-space ray direction (need not be normalized).
        inverse: World-to-object transform of the sphere.
        t_min: Exclusive lower bound for accepted hits.
        t_max: Exclusive upper bound for accepted hits.

    Returns:
        A HitRecord with the accepted parameter.
    """
    origin = transform_point(inverse, ray_origin)
    direction = transform_direction(inverse, ray_direction)

    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(origin, direction)
    c = tm.dot(origin, origin) - 1.0
    discriminant = b * b - 4.0 * a * c

    did_hit = 0
    hit_t = 0.0

    if a != 0.0 and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)
        if t0 > t1:
            temp = t0
            t0 = t1
            t1 = temp

        if t0 > t_min and t0 < t_max and t0 > 0.0:
            did_hit = 1
            hit_t = t0
        elif t1 > t_min and t1 < t_max and t1 > 0.0:
            did_hit = 1
            hit_t = t1

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def unit_sphere_normal(inverse: mat4, inverse_transpose: mat4, point: vec3) -> vec3:
    """Outward world-space unit normal at a point on a transformed sphere."""
    object_point = transform_point(inverse, point)
    return tm.normalize(transform_direction(inverse_transpose, object_point))
