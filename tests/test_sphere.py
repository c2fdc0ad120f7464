"""Unit tests for the sphere primitive.

Tests cover:
- Construction and validation (singular transforms, radius)
- Object-space intersection for unit, scaled and translated spheres
- Degenerate rays and misses
- Outward normals under transforms
- The kernel-side unit-sphere test
"""

import math

import pytest
import taichi as ti

from src.whitted.core.matrix import Matrix
from src.whitted.core.ray import Ray
from src.whitted.core.vector import Pos3, Vec3
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import Material


class TestSphereConstruction:
    """Tests for building spheres."""

    def test_default_is_unit_sphere(self):
        sphere = Sphere()
        assert sphere.transform == Matrix.identity()
        assert sphere.inverse == Matrix.identity()
        assert sphere.material == Material.default()

    def test_inverse_is_precomputed(self):
        transform = Matrix.translation(1.0, 2.0, 3.0)
        sphere = Sphere(transform)
        assert sphere.inverse == transform.invert()
        assert sphere.inverse_transpose == transform.invert().transposed()

    def test_singular_transform_raises(self):
        with pytest.raises(ValueError, match="not invertible"):
            Sphere(Matrix.scaling(0.0, 1.0, 1.0))

    def test_from_center(self):
        sphere = Sphere.from_center(Pos3(1.0, 2.0, 3.0), 2.0)
        assert sphere.transform * Pos3.origin() == Pos3(1.0, 2.0, 3.0)
        assert sphere.transform * Pos3(1.0, 0.0, 0.0) == Pos3(3.0, 2.0, 3.0)

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_from_center_rejects_non_positive_radius(self, radius):
        with pytest.raises(ValueError, match="radius"):
            Sphere.from_center(Pos3.origin(), radius)

    def test_with_transform_returns_new_sphere(self):
        material = Material(ambient=0.5)
        sphere = Sphere(material=material)
        moved = sphere.with_transform(Matrix.translation(0.0, 1.0, 0.0))
        assert moved is not sphere
        assert moved.material is material
        assert sphere.transform == Matrix.identity()

    def test_spheres_compare_by_identity(self):
        assert Sphere() != Sphere()


class TestSphereIntersection:
    """Tests for Sphere.intersect."""

    def test_ray_through_center(self):
        sphere = Sphere()
        hits = sphere.intersect(Ray(Pos3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0)))
        assert [h.t for h in hits] == [4.0, 6.0]
        assert all(h.obj is sphere for h in hits)

    def test_tangent_ray(self):
        hits = Sphere().intersect(Ray(Pos3(0.0, 1.0, -5.0), Vec3(0.0, 0.0, 1.0)))
        assert [h.t for h in hits] == [5.0, 5.0]

    def test_miss(self):
        assert Sphere().intersect(Ray(Pos3(0.0, 2.0, -5.0), Vec3(0.0, 0.0, 1.0))) == []

    def test_ray_inside_sphere(self):
        hits = Sphere().intersect(Ray(Pos3.origin(), Vec3(0.0, 0.0, 1.0)))
        assert [h.t for h in hits] == [-1.0, 1.0]

    def test_sphere_behind_ray(self):
        hits = Sphere().intersect(Ray(Pos3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, 1.0)))
        assert [h.t for h in hits] == [-6.0, -4.0]

    def test_scaled_sphere(self):
        sphere = Sphere(Matrix.scaling(2.0, 2.0, 2.0))
        hits = sphere.intersect(Ray(Pos3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0)))
        assert [h.t for h in hits] == pytest.approx([3.0, 7.0])

    def test_translated_sphere_missed(self):
        sphere = Sphere(Matrix.translation(5.0, 0.0, 0.0))
        assert sphere.intersect(Ray(Pos3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0))) == []

    def test_unnormalized_direction_measures_t_in_direction_units(self):
        hits = Sphere().intersect(Ray(Pos3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 2.0)))
        assert [h.t for h in hits] == pytest.approx([2.0, 3.0])

    def test_zero_direction_has_no_hits(self):
        assert Sphere().intersect(Ray(Pos3(0.0, 0.0, -5.0), Vec3.zero())) == []

    def test_does_not_mutate_ray(self):
        ray = Ray(Pos3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0))
        Sphere(Matrix.scaling(2.0, 2.0, 2.0)).intersect(ray)
        assert ray.origin == Pos3(0.0, 0.0, -5.0)
        assert ray.direction == Vec3(0.0, 0.0, 1.0)


class TestSphereNormal:
    """Tests for Sphere.normal_at."""

    @pytest.mark.parametrize(
        "point, expected",
        [
            (Pos3(1.0, 0.0, 0.0), Vec3(1.0, 0.0, 0.0)),
            (Pos3(0.0, 1.0, 0.0), Vec3(0.0, 1.0, 0.0)),
            (Pos3(0.0, 0.0, 1.0), Vec3(0.0, 0.0, 1.0)),
        ],
    )
    def test_unit_sphere_axes(self, point, expected):
        assert Sphere().normal_at(point) == expected

    def test_normal_is_normalized(self):
        s = math.sqrt(3.0) / 3.0
        n = Sphere().normal_at(Pos3(s, s, s))
        assert n == Vec3(s, s, s)
        assert n.magnitude() == pytest.approx(1.0)

    def test_translated_sphere(self):
        sphere = Sphere(Matrix.translation(0.0, 1.0, 0.0))
        assert sphere.normal_at(Pos3(0.0, 1.70711, -0.70711)) == Vec3(0.0, 0.70711, -0.70711)

    def test_scaled_and_rotated_sphere(self):
        sphere = Sphere(Matrix.scaling(1.0, 0.5, 1.0) * Matrix.rotation_z(math.pi / 5.0))
        h = math.sqrt(2.0) / 2.0
        assert sphere.normal_at(Pos3(0.0, h, -h)) == Vec3(0.0, 0.97014, -0.24254)


class TestKernelUnitSphere:
    """Tests for the Taichi hit_unit_sphere function."""

    def _hit(self, origin, direction, transform, t_min=0.0, t_max=1e30):
        from src.whitted.core.ray import mat4, vec3
        from src.whitted.geometry.sphere import hit_unit_sphere

        inverse = transform.invert()
        rows = [list(row) for row in inverse.rows]
        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(inv: mat4, ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
            rec = hit_unit_sphere(vec3(ox, oy, oz), vec3(dx, dy, dz), inv, t_min, t_max)
            hit[None] = rec.hit
            t_val[None] = rec.t

        test_kernel(mat4(rows), *origin, *direction)
        return hit[None], t_val[None]

    def test_scaled_sphere_nearest_root(self):
        hit, t = self._hit((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), Matrix.scaling(2.0, 2.0, 2.0))
        assert hit == 1
        assert abs(t - 3.0) < 1e-4

    def test_inside_sphere_returns_far_root(self):
        """Negative roots are never accepted."""
        hit, t = self._hit((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), Matrix.identity())
        assert hit == 1
        assert abs(t - 1.0) < 1e-4

    def test_miss(self):
        hit, _ = self._hit((0.0, 2.0, -5.0), (0.0, 0.0, 1.0), Matrix.identity())
        assert hit == 0

    def test_t_max_excludes_hits(self):
        hit, _ = self._hit((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), Matrix.identity(), t_max=3.0)
        assert hit == 0

    def test_translated_sphere(self):
        hit, t = self._hit((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), Matrix.translation(0.0, 0.0, 2.0))
        assert hit == 1
        assert abs(t - 6.0) < 1e-4
