"""Unit tests for Scene.compute_lighting.

The surface point is the origin with normal (0, 0, -1) and the default
material (white, ambient 0.1, diffuse 0.9, specular 0.9, shininess 200).
"""

import math

import pytest

from src.whitted.core.color import WHITE, Color
from src.whitted.core.vector import Pos3, Vec3
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import Material, Matte
from src.whitted.scene.lights import AmbientLight, DirectionalLight, PointLight
from src.whitted.scene.scene import Scene

HALF_SQRT2 = math.sqrt(2.0) / 2.0
POINT = Pos3(0.0, 0.0, 0.0)
NORMAL = Vec3(0.0, 0.0, -1.0)


def _gray(value):
    return pytest.approx((value, value, value), abs=1e-4)


class TestPointLight:
    """Tests for a single white point light."""

    def test_eye_between_light_and_surface(self, lighting_scene):
        scene = lighting_scene(Pos3(0.0, 0.0, -10.0))
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(1.9)

    def test_eye_offset_45_degrees(self, lighting_scene):
        scene = lighting_scene(Pos3(0.0, 0.0, -10.0))
        view = Vec3(0.0, HALF_SQRT2, -HALF_SQRT2)
        result = scene.compute_lighting(POINT, NORMAL, view, Material())
        assert result.to_tuple() == _gray(1.0)

    def test_light_offset_45_degrees(self, lighting_scene):
        scene = lighting_scene(Pos3(0.0, 10.0, -10.0))
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(0.7364)

    def test_eye_in_reflection_path(self, lighting_scene):
        scene = lighting_scene(Pos3(0.0, 10.0, -10.0))
        view = Vec3(0.0, -HALF_SQRT2, -HALF_SQRT2)
        result = scene.compute_lighting(POINT, NORMAL, view, Material())
        assert result.to_tuple() == _gray(1.6364)

    def test_light_behind_surface(self, lighting_scene):
        """Only the ambient term remains when the light is behind the surface."""
        scene = lighting_scene(Pos3(0.0, 0.0, 10.0))
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(0.1)

    def test_matte_surface_has_no_highlight(self, lighting_scene):
        scene = lighting_scene(Pos3(0.0, 0.0, -10.0))
        material = Material(surface=Matte())
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), material)
        assert result.to_tuple() == _gray(1.0)

    def test_material_color_tints_diffuse_not_specular(self, lighting_scene):
        scene = lighting_scene(Pos3(0.0, 0.0, -10.0))
        material = Material(color=Color(1.0, 0.0, 0.0))
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), material)
        assert result.to_tuple() == pytest.approx((1.9, 0.9, 0.9), abs=1e-4)

    def test_result_is_not_clamped(self, lighting_scene):
        scene = lighting_scene(Pos3(0.0, 0.0, -10.0))
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.r > 1.0


class TestShadows:
    """Tests for shadow rays."""

    def _blocked_scene(self, shadows=True):
        blocker = Sphere.from_center(Pos3(0.0, 0.0, -5.0), 1.0)
        return Scene(
            spheres=[blocker],
            lights=[PointLight(WHITE, Pos3(0.0, 0.0, -10.0))],
            shadows=shadows,
        )

    def test_shadowed_point_gets_ambient_only(self):
        scene = self._blocked_scene()
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(0.1)

    def test_shadows_can_be_disabled(self):
        scene = self._blocked_scene(shadows=False)
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(1.9)

    def test_object_beyond_light_does_not_shadow(self):
        scene = Scene(
            spheres=[Sphere.from_center(Pos3(0.0, 0.0, -20.0), 1.0)],
            lights=[PointLight(WHITE, Pos3(0.0, 0.0, -10.0))],
        )
        assert not scene.is_shadowed(POINT, Vec3(0.0, 0.0, -1.0), 10.0)

    def test_object_behind_point_does_not_shadow(self):
        scene = Scene(spheres=[Sphere.from_center(Pos3(0.0, 0.0, 5.0), 1.0)])
        assert not scene.is_shadowed(POINT, Vec3(0.0, 0.0, -1.0), 10.0)

    def test_surface_does_not_shadow_itself(self):
        """A shadow ray starting on a sphere's surface ignores that surface."""
        sphere = Sphere()
        scene = Scene(spheres=[sphere])
        on_surface = Pos3(0.0, 0.0, -1.0)
        assert not scene.is_shadowed(on_surface, Vec3(0.0, 0.0, -1.0), 10.0)

    def test_near_blocker_shadows_far_light(self):
        """The self-shadow cutoff is a world distance, not a fraction of the light distance."""
        scene = Scene(
            spheres=[Sphere.from_center(Pos3(0.0, 0.0, -0.8), 0.5)],
            lights=[PointLight(WHITE, Pos3(0.0, 0.0, -2000.0))],
        )
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(0.1)

    def test_shadow_distance_is_in_world_units(self):
        scene = Scene(spheres=[Sphere.from_center(Pos3(0.0, 0.0, -3.0), 1.0)])
        assert scene.is_shadowed(POINT, Vec3(0.0, 0.0, -1.0), 2.5)
        assert not scene.is_shadowed(POINT, Vec3(0.0, 0.0, -1.0), 1.5)

    def test_light_between_point_and_blocker(self):
        scene = Scene(
            spheres=[Sphere.from_center(Pos3(0.0, 0.0, -5.0), 1.0)],
            lights=[PointLight(WHITE, Pos3(0.0, 0.0, -2.0))],
        )
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(1.9)


class TestOtherLights:
    """Tests for ambient and directional lights and light sums."""

    def test_ambient_light(self):
        scene = Scene(lights=[AmbientLight(WHITE * 0.2)])
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(0.02)

    def test_directional_light_toward_viewer(self):
        scene = Scene(lights=[DirectionalLight(WHITE, Vec3(0.0, 0.0, -1.0))])
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(1.9)

    def test_directional_light_direction_is_normalized(self):
        scene = Scene(lights=[DirectionalLight(WHITE, Vec3(0.0, 0.0, -7.0))])
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(1.9)

    def test_directional_light_is_shadowed_at_any_distance(self):
        scene = Scene(
            spheres=[Sphere.from_center(Pos3(0.0, 0.0, -100.0), 1.0)],
            lights=[DirectionalLight(WHITE, Vec3(0.0, 0.0, -1.0))],
        )
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(0.1)

    def test_lights_add_up(self):
        scene = Scene(
            lights=[
                PointLight(WHITE * 0.5, Pos3(0.0, 0.0, -10.0)),
                PointLight(WHITE * 0.5, Pos3(0.0, 0.0, -10.0)),
            ]
        )
        result = scene.compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.to_tuple() == _gray(1.9)

    def test_no_lights_is_black(self):
        result = Scene().compute_lighting(POINT, NORMAL, Vec3(0.0, 0.0, -1.0), Material())
        assert result.is_black()
