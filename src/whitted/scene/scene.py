"""Scene container with nearest-hit resolution, shading and ray tracing.

A Scene holds the spheres, the lights and the background color. It answers
the three questions a Whitted tracer asks at every hit:
- which surface does a ray reach first (get_intersections / get_closest)
- how is that surface lit locally (compute_lighting, with shadow rays)
- what does it reflect (trace_ray, recursing on mirror rays)

The Scene is never modified while rendering, so any number of threads can
trace rays through the same instance.

Example:
    >>> from src.whitted.core.color import WHITE, Color
    >>> from src.whitted.core.ray import Ray
    >>> from src.whitted.core.vector import Pos3, Vec3
    >>> from src.whitted.geometry.sphere import Sphere
    >>> from src.whitted.scene.lights import PointLight
    >>> from src.whitted.scene.scene import Scene
    >>> scene = Scene(
    ...     spheres=[Sphere()],
    ...     lights=[PointLight(WHITE, Pos3(-10.0, 10.0, -10.0))],
    ... )
    >>> color = scene.trace_ray(Ray(Pos3(0, 0, -5), Vec3(0, 0, 1)), 1.0, float("inf"), 3)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from src.whitted.core.color import BLACK, Color
from src.whitted.core.ray import Ray
from src.whitted.core.vector import Pos3, Vec3
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import Material, Shiny
from src.whitted.scene.intersection import Intersection
from src.whitted.scene.lights import AmbientLight, DirectionalLight, Light, PointLight

# Lower bound on shadow-ray hits, in world units, so a surface does not shadow itself
SHADOW_EPSILON = 1e-3

# Lower bound on reflection-ray hits so a mirror does not hit its own surface
REFLECTION_EPSILON = 1e-3

# Distance secondary rays start above (or below) the surface they leave
SURFACE_OFFSET = 1e-3


def offset_origin(point: Pos3, normal: Vec3, direction: Vec3) -> Pos3:
    """Push a secondary ray origin off the surface it leaves.

    The point moves along the normal on the side the ray travels toward:
    outward for rays leaving the front face, inward otherwise.
    """
    if direction.dot(normal) < 0.0:
        return point - normal * SURFACE_OFFSET
    return point + normal * SURFACE_OFFSET


@dataclass(frozen=True)
class Scene:
    """Spheres, lights and background of a renderable scene.

    Attributes:
        spheres: Scene primitives. Intersections refer to these instances.
        lights: Light sources, applied in order.
        background: Color returned for rays that hit nothing.
        shadows: Whether point and directional lights cast shadows.
    """

    spheres: Sequence[Sphere] = ()
    lights: Sequence[Light] = ()
    background: Color = field(default=BLACK)
    shadows: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "spheres", tuple(self.spheres))
        object.__setattr__(self, "lights", tuple(self.lights))

    # =========================================================================
    # Nearest-hit resolution
    # =========================================================================

    def get_intersections(self, ray: Ray) -> list[Intersection]:
        """Intersect a ray with every sphere in scene order."""
        intersections: list[Intersection] = []
        for sphere in self.spheres:
            intersections.extend(sphere.intersect(ray))
        return intersections

    @staticmethod
    def get_closest(
        intersections: Iterable[Intersection],
        t_min: float = 0.0,
        t_max: float = math.inf,
    ) -> Intersection | None:
        """Pick the nearest intersection with ``t_min < t < t_max`` and ``t > 0``.

        Returns:
            The nearest accepted intersection, or None when the ray reaches
            the background.
        """
        accepted = [
            hit for hit in intersections if t_min < hit.t < t_max and hit.t > 0.0
        ]
        if not accepted:
            return None
        return min(accepted)

    def is_shadowed(self, point: Pos3, direction: Vec3, distance: float) -> bool:
        """Check whether anything blocks ``point`` along ``direction``.

        Args:
            point: Origin of the shadow ray.
            direction: Unit direction toward the light.
            distance: World-space distance to the light; infinity for a
                directional light.
        """
        shadow_ray = Ray(point, direction)
        for hit in self.get_intersections(shadow_ray):
            if SHADOW_EPSILON < hit.t < distance:
                return True
        return False

    # =========================================================================
    # Shading
    # =========================================================================

    def compute_lighting(
        self, point: Pos3, normal: Vec3, view: Vec3, material: Material
    ) -> Color:
        """Evaluate the local illumination at a surface point.

        Every light adds ``material.color * intensity * ambient``. Point and
        directional lights that are not shadowed also add a diffuse term and,
        for Shiny surfaces, a specular term; both only when the light is on
        the front side of the surface.

        Args:
            point: World-space surface point.
            normal: Unit outward normal at ``point``.
            view: Unit vector from ``point`` toward the viewer.
            material: Material of the surface.

        Returns:
            The unclamped local color.
        """
        result = BLACK
        for light in self.lights:
            effective = material.color * light.intensity
            result = result + effective * material.ambient

            match light:
                case AmbientLight():
                    continue
                case PointLight(position=position):
                    to_light = position - point
                    distance = to_light.magnitude()
                case DirectionalLight(direction=direction):
                    to_light = direction
                    distance = math.inf
                case _:
                    raise TypeError(f"Unknown light kind: {light!r}")

            light_dir = to_light.normalized()
            if self.shadows:
                origin = offset_origin(point, normal, light_dir)
                if self.is_shadowed(origin, light_dir, distance):
                    continue

            n_dot_l = normal.dot(light_dir)
            if n_dot_l <= 0.0:
                continue

            result = result + effective * (material.diffuse * n_dot_l)

            match material.surface:
                case Shiny(exponent=exponent):
                    reflected = (-light_dir).reflect(normal)
                    r_dot_v = reflected.dot(view)
                    if r_dot_v > 0.0:
                        factor = material.specular * r_dot_v**exponent
                        result = result + light.intensity * factor

        return result

    def _shade_hit(self, ray: Ray, hit: Intersection) -> tuple[Pos3, Vec3, Color]:
        point = ray.position(hit.t)
        normal = hit.obj.normal_at(point)
        view = (-ray.direction).normalized()
        local = self.compute_lighting(point, normal, view, hit.obj.material)
        return point, normal, local.clamped()

    def trace_ray(
        self,
        ray: Ray,
        t_min: float = 0.0,
        t_max: float = math.inf,
        depth: int = 3,
    ) -> Color:
        """Trace a ray and return its color, clamped to [0, 1].

        Mirror reflections are followed recursively at most ``depth`` times.
        At each level the clamped local color is blended with the reflected
        color by the material reflectivity.

        Args:
            ray: Ray to trace.
            t_min: Exclusive lower bound on accepted hits.
            t_max: Exclusive upper bound on accepted hits.
            depth: Remaining reflection bounces.
        """
        hit = self.get_closest(self.get_intersections(ray), t_min, t_max)
        if hit is None:
            return self.background.clamped()

        point, normal, local = self._shade_hit(ray, hit)
        reflectivity = hit.obj.material.reflectivity
        if depth <= 0 or reflectivity == 0.0:
            return local

        mirror_direction = ray.direction.reflect(normal)
        mirror = Ray(offset_origin(point, normal, mirror_direction), mirror_direction)
        reflected = self.trace_ray(mirror, REFLECTION_EPSILON, t_max, depth - 1)
        return (local * (1.0 - reflectivity) + reflected * reflectivity).clamped()

    def trace_ray_iterative(
        self,
        ray: Ray,
        t_min: float = 0.0,
        t_max: float = math.inf,
        depth: int = 3,
    ) -> Color:
        """Same result as trace_ray, using a weight accumulator instead of recursion.

        The render kernel follows this formulation since kernel code cannot
        recurse.
        """
        depth = max(depth, 0)
        color = BLACK
        weight = 1.0
        current = ray
        lower = t_min

        for bounce in range(depth + 1):
            hit = self.get_closest(self.get_intersections(current), lower, t_max)
            if hit is None:
                color = color + self.background.clamped() * weight
                break

            point, normal, local = self._shade_hit(current, hit)
            reflectivity = hit.obj.material.reflectivity
            if bounce == depth or reflectivity == 0.0:
                color = color + local * weight
                break

            color = color + local * (weight * (1.0 - reflectivity))
            weight *= reflectivity
            mirror_direction = current.direction.reflect(normal)
            current = Ray(offset_origin(point, normal, mirror_direction), mirror_direction)
            lower = REFLECTION_EPSILON

        return color.clamped()
