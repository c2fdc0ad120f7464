"""Kernel-side scene storage and ray queries.

The render kernel cannot walk Python objects, so the Scene is flattened into
Taichi fields in Structure-of-Arrays layout: per-sphere transforms and
material coefficients, per-light kind/intensity/vector, plus the background
color and the shadow switch. The fields are preallocated to fixed capacities
so kernels compile once.

Light kinds are encoded as integers (LightKind). A light's ``vector`` holds
the position for point lights and the direction toward the light for
directional lights.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.fields import upload_scene, get_sphere_count
    >>> from src.whitted.scene.presets import create_spheres_scene
    >>> scene, _ = create_spheres_scene()
    >>> upload_scene(scene)
    >>> get_sphere_count()
    4
"""

import logging
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import vec3
from src.whitted.geometry.sphere import Sphere, hit_unit_sphere
from src.whitted.scene.lights import AmbientLight, DirectionalLight, Light, PointLight
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)


class LightKind(IntEnum):
    """Integer tags for light variants stored in fields."""

    AMBIENT = 0
    POINT = 1
    DIRECTIONAL = 2


@ti.dataclass
class SceneHitRecord:
    """Nearest hit of a ray against the stored scene.

    Attributes:
        hit: 1 if any sphere was hit, 0 otherwise.
        t: Ray parameter of the nearest hit. Only valid if hit == 1.
        sphere_index: Index of the hit sphere. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    sphere_index: ti.i32


# Maximum number of primitives and lights supported in the scene
MAX_SPHERES = 1024
MAX_LIGHTS = 64

# Stand-in for an unbounded ray parameter inside kernels
FAR_T = 1e30

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SPHERES)
sphere_inverse_transpose = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_SPHERES)
sphere_color = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_ambient = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_diffuse = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_specular = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
# Specular exponent; 0 marks a matte surface
sphere_shine = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_reflectivity = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Light storage
light_kind = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_intensity = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_vector = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

# Scene-wide settings
background_color = ti.Vector.field(3, dtype=ti.f32, shape=())
shadows_enabled = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres and lights.

    Resets the counts to zero. The field data itself is overwritten when new
    entries are added.
    """
    num_spheres[None] = 0
    num_lights[None] = 0
    background_color[None] = [0.0, 0.0, 0.0]
    shadows_enabled[None] = 1


def add_sphere(sphere: Sphere) -> int:
    """Store a sphere's transforms and material.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    material = sphere.material
    sphere_inverse[idx] = [list(row) for row in sphere.inverse.rows]
    sphere_inverse_transpose[idx] = [list(row) for row in sphere.inverse_transpose.rows]
    sphere_color[idx] = list(material.color)
    sphere_ambient[idx] = material.ambient
    sphere_diffuse[idx] = material.diffuse
    sphere_specular[idx] = material.specular
    sphere_shine[idx] = material.shine if material.shine is not None else 0.0
    sphere_reflectivity[idx] = material.reflectivity
    num_spheres[None] = idx + 1
    return idx


def add_light(light: Light) -> int:
    """Store a light.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    match light:
        case AmbientLight():
            light_kind[idx] = int(LightKind.AMBIENT)
            light_vector[idx] = [0.0, 0.0, 0.0]
        case PointLight(position=position):
            light_kind[idx] = int(LightKind.POINT)
            light_vector[idx] = list(position)
        case DirectionalLight(direction=direction):
            light_kind[idx] = int(LightKind.DIRECTIONAL)
            light_vector[idx] = list(direction)
        case _:
            raise TypeError(f"Unknown light kind: {light!r}")
    light_intensity[idx] = list(light.intensity)
    num_lights[None] = idx + 1
    return idx


def upload_scene(scene: Scene) -> None:
    """Replace the stored scene with ``scene``.

    Raises:
        RuntimeError: If the scene exceeds MAX_SPHERES or MAX_LIGHTS.
    """
    if len(scene.spheres) > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    if len(scene.lights) > MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    clear_scene()
    for sphere in scene.spheres:
        add_sphere(sphere)
    for light in scene.lights:
        add_light(light)
    background_color[None] = list(scene.background.clamped())
    shadows_enabled[None] = 1 if scene.shadows else 0
    logger.debug(
        "Uploaded scene: %d spheres, %d lights, shadows=%s",
        len(scene.spheres),
        len(scene.lights),
        scene.shadows,
    )


def get_sphere_count() -> int:
    """Get the number of spheres in the stored scene."""
    return int(num_spheres[None])


def get_light_count() -> int:
    """Get the number of lights in the stored scene."""
    return int(num_lights[None])


# =============================================================================
# Kernel-side queries
# =============================================================================


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(hit=0, t=0.0, sphere_index=-1)


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
    skip: ti.i32,
) -> SceneHitRecord:
    """Find the nearest sphere hit with ``t_min < t < t_max`` and ``t > 0``.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Exclusive lower bound on accepted hits.
        t_max: Exclusive upper bound on accepted hits.
        skip: Index of a sphere to leave out, or -1 to test every sphere.

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        if i != skip:
            rec = hit_unit_sphere(ray_origin, ray_direction, sphere_inverse[i], t_min, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = SceneHitRecord(hit=1, t=rec.t, sphere_index=i)

    return result


@ti.func
def intersect_scene_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
    skip: ti.i32,
) -> ti.i32:
    """Test if anything other than sphere ``skip`` lies along the ray inside (t_min, t_max).

    Used for shadow rays, where only occlusion matters.

    Returns:
        1 if any sphere was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(num_spheres[None]):
        if hit_any == 0 and i != skip:
            rec = hit_unit_sphere(ray_origin, ray_direction, sphere_inverse[i], t_min, t_max)
            if rec.hit == 1:
                hit_any = 1

    return hit_any


@ti.func
def light_direction(i: ti.i32, point: vec3) -> vec3:
    """Unnormalized vector from ``point`` toward light ``i``."""
    result = light_vector[i]
    if light_kind[i] == int(LightKind.POINT):
        result = light_vector[i] - point
    return result


@ti.func
def shadow_limit(i: ti.i32, point: vec3) -> ti.f32:
    """World-space distance a shadow ray from ``point`` travels toward light ``i``.

    Shadow rays toward a point light stop at the light; toward a directional
    light they are unbounded.
    """
    limit = FAR_T
    if light_kind[i] == int(LightKind.POINT):
        limit = tm.length(light_vector[i] - point)
    return limit
