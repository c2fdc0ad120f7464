"""Whitted integrator running as a Taichi kernel.

This module renders the scene stored in ``src.whitted.scene.fields`` with
one kernel thread per pixel. Each thread builds its primary ray from the
viewport fields, follows mirror reflections with a weight accumulator (kernel
code cannot recurse) and writes only its own cell of the color buffer.

The lighting model is the same as Scene.compute_lighting: every light adds
an ambient term, unshadowed point and directional lights add diffuse and
Phong specular terms. The local color is clamped at every bounce and blended
with the reflected color by the material reflectivity.

Computation is float32, so results match the Python render path to within
rounding rather than bit for bit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.integrator import (
    ...     get_image_uint8, load_scene, render_image, setup_render_target, setup_viewport
    ... )
    >>> from src.whitted.scene.presets import create_spheres_scene
    >>>
    >>> scene, viewport = create_spheres_scene()
    >>> load_scene(scene)
    >>> setup_viewport(viewport)
    >>> setup_render_target(256, 256)
    >>> render_image(depth=3)
    >>> pixels = get_image_uint8()
"""

import logging
import math

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.whitted.camera.viewport import Viewport
from src.whitted.core.ray import ray_at, reflect, safe_normalize, vec3
from src.whitted.geometry.sphere import unit_sphere_normal
from src.whitted.scene.fields import (
    FAR_T,
    LightKind,
    background_color,
    intersect_scene,
    intersect_scene_any,
    light_direction,
    light_intensity,
    light_kind,
    num_lights,
    shadow_limit,
    shadows_enabled,
    sphere_ambient,
    sphere_color,
    sphere_diffuse,
    sphere_inverse,
    sphere_inverse_transpose,
    sphere_reflectivity,
    sphere_shine,
    sphere_specular,
    upload_scene,
)
from src.whitted.scene.scene import REFLECTION_EPSILON, SHADOW_EPSILON, SURFACE_OFFSET, Scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum reflection depth the kernel loop is unrolled for
MAX_DEPTH = 16

# Default primary-ray bounds: skip hits before the image plane
DEFAULT_T_MIN = 1.0
DEFAULT_T_MAX = math.inf

# =============================================================================
# Viewport Configuration
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
# (width, height, distance) of the image plane
_viewport_size = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_viewport(viewport: Viewport) -> None:
    """Write the viewport into the fields read by the kernel.

    Args:
        viewport: Camera position and image plane extent.
    """
    _camera_position[None] = list(viewport.position)
    _viewport_size[None] = [viewport.width, viewport.height, viewport.distance]


def load_scene(scene: Scene) -> None:
    """Upload a Scene for rendering.

    Raises:
        RuntimeError: If the scene exceeds the stored capacity.
    """
    upload_scene(scene)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed [column, row], row 0 at the top of the image
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT to avoid Taichi kernel
    recompilation.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a secondary ray origin to the side of the surface it travels toward."""
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + SURFACE_OFFSET * offset_dir


@ti.func
def _leaving_sphere(normal: vec3, direction: vec3, s: ti.i32) -> ti.i32:
    """Sphere index to skip for a ray leaving sphere ``s``, or -1.

    A ray leaving the outside of a convex surface cannot hit it again.
    """
    skip = -1
    if tm.dot(direction, normal) > 0.0:
        skip = s
    return skip


@ti.func
def compute_lighting(point: vec3, normal: vec3, view: vec3, s: ti.i32) -> vec3:
    """Local illumination of sphere ``s`` at ``point`` (unclamped).

    Args:
        point: World-space surface point.
        normal: Unit outward normal.
        view: Unit vector toward the viewer.
        s: Index of the sphere whose material is used.

    Returns:
        The summed ambient, diffuse and specular contributions.
    """
    result = vec3(0.0, 0.0, 0.0)
    color = sphere_color[s]

    for k in range(num_lights[None]):
        intensity = light_intensity[k]
        effective = color * intensity
        result += effective * sphere_ambient[s]

        if light_kind[k] != int(LightKind.AMBIENT):
            light_dir = safe_normalize(light_direction(k, point))

            blocked = 0
            if shadows_enabled[None] == 1:
                blocked = intersect_scene_any(
                    _offset_ray_origin(point, normal, light_dir),
                    light_dir,
                    SHADOW_EPSILON,
                    shadow_limit(k, point),
                    _leaving_sphere(normal, light_dir, s),
                )

            if blocked == 0:
                n_dot_l = tm.dot(normal, light_dir)

                if n_dot_l > 0.0:
                    result += effective * sphere_diffuse[s] * n_dot_l

                    # A zero exponent marks a matte surface
                    shine = sphere_shine[s]
                    if shine > 0.0:
                        reflected = reflect(-light_dir, normal)
                        r_dot_v = tm.dot(reflected, view)
                        if r_dot_v > 0.0:
                            result += intensity * sphere_specular[s] * tm.pow(r_dot_v, shine)

    return result


@ti.func
def trace_whitted(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
    depth: ti.i32,
) -> vec3:
    """Trace a ray with at most ``depth`` mirror bounces.

    Args:
        ray_origin: World-space ray origin.
        ray_direction: Ray direction (need not be normalized).
        t_min: Exclusive lower bound on the first hit.
        t_max: Exclusive upper bound on every hit.
        depth: Remaining reflection bounces (at most MAX_DEPTH).

    Returns:
        The color of the ray, clamped to [0, 1].
    """
    origin = ray_origin
    direction = ray_direction
    lower = t_min
    skip = -1

    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0

    # Active flag for bounce continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for bounce in range(MAX_DEPTH + 1):
        if active == 1 and bounce <= depth:
            rec = intersect_scene(origin, direction, lower, t_max, skip)

            if rec.hit == 0:
                color += weight * background_color[None]
                active = 0
            else:
                s = rec.sphere_index
                point = ray_at(origin, direction, rec.t)
                normal = unit_sphere_normal(sphere_inverse[s], sphere_inverse_transpose[s], point)
                view = safe_normalize(-direction)
                local = tm.clamp(compute_lighting(point, normal, view, s), 0.0, 1.0)
                r = sphere_reflectivity[s]

                if bounce == depth or r == 0.0:
                    color += weight * local
                    active = 0
                else:
                    color += weight * (1.0 - r) * local
                    weight *= r
                    direction = reflect(direction, normal)
                    origin = _offset_ray_origin(point, normal, direction)
                    lower = REFLECTION_EPSILON
                    skip = _leaving_sphere(normal, direction, s)

    return tm.clamp(color, 0.0, 1.0)


@ti.func
def primary_direction(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Direction of the primary ray through a top-left pixel index."""
    x = ti.cast(pixel_i - width // 2, ti.f32)
    y = ti.cast(height // 2 - pixel_j - 1, ti.f32)
    size = _viewport_size[None]
    return vec3(
        x * size[0] / ti.cast(width, ti.f32),
        y * size[1] / ti.cast(height, ti.f32),
        size[2],
    )


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render(width: ti.i32, height: ti.i32, depth: ti.i32, t_min: ti.f32, t_max: ti.f32):
    """Render every pixel once into the color buffer."""
    for i, j in ti.ndrange(width, height):
        direction = primary_direction(i, j, width, height)
        color = trace_whitted(_camera_position[None], direction, t_min, t_max, depth)

        # Replace NaN with zero
        for c in ti.static(range(3)):
            if tm.isnan(color[c]):
                color[c] = 0.0

        _color_buffer[i, j] = color


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    depth: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> vec3:
    """Render one pixel and return its color without touching the buffer."""
    direction = primary_direction(pixel_i, pixel_j, width, height)
    return trace_whitted(_camera_position[None], direction, t_min, t_max, depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def _check_depth(depth: int) -> None:
    if depth < 0 or depth > MAX_DEPTH:
        raise ValueError(f"Reflection depth must be in [0, {MAX_DEPTH}], got {depth}")


def render_pixel(
    pixel_i: int,
    pixel_j: int,
    depth: int = 3,
    t_min: float = DEFAULT_T_MIN,
    t_max: float = DEFAULT_T_MAX,
) -> tuple[float, float, float]:
    """Render a single pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        depth: Maximum number of reflection bounces.
        t_min: Exclusive lower bound on primary hits.
        t_max: Exclusive upper bound on hits.

    Returns:
        Tuple of (R, G, B) color values in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If depth is out of range.
    """
    _check_render_target_initialized()
    _check_depth(depth)

    width, height = get_image_dimensions()
    color = _render_single_pixel(
        pixel_i, pixel_j, width, height, depth, t_min, min(t_max, FAR_T)
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(
    depth: int = 3,
    t_min: float = DEFAULT_T_MIN,
    t_max: float = DEFAULT_T_MAX,
) -> None:
    """Render the loaded scene into the color buffer.

    Args:
        depth: Maximum number of reflection bounces.
        t_min: Exclusive lower bound on primary hits.
        t_max: Exclusive upper bound on hits.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If depth is out of range.
    """
    _check_render_target_initialized()
    _check_depth(depth)

    width, height = get_image_dimensions()
    logger.debug("Rendering %dx%d with depth %d on the Taichi backend", width, height, depth)
    _render(width, height, depth, t_min, min(t_max, FAR_T))
    ti.sync()


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3) with dtype float32, row 0 at the
    top, values in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region of the full buffer
    image = _color_buffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    return np.clip(image, 0.0, 1.0).astype(np.float32)


def get_image_uint8() -> npt.NDArray[np.uint8]:
    """Get the rendered image quantized to 8-bit channels.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    from src.whitted.preview.export import image_to_uint8

    return image_to_uint8(get_image_numpy())


def render_scene(
    scene: Scene,
    viewport: Viewport,
    width: int,
    height: int,
    depth: int = 3,
    t_min: float = DEFAULT_T_MIN,
    t_max: float = DEFAULT_T_MAX,
) -> npt.NDArray[np.uint8]:
    """Upload a scene, render it and return a (height, width, 3) uint8 image.

    Raises:
        ValueError: If the image size or depth is out of range.
        RuntimeError: If the scene exceeds the stored capacity.
    """
    load_scene(scene)
    setup_viewport(viewport)
    setup_render_target(width, height)
    render_image(depth, t_min, t_max)
    return get_image_uint8()


def save_image(filepath: str) -> None:
    """Save the rendered image to a PNG file.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    from src.whitted.preview.export import save_png_from_array

    save_png_from_array(get_image_numpy(), filepath)
