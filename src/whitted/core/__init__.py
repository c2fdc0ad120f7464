"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: Vec3 (free vectors) and Pos3 (points)
    color: Linear RGB colors and named color constants
    matrix: Immutable matrices and affine transform constructors
    ray: Ray type and Taichi-side ray helpers
    integrator: Whitted integrator as a Taichi kernel
    render: Thread-pool row driver for the Python render path
    renderer: Render settings and backend selection
"""

from .color import BLACK, NAMED_COLORS, WHITE, Color, color_from_spec
from .matrix import Matrix
from .ray import Ray, vec3
from .vector import FLOAT_TOLERANCE, Pos3, Vec3, float_eq

# Note: integrator, render and renderer are NOT imported here to avoid circular
# imports (they depend on the scene package), and because the integrator
# allocates Taichi fields on import. Import them directly, e.g.:
#   from src.whitted.core.renderer import Renderer, RenderSettings

__all__ = [
    "Vec3",
    "Pos3",
    "FLOAT_TOLERANCE",
    "float_eq",
    "Color",
    "BLACK",
    "WHITE",
    "NAMED_COLORS",
    "color_from_spec",
    "Matrix",
    "Ray",
    "vec3",
]
