"""Geometry module for scene primitives.

Components:
    sphere: Transformed unit sphere with Python and Taichi intersection
"""

from .sphere import HitRecord, Sphere, hit_unit_sphere, unit_sphere_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_unit_sphere",
    "unit_sphere_normal",
]
