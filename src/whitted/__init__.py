"""Python implementation of a Whitted-style recursive ray tracer.

The package renders scenes made of (optionally transformed) spheres lit by
ambient, point and directional lights, with shadows and recursive mirror
reflection. Two render paths share one lighting model:
- a pure-Python reference path built on small immutable value types
- a Taichi kernel that evaluates every pixel in parallel

Subpackages:
    core: Vector/position algebra, colors, matrices, rays and render drivers
    geometry: Sphere primitive with object-space intersection
    materials: Phong-style materials and surface kinds
    scene: Lights, intersections, the Scene itself and scene configuration
    camera: Viewport mapping pixels to primary rays
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
