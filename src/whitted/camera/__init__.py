"""Camera module for primary ray generation.

Components:
    viewport: Viewport camera and canvas/pixel coordinate conversion
"""

from .viewport import Viewport, canvas_to_pixel, pixel_to_canvas

__all__ = [
    "Viewport",
    "canvas_to_pixel",
    "pixel_to_canvas",
]
