"""Viewport camera mapping canvas pixels to primary rays.

The viewport is a rectangle of logical size width x height placed at a fixed
distance in front of the camera position, looking down +z. Canvas
coordinates are center-relative: x grows to the right and y grows upward,
with (0, 0) at the middle of the image. Helpers convert between these and
top-left pixel indices used by image buffers.

On the kernel side the same mapping is evaluated from Taichi fields written
by setup_viewport().

Example:
    >>> from src.whitted.camera.viewport import Viewport
    >>> from src.whitted.core.vector import Pos3
    >>> viewport = Viewport(Pos3(0.0, 0.0, -5.0), 1.0, 1.0)
    >>> viewport.ray_from_coord(0, 0, 100, 100).direction
    Vec3(x=0.0, y=0.0, z=1.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.whitted.core.ray import Ray
from src.whitted.core.vector import Pos3, Vec3


@dataclass(frozen=True)
class Viewport:
    """Camera position and image plane extent.

    Attributes:
        position: Camera position; origin of every primary ray.
        width: Logical width of the image plane.
        height: Logical height of the image plane.
        distance: Distance from the camera to the image plane along +z.
    """

    position: Pos3 = field(default_factory=Pos3.origin)
    width: float = 1.0
    height: float = 1.0
    distance: float = 1.0

    def __post_init__(self) -> None:
        if not (self.width > 0.0 and self.height > 0.0):
            raise ValueError(
                f"Viewport size must be positive, got {self.width}x{self.height}"
            )
        if not self.distance > 0.0:
            raise ValueError(f"Viewport distance must be positive, got {self.distance}")

    def ray_from_coord(
        self, x: int, y: int, canvas_width: int, canvas_height: int
    ) -> Ray:
        """Primary ray through the center-relative canvas coordinate (x, y).

        The direction is not normalized, so hit parameters are measured in
        multiples of the camera-to-image-plane distance.
        """
        direction = Vec3(
            x * self.width / canvas_width,
            y * self.height / canvas_height,
            self.distance,
        )
        return Ray(self.position, direction)


def canvas_to_pixel(x: int, y: int, width: int, height: int) -> tuple[int, int]:
    """Center-relative canvas coordinate to top-left (column, row) pixel index."""
    return width // 2 + x, height // 2 - y - 1


def pixel_to_canvas(px: int, py: int, width: int, height: int) -> tuple[int, int]:
    """Top-left (column, row) pixel index to center-relative canvas coordinate."""
    return px - width // 2, height // 2 - py - 1
