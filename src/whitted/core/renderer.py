"""Render settings and a backend-agnostic renderer.

The Renderer turns a Scene and Viewport into a (height, width, 3) uint8
image using one of two backends:
- "taichi": the data-parallel kernel in core.integrator (requires ti.init)
- "python": the thread-pool driver in core.render

Both backends share the lighting model and produce matching images up to
float32 rounding on the Taichi side.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.renderer import RenderSettings, Renderer
    >>> from src.whitted.scene.presets import create_spheres_scene
    >>>
    >>> scene, viewport = create_spheres_scene()
    >>> renderer = Renderer(RenderSettings(width=320, height=320, depth=3))
    >>> image = renderer.render(scene, viewport)
    >>> image.shape
    (320, 320, 3)
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Literal

import numpy as np
import numpy.typing as npt

from src.whitted.camera.viewport import Viewport
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for backend options
Backend = Literal["taichi", "python"]

BACKENDS: tuple[str, ...] = ("taichi", "python")


@dataclass(frozen=True)
class RenderSettings:
    """Image size, ray bounds and execution options.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        depth: Maximum number of mirror reflection bounces.
        t_min: Exclusive lower bound on primary-ray hits. The default 1.0
            skips everything between the camera and the image plane.
        t_max: Exclusive upper bound on hits.
        backend: "taichi" or "python".
        workers: Thread count for the Python backend; None picks one per CPU.
    """

    width: int = 512
    height: int = 512
    depth: int = 3
    t_min: float = 1.0
    t_max: float = math.inf
    backend: Backend = "taichi"
    workers: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.depth < 0:
            raise ValueError(f"Reflection depth must be non-negative, got {self.depth}")
        if not self.t_min < self.t_max:
            raise ValueError(f"t_min ({self.t_min}) must be below t_max ({self.t_max})")
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown backend: {self.backend}. Available: {', '.join(BACKENDS)}"
            )
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


class Renderer:
    """Renders scenes with the backend chosen in its settings.

    Attributes:
        settings: The render settings.
        last_render_seconds: Wall time of the most recent render, or None.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        self.last_render_seconds: float | None = None

    def render(self, scene: Scene, viewport: Viewport) -> npt.NDArray[np.uint8]:
        """Render a scene to a (height, width, 3) uint8 array, row 0 at the top.

        Raises:
            ValueError: If the settings exceed what the backend supports.
            RuntimeError: If the scene exceeds the Taichi scene capacity.
        """
        settings = self.settings
        logger.debug(
            "Rendering %dx%d, depth %d, backend %s",
            settings.width,
            settings.height,
            settings.depth,
            settings.backend,
        )

        start = time.perf_counter()
        if settings.backend == "taichi":
            # Imported lazily: the integrator allocates Taichi fields on import
            from src.whitted.core.integrator import render_scene

            image = render_scene(
                scene,
                viewport,
                settings.width,
                settings.height,
                settings.depth,
                settings.t_min,
                settings.t_max,
            )
        else:
            from src.whitted.core.render import render_rows

            image = render_rows(scene, viewport, settings)
        self.last_render_seconds = time.perf_counter() - start

        logger.debug("Render finished in %.3f s", self.last_render_seconds)
        return image
