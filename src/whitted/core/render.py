"""Pure-Python render driver partitioned by rows.

The image is split into contiguous row bands and each band is traced on a
thread pool worker. Every worker writes only its own slice of the shared
NumPy framebuffer and reads only the immutable Scene and Viewport, so no
locking is needed. An exception raised while tracing a band propagates out
of render_rows.

Example:
    >>> from src.whitted.core.render import render_rows
    >>> from src.whitted.core.renderer import RenderSettings
    >>> from src.whitted.scene.presets import create_single_sphere_scene
    >>> scene, viewport = create_single_sphere_scene()
    >>> image = render_rows(scene, viewport, RenderSettings(64, 64, backend="python"))
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import numpy.typing as npt

from src.whitted.camera.viewport import Viewport, pixel_to_canvas
from src.whitted.core.renderer import RenderSettings
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)


def row_bands(height: int, bands: int) -> list[tuple[int, int]]:
    """Split ``range(height)`` into at most ``bands`` contiguous [start, stop) bands.

    Bands differ in size by at most one row and together cover every row
    exactly once.
    """
    bands = max(1, min(bands, height))
    base, extra = divmod(height, bands)
    result = []
    start = 0
    for index in range(bands):
        stop = start + base + (1 if index < extra else 0)
        result.append((start, stop))
        start = stop
    return result


def render_band(
    scene: Scene,
    viewport: Viewport,
    settings: RenderSettings,
    out: npt.NDArray[np.uint8],
    start: int,
    stop: int,
) -> None:
    """Trace rows [start, stop) into ``out``.

    Args:
        scene: Scene to trace.
        viewport: Camera producing the primary rays.
        settings: Image size, depth and ray bounds.
        out: Framebuffer of shape (height, width, 3). Only rows
            [start, stop) are written.
        start: First row (0 = top).
        stop: One past the last row.
    """
    width, height = settings.width, settings.height
    for py in range(start, stop):
        for px in range(width):
            x, y = pixel_to_canvas(px, py, width, height)
            ray = viewport.ray_from_coord(x, y, width, height)
            color = scene.trace_ray(ray, settings.t_min, settings.t_max, settings.depth)
            out[py, px] = color.to_rgb8()


def render_rows(
    scene: Scene,
    viewport: Viewport,
    settings: RenderSettings,
) -> npt.NDArray[np.uint8]:
    """Render a scene on a thread pool.

    Returns:
        A (height, width, 3) uint8 array, row 0 at the top of the image.
    """
    workers = settings.workers or os.cpu_count() or 1
    image = np.zeros((settings.height, settings.width, 3), dtype=np.uint8)
    bands = row_bands(settings.height, workers * 4)
    logger.debug("Tracing %d row bands on %d workers", len(bands), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(render_band, scene, viewport, settings, image, start, stop)
            for start, stop in bands
        ]
        for future in futures:
            future.result()

    return image
