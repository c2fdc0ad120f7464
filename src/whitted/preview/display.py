"""Matplotlib-based preview display for rendered images.

Matplotlib is imported only when a preview is actually shown, so rendering
and export work on machines without a display backend.

Example:
    >>> from src.whitted.preview.display import show_preview
    >>> show_preview(image, title="spheres")
"""

from __future__ import annotations

from typing import Any

import numpy as np
import numpy.typing as npt


def show_preview(
    image: npt.NDArray[np.generic],
    *,
    title: str | None = None,
    block: bool = True,
) -> Any:
    """Display an image in a Matplotlib window.

    Args:
        image: Array of shape (H, W, 3), uint8 or floats in [0, 1].
        title: Optional window/figure title.
        block: Whether to block until the window is closed.

    Returns:
        The Matplotlib figure.
    """
    import matplotlib.pyplot as plt

    if image.dtype != np.uint8:
        image = np.clip(image, 0.0, 1.0)

    height, width = image.shape[:2]
    fig, ax = plt.subplots(figsize=(8, 8 * height / width))
    ax.imshow(image, interpolation="nearest")
    ax.set_axis_off()
    if title:
        ax.set_title(title)
    fig.tight_layout()
    plt.show(block=block)
    return fig
