"""Image export utilities for rendered images.

Rendered colors are display values in [0, 1] (the lighting model works
directly in display space), so export only quantizes to 8 bits. An optional
gamma can still be applied for viewers that expect encoded output.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.whitted.preview.export import save_png_from_array
    >>> from src.whitted.core.renderer import Renderer
    >>>
    >>> image = Renderer().render(scene, viewport)
    >>> save_png_from_array(image, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def image_to_uint8(
    image: npt.NDArray[np.floating[npt.NBitBase]],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8 for display/export.

    Values are clamped first, NaN maps to 0, and rounding is to nearest, the
    same quantization Color.to_rgb8 uses.

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma encoding exponent; 1.0 leaves values unchanged.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    result = np.nan_to_num(image.astype(np.float64), nan=0.0)
    result = np.clip(result, 0.0, 1.0)
    if gamma != 1.0:
        result = np.power(result, 1.0 / gamma)
    return np.floor(result * 255.0 + 0.5).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.generic],
    filepath: str | Path,
    *,
    gamma: float = 1.0,
) -> None:
    """Save an image array as a PNG file.

    Args:
        image: Array of shape (H, W, 3), either uint8 or floats in [0, 1].
        filepath: Output file path (should end in .png).
        gamma: Gamma encoding exponent applied to float input.

    Raises:
        ValueError: If the array is not an RGB image.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    if image.dtype == np.uint8:
        image_uint8 = image
    else:
        image_uint8 = image_to_uint8(image, gamma=gamma)

    # Save using Pillow
    pil_image = PILImage.fromarray(np.ascontiguousarray(image_uint8))
    pil_image.save(filepath)
    logger.debug("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Load a PNG as an (H, W, 3) uint8 array."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8).copy()


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar), in the units of the inputs.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
