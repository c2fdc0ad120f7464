"""Preview module for image output.

Components:
    export: PNG export, 8-bit quantization and image comparison
    display: Matplotlib preview window
"""

from .display import show_preview
from .export import compute_rmse, image_to_uint8, load_png, save_png_from_array

__all__ = [
    "save_png_from_array",
    "image_to_uint8",
    "load_png",
    "compute_rmse",
    "show_preview",
]
