"""Materials module for surface appearance.

Materials describe how a surface responds to light in the local illumination
model (ambient, diffuse and specular terms) and how much of a mirror
reflection it mixes in.

Components:
    material: Material, and the Matte / Shiny surface kinds
"""

from .material import Material, Matte, Shiny, Surface, matte, shiny

__all__ = [
    "Material",
    "Matte",
    "Shiny",
    "Surface",
    "matte",
    "shiny",
]
