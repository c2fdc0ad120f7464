"""Phong-style surface materials.

A Material bundles a base color with the ambient, diffuse and specular
coefficients of the local illumination model, a surface kind and a mirror
reflectivity. The surface kind is a closed variant: a Matte surface has no
specular highlight, a Shiny surface has one whose tightness is set by its
exponent.

Materials are plain frozen data and can be shared freely between spheres.

Example:
    >>> from src.whitted.core.color import RED
    >>> from src.whitted.materials.material import Material, Shiny
    >>> mirror_red = Material(color=RED, surface=Shiny(500.0), reflectivity=0.3)
    >>> mirror_red.shine
    500.0
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from src.whitted.core.color import WHITE, Color


@dataclass(frozen=True, slots=True)
class Matte:
    """A surface without specular highlights."""


@dataclass(frozen=True, slots=True)
class Shiny:
    """A surface with a Phong specular highlight.

    Attributes:
        exponent: Specular exponent; larger values give tighter highlights.
    """

    exponent: float

    def __post_init__(self) -> None:
        if not self.exponent > 0.0:
            raise ValueError(f"Shiny exponent must be positive, got {self.exponent}")


Surface = Matte | Shiny


@dataclass(frozen=True, slots=True)
class Material:
    """Surface appearance used by the lighting model.

    Attributes:
        color: Base color the light intensity is filtered through.
        ambient: Ambient coefficient.
        diffuse: Lambertian diffuse coefficient.
        specular: Specular coefficient (used by Shiny surfaces only).
        surface: Matte() or Shiny(exponent).
        reflectivity: Fraction of the final color taken from the mirror
            reflection, in [0, 1].
    """

    color: Color = WHITE
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    surface: Surface = field(default_factory=lambda: Shiny(200.0))
    reflectivity: float = 0.0

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"Material {name} must be non-negative, got {value}")
        if not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(
                f"Material reflectivity must be in [0, 1], got {self.reflectivity}"
            )
        if not isinstance(self.surface, (Matte, Shiny)):
            raise ValueError(f"Unknown surface kind: {self.surface!r}")

    @classmethod
    def default(cls) -> Material:
        """White, ambient 0.1, diffuse 0.9, specular 0.9, Shiny(200)."""
        return cls()

    @property
    def shine(self) -> float | None:
        """Specular exponent, or None for a matte surface."""
        match self.surface:
            case Shiny(exponent=exponent):
                return exponent
            case _:
                return None

    def with_color(self, color: Color) -> Material:
        return replace(self, color=color)


def matte(color: Color, reflectivity: float = 0.0) -> Material:
    """Build a matte material with the default coefficients."""
    return Material(color=color, surface=Matte(), reflectivity=reflectivity)


def shiny(color: Color, exponent: float, reflectivity: float = 0.0) -> Material:
    """Build a shiny material with the default coefficients."""
    return Material(color=color, surface=Shiny(exponent), reflectivity=reflectivity)
