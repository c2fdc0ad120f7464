"""Light sources.

Lights form a closed set of variants that the shading code dispatches on
with pattern matching. Every light contributes an ambient term; point and
directional lights also contribute diffuse and specular terms when they are
not shadowed.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.color import Color
from src.whitted.core.vector import Pos3, Vec3


@dataclass(frozen=True, slots=True)
class AmbientLight:
    """Uniform light that reaches every surface."""

    intensity: Color


@dataclass(frozen=True, slots=True)
class PointLight:
    """Light emitted from a single position.

    Attributes:
        intensity: Light color and strength.
        position: World-space position of the light.
    """

    intensity: Color
    position: Pos3


@dataclass(frozen=True, slots=True)
class DirectionalLight:
    """Light arriving from infinitely far away along a fixed direction.

    Attributes:
        intensity: Light color and strength.
        direction: Direction from the surface toward the light. Normalized
            when shading.
    """

    intensity: Color
    direction: Vec3


Light = AmbientLight | PointLight | DirectionalLight
