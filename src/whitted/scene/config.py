"""Scene description as plain dictionaries.

Scenes can be described with JSON-compatible dictionaries and turned into
Scene/Viewport objects, or exported back. The format:

    {
        "background": [r, g, b] or a color name,
        "shadows": true,
        "viewport": {"position": [x, y, z], "width": 1.0, "height": 1.0,
                     "distance": 1.0},
        "spheres": [
            {"center": [x, y, z], "radius": 1.0, "material": {...}},
            {"transform": [[...4 rows of 4...]], "material": {...}},
        ],
        "lights": [
            {"type": "ambient", "intensity": [r, g, b]},
            {"type": "point", "intensity": [r, g, b], "position": [x, y, z]},
            {"type": "directional", "intensity": [r, g, b],
             "direction": [x, y, z]},
        ],
    }

Material dictionaries accept "color", "ambient", "diffuse", "specular",
"reflectivity" and "surface", which is "matte" or {"shiny": exponent}.
Missing material keys take the Material.default() values.

Example:
    >>> from src.whitted.scene.config import scene_from_dict
    >>> scene, viewport = scene_from_dict({
    ...     "spheres": [{"center": [0, 0, 3], "radius": 1.0}],
    ...     "lights": [{"type": "ambient", "intensity": [0.2, 0.2, 0.2]}],
    ... })
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.whitted.camera.viewport import Viewport
from src.whitted.core.color import BLACK, Color, color_from_spec
from src.whitted.core.matrix import Matrix
from src.whitted.core.vector import Pos3, Vec3
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import Material, Matte, Shiny
from src.whitted.scene.lights import AmbientLight, DirectionalLight, Light, PointLight
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations.
        lights: List of light configurations.
        background: Background color as RGB floats or a color name.
        shadows: Whether lights cast shadows.
        viewport: Optional viewport configuration.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    background: list[float] | str = field(default_factory=lambda: list(BLACK))
    shadows: bool = True
    viewport: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        return cls(
            spheres=list(data.get("spheres", [])),
            lights=list(data.get("lights", [])),
            background=data.get("background", list(BLACK)),
            shadows=bool(data.get("shadows", True)),
            viewport=data.get("viewport"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "background": self.background,
            "shadows": self.shadows,
            "spheres": self.spheres,
            "lights": self.lights,
        }
        if self.viewport is not None:
            data["viewport"] = self.viewport
        return data

    def build(self) -> tuple[Scene, Viewport]:
        """Create the Scene and Viewport this configuration describes.

        Raises:
            ValueError: If an entry is malformed (unknown light type, missing
                geometry, invalid material values, singular transform).
        """
        spheres = [_sphere_from_dict(entry) for entry in self.spheres]
        lights = [_light_from_dict(entry) for entry in self.lights]
        scene = Scene(
            spheres=spheres,
            lights=lights,
            background=color_from_spec(self.background),
            shadows=self.shadows,
        )
        viewport = _viewport_from_dict(self.viewport or {})
        logger.debug(
            "Built scene with %d spheres and %d lights", len(spheres), len(lights)
        )
        return scene, viewport


# =============================================================================
# Parsing helpers
# =============================================================================


def _triple(value: Any, what: str) -> tuple[float, float, float]:
    try:
        x, y, z = (float(v) for v in value)
    except (TypeError, ValueError):
        raise ValueError(f"{what} must be three numbers, got {value!r}") from None
    return x, y, z


def _material_from_dict(data: dict[str, Any] | None) -> Material:
    if not data:
        return Material.default()

    surface_spec = data.get("surface", {"shiny": 200.0})
    if surface_spec == "matte":
        surface: Matte | Shiny = Matte()
    elif isinstance(surface_spec, dict) and "shiny" in surface_spec:
        surface = Shiny(float(surface_spec["shiny"]))
    else:
        raise ValueError(f"Unknown surface: {surface_spec!r}")

    default = Material.default()
    return Material(
        color=color_from_spec(data.get("color", default.color)),
        ambient=float(data.get("ambient", default.ambient)),
        diffuse=float(data.get("diffuse", default.diffuse)),
        specular=float(data.get("specular", default.specular)),
        surface=surface,
        reflectivity=float(data.get("reflectivity", default.reflectivity)),
    )


def _sphere_from_dict(data: dict[str, Any]) -> Sphere:
    material = _material_from_dict(data.get("material"))
    if "transform" in data:
        return Sphere(Matrix(data["transform"]), material)
    if "center" in data and "radius" in data:
        center = Pos3(*_triple(data["center"], "Sphere center"))
        return Sphere.from_center(center, float(data["radius"]), material)
    raise ValueError(
        f"Sphere needs either 'transform' or 'center' and 'radius': {data!r}"
    )


def _light_from_dict(data: dict[str, Any]) -> Light:
    light_type = data.get("type")
    intensity = color_from_spec(data.get("intensity", [1.0, 1.0, 1.0]))
    if light_type == "ambient":
        return AmbientLight(intensity)
    if light_type == "point":
        position = _triple(data.get("position"), "Point light position")
        return PointLight(intensity, Pos3(*position))
    if light_type == "directional":
        direction = _triple(data.get("direction"), "Directional light direction")
        return DirectionalLight(intensity, Vec3(*direction))
    raise ValueError(f"Unknown light type: {light_type!r}")


def _viewport_from_dict(data: dict[str, Any]) -> Viewport:
    position = _triple(data.get("position", [0.0, 0.0, 0.0]), "Viewport position")
    return Viewport(
        position=Pos3(*position),
        width=float(data.get("width", 1.0)),
        height=float(data.get("height", 1.0)),
        distance=float(data.get("distance", 1.0)),
    )


# =============================================================================
# Export helpers
# =============================================================================


def _material_to_dict(material: Material) -> dict[str, Any]:
    match material.surface:
        case Shiny(exponent=exponent):
            surface: str | dict[str, float] = {"shiny": exponent}
        case _:
            surface = "matte"
    return {
        "color": list(material.color),
        "ambient": material.ambient,
        "diffuse": material.diffuse,
        "specular": material.specular,
        "surface": surface,
        "reflectivity": material.reflectivity,
    }


def _light_to_dict(light: Light) -> dict[str, Any]:
    match light:
        case AmbientLight(intensity=intensity):
            return {"type": "ambient", "intensity": list(intensity)}
        case PointLight(intensity=intensity, position=position):
            return {
                "type": "point",
                "intensity": list(intensity),
                "position": list(position),
            }
        case DirectionalLight(intensity=intensity, direction=direction):
            return {
                "type": "directional",
                "intensity": list(intensity),
                "direction": list(direction),
            }
    raise TypeError(f"Unknown light kind: {light!r}")


def scene_to_config(scene: Scene, viewport: Viewport | None = None) -> SceneConfig:
    """Describe a scene (and optionally a viewport) as a SceneConfig.

    Spheres are always exported with their full transform.
    """
    viewport_data = None
    if viewport is not None:
        viewport_data = {
            "position": list(viewport.position),
            "width": viewport.width,
            "height": viewport.height,
            "distance": viewport.distance,
        }
    return SceneConfig(
        spheres=[
            {
                "transform": [list(row) for row in sphere.transform.rows],
                "material": _material_to_dict(sphere.material),
            }
            for sphere in scene.spheres
        ],
        lights=[_light_to_dict(light) for light in scene.lights],
        background=list(scene.background),
        shadows=scene.shadows,
        viewport=viewport_data,
    )


def scene_to_dict(scene: Scene, viewport: Viewport | None = None) -> dict[str, Any]:
    """Export a scene to a dictionary (for JSON serialization)."""
    return scene_to_config(scene, viewport).to_dict()


def scene_from_dict(data: dict[str, Any]) -> tuple[Scene, Viewport]:
    """Load a scene and its viewport from a dictionary.

    A missing "viewport" entry yields the default Viewport().
    """
    return SceneConfig.from_dict(data).build()


def load_scene_file(path: str | Path) -> tuple[Scene, Viewport]:
    """Read a JSON scene description from disk."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")
    logger.debug("Loaded scene description from %s", path)
    return scene_from_dict(data)


def save_scene_file(
    path: str | Path, scene: Scene, viewport: Viewport | None = None
) -> None:
    """Write a scene description to disk as JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene, viewport), f, indent=2)
