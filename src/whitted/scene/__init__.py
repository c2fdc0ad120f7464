"""Scene module for scene description and ray-scene queries.

Components:
    intersection: Intersection records with a total order on t
    lights: Ambient, point and directional lights
    scene: Scene with nearest-hit resolution, shading and ray tracing
    config: Dictionary/JSON scene descriptions
    presets: Demo scenes
    fields: Taichi storage of a scene for the render kernel
"""

from .intersection import Intersection
from .lights import AmbientLight, DirectionalLight, Light, PointLight

# Note: scene, config and presets are NOT imported here to avoid circular
# imports with the geometry package; fields is not imported because it
# allocates Taichi fields. Import them directly, e.g.:
#   from src.whitted.scene.scene import Scene

__all__ = [
    "Intersection",
    "Light",
    "AmbientLight",
    "PointLight",
    "DirectionalLight",
]
