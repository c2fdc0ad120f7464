"""Ready-made demo scenes.

Each preset returns the Scene together with the Viewport it is meant to be
seen through.

Presets:
    spheres: Three colored spheres on a large yellow ground sphere, lit by
        ambient, point and directional lights, with mirror reflections.
    single: One magenta unit sphere at the origin seen from z = -5, lit by a
        single white point light.
"""

from __future__ import annotations

from typing import Callable

from src.whitted.camera.viewport import Viewport
from src.whitted.core.color import BLACK, BLUE, GREEN, RED, WHITE, YELLOW, Color
from src.whitted.core.vector import Pos3, Vec3
from src.whitted.geometry.sphere import Sphere
from src.whitted.materials.material import Material, Shiny
from src.whitted.scene.lights import AmbientLight, DirectionalLight, PointLight
from src.whitted.scene.scene import Scene


def create_spheres_scene() -> tuple[Scene, Viewport]:
    """Three spheres on a ground sphere, seen from the origin."""
    spheres = [
        Sphere.from_center(
            Pos3(0.0, -1.0, 3.0),
            1.0,
            Material(color=RED, surface=Shiny(500.0), reflectivity=0.2),
        ),
        Sphere.from_center(
            Pos3(2.0, 0.0, 4.0),
            1.0,
            Material(color=BLUE, surface=Shiny(500.0), reflectivity=0.3),
        ),
        Sphere.from_center(
            Pos3(-2.0, 0.0, 4.0),
            1.0,
            Material(color=GREEN, surface=Shiny(10.0), reflectivity=0.4),
        ),
        Sphere.from_center(
            Pos3(0.0, -5001.0, 0.0),
            5000.0,
            Material(color=YELLOW, surface=Shiny(1000.0), reflectivity=0.5),
        ),
    ]
    lights = [
        AmbientLight(WHITE * 0.2),
        PointLight(WHITE * 0.6, Pos3(2.0, 1.0, 0.0)),
        DirectionalLight(WHITE * 0.2, Vec3(1.0, 4.0, 4.0)),
    ]
    scene = Scene(spheres=spheres, lights=lights, background=WHITE)
    return scene, Viewport(Pos3.origin(), 1.0, 1.0)


def create_single_sphere_scene() -> tuple[Scene, Viewport]:
    """A single unit sphere in front of a camera at z = -5."""
    material = Material(color=Color(1.0, 0.2, 1.0), surface=Shiny(200.0))
    scene = Scene(
        spheres=[Sphere(material=material)],
        lights=[PointLight(WHITE, Pos3(-10.0, 10.0, -10.0))],
        background=BLACK,
    )
    return scene, Viewport(Pos3(0.0, 0.0, -5.0), 1.0, 1.0)


PRESETS: dict[str, Callable[[], tuple[Scene, Viewport]]] = {
    "spheres": create_spheres_scene,
    "single": create_single_sphere_scene,
}


def get_preset(name: str) -> tuple[Scene, Viewport]:
    """Build a preset scene by name.

    Raises:
        ValueError: If the preset name is unknown.
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset: {name}. Available: {', '.join(sorted(PRESETS))}"
        ) from None
    return factory()
