"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_kernel_scene():
    """Clear the Taichi-side scene and render target around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the fields are allocated after ti.init()
    from src.whitted.core.integrator import reset_render_target
    from src.whitted.scene.fields import clear_scene

    def _clear_all():
        clear_scene()
        reset_render_target()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def lighting_scene():
    """Factory for a scene with one white point light and no spheres."""
    from src.whitted.core.color import WHITE
    from src.whitted.scene.lights import PointLight
    from src.whitted.scene.scene import Scene

    def _make(light_position):
        return Scene(lights=[PointLight(WHITE, light_position)])

    return _make
