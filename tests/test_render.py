"""Unit tests for render settings, the row-band driver and the Renderer."""

import math

import numpy as np
import pytest

from src.whitted.camera.viewport import Viewport
from src.whitted.core.color import BLUE
from src.whitted.core.render import render_band, render_rows, row_bands
from src.whitted.core.renderer import RenderSettings, Renderer
from src.whitted.scene.presets import create_single_sphere_scene, create_spheres_scene
from src.whitted.scene.scene import Scene


class TestRowBands:
    """Tests for splitting rows into bands."""

    @pytest.mark.parametrize("height, bands", [(10, 3), (7, 7), (5, 16), (64, 4), (1, 8)])
    def test_bands_cover_every_row_once(self, height, bands):
        result = row_bands(height, bands)
        rows = [row for start, stop in result for row in range(start, stop)]
        assert rows == list(range(height))

    def test_bands_are_balanced(self):
        sizes = [stop - start for start, stop in row_bands(10, 3)]
        assert sizes == [4, 3, 3]

    def test_never_more_bands_than_rows(self):
        assert len(row_bands(3, 10)) == 3


class TestRenderSettings:
    """Tests for RenderSettings validation."""

    def test_defaults(self):
        settings = RenderSettings()
        assert (settings.width, settings.height, settings.depth) == (512, 512, 3)
        assert settings.t_min == 1.0
        assert settings.t_max == math.inf
        assert settings.backend == "taichi"

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"width": 0}, "dimensions"),
            ({"height": -4}, "dimensions"),
            ({"depth": -1}, "depth"),
            ({"t_min": 5.0, "t_max": 1.0}, "t_min"),
            ({"backend": "cuda"}, "Unknown backend"),
            ({"workers": 0}, "workers"),
        ],
    )
    def test_invalid_settings_raise(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            RenderSettings(**kwargs)


class TestRenderRows:
    """Tests for the thread-pool Python backend."""

    def test_shape_and_dtype(self):
        scene, viewport = create_single_sphere_scene()
        image = render_rows(scene, viewport, RenderSettings(20, 12, backend="python", workers=2))
        assert image.shape == (12, 20, 3)
        assert image.dtype == np.uint8

    def test_empty_scene_is_background(self):
        settings = RenderSettings(6, 4, backend="python", workers=1)
        image = render_rows(Scene(background=BLUE), Viewport(), settings)
        assert (image == np.array([0, 0, 255], dtype=np.uint8)).all()

    def test_sphere_is_centered(self):
        scene, viewport = create_single_sphere_scene()
        image = render_rows(scene, viewport, RenderSettings(16, 16, backend="python"))
        assert image[8, 8].any()
        assert not image[0, 0].any()

    def test_worker_count_does_not_change_image(self):
        scene, viewport = create_spheres_scene()
        one = render_rows(scene, viewport, RenderSettings(24, 24, backend="python", workers=1))
        many = render_rows(scene, viewport, RenderSettings(24, 24, backend="python", workers=5))
        np.testing.assert_array_equal(one, many)

    def test_band_writes_only_its_rows(self):
        scene, viewport = create_spheres_scene()
        settings = RenderSettings(8, 8, backend="python")
        out = np.zeros((8, 8, 3), dtype=np.uint8)
        render_band(scene, viewport, settings, out, 2, 4)
        assert not out[:2].any()
        assert not out[4:].any()
        assert out[2:4].any()

    def test_errors_propagate(self, monkeypatch):
        def broken(self, ray, t_min=0.0, t_max=math.inf, depth=3):
            raise RuntimeError("trace failed")

        monkeypatch.setattr(Scene, "trace_ray", broken)
        scene, viewport = create_single_sphere_scene()
        with pytest.raises(RuntimeError, match="trace failed"):
            render_rows(scene, viewport, RenderSettings(4, 4, backend="python", workers=2))


class TestRenderer:
    """Tests for the backend-dispatching Renderer."""

    def test_python_backend(self):
        scene, viewport = create_single_sphere_scene()
        renderer = Renderer(RenderSettings(10, 8, backend="python", workers=2))
        assert renderer.last_render_seconds is None
        image = renderer.render(scene, viewport)
        assert image.shape == (8, 10, 3)
        assert renderer.last_render_seconds >= 0.0

    def test_taichi_backend(self):
        scene, viewport = create_single_sphere_scene()
        image = Renderer(RenderSettings(10, 8, backend="taichi")).render(scene, viewport)
        assert image.shape == (8, 10, 3)
        assert image.dtype == np.uint8

    def test_taichi_backend_rejects_excessive_depth(self):
        scene, viewport = create_single_sphere_scene()
        renderer = Renderer(RenderSettings(4, 4, depth=100, backend="taichi"))
        with pytest.raises(ValueError, match="depth"):
            renderer.render(scene, viewport)

    def test_python_backend_accepts_any_depth(self):
        scene, viewport = create_single_sphere_scene()
        renderer = Renderer(RenderSettings(4, 4, depth=100, backend="python", workers=1))
        assert renderer.render(scene, viewport).shape == (4, 4, 3)
