"""Tests for the render_spheres command-line script."""

import json

import numpy as np

from examples.render_spheres import main, parse_args
from src.whitted.preview.export import load_png


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert (args.width, args.height, args.depth) == (512, 512, 3)
        assert args.backend == "taichi"
        assert args.preset == "spheres"
        assert args.scene is None

    def test_overrides(self):
        args = parse_args(["--width", "64", "--backend", "python", "--preset", "single"])
        assert args.width == 64
        assert args.backend == "python"
        assert args.preset == "single"


class TestMain:
    """End-to-end runs of the script on the Python backend."""

    def test_renders_preset(self, tmp_path, capsys):
        output = tmp_path / "out.png"
        code = main(
            ["--width", "16", "--height", "12", "--backend", "python", "--output", str(output)]
        )
        assert code == 0
        assert load_png(output).shape == (12, 16, 3)
        assert "Time to trace rays" in capsys.readouterr().out

    def test_renders_scene_file(self, tmp_path):
        scene_path = tmp_path / "scene.json"
        scene_path.write_text(
            json.dumps(
                {
                    "background": [0, 0, 1],
                    "lights": [{"type": "ambient", "intensity": [1, 1, 1]}],
                }
            ),
            encoding="utf-8",
        )
        output = tmp_path / "blue.png"
        code = main(
            [
                "--width", "4", "--height", "4", "--backend", "python",
                "--scene", str(scene_path), "--output", str(output), "--quiet",
            ]
        )
        assert code == 0
        assert (load_png(output) == np.array([0, 0, 255], dtype=np.uint8)).all()

    def test_bad_scene_file_reports_error(self, tmp_path, capsys):
        scene_path = tmp_path / "bad.json"
        scene_path.write_text('{"lights": [{"type": "spot"}]}', encoding="utf-8")
        code = main(
            ["--backend", "python", "--scene", str(scene_path), "--output", str(tmp_path / "x.png")]
        )
        assert code == 1
        assert "Unknown light type" in capsys.readouterr().err
