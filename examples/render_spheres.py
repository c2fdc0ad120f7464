#!/usr/bin/env python3
"""Render a demo or JSON-described scene with the Whitted ray tracer.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH           Image width in pixels (default: 512)
    --height HEIGHT         Image height in pixels (default: 512)
    --depth DEPTH           Maximum reflection bounces (default: 3)
    --backend {taichi,python}
                            Render backend (default: taichi)
    --arch {cpu,gpu}        Taichi architecture (default: gpu, falls back to cpu)
    --workers N             Worker threads for the python backend
    --scene PATH            JSON scene description (overrides --preset)
    --preset {spheres,single}
                            Built-in scene (default: spheres)
    --output OUTPUT         Output file path (default: spheres.png)
    --show                  Open a Matplotlib preview after rendering
    --quiet                 Suppress progress output
    --verbose               Enable debug logging

Example:
    python -m examples.render_spheres --width 256 --height 256 --backend python
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=3,
        help="Maximum reflection bounces (default: 3)",
    )
    parser.add_argument(
        "--backend",
        choices=["taichi", "python"],
        default="taichi",
        help="Render backend (default: taichi)",
    )
    parser.add_argument(
        "--arch",
        choices=["cpu", "gpu"],
        default="gpu",
        help="Taichi architecture; gpu falls back to cpu (default: gpu)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for the python backend (default: one per CPU)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene description; overrides --preset",
    )
    parser.add_argument(
        "--preset",
        choices=["spheres", "single"],
        default="spheres",
        help="Built-in scene (default: spheres)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Open a Matplotlib preview after rendering",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi, falling back to the CPU if no GPU is available."""
    if arch == "cpu":
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")
        return

    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")


def render_to_file(
    width: int = 512,
    height: int = 512,
    depth: int = 3,
    backend: str = "taichi",
    workers: int | None = None,
    scene_path: str | None = None,
    preset: str = "spheres",
    output_path: str = "spheres.png",
    show: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it as a PNG.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        depth: Maximum reflection bounces.
        backend: "taichi" or "python".
        workers: Thread count for the python backend.
        scene_path: Optional JSON scene description.
        preset: Built-in scene used when no scene_path is given.
        output_path: Output file path (PNG).
        show: Open a preview window after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.whitted.core.renderer import RenderSettings, Renderer
    from src.whitted.preview.export import save_png_from_array
    from src.whitted.scene.config import load_scene_file
    from src.whitted.scene.presets import get_preset

    if scene_path is not None:
        scene, viewport = load_scene_file(scene_path)
        name = Path(scene_path).stem
    else:
        scene, viewport = get_preset(preset)
        name = preset

    if not quiet:
        print(
            f"Rendering '{name}' ({width}x{height}, depth {depth}, "
            f"{len(scene.spheres)} spheres, {len(scene.lights)} lights) "
            f"with the {backend} backend..."
        )

    settings = RenderSettings(
        width=width,
        height=height,
        depth=depth,
        backend=backend,
        workers=workers,
    )
    renderer = Renderer(settings)
    image = renderer.render(scene, viewport)

    output_file = Path(output_path)
    save_png_from_array(image, output_file)

    if not quiet:
        print(f"Time to trace rays: {renderer.last_render_seconds:.2f}s")
        print(f"Saved to: {output_file.absolute()}")

    if show:
        from src.whitted.preview.display import show_preview

        show_preview(image, title=name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.backend == "taichi":
        init_taichi(args.arch, quiet=args.quiet)

    try:
        render_to_file(
            width=args.width,
            height=args.height,
            depth=args.depth,
            backend=args.backend,
            workers=args.workers,
            scene_path=args.scene,
            preset=args.preset,
            output_path=args.output,
            show=args.show,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
