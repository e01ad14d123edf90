#!/usr/bin/env python3
"""Render the demo scene (or a scene loaded from JSON) to an image file.

The default scene is two coloured spheres over a reflective green floor,
lit by one point light at (0, 5, 4). The radiance range of the whole image is
stretched to [0, 255] before quantization, rows are flipped so the picture is
upright, and the result is written in the format chosen by the output file's
extension.

Usage:
    python -m examples.render_basic_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 512)
    --height HEIGHT     Image height in pixels (default: 512)
    --depth DEPTH       Mirror bounces after the primary hit (default: 1)
    --output OUTPUT     Output file path: .ppm, .pgm, .pbm or .png (default: img.ppm)
    --scene SCENE       JSON scene file in SceneManager.to_dict() format
    --tone-map METHOD   none, scale, reinhard or exposure (default: scale)
    --gamma GAMMA       Gamma correction (default: 1.0)
    --show              Open a Matplotlib preview after saving
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python -m examples.render_basic_scene --width 256 --height 256 --output demo.png
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene.",
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
        default=1,
        help="Mirror bounces after the primary hit (default: 1)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="img.ppm",
        help="Output file path (default: img.ppm)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--tone-map",
        choices=["none", "scale", "reinhard", "exposure"],
        default="scale",
        help="Tone mapping method (default: scale)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma correction (default: 1.0)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Open a Matplotlib preview after saving",
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
    return parser.parse_args()


def render_basic_scene(
    width: int = 512,
    height: int = 512,
    max_depth: int = 1,
    output_path: str = "img.ppm",
    scene_path: str | None = None,
    tone_map: str = "scale",
    gamma: float = 1.0,
    show: bool = False,
    quiet: bool = False,
) -> Path:
    """Render the demo scene, or a JSON scene, and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Number of mirror bounces after the primary hit.
        output_path: Output file path.
        scene_path: Optional JSON scene file; its surfaces and lights replace
            the demo scene, the camera stays the default one.
        tone_map: Tone mapping method.
        gamma: Gamma correction value.
        show: If True, display the render in a Matplotlib window.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from phongrt.core.renderer import Renderer
    from phongrt.scene.demo import create_basic_scene

    scene, camera = create_basic_scene()

    if scene_path is not None:
        with open(scene_path) as f:
            scene.from_dict(json.load(f))
        if not quiet:
            print(f"Loaded scene from {scene_path}")

    if not quiet:
        print(
            f"Rendering {scene.get_surface_count()} surfaces, "
            f"{scene.get_light_count()} lights ({width}x{height}, depth {max_depth})..."
        )

    start_time = time.time()

    renderer = Renderer(width, height, max_depth=max_depth)
    renderer.render(scene, camera)

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    renderer.save_image(str(output_file), tone_map=tone_map, gamma=gamma)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s ({renderer.trace_count} scene traces)")

    if show:
        from phongrt.preview.display import show_preview

        show_preview(renderer, tone_map=tone_map, gamma=gamma)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_basic_scene(
            width=args.width,
            height=args.height,
            max_depth=args.depth,
            output_path=args.output,
            scene_path=args.scene,
            tone_map=args.tone_map,
            gamma=args.gamma,
            show=args.show,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
