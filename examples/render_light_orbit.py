#!/usr/bin/env python3
"""Render an image sequence of the demo scene with the light orbiting it.

Frame i places the light at (5 cos a, 5, 5 sin a) with a = 5 * i degrees, so
the default 144 frames are two full turns. Frames are written as
img0000.ppm, img0001.ppm, ... into the output directory.

Usage:
    python -m examples.render_light_orbit [options]

Options:
    --frames FRAMES     Number of frames (default: 144)
    --size SIZE         Image width and height in pixels (default: 512)
    --depth DEPTH       Mirror bounces after the primary hit (default: 1)
    --output-dir DIR    Output directory (default: output)
    --extension EXT     Frame file extension (default: .ppm)
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python -m examples.render_light_orbit --frames 72 --size 256
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene with an orbiting light.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=144,
        help="Number of frames (default: 144)",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=512,
        help="Image width and height in pixels (default: 512)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=1,
        help="Mirror bounces after the primary hit (default: 1)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Output directory (default: output)",
    )
    parser.add_argument(
        "--extension",
        type=str,
        default=".ppm",
        help="Frame file extension (default: .ppm)",
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


def render_light_orbit(
    num_frames: int = 144,
    size: int = 512,
    max_depth: int = 1,
    output_dir: str = "output",
    extension: str = ".ppm",
    quiet: bool = False,
) -> list[Path]:
    """Render the orbit sequence.

    Args:
        num_frames: Number of frames to render.
        size: Image width and height in pixels.
        max_depth: Number of mirror bounces after the primary hit.
        output_dir: Directory receiving the frames.
        extension: File extension selecting the output format.
        quiet: If True, suppress progress output.

    Returns:
        Paths of the written frames.
    """
    # Lazy imports to allow Taichi initialization first
    from phongrt.core.renderer import Renderer
    from phongrt.scene.demo import create_basic_scene, orbit_light_position

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    renderer = Renderer(size, size, max_depth=max_depth)
    written: list[Path] = []
    start_time = time.time()

    for frame in range(num_frames):
        scene, camera = create_basic_scene(orbit_light_position(frame))
        renderer.render(scene, camera)

        output_file = out_dir / f"img{frame:04d}{extension}"
        renderer.save_image(str(output_file))
        written.append(output_file)

        if not quiet:
            print(f"\r  Frame {frame + 1}/{num_frames}", end="", flush=True)

    if not quiet:
        print()
        print(f"Saved {len(written)} frames to: {out_dir.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return written


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
        render_light_orbit(
            num_frames=args.frames,
            size=args.size,
            max_depth=args.depth,
            output_dir=args.output_dir,
            extension=args.extension,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
