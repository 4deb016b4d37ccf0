#!/usr/bin/env python3
"""Render the showcase scene.

This script renders the showcase scene (checkered floor, mirror sphere,
glass sphere, cube and a grouped cylinder and cone) either with the serial
reference renderer or with the Taichi parallel kernel, and saves the result
as PNG or PPM depending on the output file's extension.

Usage:
    python -m examples.render_showcase [options]

Options:
    --width WIDTH         Image width in pixels (default: 400)
    --height HEIGHT       Image height in pixels (default: 200)
    --max-depth DEPTH     Reflection/refraction recursion budget (default: 5)
    --parallel            Render with the Taichi kernel
    --output OUTPUT       Output file path, .png or .ppm (default: showcase.png)
    --preview             Show the image in a Matplotlib window when done
    --quiet               Only log warnings and errors

Example:
    python -m examples.render_showcase --width 200 --height 100 --parallel
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

from src.whitted.logging_config import setup_logging

logger = logging.getLogger("src.whitted.examples")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the showcase scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=200,
        help="Image height in pixels (default: 200)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=5,
        help="Reflection/refraction recursion budget (default: 5)",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Render with the Taichi parallel kernel",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="showcase.png",
        help="Output file path, .png or .ppm (default: showcase.png)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the image in a Matplotlib window when done",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args()


def render_showcase(
    width: int = 400,
    height: int = 200,
    max_depth: int = 5,
    parallel: bool = False,
    output_path: str = "showcase.png",
    preview: bool = False,
) -> Path:
    """Render the showcase scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Recursion budget for reflected and refracted rays.
        parallel: Use the Taichi kernel instead of the serial renderer.
        output_path: Output file path; ``.ppm`` writes plain PPM, anything
            else is written as PNG.
        preview: Show the finished image with Matplotlib.

    Returns:
        Path to the saved image file.
    """
    from src.whitted.core.renderer import render, render_parallel
    from src.whitted.preview import save_png, save_ppm, show_preview
    from src.whitted.scene.presets import ShowcaseParams, create_showcase_scene

    world, camera = create_showcase_scene(ShowcaseParams(width=width, height=height))

    if parallel:
        canvas = render_parallel(camera, world, max_depth=max_depth)
    else:
        canvas = render(camera, world, max_depth=max_depth)

    output_file = Path(output_path)
    if output_file.suffix.lower() == ".ppm":
        save_ppm(canvas, output_file)
    else:
        save_png(canvas, output_file)
    logger.info("Saved to: %s", output_file.absolute())

    if preview:
        show_preview(canvas, title=f"Showcase ({width}x{height})")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(level="WARNING" if args.quiet else None)

    if args.parallel:
        ti.init(arch=ti.cpu)

    try:
        render_showcase(
            width=args.width,
            height=args.height,
            max_depth=args.max_depth,
            parallel=args.parallel,
            output_path=args.output,
            preview=args.preview,
        )
        return 0
    except (ValueError, OSError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
