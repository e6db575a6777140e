#!/usr/bin/env python3
"""Render a preset scene to a PNG file.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene NAME        cornell, default or prism (default: cornell)
    --width WIDTH       Image width in pixels (default: 320)
    --height HEIGHT     Image height in pixels (default: 240)
    --samples SAMPLES   Samples per pixel (default: 1)
    --frames FRAMES     Progressive frames to accumulate (default: 1)
    --depth DEPTH       Maximum ray bounces (default: 30)
    --workers WORKERS   Worker threads (default: CPU count)
    --spectrum-samples  Wavelength samples (default: 32)
    --output OUTPUT     Output file path (default: <scene>.png)
    --quiet             Suppress progress output

Example:
    python examples/render_scene.py --scene prism --width 200 --height 150
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from spectracer.core.config import RenderConfig, default_worker_count
from spectracer.core.errors import SpectracerError
from spectracer.core.progressive import ProgressiveRenderer
from spectracer.core.spectrum import SpectralGrid
from spectracer.preview.export import save_png
from spectracer.scene.presets import (
    create_cornell_box_scene,
    create_default_scene,
    create_prism_scene,
)

logger = logging.getLogger("render_scene")

SCENES = {
    "cornell": create_cornell_box_scene,
    "default": create_default_scene,
    "prism": create_prism_scene,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset scene with the spectral ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--scene", choices=sorted(SCENES), default="cornell")
    parser.add_argument("--width", type=int, default=320, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=240, help="Image height in pixels")
    parser.add_argument("--samples", type=int, default=1, help="Samples per pixel")
    parser.add_argument("--frames", type=int, default=1, help="Progressive frames")
    parser.add_argument("--depth", type=int, default=30, help="Maximum ray bounces")
    parser.add_argument(
        "--workers", type=int, default=default_worker_count(), help="Worker threads"
    )
    parser.add_argument(
        "--spectrum-samples", type=int, default=32, help="Wavelength samples per spectrum"
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--output", type=str, default=None, help="Output PNG path")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def render_scene(args: argparse.Namespace) -> Path:
    """Render the selected scene and save it.

    Returns:
        Path to the saved image file.
    """
    grid = SpectralGrid(samples=args.spectrum_samples)
    scene = SCENES[args.scene](grid)
    config = RenderConfig(
        width=args.width,
        height=args.height,
        workers=args.workers,
        max_depth=args.depth,
        samples_per_pixel=args.samples,
        seed=args.seed,
        frames=args.frames,
    )

    renderer = ProgressiveRenderer(scene, config)
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        elapsed = time.time() - start_time
        logger.info("Frame %d/%d done (%.1fs)", current, target, elapsed)

    image = renderer.render(callback=progress_callback)

    output_file = Path(args.output or f"{args.scene}.png")
    save_png(image, output_file)
    logger.info("Saved to %s in %.2fs", output_file.absolute(), time.time() - start_time)
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        render_scene(args)
    except SpectracerError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
