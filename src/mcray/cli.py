"""Command-line renderer.

Usage:
    mcray --scene random --samples 100 --output frame.ppm
    python -m mcray --scene showcase --width 400 --height 225 -o showcase.png

Renders a preset scene with the progressive renderer and writes the result.
Progress is logged after every batch.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path

import taichi as ti

from mcray import __version__
from mcray.config import SCENE_NAMES, RenderConfig
from mcray.errors import MCRayError

logger = logging.getLogger(__name__)


def _seed(text: str) -> int:
    """Parse a seed in decimal or 0x-prefixed hexadecimal."""
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    defaults = RenderConfig()
    parser = argparse.ArgumentParser(
        prog="mcray",
        description="Render a sphere scene with Monte Carlo ray tracing",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=defaults.width,
        help=f"Image width in pixels (default: {defaults.width})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=defaults.height,
        help=f"Image height in pixels (default: {defaults.height})",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=defaults.samples,
        help=f"Samples per pixel (default: {defaults.samples})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=defaults.max_depth,
        help=f"Maximum bounces per path (default: {defaults.max_depth})",
    )
    parser.add_argument(
        "--seed",
        type=_seed,
        default=defaults.seed,
        help=f"Random seed, decimal or hex (default: {defaults.seed:#x})",
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_NAMES,
        default=defaults.scene,
        help=f"Scene preset (default: {defaults.scene})",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=defaults.output,
        help=f"Output file; .ppm writes plain PPM, other suffixes go through Pillow "
        f"(default: {defaults.output})",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=defaults.batch_size,
        help=f"Samples per progress update (default: {defaults.batch_size})",
    )
    parser.add_argument(
        "--epsilon",
        dest="t_min",
        type=float,
        default=defaults.t_min,
        help="Ignore hits closer than this to the ray origin (default: 0)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(quiet: bool = False, verbose: bool = False) -> None:
    """Configure the root logger for command-line use."""
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def initialize_taichi() -> None:
    """Initialize Taichi on the CPU backend."""
    ti.init(arch=ti.cpu)


def render_scene(config: RenderConfig) -> Path:
    """Render the configured scene and save it.

    Args:
        config: Validated render settings.

    Returns:
        Path to the saved image file.

    Raises:
        MCRayError: If the geometry is degenerate or the image cannot be
            written.
    """
    # Lazy imports to allow Taichi initialization first
    from mcray.camera.pinhole import setup_camera
    from mcray.core.progressive import ProgressiveRenderer
    from mcray.output.export import save_image
    from mcray.scene.presets import create_scene

    scene, camera = create_scene(config.scene, config.width, config.height, config.seed)
    setup_camera(camera)

    renderer = ProgressiveRenderer(
        config.width,
        config.height,
        seed=config.seed,
        max_depth=config.max_depth,
        t_min=config.t_min,
    )

    logger.info(
        "Rendering %s (%d spheres) at %dx%d, %d samples per pixel",
        config.scene,
        len(scene),
        config.width,
        config.height,
        config.samples,
    )
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        elapsed = time.time() - start_time
        samples_per_sec = current / elapsed if elapsed > 0 else 0.0
        logger.info(
            "Progress: %d/%d samples (%.1f%%) - %.1f spp/s",
            current,
            target,
            100.0 * current / target,
            samples_per_sec,
        )

    renderer.render(
        num_samples=config.samples,
        batch_size=config.batch_size,
        callback=progress_callback,
    )

    output_file = save_image(config.output, renderer.get_image_uint8())
    logger.info("Total time: %.2fs", time.time() - start_time)
    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 on success, 1 if rendering failed.
    """
    args = build_parser().parse_args(argv)
    configure_logging(quiet=args.quiet, verbose=args.verbose)

    try:
        config = RenderConfig.from_namespace(args).validate()
        initialize_taichi()
        render_scene(config)
    except MCRayError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
