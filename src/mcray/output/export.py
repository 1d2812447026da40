"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG and anything else Pillow can encode from 8-bit RGB

Example:
    >>> from mcray.output.export import save_image
    >>> from mcray.output.tonemap import tone_map
    >>>
    >>> save_image("frame.ppm", tone_map(renderer.get_image_numpy()))
    >>> save_image("frame.png", tone_map(renderer.get_image_numpy()))
"""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from mcray.errors import ImageWriteError
from mcray.output.ppm import write_ppm

logger = logging.getLogger(__name__)


def save_png(path: str | PathLike[str], pixels: npt.NDArray[np.uint8]) -> Path:
    """Save 8-bit pixels with Pillow.

    The format follows the file suffix (".png" for PNG).

    Args:
        path: Output file path.
        pixels: Array of shape (height, width, 3) with dtype uint8.

    Returns:
        The path written.

    Raises:
        ImageWriteError: If the file cannot be created or written, or
            Pillow does not know the suffix.
    """
    target = Path(path)
    pil_image = PILImage.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    try:
        pil_image.save(target)
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"Cannot write image file {target}: {exc}") from exc
    return target


def save_image(path: str | PathLike[str], pixels: npt.NDArray[np.uint8]) -> Path:
    """Save 8-bit pixels, choosing the writer from the file suffix.

    ".ppm" goes to the P3 text writer; every other suffix goes to Pillow.

    Returns:
        The path written.

    Raises:
        ImageWriteError: If the file cannot be created or written.
    """
    target = Path(path)
    if target.suffix.lower() == ".ppm":
        write_ppm(target, pixels)
    else:
        save_png(target, pixels)
    logger.info("Saved image to %s", target)
    return target

