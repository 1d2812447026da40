"""Plain-text PPM (P3) writer.

The file is the header ``P3``, ``<width> <height>``, ``255`` followed by
one ``r g b`` line per pixel, top row first, left to right.
"""

import logging
from os import PathLike
from pathlib import Path

import numpy as np
import numpy.typing as npt

from mcray.errors import ImageWriteError

logger = logging.getLogger(__name__)


def _check_pixels(pixels: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    array = np.asarray(pixels)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an (height, width, 3) image, got shape {array.shape}")
    if array.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {array.dtype}")
    return array


def format_ppm(pixels: npt.NDArray[np.uint8]) -> str:
    """Render 8-bit pixels as P3 text.

    Args:
        pixels: Array of shape (height, width, 3), row 0 at the top.

    Returns:
        The complete file contents.

    Raises:
        ValueError: If the array has the wrong shape or dtype.
    """
    array = _check_pixels(pixels)
    height, width, _ = array.shape
    lines = ["P3", f"{width} {height}", "255"]
    lines.extend(f"{r} {g} {b}" for r, g, b in array.reshape(-1, 3).tolist())
    return "\n".join(lines) + "\n"


def write_ppm(path: str | PathLike[str], pixels: npt.NDArray[np.uint8]) -> Path:
    """Write 8-bit pixels to ``path`` as a P3 PPM file.

    Args:
        path: Destination file; its directory must exist.
        pixels: Array of shape (height, width, 3), row 0 at the top.

    Returns:
        The path written.

    Raises:
        ValueError: If the array has the wrong shape or dtype.
        ImageWriteError: If the file cannot be created or written.
    """
    target = Path(path)
    text = format_ppm(pixels)
    try:
        with target.open("w", encoding="ascii", newline="\n") as handle:
            handle.write(text)
    except OSError as exc:
        raise ImageWriteError(f"Cannot write PPM file {target}: {exc}") from exc
    logger.debug("Wrote %d bytes to %s", len(text), target)
    return target
