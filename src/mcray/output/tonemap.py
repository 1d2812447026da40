"""Gamma correction and 8-bit quantisation of linear images.

The renderer produces linear colour in [0, 1]. Output files store
``floor(255 * sqrt(v) + 0.5)`` per channel: square-root gamma (gamma 2)
followed by rounding to the nearest of 256 levels.

Example:
    >>> import numpy as np
    >>> from mcray.output.tonemap import tone_map
    >>> tone_map(np.full((1, 1, 3), 0.25, dtype=np.float32))
    array([[[128, 128, 128]]], dtype=uint8)
"""

import numpy as np
import numpy.typing as npt


def gamma_correct(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Apply gamma 2 (per-channel square root).

    Negative values (numerical noise) are clipped to 0 first.

    Args:
        image: Linear image array of any shape.

    Returns:
        Gamma-corrected float32 array of the same shape.
    """
    linear = np.clip(np.asarray(image, dtype=np.float32), 0.0, None)
    return np.sqrt(linear)


def to_rgb8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Quantise [0, 1] values to 8 bits, rounding half up.

    Args:
        image: Display-ready image array of any shape.

    Returns:
        uint8 array of the same shape; values outside [0, 1] saturate.
    """
    scaled = np.floor(255.0 * np.asarray(image, dtype=np.float64) + 0.5)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def tone_map(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear image to 8-bit display values."""
    return to_rgb8(gamma_correct(image))
