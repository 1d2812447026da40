"""Image output: tone mapping and file writers.

Components:
    tonemap: Gamma 2 correction and rounding to 8 bits
    ppm: Plain-text P3 writer
    export: Suffix-based image saving via Pillow
"""

from .export import save_image, save_png
from .ppm import format_ppm, write_ppm
from .tonemap import gamma_correct, to_rgb8, tone_map

__all__ = [
    "gamma_correct",
    "to_rgb8",
    "tone_map",
    "format_ppm",
    "write_ppm",
    "save_png",
    "save_image",
]
