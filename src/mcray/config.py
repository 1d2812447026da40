"""Render settings shared by the command line and library callers."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, fields
from pathlib import Path

from mcray.errors import ConfigurationError

# Largest image the preallocated render target can hold
MAX_DIMENSION = 2048

SCENE_NAMES = ("random", "showcase")


@dataclass
class RenderConfig:
    """Everything needed to render one image.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per pixel.
        max_depth: Bounce budget per path.
        seed: Seed of the scene generator and the per-pixel streams.
        scene: Preset scene name ("random" or "showcase").
        output: Output file; ".ppm" is written as P3 text, anything else
            through Pillow.
        t_min: Smallest accepted hit distance. 0 keeps every hit in front
            of the ray origin.
        batch_size: Samples per pixel between progress reports.
    """

    width: int = 1280
    height: int = 800
    samples: int = 100
    max_depth: int = 50
    seed: int = 0xCAFEF00D
    scene: str = "random"
    output: Path = Path("frame.ppm")
    t_min: float = 0.0
    batch_size: int = 10

    def validate(self) -> RenderConfig:
        """Check every setting, returning self for chaining.

        Raises:
            ConfigurationError: On the first setting out of range.
        """
        if not 2 <= self.width <= MAX_DIMENSION:
            raise ConfigurationError(f"width = {self.width} must be in [2, {MAX_DIMENSION}]")
        if not 2 <= self.height <= MAX_DIMENSION:
            raise ConfigurationError(f"height = {self.height} must be in [2, {MAX_DIMENSION}]")
        if self.samples < 1:
            raise ConfigurationError(f"samples = {self.samples} must be at least 1")
        if self.max_depth < 0:
            raise ConfigurationError(f"max_depth = {self.max_depth} must not be negative")
        if not 0 <= self.seed <= 0xFFFFFFFF:
            raise ConfigurationError(f"seed = {self.seed} must fit in 32 bits")
        if self.scene not in SCENE_NAMES:
            raise ConfigurationError(
                f"scene = {self.scene!r} is not one of {', '.join(SCENE_NAMES)}"
            )
        if not self.t_min >= 0.0:
            raise ConfigurationError(f"t_min = {self.t_min} must not be negative")
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size = {self.batch_size} must be at least 1")
        return self

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> RenderConfig:
        """Build a config from parsed arguments, ignoring unknown names.

        Attributes that are missing or None keep their defaults.
        """
        values = {}
        for field in fields(cls):
            value = getattr(args, field.name, None)
            if value is not None:
                values[field.name] = value
        if "output" in values:
            values["output"] = Path(values["output"])
        return cls(**values)
