"""Tests for RenderConfig."""

import argparse
from pathlib import Path

import pytest

from mcray.config import RenderConfig
from mcray.errors import ConfigurationError


class TestDefaults:
    def test_reference_defaults(self):
        config = RenderConfig()
        assert (config.width, config.height) == (1280, 800)
        assert config.samples == 100
        assert config.max_depth == 50
        assert config.seed == 0xCAFEF00D
        assert config.scene == "random"
        assert config.output == Path("frame.ppm")
        assert config.t_min == 0.0
        assert config.batch_size == 10

    def test_defaults_validate(self):
        config = RenderConfig()
        assert config.validate() is config


class TestValidation:
    @pytest.mark.parametrize(
        "changes",
        [
            {"width": 1},
            {"height": 4096},
            {"samples": 0},
            {"max_depth": -1},
            {"seed": -1},
            {"seed": 2**32},
            {"scene": "cornell"},
            {"t_min": -0.001},
            {"t_min": float("nan")},
            {"batch_size": 0},
        ],
    )
    def test_rejects(self, changes):
        with pytest.raises(ConfigurationError):
            RenderConfig(**changes).validate()

    def test_zero_depth_allowed(self):
        RenderConfig(max_depth=0).validate()

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError, match="width"):
            RenderConfig(width=0).validate()


class TestFromNamespace:
    def test_copies_known_fields(self):
        args = argparse.Namespace(
            width=320,
            height=200,
            samples=8,
            seed=5,
            output="out.png",
            quiet=True,
        )
        config = RenderConfig.from_namespace(args)
        assert (config.width, config.height, config.samples, config.seed) == (320, 200, 8, 5)
        assert config.output == Path("out.png")
        # Unset fields keep defaults
        assert config.max_depth == 50

    def test_none_keeps_default(self):
        config = RenderConfig.from_namespace(argparse.Namespace(scene=None))
        assert config.scene == "random"
