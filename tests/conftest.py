"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_scene_state():
    """Clear sphere storage and the degenerate-vector counter around each test."""
    # Import here so Taichi is initialized before fields are declared
    from mcray.core.ray import clear_degenerate_count
    from mcray.scene.intersection import clear_scene

    clear_scene()
    clear_degenerate_count()
    yield
    clear_scene()
    clear_degenerate_count()
